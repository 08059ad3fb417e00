"""
Object storage for patient documents, insurance cards, lab results and
profile images.

Uploads land under a path derived from the owner and a millisecond
timestamp; the returned envelope carries the storage path and the public
URL of the object.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.utils import timezone

from clinic.services.envelope import error_message, ok, service_call

logger = logging.getLogger(__name__)

DOCUMENTS_BUCKET = 'documents'
LAB_RESULTS_BUCKET = 'lab-results'
AVATARS_BUCKET = 'avatars'
LAB_RESULT_PENDING = 'pendingReview'


@dataclass
class FileInput:
    name: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


def check_upload(file: FileInput) -> None:
    if not file.name:
        raise ValueError('File name is required')
    if file.size == 0:
        raise ValueError('File is empty')
    if file.size > settings.UPLOAD_MAX_MB * 1024 * 1024:
        raise ValueError(f'File size exceeds maximum of {settings.UPLOAD_MAX_MB}MB')
    if not any(file.content_type.startswith(prefix) for prefix in settings.ALLOWED_UPLOAD_TYPES):
        raise ValueError('Unsupported file type')


def stamp() -> int:
    return int(timezone.now().timestamp() * 1000)


async def put_object(client, bucket: str, path: str, content: bytes, content_type: str, *, upsert: bool = False) -> dict:
    store = client.storage.from_(bucket)
    await store.upload(
        path=path,
        file=content,
        file_options={'content-type': content_type, 'upsert': 'true' if upsert else 'false'},
    )
    url = await store.get_public_url(path)
    return {'path': path, 'url': url}


@service_call
async def upload_document(client, user_id: str, file: FileInput, document_type: str) -> dict:
    check_upload(file)
    path = f'{user_id}/{document_type}/{stamp()}-{file.name}'
    return ok(await put_object(client, DOCUMENTS_BUCKET, path, file.content, file.content_type))


async def upload_insurance_card(client, user_id: str, file: FileInput) -> dict:
    return await upload_document(client, user_id, file, 'insurance-cards')


@service_call
async def upload_lab_result(client, lab_request_id: str, file: FileInput, owner_id: Optional[str] = None) -> dict:
    check_upload(file)
    path = f'lab-results/{lab_request_id}/{stamp()}-{file.name}'
    stored = await put_object(client, LAB_RESULTS_BUCKET, path, file.content, file.content_type)
    try:
        await client.table('lab_results').insert({
            'lab_request_id': lab_request_id,
            'user_id': owner_id,
            'file_path': stored['path'],
            'file_url': stored['url'],
            'status': LAB_RESULT_PENDING,
        }).execute()
    except Exception as e:
        logger.warning("lab result %s stored without metadata row: %s", path, error_message(e))
    return ok(stored)


@service_call
async def upload_profile_image(client, user_id: str, file: FileInput) -> dict:
    check_upload(file)
    path = f'profiles/{user_id}/avatar-{stamp()}.jpg'
    stored = await put_object(client, AVATARS_BUCKET, path, file.content, 'image/jpeg', upsert=True)
    try:
        await client.table('users').update({'avatar_url': stored['url']}).eq('id', user_id).execute()
    except Exception as e:
        logger.warning("avatar for %s uploaded but profile not updated: %s", user_id, error_message(e))
    return ok(stored)


@service_call
async def list_documents(client, user_id: str, document_type: Optional[str] = None) -> dict:
    prefix = f'{user_id}/{document_type}' if document_type else user_id
    files = await client.storage.from_(DOCUMENTS_BUCKET).list(prefix)
    return ok(files)


@service_call
async def delete_file(client, bucket: str, file_path: str) -> dict:
    await client.storage.from_(bucket).remove([file_path])
    return {'success': True}


@service_call
async def get_file_url(client, bucket: str, file_path: str) -> dict:
    url = await client.storage.from_(bucket).get_public_url(file_path)
    return ok(url=url)
