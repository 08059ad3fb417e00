"""
File upload and retrieval.  Uploads are multipart; the file body is read
into memory once and handed to the storage service.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated

from clinic.permissions import IsProvider
from clinic.serializers.files import (
    DocumentListQuerySerializer,
    DocumentUploadSerializer,
    FileRefSerializer,
    FileUploadSerializer,
    LabResultUploadSerializer,
)
from clinic.services import storage
from clinic.services.cache import user_profile_key
from clinic.views.base import call_service


def file_input(upload) -> storage.FileInput:
    return storage.FileInput(
        name=upload.name,
        content_type=upload.content_type or 'application/octet-stream',
        content=upload.read(),
    )


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def documents(request):
    if request.method == 'GET':
        q = DocumentListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        return call_service(request, storage.list_documents, request.user.id, q.validated_data.get('documentType'))
    s = DocumentUploadSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return call_service(request, storage.upload_document, request.user.id, file_input(s.validated_data['file']),
                        s.validated_data['documentType'], success_status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def insurance_card(request):
    s = FileUploadSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return call_service(request, storage.upload_insurance_card, request.user.id,
                        file_input(s.validated_data['file']), success_status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsProvider])
@parser_classes([MultiPartParser, FormParser])
def lab_result(request):
    s = LabResultUploadSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    return call_service(request, storage.upload_lab_result, d['labRequestId'], file_input(d['file']),
                        d.get('patientId'), success_status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def profile_image(request):
    s = FileUploadSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return call_service(request, storage.upload_profile_image, request.user.id,
                        file_input(s.validated_data['file']),
                        invalidates=[user_profile_key(request.user.id)],
                        success_status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def delete_file(request):
    s = FileRefSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return call_service(request, storage.delete_file, s.validated_data['bucket'], s.validated_data['path'])


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def file_url(request):
    q = FileRefSerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return call_service(request, storage.get_file_url, q.validated_data['bucket'], q.validated_data['path'])
