"""File storage: documents, lab results, avatars and bucket listing."""
from asgiref.sync import async_to_sync
from supabase import StorageException

from clinic.services import storage
from clinic.tests.fakes import postgrest_error

run = async_to_sync

PDF = storage.FileInput(name='report.pdf', content_type='application/pdf', content=b'%PDF-1.4 test')


def test_upload_document_path_and_url(backend, remote):
    result = run(storage.upload_document)(remote, 'patient-1', PDF, 'id-cards')

    assert result['success'] is True
    path = result['data']['path']
    assert path.startswith('patient-1/id-cards/') and path.endswith('-report.pdf')
    assert result['data']['url'] == f'https://storage.test/documents/{path}'
    upload = backend.calls_to('storage:documents', 'upload')[0]
    assert upload.payload['options'] == {'content-type': 'application/pdf', 'upsert': 'false'}


def test_insurance_card_goes_to_documents(backend, remote):
    result = run(storage.upload_insurance_card)(remote, 'patient-1', PDF)

    assert '/insurance-cards/' in result['data']['path']


def test_upload_limits(backend, remote, settings):
    settings.UPLOAD_MAX_MB = 1
    big = storage.FileInput(name='scan.png', content_type='image/png', content=b'0' * (1024 * 1024 + 1))
    exe = storage.FileInput(name='tool.exe', content_type='application/x-msdownload', content=b'MZ')
    empty = storage.FileInput(name='empty.pdf', content_type='application/pdf', content=b'')

    assert run(storage.upload_document)(remote, 'p', big, 'scans')['error'] == 'File size exceeds maximum of 1MB'
    assert run(storage.upload_document)(remote, 'p', exe, 'scans')['error'] == 'Unsupported file type'
    assert run(storage.upload_document)(remote, 'p', empty, 'scans')['error'] == 'File is empty'
    assert backend.calls == []


def test_storage_error_message(backend, remote):
    backend.on('storage:documents', 'upload', StorageException({'statusCode': '409', 'error': 'Duplicate',
                                                               'message': 'The resource already exists'}))

    result = run(storage.upload_document)(remote, 'patient-1', PDF, 'id-cards')

    assert result == {'success': False, 'error': 'The resource already exists'}


def test_lab_result_records_pending_review(backend, remote):
    result = run(storage.upload_lab_result)(remote, 'lab-1', PDF, 'patient-1')

    assert result['success'] is True
    row = backend.calls_to('lab_results', 'insert')[0].payload
    assert row['status'] == 'pendingReview'
    assert row['file_path'] == result['data']['path']
    assert row['user_id'] == 'patient-1'


def test_lab_result_metadata_failure_is_tolerated(backend, remote, caplog):
    backend.on('lab_results', 'insert', postgrest_error('relation "lab_results" does not exist', '42P01'))

    result = run(storage.upload_lab_result)(remote, 'lab-1', PDF)

    assert result['success'] is True
    assert 'without metadata row' in caplog.text


def test_profile_image_updates_avatar(backend, remote):
    image = storage.FileInput(name='me.jpg', content_type='image/jpeg', content=b'\xff\xd8\xff')

    result = run(storage.upload_profile_image)(remote, 'patient-1', image)

    assert result['success'] is True
    upload = backend.calls_to('storage:avatars', 'upload')[0]
    assert upload.payload['options']['upsert'] == 'true'
    update = backend.calls_to('users', 'update')[0]
    assert update.payload == {'avatar_url': result['data']['url']}


def test_list_delete_and_url(backend, remote):
    assert run(storage.list_documents)(remote, 'patient-1', 'id-cards') == {'success': True, 'data': []}
    assert backend.calls[0].payload == 'patient-1/id-cards'
    assert run(storage.delete_file)(remote, 'documents', 'patient-1/x.pdf') == {'success': True}
    assert backend.calls_to('storage:documents', 'remove')[0].payload == ['patient-1/x.pdf']
    assert run(storage.get_file_url)(remote, 'avatars', 'a.jpg') == {
        'success': True, 'url': 'https://storage.test/avatars/a.jpg'}
