"""Video tokens, recordings and the consultation lifecycle around a call."""
from asgiref.sync import async_to_sync

from clinic.services import video
from clinic.tests.fakes import FakeResponse

run = async_to_sync


def test_video_token(backend, remote):
    backend.on('functions', 'generate-video-token', {'token': 'vt-1', 'roomName': 'consult-c-1', 'extra': 1})

    result = run(video.get_video_token)(remote, 'c-1', 'patient-1', 'Ama')

    assert result == {'success': True, 'data': {'token': 'vt-1', 'roomName': 'consult-c-1'}}
    assert backend.calls[0].payload == {'consultationId': 'c-1', 'userId': 'patient-1', 'userName': 'Ama'}


def test_recording_functions(backend, remote):
    backend.on('functions', 'start-recording', {'recordingId': 'r-1'})

    assert run(video.start_recording)(remote, 'c-1') == {'success': True, 'data': {'recordingId': 'r-1'}}
    assert run(video.stop_recording)(remote, 'c-1') == {'success': True, 'data': {}}
    assert [c.action for c in backend.calls] == ['start-recording', 'stop-recording']


def test_consultation_lifecycle(backend, remote):
    run(video.start_consultation)(remote, 'c-1')
    run(video.end_consultation)(remote, 'c-1', 'Stable')
    run(video.end_consultation)(remote, 'c-2')

    started, ended, ended_without_notes = backend.calls_to('consultations', 'update')
    assert started.payload['status'] == 'in_progress' and 'started_at' in started.payload
    assert ended.payload['status'] == 'completed' and ended.payload['notes'] == 'Stable'
    assert ended_without_notes.payload['notes'] is None


def test_prescription_from_consultation(backend, remote):
    meds = [video.Medication(name='Paracetamol', dosage='500mg', frequency='tid', duration='5 days')]

    result = run(video.create_prescription_from_consultation)(remote, 'c-1', 'provider-1', 'patient-1', meds)

    assert result['success'] is True
    row = backend.calls_to('prescriptions', 'insert')[0].payload
    assert row['medications'] == [{'name': 'Paracetamol', 'dosage': '500mg', 'frequency': 'tid', 'duration': '5 days'}]
    assert row['status'] == 'active'


def test_consultation_details(backend, remote):
    backend.on('consultations', 'select', FakeResponse(data={'id': 'c-1', 'status': 'scheduled'}))

    assert run(video.get_consultation_details)(remote, 'c-1') == {
        'success': True, 'data': {'id': 'c-1', 'status': 'scheduled'}}
