"""Appointments, consultations, prescriptions and lab requests against the fake backend."""
from asgiref.sync import async_to_sync

from clinic.services import appointments
from clinic.tests.fakes import FakeResponse, postgrest_error

run = async_to_sync


def appointment(kind='consultation'):
    return appointments.AppointmentData(patient_id='patient-1', provider_id='provider-1',
                                        appointment_date='2026-10-21T10:00:00+00:00', appointment_type=kind)


def test_create_appointment_defaults(backend, remote):
    result = run(appointments.create_appointment)(remote, appointment())

    assert result['success'] is True
    row = backend.calls_to('appointments', 'insert')[0].payload
    assert row['status'] == 'scheduled'
    assert row['duration_minutes'] == 30
    assert result['data']['id'] == 'row-1'


def test_create_appointment_unknown_type(backend, remote):
    result = run(appointments.create_appointment)(remote, appointment('house_call'))

    assert result == {'success': False, 'error': 'Invalid appointment type: house_call'}
    assert backend.calls == []


def test_listing_uses_owner_column(backend, remote):
    run(appointments.get_appointments)(remote, 'patient-1', 'patient')
    run(appointments.get_appointments)(remote, 'provider-1', 'provider')

    first, second = backend.calls_to('appointments', 'select')
    assert first.eq('patient_id') == 'patient-1'
    assert second.eq('provider_id') == 'provider-1'


def test_listing_rejects_unknown_user_type(backend, remote):
    result = run(appointments.get_prescriptions)(remote, 'x', 'admin')

    assert result == {'success': False, 'error': 'Unknown user type: admin'}


def test_update_status(backend, remote):
    assert run(appointments.update_appointment_status)(remote, 'appt-1', 'cancelled')['data'] == {
        'id': 'appt-1', 'status': 'cancelled'}
    assert run(appointments.update_appointment_status)(remote, 'appt-1', 'lost')['success'] is False


def test_update_status_remote_error(backend, remote):
    backend.on('appointments', 'update', postgrest_error('new row violates row-level security policy for table "appointments"'))

    result = run(appointments.update_appointment_status)(remote, 'appt-1', 'completed')

    assert result == {'success': False, 'error': 'new row violates row-level security policy for table "appointments"'}


def test_consultation_update_is_typed(backend, remote):
    updates = appointments.ConsultationUpdate(diagnosis='Hypertension', treatment_plan='Amlodipine 5mg')

    result = run(appointments.update_consultation)(remote, 'c-1', updates)

    assert result['success'] is True
    assert backend.calls_to('consultations', 'update')[0].payload == {
        'diagnosis': 'Hypertension', 'treatment_plan': 'Amlodipine 5mg'}


def test_prescription_defaults(backend, remote):
    data = appointments.PrescriptionData(consultation_id='c-1', patient_id='patient-1', provider_id='provider-1',
                                         medication_name='Amoxicillin')

    run(appointments.create_prescription)(remote, data)

    row = backend.calls_to('prescriptions', 'insert')[0].payload
    assert row['status'] == 'active'
    assert row['refills_remaining'] == 3


def test_lab_request_lifecycle(backend, remote):
    data = appointments.LabRequestData(patient_id='patient-1', provider_id='provider-1', test_name='HbA1c')
    run(appointments.create_lab_request)(remote, data)
    assert backend.calls_to('lab_requests', 'insert')[0].payload['status'] == 'requested'

    run(appointments.update_lab_request_status)(remote, 'lab-1', 'in_progress')
    run(appointments.update_lab_request_status)(remote, 'lab-1', 'completed', 'https://files.test/r.pdf')

    started, completed = backend.calls_to('lab_requests', 'update')
    assert started.payload['completed_date'] is None
    assert completed.payload['completed_date'] is not None
    assert completed.payload['results_url'] == 'https://files.test/r.pdf'


def test_get_consultations_newest_first(backend, remote):
    backend.on('consultations', 'select', FakeResponse(data=[{'id': 'c-2'}, {'id': 'c-1'}]))

    result = run(appointments.get_consultations)(remote, 'patient-1', 'patient')

    assert [r['id'] for r in result['data']] == ['c-2', 'c-1']
    assert backend.calls[0].options['order'] == ('start_time', True)
