"""Payment initialisation and verification through serverless functions."""
from decimal import Decimal

from asgiref.sync import async_to_sync
from supabase import FunctionsError

from clinic.services import payments
from clinic.tests.fakes import FakeResponse, postgrest_error

run = async_to_sync

VERIFY = payments.PaymentVerifyData(reference='ref_123', appointment_id='appt-1')


class RemoteFunctionsError(FunctionsError):
    def __init__(self, message):
        Exception.__init__(self, message)
        self.message = message


def test_minor_units_round_half_up():
    assert payments.to_minor_units(Decimal('150.00')) == 15000
    assert payments.to_minor_units('19.995') == 2000
    assert payments.to_minor_units(0.1) == 10


def test_initialize_payment_sends_minor_units(backend, remote):
    backend.on('functions', 'initialize-payment', {'status': True, 'data': {
        'authorization_url': 'https://checkout.test/abc', 'access_code': 'abc', 'reference': 'ref_123'}})
    data = payments.PaymentInitData(appointment_id='appt-1', amount=Decimal('250.50'), email='ama@example.com',
                                    full_name='Ama Mensah')

    result = run(payments.initialize_payment)(remote, data)

    assert result == {'success': True, 'data': {
        'authorizationUrl': 'https://checkout.test/abc', 'accessCode': 'abc', 'reference': 'ref_123'}}
    body = backend.calls_to('functions', 'initialize-payment')[0].payload
    assert body == {'appointmentId': 'appt-1', 'amount': 25050, 'email': 'ama@example.com', 'fullName': 'Ama Mensah'}


def test_verified_payment_returns_payload_and_marks_appointment(backend, remote):
    payload = {'status': 'success', 'amount': 25050, 'reference': 'ref_123'}
    backend.on('functions', 'verify-payment', payload)

    result = run(payments.verify_payment)(remote, VERIFY)

    assert result == {'success': True, 'data': payload}
    update = backend.calls_to('appointments', 'update')[0]
    assert update.payload == {'payment_status': 'paid', 'payment_reference': 'ref_123'}
    assert update.eq('id') == 'appt-1'


def test_failed_verification_discards_gateway_reason(backend, remote):
    backend.on('functions', 'verify-payment', {'status': 'failed', 'gateway_response': 'Declined by bank'})

    result = run(payments.verify_payment)(remote, VERIFY)

    assert result == {'success': False, 'error': 'Payment verification failed'}
    assert backend.calls_to('appointments') == []


def test_abandoned_status_is_also_a_failure(backend, remote):
    backend.on('functions', 'verify-payment', {'status': 'abandoned'})

    assert run(payments.verify_payment)(remote, VERIFY) == {'success': False, 'error': 'Payment verification failed'}


def test_appointment_update_failure_is_not_surfaced(backend, remote, caplog):
    payload = {'status': 'success', 'reference': 'ref_123'}
    backend.on('functions', 'verify-payment', payload)
    backend.on('appointments', 'update', postgrest_error('permission denied for table appointments'))

    result = run(payments.verify_payment)(remote, VERIFY)

    assert result == {'success': True, 'data': payload}
    assert 'not updated' in caplog.text


def test_verification_function_error_passes_through(backend, remote):
    backend.on('functions', 'verify-payment', RemoteFunctionsError('Edge Function returned a non-2xx status code'))

    result = run(payments.verify_payment)(remote, VERIFY)

    assert result == {'success': False, 'error': 'Edge Function returned a non-2xx status code'}


def test_payment_history_newest_first(backend, remote):
    rows = [{'id': 'p2'}, {'id': 'p1'}]
    backend.on('payments', 'select', FakeResponse(data=rows))

    result = run(payments.get_payment_history)(remote, 'patient-1')

    assert result == {'success': True, 'data': rows}
    call = backend.calls_to('payments', 'select')[0]
    assert call.eq('user_id') == 'patient-1'
    assert call.options['order'] == ('created_at', True)


def test_create_payment_record_is_pending(backend, remote):
    result = run(payments.create_payment_record)(remote, 'patient-1', 'appt-1', Decimal('100.00'), 'ref_9')

    assert result['success'] is True
    row = backend.calls_to('payments', 'insert')[0].payload
    assert row['status'] == 'pending'
    assert row['amount'] == 100.0
    assert row['reference'] == 'ref_9'


def test_process_refund_goes_through_function(backend, remote):
    backend.on('functions', 'process-refund', {'status': True, 'data': {'status': 'pending'}})

    result = run(payments.process_refund)(remote, 'ref_123', Decimal('50'), 'Provider unavailable')

    assert result['success'] is True
    body = backend.calls_to('functions', 'process-refund')[0].payload
    assert body == {'reference': 'ref_123', 'reason': 'Provider unavailable', 'amount': 5000}


def test_refund_payment_marks_row(backend, remote):
    result = run(payments.refund_payment)(remote, 'pay-1', 'Duplicate charge')

    assert result['success'] is True
    update = backend.calls_to('payments', 'update')[0]
    assert update.payload['status'] == 'refunded'
    assert update.payload['refund_reason'] == 'Duplicate charge'


def test_appointment_payment_status_is_validated(backend, remote):
    result = run(payments.update_appointment_payment_status)(remote, 'appt-1', 'settled')

    assert result == {'success': False, 'error': 'Invalid payment status: settled'}
    assert backend.calls == []
    assert run(payments.update_appointment_payment_status)(remote, 'appt-1', 'refunded')['success'] is True
