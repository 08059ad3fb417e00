from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import IsAuthenticated

from clinic.serializers.payments import (
    AppointmentPaymentStatusSerializer,
    PaymentInitSerializer,
    PaymentRecordSerializer,
    PaymentVerifySerializer,
    RefundRecordSerializer,
    RefundSerializer,
)
from clinic.services import payments
from clinic.services.cache import TTL_MEDIUM, payment_history_key
from clinic.throttling import PaymentsThrottle
from clinic.views.base import call_service


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@throttle_classes([PaymentsThrottle])
def initialize_payment(request):
    s = PaymentInitSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    data = payments.PaymentInitData(appointment_id=d['appointmentId'], amount=d['amount'],
                                    email=d['email'], full_name=d['fullName'])
    return call_service(request, payments.initialize_payment, data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@throttle_classes([PaymentsThrottle])
def verify_payment(request):
    s = PaymentVerifySerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = payments.PaymentVerifyData(reference=s.validated_data['reference'],
                                      appointment_id=s.validated_data['appointmentId'])
    return call_service(request, payments.verify_payment, data,
                        invalidates=[payment_history_key(request.user.id)])


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def payment_history(request):
    key = payment_history_key(request.user.id)
    return call_service(request, payments.get_payment_history, request.user.id, cache_as=(key, TTL_MEDIUM))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def payment_detail(request, pk: str):
    return call_service(request, payments.get_payment_details, pk)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def payment_record(request):
    s = PaymentRecordSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    return call_service(request, payments.create_payment_record, request.user.id, d['appointmentId'],
                        d['amount'], d['reference'],
                        invalidates=[payment_history_key(request.user.id)],
                        success_status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@throttle_classes([PaymentsThrottle])
def process_refund(request):
    s = RefundSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    return call_service(request, payments.process_refund, d['reference'], d.get('amount'), d['reason'],
                        invalidates=[payment_history_key(request.user.id)])


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def refund_record(request, pk: str):
    s = RefundRecordSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return call_service(request, payments.refund_payment, pk, s.validated_data['reason'],
                        invalidates=[payment_history_key(request.user.id)])


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def appointment_payment_status(request):
    s = AppointmentPaymentStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return call_service(request, payments.update_appointment_payment_status,
                        s.validated_data['appointmentId'], s.validated_data['paymentStatus'])
