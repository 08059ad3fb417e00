from rest_framework import serializers

from clinic import validators
from clinic.services.payments import APPOINTMENT_PAYMENT_STATUSES


class ReasonMixin:
    def validate_reason(self, v):
        return validators.validate_reason(v)


class PaymentInitSerializer(serializers.Serializer):
    appointmentId = serializers.CharField(max_length=64)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, validators=[validators.validate_amount])
    currency = serializers.CharField(max_length=3, default='GHS')
    email = serializers.EmailField()
    fullName = serializers.CharField(max_length=128)

    def validate_currency(self, v):
        return validators.validate_currency(v)

    def validate_fullName(self, v):
        return validators.sanitize(v)


class PaymentVerifySerializer(serializers.Serializer):
    reference = serializers.CharField(max_length=128)
    appointmentId = serializers.CharField(max_length=64)


class PaymentRecordSerializer(serializers.Serializer):
    appointmentId = serializers.CharField(max_length=64)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, validators=[validators.validate_amount])
    reference = serializers.CharField(max_length=128)


class RefundSerializer(ReasonMixin, serializers.Serializer):
    reference = serializers.CharField(max_length=128)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, required=False,
                                      validators=[validators.validate_amount])
    reason = serializers.CharField()


class RefundRecordSerializer(ReasonMixin, serializers.Serializer):
    reason = serializers.CharField()


class AppointmentPaymentStatusSerializer(serializers.Serializer):
    appointmentId = serializers.CharField(max_length=64)
    paymentStatus = serializers.ChoiceField(choices=APPOINTMENT_PAYMENT_STATUSES)
