from rest_framework import serializers

from clinic.services.appointments import CONSULTATION_STATUSES
from clinic.services.provider_dashboard import TASK_PRIORITIES, TASK_STATUSES
from clinic import validators
from clinic.validators import validate_experience, validate_specialization


class ProviderProfileUpdateSerializer(serializers.Serializer):
    specialization = serializers.CharField(max_length=64, required=False, validators=[validate_specialization])
    licenseNumber = serializers.CharField(max_length=16, required=False)
    yearsOfExperience = serializers.IntegerField(required=False, validators=[validate_experience])
    bio = serializers.CharField(max_length=2000, required=False)
    isActive = serializers.BooleanField(required=False)

    def validate_licenseNumber(self, v):
        return validators.validate_license_number(v)


class LicenseSerializer(serializers.Serializer):
    licenseNumber = serializers.CharField(max_length=16)

    def validate_licenseNumber(self, v):
        return validators.validate_license_number(v)


class AvailabilitySlotSerializer(serializers.Serializer):
    dayOfWeek = serializers.IntegerField(min_value=0, max_value=6)
    startTime = serializers.TimeField()
    endTime = serializers.TimeField()
    isAvailable = serializers.BooleanField(default=True)

    def validate(self, attrs):
        if attrs['endTime'] <= attrs['startTime']:
            raise serializers.ValidationError('End time must be after start time')
        return attrs


class AvailabilitySerializer(serializers.Serializer):
    slots = AvailabilitySlotSerializer(many=True)


class HistoryQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=100, required=False)


class ConsultationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=CONSULTATION_STATUSES)


class NotesSerializer(serializers.Serializer):
    notes = serializers.CharField()

    def validate_notes(self, v):
        return validators.validate_notes(v)


class DashboardPrescriptionSerializer(serializers.Serializer):
    consultationId = serializers.CharField(max_length=64)
    patientId = serializers.CharField(max_length=64)
    medication = serializers.CharField(max_length=128)
    dosage = serializers.CharField(max_length=64)
    frequency = serializers.CharField(max_length=64)
    duration = serializers.CharField(max_length=64)


class LabOrderSerializer(serializers.Serializer):
    consultationId = serializers.CharField(max_length=64)
    patientId = serializers.CharField(max_length=64)
    testName = serializers.CharField(max_length=128)
    instructions = serializers.CharField(max_length=2000, allow_blank=True, default='')


class TaskSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(max_length=2000, allow_blank=True, default='')
    dueDate = serializers.DateTimeField()
    priority = serializers.ChoiceField(choices=TASK_PRIORITIES, default='medium')
    patientId = serializers.CharField(max_length=64, required=False)


class TaskUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200, required=False)
    description = serializers.CharField(max_length=2000, required=False)
    dueDate = serializers.DateTimeField(required=False)
    priority = serializers.ChoiceField(choices=TASK_PRIORITIES, required=False)
    status = serializers.ChoiceField(choices=TASK_STATUSES, required=False)


class TaskStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=TASK_STATUSES)


class FollowUpSerializer(serializers.Serializer):
    patientId = serializers.CharField(max_length=64)
    scheduledTime = serializers.DateTimeField()
    reason = serializers.CharField()

    def validate_reason(self, v):
        return validators.validate_reason(v)
