from rest_framework import serializers

from clinic import validators
from clinic.services.appointments import (
    APPOINTMENT_STATUSES,
    APPOINTMENT_TYPES,
    LAB_REQUEST_STATUSES,
    USER_TYPES,
)


class NotesMixin:
    def validate_notes(self, v):
        return validators.validate_notes(v)


class UserTypeQuerySerializer(serializers.Serializer):
    userType = serializers.ChoiceField(choices=USER_TYPES, required=False)


class AppointmentSerializer(NotesMixin, serializers.Serializer):
    providerId = serializers.CharField(max_length=64)
    appointmentDate = serializers.DateTimeField()
    appointmentType = serializers.ChoiceField(choices=APPOINTMENT_TYPES)
    durationMinutes = serializers.IntegerField(min_value=5, max_value=240, required=False)
    notes = serializers.CharField(required=False)


class StatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=APPOINTMENT_STATUSES)


class ConsultationSerializer(serializers.Serializer):
    appointmentId = serializers.CharField(max_length=64)
    patientId = serializers.CharField(max_length=64)
    startTime = serializers.DateTimeField(required=False)


class ConsultationUpdateSerializer(serializers.Serializer):
    startTime = serializers.DateTimeField(required=False)
    endTime = serializers.DateTimeField(required=False)
    consultationNotes = serializers.CharField(required=False)
    diagnosis = serializers.CharField(max_length=2000, required=False)
    treatmentPlan = serializers.CharField(max_length=5000, required=False)
    followUpDate = serializers.DateField(required=False)

    def validate_consultationNotes(self, v):
        return validators.validate_notes(v)


class PrescriptionSerializer(NotesMixin, serializers.Serializer):
    consultationId = serializers.CharField(max_length=64)
    patientId = serializers.CharField(max_length=64)
    medicationName = serializers.CharField(max_length=128)
    dosage = serializers.CharField(max_length=64, required=False)
    frequency = serializers.CharField(max_length=64, required=False)
    duration = serializers.CharField(max_length=64, required=False)
    quantity = serializers.IntegerField(min_value=1, required=False)
    notes = serializers.CharField(required=False)


class LabRequestSerializer(NotesMixin, serializers.Serializer):
    patientId = serializers.CharField(max_length=64)
    testName = serializers.CharField(max_length=128)
    testDescription = serializers.CharField(max_length=2000, required=False)
    scheduledDate = serializers.DateField(required=False)
    notes = serializers.CharField(required=False)
    consultationId = serializers.CharField(max_length=64, required=False)


class LabRequestStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=LAB_REQUEST_STATUSES)
    resultsUrl = serializers.URLField(required=False)
