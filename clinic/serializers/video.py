from rest_framework import serializers

from clinic.validators import sanitize


class VideoTokenSerializer(serializers.Serializer):
    consultationId = serializers.CharField(max_length=64)
    userName = serializers.CharField(max_length=128)

    def validate_userName(self, v):
        return sanitize(v)


class EndConsultationSerializer(serializers.Serializer):
    notes = serializers.CharField(max_length=5000, required=False, allow_blank=True)


class MedicationSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=128)
    dosage = serializers.CharField(max_length=64)
    frequency = serializers.CharField(max_length=64)
    duration = serializers.CharField(max_length=64)


class ConsultationPrescriptionSerializer(serializers.Serializer):
    patientId = serializers.CharField(max_length=64)
    medications = MedicationSerializer(many=True, allow_empty=False)
