from rest_framework import serializers

from clinic.validators import sanitize, validate_phone

GENDERS = ('male', 'female', 'other')
SEVERITIES = ('mild', 'moderate', 'severe')


class ProfileUpdateSerializer(serializers.Serializer):
    fullName = serializers.CharField(max_length=128, required=False)
    phone = serializers.CharField(max_length=32, required=False, validators=[validate_phone])
    avatarUrl = serializers.URLField(required=False)

    def validate_fullName(self, v):
        return sanitize(v)


class PatientProfileSerializer(serializers.Serializer):
    dateOfBirth = serializers.DateField(required=False)
    gender = serializers.ChoiceField(choices=GENDERS, required=False)
    address = serializers.CharField(max_length=256, required=False)
    city = serializers.CharField(max_length=64, required=False)
    state = serializers.CharField(max_length=64, required=False)
    postalCode = serializers.CharField(max_length=16, required=False)
    country = serializers.CharField(max_length=64, required=False)
    emergencyContactName = serializers.CharField(max_length=128, required=False)
    emergencyContactPhone = serializers.CharField(max_length=32, required=False, validators=[validate_phone])


class MedicalHistorySerializer(serializers.Serializer):
    condition = serializers.CharField(max_length=256)
    notes = serializers.CharField(max_length=5000, required=False)


class AllergySerializer(serializers.Serializer):
    allergen = serializers.CharField(max_length=128)
    severity = serializers.ChoiceField(choices=SEVERITIES)
    reaction = serializers.CharField(max_length=500, required=False)


class MedicationSerializer(serializers.Serializer):
    medicationName = serializers.CharField(max_length=128)
    dosage = serializers.CharField(max_length=64, required=False)
    frequency = serializers.CharField(max_length=64, required=False)
    reason = serializers.CharField(max_length=500, required=False)


class InsuranceSerializer(serializers.Serializer):
    providerName = serializers.CharField(max_length=128, required=False)
    memberId = serializers.CharField(max_length=64, required=False)
    groupNumber = serializers.CharField(max_length=64, required=False)
    policyStartDate = serializers.DateField(required=False)
    policyEndDate = serializers.DateField(required=False)


class ConsentSerializer(serializers.Serializer):
    consentType = serializers.CharField(max_length=64)
    isAccepted = serializers.BooleanField()
