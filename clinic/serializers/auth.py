from rest_framework import serializers

from clinic.validators import (
    sanitize,
    validate_experience,
    validate_license_number,
    validate_password_strength,
    validate_phone,
    validate_specialization,
)


class SignUpSerializer(serializers.Serializer):
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=32, validators=[validate_phone])
    password = serializers.CharField(write_only=True, validators=[validate_password_strength])
    fullName = serializers.CharField(max_length=128)

    def validate_fullName(self, v):
        v = sanitize(v)
        if not v:
            raise serializers.ValidationError('Full name is required')
        return v


class ProviderSignUpSerializer(SignUpSerializer):
    licenseNumber = serializers.CharField(max_length=16)
    specialization = serializers.CharField(max_length=64, validators=[validate_specialization])
    yearsOfExperience = serializers.IntegerField(validators=[validate_experience])

    def validate_licenseNumber(self, v):
        return validate_license_number(v)


class LoginSerializer(serializers.Serializer):
    phone = serializers.CharField(max_length=32)
    password = serializers.CharField(write_only=True)

    def validate_phone(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Phone number is required')
        return v

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password is required')
        return v


class ResetPasswordSerializer(serializers.Serializer):
    email = serializers.EmailField()


class UpdatePasswordSerializer(serializers.Serializer):
    newPassword = serializers.CharField(write_only=True, validators=[validate_password_strength])
    refreshToken = serializers.CharField(write_only=True, required=False)
