"""
Signup, sign-in and account credential endpoints.

Signup, sign-in and password reset are anonymous and share the ``login``
throttle scope.  Tokens handed back in ``session`` are the backend's own
and are accepted as bearer tokens on every other endpoint.
"""
from __future__ import annotations

from django.core.cache import cache
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated

from clinic.authentication import token_cache_key
from clinic.serializers.auth import (
    LoginSerializer,
    ProviderSignUpSerializer,
    ResetPasswordSerializer,
    SignUpSerializer,
    UpdatePasswordSerializer,
)
from clinic.services import auth as auth_service
from clinic.services import provider_auth
from clinic.throttling import LoginThrottle
from clinic.views.base import call_service


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([LoginThrottle])
def sign_up(request):
    s = SignUpSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    data = auth_service.SignUpData(email=d['email'], phone=d['phone'], password=d['password'],
                                   full_name=d['fullName'])
    return call_service(request, auth_service.sign_up, data, success_status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([LoginThrottle])
def sign_in(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = auth_service.LoginData(phone=s.validated_data['phone'], password=s.validated_data['password'])
    return call_service(request, auth_service.sign_in, data)


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([LoginThrottle])
def provider_sign_up(request):
    s = ProviderSignUpSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    data = provider_auth.ProviderSignUpData(
        email=d['email'],
        phone=d['phone'],
        password=d['password'],
        full_name=d['fullName'],
        license_number=d['licenseNumber'],
        specialization=d['specialization'],
        years_of_experience=d['yearsOfExperience'],
    )
    return call_service(request, provider_auth.provider_sign_up, data, success_status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([LoginThrottle])
def provider_sign_in(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = provider_auth.ProviderLoginData(phone=s.validated_data['phone'], password=s.validated_data['password'])
    return call_service(request, provider_auth.provider_sign_in, data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def sign_out(request):
    response = call_service(request, auth_service.sign_out, request.user.token)
    cache.delete(token_cache_key(request.user.token))
    return response


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def current_user(request):
    return call_service(request, auth_service.get_user, request.user.token)


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([LoginThrottle])
def reset_password(request):
    s = ResetPasswordSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return call_service(request, auth_service.reset_password, s.validated_data['email'])


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def update_password(request):
    s = UpdatePasswordSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    return call_service(request, auth_service.update_password, request.user.token, d['newPassword'],
                        d.get('refreshToken'))
