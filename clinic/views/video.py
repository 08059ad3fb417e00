from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from clinic.permissions import IsProvider
from clinic.serializers.providers import NotesSerializer
from clinic.serializers.video import (
    ConsultationPrescriptionSerializer,
    EndConsultationSerializer,
    VideoTokenSerializer,
)
from clinic.services import video
from clinic.views.base import call_service

PROVIDER_ONLY = [IsAuthenticated, IsProvider]


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def token(request):
    s = VideoTokenSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return call_service(request, video.get_video_token, s.validated_data['consultationId'], request.user.id,
                        s.validated_data['userName'])


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def consultation_detail(request, pk: str):
    return call_service(request, video.get_consultation_details, pk)


@api_view(['POST'])
@permission_classes(PROVIDER_ONLY)
def start(request, pk: str):
    return call_service(request, video.start_consultation, pk)


@api_view(['POST'])
@permission_classes(PROVIDER_ONLY)
def end(request, pk: str):
    s = EndConsultationSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return call_service(request, video.end_consultation, pk, s.validated_data.get('notes'))


@api_view(['POST'])
@permission_classes(PROVIDER_ONLY)
def recording_start(request, pk: str):
    return call_service(request, video.start_recording, pk)


@api_view(['POST'])
@permission_classes(PROVIDER_ONLY)
def recording_stop(request, pk: str):
    return call_service(request, video.stop_recording, pk)


@api_view(['POST'])
@permission_classes(PROVIDER_ONLY)
def notes(request, pk: str):
    s = NotesSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return call_service(request, video.add_consultation_notes, pk, s.validated_data['notes'])


@api_view(['POST'])
@permission_classes(PROVIDER_ONLY)
def prescription(request, pk: str):
    s = ConsultationPrescriptionSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    medications = [video.Medication(**m) for m in s.validated_data['medications']]
    return call_service(request, video.create_prescription_from_consultation, pk, request.user.id,
                        s.validated_data['patientId'], medications, success_status=status.HTTP_201_CREATED)
