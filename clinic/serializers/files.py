from rest_framework import serializers

from clinic.services.storage import AVATARS_BUCKET, DOCUMENTS_BUCKET, LAB_RESULTS_BUCKET

BUCKETS = (DOCUMENTS_BUCKET, LAB_RESULTS_BUCKET, AVATARS_BUCKET)


class DocumentUploadSerializer(serializers.Serializer):
    file = serializers.FileField()
    documentType = serializers.SlugField(max_length=64)


class FileUploadSerializer(serializers.Serializer):
    file = serializers.FileField()


class LabResultUploadSerializer(serializers.Serializer):
    file = serializers.FileField()
    labRequestId = serializers.CharField(max_length=64)
    patientId = serializers.CharField(max_length=64, required=False)


class DocumentListQuerySerializer(serializers.Serializer):
    documentType = serializers.SlugField(max_length=64, required=False)


class FileRefSerializer(serializers.Serializer):
    bucket = serializers.ChoiceField(choices=BUCKETS)
    path = serializers.CharField(max_length=512)
