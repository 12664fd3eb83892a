# consent/serializers.py
from rest_framework import serializers
from .models import ConsentForm


class ConsentFormSerializer(serializers.ModelSerializer):
    pdf_url = serializers.SerializerMethodField()

    class Meta:
        model = ConsentForm
        fields = ['id', 'type', 'file_name', 'file_size', 'pdf_url', 'created_at']
        read_only_fields = fields

    def get_pdf_url(self, obj):
        return f"/api/consent-forms/{obj.id}/pdf/"


class SignatureSerializer(serializers.Serializer):
    """Captured signature photo as a ``data:image/...;base64,`` URL"""
    signature_image = serializers.CharField(required=False, allow_blank=True)
