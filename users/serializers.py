# users/serializers.py
from rest_framework import serializers
from .models import HealthProvider, Surgeon, Anesthesiologist, Administrator

SURGEON = 'SURGEON'
ANESTHESIOLOGIST = 'ANESTHESIOLOGIST'


class HealthProviderSerializer(serializers.ModelSerializer):
    class Meta:
        model = HealthProvider
        fields = ['id', 'name', 'address', 'phone', 'contact_email', 'created_at']
        read_only_fields = ['id', 'created_at']


class SurgeonSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(source='get_full_name', read_only=True)
    providers = HealthProviderSerializer(many=True, read_only=True)

    class Meta:
        model = Surgeon
        fields = [
            'id', 'first_name', 'last_name', 'full_name', 'specialty',
            'professional_license_number', 'providers', 'created_at'
        ]
        read_only_fields = fields


class AnesthesiologistSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(source='get_full_name', read_only=True)
    providers = HealthProviderSerializer(many=True, read_only=True)

    class Meta:
        model = Anesthesiologist
        fields = [
            'id', 'first_name', 'last_name', 'full_name',
            'professional_license_number', 'providers', 'created_at'
        ]
        read_only_fields = fields


class AdministratorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Administrator
        fields = ['id', 'email', 'first_name', 'last_name', 'created_at']
        read_only_fields = fields


class ProfessionalLoginSerializer(serializers.Serializer):
    professional_license_number = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True)


class AdminLoginSerializer(serializers.Serializer):
    email = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True)


class PatientLoginSerializer(serializers.Serializer):
    email = serializers.CharField(required=False, allow_blank=True)
    cedula = serializers.CharField(required=False, allow_blank=True, write_only=True)


class ProfessionalCreateSerializer(serializers.Serializer):
    """Payload for registering a surgeon or an anesthesiologist"""
    role = serializers.ChoiceField(choices=[SURGEON, ANESTHESIOLOGIST])
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    professional_license_number = serializers.CharField(max_length=50)
    password = serializers.CharField(write_only=True, min_length=6)
    specialty = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    provider_id = serializers.UUIDField(required=False, allow_null=True)


class AddProfessionalSerializer(serializers.Serializer):
    professional_id = serializers.UUIDField()
    role = serializers.ChoiceField(choices=[SURGEON, ANESTHESIOLOGIST])
