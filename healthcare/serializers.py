# healthcare/serializers.py
from django.utils import timezone
from rest_framework import serializers

from consent.models import ANESTHESIA, SURGICAL
from consent.serializers import ConsentFormSerializer
from users.serializers import HealthProviderSerializer
from .models import Patient, FastingPlan, Suspension
from .services.status_service import calculate_age, is_action_required, is_archived


class ProfessionalSummarySerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    first_name = serializers.CharField(read_only=True)
    last_name = serializers.CharField(read_only=True)
    professional_license_number = serializers.CharField(read_only=True)


class PatientSerializer(serializers.ModelSerializer):
    """
    Patient as every dashboard and the patient portal see it.

    Age and the archived / action-required flags are computed on each read
    against one reference time, taken from ``context['now']`` when given.
    """
    surgeon = ProfessionalSummarySerializer(read_only=True)
    anesthesiologist = ProfessionalSummarySerializer(read_only=True)
    provider = HealthProviderSerializer(read_only=True)
    surgical_consent = ConsentFormSerializer(read_only=True)
    anesthesia_consent = ConsentFormSerializer(read_only=True)
    surgical_consent_state = serializers.SerializerMethodField()
    anesthesia_consent_state = serializers.SerializerMethodField()
    age = serializers.SerializerMethodField()
    is_archived = serializers.SerializerMethodField()
    is_action_required = serializers.SerializerMethodField()

    class Meta:
        model = Patient
        fields = [
            'id', 'first_name', 'last_name', 'email', 'date_of_birth', 'sex',
            'provider', 'surgical_procedure', 'surgery_date_time', 'surgeon',
            'anesthesia_instructions', 'medication_to_suspend', 'anesthesiologist',
            'surgical_consent', 'anesthesia_consent',
            'surgical_signature_image', 'surgical_signed_date',
            'anesthesia_signature_image', 'anesthesia_signed_date',
            'surgical_consent_state', 'anesthesia_consent_state',
            'age', 'is_archived', 'is_action_required',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_now(self):
        if not hasattr(self, '_now'):
            self._now = self.context.get('now') or timezone.now()
        return self._now

    def get_surgical_consent_state(self, obj):
        return obj.consent_state(SURGICAL)

    def get_anesthesia_consent_state(self, obj):
        return obj.consent_state(ANESTHESIA)

    def get_age(self, obj):
        return calculate_age(obj.date_of_birth, self.get_now())

    def get_is_archived(self, obj):
        return is_archived(obj.surgery_date_time, self.get_now())

    def get_is_action_required(self, obj):
        return is_action_required(obj, self.get_now())


class PatientCreateSerializer(serializers.Serializer):
    """Payload a surgeon sends to register a patient"""
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    email = serializers.EmailField()
    cedula = serializers.CharField(max_length=30)
    date_of_birth = serializers.DateField()
    sex = serializers.ChoiceField(choices=Patient.SEX_CHOICES)
    surgical_procedure = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    surgery_date_time = serializers.DateTimeField(required=False, allow_null=True)
    surgeon_id = serializers.UUIDField(required=False, help_text='Defaults to the logged-in surgeon')
    surgical_consent_id = serializers.UUIDField()
    provider_id = serializers.UUIDField(required=False, allow_null=True)


class AnesthesiaConsentSerializer(serializers.Serializer):
    """Payload an anesthesiologist sends to attach the anesthesia consent"""
    anesthesia_consent_id = serializers.UUIDField()
    anesthesiologist_id = serializers.UUIDField(required=False, help_text='Defaults to the logged-in anesthesiologist')
    anesthesia_instructions = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    medication_to_suspend = serializers.ListField(
        child=serializers.CharField(max_length=255), required=False, default=list
    )


class FastingPlanSerializer(serializers.ModelSerializer):
    class Meta:
        model = FastingPlan
        fields = ['id', 'patient', 'solids', 'clear_liquids', 'cow_milk', 'breast_milk', 'start_at']
        read_only_fields = ['id', 'patient']


class SuspensionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Suspension
        fields = ['id', 'patient', 'medication_name', 'suspend_at', 'resume_at', 'created_at']
        read_only_fields = ['id', 'patient', 'created_at']


class MedicationSuggestionRequestSerializer(serializers.Serializer):
    medications = serializers.CharField(required=False, allow_blank=True)
    surgical_procedure = serializers.CharField(required=False, allow_blank=True)


class MedicationSuggestionSerializer(serializers.Serializer):
    instructions_text = serializers.CharField()
    medications_to_suspend = serializers.ListField(child=serializers.CharField())


class PortalQRSerializer(serializers.Serializer):
    portal_url = serializers.CharField()
    qr_code = serializers.CharField(help_text='PNG image as a base64 data URL')
