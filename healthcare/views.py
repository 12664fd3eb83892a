# healthcare/views.py
from django.utils import timezone
from rest_framework import exceptions, viewsets, mixins, status
from rest_framework.response import Response
from rest_framework.decorators import action
from rest_framework.views import APIView
from drf_yasg.utils import no_body, swagger_auto_schema

from communication.services.email_service import EmailService, build_portal_url
from communication.services.qr_service import make_qr_data_url
from consent.models import ANESTHESIA, SURGICAL
from consent.serializers import SignatureSerializer
from consent.services.consent_service import ConsentService
from consentflow.exceptions import ValidationError
from users.permissions import (
    IsAnesthesiologist, IsPatientOwner, IsProfessional, IsStaffMember, IsStaffOrPatientOwner, IsSurgeon
)
from .serializers import (
    PatientSerializer, PatientCreateSerializer, AnesthesiaConsentSerializer,
    FastingPlanSerializer, SuspensionSerializer, MedicationSuggestionRequestSerializer,
    MedicationSuggestionSerializer, PortalQRSerializer
)
from .services.medication_ai_service import MedicationAIService
from .services.patient_service import PatientService
from .services.perioperative_service import PerioperativeService
from .swagger_utils import PATIENT_LIST_PARAMETERS, get_patient_responses

TRUE_VALUES = ('true', '1', 'yes')
FALSE_VALUES = ('false', '0', 'no')


def parse_bool(value, name):
    if value is None or value == '':
        return None
    if value.lower() in TRUE_VALUES:
        return True
    if value.lower() in FALSE_VALUES:
        return False
    raise ValidationError(f"Query parameter {name} must be true or false.")


def acting_account_id(request, given_id, label):
    """
    The professional a write is recorded under: the caller, unless the
    payload names someone else, which is refused
    """
    if given_id is not None and str(given_id) != str(request.user.id):
        raise exceptions.PermissionDenied(f"{label} can only act on their own behalf.")
    return request.user.id


class PatientViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    API endpoint for surgical patients.

    list:
        Patients ordered by surgery date (most recent first), optionally
        filtered by surgeon, anesthesiologist, archived flag or free text

    retrieve:
        One patient with its consents and derived status

    create:
        A surgeon registers a patient together with the surgical consent

    Patients are never deleted through the API.
    """
    serializer_class = PatientSerializer
    permission_classes = [IsStaffMember]

    # Patients only reach their own record and sign their own consents
    permission_classes_by_action = {
        'list': [IsStaffMember],
        'retrieve': [IsStaffOrPatientOwner],
        'create': [IsSurgeon],
        'anesthesia_consent': [IsAnesthesiologist],
        'sign_surgical': [IsPatientOwner],
        'sign_anesthesia': [IsPatientOwner],
        'fasting_plan': [IsStaffOrPatientOwner],
        'update_fasting_plan': [IsAnesthesiologist],
        'suspensions': [IsStaffOrPatientOwner],
        'create_suspension': [IsAnesthesiologist],
        'delete_suspension': [IsAnesthesiologist],
        'send_consent_email': [IsProfessional],
        'portal_qr': [IsStaffMember],
    }

    def get_permissions(self):
        """Set permission classes based on action"""
        permission_classes = self.permission_classes_by_action.get(self.action, self.permission_classes)
        return [permission() for permission in permission_classes]

    def get_queryset(self):
        params = self.request.query_params
        return PatientService.list_patients(
            surgeon_id=params.get('surgeon'),
            anesthesiologist_id=params.get('anesthesiologist'),
            archived=parse_bool(params.get('archived'), 'archived'),
            search=params.get('search'),
            now=self.get_now()
        )

    def get_now(self):
        """One reference time per request for every derived value"""
        if not hasattr(self, '_now'):
            self._now = timezone.now()
        return self._now

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context['now'] = self.get_now()
        return context

    def patient_response(self, patient, status_code=status.HTTP_200_OK):
        return Response(self.get_serializer(patient).data, status=status_code)

    @swagger_auto_schema(manual_parameters=PATIENT_LIST_PARAMETERS)
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @swagger_auto_schema(responses=get_patient_responses(serializer=PatientSerializer))
    def retrieve(self, request, pk=None):
        return self.patient_response(PatientService.get_patient(pk))

    @swagger_auto_schema(
        request_body=PatientCreateSerializer,
        responses=get_patient_responses(status.HTTP_201_CREATED, PatientSerializer)
    )
    def create(self, request):
        serializer = PatientCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        patient = PatientService.create_patient(
            surgeon_id=acting_account_id(request, data.pop('surgeon_id', None), 'Surgeons'),
            surgical_consent_id=data.pop('surgical_consent_id'),
            provider_id=data.pop('provider_id', None),
            **data
        )
        return self.patient_response(patient, status.HTTP_201_CREATED)

    @swagger_auto_schema(
        operation_description="Attach the anesthesia consent, instructions and medications to stop",
        request_body=AnesthesiaConsentSerializer,
        responses=get_patient_responses(serializer=PatientSerializer)
    )
    @action(detail=True, methods=['put'], url_path='anesthesia-consent')
    def anesthesia_consent(self, request, pk=None):
        serializer = AnesthesiaConsentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        patient = ConsentService.assign_anesthesia_consent(
            pk,
            serializer.validated_data['anesthesia_consent_id'],
            acting_account_id(request, serializer.validated_data.get('anesthesiologist_id'), 'Anesthesiologists'),
            instructions=serializer.validated_data.get('anesthesia_instructions'),
            medication_to_suspend=serializer.validated_data.get('medication_to_suspend')
        )
        return self.patient_response(patient)

    @swagger_auto_schema(
        operation_description="Patient signs the surgical consent",
        request_body=SignatureSerializer,
        responses=get_patient_responses(serializer=PatientSerializer)
    )
    @action(detail=True, methods=['put'], url_path='sign-surgical')
    def sign_surgical(self, request, pk=None):
        return self.sign(request, pk, SURGICAL)

    @swagger_auto_schema(
        operation_description="Patient signs the anesthesia consent",
        request_body=SignatureSerializer,
        responses=get_patient_responses(serializer=PatientSerializer)
    )
    @action(detail=True, methods=['put'], url_path='sign-anesthesia')
    def sign_anesthesia(self, request, pk=None):
        return self.sign(request, pk, ANESTHESIA)

    def sign(self, request, pk, consent_type):
        serializer = SignatureSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        patient = ConsentService.sign(
            pk, consent_type, serializer.validated_data.get('signature_image'), now=self.get_now()
        )
        return self.patient_response(patient)

    @swagger_auto_schema(responses={200: FastingPlanSerializer, 404: 'Patient or fasting plan not found'})
    @action(detail=True, methods=['get'], url_path='fasting-plan')
    def fasting_plan(self, request, pk=None):
        plan = PerioperativeService.get_fasting_plan(pk)
        return Response(FastingPlanSerializer(plan).data)

    @swagger_auto_schema(
        operation_description="Create or replace the fasting plan and schedule the fasting reminder",
        request_body=FastingPlanSerializer,
        responses={200: FastingPlanSerializer, 400: 'Invalid data', 404: 'Patient not found'}
    )
    @fasting_plan.mapping.put
    def update_fasting_plan(self, request, pk=None):
        serializer = FastingPlanSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        plan = PerioperativeService.upsert_fasting_plan(pk, serializer.validated_data)
        return Response(FastingPlanSerializer(plan).data)

    @swagger_auto_schema(responses={200: SuspensionSerializer(many=True), 404: 'Patient not found'})
    @action(detail=True, methods=['get'])
    def suspensions(self, request, pk=None):
        suspensions = PerioperativeService.list_suspensions(pk)
        return Response(SuspensionSerializer(suspensions, many=True).data)

    @swagger_auto_schema(
        operation_description="Schedule a medication suspension (and its resumption)",
        request_body=SuspensionSerializer,
        responses={201: SuspensionSerializer, 400: 'Invalid data', 404: 'Patient not found'}
    )
    @suspensions.mapping.post
    def create_suspension(self, request, pk=None):
        serializer = SuspensionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        suspension = PerioperativeService.create_suspension(pk, serializer.validated_data)
        return Response(SuspensionSerializer(suspension).data, status=status.HTTP_201_CREATED)

    @swagger_auto_schema(responses={204: 'Deleted', 404: 'Patient or suspension not found'})
    @action(
        detail=True, methods=['delete'],
        url_path=r'suspensions/(?P<suspension_id>[^/.]+)',
        url_name='suspension-detail'
    )
    def delete_suspension(self, request, pk=None, suspension_id=None):
        PerioperativeService.delete_suspension(pk, suspension_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @swagger_auto_schema(
        operation_description="Email the consent PDFs and the portal link to the patient",
        request_body=no_body,
        responses={
            200: 'Email sent',
            400: 'Patient has no email',
            409: 'No consent associated',
            502: 'Mail server error',
            503: 'Mail not configured'
        }
    )
    @action(detail=True, methods=['post'], url_path='send-consent-email')
    def send_consent_email(self, request, pk=None):
        patient = PatientService.get_patient(pk)
        portal_url = build_portal_url(patient.email or '', request)

        EmailService.send_consent_email(patient, portal_url)
        return Response({'message': 'Consent email sent.', 'portal_url': portal_url})

    @swagger_auto_schema(
        operation_description="Portal link for the patient and its QR code",
        responses={200: PortalQRSerializer, 400: 'Patient has no email', 404: 'Patient not found'}
    )
    @action(detail=True, methods=['get'], url_path='portal-qr')
    def portal_qr(self, request, pk=None):
        patient = PatientService.get_patient(pk)
        if not patient.email:
            raise ValidationError(f"Patient {patient.id} has no email address.")

        portal_url = build_portal_url(patient.email, request)
        return Response(PortalQRSerializer({
            'portal_url': portal_url,
            'qr_code': make_qr_data_url(portal_url),
        }).data)


class MedicationInstructionsView(APIView):
    """Suggest which medications to suspend before a procedure"""
    permission_classes = [IsProfessional]

    @swagger_auto_schema(
        request_body=MedicationSuggestionRequestSerializer,
        responses={
            200: MedicationSuggestionSerializer,
            400: 'Missing medications or procedure',
            502: 'AI service failure'
        }
    )
    def post(self, request):
        serializer = MedicationSuggestionRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        suggestion = MedicationAIService.suggest_suspensions(
            serializer.validated_data.get('medications'),
            serializer.validated_data.get('surgical_procedure')
        )
        return Response(MedicationSuggestionSerializer(suggestion).data)
