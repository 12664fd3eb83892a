# users/views.py
from rest_framework import permissions, status, viewsets, mixins
from rest_framework.response import Response
from rest_framework.decorators import action
from rest_framework.views import APIView
from drf_yasg.utils import swagger_auto_schema

from healthcare.serializers import PatientSerializer
from .models import (
    HealthProvider, Surgeon, Anesthesiologist, ROLE_ADMINISTRATOR, ROLE_ANESTHESIOLOGIST,
    ROLE_PATIENT, ROLE_SURGEON
)
from .permissions import IsAdministrator, IsStaffMember
from .serializers import (
    HealthProviderSerializer, SurgeonSerializer, AnesthesiologistSerializer,
    AdministratorSerializer, ProfessionalLoginSerializer, AdminLoginSerializer,
    PatientLoginSerializer, ProfessionalCreateSerializer, AddProfessionalSerializer,
    SURGEON
)
from .services.auth_service import AuthService
from .services.directory_service import DirectoryService


def login_response(role, account, data):
    """Token plus the authenticated account, as every login endpoint returns it"""
    token = AuthService.issue_token(role, account)
    return Response({'token': token.key, 'role': role, 'user': data})


class ProfessionalLoginMixin:
    """``POST <collection>/login/`` for a professional role"""
    login_role = None
    permission_classes = [IsStaffMember]

    @swagger_auto_schema(
        operation_description="Log in with license number and password",
        request_body=ProfessionalLoginSerializer,
        responses={
            200: 'Token and the authenticated professional',
            400: 'Missing license number or password',
            401: 'Invalid credentials'
        }
    )
    @action(detail=False, methods=['post'], permission_classes=[permissions.AllowAny], authentication_classes=[])
    def login(self, request):
        serializer = ProfessionalLoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        professional = AuthService.authenticate_professional(
            self.login_role,
            serializer.validated_data.get('professional_license_number'),
            serializer.validated_data.get('password')
        )
        return login_response(self.login_role, professional, self.get_serializer(professional).data)


class SurgeonViewSet(ProfessionalLoginMixin, viewsets.ReadOnlyModelViewSet):
    """
    API endpoint for surgeons

    Lists surgeons (with their providers) and handles surgeon login.
    """
    queryset = Surgeon.objects.prefetch_related('providers')
    serializer_class = SurgeonSerializer
    login_role = ROLE_SURGEON


class AnesthesiologistViewSet(ProfessionalLoginMixin, viewsets.ReadOnlyModelViewSet):
    """
    API endpoint for anesthesiologists

    Lists anesthesiologists (with their providers) and handles their login.
    """
    queryset = Anesthesiologist.objects.prefetch_related('providers')
    serializer_class = AnesthesiologistSerializer
    login_role = ROLE_ANESTHESIOLOGIST


class ProfessionalViewSet(viewsets.GenericViewSet):
    """API endpoint for registering surgeons and anesthesiologists"""
    serializer_class = ProfessionalCreateSerializer
    permission_classes = [IsAdministrator]

    @swagger_auto_schema(
        operation_description="Register a surgeon or anesthesiologist, optionally linked to a provider",
        request_body=ProfessionalCreateSerializer,
        responses={
            201: SurgeonSerializer,
            400: 'Invalid data',
            404: 'Provider not found',
            409: 'License number already registered'
        }
    )
    def create(self, request):
        serializer = ProfessionalCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        professional = DirectoryService.create_professional(
            role=data.pop('role'),
            password=data.pop('password'),
            provider_id=data.pop('provider_id', None),
            **data
        )

        if isinstance(professional, Surgeon):
            output = SurgeonSerializer(professional)
        else:
            output = AnesthesiologistSerializer(professional)
        return Response(output.data, status=status.HTTP_201_CREATED)


class HealthProviderViewSet(mixins.ListModelMixin,
                            mixins.RetrieveModelMixin,
                            viewsets.GenericViewSet):
    """
    API endpoint for health providers

    Providers group the surgeons and anesthesiologists that work for them.
    """
    queryset = HealthProvider.objects.all()
    serializer_class = HealthProviderSerializer

    def get_permissions(self):
        """Staff can browse providers; only administrators change them"""
        if self.action in ['list', 'retrieve']:
            return [IsStaffMember()]
        return [IsAdministrator()]

    @swagger_auto_schema(
        request_body=HealthProviderSerializer,
        responses={201: HealthProviderSerializer, 409: 'Duplicate provider name'}
    )
    def create(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        provider = DirectoryService.create_provider(**serializer.validated_data)
        return Response(self.get_serializer(provider).data, status=status.HTTP_201_CREATED)

    @swagger_auto_schema(
        operation_description="Link an existing surgeon or anesthesiologist to this provider",
        request_body=AddProfessionalSerializer,
        responses={
            200: 'The linked professional',
            404: 'Provider or professional not found'
        }
    )
    @action(detail=True, methods=['post'], url_path='add-professional')
    def add_professional(self, request, pk=None):
        serializer = AddProfessionalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        role = serializer.validated_data['role']
        professional = DirectoryService.add_professional(
            pk, serializer.validated_data['professional_id'], role
        )

        output_class = SurgeonSerializer if role == SURGEON else AnesthesiologistSerializer
        return Response(output_class(professional).data)


class AdminLoginView(APIView):
    """Administrator login"""
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @swagger_auto_schema(
        request_body=AdminLoginSerializer,
        responses={200: 'Token and the administrator', 400: 'Missing fields', 401: 'Invalid credentials'}
    )
    def post(self, request):
        serializer = AdminLoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        admin = AuthService.authenticate_admin(
            serializer.validated_data.get('email'),
            serializer.validated_data.get('password')
        )
        return login_response(ROLE_ADMINISTRATOR, admin, AdministratorSerializer(admin).data)


class PatientLoginView(APIView):
    """Patient portal login with email and cedula"""
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @swagger_auto_schema(
        request_body=PatientLoginSerializer,
        responses={200: 'Token and the patient record', 400: 'Missing fields', 401: 'Invalid credentials'}
    )
    def post(self, request):
        serializer = PatientLoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        patient = AuthService.authenticate_patient(
            serializer.validated_data.get('email'),
            serializer.validated_data.get('cedula')
        )
        return login_response(ROLE_PATIENT, patient, PatientSerializer(patient).data)


class LogoutView(APIView):
    """Revoke the token sent with the request"""

    @swagger_auto_schema(responses={200: 'Logged out', 401: 'Missing or invalid token'})
    def post(self, request):
        AuthService.revoke_token(request.auth)
        return Response({'message': 'Successfully logged out.'})
