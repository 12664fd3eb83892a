# consent/views.py
import logging

from django.http import FileResponse
from rest_framework import permissions, viewsets
from rest_framework.decorators import action
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema

from consentflow.exceptions import NotFoundError, ValidationError
from .models import ConsentForm
from .serializers import ConsentFormSerializer

logger = logging.getLogger(__name__)


class ConsentFormViewSet(viewsets.ReadOnlyModelViewSet):
    """
    API endpoint for the consent form catalogue

    Forms are read-only here; they are loaded with ``seed_demo_data`` or the admin.
    """
    serializer_class = ConsentFormSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        queryset = ConsentForm.objects.all()

        consent_type = self.request.query_params.get('type')
        if consent_type:
            consent_type = consent_type.upper()
            if consent_type not in dict(ConsentForm.CONSENT_TYPES):
                raise ValidationError(f"Unknown consent type {consent_type}.")
            queryset = queryset.filter(type=consent_type)

        return queryset

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter(
                'type', openapi.IN_QUERY, type=openapi.TYPE_STRING,
                enum=['SURGICAL', 'ANESTHESIA'], description='Only forms of this type'
            )
        ]
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @swagger_auto_schema(
        operation_description="Download the consent PDF",
        responses={200: 'application/pdf', 404: 'Form or file not found'}
    )
    @action(detail=True, methods=['get'])
    def pdf(self, request, pk=None):
        form = self.get_object()

        try:
            handle = form.file.open('rb')
        except (FileNotFoundError, ValueError):
            logger.error(f"File for consent form {form.id} is missing from storage")
            raise NotFoundError(f"The PDF of consent form {form.id} is not available.")

        return FileResponse(
            handle,
            content_type='application/pdf',
            filename=form.file_name
        )
