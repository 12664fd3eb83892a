# healthcare/urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import PatientViewSet, MedicationInstructionsView

# Create a router and register our viewsets
router = DefaultRouter()
router.register(r'patients', PatientViewSet, basename='patient')


urlpatterns = [
    path(
        'ai/generate-medication-instructions/',
        MedicationInstructionsView.as_view(),
        name='generate-medication-instructions'
    ),
    # API endpoints
    path('', include(router.urls)),
]
