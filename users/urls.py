# users/urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import (
    SurgeonViewSet, AnesthesiologistViewSet, ProfessionalViewSet,
    HealthProviderViewSet, AdminLoginView, PatientLoginView, LogoutView
)

# Create a router and register our viewsets with it
router = DefaultRouter()
router.register(r'surgeons', SurgeonViewSet, basename='surgeon')
router.register(r'anesthesiologists', AnesthesiologistViewSet, basename='anesthesiologist')
router.register(r'professionals', ProfessionalViewSet, basename='professional')
router.register(r'providers', HealthProviderViewSet, basename='provider')

urlpatterns = [
    path('admin/login/', AdminLoginView.as_view(), name='admin-login'),
    path('login/', PatientLoginView.as_view(), name='patient-login'),
    path('logout/', LogoutView.as_view(), name='logout'),
    path('', include(router.urls)),
]
