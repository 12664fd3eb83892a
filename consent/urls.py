# consent/urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import ConsentFormViewSet

router = DefaultRouter()
router.register(r'consent-forms', ConsentFormViewSet, basename='consentform')

urlpatterns = [
    path('', include(router.urls)),
]
