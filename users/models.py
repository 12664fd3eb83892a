# users/models.py
import binascii
import os
import uuid
from datetime import timedelta

from django.apps import apps
from django.conf import settings
from django.db import models
from django.utils import timezone

from .auth import get_password_verifier


class HealthProvider(models.Model):
    """Clinic or hospital the professionals work for"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255, unique=True)
    address = models.CharField(max_length=255, blank=True, null=True)
    phone = models.CharField(max_length=30, blank=True, null=True)
    contact_email = models.EmailField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class CredentialMixin(models.Model):
    """
    Hashed password storage for the accounts that log in with a password.

    Hashing and verification are delegated to the configured
    ``PASSWORD_VERIFIER`` so the scheme can be swapped without touching models.
    """
    password = models.CharField(max_length=255)

    class Meta:
        abstract = True

    def set_password(self, raw_password):
        """Hash and store a new password (does not save)"""
        self.password = get_password_verifier().hash(raw_password)

    def check_password(self, raw_password):
        """Check a submitted password against the stored hash"""
        if not raw_password or not self.password:
            return False
        return get_password_verifier().verify(raw_password, self.password)


class Professional(CredentialMixin):
    """Fields shared by surgeons and anesthesiologists"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    professional_license_number = models.CharField(max_length=50, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ['last_name', 'first_name']

    def get_full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self):
        return f"{self.get_full_name()} ({self.professional_license_number})"


class Surgeon(Professional):
    specialty = models.CharField(max_length=100, blank=True, null=True)
    providers = models.ManyToManyField(HealthProvider, blank=True, related_name='surgeons')

    class Meta(Professional.Meta):
        pass


class Anesthesiologist(Professional):
    providers = models.ManyToManyField(HealthProvider, blank=True, related_name='anesthesiologists')

    class Meta(Professional.Meta):
        pass


class Administrator(CredentialMixin):
    """Back-office account that manages providers and professionals"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)

    def get_full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self):
        return f"Administrator: {self.email}"


# Roles an access token can carry
ROLE_SURGEON = 'surgeon'
ROLE_ANESTHESIOLOGIST = 'anesthesiologist'
ROLE_ADMINISTRATOR = 'administrator'
ROLE_PATIENT = 'patient'

ROLE_MODELS = {
    ROLE_SURGEON: 'users.Surgeon',
    ROLE_ANESTHESIOLOGIST: 'users.Anesthesiologist',
    ROLE_ADMINISTRATOR: 'users.Administrator',
    ROLE_PATIENT: 'healthcare.Patient',
}


class AccessToken(models.Model):
    """
    API token handed out at login, one per account.

    Same shape as DRF's authtoken ``Token``, but the owner is any of the
    four login entities, identified by ``(role, account_id)``.
    """
    ROLE_CHOICES = [
        (ROLE_SURGEON, 'Surgeon'),
        (ROLE_ANESTHESIOLOGIST, 'Anesthesiologist'),
        (ROLE_ADMINISTRATOR, 'Administrator'),
        (ROLE_PATIENT, 'Patient'),
    ]

    key = models.CharField(max_length=40, primary_key=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES)
    account_id = models.UUIDField()
    created = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ['role', 'account_id']

    def save(self, *args, **kwargs):
        if not self.key:
            self.key = self.generate_key()
        return super().save(*args, **kwargs)

    @classmethod
    def generate_key(cls):
        return binascii.hexlify(os.urandom(20)).decode()

    def is_expired(self, now=None):
        now = now or timezone.now()
        return self.created < now - timedelta(hours=settings.ACCESS_TOKEN_TTL_HOURS)

    def get_account(self):
        """The surgeon, anesthesiologist, administrator or patient, or None if deleted"""
        model = apps.get_model(ROLE_MODELS[self.role])
        return model.objects.filter(pk=self.account_id).first()

    def __str__(self):
        return f"{self.role} token for {self.account_id}"
