# users/services/directory_service.py
import logging

from django.db import transaction

from consentflow.exceptions import ConflictError, ValidationError, get_object_or_not_found
from ..models import Anesthesiologist, HealthProvider, Surgeon

logger = logging.getLogger(__name__)

ROLE_MODELS = {
    'SURGEON': Surgeon,
    'ANESTHESIOLOGIST': Anesthesiologist,
}


def get_role_model(role):
    try:
        return ROLE_MODELS[(role or '').upper()]
    except KeyError:
        raise ValidationError(f"Unknown professional role {role}.")


class DirectoryService:
    """Providers and the professionals that belong to them"""

    @staticmethod
    @transaction.atomic
    def create_professional(role, password, provider_id=None, **fields):
        """
        Register a surgeon or anesthesiologist

        Args:
            role (str): SURGEON or ANESTHESIOLOGIST
            password (str): Raw password, stored hashed
            provider_id: Optional provider to link the professional to
            **fields: Names, license number and (surgeons only) specialty

        Returns:
            Surgeon | Anesthesiologist: The created professional

        Raises:
            ValidationError: Unknown role
            NotFoundError: Unknown provider
            ConflictError: License number already registered
        """
        model = get_role_model(role)
        if model is not Surgeon:
            fields.pop('specialty', None)

        license_number = fields.get('professional_license_number')
        if model.objects.filter(professional_license_number=license_number).exists():
            raise ConflictError(f"License number {license_number} is already registered.")

        provider = None
        if provider_id:
            provider = get_object_or_not_found(HealthProvider, provider_id, 'Health provider')

        professional = model(**fields)
        professional.set_password(password)
        professional.save()

        if provider is not None:
            professional.providers.add(provider)

        logger.info(f"{model.__name__} {professional.id} registered with license {license_number}")
        return professional

    @staticmethod
    def create_provider(**fields):
        """
        Register a health provider

        Raises:
            ConflictError: A provider with the same name exists
        """
        name = fields.get('name')
        if HealthProvider.objects.filter(name__iexact=name).exists():
            raise ConflictError(f"Health provider {name} already exists.")

        provider = HealthProvider.objects.create(**fields)
        logger.info(f"Health provider {provider.id} created")
        return provider

    @staticmethod
    def add_professional(provider_id, professional_id, role):
        """
        Link an existing professional to a provider; linking twice is a no-op

        Returns:
            Surgeon | Anesthesiologist: The linked professional
        """
        provider = get_object_or_not_found(HealthProvider, provider_id, 'Health provider')
        model = get_role_model(role)
        professional = get_object_or_not_found(model, professional_id, model._meta.verbose_name.capitalize())

        professional.providers.add(provider)
        logger.info(f"{model.__name__} {professional.id} linked to provider {provider.id}")
        return professional
