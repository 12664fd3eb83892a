# users/services/auth_service.py
import logging

from django.utils.crypto import constant_time_compare

from consentflow.exceptions import AuthError, ValidationError
from ..models import AccessToken, Administrator, Anesthesiologist, Surgeon

logger = logging.getLogger(__name__)

PROFESSIONAL_MODELS = {
    'surgeon': Surgeon,
    'anesthesiologist': Anesthesiologist,
}


class AuthService:
    """Credential checks for every login form of the application"""

    @staticmethod
    def authenticate_professional(role, license_number, password):
        """
        Log in a surgeon or anesthesiologist by license number

        Args:
            role (str): 'surgeon' or 'anesthesiologist'
            license_number (str): Professional license number
            password (str): Submitted password

        Returns:
            Surgeon | Anesthesiologist: The matching professional

        Raises:
            ValidationError: If a field is missing
            AuthError: If the credentials do not match
        """
        if not license_number or not password:
            raise ValidationError('License number and password are required.')

        model = PROFESSIONAL_MODELS[role]
        professional = model.objects.filter(professional_license_number=license_number).first()

        if professional is None or not professional.check_password(password):
            logger.info(f"Failed {role} login for license {license_number}")
            raise AuthError()

        return professional

    @staticmethod
    def authenticate_admin(email, password):
        """Log in an administrator by email and password"""
        if not email or not password:
            raise ValidationError('Email and password are required.')

        admin = Administrator.objects.filter(email__iexact=email).first()
        if admin is None or not admin.check_password(password):
            logger.info(f"Failed administrator login for {email}")
            raise AuthError()

        return admin

    @staticmethod
    def authenticate_patient(email, cedula):
        """
        Log in a patient with the (email, cedula) pair

        Args:
            email (str): Patient email
            cedula (str): National ID, used as the patient password

        Returns:
            Patient: The matching patient record

        Raises:
            ValidationError: If a field is missing
            AuthError: If no patient matches the pair
        """
        from healthcare.models import Patient

        if not email or not cedula:
            raise ValidationError('Email and cedula are required.')

        for patient in Patient.objects.with_relations().filter(email__iexact=email):
            if constant_time_compare(patient.cedula, cedula):
                return patient

        logger.info(f"Failed patient login for {email}")
        raise AuthError()

    @staticmethod
    def issue_token(role, account):
        """
        Return the account's API token, replacing it once it has expired

        Args:
            role (str): One of the ``users.models.ROLE_*`` values
            account: The authenticated surgeon, anesthesiologist, administrator or patient

        Returns:
            AccessToken: The token to send as ``Authorization: Token <key>``
        """
        token, created = AccessToken.objects.get_or_create(role=role, account_id=account.pk)
        if not created and token.is_expired():
            token.delete()
            token = AccessToken.objects.create(role=role, account_id=account.pk)

        logger.info(f"{role} {account.pk} logged in")
        return token

    @staticmethod
    def revoke_token(token):
        """Log out: the token stops working immediately"""
        logger.info(f"{token.role} {token.account_id} logged out")
        token.delete()
