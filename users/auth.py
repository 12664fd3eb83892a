# users/auth.py
from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.utils.module_loading import import_string


class PasswordVerifier:
    """
    Interface for password storage and verification.

    Implementations must never store or return the raw password.
    """

    def hash(self, raw_password):
        raise NotImplementedError

    def verify(self, raw_password, stored_hash):
        raise NotImplementedError


class DjangoPasswordVerifier(PasswordVerifier):
    """Uses Django's configured PASSWORD_HASHERS (PBKDF2 by default)"""

    def hash(self, raw_password):
        return make_password(raw_password)

    def verify(self, raw_password, stored_hash):
        return check_password(raw_password, stored_hash)


def get_password_verifier():
    """
    Instantiate the verifier named by the ``PASSWORD_VERIFIER`` setting.

    Returns:
        PasswordVerifier: The configured verifier
    """
    verifier_class = import_string(settings.PASSWORD_VERIFIER)
    return verifier_class()
