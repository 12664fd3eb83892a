# users/authentication.py
import logging

from rest_framework import exceptions
from rest_framework.authentication import TokenAuthentication

logger = logging.getLogger(__name__)


class AuthenticatedAccount:
    """
    ``request.user`` for a token-authenticated request.

    Wraps the surgeon, anesthesiologist, administrator or patient the token
    belongs to, together with the role it logged in as.
    """
    is_authenticated = True
    is_anonymous = False

    def __init__(self, role, account):
        self.role = role
        self.account = account

    @property
    def id(self):
        return self.account.pk

    def __str__(self):
        return f"{self.role}:{self.account.pk}"


class AccessTokenAuthentication(TokenAuthentication):
    """
    ``Authorization: Token <key>`` checked against ``users.AccessToken``

    Expired tokens are deleted on first use.
    """

    def authenticate_credentials(self, key):
        from .models import AccessToken

        try:
            token = AccessToken.objects.get(key=key)
        except AccessToken.DoesNotExist:
            raise exceptions.AuthenticationFailed('Invalid token.')

        if token.is_expired():
            logger.info(f"Expired {token.role} token for {token.account_id} rejected")
            token.delete()
            raise exceptions.AuthenticationFailed('Token has expired.')

        account = token.get_account()
        if account is None:
            token.delete()
            raise exceptions.AuthenticationFailed('Invalid token.')

        return (AuthenticatedAccount(token.role, account), token)
