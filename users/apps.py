# users/apps.py
from django.apps import AppConfig

class UsersConfig(AppConfig):
    """
    Application configuration for the users app.

    This app holds the accounts that log in with a password (surgeons,
    anesthesiologists, administrators) and the health providers they belong to.
    """
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'users'
