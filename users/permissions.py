# users/permissions.py
from rest_framework import permissions

from .models import ROLE_ADMINISTRATOR, ROLE_ANESTHESIOLOGIST, ROLE_PATIENT, ROLE_SURGEON

STAFF_ROLES = (ROLE_SURGEON, ROLE_ANESTHESIOLOGIST, ROLE_ADMINISTRATOR)


def has_role(request, *roles):
    user = request.user
    return bool(user and user.is_authenticated and getattr(user, 'role', None) in roles)


def is_patient_owner(request, view):
    """The authenticated patient is the patient named in the URL"""
    return (
        has_role(request, ROLE_PATIENT)
        and str(request.user.id) == str(view.kwargs.get('pk'))
    )


class IsSurgeon(permissions.BasePermission):
    def has_permission(self, request, view):
        return has_role(request, ROLE_SURGEON)


class IsAnesthesiologist(permissions.BasePermission):
    def has_permission(self, request, view):
        return has_role(request, ROLE_ANESTHESIOLOGIST)


class IsProfessional(permissions.BasePermission):
    """Surgeons and anesthesiologists"""
    def has_permission(self, request, view):
        return has_role(request, ROLE_SURGEON, ROLE_ANESTHESIOLOGIST)


class IsAdministrator(permissions.BasePermission):
    def has_permission(self, request, view):
        return has_role(request, ROLE_ADMINISTRATOR)


class IsStaffMember(permissions.BasePermission):
    """
    Professionals and administrators.

    Patients never see other patients or the professional directory.
    """
    def has_permission(self, request, view):
        return has_role(request, *STAFF_ROLES)


class IsPatientOwner(permissions.BasePermission):
    """Only the patient themself, e.g. to sign their consents"""
    def has_permission(self, request, view):
        return is_patient_owner(request, view)


class IsStaffOrPatientOwner(permissions.BasePermission):
    """
    Allow access if the user is:
    1. A professional or an administrator, or
    2. The patient the record belongs to
    """
    def has_permission(self, request, view):
        return has_role(request, *STAFF_ROLES) or is_patient_owner(request, view)
