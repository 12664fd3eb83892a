# healthcare/services/status_service.py
"""
Derived patient status.

Everything here is a pure function of the stored patient fields and the
current time. Nothing is persisted, so callers must recompute on every read.
"""
from collections import namedtuple
from datetime import datetime, time, timedelta, timezone as dt_timezone

from django.conf import settings
from django.utils import timezone

EPOCH = datetime(1970, 1, 1, tzinfo=dt_timezone.utc)

PatientStatus = namedtuple('PatientStatus', ['age', 'is_archived', 'is_action_required'])


def calculate_age(date_of_birth, now):
    """
    Age in whole years.

    Maps the elapsed time since birth onto the epoch and reads the year, so
    leap days make it drift by one around birthdays.

    Args:
        date_of_birth (date | datetime): Birth date; plain dates are taken at UTC midnight
        now (datetime): Aware reference time

    Returns:
        int: Age in years
    """
    if not isinstance(date_of_birth, datetime):
        date_of_birth = datetime.combine(date_of_birth, time.min, tzinfo=dt_timezone.utc)
    elif timezone.is_naive(date_of_birth):
        date_of_birth = timezone.make_aware(date_of_birth, dt_timezone.utc)

    elapsed = now - date_of_birth
    return abs((EPOCH + elapsed).year - 1970)


def is_archived(surgery_date_time, now):
    """True once the scheduled surgery is in the past"""
    if surgery_date_time is None:
        return False
    return surgery_date_time < now


def get_action_window():
    return timedelta(days=settings.ACTION_REQUIRED_WINDOW_DAYS)


def needs_signature(patient):
    """Whether the patient still owes a signature on any consent"""
    if patient.surgical_signature_image is None:
        return True

    if patient.anesthesia_consent_id is None:
        return settings.ACTION_REQUIRED_WHEN_ANESTHESIA_MISSING

    return patient.anesthesia_signature_image is None


def is_action_required(patient, now):
    """
    True when the surgery is close and consents are still unsigned.

    Args:
        patient: Patient snapshot (model instance or any object with the same fields)
        now (datetime): Aware reference time

    Returns:
        bool: Whether someone must act before the surgery
    """
    surgery_date_time = patient.surgery_date_time
    if surgery_date_time is None or is_archived(surgery_date_time, now):
        return False

    if surgery_date_time > now + get_action_window():
        return False

    return needs_signature(patient)


def derive_status(patient, now=None):
    """
    Compute every derived value for a patient at once

    Returns:
        PatientStatus: (age, is_archived, is_action_required)
    """
    now = now or timezone.now()
    return PatientStatus(
        age=calculate_age(patient.date_of_birth, now),
        is_archived=is_archived(patient.surgery_date_time, now),
        is_action_required=is_action_required(patient, now),
    )
