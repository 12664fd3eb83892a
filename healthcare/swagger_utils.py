# healthcare/swagger_utils.py
"""
Utilities for enhancing Swagger/OpenAPI documentation.
"""
from drf_yasg import openapi


def error_response(description, message):
    """An error response documented with the ``{"error": ...}`` body"""
    return openapi.Response(
        description=description,
        examples={
            "application/json": {
                "error": message
            }
        }
    )


NOT_FOUND = error_response("Not Found", "Patient 6f1c... does not exist.")
INVALID_DATA = error_response("Bad Request", "Invalid data.")
PRECONDITION_FAILED = error_response("Conflict", "The surgical consent is already signed.")


def get_patient_responses(success_code=200, serializer=None):
    """Standard responses for endpoints that return a patient"""
    return {
        success_code: serializer or openapi.Response(description="Success"),
        400: INVALID_DATA,
        404: NOT_FOUND,
        409: PRECONDITION_FAILED,
    }


PATIENT_LIST_PARAMETERS = [
    openapi.Parameter(
        'surgeon', openapi.IN_QUERY,
        description="Only patients of this surgeon (UUID)",
        type=openapi.TYPE_STRING
    ),
    openapi.Parameter(
        'anesthesiologist', openapi.IN_QUERY,
        description="Only patients of this anesthesiologist (UUID)",
        type=openapi.TYPE_STRING
    ),
    openapi.Parameter(
        'archived', openapi.IN_QUERY,
        description="true for past surgeries, false for upcoming ones",
        type=openapi.TYPE_BOOLEAN
    ),
    openapi.Parameter(
        'search', openapi.IN_QUERY,
        description="Match on first name, last name, cedula or email",
        type=openapi.TYPE_STRING
    ),
]
