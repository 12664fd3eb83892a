# healthcare/services/medication_ai_service.py
import json
import logging
import re
from typing import List

import google.generativeai as genai
from django.conf import settings
from pydantic import BaseModel, Field, ValidationError as SchemaError

from consentflow.exceptions import UpstreamError, ValidationError

logger = logging.getLogger(__name__)

GENERATION_CONFIG = {
    "temperature": 0.2,
    "response_mime_type": "application/json",
}


# Answer contract the model must follow
class MedicationSuggestion(BaseModel):
    instructions_text: str = Field(..., alias="instructionsText", min_length=1)
    medications_to_suspend: List[str] = Field(default_factory=list, alias="medicationsToSuspend")


def build_prompt(medications_text, procedure_text):
    return f"""
Un paciente toma "{medications_text}" y será operado de "{procedure_text}".

Devuelve SOLO un objeto JSON, sin texto adicional, con estas claves:
{{
  "instructionsText": "instrucciones para el paciente sobre su medicación antes de la cirugía",
  "medicationsToSuspend": ["nombre de cada medicamento que debe suspender"]
}}
""".strip()


def extract_json_object(text):
    """Return the first {...} block when the model wraps the JSON in extra text"""
    text = (text or "").strip()
    if text.startswith("{") and text.endswith("}"):
        return text
    match = re.search(r"\{.*\}", text, flags=re.DOTALL)
    return match.group(0) if match else text


class MedicationAIService:
    """Medication suspension suggestions from Gemini"""

    @staticmethod
    def suggest_suspensions(medications_text, procedure_text):
        """
        Ask the model which medications to stop before a procedure

        The suggestion is advisory only; nothing is stored.

        Args:
            medications_text (str): What the patient currently takes
            procedure_text (str): The scheduled procedure

        Returns:
            dict: ``instructions_text`` (str) and ``medications_to_suspend`` (list of str)

        Raises:
            ValidationError: If either input is empty
            UpstreamError: Missing API key, API failure or an unusable answer
        """
        if not medications_text or not procedure_text:
            raise ValidationError('Medications and surgical procedure are required.')

        if not settings.GEMINI_API_KEY:
            logger.error("Medication suggestion requested but GEMINI_API_KEY is not set")
            raise UpstreamError('The AI service is not configured.')

        try:
            genai.configure(api_key=settings.GEMINI_API_KEY)
            model = genai.GenerativeModel(settings.GEMINI_MODEL, generation_config=GENERATION_CONFIG)
            resp = model.generate_content(build_prompt(medications_text, procedure_text))
            raw = (resp.text or "").strip()
        except Exception as e:
            logger.error(f"Gemini request failed: {str(e)}")
            raise UpstreamError('The AI service failed to answer.')

        try:
            suggestion = MedicationSuggestion.model_validate(json.loads(extract_json_object(raw)))
        except (json.JSONDecodeError, SchemaError):
            logger.error(f"Gemini returned an unusable answer: {raw[:200]}")
            raise UpstreamError('The AI service returned an invalid answer.')

        return {
            'instructions_text': suggestion.instructions_text,
            'medications_to_suspend': [name.strip() for name in suggestion.medications_to_suspend if name.strip()],
        }
