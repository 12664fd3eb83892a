# healthcare/tests/test_services/test_medication_ai_service.py
from unittest.mock import MagicMock, patch

from django.test import SimpleTestCase, override_settings

from consentflow.exceptions import UpstreamError, ValidationError
from healthcare.services.medication_ai_service import MedicationAIService, extract_json_object


@override_settings(GEMINI_API_KEY='test-key', GEMINI_MODEL='gemini-2.5-flash')
class MedicationAIServiceTest(SimpleTestCase):
    """Test suite for the Gemini medication suggestions"""

    def mock_model(self, mock_genai, text=None, error=None):
        model = MagicMock()
        if error:
            model.generate_content.side_effect = error
        else:
            model.generate_content.return_value = MagicMock(text=text)
        mock_genai.GenerativeModel.return_value = model
        return model

    @patch('healthcare.services.medication_ai_service.genai')
    def test_suggest_suspensions(self, mock_genai):
        model = self.mock_model(
            mock_genai,
            '{"instructionsText": "Suspender aspirina 7 días antes.", "medicationsToSuspend": ["Aspirina"]}'
        )

        result = MedicationAIService.suggest_suspensions('Aspirina 100mg, Losartán', 'Colecistectomía')

        self.assertEqual(result, {
            'instructions_text': 'Suspender aspirina 7 días antes.',
            'medications_to_suspend': ['Aspirina'],
        })
        mock_genai.configure.assert_called_once_with(api_key='test-key')
        self.assertEqual(mock_genai.GenerativeModel.call_args.args[0], 'gemini-2.5-flash')
        prompt = model.generate_content.call_args.args[0]
        self.assertIn('Aspirina 100mg, Losartán', prompt)
        self.assertIn('Colecistectomía', prompt)

    @patch('healthcare.services.medication_ai_service.genai')
    def test_json_wrapped_in_text(self, mock_genai):
        self.mock_model(
            mock_genai,
            'Claro:\n```json\n{"instructionsText": "Nada que suspender.", "medicationsToSuspend": []}\n```'
        )

        result = MedicationAIService.suggest_suspensions('Paracetamol', 'Biopsia')

        self.assertEqual(result['medications_to_suspend'], [])

    @patch('healthcare.services.medication_ai_service.genai')
    def test_missing_inputs(self, mock_genai):
        with self.assertRaises(ValidationError):
            MedicationAIService.suggest_suspensions('', 'Colecistectomía')
        with self.assertRaises(ValidationError):
            MedicationAIService.suggest_suspensions('Aspirina', None)
        mock_genai.GenerativeModel.assert_not_called()

    @override_settings(GEMINI_API_KEY=None)
    @patch('healthcare.services.medication_ai_service.genai')
    def test_missing_api_key(self, mock_genai):
        with self.assertRaises(UpstreamError):
            MedicationAIService.suggest_suspensions('Aspirina', 'Colecistectomía')
        mock_genai.GenerativeModel.assert_not_called()

    @patch('healthcare.services.medication_ai_service.genai')
    def test_api_failure(self, mock_genai):
        self.mock_model(mock_genai, error=RuntimeError('quota exceeded'))

        with self.assertRaises(UpstreamError):
            MedicationAIService.suggest_suspensions('Aspirina', 'Colecistectomía')

    @patch('healthcare.services.medication_ai_service.genai')
    def test_malformed_json(self, mock_genai):
        self.mock_model(mock_genai, 'no es json')

        with self.assertRaises(UpstreamError):
            MedicationAIService.suggest_suspensions('Aspirina', 'Colecistectomía')

    def test_extract_json_object(self):
        self.assertEqual(extract_json_object('{"a": 1}'), '{"a": 1}')
        self.assertEqual(extract_json_object('texto {"a": 1} fin'), '{"a": 1}')

    @patch('healthcare.services.medication_ai_service.genai')
    def test_wrong_value_types(self, mock_genai):
        self.mock_model(
            mock_genai,
            '{"instructionsText": {"a": 1}, "medicationsToSuspend": [{"name": "x"}, 5]}'
        )

        with self.assertRaises(UpstreamError):
            MedicationAIService.suggest_suspensions('Aspirina', 'Colecistectomía')

    @patch('healthcare.services.medication_ai_service.genai')
    def test_medication_names_must_be_strings(self, mock_genai):
        self.mock_model(mock_genai, '{"instructionsText": "Suspender.", "medicationsToSuspend": [5]}')

        with self.assertRaises(UpstreamError):
            MedicationAIService.suggest_suspensions('Aspirina', 'Colecistectomía')

    @patch('healthcare.services.medication_ai_service.genai')
    def test_missing_instructions(self, mock_genai):
        self.mock_model(mock_genai, '{"medicationsToSuspend": ["Aspirina"]}')

        with self.assertRaises(UpstreamError):
            MedicationAIService.suggest_suspensions('Aspirina', 'Colecistectomía')

    @patch('healthcare.services.medication_ai_service.genai')
    def test_answer_must_be_an_object(self, mock_genai):
        self.mock_model(mock_genai, '["Aspirina"]')

        with self.assertRaises(UpstreamError):
            MedicationAIService.suggest_suspensions('Aspirina', 'Colecistectomía')
