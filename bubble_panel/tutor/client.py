"""
Клиент текстовой модели (Google Gemini, REST без SDK).
"""
import json
import logging

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

GEMINI_URL = 'https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent'


class CompletionError(Exception):
    """Модель недоступна или вернула что-то непонятное."""


class GeminiCompletionClient:

    def __init__(self, api_key=None, model=None, timeout=None):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model = model or getattr(settings, 'GEMINI_MODEL', 'gemini-2.5-flash')
        self.timeout = timeout or getattr(settings, 'TUTOR_TIMEOUT_SECONDS', 8)

    def complete(self, prompt: str) -> str:
        if not self.api_key:
            raise CompletionError('GEMINI_API_KEY is not configured')

        payload = {
            'contents': [
                {
                    'role': 'user',
                    'parts': [{'text': prompt}],
                }
            ],
            'generationConfig': {
                'temperature': 0.4,
                'maxOutputTokens': 1024,
            },
        }
        try:
            resp = requests.post(
                GEMINI_URL.format(model=self.model),
                params={'key': self.api_key},
                json=payload,
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as exc:
            raise CompletionError(f'Gemini request failed: {exc}') from exc
        except ValueError as exc:
            raise CompletionError('Gemini returned invalid JSON') from exc

        try:
            return data['candidates'][0]['content']['parts'][0]['text']
        except (KeyError, IndexError, TypeError) as exc:
            logger.error('Gemini unexpected response: %s', json.dumps(data, ensure_ascii=False)[:500])
            raise CompletionError(f'Unexpected Gemini response format: {exc}') from exc
