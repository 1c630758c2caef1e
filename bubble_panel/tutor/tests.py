from unittest import mock

import requests
from django.test import TestCase, override_settings
from rest_framework import status
from rest_framework.test import APITestCase

from accounts.models import User
from core.exceptions import CompletionServiceError, ValidationError
from tenants.models import School

from .client import CompletionError, GeminiCompletionClient
from .models import TutorExchange
from .services import ask_tutor, list_tutor_exchanges


class StubClient:

    def __init__(self, answer=None, error=None):
        self.answer = answer
        self.error = error
        self.prompts = []

    def complete(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise CompletionError(self.error)
        return self.answer


class AskTutorTests(TestCase):

    def setUp(self):
        self.school = School.objects.create(name='Green Valley', admin_email='a@gv.edu')
        self.student = User.objects.create_user('s-1', role=User.Role.STUDENT, school=self.school)

    def test_answer_is_logged(self):
        client = StubClient(answer='Photosynthesis is how plants make food.')

        exchange = ask_tutor(self.student, '  What is photosynthesis? ', client=client)

        self.assertEqual(client.prompts, ['Explain this simply to a student: What is photosynthesis?'])
        self.assertEqual(exchange.response, 'Photosynthesis is how plants make food.')
        self.assertIsNone(exchange.error)
        self.assertEqual(exchange.school, self.school)

    def test_lab_mode_sends_prompt_as_is(self):
        client = StubClient(answer='ok')
        ask_tutor(self.student, 'Design an experiment', mode=TutorExchange.Mode.LAB, client=client)
        self.assertEqual(client.prompts, ['Design an experiment'])

    def test_failure_is_logged_and_raised(self):
        with self.assertRaises(CompletionServiceError):
            ask_tutor(self.student, 'Why is the sky blue?', client=StubClient(error='timeout'))

        exchange = TutorExchange.objects.get()
        self.assertIsNone(exchange.response)
        self.assertEqual(exchange.error, 'timeout')

    def test_empty_prompt(self):
        with self.assertRaises(ValidationError):
            ask_tutor(self.student, '   ', client=StubClient(answer='x'))
        self.assertFalse(TutorExchange.objects.exists())

    def test_exchanges_scoped_to_teacher_school(self):
        other_school = School.objects.create(name='Hill Side', admin_email='a@hs.edu')
        outsider = User.objects.create_user('s-2', role=User.Role.STUDENT, school=other_school)
        teacher = User.objects.create_user('t-1', role=User.Role.TEACHER, school=self.school)
        ask_tutor(self.student, 'Q1', client=StubClient(answer='A1'))
        ask_tutor(outsider, 'Q2', client=StubClient(answer='A2'))
        ask_tutor(teacher, 'Q3', client=StubClient(answer='A3'))

        exchanges = list_tutor_exchanges(teacher)

        self.assertEqual([e.prompt for e in exchanges], ['Q1'])


@override_settings(GEMINI_API_KEY='test-key', GEMINI_MODEL='gemini-2.5-flash', TUTOR_TIMEOUT_SECONDS=3)
class GeminiClientTests(TestCase):

    @mock.patch('tutor.client.requests.post')
    def test_extracts_text(self, post):
        post.return_value.json.return_value = {
            'candidates': [{'content': {'parts': [{'text': 'Plants use sunlight.'}]}}],
        }

        answer = GeminiCompletionClient().complete('Explain photosynthesis')

        self.assertEqual(answer, 'Plants use sunlight.')
        _, kwargs = post.call_args
        self.assertEqual(kwargs['timeout'], 3)
        self.assertEqual(kwargs['params'], {'key': 'test-key'})
        self.assertIn('gemini-2.5-flash:generateContent', post.call_args[0][0])

    @mock.patch('tutor.client.requests.post', side_effect=requests.Timeout('slow'))
    def test_timeout(self, _post):
        with self.assertRaises(CompletionError):
            GeminiCompletionClient().complete('Explain')

    @mock.patch('tutor.client.requests.post')
    def test_unexpected_payload(self, post):
        post.return_value.json.return_value = {'candidates': []}
        with self.assertRaises(CompletionError):
            GeminiCompletionClient().complete('Explain')

    @override_settings(GEMINI_API_KEY='')
    def test_missing_key(self):
        with self.assertRaises(CompletionError):
            GeminiCompletionClient().complete('Explain')


class TutorApiTests(APITestCase):

    def setUp(self):
        self.school = School.objects.create(name='Green Valley', admin_email='a@gv.edu')
        self.student = User.objects.create_user('s-1', role=User.Role.STUDENT, school=self.school)
        self.teacher = User.objects.create_user('t-1', role=User.Role.TEACHER, school=self.school)

    @mock.patch.object(GeminiCompletionClient, 'complete', return_value='Gravity pulls things down.')
    def test_ask_and_review(self, _complete):
        self.client.force_authenticate(user=self.student)
        response = self.client.post('/api/tutor/ask/', {'prompt': 'What is gravity?'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['response'], 'Gravity pulls things down.')

        self.client.force_authenticate(user=self.teacher)
        response = self.client.get('/api/tutor/exchanges/')
        self.assertEqual(len(response.data), 1)

    @mock.patch.object(GeminiCompletionClient, 'complete', side_effect=CompletionError('down'))
    def test_service_down(self, _complete):
        self.client.force_authenticate(user=self.student)
        response = self.client.post('/api/tutor/ask/', {'prompt': 'What is gravity?'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(TutorExchange.objects.count(), 1)

    def test_students_cannot_read_log(self):
        self.client.force_authenticate(user=self.student)
        self.assertEqual(self.client.get('/api/tutor/exchanges/').status_code, status.HTTP_403_FORBIDDEN)
