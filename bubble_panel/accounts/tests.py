"""
Тесты Identity Binding: профиль по principal id, выбор роли, JWT.
"""
import time

import jwt
from django.conf import settings
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from core.exceptions import ValidationError

from .models import User
from .services import bind_or_create_profile, select_role


def make_provider_token(sub, **claims):
    payload = {'sub': sub, 'exp': int(time.time()) + 300, **claims}
    return jwt.encode(payload, settings.SIMPLE_JWT['SIGNING_KEY'], algorithm='HS256')


class BindOrCreateProfileTests(TestCase):

    def test_first_sight_creates_unset_profile(self):
        user = bind_or_create_profile('principal-1', {'display_name': 'Asha', 'email': 'asha@example.com'})

        self.assertEqual(user.pk, 'principal-1')
        self.assertEqual(user.role, User.Role.UNSET)
        self.assertIsNone(user.school_id)
        self.assertEqual(user.classrooms.count(), 0)
        self.assertEqual(user.display_name, 'Asha')
        self.assertFalse(user.has_usable_password())

    def test_second_sight_returns_existing_profile_unchanged(self):
        first = bind_or_create_profile('principal-1', {'display_name': 'Asha'})
        select_role(first, User.Role.STUDENT)

        again = bind_or_create_profile('principal-1', {'display_name': 'Someone Else'})

        self.assertEqual(User.objects.filter(pk='principal-1').count(), 1)
        self.assertEqual(again.display_name, 'Asha')
        self.assertEqual(again.role, User.Role.STUDENT)

    def test_unknown_fields_are_ignored(self):
        user = bind_or_create_profile('principal-2', {'role': 'teacher', 'is_staff': True})
        self.assertEqual(user.role, User.Role.UNSET)
        self.assertFalse(user.is_staff)

    def test_empty_principal_rejected(self):
        with self.assertRaises(ValidationError):
            bind_or_create_profile('')


class SelectRoleTests(TestCase):

    def setUp(self):
        self.user = bind_or_create_profile('principal-1')

    def test_role_selected_once(self):
        select_role(self.user, User.Role.TEACHER)
        self.user.refresh_from_db()
        self.assertEqual(self.user.role, User.Role.TEACHER)

    def test_same_role_again_is_noop(self):
        select_role(self.user, User.Role.STUDENT)
        select_role(self.user, User.Role.STUDENT)
        self.assertEqual(User.objects.get(pk='principal-1').role, User.Role.STUDENT)

    def test_changing_role_rejected(self):
        select_role(self.user, User.Role.STUDENT)
        with self.assertRaises(ValidationError):
            select_role(self.user, User.Role.TEACHER)
        self.assertEqual(User.objects.get(pk='principal-1').role, User.Role.STUDENT)

    def test_stale_instance_cannot_override_role(self):
        stale = User.objects.get(pk='principal-1')
        select_role(self.user, User.Role.STUDENT)
        with self.assertRaises(ValidationError):
            select_role(stale, User.Role.TEACHER)

    def test_unknown_role_rejected(self):
        with self.assertRaises(ValidationError):
            select_role(self.user, 'principal')
        with self.assertRaises(ValidationError):
            select_role(self.user, User.Role.UNSET)


class IdentityApiTests(APITestCase):

    def test_unauthenticated_request_rejected(self):
        response = self.client.get('/api/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(User.objects.exists())

    def test_provider_token_binds_profile_on_first_request(self):
        token = make_provider_token('google-oauth2|42', name='Ravi', email='ravi@example.com')
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

        response = self.client.get('/api/me/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], 'google-oauth2|42')
        self.assertEqual(response.data['role'], 'unset')
        self.assertEqual(response.data['display_name'], 'Ravi')
        self.assertTrue(User.objects.filter(pk='google-oauth2|42').exists())

        self.client.get('/api/me/')
        self.assertEqual(User.objects.count(), 1)

    def test_token_with_wrong_signature_rejected(self):
        token = jwt.encode({'sub': 'x', 'exp': int(time.time()) + 300}, 'not-the-key-' * 4, algorithm='HS256')
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        response = self.client.get('/api/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_select_role_endpoint(self):
        user = bind_or_create_profile('principal-1')
        self.client.force_authenticate(user=user)

        response = self.client.post('/api/me/role/', {'role': 'student'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['role'], 'student')

        response = self.client.post('/api/me/role/', {'role': 'teacher'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
