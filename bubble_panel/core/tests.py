from unittest import mock

from django.db import IntegrityError, OperationalError
from django.test import TestCase

from accounts.models import User
from tenants.models import School

from .exceptions import CurriculumCloneError, TransientStorageError
from .models import AuditLog
from .storage import storage_call


class StorageCallTests(TestCase):

    def test_operational_error_becomes_transient(self):
        @storage_call
        def flaky():
            raise OperationalError('database is locked')

        with self.assertRaises(TransientStorageError):
            flaky()

    def test_context_manager_translates_too(self):
        with self.assertRaises(TransientStorageError):
            with storage_call('read'):
                raise OperationalError('timeout')

    def test_integrity_error_is_not_transient(self):
        @storage_call
        def conflicting():
            raise IntegrityError('duplicate')

        with self.assertRaises(IntegrityError):
            conflicting()

    def test_result_passes_through(self):
        @storage_call
        def ok(value):
            return value * 2

        self.assertEqual(ok(21), 42)

    @mock.patch('core.storage.time')
    def test_slow_operation_logged(self, mock_time):
        mock_time.monotonic.side_effect = [0.0, 1.0]
        with self.assertLogs('core.storage', level='WARNING') as logs:
            with storage_call('slow_op'):
                pass
        self.assertIn('slow_op', logs.output[0])


class ErrorTaxonomyTests(TestCase):

    def test_clone_error_is_retryable_and_carries_school(self):
        exc = CurriculumCloneError('8c1f')
        self.assertIsInstance(exc, TransientStorageError)
        self.assertEqual(exc.status_code, 503)
        self.assertEqual(exc.school_id, '8c1f')
        self.assertEqual(exc.detail['school_id'], '8c1f')


class AuditLogTests(TestCase):

    def test_log_records_object_reference(self):
        user = User.objects.create_user('admin-1', is_staff=True)
        school = School.objects.create(name='Green Valley', admin_email='a@gv.edu')

        entry = AuditLog.log(
            user=user,
            action='onboard',
            content_object=school,
            description='School onboarded',
            metadata={'max_students': 10},
        )

        self.assertEqual(entry.object_type, 'tenants.school')
        self.assertEqual(entry.object_id, str(school.pk))
        self.assertEqual(entry.user, user)
        self.assertEqual(entry.metadata, {'max_students': 10})

    def test_system_action_without_user(self):
        entry = AuditLog.log(user=None, action='clone', description='retry')
        self.assertIsNone(entry.user)
        self.assertEqual(entry.object_type, '')


class HealthAndMetricsTests(TestCase):

    def test_health_endpoints(self):
        response = self.client.get('/api/health/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['checks']['database'], 'ok')

        self.assertEqual(self.client.get('/api/health/ready/').json(), {'ready': True})
        self.assertTrue(self.client.get('/api/health/live/').json()['alive'])

    def test_request_duration_header(self):
        response = self.client.get('/api/health/live/')
        self.assertIn('X-Request-Duration', response)
