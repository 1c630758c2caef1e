"""
Тесты Tenant Directory: подключение школы, клонирование мастер-программы,
привязка учителя и лимит учеников.
"""
from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import OperationalError
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from accounts.models import User
from core.exceptions import CurriculumCloneError, TenantLimitError, TenantMismatch, ValidationError
from core.models import AuditLog
from curriculum.models import CurriculumWeek
from curriculum.services import create_week, list_weeks, publish_week

from .limits import check_student_capacity
from .models import School
from .services import (
    assign_teacher_school,
    clone_master_curriculum,
    onboard_school,
    recalculate_student_count,
)


def seed_master_curriculum():
    quiz = [{'text': 'What is H2O?', 'options': ['Water', 'Salt'], 'correct_option_index': 0}]
    weeks = [
        create_week(None, 6, 1, 'Week 1: Matter', 'States of matter', quiz=quiz, week_id='g6-w1'),
        create_week(None, 6, 2, 'Week 2: Energy', 'Forms of energy', week_id='g6-w2'),
        create_week(None, 6, 3, 'Week 3: Light', 'Reflection', week_id='g6-w3'),
    ]
    publish_week(weeks[0])
    return weeks


class OnboardSchoolTests(TestCase):

    def setUp(self):
        self.master = seed_master_curriculum()

    def test_onboard_creates_school_with_cloned_curriculum(self):
        school = onboard_school('Green Valley', 'admin@gv.edu', 500)

        self.assertEqual(school.max_students, 500)
        self.assertEqual(school.student_count, 0)
        self.assertTrue(school.is_active)
        self.assertEqual(school.plan, 'enterprise_yearly')
        self.assertEqual(school.region, 'IN')

        weeks = list_weeks(school, 6)
        self.assertEqual([w.order for w in weeks], [1, 2, 3])
        self.assertEqual([w.week_id for w in weeks], ['g6-w1', 'g6-w2', 'g6-w3'])
        self.assertTrue(weeks[0].is_published)
        self.assertFalse(weeks[1].is_published)
        self.assertEqual(weeks[0].quiz, self.master[0].quiz)

        self.assertTrue(AuditLog.objects.filter(action='onboard', object_id=str(school.pk)).exists())

    def test_onboard_validation(self):
        with self.assertRaises(ValidationError):
            onboard_school('', 'admin@gv.edu', 10)
        with self.assertRaises(ValidationError):
            onboard_school('Green Valley', 'not-an-email', 10)
        with self.assertRaises(ValidationError):
            onboard_school('Green Valley', 'admin@gv.edu', 0)
        self.assertFalse(School.objects.exists())

    def test_clone_is_idempotent(self):
        school = onboard_school('Green Valley', 'admin@gv.edu', 50)

        copied = clone_master_curriculum(school)

        self.assertEqual(copied, 3)
        self.assertEqual(CurriculumWeek.objects.in_namespace(school).count(), 3)

    def test_reclone_overwrites_same_ids_and_keeps_school_weeks(self):
        school = onboard_school('Green Valley', 'admin@gv.edu', 50)
        create_week(school, 6, 4, 'Local field trip', 'Visit the river', week_id='local-1')
        CurriculumWeek.objects.in_namespace(school, 6).filter(week_id='g6-w2').update(title='Edited')

        clone_master_curriculum(school)

        self.assertEqual(
            CurriculumWeek.objects.in_namespace(school, 6).get(week_id='g6-w2').title,
            'Week 2: Energy',
        )
        self.assertTrue(CurriculumWeek.objects.in_namespace(school, 6).filter(week_id='local-1').exists())

    def test_clone_failure_leaves_school_and_is_retryable(self):
        with mock.patch.object(
            CurriculumWeek.objects, 'update_or_create', side_effect=OperationalError('disk I/O error'),
        ):
            with self.assertRaises(CurriculumCloneError) as ctx:
                onboard_school('Green Valley', 'admin@gv.edu', 50)

        school = School.objects.get(name='Green Valley')
        self.assertEqual(ctx.exception.school_id, school.pk)
        self.assertEqual(CurriculumWeek.objects.in_namespace(school).count(), 0)

        self.assertEqual(clone_master_curriculum(school), 3)
        self.assertEqual(CurriculumWeek.objects.in_namespace(school).count(), 3)

    def test_empty_master_clones_nothing(self):
        CurriculumWeek.objects.master().delete()
        school = onboard_school('Green Valley', 'admin@gv.edu', 50)
        self.assertEqual(CurriculumWeek.objects.in_namespace(school).count(), 0)


class CloneCurriculumCommandTests(TestCase):

    def test_command_clones_into_school(self):
        seed_master_curriculum()
        school = School.objects.create(name='Hill Side', admin_email='a@hs.edu')
        out = StringIO()

        call_command('clone_curriculum', str(school.pk), stdout=out)

        self.assertIn('3 weeks deployed', out.getvalue())
        self.assertEqual(CurriculumWeek.objects.in_namespace(school).count(), 3)


class TeacherAssignmentTests(TestCase):

    def setUp(self):
        self.school = School.objects.create(name='Green Valley', admin_email='a@gv.edu')
        self.other = School.objects.create(name='Hill Side', admin_email='a@hs.edu')

    def test_unset_user_becomes_teacher(self):
        user = User.objects.create_user('t-1')
        assign_teacher_school(user, self.school)
        user.refresh_from_db()
        self.assertEqual(user.role, User.Role.TEACHER)
        self.assertEqual(user.school, self.school)

    def test_school_admin_keeps_role(self):
        user = User.objects.create_user('sa-1', role=User.Role.SCHOOL_ADMIN)
        assign_teacher_school(user, self.school)
        self.assertEqual(User.objects.get(pk='sa-1').role, User.Role.SCHOOL_ADMIN)

    def test_student_refused(self):
        user = User.objects.create_user('s-1', role=User.Role.STUDENT)
        with self.assertRaises(ValidationError):
            assign_teacher_school(user, self.school)

    def test_teacher_of_another_school_refused(self):
        user = User.objects.create_user('t-1', role=User.Role.TEACHER, school=self.other)
        with self.assertRaises(TenantMismatch):
            assign_teacher_school(user, self.school)


class StudentCapacityTests(TestCase):

    def test_limit_reached(self):
        school = School.objects.create(name='Tiny', admin_email='a@tiny.edu', max_students=1)
        check_student_capacity(school)
        User.objects.create_user('s-1', role=User.Role.STUDENT, school=school)

        with self.assertRaises(TenantLimitError):
            check_student_capacity(school)

    def test_recalculate_student_count(self):
        school = School.objects.create(name='Tiny', admin_email='a@tiny.edu', student_count=7)
        User.objects.create_user('s-1', role=User.Role.STUDENT, school=school)
        User.objects.create_user('t-1', role=User.Role.TEACHER, school=school)

        self.assertEqual(recalculate_student_count(school), 1)
        school.refresh_from_db()
        self.assertEqual(school.student_count, 1)

    def test_recalculate_command_fixes_stale_counters(self):
        stale = School.objects.create(name='Stale', admin_email='a@stale.edu', student_count=5)
        fresh = School.objects.create(name='Fresh', admin_email='a@fresh.edu', student_count=1)
        User.objects.create_user('s-1', role=User.Role.STUDENT, school=stale)
        User.objects.create_user('s-2', role=User.Role.STUDENT, school=fresh)
        out = StringIO()

        call_command('recalculate_student_counts', stdout=out)

        self.assertIn('Stale: 5 -> 1', out.getvalue())
        self.assertIn('1 counters changed', out.getvalue())
        stale.refresh_from_db()
        self.assertEqual(stale.student_count, 1)

    def test_recalculate_command_unknown_school(self):
        with self.assertRaises(CommandError):
            call_command('recalculate_student_counts', '--school', 'not-a-uuid', stdout=StringIO())


class SchoolApiTests(APITestCase):

    def setUp(self):
        seed_master_curriculum()
        self.operator = User.objects.create_user('ops-1', is_staff=True)
        self.teacher = User.objects.create_user('t-1', role=User.Role.TEACHER)

    def test_only_platform_staff(self):
        self.client.force_authenticate(user=self.teacher)
        response = self.client.post(
            '/api/schools/',
            {'name': 'Green Valley', 'admin_email': 'a@gv.edu', 'max_students': 500},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_onboard_via_api(self):
        self.client.force_authenticate(user=self.operator)
        response = self.client.post(
            '/api/schools/',
            {'name': 'Green Valley', 'admin_email': 'a@gv.edu', 'max_students': 500},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['max_students'], 500)
        self.assertEqual(response.data['curriculum_weeks_count'], 3)

    @mock.patch('tenants.views.retry_curriculum_clone')
    def test_clone_failure_schedules_retry(self, retry_task):
        self.client.force_authenticate(user=self.operator)
        with mock.patch.object(
            CurriculumWeek.objects, 'update_or_create', side_effect=OperationalError('timeout'),
        ):
            response = self.client.post(
                '/api/schools/',
                {'name': 'Green Valley', 'admin_email': 'a@gv.edu', 'max_students': 500},
                format='json',
            )

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        school = School.objects.get(name='Green Valley')
        self.assertEqual(response.data['school_id'], str(school.pk))
        retry_task.delay.assert_called_once_with(str(school.pk))

    def test_assign_teacher(self):
        school = School.objects.create(name='Green Valley', admin_email='a@gv.edu')
        recruit = User.objects.create_user('t-2')
        self.client.force_authenticate(user=self.operator)

        response = self.client.post(
            f'/api/schools/{school.pk}/teachers/', {'user_id': 't-2'}, format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        recruit.refresh_from_db()
        self.assertEqual(recruit.school, school)
        self.assertEqual(recruit.role, User.Role.TEACHER)
