"""
Тесты Classroom Registry и Enrollment Service.
"""
import re
from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from accounts.models import User
from core.exceptions import (
    ClassKeyNotFound,
    ClassroomLocked,
    MissingSchoolLink,
    TenantLimitError,
    TenantMismatch,
    ValidationError,
)
from tenants.models import School

from .enrollment import find_enrollment_drift, join_classroom
from .models import CLASS_KEY_ALPHABET, Classroom, generate_class_key, normalize_class_key
from .services import create_classroom, list_classrooms_for_teacher, resolve_class_key, set_classroom_lock

CLASS_KEY_RE = re.compile(r'^[%s]{3}-[%s]{3}$' % (CLASS_KEY_ALPHABET, CLASS_KEY_ALPHABET))


class EnrollmentFixtureMixin:

    def make_fixtures(self):
        self.school = School.objects.create(name='Green Valley', admin_email='a@gv.edu', max_students=500)
        self.other_school = School.objects.create(name='Hill Side', admin_email='a@hs.edu')
        self.teacher = User.objects.create_user('t-1', role=User.Role.TEACHER, school=self.school)
        self.student = User.objects.create_user('s-1', role=User.Role.STUDENT, display_name='Meera')
        self.classroom = create_classroom(self.teacher, self.school, 'Science 6A', 6)


class ClassKeyTests(TestCase):

    def test_generated_key_format(self):
        for _ in range(50):
            self.assertRegex(generate_class_key(), CLASS_KEY_RE)

    def test_ambiguous_characters_excluded(self):
        for char in 'IO01':
            self.assertNotIn(char, CLASS_KEY_ALPHABET)

    def test_normalize(self):
        self.assertEqual(normalize_class_key('  abc-def \n'), 'ABC-DEF')
        self.assertEqual(normalize_class_key(None), '')


class CreateClassroomTests(EnrollmentFixtureMixin, TestCase):

    def setUp(self):
        self.make_fixtures()

    def test_new_classroom_defaults(self):
        self.assertRegex(self.classroom.class_key, CLASS_KEY_RE)
        self.assertFalse(self.classroom.is_locked)
        self.assertEqual(self.classroom.students.count(), 0)
        self.assertEqual(self.classroom.school, self.school)

    @mock.patch('classrooms.services.generate_class_key')
    def test_collision_regenerates_key(self, gen):
        gen.side_effect = [self.classroom.class_key, 'XYZ-234']

        second = create_classroom(self.teacher, self.school, 'Science 6B', 6)

        self.assertEqual(second.class_key, 'XYZ-234')
        self.assertEqual(gen.call_count, 2)

    @mock.patch('classrooms.services.Classroom.objects.filter')
    @mock.patch('classrooms.services.generate_class_key')
    def test_insert_race_regenerates_key(self, gen, filter_mock):
        # Проверка "код свободен" пропускает дубликат, ловит unique-констрейнт
        filter_mock.return_value.exists.return_value = False
        gen.side_effect = [self.classroom.class_key, 'XYZ-234']

        second = create_classroom(self.teacher, self.school, 'Science 6B', 6)

        self.assertEqual(second.class_key, 'XYZ-234')

    def test_validation(self):
        with self.assertRaises(ValidationError):
            create_classroom(self.teacher, self.school, '   ', 6)
        with self.assertRaises(ValidationError):
            create_classroom(self.teacher, self.school, 'Science', 13)

    def test_list_for_teacher(self):
        other_teacher = User.objects.create_user('t-2', role=User.Role.TEACHER, school=self.school)
        create_classroom(other_teacher, self.school, 'Maths 7A', 7)

        self.assertEqual(list_classrooms_for_teacher(self.teacher), [self.classroom])


class ResolveClassKeyTests(EnrollmentFixtureMixin, TestCase):

    def setUp(self):
        self.make_fixtures()

    def test_resolve_is_case_and_whitespace_insensitive(self):
        ref = resolve_class_key(f'  {self.classroom.class_key.lower()}  ')

        self.assertEqual(ref.classroom_id, self.classroom.pk)
        self.assertEqual(ref.school_id, str(self.school.pk))
        self.assertEqual(ref.grade, 6)
        self.assertEqual(ref.name, 'Science 6A')

    def test_unknown_key(self):
        with self.assertRaises(ClassKeyNotFound):
            resolve_class_key('ZZZ-999')
        with self.assertRaises(ClassKeyNotFound):
            resolve_class_key('')

    def test_locked_is_distinct_from_not_found(self):
        set_classroom_lock(self.classroom, True)
        with self.assertRaises(ClassroomLocked):
            resolve_class_key(self.classroom.class_key)

        set_classroom_lock(self.classroom, False)
        self.assertEqual(resolve_class_key(self.classroom.class_key).classroom_id, self.classroom.pk)


class JoinClassroomTests(EnrollmentFixtureMixin, TestCase):

    def setUp(self):
        self.make_fixtures()

    def test_join_binds_both_sides(self):
        result = join_classroom(self.student, self.classroom.class_key.lower())

        self.assertFalse(result.already_member)
        self.assertEqual(result.school_id, str(self.school.pk))
        self.student.refresh_from_db()
        self.assertEqual(self.student.school, self.school)
        self.assertIn(self.classroom, self.student.classrooms.all())
        self.assertIn(self.student, self.classroom.students.all())
        self.school.refresh_from_db()
        self.assertEqual(self.school.student_count, 1)

    def test_join_twice_is_idempotent(self):
        join_classroom(self.student, self.classroom.class_key)
        result = join_classroom(self.student, self.classroom.class_key)

        self.assertTrue(result.already_member)
        self.assertEqual(self.classroom.students.count(), 1)
        self.assertEqual(self.student.classrooms.count(), 1)
        self.school.refresh_from_db()
        self.assertEqual(self.school.student_count, 1)

    def test_join_second_classroom_same_school(self):
        second = create_classroom(self.teacher, self.school, 'Maths 6A', 6)
        join_classroom(self.student, self.classroom.class_key)
        join_classroom(self.student, second.class_key)

        self.assertEqual(self.student.classrooms.count(), 2)
        self.school.refresh_from_db()
        self.assertEqual(self.school.student_count, 1)

    def test_concurrent_joins_keep_all_students(self):
        other = User.objects.create_user('s-2', role=User.Role.STUDENT)
        join_classroom(self.student, self.classroom.class_key)
        join_classroom(other, self.classroom.class_key)

        self.assertEqual(
            set(self.classroom.students.values_list('pk', flat=True)),
            {'s-1', 's-2'},
        )

    def test_locked_classroom(self):
        set_classroom_lock(self.classroom, True)
        with self.assertRaises(ClassroomLocked):
            join_classroom(self.student, self.classroom.class_key)
        self.assertEqual(self.classroom.students.count(), 0)

    def test_only_students_join(self):
        with self.assertRaises(ValidationError):
            join_classroom(self.teacher, self.classroom.class_key)

    def test_student_of_another_school_refused(self):
        foreign_teacher = User.objects.create_user('t-9', role=User.Role.TEACHER, school=self.other_school)
        foreign_class = create_classroom(foreign_teacher, self.other_school, 'History', 6)
        join_classroom(self.student, foreign_class.class_key)

        with self.assertRaises(TenantMismatch):
            join_classroom(self.student, self.classroom.class_key)
        self.assertEqual(self.classroom.students.count(), 0)

    def test_classroom_without_school(self):
        orphan = Classroom.objects.create(
            teacher=self.teacher, school=None, name='Legacy', grade=6, class_key='LEG-ACY',
        )
        with self.assertRaises(MissingSchoolLink):
            join_classroom(self.student, orphan.class_key)

    def test_school_capacity(self):
        School.objects.filter(pk=self.school.pk).update(max_students=1)
        join_classroom(self.student, self.classroom.class_key)
        newcomer = User.objects.create_user('s-2', role=User.Role.STUDENT)

        with self.assertRaises(TenantLimitError):
            join_classroom(newcomer, self.classroom.class_key)

        # Уже привязанный ученик в другой класс той же школы проходит
        second = create_classroom(self.teacher, self.school, 'Maths 6A', 6)
        join_classroom(self.student, second.class_key)

    def test_rejoin_repairs_missing_profile_write(self):
        self.classroom.students.add(self.student)

        result = join_classroom(self.student, self.classroom.class_key)

        self.assertFalse(result.already_member)
        self.student.refresh_from_db()
        self.assertEqual(self.student.school, self.school)
        self.assertIn(self.classroom, self.student.classrooms.all())


class EnrollmentDriftTests(EnrollmentFixtureMixin, TestCase):

    def setUp(self):
        self.make_fixtures()

    def test_drift_detected_and_repaired(self):
        join_classroom(self.student, self.classroom.class_key)
        stray = User.objects.create_user('s-2', role=User.Role.STUDENT)
        self.classroom.students.add(stray)
        set_classroom_lock(self.classroom, True)

        drift = find_enrollment_drift()
        self.assertEqual([(room.pk, s.pk) for room, s in drift], [(self.classroom.pk, 's-2')])

        out = StringIO()
        call_command('repair_enrollments', stdout=out)

        self.assertIn('Repaired 1', out.getvalue())
        stray.refresh_from_db()
        self.assertEqual(stray.school, self.school)
        self.assertEqual(find_enrollment_drift(), [])

    def test_dry_run_changes_nothing(self):
        stray = User.objects.create_user('s-2', role=User.Role.STUDENT)
        self.classroom.students.add(stray)

        out = StringIO()
        call_command('repair_enrollments', '--dry-run', stdout=out)

        self.assertIn('1 drifted enrollments', out.getvalue())
        self.assertEqual(stray.classrooms.count(), 0)


class ClassroomApiTests(EnrollmentFixtureMixin, APITestCase):

    def setUp(self):
        self.make_fixtures()

    def test_teacher_creates_and_lists(self):
        self.client.force_authenticate(user=self.teacher)

        response = self.client.post('/api/classrooms/', {'name': 'Maths 6B', 'grade': 6}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertRegex(response.data['class_key'], CLASS_KEY_RE)

        response = self.client.get('/api/classrooms/')
        self.assertEqual(len(response.data), 2)

    def test_teacher_without_school_cannot_create(self):
        loner = User.objects.create_user('t-5', role=User.Role.TEACHER)
        self.client.force_authenticate(user=loner)
        response = self.client.post('/api/classrooms/', {'name': 'Maths', 'grade': 6}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_student_cannot_create(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.post('/api/classrooms/', {'name': 'Maths', 'grade': 6}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_preview_and_join(self):
        self.client.force_authenticate(user=self.student)
        code = f' {self.classroom.class_key.lower()} '

        response = self.client.get('/api/classrooms/preview/', {'code': code})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Science 6A')

        response = self.client.post('/api/classrooms/join/', {'code': code}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertFalse(response.data['already_member'])

        response = self.client.post('/api/classrooms/join/', {'code': code}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['already_member'])

    def test_join_unknown_and_locked(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.post('/api/classrooms/join/', {'code': 'ZZZ-999'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        self.client.force_authenticate(user=self.teacher)
        response = self.client.post(f'/api/classrooms/{self.classroom.pk}/lock/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_locked'])

        self.client.force_authenticate(user=self.student)
        response = self.client.post(
            '/api/classrooms/join/', {'code': self.classroom.class_key}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_423_LOCKED)

    def test_teacher_cannot_lock_foreign_classroom(self):
        other_teacher = User.objects.create_user('t-2', role=User.Role.TEACHER, school=self.school)
        self.client.force_authenticate(user=other_teacher)
        response = self.client.post(f'/api/classrooms/{self.classroom.pk}/lock/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
