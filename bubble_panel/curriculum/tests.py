"""
Тесты Curriculum Store: черновики, публикация, видимость для учеников.
"""
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from accounts.models import User
from assessments.models import QuizAttempt
from core.exceptions import ValidationError, WeekNotFound
from core.models import AuditLog
from tenants.models import School

from .models import CurriculumWeek
from .quiz import QuizDraft, parse_quiz
from .serializers import CurriculumWeekStudentSerializer
from .services import (
    create_week,
    delete_week,
    get_week,
    list_weeks,
    lock_week,
    publish_week,
    toggle_publish,
)

QUIZ = [
    {'text': 'Boiling point of water?', 'options': ['50°C', '100°C', '150°C'], 'correct_option_index': 1},
    {'text': 'Ice is a...', 'options': ['Solid', 'Gas'], 'correct_option_index': 0},
]


class QuizDraftTests(TestCase):

    def test_accumulates_questions(self):
        draft = QuizDraft()
        draft.add_question('2 + 2 = ?', ['3', '4', '', ''], 1)
        draft.add_question('Capital of India?', ['Delhi', 'Mumbai'], 0)

        self.assertEqual(len(draft), 2)
        self.assertEqual(draft.to_list()[0]['options'], ['3', '4'])

    def test_invalid_question_is_not_added(self):
        draft = QuizDraft()
        with self.assertRaises(ValidationError):
            draft.add_question('2 + 2 = ?', ['3', '4'], 2)
        with self.assertRaises(ValidationError):
            draft.add_question('', ['3', '4'], 0)
        with self.assertRaises(ValidationError):
            draft.add_question('Pick one', ['only'], 0)
        with self.assertRaises(ValidationError):
            draft.add_question('Pick one', ['a', 'b', 'c', 'd', 'e'], 0)
        self.assertEqual(len(draft), 0)

    def test_clear(self):
        draft = QuizDraft(QUIZ)
        draft.clear()
        self.assertEqual(draft.to_list(), [])

    def test_boolean_index_rejected(self):
        with self.assertRaises(ValidationError):
            parse_quiz([{'text': 'Q', 'options': ['a', 'b'], 'correct_option_index': True}])


class CurriculumStoreTests(TestCase):

    def setUp(self):
        self.school = School.objects.create(name='Green Valley', admin_email='a@gv.edu')

    def test_created_week_is_a_draft(self):
        week = create_week(self.school, 6, 1, 'Matter', 'States of matter', quiz=QUIZ)
        self.assertFalse(week.is_published)
        self.assertEqual(len(week.questions), 2)
        self.assertTrue(week.week_id)

    def test_invalid_quiz_rejected(self):
        bad = [{'text': 'Q', 'options': ['a', 'b'], 'correct_option_index': 5}]
        with self.assertRaises(ValidationError):
            create_week(self.school, 6, 1, 'Matter', 'content', quiz=bad)
        self.assertFalse(CurriculumWeek.objects.exists())

    def test_duplicate_week_id_in_namespace_rejected(self):
        create_week(self.school, 6, 1, 'Matter', 'content', week_id='w1')
        with self.assertRaises(ValidationError):
            create_week(self.school, 6, 2, 'Energy', 'content', week_id='w1')
        # Тот же id в мастере и в другом классе допустим
        create_week(None, 6, 1, 'Matter', 'content', week_id='w1')
        create_week(self.school, 7, 1, 'Matter', 'content', week_id='w1')

    def test_list_weeks_ordered(self):
        create_week(self.school, 6, 3, 'Light', 'c')
        create_week(self.school, 6, 1, 'Matter', 'c')
        create_week(self.school, 6, 2, 'Energy', 'c')
        create_week(self.school, 7, 1, 'Other grade', 'c')

        self.assertEqual([w.order for w in list_weeks(self.school, 6)], [1, 2, 3])
        self.assertEqual(list_weeks(None, 6), [])

    def test_publish_and_lock_are_idempotent(self):
        week = create_week(self.school, 6, 1, 'Matter', 'c')

        publish_week(week)
        publish_week(week)
        self.assertTrue(CurriculumWeek.objects.get(pk=week.pk).is_published)
        self.assertEqual(AuditLog.objects.filter(action='publish').count(), 1)

        lock_week(week)
        lock_week(week)
        self.assertFalse(CurriculumWeek.objects.get(pk=week.pk).is_published)

        toggle_publish(week)
        self.assertTrue(CurriculumWeek.objects.get(pk=week.pk).is_published)

    def test_delete_keeps_attempts(self):
        student = User.objects.create_user('s-1', role=User.Role.STUDENT, school=self.school)
        week = create_week(self.school, 6, 1, 'Matter', 'c', week_id='w1')
        QuizAttempt.objects.create(
            student=student, week_id='w1', score=1, total=1, percentage=100, passed=True,
            completed_at=week.created_at,
        )

        delete_week(week)

        with self.assertRaises(WeekNotFound):
            get_week(self.school, 6, 'w1')
        self.assertTrue(QuizAttempt.objects.filter(week_id='w1').exists())


class StudentVisibilityTests(TestCase):

    def setUp(self):
        self.school = School.objects.create(name='Green Valley', admin_email='a@gv.edu')
        self.week = create_week(
            self.school, 6, 1, 'Matter', 'Secret lesson',
            quiz=QUIZ, video_url='https://video.example.com/1',
        )

    def test_unpublished_hides_content(self):
        data = CurriculumWeekStudentSerializer(self.week).data
        self.assertEqual(data['title'], 'Matter')
        self.assertNotIn('content', data)
        self.assertNotIn('video_url', data)
        self.assertNotIn('quiz', data)

    def test_published_never_exposes_answers(self):
        publish_week(self.week)
        data = CurriculumWeekStudentSerializer(self.week).data
        self.assertEqual(data['content'], 'Secret lesson')
        self.assertEqual(len(data['quiz']), 2)
        for question in data['quiz']:
            self.assertNotIn('correct_option_index', question)


class CurriculumApiTests(APITestCase):

    def setUp(self):
        self.school = School.objects.create(name='Green Valley', admin_email='a@gv.edu')
        self.other_school = School.objects.create(name='Hill Side', admin_email='a@hs.edu')
        self.teacher = User.objects.create_user('t-1', role=User.Role.TEACHER, school=self.school)
        self.student = User.objects.create_user('s-1', role=User.Role.STUDENT, school=self.school)
        self.operator = User.objects.create_user('ops-1', is_staff=True)
        self.week = create_week(self.school, 6, 1, 'Matter', 'Lesson', quiz=QUIZ, week_id='g6-w1')

    def url(self, namespace, suffix=''):
        return f'/api/curriculum/{namespace}/6/weeks/{suffix}'

    def test_teacher_creates_in_own_school(self):
        self.client.force_authenticate(user=self.teacher)
        response = self.client.post(
            self.url(self.school.pk),
            {'order': 2, 'title': 'Energy', 'content': 'Forms of energy', 'quiz': QUIZ},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertFalse(response.data['is_published'])
        self.assertEqual(response.data['quiz'][0]['correct_option_index'], 1)

    def test_bad_question_rejected(self):
        self.client.force_authenticate(user=self.teacher)
        bad = [{'text': 'Q', 'options': ['a', 'b'], 'correct_option_index': 3}]
        response = self.client.post(
            self.url(self.school.pk),
            {'order': 2, 'title': 'Energy', 'content': 'c', 'quiz': bad},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_teacher_cannot_write_master_or_other_school(self):
        self.client.force_authenticate(user=self.teacher)
        payload = {'order': 2, 'title': 'Energy', 'content': 'c'}
        self.assertEqual(
            self.client.post(self.url('master'), payload, format='json').status_code,
            status.HTTP_403_FORBIDDEN,
        )
        self.assertEqual(
            self.client.post(self.url(self.other_school.pk), payload, format='json').status_code,
            status.HTTP_403_FORBIDDEN,
        )

    def test_operator_writes_master(self):
        self.client.force_authenticate(user=self.operator)
        response = self.client.post(
            self.url('master'), {'order': 1, 'title': 'Matter', 'content': 'c'}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(response.data['school_id'])

    def test_student_sees_locked_week_without_content(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.get(self.url(self.school.pk))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertNotIn('content', response.data[0])

    def test_student_cannot_read_other_school(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.get(self.url(self.other_school.pk))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_publish_lock_and_delete(self):
        self.client.force_authenticate(user=self.teacher)

        response = self.client.post(self.url(self.school.pk, 'g6-w1/publish/'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_published'])

        self.client.force_authenticate(user=self.student)
        response = self.client.get(self.url(self.school.pk, 'g6-w1/'))
        self.assertEqual(response.data['content'], 'Lesson')
        self.assertNotIn('correct_option_index', response.data['quiz'][0])

        self.client.force_authenticate(user=self.teacher)
        response = self.client.post(self.url(self.school.pk, 'g6-w1/lock/'))
        self.assertFalse(response.data['is_published'])

        response = self.client.delete(self.url(self.school.pk, 'g6-w1/'))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        response = self.client.get(self.url(self.school.pk, 'g6-w1/'))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_unknown_namespace(self):
        self.client.force_authenticate(user=self.teacher)
        self.assertEqual(self.client.get(self.url('nope')).status_code, status.HTTP_404_NOT_FOUND)
