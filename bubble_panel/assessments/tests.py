"""
Тесты Assessment Engine и очереди проверки.
"""
from datetime import timedelta

from django.core import mail
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from accounts.models import User
from core.exceptions import ValidationError
from core.models import AuditLog
from curriculum.services import create_week, publish_week
from tenants.models import School

from .models import AssignmentSubmission, QuizAttempt
from .review import list_pending_submissions
from .services import (
    grade_assignment,
    percentage_of,
    score_quiz,
    submit_assignment,
    submit_quiz_attempt,
)

QUIZ = [
    {'text': 'Q1', 'options': ['a', 'b'], 'correct_option_index': 0},
    {'text': 'Q2', 'options': ['a', 'b', 'c'], 'correct_option_index': 2},
    {'text': 'Q3', 'options': ['a', 'b', 'c', 'd'], 'correct_option_index': 1},
]


class ScoreQuizTests(TestCase):

    def test_all_correct(self):
        self.assertEqual(score_quiz([0, 2, 1], QUIZ), (3, 3))

    def test_all_wrong(self):
        self.assertEqual(score_quiz([1, 0, 0], QUIZ), (0, 3))

    def test_partial(self):
        self.assertEqual(score_quiz([0, 2, 3], QUIZ), (2, 3))

    def test_answer_count_must_match(self):
        with self.assertRaises(ValidationError):
            score_quiz([0, 2], QUIZ)
        with self.assertRaises(ValidationError):
            score_quiz([0, 2, 1, 0], QUIZ)

    def test_empty_quiz_rejected(self):
        with self.assertRaises(ValidationError):
            score_quiz([], [])

    def test_percentage_rounds_half_up(self):
        self.assertEqual(percentage_of(2, 3), 67)
        self.assertEqual(percentage_of(1, 3), 33)
        self.assertEqual(percentage_of(1, 8), 13)
        self.assertEqual(percentage_of(0, 0), 0)


class QuizAttemptTests(TestCase):

    def setUp(self):
        self.student = User.objects.create_user('s-1', role=User.Role.STUDENT)

    def test_full_marks(self):
        attempt = submit_quiz_attempt(self.student, 'w1', [0, 2, 1], QUIZ)
        self.assertEqual((attempt.score, attempt.total, attempt.percentage), (3, 3, 100))
        self.assertTrue(attempt.passed)

    def test_zero(self):
        attempt = submit_quiz_attempt(self.student, 'w1', [1, 1, 0], QUIZ)
        self.assertEqual(attempt.percentage, 0)
        self.assertFalse(attempt.passed)

    def test_two_of_three_passes(self):
        attempt = submit_quiz_attempt(self.student, 'w1', [0, 2, 0], QUIZ)
        self.assertEqual(attempt.percentage, 67)
        self.assertTrue(attempt.passed)

    def test_retake_overwrites(self):
        submit_quiz_attempt(self.student, 'w1', [1, 1, 0], QUIZ)
        attempt = submit_quiz_attempt(self.student, 'w1', [0, 2, 1], QUIZ)

        self.assertEqual(QuizAttempt.objects.filter(student=self.student, week_id='w1').count(), 1)
        self.assertEqual(attempt.percentage, 100)


class AssignmentTests(TestCase):

    def setUp(self):
        self.school = School.objects.create(name='Green Valley', admin_email='a@gv.edu')
        self.student = User.objects.create_user(
            's-1', role=User.Role.STUDENT, school=self.school, email='meera@example.com',
        )
        self.teacher = User.objects.create_user('t-1', role=User.Role.TEACHER, school=self.school)

    def test_blank_fields_rejected(self):
        with self.assertRaises(ValidationError):
            submit_assignment(self.student, 'w1', '   ', 'I learned a lot')
        with self.assertRaises(ValidationError):
            submit_assignment(self.student, 'w1', 'My essay', '')
        self.assertFalse(AssignmentSubmission.objects.exists())

    def test_submission_starts_ungraded(self):
        submission = submit_assignment(self.student, 'w1', 'My essay', 'Reflection')
        self.assertEqual(submission.status, AssignmentSubmission.Status.SUBMITTED)
        self.assertIsNone(submission.grade)
        self.assertIsNone(submission.feedback)

    def test_grade_bounds(self):
        submission = submit_assignment(self.student, 'w1', 'My essay', 'Reflection')
        for bad in (101, -1, 'A', 85.5, True):
            with self.assertRaises(ValidationError):
                grade_assignment(submission, bad, 'feedback')
        submission.refresh_from_db()
        self.assertEqual(submission.status, AssignmentSubmission.Status.SUBMITTED)

    def test_grading_sets_status_and_notifies(self):
        submission = submit_assignment(self.student, 'w1', 'My essay', 'Reflection')

        grade_assignment(submission, 85, 'Good work', teacher=self.teacher)

        submission.refresh_from_db()
        self.assertEqual(submission.status, AssignmentSubmission.Status.GRADED)
        self.assertEqual(submission.grade, 85)
        self.assertEqual(submission.feedback, 'Good work')
        self.assertEqual(submission.graded_by, self.teacher)
        self.assertIsNotNone(submission.graded_at)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['meera@example.com'])

    def test_regrade_overwrites_and_is_audited(self):
        submission = submit_assignment(self.student, 'w1', 'My essay', 'Reflection')
        grade_assignment(submission, 40, 'Try again', teacher=self.teacher)
        grade_assignment(submission, 75, 'Better', teacher=self.teacher)

        submission.refresh_from_db()
        self.assertEqual(submission.grade, 75)
        last = AuditLog.objects.filter(action='grade').order_by('-timestamp', '-pk').first()
        self.assertEqual(last.metadata['previous_grade'], 40)

    def test_resubmission_resets_grade(self):
        submission = submit_assignment(self.student, 'w1', 'My essay', 'Reflection')
        grade_assignment(submission, 40, 'Try again', teacher=self.teacher)

        resubmitted = submit_assignment(self.student, 'w1', 'My better essay', 'Reflection 2')

        self.assertEqual(resubmitted.pk, submission.pk)
        self.assertEqual(resubmitted.status, AssignmentSubmission.Status.SUBMITTED)
        self.assertIsNone(resubmitted.grade)
        self.assertEqual(AssignmentSubmission.objects.count(), 1)


class ReviewQueueTests(TestCase):

    def setUp(self):
        self.school = School.objects.create(name='Green Valley', admin_email='a@gv.edu')
        self.other_school = School.objects.create(name='Hill Side', admin_email='a@hs.edu')
        self.teacher = User.objects.create_user('t-1', role=User.Role.TEACHER, school=self.school)
        self.meera = User.objects.create_user('s-1', role=User.Role.STUDENT, school=self.school, display_name='Meera')
        self.arjun = User.objects.create_user('s-2', role=User.Role.STUDENT, school=self.school, display_name='Arjun')
        self.outsider = User.objects.create_user('s-3', role=User.Role.STUDENT, school=self.other_school)

        now = timezone.now()
        self.newer = submit_assignment(self.meera, 'w2', 'Essay', 'Reflection')
        self.older = submit_assignment(self.arjun, 'w1', 'Essay', 'Reflection')
        AssignmentSubmission.objects.filter(pk=self.older.pk).update(submitted_at=now - timedelta(days=1))
        submit_assignment(self.outsider, 'w1', 'Essay', 'Reflection')
        graded = submit_assignment(self.meera, 'w1', 'Essay', 'Reflection')
        grade_assignment(graded, 90, 'ok', teacher=self.teacher)

    def test_pending_oldest_first_scoped_to_school(self):
        pending = list_pending_submissions(self.teacher)

        self.assertEqual([p.submission_id for p in pending], [self.older.pk, self.newer.pk])
        self.assertEqual([p.student_name for p in pending], ['Arjun', 'Meera'])

    @override_settings(REVIEW_QUEUE_CROSS_TENANT=True)
    def test_cross_tenant_setting(self):
        self.assertEqual(len(list_pending_submissions(self.teacher)), 3)

    def test_teacher_without_school_sees_nothing(self):
        loner = User.objects.create_user('t-2', role=User.Role.TEACHER)
        self.assertEqual(list_pending_submissions(loner), [])


class AssessmentApiTests(APITestCase):

    def setUp(self):
        self.school = School.objects.create(name='Green Valley', admin_email='a@gv.edu')
        self.other_school = School.objects.create(name='Hill Side', admin_email='a@hs.edu')
        self.teacher = User.objects.create_user('t-1', role=User.Role.TEACHER, school=self.school)
        self.student = User.objects.create_user('s-1', role=User.Role.STUDENT, school=self.school)
        self.week = create_week(self.school, 6, 1, 'Matter', 'Lesson', quiz=QUIZ, week_id='g6-w1')
        # Тот же week_id в мастере, но с другим ключом ответов
        master_quiz = [dict(q, correct_option_index=0) for q in QUIZ]
        publish_week(create_week(None, 6, 1, 'Matter', 'Lesson', quiz=master_quiz, week_id='g6-w1'))

    def test_quiz_attempt_uses_school_quiz(self):
        self.client.force_authenticate(user=self.student)

        response = self.client.post(
            '/api/assessments/quiz-attempts/', {'week_id': 'g6-w1', 'answers': [0, 2, 1]}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        publish_week(self.week)
        response = self.client.post(
            '/api/assessments/quiz-attempts/', {'week_id': 'g6-w1', 'answers': [0, 2, 1]}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['percentage'], 100)

        response = self.client.get('/api/assessments/quiz-attempts/')
        self.assertEqual(len(response.data), 1)

    def test_unknown_week(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.post(
            '/api/assessments/quiz-attempts/', {'week_id': 'nope', 'answers': [0]}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_assignment_for_unknown_week_is_not_stored(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.post(
            '/api/assessments/assignments/',
            {'week_id': 'no-such-week', 'content': 'Essay', 'reflection': 'Learned'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(AssignmentSubmission.objects.filter(student=self.student).exists())

        self.client.force_authenticate(user=self.teacher)
        self.assertEqual(self.client.get('/api/assessments/review-queue/').data, [])

    def test_submit_and_grade(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.post(
            '/api/assessments/assignments/',
            {'week_id': 'g6-w1', 'content': 'Essay', 'reflection': 'Learned'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        submission_id = response.data['id']

        self.client.force_authenticate(user=self.teacher)
        response = self.client.get('/api/assessments/review-queue/')
        self.assertEqual([p['submission_id'] for p in response.data], [submission_id])

        response = self.client.post(
            f'/api/assessments/assignments/{submission_id}/grade/',
            {'grade': 88, 'feedback': 'Nice'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'graded')

        response = self.client.post(
            f'/api/assessments/assignments/{submission_id}/grade/', {'grade': 150}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_foreign_teacher_cannot_grade(self):
        submission = submit_assignment(self.student, 'g6-w1', 'Essay', 'Learned')
        foreign = User.objects.create_user('t-9', role=User.Role.TEACHER, school=self.other_school)
        self.client.force_authenticate(user=foreign)

        response = self.client.post(
            f'/api/assessments/assignments/{submission.pk}/grade/', {'grade': 50}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_student_cannot_grade(self):
        submission = submit_assignment(self.student, 'g6-w1', 'Essay', 'Learned')
        self.client.force_authenticate(user=self.student)
        response = self.client.post(
            f'/api/assessments/assignments/{submission.pk}/grade/', {'grade': 100}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
