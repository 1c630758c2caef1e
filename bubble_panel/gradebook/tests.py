from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from accounts.models import User
from assessments.models import QuizAttempt
from assessments.services import grade_assignment, submit_assignment
from classrooms.enrollment import join_classroom
from classrooms.services import create_classroom
from curriculum.services import create_week
from tenants.models import School

from .services import average_of, compute_report


def record_quiz(student, week_id, percentage):
    return QuizAttempt.objects.create(
        student=student,
        week_id=week_id,
        score=percentage,
        total=100,
        percentage=percentage,
        passed=percentage >= 60,
        completed_at=timezone.now(),
    )


class ComputeReportTests(TestCase):

    def setUp(self):
        self.student = User.objects.create_user('s-1', role=User.Role.STUDENT)

    def test_no_records(self):
        report = compute_report(self.student)
        self.assertEqual(report.per_week, [])
        self.assertEqual(report.average_percentage, 0)
        self.assertFalse(report.passing)
        self.assertFalse(report.certificate_eligible)

    def test_quiz_and_graded_assignment_are_averaged(self):
        record_quiz(self.student, 'w1', 80)
        submission = submit_assignment(self.student, 'w1', 'Essay', 'Reflection')
        grade_assignment(submission, 40, 'ok')

        report = compute_report(self.student)

        self.assertEqual(report.average_percentage, 60)
        self.assertTrue(report.passing)
        self.assertTrue(report.certificate_eligible)
        self.assertEqual(len(report.per_week), 1)
        self.assertEqual(report.per_week[0].quiz.percentage, 80)
        self.assertEqual(report.per_week[0].assignment.grade, 40)

    def test_ungraded_assignment_contributes_nothing(self):
        record_quiz(self.student, 'w1', 50)
        submit_assignment(self.student, 'w2', 'Essay', 'Reflection')

        report = compute_report(self.student)

        self.assertEqual(report.average_percentage, 50)
        self.assertFalse(report.passing)
        self.assertEqual([w.week_id for w in report.per_week], ['w1', 'w2'])
        self.assertIsNone(report.per_week[1].quiz)

    def test_ungraded_week_is_listed_but_not_averaged(self):
        record_quiz(self.student, 'w1', 80)
        graded = submit_assignment(self.student, 'w1', 'Essay', 'Reflection')
        grade_assignment(graded, 40, 'ok')
        submit_assignment(self.student, 'w2', 'Essay', 'Reflection')

        report = compute_report(self.student)

        self.assertEqual(report.average_percentage, 60)
        self.assertTrue(report.certificate_eligible)
        pending = [w for w in report.per_week if w.week_id == 'w2'][0]
        self.assertIsNone(pending.quiz)
        self.assertEqual(pending.assignment.status, 'submitted')
        self.assertIsNone(pending.assignment.grade)

    def test_zero_grade_counts(self):
        record_quiz(self.student, 'w1', 80)
        submission = submit_assignment(self.student, 'w2', 'Essay', 'Reflection')
        grade_assignment(submission, 0, 'missing work')

        report = compute_report(self.student)

        self.assertEqual(report.average_percentage, 40)
        self.assertFalse(report.passing)
        self.assertFalse(report.certificate_eligible)

    def test_weeks_follow_curriculum_order(self):
        school = School.objects.create(name='Green Valley', admin_email='a@gv.edu')
        self.student.school = school
        self.student.save(update_fields=['school'])
        create_week(school, 6, 2, 'Energy', 'Lesson', week_id='f3a9')
        create_week(school, 6, 1, 'Matter', 'Lesson', week_id='c7e2')
        record_quiz(self.student, 'f3a9', 70)
        record_quiz(self.student, 'zz-unknown', 90)
        record_quiz(self.student, 'c7e2', 50)

        report = compute_report(self.student)

        self.assertEqual([w.week_id for w in report.per_week], ['c7e2', 'f3a9', 'zz-unknown'])
        self.assertEqual([w.order for w in report.per_week], [1, 2, None])

    def test_only_ungraded_work(self):
        submit_assignment(self.student, 'w1', 'Essay', 'Reflection')
        report = compute_report(self.student)
        self.assertEqual(report.average_percentage, 0)
        self.assertFalse(report.certificate_eligible)

    def test_half_rounds_up(self):
        record_quiz(self.student, 'w1', 67)
        record_quiz(self.student, 'w2', 66)
        self.assertEqual(compute_report(self.student).average_percentage, 67)
        self.assertEqual(average_of([59, 60]), 60)

    def test_other_students_ignored(self):
        other = User.objects.create_user('s-2', role=User.Role.STUDENT)
        record_quiz(other, 'w1', 100)
        self.assertEqual(compute_report(self.student).per_week, [])


class GradebookApiTests(APITestCase):

    def setUp(self):
        self.school = School.objects.create(name='Green Valley', admin_email='a@gv.edu')
        self.teacher = User.objects.create_user('t-1', role=User.Role.TEACHER, school=self.school)
        self.colleague = User.objects.create_user('t-2', role=User.Role.TEACHER, school=self.school)
        self.student = User.objects.create_user('s-1', role=User.Role.STUDENT)
        classroom = create_classroom(self.teacher, self.school, 'Science 6A', 6)
        join_classroom(self.student, classroom.class_key)
        record_quiz(self.student, 'w1', 90)

    def test_student_reads_own_report(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.get('/api/gradebook/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['average_percentage'], 90)
        self.assertTrue(response.data['certificate_eligible'])
        self.assertIsNone(response.data['per_week'][0]['assignment'])

    def test_class_teacher_reads_student_report(self):
        self.client.force_authenticate(user=self.teacher)
        response = self.client.get('/api/gradebook/students/s-1/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['student_id'], 's-1')

    def test_other_teacher_refused(self):
        self.client.force_authenticate(user=self.colleague)
        response = self.client.get('/api/gradebook/students/s-1/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_unknown_student(self):
        self.client.force_authenticate(user=self.teacher)
        response = self.client.get('/api/gradebook/students/ghost/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_teacher_has_no_own_report(self):
        self.client.force_authenticate(user=self.teacher)
        self.assertEqual(self.client.get('/api/gradebook/me/').status_code, status.HTTP_403_FORBIDDEN)
