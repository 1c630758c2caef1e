import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

from .models import AssignmentSubmission

logger = logging.getLogger(__name__)


@shared_task(name='assessments.tasks.notify_student_graded')
def notify_student_graded(submission_id: int):
    try:
        submission = AssignmentSubmission.objects.select_related('student').get(id=submission_id)
    except AssignmentSubmission.DoesNotExist:
        return

    student = submission.student
    if not student.email:
        logger.info('Student %s has no email, skipping grade notification', student.pk)
        return

    subject = f"Graded: week {submission.week_id}"
    message = (
        f"Hello, {student.get_short_name()}!\n\n"
        f"Your assignment for week {submission.week_id} has been graded.\n"
        f"Grade: {submission.grade}/100.\n\n"
        f"Sign in to see your teacher's feedback."
    )
    send_mail(
        subject,
        message,
        settings.DEFAULT_FROM_EMAIL,
        [student.email],
        fail_silently=True,
    )
