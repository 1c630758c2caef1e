"""
Teacher Review Queue - работы, ожидающие проверки.
"""
import logging
from dataclasses import dataclass
from datetime import datetime

from django.conf import settings

from core.storage import storage_call

from .models import AssignmentSubmission

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingSubmission:
    submission_id: int
    student_id: str
    student_name: str
    week_id: str
    content: str
    reflection: str
    submitted_at: datetime


@storage_call
def list_pending_submissions(teacher):
    """
    Все сданные и не проверенные работы учеников школы учителя,
    старые первыми. Имена учеников подтягиваются одним join'ом.

    REVIEW_QUEUE_CROSS_TENANT=True снимает фильтр по школе.
    """
    queryset = (
        AssignmentSubmission.objects
        .filter(status=AssignmentSubmission.Status.SUBMITTED)
        .select_related('student')
        .order_by('submitted_at', 'pk')
    )
    if not getattr(settings, 'REVIEW_QUEUE_CROSS_TENANT', False):
        if teacher.school_id is None:
            return []
        queryset = queryset.filter(student__school_id=teacher.school_id)

    return [
        PendingSubmission(
            submission_id=s.pk,
            student_id=s.student_id,
            student_name=s.student.get_full_name(),
            week_id=s.week_id,
            content=s.content,
            reflection=s.reflection,
            submitted_at=s.submitted_at,
        )
        for s in queryset
    ]
