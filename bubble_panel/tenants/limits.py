"""
Tenant resource limit enforcement.
"""
import logging

from core.exceptions import TenantLimitError

logger = logging.getLogger(__name__)


def current_student_count(school):
    """Авторитетное число учеников школы (School.student_count - только подсказка)."""
    from accounts.models import User
    return User.objects.filter(school=school, role=User.Role.STUDENT).count()


def check_student_capacity(school, current_count=None):
    """
    Проверить, есть ли в школе место для ещё одного ученика.

    Raises:
        TenantLimitError если лимит max_students достигнут
    """
    if school is None or not school.max_students:
        return

    if current_count is None:
        current_count = current_student_count(school)

    if current_count >= school.max_students:
        logger.warning(
            'Student limit reached: school=%s, %s/%s',
            school.pk, current_count, school.max_students,
        )
        raise TenantLimitError(
            f'Student limit reached: {current_count}/{school.max_students}. '
            f'Contact your school administrator to extend the license.'
        )
