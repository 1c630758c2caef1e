"""
Enrollment Service - вступление ученика в класс по коду.

Запись идёт в два шага, без общей транзакции:
  1. добавить ученика в Classroom.students (объединение множеств);
  2. привязать профиль: User.school и User.classrooms.
Если шаг 2 не прошёл, повторное вступление его доделает: оба шага
идемпотентны. Несоответствие ростера и профиля ищет find_enrollment_drift.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from accounts.models import User
from core.exceptions import MissingSchoolLink, TenantMismatch, ValidationError
from core.models import AuditLog
from core.storage import storage_call
from tenants.limits import check_student_capacity
from tenants.services import increment_student_count

from .models import Classroom
from .services import resolve_class_key

logger = logging.getLogger(__name__)


@dataclass
class EnrollmentResult:
    classroom: Classroom
    school_id: Optional[str]
    already_member: bool


def join_classroom(student, code):
    """
    Записать ученика в класс по class_key.

    Raises:
        ClassKeyNotFound, ClassroomLocked - из resolve_class_key
        MissingSchoolLink - у класса нет школы (повреждённые данные)
        ValidationError - вступать может только ученик
        TenantMismatch - ученик уже привязан к другой школе
        TenantLimitError - в школе нет мест
    """
    ref = resolve_class_key(code)
    if ref.school_id is None:
        logger.error('Classroom %s has no school link, refusing join', ref.classroom_id)
        raise MissingSchoolLink()

    if student.role != User.Role.STUDENT:
        raise ValidationError({'role': 'Only students can join a classroom.'})

    with storage_call('join_classroom.load'):
        classroom = Classroom.objects.select_related('school').get(pk=ref.classroom_id)
    school = classroom.school

    if student.school_id and student.school_id != school.pk:
        logger.error(
            'Tenant mismatch on join: student=%s, bound_school=%s, classroom_school=%s',
            student.pk, student.school_id, school.pk,
        )
        raise TenantMismatch()

    new_to_school = student.school_id is None
    if new_to_school:
        check_student_capacity(school)

    with storage_call('join_classroom.roster'):
        already_on_roster = classroom.students.filter(pk=student.pk).exists()
        classroom.students.add(student)

    with storage_call('join_classroom.profile'):
        already_in_profile = student.classrooms.filter(pk=classroom.pk).exists()
        if new_to_school:
            student.school = school
            student.save(update_fields=['school', 'updated_at'])
        student.classrooms.add(classroom)

    if new_to_school:
        increment_student_count(school)

    already_member = already_on_roster and already_in_profile
    if not already_member:
        AuditLog.log(
            user=student,
            action='enroll',
            content_object=classroom,
            description=f'Joined classroom "{classroom.name}"',
            metadata={'class_key': classroom.class_key, 'repaired': already_on_roster},
        )
    logger.info(
        'Student %s joined classroom %s (school=%s, already_member=%s)',
        student.pk, classroom.pk, school.pk, already_member,
    )
    return EnrollmentResult(
        classroom=classroom,
        school_id=str(school.pk),
        already_member=already_member,
    )


@storage_call
def find_enrollment_drift(classroom=None):
    """
    Пары (classroom, student), где ученик есть в ростере класса,
    но класса нет в профиле ученика.
    """
    classrooms = Classroom.objects.select_related('school').prefetch_related('students')
    if classroom is not None:
        classrooms = classrooms.filter(pk=classroom.pk)

    drift = []
    for room in classrooms:
        roster_ids = {s.pk for s in room.students.all()}
        if not roster_ids:
            continue
        profile_ids = set(
            User.classrooms.through.objects.filter(
                classroom_id=room.pk, user_id__in=roster_ids,
            ).values_list('user_id', flat=True)
        )
        for student in room.students.all():
            if student.pk not in profile_ids:
                drift.append((room, student))
    return drift


def repair_enrollment(classroom, student):
    """
    Доделать шаг 2 для ученика, который уже есть в ростере.

    Код класса не проверяется: класс мог быть закрыт после шага 1.
    """
    school = classroom.school
    if school is None:
        raise MissingSchoolLink()
    if student.school_id and student.school_id != school.pk:
        raise TenantMismatch()

    new_to_school = student.school_id is None
    with storage_call('repair_enrollment.profile'):
        if new_to_school:
            student.school = school
            student.save(update_fields=['school', 'updated_at'])
        student.classrooms.add(classroom)
    if new_to_school:
        increment_student_count(school)

    logger.warning('Enrollment repaired: student=%s, classroom=%s', student.pk, classroom.pk)
    return EnrollmentResult(classroom=classroom, school_id=str(school.pk), already_member=True)
