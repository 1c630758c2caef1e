"""
Tenant Directory - подключение школ и копирование мастер-программы.

Подключение = две отдельные стадии:
  1. создание School;
  2. clone_master_curriculum(school) - одним атомарным батчем.
Если стадия 2 упала, школа уже существует (допустимая несогласованность),
а повторять нужно только клонирование: оно идемпотентно.
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db import DatabaseError, transaction
from django.db.models import F

from accounts.models import User
from core.exceptions import CurriculumCloneError, TenantMismatch, ValidationError
from core.models import AuditLog
from core.storage import storage_call
from curriculum.models import CurriculumWeek

from .limits import current_student_count
from .models import School

logger = logging.getLogger(__name__)


def _validate_onboarding(name, admin_email, max_students):
    errors = {}
    if not (name or '').strip():
        errors['name'] = 'School name is required.'
    try:
        validate_email(admin_email or '')
    except DjangoValidationError:
        errors['admin_email'] = 'A valid admin email is required.'
    try:
        max_students = int(max_students)
        if max_students <= 0:
            errors['max_students'] = 'Student limit must be positive.'
    except (TypeError, ValueError):
        errors['max_students'] = 'Student limit must be an integer.'
    if errors:
        raise ValidationError(errors)
    return name.strip(), admin_email.strip().lower(), max_students


def onboard_school(name, admin_email, max_students, actor=None, **extra):
    """
    Создать школу и развернуть в ней мастер-программу.

    Raises:
        ValidationError - некорректные поля
        TransientStorageError - школа не создана, можно повторить целиком
        CurriculumCloneError - школа создана, повторить только клонирование
    """
    name, admin_email, max_students = _validate_onboarding(name, admin_email, max_students)

    with storage_call('onboard_school.create'):
        school = School.objects.create(
            name=name,
            admin_email=admin_email,
            max_students=max_students,
            student_count=0,
            status=School.Status.ACTIVE,
            **{k: v for k, v in extra.items() if k in ('plan', 'region') and v},
        )
    AuditLog.log(
        user=actor,
        action='onboard',
        content_object=school,
        description=f'School "{school.name}" onboarded',
        metadata={'max_students': max_students, 'admin_email': admin_email},
    )
    logger.info('School created: %s (%s)', school.name, school.pk)

    clone_master_curriculum(school, actor=actor)
    return school


def clone_master_curriculum(school, actor=None):
    """
    Скопировать все недели мастер-программы (по всем классам) в школу.

    Копируются все поля как есть, включая is_published и quiz; week_id и
    order сохраняются. Запись - одной транзакцией: либо скопировано всё,
    либо ничего. Повторный запуск перезаписывает те же week_id без дублей.

    Returns:
        int - число скопированных недель
    """
    try:
        with transaction.atomic():
            master_weeks = list(CurriculumWeek.objects.master().order_by('grade', 'order', 'pk'))
            for week in master_weeks:
                CurriculumWeek.objects.update_or_create(
                    school=school,
                    grade=week.grade,
                    week_id=week.week_id,
                    defaults=week.clone_values(),
                )
    except DatabaseError as exc:
        logger.error('Curriculum clone failed: school=%s, error=%s', school.pk, exc)
        raise CurriculumCloneError(school.pk) from exc

    grades = sorted({w.grade for w in master_weeks})
    AuditLog.log(
        user=actor,
        action='clone',
        content_object=school,
        description=f'Master curriculum cloned: {len(master_weeks)} weeks',
        metadata={'grades': grades, 'weeks': len(master_weeks)},
    )
    logger.info(
        'Curriculum deployed: school=%s, weeks=%s, grades=%s',
        school.pk, len(master_weeks), grades,
    )
    return len(master_weeks)


@storage_call
def assign_teacher_school(user, school):
    """
    Привязка учителя (или администратора школы) к школе при регистрации.

    Это единственный путь, кроме вступления в класс, которым меняется
    User.school. Ученики сюда не допускаются.
    """
    if user.role == User.Role.STUDENT:
        raise ValidationError({'user': 'Students join a school through a classroom code.'})
    if user.school_id and user.school_id != school.pk:
        raise TenantMismatch()

    update_fields = ['school', 'updated_at']
    if user.role == User.Role.UNSET:
        user.role = User.Role.TEACHER
        update_fields.append('role')
    user.school = school
    user.save(update_fields=update_fields)
    logger.info('Teacher assigned: user=%s, school=%s, role=%s', user.pk, school.pk, user.role)
    return user


@storage_call
def increment_student_count(school):
    School.objects.filter(pk=school.pk).update(student_count=F('student_count') + 1)


@storage_call
def recalculate_student_count(school):
    """Пересчитать подсказку student_count по реальным данным."""
    school.student_count = current_student_count(school)
    school.save(update_fields=['student_count', 'updated_at'])
    return school.student_count
