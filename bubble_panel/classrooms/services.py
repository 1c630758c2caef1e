"""
Classroom Registry - создание классов и разрешение кодов.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from django.db import IntegrityError, transaction

from core.exceptions import ClassKeyNotFound, ClassroomLocked, ValidationError
from core.models import AuditLog
from core.storage import storage_call
from curriculum.services import validate_grade

from .models import Classroom, generate_class_key, normalize_class_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassroomRef:
    """Результат разрешения кода: что нужно для вступления."""
    classroom_id: int
    school_id: Optional[str]
    name: str
    grade: int


@storage_call
def create_classroom(teacher, school, name, grade):
    """
    Создать класс с уникальным class_key.

    Проверка "код свободен" и вставка не атомарны, поэтому unique-констрейнт
    в БД тоже может сработать - тогда просто генерируем новый код.
    Пространство кодов (32^6) намного больше числа классов, повторов почти нет.
    """
    name = (name or '').strip()
    if not name:
        raise ValidationError({'name': 'Class name is required.'})
    grade = validate_grade(grade)

    attempts = 0
    while True:
        attempts += 1
        class_key = generate_class_key()
        if Classroom.objects.filter(class_key=class_key).exists():
            logger.info('Class key collision on check, regenerating: %s', class_key)
            continue
        try:
            with transaction.atomic():
                classroom = Classroom.objects.create(
                    teacher=teacher,
                    school=school,
                    name=name,
                    grade=grade,
                    class_key=class_key,
                    is_locked=False,
                )
        except IntegrityError:
            logger.info('Class key collision on insert, regenerating: %s', class_key)
            continue
        break

    AuditLog.log(
        user=teacher,
        action='create',
        content_object=classroom,
        description=f'Classroom "{name}" (grade {grade})',
        metadata={'class_key': class_key, 'attempts': attempts},
    )
    logger.info(
        'Classroom created: id=%s, key=%s, teacher=%s, school=%s',
        classroom.pk, class_key, teacher.pk, getattr(school, 'pk', None),
    )
    return classroom


@storage_call
def resolve_class_key(code):
    """
    Код → ClassroomRef. Ввод нормализуется (strip + upper).

    Raises:
        ClassKeyNotFound - класса с таким кодом нет
        ClassroomLocked  - класс есть, но закрыт для вступления
    """
    clean_key = normalize_class_key(code)
    if not clean_key:
        raise ClassKeyNotFound()

    classroom = Classroom.objects.filter(class_key=clean_key).first()
    if classroom is None:
        raise ClassKeyNotFound()
    if classroom.is_locked:
        raise ClassroomLocked()

    return ClassroomRef(
        classroom_id=classroom.pk,
        school_id=str(classroom.school_id) if classroom.school_id else None,
        name=classroom.name,
        grade=classroom.grade,
    )


@storage_call
def list_classrooms_for_teacher(teacher):
    return list(
        Classroom.objects.filter(teacher=teacher)
        .select_related('school')
        .prefetch_related('students')
        .order_by('-created_at')
    )


@storage_call
def set_classroom_lock(classroom, locked):
    """Открыть/закрыть вступление. Идемпотентно."""
    Classroom.objects.filter(pk=classroom.pk).update(is_locked=locked)
    classroom.is_locked = locked
    logger.info('Classroom %s: %s', classroom.pk, 'locked' if locked else 'unlocked')
    return classroom
