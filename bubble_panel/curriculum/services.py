"""
Curriculum Store - недели программы по (школа, класс).

Хранилище всегда отдаёт полные записи, включая неопубликованный контент.
Скрытие content/video/quiz от учеников - задача слоя представления
(см. CurriculumWeekStudentSerializer).
"""
import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from core.exceptions import ValidationError, WeekNotFound
from core.models import AuditLog
from core.storage import storage_call

from .models import CurriculumWeek, new_week_id
from .quiz import parse_quiz

logger = logging.getLogger(__name__)

GRADE_MIN = 1
GRADE_MAX = 12


def validate_grade(grade):
    if isinstance(grade, bool):
        raise ValidationError({'grade': 'Grade must be an integer.'})
    try:
        grade = int(grade)
    except (TypeError, ValueError):
        raise ValidationError({'grade': 'Grade must be an integer.'})
    if not GRADE_MIN <= grade <= GRADE_MAX:
        raise ValidationError({'grade': f'Grade must be between {GRADE_MIN} and {GRADE_MAX}.'})
    return grade


@storage_call
def create_week(school, grade, order, title, content, quiz=None, video_url='',
                description='', week_id=None, actor=None):
    """
    Создать черновик недели (is_published=False) в пространстве (school, grade).
    school=None - мастер-программа.
    """
    grade = validate_grade(grade)
    try:
        order = int(order)
    except (TypeError, ValueError):
        raise ValidationError({'order': 'Week number must be an integer.'})
    if order < 1:
        raise ValidationError({'order': 'Week number starts at 1.'})
    if not (title or '').strip():
        raise ValidationError({'title': 'Title is required.'})
    if not (content or '').strip():
        raise ValidationError({'content': 'Content is required.'})

    questions = parse_quiz(quiz)

    try:
        with transaction.atomic():
            week = CurriculumWeek.objects.create(
                school=school,
                grade=grade,
                week_id=week_id or new_week_id(),
                order=order,
                title=title.strip(),
                description=description or '',
                content=content,
                video_url=video_url or '',
                quiz=[q.to_dict() for q in questions],
                is_published=False,
            )
    except IntegrityError:
        raise ValidationError({'week_id': 'A week with this id already exists in this curriculum.'})

    AuditLog.log(
        user=actor,
        action='create',
        content_object=week,
        description=f'Draft week {order} "{week.title}" (grade {grade})',
        metadata={'school_id': str(school.pk) if school else None, 'questions': len(questions)},
    )
    logger.info(
        'Week draft created: school=%s, grade=%s, week=%s, questions=%s',
        school.pk if school else 'master', grade, week.week_id, len(questions),
    )
    return week


@storage_call
def get_week(school, grade, week_id):
    try:
        return CurriculumWeek.objects.in_namespace(school, grade).get(week_id=week_id)
    except CurriculumWeek.DoesNotExist:
        raise WeekNotFound()


@storage_call
def list_weeks(school, grade):
    """Недели пространства (school, grade) по возрастанию order."""
    return list(
        CurriculumWeek.objects.in_namespace(school, grade).order_by('order', 'created_at', 'pk')
    )


def _set_published(week, value, actor=None):
    # Условный update: повторная публикация - no-op
    changed = CurriculumWeek.objects.filter(pk=week.pk).exclude(is_published=value).update(
        is_published=value,
        updated_at=timezone.now(),
    )
    week.is_published = value
    if changed:
        AuditLog.log(
            user=actor,
            action='publish' if value else 'lock',
            content_object=week,
            description=f'Week {week.order} "{week.title}"',
        )
        logger.info('Week %s: %s', 'published' if value else 'locked', week.week_id)
    return week


@storage_call
def publish_week(week, actor=None):
    return _set_published(week, True, actor)


@storage_call
def lock_week(week, actor=None):
    return _set_published(week, False, actor)


@storage_call
def toggle_publish(week, actor=None):
    return _set_published(week, not week.is_published, actor)


@storage_call
def delete_week(week, actor=None):
    """
    Жёсткое удаление. Попытки и сдачи, ссылающиеся на week_id, остаются
    как есть: история оценок ключуется строкой week_id, а не FK.
    """
    week_id = week.week_id
    AuditLog.log(
        user=actor,
        action='delete',
        content_object=week,
        description=f'Week {week.order} "{week.title}" deleted',
        metadata={'week_id': week_id, 'grade': week.grade},
    )
    week.delete()
    logger.info('Week deleted: %s', week_id)


@storage_call
def find_week(school, week_id):
    """Неделя по week_id в программе школы (любой параллели)."""
    week = (
        CurriculumWeek.objects.in_namespace(school)
        .filter(week_id=week_id)
        .order_by('grade')
        .first()
    )
    if week is None:
        raise WeekNotFound()
    return week
