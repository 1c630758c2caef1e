"""
Assessment Engine - проверка квизов и приём/оценка заданий.
"""
import logging
from decimal import ROUND_HALF_UP, Decimal

from django.utils import timezone

from core.exceptions import ValidationError
from core.models import AuditLog
from core.storage import storage_call
from curriculum.quiz import parse_quiz

from .models import PASSING_PERCENTAGE, AssignmentSubmission, QuizAttempt
from .tasks import notify_student_graded

logger = logging.getLogger(__name__)


def round_half_up(value):
    """66.5 → 67, как Math.round для неотрицательных чисел."""
    return int(Decimal(str(value)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def percentage_of(score, total):
    if not total:
        return 0
    return round_half_up(Decimal(100) * score / total)


def score_quiz(answers, quiz):
    """
    Посчитать правильные ответы.

    answers - индексы выбранных вариантов, по одному на вопрос.
    quiz - список Question или сырые dict'ы из CurriculumWeek.quiz.

    Returns:
        (score, total)
    """
    questions = parse_quiz(quiz)
    if not questions:
        raise ValidationError({'quiz': 'This week has no quiz.'})
    if not isinstance(answers, (list, tuple)):
        raise ValidationError({'answers': 'Answers must be a list.'})
    if len(answers) != len(questions):
        raise ValidationError({
            'answers': f'Expected {len(questions)} answers, got {len(answers)}.'
        })

    score = sum(
        1 for answer, question in zip(answers, questions)
        if not isinstance(answer, bool) and answer == question.correct_option_index
    )
    return score, len(questions)


@storage_call
def submit_quiz_attempt(student, week_id, answers, quiz):
    """Проверить и сохранить попытку. Пересдача перезаписывает прошлую."""
    if not week_id:
        raise ValidationError({'week_id': 'Week id is required.'})
    score, total = score_quiz(answers, quiz)
    percentage = percentage_of(score, total)

    attempt, created = QuizAttempt.objects.update_or_create(
        student=student,
        week_id=week_id,
        defaults={
            'score': score,
            'total': total,
            'percentage': percentage,
            'passed': percentage >= PASSING_PERCENTAGE,
            'answers': list(answers),
            'completed_at': timezone.now(),
        },
    )
    logger.info(
        'Quiz attempt %s: student=%s, week=%s, %s/%s (%s%%)',
        'saved' if created else 'retaken', student.pk, week_id, score, total, percentage,
    )
    return attempt


@storage_call
def submit_assignment(student, week_id, content, reflection):
    """
    Сдать задание. Повторная сдача перезаписывает работу и снова
    отправляет её на проверку (оценка и отзыв сбрасываются).
    """
    errors = {}
    if not week_id:
        errors['week_id'] = 'Week id is required.'
    if not (content or '').strip():
        errors['content'] = 'Assignment content is required.'
    if not (reflection or '').strip():
        errors['reflection'] = 'Reflection is required.'
    if errors:
        raise ValidationError(errors)

    submission, created = AssignmentSubmission.objects.update_or_create(
        student=student,
        week_id=week_id,
        defaults={
            'content': content,
            'reflection': reflection,
            'status': AssignmentSubmission.Status.SUBMITTED,
            'grade': None,
            'feedback': None,
            'graded_at': None,
            'graded_by': None,
            'submitted_at': timezone.now(),
        },
    )
    AuditLog.log(
        user=student,
        action='submit',
        content_object=submission,
        description=f'Assignment for week {week_id}',
        metadata={'resubmission': not created},
    )
    logger.info('Assignment %s: student=%s, week=%s',
                'submitted' if created else 'resubmitted', student.pk, week_id)
    return submission


def _validate_grade_value(grade):
    if isinstance(grade, bool) or not isinstance(grade, int):
        raise ValidationError({'grade': 'Grade must be an integer between 0 and 100.'})
    if not 0 <= grade <= 100:
        raise ValidationError({'grade': 'Grade must be an integer between 0 and 100.'})
    return grade


@storage_call
def grade_assignment(submission, grade, feedback, teacher=None):
    """
    Выставить оценку. Повторная оценка перезаписывает предыдущую,
    прошлое значение сохраняется в журнале аудита.
    """
    grade = _validate_grade_value(grade)
    previous_grade = submission.grade if submission.is_graded else None

    submission.grade = grade
    submission.feedback = feedback or ''
    submission.status = AssignmentSubmission.Status.GRADED
    submission.graded_at = timezone.now()
    submission.graded_by = teacher
    submission.save(update_fields=['grade', 'feedback', 'status', 'graded_at', 'graded_by'])

    AuditLog.log(
        user=teacher,
        action='grade',
        content_object=submission,
        description=f'Graded {grade}/100 for week {submission.week_id}',
        metadata={
            'student_id': submission.student_id,
            'grade': grade,
            'previous_grade': previous_grade,
        },
    )
    logger.info(
        'Assignment graded: submission=%s, grade=%s, previous=%s, teacher=%s',
        submission.pk, grade, previous_grade, getattr(teacher, 'pk', None),
    )

    try:
        notify_student_graded.delay(submission.pk)
    except Exception as exc:
        # Оценка уже сохранена; уведомление не критично
        logger.warning('Could not queue grade notification for %s: %s', submission.pk, exc)
    return submission
