import secrets

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

# Без I, 1, O, 0 - их путают при вводе с доски
CLASS_KEY_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'
CLASS_KEY_HALF = 3


def generate_class_key():
    """Случайный код вида XXX-XXX. Уникальность проверяет вызывающий код."""
    chars = ''.join(secrets.choice(CLASS_KEY_ALPHABET) for _ in range(CLASS_KEY_HALF * 2))
    return f'{chars[:CLASS_KEY_HALF]}-{chars[CLASS_KEY_HALF:]}'


def normalize_class_key(code):
    return (code or '').strip().upper()


class Classroom(models.Model):
    """Класс учителя внутри школы; ученики вступают по class_key."""

    teacher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='teaching_classrooms',
        verbose_name=_('учитель'),
    )
    school = models.ForeignKey(
        'tenants.School',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='classrooms',
        verbose_name=_('школа'),
    )
    name = models.CharField(_('название'), max_length=200)
    grade = models.PositiveSmallIntegerField(_('параллель'))
    class_key = models.CharField(
        _('код класса'),
        max_length=7,
        unique=True,
        help_text=_('Глобально уникальный код для вступления, формат XXX-XXX'),
    )
    # Список учеников класса (studentIds). Только растёт.
    students = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name='roster_classrooms',
        blank=True,
        verbose_name=_('ученики'),
    )
    is_locked = models.BooleanField(_('закрыт для вступления'), default=False)
    created_at = models.DateTimeField(_('дата создания'), auto_now_add=True)
    updated_at = models.DateTimeField(_('дата обновления'), auto_now=True)

    class Meta:
        verbose_name = _('класс')
        verbose_name_plural = _('классы')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['teacher'], name='classroom_teacher_idx'),
            models.Index(fields=['school', 'grade'], name='classroom_school_grade_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.class_key})"

    def student_count(self):
        return self.students.count()
