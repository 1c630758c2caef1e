from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

PASSING_PERCENTAGE = 60


class QuizAttempt(models.Model):
    """
    Текущая попытка ученика по квизу недели. Одна на (student, week_id):
    пересдача перезаписывает запись.

    week_id - строка, а не FK: неделя может быть удалена, а история
    оценок должна остаться.
    """

    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='quiz_attempts',
    )
    week_id = models.CharField(max_length=64)
    score = models.PositiveIntegerField(default=0)
    total = models.PositiveIntegerField(default=0)
    percentage = models.PositiveSmallIntegerField(default=0)
    passed = models.BooleanField(default=False)
    answers = models.JSONField(default=list, blank=True)
    completed_at = models.DateTimeField()

    class Meta:
        verbose_name = 'попытка квиза'
        verbose_name_plural = 'попытки квизов'
        ordering = ['-completed_at']
        constraints = [
            models.UniqueConstraint(fields=['student', 'week_id'], name='quiz_attempt_unique_week'),
        ]

    def __str__(self):
        return f"{self.student_id} {self.week_id}: {self.score}/{self.total}"


class AssignmentSubmission(models.Model):
    """Письменная работа ученика за неделю. Проверяется учителем вручную."""

    class Status(models.TextChoices):
        SUBMITTED = 'submitted', 'Сдано'
        GRADED = 'graded', 'Проверено'

    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='assignment_submissions',
    )
    week_id = models.CharField(max_length=64)
    content = models.TextField()
    reflection = models.TextField()
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.SUBMITTED,
        db_index=True,
    )
    grade = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    feedback = models.TextField(null=True, blank=True)
    submitted_at = models.DateTimeField()
    graded_at = models.DateTimeField(null=True, blank=True)
    graded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='graded_submissions',
    )

    class Meta:
        verbose_name = 'сдача задания'
        verbose_name_plural = 'сдачи заданий'
        ordering = ['submitted_at']
        constraints = [
            models.UniqueConstraint(fields=['student', 'week_id'], name='submission_unique_week'),
        ]
        indexes = [
            models.Index(fields=['status', 'submitted_at'], name='submission_queue_idx'),
        ]

    def __str__(self):
        return f"{self.student_id} {self.week_id} ({self.get_status_display()})"

    @property
    def is_graded(self):
        return self.status == self.Status.GRADED
