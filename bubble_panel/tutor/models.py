from django.conf import settings
from django.db import models


class TutorExchange(models.Model):
    """Один вопрос к AI-репетитору и его ответ. Учитель видит журнал своей школы."""

    class Mode(models.TextChoices):
        EXPLAIN = 'explain', 'Объяснение'
        LAB = 'lab', 'Лаборатория'

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='tutor_exchanges',
    )
    # Снимок школы на момент вопроса
    school = models.ForeignKey(
        'tenants.School',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tutor_exchanges',
    )
    mode = models.CharField(max_length=20, choices=Mode.choices, default=Mode.EXPLAIN)
    prompt = models.TextField()
    response = models.TextField(null=True, blank=True)
    error = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = 'вопрос репетитору'
        verbose_name_plural = 'вопросы репетитору'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['school', '-created_at'], name='tutor_school_recent_idx'),
        ]

    def __str__(self):
        return f"{self.user_id}: {self.prompt[:50]}"
