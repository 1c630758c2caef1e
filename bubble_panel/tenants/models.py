"""
Tenant models - ядро мультитенантной архитектуры.

Подход: shared-database, shared-schema, FK на School у каждой
tenant-scoped модели. School.id не меняется никогда.
"""
import uuid

from django.db import models


class School(models.Model):
    """Школа (tenant). Создаётся оператором платформы."""

    class Status(models.TextChoices):
        ACTIVE = 'active', 'Активна'
        INACTIVE = 'inactive', 'Неактивна'
        SUSPENDED = 'suspended', 'Приостановлена'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200, help_text='Название школы')
    admin_email = models.EmailField(help_text='Email администратора школы')

    max_students = models.PositiveIntegerField(default=200, help_text='Лицензионный лимит учеников')
    student_count = models.PositiveIntegerField(
        default=0,
        help_text='Денормализованный счётчик, только для отображения',
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)

    plan = models.CharField(max_length=50, default='enterprise_yearly')
    region = models.CharField(max_length=10, default='IN')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Школа'
        verbose_name_plural = 'Школы'

    def __str__(self):
        return f'{self.name} ({self.id})'

    @property
    def is_active(self):
        return self.status == self.Status.ACTIVE
