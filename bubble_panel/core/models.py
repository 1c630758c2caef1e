from django.conf import settings
from django.db import models


class AuditLog(models.Model):
    """
    Журнал аудита действий пользователей.

    Объект описывается парой (object_type, object_id) строками, а не
    GenericForeignKey: первичные ключи у нас разных типов (UUID школы,
    строковый id пользователя, int у остальных).
    """
    ACTION_CHOICES = [
        ('onboard', 'Подключение школы'),
        ('clone', 'Клонирование программы'),
        ('create', 'Создание'),
        ('publish', 'Публикация'),
        ('lock', 'Скрытие'),
        ('delete', 'Удаление'),
        ('enroll', 'Вступление в класс'),
        ('submit', 'Отправка работы'),
        ('grade', 'Выставление оценки'),
        ('other', 'Другое'),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs',
        help_text='Пользователь, совершивший действие',
    )
    action = models.CharField(max_length=20, choices=ACTION_CHOICES, db_index=True)
    object_type = models.CharField(max_length=64, blank=True, default='')
    object_id = models.CharField(max_length=64, blank=True, default='')
    description = models.TextField(blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ['-timestamp']
        verbose_name = 'Аудит-лог'
        verbose_name_plural = 'Аудит-логи'
        indexes = [
            models.Index(fields=['object_type', 'object_id'], name='audit_object_idx'),
        ]

    def __str__(self):
        who = self.user_id or 'system'
        return f'{who} - {self.get_action_display()} {self.object_type}:{self.object_id}'

    @classmethod
    def log(cls, user, action, content_object=None, description='', metadata=None, request=None):
        """
        Пример:
            AuditLog.log(
                user=teacher,
                action='grade',
                content_object=submission,
                description=f'Оценка {grade}',
                metadata={'grade': grade},
            )
        """
        log_data = {
            'user': user if getattr(user, 'pk', None) else None,
            'action': action,
            'description': description,
            'metadata': metadata or {},
        }
        if content_object is not None:
            log_data['object_type'] = content_object._meta.label_lower
            log_data['object_id'] = str(content_object.pk)
        if request is not None:
            x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
            if x_forwarded_for:
                log_data['ip_address'] = x_forwarded_for.split(',')[0].strip()
            else:
                log_data['ip_address'] = request.META.get('REMOTE_ADDR')
        return cls.objects.create(**log_data)
