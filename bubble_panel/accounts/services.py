"""
Identity Binding - связывание аутентифицированного principal с профилем.
"""
import logging

from django.contrib.auth.hashers import make_password

from core.exceptions import ValidationError
from core.storage import storage_call

from .models import User

logger = logging.getLogger(__name__)

# Поля, которые identity provider может передать при первом появлении.
# Роль, школа и классы сюда не входят.
PROFILE_FIELDS = ('display_name', 'email', 'photo_url')

SELECTABLE_ROLES = (User.Role.STUDENT, User.Role.TEACHER, User.Role.SCHOOL_ADMIN)


@storage_call
def bind_or_create_profile(principal_id, defaults=None):
    """
    Вернуть профиль principal'а, создав его при первом появлении.

    Существующий профиль возвращается без изменений. Конкурентные вызовы
    для одного principal сходятся на одной строке: id профиля = principal id,
    а get_or_create переживает гонку на вставке.
    """
    if not principal_id:
        raise ValidationError({'principal_id': 'Principal id is required.'})

    defaults = defaults or {}
    create_fields = {
        field: defaults[field]
        for field in PROFILE_FIELDS
        if defaults.get(field) is not None
    }
    create_fields['role'] = User.Role.UNSET
    # Пароли живут у identity provider
    create_fields['password'] = make_password(None)

    user, created = User.objects.get_or_create(id=str(principal_id), defaults=create_fields)
    if created:
        logger.info('Profile created on first sight: principal=%s', user.id)
    return user


@storage_call
def select_role(user, role):
    """
    Выбор роли - ровно один раз.

    Повторный выбор той же роли - успешный no-op. Смена уже выбранной
    роли запрещена. Обновление условное (role='unset'), поэтому из двух
    одновременных выборов выигрывает только один.
    """
    if role not in SELECTABLE_ROLES:
        raise ValidationError({'role': f'Unknown role "{role}".'})

    if user.role == role:
        return user
    if user.role != User.Role.UNSET:
        raise ValidationError({'role': 'Role has already been chosen and cannot be changed.'})

    updated = User.objects.filter(pk=user.pk, role=User.Role.UNSET).update(role=role)
    if not updated:
        user.refresh_from_db(fields=['role'])
        if user.role == role:
            return user
        raise ValidationError({'role': 'Role has already been chosen and cannot be changed.'})

    user.role = role
    logger.info('Role selected: user=%s, role=%s', user.pk, role)
    return user
