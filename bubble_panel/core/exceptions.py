"""
Таксономия ошибок ядра платформы.

Все ошибки наследуются от DRF APIException, поэтому стандартный
exception handler DRF отдаёт их клиенту как JSON с полями detail/code,
а сервисный слой может бросать их напрямую, без знания о HTTP.

    ValidationError        - плохой ввод, не ретраится (400)
    NotFound               - код класса / неделя / пользователь не найдены (404)
    ClassroomLocked        - класс существует, но закрыт для вступления (423)
    TenantLimitError       - превышен лицензионный лимит школы (403)
    DataIntegrityError     - нарушение целостности данных, фатально (409/500)
    TransientStorageError  - сбой/таймаут хранилища, можно повторить (503)
"""
from rest_framework import status
from rest_framework.exceptions import (
    APIException,
    NotFound,
    PermissionDenied,
    ValidationError,
)

__all__ = [
    'ValidationError',
    'NotFound',
    'PermissionDenied',
    'ClassKeyNotFound',
    'WeekNotFound',
    'SubmissionNotFound',
    'ClassroomLocked',
    'TenantLimitError',
    'DataIntegrityError',
    'MissingSchoolLink',
    'TenantMismatch',
    'TransientStorageError',
    'CurriculumCloneError',
    'CompletionServiceError',
]


class ClassKeyNotFound(NotFound):
    default_detail = 'Invalid class key.'
    default_code = 'invalid_code'


class WeekNotFound(NotFound):
    default_detail = 'Curriculum week not found.'
    default_code = 'week_not_found'


class SubmissionNotFound(NotFound):
    default_detail = 'Assignment submission not found.'
    default_code = 'submission_not_found'


class ClassroomLocked(APIException):
    """Класс найден, но учитель закрыл вступление. Отличается от NotFound."""
    status_code = status.HTTP_423_LOCKED
    default_detail = 'This class is locked by the teacher.'
    default_code = 'locked'


class TenantLimitError(PermissionDenied):
    """Превышен лимит ресурсов школы (max_students)."""
    default_detail = 'School license limit reached.'
    default_code = 'tenant_limit'


class DataIntegrityError(APIException):
    """Данные противоречат инвариантам. Никогда не глотается молча."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Data integrity violation.'
    default_code = 'integrity_error'


class MissingSchoolLink(DataIntegrityError):
    default_detail = 'Classroom is not linked to a school.'
    default_code = 'missing_school_link'


class TenantMismatch(DataIntegrityError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'User already belongs to a different school.'
    default_code = 'tenant_mismatch'


class TransientStorageError(APIException):
    """Сбой ввода-вывода или таймаут хранилища. Операцию можно повторить."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Storage is temporarily unavailable, please retry.'
    default_code = 'transient_storage_error'


class CurriculumCloneError(TransientStorageError):
    """Школа создана, но программа не скопирована. Повторять только клонирование."""
    default_detail = 'School was created but curriculum cloning failed; retry the clone step.'
    default_code = 'curriculum_clone_failed'

    def __init__(self, school_id, detail=None, code=None):
        self.school_id = school_id
        if detail is None:
            detail = {'detail': self.default_detail, 'school_id': str(school_id)}
        super().__init__(detail=detail, code=code)


class CompletionServiceError(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'AI tutor is unavailable right now.'
    default_code = 'completion_failed'
