import logging

from celery import shared_task

from core.exceptions import TransientStorageError

from .models import School
from .services import clone_master_curriculum

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    name='tenants.tasks.retry_curriculum_clone',
    autoretry_for=(TransientStorageError,),
    retry_backoff=True,
    max_retries=5,
)
def retry_curriculum_clone(self, school_id):
    """Повторить только стадию клонирования для уже созданной школы."""
    try:
        school = School.objects.get(pk=school_id)
    except School.DoesNotExist:
        logger.warning('Clone retry skipped, school not found: %s', school_id)
        return 0
    copied = clone_master_curriculum(school)
    logger.info('Clone retry succeeded: school=%s, weeks=%s, attempt=%s', school_id, copied, self.request.retries)
    return copied
