"""
AI-репетитор: вопрос → модель → ответ, каждый вызов сохраняется в журнал.
"""
import logging

from core.exceptions import CompletionServiceError, ValidationError
from core.storage import storage_call

from .client import CompletionError, GeminiCompletionClient
from .models import TutorExchange

logger = logging.getLogger(__name__)

MAX_PROMPT_LENGTH = 4000

PROMPT_TEMPLATES = {
    'explain': 'Explain this simply to a student: {prompt}',
    'lab': '{prompt}',
}


def build_prompt(prompt, mode):
    return PROMPT_TEMPLATES[mode].format(prompt=prompt)


def ask_tutor(user, prompt, mode=TutorExchange.Mode.EXPLAIN, client=None):
    prompt = (prompt or '').strip()
    if not prompt:
        raise ValidationError({'prompt': 'Prompt is required.'})
    if len(prompt) > MAX_PROMPT_LENGTH:
        raise ValidationError({'prompt': f'Prompt is longer than {MAX_PROMPT_LENGTH} characters.'})
    if mode not in PROMPT_TEMPLATES:
        raise ValidationError({'mode': f'Unknown mode "{mode}".'})

    client = client or GeminiCompletionClient()
    response = error = None
    try:
        response = client.complete(build_prompt(prompt, mode))
    except CompletionError as exc:
        error = str(exc)
        logger.warning('Tutor completion failed: user=%s, error=%s', user.pk, exc)

    with storage_call('ask_tutor.save'):
        exchange = TutorExchange.objects.create(
            user=user,
            school_id=user.school_id,
            mode=mode,
            prompt=prompt,
            response=response,
            error=error,
        )

    if error is not None:
        raise CompletionServiceError()
    logger.info('Tutor answered: user=%s, mode=%s, exchange=%s', user.pk, mode, exchange.pk)
    return exchange


@storage_call
def list_tutor_exchanges(teacher, limit=100):
    """Последние вопросы учеников школы учителя."""
    if teacher.school_id is None:
        return []
    return list(
        TutorExchange.objects
        .filter(school_id=teacher.school_id, user__role='student')
        .select_related('user')
        .order_by('-created_at')[:limit]
    )
