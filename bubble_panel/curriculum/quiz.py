"""
Вопросы квиза и черновик квиза.

Квиз хранится в CurriculumWeek.quiz как JSON-список:
    [{"text": "...", "options": ["A", "B"], "correct_option_index": 0}, ...]
"""
from dataclasses import asdict, dataclass, field
from typing import List

from core.exceptions import ValidationError

MIN_OPTIONS = 2
MAX_OPTIONS = 4


@dataclass(frozen=True)
class Question:
    text: str
    options: List[str] = field(default_factory=list)
    correct_option_index: int = 0

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise ValidationError({'quiz': 'Each question must be an object.'})
        return validate_question(
            data.get('text', ''),
            data.get('options') or [],
            data.get('correct_option_index'),
        )

    def to_dict(self):
        return asdict(self)

    def to_student_dict(self):
        """Без правильного ответа - для выдачи ученикам."""
        return {'text': self.text, 'options': list(self.options)}


def validate_question(text, options, correct_option_index):
    """Собрать Question, проверив текст, 2–4 варианта и индекс ответа."""
    text = (text or '').strip()
    if not text:
        raise ValidationError({'quiz': 'Question text is required.'})

    if not isinstance(options, (list, tuple)):
        raise ValidationError({'quiz': 'Options must be a list.'})
    options = [str(o).strip() for o in options]
    if any(not o for o in options):
        raise ValidationError({'quiz': 'Options must be non-empty strings.'})
    if not MIN_OPTIONS <= len(options) <= MAX_OPTIONS:
        raise ValidationError({'quiz': f'A question needs {MIN_OPTIONS} to {MAX_OPTIONS} options.'})

    if isinstance(correct_option_index, bool) or not isinstance(correct_option_index, int):
        raise ValidationError({'quiz': 'correct_option_index must be an integer.'})
    if not 0 <= correct_option_index < len(options):
        raise ValidationError({'quiz': 'correct_option_index is out of range for the options.'})

    return Question(text=text, options=options, correct_option_index=correct_option_index)


def parse_quiz(raw):
    """JSON-список → список Question (с валидацией)."""
    if raw in (None, ''):
        return []
    if not isinstance(raw, (list, tuple)):
        raise ValidationError({'quiz': 'Quiz must be a list of questions.'})
    return [Question.from_dict(item) for item in raw]


class QuizDraft:
    """
    Черновик квиза: вопросы добавляются по одному, затем вся пачка
    уходит в create_week(quiz=draft.to_list()).

        draft = QuizDraft()
        draft.add_question('2 + 2 = ?', ['3', '4'], 1)
        create_week(school, 6, order=1, title='Week 1', content='...', quiz=draft.to_list())
    """

    def __init__(self, questions=None):
        self._questions = list(parse_quiz(questions))

    def __len__(self):
        return len(self._questions)

    @property
    def questions(self):
        return list(self._questions)

    def add_question(self, text, options, correct_option_index):
        # Пустые варианты из формы (3-й и 4-й поля) просто отбрасываем
        options = [o for o in (options or []) if str(o).strip()]
        question = validate_question(text, options, correct_option_index)
        self._questions.append(question)
        return question

    def clear(self):
        self._questions = []

    def to_list(self):
        return [q.to_dict() for q in self._questions]
