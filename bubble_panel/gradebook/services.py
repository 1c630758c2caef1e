"""
Gradebook Aggregator - сводка успеваемости ученика.

Средний процент считается по "плоскому" списку сигналов: каждый
процент квиза и каждая выставленная оценка за задание. Непроверенные
задания в среднее не входят.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from assessments.models import PASSING_PERCENTAGE, AssignmentSubmission, QuizAttempt
from assessments.services import round_half_up
from core.storage import storage_call
from curriculum.models import CurriculumWeek

logger = logging.getLogger(__name__)


@dataclass
class WeekReport:
    week_id: str
    quiz: Optional[QuizAttempt] = None
    assignment: Optional[AssignmentSubmission] = None
    grade_level: Optional[int] = None
    order: Optional[int] = None

    def signals(self):
        values = []
        if self.quiz is not None:
            values.append(self.quiz.percentage)
        if self.assignment is not None and self.assignment.grade is not None:
            values.append(self.assignment.grade)
        return values

    def first_activity_at(self):
        stamps = []
        if self.quiz is not None:
            stamps.append(self.quiz.completed_at)
        if self.assignment is not None:
            stamps.append(self.assignment.submitted_at)
        return min(stamps)

    def sort_key(self):
        # Недели программы школы - по (параллель, номер); остальные - после них, по времени сдачи
        if self.order is not None:
            return (0, self.grade_level, self.order, self.week_id)
        return (1, self.first_activity_at(), 0, self.week_id)


@dataclass
class StudentReport:
    student_id: str
    per_week: List[WeekReport] = field(default_factory=list)
    average_percentage: int = 0
    passing: bool = False
    certificate_eligible: bool = False


def average_of(values):
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


@storage_call
def compute_report(student):
    attempts = QuizAttempt.objects.filter(student=student)
    submissions = AssignmentSubmission.objects.filter(student=student)

    weeks = {}
    for attempt in attempts:
        weeks.setdefault(attempt.week_id, WeekReport(attempt.week_id)).quiz = attempt
    for submission in submissions:
        weeks.setdefault(submission.week_id, WeekReport(submission.week_id)).assignment = submission

    placements = (
        CurriculumWeek.objects.in_namespace(student.school)
        .filter(week_id__in=list(weeks))
        .values_list('week_id', 'grade', 'order')
    )
    for week_id, grade, order in placements:
        week = weeks[week_id]
        if week.order is None or (grade, order) < (week.grade_level, week.order):
            week.grade_level, week.order = grade, order

    per_week = sorted(weeks.values(), key=WeekReport.sort_key)
    signals = [value for week in per_week for value in week.signals()]
    average = average_of(signals)
    passing = average >= PASSING_PERCENTAGE

    report = StudentReport(
        student_id=student.pk,
        per_week=per_week,
        average_percentage=average,
        passing=passing,
        certificate_eligible=passing and len(per_week) > 0,
    )
    logger.debug('Report for %s: avg=%s over %s signals', student.pk, average, len(signals))
    return report
