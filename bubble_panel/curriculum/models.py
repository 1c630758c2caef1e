import copy
import uuid

from django.db import models
from django.db.models import Q

from .quiz import parse_quiz


def new_week_id():
    return uuid.uuid4().hex


class CurriculumWeekQuerySet(models.QuerySet):

    def master(self):
        return self.filter(school__isnull=True)

    def in_namespace(self, school, grade=None):
        """school=None - мастер-программа."""
        qs = self.master() if school is None else self.filter(school=school)
        if grade is not None:
            qs = qs.filter(grade=grade)
        return qs


class CurriculumWeek(models.Model):
    """
    Учебная неделя: урок + видео + квиз.

    Пространство имён - пара (school, grade); school=None это мастер-программа,
    из которой копируются программы школ. week_id сохраняется при копировании,
    поэтому оценки, привязанные к week_id, одинаково читаются в любой школе.
    """

    # Поля, которые копируются из мастер-программы как есть
    CLONED_FIELDS = ('order', 'title', 'description', 'content', 'video_url', 'is_published', 'quiz')

    school = models.ForeignKey(
        'tenants.School',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='curriculum_weeks',
        help_text='Пусто - мастер-программа',
    )
    grade = models.PositiveSmallIntegerField(help_text='Класс (параллель), например 6')
    week_id = models.CharField(max_length=64, default=new_week_id, db_index=True)

    order = models.PositiveIntegerField(default=1, help_text='Номер недели, с 1')
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    content = models.TextField(blank=True, default='')
    video_url = models.URLField(max_length=500, blank=True, default='')
    is_published = models.BooleanField(default=False)
    quiz = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CurriculumWeekQuerySet.as_manager()

    class Meta:
        ordering = ['grade', 'order', 'created_at']
        verbose_name = 'неделя программы'
        verbose_name_plural = 'недели программы'
        constraints = [
            models.UniqueConstraint(
                fields=['school', 'grade', 'week_id'],
                condition=Q(school__isnull=False),
                name='week_unique_in_school',
            ),
            models.UniqueConstraint(
                fields=['grade', 'week_id'],
                condition=Q(school__isnull=True),
                name='week_unique_in_master',
            ),
        ]
        indexes = [
            models.Index(fields=['school', 'grade', 'order'], name='week_namespace_order_idx'),
        ]

    def __str__(self):
        return f"Week {self.order}: {self.title}"

    @property
    def is_master(self):
        return self.school_id is None

    @property
    def questions(self):
        return parse_quiz(self.quiz)

    def clone_values(self):
        return {name: copy.deepcopy(getattr(self, name)) for name in self.CLONED_FIELDS}
