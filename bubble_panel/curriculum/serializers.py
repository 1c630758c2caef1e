from rest_framework import serializers

from .models import CurriculumWeek
from .quiz import MAX_OPTIONS, MIN_OPTIONS, parse_quiz


class QuestionSerializer(serializers.Serializer):
    text = serializers.CharField()
    options = serializers.ListField(
        child=serializers.CharField(),
        min_length=MIN_OPTIONS,
        max_length=MAX_OPTIONS,
    )
    correct_option_index = serializers.IntegerField(min_value=0)

    def validate(self, attrs):
        if attrs['correct_option_index'] >= len(attrs['options']):
            raise serializers.ValidationError(
                {'correct_option_index': 'Index is out of range for the options.'}
            )
        return attrs


class CurriculumWeekSerializer(serializers.ModelSerializer):
    """Полная неделя - для учителей школы и операторов."""
    school_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = CurriculumWeek
        fields = [
            'week_id', 'school_id', 'grade', 'order',
            'title', 'description', 'content', 'video_url',
            'is_published', 'quiz',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class CurriculumWeekStudentSerializer(serializers.ModelSerializer):
    """
    Неделя для ученика.

    Пока неделя не опубликована, ученик видит только заголовок и номер:
    content, video_url и quiz не отдаются. Правильные ответы не
    отдаются никогда.
    """
    quiz = serializers.SerializerMethodField()

    class Meta:
        model = CurriculumWeek
        fields = [
            'week_id', 'grade', 'order', 'title', 'description',
            'content', 'video_url', 'is_published', 'quiz',
        ]
        read_only_fields = fields

    def get_quiz(self, obj):
        return [q.to_student_dict() for q in parse_quiz(obj.quiz)]

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if not instance.is_published:
            for hidden in ('content', 'video_url', 'quiz'):
                data.pop(hidden, None)
        return data


class CurriculumWeekCreateSerializer(serializers.Serializer):
    week_id = serializers.CharField(max_length=64, required=False)
    order = serializers.IntegerField(min_value=1)
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    content = serializers.CharField()
    video_url = serializers.URLField(required=False, allow_blank=True, default='')
    quiz = QuestionSerializer(many=True, required=False, default=list)
