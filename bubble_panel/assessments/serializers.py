from rest_framework import serializers

from .models import AssignmentSubmission, QuizAttempt


class QuizAttemptSerializer(serializers.ModelSerializer):
    student_id = serializers.CharField(read_only=True)

    class Meta:
        model = QuizAttempt
        fields = [
            'id', 'student_id', 'week_id',
            'score', 'total', 'percentage', 'passed',
            'completed_at',
        ]
        read_only_fields = fields


class QuizAttemptCreateSerializer(serializers.Serializer):
    week_id = serializers.CharField(max_length=64)
    answers = serializers.ListField(child=serializers.IntegerField(min_value=0), allow_empty=False)


class AssignmentSubmissionSerializer(serializers.ModelSerializer):
    student_id = serializers.CharField(read_only=True)
    graded_by_id = serializers.CharField(read_only=True, allow_null=True)

    class Meta:
        model = AssignmentSubmission
        fields = [
            'id', 'student_id', 'week_id',
            'content', 'reflection',
            'status', 'grade', 'feedback',
            'submitted_at', 'graded_at', 'graded_by_id',
        ]
        read_only_fields = fields


class AssignmentSubmitSerializer(serializers.Serializer):
    week_id = serializers.CharField(max_length=64)
    content = serializers.CharField()
    reflection = serializers.CharField()


class GradeSerializer(serializers.Serializer):
    grade = serializers.IntegerField(min_value=0, max_value=100)
    feedback = serializers.CharField(required=False, allow_blank=True, default='')


class PendingSubmissionSerializer(serializers.Serializer):
    submission_id = serializers.IntegerField()
    student_id = serializers.CharField()
    student_name = serializers.CharField()
    week_id = serializers.CharField()
    content = serializers.CharField()
    reflection = serializers.CharField()
    submitted_at = serializers.DateTimeField()
