from rest_framework import serializers

from assessments.serializers import AssignmentSubmissionSerializer, QuizAttemptSerializer


class WeekReportSerializer(serializers.Serializer):
    week_id = serializers.CharField()
    grade_level = serializers.IntegerField(allow_null=True)
    order = serializers.IntegerField(allow_null=True)
    quiz = QuizAttemptSerializer(allow_null=True)
    assignment = AssignmentSubmissionSerializer(allow_null=True)


class StudentReportSerializer(serializers.Serializer):
    student_id = serializers.CharField()
    per_week = WeekReportSerializer(many=True)
    average_percentage = serializers.IntegerField()
    passing = serializers.BooleanField()
    certificate_eligible = serializers.BooleanField()
