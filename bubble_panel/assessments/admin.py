from django.contrib import admin

from .models import AssignmentSubmission, QuizAttempt


@admin.register(QuizAttempt)
class QuizAttemptAdmin(admin.ModelAdmin):
    list_display = ['student', 'week_id', 'score', 'total', 'percentage', 'passed', 'completed_at']
    list_filter = ['passed']
    search_fields = ['student__id', 'student__display_name', 'week_id']
    raw_id_fields = ['student']


@admin.register(AssignmentSubmission)
class AssignmentSubmissionAdmin(admin.ModelAdmin):
    list_display = ['student', 'week_id', 'status', 'grade', 'submitted_at', 'graded_at', 'graded_by']
    list_filter = ['status']
    search_fields = ['student__id', 'student__display_name', 'week_id']
    readonly_fields = ['submitted_at', 'graded_at']
    raw_id_fields = ['student', 'graded_by']
