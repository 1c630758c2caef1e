from django.contrib import admin

from .models import School
from .services import recalculate_student_count


@admin.register(School)
class SchoolAdmin(admin.ModelAdmin):
    list_display = ('name', 'admin_email', 'status', 'student_count', 'max_students', 'plan', 'created_at')
    list_filter = ('status', 'plan', 'region')
    search_fields = ('name', 'admin_email')
    readonly_fields = ('id', 'student_count', 'created_at', 'updated_at')

    actions = ['recalculate_counts']

    def recalculate_counts(self, request, queryset):
        """Пересчитать student_count по реальным ученикам"""
        for school in queryset:
            recalculate_student_count(school)
        self.message_user(request, f"Счётчик учеников пересчитан для {queryset.count()} школ")
    recalculate_counts.short_description = "Пересчитать число учеников"
