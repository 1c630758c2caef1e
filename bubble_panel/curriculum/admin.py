from django.contrib import admin

from .models import CurriculumWeek


@admin.register(CurriculumWeek)
class CurriculumWeekAdmin(admin.ModelAdmin):
    list_display = ['title', 'order', 'grade', 'school', 'week_id', 'is_published', 'updated_at']
    list_filter = ['is_published', 'grade', 'school']
    search_fields = ['title', 'week_id']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['school', 'grade', 'order']
