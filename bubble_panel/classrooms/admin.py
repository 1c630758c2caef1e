from django.contrib import admin

from .models import Classroom


@admin.register(Classroom)
class ClassroomAdmin(admin.ModelAdmin):
    list_display = ['name', 'class_key', 'grade', 'teacher', 'school', 'is_locked', 'created_at']
    list_filter = ['is_locked', 'grade', 'school']
    search_fields = ['name', 'class_key', 'teacher__id', 'teacher__display_name']
    readonly_fields = ['class_key', 'created_at', 'updated_at']
    filter_horizontal = ['students']
    raw_id_fields = ['teacher', 'school']
