from django.contrib import admin

from .models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ('timestamp', 'user', 'action', 'object_type', 'object_id')
    list_filter = ('action', 'object_type')
    search_fields = ('object_id', 'description', 'user__id')
    readonly_fields = [f.name for f in AuditLog._meta.fields]
    raw_id_fields = ('user',)
