from django.contrib import admin

from .models import TutorExchange


@admin.register(TutorExchange)
class TutorExchangeAdmin(admin.ModelAdmin):
    list_display = ['user', 'school', 'mode', 'created_at', 'has_error']
    list_filter = ['mode', 'school']
    search_fields = ['user__id', 'prompt']
    readonly_fields = ['created_at']
    raw_id_fields = ['user', 'school']

    @admin.display(boolean=True, description='Ошибка')
    def has_error(self, obj):
        return bool(obj.error)
