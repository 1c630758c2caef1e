from django.contrib import admin

from .models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('id', 'display_name', 'email', 'role', 'school', 'is_staff', 'created_at')
    list_filter = ('role', 'is_staff', 'is_active')
    search_fields = ('id', 'display_name', 'email')
    readonly_fields = ('id', 'created_at', 'updated_at', 'last_login')
    raw_id_fields = ('school',)
    filter_horizontal = ('classrooms',)
    exclude = ('password', 'groups', 'user_permissions')
