"""
Role-Based Access Control (RBAC) permission classes.

    from accounts.permissions import IsTeacher, IsSchoolStaff

    class MyView(APIView):
        permission_classes = [IsAuthenticated, IsTeacher]

Доступные классы:
- IsStudent: только ученики
- IsTeacher: только учителя
- IsSchoolStaff: учителя и администраторы школы
- IsPlatformStaff: операторы платформы (is_staff / superuser)
"""
from rest_framework.permissions import BasePermission


class IsStudent(BasePermission):
    """Доступ только для учеников (role='student')"""
    message = 'Available to students only.'

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        return request.user.role == 'student'


class IsTeacher(BasePermission):
    """Доступ только для учителей (role='teacher')"""
    message = 'Available to teachers only.'

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        return request.user.role == 'teacher'


class IsSchoolStaff(BasePermission):
    """Учителя и администраторы школы"""
    message = 'Available to teachers and school administrators only.'

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        return request.user.role in ('teacher', 'school_admin')


class IsPlatformStaff(BasePermission):
    """Операторы платформы: подключение школ, мастер-программа"""
    message = 'Available to platform operators only.'

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        return request.user.is_staff or request.user.is_superuser
