"""
GET /api/gradebook/me/             - сводка текущего ученика
GET /api/gradebook/students/{id}/  - сводка ученика для его учителя
"""
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.models import User
from accounts.permissions import IsStudent
from core.exceptions import NotFound, PermissionDenied

from .serializers import StudentReportSerializer
from .services import compute_report


class MyReportView(APIView):
    permission_classes = [IsAuthenticated, IsStudent]

    def get(self, request):
        return Response(StudentReportSerializer(compute_report(request.user)).data)


class StudentReportView(APIView):
    """
    Доступ: операторы платформы или учитель, у которого ученик
    в одном из классов той же школы.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, student_id):
        student = User.objects.filter(pk=student_id, role=User.Role.STUDENT).first()
        if student is None:
            raise NotFound('Student not found.')

        user = request.user
        if not (user.is_staff or user.is_superuser):
            if not user.is_school_staff() or user.school_id is None or user.school_id != student.school_id:
                raise PermissionDenied('You cannot view this student.')
            if user.role == User.Role.TEACHER and not student.roster_classrooms.filter(teacher=user).exists():
                raise PermissionDenied('This student is not in your classes.')

        return Response(StudentReportSerializer(compute_report(student)).data)
