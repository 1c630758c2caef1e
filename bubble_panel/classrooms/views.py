"""
API Classroom Registry и Enrollment.

GET  /api/classrooms/                 - классы учителя
POST /api/classrooms/                 - создать класс (учитель школы)
GET  /api/classrooms/preview/?code=   - что за класс по коду (до вступления)
POST /api/classrooms/join/            - вступить по коду (ученик)
POST /api/classrooms/{id}/lock/       - закрыть вступление
POST /api/classrooms/{id}/unlock/     - открыть вступление
"""
import logging

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.models import User
from accounts.permissions import IsStudent, IsTeacher
from core.exceptions import PermissionDenied

from .enrollment import join_classroom
from .models import Classroom
from .serializers import ClassroomCreateSerializer, ClassroomSerializer, JoinClassroomSerializer
from .services import create_classroom, list_classrooms_for_teacher, resolve_class_key, set_classroom_lock

logger = logging.getLogger(__name__)


class ClassroomViewSet(mixins.ListModelMixin,
                       mixins.RetrieveModelMixin,
                       viewsets.GenericViewSet):
    serializer_class = ClassroomSerializer
    permission_classes = [IsAuthenticated]

    def get_permissions(self):
        if self.action in ('create', 'list', 'lock', 'unlock'):
            return [IsAuthenticated(), IsTeacher()]
        if self.action == 'join':
            return [IsAuthenticated(), IsStudent()]
        return [IsAuthenticated()]

    def get_queryset(self):
        user = self.request.user
        if user.role == User.Role.TEACHER:
            return Classroom.objects.filter(teacher=user).prefetch_related('students')
        return Classroom.objects.filter(students=user).prefetch_related('students')

    def list(self, request):
        classrooms = list_classrooms_for_teacher(request.user)
        return Response(ClassroomSerializer(classrooms, many=True).data)

    def create(self, request):
        if request.user.school_id is None:
            raise PermissionDenied('Teacher is not assigned to a school.')
        serializer = ClassroomCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        classroom = create_classroom(
            teacher=request.user,
            school=request.user.school,
            name=serializer.validated_data['name'],
            grade=serializer.validated_data['grade'],
        )
        return Response(ClassroomSerializer(classroom).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'])
    def preview(self, request):
        """Проверка кода без вступления."""
        ref = resolve_class_key(request.query_params.get('code', ''))
        return Response({
            'classroom_id': ref.classroom_id,
            'school_id': ref.school_id,
            'name': ref.name,
            'grade': ref.grade,
        })

    @action(detail=False, methods=['post'])
    def join(self, request):
        serializer = JoinClassroomSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = join_classroom(request.user, serializer.validated_data['code'])
        return Response(
            {
                'classroom': ClassroomSerializer(result.classroom).data,
                'school_id': result.school_id,
                'already_member': result.already_member,
            },
            status=status.HTTP_200_OK if result.already_member else status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=['post'])
    def lock(self, request, pk=None):
        classroom = set_classroom_lock(self.get_object(), True)
        return Response(ClassroomSerializer(classroom).data)

    @action(detail=True, methods=['post'])
    def unlock(self, request, pk=None):
        classroom = set_classroom_lock(self.get_object(), False)
        return Response(ClassroomSerializer(classroom).data)
