"""
API views для tenants - только для операторов платформы.

POST /api/schools/                          - подключить школу (+ клонирование программы)
POST /api/schools/{id}/clone-curriculum/    - повторить только клонирование
POST /api/schools/{id}/teachers/            - привязать учителя к школе
"""
import logging

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.models import User
from accounts.permissions import IsPlatformStaff
from accounts.serializers import UserSerializer
from core.exceptions import CurriculumCloneError, NotFound

from .models import School
from .serializers import AssignTeacherSerializer, SchoolOnboardSerializer, SchoolSerializer
from .services import assign_teacher_school, clone_master_curriculum, onboard_school
from .tasks import retry_curriculum_clone

logger = logging.getLogger(__name__)


class SchoolViewSet(mixins.ListModelMixin,
                    mixins.RetrieveModelMixin,
                    viewsets.GenericViewSet):
    queryset = School.objects.all()
    serializer_class = SchoolSerializer
    permission_classes = [IsAuthenticated, IsPlatformStaff]

    def create(self, request):
        serializer = SchoolOnboardSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            school = onboard_school(actor=request.user, **serializer.validated_data)
        except CurriculumCloneError as exc:
            self._schedule_clone_retry(exc.school_id)
            raise
        return Response(SchoolSerializer(school).data, status=status.HTTP_201_CREATED)

    @staticmethod
    def _schedule_clone_retry(school_id):
        try:
            retry_curriculum_clone.delay(str(school_id))
        except Exception as exc:
            # Брокер недоступен - оператор повторит вручную (clone_curriculum)
            logger.error('Could not schedule clone retry for school %s: %s', school_id, exc)

    @action(detail=True, methods=['post'], url_path='clone-curriculum')
    def clone_curriculum(self, request, pk=None):
        school = self.get_object()
        copied = clone_master_curriculum(school, actor=request.user)
        return Response({'school_id': str(school.pk), 'weeks_copied': copied})

    @action(detail=True, methods=['post'])
    def teachers(self, request, pk=None):
        school = self.get_object()
        serializer = AssignTeacherSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            user = User.objects.get(pk=serializer.validated_data['user_id'])
        except User.DoesNotExist:
            raise NotFound('User not found.')
        user = assign_teacher_school(user, school)
        return Response(UserSerializer(user).data)
