"""
API Curriculum Store.

    GET/POST    /api/curriculum/{namespace}/{grade}/weeks/
    GET/DELETE  /api/curriculum/{namespace}/{grade}/weeks/{week_id}/
    POST        /api/curriculum/{namespace}/{grade}/weeks/{week_id}/publish/
    POST        /api/curriculum/{namespace}/{grade}/weeks/{week_id}/lock/

namespace - 'master' или UUID школы.

Чтение: мастер-программа - любой аутентифицированный; программа школы -
её участники; операторы платформы - всё.
Запись: мастер - только операторы; программа школы - учителя и
администраторы этой школы.
"""
import logging
import uuid

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import NotFound, PermissionDenied
from tenants.models import School

from .serializers import (
    CurriculumWeekCreateSerializer,
    CurriculumWeekSerializer,
    CurriculumWeekStudentSerializer,
)
from .services import create_week, delete_week, get_week, list_weeks, lock_week, publish_week, validate_grade

logger = logging.getLogger(__name__)

MASTER_NAMESPACE = 'master'


def _is_platform_staff(user):
    return bool(user.is_staff or user.is_superuser)


class CurriculumNamespaceMixin:
    """Разбор namespace/grade из URL и проверка доступа к пространству."""

    def resolve_namespace(self, namespace):
        if namespace == MASTER_NAMESPACE:
            return None
        try:
            school_id = uuid.UUID(str(namespace))
        except ValueError:
            raise NotFound('Unknown curriculum namespace.')
        school = School.objects.filter(pk=school_id).first()
        if school is None:
            raise NotFound('School not found.')
        return school

    def can_write(self, user, school):
        if _is_platform_staff(user):
            return True
        if school is None:
            return False
        return user.is_school_staff() and user.school_id == school.pk

    def check_read(self, user, school):
        if school is None or _is_platform_staff(user):
            return
        if user.school_id != school.pk:
            raise PermissionDenied('You are not a member of this school.')

    def check_write(self, user, school):
        if not self.can_write(user, school):
            raise PermissionDenied('You cannot edit this curriculum.')

    def week_serializer_class(self, user, school):
        if self.can_write(user, school):
            return CurriculumWeekSerializer
        return CurriculumWeekStudentSerializer


class WeekListView(CurriculumNamespaceMixin, APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, namespace, grade):
        school = self.resolve_namespace(namespace)
        self.check_read(request.user, school)
        weeks = list_weeks(school, validate_grade(grade))
        serializer_class = self.week_serializer_class(request.user, school)
        return Response(serializer_class(weeks, many=True).data)

    def post(self, request, namespace, grade):
        school = self.resolve_namespace(namespace)
        self.check_write(request.user, school)
        serializer = CurriculumWeekCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        week = create_week(
            school=school,
            grade=grade,
            actor=request.user,
            **serializer.validated_data,
        )
        return Response(CurriculumWeekSerializer(week).data, status=status.HTTP_201_CREATED)


class WeekDetailView(CurriculumNamespaceMixin, APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, namespace, grade, week_id):
        school = self.resolve_namespace(namespace)
        self.check_read(request.user, school)
        week = get_week(school, validate_grade(grade), week_id)
        serializer_class = self.week_serializer_class(request.user, school)
        return Response(serializer_class(week).data)

    def delete(self, request, namespace, grade, week_id):
        school = self.resolve_namespace(namespace)
        self.check_write(request.user, school)
        week = get_week(school, validate_grade(grade), week_id)
        delete_week(week, actor=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class WeekPublishView(CurriculumNamespaceMixin, APIView):
    permission_classes = [IsAuthenticated]
    publish = True

    def post(self, request, namespace, grade, week_id):
        school = self.resolve_namespace(namespace)
        self.check_write(request.user, school)
        week = get_week(school, validate_grade(grade), week_id)
        if self.publish:
            week = publish_week(week, actor=request.user)
        else:
            week = lock_week(week, actor=request.user)
        return Response(CurriculumWeekSerializer(week).data)
