"""
API Assessment Engine и очереди проверки.

POST /api/assessments/quiz-attempts/             - сдать квиз (ученик)
GET  /api/assessments/quiz-attempts/             - мои попытки
POST /api/assessments/assignments/               - сдать задание (ученик)
GET  /api/assessments/assignments/               - мои сдачи / сдачи школы
POST /api/assessments/assignments/{id}/grade/    - оценить (учитель)
GET  /api/assessments/review-queue/              - непроверенные работы
"""
import logging

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsSchoolStaff, IsStudent
from core.exceptions import SubmissionNotFound, ValidationError
from curriculum.services import find_week

from .models import AssignmentSubmission, QuizAttempt
from .review import list_pending_submissions
from .serializers import (
    AssignmentSubmissionSerializer,
    AssignmentSubmitSerializer,
    GradeSerializer,
    PendingSubmissionSerializer,
    QuizAttemptCreateSerializer,
    QuizAttemptSerializer,
)
from .services import grade_assignment, submit_assignment, submit_quiz_attempt

logger = logging.getLogger(__name__)


class QuizAttemptViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    serializer_class = QuizAttemptSerializer
    permission_classes = [IsAuthenticated, IsStudent]

    def get_queryset(self):
        return QuizAttempt.objects.filter(student=self.request.user).order_by('-completed_at')

    def create(self, request):
        serializer = QuizAttemptCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        week_id = serializer.validated_data['week_id']

        # Квиз берётся из программы школы ученика, а не из запроса
        week = find_week(request.user.school, week_id)
        if not week.is_published:
            raise ValidationError({'week_id': 'This week is not published yet.'})

        attempt = submit_quiz_attempt(
            request.user,
            week_id,
            serializer.validated_data['answers'],
            week.quiz,
        )
        return Response(QuizAttemptSerializer(attempt).data, status=status.HTTP_201_CREATED)


class AssignmentViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    serializer_class = AssignmentSubmissionSerializer
    permission_classes = [IsAuthenticated]

    def get_permissions(self):
        if self.action == 'create':
            return [IsAuthenticated(), IsStudent()]
        if self.action == 'grade':
            return [IsAuthenticated(), IsSchoolStaff()]
        return [IsAuthenticated()]

    def get_queryset(self):
        user = self.request.user
        queryset = AssignmentSubmission.objects.select_related('student')
        if user.is_school_staff():
            if user.school_id is None:
                return queryset.none()
            return queryset.filter(student__school_id=user.school_id)
        return queryset.filter(student=user)

    def create(self, request):
        serializer = AssignmentSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        # Неизвестная неделя - 404, а не сдача в никуда
        find_week(request.user.school, serializer.validated_data['week_id'])

        submission = submit_assignment(request.user, **serializer.validated_data)
        return Response(
            AssignmentSubmissionSerializer(submission).data,
            status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=['post'])
    def grade(self, request, pk=None):
        submission = self.get_queryset().filter(pk=pk).first()
        if submission is None:
            raise SubmissionNotFound()
        serializer = GradeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        submission = grade_assignment(
            submission,
            serializer.validated_data['grade'],
            serializer.validated_data['feedback'],
            teacher=request.user,
        )
        return Response(AssignmentSubmissionSerializer(submission).data)


class ReviewQueueView(APIView):
    permission_classes = [IsAuthenticated, IsSchoolStaff]

    def get(self, request):
        pending = list_pending_submissions(request.user)
        return Response(PendingSubmissionSerializer(pending, many=True).data)
