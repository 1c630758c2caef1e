from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from accounts.permissions import IsSchoolStaff

from .serializers import AskTutorSerializer, TutorExchangeSerializer
from .services import ask_tutor, list_tutor_exchanges


class AskTutorView(APIView):
    """POST /api/tutor/ask/  {"prompt": "...", "mode": "explain" | "lab"}"""
    permission_classes = [IsAuthenticated]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = 'tutor'

    def post(self, request):
        serializer = AskTutorSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        exchange = ask_tutor(request.user, **serializer.validated_data)
        return Response(TutorExchangeSerializer(exchange).data, status=status.HTTP_201_CREATED)


class TutorExchangeListView(APIView):
    """GET /api/tutor/exchanges/ - журнал вопросов учеников школы."""
    permission_classes = [IsAuthenticated, IsSchoolStaff]

    def get(self, request):
        exchanges = list_tutor_exchanges(request.user)
        return Response(TutorExchangeSerializer(exchanges, many=True).data)
