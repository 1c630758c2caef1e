from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import SelectRoleSerializer, UserSerializer
from .services import select_role


class MeView(APIView):
    """
    GET /api/me/

    Профиль текущего пользователя. Профиль создаётся при первом
    аутентифицированном запросе (см. ProviderJWTAuthentication).
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)


class SelectRoleView(APIView):
    """
    POST /api/me/role/  {"role": "student" | "teacher" | "school_admin"}
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = SelectRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = select_role(request.user, serializer.validated_data['role'])
        return Response(UserSerializer(user).data)
