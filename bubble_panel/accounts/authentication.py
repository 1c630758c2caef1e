"""
Аутентификация через внешний identity provider.

Provider выдаёт подписанный JWT; claim `sub` - principal id. Проверку
подписи/срока делает rest_framework_simplejwt, а вместо поиска
существующего пользователя мы вызываем bind_or_create_profile:
профиль появляется при первом аутентифицированном запросе.
"""
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken
from rest_framework_simplejwt.settings import api_settings

from .services import bind_or_create_profile


class ProviderJWTAuthentication(JWTAuthentication):

    def get_user(self, validated_token):
        try:
            principal_id = validated_token[api_settings.USER_ID_CLAIM]
        except KeyError:
            raise InvalidToken('Token contained no recognizable user identification')

        user = bind_or_create_profile(
            principal_id,
            {
                'display_name': validated_token.get('name'),
                'email': validated_token.get('email'),
                'photo_url': validated_token.get('picture'),
            },
        )
        if not user.is_active:
            raise AuthenticationFailed('User is inactive', code='user_inactive')
        return user
