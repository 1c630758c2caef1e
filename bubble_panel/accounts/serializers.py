from rest_framework import serializers

from .models import User


class UserSerializer(serializers.ModelSerializer):
    school_id = serializers.UUIDField(read_only=True, allow_null=True)
    class_ids = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id', 'display_name', 'email', 'photo_url',
            'role', 'school_id', 'class_ids',
            'created_at',
        ]
        read_only_fields = fields

    def get_class_ids(self, obj):
        return sorted(obj.classrooms.values_list('id', flat=True))


class SelectRoleSerializer(serializers.Serializer):
    role = serializers.CharField()
