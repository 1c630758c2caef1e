from rest_framework import serializers

from .models import School


class SchoolSerializer(serializers.ModelSerializer):
    is_active = serializers.BooleanField(read_only=True)
    curriculum_weeks_count = serializers.SerializerMethodField()

    class Meta:
        model = School
        fields = [
            'id', 'name', 'admin_email',
            'max_students', 'student_count',
            'status', 'is_active', 'plan', 'region',
            'curriculum_weeks_count',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_curriculum_weeks_count(self, obj):
        return obj.curriculum_weeks.count()


class SchoolOnboardSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    admin_email = serializers.EmailField()
    max_students = serializers.IntegerField(min_value=1)
    plan = serializers.CharField(max_length=50, required=False)
    region = serializers.CharField(max_length=10, required=False)


class AssignTeacherSerializer(serializers.Serializer):
    user_id = serializers.CharField(max_length=128)
