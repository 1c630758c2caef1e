from rest_framework import serializers

from .models import Classroom


class ClassroomSerializer(serializers.ModelSerializer):
    teacher_id = serializers.CharField(read_only=True)
    school_id = serializers.UUIDField(read_only=True)
    student_ids = serializers.SerializerMethodField()
    student_count = serializers.SerializerMethodField()

    class Meta:
        model = Classroom
        fields = [
            'id', 'name', 'grade', 'class_key',
            'teacher_id', 'school_id',
            'student_ids', 'student_count',
            'is_locked', 'created_at',
        ]
        read_only_fields = fields

    def get_student_ids(self, obj):
        return sorted(s.pk for s in obj.students.all())

    def get_student_count(self, obj):
        return len(obj.students.all())


class ClassroomCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    grade = serializers.IntegerField()


class JoinClassroomSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=32, trim_whitespace=False)
