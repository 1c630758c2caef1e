from rest_framework import serializers

from .models import TutorExchange


class TutorExchangeSerializer(serializers.ModelSerializer):
    user_id = serializers.CharField(read_only=True)
    user_name = serializers.SerializerMethodField()

    class Meta:
        model = TutorExchange
        fields = ['id', 'user_id', 'user_name', 'mode', 'prompt', 'response', 'error', 'created_at']
        read_only_fields = fields

    def get_user_name(self, obj):
        return obj.user.get_full_name()


class AskTutorSerializer(serializers.Serializer):
    prompt = serializers.CharField()
    mode = serializers.ChoiceField(choices=TutorExchange.Mode.choices, default=TutorExchange.Mode.EXPLAIN)
