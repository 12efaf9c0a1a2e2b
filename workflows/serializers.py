from rest_framework import serializers

from members.models import CommitteePosition
from .models import EmailWorkflow
from .rendering import placeholders


class EmailWorkflowSerializer(serializers.ModelSerializer):
    recipient_position = serializers.PrimaryKeyRelatedField(
        queryset=CommitteePosition.objects.all(), allow_null=True, required=False,
    )
    recipient_position_name = serializers.CharField(source='recipient_position.name', read_only=True, default=None)
    recipient_display = serializers.CharField(read_only=True)
    template_variables = serializers.SerializerMethodField()
    state = serializers.CharField(read_only=True)

    class Meta:
        model = EmailWorkflow
        fields = (
            "id", "organization", "name", "description", "trigger_event", "conditions",
            "recipient_type", "recipient_email", "recipient_name",
            "recipient_position", "recipient_position_name", "recipient_display",
            "email_subject", "email_template", "template_variables",
            "is_active", "state", "created_at", "updated_at",
        )
        read_only_fields = ("organization", "created_at", "updated_at")
        extra_kwargs = {
            "description": {"allow_blank": True, "allow_null": True, "required": False},
            "recipient_email": {"allow_blank": True, "allow_null": True, "required": False},
            "recipient_name": {"allow_blank": True, "allow_null": True, "required": False},
            "conditions": {"required": False},
        }

    def get_template_variables(self, obj):
        return placeholders(f"{obj.email_subject}\n{obj.email_template}")


class SendTestSerializer(serializers.Serializer):
    workflowId = serializers.IntegerField()
    testEmail = serializers.CharField(allow_blank=True, required=False, default='')
    testData = serializers.DictField(
        child=serializers.CharField(allow_blank=True, allow_null=True), required=False, default=dict,
    )


class CommitteePositionSerializer(serializers.ModelSerializer):
    class Meta:
        model = CommitteePosition
        fields = ("id", "name", "description", "display_order")
