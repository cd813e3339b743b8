from rest_framework import serializers
from django.conf import settings
from django.contrib.auth import get_user_model

from accounts.serializers import UserSummarySerializer
from market_api.storage import DOCUMENT_EXTENSIONS, public_url, validate_upload
from .models import Message

User = get_user_model()


class MessageSerializer(serializers.ModelSerializer):
    sender = UserSummarySerializer(read_only=True)
    receiver = UserSummarySerializer(read_only=True)
    attachment_url = serializers.SerializerMethodField()

    class Meta:
        model = Message
        fields = ['id', 'sender', 'receiver', 'message', 'attachment_url', 'attachment_name', 'read', 'created_at']
        read_only_fields = fields

    def get_attachment_url(self, obj):
        return public_url(obj.attachment, self.context.get('request'))


class SendMessageSerializer(serializers.ModelSerializer):
    """
    Serializer for sending a direct message.

    Fields:
        - receiver (required): id of an existing user other than the sender
        - message, attachment: at least one of them
    """
    receiver = serializers.PrimaryKeyRelatedField(queryset=User.active_objects.all())
    message = serializers.CharField(required=False, allow_blank=True, trim_whitespace=True)
    attachment = serializers.FileField(required=False, allow_null=True)

    class Meta:
        model = Message
        fields = ['receiver', 'message', 'attachment']

    def validate_receiver(self, value):
        if value == self.context['request'].user:
            raise serializers.ValidationError("You cannot send a message to yourself.")
        return value

    def validate_attachment(self, value):
        if value is None:
            return value
        return validate_upload(value, settings.MESSAGE_ATTACHMENT_MAX_SIZE, DOCUMENT_EXTENSIONS)

    def validate(self, attrs):
        if not attrs.get('message') and not attrs.get('attachment'):
            raise serializers.ValidationError("A message needs text or an attachment.")
        return attrs

    def create(self, validated_data):
        attachment = validated_data.get('attachment')
        return Message.objects.create(
            sender=self.context['request'].user,
            receiver=validated_data['receiver'],
            message=validated_data.get('message', ''),
            attachment=attachment,
            attachment_name=attachment.name if attachment else '',
        )

    def to_representation(self, instance):
        return MessageSerializer(instance, context=self.context).data


class ContactSerializer(serializers.Serializer):
    user = UserSummarySerializer()
    last_message_at = serializers.DateTimeField()
    unread_count = serializers.IntegerField()
