from django.conf import settings
from django.db import models


def attachment_upload_path(instance, filename):
    return f"attachments/{instance.sender_id}/{filename}"


class Message(models.Model):
    """
    A direct message between two users. Only `read` changes after creation.
    """
    sender = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='sent_messages')
    receiver = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='received_messages')
    message = models.TextField(blank=True)
    attachment = models.FileField(upload_to=attachment_upload_path, null=True, blank=True)
    attachment_name = models.CharField(max_length=255, blank=True)
    read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['sender', 'receiver', 'created_at']),
            models.Index(fields=['receiver', 'read']),
        ]

    def __str__(self):
        return f"{self.sender} -> {self.receiver} at {self.created_at}"
