# comms/models.py
from django.db import models


class OutgoingEmail(models.Model):
    STATUS_SENT = 'sent'
    STATUS_FAILED = 'failed'
    STATUS = (
        (STATUS_SENT, 'Sent'),
        (STATUS_FAILED, 'Failed'),
    )

    to_address = models.EmailField()
    subject = models.CharField(max_length=255)
    body = models.TextField()
    workflow = models.ForeignKey(
        'workflows.EmailWorkflow',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='outgoing_emails',
    )
    trigger_event = models.CharField(max_length=20, blank=True)
    is_test = models.BooleanField(default=False)
    status = models.CharField(max_length=20, choices=STATUS, default=STATUS_SENT)
    error = models.TextField(blank=True)
    sent_at = models.DateTimeField(null=True, blank=True)
    meta = models.JSONField(null=True, blank=True)  # provider metadata, message-id, etc.
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.subject} -> {self.to_address} ({self.status})"
