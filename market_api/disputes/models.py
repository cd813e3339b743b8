from django.db import models
from auditlog.registry import auditlog

from user_projects.models import Contract
from accounts.models import CustomUser


class Dispute(models.Model):
    OPEN = 'open'
    RESOLVED = 'resolved'
    REJECTED = 'rejected'

    STATUS_CHOICES = (
        (OPEN, 'Open'),
        (RESOLVED, 'Resolved'),
        (REJECTED, 'Rejected'),
    )
    FINAL_STATUSES = (RESOLVED, REJECTED)

    contract = models.ForeignKey(Contract, on_delete=models.PROTECT, related_name='disputes')
    raised_by = models.ForeignKey(CustomUser, on_delete=models.PROTECT, related_name='disputes')
    reason = models.TextField()

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=OPEN)
    resolution_notes = models.TextField(blank=True)
    resolved_by = models.ForeignKey(CustomUser, on_delete=models.SET_NULL, null=True, blank=True, related_name='resolved_disputes')
    resolved_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"Dispute on {self.contract.project.title} by {self.raised_by}"

    @property
    def can_resolve(self):
        return self.status == self.OPEN


auditlog.register(Dispute)
