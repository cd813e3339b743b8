from django.db import models
from django.contrib.auth import get_user_model
from django.core.validators import MinValueValidator, MaxValueValidator
from auditlog.registry import auditlog

from categories.models import Category

User = get_user_model()


class Project(models.Model):
    OPEN = 'open'
    ACTIVE = 'active'
    COMPLETED = 'completed'
    CLOSED = 'closed'

    STATUS_CHOICES = (
        (OPEN, 'Open'),
        (ACTIVE, 'Active'),
        (COMPLETED, 'Completed'),
        (CLOSED, 'Closed'),
    )

    # closed is terminal
    ALLOWED_TRANSITIONS = {
        OPEN: {ACTIVE, CLOSED},
        ACTIVE: {COMPLETED},
        COMPLETED: {CLOSED},
        CLOSED: set(),
    }

    client = models.ForeignKey(User, related_name='client_projects', on_delete=models.PROTECT)
    category = models.ForeignKey(Category, related_name='projects', on_delete=models.PROTECT)
    title = models.CharField(max_length=255)
    description = models.TextField()
    location = models.CharField(max_length=255)
    budget = models.DecimalField(max_digits=12, decimal_places=2)
    deadline = models.DateField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=OPEN)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.title} ({self.client})"

    def can_transition_to(self, status):
        return status in self.ALLOWED_TRANSITIONS.get(self.status, set())


class Milestone(models.Model):
    PENDING = 'pending'
    SUBMITTED = 'submitted'
    APPROVED = 'approved'
    REJECTED = 'rejected'

    STATUS_CHOICES = (
        (PENDING, 'Pending'),
        (SUBMITTED, 'Submitted'),
        (APPROVED, 'Approved'),
        (REJECTED, 'Rejected'),
    )

    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='milestones')
    description = models.TextField()
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    due_date = models.DateField(null=True, blank=True)
    order_index = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING)

    submitted_at = models.DateTimeField(null=True, blank=True)
    approved_at = models.DateTimeField(null=True, blank=True)
    rejected_reason = models.TextField(null=True, blank=True)
    is_paid = models.BooleanField(default=False)

    class Meta:
        ordering = ['order_index']

    def __str__(self):
        return f"{self.project.title} #{self.order_index}"


class Bid(models.Model):
    PENDING = 'pending'
    ACCEPTED = 'accepted'
    REJECTED = 'rejected'

    STATUS_CHOICES = (
        (PENDING, 'Pending'),
        (ACCEPTED, 'Accepted'),
        (REJECTED, 'Rejected'),
    )

    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='bids')
    contractor = models.ForeignKey(User, on_delete=models.CASCADE, related_name='bids')
    proposal_text = models.TextField()
    proposed_budget = models.DecimalField(max_digits=12, decimal_places=2)
    proposed_timeline = models.DateField(null=True, blank=True)
    # list of {description, amount, due_date, order_index} overrides, or null
    modified_milestones = models.JSONField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['project', 'contractor'], name='unique_bid_per_contractor'),
        ]

    def __str__(self):
        return f"Bid by {self.contractor} on {self.project.title}"


class Contract(models.Model):
    ONGOING = 'ongoing'
    COMPLETED = 'completed'
    TERMINATED = 'terminated'

    STATUS_CHOICES = (
        (ONGOING, 'Ongoing'),
        (COMPLETED, 'Completed'),
        (TERMINATED, 'Terminated'),
    )

    project = models.OneToOneField(Project, on_delete=models.PROTECT, related_name='contract')
    contractor = models.ForeignKey(User, on_delete=models.PROTECT, related_name='contracts')
    bid = models.OneToOneField(Bid, on_delete=models.PROTECT, related_name='contract')
    start_date = models.DateField()
    end_date = models.DateField(null=True, blank=True)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=ONGOING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"Contract for {self.project.title} with {self.contractor}"

    @property
    def client(self):
        return self.project.client

    def is_party(self, user):
        return user.pk in (self.contractor_id, self.project.client_id)


class Review(models.Model):
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='reviews')
    reviewer = models.ForeignKey(User, on_delete=models.CASCADE, related_name='given_reviews')
    reviewee = models.ForeignKey(User, on_delete=models.CASCADE, related_name='received_reviews')
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    comment = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        unique_together = ['project', 'reviewer']

    def __str__(self):
        return f"{self.reviewer} -> {self.reviewee} ({self.rating})"


auditlog.register(Project)
auditlog.register(Bid)
auditlog.register(Contract)
