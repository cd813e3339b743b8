from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from auditlog.registry import auditlog


PERCENTAGE_VALIDATORS = [MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]


class PlatformFeeSettings(models.Model):
    """
    Single row holding the fee percentages charged on every paid milestone.
    """
    client_fee_percentage = models.DecimalField(max_digits=5, decimal_places=2, validators=PERCENTAGE_VALIDATORS)
    contractor_fee_percentage = models.DecimalField(max_digits=5, decimal_places=2, validators=PERCENTAGE_VALIDATORS)
    updated_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = 'platform fee settings'

    def __str__(self):
        return f"Client {self.client_fee_percentage}% / Contractor {self.contractor_fee_percentage}%"

    @classmethod
    def get_solo(cls):
        instance = cls.objects.order_by('pk').first()
        if instance is None:
            instance = cls.objects.create(
                client_fee_percentage=Decimal(settings.DEFAULT_CLIENT_FEE_PERCENTAGE),
                contractor_fee_percentage=Decimal(settings.DEFAULT_CONTRACTOR_FEE_PERCENTAGE),
            )
        return instance


class PlatformEarning(models.Model):
    project = models.ForeignKey('user_projects.Project', on_delete=models.PROTECT, related_name='platform_earnings')
    milestone = models.OneToOneField('user_projects.Milestone', on_delete=models.PROTECT, related_name='platform_earning')
    client = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='+')
    contractor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='+')
    milestone_amount = models.DecimalField(max_digits=12, decimal_places=2)
    client_fee_amount = models.DecimalField(max_digits=12, decimal_places=2)
    contractor_fee_amount = models.DecimalField(max_digits=12, decimal_places=2)
    total_platform_earning = models.DecimalField(max_digits=12, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.total_platform_earning} on {self.milestone}"


auditlog.register(PlatformFeeSettings)
