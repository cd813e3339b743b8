import logging
from datetime import date, datetime, time

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import DatabaseError, transaction
from django.db.models import Count, Sum
from django.db.models.functions import TruncMonth
from django.utils import timezone

from disputes.models import Dispute
from user_projects.models import Contract, Project
from .models import PlatformEarning, PlatformFeeSettings

logger = logging.getLogger(__name__)

User = get_user_model()

MONTH_NAMES = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']


def get_fee_settings():
    return PlatformFeeSettings.get_solo()


def system_stats():
    """
    Headline counts for the admin dashboard. Each figure is its own
    aggregate query, issued one after another.
    """
    total_earnings = PlatformEarning.objects.aggregate(total=Sum('total_platform_earning'))['total']
    return {
        'total_users': User.objects.count(),
        'total_projects': Project.objects.count(),
        'total_contracts': Contract.objects.count(),
        'total_disputes': Dispute.objects.count(),
        'open_disputes': Dispute.objects.filter(status=Dispute.OPEN).count(),
        'total_earnings': total_earnings or 0,
    }


def month_starts(months_back, today=None):
    """First day of each of the last `months_back` months, oldest first, current month last."""
    today = today or timezone.localdate()
    year, month = today.year, today.month
    starts = []
    for _ in range(months_back):
        starts.append(date(year, month, 1))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    starts.reverse()
    return starts


def _next_month(day):
    if day.month == 12:
        return date(day.year + 1, 1, 1)
    return date(day.year, day.month + 1, 1)


def _as_datetime(day):
    return timezone.make_aware(datetime.combine(day, time.min))


def _grouped_counts(queryset, since):
    rows = (
        queryset.filter(created_at__gte=_as_datetime(since))
        .annotate(month=TruncMonth('created_at'))
        .values('month')
        .annotate(total=Count('id'))
        .order_by('month')
    )
    return {(row['month'].year, row['month'].month): row['total'] for row in rows}


def _ranged_counts(queryset, months):
    counts = {}
    for start in months:
        counts[(start.year, start.month)] = queryset.filter(
            created_at__gte=_as_datetime(start),
            created_at__lt=_as_datetime(_next_month(start)),
        ).count()
    return counts


def monthly_stats(months_back=None, today=None):
    """
    Projects and disputes created per month over the last `months_back`
    months, oldest first. Months without rows report zero.

    Runs one grouped query per table; if the database cannot truncate
    dates it falls back to one range count per table per month.
    """
    months_back = months_back or settings.ADMIN_STATS_MONTHS_BACK
    months = month_starts(months_back, today)

    try:
        with transaction.atomic():
            project_counts = _grouped_counts(Project.objects.all(), months[0])
            dispute_counts = _grouped_counts(Dispute.objects.all(), months[0])
    except DatabaseError as exc:
        logger.warning(f"Grouped monthly stats failed, counting month by month: {exc}")
        project_counts = _ranged_counts(Project.objects.all(), months)
        dispute_counts = _ranged_counts(Dispute.objects.all(), months)

    return [
        {
            'name': MONTH_NAMES[start.month - 1],
            'month': start.strftime('%Y-%m'),
            'projects': project_counts.get((start.year, start.month), 0),
            'disputes': dispute_counts.get((start.year, start.month), 0),
        }
        for start in months
    ]
