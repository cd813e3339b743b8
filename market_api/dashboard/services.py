from django.core.exceptions import ImproperlyConfigured
from django.db.models import Count

from accounts.roles import Role
from platform_admin.services import system_stats
from user_projects.models import Project, Bid, Contract

OPEN_PROJECTS_SHOWN = 6


def client_dashboard(user):
    projects = (
        Project.objects.filter(client=user)
        .select_related('category', 'client')
        .annotate(bid_count=Count('bids'))
        .order_by('-created_at')
    )
    counts = {status: 0 for status, _ in Project.STATUS_CHOICES}
    for row in Project.objects.filter(client=user).order_by().values('status').annotate(total=Count('id')):
        counts[row['status']] = row['total']

    return {'projects': projects, 'status_counts': counts}


def contractor_dashboard(user):
    return {
        'bids': Bid.objects.filter(contractor=user).select_related('project', 'contractor').order_by('-created_at'),
        'open_projects': (
            Project.objects.filter(status=Project.OPEN)
            .select_related('category', 'client')
            .annotate(bid_count=Count('bids'))
            .order_by('-created_at')[:OPEN_PROJECTS_SHOWN]
        ),
        'contracts': (
            Contract.objects.filter(contractor=user, status=Contract.ONGOING)
            .select_related('project', 'project__client', 'contractor')
            .order_by('-created_at')
        ),
    }


def admin_dashboard(user):
    return {'stats': system_stats()}


def incomplete_dashboard(user):
    return {'detail': "Your profile is incomplete. Choose whether you are a client or a contractor to continue."}


DASHBOARDS = {
    Role.CLIENT: client_dashboard,
    Role.CONTRACTOR: contractor_dashboard,
    Role.ADMIN: admin_dashboard,
    Role.INCOMPLETE: incomplete_dashboard,
}

if set(DASHBOARDS) != set(Role):
    raise ImproperlyConfigured(f"No dashboard for roles: {set(Role) - set(DASHBOARDS)}")
