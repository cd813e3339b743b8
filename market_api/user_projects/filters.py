import django_filters
from django.db.models import Q

from .models import Project


class ProjectFilter(django_filters.FilterSet):
    """
    Filters for browsing open projects: `?category=<id>&location=<text>&search=<text>`.
    """
    location = django_filters.CharFilter(field_name='location', lookup_expr='icontains')
    search = django_filters.CharFilter(method='filter_search')
    min_budget = django_filters.NumberFilter(field_name='budget', lookup_expr='gte')
    max_budget = django_filters.NumberFilter(field_name='budget', lookup_expr='lte')

    class Meta:
        model = Project
        fields = ['category', 'status']

    def filter_search(self, queryset, name, value):
        return queryset.filter(Q(title__icontains=value) | Q(description__icontains=value))
