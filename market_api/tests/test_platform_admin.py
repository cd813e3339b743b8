"""
Tests for fee settings, system statistics and monthly statistics.
"""
from datetime import datetime, time
from decimal import Decimal

import pytest
from django.db import DatabaseError
from django.urls import reverse
from django.utils import timezone
from rest_framework import status

from platform_admin import services
from platform_admin.models import PlatformFeeSettings
from user_projects.models import Project
from conftest import DisputeFactory, ProjectFactory


@pytest.mark.django_db
class TestFeeSettings:
    def test_defaults_created_on_first_read(self, auth_client, client_account):
        response = auth_client(client_account).get(reverse('platform-fees'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['client_fee_percentage'] == '5.00'
        assert response.data['contractor_fee_percentage'] == '10.00'
        assert PlatformFeeSettings.objects.count() == 1

    def test_admin_updates_fees(self, auth_client, platform_admin):
        response = auth_client(platform_admin).patch(
            reverse('platform-fees'), {'contractor_fee_percentage': '7.5'}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        fees = PlatformFeeSettings.get_solo()
        assert fees.contractor_fee_percentage == Decimal('7.50')
        assert fees.updated_by == platform_admin

    def test_percentage_out_of_range(self, auth_client, platform_admin):
        response = auth_client(platform_admin).patch(
            reverse('platform-fees'), {'client_fee_percentage': '150'}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert PlatformFeeSettings.get_solo().client_fee_percentage == Decimal('5')

    def test_non_admin_cannot_change_fees(self, auth_client, client_account):
        response = auth_client(client_account).patch(
            reverse('platform-fees'), {'client_fee_percentage': '1'}, format='json'
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestSystemStats:
    def test_counts(self, auth_client, platform_admin):
        DisputeFactory()
        DisputeFactory(status='resolved')
        ProjectFactory()

        response = auth_client(platform_admin).get(reverse('platform-stats'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_projects'] == 3
        assert response.data['total_contracts'] == 2
        assert response.data['total_disputes'] == 2
        assert response.data['open_disputes'] == 1
        assert response.data['total_earnings'] == '0.00'

    def test_admin_only(self, auth_client, contractor_account):
        assert auth_client(contractor_account).get(reverse('platform-stats')).status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestMonthlyStats:
    def setup_rows(self):
        oldest = services.month_starts(3)[0]
        backdated = ProjectFactory()
        Project.objects.filter(pk=backdated.pk).update(
            created_at=timezone.make_aware(datetime.combine(oldest.replace(day=2), time(12)))
        )
        ProjectFactory()
        DisputeFactory()

    def test_month_starts_crosses_year(self):
        starts = services.month_starts(3, today=datetime(2024, 2, 17).date())
        assert [d.isoformat() for d in starts] == ['2023-12-01', '2024-01-01', '2024-02-01']

    def test_zero_filled_oldest_first(self):
        self.setup_rows()

        rows = services.monthly_stats(3)

        assert len(rows) == 3
        assert [row['projects'] for row in rows] == [1, 0, 2]
        assert [row['disputes'] for row in rows] == [0, 0, 1]
        assert rows[-1]['month'] == timezone.localdate().strftime('%Y-%m')
        assert rows[-1]['name'] == timezone.localdate().strftime('%b')

    def test_fallback_matches_grouped_output(self, monkeypatch):
        self.setup_rows()
        grouped = services.monthly_stats(3)

        def broken(*args, **kwargs):
            raise DatabaseError("date truncation unsupported")

        monkeypatch.setattr(services, '_grouped_counts', broken)

        assert services.monthly_stats(3) == grouped

    def test_default_window(self, auth_client, platform_admin, settings):
        settings.ADMIN_STATS_MONTHS_BACK = 6

        response = auth_client(platform_admin).get(reverse('platform-stats-monthly'))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 6

    @pytest.mark.parametrize('months_back', ['0', '25', 'six'])
    def test_window_bounds(self, auth_client, platform_admin, months_back):
        response = auth_client(platform_admin).get(reverse('platform-stats-monthly'), {'months_back': months_back})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
