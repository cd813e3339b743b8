"""
Tests for the role-specific dashboard.
"""
import pytest
from django.urls import reverse
from rest_framework import status

from accounts.roles import Role
from dashboard.services import DASHBOARDS
from dashboard.views import SERIALIZERS
from conftest import BidFactory, ContractFactory, ProjectFactory, UserFactory


def test_every_role_has_a_dashboard():
    assert set(DASHBOARDS) == set(Role)
    assert set(SERIALIZERS) == set(Role)


@pytest.mark.django_db
class TestDashboard:
    def test_client_dashboard(self, auth_client, client_account, open_project):
        BidFactory.create_batch(2, project=open_project)
        ProjectFactory(client=client_account, status='closed')

        response = auth_client(client_account).get(reverse('dashboard'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['role'] == 'client'
        assert len(response.data['projects']) == 2
        assert {p['id']: p['bid_count'] for p in response.data['projects']}[open_project.id] == 2
        assert response.data['status_counts'] == {'open': 1, 'active': 0, 'completed': 0, 'closed': 1}

    def test_contractor_dashboard(self, auth_client, contractor_account):
        BidFactory(contractor=contractor_account)
        ContractFactory(contractor=contractor_account)
        ContractFactory(contractor=contractor_account, status='completed')
        ProjectFactory.create_batch(7)

        response = auth_client(contractor_account).get(reverse('dashboard'))

        assert response.data['role'] == 'contractor'
        # the own bid plus the accepted bids behind both contracts
        assert len(response.data['bids']) == 3
        assert len(response.data['open_projects']) == 6
        assert len(response.data['contracts']) == 1

    def test_admin_dashboard(self, auth_client, platform_admin):
        ProjectFactory()

        response = auth_client(platform_admin).get(reverse('dashboard'))

        assert response.data['role'] == 'admin'
        assert response.data['stats']['total_projects'] == 1

    def test_incomplete_profile(self, auth_client):
        response = auth_client(UserFactory(user_type='')).get(reverse('dashboard'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['role'] == 'incomplete'
        assert 'detail' in response.data
