"""
Tests for raising, listing and resolving disputes.
"""
import pytest
from django.urls import reverse
from rest_framework import status

from disputes.models import Dispute
from conftest import ClientFactory, ContractFactory, DisputeFactory


@pytest.mark.django_db
class TestRaiseDispute:
    def test_party_raises_dispute(self, auth_client, contract):
        response = auth_client(contract.project.client).post(
            reverse('disputes-list-create'),
            {'contract': contract.id, 'reason': 'Work stopped after the first milestone.'},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        dispute = Dispute.objects.get()
        assert dispute.raised_by == contract.project.client
        assert dispute.status == Dispute.OPEN
        assert response.data['dispute']['can_resolve'] is True

    def test_outsider_cannot_raise_dispute(self, auth_client, contract):
        response = auth_client(ClientFactory()).post(
            reverse('disputes-list-create'),
            {'contract': contract.id, 'reason': 'Work stopped after the first milestone.'},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'contract' in response.data
        assert not Dispute.objects.exists()

    def test_short_reason_rejected(self, auth_client, contract):
        response = auth_client(contract.contractor).post(
            reverse('disputes-list-create'), {'contract': contract.id, 'reason': 'Late'}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'reason' in response.data

    def test_completed_contract_cannot_be_disputed(self, auth_client):
        contract = ContractFactory(status='completed')

        response = auth_client(contract.contractor).post(
            reverse('disputes-list-create'),
            {'contract': contract.id, 'reason': 'Final payment never arrived.'},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_disputable_contracts_are_ongoing_ones(self, auth_client, contract):
        ContractFactory(contractor=contract.contractor, status='completed')

        response = auth_client(contract.contractor).get(reverse('disputes-contracts'))

        assert [c['id'] for c in response.data] == [contract.id]


@pytest.mark.django_db
class TestDisputeVisibility:
    def test_parties_see_their_disputes_admin_sees_all(self, auth_client, platform_admin):
        mine = DisputeFactory()
        DisputeFactory()

        response = auth_client(mine.contract.contractor).get(reverse('disputes-list-create'))
        assert [d['id'] for d in response.data] == [mine.id]

        response = auth_client(platform_admin).get(reverse('disputes-list-create'))
        assert len(response.data) == 2

    def test_outsider_cannot_read_dispute(self, auth_client):
        dispute = DisputeFactory()

        response = auth_client(ClientFactory()).get(reverse('disputes-detail', kwargs={'id': dispute.id}))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_owner_rewords_open_dispute(self, auth_client):
        dispute = DisputeFactory()
        url = reverse('disputes-detail', kwargs={'id': dispute.id})

        response = auth_client(dispute.raised_by).patch(url, {'reason': 'No site access for ten days.'}, format='json')
        assert response.status_code == status.HTTP_200_OK

        other_party = dispute.contract.project.client
        assert auth_client(other_party).patch(url, {'reason': 'Something else entirely.'}, format='json').status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestResolveDispute:
    def test_admin_resolves_once(self, auth_client, platform_admin):
        dispute = DisputeFactory()
        url = reverse('disputes-resolve', kwargs={'id': dispute.id})
        api = auth_client(platform_admin)

        response = api.patch(url, {'status': 'resolved', 'resolution_notes': 'Refunded'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == Dispute.RESOLVED
        assert response.data['resolution_notes'] == 'Refunded'
        assert response.data['can_resolve'] is False
        dispute.refresh_from_db()
        assert dispute.resolved_by == platform_admin
        assert dispute.resolved_at is not None

        second = api.patch(url, {'status': 'rejected'}, format='json')
        assert second.status_code == status.HTTP_400_BAD_REQUEST
        dispute.refresh_from_db()
        assert dispute.status == Dispute.RESOLVED

    def test_open_is_not_a_resolution(self, auth_client, platform_admin):
        dispute = DisputeFactory()

        response = auth_client(platform_admin).patch(
            reverse('disputes-resolve', kwargs={'id': dispute.id}), {'status': 'open'}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_parties_cannot_resolve(self, auth_client):
        dispute = DisputeFactory()

        response = auth_client(dispute.contract.project.client).patch(
            reverse('disputes-resolve', kwargs={'id': dispute.id}), {'status': 'resolved'}, format='json'
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
