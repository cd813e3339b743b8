"""
Tests for milestone submission, approval payouts and project completion.
"""
from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from platform_admin.models import PlatformEarning
from user_projects.models import Contract, Milestone, Project
from wallet.models import WalletTransaction
from wallet.services import get_balance
from conftest import ContractorFactory


def submit(auth_client, contract, milestone):
    return auth_client(contract.contractor).post(reverse('milestones-submit', kwargs={'id': milestone.id}))


@pytest.mark.django_db
class TestSubmitMilestone:
    def test_contractor_submits_pending_milestone(self, auth_client, contract):
        milestone = contract.project.milestones.first()

        response = submit(auth_client, contract, milestone)

        assert response.status_code == status.HTTP_200_OK
        milestone.refresh_from_db()
        assert milestone.status == Milestone.SUBMITTED
        assert milestone.submitted_at is not None

    def test_only_the_contracted_contractor_submits(self, auth_client, contract):
        milestone = contract.project.milestones.first()

        response = auth_client(ContractorFactory()).post(reverse('milestones-submit', kwargs={'id': milestone.id}))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        milestone.refresh_from_db()
        assert milestone.status == Milestone.PENDING

    def test_submitted_milestone_cannot_be_resubmitted(self, auth_client, contract):
        milestone = contract.project.milestones.first()
        submit(auth_client, contract, milestone)

        assert submit(auth_client, contract, milestone).status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestApproveMilestone:
    def test_approval_pays_contractor_net_of_fee(self, auth_client, contract):
        milestone = contract.project.milestones.get(order_index=0)
        submit(auth_client, contract, milestone)

        response = auth_client(contract.project.client).post(reverse('milestones-approve', kwargs={'id': milestone.id}))

        assert response.status_code == status.HTTP_200_OK
        milestone.refresh_from_db()
        assert milestone.status == Milestone.APPROVED
        assert milestone.is_paid is True

        earning = WalletTransaction.objects.get(type=WalletTransaction.EARNING)
        assert earning.user == contract.contractor
        assert earning.amount == Decimal('1800.00')
        assert earning.status == WalletTransaction.COMPLETED

        fee = PlatformEarning.objects.get(milestone=milestone)
        assert fee.client_fee_amount == Decimal('100.00')
        assert fee.contractor_fee_amount == Decimal('200.00')
        assert fee.total_platform_earning == Decimal('300.00')

        assert get_balance(contract.contractor)['total_earnings'] == Decimal('1800.00')

        contract.project.refresh_from_db()
        assert contract.project.status == Project.ACTIVE

    def test_last_approval_completes_project_and_contract(self, auth_client, contract):
        client_api = auth_client(contract.project.client)
        for milestone in contract.project.milestones.all():
            submit(auth_client, contract, milestone)
            client_api.post(reverse('milestones-approve', kwargs={'id': milestone.id}))

        contract.refresh_from_db()
        contract.project.refresh_from_db()
        assert contract.project.status == Project.COMPLETED
        assert contract.project.completed_at is not None
        assert contract.status == Contract.COMPLETED
        assert get_balance(contract.contractor)['available_balance'] == Decimal('4500.00')

    def test_pending_milestone_cannot_be_approved(self, auth_client, contract):
        milestone = contract.project.milestones.first()

        response = auth_client(contract.project.client).post(reverse('milestones-approve', kwargs={'id': milestone.id}))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not WalletTransaction.objects.exists()

    def test_contractor_cannot_approve(self, auth_client, contract):
        milestone = contract.project.milestones.first()
        submit(auth_client, contract, milestone)

        response = auth_client(contract.contractor).post(reverse('milestones-approve', kwargs={'id': milestone.id}))

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestRejectMilestone:
    def test_rejection_requires_reason(self, auth_client, contract):
        milestone = contract.project.milestones.first()
        submit(auth_client, contract, milestone)
        url = reverse('milestones-reject', kwargs={'id': milestone.id})
        client_api = auth_client(contract.project.client)

        assert client_api.post(url, {}, format='json').status_code == status.HTTP_400_BAD_REQUEST

        response = client_api.post(url, {'rejected_reason': 'Cable trays are not grounded.'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        milestone.refresh_from_db()
        assert milestone.status == Milestone.REJECTED
        assert milestone.rejected_reason == 'Cable trays are not grounded.'

    def test_rejected_milestone_can_be_resubmitted(self, auth_client, contract):
        milestone = contract.project.milestones.first()
        submit(auth_client, contract, milestone)
        auth_client(contract.project.client).post(
            reverse('milestones-reject', kwargs={'id': milestone.id}), {'rejected_reason': 'Incomplete.'}, format='json'
        )

        assert submit(auth_client, contract, milestone).status_code == status.HTTP_200_OK
