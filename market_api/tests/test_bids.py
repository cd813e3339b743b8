"""
Tests for bidding, bid acceptance and the contracts it opens.
"""
import pytest
from django.core import mail
from django.urls import reverse
from rest_framework import status

from user_projects.models import Bid, Contract, Project
from conftest import BidFactory, ClientFactory, ContractorFactory, ProjectFactory


BID_PAYLOAD = {
    'proposal_text': 'Certified crew, five weeks.',
    'proposed_budget': '4500.00',
}


@pytest.mark.django_db
class TestSubmitBid:
    def test_contractor_bids_on_open_project(self, auth_client, contractor_account, open_project):
        api = auth_client(contractor_account)

        response = api.post(reverse('project-bids', kwargs={'project_id': open_project.id}), BID_PAYLOAD, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        bid = Bid.objects.get()
        assert bid.status == Bid.PENDING
        assert bid.contractor == contractor_account
        assert response.data['bid']['proposed_budget'] == '4500.00'

        detail = api.get(reverse('projects-detail', kwargs={'id': open_project.id}))
        assert detail.data['viewer_has_bid'] is True
        assert detail.data['can_bid'] is False
        assert [b['id'] for b in detail.data['bids']] == [bid.id]

    def test_second_bid_rejected(self, auth_client, contractor_account, open_project):
        BidFactory(project=open_project, contractor=contractor_account)

        response = auth_client(contractor_account).post(
            reverse('project-bids', kwargs={'project_id': open_project.id}), BID_PAYLOAD, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert Bid.objects.count() == 1

    @pytest.mark.parametrize('project_status', ['active', 'completed', 'closed'])
    def test_only_open_projects_take_bids(self, auth_client, contractor_account, project_status):
        project = ProjectFactory(status=project_status)

        response = auth_client(contractor_account).post(
            reverse('project-bids', kwargs={'project_id': project.id}), BID_PAYLOAD, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not Bid.objects.exists()

    def test_short_proposal_rejected(self, auth_client, contractor_account, open_project):
        payload = {**BID_PAYLOAD, 'proposal_text': 'Cheap and fast'}

        response = auth_client(contractor_account).post(
            reverse('project-bids', kwargs={'project_id': open_project.id}), payload, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'proposal_text' in response.data

    @pytest.mark.parametrize('budget', ['0', '-5'])
    def test_non_positive_budget_rejected(self, auth_client, contractor_account, open_project, budget):
        payload = {**BID_PAYLOAD, 'proposed_budget': budget}

        response = auth_client(contractor_account).post(
            reverse('project-bids', kwargs={'project_id': open_project.id}), payload, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'proposed_budget' in response.data
        assert not Bid.objects.exists()

    def test_modified_milestones_are_stored(self, auth_client, contractor_account, open_project):
        payload = {
            **BID_PAYLOAD,
            'modified_milestones': [
                {'description': 'Survey and strip', 'amount': '1500.00'},
                {'description': 'Install and test', 'amount': '3000.00'},
            ],
        }

        response = auth_client(contractor_account).post(
            reverse('project-bids', kwargs={'project_id': open_project.id}), payload, format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        plan = Bid.objects.get().modified_milestones
        assert [entry['order_index'] for entry in plan] == [0, 1]
        assert plan[0]['amount'] == '1500.00'

    def test_clients_cannot_bid(self, auth_client, client_account, open_project):
        response = auth_client(client_account).post(
            reverse('project-bids', kwargs={'project_id': open_project.id}), BID_PAYLOAD, format='json'
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_bid_list_is_owner_only(self, auth_client, contractor_account, open_project, client_account):
        BidFactory(project=open_project)

        assert auth_client(contractor_account).get(
            reverse('project-bids', kwargs={'project_id': open_project.id})
        ).status_code == status.HTTP_403_FORBIDDEN

        response = auth_client(client_account).get(reverse('project-bids', kwargs={'project_id': open_project.id}))
        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1

    def test_my_bids(self, auth_client, contractor_account):
        mine = BidFactory(contractor=contractor_account)
        BidFactory()

        response = auth_client(contractor_account).get(reverse('bids-mine'))

        assert [b['id'] for b in response.data] == [mine.id]


@pytest.mark.django_db
class TestAcceptBid:
    def test_accepting_rejects_others_and_opens_contract(self, auth_client, client_account, open_project):
        chosen = BidFactory(project=open_project)
        others = BidFactory.create_batch(2, project=open_project)

        response = auth_client(client_account).post(reverse('bids-accept', kwargs={'id': chosen.id}))

        assert response.status_code == status.HTTP_200_OK
        chosen.refresh_from_db()
        open_project.refresh_from_db()
        assert chosen.status == Bid.ACCEPTED
        assert all(Bid.objects.get(pk=b.pk).status == Bid.REJECTED for b in others)
        assert open_project.status == Project.ACTIVE

        contract = Contract.objects.get()
        assert contract.contractor == chosen.contractor
        assert contract.total_amount == chosen.proposed_budget
        assert contract.status == Contract.ONGOING
        assert contract.end_date == open_project.deadline
        assert response.data['contract']['id'] == contract.id

        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == [chosen.contractor.email]

    def test_second_acceptance_refused(self, auth_client, client_account, open_project):
        first, second = BidFactory.create_batch(2, project=open_project)
        api = auth_client(client_account)
        api.post(reverse('bids-accept', kwargs={'id': first.id}))

        response = api.post(reverse('bids-accept', kwargs={'id': second.id}))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert Contract.objects.count() == 1

    def test_other_clients_cannot_see_the_bid(self, auth_client, open_project):
        bid = BidFactory(project=open_project)

        response = auth_client(ClientFactory()).post(reverse('bids-accept', kwargs={'id': bid.id}))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        bid.refresh_from_db()
        assert bid.status == Bid.PENDING

    def test_reject_pending_bid(self, auth_client, client_account, open_project):
        bid = BidFactory(project=open_project)
        api = auth_client(client_account)

        response = api.post(reverse('bids-reject', kwargs={'id': bid.id}))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['bid']['status'] == Bid.REJECTED
        assert api.post(reverse('bids-reject', kwargs={'id': bid.id})).status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestContracts:
    def test_parties_list_their_contracts(self, auth_client, contract):
        outsider = ContractorFactory()

        assert len(auth_client(contract.contractor).get(reverse('contracts-list')).data) == 1
        assert len(auth_client(contract.project.client).get(reverse('contracts-list')).data) == 1
        assert auth_client(outsider).get(reverse('contracts-list')).data == []

    def test_contract_detail_restricted_to_parties(self, auth_client, contract, platform_admin):
        url = reverse('contracts-detail', kwargs={'id': contract.id})

        assert auth_client(ContractorFactory()).get(url).status_code == status.HTTP_403_FORBIDDEN
        response = auth_client(platform_admin).get(url)
        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['milestones']) == 2
