"""
Tests for reviews between the parties of a completed project.
"""
import pytest
from django.urls import reverse
from rest_framework import status

from user_projects.models import Review
from conftest import ClientFactory, ContractFactory


@pytest.fixture
def finished_contract(db):
    contract = ContractFactory(status='completed')
    contract.project.status = 'completed'
    contract.project.save(update_fields=['status'])
    return contract


@pytest.mark.django_db
class TestReviews:
    def test_client_reviews_contractor(self, auth_client, finished_contract):
        url = reverse('project-reviews-create', kwargs={'project_id': finished_contract.project.id})

        response = auth_client(finished_contract.project.client).post(url, {'rating': 5, 'comment': 'On time.'}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        review = Review.objects.get()
        assert review.reviewee == finished_contract.contractor

    def test_one_review_per_party(self, auth_client, finished_contract):
        url = reverse('project-reviews-create', kwargs={'project_id': finished_contract.project.id})
        api = auth_client(finished_contract.contractor)
        api.post(url, {'rating': 4}, format='json')

        response = api.post(url, {'rating': 2}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert Review.objects.count() == 1

    def test_project_must_be_completed(self, auth_client, contract):
        url = reverse('project-reviews-create', kwargs={'project_id': contract.project.id})

        response = auth_client(contract.project.client).post(url, {'rating': 5}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.parametrize('rating', [0, 6])
    def test_rating_bounds(self, auth_client, finished_contract, rating):
        url = reverse('project-reviews-create', kwargs={'project_id': finished_contract.project.id})

        response = auth_client(finished_contract.project.client).post(url, {'rating': rating}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'rating' in response.data

    def test_outsiders_cannot_review(self, auth_client, finished_contract):
        url = reverse('project-reviews-create', kwargs={'project_id': finished_contract.project.id})

        response = auth_client(ClientFactory()).post(url, {'rating': 1}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not Review.objects.exists()

    def test_average_rating(self, auth_client, finished_contract):
        url = reverse('project-reviews-create', kwargs={'project_id': finished_contract.project.id})
        auth_client(finished_contract.project.client).post(url, {'rating': 4}, format='json')
        other = ContractFactory(contractor=finished_contract.contractor, status='completed')
        other.project.status = 'completed'
        other.project.save(update_fields=['status'])
        auth_client(other.project.client).post(
            reverse('project-reviews-create', kwargs={'project_id': other.project.id}), {'rating': 5}, format='json'
        )

        response = auth_client(finished_contract.project.client).get(
            reverse('user-reviews', kwargs={'user_id': finished_contract.contractor.id})
        )

        assert response.data['count'] == 2
        assert response.data['average_rating'] == 4.5
