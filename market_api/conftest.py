"""
pytest fixtures and factory_boy factories shared by the test suite.
"""
from datetime import timedelta
from decimal import Decimal

import factory
import pytest
from django.utils import timezone
from factory.django import DjangoModelFactory
from rest_framework.test import APIClient


# ============================================================================
# USERS
# ============================================================================

class UserFactory(DjangoModelFactory):
    class Meta:
        model = 'accounts.CustomUser'
        django_get_or_create = ('email',)

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    first_name = factory.Faker('first_name')
    last_name = factory.Faker('last_name')
    company_name = factory.Faker('company')
    user_type = 'client'
    password = factory.django.Password('testpass123')
    is_active = True


class ClientFactory(UserFactory):
    user_type = 'client'


class ContractorFactory(UserFactory):
    user_type = 'contractor'


class PlatformAdminFactory(UserFactory):
    user_type = 'admin'
    is_staff = True


# ============================================================================
# CATALOGUE AND PROJECTS
# ============================================================================

class CategoryFactory(DjangoModelFactory):
    class Meta:
        model = 'categories.Category'
        django_get_or_create = ('name',)

    name = factory.Sequence(lambda n: f"Category {n}")
    description = "Industrial services"


class SkillFactory(DjangoModelFactory):
    class Meta:
        model = 'categories.Skill'

    name = factory.Sequence(lambda n: f"Skill {n}")
    category = factory.SubFactory(CategoryFactory)


class ProjectFactory(DjangoModelFactory):
    class Meta:
        model = 'user_projects.Project'

    client = factory.SubFactory(ClientFactory)
    category = factory.SubFactory(CategoryFactory)
    title = factory.Sequence(lambda n: f"Plant upgrade {n}")
    description = "Replace the conveyor motors on line two and recalibrate sensors."
    location = "Addis Ababa"
    budget = Decimal('5000.00')
    deadline = factory.LazyFunction(lambda: timezone.localdate() + timedelta(days=30))
    status = 'open'


class MilestoneFactory(DjangoModelFactory):
    class Meta:
        model = 'user_projects.Milestone'

    project = factory.SubFactory(ProjectFactory)
    description = factory.Sequence(lambda n: f"Milestone step {n}")
    amount = Decimal('1000.00')
    order_index = factory.Sequence(lambda n: n)
    status = 'pending'


class BidFactory(DjangoModelFactory):
    class Meta:
        model = 'user_projects.Bid'

    project = factory.SubFactory(ProjectFactory)
    contractor = factory.SubFactory(ContractorFactory)
    proposal_text = "We have rewired twelve plants of this size."
    proposed_budget = Decimal('4500.00')
    status = 'pending'


class ContractFactory(DjangoModelFactory):
    class Meta:
        model = 'user_projects.Contract'

    project = factory.SubFactory(ProjectFactory, status='active')
    contractor = factory.SubFactory(ContractorFactory)
    bid = factory.SubFactory(
        BidFactory,
        project=factory.SelfAttribute('..project'),
        contractor=factory.SelfAttribute('..contractor'),
        status='accepted',
    )
    start_date = factory.LazyFunction(timezone.localdate)
    total_amount = Decimal('4500.00')
    status = 'ongoing'


class DisputeFactory(DjangoModelFactory):
    class Meta:
        model = 'disputes.Dispute'

    contract = factory.SubFactory(ContractFactory)
    raised_by = factory.SelfAttribute('contract.contractor')
    reason = "The client has not responded for two weeks."
    status = 'open'


class WalletTransactionFactory(DjangoModelFactory):
    class Meta:
        model = 'wallet.WalletTransaction'

    user = factory.SubFactory(UserFactory)
    amount = Decimal('100.00')
    type = 'deposit'
    status = 'completed'


class MessageFactory(DjangoModelFactory):
    class Meta:
        model = 'messaging.Message'

    sender = factory.SubFactory(UserFactory)
    receiver = factory.SubFactory(UserFactory)
    message = factory.Faker('sentence')


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def auth_client(db):
    """Build an APIClient authenticated as the given user."""
    def make(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client
    return make


@pytest.fixture
def client_account(db):
    return ClientFactory()


@pytest.fixture
def contractor_account(db):
    return ContractorFactory()


@pytest.fixture
def platform_admin(db):
    return PlatformAdminFactory()


@pytest.fixture
def category(db):
    return CategoryFactory(name='Electrical')


@pytest.fixture
def open_project(db, client_account, category):
    project = ProjectFactory(client=client_account, category=category)
    MilestoneFactory(project=project, amount=Decimal('2000.00'), order_index=0)
    MilestoneFactory(project=project, amount=Decimal('3000.00'), order_index=1)
    return project


@pytest.fixture
def contract(db):
    contract = ContractFactory()
    MilestoneFactory(project=contract.project, amount=Decimal('2000.00'), order_index=0)
    MilestoneFactory(project=contract.project, amount=Decimal('3000.00'), order_index=1)
    return contract
