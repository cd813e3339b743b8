"""
Tests for direct messages, threads, contacts and user search.
"""
from datetime import timedelta

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from django.utils import timezone
from rest_framework import status

from messaging.models import Message
from messaging.services import list_contacts
from conftest import ClientFactory, ContractorFactory, MessageFactory, UserFactory


def backdate(message, minutes):
    Message.objects.filter(pk=message.pk).update(created_at=timezone.now() - timedelta(minutes=minutes))


@pytest.mark.django_db
class TestSendMessage:
    def test_send_text(self, auth_client, client_account, contractor_account):
        response = auth_client(client_account).post(
            reverse('messages-send'), {'receiver': contractor_account.id, 'message': 'Can you start Monday?'}, format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        message = Message.objects.get()
        assert message.sender == client_account
        assert message.read is False
        assert response.data['receiver']['id'] == contractor_account.id

    def test_cannot_message_yourself(self, auth_client, client_account):
        response = auth_client(client_account).post(
            reverse('messages-send'), {'receiver': client_account.id, 'message': 'Note to self'}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'receiver' in response.data

    def test_empty_message_rejected(self, auth_client, client_account, contractor_account):
        response = auth_client(client_account).post(
            reverse('messages-send'), {'receiver': contractor_account.id, 'message': '   '}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not Message.objects.exists()

    def test_attachment_only(self, auth_client, client_account, contractor_account):
        drawing = SimpleUploadedFile('layout.pdf', b'%PDF-1.4 floor plan', content_type='application/pdf')

        response = auth_client(client_account).post(
            reverse('messages-send'), {'receiver': contractor_account.id, 'attachment': drawing}, format='multipart'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['attachment_name'].endswith('layout.pdf')
        assert 'attachments/' in response.data['attachment_url']

    def test_attachment_over_limit(self, auth_client, client_account, contractor_account):
        oversized = SimpleUploadedFile('scan.pdf', b'0' * (5 * 1024 * 1024 + 1), content_type='application/pdf')

        response = auth_client(client_account).post(
            reverse('messages-send'), {'receiver': contractor_account.id, 'attachment': oversized}, format='multipart'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'attachment' in response.data


@pytest.mark.django_db
class TestThreads:
    def test_thread_is_oldest_first_and_private(self, auth_client, client_account, contractor_account):
        first = MessageFactory(sender=client_account, receiver=contractor_account)
        second = MessageFactory(sender=contractor_account, receiver=client_account)
        backdate(first, 10)
        backdate(second, 5)
        MessageFactory(sender=contractor_account)  # another conversation

        response = auth_client(client_account).get(reverse('messages-thread', kwargs={'user_id': contractor_account.id}))

        assert response.status_code == status.HTTP_200_OK
        assert [m['id'] for m in response.data] == [first.id, second.id]

    def test_mark_thread_read_reports_count(self, auth_client, client_account, contractor_account):
        MessageFactory.create_batch(3, sender=contractor_account, receiver=client_account)
        MessageFactory(sender=client_account, receiver=contractor_account)
        url = reverse('messages-thread-read', kwargs={'user_id': contractor_account.id})
        api = auth_client(client_account)

        assert api.post(url).data == {'updated': 3}
        assert api.post(url).data == {'updated': 0}
        assert not Message.objects.filter(receiver=contractor_account, read=True).exists()


@pytest.mark.django_db
class TestContacts:
    def test_contacts_newest_first_with_unread_counts(self, client_account):
        welder = ContractorFactory()
        electrician = ContractorFactory()
        old = MessageFactory(sender=welder, receiver=client_account)
        MessageFactory(sender=welder, receiver=client_account, read=True)
        newer = MessageFactory(sender=client_account, receiver=electrician)
        backdate(old, 60)
        backdate(newer, 1)
        Message.objects.filter(sender=welder, read=True).update(created_at=timezone.now() - timedelta(minutes=30))

        contacts = list_contacts(client_account)

        assert [c['user'] for c in contacts] == [electrician, welder]
        assert contacts[0]['unread_count'] == 0
        assert contacts[1]['unread_count'] == 1

    def test_contacts_endpoint(self, auth_client, client_account, contractor_account):
        MessageFactory(sender=contractor_account, receiver=client_account)

        response = auth_client(client_account).get(reverse('messages-contacts'))

        assert response.data[0]['user']['id'] == contractor_account.id
        assert response.data[0]['unread_count'] == 1


@pytest.mark.django_db
class TestUserSearch:
    def test_search_excludes_self_and_caps_results(self, auth_client):
        me = ClientFactory(company_name='Rift Valley Steel')
        ContractorFactory.create_batch(12, company_name='Rift Valley Fabrication')
        UserFactory(company_name='Rift Valley Closed', is_active=False)

        response = auth_client(me).get(reverse('messages-user-search'), {'q': 'rift valley'})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 10
        ids = {u['id'] for u in response.data}
        assert me.id not in ids

    def test_blank_query_returns_nothing(self, auth_client, client_account):
        ContractorFactory()

        response = auth_client(client_account).get(reverse('messages-user-search'), {'q': ''})

        assert response.data == []
