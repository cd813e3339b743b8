from django.contrib.auth import get_user_model
from django.db.models import Count, Q

from .models import Message

User = get_user_model()

CONTACT_WINDOW = 100
SEARCH_LIMIT = 10


def list_contacts(user):
    """
    Everyone the user exchanged messages with, drawn from their latest
    sent and received messages, most recent conversation first, each with
    the number of unread messages they sent the user.
    """
    sent = Message.objects.filter(sender=user).order_by('-created_at').values_list('receiver_id', 'created_at')[:CONTACT_WINDOW]
    received = Message.objects.filter(receiver=user).order_by('-created_at').values_list('sender_id', 'created_at')[:CONTACT_WINDOW]

    last_seen = {}
    for contact_id, created_at in list(sent) + list(received):
        if contact_id not in last_seen or created_at > last_seen[contact_id]:
            last_seen[contact_id] = created_at

    unread = dict(
        Message.objects.filter(receiver=user, read=False, sender_id__in=last_seen)
        .order_by()
        .values('sender_id')
        .annotate(total=Count('id'))
        .values_list('sender_id', 'total')
    )
    users = User.objects.in_bulk(list(last_seen))

    contacts = [
        {'user': users[contact_id], 'last_message_at': created_at, 'unread_count': unread.get(contact_id, 0)}
        for contact_id, created_at in last_seen.items()
        if contact_id in users
    ]
    contacts.sort(key=lambda contact: contact['last_message_at'], reverse=True)
    return contacts


def thread(user, other_id):
    return Message.objects.filter(
        Q(sender=user, receiver_id=other_id) | Q(sender_id=other_id, receiver=user)
    ).select_related('sender', 'receiver').order_by('created_at', 'id')


def mark_thread_read(user, other_id):
    return Message.objects.filter(sender_id=other_id, receiver=user, read=False).update(read=True)


def search_users(user, query):
    query = (query or '').strip()
    if not query:
        return User.objects.none()

    return (
        User.active_objects.exclude(pk=user.pk)
        .filter(
            Q(first_name__icontains=query)
            | Q(last_name__icontains=query)
            | Q(company_name__icontains=query)
            | Q(email__icontains=query)
        )
        .order_by('first_name', 'last_name')[:SEARCH_LIMIT]
    )
