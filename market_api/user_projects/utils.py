from django.core.mail import send_mail
from django.conf import settings


def send_bid_accepted_email(bid):
    contractor = bid.contractor
    subject = "Your Bid Has Been Accepted"
    message = f"""
    Hello {contractor.display_name},

    Congratulations! Your bid for the project "{bid.project.title}" has been accepted.

    Agreed amount: {bid.proposed_budget}
    Acceptance Time: {bid.updated_at.strftime('%Y-%m-%d %H:%M:%S')}

    You can now message the client and start working on the first milestone.

    The {settings.SITE_NAME} Team
    """

    send_mail(
        subject=subject,
        message=message.strip(),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[contractor.email],
        fail_silently=False,
    )
