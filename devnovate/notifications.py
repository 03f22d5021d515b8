"""
Email notifications sent to authors when moderators decide on their posts.

Delivery problems are logged and never undo the moderation decision.
"""
import logging

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.dispatch import receiver
from django.template.loader import render_to_string

from .conf import blog_settings
from .signals import post_status_changed
from .workflow import Event

logger = logging.getLogger(__name__)

APPROVED = "approved"
REJECTED = "rejected"

_SUBJECTS = {
    APPROVED: "Your blog post has been approved",
    REJECTED: "Your blog post needs some changes",
}


def send_post_status_email(email, first_name, title, status, rejection_reason=None):
    """
    Send the approved/rejected email for one post.

    Args:
        email: recipient address
        first_name: name used in the greeting
        title: post title
        status: "approved" or "rejected"
        rejection_reason: moderator's reason, rejected emails only

    Returns:
        The sent EmailMultiAlternatives message
    """
    context = {
        "first_name": first_name,
        "title": title,
        "status": status,
        "rejection_reason": rejection_reason,
        "site_name": blog_settings.SITE_NAME,
        "site_url": blog_settings.SITE_URL,
    }
    template = f"devnovate/email/post_{status}"
    message = EmailMultiAlternatives(
        subject=f"{_SUBJECTS[status]} - {blog_settings.SITE_NAME}",
        body=render_to_string(f"{template}.txt", context),
        from_email=blog_settings.FROM_EMAIL or settings.DEFAULT_FROM_EMAIL,
        to=[email],
    )
    message.attach_alternative(render_to_string(f"{template}.html", context), "text/html")
    message.send()
    logger.info("Sent %s email for '%s' to %s", status, title, email)
    return message


@receiver(post_status_changed, dispatch_uid="devnovate_notify_author")
def notify_author(sender, post, event, **kwargs):
    """Email the author after an approve or reject."""
    if not blog_settings.NOTIFY_AUTHORS:
        return
    if event == Event.APPROVE:
        status, reason = APPROVED, None
    elif event == Event.REJECT:
        status, reason = REJECTED, post.rejection_reason
    else:
        return

    author = post.author
    if not author.email:
        logger.warning("Author %s of post %s has no email address", author.pk, post.pk)
        return
    try:
        send_post_status_email(
            author.email,
            author.first_name or author.get_username(),
            post.title,
            status,
            reason,
        )
    except Exception:
        logger.exception("%s email for post %s failed", status.capitalize(), post.pk)
