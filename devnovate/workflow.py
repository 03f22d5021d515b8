"""
Post status workflow.

The whole transition table lives here so it can be inspected and tested
without touching the database:

    draft/rejected --submit--> pending
    pending --approve--> published
    pending --reject--> rejected
    published --edit--> pending
    published --hide--> hidden
    hidden --unhide--> published
"""
from django.db import models

from .exceptions import InvalidState


class PostStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    PENDING = "pending", "Pending review"
    PUBLISHED = "published", "Published"
    REJECTED = "rejected", "Rejected"
    HIDDEN = "hidden", "Hidden"


class Event(models.TextChoices):
    SUBMIT = "submit", "Submit for review"
    APPROVE = "approve", "Approve"
    REJECT = "reject", "Reject"
    EDIT = "edit", "Edit published content"
    HIDE = "hide", "Hide"
    UNHIDE = "unhide", "Unhide"


TRANSITIONS = {
    (PostStatus.DRAFT, Event.SUBMIT): PostStatus.PENDING,
    (PostStatus.REJECTED, Event.SUBMIT): PostStatus.PENDING,
    (PostStatus.PENDING, Event.APPROVE): PostStatus.PUBLISHED,
    (PostStatus.PENDING, Event.REJECT): PostStatus.REJECTED,
    (PostStatus.PUBLISHED, Event.EDIT): PostStatus.PENDING,
    (PostStatus.PUBLISHED, Event.HIDE): PostStatus.HIDDEN,
    (PostStatus.HIDDEN, Event.UNHIDE): PostStatus.PUBLISHED,
}

# Messages for the failures the admin panel surfaces most often
_FAILURE_MESSAGES = {
    Event.APPROVE: "Post is not pending approval",
    Event.REJECT: "Post is not pending approval",
    Event.HIDE: "Can only toggle visibility of published or hidden posts",
    Event.UNHIDE: "Can only toggle visibility of published or hidden posts",
}


def can_transition(status, event):
    """Return True if ``event`` is allowed from ``status``."""
    return (PostStatus(status), Event(event)) in TRANSITIONS


def next_status(status, event):
    """
    Return the status reached by applying ``event`` to ``status``.

    Raises InvalidState when the table has no such transition.
    """
    try:
        return TRANSITIONS[(PostStatus(status), Event(event))]
    except KeyError:
        message = _FAILURE_MESSAGES.get(
            event, f"Cannot {Event(event).label.lower()} a {status} post"
        )
        raise InvalidState(message) from None


def visibility_event(status):
    """Pick the hide/unhide event for a visibility toggle."""
    if status == PostStatus.HIDDEN:
        return Event.UNHIDE
    return Event.HIDE
