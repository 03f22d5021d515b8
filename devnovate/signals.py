"""
Signals sent by devnovate.
"""
from django.dispatch import Signal

# Sent after a post's status changes.
# Keyword arguments: post, event, previous_status, actor
post_status_changed = Signal()
