"""
User management for the admin panel: listing, activation and roles.
"""
import logging

from django.contrib.auth import get_user_model
from django.db.models import Q

from .exceptions import InvalidState, NotFound, ValidationFailed
from .listing import paginate
from .permissions import ROLE_ADMIN, ROLE_USER, ROLES, require_admin

logger = logging.getLogger(__name__)


def get_user(pk):
    User = get_user_model()
    try:
        return User.objects.get(pk=pk)
    except (User.DoesNotExist, ValueError, TypeError):
        raise NotFound("User not found") from None


def list_users(page=1, limit=None, search=None, role=None):
    """Page of users, newest first, optionally filtered by text and role."""
    queryset = get_user_model().objects.all()
    if search:
        queryset = queryset.filter(
            Q(username__icontains=search)
            | Q(first_name__icontains=search)
            | Q(last_name__icontains=search)
            | Q(email__icontains=search)
        )
    if role == ROLE_ADMIN:
        queryset = queryset.filter(Q(is_staff=True) | Q(is_superuser=True))
    elif role == ROLE_USER:
        queryset = queryset.filter(is_staff=False, is_superuser=False)
    return paginate(queryset.order_by("-date_joined", "-pk"), page, limit)


def toggle_user_status(admin, user):
    """Activate or deactivate ``user``. Admins cannot deactivate themselves."""
    require_admin(admin)
    if user.pk == admin.pk:
        raise InvalidState("Cannot deactivate your own account")
    user.is_active = not user.is_active
    user.save(update_fields=["is_active"])
    logger.info(
        "User %s %s by admin %s",
        user.pk,
        "activated" if user.is_active else "deactivated",
        admin.pk,
    )
    return user


def change_user_role(admin, user, role):
    """Grant or revoke the admin role. Admins cannot change their own role."""
    require_admin(admin)
    if role not in ROLES:
        raise ValidationFailed("Role must be user or admin")
    if user.pk == admin.pk:
        raise InvalidState("Cannot change your own role")
    user.is_staff = role == ROLE_ADMIN
    if role == ROLE_USER:
        user.is_superuser = False
    user.save(update_fields=["is_staff", "is_superuser"])
    logger.info("User %s role changed to %s by admin %s", user.pk, role, admin.pk)
    return user
