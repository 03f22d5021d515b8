"""
Plain-dict representations of models for the JSON views.
"""
from dataclasses import asdict

from .permissions import user_role


def _isoformat(value):
    return value.isoformat() if value else None


def serialize_author(user):
    if user is None:
        return None
    return {
        "id": user.pk,
        "username": user.get_username(),
        "first_name": user.first_name,
        "last_name": user.last_name,
    }


def serialize_user(user):
    """Account details for the admin user list. Never includes the password."""
    data = serialize_author(user)
    data.update({
        "email": user.email,
        "role": user_role(user),
        "is_active": user.is_active,
        "date_joined": _isoformat(user.date_joined),
        "last_login": _isoformat(user.last_login),
    })
    return data


def serialize_reply(reply):
    return {
        "id": reply.pk,
        "author": serialize_author(reply.author),
        "content": reply.content,
        "created_at": _isoformat(reply.created_at),
    }


def serialize_comment(comment):
    return {
        "id": comment.pk,
        "author": serialize_author(comment.author),
        "content": comment.content,
        "is_edited": comment.is_edited,
        "edited_at": _isoformat(comment.edited_at),
        "created_at": _isoformat(comment.created_at),
        "replies": [serialize_reply(reply) for reply in comment.replies.all()],
    }


def serialize_post(post, detail=False):
    """
    Serialize a post.

    List views pass ``detail=False`` and never receive the post content.
    Detail views add content, SEO fields and comment threads.
    """
    data = {
        "id": post.pk,
        "title": post.title,
        "slug": post.slug,
        "excerpt": post.excerpt,
        "category": post.category,
        "tags": [tag.name for tag in post.tags.all()],
        "featured_image": post.featured_image,
        "status": post.status,
        "author": serialize_author(post.author),
        "read_time": post.read_time,
        "views": post.view_count,
        "likes_count": post.likes_count,
        "comments_count": post.comments_count,
        "engagement_score": post.engagement_score,
        "is_featured": post.is_featured,
        "published_at": _isoformat(post.published_at),
        "approved_at": _isoformat(post.approved_at),
        "rejection_reason": post.rejection_reason,
        "created_at": _isoformat(post.created_at),
        "updated_at": _isoformat(post.updated_at),
    }
    if detail:
        data.update({
            "content": post.content,
            "meta_title": post.meta_title,
            "meta_description": post.meta_description,
            "keywords": post.keywords,
            "comments": [serialize_comment(comment) for comment in post.comments.all()],
        })
    return data


def serialize_page(page, serialize_item=serialize_post):
    return {
        "success": True,
        "data": [serialize_item(item) for item in page.items],
        "pagination": asdict(page.pagination),
    }
