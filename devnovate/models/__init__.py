"""
Models for django-devnovate.

All models are importable from devnovate.models:

    from devnovate.models import Post, Tag, Comment, CommentReply, Like
"""
from .posts import Tag, Post
from .comments import Comment, CommentReply, Like

__all__ = [
    # Posts
    "Tag",
    "Post",
    # Engagement
    "Comment",
    "CommentReply",
    "Like",
]
