"""
Comment, reply and like models for django-devnovate.
"""
import logging

from django.conf import settings
from django.db import models
from django.utils import timezone

from ..exceptions import InvalidState
from ..permissions import require_active, require_owner_or_admin
from ..workflow import PostStatus

logger = logging.getLogger(__name__)


class Comment(models.Model):
    """
    Comment on a published post.

    Comments can be edited by their author and disappear only with their post.
    """

    post = models.ForeignKey(
        "devnovate.Post",
        on_delete=models.CASCADE,
        related_name="comments",
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blog_comments",
    )
    content = models.TextField(max_length=1000)
    is_edited = models.BooleanField(default=False)
    edited_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["post", "created_at"]),
        ]

    def __str__(self):
        return f"Comment by {self.author} on {self.post}"

    @property
    def preview(self):
        """Return truncated content for admin display."""
        if len(self.content) > 100:
            return self.content[:100] + "..."
        return self.content

    def edit(self, actor, content):
        """Replace the comment text. Only the comment author or an admin may edit."""
        require_owner_or_admin(actor, self.author_id, "edit this comment")
        self.content = content
        self.is_edited = True
        self.edited_at = timezone.now()
        self.save(update_fields=["content", "is_edited", "edited_at", "updated_at"])
        logger.info("Comment %s edited by user %s", self.pk, actor.pk)

    def add_reply(self, user, content):
        require_active(user)
        if self.post.status != PostStatus.PUBLISHED:
            raise InvalidState("Cannot reply on unpublished post")
        return self.replies.create(author=user, content=content)


class CommentReply(models.Model):
    """Reply attached to a comment. Replies do not nest further."""

    comment = models.ForeignKey(
        Comment,
        on_delete=models.CASCADE,
        related_name="replies",
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blog_comment_replies",
    )
    content = models.TextField(max_length=500)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        verbose_name = "Comment Reply"
        verbose_name_plural = "Comment Replies"

    def __str__(self):
        return f"Reply by {self.author} to comment {self.comment_id}"


class Like(models.Model):
    """One user's like on a post. A user likes a post at most once."""

    post = models.ForeignKey(
        "devnovate.Post",
        on_delete=models.CASCADE,
        related_name="likes",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blog_likes",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["post", "user"], name="devnovate_unique_like"),
        ]

    def __str__(self):
        return f"{self.user} likes {self.post}"
