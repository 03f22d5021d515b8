"""
Post and Tag models for django-devnovate.

Post carries the moderation workflow (submit, approve, reject, edit,
visibility toggle, delete) and the engagement counters (views, likes,
comments).
"""
import logging
import math
import re

from django.conf import settings
from django.core.validators import MinLengthValidator
from django.db import models, transaction
from django.db.models import Count, F, Q
from django.urls import reverse
from django.utils import timezone

from ..conf import blog_settings
from ..exceptions import InvalidState, NotFound, ValidationFailed
from ..permissions import require_admin, require_active, require_owner_or_admin
from ..signals import post_status_changed
from ..workflow import Event, PostStatus, next_status, visibility_event

logger = logging.getLogger(__name__)

_SLUG_SEPARATOR_RE = re.compile(r"[^a-z0-9]+")


def slug_from_title(title):
    """Lowercase the title and collapse every non-alphanumeric run into one hyphen."""
    slug = _SLUG_SEPARATOR_RE.sub("-", title.lower()).strip("-")
    slug = slug[:blog_settings.SLUG_MAX_LENGTH].strip("-")
    return slug or "post"


def compute_read_time(content):
    """Minutes needed to read ``content``, rounded up. Empty content reads in 0."""
    words = len(content.split())
    return math.ceil(words / blog_settings.WORDS_PER_MINUTE)


class Tag(models.Model):
    """
    Flat tag for posts.

    Tags are created on demand from the names given when a post is saved.
    """

    name = models.CharField(max_length=blog_settings.TAG_MAX_LENGTH, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    @property
    def post_count(self):
        """Return count of published posts with this tag."""
        return self.posts.filter(status=PostStatus.PUBLISHED).count()


class PostQuerySet(models.QuerySet):
    """Filter and sort helpers composed by the listing layer."""

    def published(self):
        return self.filter(status=PostStatus.PUBLISHED)

    def with_status(self, status):
        return self.filter(status=status)

    def by_author(self, user):
        return self.filter(author=user)

    def in_category(self, category):
        return self.filter(category=category)

    def search(self, term):
        """Case-insensitive match on title, content, or any tag name."""
        tagged = Post.tags.through.objects.filter(
            tag__name__icontains=term,
        ).values("post_id")
        return self.filter(
            Q(title__icontains=term)
            | Q(content__icontains=term)
            | Q(pk__in=tagged)
        )

    def with_engagement(self):
        """Annotate like and comment counts (num_likes, num_comments)."""
        return self.annotate(
            num_likes=Count("likes", distinct=True),
            num_comments=Count("comments", distinct=True),
        )

    def summaries(self):
        """Drop the post body for list views."""
        return self.defer("content")

    def get_by_id(self, pk):
        try:
            return self.get(pk=pk)
        except (self.model.DoesNotExist, ValueError, TypeError):
            raise NotFound("Post not found") from None


class PostManager(models.Manager.from_queryset(PostQuerySet)):
    def create_post(
        self,
        author,
        title,
        content,
        excerpt,
        category,
        tags=(),
        featured_image="",
        submit=True,
        **extra,
    ):
        """
        Create a post owned by ``author``.

        Posts go straight to the moderation queue unless ``submit`` is False,
        in which case they stay drafts.
        """
        require_active(author)
        post = self.model(
            author=author,
            title=title,
            content=content,
            excerpt=excerpt,
            category=category,
            featured_image=featured_image or "",
            status=PostStatus.PENDING if submit else PostStatus.DRAFT,
            **extra,
        )
        with transaction.atomic():
            post.save()
            post.set_tags(tags)
        logger.info("Post %s created by user %s as %s", post.pk, author.pk, post.status)
        return post


class Post(models.Model):
    """
    Blog post submitted by an author and moderated by admins.

    Status changes go through the transition table in ``devnovate.workflow``.
    Views, likes and comments are only mutated through the engagement
    methods below.
    """

    Status = PostStatus

    EDITABLE_FIELDS = (
        "title",
        "content",
        "excerpt",
        "category",
        "tags",
        "featured_image",
        "meta_title",
        "meta_description",
        "keywords",
    )

    # Content
    title = models.CharField(max_length=200, validators=[MinLengthValidator(10)])
    slug = models.SlugField(max_length=blog_settings.SLUG_MAX_LENGTH, unique=True, blank=True)
    content = models.TextField(validators=[MinLengthValidator(100)])
    excerpt = models.CharField(max_length=300, validators=[MinLengthValidator(10)])
    category = models.CharField(max_length=50, choices=blog_settings.CATEGORY_CHOICES)
    tags = models.ManyToManyField(Tag, related_name="posts", blank=True)
    featured_image = models.URLField(max_length=500, blank=True)
    read_time = models.PositiveIntegerField(default=0, help_text="Minutes, rounded up")

    # Author - uses Django's AUTH_USER_MODEL
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blog_posts",
    )

    # Status
    status = models.CharField(
        max_length=20,
        choices=PostStatus.choices,
        default=PostStatus.DRAFT,
        db_index=True,
    )
    is_featured = models.BooleanField(default=False)
    is_trending = models.BooleanField(default=False)

    # Moderation
    published_at = models.DateTimeField(null=True, blank=True, db_index=True)
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="approved_blog_posts",
    )
    approved_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.TextField(max_length=500, blank=True)

    # Engagement stats
    view_count = models.PositiveIntegerField(default=0)
    shares = models.PositiveIntegerField(
        default=0,
        help_text="Share counter, kept for the engagement score",
    )

    # Analytics, not written by any code path yet
    unique_visitors = models.PositiveIntegerField(default=0, db_index=True)
    bounce_rate = models.FloatField(default=0)
    avg_time_on_page = models.FloatField(default=0)

    # SEO
    meta_title = models.CharField(max_length=60, blank=True)
    meta_description = models.CharField(max_length=160, blank=True)
    keywords = models.JSONField(default=list, blank=True)

    # Timestamps
    created_at = models.DateTimeField(db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PostManager()

    class Meta:
        ordering = ["-published_at", "-created_at"]
        indexes = [
            models.Index(fields=["status", "-published_at"]),
            models.Index(fields=["category", "status"]),
            models.Index(fields=["author", "status"]),
        ]

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        # Slug is assigned once and survives later title edits
        if not self.slug:
            base_slug = slug_from_title(self.title)
            slug = base_slug
            counter = 1
            while Post.objects.filter(slug=slug).exclude(pk=self.pk).exists():
                slug = f"{base_slug}-{counter}"
                counter += 1
            self.slug = slug

        if not self.created_at:
            self.created_at = timezone.now()

        self.read_time = compute_read_time(self.content or "")

        if self.status == PostStatus.PUBLISHED and not self.published_at:
            self.published_at = timezone.now()

        super().save(*args, **kwargs)

    def get_absolute_url(self):
        return reverse("devnovate:post_detail", kwargs={"slug": self.slug})

    @property
    def is_published(self):
        return self.status == PostStatus.PUBLISHED

    @staticmethod
    def clean_tag_names(names):
        """
        Normalize tag names: strip, drop blanks and duplicates.

        Raises ValidationFailed when there are too many tags or one is too long.
        """
        names = [name.strip() for name in names]
        names = list(dict.fromkeys(name for name in names if name))
        if len(names) > blog_settings.MAX_TAGS:
            raise ValidationFailed(f"A post can have at most {blog_settings.MAX_TAGS} tags")
        too_long = [name for name in names if len(name) > blog_settings.TAG_MAX_LENGTH]
        if too_long:
            raise ValidationFailed(
                f"Tag cannot exceed {blog_settings.TAG_MAX_LENGTH} characters: {too_long[0]}"
            )
        return names

    def set_tags(self, names):
        """Replace the post's tags with the given names, creating tags as needed."""
        names = self.clean_tag_names(names)
        self.tags.set([Tag.objects.get_or_create(name=name)[0] for name in names])

    # Lifecycle

    def _status_changed(self, event, previous_status, actor):
        logger.info(
            "Post %s %s -> %s (%s by user %s)",
            self.pk,
            previous_status,
            self.status,
            event,
            actor.pk,
        )
        post_status_changed.send(
            sender=Post,
            post=self,
            event=event,
            previous_status=previous_status,
            actor=actor,
        )

    def _write_if_status(self, expected_status, fields):
        """
        Write ``fields`` only while the stored status is ``expected_status``.

        Only the given columns are written, so counters bumped elsewhere
        survive and a concurrent status change makes this write fail.
        """
        updated = Post.objects.filter(pk=self.pk, status=expected_status).update(**fields)
        if not updated:
            raise InvalidState("Post status was changed by another request")
        for name, value in fields.items():
            setattr(self, name, value)

    def _transition(self, event, actor, **fields):
        """Move to the status ``event`` leads to, writing ``fields`` alongside."""
        previous_status = self.status
        fields["status"] = next_status(previous_status, event)
        fields["updated_at"] = timezone.now()
        self._write_if_status(previous_status, fields)
        self._status_changed(event, previous_status, actor)

    def submit(self, actor):
        """Queue a draft or rejected post for review. No-op when already pending."""
        require_owner_or_admin(actor, self.author_id, "submit this post")
        if self.status == PostStatus.PENDING:
            return
        self._transition(Event.SUBMIT, actor)

    def approve(self, admin):
        """Publish a pending post."""
        require_admin(admin)
        now = timezone.now()
        fields = {"approved_by": admin, "approved_at": now}
        if self.published_at is None:
            fields["published_at"] = now
        self._transition(Event.APPROVE, admin, **fields)

    def reject(self, admin, reason):
        """Reject a pending post, storing the reason verbatim."""
        require_admin(admin)
        reason = reason or ""
        low = blog_settings.REJECTION_REASON_MIN_LENGTH
        high = blog_settings.REJECTION_REASON_MAX_LENGTH
        if not low <= len(reason) <= high:
            raise ValidationFailed(
                f"Rejection reason must be between {low} and {high} characters"
            )
        self._transition(Event.REJECT, admin, rejection_reason=reason)

    def toggle_visibility(self, admin):
        """Hide a published post, or republish a hidden one."""
        require_admin(admin)
        event = visibility_event(self.status)
        fields = {}
        if event == Event.UNHIDE:
            fields["published_at"] = timezone.now()
        self._transition(event, admin, **fields)

    def edit(self, actor, **changes):
        """
        Update content fields.

        Published posts go back to pending so changed content is reviewed
        again. The slug never changes. Nothing on the instance changes
        unless the write succeeds.
        """
        require_owner_or_admin(actor, self.author_id, "update this post")
        unknown = set(changes) - set(self.EDITABLE_FIELDS)
        if unknown:
            raise ValidationFailed(f"Cannot edit fields: {', '.join(sorted(unknown))}")

        tags = changes.pop("tags", None)
        if tags is not None:
            tags = self.clean_tag_names(tags)

        previous_status = self.status
        fields = dict(changes)
        fields["read_time"] = compute_read_time(fields.get("content", self.content) or "")
        fields["updated_at"] = timezone.now()
        if previous_status == PostStatus.PUBLISHED:
            fields["status"] = next_status(previous_status, Event.EDIT)

        with transaction.atomic():
            self._write_if_status(previous_status, fields)
            if tags is not None:
                self.set_tags(tags)

        if self.status != previous_status:
            self._status_changed(Event.EDIT, previous_status, actor)

    def delete_by(self, actor):
        """Hard delete; comments, replies and likes go with it."""
        require_owner_or_admin(actor, self.author_id, "delete this post")
        logger.info("Post %s deleted by user %s", self.pk, actor.pk)
        self.delete()

    # Engagement

    def _require_published(self, action):
        if self.status != PostStatus.PUBLISHED:
            raise InvalidState(f"Cannot {action} unpublished post")

    def increment_view(self):
        """Increment view count atomically. Every call counts, repeat viewers included."""
        Post.objects.filter(pk=self.pk).update(view_count=F("view_count") + 1)
        self.refresh_from_db(fields=["view_count"])
        return self.view_count

    def toggle_like(self, user):
        """
        Like the post, or remove the user's like if present.

        Returns (likes_count, liked).
        """
        require_active(user)
        self._require_published("like")
        removed, _ = self.likes.filter(user=user).delete()
        if not removed:
            self.likes.get_or_create(user=user)
        return self.likes.count(), not removed

    def add_comment(self, user, content):
        require_active(user)
        self._require_published("comment on")
        return self.comments.create(author=user, content=content)

    @property
    def likes_count(self):
        num_likes = getattr(self, "num_likes", None)
        return self.likes.count() if num_likes is None else num_likes

    @property
    def comments_count(self):
        num_comments = getattr(self, "num_comments", None)
        return self.comments.count() if num_comments is None else num_comments

    @property
    def engagement_score(self):
        weights = blog_settings.ENGAGEMENT_WEIGHTS
        return (
            self.likes_count * weights["likes"]
            + self.comments_count * weights["comments"]
            + self.view_count * weights["views"]
            + self.shares * weights["shares"]
        )
