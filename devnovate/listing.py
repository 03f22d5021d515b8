"""
Post listings: filter, sort and paginate.

Every public listing is a specialization of ``list_posts``.
"""
import math
from dataclasses import dataclass, field

from django.db.models import F

from .conf import blog_settings
from .exceptions import NotFound
from .models import Comment, Like, Post
from .workflow import PostStatus

SORT_LATEST = "latest"
SORT_POPULAR = "popular"
SORT_TRENDING = "trending"

# "trending" keys on unique_visitors, which nothing populates yet, so in
# practice it orders by likes and then comments.
SORT_ORDERS = {
    SORT_LATEST: (F("published_at").desc(nulls_last=True), "-created_at", "-pk"),
    SORT_POPULAR: ("-view_count", "-num_likes", "-pk"),
    SORT_TRENDING: ("-unique_visitors", "-num_likes", "-num_comments", "-pk"),
}
SORT_CHOICES = [(key, key.capitalize()) for key in SORT_ORDERS]


@dataclass
class Pagination:
    current_page: int
    total_pages: int
    total: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page, limit, total):
        total_pages = math.ceil(total / limit)
        return cls(
            current_page=page,
            total_pages=total_pages,
            total=total,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


@dataclass
class Page:
    """One page of results plus its pagination block."""

    items: list = field(default_factory=list)
    pagination: Pagination = None


def paginate(queryset, page=1, limit=None):
    """Slice ``queryset`` to one page; pages past the end are empty."""
    limit = limit or blog_settings.POSTS_PER_PAGE
    skip = (page - 1) * limit
    total = queryset.count()
    items = list(queryset[skip:skip + limit])
    return Page(items=items, pagination=Pagination.build(page, limit, total))


def list_posts(
    page=1,
    limit=None,
    category=None,
    search=None,
    sort=SORT_LATEST,
    status=PostStatus.PUBLISHED,
    author=None,
):
    """
    Return a page of post summaries.

    Args:
        page: 1-based page number
        limit: page size, defaults to POSTS_PER_PAGE
        category: exact category match
        search: case-insensitive match against title, content or tag names
        sort: one of "latest", "popular", "trending"
        status: restrict to this status; None lists every status
        author: restrict to this author's posts

    Returns:
        Page with posts (content deferred) and pagination metadata
    """
    queryset = Post.objects.all()
    if status:
        queryset = queryset.with_status(status)
    if author is not None:
        queryset = queryset.by_author(author)
    if category:
        queryset = queryset.in_category(category)
    if search:
        queryset = queryset.search(search)

    queryset = (
        queryset.with_engagement()
        .select_related("author")
        .prefetch_related("tags")
        .summaries()
        .order_by(*SORT_ORDERS[sort or SORT_LATEST])
    )
    return paginate(queryset, page, limit)


def category_posts(category, page=1, limit=None):
    """Published posts in one category, newest first."""
    return list_posts(page=page, limit=limit, category=category)


def _published_summaries(queryset):
    return (
        queryset.published()
        .with_engagement()
        .select_related("author")
        .prefetch_related("tags")
        .summaries()
    )


def trending_posts(limit=None):
    """Top published posts by the trending order, without pagination."""
    limit = limit or blog_settings.TRENDING_LIMIT
    queryset = _published_summaries(Post.objects.all()).order_by(*SORT_ORDERS[SORT_TRENDING])
    return list(queryset[:limit])


def author_posts(user, page=1, limit=None, status=None, category=None):
    """An author's own posts in any status, most recently created first."""
    queryset = Post.objects.by_author(user)
    if status:
        queryset = queryset.with_status(status)
    if category:
        queryset = queryset.in_category(category)
    queryset = (
        queryset.with_engagement()
        .select_related("author")
        .prefetch_related("tags")
        .order_by("-created_at", "-pk")
    )
    return paginate(queryset, page, limit)


def liked_posts(user, page=1, limit=None):
    """Published posts ``user`` has liked, most recently updated first."""
    liked = Like.objects.filter(user=user).values("post_id")
    queryset = _published_summaries(Post.objects.filter(pk__in=liked))
    return paginate(queryset.order_by("-updated_at", "-pk"), page, limit)


def commented_posts(user, page=1, limit=None):
    """
    Published posts ``user`` has commented on, most recently updated first.

    A post appears once however many comments the user left on it.
    """
    commented = Comment.objects.filter(author=user).values("post_id")
    queryset = _published_summaries(Post.objects.filter(pk__in=commented))
    return paginate(queryset.order_by("-updated_at", "-pk"), page, limit)


def pending_posts(page=1, limit=None):
    """Moderation queue, most recently created first."""
    queryset = (
        Post.objects.with_status(PostStatus.PENDING)
        .with_engagement()
        .select_related("author")
        .prefetch_related("tags")
        .order_by("-created_at", "-pk")
    )
    return paginate(queryset, page, limit)


def get_post(pk):
    return Post.objects.get_by_id(pk)


def get_published_post(slug):
    """Published post by slug, with author, tags and comment threads loaded."""
    post = (
        Post.objects.published()
        .with_engagement()
        .select_related("author")
        .prefetch_related("tags", "comments__author", "comments__replies__author")
        .filter(slug=slug)
        .first()
    )
    if post is None:
        raise NotFound("Post not found")
    return post
