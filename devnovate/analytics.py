"""
Admin dashboard and analytics figures.

All aggregation runs in the database through the ORM.
"""
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.db.models import Count, Sum
from django.db.models.functions import TruncDate
from django.utils import timezone

from .exceptions import ValidationFailed
from .listing import SORT_ORDERS, SORT_POPULAR
from .models import Comment, Like, Post
from .workflow import PostStatus

PERIODS = {
    "7d": 7,
    "30d": 30,
    "90d": 90,
    "1y": 365,
}
DEFAULT_PERIOD = "30d"


def _engagement_totals(posts):
    """Sum views, likes and comments over a post queryset."""
    return {
        "total_views": posts.aggregate(total=Sum("view_count"))["total"] or 0,
        "total_likes": Like.objects.filter(post__in=posts).count(),
        "total_comments": Comment.objects.filter(post__in=posts).count(),
    }


def _daily_counts(queryset, date_field):
    rows = (
        queryset.annotate(day=TruncDate(date_field))
        .values("day")
        .annotate(count=Count("pk"))
        .order_by("day")
    )
    return [{"date": row["day"].isoformat(), "count": row["count"]} for row in rows]


def dashboard_stats():
    """Headline numbers plus the most recent posts and users."""
    User = get_user_model()
    published = Post.objects.published()
    stats = {
        "total_users": User.objects.count(),
        "total_posts": Post.objects.count(),
        "pending_posts": Post.objects.with_status(PostStatus.PENDING).count(),
        "published_posts": published.count(),
    }
    stats.update(_engagement_totals(published))
    return {
        "stats": stats,
        "recent_posts": list(
            Post.objects.select_related("author").order_by("-created_at")[:5]
        ),
        "recent_users": list(User.objects.order_by("-date_joined")[:5]),
    }


def period_analytics(period=DEFAULT_PERIOD):
    """
    Activity over the last ``period`` ("7d", "30d", "90d" or "1y").

    Returns daily post and signup counts, the top ten published posts by
    views then likes, and per-category totals for published posts.
    """
    if period not in PERIODS:
        raise ValidationFailed(f"Period must be one of {', '.join(PERIODS)}")
    User = get_user_model()
    start = timezone.now() - timedelta(days=PERIODS[period])

    top_posts = (
        Post.objects.published()
        .with_engagement()
        .select_related("author")
        .summaries()
        .order_by(*SORT_ORDERS[SORT_POPULAR])[:10]
    )

    categories = {
        row["category"]: {
            "category": row["category"],
            "count": row["count"],
            "total_views": row["total_views"] or 0,
            "total_likes": 0,
        }
        for row in Post.objects.published()
        .values("category")
        .annotate(count=Count("pk"), total_views=Sum("view_count"))
    }
    like_rows = (
        Like.objects.filter(post__status=PostStatus.PUBLISHED)
        .values("post__category")
        .annotate(count=Count("pk"))
    )
    for row in like_rows:
        categories[row["post__category"]]["total_likes"] = row["count"]

    return {
        "period": period,
        "post_stats": _daily_counts(Post.objects.filter(created_at__gte=start), "created_at"),
        "user_stats": _daily_counts(User.objects.filter(date_joined__gte=start), "date_joined"),
        "top_posts": list(top_posts),
        "category_stats": sorted(
            categories.values(), key=lambda row: (-row["count"], row["category"])
        ),
    }


def author_stats(user):
    """Per-status post counts and engagement totals for one author."""
    posts = Post.objects.by_author(user)
    by_status = dict(
        posts.values_list("status").annotate(count=Count("pk")).order_by()
    )
    stats = {"total_posts": sum(by_status.values())}
    for status in PostStatus.values:
        stats[f"{status}_posts"] = by_status.get(status, 0)
    stats.update(_engagement_totals(posts.published()))
    return stats
