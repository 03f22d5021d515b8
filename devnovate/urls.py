"""
URL configuration for django-devnovate.

Include in your project urls.py:

    path('api/blogs/', include('devnovate.urls')),
"""
from django.urls import path

from . import views

app_name = "devnovate"

urlpatterns = [
    # Public listings
    path("", views.PostListView.as_view(), name="post_list"),
    path("trending/", views.TrendingPostListView.as_view(), name="trending"),
    path("category/<str:category>/", views.CategoryPostListView.as_view(), name="category_posts"),

    # Post CRUD, declared before the slug route so "new" is not read as a slug
    path("post/new/", views.PostCreateView.as_view(), name="post_create"),
    path("post/<int:pk>/edit/", views.PostUpdateView.as_view(), name="post_update"),
    path("post/<int:pk>/submit/", views.PostSubmitView.as_view(), name="post_submit"),
    path("post/<int:pk>/delete/", views.PostDeleteView.as_view(), name="post_delete"),
    path("post/<slug:slug>/", views.PostDetailView.as_view(), name="post_detail"),

    # Interactions
    path("post/<int:pk>/like/", views.LikeToggleView.as_view(), name="like_toggle"),
    path("post/<int:pk>/comments/", views.CommentCreateView.as_view(), name="comment_create"),
    path("comment/<int:pk>/edit/", views.CommentUpdateView.as_view(), name="comment_update"),
    path("comment/<int:pk>/reply/", views.ReplyCreateView.as_view(), name="reply_create"),

    # Author dashboard
    path("me/posts/", views.MyPostListView.as_view(), name="my_posts"),
    path("me/posts/<int:pk>/", views.MyPostDetailView.as_view(), name="my_post_detail"),
    path("me/stats/", views.MyStatsView.as_view(), name="my_stats"),
    path("me/liked/", views.MyLikedPostListView.as_view(), name="my_liked_posts"),
    path("me/commented/", views.MyCommentedPostListView.as_view(), name="my_commented_posts"),

    # Moderation panel
    path("moderation/dashboard/", views.DashboardView.as_view(), name="dashboard"),
    path("moderation/pending/", views.PendingPostListView.as_view(), name="pending_posts"),
    path("moderation/post/<int:pk>/approve/", views.PostApproveView.as_view(), name="post_approve"),
    path("moderation/post/<int:pk>/reject/", views.PostRejectView.as_view(), name="post_reject"),
    path(
        "moderation/post/<int:pk>/toggle-visibility/",
        views.PostVisibilityView.as_view(),
        name="post_toggle_visibility",
    ),
    path("moderation/analytics/", views.AnalyticsView.as_view(), name="analytics"),
    path("moderation/users/", views.UserListView.as_view(), name="user_list"),
    path("moderation/users/<int:pk>/toggle-status/", views.UserStatusView.as_view(), name="user_toggle_status"),
    path("moderation/users/<int:pk>/role/", views.UserRoleView.as_view(), name="user_role"),
]
