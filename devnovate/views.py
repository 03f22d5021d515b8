"""
JSON views for django-devnovate.
"""
from django.http import JsonResponse
from django.views import View

from . import accounts, analytics, listing
from .exceptions import BlogEngineError, NotFound
from .forms import (
    CommentForm,
    ListingForm,
    PeriodForm,
    PostForm,
    RejectForm,
    ReplyForm,
    RoleForm,
    UserListForm,
)
from .models import Comment, Post
from .permissions import require_active, require_admin
from .serializers import (
    serialize_comment,
    serialize_page,
    serialize_post,
    serialize_reply,
    serialize_user,
)


def form_errors(form):
    return JsonResponse(
        {"success": False, "errors": form.errors.get_json_data()},
        status=400,
    )


def success(data=None, message=None, status=200):
    payload = {"success": True}
    if data is not None:
        payload["data"] = data
    if message:
        payload["message"] = message
    return JsonResponse(payload, status=status)


class ApiView(View):
    """
    Base view: checks access, then turns business errors into JSON responses.

    Set ``login_required`` for endpoints that need an active account and
    ``admin_required`` for the moderation panel.
    """

    login_required = False
    admin_required = False

    def dispatch(self, request, *args, **kwargs):
        try:
            if self.admin_required:
                require_admin(request.user)
            elif self.login_required:
                require_active(request.user)
            return super().dispatch(request, *args, **kwargs)
        except BlogEngineError as exc:
            return JsonResponse(
                {"success": False, "message": exc.message},
                status=exc.status_code,
            )


# Public listings


class PostListView(ApiView):
    """Published posts with search, category filter, sort and pagination."""

    def get(self, request):
        form = ListingForm(request.GET)
        if not form.is_valid():
            return form_errors(form)
        data = form.cleaned_data
        page = listing.list_posts(
            page=data["page"],
            limit=data["limit"],
            category=data["category"],
            search=data["search"],
            sort=data["sort"],
        )
        return JsonResponse(serialize_page(page))


class TrendingPostListView(ApiView):
    def get(self, request):
        form = ListingForm(request.GET)
        if not form.is_valid():
            return form_errors(form)
        limit = form.cleaned_data["limit"] if "limit" in request.GET else None
        posts = listing.trending_posts(limit)
        return success([serialize_post(post) for post in posts])


class CategoryPostListView(ApiView):
    def get(self, request, category):
        form = ListingForm(request.GET)
        if not form.is_valid():
            return form_errors(form)
        data = form.cleaned_data
        page = listing.category_posts(category, page=data["page"], limit=data["limit"])
        return JsonResponse(serialize_page(page))


class PostDetailView(ApiView):
    """Display a published post. Signed-in readers count as a view."""

    def get(self, request, slug):
        post = listing.get_published_post(slug)
        if request.user.is_authenticated:
            post.increment_view()
        return success(serialize_post(post, detail=True))


# Authoring


class PostCreateView(ApiView):
    login_required = True

    def post(self, request):
        form = PostForm(request.POST)
        if not form.is_valid():
            return form_errors(form)
        data = form.cleaned_data
        post = Post.objects.create_post(
            author=request.user,
            title=data["title"],
            content=data["content"],
            excerpt=data["excerpt"],
            category=data["category"],
            tags=data["tags"],
            featured_image=data["featured_image"],
            submit=not data["save_as_draft"],
            meta_title=data["meta_title"],
            meta_description=data["meta_description"],
        )
        return success(serialize_post(post, detail=True), status=201)


class PostUpdateView(ApiView):
    """Edit a post. Published posts return to the moderation queue."""

    login_required = True

    def post(self, request, pk):
        form = PostForm(request.POST, partial=True)
        if not form.is_valid():
            return form_errors(form)
        post = listing.get_post(pk)
        post.edit(request.user, **form.changed_fields())
        return success(serialize_post(post, detail=True))


class PostSubmitView(ApiView):
    login_required = True

    def post(self, request, pk):
        post = listing.get_post(pk)
        post.submit(request.user)
        return success(serialize_post(post), message="Post submitted for review")


class PostDeleteView(ApiView):
    login_required = True

    def post(self, request, pk):
        post = listing.get_post(pk)
        post.delete_by(request.user)
        return success(message="Post deleted successfully")


class MyPostListView(ApiView):
    login_required = True

    def get(self, request):
        form = ListingForm(request.GET)
        if not form.is_valid():
            return form_errors(form)
        data = form.cleaned_data
        page = listing.author_posts(
            request.user,
            page=data["page"],
            limit=data["limit"],
            status=data["status"],
            category=data["category"],
        )
        return JsonResponse(serialize_page(page))


class MyPostDetailView(ApiView):
    login_required = True

    def get(self, request, pk):
        post = Post.objects.by_author(request.user).get_by_id(pk)
        return success(serialize_post(post, detail=True))


class MyStatsView(ApiView):
    login_required = True

    def get(self, request):
        return success(analytics.author_stats(request.user))


class _MyEngagementListView(ApiView):
    """Published posts the signed-in user interacted with."""

    login_required = True
    list_posts = None

    def get(self, request):
        form = ListingForm(request.GET)
        if not form.is_valid():
            return form_errors(form)
        data = form.cleaned_data
        page = self.list_posts(request.user, page=data["page"], limit=data["limit"])
        return JsonResponse(serialize_page(page))


class MyLikedPostListView(_MyEngagementListView):
    list_posts = staticmethod(listing.liked_posts)


class MyCommentedPostListView(_MyEngagementListView):
    list_posts = staticmethod(listing.commented_posts)


# Engagement


class LikeToggleView(ApiView):
    login_required = True

    def post(self, request, pk):
        post = listing.get_post(pk)
        likes_count, liked = post.toggle_like(request.user)
        return success({"likes_count": likes_count, "is_liked": liked})


class CommentCreateView(ApiView):
    login_required = True

    def post(self, request, pk):
        form = CommentForm(request.POST)
        if not form.is_valid():
            return form_errors(form)
        post = listing.get_post(pk)
        comment = post.add_comment(request.user, form.cleaned_data["content"])
        return success(serialize_comment(comment), status=201)


def _get_comment(pk):
    comment = Comment.objects.select_related("post", "author").filter(pk=pk).first()
    if comment is None:
        raise NotFound("Comment not found")
    return comment


class CommentUpdateView(ApiView):
    login_required = True

    def post(self, request, pk):
        form = CommentForm(request.POST)
        if not form.is_valid():
            return form_errors(form)
        comment = _get_comment(pk)
        comment.edit(request.user, form.cleaned_data["content"])
        return success(serialize_comment(comment))


class ReplyCreateView(ApiView):
    login_required = True

    def post(self, request, pk):
        form = ReplyForm(request.POST)
        if not form.is_valid():
            return form_errors(form)
        comment = _get_comment(pk)
        reply = comment.add_reply(request.user, form.cleaned_data["content"])
        return success(serialize_reply(reply), status=201)


# Moderation panel


class DashboardView(ApiView):
    admin_required = True

    def get(self, request):
        dashboard = analytics.dashboard_stats()
        return success({
            "stats": dashboard["stats"],
            "recent_activity": {
                "posts": [serialize_post(post) for post in dashboard["recent_posts"]],
                "users": [serialize_user(user) for user in dashboard["recent_users"]],
            },
        })


class PendingPostListView(ApiView):
    admin_required = True

    def get(self, request):
        form = ListingForm(request.GET)
        if not form.is_valid():
            return form_errors(form)
        data = form.cleaned_data
        page = listing.pending_posts(page=data["page"], limit=data["limit"])
        return JsonResponse(serialize_page(page))


class PostApproveView(ApiView):
    admin_required = True

    def post(self, request, pk):
        post = listing.get_post(pk)
        post.approve(request.user)
        return success(serialize_post(post), message="Post approved successfully")


class PostRejectView(ApiView):
    admin_required = True

    def post(self, request, pk):
        form = RejectForm(request.POST)
        if not form.is_valid():
            return form_errors(form)
        post = listing.get_post(pk)
        post.reject(request.user, form.cleaned_data["rejection_reason"])
        return success(serialize_post(post), message="Post rejected successfully")


class PostVisibilityView(ApiView):
    admin_required = True

    def post(self, request, pk):
        post = listing.get_post(pk)
        post.toggle_visibility(request.user)
        state = "published" if post.is_published else "hidden"
        return success(serialize_post(post), message=f"Post {state} successfully")


class AnalyticsView(ApiView):
    admin_required = True

    def get(self, request):
        form = PeriodForm(request.GET)
        if not form.is_valid():
            return form_errors(form)
        report = analytics.period_analytics(form.cleaned_data["period"])
        report["top_posts"] = [serialize_post(post) for post in report["top_posts"]]
        return success(report)


class UserListView(ApiView):
    admin_required = True

    def get(self, request):
        form = UserListForm(request.GET)
        if not form.is_valid():
            return form_errors(form)
        data = form.cleaned_data
        page = accounts.list_users(
            page=data["page"] or 1,
            limit=data["limit"],
            search=data["search"],
            role=data["role"],
        )
        return JsonResponse(serialize_page(page, serialize_user))


class UserStatusView(ApiView):
    admin_required = True

    def post(self, request, pk):
        user = accounts.toggle_user_status(request.user, accounts.get_user(pk))
        state = "activated" if user.is_active else "deactivated"
        return success(serialize_user(user), message=f"User {state} successfully")


class UserRoleView(ApiView):
    admin_required = True

    def post(self, request, pk):
        form = RoleForm(request.POST)
        if not form.is_valid():
            return form_errors(form)
        role = form.cleaned_data["role"]
        user = accounts.change_user_role(request.user, accounts.get_user(pk), role)
        return success(serialize_user(user), message=f"User role changed to {role} successfully")
