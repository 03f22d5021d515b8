"""
Django admin configuration for devnovate.
"""
from django.contrib import admin, messages

from .exceptions import BlogEngineError
from .models import Comment, CommentReply, Like, Post, Tag


class CommentReplyInline(admin.TabularInline):
    """Replies are shown for reference; they are only written through Comment.add_reply."""

    model = CommentReply
    extra = 0
    fields = ["author", "content", "created_at"]
    readonly_fields = ["author", "content", "created_at"]

    def has_add_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ["name", "post_count", "created_at"]
    search_fields = ["name"]
    readonly_fields = ["created_at"]


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = [
        "title_preview",
        "author",
        "status",
        "category",
        "view_count",
        "likes_count",
        "published_at",
        "created_at",
    ]
    list_filter = ["status", "category", "is_featured", "created_at"]
    search_fields = ["title", "content", "author__username"]
    raw_id_fields = ["author"]
    filter_horizontal = ["tags"]
    date_hierarchy = "created_at"
    # Status is changed through the moderation actions, never edited directly
    readonly_fields = [
        "slug",
        "status",
        "read_time",
        "view_count",
        "shares",
        "unique_visitors",
        "approved_by",
        "approved_at",
        "rejection_reason",
        "published_at",
        "created_at",
        "updated_at",
    ]

    fieldsets = (
        (None, {
            "fields": ("title", "slug", "content", "excerpt", "author")
        }),
        ("Taxonomy", {
            "fields": ("category", "tags", "featured_image")
        }),
        ("Moderation", {
            "fields": (
                "status",
                "approved_by",
                "approved_at",
                "rejection_reason",
                "published_at",
                "is_featured",
                "is_trending",
            )
        }),
        ("SEO", {
            "fields": ("meta_title", "meta_description", "keywords"),
            "classes": ("collapse",),
        }),
        ("Metadata", {
            "fields": ("read_time", "view_count", "shares", "unique_visitors", "created_at", "updated_at"),
            "classes": ("collapse",),
        }),
    )

    actions = ["approve_posts", "toggle_visibility", "feature_posts", "unfeature_posts"]

    def title_preview(self, obj):
        """Truncated title for list display."""
        return obj.title[:60] + "..." if len(obj.title) > 60 else obj.title

    title_preview.short_description = "Title"

    def save_model(self, request, obj, form, change):
        """
        Route content changes through Post.edit so published posts go back
        to review. Flags such as is_featured are written directly.
        """
        if not change:
            super().save_model(request, obj, form, change)
            return

        content_fields = set(Post.EDITABLE_FIELDS) - {"tags"}
        edited = {
            name: form.cleaned_data[name]
            for name in form.changed_data
            if name in content_fields
        }
        if "tags" in form.changed_data:
            edited["tags"] = [tag.name for tag in form.cleaned_data["tags"]]
        others = {
            name: form.cleaned_data[name]
            for name in form.changed_data
            if name not in Post.EDITABLE_FIELDS
        }

        stored = Post.objects.get(pk=obj.pk)
        if edited:
            try:
                stored.edit(request.user, **edited)
            except BlogEngineError as exc:
                self.message_user(request, f"{stored}: {exc.message}", messages.ERROR)
        if others:
            Post.objects.filter(pk=obj.pk).update(**others)
        obj.refresh_from_db()

    def save_related(self, request, form, formsets, change):
        # Tags of an existing post are saved by Post.edit in save_model
        if change:
            form.cleaned_data.pop("tags", None)
        super().save_related(request, form, formsets, change)

    def _run_transition(self, request, queryset, method, verb):
        done = 0
        for post in queryset:
            try:
                getattr(post, method)(request.user)
            except BlogEngineError as exc:
                self.message_user(request, f"{post}: {exc.message}", messages.WARNING)
            else:
                done += 1
        self.message_user(request, f"{done} posts {verb}.")

    @admin.action(description="Approve selected pending posts")
    def approve_posts(self, request, queryset):
        self._run_transition(request, queryset, "approve", "approved")

    @admin.action(description="Hide/unhide selected posts")
    def toggle_visibility(self, request, queryset):
        self._run_transition(request, queryset, "toggle_visibility", "toggled")

    @admin.action(description="Feature selected posts")
    def feature_posts(self, request, queryset):
        count = queryset.update(is_featured=True)
        self.message_user(request, f"{count} posts featured.")

    @admin.action(description="Unfeature selected posts")
    def unfeature_posts(self, request, queryset):
        count = queryset.update(is_featured=False)
        self.message_user(request, f"{count} posts unfeatured.")


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    """Read-only view of comments; they change only through Comment.edit."""

    list_display = ["preview", "author", "post", "is_edited", "created_at"]
    list_filter = ["is_edited", "created_at"]
    search_fields = ["content", "author__username", "post__title"]
    fields = ["post", "author", "content", "is_edited", "edited_at", "created_at", "updated_at"]
    readonly_fields = fields
    inlines = [CommentReplyInline]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Like)
class LikeAdmin(admin.ModelAdmin):
    """Likes are listed only; Post.toggle_like is their sole writer."""

    list_display = ["user", "post", "created_at"]
    list_filter = ["created_at"]
    search_fields = ["user__username", "post__title"]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
