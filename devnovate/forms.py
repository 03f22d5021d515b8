"""
Forms validating request input before it reaches the models.
"""
from django import forms
from django.core.exceptions import ValidationError

from .analytics import DEFAULT_PERIOD, PERIODS
from .conf import blog_settings
from .listing import SORT_CHOICES, SORT_LATEST
from .permissions import ROLES
from .workflow import PostStatus


class TagListField(forms.Field):
    """List of tag names read from a multi-valued form field."""

    widget = forms.MultipleHiddenInput

    def to_python(self, value):
        if not value:
            return []
        if isinstance(value, str):
            value = [value]
        return [str(name).strip() for name in value]

    def validate(self, value):
        super().validate(value)
        if len(value) > blog_settings.MAX_TAGS:
            raise ValidationError(
                f"Tags must be a list with maximum {blog_settings.MAX_TAGS} items"
            )
        for name in value:
            if not 1 <= len(name) <= blog_settings.TAG_MAX_LENGTH:
                raise ValidationError(
                    f"Each tag must be between 1 and {blog_settings.TAG_MAX_LENGTH} characters"
                )


class PostForm(forms.Form):
    """
    Create or update a post.

    With ``partial=True`` every field is optional and ``changed_fields``
    only reports the fields present in the submitted data.
    """

    title = forms.CharField(min_length=10, max_length=200)
    content = forms.CharField(min_length=100, strip=False)
    excerpt = forms.CharField(min_length=10, max_length=300)
    category = forms.ChoiceField(choices=blog_settings.CATEGORY_CHOICES)
    tags = TagListField(required=False)
    featured_image = forms.URLField(required=False, max_length=500)
    meta_title = forms.CharField(required=False, max_length=60)
    meta_description = forms.CharField(required=False, max_length=160)
    save_as_draft = forms.BooleanField(required=False)

    def __init__(self, *args, partial=False, **kwargs):
        super().__init__(*args, **kwargs)
        self.partial = partial
        if partial:
            del self.fields["save_as_draft"]
            for field in self.fields.values():
                field.required = False

    def clean(self):
        cleaned = super().clean()
        if self.partial:
            for name in ("title", "content", "excerpt", "category"):
                if name in self.data and name in cleaned and not cleaned[name]:
                    self.add_error(name, "This field cannot be blank.")
        return cleaned

    def changed_fields(self):
        """Cleaned values of the fields that were actually submitted."""
        return {
            name: value
            for name, value in self.cleaned_data.items()
            if name in self.data
        }


class CommentForm(forms.Form):
    content = forms.CharField(min_length=1, max_length=1000)


class ReplyForm(forms.Form):
    content = forms.CharField(min_length=1, max_length=500)


class RejectForm(forms.Form):
    # Length rules are enforced by Post.reject
    rejection_reason = forms.CharField(required=False, strip=False)


class ListingForm(forms.Form):
    """Query parameters shared by the paginated listings."""

    page = forms.IntegerField(required=False, min_value=1)
    limit = forms.IntegerField(required=False, min_value=1, max_value=blog_settings.MAX_PAGE_SIZE)
    category = forms.ChoiceField(required=False, choices=blog_settings.CATEGORY_CHOICES)
    search = forms.CharField(required=False)
    sort = forms.ChoiceField(required=False, choices=SORT_CHOICES)
    status = forms.ChoiceField(required=False, choices=PostStatus.choices)

    def clean(self):
        cleaned = super().clean()
        cleaned["page"] = cleaned.get("page") or 1
        cleaned["limit"] = cleaned.get("limit") or blog_settings.POSTS_PER_PAGE
        cleaned["sort"] = cleaned.get("sort") or SORT_LATEST
        return cleaned


class UserListForm(forms.Form):
    page = forms.IntegerField(required=False, min_value=1)
    limit = forms.IntegerField(required=False, min_value=1, max_value=blog_settings.MAX_PAGE_SIZE)
    search = forms.CharField(required=False)
    role = forms.ChoiceField(required=False, choices=[(role, role) for role in ROLES])


class RoleForm(forms.Form):
    role = forms.ChoiceField(choices=[(role, role) for role in ROLES])


class PeriodForm(forms.Form):
    period = forms.ChoiceField(required=False, choices=[(key, key) for key in PERIODS])

    def clean_period(self):
        return self.cleaned_data["period"] or DEFAULT_PERIOD
