"""
Shared fixtures for django-devnovate tests.
"""
import pytest

CONTENT = " ".join(["word"] * 100)


@pytest.fixture
def author(db, django_user_model):
    """Create a regular user who writes posts."""
    return django_user_model.objects.create_user(
        username="author",
        email="author@example.com",
        password="testpass123",
        first_name="Ada",
    )


@pytest.fixture
def reader(db, django_user_model):
    """Create a regular user who reads, likes and comments."""
    return django_user_model.objects.create_user(
        username="reader",
        email="reader@example.com",
        password="testpass123",
    )


@pytest.fixture
def moderator(db, django_user_model):
    """Create an admin user."""
    return django_user_model.objects.create_user(
        username="moderator",
        email="moderator@example.com",
        password="testpass123",
        is_staff=True,
    )


@pytest.fixture
def make_post(db, author):
    """Factory for pending posts; pass status-free overrides as kwargs."""

    def factory(title="A brand new beginning for all", **kwargs):
        from devnovate.models import Post

        kwargs.setdefault("author", author)
        kwargs.setdefault("content", CONTENT)
        kwargs.setdefault("excerpt", "short excerpt text here")
        kwargs.setdefault("category", "Technology")
        return Post.objects.create_post(title=title, **kwargs)

    return factory


@pytest.fixture
def pending_post(db, make_post):
    return make_post()


@pytest.fixture
def published_post(db, make_post, moderator):
    post = make_post(title="Published and ready to read")
    post.approve(moderator)
    return post
