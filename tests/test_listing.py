"""
Tests for the listing service: filters, sort orders and pagination.
"""
import math
from datetime import timedelta

import pytest
from django.db.models import Q
from django.utils import timezone

from devnovate import listing
from devnovate.exceptions import NotFound
from devnovate.listing import Pagination
from devnovate.models import Post
from devnovate.serializers import serialize_post


@pytest.fixture
def publish(moderator):
    """Approve a post and return it refreshed."""

    def approve(post):
        post.approve(moderator)
        post.refresh_from_db()
        return post

    return approve


@pytest.fixture
def fans(db, django_user_model):
    return [
        django_user_model.objects.create_user(username=f"fan{i}", password="pass")
        for i in range(3)
    ]


class TestPagination:
    """Tests for the pagination block."""

    @pytest.mark.parametrize("total", [0, 1, 4, 5, 6, 23])
    @pytest.mark.parametrize("limit", [1, 5, 10])
    def test_invariants(self, total, limit):
        for page in range(1, 4):
            block = Pagination.build(page, limit, total)
            assert block.total_pages == math.ceil(total / limit)
            assert block.has_next == (page < block.total_pages)
            assert block.has_prev == (page > 1)

    def test_pages_over_a_listing(self, make_post, publish):
        for i in range(7):
            publish(make_post(title=f"Published post number {i}"))

        first = listing.list_posts(page=1, limit=3)
        last = listing.list_posts(page=3, limit=3)
        beyond = listing.list_posts(page=4, limit=3)

        assert len(first.items) == 3
        assert first.pagination.total == 7
        assert first.pagination.total_pages == 3
        assert first.pagination.has_next and not first.pagination.has_prev
        assert len(last.items) == 1
        assert not last.pagination.has_next and last.pagination.has_prev
        assert beyond.items == []

    def test_default_page_size_from_settings(self, make_post, publish):
        for i in range(6):
            publish(make_post(title=f"Published post number {i}"))
        page = listing.list_posts()
        # tests.settings sets POSTS_PER_PAGE to 5
        assert len(page.items) == 5
        assert page.pagination.total_pages == 2


class TestFilters:
    """Tests for status, category and search filters."""

    def test_only_published_by_default(self, make_post, publish, moderator):
        visible = publish(make_post(title="Visible to everybody now"))
        make_post(title="Still waiting for review")
        make_post(title="Only a draft for now", submit=False)
        hidden = publish(make_post(title="Hidden by the moderators"))
        hidden.toggle_visibility(moderator)

        page = listing.list_posts()
        assert [post.pk for post in page.items] == [visible.pk]

    def test_other_status(self, make_post):
        pending = make_post(title="Still waiting for review")
        page = listing.list_posts(status=Post.Status.PENDING)
        assert [post.pk for post in page.items] == [pending.pk]

    def test_category(self, make_post, publish):
        science = publish(make_post(title="Quantum things explained", category="Science"))
        publish(make_post(title="Startup funding explained", category="Business"))

        page = listing.list_posts(category="Science")
        assert [post.pk for post in page.items] == [science.pk]

    def test_search_title_is_case_insensitive(self, make_post, publish):
        match = publish(make_post(title="Understanding Django Signals"))
        publish(make_post(title="Cooking pasta at home tonight"))

        page = listing.list_posts(search="django SIGNALS")
        assert [post.pk for post in page.items] == [match.pk]

    def test_search_content(self, make_post, publish):
        match = publish(make_post(
            title="An unremarkable title here",
            content=" ".join(["word"] * 100) + " kubernetes",
        ))
        publish(make_post(title="Another unremarkable title"))

        page = listing.list_posts(search="Kubernetes")
        assert [post.pk for post in page.items] == [match.pk]

    def test_search_tags(self, make_post, publish):
        match = publish(make_post(title="An unremarkable title here", tags=["graphql", "api"]))
        publish(make_post(title="Another unremarkable title", tags=["rest"]))

        page = listing.list_posts(search="GraphQL")
        assert [post.pk for post in page.items] == [match.pk]
        assert page.pagination.total == 1

    def test_search_is_literal(self, make_post, publish):
        publish(make_post(title="Regex characters are plain text"))
        assert listing.list_posts(search=".*").items == []

    def test_search_and_category_combine(self, make_post, publish):
        match = publish(make_post(title="Python for scientists", category="Science"))
        publish(make_post(title="Python for managers", category="Business"))

        page = listing.list_posts(search="python", category="Science")
        assert [post.pk for post in page.items] == [match.pk]


class TestSortOrders:
    """Tests for latest, popular and trending sorts."""

    def test_latest(self, make_post, publish):
        older = publish(make_post(title="The older of the two posts"))
        newer = publish(make_post(title="The newer of the two posts"))
        now = timezone.now()
        Post.objects.filter(pk=older.pk).update(published_at=now - timedelta(days=2))
        Post.objects.filter(pk=newer.pk).update(published_at=now - timedelta(days=1))

        page = listing.list_posts(sort="latest")
        assert [post.pk for post in page.items] == [newer.pk, older.pk]

    def test_popular_views_first(self, make_post, publish, fans):
        """5 views and 2 likes loses to 10 views and no likes."""
        liked = publish(make_post(title="Five views and two likes"))
        viewed = publish(make_post(title="Ten views and no likes"))
        Post.objects.filter(pk=liked.pk).update(view_count=5)
        Post.objects.filter(pk=viewed.pk).update(view_count=10)
        for user in fans[:2]:
            liked.toggle_like(user)

        page = listing.list_posts(sort="popular")
        assert [post.pk for post in page.items] == [viewed.pk, liked.pk]

    def test_popular_ties_broken_by_likes(self, make_post, publish, fans):
        plain = publish(make_post(title="Same views, no likes"))
        liked = publish(make_post(title="Same views, one like"))
        Post.objects.filter(pk__in=[plain.pk, liked.pk]).update(view_count=3)
        liked.toggle_like(fans[0])

        page = listing.list_posts(sort="popular")
        assert [post.pk for post in page.items] == [liked.pk, plain.pk]

    def test_trending(self, make_post, publish, fans, reader):
        quiet = publish(make_post(title="Nobody reacts to this post"))
        commented = publish(make_post(title="One like and two comments"))
        liked = publish(make_post(title="Two likes and no comments"))
        for user in fans[:2]:
            liked.toggle_like(user)
        commented.toggle_like(fans[0])
        commented.add_comment(reader, "First")
        commented.add_comment(reader, "Second")

        page = listing.list_posts(sort="trending")
        assert [post.pk for post in page.items] == [liked.pk, commented.pk, quiet.pk]

    def test_trending_prefers_unique_visitors(self, make_post, publish, fans):
        liked = publish(make_post(title="Two likes and no visitors"))
        visited = publish(make_post(title="Many visitors and no likes"))
        for user in fans[:2]:
            liked.toggle_like(user)
        Post.objects.filter(pk=visited.pk).update(unique_visitors=50)

        posts = listing.trending_posts()
        assert [post.pk for post in posts] == [visited.pk, liked.pk]


class TestSpecializedListings:
    def test_trending_limit(self, make_post, publish):
        for i in range(4):
            publish(make_post(title=f"Published post number {i}"))
        make_post(title="Still waiting for review")
        assert len(listing.trending_posts(limit=3)) == 3
        assert len(listing.trending_posts()) == 4

    def test_category_posts(self, make_post, publish):
        health = publish(make_post(title="Sleep better every night", category="Health"))
        make_post(title="Pending health advice here", category="Health")
        page = listing.category_posts("Health")
        assert [post.pk for post in page.items] == [health.pk]

    def test_author_posts_any_status(self, make_post, publish, author, django_user_model):
        stranger = django_user_model.objects.create_user(username="stranger", password="x")
        draft = make_post(title="Only a draft for now", submit=False)
        published = publish(make_post(title="Published and ready to read"))
        make_post(title="Someone else's pending post", author=stranger)

        page = listing.author_posts(author)
        assert {post.pk for post in page.items} == {draft.pk, published.pk}

        drafts = listing.author_posts(author, status=Post.Status.DRAFT)
        assert [post.pk for post in drafts.items] == [draft.pk]

    def test_liked_posts(self, make_post, publish, moderator, reader, fans):
        older = publish(make_post(title="Liked a while back"))
        newer = publish(make_post(title="Liked just recently"))
        hidden = publish(make_post(title="Liked and later hidden"))
        publish(make_post(title="Only liked by someone else")).toggle_like(fans[0])
        for post in (older, newer, hidden):
            post.toggle_like(reader)
        hidden.toggle_visibility(moderator)
        now = timezone.now()
        Post.objects.filter(pk=older.pk).update(updated_at=now - timedelta(days=2))
        Post.objects.filter(pk=newer.pk).update(updated_at=now - timedelta(days=1))

        page = listing.liked_posts(reader)
        assert [post.pk for post in page.items] == [newer.pk, older.pk]
        assert page.pagination.total == 2
        assert "content" in page.items[0].get_deferred_fields()

    def test_liked_posts_keep_full_like_count(self, published_post, reader, fans):
        published_post.toggle_like(reader)
        published_post.toggle_like(fans[0])
        post = listing.liked_posts(reader).items[0]
        assert post.num_likes == 2

    def test_commented_posts_listed_once(self, make_post, publish, reader):
        chatty = publish(make_post(title="Commented on many times"))
        quiet = publish(make_post(title="Nobody talks about this"))
        for text in ("First", "Second", "Third"):
            chatty.add_comment(reader, text)

        page = listing.commented_posts(reader)
        assert [post.pk for post in page.items] == [chatty.pk]
        assert page.pagination.total == 1
        assert page.items[0].num_comments == 3
        assert listing.commented_posts(reader, page=2).items == []
        assert quiet.pk not in [post.pk for post in page.items]

    def test_pending_queue(self, make_post, publish):
        first = make_post(title="First pending submission")
        second = make_post(title="Second pending submission")
        publish(make_post(title="Already approved submission"))

        page = listing.pending_posts()
        assert {post.pk for post in page.items} == {first.pk, second.pk}
        assert page.pagination.total == 2

    def test_get_published_post(self, published_post, pending_post):
        assert listing.get_published_post(published_post.slug).pk == published_post.pk
        with pytest.raises(NotFound):
            listing.get_published_post(pending_post.slug)
        with pytest.raises(NotFound):
            listing.get_published_post("no-such-post")

    def test_get_post(self, pending_post):
        assert listing.get_post(pending_post.pk) == pending_post
        with pytest.raises(NotFound):
            listing.get_post(pending_post.pk + 100)


class TestListItems:
    def test_content_left_out(self, published_post):
        post = listing.list_posts().items[0]
        assert "content" in post.get_deferred_fields()
        data = serialize_post(post)
        assert "content" not in data
        assert data["slug"] == published_post.slug

    def test_counts_annotated(self, published_post, reader):
        published_post.toggle_like(reader)
        published_post.add_comment(reader, "Nice")
        post = listing.list_posts().items[0]
        assert (post.num_likes, post.num_comments) == (1, 1)

    def test_no_duplicate_rows_with_many_matching_tags(self, make_post, publish):
        publish(make_post(title="Tagged many ways here", tags=["py", "python", "pypy"]))
        page = listing.list_posts(search="py")
        assert page.pagination.total == 1
        assert len(page.items) == 1
        assert Post.objects.filter(Q(tags__name__icontains="py")).count() == 3
