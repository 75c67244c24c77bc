from datetime import datetime, timedelta, timezone

import pytest

from app.models.post import PostCategory, PostStatus, PostType, Urgency
from app.schemas.post import PostFilters, PostRead
from app.services.post_catalog import (
    filter_and_sort,
    matches_filters,
    matches_search,
    sort_posts,
)

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_post(post_id: int, minutes: int = 0, **fields) -> PostRead:
    data = {
        "id": post_id,
        "user_id": 1,
        "type": PostType.OFFER,
        "category": PostCategory.SKILL,
        "title": f"Post {post_id}",
        "description": None,
        "urgency": Urgency.LOW,
        "location": "Main St",
        "status": PostStatus.ACTIVE,
        "created_at": T0 + timedelta(minutes=minutes),
    }
    data.update(fields)
    return PostRead(**data)


class TestFiltering:

    def test_conjunction_of_filters(self):
        posts = [
            make_post(1, type=PostType.OFFER, category=PostCategory.TOOL, urgency=Urgency.HIGH),
            make_post(2, type=PostType.NEED, category=PostCategory.TOOL, urgency=Urgency.HIGH),
            make_post(3, type=PostType.OFFER, category=PostCategory.GOOD, urgency=Urgency.HIGH),
            make_post(4, type=PostType.OFFER, category=PostCategory.TOOL, urgency=Urgency.LOW),
            make_post(5, minutes=5, type=PostType.OFFER, category=PostCategory.TOOL, urgency=Urgency.HIGH),
        ]
        filters = PostFilters(type="offer", category="tool", urgency="high")

        result = filter_and_sort(posts, filters)

        assert [p.id for p in result] == [5, 1]

    def test_empty_filters_match_everything(self):
        posts = [make_post(i) for i in range(3)]

        assert all(matches_filters(p, PostFilters()) for p in posts)

    def test_filter_order_does_not_matter(self):
        post = make_post(1, type=PostType.NEED, category=PostCategory.TIME)
        a = PostFilters(type="need", category="time", search="post")
        b = PostFilters(search="post", category="time", type="need")

        assert matches_filters(post, a) == matches_filters(post, b) is True

    def test_exclude_user(self):
        posts = [make_post(1, user_id=1), make_post(2, user_id=2)]

        result = filter_and_sort(posts, PostFilters(), exclude_user_id=1)

        assert [p.id for p in result] == [2]


class TestSearch:

    def test_case_insensitive_title(self):
        post = make_post(1, title="Need a Ladder")

        assert matches_search(post, "ladder")
        assert matches_search(post, "LADDER")

    def test_matches_description(self):
        post = make_post(1, title="Help wanted", description="Moving a heavy SOFA")

        assert matches_search(post, "sofa")

    def test_matches_location(self):
        post = make_post(1, title="Help wanted", location="Elm Street")

        assert matches_search(post, "elm st")

    def test_no_match(self):
        post = make_post(1, title="Need a Ladder", description=None, location="Elm St")

        assert not matches_search(post, "drill")

    def test_blank_search_is_ignored(self):
        filters = PostFilters(search="   ")

        assert filters.search is None


class TestSorting:

    def test_same_urgency_newest_first(self):
        older = make_post(1, minutes=0, urgency=Urgency.HIGH)
        newer = make_post(2, minutes=10, urgency=Urgency.HIGH)

        assert [p.id for p in sort_posts([older, newer])] == [2, 1]

    def test_urgency_beats_recency(self):
        emergency = make_post(1, minutes=0, urgency=Urgency.EMERGENCY)
        high = make_post(2, minutes=60, urgency=Urgency.HIGH)

        assert [p.id for p in sort_posts([high, emergency])] == [1, 2]

    @pytest.mark.parametrize("reverse_input", [False, True])
    def test_full_ordering(self, reverse_input):
        posts = [
            make_post(1, minutes=1, urgency=Urgency.LOW),
            make_post(2, minutes=2, urgency=Urgency.MEDIUM),
            make_post(3, minutes=3, urgency=Urgency.LOW),
            make_post(4, minutes=0, urgency=Urgency.EMERGENCY),
            make_post(5, minutes=4, urgency=Urgency.HIGH),
        ]
        if reverse_input:
            posts.reverse()

        assert [p.id for p in sort_posts(posts)] == [4, 5, 2, 3, 1]
