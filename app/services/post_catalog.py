"""Filtering and ordering of the community feed.

Works on anything shaped like a post (ORM rows or ``PostRead`` snapshots) so
the same rules apply to database reads and cached feed snapshots.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol, TypeVar

from app.models.post import URGENCY_RANK, PostCategory, PostType, Urgency
from app.schemas.post import PostFilters


class PostLike(Protocol):
    user_id: int
    type: PostType
    category: PostCategory
    urgency: Urgency
    title: str
    description: str | None
    location: str
    created_at: datetime


P = TypeVar("P", bound=PostLike)


def urgency_rank(urgency: Urgency | str) -> int:
    return URGENCY_RANK[Urgency(urgency)]


def matches_search(post: PostLike, term: str) -> bool:
    needle = term.lower()
    return any(
        needle in field.lower()
        for field in (post.title, post.description, post.location)
        if field
    )


def matches_filters(post: PostLike, filters: PostFilters) -> bool:
    if filters.type is not None and post.type != filters.type:
        return False
    if filters.category is not None and post.category != filters.category:
        return False
    if filters.urgency is not None and post.urgency != filters.urgency:
        return False
    if filters.search and not matches_search(post, filters.search):
        return False
    return True


def sort_posts(posts: Iterable[P]) -> list[P]:
    """Most urgent first, newest first within the same urgency."""
    return sorted(
        posts,
        key=lambda p: (urgency_rank(p.urgency), p.created_at),
        reverse=True,
    )


def filter_and_sort(
    posts: Iterable[P],
    filters: PostFilters,
    exclude_user_id: int | None = None,
) -> list[P]:
    selected = [
        post
        for post in posts
        if matches_filters(post, filters)
        and (exclude_user_id is None or post.user_id != exclude_user_id)
    ]
    return sort_posts(selected)
