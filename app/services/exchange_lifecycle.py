"""Exchange state machine.

Pure functions shared by the exchange and emergency services. Nothing here
touches the database so the permission table can be checked in isolation.

    pending -> accepted -> completed
    pending | accepted -> cancelled
"""

from typing import NamedTuple

from app.models.exchange import ExchangeRole, ExchangeStatus
from app.models.post import PostType

TERMINAL_STATUSES = frozenset({ExchangeStatus.COMPLETED, ExchangeStatus.CANCELLED})


class ExchangeParties(NamedTuple):
    helper_id: int
    requester_id: int


def derive_role(
    acting_user_id: int, helper_id: int, requester_id: int, post_type: PostType
) -> ExchangeRole:
    # The party supplying the offered resource is the provider.
    if acting_user_id == helper_id:
        return ExchangeRole.PROVIDER if post_type == PostType.OFFER else ExchangeRole.HELPER
    return ExchangeRole.REQUESTER if post_type == PostType.OFFER else ExchangeRole.PROVIDER


def can_transition(
    current: ExchangeStatus, target: ExchangeStatus, role: ExchangeRole
) -> bool:
    current = ExchangeStatus(current)
    target = ExchangeStatus(target)

    if current in TERMINAL_STATUSES:
        return False

    if target == ExchangeStatus.ACCEPTED:
        return current == ExchangeStatus.PENDING and role == ExchangeRole.PROVIDER
    if target == ExchangeStatus.COMPLETED:
        return current == ExchangeStatus.ACCEPTED
    if target == ExchangeStatus.CANCELLED:
        return current in (ExchangeStatus.PENDING, ExchangeStatus.ACCEPTED)

    return False


def allowed_transitions(
    current: ExchangeStatus, role: ExchangeRole
) -> list[ExchangeStatus]:
    return [
        target for target in ExchangeStatus if can_transition(current, target, role)
    ]


def initial_parties(
    post_type: PostType, post_owner_id: int, initiator_id: int
) -> ExchangeParties:
    """Who helps and who is helped when ``initiator_id`` contacts a post."""
    if PostType(post_type) == PostType.OFFER:
        return ExchangeParties(helper_id=post_owner_id, requester_id=initiator_id)
    return ExchangeParties(helper_id=initiator_id, requester_id=post_owner_id)
