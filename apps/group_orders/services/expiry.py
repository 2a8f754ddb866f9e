"""
Closing group orders whose deadline has passed.

Two paths reach the same function: operations that touch an expired group
order close it on access, and a periodic sweep closes the ones nobody
touched. Closing is idempotent, so the two paths may race freely.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from django.conf import settings
from django.utils import timezone
import structlog

from apps.group_orders.models import GroupOrder, GroupOrderState

from .exceptions import ContentionError, GroupOrderNotFoundError
from .fulfilment import fulfil_group_order
from .ledger import ledger

logger = structlog.get_logger(__name__)


@dataclass
class SweepResult:
    fulfilled: List[UUID] = field(default_factory=list)
    expired: List[UUID] = field(default_factory=list)
    skipped: List[UUID] = field(default_factory=list)

    @property
    def closed(self) -> int:
        return len(self.fulfilled) + len(self.expired)


def close_expired_group_order(*, group_order_id: UUID, now: Optional[datetime] = None) -> GroupOrder:
    """
    Close a group order whose deadline has passed.

    An expired order is fulfilled at the best tier reached when it has at
    least ``min_participants`` active participants and its committed quantity
    reaches the lowest tier threshold. Otherwise it becomes expired and nobody
    is charged. Orders that are terminal or still within their deadline are
    returned unchanged.

    Raises:
        GroupOrderNotFoundError: If group order doesn't exist
        ContentionError: If the row lock could not be taken in time
    """
    now = now or timezone.now()

    with ledger.transaction() as tx:
        group_order = tx.read_group_order(group_order_id)
        if not group_order.is_open or not group_order.has_expired(now):
            return group_order

        participant_count = tx.active_participant_count(group_order)
        lowest_threshold = (
            group_order.discount_tiers
            .order_by('threshold')
            .values_list('threshold', flat=True)
            .first()
        )

        if (
            participant_count >= group_order.min_participants
            and lowest_threshold is not None
            and group_order.current_quantity >= lowest_threshold
        ):
            fulfil_group_order(tx, group_order, now=now)
        else:
            group_order.state = GroupOrderState.EXPIRED
            group_order.closed_at = now
            tx.write_group_order(group_order, ['state', 'closed_at'])
            logger.info(
                "group_order_expired",
                group_order_id=str(group_order.id),
                committed_quantity=group_order.current_quantity,
                participants=participant_count,
            )

    return group_order


def find_expired_group_orders(*, now: Optional[datetime] = None, limit: Optional[int] = None):
    """Open group orders past their deadline, oldest deadline first."""
    now = now or timezone.now()
    queryset = (
        GroupOrder.objects
        .filter(state=GroupOrderState.OPEN, expires_at__lte=now)
        .order_by('expires_at')
    )
    if limit is not None:
        queryset = queryset[:limit]
    return queryset


def sweep_expired_group_orders(
    *,
    now: Optional[datetime] = None,
    batch_size: Optional[int] = None
) -> SweepResult:
    """
    Close up to ``batch_size`` expired group orders.

    Each order is closed in its own transaction. An order that is locked by
    someone else is skipped and picked up by the next sweep.
    """
    now = now or timezone.now()
    batch_size = batch_size or settings.GROUP_ORDERS['SWEEP_BATCH_SIZE']
    result = SweepResult()

    candidate_ids = list(
        find_expired_group_orders(now=now, limit=batch_size).values_list('id', flat=True)
    )
    for group_order_id in candidate_ids:
        try:
            group_order = close_expired_group_order(group_order_id=group_order_id, now=now)
        except (ContentionError, GroupOrderNotFoundError) as e:
            logger.warning("group_order_sweep_skipped", group_order_id=str(group_order_id), error=str(e))
            result.skipped.append(group_order_id)
            continue

        if group_order.state == GroupOrderState.FULFILLED:
            result.fulfilled.append(group_order_id)
        elif group_order.state == GroupOrderState.EXPIRED:
            result.expired.append(group_order_id)

    logger.info(
        "group_order_sweep_complete",
        fulfilled=len(result.fulfilled),
        expired=len(result.expired),
        skipped=len(result.skipped),
    )
    return result
