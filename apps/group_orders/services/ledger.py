"""
Transactional access to group order state.

Every mutation of a group order runs inside ``GroupOrderLedger.transaction()``:
one database transaction holding the row lock of the group order being
changed. Locks are per group order, so unrelated group orders never wait on
each other. Waiting for a lock is bounded by ``GROUP_ORDERS['LOCK_TIMEOUT_MS']``
and a timeout surfaces as ContentionError with nothing written.
"""

from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence
from uuid import UUID

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import connection, transaction, IntegrityError, OperationalError
import structlog

from apps.group_orders.models import GroupOrder, ParticipantEntry

from .exceptions import (
    GroupOrderNotFoundError,
    AlreadyParticipatingError,
    ContentionError,
)

logger = structlog.get_logger(__name__)

# Substrings of driver errors that mean "could not get the lock in time"
LOCK_FAILURE_MARKERS = (
    'database is locked',
    'lock timeout',
    'lock wait timeout',
    'deadlock',
    'could not serialize',
    'could not obtain lock',
)


def is_lock_failure(exc: Exception) -> bool:
    message = str(exc).lower()
    return any(marker in message for marker in LOCK_FAILURE_MARKERS)


def _apply_lock_timeout() -> None:
    timeout_ms = int(settings.GROUP_ORDERS['LOCK_TIMEOUT_MS'])
    if connection.vendor == 'postgresql':
        with connection.cursor() as cursor:
            cursor.execute(f"SET LOCAL lock_timeout = {timeout_ms}")
    elif connection.vendor == 'mysql':
        with connection.cursor() as cursor:
            cursor.execute(f"SET SESSION innodb_lock_wait_timeout = {max(1, timeout_ms // 1000)}")
    # SQLite waits on the connection-level timeout configured in settings


class LedgerTransaction:
    """Reads and writes available while a ledger transaction is open."""

    def read_group_order(self, group_order_id: UUID) -> GroupOrder:
        """
        Load a group order and lock its row until the transaction ends.

        Raises:
            GroupOrderNotFoundError: If group order doesn't exist
        """
        try:
            return GroupOrder.objects.select_for_update().get(id=group_order_id)
        except (GroupOrder.DoesNotExist, ValidationError):
            raise GroupOrderNotFoundError(f"Group order with ID {group_order_id} not found")

    def write_group_order(self, group_order: GroupOrder, fields: Sequence[str]) -> None:
        group_order.save(update_fields=[*fields, 'updated_at'])

    def read_participant(self, group_order: GroupOrder, vendor_id: UUID) -> Optional[ParticipantEntry]:
        """Active entry of the vendor, or None."""
        return (
            ParticipantEntry.objects
            .filter(group_order=group_order, vendor_id=vendor_id, withdrawn=False)
            .first()
        )

    def insert_participant(self, group_order: GroupOrder, vendor, quantity: int, now) -> ParticipantEntry:
        """
        Raises:
            AlreadyParticipatingError: If the vendor already has an active entry
        """
        try:
            with transaction.atomic():
                return ParticipantEntry.objects.create(
                    group_order=group_order,
                    vendor=vendor,
                    quantity=quantity,
                    joined_at=now,
                )
        except IntegrityError:
            raise AlreadyParticipatingError("You have already joined this group order")

    def write_participant(self, entry: ParticipantEntry, fields: Sequence[str]) -> None:
        entry.save(update_fields=list(fields))

    def withdraw_all(self, group_order: GroupOrder, now) -> int:
        """Withdraw every active entry; returns how many were withdrawn."""
        return (
            ParticipantEntry.objects
            .filter(group_order=group_order, withdrawn=False)
            .update(withdrawn=True, withdrawn_at=now)
        )

    def active_participants(self, group_order: GroupOrder) -> List[ParticipantEntry]:
        return list(
            ParticipantEntry.objects
            .filter(group_order=group_order, withdrawn=False)
            .select_related('vendor')
            .order_by('joined_at', 'id')
        )

    def active_participant_count(self, group_order: GroupOrder) -> int:
        return ParticipantEntry.objects.filter(group_order=group_order, withdrawn=False).count()


class GroupOrderLedger:
    """Opens ledger transactions; commit happens when the block exits cleanly."""

    @contextmanager
    def transaction(self) -> Iterator[LedgerTransaction]:
        try:
            with transaction.atomic():
                _apply_lock_timeout()
                yield LedgerTransaction()
        except OperationalError as e:
            if not is_lock_failure(e):
                raise
            logger.warning("group_order_contention", error=str(e))
            raise ContentionError("Group order is busy, please retry") from e


ledger = GroupOrderLedger()
