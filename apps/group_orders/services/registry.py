"""
Group order lifecycle service.

Suppliers open group orders for one of their products; vendors pool
quantities into them. Every mutation locks the group order row through the
ledger, re-validates against the locked state and writes back in the same
transaction, so concurrent joins never lose an increment.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone
import structlog

from apps.accounts.models import User
from apps.catalog.models import Product
from apps.group_orders.models import (
    GroupOrder,
    GroupOrderState,
    DiscountTier,
    ParticipantEntry,
    ParticipantSettlement,
)

from .exceptions import (
    InvalidParametersError,
    GroupOrderNotFoundError,
    ParticipantNotFoundError,
    GroupOrderClosedError,
    GroupOrderExpiredError,
    CapacityExceededError,
    AlreadyParticipatingError,
    UnauthorizedError,
    ContentionError,
)
from .expiry import close_expired_group_order
from .fulfilment import fulfil_group_order
from .ledger import ledger, LedgerTransaction
from .settlement import TierSpec

logger = structlog.get_logger(__name__)


def _normalize_tiers(discount_tiers: Iterable[Any]) -> List[TierSpec]:
    """
    Accept tiers as mappings, (threshold, percentage) pairs or TierSpec.

    Raises:
        InvalidParametersError: If the tiers are empty, unordered or out of range
    """
    tiers = []
    for tier in discount_tiers or []:
        if isinstance(tier, TierSpec):
            threshold, percentage = tier.threshold, tier.discount_percentage
        elif isinstance(tier, dict):
            threshold, percentage = tier.get('threshold'), tier.get('discount_percentage')
        else:
            threshold, percentage = tier
        try:
            tiers.append(TierSpec(threshold=int(threshold), discount_percentage=Decimal(str(percentage))))
        except (TypeError, ValueError, InvalidOperation):
            raise InvalidParametersError(f"Malformed discount tier: {tier!r}")

    if not tiers:
        raise InvalidParametersError("At least one discount tier is required")

    previous = 0
    for tier in tiers:
        if tier.threshold <= previous:
            raise InvalidParametersError("Tier thresholds must be positive and strictly ascending")
        if not Decimal('0') <= tier.discount_percentage <= Decimal('100'):
            raise InvalidParametersError("Discount percentage must be between 0 and 100")
        previous = tier.threshold
    return tiers


def _ensure_open(group_order: GroupOrder, now: datetime) -> None:
    if group_order.state == GroupOrderState.EXPIRED:
        raise GroupOrderExpiredError("This group order has expired")
    if not group_order.is_open:
        raise GroupOrderClosedError(f"This group order is {group_order.state}")
    if group_order.has_expired(now):
        raise GroupOrderExpiredError("This group order has expired")


def _ensure_quantity(quantity: Any) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidParametersError("Quantity must be a positive integer")


def _close_on_access(group_order_id: UUID, now: datetime) -> None:
    try:
        close_expired_group_order(group_order_id=group_order_id, now=now)
    except ContentionError:
        # The sweep closes it later
        logger.warning("group_order_lazy_close_skipped", group_order_id=str(group_order_id))


def _fulfil_if_complete(tx: LedgerTransaction, group_order: GroupOrder, participant_count: int, now: datetime) -> None:
    if (
        group_order.current_quantity >= group_order.target_quantity
        or participant_count >= group_order.max_participants
    ):
        fulfil_group_order(tx, group_order, now=now)


@transaction.atomic
def create_group_order(
    *,
    supplier: User,
    product_id: UUID,
    target_quantity: int,
    max_participants: int,
    discount_tiers: Iterable[Any],
    expires_at: datetime,
    min_participants: int = 1,
    now: Optional[datetime] = None
) -> GroupOrder:
    """
    Open a group order for one of the supplier's products.

    Args:
        supplier: Supplier offering the product
        product_id: UUID of the product
        target_quantity: Committed quantity at which the order fulfils
        max_participants: Participant cap; reaching it also fulfils the order
        discount_tiers: (threshold, percentage) pairs, strictly ascending
        expires_at: Deadline for joining
        min_participants: Participants needed to settle at the deadline

    Returns:
        Created GroupOrder in the open state

    Raises:
        InvalidParametersError: If any value is out of range, the deadline is
            not in the future, or the product isn't the supplier's
    """
    now = now or timezone.now()

    for name, value in (
        ('target_quantity', target_quantity),
        ('min_participants', min_participants),
        ('max_participants', max_participants),
    ):
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise InvalidParametersError(f"{name} must be a positive integer")
    if max_participants < min_participants:
        raise InvalidParametersError("max_participants cannot be lower than min_participants")
    if expires_at is None or expires_at <= now:
        raise InvalidParametersError("expires_at must be in the future")

    tiers = _normalize_tiers(discount_tiers)

    try:
        product = Product.objects.get(id=product_id, is_active=True)
    except (Product.DoesNotExist, ValidationError):
        raise InvalidParametersError(f"Product with ID {product_id} not found")
    if product.supplier_id != supplier.id:
        raise InvalidParametersError("You can only open group orders for your own products")

    group_order = GroupOrder.objects.create(
        supplier=supplier,
        product=product,
        target_quantity=target_quantity,
        min_participants=min_participants,
        max_participants=max_participants,
        expires_at=expires_at,
    )
    DiscountTier.objects.bulk_create([
        DiscountTier(
            group_order=group_order,
            threshold=tier.threshold,
            discount_percentage=tier.discount_percentage,
        )
        for tier in tiers
    ])

    logger.info(
        "group_order_created",
        group_order_id=str(group_order.id),
        supplier_id=str(supplier.id),
        product_id=str(product.id),
        target_quantity=target_quantity,
        expires_at=expires_at.isoformat(),
    )
    return group_order


def join_group_order(
    *,
    group_order_id: UUID,
    vendor: User,
    quantity: int,
    now: Optional[datetime] = None
) -> ParticipantEntry:
    """
    Commit a quantity to a group order.

    Fulfils and settles the order in the same transaction when the committed
    quantity reaches the target or the participant cap is reached.

    Raises:
        InvalidParametersError: If quantity is not positive
        GroupOrderNotFoundError: If group order doesn't exist
        CapacityExceededError: If the participant cap is already reached
        GroupOrderExpiredError: If the deadline has passed
        GroupOrderClosedError: If the order is fulfilled or cancelled
        AlreadyParticipatingError: If the vendor already has an active entry
        ContentionError: If the row lock could not be taken in time
    """
    _ensure_quantity(quantity)
    now = now or timezone.now()

    try:
        with ledger.transaction() as tx:
            group_order = tx.read_group_order(group_order_id)

            participant_count = tx.active_participant_count(group_order)
            if participant_count >= group_order.max_participants:
                raise CapacityExceededError("This group order has no free participant slots")
            _ensure_open(group_order, now)

            if tx.read_participant(group_order, vendor.id) is not None:
                raise AlreadyParticipatingError("You have already joined this group order")

            entry = tx.insert_participant(group_order, vendor, quantity, now)
            group_order.current_quantity += quantity
            tx.write_group_order(group_order, ['current_quantity'])
            participant_count += 1

            logger.info(
                "group_order_joined",
                group_order_id=str(group_order.id),
                vendor_id=str(vendor.id),
                quantity=quantity,
                current_quantity=group_order.current_quantity,
            )
            _fulfil_if_complete(tx, group_order, participant_count, now)
    except GroupOrderExpiredError:
        _close_on_access(group_order_id, now)
        raise

    return entry


def update_participation(
    *,
    group_order_id: UUID,
    vendor: User,
    quantity: int,
    now: Optional[datetime] = None
) -> ParticipantEntry:
    """
    Replace the quantity of the vendor's active entry.

    Raises:
        InvalidParametersError: If quantity is not positive
        GroupOrderNotFoundError: If group order doesn't exist
        GroupOrderExpiredError: If the deadline has passed
        GroupOrderClosedError: If the order is no longer open
        ParticipantNotFoundError: If the vendor has no active entry
        ContentionError: If the row lock could not be taken in time
    """
    _ensure_quantity(quantity)
    now = now or timezone.now()

    try:
        with ledger.transaction() as tx:
            group_order = tx.read_group_order(group_order_id)
            _ensure_open(group_order, now)

            entry = tx.read_participant(group_order, vendor.id)
            if entry is None:
                raise ParticipantNotFoundError("You have not joined this group order")

            previous = entry.quantity
            entry.quantity = quantity
            tx.write_participant(entry, ['quantity'])
            group_order.current_quantity += quantity - previous
            tx.write_group_order(group_order, ['current_quantity'])

            logger.info(
                "group_order_participation_updated",
                group_order_id=str(group_order.id),
                vendor_id=str(vendor.id),
                previous_quantity=previous,
                quantity=quantity,
                current_quantity=group_order.current_quantity,
            )
            _fulfil_if_complete(tx, group_order, tx.active_participant_count(group_order), now)
    except GroupOrderExpiredError:
        _close_on_access(group_order_id, now)
        raise

    return entry


def leave_group_order(
    *,
    group_order_id: UUID,
    vendor: User,
    now: Optional[datetime] = None
) -> None:
    """
    Withdraw the vendor's entry from an open group order.

    Raises:
        GroupOrderNotFoundError: If group order doesn't exist
        GroupOrderExpiredError: If the deadline has passed
        GroupOrderClosedError: If the order is fulfilled or cancelled
        ParticipantNotFoundError: If the vendor has no active entry
        ContentionError: If the row lock could not be taken in time
    """
    now = now or timezone.now()

    try:
        with ledger.transaction() as tx:
            group_order = tx.read_group_order(group_order_id)
            _ensure_open(group_order, now)

            entry = tx.read_participant(group_order, vendor.id)
            if entry is None:
                raise ParticipantNotFoundError("You have not joined this group order")

            entry.withdrawn = True
            entry.withdrawn_at = now
            tx.write_participant(entry, ['withdrawn', 'withdrawn_at'])
            group_order.current_quantity -= entry.quantity
            tx.write_group_order(group_order, ['current_quantity'])

            logger.info(
                "group_order_left",
                group_order_id=str(group_order.id),
                vendor_id=str(vendor.id),
                quantity=entry.quantity,
                current_quantity=group_order.current_quantity,
            )
    except GroupOrderExpiredError:
        _close_on_access(group_order_id, now)
        raise


def cancel_group_order(
    *,
    group_order_id: UUID,
    supplier: User,
    now: Optional[datetime] = None
) -> GroupOrder:
    """
    Cancel an open group order and withdraw all of its participants.

    Once the deadline has passed the order is closed the way the sweep would
    close it, and cancelling is refused.

    Raises:
        GroupOrderNotFoundError: If group order doesn't exist
        UnauthorizedError: If the user is not the owning supplier
        GroupOrderExpiredError: If the deadline has passed
        GroupOrderClosedError: If the order is fulfilled or cancelled
        ContentionError: If the row lock could not be taken in time
    """
    now = now or timezone.now()

    try:
        with ledger.transaction() as tx:
            group_order = tx.read_group_order(group_order_id)
            if group_order.supplier_id != supplier.id:
                raise UnauthorizedError("Only the supplier who opened this group order can cancel it")
            _ensure_open(group_order, now)

            withdrawn = tx.withdraw_all(group_order, now)
            group_order.state = GroupOrderState.CANCELLED
            group_order.current_quantity = 0
            group_order.closed_at = now
            tx.write_group_order(group_order, ['state', 'current_quantity', 'closed_at'])
    except GroupOrderExpiredError:
        _close_on_access(group_order_id, now)
        raise

    logger.info(
        "group_order_cancelled",
        group_order_id=str(group_order.id),
        supplier_id=str(supplier.id),
        withdrawn=withdrawn,
    )
    return group_order


def get_group_order(*, group_order_id: UUID, now: Optional[datetime] = None) -> GroupOrder:
    """
    Get a group order, closing it first if its deadline has passed.

    Raises:
        GroupOrderNotFoundError: If group order doesn't exist
    """
    now = now or timezone.now()
    try:
        group_order = GroupOrder.objects.select_related('product', 'supplier').get(id=group_order_id)
    except (GroupOrder.DoesNotExist, ValidationError):
        raise GroupOrderNotFoundError(f"Group order with ID {group_order_id} not found")

    if group_order.is_open and group_order.has_expired(now):
        _close_on_access(group_order_id, now)
        group_order.refresh_from_db()
    return group_order


def list_group_orders(
    *,
    state: Optional[str] = None,
    product_id: Optional[UUID] = None,
    supplier_id: Optional[UUID] = None,
    now: Optional[datetime] = None
) -> QuerySet[GroupOrder]:
    """
    Group orders, soonest deadline first, optionally filtered.

    Listing never closes anything. A past-deadline order keeps its stored
    ``open`` state until it is accessed or swept, but the ``open`` filter
    leaves it out since it no longer accepts participants.
    """
    now = now or timezone.now()
    queryset = (
        GroupOrder.objects
        .select_related('product', 'supplier')
        .prefetch_related('discount_tiers')
    )
    if state:
        queryset = queryset.filter(state=state)
        if state == GroupOrderState.OPEN:
            queryset = queryset.filter(expires_at__gt=now)
    if product_id:
        queryset = queryset.filter(product_id=product_id)
    if supplier_id:
        queryset = queryset.filter(supplier_id=supplier_id)
    return queryset.order_by('expires_at')


def list_participants(
    *,
    group_order_id: UUID,
    include_withdrawn: bool = False
) -> QuerySet[ParticipantEntry]:
    """
    Raises:
        GroupOrderNotFoundError: If group order doesn't exist
    """
    try:
        exists = GroupOrder.objects.filter(id=group_order_id).exists()
    except ValidationError:
        exists = False
    if not exists:
        raise GroupOrderNotFoundError(f"Group order with ID {group_order_id} not found")

    queryset = ParticipantEntry.objects.filter(group_order_id=group_order_id).select_related('vendor')
    if not include_withdrawn:
        queryset = queryset.filter(withdrawn=False)
    return queryset.order_by('joined_at')


def get_settlement(*, group_order_id: UUID) -> QuerySet[ParticipantSettlement]:
    """
    Per-participant prices of a group order.

    Empty until the order is fulfilled.

    Raises:
        GroupOrderNotFoundError: If group order doesn't exist
    """
    group_order = get_group_order(group_order_id=group_order_id)
    return (
        ParticipantSettlement.objects
        .filter(group_order=group_order)
        .select_related('vendor')
        .order_by('entry__joined_at')
    )
