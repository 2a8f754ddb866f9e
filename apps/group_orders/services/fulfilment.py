"""
Fulfilment of a group order.

Runs inside the caller's ledger transaction, so the state change, the
settlement rows and the generated orders commit or roll back together.
"""

from datetime import datetime

import structlog

from apps.catalog.services import get_base_price
from apps.group_orders.models import GroupOrder, GroupOrderState, ParticipantSettlement
from apps.orders.services import create_group_settlement_order

from .ledger import LedgerTransaction
from .settlement import Settlement, TierSpec, EntrySpec, calculate_settlement

logger = structlog.get_logger(__name__)


def tier_specs(group_order: GroupOrder):
    return [
        TierSpec(threshold=tier.threshold, discount_percentage=tier.discount_percentage)
        for tier in group_order.discount_tiers.order_by('threshold')
    ]


def fulfil_group_order(tx: LedgerTransaction, group_order: GroupOrder, *, now: datetime) -> Settlement:
    """
    Settle every active participant and mark the group order fulfilled.

    The group order must be locked by ``tx`` and still open.
    """
    entries = tx.active_participants(group_order)
    settlement = calculate_settlement(
        committed_quantity=group_order.current_quantity,
        tiers=tier_specs(group_order),
        entries=[
            EntrySpec(entry_id=entry.id, vendor_id=entry.vendor_id, quantity=entry.quantity)
            for entry in entries
        ],
        base_price=get_base_price(product_id=group_order.product_id),
    )

    group_order.state = GroupOrderState.FULFILLED
    group_order.base_price = settlement.base_price
    group_order.applied_discount_percentage = settlement.discount_percentage
    group_order.final_unit_price = settlement.unit_price
    group_order.closed_at = now
    tx.write_group_order(
        group_order,
        ['state', 'base_price', 'applied_discount_percentage', 'final_unit_price', 'closed_at'],
    )

    product = group_order.product
    entries_by_id = {entry.id: entry for entry in entries}
    for line in settlement.lines:
        entry = entries_by_id[line.entry_id]
        ParticipantSettlement.objects.create(
            group_order=group_order,
            entry=entry,
            vendor_id=line.vendor_id,
            quantity=line.quantity,
            unit_price=line.unit_price,
            discount_percentage=settlement.discount_percentage,
            total_price=line.total_price,
        )
        create_group_settlement_order(
            group_order_id=group_order.id,
            vendor=entry.vendor,
            supplier_id=group_order.supplier_id,
            product=product,
            quantity=line.quantity,
            unit_price=line.unit_price,
            total_price=line.total_price,
        )

    logger.info(
        "group_order_fulfilled",
        group_order_id=str(group_order.id),
        committed_quantity=group_order.current_quantity,
        participants=len(settlement.lines),
        discount_percentage=str(settlement.discount_percentage),
        unit_price=str(settlement.unit_price),
    )
    return settlement
