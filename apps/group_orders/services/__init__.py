"""
Group orders app services layer.

Public entry points for the group order engine: lifecycle operations,
settlement calculation and expiry handling.
"""

from .exceptions import (
    GroupOrdersServiceError,
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

from .ledger import GroupOrderLedger, LedgerTransaction, ledger

from .settlement import (
    TierSpec,
    EntrySpec,
    SettlementLine,
    Settlement,
    select_discount,
    calculate_settlement,
)

from .registry import (
    create_group_order,
    join_group_order,
    update_participation,
    leave_group_order,
    cancel_group_order,
    get_group_order,
    list_group_orders,
    list_participants,
    get_settlement,
)

from .expiry import (
    SweepResult,
    close_expired_group_order,
    find_expired_group_orders,
    sweep_expired_group_orders,
)


__all__ = [
    # Exceptions
    'GroupOrdersServiceError',
    'InvalidParametersError',
    'GroupOrderNotFoundError',
    'ParticipantNotFoundError',
    'GroupOrderClosedError',
    'GroupOrderExpiredError',
    'CapacityExceededError',
    'AlreadyParticipatingError',
    'UnauthorizedError',
    'ContentionError',

    # Ledger
    'GroupOrderLedger',
    'LedgerTransaction',
    'ledger',

    # Settlement
    'TierSpec',
    'EntrySpec',
    'SettlementLine',
    'Settlement',
    'select_discount',
    'calculate_settlement',

    # Lifecycle
    'create_group_order',
    'join_group_order',
    'update_participation',
    'leave_group_order',
    'cancel_group_order',
    'get_group_order',
    'list_group_orders',
    'list_participants',
    'get_settlement',

    # Expiry
    'SweepResult',
    'close_expired_group_order',
    'find_expired_group_orders',
    'sweep_expired_group_orders',
]
