# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from enum import Enum
from typing import FrozenSet, Optional


def _lookup_case_insensitive(enum_cls, value) -> Optional[Enum]:
    """Resolve stored spellings such as "paid" or "PAID" to the canonical member."""
    if isinstance(value, str):
        needle = value.strip().lower()
        for member in enum_cls:
            if member.value.lower() == needle or member.name.lower() == needle:
                return member
    return None


class TenancyStatusEnum(str, Enum):
    """
    Status of a tenancy.

    Options:
        ACTIVE: Lease in force (including leases past their end date that the
                expiry job has not yet closed)
        ENDED: Lease terminated, naturally or early. Terminal.
    """

    ACTIVE = "Active"
    ENDED = "Ended"

    @classmethod
    def _missing_(cls, value):
        return _lookup_case_insensitive(cls, value)


class PaymentFrequencyEnum(str, Enum):
    """
    Billing frequency of a tenancy.

    Options:
        MONTHLY: One charge per calendar month (partial months prorated)
        QUARTERLY: One charge every three months from the start month
        ANNUALLY: One charge every twelve months from the start month
    """

    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    ANNUALLY = "Annually"

    @classmethod
    def _missing_(cls, value):
        return _lookup_case_insensitive(cls, value)

    @property
    def months(self) -> int:
        """Number of calendar months covered by one charge."""
        return {
            PaymentFrequencyEnum.MONTHLY: 1,
            PaymentFrequencyEnum.QUARTERLY: 3,
            PaymentFrequencyEnum.ANNUALLY: 12,
        }[self]


class TransactionStatusEnum(str, Enum):
    """
    Settlement status of a revenue transaction.

    Statuses only move forward:

    - PENDING -> OVERDUE, PARTIAL, PAID, WAIVED
    - OVERDUE -> PARTIAL, PAID, WAIVED
    - PARTIAL -> PAID, WAIVED
    - PAID, WAIVED: terminal

    Note: OVERDUE is a stored label maintained by the application. Arrears are
    derived from due dates, not from this label.
    """

    PENDING = "Pending"
    OVERDUE = "Overdue"
    PARTIAL = "Partial"
    PAID = "Paid"
    WAIVED = "Waived"

    @classmethod
    def _missing_(cls, value):
        return _lookup_case_insensitive(cls, value)

    @property
    def is_settled(self) -> bool:
        """True when nothing further is owed on the transaction."""
        return self in SETTLED_STATUSES

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_STATUS_TRANSITIONS[self]


class TransactionTypeEnum(str, Enum):
    """
    Kind of revenue transaction.

    Attributes:
        RENT: Periodic rent charge
        SERVICE_CHARGE: Periodic service charge billed alongside rent
        DEPOSIT: Security deposit due at tenancy start
        OTHER_INCOME: Ad hoc income recorded against the tenancy
    """

    RENT = "Rent"
    SERVICE_CHARGE = "Service Charge"
    DEPOSIT = "Deposit"
    OTHER_INCOME = "Other Income"

    @classmethod
    def _missing_(cls, value):
        return _lookup_case_insensitive(cls, value)


class ArrearsSeverityEnum(str, Enum):
    """
    Severity label for an arrears position, by days overdue.

    Options:
        OVERDUE: Within the first month past due
        URGENT: Past the critical threshold (default 30 days)
        CRITICAL: Past the severe threshold (default 60 days)
    """

    OVERDUE = "Overdue"
    URGENT = "Urgent"
    CRITICAL = "Critical"


class ValidationErrorCode(str, Enum):
    """Machine-readable codes for rejected termination requests."""

    BEFORE_START = "before_start"
    AFTER_END = "after_end"
    IN_FUTURE = "in_future"
    NOT_ACTIVE = "not_active"


SETTLED_STATUSES: FrozenSet[TransactionStatusEnum] = frozenset(
    {TransactionStatusEnum.PAID, TransactionStatusEnum.WAIVED}
)

ALLOWED_STATUS_TRANSITIONS = {
    TransactionStatusEnum.PENDING: frozenset(
        {
            TransactionStatusEnum.OVERDUE,
            TransactionStatusEnum.PARTIAL,
            TransactionStatusEnum.PAID,
            TransactionStatusEnum.WAIVED,
        }
    ),
    TransactionStatusEnum.OVERDUE: frozenset(
        {
            TransactionStatusEnum.PARTIAL,
            TransactionStatusEnum.PAID,
            TransactionStatusEnum.WAIVED,
        }
    ),
    TransactionStatusEnum.PARTIAL: frozenset(
        {TransactionStatusEnum.PAID, TransactionStatusEnum.WAIVED}
    ),
    TransactionStatusEnum.PAID: frozenset(),
    TransactionStatusEnum.WAIVED: frozenset(),
}


def enum_to_string(value) -> str:
    """
    Convert enum values to their string representation for pandas storage.

    Examples:
        >>> enum_to_string(TransactionStatusEnum.PAID)
        'Paid'
        >>> enum_to_string("already_string")
        'already_string'
    """
    if isinstance(value, Enum):
        return value.value
    return str(value)
