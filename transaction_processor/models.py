"""
Data Model

Identifiers, the five event kinds consumed by the ledger engine, recorded
transaction history entries and the per-client account summary.
"""

from dataclasses import dataclass, field
from typing import Dict, Union
from enum import Enum

from .amount import Amount

# Identifiers are plain ints validated against their fixed widths
ClientId = int
TransactionId = int

CLIENT_ID_MAX = 2 ** 16 - 1
TRANSACTION_ID_MAX = 2 ** 32 - 1


def _parse_unsigned(value: str, maximum: int, label: str) -> int:
    text = value.strip() if isinstance(value, str) else ''
    if not text or not (text.isascii() and text.isdigit()):
        raise ValueError(f"invalid {label}: {value!r}")
    number = int(text)
    if number > maximum:
        raise ValueError(f"{label} {number} out of range (max {maximum})")
    return number


def parse_client_id(value: str) -> ClientId:
    """Parse an unsigned 16-bit client id"""
    return _parse_unsigned(value, CLIENT_ID_MAX, "client id")


def parse_transaction_id(value: str) -> TransactionId:
    """Parse an unsigned 32-bit transaction id"""
    return _parse_unsigned(value, TRANSACTION_ID_MAX, "transaction id")


class EventType(Enum):
    """Event kinds, valued by their literal in the input file"""
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def carries_amount(self) -> bool:
        return self in (EventType.DEPOSIT, EventType.WITHDRAWAL)


@dataclass(frozen=True)
class Deposit:
    client: ClientId
    tx: TransactionId
    amount: Amount
    event_type: EventType = field(default=EventType.DEPOSIT, init=False, repr=False)


@dataclass(frozen=True)
class Withdrawal:
    client: ClientId
    tx: TransactionId
    amount: Amount
    event_type: EventType = field(default=EventType.WITHDRAWAL, init=False, repr=False)


@dataclass(frozen=True)
class Dispute:
    client: ClientId
    tx: TransactionId
    event_type: EventType = field(default=EventType.DISPUTE, init=False, repr=False)


@dataclass(frozen=True)
class Resolve:
    client: ClientId
    tx: TransactionId
    event_type: EventType = field(default=EventType.RESOLVE, init=False, repr=False)


@dataclass(frozen=True)
class Chargeback:
    client: ClientId
    tx: TransactionId
    event_type: EventType = field(default=EventType.CHARGEBACK, init=False, repr=False)


Event = Union[Deposit, Withdrawal, Dispute, Resolve, Chargeback]

EVENT_CLASSES: Dict[EventType, type] = {
    EventType.DEPOSIT: Deposit,
    EventType.WITHDRAWAL: Withdrawal,
    EventType.DISPUTE: Dispute,
    EventType.RESOLVE: Resolve,
    EventType.CHARGEBACK: Chargeback,
}


class TransactionKind(Enum):
    """Kinds of transaction kept in an account's history"""
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


@dataclass(frozen=True)
class RecordedTransaction:
    """A successful deposit or withdrawal that may still be disputed"""
    kind: TransactionKind
    amount: Amount

    @property
    def is_deposit(self) -> bool:
        return self.kind == TransactionKind.DEPOSIT


@dataclass(frozen=True)
class AccountSummary:
    """Final, read-only view of one client account"""
    client: ClientId
    locked: bool
    available: Amount
    held: Amount
    total: Amount

    FIELDS = ("client", "locked", "available", "held", "total")

    def as_row(self) -> Dict[str, str]:
        """Render as a CSV row"""
        return {
            "client": str(self.client),
            "locked": "true" if self.locked else "false",
            "available": self.available.to_string(),
            "held": self.held.to_string(),
            "total": self.total.to_string(),
        }
