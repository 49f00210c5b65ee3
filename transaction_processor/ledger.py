"""
Ledger Engine

Per-client account state machine. Events are applied one at a time, in arrival
order. Business-rule rejections (duplicate ids, insufficient funds, unknown or
undisputed transactions, locked accounts) leave the account untouched and are
reported as an EventOutcome rather than raised.

Dispute semantics:
    Deposit disputed    -> amount moves from available to held
    Withdrawal disputed -> amount is added to held (it already left available)
    Resolve             -> held released; deposit funds return to available
    Chargeback          -> held released; withdrawal funds return to available,
                           deposit funds are forfeited; account is locked
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Set
from enum import Enum

from .amount import Amount
from .exceptions import LedgerConsistencyError
from .logging_config import get_logger, log_action
from .models import (
    AccountSummary, Chargeback, ClientId, Deposit, Dispute, Event,
    RecordedTransaction, Resolve, TransactionId, TransactionKind, Withdrawal
)


class EventOutcome(Enum):
    """Result of applying one event"""
    APPLIED = "applied"
    ACCOUNT_LOCKED = "account_locked"
    DUPLICATE_TRANSACTION = "duplicate_transaction"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    UNKNOWN_TRANSACTION = "unknown_transaction"
    ALREADY_DISPUTED = "already_disputed"
    NOT_DISPUTED = "not_disputed"


@dataclass
class AccountState:
    """
    Mutable state of a single client account

    `transactions` holds successful deposits and withdrawals that have not been
    resolved; `disputes` is always a subset of its keys.
    """
    available: Amount = field(default_factory=Amount.zero)
    held: Amount = field(default_factory=Amount.zero)
    locked: bool = False
    transactions: Dict[TransactionId, RecordedTransaction] = field(default_factory=dict)
    disputes: Set[TransactionId] = field(default_factory=set)

    @property
    def total(self) -> Amount:
        return self.available + self.held

    def summarize(self, client: ClientId) -> AccountSummary:
        return AccountSummary(
            client=client,
            locked=self.locked,
            available=self.available,
            held=self.held,
            total=self.total,
        )


class LedgerEngine:
    """
    Owns every client account and applies events to them

    Accounts are created on first reference and never removed.
    """

    def __init__(self):
        self._accounts: Dict[ClientId, AccountState] = {}
        self.stats: Counter = Counter()
        self.logger = get_logger("transaction_processor.ledger")

    @property
    def accounts(self) -> Mapping[ClientId, AccountState]:
        return self._accounts

    def get_or_create_account(self, client: ClientId) -> AccountState:
        account = self._accounts.get(client)
        if account is None:
            account = AccountState()
            self._accounts[client] = account
        return account

    def process(self, event: Event) -> EventOutcome:
        """
        Apply a single event

        Args:
            event: Deposit, Withdrawal, Dispute, Resolve or Chargeback

        Returns:
            EventOutcome describing whether the event changed the account

        Raises:
            LedgerConsistencyError: If held funds do not cover a resolution
            TypeError: If event is not one of the five event kinds
        """
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported event: {event!r}")

        account = self.get_or_create_account(event.client)
        if account.locked:
            outcome = EventOutcome.ACCOUNT_LOCKED
        else:
            outcome = handler(self, account, event)

        self.stats[outcome] += 1
        if outcome != EventOutcome.APPLIED:
            log_action(
                self.logger, "debug", f"Ignored {event.event_type.value}: {outcome.value}",
                action=event.event_type.value, resource=f"client:{event.client}",
                extra={"tx": event.tx, "outcome": outcome.value}
            )
        return outcome

    def summary(self) -> List[AccountSummary]:
        """Snapshot of every account, ordered by client id"""
        return [
            self._accounts[client].summarize(client)
            for client in sorted(self._accounts)
        ]

    def _deposit(self, account: AccountState, event: Deposit) -> EventOutcome:
        if event.tx in account.transactions:
            return EventOutcome.DUPLICATE_TRANSACTION

        account.transactions[event.tx] = RecordedTransaction(TransactionKind.DEPOSIT, event.amount)
        account.available = account.available + event.amount
        return EventOutcome.APPLIED

    def _withdraw(self, account: AccountState, event: Withdrawal) -> EventOutcome:
        if event.tx in account.transactions:
            return EventOutcome.DUPLICATE_TRANSACTION

        remaining = account.available.checked_sub(event.amount)
        if remaining is None:
            return EventOutcome.INSUFFICIENT_FUNDS

        account.available = remaining
        account.transactions[event.tx] = RecordedTransaction(TransactionKind.WITHDRAWAL, event.amount)
        return EventOutcome.APPLIED

    def _dispute(self, account: AccountState, event: Dispute) -> EventOutcome:
        if event.tx in account.disputes:
            return EventOutcome.ALREADY_DISPUTED

        recorded = account.transactions.get(event.tx)
        if recorded is None:
            return EventOutcome.UNKNOWN_TRANSACTION

        if recorded.is_deposit:
            # Funds may already have been withdrawn
            remaining = account.available.checked_sub(recorded.amount)
            if remaining is None:
                return EventOutcome.INSUFFICIENT_FUNDS
            account.available = remaining

        account.held = account.held + recorded.amount
        account.disputes.add(event.tx)
        return EventOutcome.APPLIED

    def _resolve(self, account: AccountState, event: Resolve) -> EventOutcome:
        if event.tx not in account.disputes:
            return EventOutcome.NOT_DISPUTED

        recorded = self._disputed_transaction(account, event)
        account.held = self._release_held(account, event, recorded.amount)
        if recorded.is_deposit:
            account.available = account.available + recorded.amount

        del account.transactions[event.tx]
        account.disputes.discard(event.tx)
        return EventOutcome.APPLIED

    def _chargeback(self, account: AccountState, event: Chargeback) -> EventOutcome:
        if event.tx not in account.disputes:
            return EventOutcome.NOT_DISPUTED

        recorded = self._disputed_transaction(account, event)
        account.held = self._release_held(account, event, recorded.amount)
        if not recorded.is_deposit:
            account.available = account.available + recorded.amount

        account.disputes.discard(event.tx)
        account.locked = True

        log_action(
            self.logger, "info", f"Account {event.client} locked by chargeback",
            action="chargeback", resource=f"client:{event.client}",
            extra={"tx": event.tx, "kind": recorded.kind.value, "amount": recorded.amount.to_string()}
        )
        return EventOutcome.APPLIED

    def _disputed_transaction(self, account: AccountState, event: Event) -> RecordedTransaction:
        recorded = account.transactions.get(event.tx)
        if recorded is None:
            raise LedgerConsistencyError(
                event.client, event.tx, "disputed transaction missing from history"
            )
        return recorded

    def _release_held(self, account: AccountState, event: Event, amount: Amount) -> Amount:
        held = account.held.checked_sub(amount)
        if held is None:
            raise LedgerConsistencyError(
                event.client, event.tx,
                f"held {account.held.to_string()} does not cover {amount.to_string()}"
            )
        return held

    _handlers = {
        Deposit: _deposit,
        Withdrawal: _withdraw,
        Dispute: _dispute,
        Resolve: _resolve,
        Chargeback: _chargeback,
    }
