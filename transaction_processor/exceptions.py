"""
Exception Types

Failures that abort a processing run. Business-rule rejections (insufficient
funds, duplicate transaction ids, events on locked accounts) are NOT errors and
never raise; see ledger.EventOutcome.
"""

from typing import Optional


class TransactionProcessorError(Exception):
    """Base class for all transaction processor errors"""


class AmountFormatError(TransactionProcessorError, ValueError):
    """Raised when an amount string is not a valid fixed-point decimal"""

    def __init__(self, value: str, reason: str = "invalid decimal specification"):
        self.value = value
        self.reason = reason
        super().__init__(f"{reason}: {value!r}")


class RecordParseError(TransactionProcessorError):
    """Raised when an input record cannot be turned into an event"""

    def __init__(self, reason: str, line: Optional[int] = None):
        self.reason = reason
        self.line = line
        if line is None:
            message = reason
        else:
            message = f"line {line}: {reason}"
        super().__init__(message)


class LedgerConsistencyError(TransactionProcessorError):
    """
    Internal bookkeeping fault in the ledger engine.

    Indicates an engine bug, never bad input. Callers should let it propagate.
    """

    def __init__(self, client: int, tx: int, message: str):
        self.client = client
        self.tx = tx
        super().__init__(f"client {client}, tx {tx}: {message}")
