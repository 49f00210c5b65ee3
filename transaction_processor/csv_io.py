"""
CSV Input/Output

Reads transaction events from CSV (columns: type, client, tx, amount) and
writes account summaries (columns: client, locked, available, held, total).
Header names and values may be padded with whitespace. Any malformed record
fails the whole run.
"""

import csv
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, TextIO, Union

from pydantic import BaseModel, ValidationError, field_validator, model_validator

from .aggregator import aggregate
from .amount import Amount
from .config import get_config
from .exceptions import RecordParseError
from .ledger import LedgerEngine
from .logging_config import get_logger
from .models import (
    EVENT_CLASSES, AccountSummary, ClientId, Event, EventType, TransactionId,
    parse_client_id, parse_transaction_id
)

REQUIRED_COLUMNS = ("type", "client", "tx")

logger = get_logger("transaction_processor.csv_io")


class EventRecord(BaseModel):
    """One validated input row"""
    type: EventType
    client: ClientId
    tx: TransactionId
    amount: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def strip_type(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("client", mode="before")
    @classmethod
    def validate_client(cls, value):
        return parse_client_id(value)

    @field_validator("tx", mode="before")
    @classmethod
    def validate_tx(cls, value):
        return parse_transaction_id(value)

    @field_validator("amount", mode="before")
    @classmethod
    def strip_amount(cls, value):
        if value is None:
            return None
        value = value.strip()
        return value or None

    @model_validator(mode="after")
    def check_amount(self) -> 'EventRecord':
        # Amounts on dispute/resolve/chargeback rows are ignored
        if self.type.carries_amount:
            if self.amount is None:
                raise ValueError(f"{self.type.value} requires an amount")
            Amount.parse(self.amount)
        return self

    def to_event(self) -> Event:
        event_class = EVENT_CLASSES[self.type]
        if self.type.carries_amount:
            return event_class(client=self.client, tx=self.tx, amount=Amount.parse(self.amount))
        return event_class(client=self.client, tx=self.tx)


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


def read_events(stream: TextIO) -> Iterator[Event]:
    """
    Lazily parse events from a CSV stream

    Args:
        stream: Text stream positioned at the header row

    Yields:
        Events in file order

    Raises:
        RecordParseError: On a missing header or any malformed record
    """
    reader = csv.reader(stream)
    try:
        header = next(reader)
    except StopIteration:
        raise RecordParseError("missing header row") from None

    if header:
        header[0] = header[0].lstrip("\ufeff")
    columns = [name.strip() for name in header]
    missing = [name for name in REQUIRED_COLUMNS if name not in columns]
    if missing:
        raise RecordParseError(f"missing column(s): {', '.join(missing)}", line=reader.line_num)

    for row in reader:
        if not row:
            continue
        if len(row) > len(columns):
            raise RecordParseError(
                f"expected at most {len(columns)} fields, found {len(row)}", line=reader.line_num
            )

        record = dict(zip(columns, row))
        try:
            event = EventRecord.model_validate(record).to_event()
        except ValidationError as exc:
            raise RecordParseError(_describe(exc), line=reader.line_num) from exc

        yield event


def summaries_from_csv(stream: TextIO, engine: Optional[LedgerEngine] = None) -> List[AccountSummary]:
    """Compute account summaries from a CSV stream"""
    return aggregate(read_events(stream), engine)


def summaries_from_path(path: Union[str, Path], encoding: Optional[str] = None,
                        engine: Optional[LedgerEngine] = None) -> List[AccountSummary]:
    """
    Compute account summaries from a CSV file

    Raises:
        OSError: If the file cannot be opened or read
        RecordParseError: If any record is malformed
    """
    if encoding is None:
        encoding = get_config().csv_encoding

    logger.debug(f"Reading transactions from {path}")
    with open(path, newline="", encoding=encoding) as stream:
        return summaries_from_csv(stream, engine)


def write_summaries(summaries: Iterable[AccountSummary], stream: TextIO) -> None:
    """Write summaries as CSV, header first"""
    writer = csv.DictWriter(stream, fieldnames=AccountSummary.FIELDS, lineterminator="\n")
    writer.writeheader()
    for summary in summaries:
        writer.writerow(summary.as_row())
