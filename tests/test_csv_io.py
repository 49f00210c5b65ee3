"""
Test suite for csv_io module

Tests CSV record validation, event parsing and summary rendering.
"""

import io

import pytest

from transaction_processor.amount import Amount
from transaction_processor.csv_io import (
    EventRecord, read_events, summaries_from_csv, summaries_from_path, write_summaries
)
from transaction_processor.exceptions import RecordParseError
from transaction_processor.models import (
    Chargeback, Deposit, Dispute, EventType, Resolve, Withdrawal
)


TRANSACTION_CSV = """type, client, tx, amount
deposit, 1,   1, 1.0
deposit, 2,2,2.0
deposit, 1, 3, 2
withdrawal, 1, 4, 1.5
withdrawal, 2, 5, 3.0
"""

TRANSACTION_DISPUTE_CSV = """type, client, tx, amount
deposit, 1, 1, 1.0
dispute, 1, 1,
chargeback, 1, 1,
deposit, 2, 2, 2.0
deposit, 1, 3, 2.0
withdrawal, 1, 4, 1.5
withdrawal, 2, 5, 3.0
chargeback, 2, 2,
dispute, 2, 2,
resolve, 2, 2,
dispute, 2, 2,
withdrawal, 2, 6, 2
"""


def render(summaries) -> str:
    output = io.StringIO()
    write_summaries(summaries, output)
    return output.getvalue()


class TestEventRecord:
    """Test validation of a single row"""

    def test_deposit_record(self):
        record = EventRecord.model_validate(
            {"type": " deposit ", "client": " 1", "tx": "7 ", "amount": " 1.25 "}
        )

        assert record.type == EventType.DEPOSIT
        assert record.to_event() == Deposit(1, 7, Amount.parse("1.25"))

    def test_all_event_kinds(self):
        rows = {
            "deposit": Deposit(1, 2, Amount.parse("1")),
            "withdrawal": Withdrawal(1, 2, Amount.parse("1")),
            "dispute": Dispute(1, 2),
            "resolve": Resolve(1, 2),
            "chargeback": Chargeback(1, 2),
        }
        for kind, expected in rows.items():
            record = EventRecord.model_validate({"type": kind, "client": "1", "tx": "2", "amount": "1"})
            assert record.to_event() == expected

    def test_amount_ignored_for_dispute(self):
        record = EventRecord.model_validate({"type": "dispute", "client": "1", "tx": "2", "amount": "junk"})
        assert record.to_event() == Dispute(1, 2)

    def test_identifier_bounds(self):
        record = EventRecord.model_validate(
            {"type": "dispute", "client": "65535", "tx": "4294967295"}
        )
        assert record.client == 65535
        assert record.tx == 4294967295

    @pytest.mark.parametrize("row", [
        {"type": "Deposit", "client": "1", "tx": "1", "amount": "1"},
        {"type": "transfer", "client": "1", "tx": "1", "amount": "1"},
        {"type": "deposit", "client": "65536", "tx": "1", "amount": "1"},
        {"type": "deposit", "client": "-1", "tx": "1", "amount": "1"},
        {"type": "deposit", "client": "1", "tx": "4294967296", "amount": "1"},
        {"type": "deposit", "client": "x", "tx": "1", "amount": "1"},
        {"type": "deposit", "client": "", "tx": "1", "amount": "1"},
        {"type": "deposit", "client": "1", "tx": "1", "amount": ""},
        {"type": "withdrawal", "client": "1", "tx": "1"},
        {"type": "deposit", "client": "1", "tx": "1", "amount": "1.1.1"},
        {"type": "deposit", "client": "1", "tx": "1", "amount": "-5"},
    ])
    def test_invalid_records(self, row):
        with pytest.raises(ValueError):
            EventRecord.model_validate(row)


class TestReadEvents:
    """Test streaming events from CSV"""

    def test_reads_padded_csv(self):
        events = list(read_events(io.StringIO(TRANSACTION_CSV)))

        assert events == [
            Deposit(1, 1, Amount.parse("1.0")),
            Deposit(2, 2, Amount.parse("2.0")),
            Deposit(1, 3, Amount.parse("2")),
            Withdrawal(1, 4, Amount.parse("1.5")),
            Withdrawal(2, 5, Amount.parse("3.0")),
        ]

    def test_amount_column_optional(self):
        """Test files without an amount column work for non-funding events"""
        events = list(read_events(io.StringIO("type,client,tx\ndispute,1,1\n")))
        assert events == [Dispute(1, 1)]

    def test_short_rows_and_blank_lines(self):
        csv_text = "type,client,tx,amount\ndeposit,1,1,1\n\nresolve,1,1\n"
        events = list(read_events(io.StringIO(csv_text)))
        assert events == [Deposit(1, 1, Amount.parse("1")), Resolve(1, 1)]

    def test_column_order_follows_header(self):
        events = list(read_events(io.StringIO("client,amount,tx,type\n4,0.5,9,deposit\n")))
        assert events == [Deposit(4, 9, Amount.parse("0.5"))]

    def test_empty_input(self):
        with pytest.raises(RecordParseError, match="missing header"):
            list(read_events(io.StringIO("")))

    def test_missing_column(self):
        with pytest.raises(RecordParseError, match="tx"):
            list(read_events(io.StringIO("type,client,amount\ndeposit,1,1\n")))

    def test_extra_fields(self):
        with pytest.raises(RecordParseError, match="at most 4 fields"):
            list(read_events(io.StringIO("type,client,tx,amount\ndeposit,1,1,1,9\n")))

    def test_error_reports_line(self):
        csv_text = "type,client,tx,amount\ndeposit,1,1,1\ndeposit,1,2,abc\n"
        with pytest.raises(RecordParseError) as exc_info:
            list(read_events(io.StringIO(csv_text)))

        assert exc_info.value.line == 3
        assert "line 3" in str(exc_info.value)

    def test_events_yielded_lazily(self):
        """Test valid rows before a bad row are produced first"""
        csv_text = "type,client,tx,amount\ndeposit,1,1,1\nbogus,1,2,1\n"
        events = read_events(io.StringIO(csv_text))

        assert next(events) == Deposit(1, 1, Amount.parse("1"))
        with pytest.raises(RecordParseError):
            next(events)


class TestSummaries:
    """Test end-to-end CSV processing"""

    def test_process_correctly(self):
        summaries = summaries_from_csv(io.StringIO(TRANSACTION_CSV))

        assert render(summaries) == (
            "client,locked,available,held,total\n"
            "1,false,1.5000,0.0000,1.5000\n"
            "2,false,2.0000,0.0000,2.0000\n"
        )

    def test_handle_dispute_correctly(self):
        summaries = summaries_from_csv(io.StringIO(TRANSACTION_DISPUTE_CSV))

        assert render(summaries) == (
            "client,locked,available,held,total\n"
            "1,true,0.0000,0.0000,0.0000\n"
            "2,false,0.0000,0.0000,0.0000\n"
        )

    def test_parse_failure_yields_no_summaries(self):
        with pytest.raises(RecordParseError):
            summaries_from_csv(io.StringIO(TRANSACTION_CSV + "deposit,70000,9,1\n"))

    def test_write_empty(self):
        assert render([]) == "client,locked,available,held,total\n"

    def test_from_path(self, tmp_path):
        csv_file = tmp_path / "transactions.csv"
        csv_file.write_text(TRANSACTION_CSV)

        summaries = summaries_from_path(csv_file)

        assert [s.client for s in summaries] == [1, 2]
        assert summaries[0].total == Amount.parse("1.5")

    def test_byte_order_mark_in_stream(self):
        """Test a leading BOM does not hide the first column"""
        summaries = summaries_from_csv(io.StringIO("\ufeff" + TRANSACTION_CSV))

        assert [s.client for s in summaries] == [1, 2]

    def test_byte_order_mark_in_file(self, tmp_path):
        csv_file = tmp_path / "transactions.csv"
        csv_file.write_bytes(b"\xef\xbb\xbf" + TRANSACTION_CSV.encode("utf-8"))

        summaries = summaries_from_path(csv_file)

        assert summaries[0].available == Amount.parse("1.5")

    def test_very_large_amount(self):
        """Test amounts beyond the int/str conversion limit are processed"""
        digits = "1" * 5000
        summaries = summaries_from_csv(
            io.StringIO(f"type,client,tx,amount\ndeposit,1,1,{digits}\n")
        )

        assert render(summaries).splitlines()[1] == f"1,false,{digits}.0000,0.0000,{digits}.0000"

    def test_from_missing_path(self, tmp_path):
        with pytest.raises(OSError):
            summaries_from_path(tmp_path / "missing.csv")
