"""
Unit tests for AttijariwafaParser (code-prefixed layout).
"""
from decimal import Decimal

import pytest

from dirham.common.models import AnchorKind, Direction, StatementPeriod
from dirham.common.settings import ParserSettings
from dirham.parsing.banks.attijariwafa import AttijariwafaParser
from dirham.parsing.exceptions import AmountUnparseable, NoTransactionsParsed


@pytest.fixture
def parser():
    return AttijariwafaParser()


# =============================================================================
# TOKENIZER
# =============================================================================

class TestTokenize:
    def test_statement_line(self, parser):
        token = parser.tokenize("0016BK01 07 VIR.EMIS WEB VERS Smart Stooners   28 06 2024           1 200,00")

        assert token.code == "0016BK01"
        assert token.day_components == ("07",)
        assert token.amount_text == "1 200,00"
        assert token.description == "VIR.EMIS WEB VERS Smart Stooners   28 06 2024"

    def test_second_numeric_token_is_not_the_month(self, parser):
        token = parser.tokenize("0016BK01 07 01 VIR.EMIS WEB 1 200,00")

        assert token.day_components == ("07",)
        assert token.description == "VIR.EMIS WEB"

    def test_short_code(self, parser):
        token = parser.tokenize("0012CB 10 PAIEMENT CARTE MARJANE 10 07 2024 450,00")

        assert token.code == "0012CB"
        assert token.amount_text == "450,00"

    @pytest.mark.parametrize("line", [
        "RELEVE DE COMPTE",
        "1016BK01 07 VIREMENT 100,00",
        "0016BK01 07 VIREMENT",
        "07/05 08/05 PAIEMENT CARTE 450,00",
    ])
    def test_non_transaction_lines(self, parser, line):
        assert parser.tokenize(line) is None


# =============================================================================
# FULL DOCUMENT
# =============================================================================

class TestParse:
    def test_statement(self, parser, awb_lines, july_2024):
        records, failures = parser.parse(awb_lines, july_2024)

        assert failures == []
        assert [(r.operation_date, r.description, r.amount, r.direction, r.category) for r in records] == [
            ("2024-07-07", "VIR.EMIS WEB VERS Smart Stooners", Decimal("-1200.00"), Direction.DEBIT, "online"),
            ("2024-07-10", "PAIEMENT CARTE MARJANE", Decimal("-450.00"), Direction.DEBIT, "card"),
            ("2024-07-15", "VERSEMENT ESPECES", Decimal("2000.00"), Direction.CREDIT, "transfer_in"),
            ("2024-07-31", "FRAIS TENUE DE COMPTE", Decimal("-25.00"), Direction.DEBIT, "fees"),
        ]
        assert all(r.value_date == r.operation_date for r in records)
        assert records[0].code == "0016BK01"

    def test_month_and_year_forced_from_period(self, parser, july_2024):
        # The value date printed in the label (28 06 2024) never leaks into the record
        records, _ = parser.parse(
            ["0016BK01 07 VIR.EMIS WEB VERS Smart Stooners   28 06 2024           1 200,00"], july_2024
        )
        assert records[0].operation_date == "2024-07-07"

    def test_day_clamped_to_month_end(self, parser):
        june = StatementPeriod(year=2024, month=6, anchor_kind=AnchorKind.CLOSING_BALANCE)
        records, _ = parser.parse(["0021FR 31 FRAIS TENUE DE COMPTE 25,00"], june)
        assert records[0].operation_date == "2024-06-30"

    def test_bad_lines_recorded_and_skipped(self, parser, july_2024):
        lines = [
            "0016BK01 00 VIREMENT EMIS 100,00",
            "0016BK01 07 VIREMENT EMIS 20 000 000,00",
            "0016BK01 08 VIREMENT EMIS 0,00",
            "0012CB 10 PAIEMENT CARTE MARJANE 450,00",
        ]
        records, failures = parser.parse(lines, july_2024)

        assert len(records) == 1
        assert [(f.line_number, f.code) for f in failures] == [
            (1, "InvalidDateComponent"),
            (2, "AmountOutOfRange"),
            (3, "AmountOutOfRange"),
        ]

    def test_amount_limit_from_settings(self, july_2024):
        parser = AttijariwafaParser(ParserSettings(max_amount=1000))
        records, failures = parser.parse(
            ["0016BK01 07 VIREMENT EMIS 1 200,00", "0012CB 10 PAIEMENT CARTE 450,00"], july_2024
        )
        assert len(records) == 1
        assert failures[0].code == "AmountOutOfRange"

    def test_balance_and_total_lines_ignored(self, parser, july_2024):
        lines = ["0016BK01 07 SOLDE REPORTE 100,00", "0012CB 10 PAIEMENT CARTE 450,00"]
        records, _ = parser.parse(lines, july_2024)
        assert [r.description for r in records] == ["PAIEMENT CARTE"]

    def test_merchant_named_total_is_kept(self, parser, july_2024):
        lines = [
            "0012CB 10 PAIEMENT CARTE Total Maroc 450,00",
            "TOTAL MOUVEMENTS 450,00",
        ]
        records, failures = parser.parse(lines, july_2024)
        assert [r.description for r in records] == ["PAIEMENT CARTE Total Maroc"]
        assert failures == []

    def test_no_transactions(self, parser, july_2024):
        with pytest.raises(NoTransactionsParsed):
            parser.parse(["ATTIJARIWAFA BANK", "SOLDE FINAL AU 31 07 2024"], july_2024, filename="empty.pdf")

    def test_unparseable_amount(self, parser):
        with pytest.raises(AmountUnparseable):
            parser.parse_magnitude("1200.00")
