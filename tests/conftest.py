"""
Shared fixtures: representative statement text for both layouts and helpers
that turn text lines into positioned fragments.
"""
from decimal import Decimal

import pytest

from dirham.common.models import (
    AnchorKind,
    BankVariant,
    Direction,
    PositionedFragment,
    StatementParseResult,
    StatementPeriod,
    TransactionRecord,
)
from dirham.common.settings import ParserSettings
from dirham.parsing.config.registry import VariantRegistry

AWB_LINES = [
    "ATTIJARIWAFA BANK",
    "RELEVE DE COMPTE",
    "SOLDE DEPART AU 30 06 2024 5 000,00 CREDITEUR",
    "0016BK01 07 VIR.EMIS WEB VERS Smart Stooners 28 06 2024 1 200,00",
    "0012CB 10 PAIEMENT CARTE MARJANE 10 07 2024 450,00",
    "0540AV 15 VERSEMENT ESPECES 2 000,00",
    "0021FR 31 FRAIS TENUE DE COMPTE 25,00",
    "TOTAL MOUVEMENTS 1 675,00 2 000,00",
    "SOLDE FINAL AU 31 07 2024 5 325,00 CREDITEUR",
]

CIH_LINES = [
    "CIH BANK",
    "RELEVE DE COMPTE",
    "SOLDE DEPART AU : 30/04/2024 3 000,00 CREDITEUR",
    "07/05 08/05 PAIEMENT CARTE MARJANE 450,00",
    "12/05 12/05 VIREMENT RECU DE SOCIETE ABC 8 500,00",
    "20/05 21/05 RETRAIT GAB CASA 1 000,00",
    "31/05 31/05 COMMISSION TENUE COMPTE 15,00",
    "TOTAL DES MOUVEMENTS 1 465,00 8 500,00",
    "NOUVEAU SOLDE AU : 31/05/2024 10 035,00 CREDITEUR",
    "mediateur@cih.co.ma",
]


def lines_to_fragments(lines, top=800, step=12):
    """One fragment per word, every word of a line at the same height."""
    fragments = []
    for index, line in enumerate(lines):
        y = top - index * step
        fragments.extend(PositionedFragment(text=word, vertical_position=y) for word in line.split())
    return fragments


@pytest.fixture
def awb_lines():
    return list(AWB_LINES)


@pytest.fixture
def cih_lines():
    return list(CIH_LINES)


@pytest.fixture
def settings():
    return ParserSettings()


@pytest.fixture
def registry():
    """Registry loaded from the packaged layouts."""
    return VariantRegistry()


@pytest.fixture
def july_2024():
    return StatementPeriod(year=2024, month=7, day=31, anchor_kind=AnchorKind.CLOSING_BALANCE, source="AWB_CLOSING")


@pytest.fixture
def may_2024():
    return StatementPeriod(year=2024, month=5, day=31, anchor_kind=AnchorKind.CLOSING_BALANCE, source="CIH_CLOSING")


@pytest.fixture
def make_record():
    """Factory for TransactionRecords with a consistent sign/direction."""
    def _make(date="2024-07-07", description="PAIEMENT CARTE", amount="-100.00", category="other", statement_id=None):
        value = Decimal(amount)
        return TransactionRecord(
            operation_date=date,
            value_date=date,
            description=description,
            amount=value,
            direction=Direction.CREDIT if value > 0 else Direction.DEBIT,
            category=category,
            statement_id=statement_id,
        )
    return _make


@pytest.fixture
def make_result(july_2024):
    """Factory for StatementParseResults around a list of records."""
    def _make(records, filename="releve.pdf"):
        return StatementParseResult(
            records=list(records),
            variant=BankVariant.ATTIJARIWAFA,
            bank_name="Attijariwafa Bank",
            period=july_2024,
            filename=filename,
        )
    return _make


@pytest.fixture
def to_fragments():
    return lines_to_fragments
