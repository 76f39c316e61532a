import re
from typing import Optional, Tuple

from dirham.common.models import BankVariant, RawTransactionToken, StatementPeriod
from ..base import BaseStatementParser
from ..normalize import AMOUNT_PATTERN


class CIHParser(BaseStatementParser):
    """
    Parser for CIH Bank statements (slash-dated layout).

    Each movement starts with two ``DD/MM`` tokens: the operation date and the
    value date. Both keep their own day and month; the year is always the
    statement period's year, so a value date may differ from its operation date
    but never lands in another year.

    Sample line:
        07/05 08/05 PAIEMENT CARTE MARJANE 450,00
    """
    variant = BankVariant.CIH
    bank_name = 'CIH Bank'

    line_pattern = re.compile(
        r'^(?P<operation>\d{2}/\d{2})\s+'
        r'(?P<value>\d{2}/\d{2})\s+'
        r'(?P<rest>.+?)\s+'
        rf'(?P<amount>{AMOUNT_PATTERN})\s*$'
    )

    def tokenize(self, line: str) -> Optional[RawTransactionToken]:
        m = self.line_pattern.match(line)
        if not m:
            return None
        return RawTransactionToken(
            day_components=(m.group('operation'), m.group('value')),
            description=m.group('rest'),
            amount_text=m.group('amount'),
        )

    def resolve_dates(self, token: RawTransactionToken, period: StatementPeriod) -> Tuple[str, str]:
        operation, value = token.day_components
        op_day, op_month = operation.split('/')
        val_day, val_month = value.split('/')
        return (
            self.build_date(op_day, op_month, period.year),
            self.build_date(val_day, val_month, period.year),
        )
