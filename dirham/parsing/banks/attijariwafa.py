import re
from typing import Optional, Tuple

from dirham.common.models import BankVariant, RawTransactionToken, StatementPeriod
from ..base import BaseStatementParser
from ..normalize import AMOUNT_PATTERN


class AttijariwafaParser(BaseStatementParser):
    """
    Parser for Attijariwafa Bank statements (code-prefixed layout).

    Statement Characteristics:
    - Each movement starts with an operation code: ``0DDD`` followed by two
      letters/digits, sometimes with two more digits glued on (``0016BK01``).
    - The code is followed by a day token and, on some lines, a second
      two-digit token. Only the first is used, as the day.
    - A single trailing amount column, printed ``1 200,00``.

    Sample line:
        0016BK01 07 VIR.EMIS WEB VERS Smart Stooners   28 06 2024           1 200,00

    Forced Period:
    --------------
    Month and year always come from the resolved statement period, never from
    the line. The value date printed in the label (``28 06 2024`` above) is
    discarded together with any other embedded date.
    """
    variant = BankVariant.ATTIJARIWAFA
    bank_name = 'Attijariwafa Bank'

    line_pattern = re.compile(
        r'^(?P<code>0\d{3}[A-Z0-9]{2}(?:\d{2})?)\s+'
        r'(?P<day>\d{2})'
        r'(?:\s+(?P<seq>\d{2}))?'
        r'\s+(?P<rest>.+?)\s+'
        rf'(?P<amount>{AMOUNT_PATTERN})\s*$'
    )

    def tokenize(self, line: str) -> Optional[RawTransactionToken]:
        m = self.line_pattern.match(line)
        if not m:
            return None
        return RawTransactionToken(
            code=m.group('code'),
            day_components=(m.group('day'),),
            description=m.group('rest'),
            amount_text=m.group('amount'),
        )

    def resolve_dates(self, token: RawTransactionToken, period: StatementPeriod) -> Tuple[str, str]:
        date_iso = self.build_date(token.day_components[0], period.month, period.year)
        return date_iso, date_iso
