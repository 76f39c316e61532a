"""
Keyword heuristics applied to cleaned transaction descriptions.

Statements in this family print a single amount column, so the direction of a
movement is inferred from its label. This is a heuristic: a debit whose label
happens to contain a credit keyword is misclassified.
"""
import re
import unicodedata

from dirham.common.models import Direction

# Order matters only for readability; any hit means CREDIT.
CREDIT_KEYWORDS = (
    "versement",
    "virement recu",
    "recu",
    "credit",
    "depot",
    "salaire",
    "pension",
    "allocation",
    "dividend",
    "interet",
    "remboursement",
    "refund",
    "cashback",
    "bonus",
)

# First match wins.
CATEGORY_PATTERNS = (
    ("atm", re.compile(r"retrait|gab|atm|withdrawal")),
    ("card", re.compile(r"carte|card|paiement|payment")),
    ("online", re.compile(r"internet|online|web|paypal")),
    ("transfer_out", re.compile(r"virement.*emis|transfer.*out|envoi")),
    ("transfer_in", re.compile(r"virement.*recu|versement|transfer.*in|recu")),
    ("fees", re.compile(r"frais|fee|commission|droit.*timbre")),
    ("recharge", re.compile(r"recharge|rechargement")),
)

DEFAULT_CATEGORY = "other"


def fold(text: str) -> str:
    """Lowercase and strip accents so "REÇU" and "recu" compare equal."""
    decomposed = unicodedata.normalize("NFKD", text or "")
    return "".join(c for c in decomposed if not unicodedata.combining(c)).lower()


def infer_direction(description: str) -> Direction:
    desc = fold(description)
    if any(keyword in desc for keyword in CREDIT_KEYWORDS):
        return Direction.CREDIT
    return Direction.DEBIT


def infer_category(description: str) -> str:
    desc = fold(description)
    for name, pattern in CATEGORY_PATTERNS:
        if pattern.search(desc):
            return name
    return DEFAULT_CATEGORY
