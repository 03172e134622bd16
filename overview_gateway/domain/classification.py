"""Account and transaction classification rules"""

from dataclasses import dataclass
from typing import Dict

from overview_gateway.domain.models import AccountType, CategoryType, Transaction


@dataclass(frozen=True)
class AccountClassification:
    is_asset: bool
    is_liability: bool
    counts_as_cash: bool  # only when the raw balance is > 0
    counts_as_debt: bool


ACCOUNT_CLASSIFICATION: Dict[AccountType, AccountClassification] = {
    AccountType.BANK: AccountClassification(True, False, True, False),
    AccountType.INVESTMENT: AccountClassification(True, False, False, False),
    AccountType.CREDIT_CARD: AccountClassification(False, True, False, True),
    AccountType.LOAN: AccountClassification(False, True, False, True),
    AccountType.MORTGAGE: AccountClassification(False, True, False, False),
    AccountType.OTHER: AccountClassification(False, False, False, False),
}

_unclassified = set(AccountType) - set(ACCOUNT_CLASSIFICATION)
if _unclassified:
    raise RuntimeError(f"Account types missing a classification: {sorted(t.value for t in _unclassified)}")


def classify_account(account_type: AccountType) -> AccountClassification:
    return ACCOUNT_CLASSIFICATION[account_type]


# Imported bank transactions are visible before anyone categorizes them:
# without a category, a positive amount is revenue and a negative one expense.
UNCATEGORIZED_SIGN_FALLBACK = True


def is_revenue(txn: Transaction) -> bool:
    if txn.category_type is not None:
        return txn.category_type == CategoryType.INCOME
    return UNCATEGORIZED_SIGN_FALLBACK and txn.amount > 0


def is_expense(txn: Transaction) -> bool:
    if txn.category_type is not None:
        return txn.category_type == CategoryType.EXPENSE
    return UNCATEGORIZED_SIGN_FALLBACK and txn.amount < 0
