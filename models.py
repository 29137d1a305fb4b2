"""Transaction and draft models shared by the store, form and dashboard."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

CATEGORIES = ("Food", "Utilities", "Entertainment", "Salary", "Others")
TRANSACTION_TYPES = ("income", "expense")

# Breakdown segments take colours by position, cycling.
CHART_COLORS = ("#8884d8", "#82ca9d", "#ffc658", "#ff7f50", "#a4de6c")

TransactionType = Literal["income", "expense"]
Category = Literal["Food", "Utilities", "Entertainment", "Salary", "Others"]


class Transaction(BaseModel):
    """A recorded income or expense. Amount stays as the entered text."""

    model_config = ConfigDict(frozen=True)

    id: int
    type: TransactionType
    amount: str = Field(..., description="Amount as entered, e.g. '49.90'")
    category: Category
    description: str = ""
    date: str = Field(..., description="ISO calendar date, e.g. '2024-01-31'")

    def is_expense(self) -> bool:
        return self.type == "expense"

    def is_income(self) -> bool:
        return self.type == "income"

    @property
    def label(self) -> str:
        """Row title on the transaction list: description, else category."""
        return self.description or self.category


class TransactionDraft(BaseModel):
    """In-progress form input. Every field may be empty while editing."""

    type: str = "income"
    amount: str = ""
    category: str = ""
    description: str = ""
    date: str = ""
