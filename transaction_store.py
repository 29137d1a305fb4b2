"""
transaction_store.py
--------------------
Owns the canonical, insertion-ordered list of transactions and keeps the
persisted blob in step with it: loaded once on construction, rewritten in
full after every add or remove.
"""

import json
import math
import time
from collections.abc import Mapping
from datetime import date
from typing import Callable, Iterable, Optional

from pydantic import TypeAdapter, ValidationError

from errors import StorageReadError, StorageWriteError, TransactionValidationError
from logger import get_logger
from models import CATEGORIES, TRANSACTION_TYPES, Transaction, TransactionDraft

logger = get_logger(__name__)

DEFAULT_STORAGE_KEY = "transactions"

_transaction_list = TypeAdapter(list[Transaction])


def _as_draft(draft) -> TransactionDraft:
    if isinstance(draft, TransactionDraft):
        return draft
    if isinstance(draft, Mapping):
        values = {k: "" if v is None else str(v) for k, v in draft.items()}
        return TransactionDraft(**values)
    raise TypeError(f"Expected a TransactionDraft or mapping, got {type(draft).__name__}")


def validate_draft(draft: TransactionDraft) -> dict:
    """
    Check a draft before it becomes a Transaction.

    Required fields are checked first so a blank form always reports the
    first empty field, then amount/category/date formats.

    Returns:
        The cleaned field values, without an id.

    Raises:
        TransactionValidationError: naming the first offending field.
    """
    amount = draft.amount.strip()
    category = draft.category.strip()
    date_text = draft.date.strip()

    for field, value in (("amount", amount), ("category", category), ("date", date_text)):
        if not value:
            raise TransactionValidationError(field, "is required")

    if draft.type not in TRANSACTION_TYPES:
        raise TransactionValidationError("type", f"must be one of {', '.join(TRANSACTION_TYPES)}")

    try:
        parsed = float(amount)
    except ValueError:
        raise TransactionValidationError("amount", f"{amount!r} is not a number") from None
    if not math.isfinite(parsed) or parsed < 0:
        raise TransactionValidationError("amount", "must be a finite, non-negative number")

    if category not in CATEGORIES:
        raise TransactionValidationError("category", f"must be one of {', '.join(CATEGORIES)}")

    try:
        date.fromisoformat(date_text)
    except ValueError:
        raise TransactionValidationError("date", f"{date_text!r} is not an ISO date (YYYY-MM-DD)") from None

    return {
        "type": draft.type,
        "amount": amount,
        "category": category,
        "description": draft.description.strip(),
        "date": date_text,
    }


class TransactionStore:
    """
    The transaction collection plus its persistence.

    Args:
        storage: Any backend with ``get_item``/``set_item`` (see storage.py).
        key: Storage key of the serialized collection.
        clock: Returns epoch seconds; used for id assignment.
    """

    def __init__(self, storage, key: str = DEFAULT_STORAGE_KEY, clock: Callable[[], float] = time.time):
        self.storage = storage
        self.key = key
        self._clock = clock
        self._transactions: list[Transaction] = self.load()
        self._last_id = max((t.id for t in self._transactions), default=0)
        # False after a rejected write until the next successful one
        self.last_write_ok = True

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        """Snapshot of the collection in insertion order."""
        return tuple(self._transactions)

    def __len__(self) -> int:
        return len(self._transactions)

    # ── LOAD / PERSIST ────────────────────────────────────

    def load(self) -> list[Transaction]:
        """
        Read the persisted collection.

        Missing, unreadable or malformed data all yield an empty list.
        """
        try:
            raw = self.storage.get_item(self.key)
        except StorageReadError as e:
            logger.warning(f"Could not read {self.key!r}, starting empty: {e}")
            return []
        if raw is None:
            return []
        try:
            return _transaction_list.validate_python(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring malformed data under {self.key!r}: {e}")
            return []

    def persist(self, transactions: Optional[Iterable[Transaction]] = None) -> bool:
        """
        Write the whole collection to storage.

        Returns:
            True on success, False if the backend rejected the write.
        """
        if transactions is None:
            transactions = self._transactions
        payload = json.dumps([t.model_dump() for t in transactions], ensure_ascii=False)
        try:
            self.storage.set_item(self.key, payload)
        except StorageWriteError:
            logger.exception(f"Failed to persist {self.key!r}")
            self.last_write_ok = False
            return False
        self.last_write_ok = True
        return True

    # ── MUTATIONS ─────────────────────────────────────────

    def _next_id(self) -> int:
        # Millisecond timestamps, bumped when two adds land in the same tick.
        self._last_id = max(int(self._clock() * 1000), self._last_id + 1)
        return self._last_id

    def add(self, draft) -> Transaction:
        """
        Validate a draft and append it as a new transaction.

        Args:
            draft: A TransactionDraft, or a mapping with the same fields.

        Returns:
            The stored Transaction with its id assigned.

        Raises:
            TransactionValidationError: the collection is left unchanged.
        """
        values = validate_draft(_as_draft(draft))
        transaction = Transaction(id=self._next_id(), **values)
        self._transactions.append(transaction)
        logger.info(f"Added {transaction.type} #{transaction.id} ({transaction.category}, {transaction.amount})")
        self.persist()
        return transaction

    def remove(self, transaction_id: int) -> tuple[Transaction, ...]:
        """
        Drop the transaction with this id, if any.

        Returns:
            The collection after removal.
        """
        before = len(self._transactions)
        self._transactions = [t for t in self._transactions if t.id != transaction_id]
        if len(self._transactions) < before:
            logger.info(f"Deleted transaction #{transaction_id}")
        self.persist()
        return self.transactions
