"""The in-progress "Add Transaction" form."""

from errors import TransactionValidationError
from logger import get_logger
from models import Transaction, TransactionDraft

logger = get_logger(__name__)


class TransactionFormState:
    """
    Holds the draft being edited.

    A valid submit stores the transaction and clears the form; an invalid
    one leaves every field as the user typed it.
    """

    def __init__(self, draft: TransactionDraft | None = None):
        self._draft = draft or TransactionDraft()

    @property
    def draft(self) -> TransactionDraft:
        return self._draft

    def update(self, field: str, value) -> TransactionDraft:
        """Set one field, keeping the others. Unknown fields raise KeyError."""
        if field not in TransactionDraft.model_fields:
            raise KeyError(field)
        self._draft = self._draft.model_copy(update={field: "" if value is None else str(value)})
        return self._draft

    def reset(self) -> TransactionDraft:
        self._draft = TransactionDraft()
        return self._draft

    def submit(self, store) -> Transaction:
        """
        Hand the draft to ``store.add``.

        Raises:
            TransactionValidationError: the draft is kept unchanged.
        """
        try:
            transaction = store.add(self._draft)
        except TransactionValidationError as e:
            logger.info(f"Rejected draft: {e}")
            raise
        self.reset()
        return transaction
