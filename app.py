import streamlit as st
from datetime import date

from aggregation import parse_amount, summarize
from config import load_settings
from dashboard import _kpis, cat_spend, format_money
from errors import TransactionValidationError
from form_state import TransactionFormState
from logger import configure_logging
from models import CATEGORIES, TRANSACTION_TYPES
from storage import get_storage
from transaction_store import TransactionStore

# --- Configuration ---
st.set_page_config(page_title="Expense Tracker", layout="centered", page_icon="💰")
settings = load_settings()
configure_logging(settings.log_level)

# --- Session State ---
# Store and form live in the session and are passed into the render
# functions below; nothing reaches for them globally.
if "store" not in st.session_state:
    st.session_state.store = TransactionStore(get_storage(settings), key=settings.storage_key)
if "form" not in st.session_state:
    st.session_state.form = TransactionFormState()
if "form_generation" not in st.session_state:
    st.session_state.form_generation = 0


def _draft_date(text: str):
    try:
        return date.fromisoformat(text) if text else None
    except ValueError:
        return None


# --- Add Transaction ---
def render_add_form(store: TransactionStore, form: TransactionFormState):
    # Widget keys carry a generation counter so a successful submit shows
    # fresh widgets seeded from the reset draft.
    gen = st.session_state.form_generation
    draft = form.draft

    with st.form(f"add_transaction_{gen}"):
        col1, col2 = st.columns(2)
        tx_type = col1.selectbox(
            "Type",
            TRANSACTION_TYPES,
            index=TRANSACTION_TYPES.index(draft.type) if draft.type in TRANSACTION_TYPES else 0,
            format_func=str.title,
        )
        amount = col2.text_input("Amount", value=draft.amount, placeholder="Amount")

        col3, col4 = st.columns(2)
        category_options = ("",) + CATEGORIES
        category = col3.selectbox(
            "Category",
            category_options,
            index=category_options.index(draft.category) if draft.category in category_options else 0,
            format_func=lambda c: c or "Select a category",
        )
        description = col4.text_input("Description", value=draft.description, placeholder="Description")
        tx_date = st.date_input("Date", value=_draft_date(draft.date))

        if st.form_submit_button("Add"):
            form.update("type", tx_type)
            form.update("amount", amount)
            form.update("category", category)
            form.update("description", description)
            form.update("date", tx_date.isoformat() if tx_date else "")
            try:
                form.submit(store)
            except TransactionValidationError as e:
                st.error(f"Please check the {e.field}: {e.message}.")
                return
            st.session_state.form_generation += 1
            st.rerun()


# --- View Transactions ---
def render_transactions(store: TransactionStore, symbol: str):
    if not store.transactions:
        st.info("No transactions yet.")
        return

    for tx in store.transactions:
        with st.container(border=True):
            col1, col2, col3 = st.columns([3, 2, 1])
            col1.markdown(f"**{tx.label}**")
            col1.caption(f"{tx.date} | {tx.type}")
            colour = "green" if tx.is_income() else "red"
            col2.markdown(f":{colour}[{format_money(parse_amount(tx.amount), symbol)}]")
            if col3.button("Delete", key=f"delete_{tx.id}", type="primary"):
                store.remove(tx.id)
                st.rerun()


# --- Main App ---
store = st.session_state.store
form = st.session_state.form
summary = summarize(store.transactions)

st.title("💰 Expense Tracker")

if not store.last_write_ok:
    st.warning("Your latest change could not be saved. It is kept for this session only.")

_kpis(summary.totals, settings.currency_symbol)

tab1, tab2 = st.tabs(["Add Transaction", "View Transactions"])
with tab1:
    render_add_form(store, form)
with tab2:
    render_transactions(store, settings.currency_symbol)

st.subheader("Spending Breakdown")
if summary.breakdown:
    st.plotly_chart(cat_spend(summary.breakdown), use_container_width=True)
else:
    st.info("No expenses recorded yet.")
