# fintrack/frontend/streamlit_app.py
# Run with: streamlit run fintrack/frontend/streamlit_app.py
from datetime import date, datetime, time

import streamlit as st

from fintrack.frontend.api_client import ApiClient, ApiClientError, ClientSession
from fintrack.frontend.charts import (
    category_bar,
    category_frame,
    monthly_trend,
    overview_bar,
    signed_amount,
    transactions_frame,
)

SESSION_KEY = "fintrack_session"
MONTHS = ["", "January", "February", "March", "April", "May", "June", "July",
          "August", "September", "October", "November", "December"]

# ---------------- Page config ----------------
st.set_page_config(page_title="FinTrack", layout="wide", page_icon="💸")


# ---------------- Session State Management ----------------
def get_session() -> ClientSession:
    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = ClientSession()
    return st.session_state[SESSION_KEY]


def get_client() -> ApiClient:
    return ApiClient(get_session())


def call_api(fn, *args, **kwargs):
    """Run an API call; on failure show the message and return None."""
    try:
        return fn(*args, **kwargs)
    except ApiClientError as e:
        if e.is_auth_error and get_session().is_authenticated:
            get_session().clear()
            st.warning("Your session has expired, please log in again.")
        else:
            st.error(f"❌ {e.message}")
        return None


def currency() -> str:
    user = get_session().user or {}
    return user.get("currency", "USD")


def money(value) -> str:
    return f"{value or 0:,.2f} {currency()}"


# ---------------- Sidebar ----------------
def render_sidebar(client: ApiClient):
    session = client.session
    with st.sidebar:
        st.header("👤 Account")
        if session.is_authenticated:
            st.success(f"Welcome, {session.display_name}")
            if st.button("🚪 Sign Out", use_container_width=True, key="logout"):
                client.logout()
                st.rerun()
            return

        auth_tab = st.radio("Action", ["Login", "Register"], horizontal=True, key="auth_tab")
        with st.form("auth_form"):
            name = st.text_input("Name", key="name_input") if auth_tab == "Register" else None
            email = st.text_input("📧 Email", key="email_input")
            password = st.text_input("🔒 Password", type="password", key="password_input")
            submitted = st.form_submit_button("Submit", use_container_width=True)

        if not submitted:
            return
        if not email or not password or (auth_tab == "Register" and not name):
            st.warning("Please fill in all fields")
            return

        if auth_tab == "Register":
            if call_api(client.register, name, email, password) is None:
                return
            st.success("✅ Account created")
        if call_api(client.login, email, password) is not None:
            st.rerun()


# ---------------- Dashboard Tab ----------------
def render_dashboard(client: ApiClient):
    st.header("📊 Dashboard")

    stats = call_api(client.stats)
    if stats is None:
        return

    col1, col2, col3 = st.columns(3)
    col1.metric("↑ Total Income", money(stats.get("income")))
    col2.metric("↓ Total Expenses", money(stats.get("expense")))
    col3.metric("Net Balance", money(stats.get("balance")))

    left, right = st.columns(2)
    with left:
        st.plotly_chart(overview_bar(stats), use_container_width=True)
    with right:
        if stats.get("categoryStats"):
            st.plotly_chart(category_bar(stats), use_container_width=True)
        else:
            st.info("No categorized data yet")

    if stats.get("categoryStats"):
        st.subheader("Category Breakdown")
        breakdown = category_frame(stats)
        breakdown['total'] = breakdown['total'].map(money)
        st.dataframe(
            breakdown.rename(columns={'category': 'Category', 'type': 'Type', 'total': 'Total', 'count': 'Count'}),
            use_container_width=True, hide_index=True,
        )

    monthly = call_api(client.monthly_stats) or []
    if monthly:
        st.plotly_chart(monthly_trend(monthly), use_container_width=True)

    st.subheader("🕒 Recent Transactions")
    recent = transactions_frame(call_api(client.list_transactions) or []).head(8).copy()
    if recent.empty:
        st.info("💳 No transactions yet.")
    else:
        recent['amount'] = recent.apply(signed_amount, axis=1)
        recent['date'] = recent['date'].dt.strftime('%Y-%m-%d')
        st.dataframe(recent[['date', 'category', 'description', 'amount']],
                     use_container_width=True, hide_index=True)


# ---------------- Transactions Tab ----------------
def render_add_transaction(client: ApiClient, categories):
    with st.expander("➕ Add Transaction", expanded=False):
        t_type = st.selectbox("Type", ["expense", "income"], key="tx_type")
        names = sorted({c["name"] for c in categories if c["type"] == t_type})
        with st.form("add_tx", clear_on_submit=True):
            col_a, col_b = st.columns(2)
            with col_a:
                t_amount = st.number_input("💰 Amount", min_value=0.0, value=0.0, format="%.2f", key="tx_amount")
                t_date = st.date_input("📅 Date", value=date.today(), key="tx_date")
            with col_b:
                t_cat = st.selectbox("Category", names + ["Other..."], key="tx_cat")
                t_custom = st.text_input("Custom category", placeholder="e.g. Rent, Salary", key="tx_custom")
            t_desc = st.text_input("📝 Description", placeholder="Optional note", key="tx_desc")
            submitted = st.form_submit_button("💾 Save Transaction", use_container_width=True)

        if submitted:
            category = t_custom.strip() if t_cat == "Other..." or t_custom.strip() else t_cat
            if t_amount <= 0 or not category:
                st.error("❌ Amount and category are required")
                return
            created = call_api(
                client.add_transaction, t_type, category, float(t_amount),
                description=t_desc, date=datetime.combine(t_date, time()).isoformat(),
            )
            if created:
                st.success(f"✅ Added {created['category']} {money(created['amount'])}")


def render_transactions(client: ApiClient):
    st.header("💳 Transactions")
    categories = call_api(client.list_categories) or []
    render_add_transaction(client, categories)

    col1, col2, col3, col4, col5 = st.columns(5)
    with col1:
        f_type = st.selectbox("Type", ["", "income", "expense"], key="f_type")
    with col2:
        f_cat = st.selectbox("Category", [""] + sorted({c["name"] for c in categories}), key="f_cat")
    with col3:
        f_month = st.selectbox("Month", range(len(MONTHS)), format_func=lambda m: MONTHS[m] or "Any", key="f_month")
    with col4:
        f_year = st.number_input("Year", min_value=0, max_value=9998, value=0, step=1, key="f_year",
                                 help="0 means any year")
    with col5:
        f_search = st.text_input("🔍 Search", key="f_search")

    filters = {"type": f_type, "category": f_cat, "search": f_search}
    if f_month and f_year:
        filters.update(month=int(f_month), year=int(f_year))

    txs = call_api(client.list_transactions, **filters)
    if txs is None:
        return
    if not txs:
        st.info("No transactions found.")
        return

    st.caption(f"{len(txs)} transactions")
    for tx in txs:
        c1, c2, c3, c4, c5 = st.columns([2, 2, 4, 2, 1])
        c1.write(str(tx["date"])[:10])
        c2.write(f"**{tx['category']}**")
        c3.write(tx.get("description") or "")
        c4.write(signed_amount(tx))
        if c5.button("🗑️", key=f"del_tx_{tx['id']}", help="Delete"):
            if call_api(client.delete_transaction, tx["id"]) is not None:
                st.rerun()


# ---------------- Categories Tab ----------------
def render_categories(client: ApiClient):
    st.header("🏷️ Categories")

    with st.form("add_category", clear_on_submit=True):
        col1, col2 = st.columns(2)
        name = col1.text_input("Name", key="cat_name")
        c_type = col2.selectbox("Type", ["expense", "income"], key="cat_type")
        if st.form_submit_button("Add Category") and name.strip():
            if call_api(client.add_category, name.strip(), c_type):
                st.success("New category added!")

    categories = call_api(client.list_categories) or []
    for cat in categories:
        c1, c2, c3 = st.columns([4, 2, 1])
        c1.write(cat["name"])
        c2.write(cat["type"])
        if cat.get("isDefault"):
            c3.caption("default")
        elif c3.button("🗑️", key=f"del_cat_{cat['id']}", help="Delete"):
            if call_api(client.delete_category, cat["id"]) is not None:
                st.rerun()


# ---------------- Main App ----------------
def main():
    st.title("💰 FinTrack")
    client = get_client()
    render_sidebar(client)

    if not client.session.is_authenticated:
        st.info("🔐 Please login to view your dashboard")
        return

    tab1, tab2, tab3 = st.tabs(["📊 Dashboard", "💳 Transactions", "🏷️ Categories"])
    with tab1:
        render_dashboard(client)
    with tab2:
        render_transactions(client)
    with tab3:
        render_categories(client)


if __name__ == "__main__":
    main()
