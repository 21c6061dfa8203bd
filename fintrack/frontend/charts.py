# fintrack/frontend/charts.py
# Figure and table builders for the dashboard; no streamlit calls in here.
from typing import Any, Dict, List

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

TYPE_COLORS = {"income": "#16a34a", "expense": "#dc2626"}
TRANSACTION_COLUMNS = ["id", "date", "type", "category", "amount", "description"]


def transactions_frame(transactions: List[Dict[str, Any]]) -> pd.DataFrame:
    """Turn the API's transaction list into a typed DataFrame."""
    if not transactions:
        return pd.DataFrame(columns=TRANSACTION_COLUMNS)

    df = pd.DataFrame(transactions)
    for col in TRANSACTION_COLUMNS:
        if col not in df.columns:
            df[col] = None
    df = df[TRANSACTION_COLUMNS].copy()
    df['date'] = pd.to_datetime(df['date'], errors='coerce')
    df['amount'] = pd.to_numeric(df['amount'], errors='coerce')
    df['description'] = df['description'].fillna("")
    return df.dropna(subset=['date', 'amount'])


def signed_amount(row) -> str:
    sign = "+" if row['type'] == "income" else "-"
    return f"{sign}{row['amount']:,.2f}"


def overview_bar(stats: Dict[str, Any]) -> go.Figure:
    data = pd.DataFrame([
        {"name": "Income", "amount": stats.get("income", 0), "type": "income"},
        {"name": "Expense", "amount": stats.get("expense", 0), "type": "expense"},
    ])
    fig = px.bar(data, x="name", y="amount", color="type",
                 color_discrete_map=TYPE_COLORS, title="Financial Overview")
    fig.update_layout(template="plotly_white", showlegend=False, xaxis_title=None, yaxis_title="Amount")
    return fig


def category_frame(stats: Dict[str, Any]) -> pd.DataFrame:
    rows = stats.get("categoryStats") or []
    if not rows:
        return pd.DataFrame(columns=["category", "type", "total", "count"])
    return pd.DataFrame(rows)[["category", "type", "total", "count"]]


def category_bar(stats: Dict[str, Any]) -> go.Figure:
    cat_df = category_frame(stats)
    # plotly draws horizontal bars bottom-up, so reverse to keep the largest on top
    cat_df = cat_df.iloc[::-1]
    fig = px.bar(cat_df, x="total", y="category", color="type", orientation="h",
                 color_discrete_map=TYPE_COLORS, title="By Category")
    fig.update_layout(template="plotly_white", yaxis_title=None, xaxis_title="Total")
    return fig


def monthly_trend(monthly: List[Dict[str, Any]]) -> go.Figure:
    df = pd.DataFrame(monthly or [], columns=["month", "income", "expense", "net"])
    df = df.sort_values("month")
    fig = px.line(df, x="month", y=["income", "expense", "net"], markers=True,
                  title="Monthly Income vs Expenses")
    fig.update_layout(template="plotly_white", legend_title=None, yaxis_title="Amount")
    return fig
