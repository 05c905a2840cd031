"""Altair chart helpers for quote breakdowns."""

from __future__ import annotations

import altair as alt
import pandas as pd
import streamlit as st

CHART_HEIGHT = 280
DISCOUNT_COLOR = "#10B981"
SURCHARGE_COLOR = "#EF4444"
LABEL_COLOR = "#94A3B8"
GRID_COLOR = "#334155"

_BASE_CONFIG = {
    "background": "#0F172A",
    "axis": {
        "labelColor": LABEL_COLOR,
        "titleColor": LABEL_COLOR,
        "gridColor": GRID_COLOR,
        "gridOpacity": 0.2,
        "domainColor": GRID_COLOR,
    },
    "title": {"color": "#E2E8F0", "fontSize": 15, "anchor": "start"},
    "view": {"strokeWidth": 0},
}


def discounts_frame(quote: dict) -> pd.DataFrame:
    """One row per applied rule per line item."""
    rows = [
        {
            "Product": item["productName"],
            "Rule": discount["ruleName"],
            "Amount": discount["amount"],
        }
        for item in quote.get("lineItems", [])
        for discount in item.get("discounts", [])
    ]
    return pd.DataFrame(rows, columns=["Product", "Rule", "Amount"])


def discount_bar_chart(quote: dict, title: str = "Adjustments by rule") -> None:
    """Horizontal bars per rule; negative amounts (surcharges) are drawn red."""
    df = discounts_frame(quote)
    if df.empty:
        st.info("No pricing rules applied to this quote.")
        return

    by_rule = df.groupby("Rule", as_index=False)["Amount"].sum()
    by_rule["Kind"] = by_rule["Amount"].map(lambda a: "Discount" if a >= 0 else "Surcharge")

    chart = (
        alt.Chart(by_rule)
        .mark_bar(cornerRadiusEnd=4)
        .encode(
            y=alt.Y("Rule:N", sort="-x", title=None),
            x=alt.X("Amount:Q", title="Amount ($)"),
            color=alt.Color(
                "Kind:N",
                scale=alt.Scale(
                    domain=["Discount", "Surcharge"],
                    range=[DISCOUNT_COLOR, SURCHARGE_COLOR],
                ),
                legend=None,
            ),
            tooltip=[
                alt.Tooltip("Rule:N"),
                alt.Tooltip("Amount:Q", format=",.2f"),
            ],
        )
        .properties(height=CHART_HEIGHT, title=title)
        .configure(**_BASE_CONFIG)
    )
    st.altair_chart(chart, use_container_width=True)
