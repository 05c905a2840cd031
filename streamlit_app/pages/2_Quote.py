"""Page 2: Quote — assemble line items, validate, and generate a quote."""

import pandas as pd
import streamlit as st

from api_client import APIError, generate_quote, list_products, validate_configuration
from charts import discount_bar_chart

st.header("Build a Quote")

try:
    products = {p["id"]: p for p in list_products()}
except Exception as e:
    st.error(f"Failed to load catalog: {e}")
    st.stop()

if "lines" not in st.session_state:
    st.session_state.lines = []

# ---------------------------------------------------------------------------
# Add a line item
# ---------------------------------------------------------------------------
# Outside the form so a product change reruns the page and refreshes its options
product_id = st.selectbox(
    "Product", list(products), format_func=lambda pid: products[pid]["name"]
)
option_ids = [o["id"] for o in products[product_id]["options"]]

with st.form(f"line_form_{product_id}"):
    selected = st.multiselect("Options", option_ids)
    quantity = st.number_input("Quantity", min_value=1, max_value=1_000_000, value=1, step=1)
    col_check, col_add = st.columns(2)
    check = col_check.form_submit_button("Validate", use_container_width=True)
    add = col_add.form_submit_button("Add to Quote", use_container_width=True)

if check or add:
    result = validate_configuration(product_id, selected)
    for err in result["errors"]:
        st.error(err["message"])
    for warn in result.get("warnings") or []:
        st.warning(warn["message"])
    if result["isValid"]:
        if add:
            st.session_state.lines.append(
                {"productId": product_id, "selectedOptions": selected, "quantity": int(quantity)}
            )
        else:
            st.success("Configuration is valid")

# ---------------------------------------------------------------------------
# Current lines + quote context
# ---------------------------------------------------------------------------
if st.session_state.lines:
    st.subheader("Line Items")
    st.dataframe(pd.DataFrame(st.session_state.lines), use_container_width=True)
    if st.button("Clear"):
        st.session_state.lines = []
        st.rerun()

    col1, col2, col3 = st.columns(3)
    tier = col1.selectbox("Customer Tier", ["", "enterprise", "startup"])
    region = col2.selectbox(
        "Region", ["", "us-west", "eu-central", "eu-west", "apac-east", "apac-south"]
    )
    tax_pct = col3.number_input("Tax (%)", min_value=0.0, value=0.0, step=0.5)
    early_bird = st.checkbox("Early bird (professional services)")

    if st.button("Generate Quote", use_container_width=True):
        try:
            quote = generate_quote(
                st.session_state.lines,
                customer_tier=tier or None,
                region=region or None,
                custom_fields={"earlyBird": True} if early_bird else None,
                tax_rate=tax_pct / 100 if tax_pct else None,
            )
        except APIError as e:
            st.error(e.error)
            st.stop()

        m1, m2, m3, m4 = st.columns(4)
        m1.metric("Subtotal", f"${quote['subtotal']:,.2f}")
        m2.metric("Discounts", f"${quote['totalDiscounts']:,.2f}")
        m3.metric("Tax", f"${quote.get('tax', 0):,.2f}")
        m4.metric("Total", f"${quote['total']:,.2f}")

        st.dataframe(
            pd.DataFrame(
                [
                    {
                        "Product": li["productName"],
                        "Qty": li["quantity"],
                        "Subtotal": li["subtotal"],
                        "Total": li["total"],
                    }
                    for li in quote["lineItems"]
                ]
            ),
            use_container_width=True,
            hide_index=True,
        )
        discount_bar_chart(quote)

        with st.expander("Raw Quote"):
            st.json(quote)
