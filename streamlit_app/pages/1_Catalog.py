"""Page 1: Catalog — browse products and their options."""

import pandas as pd
import streamlit as st

from api_client import list_categories, list_products

st.header("Product Catalog")

try:
    products = list_products()
    categories = list_categories()
except Exception as e:
    st.error(f"Failed to load catalog: {e}")
    st.stop()

category = st.selectbox("Category", ["All", *categories])
if category != "All":
    products = [p for p in products if p["category"] == category]

summary = pd.DataFrame(
    [
        {
            "ID": p["id"],
            "Name": p["name"],
            "Category": p["category"],
            "Base Price": p["basePrice"],
            "Options": len(p["options"]),
        }
        for p in products
    ]
)
st.dataframe(summary, use_container_width=True, hide_index=True)

for product in products:
    with st.expander(f"{product['name']} — ${product['basePrice']:,.2f}"):
        st.caption(product["description"])
        if product.get("metadata"):
            st.json(product["metadata"])
        options = pd.DataFrame(
            [
                {
                    "ID": o["id"],
                    "Name": o["name"],
                    "Price": o["price"],
                    "Required": o["isRequired"],
                    "Requires": ", ".join(o.get("dependencies") or []),
                    "Conflicts With": ", ".join(o.get("conflicts") or []),
                }
                for o in product["options"]
            ]
        )
        if options.empty:
            st.info("No options for this product.")
        else:
            st.dataframe(options, use_container_width=True, hide_index=True)
