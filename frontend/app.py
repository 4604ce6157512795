"""
Streamlit Fulfillment Dashboard - Main Application

Submit buy or sell orders against the backend and inspect the exchange
snapshots they are filled from.
"""

import streamlit as st
import sys
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from frontend/.env
frontend_dir = Path(__file__).parent
env_path = frontend_dir / ".env"
if env_path.exists():
    load_dotenv(env_path)

# Make services/ and utils/ importable when started with `streamlit run frontend/app.py`
if str(frontend_dir) not in sys.path:
    sys.path.insert(0, str(frontend_dir))

# Page config must be first
st.set_page_config(
    page_title="Crypto Order Fulfillment",
    page_icon="💱",
    layout="wide",
    initial_sidebar_state="expanded"
)

from services.api_client import APIError, get_api_client
from utils.formatters import (
    color_by_side,
    format_order_id,
    format_price,
    format_quantity,
    format_timestamp,
)

# Get backend URL from environment variable or use default
BACKEND_HOST = os.getenv("BACKEND_HOST", "localhost")
BACKEND_PORT = os.getenv("BACKEND_PORT", "8000")
BACKEND_PROTOCOL = os.getenv("BACKEND_PROTOCOL", "http")
BACKEND_URL = f"{BACKEND_PROTOCOL}://{BACKEND_HOST}:{BACKEND_PORT}"

# Initialize session state
if "backend_url" not in st.session_state:
    st.session_state.backend_url = BACKEND_URL
if "transactions" not in st.session_state:
    st.session_state.transactions = []
if "current_page" not in st.session_state:
    st.session_state.current_page = "Orders"

api_client = get_api_client(st.session_state.backend_url)


def load_exchanges():
    try:
        return api_client.get_exchanges()
    except (APIError, OSError) as e:
        st.error(f"Failed to load exchanges: {e}")
        return []


def show_transaction(result):
    """Render totals and fill lines of one transaction."""
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Filled", format_quantity(result["filled_quantity"]))
    with col2:
        st.metric("Unfulfilled", format_quantity(result["unfulfilled_quantity"]))
    with col3:
        st.metric("Total Cost (EUR)", format_price(result["total_cost"]))
    with col4:
        st.metric("Average Price", format_price(result.get("average_price")))

    fills = result.get("fills", [])
    if not fills:
        st.warning("Unable to fill any order")
        return

    st.dataframe(
        [
            {
                "Exchange": fill["exchange_id"],
                "Standing Order": format_order_id(fill["standing_order_id"]),
                "Price": format_price(fill["price"]),
                "Taken": format_quantity(fill["quantity_taken"]),
                "Cost": format_price(fill["cost_paid"]),
                "Remaining": (
                    f"{format_quantity(fill['standing_order_remaining_quantity'])} / "
                    f"{format_quantity(fill['standing_order_original_quantity'])}"
                ),
            }
            for fill in fills
        ],
        use_container_width=True,
        hide_index=True,
    )

    with st.expander("Usage per exchange"):
        st.dataframe(
            [
                {
                    "Exchange": exchange_id,
                    "Crypto used": format_quantity(quantity),
                    "Fiat used": format_price(result["exchange_cost_usage"].get(exchange_id)),
                }
                for exchange_id, quantity in result.get("exchange_quantity_usage", {}).items()
            ],
            use_container_width=True,
            hide_index=True,
        )


# Sidebar
with st.sidebar:
    st.title("💱 Order Fulfillment")

    # Connection status
    connected = api_client.health_check()
    if connected:
        st.success("🟢 Connected")
    else:
        st.error("🔴 Disconnected")

    st.divider()

    # Navigation
    pages = ["Orders", "Exchanges", "Statistics"]
    default_index = pages.index(st.session_state.current_page) if st.session_state.current_page in pages else 0
    page = st.radio("Navigation", pages, index=default_index, key="nav_radio")
    st.session_state.current_page = page

    st.divider()

    with st.expander("⚙️ Settings"):
        st.session_state.backend_url = st.text_input("Backend URL", st.session_state.backend_url)

# Main content based on page selection
if page == "Orders":
    st.title("💱 Fulfill an Order")

    exchanges = load_exchanges() if connected else []
    exchange_ids = [exchange["exchange_id"] for exchange in exchanges]

    with st.form("order_form"):
        col1, col2, col3 = st.columns(3)
        with col1:
            side = st.radio("Side", ["Buy", "Sell"], horizontal=True)
        with col2:
            # Text inputs keep the exact decimal the user typed
            quantity = st.text_input("Quantity", value="1")
        with col3:
            price = st.text_input("Limit Price (EUR)", value="60000")

        selected = st.multiselect("Exchanges", exchange_ids, default=exchange_ids)
        submitted = st.form_submit_button("Submit Order", type="primary")

    if submitted:
        if not selected:
            st.error("❌ Select at least one exchange")
        else:
            try:
                with st.spinner("Filling order..."):
                    result = api_client.submit_order(side, quantity.strip(), price.strip(), selected)
                st.session_state.transactions.append(result)
                st.success(f"✅ Transaction {format_order_id(result['transaction_id'])} processed")
                show_transaction(result)
                with st.expander("Raw response"):
                    st.json(result)
            except (APIError, OSError) as e:
                st.error(f"❌ Error: {e}")

    st.divider()

    st.subheader("Recent Transactions")
    if st.session_state.transactions:
        rows = []
        for result in reversed(st.session_state.transactions[-10:]):
            rows.append({
                "Transaction": format_order_id(result["transaction_id"]),
                "Side": result["side"].upper(),
                "Requested": format_quantity(result["requested_quantity"]),
                "Filled": format_quantity(result["filled_quantity"]),
                "Cost (EUR)": format_price(result["total_cost"]),
                "Fills": len(result["fills"]),
                "Time": format_timestamp(result.get("timestamp")),
            })
        st.dataframe(rows, use_container_width=True, hide_index=True)
    else:
        st.info("No transactions yet")

elif page == "Exchanges":
    st.title("🏦 Exchange Snapshots")

    for exchange in load_exchanges():
        with st.container():
            st.subheader(exchange["exchange_id"])

            col1, col2, col3, col4 = st.columns(4)
            with col1:
                st.metric("Crypto", format_quantity(exchange["crypto_balance"]))
            with col2:
                st.metric("Euro", format_price(exchange["fiat_balance"]))
            with col3:
                st.metric("Lowest Ask", format_price(exchange.get("best_ask")))
            with col4:
                st.metric("Highest Bid", format_price(exchange.get("best_bid")))

            col_bids, col_asks = st.columns(2)
            for column, title, orders, side in (
                (col_bids, "🟢 Bids", exchange["bids"], "buy"),
                (col_asks, "🔴 Asks", exchange["asks"], "sell"),
            ):
                with column:
                    st.markdown(
                        f"<span style='color:{color_by_side(side)}'><b>{title}</b></span>",
                        unsafe_allow_html=True,
                    )
                    if orders:
                        st.dataframe(
                            [
                                {
                                    "Price": format_price(order["price"]),
                                    "Amount": format_quantity(order["quantity"]),
                                    "Time": format_timestamp(order.get("timestamp")),
                                }
                                for order in orders
                            ],
                            use_container_width=True,
                            hide_index=True,
                        )
                    else:
                        st.info("None")

            st.divider()

elif page == "Statistics":
    st.title("📈 Order Statistics")

    stats = api_client.get_statistics()

    col1, col2, col3, col4, col5 = st.columns(5)
    with col1:
        st.metric("Orders Processed", stats.get("orders_processed", 0))
    with col2:
        st.metric("Fully Filled", stats.get("orders_filled", 0))
    with col3:
        st.metric("Partially Filled", stats.get("orders_partial", 0))
    with col4:
        st.metric("Unfilled", stats.get("orders_unfilled", 0))
    with col5:
        st.metric("Fill Lines", stats.get("fills_generated", 0))
