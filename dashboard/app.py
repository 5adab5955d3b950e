"""Streamlit front-desk dashboard (administrator and receptionist views)."""

from __future__ import annotations

from typing import Any, Dict, Optional

import pandas as pd
import requests
import streamlit as st

from frontdesk.domain.models import UserRole
from frontdesk.services.auth_service import SessionAuthService, SessionState
from frontdesk.utils.config import get_settings

# ==========================================
# Configuration & Constants
# ==========================================
settings = get_settings()
API_BASE_URL = settings.gateway_base_url
REFRESH_SECONDS = settings.refresh_interval_seconds

st.set_page_config(
    page_title="Front Desk Dashboard",
    page_icon="🏨",
    layout="wide",
)


class StreamlitSessionStore:
    """Session store backed by the per-browser ``st.session_state``."""

    def get(self, key: str) -> Optional[str]:
        value = st.session_state.get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        st.session_state[key] = value

    def clear(self, key: str) -> None:
        st.session_state.pop(key, None)


auth = SessionAuthService(store=StreamlitSessionStore(), settings=settings)


# ==========================================
# API Helper Functions
# ==========================================
def fetch_view(path: str) -> Optional[Dict[str, Any]]:
    """Calls the gateway with the stored session token."""
    token = auth.get_token()
    try:
        response = requests.get(
            f"{API_BASE_URL}{path}",
            headers={"Authorization": f"Bearer {token}"},
            timeout=10,
        )
        if response.status_code == 401:
            auth.clear_session()
            st.warning("Your session has expired. Please sign in again.")
            return None
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        st.error(f"Failed to load dashboard data: {e}")
        return None


def request_refresh() -> None:
    token = auth.get_token()
    try:
        response = requests.post(
            f"{API_BASE_URL}/dashboard/refresh",
            headers={"Authorization": f"Bearer {token}"},
            timeout=15,
        )
        response.raise_for_status()
        st.toast("Dashboard refreshed")
    except requests.exceptions.RequestException as e:
        st.error(f"Refresh failed: {e}")


# ==========================================
# UI Page Functions
# ==========================================
def render_upcoming_checkouts(rows: list[Dict[str, Any]]) -> None:
    st.subheader("⏰ Upcoming Checkouts")
    if not rows:
        st.info("No checkouts due in the next two hours.")
        return
    df = pd.DataFrame(rows)[["booking_code", "guest_name", "room_number", "remaining_time"]]
    df.columns = ["Booking", "Guest", "Room", "Remaining"]
    st.dataframe(df, use_container_width=True, hide_index=True)


@st.fragment(run_every=REFRESH_SECONDS)
def render_admin_page() -> None:
    st.header("Admin Dashboard")
    view = fetch_view("/dashboard/admin")
    if not view:
        return

    summary = view.get("daily_summary", {})
    col1, col2, col3, col4, col5 = st.columns(5)
    col1.metric("Check-ins Today", summary.get("check_ins", 0))
    col2.metric("Check-outs Today", summary.get("check_outs", 0))
    col3.metric("Revenue Today", f"${summary.get('revenue', 0.0):,.2f}")
    col4.metric("Occupancy", f"{summary.get('occupancy_rate', 0)}%")
    col5.metric("Pending Payments (est.)", summary.get("pending_payments", 0))

    left, right = st.columns([2, 1])
    with left:
        render_upcoming_checkouts(view.get("upcoming_checkouts", []))
    with right:
        st.subheader("🛏️ Room Status")
        counts = view.get("room_status_counts", {})
        if counts:
            st.bar_chart(pd.Series(counts, name="Rooms"))
    st.caption(f"Last updated {view.get('generated_at')}")


@st.fragment(run_every=REFRESH_SECONDS)
def render_receptionist_page() -> None:
    st.header("Receptionist Dashboard")
    view = fetch_view("/dashboard/receptionist")
    if not view:
        return

    tasks = view.get("task_counts", {})
    inspections = tasks.get("room_inspections")
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Check-ins", tasks.get("check_ins", 0))
    col2.metric("Check-outs", tasks.get("check_outs", 0))
    col3.metric("Reservations", tasks.get("reservations", 0))
    col4.metric("Room Inspections", "—" if inspections is None else f"~{inspections}")

    render_upcoming_checkouts(view.get("upcoming_checkouts", []))
    st.caption(f"Last updated {view.get('generated_at')}")


def render_login_page(state: SessionState) -> None:
    st.header("🔐 Sign in")
    if state is SessionState.EXPIRED:
        st.warning("Your session has expired.")
    elif state is SessionState.MALFORMED:
        st.error("The stored session token could not be read.")

    token = st.text_input("Session token", type="password")
    if st.button("Sign in", type="primary") and token:
        auth.start_session(token.strip())
        if not auth.is_authenticated():
            auth.clear_session()
            st.error("That token is invalid or expired.")
            return
        st.rerun()


# ==========================================
# Main App Router
# ==========================================
def main() -> None:
    state = auth.session_state()
    if state is not SessionState.VALID:
        if state is not SessionState.ABSENT:
            auth.clear_session()
        render_login_page(state)
        return

    role = auth.get_user_role()
    st.sidebar.title("Front Desk")
    st.sidebar.markdown(f"Signed in as **{auth.get_username() or auth.get_subject() or 'unknown'}**")
    st.sidebar.caption(f"Role: {role.value if role else 'unknown'}")
    st.sidebar.markdown("---")

    if st.sidebar.button("Refresh now"):
        request_refresh()
    if st.sidebar.button("Log out"):
        auth.clear_session()
        st.rerun()

    if role is UserRole.ADMIN:
        page = st.sidebar.radio("View", ["Admin", "Reception"])
        if page == "Admin":
            render_admin_page()
        else:
            render_receptionist_page()
    elif role is UserRole.RECEPTIONIST:
        render_receptionist_page()
    else:
        st.error("This dashboard is available to administrators and receptionists only.")


if __name__ == "__main__":
    main()
