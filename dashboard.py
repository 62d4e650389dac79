"""Streamlit dashboard for logging and reviewing matches"""
import streamlit as st
import plotly.graph_objects as go
from pathlib import Path
import sys
from typing import Dict, List
from datetime import date, datetime

# Add project root to path
sys.path.append(str(Path(__file__).parent))

from config.settings import settings
from src.client import MatchApiClient
from src.errors import ApiClientError, ValidationError
from src.models import Match, MatchStatus
from src.ui_state import (
    Action, CancelDelete, ChangeMonth, CloseModal, EditDraft, FetchFailed, FetchSucceeded,
    OpenCalendar, OpenForm, OpenStats, RequestDelete, SaveSucceeded, UIMode, UIState,
    delete_confirmed, reduce,
)
from src.utils.constants import WEEKDAY_LABELS
from src.views import (
    calendar_grid, matches_by_date, matches_per_month, monthly_stats, proximity_sort,
)

# Configure page
st.set_page_config(
    page_title=settings.APP_TITLE,
    page_icon="🏆",
    layout="wide",
    initial_sidebar_state="collapsed"
)

STATUS_EMOJI = {
    MatchStatus.PENDING: "⏳",
    MatchStatus.WON: "✅",
    MatchStatus.LOST: "❌",
}


@st.cache_resource
def get_client() -> MatchApiClient:
    return MatchApiClient(settings.API_BASE_URL, settings.API_TIMEOUT)


def dispatch(action: Action):
    st.session_state.ui = reduce(st.session_state.ui, action)


def fetch_matches():
    """Reload the full list; on failure keep whatever was shown before."""
    try:
        with st.spinner("Loading your matches..."):
            st.session_state.matches = get_client().list_matches()
        dispatch(FetchSucceeded())
    except ApiClientError as e:
        dispatch(FetchFailed(message=f"Could not load matches. Please try again. ({e})"))
        st.session_state.setdefault("matches", [])


def init_state():
    if "ui" not in st.session_state:
        st.session_state.ui = UIState.initial(date.today())
    if "matches" not in st.session_state:
        fetch_matches()


def render_header():
    col1, col2, col3, col4 = st.columns([6, 1, 1, 1])
    with col1:
        st.title("🏆 Match Tracker")
    with col2:
        st.button("📅", help="Calendar", on_click=dispatch, args=(OpenCalendar(),), use_container_width=True)
    with col3:
        st.button("📊", help="Statistics", on_click=dispatch, args=(OpenStats(),), use_container_width=True)
    with col4:
        st.button("➕", help="New match", type="primary", on_click=dispatch, args=(OpenForm(),),
                  use_container_width=True)


def render_sidebar():
    with st.sidebar:
        st.title("Status")
        try:
            health = get_client().health()
            st.success(f"✅ API: {health['status']}")
            st.info(f"🗄️ Backend: {health.get('backend', 'unknown')}")
        except ApiClientError:
            st.error("❌ Cannot connect to API")
        if st.button("🔄 Reload matches"):
            fetch_matches()


def render_match_table(matches: List[Match]):
    """Render the match list, closest kick-off first"""
    if not matches:
        st.info("No matches yet. Log your first one to start tracking your season.")
        st.button("Add my first match", on_click=dispatch, args=(OpenForm(),), key="first_match")
        return

    header = st.columns([2, 3, 3, 2, 2, 1])
    for col, label in zip(header, ["Date / Time", "Club", "Opponents", "Result", "Status", ""]):
        col.caption(label)

    for match in proximity_sort(matches, datetime.now()):
        row = st.columns([2, 3, 3, 2, 2, 1])
        with row[0]:
            st.write(f"**{match.date}**")
            if match.time:
                st.caption(f"🕒 {match.time[:5]}")
        row[1].write(match.club)
        row[2].write(match.team)
        row[3].write(match.result or "–")
        row[4].write(f"{STATUS_EMOJI[match.status]} {match.status.value}")
        row[5].button("✏️", key=f"edit_{match.id}", help="Edit", on_click=dispatch, args=(OpenForm(match=match),))


def _save(state: UIState, values: Dict):
    dispatch(EditDraft(changes=values))
    draft = st.session_state.ui.draft
    try:
        payload = draft.to_payload()
    except ValidationError as e:
        st.warning(str(e))
        return
    try:
        get_client().save_match(payload, state.editing_id)
    except ApiClientError as e:
        dispatch(FetchFailed(message=f"Could not save match: {e}"))
        st.rerun()
    dispatch(SaveSucceeded())
    fetch_matches()
    st.rerun()


def _delete(state: UIState):
    if not delete_confirmed(state):
        return
    try:
        get_client().delete_match(state.editing_id)
    except ApiClientError as e:
        dispatch(CancelDelete())
        dispatch(FetchFailed(message=f"Could not delete match: {e}"))
        st.rerun()
    dispatch(CloseModal())
    fetch_matches()
    st.rerun()


def render_form(state: UIState):
    """Render the create / edit form"""
    editing = state.editing_id is not None
    st.subheader("✏️ Edit Match" if editing else "➕ New Match")
    st.caption("Update the match details" if editing else "Fill in the match details")

    draft = state.draft
    statuses = [s.value for s in MatchStatus]

    with st.form("match_form"):
        col1, col2, col3 = st.columns(3)
        with col1:
            match_date = st.date_input("Date *", value=date.fromisoformat(draft.date))
        with col2:
            match_time = st.text_input("Time (HH:MM)", value=draft.time)
        with col3:
            match_status = st.selectbox("Status", statuses, index=statuses.index(draft.status.value))
        club = st.text_input("Club *", value=draft.club)
        team = st.text_input("Opponents *", value=draft.team)
        result = st.text_input("Result", value=draft.result, placeholder="6-4 / 6-3")

        buttons = st.columns(3)
        with buttons[0]:
            submitted = st.form_submit_button("💾 Save", type="primary", use_container_width=True)
        with buttons[1]:
            cancelled = st.form_submit_button("Cancel", use_container_width=True)
        with buttons[2]:
            deleted = editing and st.form_submit_button("🗑️ Delete", use_container_width=True)

    if submitted:
        _save(state, {
            "date": match_date.isoformat(),
            "time": match_time,
            "club": club,
            "team": team,
            "result": result,
            "status": match_status,
        })
    elif deleted:
        dispatch(RequestDelete())
        st.rerun()
    elif cancelled:
        dispatch(CloseModal())
        st.rerun()

    if delete_confirmed(state):
        st.warning(f"Are you sure you want to delete the match on {draft.date} against {draft.team}?")
        confirm, keep = st.columns(2)
        with confirm:
            if st.button("🗑️ Yes, delete", type="primary", use_container_width=True):
                _delete(state)
        with keep:
            st.button("Keep it", on_click=dispatch, args=(CancelDelete(),), use_container_width=True)


def render_calendar(state: UIState, matches: List[Match]):
    """Render the month grid with match markers"""
    cursor = state.calendar_cursor
    col1, col2, col3, col4 = st.columns([6, 1, 1, 1])
    with col1:
        st.subheader(f"📅 {cursor.strftime('%B %Y')}")
    with col2:
        st.button("◀", on_click=dispatch, args=(ChangeMonth(offset=-1),), use_container_width=True)
    with col3:
        st.button("▶", on_click=dispatch, args=(ChangeMonth(offset=1),), use_container_width=True)
    with col4:
        st.button("✖", key="close_calendar", on_click=dispatch, args=(CloseModal(),), use_container_width=True)

    by_date = matches_by_date(matches)
    today = date.today()

    for col, label in zip(st.columns(7), WEEKDAY_LABELS):
        col.caption(label)

    grid = calendar_grid(cursor)
    for week in range(6):
        cols = st.columns(7)
        for col, day in zip(cols, grid[week * 7:(week + 1) * 7]):
            label = str(day.date.day)
            if day.date == today:
                label = f":blue[**{label}**]"
            elif not day.is_current_month:
                label = f":gray[{label}]"
            markers = "●" * len(by_date.get(day.date.isoformat(), []))
            col.markdown(f"{label}  \n:green[{markers}]" if markers else label)

    month_prefix = cursor.strftime("%Y-%m")
    in_month = sorted((m for m in matches if m.date.startswith(month_prefix)), key=lambda m: m.date)
    for match in in_month:
        st.write(f"{STATUS_EMOJI[match.status]} **{match.date}** {match.time or ''} · {match.club} · {match.team}")


def create_monthly_chart(per_month: Dict[str, int]) -> go.Figure:
    """Bar chart of matches played per month"""
    fig = go.Figure(go.Bar(
        x=list(per_month.keys()),
        y=list(per_month.values()),
        marker_color="#10B981",
        text=list(per_month.values()),
        textposition="auto",
    ))
    fig.update_layout(
        title=dict(text="Matches per Month", x=0.5, xanchor="center"),
        height=300,
        showlegend=False,
        xaxis=dict(title="Month", type="category"),
        yaxis=dict(title="Matches"),
        margin=dict(l=50, r=50, t=50, b=50)
    )
    return fig


def render_stats(matches: List[Match]):
    """Render the statistics panel"""
    col1, col2 = st.columns([8, 1])
    with col1:
        st.subheader("📊 Statistics")
    with col2:
        st.button("✖", key="close_stats", on_click=dispatch, args=(CloseModal(),), use_container_width=True)

    stats = monthly_stats(matches, date.today())
    metrics = st.columns(4)
    metrics[0].metric("Total Matches", stats.total)
    metrics[1].metric("This Month", stats.this_month)
    metrics[2].metric("Won", stats.won)
    metrics[3].metric("Lost", stats.lost)

    per_month = matches_per_month(matches)
    if per_month:
        st.plotly_chart(create_monthly_chart(per_month), use_container_width=True)


def main():
    init_state()
    render_sidebar()
    render_header()

    state: UIState = st.session_state.ui
    matches: List[Match] = st.session_state.matches

    if state.error:
        st.error(state.error)

    if state.mode == UIMode.FORM:
        with st.container(border=True):
            render_form(state)
    elif state.mode == UIMode.CALENDAR:
        with st.container(border=True):
            render_calendar(state, matches)
    elif state.mode == UIMode.STATS:
        with st.container(border=True):
            render_stats(matches)

    render_match_table(matches)


if __name__ == "__main__":
    main()
