"""Chamber console and public display."""

import sys
from pathlib import Path

# Add project root to path (for streamlit which runs this file directly)
_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(_root))

import plotly.graph_objects as go  # noqa: E402
import streamlit as st  # noqa: E402
from loguru import logger  # noqa: E402

from app.container import container  # noqa: E402
from app.errors import CoordinatorError  # noqa: E402
from app.services.permissions import Actor, Capability, Role, can  # noqa: E402
from settings.logging import setup_logging  # noqa: E402
from web.api import attendance, registry, session, voting  # noqa: E402
from web.api.errors import error_response  # noqa: E402


@st.cache_resource(show_spinner=False)
def startup() -> None:
    """Once per server process: logging sinks and the container."""
    setup_logging(level="INFO", to_file=True)
    container.init()


st.set_page_config(page_title="Chamber Console", page_icon="🏛️", layout="wide")
startup()

COLORS = {
    "favor": "#22C55E",
    "against": "#DC2626",
    "abstain": "#9CA3AF",
}

RESULT_ICONS = {"approved": "✅", "rejected": "❌", "undecided": "⏸️"}


def run(action, *args, confirm_key: str | None = None, **kwargs):
    """Call a view, surfacing rejections. Two-phase confirmations are kept for a second click."""
    try:
        result = action(*args, **kwargs)
    except CoordinatorError as e:
        err = error_response(e)
        logger.warning("{} rejected: {} {}", action.__name__, err.kind, err.message)
        if confirm_key and (err.context.get("requires_force") or err.context.get("requires_force_quorum")):
            st.session_state[confirm_key] = {**st.session_state.get(confirm_key, {}), **err.context}
            st.warning(err.message)
        else:
            st.error(f"{err.status} {err.kind}: {err.message}")
        return None
    st.session_state.pop(confirm_key, None)
    return result


def tally_chart(tally: dict) -> go.Figure:
    keys = ["favor", "against", "abstain"]
    return go.Figure(
        go.Bar(
            x=keys,
            y=[tally[k] for k in keys],
            marker_color=[COLORS[k] for k in keys],
            text=[tally[k] for k in keys],
            textposition="outside",
        )
    ).update_layout(
        xaxis_title="",
        yaxis_title="",
        margin=dict(t=20, b=40, l=40, r=20),
        height=320,
    )


def quorum_metrics(quorum) -> None:
    cols = st.columns(4)
    cols[0].metric("Present", quorum.present)
    cols[1].metric("Required", quorum.required)
    cols[2].metric("Legislators", quorum.total)
    cols[3].metric("Quorum", "met" if quorum.met else f"short by {quorum.shortfall}")


def sessions_panel(actor: Actor) -> None:
    """Prepared sessions waiting to be started."""
    prepared = [s for s in session.list_sessions(actor) if s.state == "prepared"]
    if not prepared:
        st.info("No prepared session. Load an agenda with `load_data.py --agenda`.")
        return

    for s in prepared:
        cols = st.columns([3, 1, 1])
        cols[0].write(f"**{s.code}** (quorum: {s.quorum or 'default'})")
        if can(actor.role, Capability.START_SESSION) and cols[1].button("Start", key=f"start_{s.id}"):
            if run(session.start_session, actor, s.id):
                st.rerun()
        if can(actor.role, Capability.SUPERSEDE_SESSION) and cols[2].button("Supersede", key=f"supersede_{s.id}"):
            if run(session.start_session, actor, s.id, supersede=True):
                st.rerun()


def chamber_tab(actor: Actor, status) -> None:
    """Active session, agenda and live tally."""
    if status.session is None:
        st.subheader("No active session")
        sessions_panel(actor)
        return

    s = status.session
    st.subheader(f"🏛️ Session {s.code} - {s.state}")
    if status.pause_expired:
        st.warning("The announced recess is over. Resume the session.")

    cols = st.columns(3)
    if can(actor.role, Capability.PAUSE_SESSION):
        if s.state == "started":
            minutes = cols[0].number_input("Pause minutes", min_value=1, value=15)
            if cols[0].button("Pause"):
                if run(session.pause_session, actor, s.id, int(minutes)):
                    st.rerun()
        elif cols[0].button("Resume"):
            if run(session.resume_session, actor, s.id):
                st.rerun()
    if can(actor.role, Capability.CLOSE_SESSION) and cols[2].button("Close session", type="primary"):
        if run(session.close_session, actor, s.id):
            st.rerun()

    if status.quorum:
        quorum_metrics(status.quorum)

    if status.open_initiative and status.tally:
        item = status.open_initiative
        st.subheader(f"🗳️ #{item.number} {item.title} ({item.majority_rule})")
        st.plotly_chart(tally_chart(status.tally.model_dump()), width="stretch")
        if can(actor.role, Capability.MANAGE_VOTING) and st.button("Close voting"):
            if run(voting.close_initiative, actor, item.id):
                st.rerun()
        if can(actor.role, Capability.DECIDE_UNDECIDED) and st.button("Close without decision"):
            if run(voting.close_initiative, actor, item.id, undecided=True):
                st.rerun()

        with st.expander("Not voted yet"):
            for leg in voting.get_non_voters(actor, item.id).items:
                st.write(f"{leg.name} ({leg.party or '-'})")

    st.subheader("📜 Agenda")
    for item in status.initiatives:
        agenda_row(actor, item)


def agenda_row(actor: Actor, item) -> None:
    icon = RESULT_ICONS.get(item.result, "🟢" if item.status == "open" else "⚪")
    cols = st.columns([5, 2, 1])
    cols[0].write(f"{icon} **#{item.number}** {item.title} - {item.majority_rule}")
    if item.status == "closed":
        cols[1].write(f"{item.result}: {item.favor}/{item.against}/{item.abstain}")

    confirm_key = f"confirm_{item.id}"
    if item.status == "pending" and can(actor.role, Capability.MANAGE_VOTING):
        if cols[2].button("Open", key=f"open_{item.id}"):
            if run(voting.activate_initiative, actor, item.id, confirm_key=confirm_key):
                st.rerun()
        pending = st.session_state.get(confirm_key)
        if pending:
            force = bool(pending.get("requires_force"))
            force_quorum = bool(pending.get("requires_force_quorum"))
            if st.button(f"Confirm opening #{item.number}", key=f"force_{item.id}"):
                opened = run(
                    voting.activate_initiative,
                    actor,
                    item.id,
                    force=force,
                    force_quorum=force_quorum,
                    confirm_key=confirm_key,
                )
                if opened:
                    st.rerun()
    if item.status == "closed" and item.result == "undecided" and can(actor.role, Capability.DECIDE_UNDECIDED):
        if cols[2].button("Reopen", key=f"reopen_{item.id}"):
            if run(voting.reopen_initiative, actor, item.id):
                st.rerun()


def roll_call_tab(actor: Actor, status) -> None:
    """Attendance taking."""
    if status.session is None:
        st.info("No active session.")
        return

    data = attendance.get_attendance(actor, status.session.id)
    if data.roll_call is None:
        st.info("No roll call open.")
        return

    rc = data.roll_call
    st.subheader(f"📋 Roll call {rc.id}" + (" (confirmed)" if rc.confirmed else ""))
    quorum_metrics(data.quorum)

    manage = can(actor.role, Capability.MANAGE_ROLL_CALL)
    marks = {a.legislator_id: a for a in data.items}
    for leg in registry.list_legislators(actor, active_only=True).items:
        mark = marks.get(leg.id)
        presence = mark.presence if mark else "unmarked"
        note = " (late)" if mark and mark.late_arrival else ""
        if mark and mark.justification:
            note = f" (justified: {mark.justification})"
        cols = st.columns([4, 2, 1, 1])
        cols[0].write(f"{leg.name} ({leg.party or '-'})")
        cols[1].write(presence + note)
        if manage:
            if cols[2].button("Present", key=f"p_{rc.id}_{leg.id}"):
                if run(attendance.mark_attendance, actor, rc.id, leg.id, "present"):
                    st.rerun()
            if cols[3].button("Absent", key=f"a_{rc.id}_{leg.id}"):
                if run(attendance.mark_attendance, actor, rc.id, leg.id, "absent"):
                    st.rerun()

    if manage:
        with st.expander("Justify an absence"):
            leg_id = st.number_input("Legislator id", min_value=1, step=1, key=f"just_leg_{rc.id}")
            reason = st.text_input("Reason", key=f"just_reason_{rc.id}")
            if st.button("Record justified absence", key=f"just_{rc.id}"):
                if run(attendance.mark_attendance, actor, rc.id, int(leg_id), "absent", justification=reason):
                    st.rerun()

        cols = st.columns(2)
        if cols[0].button("Confirm roll call", type="primary"):
            if run(attendance.confirm_roll_call, actor, rc.id):
                st.rerun()
        if cols[1].button("Restart roll call"):
            if run(attendance.restart_roll_call, actor, status.session.id):
                st.rerun()


def vote_tab(actor: Actor, status) -> None:
    """Ballot for the calling legislator."""
    if not can(actor.role, Capability.CAST_VOTE):
        st.info(f"Role {actor.role} does not vote.")
        return
    if status.open_initiative is None:
        st.info("No initiative open for voting.")
        return

    item = status.open_initiative
    st.subheader(f"#{item.number} {item.title}")
    cols = st.columns(3)
    for col, choice in zip(cols, ["favor", "against", "abstain"], strict=True):
        if col.button(choice.capitalize(), key=f"vote_{choice}"):
            if run(voting.cast_vote, actor, item.id, choice):
                st.success(f"Vote recorded: {choice}")


def history_tab(actor: Actor, status) -> None:
    """Audit trail and notification feed."""
    if status.session:
        st.subheader("📜 Session history")
        history = session.get_history(actor, status.session.id)
        st.dataframe([h.model_dump() for h in history.items], width="stretch")

    st.subheader("📣 Events")
    events = session.get_events(actor, limit=30)
    st.dataframe(
        [{"id": e.id, "event": e.event, "published": e.published_at is not None} for e in events.items],
        width="stretch",
    )


def main():
    st.title("🏛️ Chamber Console")

    # Acting identity
    role = st.sidebar.selectbox("Role", [r.value for r in Role], index=[r.value for r in Role].index("display"))
    legislator_id = st.sidebar.number_input("Legislator id", min_value=1, value=1, step=1)
    actor = Actor(role=role, id=int(legislator_id))
    if st.sidebar.button("Refresh"):
        st.rerun()

    status = session.get_status(actor)

    if role == Role.DISPLAY:
        chamber_tab(actor, status)
        return

    tab1, tab2, tab3, tab4 = st.tabs(["🏛️ Chamber", "📋 Roll call", "🗳️ Vote", "📜 History"])

    with tab1:
        chamber_tab(actor, status)

    with tab2:
        roll_call_tab(actor, status)

    with tab3:
        vote_tab(actor, status)

    with tab4:
        history_tab(actor, status)


if __name__ == "__main__":
    main()
