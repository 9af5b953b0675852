"""Session API."""

from web.api.session.views import (
    close_session,
    get_agenda,
    get_events,
    get_history,
    get_status,
    list_sessions,
    load_agenda,
    pause_session,
    resume_session,
    start_session,
)

__all__ = [
    "load_agenda",
    "start_session",
    "pause_session",
    "resume_session",
    "close_session",
    "get_status",
    "list_sessions",
    "get_agenda",
    "get_history",
    "get_events",
]
