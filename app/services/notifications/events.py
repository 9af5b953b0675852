"""Notification event names."""

from enum import StrEnum


class EventName(StrEnum):
    AGENDA_LOADED = "AgendaLoaded"
    SESSION_STARTED = "SessionStarted"
    SESSION_PAUSED = "SessionPaused"
    SESSION_RESUMED = "SessionResumed"
    SESSION_CLOSED = "SessionClosed"
    ROLL_CALL_OPENED = "RollCallOpened"
    ATTENDANCE_UPDATED = "AttendanceUpdated"
    ROLL_CALL_CONFIRMED = "RollCallConfirmed"
    INITIATIVE_OPENED = "InitiativeOpened"
    INITIATIVE_CLOSED = "InitiativeClosed"
    INITIATIVE_REOPENED = "InitiativeReopened"
    VOTE_RECORDED = "VoteRecorded"
    VOTE_REMOVED = "VoteRemoved"
    LEGISLATOR_UPDATED = "LegislatorUpdated"
