"""Data validation functions."""

import duckdb


def validate_chamber(conn: duckdb.DuckDBPyConnection) -> dict:
    """Check the stored state against the chamber invariants."""
    issues = []
    stats = {}

    stats["legislators"] = conn.execute("SELECT COUNT(*) FROM legislator WHERE active").fetchone()[0]
    if stats["legislators"] == 0:
        issues.append("No active legislators")

    active = [r[0] for r in conn.execute("SELECT id FROM session WHERE state IN ('started', 'paused')").fetchall()]
    stats["active_sessions"] = len(active)
    if len(active) > 1:
        issues.append(f"{len(active)} sessions active at once: {active}")

    slot = conn.execute("SELECT session_id FROM session_slot WHERE slot = 1").fetchone()
    slot_id = slot[0] if slot else None
    if sorted(active) != ([slot_id] if slot_id is not None else []):
        issues.append(f"Active session slot ({slot_id}) disagrees with session states {active}")

    multi_open = conn.execute(
        """
        SELECT session_id, COUNT(*) FROM initiative
        WHERE is_open GROUP BY session_id HAVING COUNT(*) > 1
        """
    ).fetchall()
    for session_id, n in multi_open:
        issues.append(f"Session {session_id} has {n} open initiatives")

    pointer_mismatch = conn.execute(
        """
        SELECT s.id FROM session s
        LEFT JOIN initiative i ON i.session_id = s.id AND i.is_open
        WHERE s.open_initiative_id IS DISTINCT FROM i.id
        """
    ).fetchall()
    for (session_id,) in pointer_mismatch:
        issues.append(f"Session {session_id} open initiative pointer disagrees with initiative flags")

    open_outside = conn.execute(
        """
        SELECT i.id FROM initiative i JOIN session s ON s.id = i.session_id
        WHERE i.is_open AND s.state NOT IN ('started', 'paused')
        """
    ).fetchall()
    if open_outside:
        issues.append(f"{len(open_outside)} initiatives open outside an active session")

    unresolved = conn.execute("SELECT COUNT(*) FROM initiative WHERE is_closed AND result IS NULL").fetchone()[0]
    if unresolved:
        issues.append(f"{unresolved} closed initiatives without result")

    late_votes = conn.execute(
        """
        SELECT COUNT(*) FROM vote v JOIN initiative i ON i.id = v.initiative_id
        WHERE i.is_closed AND v.cast_at > i.closed_at
        """
    ).fetchone()[0]
    if late_votes:
        issues.append(f"{late_votes} votes cast after their initiative closed")

    empty_started = conn.execute(
        """
        SELECT COUNT(*) FROM session s
        WHERE s.state <> 'prepared' AND NOT EXISTS (SELECT 1 FROM initiative i WHERE i.session_id = s.id)
        """
    ).fetchone()[0]
    if empty_started:
        issues.append(f"{empty_started} sessions started without initiatives")

    stats["votes"] = conn.execute("SELECT COUNT(*) FROM vote").fetchone()[0]
    stats["pending_events"] = conn.execute("SELECT COUNT(*) FROM outbox WHERE published_at IS NULL").fetchone()[0]

    return {
        "valid": len(issues) == 0,
        "stats": stats,
        "issues": issues,
    }
