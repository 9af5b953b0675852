"""Agenda file reader - loader output for ``load_agenda``."""

from pathlib import Path

import polars as pl

from app.models import AgendaItem


def read_agenda(path: str | Path) -> list[AgendaItem]:
    """Ordered agenda items from CSV or JSON (``number``, ``title``, optional ``majority_rule``, ``description``, ``presenter``)."""
    path = Path(path)
    df = pl.read_json(path) if path.suffix.lower() == ".json" else pl.read_csv(path)

    missing = {"number", "title"} - set(df.columns)
    if missing:
        raise ValueError(f"Agenda {path.name} lacks columns: {sorted(missing)}")

    return [
        AgendaItem(
            number=int(row["number"]),
            title=str(row["title"]).strip(),
            majority_rule=row.get("majority_rule") or "simple",
            description=row.get("description"),
            presenter=row.get("presenter"),
        )
        for row in df.sort("number").iter_rows(named=True)
    ]
