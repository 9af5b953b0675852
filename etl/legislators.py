"""Legislator roster import - CSV or JSON into the registry."""

from pathlib import Path

import duckdb
import polars as pl
from loguru import logger

ROSTER_COLUMNS = ["id", "name", "party", "seat_order", "active"]


def read_roster(path: str | Path) -> pl.DataFrame:
    """Read a roster file. Requires ``id`` and ``name``; ``party``, ``seat_order`` and ``active`` are optional."""
    path = Path(path)
    if path.suffix.lower() == ".json":
        df = pl.read_json(path)
    else:
        df = pl.read_csv(path)

    missing = {"id", "name"} - set(df.columns)
    if missing:
        raise ValueError(f"Roster {path.name} lacks columns: {sorted(missing)}")

    defaults = {"party": pl.lit(None, dtype=pl.Utf8), "seat_order": pl.lit(None, dtype=pl.Int32), "active": pl.lit(True)}
    df = df.with_columns([expr.alias(col) for col, expr in defaults.items() if col not in df.columns])

    df = df.select(
        pl.col("id").cast(pl.Int32),
        pl.col("name").cast(pl.Utf8).str.strip_chars(),
        pl.col("party").cast(pl.Utf8),
        pl.col("seat_order").cast(pl.Int32),
        pl.col("active").cast(pl.Boolean).fill_null(True),
    )
    dupes = df.filter(pl.col("id").is_duplicated())["id"].unique().to_list()
    if dupes:
        raise ValueError(f"Roster {path.name} repeats legislator ids: {sorted(dupes)}")
    return df


def import_roster(conn: duckdb.DuckDBPyConnection, path: str | Path) -> int:
    """Upsert the roster (by id) in one transaction. Returns rows imported."""
    df = read_roster(path)
    conn.execute("BEGIN TRANSACTION")
    try:
        conn.register("roster_df", df)
        conn.execute(f"INSERT OR REPLACE INTO legislator ({', '.join(ROSTER_COLUMNS)}) SELECT * FROM roster_df")
        conn.unregister("roster_df")
        conn.execute("COMMIT")
    except Exception:
        conn.execute("ROLLBACK")
        raise
    logger.info("Legislators: {} imported from {}", df.height, Path(path).name)
    return df.height
