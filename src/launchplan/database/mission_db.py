"""
===============================================================================
LAUNCHPLAN - Mission Log Database
===============================================================================
SQLite-backed storage of planned missions and their launch windows.

Uses sqlite3 for database operations and pandas for queries and CSV export.
The schema is created from schema.sql when a new database is initialized.

Usage:
    from launchplan.database.mission_db import MissionDatabase

    with MissionDatabase("output/missions.db") as db:
        result_id = db.record_plan(plan)
        df = db.query_results(body="Mars", feasible=True)

===============================================================================
"""

import logging
import sqlite3
from pathlib import Path
from typing import Dict, Optional, Union

import pandas as pd

logger = logging.getLogger(__name__)

_SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"

_TABLES = ("mission_results", "launch_windows")


class MissionDatabase:
    """SQLite database of mission planning results.

    Parameters
    ----------
    db_path : str or Path
        Path to the SQLite database file. Created if it does not exist.
        ``":memory:"`` gives a throwaway in-memory database.
    schema_path : str or Path, optional
        Override path to the SQL schema file.
    """

    def __init__(
        self,
        db_path: Union[str, Path],
        schema_path: Optional[Union[str, Path]] = None,
    ) -> None:
        self.schema_path = Path(schema_path) if schema_path else _SCHEMA_PATH
        if str(db_path) == ":memory:":
            self.db_path = None
            target = ":memory:"
        else:
            self.db_path = Path(db_path)
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            target = str(self.db_path)

        self._conn = sqlite3.connect(target)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self.create_tables()

    # =========================================================================
    # Schema Management
    # =========================================================================

    def create_tables(self) -> None:
        """Apply the SQL schema (idempotent).

        Raises
        ------
        FileNotFoundError
            If the schema SQL file cannot be found.
        """
        if not self.schema_path.exists():
            raise FileNotFoundError(f"Schema file not found: {self.schema_path}")
        self._conn.executescript(self.schema_path.read_text(encoding="utf-8"))
        self._conn.commit()

    # =========================================================================
    # Insert Operations
    # =========================================================================

    def record_plan(self, plan) -> int:
        """Store a MissionPlan and its launch windows.

        Parameters
        ----------
        plan : MissionPlan

        Returns
        -------
        int
            The ``result_id`` of the inserted row.
        """
        data = plan.to_dict()
        columns = [
            "vehicle", "body", "payload_kg", "start_date",
            "ascent_dv", "transfer_dv", "capture_dv", "total_required",
            "base_capability", "strategy", "bonus_dv", "tankers",
            "final_capability", "final_margin", "feasible", "rationale",
        ]
        values = [data[c] for c in columns]
        values[columns.index("feasible")] = int(data["feasible"])

        with self._conn:
            cursor = self._conn.execute(
                f"INSERT INTO mission_results ({', '.join(columns)}) "
                f"VALUES ({', '.join('?' for _ in columns)})",
                values,
            )
            result_id = cursor.lastrowid
            self._conn.executemany(
                "INSERT INTO launch_windows (result_id, seq, launch_date, arrival_date) "
                "VALUES (?, ?, ?, ?)",
                [
                    (result_id, i + 1, w["launch_date"], w["arrival_date"])
                    for i, w in enumerate(data["windows"])
                ],
            )
        logger.debug("Recorded plan %s -> %s as result %d", data["vehicle"], data["body"], result_id)
        return result_id

    # =========================================================================
    # Query Operations
    # =========================================================================

    def query_results(
        self,
        body: Optional[str] = None,
        feasible: Optional[bool] = None,
    ) -> pd.DataFrame:
        """Query stored results, optionally filtered.

        Parameters
        ----------
        body : str, optional
            Only results for this target body.
        feasible : bool, optional
            Only feasible (True) or infeasible (False) results.

        Returns
        -------
        pd.DataFrame
            Rows of ``mission_results`` ordered by ``result_id``; the
            ``feasible`` column is boolean.
        """
        clauses, params = [], []
        if body is not None:
            clauses.append("body = ?")
            params.append(body)
        if feasible is not None:
            clauses.append("feasible = ?")
            params.append(int(feasible))
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        df = pd.read_sql_query(
            f"SELECT * FROM mission_results{where} ORDER BY result_id",
            self._conn,
            params=tuple(params),
        )
        df["feasible"] = df["feasible"].astype(bool)
        return df

    def get_windows(self, result_id: int) -> pd.DataFrame:
        """Launch windows stored for one result, in sequence order."""
        return pd.read_sql_query(
            "SELECT seq, launch_date, arrival_date FROM launch_windows "
            "WHERE result_id = ? ORDER BY seq",
            self._conn,
            params=(result_id,),
        )

    # =========================================================================
    # Export Operations
    # =========================================================================

    def export_to_csv(self, output_dir: Union[str, Path]) -> Dict[str, str]:
        """Export every table to ``<output_dir>/<table>.csv``.

        Returns
        -------
        dict
            Mapping of table name to the absolute path of the exported CSV.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        exported = {}
        for table in _TABLES:
            df = pd.read_sql_query(f"SELECT * FROM {table}", self._conn)
            csv_path = output_dir / f"{table}.csv"
            df.to_csv(csv_path, index=False)
            exported[table] = str(csv_path.resolve())
        logger.info("Exported %d table(s) to %s", len(exported), output_dir)
        return exported

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def get_table_sizes(self) -> Dict[str, int]:
        """Return row counts for all tables."""
        return {
            t: self._conn.execute(f"SELECT COUNT(*) FROM {t}").fetchone()[0]
            for t in _TABLES
        }

    def close(self) -> None:
        """Commit and close the database connection."""
        if self._conn:
            self._conn.commit()
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "MissionDatabase":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        sizes = self.get_table_sizes() if self._conn else {}
        return f"MissionDatabase(path='{self.db_path or ':memory:'}', rows={sizes})"
