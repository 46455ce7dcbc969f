"""DuckDB-backed storage for annotated proteins, fragments and motif matches."""

from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

import duckdb
import polars as pl

from protein_annotator.errors import ProteinNotFoundError, StorageError

PROTEIN_TABLE_NAME = "proteins"
FRAGMENT_TABLE_NAME = "fragments"
MOTIF_TABLE_NAME = "motifs"

_SCHEMA = [
    "CREATE SEQUENCE IF NOT EXISTS seq_protein_id START 1",
    "CREATE SEQUENCE IF NOT EXISTS seq_fragment_id START 1",
    "CREATE SEQUENCE IF NOT EXISTS seq_motif_id START 1",
    """
    CREATE TABLE IF NOT EXISTS proteins (
        id BIGINT PRIMARY KEY DEFAULT nextval('seq_protein_id'),
        name VARCHAR NOT NULL,
        description VARCHAR NOT NULL DEFAULT '',
        molecular_weight DOUBLE NOT NULL,
        sequence_length INTEGER NOT NULL,
        created_at TIMESTAMP NOT NULL,
        updated_at TIMESTAMP NOT NULL,
        sequence_url VARCHAR
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS fragments (
        id BIGINT PRIMARY KEY DEFAULT nextval('seq_fragment_id'),
        protein_id BIGINT NOT NULL,
        sequence VARCHAR NOT NULL,
        start_position INTEGER NOT NULL,
        end_position INTEGER NOT NULL,
        secondary_structure VARCHAR NOT NULL,
        url VARCHAR
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS motifs (
        id BIGINT PRIMARY KEY DEFAULT nextval('seq_motif_id'),
        fragment_id BIGINT NOT NULL,
        motif_pattern VARCHAR NOT NULL,
        motif_type VARCHAR NOT NULL,
        start_position INTEGER NOT NULL,
        end_position INTEGER NOT NULL,
        confidence_score DOUBLE NOT NULL
    )
    """,
]


def _utc_now() -> datetime:
    """Current UTC time as a naive datetime (DuckDB TIMESTAMP)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class AnnotationTransaction:
    """
    One unit of work against the annotation tables.

    Runs on its own DuckDB cursor so that concurrent transactions for
    different proteins do not share transaction state. Every DuckDB
    failure is re-raised as StorageError.
    """

    def __init__(self, conn: duckdb.DuckDBPyConnection):
        self.conn = conn
        self.active = False

    def begin(self) -> "AnnotationTransaction":
        try:
            self.conn.begin()
        except duckdb.Error as e:
            raise StorageError(f"Failed to begin transaction: {e}") from e
        self.active = True
        return self

    def commit(self) -> None:
        try:
            self.conn.commit()
        except duckdb.Error as e:
            raise StorageError(f"Failed to commit transaction: {e}") from e
        finally:
            self.active = False

    def rollback(self) -> None:
        try:
            self.conn.rollback()
        except duckdb.Error as e:
            raise StorageError(f"Failed to roll back transaction: {e}") from e
        finally:
            self.active = False

    def close(self) -> None:
        """Close the transaction cursor, rolling back if still open."""
        if self.conn is None:
            return
        try:
            if self.active:
                self.rollback()
        finally:
            self.conn.close()
            self.conn = None

    def _fetch_one(self, query: str, params: list) -> tuple:
        try:
            row = self.conn.execute(query, params).fetchone()
        except duckdb.Error as e:
            raise StorageError(str(e)) from e
        if row is None:
            raise StorageError(f"Statement returned no row: {query.split()[0]}")
        return row

    def insert_protein(
        self,
        name: str,
        description: str,
        molecular_weight: float,
        sequence_length: int,
    ) -> tuple[int, datetime, datetime]:
        """
        Insert a protein root record.

        Returns:
            (id, created_at, updated_at) generated by the store
        """
        now = _utc_now()
        row = self._fetch_one(
            """
            INSERT INTO proteins
                (name, description, molecular_weight, sequence_length,
                 created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            RETURNING id, created_at, updated_at
            """,
            [name, description, molecular_weight, sequence_length, now, now],
        )
        return row[0], row[1], row[2]

    def set_protein_url(self, protein_id: int, sequence_url: str) -> None:
        self._fetch_one(
            "UPDATE proteins SET sequence_url = ? WHERE id = ? RETURNING id",
            [sequence_url, protein_id],
        )

    def insert_fragment(
        self,
        protein_id: int,
        sequence: str,
        start_position: int,
        end_position: int,
        secondary_structure: str,
    ) -> int:
        """Insert a fragment row and return its generated id."""
        row = self._fetch_one(
            """
            INSERT INTO fragments
                (protein_id, sequence, start_position, end_position,
                 secondary_structure)
            VALUES (?, ?, ?, ?, ?)
            RETURNING id
            """,
            [protein_id, sequence, start_position, end_position, secondary_structure],
        )
        return row[0]

    def set_fragment_url(self, fragment_id: int, url: str) -> None:
        self._fetch_one(
            "UPDATE fragments SET url = ? WHERE id = ? RETURNING id",
            [url, fragment_id],
        )

    def insert_motif(
        self,
        fragment_id: int,
        motif_pattern: str,
        motif_type: str,
        start_position: int,
        end_position: int,
        confidence_score: float,
    ) -> int:
        """Insert a motif match row and return its generated id."""
        row = self._fetch_one(
            """
            INSERT INTO motifs
                (fragment_id, motif_pattern, motif_type, start_position,
                 end_position, confidence_score)
            VALUES (?, ?, ?, ?, ?, ?)
            RETURNING id
            """,
            [fragment_id, motif_pattern, motif_type, start_position,
             end_position, confidence_score],
        )
        return row[0]


class AnnotationStore:
    """
    DuckDB storage for the protein -> fragment -> motif aggregate.

    Identifiers come from DuckDB sequences. Referential integrity is owned
    here: delete_protein removes a protein together with its fragments and
    their motif matches in a single transaction.
    """

    def __init__(self, db_path: Path):
        """
        Initialize AnnotationStore with a DuckDB database.

        Args:
            db_path: Path to DuckDB database file. Parent directories
                     are created automatically.

        Raises:
            StorageError: If the file cannot be opened as a DuckDB database
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self.conn = None
        try:
            self.conn = duckdb.connect(str(self.db_path))
            for statement in _SCHEMA:
                self.conn.execute(statement)
        except duckdb.Error as e:
            self.close()
            raise StorageError(f"Failed to open database {self.db_path}: {e}") from e

    def begin(self) -> AnnotationTransaction:
        """Open a new transaction on a dedicated cursor."""
        try:
            cursor = self.conn.cursor()
        except duckdb.Error as e:
            raise StorageError(f"Failed to open cursor: {e}") from e

        txn = AnnotationTransaction(cursor)
        try:
            return txn.begin()
        except StorageError:
            cursor.close()
            raise

    @contextmanager
    def transaction(self) -> Iterator[AnnotationTransaction]:
        """Context manager: commit on success, roll back on any exception."""
        txn = self.begin()
        try:
            yield txn
            txn.commit()
        finally:
            txn.close()

    def get_protein(self, protein_id: int) -> Optional[dict]:
        """
        Fetch one protein row.

        Returns:
            Row as a dict, or None if no protein has this id
        """
        df = self.execute_query("SELECT * FROM proteins WHERE id = ?", [protein_id])
        if df.is_empty():
            return None
        return df.row(0, named=True)

    def list_proteins(self) -> pl.DataFrame:
        """All proteins ordered by creation time."""
        return self.execute_query("SELECT * FROM proteins ORDER BY created_at ASC, id ASC")

    def load_fragments(self, protein_id: int) -> pl.DataFrame:
        """Fragments of one protein ordered by start position."""
        return self.execute_query(
            """
            SELECT * FROM fragments
            WHERE protein_id = ?
            ORDER BY start_position ASC
            """,
            [protein_id],
        )

    def load_motifs(self, protein_id: int) -> pl.DataFrame:
        """Motif matches of all fragments belonging to one protein."""
        return self.execute_query(
            """
            SELECT m.*
            FROM motifs m
            INNER JOIN fragments f ON m.fragment_id = f.id
            WHERE f.protein_id = ?
            ORDER BY m.fragment_id ASC, m.id ASC
            """,
            [protein_id],
        )

    def motif_types(self, fragment_id: int) -> list[str]:
        """Distinct motif types recorded for a fragment."""
        rows = self.conn.execute(
            """
            SELECT DISTINCT motif_type
            FROM motifs
            WHERE fragment_id = ?
            ORDER BY motif_type
            """,
            [fragment_id],
        ).fetchall()
        return [row[0] for row in rows]

    def count_rows(self, table_name: str) -> int:
        if table_name not in (PROTEIN_TABLE_NAME, FRAGMENT_TABLE_NAME, MOTIF_TABLE_NAME):
            raise ValueError(f"Unknown table: {table_name}")
        return self.conn.execute(f"SELECT COUNT(*) FROM {table_name}").fetchone()[0]

    def delete_protein(self, protein_id: int) -> dict[str, int]:
        """
        Delete a protein and everything beneath it.

        Args:
            protein_id: Protein identifier

        Returns:
            Number of deleted rows per table

        Raises:
            ProteinNotFoundError: If no protein has this id
            StorageError: If any delete fails (nothing is removed)
        """
        with self.transaction() as txn:
            try:
                motifs = txn.conn.execute(
                    """
                    DELETE FROM motifs
                    WHERE fragment_id IN (
                        SELECT id FROM fragments WHERE protein_id = ?
                    )
                    RETURNING id
                    """,
                    [protein_id],
                ).fetchall()
                fragments = txn.conn.execute(
                    "DELETE FROM fragments WHERE protein_id = ? RETURNING id",
                    [protein_id],
                ).fetchall()
                proteins = txn.conn.execute(
                    "DELETE FROM proteins WHERE id = ? RETURNING id",
                    [protein_id],
                ).fetchall()
            except duckdb.Error as e:
                raise StorageError(f"Failed to delete protein {protein_id}: {e}") from e

            if not proteins:
                raise ProteinNotFoundError(f"Protein with id {protein_id} does not exist")

        return {
            PROTEIN_TABLE_NAME: len(proteins),
            FRAGMENT_TABLE_NAME: len(fragments),
            MOTIF_TABLE_NAME: len(motifs),
        }

    def execute_query(
        self,
        query: str,
        params: Optional[list] = None
    ) -> pl.DataFrame:
        """
        Execute arbitrary SQL query and return polars DataFrame.

        Args:
            query: SQL query to execute
            params: Optional query parameters

        Returns:
            Query results as polars DataFrame
        """
        if params:
            result = self.conn.execute(query, params)
        else:
            result = self.conn.execute(query)
        return result.pl()

    def close(self) -> None:
        """Close the DuckDB connection."""
        if self.conn:
            self.conn.close()
            self.conn = None

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - closes connection."""
        self.close()
        return False

    @classmethod
    def from_config(cls, config: "AnnotatorConfig") -> "AnnotationStore":
        """
        Create AnnotationStore from an AnnotatorConfig.

        Args:
            config: AnnotatorConfig instance

        Returns:
            AnnotationStore instance
        """
        return cls(config.duckdb_path)
