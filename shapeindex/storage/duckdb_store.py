"""DuckDB-backed quad sink."""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple, Union

import duckdb
from rdflib.util import from_n3

from shapeindex.models import Quad, term_to_nt
from shapeindex.storage.base import QuadSink

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class DuckDBQuadSink(QuadSink):
    """
    Store generated quads in a DuckDB table, one row per quad.

    Terms are stored in their N-Triples rendering; ``position`` keeps the push
    order inside a group so documents are read back exactly as produced.
    Rows a group holds from an earlier run are deleted the first time this
    sink writes to that group.
    """

    def __init__(self, db_path: str = "shapeindex.duckdb"):
        """
        Initialize DuckDB connection and create schema.

        Args:
            db_path: Path to the DuckDB database file (":memory:" for RAM)
        """
        self.db_path = db_path
        self.conn = duckdb.connect(db_path)
        self.replaced_groups: Set[str] = set()
        self._create_schema()
        logger.info(f"DuckDBQuadSink initialized at {db_path}")

    def _create_schema(self):
        """Create the quads table and its index."""
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS quads (
                group_iri VARCHAR NOT NULL,
                subject VARCHAR NOT NULL,
                predicate VARCHAR NOT NULL,
                object VARCHAR NOT NULL,
                graph VARCHAR,
                position BIGINT NOT NULL
            )
        """)
        self.conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_quads_group ON quads(group_iri)"
        )
        self.conn.commit()

    # ============================================================================
    # Writes
    # ============================================================================

    def _next_position(self, group_iri: str) -> int:
        result = self.conn.execute("""
            SELECT COALESCE(MAX(position) + 1, 0) FROM quads WHERE group_iri = ?
        """, [group_iri]).fetchone()
        return int(result[0])

    @staticmethod
    def _to_row(group_iri: str, quad: Quad, position: int) -> list:
        return [
            group_iri,
            term_to_nt(quad.subject),
            term_to_nt(quad.predicate),
            term_to_nt(quad.object),
            term_to_nt(quad.graph) if quad.graph is not None else None,
            position,
        ]

    def _insert(self, pushes: Iterable[Tuple[str, Quad]]) -> Tuple[int, Set[str]]:
        positions = {}
        rows = []
        replaced = set()
        for group_iri, quad in pushes:
            if group_iri not in positions:
                if group_iri not in self.replaced_groups:
                    self.conn.execute("DELETE FROM quads WHERE group_iri = ?", [group_iri])
                    replaced.add(group_iri)
                positions[group_iri] = self._next_position(group_iri)
            rows.append(self._to_row(group_iri, quad, positions[group_iri]))
            positions[group_iri] += 1

        if rows:
            self.conn.executemany("""
                INSERT INTO quads (group_iri, subject, predicate, object, graph, position)
                VALUES (?, ?, ?, ?, ?, ?)
            """, rows)
        return len(rows), replaced

    def push(self, group_key: str, quad: Quad):
        self.push_group([(group_key, quad)])

    def push_group(self, pushes: Iterable[Tuple[str, Quad]]) -> int:
        """
        Insert a batch of quads in a single transaction.

        Args:
            pushes: (group IRI, quad) pairs

        Returns:
            Number of quads inserted
        """
        self.conn.begin()
        try:
            count, replaced = self._insert(list(pushes))
        except Exception as e:
            self.conn.rollback()
            logger.error(f"Rolled back quad group: {e}")
            raise
        self.conn.commit()
        self.replaced_groups.update(replaced)
        return count

    # ============================================================================
    # Reads
    # ============================================================================

    def get_group(self, group_iri: str) -> List[Quad]:
        """
        Read back the quads of one document in push order.

        Args:
            group_iri: Document IRI

        Returns:
            List of quads (empty if unknown)
        """
        results = self.conn.execute("""
            SELECT subject, predicate, object, graph
            FROM quads
            WHERE group_iri = ?
            ORDER BY position
        """, [group_iri]).fetchall()

        return [
            Quad(
                from_n3(subject),
                from_n3(predicate),
                from_n3(obj),
                from_n3(graph) if graph is not None else None,
            )
            for subject, predicate, obj, graph in results
        ]

    def list_groups(self) -> List[str]:
        """List stored document IRIs in alphabetical order."""
        results = self.conn.execute(
            "SELECT DISTINCT group_iri FROM quads ORDER BY group_iri"
        ).fetchall()
        return [row[0] for row in results]

    def count_quads(self, group_iri: Optional[str] = None) -> int:
        """Count stored quads, optionally for one document."""
        if group_iri is not None:
            result = self.conn.execute(
                "SELECT COUNT(*) FROM quads WHERE group_iri = ?", [group_iri]
            ).fetchone()
        else:
            result = self.conn.execute("SELECT COUNT(*) FROM quads").fetchone()
        return int(result[0])

    def export_nquads(self, group_iri: str, output_path: Union[str, Path]) -> int:
        """
        Write one stored document as an N-Quads file.

        Args:
            group_iri: Document IRI
            output_path: Target file

        Returns:
            Number of quads written
        """
        quads = self.get_group(group_iri)
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            for quad in quads:
                f.write(f"{quad.to_nquad()}\n")
        logger.info(f"Exported {len(quads)} quads of {group_iri} to {path}")
        return len(quads)

    def close(self):
        """Close database connection."""
        self.conn.close()
        logger.info("DuckDBQuadSink closed")
