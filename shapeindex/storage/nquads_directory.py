"""Quad sink writing one N-Quads file per document."""

import logging
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List, Set, Tuple, Union

from shapeindex.iri import strip_fragment
from shapeindex.models import Quad
from shapeindex.storage.base import QuadSink

logger = logging.getLogger(__name__)

FILE_EXTENSION = ".nq"


def iri_to_path(output_dir: Path, iri: str) -> Path:
    """
    Map a document IRI to a file below ``output_dir``.

    The scheme and fragment are dropped and ``.nq`` is appended unless the
    IRI already ends with it, e.g. ``http://host/pods/42/shapetree.nq`` maps
    to ``<output_dir>/host/pods/42/shapetree.nq``.

    Args:
        output_dir: Root output directory
        iri: Document IRI

    Returns:
        Target file path

    Raises:
        ValueError: If the IRI has no path or resolves outside ``output_dir``
    """
    relative = strip_fragment(iri)
    scheme_end = relative.find("://")
    if scheme_end >= 0:
        relative = relative[scheme_end + 3:]
    relative = relative.replace(":", "_").strip("/")
    if not relative:
        raise ValueError(f"Cannot map IRI to a file: {iri}")
    if not relative.endswith(FILE_EXTENSION):
        relative += FILE_EXTENSION
    path = output_dir / relative
    if not path.resolve().is_relative_to(output_dir.resolve()):
        raise ValueError(f"IRI maps outside the output directory: {iri}")
    return path


class NQuadsDirectorySink(QuadSink):
    """
    Write quads to N-Quads files laid out like the document IRIs.

    A file is truncated the first time this sink writes to it, then appended
    to, so running again into the same directory replaces earlier output.
    """

    def __init__(self, output_dir: Union[str, Path]):
        """
        Initialize the sink.

        Args:
            output_dir: Directory receiving the files (created if missing)
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.files_written: Dict[str, Path] = {}
        self._opened: Set[Path] = set()
        logger.info(f"NQuadsDirectorySink writing to {self.output_dir}")

    def _append(self, group_key: str, path: Path, lines: List[str]):
        path.parent.mkdir(parents=True, exist_ok=True)
        mode = "a" if path in self._opened else "w"
        with open(path, mode, encoding="utf-8") as f:
            f.writelines(lines)
        self._opened.add(path)
        self.files_written[group_key] = path

    def push(self, group_key: str, quad: Quad):
        self._append(group_key, iri_to_path(self.output_dir, group_key), [f"{quad.to_nquad()}\n"])

    def push_group(self, pushes: Iterable[Tuple[str, Quad]]) -> int:
        # Paths are checked before anything is written; one write per file
        lines: Dict[str, List[str]] = defaultdict(list)
        count = 0
        for group_key, quad in pushes:
            lines[group_key].append(f"{quad.to_nquad()}\n")
            count += 1
        paths = {group_key: iri_to_path(self.output_dir, group_key) for group_key in lines}
        for group_key, group_lines in lines.items():
            self._append(group_key, paths[group_key], group_lines)
        return count
