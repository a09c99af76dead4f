"""Reader for the DOT artifact written by the mr_hedgehog backend.

Only two line shapes are understood::

    "<id>" [label="<label>"]
    "<from>" -> "<to>"

Everything else, including the ``digraph G {`` header and closing brace, is
skipped. Label text is taken as-is; no DOT escape sequences are interpreted.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from ..errors import ArtifactIoError

logger = logging.getLogger(__name__)

NODE_PATTERN = re.compile(r'"([^"]+)"\s*\[label="([^"]+)"\]')
EDGE_PATTERN = re.compile(r'"([^"]+)"\s*->\s*"([^"]+)"')

MAX_LABEL_LENGTH = 20
ELLIPSIS = "..."


@dataclass(frozen=True)
class NodeDeclaration:
    """A node line: identifier and raw label."""
    id: str
    label: str


@dataclass(frozen=True)
class EdgeDeclaration:
    """An edge line: ordered pair of node identifiers."""
    from_id: str
    to_id: str


@dataclass
class ParseResult:
    """Declarations found in one artifact, in file order."""
    nodes: list[NodeDeclaration] = field(default_factory=list)
    edges: list[EdgeDeclaration] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.nodes


def parse(text: str) -> ParseResult:
    """Parse artifact text into node and edge declarations.

    Lines are matched independently. A line matching the node pattern is
    never also read as an edge.
    """
    result = ParseResult()
    skipped = 0

    # Only "\n" ends a line; other Unicode separators may sit inside labels.
    for line in text.split("\n"):
        line = line.removesuffix("\r")
        node_match = NODE_PATTERN.search(line)
        if node_match:
            result.nodes.append(NodeDeclaration(node_match.group(1), node_match.group(2)))
            continue

        edge_match = EDGE_PATTERN.search(line)
        if edge_match:
            result.edges.append(EdgeDeclaration(edge_match.group(1), edge_match.group(2)))
            continue

        if line.strip():
            skipped += 1

    logger.debug(
        f"Parsed {len(result.nodes)} node and {len(result.edges)} edge declarations "
        f"({skipped} lines ignored)"
    )
    return result


def read_artifact(path: str | Path) -> str:
    """Read the whole artifact as UTF-8 text.

    Raises:
        ArtifactIoError: If the file cannot be opened, read or decoded
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Cannot read artifact {path}: {e}")
        raise ArtifactIoError(path, str(e)) from e


def parse_artifact(path: str | Path) -> ParseResult:
    """Read and parse an artifact file in one step."""
    return parse(read_artifact(path))


def truncate_label(label: str, limit: int = MAX_LABEL_LENGTH) -> str:
    """Shorten a label for display, keeping its tail (``...`` + last ``limit`` chars)."""
    if len(label) <= limit:
        return label
    return ELLIPSIS + label[-limit:]
