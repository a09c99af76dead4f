"""Messages the orchestrator sends to the viewport."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Load:
    """Load the artifact at ``path``."""
    path: Path
    status: str = "Analysis complete!"


@dataclass(frozen=True)
class ShowMessage:
    """Switch to the placeholder with ``text``."""
    text: str
    status: str = ""


@dataclass(frozen=True)
class Clear:
    """Drop all content."""
    status: str = "Results cleared"


ViewMessage = Load | ShowMessage | Clear
