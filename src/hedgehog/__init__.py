"""hedgehog - Call graph viewer and driver for the mr_hedgehog analyzer.

hedgehog runs the mr_hedgehog Rust analyzer against a workspace, reads the
DOT artifact it writes, lays the call graph out on a grid and renders it
into a pannable, zoomable view.
"""

__version__ = "0.4.0"
__author__ = "hedgehog contributors"
__description__ = "Call graph viewer and analysis driver for Rust workspaces"

from hedgehog.config import HedgehogConfig

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "HedgehogConfig",
]
