"""Pytest configuration and fixtures for hedgehog tests."""

import stat
import sys
import textwrap
from pathlib import Path

import pytest

from hedgehog.config import BackendConfig

BACKEND_PREAMBLE = """\
import argparse
import sys
import time

parser = argparse.ArgumentParser()
parser.add_argument("--workspace")
parser.add_argument("--output")
parser.add_argument("--engine")
parser.add_argument("--format")
parser.add_argument("--store")
parser.add_argument("--expand-paths", action="store_true")
parser.add_argument("--debug", action="store_true")
args = parser.parse_args()
"""


@pytest.fixture
def scenario_a():
    """Two nodes joined by one call."""
    return '"a" [label="main@bin_demo"]\n"b" [label="run_trait@bin_demo"]\n"a" -> "b"'


@pytest.fixture
def sample_dot():
    """A small artifact as written by the backend."""
    return textwrap.dedent("""\
        digraph G {
            "main" [label="main@bin_demo"];
            "run" [label="run_trait@bin_demo"];
            "helper" [label="really_long_function_name@some_crate"];
            "main" -> "run";
            "run" -> "helper";
            "main" -> "missing";
        }
    """)


@pytest.fixture
def workspace_dir(tmp_path):
    """Minimal Rust workspace with a manifest and two sources."""
    root = tmp_path / "ws"
    (root / "src").mkdir(parents=True)
    (root / "Cargo.toml").write_text('[workspace]\nmembers = ["bin_demo"]\n')
    (root / "build.rs").write_text("fn main() {}\n")
    (root / "src" / "main.rs").write_text("fn main() {}\n")
    (root / "src" / "lib.rs").write_text("pub fn run() {}\n")
    (root / "README.md").write_text("demo\n")
    return root


@pytest.fixture
def make_backend(tmp_path):
    """Factory writing an executable fake mr_hedgehog with the given body."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()

    def factory(body: str, name: str = "mr_hedgehog") -> Path:
        script = bin_dir / name
        script.write_text(f"#!{sys.executable}\n{BACKEND_PREAMBLE}{textwrap.dedent(body)}")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return factory


@pytest.fixture
def backend_config(tmp_path):
    """Backend section writing its artifact inside the test directory."""
    def factory(executable: Path | None = None, **overrides) -> BackendConfig:
        values = {
            "executable": str(executable) if executable else None,
            "output": str(tmp_path / "out" / "graph.dot"),
            "search_paths": [],
        }
        values.update(overrides)
        return BackendConfig(**values)

    return factory
