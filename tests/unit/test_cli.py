"""Unit tests for the hedgehog CLI commands."""

from typer.testing import CliRunner

from hedgehog import __version__
from hedgehog.cli import app

runner = CliRunner()

WRITE_ARTIFACT = """
import os
os.makedirs(os.path.dirname(args.output), exist_ok=True)
with open(args.output, "w", encoding="utf-8") as f:
    f.write('"a" [label="main@bin_demo"]\\n"b" [label="run_trait@bin_demo"]\\n"a" -> "b"\\n')
"""

PANIC = """
sys.stderr.write("engine panicked: unresolved symbol")
sys.exit(2)
"""


class TestVersion:
    """Test global options."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestViewCommand:
    """Test rendering an existing artifact."""

    def test_view_artifact(self, tmp_path, scenario_a):
        artifact = tmp_path / "graph.dot"
        artifact.write_text(scenario_a)

        result = runner.invoke(app, ["view", str(artifact)])

        assert result.exit_code == 0
        assert "2 nodes, 1 edges" in result.stdout
        assert "main@bin_demo" in result.stdout

    def test_view_writes_svg(self, tmp_path, scenario_a):
        artifact = tmp_path / "graph.dot"
        artifact.write_text(scenario_a)
        svg = tmp_path / "graph.svg"

        result = runner.invoke(app, ["view", str(artifact), "--svg", str(svg), "--zoom", "2", "--no-nodes"])

        assert result.exit_code == 0
        assert svg.read_text(encoding="utf-8").startswith("<svg ")

    def test_view_empty_artifact(self, tmp_path):
        artifact = tmp_path / "graph.dot"
        artifact.write_text("digraph G {\n}\n")

        result = runner.invoke(app, ["view", str(artifact)])

        assert result.exit_code == 0
        assert "No nodes found" in result.stdout

    def test_view_missing_artifact(self, tmp_path):
        result = runner.invoke(app, ["view", str(tmp_path / "missing.dot")])

        assert result.exit_code == 1
        assert "Failed to open output file" in result.stdout

    def test_invalid_config(self, tmp_path, scenario_a):
        artifact = tmp_path / "graph.dot"
        artifact.write_text(scenario_a)
        config = tmp_path / "bad.json"
        config.write_text("{ nope")

        result = runner.invoke(app, ["view", str(artifact), "-c", str(config)])

        assert result.exit_code == 1
        assert "Invalid JSON" in result.stdout


class TestAnalyzeCommand:
    """Test running the backend from the command line."""

    def test_analyze_success(self, tmp_path, make_backend, workspace_dir):
        backend = make_backend(WRITE_ARTIFACT)
        output = tmp_path / "out" / "graph.dot"

        result = runner.invoke(app, [
            "analyze", str(workspace_dir), "--backend", str(backend), "--output", str(output)
        ])

        assert result.exit_code == 0
        assert "Analysis complete!" in result.stdout
        assert "2 nodes, 1 edges" in result.stdout
        assert output.exists()

    def test_analyze_failure(self, tmp_path, make_backend, workspace_dir):
        backend = make_backend(PANIC)

        result = runner.invoke(app, [
            "analyze", str(workspace_dir), "--backend", str(backend), "-o", str(tmp_path / "g.dot")
        ])

        assert result.exit_code == 1
        assert "engine panicked" in result.stdout
        assert "Analysis failed" in result.stdout

    def test_analyze_backend_missing(self, tmp_path, workspace_dir):
        result = runner.invoke(app, [
            "analyze", str(workspace_dir), "--backend", str(tmp_path / "nope"), "-o", str(tmp_path / "g.dot")
        ])

        assert result.exit_code == 1
        assert "Backend not found" in result.stdout

    def test_analyze_missing_workspace(self, tmp_path):
        result = runner.invoke(app, ["analyze", str(tmp_path / "nowhere")])

        assert result.exit_code == 1
        assert "Error:" in result.stdout


class TestFilesCommand:
    """Test listing workspace sources."""

    def test_files(self, workspace_dir):
        result = runner.invoke(app, ["files", str(workspace_dir)])

        assert result.exit_code == 0
        assert "Loaded:" in result.stdout
        assert "build.rs" in result.stdout
        assert "src/main.rs" in result.stdout
        assert "README.md" not in result.stdout

    def test_files_missing(self, tmp_path):
        result = runner.invoke(app, ["files", str(tmp_path / "nowhere")])

        assert result.exit_code == 1


class TestSessionCommand:
    """Test the interactive session loop."""

    def test_run_without_workspace(self):
        result = runner.invoke(app, ["session"], input="run\nquit\n")

        assert result.exit_code == 0
        assert "select a workspace first" in result.stdout

    def test_open_run_wait(self, tmp_path, make_backend, workspace_dir):
        backend = make_backend(WRITE_ARTIFACT)
        config = tmp_path / "hedgehog.json"
        config.write_text(
            '{"backend": {"executable": "%s", "output": "%s"}}' % (backend, tmp_path / "out" / "g.dot")
        )

        result = runner.invoke(
            app,
            ["session", str(workspace_dir), "-c", str(config)],
            input="run\nwait\nclear\nquit\n",
        )

        assert result.exit_code == 0
        assert "run: disabled" in result.stdout
        assert "2 nodes, 1 edges" in result.stdout
        assert "Results cleared" in result.stdout

    def test_navigation_and_save(self, tmp_path, scenario_a):
        artifact = tmp_path / "graph.dot"
        artifact.write_text(scenario_a)
        svg = tmp_path / "view.svg"

        result = runner.invoke(
            app,
            ["session"],
            input=f"load {artifact}\nzoom 2\npan 10 -5\nfit\nsave {svg}\n",
        )

        assert result.exit_code == 0
        assert svg.exists()

    def test_unknown_and_bad_arguments(self):
        result = runner.invoke(app, ["session"], input="frobnicate\nzoom lots\nhelp\n")

        assert result.exit_code == 0
        assert "Unknown command" in result.stdout
        assert "Error:" in result.stdout
        assert "select a workspace folder" in result.stdout
