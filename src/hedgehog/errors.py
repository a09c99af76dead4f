"""Error taxonomy for the load and analysis pipeline.

None of these are fatal. Each one knows the placeholder text the viewport
shows for it and the short status string reported next to it.
"""


class HedgehogError(Exception):
    """Base class for recoverable pipeline errors."""

    status = "Error"

    @property
    def placeholder_text(self) -> str:
        return str(self)


class ArtifactIoError(HedgehogError):
    """The analysis artifact could not be opened or read."""

    status = "Failed to read output"

    def __init__(self, path, reason: str | None = None):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Failed to open output file:\n{self.path}")


class ProcessSpawnError(HedgehogError):
    """The backend executable is missing or cannot be executed."""

    status = "Error: Backend not found"

    def __init__(self, executable: str, reason: str | None = None):
        self.executable = executable
        self.reason = reason
        super().__init__(f"Backend not found.\nPlease ensure '{executable}' is built.")


class ProcessFailure(HedgehogError):
    """The backend exited with a non-zero exit code."""

    status = "Analysis failed"

    def __init__(self, exit_code: int, stderr_text: str):
        self.exit_code = exit_code
        self.stderr_text = stderr_text
        super().__init__(f"Analysis failed:\n{stderr_text}")


class EmptyGraphResult(HedgehogError):
    """The artifact parsed cleanly but declared no nodes."""

    status = "No nodes found"

    def __init__(self, path=None):
        self.path = str(path) if path is not None else None
        super().__init__("No nodes found in the call graph")


class NoArtifactProduced(HedgehogError):
    """The backend exited 0 without writing its artifact."""

    status = "No output generated"

    def __init__(self, path):
        self.path = str(path)
        super().__init__("Analysis completed but no output generated.")
