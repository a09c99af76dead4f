"""Lifecycle of the external mr_hedgehog analysis process.

One run at a time. The process is spawned without blocking; a watcher thread
waits for it and posts a ``Completion`` onto a queue. Nothing happens with
that completion until the control thread calls ``process_events``, which is
where the viewport is told what to show and the run trigger comes back.
"""

import logging
import os
import queue
import shutil
import subprocess
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .config import BackendConfig
from .errors import HedgehogError, NoArtifactProduced, ProcessFailure, ProcessSpawnError
from .messages import Load, ShowMessage, ViewMessage
from .workspace import Workspace

logger = logging.getLogger(__name__)

RUNNING_STATUS = "Running analysis..."
NO_WORKSPACE_STATUS = "Please select a Rust project folder first."


class ProcessState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class AnalysisOptions:
    """Backend flags for one run."""
    output: Path
    engine: str = "syn"
    format: str = "dot"
    expand_paths: bool = False
    debug: bool = False
    store: str | None = None

    @classmethod
    def from_config(cls, config: BackendConfig) -> "AnalysisOptions":
        return cls(
            output=Path(config.output),
            engine=config.engine,
            format=config.format,
            expand_paths=config.expand_paths,
            debug=config.debug,
            store=config.store,
        )

    def arguments(self, workspace: Workspace) -> list[str]:
        args = [
            "--workspace", str(workspace.manifest),
            "--output", str(self.output),
            "--engine", self.engine,
            "--format", self.format,
        ]
        if self.expand_paths:
            args.append("--expand-paths")
        if self.debug:
            args.append("--debug")
        if self.store:
            args.extend(["--store", self.store])
        return args


@dataclass(frozen=True)
class Completion:
    """Exit report for one run, posted by the watcher thread."""
    run_id: int
    exit_code: int
    stderr: str
    stdout: str = ""


class AnalysisOrchestrator:
    """Spawns and monitors the backend and forwards its outcome to a view.

    Args:
        sink: Receives ``Load``/``ShowMessage`` messages; normally ``Viewport.handle``
        config: Backend section of the configuration
        on_trigger_changed: Called with True/False whenever the run trigger
            is enabled or disabled
    """

    def __init__(
        self,
        sink: Callable[[ViewMessage], None],
        config: BackendConfig | None = None,
        on_trigger_changed: Callable[[bool], None] | None = None,
    ):
        self.sink = sink
        self.config = config or BackendConfig()
        self.on_trigger_changed = on_trigger_changed
        self.state = ProcessState.IDLE
        self.workspace: Workspace | None = None
        self.status = ""
        self.last_error: HedgehogError | None = None

        self._process: subprocess.Popen | None = None
        self._watcher: threading.Thread | None = None
        self._events: queue.Queue[Completion] = queue.Queue()
        self._run_counter = 0
        self._active_run: int | None = None
        self._artifact: Path | None = None

    @property
    def is_running(self) -> bool:
        return self.state == ProcessState.RUNNING

    @property
    def trigger_enabled(self) -> bool:
        return self.workspace is not None and self.state == ProcessState.IDLE

    @property
    def pid(self) -> int | None:
        return self._process.pid if self._process else None

    def select_workspace(self, path: str | Path) -> Workspace:
        """Choose the workspace future runs analyze."""
        was_enabled = self.trigger_enabled
        self.workspace = Workspace.select(path)
        self.status = self.workspace.describe()
        logger.info(self.status)
        if self.trigger_enabled and not was_enabled:
            self._notify_trigger(True)
        return self.workspace

    def resolve_executable(self) -> str:
        """Locate the backend binary as an absolute path.

        Relative candidates are taken from the current directory, not from the
        workspace the process later runs in.

        Raises:
            ProcessSpawnError: If no executable backend can be found
        """
        if self.config.executable:
            candidate = Path(self.config.executable)
            if candidate.is_file() and os.access(candidate, os.X_OK):
                return os.path.abspath(candidate)
            raise ProcessSpawnError(self.config.binary_name, f"not executable: {candidate}")

        for directory in self.config.search_paths:
            candidate = Path(directory) / self.config.binary_name
            if candidate.is_file() and os.access(candidate, os.X_OK):
                return os.path.abspath(candidate)

        found = shutil.which(self.config.binary_name)
        if found:
            return os.path.abspath(found)
        raise ProcessSpawnError(self.config.binary_name, "not found in search paths or PATH")

    def build_command(self, workspace: Workspace, options: AnalysisOptions) -> list[str]:
        return [self.resolve_executable(), *options.arguments(workspace)]

    def start(self, workspace: Workspace | None = None, options: AnalysisOptions | None = None) -> bool:
        """Spawn a run and return at once.

        A call while a run is in flight is ignored.

        Returns:
            True if a process was started
        """
        if self.state != ProcessState.IDLE:
            logger.info("Analysis already running; trigger ignored")
            return False

        workspace = workspace or self.workspace
        if workspace is None:
            logger.warning("No workspace selected")
            self.status = NO_WORKSPACE_STATUS
            return False

        options = options or AnalysisOptions.from_config(self.config)
        self.state = ProcessState.RUNNING
        self.status = RUNNING_STATUS
        self.last_error = None
        self._notify_trigger(False)

        try:
            command = self.build_command(workspace, options)
            self._remove_stale_artifact(options.output)
            logger.info(f"Running command: {' '.join(command)}")
            process = subprocess.Popen(
                command,
                cwd=str(workspace.root),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except ProcessSpawnError as e:
            logger.error(f"Cannot start backend: {e.reason}")
            self._fail_to_spawn(e)
            return False
        except OSError as e:
            logger.error(f"Cannot start backend: {e}")
            self._fail_to_spawn(ProcessSpawnError(self.config.binary_name, str(e)))
            return False

        self._run_counter += 1
        self._active_run = self._run_counter
        self._artifact = options.output
        self._process = process
        self._watcher = threading.Thread(
            target=self._watch,
            args=(self._active_run, process),
            name=f"hedgehog-run-{self._active_run}",
            daemon=True,
        )
        self._watcher.start()
        logger.info(f"Backend started (PID: {process.pid})")
        return True

    def _watch(self, run_id: int, process: subprocess.Popen) -> None:
        stdout, stderr = process.communicate()
        self._events.put(Completion(run_id, process.returncode, stderr or "", stdout or ""))

    def process_events(self, timeout: float = 0.0) -> int:
        """Handle pending completions on the calling thread.

        Args:
            timeout: Seconds to wait for the first event; 0 only drains what
                is already queued

        Returns:
            Number of completions handled
        """
        handled = 0
        block = timeout > 0
        while True:
            try:
                completion = self._events.get(block=block, timeout=timeout if block else None)
            except queue.Empty:
                return handled
            block = False

            if completion.run_id != self._active_run:
                logger.debug(f"Discarding completion of stale run {completion.run_id}")
                continue
            self._complete(completion)
            handled += 1

    def wait(self, timeout: float | None = None, poll_interval: float = 0.1) -> bool:
        """Pump events until the current run has been handled.

        Returns:
            False if ``timeout`` elapsed while still running
        """
        waited = 0.0
        while self.is_running:
            if timeout is not None and waited >= timeout:
                return False
            self.process_events(timeout=poll_interval)
            waited += poll_interval
        return True

    def _complete(self, completion: Completion) -> None:
        if completion.stdout:
            logger.debug(f"Backend output:\n{completion.stdout.rstrip()}")
        logger.info(f"Backend exited with code {completion.exit_code}")

        artifact = self._artifact
        self._process = None
        self._watcher = None
        self._active_run = None
        self._artifact = None

        if completion.exit_code != 0:
            self.state = ProcessState.FAILED
            self._finish_with_error(ProcessFailure(completion.exit_code, completion.stderr))
        elif artifact is None or not artifact.exists():
            self.state = ProcessState.FAILED
            self._finish_with_error(NoArtifactProduced(artifact))
        else:
            self.state = ProcessState.SUCCEEDED
            message = Load(artifact)
            self.status = message.status
            self.sink(message)
            self._become_idle()

    def _fail_to_spawn(self, error: ProcessSpawnError) -> None:
        self.state = ProcessState.FAILED
        self._finish_with_error(error)

    def _finish_with_error(self, error: HedgehogError) -> None:
        self.last_error = error
        self.status = error.status
        self.sink(ShowMessage(error.placeholder_text, status=error.status))
        self._become_idle()

    def _become_idle(self) -> None:
        self.state = ProcessState.IDLE
        if self.trigger_enabled:
            self._notify_trigger(True)

    def _notify_trigger(self, enabled: bool) -> None:
        if self.on_trigger_changed is not None:
            self.on_trigger_changed(enabled)

    def _remove_stale_artifact(self, output: Path) -> None:
        try:
            output.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove previous output {output}: {e}")

    def shutdown(self) -> None:
        """Kill a still-running backend and wait for it to exit."""
        process = self._process
        if process is not None and process.poll() is None:
            logger.info(f"Stopping backend (PID: {process.pid})...")
            process.kill()
            process.wait()
        if self._watcher is not None:
            self._watcher.join()

        self._process = None
        self._watcher = None
        self._active_run = None
        self._artifact = None
        self.state = ProcessState.IDLE

    def __enter__(self) -> "AnalysisOrchestrator":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
