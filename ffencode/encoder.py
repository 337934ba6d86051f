"""Run the ffmpeg encode action for a job."""

import subprocess
import threading
import logging
from typing import Any, BinaryIO, Callable, List, Mapping, Optional, Union

from ffencode.binary import resolve_binary
from ffencode.config import Settings
from ffencode.errors import ExecutionError, SpawnError
from ffencode.models import EncodeOptions, Job
from ffencode.presets import build_params
from ffencode.progress import LineSplitter, ProgressParser

logger = logging.getLogger(__name__)

READ_SIZE = 4096

IDLE = "idle"
RESOLVING_BINARY = "resolving_binary"
RUNNING = "running"
COMPLETED = "completed"
FAILED = "failed"


class EncodeProcess:
    """
    Manage an ffmpeg process with live access to its output.

    Both pipes are drained by daemon threads. Output is split into lines on
    ``\\n`` and ``\\r`` regardless of how the pipe chunks it, and each line is
    handed to ``on_stderr`` or ``on_stdout``.

    Attributes:
        command (List[str]): Binary path followed by its arguments
        process (subprocess.Popen): The running subprocess
        returncode (Optional[int]): The exit code, or None while running
    """

    def __init__(
        self,
        command: List[str],
        on_stderr: Optional[Callable[[str], None]] = None,
        on_stdout: Optional[Callable[[str], None]] = None,
    ):
        self.command = command
        self.on_stderr = on_stderr
        self.on_stdout = on_stdout
        self.process = None
        self.stdout_thread = None
        self.stderr_thread = None
        self.started = False
        self.finished = False
        self.returncode = None

    def _dispatch(self, handler: Optional[Callable[[str], None]], line: str):
        if not handler:
            return
        try:
            handler(line)
        except Exception:
            # Keep draining the pipe so ffmpeg never blocks on a full buffer
            logger.exception(f"Error handling ffmpeg output line: {line[:80]}")

    def _read_output(self, stream: BinaryIO, handler: Optional[Callable[[str], None]]):
        splitter = LineSplitter()
        while True:
            chunk = stream.read1(READ_SIZE) if hasattr(stream, "read1") else stream.read(READ_SIZE)
            if not chunk:
                break
            for line in splitter.feed(chunk):
                self._dispatch(handler, line)
        for line in splitter.flush():
            self._dispatch(handler, line)

    def start(self) -> "EncodeProcess":
        """Start the process and the output reader threads."""
        if self.started:
            raise RuntimeError("Process already started")

        try:
            self.process = subprocess.Popen(
                self.command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise SpawnError(self.command[0], e) from e

        self.started = True

        self.stdout_thread = threading.Thread(
            target=self._read_output, args=(self.process.stdout, self.on_stdout), daemon=True
        )
        self.stderr_thread = threading.Thread(
            target=self._read_output, args=(self.process.stderr, self.on_stderr), daemon=True
        )
        self.stdout_thread.start()
        self.stderr_thread.start()

        return self

    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        """
        Wait for the process to complete.

        Returns:
            The process return code, or None if the timeout expired first
        """
        if not self.started:
            raise RuntimeError("Process not started")

        if self.finished:
            return self.returncode

        try:
            self.returncode = self.process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            return None

        self.finished = True
        # Make sure we've delivered all output
        self.stdout_thread.join()
        self.stderr_thread.join()
        return self.returncode

    def terminate(self):
        """Terminate the ffmpeg process, killing it if it does not exit."""
        if self.process and not self.finished:
            self.process.terminate()
            self.wait(timeout=5)
            if not self.finished:
                self.process.kill()
                self.wait()

    def __enter__(self):
        if not self.started:
            self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if not self.finished:
            self.terminate()


class EncodeRun:
    """A single invocation of the encode action."""

    def __init__(self, job: Job, settings: Settings, options: EncodeOptions):
        self.job = job
        self.settings = settings
        self.options = options
        self.parser = ProgressParser()
        self.state = IDLE

    def _log(self, message: str):
        self.settings.logger.info(f"[{self.job.uid}] {message}")

    def handle_stderr(self, line: str):
        self._log(line)

        percentage = self.parser.consume(line)
        if percentage is None:
            return

        if self.options.on_progress:
            self.options.on_progress(self.job, percentage)
        self._log(f"encoding progress {percentage}%...")

    def handle_stdout(self, line: str):
        if self.settings.debug:
            self._log(line)

    def run(self) -> Job:
        try:
            params = build_params(self.job, self.settings, self.options)

            self.state = RESOLVING_BINARY
            binary = resolve_binary(self.settings)

            process = EncodeProcess(
                [binary] + params, on_stderr=self.handle_stderr, on_stdout=self.handle_stdout
            ).start()
            self.state = RUNNING

            # on finish (code 0 - success, other - error)
            code = process.wait()
            if code != 0:
                raise ExecutionError(code)

            if self.options.on_complete:
                self.options.on_complete(self.job)
        except Exception:
            self.state = FAILED
            raise

        self.state = COMPLETED
        return self.job


def run(job: Job, settings: Settings, options: EncodeOptions) -> Job:
    """Encode a job with ffmpeg and return the same job on success."""
    return EncodeRun(job, settings, options).run()


def execute(
    job: Job,
    settings: Settings,
    options: Union[EncodeOptions, Mapping[str, Any]],
    type: Optional[str] = None,
) -> Job:
    """
    Entry point of the encode action.

    Args:
        job: The job being processed
        settings: Execution context (work path, logger, debug flag)
        options: EncodeOptions or an equivalent mapping from a job description
        type: Name of the job phase the action runs in

    Returns:
        The job, unchanged, once ffmpeg exits with code 0

    Raises:
        AcquisitionError: If the binary could not be found or downloaded
        SpawnError: If ffmpeg could not be started
        ExecutionError: If ffmpeg exited with a non-zero code
    """
    if not isinstance(options, EncodeOptions):
        options = EncodeOptions.from_dict(options)

    settings.logger.info(f"[{job.uid}] starting action-encode action (ffmpeg)")
    logger.debug(f"Encode action for job={job.uid} type={type} preset={options.preset}")

    try:
        return run(job, settings, options)
    except Exception as e:
        settings.logger.error(f"[{job.uid}] action-encode failed: {e}")
        raise
