"""
Start dependency installation for a new project without waiting for it.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from ..errors import InstallationError

logger = logging.getLogger(__name__)

DEFAULT_INSTALL_COMMAND = ("npm", "install")
INSTALL_LOG_NAME = "install.log"
_LOG_TAIL_LINES = 20


@dataclass
class InstallHandle:
    """
    Tracks one background installation.

    The pipeline only starts the process. It runs in its own session with its
    output going to ``log_path``, so it outlives the process that started it.
    While this process is alive a watcher thread logs the outcome. ``wait`` is
    there for callers that want to block, such as the CLI ``--wait`` flag.
    """
    command: List[str]
    cwd: Path
    label: str
    log_path: Path
    process: Optional[subprocess.Popen] = None
    returncode: Optional[int] = None
    error: Optional[str] = None
    _finished: threading.Event = field(default_factory=threading.Event, repr=False)

    @property
    def started(self) -> bool:
        return self.process is not None

    @property
    def finished(self) -> bool:
        return self._finished.is_set()

    @property
    def succeeded(self) -> bool:
        return self.finished and self.error is None

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the installation finished; False if timeout expired first."""
        return self._finished.wait(timeout)

    def _fail(self, error: InstallationError) -> None:
        self.error = str(error)
        logger.error("Dependency installation failed for %s: %s", self.label, error)


def _log_tail(log_path: Path) -> str:
    try:
        text = log_path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return ""
    lines = [line for line in text.splitlines() if line.strip()]
    return "\n".join(lines[-_LOG_TAIL_LINES:])


def _watch(handle: InstallHandle) -> None:
    try:
        assert handle.process is not None
        handle.returncode = handle.process.wait()
        if handle.returncode != 0:
            detail = _log_tail(handle.log_path) or "no output"
            handle._fail(InstallationError(f"{' '.join(handle.command)} exited with {handle.returncode}: {detail}"))
        else:
            logger.info("Dependency installation completed for %s", handle.label)
    finally:
        handle._finished.set()


def trigger_install(
    project_root: Path | str,
    command: Sequence[str] = DEFAULT_INSTALL_COMMAND,
    *,
    label: Optional[str] = None,
) -> InstallHandle:
    """
    Launch command inside project_root and return immediately.

    Output goes to ``install.log`` in project_root. Failures, including a
    missing executable, are logged and recorded on the handle. Nothing is
    raised to the caller.
    """
    root = Path(project_root)
    argv = list(command)
    handle = InstallHandle(command=argv, cwd=root, label=label or root.name, log_path=root / INSTALL_LOG_NAME)
    executable = shutil.which(argv[0]) or argv[0]

    logger.info("Starting %s in %s (output in %s)", " ".join(argv), root, handle.log_path)
    try:
        with handle.log_path.open("wb") as log_file:
            handle.process = subprocess.Popen(
                [executable, *argv[1:]],
                cwd=str(root),
                stdin=subprocess.DEVNULL,
                stdout=log_file,
                stderr=subprocess.STDOUT,
                start_new_session=True,
            )
    except OSError as exc:
        handle._fail(InstallationError(f"Could not start {argv[0]}: {exc}"))
        handle._finished.set()
        return handle

    watcher = threading.Thread(
        target=_watch,
        args=(handle,),
        name=f"install-{handle.label}",
        daemon=True,
    )
    watcher.start()
    return handle
