"""Platform search tools.

Wraps grep (macOS/Linux) and findstr (Windows) as subprocesses. The
search text is always passed as its own argv element and no shell is
involved, so shell metacharacters in the text are searched literally.
"""

import logging
import shutil
import subprocess
import sys
import threading
from pathlib import Path

from quickref.errors import SearchUnavailableError

from .models import Invocation, InvocationOutput
from .parsing import normalize_line_endings

logger = logging.getLogger(__name__)

# How often a running invocation checks for cancellation, in seconds
POLL_INTERVAL = 0.1


class SearchBackend:
    """A line-oriented text search tool.

    Subclasses define ``tool``, the exit codes meaning "no match", and
    how to build argv for one (root, extension) pair.
    """

    tool: str = ""
    no_match_codes: frozenset[int] = frozenset({1})

    def is_available(self) -> bool:
        """Check if the tool is on PATH."""
        return shutil.which(self.tool) is not None

    def build_argv(self, text: str, root: Path, extension: str) -> list[str]:
        raise NotImplementedError

    def invocation(self, text: str, root: Path, extension: str) -> Invocation:
        """Build the invocation for one root and extension."""
        return Invocation(
            root=root,
            extension=extension,
            argv=tuple(self.build_argv(text, root, extension)),
        )

    def run(
        self,
        invocation: Invocation,
        cancel_event: threading.Event | None = None,
    ) -> InvocationOutput:
        """Run one invocation to completion.

        Failures are reported in the returned InvocationOutput rather than
        raised, so one bad root cannot abort a whole search. If
        ``cancel_event`` is set while the process runs, the process is
        killed and the output is marked failed.
        """
        try:
            proc = subprocess.Popen(
                list(invocation.argv),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                stdin=subprocess.DEVNULL,
            )
        except FileNotFoundError as e:
            return InvocationOutput(
                invocation, ok=False, error=str(e), tool_missing=True
            )
        except OSError as e:
            return InvocationOutput(invocation, ok=False, error=str(e))

        stdout, stderr = self._communicate(proc, cancel_event)
        if stdout is None:
            return InvocationOutput(invocation, ok=False, error="cancelled")

        out = stdout.decode("utf-8", errors="replace")
        err = stderr.decode("utf-8", errors="replace").strip()

        if proc.returncode != 0 and proc.returncode not in self.no_match_codes:
            return InvocationOutput(
                invocation,
                ok=False,
                error=err or f"{self.tool} exited with code {proc.returncode}",
            )
        if err:
            return InvocationOutput(invocation, ok=False, error=err)

        return InvocationOutput(invocation, stdout=normalize_line_endings(out))

    @staticmethod
    def _communicate(
        proc: subprocess.Popen, cancel_event: threading.Event | None
    ) -> tuple[bytes | None, bytes | None]:
        """Wait for the process, killing it if the search is cancelled."""
        if cancel_event is None:
            return proc.communicate()

        while True:
            if cancel_event.is_set():
                proc.kill()
                proc.communicate()
                return None, None
            try:
                return proc.communicate(timeout=POLL_INTERVAL)
            except subprocess.TimeoutExpired:
                continue


class GrepBackend(SearchBackend):
    """grep -rnIF: recursive, line-numbered, fixed-string search.

    Binary files are skipped (-I); otherwise grep reports "binary file
    matches" on stderr and the whole invocation would count as failed.
    """

    tool = "grep"

    def build_argv(self, text: str, root: Path, extension: str) -> list[str]:
        return [
            self.tool,
            "-r",
            "-n",
            "-I",
            "-F",
            f"--include=*.{extension}",
            "-e",
            text,
            str(root),
        ]


class FindstrBackend(SearchBackend):
    """findstr /S /N /L /P: recursive, line-numbered, literal search.

    /P skips files with non-printable characters.
    """

    tool = "findstr"

    def build_argv(self, text: str, root: Path, extension: str) -> list[str]:
        pattern = str(root).rstrip("\\/") + f"\\*.{extension}"
        return [self.tool, "/S", "/N", "/L", "/P", f"/C:{text}", pattern]


def default_backend() -> SearchBackend:
    """Pick the search tool for the current platform."""
    if sys.platform.startswith("win"):
        return FindstrBackend()
    return GrepBackend()


def check_backend_available(backend: SearchBackend | None = None) -> None:
    """Check if the platform search tool is installed.

    Raises:
        SearchUnavailableError: If the tool is not on PATH.
    """
    backend = backend or default_backend()
    if not backend.is_available():
        raise SearchUnavailableError(
            f"{backend.tool} not found on PATH; reference search is unavailable"
        )
