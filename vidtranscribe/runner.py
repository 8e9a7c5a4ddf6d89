from __future__ import annotations

import shutil
import subprocess
from typing import List, Optional, Protocol

from vidtranscribe.logging_utils import get_logger
from vidtranscribe.types import CommandResult

log = get_logger(__name__)


class CommandRunner(Protocol):
    """Capability for locating and running external executables."""

    def which(self, name: str) -> Optional[str]:
        ...

    def run(self, name: str, args: List[str]) -> CommandResult:
        ...


class SubprocessRunner:
    """Runs tools from PATH with captured text output."""

    def which(self, name: str) -> Optional[str]:
        return shutil.which(name)

    def run(self, name: str, args: List[str]) -> CommandResult:
        cmd = [name, *args]
        log.debug("run command", extra={"cmd": cmd})
        # tool output echoes container tags, which are not always valid UTF-8
        result = subprocess.run(cmd, capture_output=True, text=True, encoding="utf-8", errors="replace")
        if result.returncode != 0:
            log.debug("command exited non-zero", extra={"cmd": name, "returncode": result.returncode})
        return CommandResult(returncode=result.returncode, stdout=result.stdout, stderr=result.stderr)
