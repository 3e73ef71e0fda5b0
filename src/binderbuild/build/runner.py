"""Run external commands and filesystem changes for build steps."""

from __future__ import annotations

import errno
import os
import shlex
import shutil
import stat
import subprocess
from pathlib import Path
from typing import Iterable

from binderbuild.build.build_log import get_logger
from binderbuild.core.exceptions import CommandError

#: Timeout (seconds) for a single external command.
COMMAND_TIMEOUT = 3600

#: Max characters of command output kept in a CommandError.
MAX_ERROR_OUTPUT_CHARS = 3000

#: Interpreter for executables without a "#!" line, as POSIX shells do.
FALLBACK_SHELL = "/bin/sh"


def _tail(text: str, max_chars: int = MAX_ERROR_OUTPUT_CHARS) -> str:
    text = text.strip()
    if len(text) <= max_chars:
        return text
    return "(output truncated; showing last {} chars)\n{}".format(max_chars, text[-max_chars:])


class CommandRunner:
    """Execute (or, in dry-run mode, only record) build actions in order.

    Every action is appended to ``history`` as a shell-like line, so the
    history of a dry run is the build plan and the history of a real run
    is what was done.
    """

    def __init__(
        self,
        env: dict[str, str] | None = None,
        dry_run: bool = False,
        timeout: int = COMMAND_TIMEOUT,
    ) -> None:
        self.env = dict(env) if env is not None else None
        self.dry_run = dry_run
        self.timeout = timeout
        self.history: list[str] = []

    def record(self, action: str) -> None:
        """Append an action to the history and log it."""
        self.history.append(action)
        log = get_logger()
        if self.dry_run:
            log.info("[dry-run] %s", action)
        else:
            log.info("+ %s", action)

    def run(self, args: list[str], cwd: Path | None = None) -> str:
        """Run a command; return its combined output. Raises CommandError on failure."""
        args = [str(a) for a in args]
        line = shlex.join(args)
        if cwd is not None:
            line = f"(cd {shlex.quote(str(cwd))} && {line})"
        self.record(line)
        if self.dry_run:
            return ""

        log = get_logger()
        try:
            try:
                result = self._execute(args, cwd)
            except OSError as e:
                if e.errno != errno.ENOEXEC:
                    raise
                # No "#!" line: run it as a shell script, like sh -c would.
                log.info("%s is not a binary or #! script; running it with %s", args[0], FALLBACK_SHELL)
                result = self._execute([FALLBACK_SHELL, *args], cwd)
        except subprocess.TimeoutExpired as e:
            log.error("Command timed out (%ds): %s", self.timeout, line)
            raise CommandError(line, None, f"timed out after {self.timeout}s") from e
        except FileNotFoundError as e:
            log.error("Executable not found: %s", args[0])
            raise CommandError(line, None, f"executable not found: {args[0]}") from e
        except OSError as e:
            log.error("Could not execute %s: %s", args[0], e)
            raise CommandError(line, None, str(e)) from e

        output = "\n".join(x.strip() for x in (result.stdout, result.stderr) if x and x.strip())
        if output:
            log.info("%s", output)
        if result.returncode != 0:
            log.warning("Command failed (exit %s): %s", result.returncode, line)
            raise CommandError(line, result.returncode, _tail(output))
        return output

    def _execute(self, args: list[str], cwd: Path | None) -> subprocess.CompletedProcess:
        return subprocess.run(
            args,
            cwd=str(cwd) if cwd is not None else None,
            env=self.env,
            capture_output=True,
            text=True,
            timeout=self.timeout,
        )

    def mkdir(self, path: Path) -> None:
        self.record(f"mkdir -p {shlex.quote(str(path))}")
        if not self.dry_run:
            Path(path).mkdir(parents=True, exist_ok=True)

    def copy(self, src: Path, dst: Path) -> None:
        """Copy a file; ``dst`` may be a directory."""
        self.record(f"cp {shlex.quote(str(src))} {shlex.quote(str(dst))}")
        if not self.dry_run:
            shutil.copy(src, dst)

    def make_executable(self, path: Path) -> None:
        self.record(f"chmod +x {shlex.quote(str(path))}")
        if not self.dry_run:
            mode = os.stat(path).st_mode
            os.chmod(path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    def write_text(self, path: Path, text: str) -> None:
        self.record(f"write {shlex.quote(str(path))}")
        if not self.dry_run:
            Path(path).write_text(text, encoding="utf-8")

    def remove(self, paths: Iterable[Path], label: str | None = None) -> None:
        """Remove files and directory trees (``rm -rf``); missing paths are ignored.

        A ``label`` is recorded in place of the expanded path list, even when
        nothing matched.
        """
        paths = [Path(p) for p in paths]
        if label is not None:
            self.record(label)
        elif paths:
            self.record("rm -rf " + " ".join(shlex.quote(str(p)) for p in paths))
        if self.dry_run:
            return
        for path in paths:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            elif path.exists() or path.is_symlink():
                path.unlink()
