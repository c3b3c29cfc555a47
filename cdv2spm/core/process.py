"""Async subprocess helper shared by the pod spec and git lookups."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class CommandResult:
    """Exit status and captured output of a finished command."""

    returncode: int
    stdout: bytes
    stderr: bytes = b""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


async def run_command(
    cmd: Sequence[str],
    *,
    timeout: float | None = None,
    merge_stderr: bool = False,
) -> CommandResult:
    """Run *cmd* (an argument vector, never a shell string) and capture its output.

    With *merge_stderr* the child's stderr is folded into ``stdout``.

    If the awaiting task is cancelled, or *timeout* expires, the child
    process is killed and reaped before the exception propagates, so an
    abandoned lookup never leaves a process behind.

    Raises ``OSError`` if the executable cannot be launched and
    ``asyncio.TimeoutError`` on timeout.
    """
    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT if merge_stderr else asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except BaseException:
        await _kill(proc)
        raise
    return CommandResult(returncode=proc.returncode or 0, stdout=stdout or b"", stderr=stderr or b"")


async def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is not None:
        return
    try:
        proc.kill()
    except ProcessLookupError:
        return
    # Reap the child; shield so a second cancellation cannot leave a zombie.
    await asyncio.shield(proc.wait())
