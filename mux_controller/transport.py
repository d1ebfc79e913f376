"""Subprocess transport to the session daemon.

Every request is one invocation of the daemon executable. The transport
writes nothing to the process, waits for it to exit and hands back its
standard output untouched.
"""

from __future__ import annotations

import asyncio
import logging
import subprocess
from collections.abc import Sequence

from .exceptions import ExecutionError, record_error

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class Transport:
    """Runs one executable per request and returns its stdout.

    Requests issued through the same instance are serialized, so there is
    never more than one daemon process in flight per transport.

    Attributes:
        executable: Program to run for each request.
        timeout: Seconds to wait for the process before killing it.
        strict_exit_status: Raise on non-zero exit instead of returning stdout.
    """

    def __init__(
        self,
        executable: str,
        *,
        timeout: float | None = DEFAULT_TIMEOUT,
        strict_exit_status: bool = False,
    ) -> None:
        self.executable = executable
        self.timeout = timeout
        self.strict_exit_status = strict_exit_status
        self._lock = asyncio.Lock()

    async def invoke(self, args: Sequence[str]) -> str:
        """Run the executable with ``args`` and return its output.

        A non-zero exit status is not inspected unless ``strict_exit_status``
        is set; whatever the process printed is returned, which may be empty.

        Args:
            args: Command name followed by its arguments.

        Returns:
            Everything the process wrote to stdout.

        Raises:
            ExecutionError: If the process cannot start, times out, or (in
                strict mode) exits non-zero.
        """
        argv = [self.executable, *args]
        command = " ".join(argv)

        async with self._lock:
            logger.debug("Running: %s", command)
            try:
                proc = await asyncio.create_subprocess_exec(
                    *argv,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                )
            except OSError as e:
                # FileNotFoundError and PermissionError both land here
                logger.error("Failed to start %s: %s", self.executable, e)
                record_error(e)
                raise ExecutionError(
                    f"Could not start {self.executable}: {e}",
                    command=command,
                    cause=e,
                ) from e

            try:
                stdout, stderr = await asyncio.wait_for(
                    proc.communicate(), timeout=self.timeout
                )
            except asyncio.TimeoutError as e:
                await _reap(proc)
                logger.error("Timed out after %ss: %s", self.timeout, command)
                record_error(e)
                raise ExecutionError(
                    f"{self.executable} did not finish in time",
                    command=command,
                    timeout=self.timeout,
                    cause=e,
                ) from e
            except asyncio.CancelledError:
                await _reap(proc)
                raise

        if proc.returncode != 0:
            error_text = stderr.decode(errors="replace").strip()
            if self.strict_exit_status:
                error = ExecutionError(
                    f"{self.executable} failed: {error_text or 'no error output'}",
                    command=command,
                    returncode=proc.returncode,
                )
                logger.error("%s exited with %s: %s", command, proc.returncode, error_text)
                record_error(error)
                raise error
            logger.debug(
                "%s exited with %s: %s", command, proc.returncode, error_text
            )

        return stdout.decode(errors="replace")


async def _reap(proc: asyncio.subprocess.Process) -> None:
    """Kill a process that is still running and wait for it to exit."""
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
    await proc.wait()
