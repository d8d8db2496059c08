"""
AsyncProcess.

Wrapper around asyncio subprocess to help with controlling a long running
(output) process and taking care of properly closing the process in case of exit
(on both success and failures), without leaving zombies behind.
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
from contextlib import suppress

from simple_music_player.constants import LOGGER_NAME, VERBOSE_LOG_LEVEL

LOGGER = logging.getLogger(f"{LOGGER_NAME}.helpers.process")


def get_subprocess_env(env: dict[str, str] | None = None) -> dict[str, str]:
    """Get environment for subprocess, stripping LD_PRELOAD to avoid jemalloc warnings."""
    result = dict(os.environ)
    result.pop("LD_PRELOAD", None)
    if env:
        result.update(env)
    return result


class AsyncProcess:
    """
    AsyncProcess.

    Wrapper around asyncio subprocess which supports suspending and resuming
    the process (used to pause/resume audio output).
    """

    def __init__(
        self,
        args: list[str],
        stderr: bool | int | None = False,
        name: str | None = None,
        env: dict[str, str] | None = None,
    ) -> None:
        """Initialize AsyncProcess.

        :param args: Command and arguments to execute.
        :param stderr: Stderr configuration (True for PIPE, False for DEVNULL, or custom).
        :param name: Process name for logging.
        :param env: Environment variables for the subprocess (None inherits parent env).
        """
        self.proc: asyncio.subprocess.Process | None = None
        if name is None:
            name = args[0].split(os.sep)[-1]
        self.name = name
        self.logger = LOGGER.getChild(name)
        self._args = args
        self._stderr = asyncio.subprocess.DEVNULL if stderr is False else stderr
        self._env = get_subprocess_env(env)
        self._close_called = False
        self._suspended = False
        self._returncode: int | None = None

    @property
    def closed(self) -> bool:
        """Return if the process was closed."""
        return self._close_called or self.returncode is not None

    @property
    def close_called(self) -> bool:
        """Return if close was called on the process (as opposed to a natural exit)."""
        return self._close_called

    @property
    def suspended(self) -> bool:
        """Return if the process is currently suspended."""
        return self._suspended

    @property
    def returncode(self) -> int | None:
        """Return the returncode of the process."""
        if self._returncode is not None:
            return self._returncode
        if self.proc is None:
            return None
        if (ret_code := self.proc.returncode) is not None:
            self._returncode = ret_code
        return ret_code

    async def start(self) -> None:
        """Perform Async init of process."""
        self.proc = await asyncio.create_subprocess_exec(
            *self._args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE if self._stderr is True else self._stderr,
            env=self._env,
        )
        self.logger.log(
            VERBOSE_LOG_LEVEL, "Process %s started with PID %s", self.name, self.proc.pid
        )

    def suspend(self) -> None:
        """Suspend (SIGSTOP) the process."""
        if self.closed or self._suspended:
            return
        assert self.proc is not None  # for type checking
        with suppress(ProcessLookupError):
            self.proc.send_signal(signal.SIGSTOP)
            self._suspended = True

    def resume(self) -> None:
        """Resume (SIGCONT) a suspended process."""
        if self.closed or not self._suspended:
            return
        assert self.proc is not None  # for type checking
        with suppress(ProcessLookupError):
            self.proc.send_signal(signal.SIGCONT)
        self._suspended = False

    async def close(self) -> None:
        """Close/terminate the process and wait for exit."""
        self._close_called = True
        if not self.proc:
            return
        if self._suspended:
            # a stopped process does not handle SIGTERM until continued
            with suppress(ProcessLookupError):
                self.proc.send_signal(signal.SIGCONT)
            self._suspended = False
        if self.proc.returncode is None:
            with suppress(ProcessLookupError):
                self.proc.terminate()
        # make sure the process is really cleaned up
        while self.returncode is None:
            try:
                await asyncio.wait_for(self.proc.wait(), 5)
            except TimeoutError:
                self.logger.debug(
                    "Process %s with PID %s did not stop in time. Sending kill...",
                    self.name,
                    self.proc.pid,
                )
                with suppress(ProcessLookupError):
                    self.proc.kill()
        self.logger.log(
            VERBOSE_LOG_LEVEL,
            "Process %s with PID %s stopped with returncode %s",
            self.name,
            self.proc.pid,
            self.returncode,
        )

    async def wait(self) -> int:
        """Wait for the process and return the returncode."""
        if self._returncode is None:
            assert self.proc is not None
            self._returncode = await self.proc.wait()
        return self._returncode


async def check_output(*args: str, env: dict[str, str] | None = None) -> tuple[int, bytes]:
    """Run subprocess and return returncode and output."""
    proc = await asyncio.create_subprocess_exec(
        *args,
        stderr=asyncio.subprocess.STDOUT,
        stdout=asyncio.subprocess.PIPE,
        env=get_subprocess_env(env),
    )
    stdout, _ = await proc.communicate()
    assert proc.returncode is not None  # for type checking
    return (proc.returncode, stdout)
