import asyncio
import signal
import sys
import time
from copy import deepcopy
from dataclasses import dataclass
from os import environ
from os.path import abspath, join
from shlex import join as shlex_join
from typing import Callable, Optional, Union

import psutil

from spaify.log import get_logger

log = get_logger(__name__)

NONBLOCK_READ_TIMEOUT = 0.01
BUSY_WAIT_INTERVAL = 0.1

Command = Union[list[str], str]


def format_command(cmd: Command) -> str:
    """Human-readable form of a command, for logs and messages."""
    if isinstance(cmd, str):
        return cmd
    return shlex_join(cmd)


@dataclass
class LocalProcess:
    cmd: Command
    cwd: str
    env: dict[str, str]
    stdout: str
    stderr: str
    _process: asyncio.subprocess.Process

    @staticmethod
    async def start(
        cmd: Command,
        *,
        cwd: str = ".",
        env: dict[str, str],
    ) -> "LocalProcess":
        """
        Start a process.

        A command given as a list of arguments is executed directly, a string
        command is passed to the shell.
        """
        log.debug(f"Starting process: {format_command(cmd)} (cwd={cwd})")
        kwargs = dict(
            cwd=cwd,
            env=env,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        if isinstance(cmd, str):
            _process = await asyncio.create_subprocess_shell(cmd, **kwargs)
        else:
            _process = await asyncio.create_subprocess_exec(*cmd, **kwargs)

        return LocalProcess(
            cmd=cmd,
            cwd=cwd,
            env=env,
            stdout="",
            stderr="",
            _process=_process,
        )

    async def wait(self) -> int:
        return await self._process.wait()

    @staticmethod
    async def _nonblock_read(reader: asyncio.StreamReader, timeout: float) -> str:
        """
        Reads data from a stream reader without blocking (for long).

        This wraps the read in a (short) timeout to avoid blocking the event loop for too long.

        :param reader: Async stream reader to read from.
        :param timeout: Timeout for the read operation (should not be too long).
        :return: Data read from the stream reader, or empty string.
        """
        buffer = ""
        while True:
            try:
                data = await asyncio.wait_for(reader.read(1024), timeout)
                if not data:
                    return buffer
                buffer += data.decode("utf-8", errors="ignore")
            except asyncio.TimeoutError:
                return buffer

    async def read_output(self, timeout: float = NONBLOCK_READ_TIMEOUT) -> tuple[str, str]:
        new_stdout = await self._nonblock_read(self._process.stdout, timeout)
        new_stderr = await self._nonblock_read(self._process.stderr, timeout)
        self.stdout += new_stdout
        self.stderr += new_stderr
        return (new_stdout, new_stderr)

    async def _terminate_process_tree(self, signal: int):
        # npm and artisan spawn children of their own; signal the whole tree,
        # children first.
        try:
            main_process = psutil.Process(self._process.pid)
        except psutil.NoSuchProcess:
            return

        processes = main_process.children(recursive=True)
        processes.append(main_process)
        for proc in processes:
            try:
                proc.send_signal(signal)
            except psutil.NoSuchProcess:
                pass

        psutil.wait_procs(processes, timeout=1)

    async def terminate(self, kill: bool = True):
        if kill and sys.platform != "win32":
            await self._terminate_process_tree(signal.SIGKILL)
        else:
            # Windows doesn't have SIGKILL
            await self._terminate_process_tree(signal.SIGTERM)

    @property
    def is_running(self) -> bool:
        if self._process.returncode is not None:
            return False
        try:
            proc = psutil.Process(self._process.pid)
            return proc.is_running() and proc.status() != psutil.STATUS_ZOMBIE
        except psutil.NoSuchProcess:
            return False

    @property
    def pid(self) -> int:
        return self._process.pid


class ProcessManager:
    """
    Run external commands (npm, artisan) inside the project directory.
    """

    def __init__(
        self,
        *,
        root_dir: str,
        env: Optional[dict[str, str]] = None,
        output_handler: Optional[Callable] = None,
    ):
        if env is None:
            env = deepcopy(dict(environ))
        self.default_env = env
        self.root_dir = root_dir
        self.output_handler = output_handler

    async def start_process(
        self,
        cmd: Command,
        *,
        cwd: str = ".",
        env: Optional[dict[str, str]] = None,
    ) -> LocalProcess:
        env = {**self.default_env, **(env or {})}
        abs_cwd = abspath(join(self.root_dir, cwd))
        return await LocalProcess.start(cmd, cwd=abs_cwd, env=env)

    async def run_command(
        self,
        cmd: Command,
        *,
        cwd: str = ".",
        env: Optional[dict[str, str]] = None,
        timeout: Optional[float] = None,
        show_output: Optional[bool] = True,
    ) -> tuple[Optional[int], str, str]:
        """
        Run command and wait for it to finish.

        Status code is an integer representing the process exit code, or
        None if the process timed out and was terminated.

        :param cmd: Command to run (list of arguments, or a shell command string).
        :param cwd: Working directory, relative to the root directory.
        :param env: Environment variables.
        :param timeout: Timeout in seconds (None to wait until the command finishes).
        :param show_output: Pass the output to the output handler as it arrives.
        :return: Tuple of (status code, stdout, stderr).
        """
        terminated = False
        process = await self.start_process(cmd, cwd=cwd, env=env)

        t0 = time.time()
        while process.is_running and (timeout is None or (time.time() - t0) < timeout):
            out, err = await process.read_output(BUSY_WAIT_INTERVAL)
            if self.output_handler and (out or err) and show_output:
                await self.output_handler(out, err)

        if process.is_running:
            log.debug(f"Process {format_command(cmd)} still running after {timeout}s, terminating")
            await process.terminate()
            terminated = True

        retcode = await process.wait()

        out, err = await process.read_output()
        if self.output_handler and (out or err) and show_output:
            await self.output_handler(out, err)

        status_code = None if terminated else retcode

        log.debug(f"Process {format_command(cmd)} finished with status {status_code}")
        return (status_code, process.stdout, process.stderr)


__all__ = ["Command", "LocalProcess", "ProcessManager", "format_command"]
