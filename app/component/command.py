import asyncio
import shlex
from dataclasses import dataclass

from utils import traceroot_wrapper as traceroot

logger = traceroot.get_logger("command")


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def split_command(command: str | list[str]) -> list[str]:
    if isinstance(command, str):
        return shlex.split(command)
    return list(command)


async def run_command(command: str | list[str], timeout: float | None = None) -> CommandResult:
    r"""Run a command without a shell and capture its output.

    The child is killed when the wait times out or the caller is cancelled.

    Args:
        command (str | list[str]): Command line or argv list.
        timeout (float, optional): Seconds to wait before killing the
            process. ``None`` waits indefinitely.

    Returns:
        CommandResult: Exit code with decoded stdout and stderr.

    Raises:
        FileNotFoundError: The executable does not exist.
        asyncio.TimeoutError: The process outlived ``timeout``.
    """
    argv = split_command(command)
    logger.debug("Running command", extra={"argv": argv, "timeout": timeout})
    process = await asyncio.create_subprocess_exec(
        *argv,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except BaseException:
        if process.returncode is None:
            process.kill()
            await process.wait()
        raise
    return CommandResult(
        returncode=process.returncode,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )
