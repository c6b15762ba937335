"""
Runs expanded command lines through the shell.
"""

import asyncio
import logging

from rssd.errors import ExecutionError

logger = logging.getLogger(__name__)

DEFAULT_SHELL = "/bin/sh"


class CommandDispatcher:
    """
    Executes command lines with ``sh -c``.

    The child inherits stdin, stdout and stderr. There is no timeout:
    a hanging command blocks until it exits or is killed externally.
    """

    def __init__(self, shell: str = DEFAULT_SHELL):
        self.shell = shell

    async def run(self, command_line: str) -> int:
        """
        Run a command line and wait for it to finish.

        Parameters
        ----------
        command_line : str
            The command passed to the shell as a single argument.

        Returns
        -------
        int
            The exit status, always 0.

        Raises
        ------
        ExecutionError
            If the shell cannot be spawned, or the command exits non-zero
            or is killed by a signal.
        """
        logger.info("Running command: %s", command_line)

        try:
            process = await asyncio.create_subprocess_exec(self.shell, "-c", command_line)
        except OSError as e:
            raise ExecutionError(
                command_line, None, f"Failed to spawn {self.shell}: {e}"
            ) from e

        returncode = await process.wait()
        if returncode != 0:
            raise ExecutionError(command_line, returncode)

        logger.debug("Command finished successfully")
        return returncode
