"""
Exception hierarchy for rssd.

Every failure the tool can report derives from RssdError and carries
the process exit code the command-line entry point uses for it.
"""


class RssdError(Exception):
    """Base class for all rssd errors."""

    exit_code = 1


class ConfigError(RssdError):
    """Raised when the configuration location cannot be resolved."""

    exit_code = 2


class ConfigNotFoundError(RssdError):
    """Raised when the configuration file does not exist."""

    exit_code = 3


class ConfigCorruptError(RssdError):
    """Raised when the configuration file does not decode to a valid configuration."""

    exit_code = 4


class PersistenceError(RssdError):
    """Raised when the configuration cannot be written to disk."""

    exit_code = 5


class FetchError(RssdError):
    """Base class for feed retrieval failures."""

    exit_code = 6


class NetworkError(FetchError):
    """Raised on transport failure or a non-success HTTP status."""

    pass


class FetchTimeoutError(FetchError):
    """Raised when a feed does not arrive within its deadline."""

    exit_code = 7


class FeedParseError(FetchError):
    """Raised when retrieved bytes are not a feed, or the feed has no entries."""

    exit_code = 8


class ExecutionError(RssdError):
    """
    Raised when a dispatched command cannot be spawned or exits non-zero.

    Attributes
    ----------
    command : str
        The command line that was run.
    returncode : int | None
        Exit status of the shell. Negative values are terminating signals,
        None means the shell never started.
    """

    exit_code = 9

    def __init__(self, command: str, returncode: int | None, message: str | None = None):
        self.command = command
        self.returncode = returncode
        if message is None:
            if returncode is None:
                message = f"Failed to run command: {command}"
            elif returncode < 0:
                message = f"Command killed by signal {-returncode}: {command}"
            else:
                message = f"Command exited with status {returncode}: {command}"
        super().__init__(message)


class DuplicateFeedError(RssdError):
    """Raised when adding a feed URL that is already watched."""

    exit_code = 10


class FeedNotWatchedError(RssdError):
    """Raised when referring to a feed URL that is not in the watch-list."""

    exit_code = 11
