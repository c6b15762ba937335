"""
YAML file storage for the rssd configuration.

Loads and persists the command template and the watch-list with its
watermarks. Writes go to a temporary file in the same directory which is
then renamed over the target, so a crash leaves either the old or the new
configuration on disk, never a partial one.

There is no locking: running two rssd processes against the same file at
the same time is undefined behavior.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from rssd.config import Configuration
from rssd.errors import ConfigCorruptError, ConfigError, ConfigNotFoundError, PersistenceError

logger = logging.getLogger(__name__)

FILE_MODE = 0o600
DIR_MODE = 0o755


class ConfigStore:
    """
    File-backed store for a single Configuration.

    The path is fixed at construction; the store holds no cached state
    between calls.
    """

    def __init__(self, path: str | Path):
        """
        Initialize the store.

        Parameters
        ----------
        path : str | Path
            Path to the YAML configuration file.
        """
        self.path = Path(path)

    def exists(self) -> bool:
        """Return True if something exists at the configuration path."""
        return self.path.exists()

    def bootstrap(self) -> bool:
        """
        Create an empty configuration if nothing exists at the path.

        Parent directories are created as needed. An existing file is
        never touched.

        Returns
        -------
        bool
            True if a new file was written.
        """
        if self.exists():
            return False

        try:
            self.path.parent.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(
                f"Cannot create configuration directory {self.path.parent}: {e}"
            ) from e

        self.save(Configuration())
        logger.info("Initialized empty configuration at %s", self.path)
        return True

    def load(self) -> Configuration:
        """
        Load and validate the configuration.

        Returns
        -------
        Configuration
            The stored configuration.

        Raises
        ------
        ConfigNotFoundError
            If the file does not exist.
        ConfigCorruptError
            If the file is not valid YAML or does not describe a configuration.
        ConfigError
            If the file exists but cannot be read.
        """
        try:
            raw_bytes = self.path.read_bytes()
        except FileNotFoundError as e:
            raise ConfigNotFoundError(f"Configuration file not found: {self.path}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read configuration file {self.path}: {e}") from e

        try:
            raw_config: Any = yaml.safe_load(raw_bytes)
        except yaml.YAMLError as e:
            raise ConfigCorruptError(f"Configuration file {self.path} is not valid YAML: {e}") from e

        if not isinstance(raw_config, dict):
            raise ConfigCorruptError(
                f"Configuration file {self.path} does not contain a mapping"
            )

        try:
            config = Configuration.model_validate(raw_config)
        except ValidationError as e:
            raise ConfigCorruptError(f"Configuration file {self.path} is invalid: {e}") from e

        logger.debug(
            "Loaded configuration from %s: %d feed(s)",
            self.path,
            len(config.feeds),
        )
        return config

    def save(self, config: Configuration) -> None:
        """
        Atomically replace the stored configuration.

        Parameters
        ----------
        config : Configuration
            Configuration to persist.

        Raises
        ------
        PersistenceError
            If the file cannot be written. The previous file is left intact.
        """
        # Non-ASCII is escaped: raw line-break characters such as U+0085
        # would be folded into spaces on reload
        data = yaml.safe_dump(
            config.model_dump(mode="json"),
            sort_keys=False,
            default_flow_style=False,
        )

        tmp_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_path = Path(tmp.name)
                tmp.write(data)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.chmod(tmp_path, FILE_MODE)
            os.replace(tmp_path, self.path)
            self._sync_directory()
        except OSError as e:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise PersistenceError(f"Cannot write configuration file {self.path}: {e}") from e

        logger.debug("Saved configuration to %s", self.path)

    def _sync_directory(self) -> None:
        """Flush the parent directory so the rename survives a power loss."""
        fd = os.open(self.path.parent, os.O_RDONLY)
        try:
            os.fsync(fd)
        finally:
            os.close(fd)
