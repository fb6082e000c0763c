"""
tinysh Configuration Loader

Configuration management for the shell:
- JSON configuration file loading
- Path file loading (one search directory per line)
- Default value handling
- Type checking of loaded values

The resulting Config is built once at startup and handed explicitly to
the shell, dispatcher, launcher and handlers; there is no global
configuration instance.

Author: YSNRFD
Version: 1.0.0
"""

import errno
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, List

from tinysh.exceptions import ConfigValidationError
from tinysh.logger import get_logger


DEFAULT_PROMPT = "tinysh> "
DEFAULT_DELIMITERS = " \t\n"


@dataclass
class ShellConfig:
    """Interactive shell settings."""
    prompt: str = DEFAULT_PROMPT
    delimiters: str = DEFAULT_DELIMITERS
    verbose: bool = False


@dataclass
class SearchPathConfig:
    """
    Executable search settings.

    An empty directory list means the inherited PATH is used.
    """
    path_file: Optional[str] = None
    directories: List[str] = field(default_factory=list)
    fallback: bool = False  # try later directories when a program is not found


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "INFO"
    log_file: Optional[str] = None
    use_colors: bool = True


@dataclass
class Config:
    """
    Main configuration container.

    Holds all configuration settings for one shell session.
    """
    shell: ShellConfig = field(default_factory=ShellConfig)
    search_path: SearchPathConfig = field(default_factory=SearchPathConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def verbose(self) -> bool:
        return self.shell.verbose

    @property
    def paths(self) -> List[str]:
        """The configured PathList; empty when PATH from the environment is used."""
        return self.search_path.directories


class ConfigLoader:
    """
    Configuration loader.

    Handles loading configuration from JSON files and reading the
    search-path file.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load('tinysh.json')
        >>> loader.apply_path_file(config)
        >>> print(config.paths)
        ['/usr/local/bin', '/usr/bin', '/bin']
    """

    _SCHEMA = {
        'shell': {
            'prompt': str,
            'delimiters': str,
            'verbose': bool,
        },
        'search_path': {
            'path_file': str,
            'directories': list,
            'fallback': bool,
        },
        'logging': {
            'level': str,
            'log_file': str,
            'use_colors': bool,
        },
    }

    def __init__(self):
        self._logger = get_logger('config')

    def load(self, config_path: str) -> Config:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Config object with loaded settings

        Raises:
            ConfigValidationError: If the file cannot be loaded, parsed or
                contains values of the wrong type
        """
        path = Path(config_path)

        if not path.exists():
            raise ConfigValidationError(
                f"Configuration file not found: {config_path}",
                path=config_path
            )

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(
                f"Invalid JSON in configuration file: {e}",
                path=config_path
            )
        except OSError as e:
            raise ConfigValidationError(
                f"Cannot read configuration file: {e}",
                path=config_path
            )

        if not isinstance(data, dict):
            raise ConfigValidationError(
                "Configuration file must contain a JSON object",
                path=config_path
            )

        self._validate(data, config_path)
        return self._parse_config(data)

    def _validate(self, data: dict[str, Any], config_path: str) -> None:
        """Check section names and value types against the schema."""
        for section, values in data.items():
            if section not in self._SCHEMA:
                raise ConfigValidationError(
                    f"Unknown configuration section: {section}",
                    path=config_path
                )
            if not isinstance(values, dict):
                raise ConfigValidationError(
                    f"Section '{section}' must be a JSON object",
                    path=config_path
                )
            for key, value in values.items():
                expected = self._SCHEMA[section].get(key)
                if expected is None:
                    raise ConfigValidationError(
                        f"Unknown configuration key: {section}.{key}",
                        path=config_path
                    )
                if value is not None and not isinstance(value, expected):
                    raise ConfigValidationError(
                        f"Configuration key {section}.{key} must be of type "
                        f"{expected.__name__}",
                        path=config_path
                    )

        directories = data.get('search_path', {}).get('directories') or []
        if not all(isinstance(d, str) for d in directories):
            raise ConfigValidationError(
                "search_path.directories must be a list of strings",
                path=config_path
            )

    def _parse_config(self, data: dict[str, Any]) -> Config:
        """Parse configuration data into Config object."""
        config = Config()

        if 'shell' in data:
            shell_data = data['shell']
            config.shell = ShellConfig(
                prompt=shell_data.get('prompt', config.shell.prompt),
                delimiters=shell_data.get('delimiters', config.shell.delimiters),
                verbose=shell_data.get('verbose', config.shell.verbose),
            )

        if 'search_path' in data:
            path_data = data['search_path']
            config.search_path = SearchPathConfig(
                path_file=path_data.get('path_file', config.search_path.path_file),
                directories=list(path_data.get('directories') or []),
                fallback=path_data.get('fallback', config.search_path.fallback),
            )

        if 'logging' in data:
            log_data = data['logging']
            config.logging = LoggingConfig(
                level=log_data.get('level', config.logging.level),
                log_file=log_data.get('log_file', config.logging.log_file),
                use_colors=log_data.get('use_colors', config.logging.use_colors),
            )

        return config

    def load_path_file(self, file_path: str) -> List[str]:
        """
        Read a path file: one search directory per line.

        Blank lines are skipped and surrounding whitespace is stripped.
        A missing file is not an error; any other failure to read it is
        logged. Either way an empty list is returned, which selects the
        search path defined by the environment.

        Args:
            file_path: Path to the path file

        Returns:
            Ordered list of directories
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                lines = f.readlines()
        except OSError as e:
            if e.errno != errno.ENOENT:
                self._logger.warning(
                    f"Unable to open path file {file_path}: {e.strerror}"
                )
            return []
        except UnicodeDecodeError as e:
            self._logger.warning(f"Unable to decode path file {file_path}: {e}")
            return []

        self._logger.debug(f"Obtaining path from the following file: {file_path}")
        return [line.strip() for line in lines if line.strip()]

    def apply_path_file(self, config: Config) -> Config:
        """
        Replace the configured directories with the contents of the path
        file named in config, when there is one and it yields directories.
        """
        path_file = config.search_path.path_file
        if not path_file:
            return config

        directories = self.load_path_file(path_file)
        if directories:
            config.search_path.directories = directories
        return config
