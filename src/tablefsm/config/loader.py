"""Configuration loader for table descriptions.

This module loads machine descriptions from:
- Files (JSON, YAML)
- Dictionaries

A description with ``transitions`` at the top level and no ``tables`` is
treated as a machine with a single table of the same name.
"""

import json
import os
import re
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from pydantic import ValidationError

from tablefsm.config.schema import MachineConfig
from tablefsm.core.exceptions import ConfigurationError

ENV_REFERENCE = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<default>[^}]*))?\}")


class ConfigLoader:
    """Load and validate machine descriptions from various sources."""

    def __init__(self, env_prefix: str = "TABLEFSM_"):
        """Initialize the ConfigLoader.

        Args:
            env_prefix: Prefix tried when a referenced environment variable is unset.
        """
        self._env_prefix = env_prefix

    def load_from_file(self, file_path: Union[str, Path], resolve_env: bool = True) -> MachineConfig:
        """Load a description from a file.

        Args:
            file_path: Path to a JSON or YAML file.
            resolve_env: Whether to resolve environment variables.

        Returns:
            Validated MachineConfig instance.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ConfigurationError: If the format is unsupported or the content is invalid.
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        raw_config = self._load_file(file_path)
        if not isinstance(raw_config, dict):
            raise ConfigurationError(
                f"Configuration file must contain a mapping: {file_path}",
                context={"path": str(file_path)},
            )

        if "name" not in raw_config:
            raw_config = {"name": file_path.stem, **raw_config}

        return self.load_from_dict(raw_config, resolve_env=resolve_env)

    def load_from_dict(self, config_dict: Dict[str, Any], resolve_env: bool = True) -> MachineConfig:
        """Load a description from a dictionary.

        Args:
            config_dict: Description dictionary.
            resolve_env: Whether to resolve environment variables.

        Returns:
            Validated MachineConfig instance.
        """
        processed_config = config_dict.copy()

        if resolve_env:
            processed_config = self._resolve_environment_vars(processed_config)

        return self._finalize_config(processed_config)

    def _load_file(self, file_path: Path) -> Any:
        suffix = file_path.suffix.lower()

        with open(file_path) as f:
            if suffix == ".json":
                return json.load(f)
            elif suffix in [".yaml", ".yml"]:
                return yaml.safe_load(f)
            else:
                raise ConfigurationError(
                    f"Unsupported file format: {suffix}",
                    context={"path": str(file_path)},
                )

    def _resolve_environment_vars(self, config: Any) -> Any:
        """Substitute ``${VAR}`` and ``${VAR:-default}`` references in string values.

        References may appear anywhere inside a string. ``VAR`` is looked up
        first, then the prefixed name, then the default.
        """
        if isinstance(config, str):
            return ENV_REFERENCE.sub(self._lookup, config)
        if isinstance(config, dict):
            return {key: self._resolve_environment_vars(value) for key, value in config.items()}
        if isinstance(config, list):
            return [self._resolve_environment_vars(item) for item in config]
        return config

    def _lookup(self, reference: re.Match) -> str:
        name, default = reference.group("name"), reference.group("default")
        for candidate in (name, f"{self._env_prefix}{name}"):
            if candidate in os.environ:
                return os.environ[candidate]
        if default is not None:
            return default
        raise ConfigurationError(
            f"Environment variable not found: {name}",
            context={"variable": name, "prefix": self._env_prefix},
        )

    def _finalize_config(self, config: Dict[str, Any]) -> MachineConfig:
        config = self._transform_single_table(config)
        try:
            return MachineConfig.model_validate(config)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid machine description: {e.error_count()} error(s)",
                context={"errors": e.errors(include_url=False)},
            ) from e

    def _transform_single_table(self, config: Dict[str, Any]) -> Dict[str, Any]:
        if "transitions" in config and "tables" not in config:
            config = dict(config)
            transitions = config.pop("transitions")
            config["tables"] = [{"name": config.get("name", "main"), "transitions": transitions}]
        return config
