"""Validation settings: struct tag name and type-checking policy.

Settings are a frozen value object threaded into each :class:`Context`.
There is no process-wide settings instance; load one explicitly from a
dictionary, a YAML/JSON file or the environment and pass it along.

Environment variable format:
    VALIDKNOBS_<SETTING>

Examples:
    - VALIDKNOBS_STRUCT_TAG=json
    - VALIDKNOBS_STRICT_TYPES=false
"""

from __future__ import annotations

import dataclasses
import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Union

import yaml  # type: ignore[import-untyped]

from validknobs_common import ConfigurationError

if TYPE_CHECKING:
    from .context import Context

logger = logging.getLogger(__name__)

DEFAULT_STRUCT_TAG = "validation"
ENV_PREFIX = "VALIDKNOBS_"
SECTION_NAME = "validation"

_TRUE_VALUES = ("true", "yes", "1")
_FALSE_VALUES = ("false", "no", "0")


@dataclass(frozen=True)
class ValidationSettings:
    """Configuration carried by every validation context.

    Attributes:
        struct_tag: Metadata key read from ``dataclasses.field(metadata=...)``
            to find a field's display name in violation paths
        strict_types: If True, applying a constraint to a value of the wrong
            shape raises; if False it is reported as a violation instead
    """

    struct_tag: str = DEFAULT_STRUCT_TAG
    strict_types: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.struct_tag, str):
            raise ConfigurationError(
                f"struct_tag must be a string, got {type(self.struct_tag).__name__}",
                context={"key": "struct_tag", "value": self.struct_tag},
            )
        if not isinstance(self.strict_types, bool):
            raise ConfigurationError(
                f"strict_types must be a boolean, got {type(self.strict_types).__name__}",
                context={"key": "strict_types", "value": self.strict_types},
            )

    @classmethod
    def setting_names(cls) -> list[str]:
        return [f.name for f in dataclasses.fields(cls)]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ValidationSettings:
        """Create settings from a dictionary.

        Args:
            data: Mapping of setting names to values

        Returns:
            ValidationSettings instance

        Raises:
            ConfigurationError: If a key is unknown or a value has the wrong type
        """
        available = cls.setting_names()
        unknown = sorted(set(data) - set(available))
        if unknown:
            raise ConfigurationError(
                f"Unknown validation settings: {', '.join(unknown)}",
                context={"unknown": unknown, "available": available},
            )
        return cls(**dict(data))

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> ValidationSettings:
        """Load settings from a YAML or JSON file.

        The settings may sit at the top level of the file or under a
        ``validation:`` section, so they can share a file with other
        application configuration.

        Args:
            path: Path to a ``.yaml``, ``.yml`` or ``.json`` file

        Returns:
            ValidationSettings instance

        Raises:
            ConfigurationError: If the file is missing, unreadable or malformed
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(
                f"Settings file not found: {path}", context={"path": str(path)}
            )

        suffix = path.suffix.lower()
        logger.debug(f"Loading validation settings from {path}")

        with open(path) as f:
            if suffix in [".yaml", ".yml"]:
                data = yaml.safe_load(f) or {}
            elif suffix == ".json":
                data = json.load(f)
            else:
                raise ConfigurationError(
                    f"Unsupported settings file format: {suffix}",
                    context={"path": str(path), "suffix": suffix},
                )

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Settings file must contain a mapping, got {type(data).__name__}",
                context={"path": str(path)},
            )

        if SECTION_NAME in data:
            others = sorted(key for key in data if key != SECTION_NAME)
            if others:
                logger.warning(f"Ignoring non-validation sections in {path}: {', '.join(others)}")
            data = data[SECTION_NAME] or {}

        return cls.from_dict(data)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        prefix: str = ENV_PREFIX,
    ) -> ValidationSettings:
        """Load settings from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``
            prefix: Environment variable prefix (default: VALIDKNOBS_)

        Returns:
            ValidationSettings with defaults for anything not set

        Raises:
            ConfigurationError: If a boolean variable can't be parsed
        """
        environ = os.environ if environ is None else environ
        data: dict[str, Any] = {}

        struct_tag = environ.get(f"{prefix}STRUCT_TAG")
        if struct_tag is not None:
            data["struct_tag"] = struct_tag

        strict_types = environ.get(f"{prefix}STRICT_TYPES")
        if strict_types is not None:
            data["strict_types"] = _parse_bool(f"{prefix}STRICT_TYPES", strict_types)

        if data:
            logger.debug(f"Validation settings from environment: {data}")
        return cls(**data)

    def with_overrides(self, **overrides: Any) -> ValidationSettings:
        """Return a copy with the given settings replaced.

        Raises:
            ConfigurationError: If a setting name is unknown
        """
        unknown = sorted(set(overrides) - set(self.setting_names()))
        if unknown:
            raise ConfigurationError(
                f"Unknown validation settings: {', '.join(unknown)}",
                context={"unknown": unknown},
            )
        return dataclasses.replace(self, **overrides)

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)

    def context(self, value: Any, declared_type: Any = None) -> Context:
        """Create a validation context for ``value`` using these settings."""
        from .context import new_context

        return new_context(value, declared_type=declared_type, settings=self)


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"Invalid boolean for {name}: {value!r}",
        context={"variable": name, "value": value},
    )


__all__ = ["DEFAULT_STRUCT_TAG", "ENV_PREFIX", "ValidationSettings"]
