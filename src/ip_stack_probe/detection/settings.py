"""Detection settings with optional YAML overrides."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from yaml import YAMLError

from ip_stack_probe.detection.interfaces import DEFAULT_LISTING_COMMAND
from ip_stack_probe.detection.nat64 import DEFAULT_IPV4_ONLY_DOMAIN
from ip_stack_probe.detection.native import DEFAULT_ROUTE_TARGET, IF_INET6_PATH


class SettingsError(ValueError):
    """Raised when a settings file cannot be read or contains invalid values."""


@dataclasses.dataclass(frozen=True)
class DetectionSettings:
    probe_domain: str = DEFAULT_IPV4_ONLY_DOMAIN
    listing_command: tuple[str, ...] = DEFAULT_LISTING_COMMAND
    command_timeout: float = 5.0
    resolve_timeout: float = 5.0
    if_inet6_path: str = IF_INET6_PATH
    route_probe_target: str = DEFAULT_ROUTE_TARGET
    native_fallback: bool = True


_FIELD_TYPES: dict[str, tuple[type, ...]] = {
    "probe_domain": (str,),
    "listing_command": (list, str),
    "command_timeout": (int, float),
    "resolve_timeout": (int, float),
    "if_inet6_path": (str,),
    "route_probe_target": (str,),
    "native_fallback": (bool,),
}


def settings_from_mapping(data: Mapping[str, Any], source: str = "<mapping>") -> DetectionSettings:
    """Validate a raw mapping and build DetectionSettings from it."""

    unknown = sorted(set(data) - set(_FIELD_TYPES))
    if unknown:
        raise SettingsError(f"{source}: unknown settings {unknown}")

    values: dict[str, Any] = {}
    for key, value in data.items():
        expected = _FIELD_TYPES[key]
        # bool is an int subclass; reject it for numeric fields.
        if not isinstance(value, expected) or (isinstance(value, bool) and bool not in expected):
            names = " or ".join(kind.__name__ for kind in expected)
            raise SettingsError(f"{source}: {key} should be {names}, got {value!r}")
        values[key] = value

    command = values.get("listing_command")
    if command is not None:
        parts = command.split() if isinstance(command, str) else [str(part) for part in command]
        if not parts:
            raise SettingsError(f"{source}: listing_command must not be empty")
        values["listing_command"] = tuple(parts)

    for key in ("command_timeout", "resolve_timeout"):
        if key in values:
            if values[key] <= 0:
                raise SettingsError(f"{source}: {key} must be positive, got {values[key]!r}")
            values[key] = float(values[key])

    return DetectionSettings(**values)


def load_settings(path: str | Path | None = None) -> DetectionSettings:
    """Load settings from a YAML file, or return defaults when no path is given."""

    if path is None:
        return DetectionSettings()

    settings_path = Path(path)
    try:
        with settings_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except YAMLError as exc:
        raise SettingsError(f"{settings_path}: invalid YAML: {exc}") from exc
    except OSError as exc:
        raise SettingsError(f"{settings_path}: {exc}") from exc

    if data is None:
        return DetectionSettings()
    if not isinstance(data, Mapping):
        raise SettingsError(f"{settings_path}: top level must be a mapping")
    return settings_from_mapping(data, source=str(settings_path))
