# SPDX-FileCopyrightText: 2023 Jeff Epler <jepler@gmail.com>
#
# SPDX-License-Identifier: MIT

import functools
import json
import os
import pathlib
from collections.abc import Mapping
from dataclasses import Field, dataclass, fields
from typing import Any, Optional

import click
import platformdirs

configuration_path = platformdirs.user_config_path("scriptutils")
settings_file = configuration_path / "settings.json"

ENV_PREFIX = "SCRIPTUTILS_"


class InvalidSetting(ValueError):
    pass


@dataclass
class Settings:
    scripts_dir: str = "scripts"
    """Subdirectory of a project holding its script files"""
    script_suffix: str = ".py"
    """Suffix appended to default script names"""
    max_hops: int = 40
    """Maximum number of symbolic links followed before giving up"""
    venv_name: str = ".venv"
    """Name of a project's virtual environment directory"""
    quiet_flag: str = "-q"
    """First script argument that silences environment activation"""
    always_quiet: bool = False
    """Never announce environment activation"""
    log_level: str = "WARNING"
    """Log level used by the command line interface"""


def convert_str_to_field(field: Field[Any], value: str) -> Any:
    try:
        if field.type is bool:
            return click.types.BoolParamType().convert(value, None, None)
        return field.type(value)
    except (ValueError, click.BadParameter) as e:
        raise InvalidSetting(
            f"Invalid value for {field.name} with value {value!r}: {e}"
        ) from e


def apply_mapping(settings: Settings, values: Mapping[str, Any]) -> None:
    all_fields = {f.name: f for f in fields(settings)}
    for name, value in values.items():
        field = all_fields.get(name.replace("-", "_"))
        if field is None:
            raise InvalidSetting(f"Unknown setting {name!r}")
        if isinstance(value, str) and field.type is not str:
            value = convert_str_to_field(field, value)
        elif not isinstance(value, field.type):
            raise InvalidSetting(
                f"Setting {field.name} must be {field.type.__name__}, not {value!r}"
            )
        setattr(settings, field.name, value)


def configure_from_environment(
    settings: Settings, environ: Optional[Mapping[str, str]] = None
) -> None:
    if environ is None:
        environ = os.environ
    for field in fields(settings):
        value = environ.get(f"{ENV_PREFIX}{field.name.upper()}")
        if value is None:
            continue
        setattr(settings, field.name, convert_str_to_field(field, value))


def load_settings(
    path: Optional[pathlib.Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Build settings from defaults, the settings file and the environment

    Later sources win.  A missing settings file is not an error."""
    settings = Settings()
    path = settings_file if path is None else path
    if path.exists():
        try:
            content = json.loads(path.read_text(encoding="utf-8"))
        except json.decoder.JSONDecodeError as e:
            raise InvalidSetting(f"{path}: {e}") from e
        if not isinstance(content, dict):
            raise InvalidSetting(f"{path}: expected a JSON object")
        apply_mapping(settings, content)
    configure_from_environment(settings, environ)
    return settings


@functools.cache
def get_settings() -> Settings:
    return load_settings()
