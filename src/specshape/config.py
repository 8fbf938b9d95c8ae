"""Settings for specshape: where they live and how the layers combine.

Directories follow the XDG Base Directory layout on Linux and the BSDs
(``$XDG_CONFIG_HOME/specshape`` and ``$XDG_DATA_HOME/specshape``) and fall
back to ``~/.specshape`` elsewhere.  The config directory holds the user
``config.json``; the data directory holds crash logs.

Effective settings are layered, highest first:

1. CLI flags
2. ``SPECSHAPE_INDENT`` / ``SPECSHAPE_TIMEOUT``
3. ``./specshape.json`` in the working directory
4. the user ``config.json``
5. model defaults

Every file this package writes goes through :func:`atomic_write`, including
the output of ``specshape build``.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from specshape.exceptions import ConfigError
from specshape.models import GlobalConfig

_APP_NAME = "specshape"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "specshape.json"

# Environment variable -> (section, field)
_ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "SPECSHAPE_INDENT": ("output", "indent"),
    "SPECSHAPE_TIMEOUT": ("loader", "timeout"),
}


# --- Directories ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(xdg_var: str, *xdg_default: str) -> Path:
    """Resolve and create one of the application directories."""
    if _is_xdg_platform():
        base = os.environ.get(xdg_var) or Path.home().joinpath(*xdg_default)
        path = Path(base) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """``~/.config/specshape`` (XDG) or ``~/.specshape``."""
    return _app_dir("XDG_CONFIG_HOME", ".config")


def get_data_dir() -> Path:
    """``~/.local/share/specshape`` (XDG) or ``~/.specshape``."""
    return _app_dir("XDG_DATA_HOME", ".local", "share")


# --- Atomic writes ---


def atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* in a single rename.

    The text is written to a temporary file next to *path*, flushed to
    disk, and renamed over the target.  If anything fails, including a
    ``KeyboardInterrupt``, the temporary file is removed and *path* keeps
    its previous content (or stays absent).
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


# --- Config files ---


def global_config_path() -> Path:
    """Location of the user ``config.json``."""
    return get_config_dir() / _CONFIG_FILENAME


def _read_json(path: Path, label: str) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {label} at {path}: expected a JSON object")
    return data


def load_global_config() -> GlobalConfig:
    """Read the user config, or return defaults when there is none.

    Raises:
        ConfigError: If the file is unreadable, not a JSON object, or fails
            validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        return GlobalConfig.model_validate(_read_json(path, "global config"))
    except ValidationError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Write the user config atomically."""
    text = json.dumps(config.model_dump(mode="json"), indent=2) + "\n"
    atomic_write(global_config_path(), text)


def load_project_config() -> Optional[dict[str, Any]]:
    """Read ``./specshape.json`` as a raw dict, or ``None`` when absent.

    The file is partial: it only lists the settings a repository wants to
    pin, such as ``{"output": {"indent": 4}}``.

    Raises:
        ConfigError: If the file is unreadable or not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    return _read_json(path, "project config")


# --- Resolution ---


def _layer(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Return *base* with *overlay* applied section by section."""
    merged = {
        key: dict(value) if isinstance(value, dict) else value
        for key, value in base.items()
    }
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key].update(value)
        else:
            merged[key] = value
    return merged


def resolve_config(
    cli_indent: Optional[int] = None,
    cli_timeout: Optional[float] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Combine every settings layer into the effective configuration.

    ``None`` arguments leave the lower layers in charge.

    Raises:
        ConfigError: If any layer is unreadable or the combined values fail
            validation.
    """
    data = load_global_config().model_dump(mode="json")

    project = load_project_config()
    if project is not None:
        data = _layer(data, project)

    for var, (section, field) in _ENV_OVERRIDES.items():
        value = os.environ.get(var)
        if value:
            data = _layer(data, {section: {field: value}})

    flags = {
        ("output", "indent"): cli_indent,
        ("output", "format"): cli_format,
        ("loader", "timeout"): cli_timeout,
    }
    for (section, field), value in flags.items():
        if value is not None:
            data = _layer(data, {section: {field: value}})

    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def set_config_value(key: str, value: str) -> GlobalConfig:
    """Set a dotted key such as ``output.indent`` in the user config.

    The value is validated (and coerced) by the model before saving.

    Raises:
        ConfigError: If the key is unknown or the value is invalid.
    """
    section, _, field = key.partition(".")
    data = load_global_config().model_dump(mode="json")
    if section not in data or field not in data[section]:
        known = ", ".join(f"{s}.{f}" for s, fields in data.items() for f in fields)
        raise ConfigError(f"Unknown config key '{key}'. Known keys: {known}")
    data[section][field] = value
    try:
        config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid value for '{key}': {exc}") from exc
    save_global_config(config)
    return config
