"""Load TotoConfig and the menu from toto.yaml / toto.toml if present.

Merges file config with keyword overrides.  Overrides take precedence.
A file looks like::

    toto:
      prefix: /app
      namespace: myapp.controllers
    menu:
      - beer: {many: [search, browse], one: [picture]}
      - pub:  {many: [map], one: [info]}

The sidebar variant uses top-level ``nav``, ``sidebar`` and ``tabs`` keys
instead of ``menu``.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import yaml

from toto._errors import ConfigurationError
from toto.config import TotoConfig
from toto.menu import Menu, parse_menu

CONFIG_FILES: tuple[str, ...] = ("toto.yaml", "toto.yml", "toto.toml")

_CONFIG_KEYS: frozenset[str] = frozenset({
    "prefix", "namespace", "model_class", "templates_dir",
    "instance_templates", "host", "port", "debug",
})


def load_config(root: Path, **overrides: object) -> tuple[TotoConfig, Menu | None]:
    """Load TotoConfig (and the menu, when declared) from *root*.

    Overrides whose value is *None* are ignored so CLI defaults do not
    mask file settings.

    Raises:
        ConfigurationError: If the config file cannot be parsed or holds
            invalid values.

    """
    data = _read_toto_config(root)
    file_config = _flatten_toto_section(data)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    unknown = set(merged) - _CONFIG_KEYS
    if unknown:
        msg = f"Unknown toto config keys: {sorted(unknown)}"
        raise ConfigurationError(msg)
    try:
        config = TotoConfig(root=root, **merged)  # type: ignore[arg-type]
    except TypeError as exc:
        msg = f"Invalid toto config: {exc}"
        raise ConfigurationError(msg) from exc
    return config, _menu_from(data)


def find_config_file(root: Path) -> Path | None:
    """Return the first config file present in *root*."""
    for name in CONFIG_FILES:
        path = root / name
        if path.is_file():
            return path
    return None


def _read_toto_config(root: Path) -> dict[str, object]:
    """Read toto config from yaml/toml if present.  Returns empty dict otherwise."""
    path = find_config_file(root)
    if path is None:
        return {}
    try:
        if path.suffix == ".toml":
            data = tomllib.loads(path.read_text())
        else:
            data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
        msg = f"Cannot read {path}: {exc}"
        raise ConfigurationError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path}: top level must be a mapping"
        raise ConfigurationError(msg)
    return data


def _flatten_toto_section(data: dict[str, object]) -> dict[str, object]:
    """Extract toto.* keys into top-level config."""
    result: dict[str, object] = {}
    toto = data.get("toto")
    if isinstance(toto, dict):
        result.update(toto)
    for k, v in data.items():
        if k in _CONFIG_KEYS:
            result[k] = v
    return result


def _menu_from(data: dict[str, object]) -> Menu | None:
    if "menu" in data:
        return parse_menu(data["menu"])
    if {"nav", "sidebar", "tabs"} <= set(data):
        return parse_menu({k: data[k] for k in ("nav", "sidebar", "tabs")})
    return None
