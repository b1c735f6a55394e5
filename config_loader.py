"""Helpers for resolving configuration files and runtime settings."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_CONFIG_NAME = "config.json"
CONFIG_ENV_VAR = "POST_EXPORTS_CONFIG"

PATH_KEY_SUFFIXES = ("_dir", "_path", "_glob")
WAIT_UNTIL_CHOICES = ("commit", "domcontentloaded", "load", "networkidle")
MISSING_FRONT_MATTER_CHOICES = ("fail", "skip")

DEFAULTS: Dict[str, Any] = {
    "content_glob": "src/posts/**/*.md",
    "template_marker": "_template",
    "assets_dir": "src/assets",
    "asset_url_prefix": "/assets",
    "book_css_path": "src/assets/css/book.css",
    "books_dir": "src/books",
    "covers_dir": "src/assets/img/books",
    "social_dir": "src/assets/img/social",
    "preview_base_url": "http://localhost:8080",
    "author": "",
    "language": "en",
    "site_url": "",
    "contact_email": "",
    "concurrency": 4,
    "navigation_timeout_ms": 60_000,
    "wait_until": "load",
    "on_missing_front_matter": "fail",
}


class ConfigError(Exception):
    """Raised when runtime configuration cannot be loaded."""


class ConfigNotFoundError(ConfigError):
    """Raised when no configuration file exists at the resolved location."""


@dataclass(frozen=True, slots=True)
class Settings:
    """Resolved settings shared by the export and render pipelines."""

    content_glob: str
    template_marker: str
    assets_dir: Path
    asset_url_prefix: str
    book_css_path: Path
    books_dir: Path
    covers_dir: Path
    social_dir: Path
    preview_base_url: str
    author: str
    language: str
    site_url: str
    contact_email: str
    concurrency: int
    navigation_timeout_ms: int
    wait_until: str
    on_missing_front_matter: str

    @property
    def skip_incomplete(self) -> bool:
        """Return True when items lacking front matter are skipped."""

        return self.on_missing_front_matter == "skip"


def _resolve_config_path(path: Optional[str]) -> str:
    """Return the absolute config path, honoring overrides and defaults."""
    env_override = os.environ.get(CONFIG_ENV_VAR)
    candidate = path or env_override or DEFAULT_CONFIG_NAME
    expanded = os.path.expanduser(candidate)
    if os.path.isabs(expanded) and os.path.isfile(expanded):
        return expanded

    search_roots = [os.getcwd(), os.path.dirname(__file__)]
    for root in search_roots:
        resolved = os.path.abspath(os.path.join(root, expanded))
        if os.path.isfile(resolved):
            return resolved

    raise ConfigNotFoundError(f"Configuration file not found: {candidate}")


def _resolve_path(value: str, base_dir: str) -> str:
    """Resolve ``value`` into an absolute path relative to ``base_dir``."""
    expanded = os.path.expanduser(value)
    if os.path.isabs(expanded):
        return expanded
    return os.path.abspath(os.path.join(base_dir, expanded))


def _resolve_paths(data: Dict[str, Any], base_dir: str) -> Dict[str, Any]:
    resolved: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str) and key.endswith(PATH_KEY_SUFFIXES):
            resolved[key] = _resolve_path(value, base_dir)
        else:
            resolved[key] = value
    return resolved


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load a JSON config file and normalize any filesystem paths."""
    config_path = _resolve_config_path(path)
    with open(config_path, "r", encoding="utf-8") as config_file:
        try:
            data = json.load(config_file)
        except json.JSONDecodeError as exc:
            raise ConfigError(
                f"Invalid JSON in {config_path}: {exc}"
            ) from exc

    if not isinstance(data, dict):
        raise ConfigError(
            f"{config_path} must contain a JSON object,"
            f" got {type(data).__name__}"
        )

    return _resolve_paths(data, os.path.dirname(config_path))


def load_settings(
    path: Optional[str] = None,
    *,
    overrides: Optional[Dict[str, Any]] = None,
) -> Settings:
    """Merge the config file (if any) and ``overrides`` over ``DEFAULTS``.

    When no path is given and neither ``POST_EXPORTS_CONFIG`` nor
    ``config.json`` can be found, the defaults are resolved against the
    current working directory. An explicit ``path`` that does not exist
    raises :class:`ConfigNotFoundError`; a file that exists but cannot be
    parsed always raises :class:`ConfigError`.
    """
    try:
        file_values = load_config(path)
    except ConfigNotFoundError:
        if path or os.environ.get(CONFIG_ENV_VAR):
            raise
        file_values = {}

    merged: Dict[str, Any] = dict(_resolve_paths(DEFAULTS, os.getcwd()))
    merged.update(file_values)
    for key, value in (overrides or {}).items():
        if value is None:
            continue
        if isinstance(value, str) and key.endswith(PATH_KEY_SUFFIXES):
            value = _resolve_path(value, os.getcwd())
        merged[key] = value

    unknown = sorted(set(merged) - set(DEFAULTS))
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    return _build_settings(merged)


def _build_settings(values: Dict[str, Any]) -> Settings:
    try:
        concurrency = int(values["concurrency"])
        timeout_ms = int(values["navigation_timeout_ms"])
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid numeric setting: {exc}") from exc

    if concurrency < 1:
        raise ConfigError("concurrency must be at least 1.")
    if timeout_ms < 0:
        raise ConfigError("navigation_timeout_ms must not be negative.")
    if values["wait_until"] not in WAIT_UNTIL_CHOICES:
        raise ConfigError(
            f"wait_until must be one of {', '.join(WAIT_UNTIL_CHOICES)}."
        )
    if values["on_missing_front_matter"] not in MISSING_FRONT_MATTER_CHOICES:
        raise ConfigError(
            "on_missing_front_matter must be one of"
            f" {', '.join(MISSING_FRONT_MATTER_CHOICES)}."
        )

    return Settings(
        content_glob=str(values["content_glob"]),
        template_marker=str(values["template_marker"]),
        assets_dir=Path(values["assets_dir"]),
        asset_url_prefix=str(values["asset_url_prefix"]).rstrip("/"),
        book_css_path=Path(values["book_css_path"]),
        books_dir=Path(values["books_dir"]),
        covers_dir=Path(values["covers_dir"]),
        social_dir=Path(values["social_dir"]),
        preview_base_url=str(values["preview_base_url"]).rstrip("/"),
        author=str(values["author"] or ""),
        language=str(values["language"] or "en"),
        site_url=str(values["site_url"] or ""),
        contact_email=str(values["contact_email"] or ""),
        concurrency=concurrency,
        navigation_timeout_ms=timeout_ms,
        wait_until=str(values["wait_until"]),
        on_missing_front_matter=str(values["on_missing_front_matter"]),
    )


__all__ = [
    "CONFIG_ENV_VAR",
    "ConfigError",
    "ConfigNotFoundError",
    "DEFAULTS",
    "Settings",
    "load_config",
    "load_settings",
]
