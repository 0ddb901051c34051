"""Blog configuration loaded from the repository's YAML configuration file.

The file holds default settings at the top level; a key named after a
language overrides them for that language:

    title: My Blog
    sub_title: Notes
    bg:
      title: Моят блог
"""

import logging
from dataclasses import dataclass, fields
from typing import Iterable

import yaml

from blogsync.config import get_configuration_file, get_languages
from blogsync.repository.provider import (
    FileNotFound,
    RepositoryProvider,
    normalize_path,
)

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Blog"


class ConfigurationError(Exception):
    """Raised when the configuration file cannot be understood."""

    pass


@dataclass
class Configuration:
    """Site-wide settings for one language."""

    language: str
    title: str = DEFAULT_TITLE
    sub_title: str | None = None
    logo_path: str | None = None
    background_image_path: str | None = None
    styles_path: str | None = None


_SETTING_NAMES = tuple(f.name for f in fields(Configuration) if f.name != "language")


def updated(paths: Iterable[str]) -> bool:
    """Check if the configuration file is among the changed paths."""
    configuration_file = normalize_path(get_configuration_file())
    return any(normalize_path(path) == configuration_file for path in paths)


def _settings(data: dict) -> dict:
    return {
        name: str(data[name]) for name in _SETTING_NAMES if data.get(name) is not None
    }


def _parse(content: str) -> dict:
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {get_configuration_file()}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"{get_configuration_file()} must contain a mapping, "
            f"got {type(data).__name__}"
        )
    return data


def from_file(provider: RepositoryProvider) -> list[Configuration]:
    """Load one Configuration per configured language.

    A missing configuration file yields default configurations.

    Raises:
        ConfigurationError: If the file is not a YAML mapping
    """
    content = provider.read_file(get_configuration_file())
    if isinstance(content, FileNotFound):
        logger.info(f"No {content.path} in repository, using default configuration")
        data = {}
    else:
        data = _parse(content)

    defaults = _settings(data)
    configurations = []
    for language in get_languages():
        overrides = data.get(language)
        if overrides is not None and not isinstance(overrides, dict):
            raise ConfigurationError(
                f"Settings for language {language!r} must be a mapping"
            )
        settings = {**defaults, **_settings(overrides or {})}
        configurations.append(Configuration(language=language, **settings))
    return configurations
