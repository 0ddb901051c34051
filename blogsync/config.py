"""
Centralized settings for the blog content sync.

Every setting is read from the environment on access, so tests can
override values with monkeypatch or patch.dict(os.environ).
"""

import os


class InvalidSettingError(Exception):
    """Raised when an environment setting has an unusable value."""

    pass


def get_posts_folder() -> str:
    """Get the repository folder holding post sources."""
    folder = os.getenv("BLOG_POSTS_FOLDER", "posts").strip().strip("/")
    if not folder:
        raise InvalidSettingError("BLOG_POSTS_FOLDER cannot be empty")
    if "/" in folder:
        raise InvalidSettingError(
            f"BLOG_POSTS_FOLDER must be a single top-level folder, got {folder!r}"
        )
    return folder


def get_configuration_file() -> str:
    """Get the path of the blog configuration file, relative to the repo root."""
    return os.getenv("BLOG_CONFIGURATION_FILE", "blog.yml").strip()


def get_languages() -> list[str]:
    """
    Get the configured languages.

    The first language is the default one; posts of other languages live
    in a sub-folder of the posts folder named after the language.
    """
    raw = os.getenv("BLOG_LANGUAGES", "en")
    languages = [lang.strip() for lang in raw.split(",") if lang.strip()]
    if not languages:
        raise InvalidSettingError("BLOG_LANGUAGES must name at least one language")
    return languages


def get_default_language() -> str:
    """Get the default language (first in BLOG_LANGUAGES)."""
    return get_languages()[0]


def is_polling_enabled() -> bool:
    """Check if the repository should be polled for updates."""
    return os.getenv("BLOG_POLLING", "true").lower() in ("true", "1", "yes")


def get_poll_interval() -> int:
    """Get the polling interval in seconds."""
    raw = os.getenv("BLOG_POLL_INTERVAL", "10")
    try:
        interval = int(raw)
    except ValueError:
        raise InvalidSettingError(f"BLOG_POLL_INTERVAL must be an integer, got {raw!r}")
    if interval <= 0:
        raise InvalidSettingError(f"BLOG_POLL_INTERVAL must be positive, got {interval}")
    return interval


def get_meta_divider() -> str:
    """Get the line separating a post's YAML front matter from its body."""
    return os.getenv("BLOG_META_DIVIDER", "---")
