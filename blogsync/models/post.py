"""Compile post source files from a repository into Post values."""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable

import yaml

from blogsync.config import (
    get_default_language,
    get_languages,
    get_meta_divider,
    get_posts_folder,
)
from blogsync.repository.provider import FileNotFound, RepositoryHandle

logger = logging.getLogger(__name__)

PostKey = tuple[str, str]  # (language, name)


@dataclass
class PostMeta:
    """Metadata of a post, from front matter and repository file info."""

    title: str
    author: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    category: str | None = None
    tags: list[str] = field(default_factory=list)
    published: bool = True
    pinned: bool = False
    preview: str | None = None
    language: str | None = None


@dataclass
class Post:
    """A compiled post: its markdown body plus metadata."""

    name: str
    language: str
    raw: str
    meta: PostMeta


PostCache = dict[str, dict[str, Post]]  # language -> name -> post


def name_from_file(path: str) -> PostKey:
    """Derive the (language, name) key of a post path relative to the posts folder.

    "bg/some/post.md" -> ("bg", "some_post") when "bg" is a configured
    non-default language, otherwise the default language is used and the
    whole path forms the name.
    """
    default_language = get_default_language()
    parts = [p for p in path.replace("\\", "/").split("/") if p]
    language = default_language
    if len(parts) > 1 and parts[0] in get_languages() and parts[0] != default_language:
        language = parts[0]
        parts = parts[1:]

    name = "_".join(parts)
    if name.endswith(".md"):
        name = name[: -len(".md")]
    return language, name.lower()


def names_from_files(paths: Iterable[str]) -> list[PostKey]:
    """Get the (language, name) keys of the markdown files among `paths`."""
    return [name_from_file(path) for path in paths if path.endswith(".md")]


def _split_front_matter(content: str) -> tuple[dict, str]:
    """Split YAML front matter from the markdown body.

    Front matter is only recognised when the content starts with the divider
    line; otherwise the whole content is the body.
    """
    divider = re.escape(get_meta_divider())
    match = re.match(rf"^{divider}\s*\n(.*?)\n{divider}\s*(?:\n|$)", content, re.DOTALL)
    if not match:
        return {}, content

    try:
        data = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as e:
        logger.warning(f"Ignoring invalid front matter: {e}")
        return {}, content[match.end():]

    if not isinstance(data, dict):
        logger.warning("Ignoring front matter that is not a mapping")
        data = {}
    return data, content[match.end():]


def _title_from_body(body: str) -> str | None:
    """Get the first level-one heading of a markdown body."""
    match = re.search(r"^#\s+(.+?)\s*$", body, re.MULTILINE)
    return match.group(1) if match else None


def _as_tags(value) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [t.strip() for t in value.split(",") if t.strip()]
    return [str(t) for t in value]


_TRUE_WORDS = ("true", "yes", "on", "1")
_FALSE_WORDS = ("false", "no", "off", "0")


def _as_bool(value, default: bool) -> bool:
    """Read a front matter flag; quoted "false" and "no" count as false."""
    if value is None:
        return default
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        logger.warning(f"Unrecognised flag value {value!r}, using {default}")
        return default
    return bool(value)


def _build_meta(
    data: dict, body: str, name: str, language: str, file_info
) -> PostMeta:
    def _text(key, fallback=None):
        value = data.get(key)
        return str(value) if value is not None else fallback

    return PostMeta(
        title=_text("title") or _title_from_body(body) or name,
        author=_text("author", file_info.author),
        created_at=_text("created_at", file_info.created_at),
        updated_at=_text("updated_at", file_info.updated_at),
        category=_text("category"),
        tags=_as_tags(data.get("tags")),
        published=_as_bool(data.get("published"), True),
        pinned=_as_bool(data.get("pinned"), False),
        preview=_text("preview"),
        language=language,
    )


def from_file(path: str, repository: RepositoryHandle) -> Post | None:
    """Compile one post. Returns None when the file is missing."""
    posts_folder = get_posts_folder()
    provider = repository.provider

    content = provider.read_file(path, posts_folder)
    if isinstance(content, FileNotFound):
        logger.warning(f"Post source not found: {posts_folder}/{path}")
        return None

    language, name = name_from_file(path)
    data, body = _split_front_matter(content)
    file_info = provider.file_info(repository.repo, f"{posts_folder}/{path}")
    meta = _build_meta(data, body, name, language, file_info)
    return Post(name=name, language=language, raw=body, meta=meta)


def compile_posts(paths: Iterable[str], repository: RepositoryHandle) -> PostCache:
    """Compile the markdown files among `paths` (relative to the posts folder).

    Unpublished and missing posts are left out.
    """
    posts: PostCache = {}
    for path in paths:
        if not path.endswith(".md"):
            continue
        post = from_file(path, repository)
        if post is None:
            continue
        if not post.meta.published:
            logger.info(f"Skipping unpublished post {post.language}/{post.name}")
            continue
        posts.setdefault(post.language, {})[post.name] = post
    return posts


def sorted_posts(posts: Iterable[Post]) -> list[Post]:
    """Order posts for listing: pinned first, then newest first."""
    by_date = sorted(posts, key=lambda p: p.meta.created_at or "", reverse=True)
    return sorted(by_date, key=lambda p: not p.meta.pinned)
