"""Tests for loading the blog configuration."""

import pytest

from blogsync.models.configuration import (
    DEFAULT_TITLE,
    Configuration,
    ConfigurationError,
    from_file,
    updated,
)
from blogsync.repository.memory import MemoryProvider


class TestUpdated:
    def test_true_when_configuration_file_changed(self):
        assert updated(["posts/a.md", "blog.yml"])

    def test_false_for_other_paths(self):
        assert not updated(["posts/a.md", "posts/blog.yml", "blog.yml.bak"])

    def test_false_for_no_paths(self):
        assert not updated([])

    def test_uses_configured_file(self, monkeypatch):
        monkeypatch.setenv("BLOG_CONFIGURATION_FILE", "config/site.yml")
        assert updated(["./config/site.yml"])
        assert not updated(["blog.yml"])


class TestFromFile:
    def setup_method(self):
        self.provider = MemoryProvider()

    def test_missing_file_gives_defaults(self):
        assert from_file(self.provider) == [Configuration(language="en")]
        assert from_file(self.provider)[0].title == DEFAULT_TITLE

    def test_reads_settings(self):
        self.provider.add_file(
            "blog.yml",
            "title: My Blog\nsub_title: Notes\nstyles_path: assets/blog.css\n",
        )

        [configuration] = from_file(self.provider)

        assert configuration.title == "My Blog"
        assert configuration.sub_title == "Notes"
        assert configuration.styles_path == "assets/blog.css"
        assert configuration.logo_path is None

    def test_reads_file_added_with_leading_dot(self):
        self.provider.add_file("./blog.yml", "title: My Blog\n")

        [configuration] = from_file(self.provider)

        assert configuration.title == "My Blog"

    def test_one_configuration_per_language_with_overrides(self, monkeypatch):
        monkeypatch.setenv("BLOG_LANGUAGES", "en,bg")
        self.provider.add_file(
            "blog.yml",
            "title: My Blog\nsub_title: Notes\nbg:\n  title: Моят блог\n",
        )

        en, bg = from_file(self.provider)

        assert en == Configuration(language="en", title="My Blog", sub_title="Notes")
        assert bg == Configuration(language="bg", title="Моят блог", sub_title="Notes")

    def test_empty_file_gives_defaults(self):
        self.provider.add_file("blog.yml", "")
        assert from_file(self.provider) == [Configuration(language="en")]

    def test_non_mapping_raises(self):
        self.provider.add_file("blog.yml", "- just\n- a list\n")
        with pytest.raises(ConfigurationError):
            from_file(self.provider)

    def test_invalid_yaml_raises(self):
        self.provider.add_file("blog.yml", "title: [unclosed")
        with pytest.raises(ConfigurationError):
            from_file(self.provider)

    def test_language_overrides_must_be_mapping(self):
        self.provider.add_file("blog.yml", "title: x\nen: nope\n")
        with pytest.raises(ConfigurationError):
            from_file(self.provider)
