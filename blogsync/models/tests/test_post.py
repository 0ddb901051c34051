"""Tests for post compilation and name derivation."""

import pytest

from blogsync.models.post import (
    Post,
    PostMeta,
    compile_posts,
    name_from_file,
    names_from_files,
    sorted_posts,
)
from blogsync.repository.memory import MemoryProvider, RawPost
from blogsync.repository.provider import RepositoryHandle


@pytest.fixture
def multilingual(monkeypatch):
    monkeypatch.setenv("BLOG_LANGUAGES", "en,bg")


class TestNameFromFile:
    def test_default_language(self):
        assert name_from_file("p1.md") == ("en", "p1")

    def test_nested_path_joined_with_underscores(self):
        assert name_from_file("2017/April/First.md") == ("en", "2017_april_first")

    def test_language_folder(self, multilingual):
        assert name_from_file("bg/p1.md") == ("bg", "p1")

    def test_unknown_language_folder_is_part_of_name(self, multilingual):
        assert name_from_file("de/p1.md") == ("en", "de_p1")

    def test_default_language_folder_is_part_of_name(self, multilingual):
        assert name_from_file("en/p1.md") == ("en", "en_p1")

    def test_names_from_files_ignores_non_markdown(self, multilingual):
        assert names_from_files(["a.md", "bg/b.md", "img.png"]) == [
            ("en", "a"),
            ("bg", "b"),
        ]


class TestCompilePosts:
    def setup_method(self):
        self.provider = MemoryProvider()
        self.repository = RepositoryHandle(
            provider=self.provider, repo=self.provider.repository()
        )

    def test_compiles_title_and_file_info(self):
        self.provider.add_post(
            RawPost(
                author="x",
                path="p1.md",
                content="# T\n\nBody",
                created_at="2017-01-01 00:00:00",
                updated_at="2017-01-02 00:00:00",
            )
        )

        posts = compile_posts(["p1.md"], self.repository)

        post = posts["en"]["p1"]
        assert post.name == "p1"
        assert post.language == "en"
        assert post.raw == "# T\n\nBody"
        assert post.meta.title == "T"
        assert post.meta.author == "x"
        assert post.meta.created_at == "2017-01-01 00:00:00"
        assert post.meta.updated_at == "2017-01-02 00:00:00"

    def test_front_matter_overrides_file_info(self):
        content = (
            "---\n"
            "title: From Meta\n"
            "author: someone\n"
            "tags: [python, blog]\n"
            "category: Tech\n"
            "pinned: true\n"
            "---\n"
            "# Heading\n"
        )
        self.provider.add_post(RawPost(author="x", path="p1.md", content=content))

        post = compile_posts(["p1.md"], self.repository)["en"]["p1"]

        assert post.meta.title == "From Meta"
        assert post.meta.author == "someone"
        assert post.meta.tags == ["python", "blog"]
        assert post.meta.category == "Tech"
        assert post.meta.pinned is True
        assert post.raw == "# Heading\n"

    def test_comma_separated_tags(self):
        content = "---\ntags: a, b ,c\n---\nText"
        self.provider.add_post(RawPost(path="p1.md", content=content))

        post = compile_posts(["p1.md"], self.repository)["en"]["p1"]
        assert post.meta.tags == ["a", "b", "c"]

    def test_title_falls_back_to_name(self):
        self.provider.add_post(RawPost(path="no-heading.md", content="just text"))

        post = compile_posts(["no-heading.md"], self.repository)["en"]["no-heading"]
        assert post.meta.title == "no-heading"

    def test_invalid_front_matter_is_ignored(self):
        content = "---\ntitle: [unclosed\n---\n# Real"
        self.provider.add_post(RawPost(path="p1.md", content=content))

        post = compile_posts(["p1.md"], self.repository)["en"]["p1"]
        assert post.meta.title == "Real"

    def test_unpublished_posts_are_skipped(self):
        content = "---\npublished: false\n---\n# Draft"
        self.provider.add_post(RawPost(path="draft.md", content=content))

        assert compile_posts(["draft.md"], self.repository) == {}

    @pytest.mark.parametrize("flag", ['"false"', "'no'", '"OFF"', "0"])
    def test_quoted_false_flags_unpublish(self, flag):
        content = f"---\npublished: {flag}\n---\n# Draft"
        self.provider.add_post(RawPost(path="draft.md", content=content))

        assert compile_posts(["draft.md"], self.repository) == {}

    def test_quoted_pinned_flag(self):
        content = '---\npinned: "false"\n---\n# Post'
        self.provider.add_post(RawPost(path="p1.md", content=content))

        post = compile_posts(["p1.md"], self.repository)["en"]["p1"]
        assert post.meta.pinned is False

    def test_missing_and_non_markdown_files_are_skipped(self):
        assert compile_posts(["missing.md", "image.png"], self.repository) == {}

    def test_groups_by_language(self, multilingual):
        self.provider.add_post(RawPost(path="p1.md", content="# One"))
        self.provider.add_post(RawPost(path="bg/p1.md", content="# Едно"))

        posts = compile_posts(["p1.md", "bg/p1.md"], self.repository)

        assert set(posts) == {"en", "bg"}
        assert posts["bg"]["p1"].meta.title == "Едно"
        assert posts["bg"]["p1"].meta.language == "bg"


class TestSortedPosts:
    def _post(self, name, created_at, pinned=False):
        meta = PostMeta(title=name, created_at=created_at, pinned=pinned)
        return Post(name=name, language="en", raw="", meta=meta)

    def test_pinned_first_then_newest(self):
        old = self._post("old", "2017-01-01")
        new = self._post("new", "2018-01-01")
        pinned = self._post("pinned", "2016-01-01", pinned=True)

        assert [p.name for p in sorted_posts([old, pinned, new])] == [
            "pinned",
            "new",
            "old",
        ]
