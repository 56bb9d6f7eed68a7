"""Unit tests for vaultgraph.parser."""

import textwrap
from pathlib import Path

from vaultgraph.parser import iter_notes, parse_frontmatter, parse_note, parse_tags

# ---------------------------------------------------------------------------
# parse_frontmatter
# ---------------------------------------------------------------------------


class TestParseFrontmatter:
    def test_no_frontmatter_returns_empty_dict(self):
        meta, body = parse_frontmatter("Just some text.")
        assert meta == {}
        assert body == "Just some text."

    def test_basic_frontmatter(self):
        raw = textwrap.dedent("""\
            ---
            title: My Note
            tags: [a, b]
            ---
            Body here.
        """)
        meta, body = parse_frontmatter(raw)
        assert meta["title"] == "My Note"
        assert meta["tags"] == ["a", "b"]
        assert body == "Body here.\n"

    def test_frontmatter_not_at_start_is_ignored(self):
        raw = "Intro\n---\ntitle: Nope\n---\nMore text."
        meta, body = parse_frontmatter(raw)
        assert meta == {}
        assert body == raw

    def test_empty_frontmatter_block(self):
        meta, body = parse_frontmatter("---\n---\nBody.")
        assert meta == {}
        assert body == "Body."

    def test_invalid_yaml_returns_empty_dict(self):
        meta, body = parse_frontmatter("---\n: broken: yaml:\n---\nBody.")
        # Should not raise
        assert isinstance(meta, dict)
        assert "Body." in body

    def test_non_mapping_yaml_returns_empty_dict(self):
        meta, _ = parse_frontmatter("---\n- just\n- a list\n---\nBody.")
        assert meta == {}


# ---------------------------------------------------------------------------
# parse_tags
# ---------------------------------------------------------------------------


class TestParseTags:
    def test_single_tag(self):
        assert parse_tags("This is #marimo content.") == ["marimo"]

    def test_multiple_tags(self):
        assert parse_tags("Post tagged #python and #open-source.") == ["python", "open-source"]

    def test_deduplication(self):
        assert parse_tags("#python code in #python style") == ["python"]

    def test_url_not_matched(self):
        assert "section" not in parse_tags("Visit https://example.com/page#section for info.")

    def test_nested_tag(self):
        assert "tools/marimo" in parse_tags("Category #tools/marimo used here.")

    def test_code_span_excluded(self):
        assert "include" not in parse_tags("Use `#include` in C code.")


# ---------------------------------------------------------------------------
# parse_note (integration)
# ---------------------------------------------------------------------------


class TestParseNote:
    def test_full_note(self, tmp_path: Path):
        folder = tmp_path / "Guides"
        folder.mkdir()
        md = folder / "My Note.md"
        md.write_text(
            textwrap.dedent("""\
                ---
                title: My Note
                tags: [setup]
                ---
                See [[getting-started]] and [[index]].

                Also tagged #tutorial here.
            """),
            encoding="utf-8",
        )
        note = parse_note(md, tmp_path)
        assert note.id == "Guides/My Note.md"
        assert note.slug == "guides/my-note"
        assert note.title == "My Note"
        assert note.tags == ["setup", "tutorial"]
        assert note.folder == "guides"

    def test_note_without_frontmatter(self, tmp_path: Path):
        md = tmp_path / "simple.md"
        md.write_text("# Simple\nJust text.\n", encoding="utf-8")
        note = parse_note(md, tmp_path)
        assert note.title == "simple"  # falls back to the slug basename
        assert note.slug == "simple"
        assert note.tags == []
        assert note.frontmatter == {}

    def test_no_duplicate_tags_from_fm_and_body(self, tmp_path: Path):
        md = tmp_path / "dup-tags.md"
        md.write_text("---\ntags: [python]\n---\nTagged #python again.\n", encoding="utf-8")
        note = parse_note(md, tmp_path)
        assert note.tags.count("python") == 1

    def test_iter_notes_is_sorted_and_recursive(self, tmp_path: Path):
        (tmp_path / "b.md").write_text("B", encoding="utf-8")
        (tmp_path / "a").mkdir()
        (tmp_path / "a" / "c.md").write_text("C", encoding="utf-8")
        (tmp_path / "ignored.txt").write_text("x", encoding="utf-8")
        assert [n.slug for n in iter_notes(tmp_path)] == ["a/c", "b"]
