"""Unit tests for vaultgraph.index.VaultIndex."""

import textwrap
from pathlib import Path

import pytest

from vaultgraph.bases import FilterResult
from vaultgraph.config import VaultConfig
from vaultgraph.index import VaultIndex
from vaultgraph.note import Note


def _write_note(directory: Path, name: str, content: str) -> Path:
    path = directory / f"{name}.md"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


@pytest.fixture()
def vault(tmp_path: Path) -> VaultIndex:
    """Minimal vault fixture with three inter-linked notes and one base file."""
    _write_note(tmp_path, "alpha", """\
        ---
        title: Alpha
        tags: [first]
        ---
        See [[beta]] and [[gamma]].
    """)
    _write_note(tmp_path, "beta", """\
        ---
        title: Beta
        tags: [second]
        ---
        Links back to [[alpha]].
    """)
    _write_note(tmp_path, "gamma", """\
        ---
        title: Gamma
        tags: [first, second]
        ---
        Standalone note. #extra
    """)
    (tmp_path / "first.base").write_text(
        textwrap.dedent("""\
            filters: 'hasTag("first")'
            views:
              - type: table
                name: First
                order: [file.name, title]
        """),
        encoding="utf-8",
    )
    idx = VaultIndex(tmp_path)
    idx.build()
    return idx


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------


class TestVaultIndexNotes:
    def test_all_notes_loaded(self, vault: VaultIndex):
        assert set(vault.notes.keys()) == {"alpha", "beta", "gamma"}

    def test_note_title(self, vault: VaultIndex):
        assert vault.notes["alpha"].title == "Alpha"

    def test_note_tags(self, vault: VaultIndex):
        assert "first" in vault.notes["alpha"].tags

    def test_nested_notes_keyed_by_full_slug(self, tmp_path: Path):
        _write_note(tmp_path, "Guides/Getting Started", "Go to [[index]].\n")
        _write_note(tmp_path, "index", "Home.\n")
        idx = VaultIndex(tmp_path)
        idx.build()
        assert set(idx.notes) == {"guides/getting-started", "index"}
        assert idx.slug_index.resolve_basename("getting-started") == "guides/getting-started"


# ---------------------------------------------------------------------------
# Backlinks
# ---------------------------------------------------------------------------


class TestVaultIndexBacklinks:
    def test_alpha_is_linked_by_beta(self, vault: VaultIndex):
        assert vault.backlinks("alpha") == [{"slug": "beta", "title": "Beta"}]

    def test_gamma_is_linked_by_alpha(self, vault: VaultIndex):
        assert [b["slug"] for b in vault.backlinks("gamma")] == ["alpha"]

    def test_unknown_slug_has_no_backlinks(self, vault: VaultIndex):
        assert vault.backlinks("nope") == []


# ---------------------------------------------------------------------------
# Edges
# ---------------------------------------------------------------------------


class TestVaultIndexEdges:
    def test_edges(self, vault: VaultIndex):
        assert set(vault.edges()) == {("alpha", "beta"), ("alpha", "gamma"), ("beta", "alpha")}

    def test_edges_returns_list(self, vault: VaultIndex):
        assert isinstance(vault.edges(), list)


# ---------------------------------------------------------------------------
# Tags index
# ---------------------------------------------------------------------------


class TestVaultIndexTags:
    def test_tag_first(self, vault: VaultIndex):
        assert vault.tags["first"] == ["alpha", "gamma"]

    def test_inline_tag_extra_on_gamma(self, vault: VaultIndex):
        assert "gamma" in vault.tags.get("extra", [])

    def test_notes_with_tag(self, vault: VaultIndex):
        notes = vault.notes_with_tag("second")
        slugs = {n.slug for n in notes}
        assert slugs == {"beta", "gamma"}


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


class TestVaultIndexSearch:
    def test_search_case_insensitive(self, vault: VaultIndex):
        results = vault.search("BETA")
        assert any(n.slug == "beta" for n in results)

    def test_search_body_content(self, vault: VaultIndex):
        results = vault.search("Standalone")
        assert [n.slug for n in results] == ["gamma"]

    def test_empty_vault(self, tmp_path: Path):
        idx = VaultIndex(tmp_path)
        idx.build()
        assert idx.notes == {}
        assert idx.edges() == []
        assert idx.search("anything") == []


# ---------------------------------------------------------------------------
# Publish filtering
# ---------------------------------------------------------------------------


class TestPublishMode:
    @pytest.fixture()
    def notes(self):
        return [
            Note(id="draft.md", frontmatter={"draft": True}),
            Note(id="public.md", frontmatter={"publish": True}),
            Note(id="plain.md", body="[[draft]]"),
        ]

    def test_draft_mode_hides_drafts(self, notes):
        idx = VaultIndex.from_notes(notes)
        assert set(idx.notes) == {"public", "plain"}

    def test_hidden_note_becomes_broken_target(self, notes):
        idx = VaultIndex.from_notes(notes)
        assert idx.graph.broken == {"plain": ("draft",)}

    def test_publish_mode_keeps_only_published(self, notes):
        idx = VaultIndex.from_notes(notes, VaultConfig(publish_mode="publish"))
        assert set(idx.notes) == {"public"}

    def test_build_without_vault_dir(self):
        with pytest.raises(RuntimeError):
            VaultIndex().build()


# ---------------------------------------------------------------------------
# Related notes and base queries
# ---------------------------------------------------------------------------


class TestRelatedAndQuery:
    def test_related_uses_graph_links(self):
        idx = VaultIndex.from_notes([
            Note(id="a.md", body="Notes about python packaging. See [[b]]."),
            Note(id="b.md", body="More python packaging notes. Back to [[a]]."),
            Note(id="c.md", body="Unrelated gardening diary."),
        ])
        (first,) = idx.related("a")
        assert first.slug == "b"
        assert "bidirectional link" in first.reasons

    def test_related_on_disk_vault_without_shared_words(self, vault: VaultIndex):
        # alpha and beta link both ways but share no content tokens
        assert vault.related("alpha") == []

    def test_base_files_loaded(self, vault: VaultIndex):
        assert list(vault.bases) == ["first.base"]
        assert vault.base_errors == {}

    def test_query_by_key(self, vault: VaultIndex):
        result = vault.query("first.base")
        assert isinstance(result, FilterResult)
        assert [n.slug for n in result.notes] == ["alpha", "gamma"]
        assert result.total_count == 3

    def test_invalid_base_file_is_reported_not_raised(self, tmp_path: Path):
        _write_note(tmp_path, "a", "Text.\n")
        (tmp_path / "broken.base").write_text("views: nope\n", encoding="utf-8")
        idx = VaultIndex(tmp_path)
        idx.build()
        assert idx.bases == {}
        assert "broken.base" in idx.base_errors

    def test_rebuild_picks_up_new_note(self, tmp_path: Path):
        idx = VaultIndex(tmp_path)
        idx.build()
        assert "delta" not in idx.notes

        _write_note(tmp_path, "delta", "---\ntitle: Delta\n---\nHello.\n")
        idx.build()
        assert "delta" in idx.notes
