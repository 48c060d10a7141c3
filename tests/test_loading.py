"""Tests for group loaders and load result types.

DictGroupLoader serves embedded data; PathGroupLoader reads YAML and JSON
files laid out by dotted resource path, layering locale-specific files over
less specific ones.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from msgbundle import (
    BundleRegistry,
    DictGroupLoader,
    GroupNotFoundError,
    GroupResolutionError,
    MessageManager,
    PathGroupLoader,
)
from msgbundle.enums import LoadStatus
from msgbundle.localization import GroupLoadResult, LoadSummary


def _write_yaml(path: Path, data: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")


class TestDictGroupLoader:
    """Test the embedded-data loader."""

    def test_base_layer(self) -> None:
        """The "" layer serves every locale."""
        loader = DictGroupLoader({"": {"i18n.global": {"ok": "OK"}}})

        assert loader.load("i18n.global", "fr_FR") == {"ok": "OK"}

    def test_locale_layers_override_base(self) -> None:
        """More specific locales override less specific ones key by key."""
        loader = DictGroupLoader(
            {
                "": {"g": {"a": "base-a", "b": "base-b", "c": "base-c"}},
                "de": {"g": {"b": "de-b", "c": "de-c"}},
                "de-AT": {"g": {"c": "at-c"}},
            }
        )

        assert loader.load("g", "de_AT") == {"a": "base-a", "b": "de-b", "c": "at-c"}
        assert loader.load("g", "de") == {"a": "base-a", "b": "de-b", "c": "de-c"}

    def test_nested_messages_are_flattened(self) -> None:
        """Nested mappings become dotted keys; values become strings."""
        loader = DictGroupLoader({"": {"g": {"m": {"widgets": {0: "none", "n": 5}, "x": None}}}})

        assert loader.load("g", "en") == {"m.widgets.0": "none", "m.widgets.n": "5", "m.x": ""}

    def test_missing_group(self) -> None:
        """A group absent from every layer is not found."""
        loader = DictGroupLoader({"": {}})

        with pytest.raises(GroupNotFoundError):
            loader.load("i18n.nope", "en_US")

    def test_describe_path(self) -> None:
        """Diagnostics name the embedded group and locale."""
        loader = DictGroupLoader({})

        assert loader.describe_path("i18n.global", "de") == "<embedded>:i18n.global[de]"


class TestPathGroupLoader:
    """Test the YAML/JSON file loader."""

    def test_yaml_group(self, tmp_path: Path) -> None:
        """Dotted resource paths map to nested directories."""
        _write_yaml(tmp_path / "i18n" / "game" / "chess.yaml", {"m": {"check": "Check!"}})
        loader = PathGroupLoader(tmp_path)

        assert loader.load("i18n.game.chess", "en_US") == {"m.check": "Check!"}

    def test_json_group(self, tmp_path: Path) -> None:
        """JSON files are accepted."""
        path = tmp_path / "i18n" / "global.json"
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"ok": "OK", "m.count": "{0} items"}), encoding="utf-8")

        assert PathGroupLoader(tmp_path).load("i18n.global", "en") == {
            "ok": "OK",
            "m.count": "{0} items",
        }

    def test_locale_files_layered(self, tmp_path: Path) -> None:
        """chess_de_DE overrides chess_de, which overrides chess."""
        base = tmp_path / "i18n"
        _write_yaml(base / "chess.yaml", {"a": "base", "b": "base", "c": "base"})
        _write_yaml(base / "chess_de.yaml", {"b": "de", "c": "de"})
        _write_yaml(base / "chess_de_DE.yaml", {"c": "de_DE"})
        loader = PathGroupLoader(tmp_path)

        assert loader.load("i18n.chess", "de-DE") == {"a": "base", "b": "de", "c": "de_DE"}

    def test_locale_file_without_base(self, tmp_path: Path) -> None:
        """A locale-specific file alone is enough."""
        _write_yaml(tmp_path / "i18n" / "chess_fr.yaml", {"m.check": "Échec !"})

        assert PathGroupLoader(tmp_path).load("i18n.chess", "fr_FR") == {"m.check": "Échec !"}

    def test_first_extension_wins(self, tmp_path: Path) -> None:
        """.yaml is preferred over .json for the same layer."""
        _write_yaml(tmp_path / "g.yaml", {"src": "yaml"})
        (tmp_path / "g.json").write_text(json.dumps({"src": "json"}), encoding="utf-8")

        assert PathGroupLoader(tmp_path).load("g", "en") == {"src": "yaml"}

    def test_empty_file_is_empty_group(self, tmp_path: Path) -> None:
        """An empty file defines a group with no messages."""
        (tmp_path / "g.yaml").write_text("", encoding="utf-8")

        assert PathGroupLoader(tmp_path).load("g", "en") == {}

    def test_missing_group(self, tmp_path: Path) -> None:
        """No file for any layer means not found."""
        with pytest.raises(GroupNotFoundError):
            PathGroupLoader(tmp_path).load("i18n.nope", "en_US")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Unparseable files raise GroupResolutionError."""
        (tmp_path / "g.yaml").write_text("key: [unclosed", encoding="utf-8")

        with pytest.raises(GroupResolutionError, match="Failed to parse g.yaml"):
            PathGroupLoader(tmp_path).load("g", "en")

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Malformed JSON raises GroupResolutionError."""
        (tmp_path / "g.json").write_text("{", encoding="utf-8")

        with pytest.raises(GroupResolutionError):
            PathGroupLoader(tmp_path).load("g", "en")

    def test_top_level_must_be_mapping(self, tmp_path: Path) -> None:
        """A list at the top level is rejected."""
        _write_yaml(tmp_path / "g.yaml", ["a", "b"])

        with pytest.raises(GroupResolutionError, match="must be a mapping"):
            PathGroupLoader(tmp_path).load("g", "en")

    @pytest.mark.parametrize("resource_path", ["i18n..chess", ".chess", "i18n. chess", "a/b.c"])
    def test_rejects_invalid_resource_paths(self, tmp_path: Path, resource_path: str) -> None:
        """Empty components and path separators are rejected."""
        with pytest.raises(ValueError, match="resource path"):
            PathGroupLoader(tmp_path).load(resource_path, "en")

    @pytest.mark.parametrize("locale", ["../etc", "en/US", "en\\US"])
    def test_rejects_unsafe_locales(self, tmp_path: Path, locale: str) -> None:
        """Locales cannot escape the root directory."""
        with pytest.raises(ValueError, match="not allowed in locale"):
            PathGroupLoader(tmp_path).load("g", locale)

    def test_rejects_symlink_escape(self, tmp_path: Path) -> None:
        """Files resolving outside the root are refused."""
        outside = tmp_path / "outside.yaml"
        _write_yaml(outside, {"secret": "x"})
        root = tmp_path / "root"
        root.mkdir()
        (root / "g.yaml").symlink_to(outside)

        with pytest.raises(ValueError, match="Path traversal detected"):
            PathGroupLoader(root).load("g", "en")

    def test_describe_path(self, tmp_path: Path) -> None:
        """Diagnostics show the most specific candidate stem and extensions."""
        loader = PathGroupLoader(tmp_path)

        described = loader.describe_path("i18n.chess", "de-DE")

        assert described == f"{tmp_path / 'i18n' / 'chess'}_de_DE{{.yaml,.yml,.json}}"

    def test_manager_end_to_end(self, tmp_path: Path) -> None:
        """A manager over files resolves plurals and parents."""
        _write_yaml(tmp_path / "rsrc" / "global.yaml", {"ok": "OK"})
        _write_yaml(
            tmp_path / "rsrc" / "game" / "chess.yaml",
            {"m": {"widgets": {"0": "no widgets.", "1": "{0} widget.", "n": "{0} widgets."}}},
        )
        _write_yaml(
            tmp_path / "rsrc" / "game" / "chess_de.yaml",
            {"m": {"widgets": {"n": "{0} Figuren."}}},
        )

        manager = MessageManager(
            "rsrc", PathGroupLoader(tmp_path), locale="de_DE", registry=BundleRegistry()
        )
        chess = manager.get_bundle("game.chess")

        assert chess.get("m.widgets", 3) == "3 Figuren."
        assert chess.get("m.widgets", 1) == "1 widget."
        assert chess.get("ok") == "OK"
        assert manager.get_load_summary().all_successful

    def test_manager_records_unsafe_path_as_error(self, tmp_path: Path) -> None:
        """Loader ValueErrors are recorded as load errors, not raised."""
        _write_yaml(tmp_path / "rsrc" / "global.yaml", {"ok": "OK"})
        manager = MessageManager(
            "rsrc", PathGroupLoader(tmp_path), locale="en", registry=BundleRegistry()
        )

        bundle = manager.get_bundle("bad..group")

        assert bundle.get("ok") == "OK"
        assert manager.get_load_summary().errors == 1


class TestLoadResults:
    """Test GroupLoadResult and LoadSummary."""

    def _result(self, path: str, status: LoadStatus) -> GroupLoadResult:
        return GroupLoadResult(path=path, resource_path=f"i18n.{path}", locale="en", status=status)

    def test_status_properties(self) -> None:
        """Exactly one status property is true."""
        result = self._result("g", LoadStatus.NOT_FOUND)

        assert (result.is_success, result.is_not_found, result.is_error) == (False, True, False)

    def test_summary_counts(self) -> None:
        """Counts and filters agree with the results."""
        summary = LoadSummary(
            results=(
                self._result("a", LoadStatus.SUCCESS),
                self._result("b", LoadStatus.NOT_FOUND),
                self._result("c", LoadStatus.ERROR),
                self._result("a", LoadStatus.SUCCESS),
            )
        )

        assert summary.total_attempted == 4
        assert summary.successful == 2
        assert summary.not_found == 1
        assert summary.errors == 1
        assert [r.path for r in summary.get_errors()] == ["c"]
        assert [r.path for r in summary.get_not_found()] == ["b"]
        assert len(summary.get_by_path("a")) == 2
        assert [r.path for r in summary.get_by_status(LoadStatus.SUCCESS)] == ["a", "a"]
        assert not summary.all_successful
        assert repr(summary) == "LoadSummary(total=4, ok=2, not_found=1, errors=1)"

    def test_empty_summary_is_successful(self) -> None:
        """No attempts means nothing failed."""
        assert LoadSummary(results=()).all_successful
