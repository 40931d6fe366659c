"""Unit tests for configuration resolution (electrode_scaffold.resolver.resolver)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from electrode_scaffold.resolver.models import (
    PROMPT_ORDER,
    PartialConfig,
    QuoteStyle,
    ResolvedConfig,
    ScaffoldOptions,
    ServerType,
)
from electrode_scaffold.resolver.resolver import (
    SERVER_TYPE_KEY,
    project_dir_name,
    relocate_root,
    resolve,
)
from electrode_scaffold.state import StateStore

NS = "electrode-scaffold"


def _state(tmp_path: Path, **values) -> StateStore:
    path = tmp_path / ".electrode-scaffold.json"
    path.write_text(json.dumps({NS: values}))
    return StateStore.open(path, NS)


class TestResolve:
    @pytest.mark.unit
    def test_fresh_run_leaves_everything_pending(self):
        resolution = resolve({}, ScaffoldOptions(), PartialConfig())
        assert resolution.pending == list(PROMPT_ORDER)

    @pytest.mark.unit
    def test_manifest_fields_are_not_prompted(self):
        manifest = {
            "name": "shop-front",
            "description": "Existing storefront",
            "homepage": "https://shop.example.com",
            "author": {"name": "Jane", "email": "jane@example.com", "url": "https://j.io"},
            "keywords": ["web"],
        }
        resolution = resolve(manifest, ScaffoldOptions(), PartialConfig())
        config = resolution.config
        assert config.description == "Existing storefront"
        assert config.author_email == "jane@example.com"
        assert config.keywords == ["web"]
        for key in ("name", "description", "homepage", "author_name", "author_email",
                    "author_url", "keywords"):
            assert key not in resolution.pending

    @pytest.mark.unit
    def test_manifest_keywords_carried_into_config(self):
        resolution = resolve(
            {"keywords": ["web", "", "web", "ui"]}, ScaffoldOptions(), PartialConfig()
        )
        assert resolution.config.keywords == ["web", "ui"]
        assert "keywords" not in resolution.pending

    @pytest.mark.unit
    def test_empty_manifest_keywords_stay_pending(self):
        resolution = resolve({"keywords": ["", None]}, ScaffoldOptions(), PartialConfig())
        assert resolution.config.keywords is None
        assert "keywords" in resolution.pending

    @pytest.mark.unit
    def test_manifest_version_is_not_resolved(self):
        resolution = resolve({"version": "1.2.0"}, ScaffoldOptions(), PartialConfig())
        assert "version" not in resolution.config.resolved()
        assert "version" not in PartialConfig.model_fields
        assert "version" not in ResolvedConfig.model_fields

    @pytest.mark.unit
    def test_string_author_is_parsed(self):
        resolution = resolve(
            {"author": "Jane <jane@example.com>"}, ScaffoldOptions(), PartialConfig()
        )
        assert resolution.config.author_name == "Jane"
        assert resolution.config.author_email == "jane@example.com"
        assert "author_url" in resolution.pending

    @pytest.mark.unit
    def test_detected_express_is_not_prompted(self):
        detected = PartialConfig(server_type=ServerType.EXPRESS)
        resolution = resolve({}, ScaffoldOptions(), detected)
        assert resolution.config.server_type is ServerType.EXPRESS
        assert "server_type" not in resolution.pending

    @pytest.mark.unit
    def test_cli_name_is_kebab_cased_and_wins(self):
        resolution = resolve({"name": "old-name"}, ScaffoldOptions(name="My Cool App"),
                             PartialConfig())
        assert resolution.config.name == "my-cool-app"

    @pytest.mark.unit
    def test_cli_server_type_beats_detection(self):
        resolution = resolve(
            {},
            ScaffoldOptions(server_type=ServerType.KOA),
            PartialConfig(server_type=ServerType.EXPRESS),
        )
        assert resolution.config.server_type is ServerType.KOA

    @pytest.mark.unit
    def test_stored_state_fills_server_type(self, tmp_path: Path):
        state = _state(tmp_path, **{SERVER_TYPE_KEY: "KoaJS"})
        resolution = resolve({}, ScaffoldOptions(), PartialConfig(), state)
        assert resolution.config.server_type is ServerType.KOA
        assert "server_type" not in resolution.pending

    @pytest.mark.unit
    def test_detection_beats_stored_state(self, tmp_path: Path):
        state = _state(tmp_path, **{SERVER_TYPE_KEY: "KoaJS"})
        resolution = resolve(
            {}, ScaffoldOptions(), PartialConfig(server_type=ServerType.EXPRESS), state
        )
        assert resolution.config.server_type is ServerType.EXPRESS

    @pytest.mark.unit
    def test_unknown_stored_server_type_ignored(self, tmp_path: Path):
        state = _state(tmp_path, **{SERVER_TYPE_KEY: "Sails"})
        resolution = resolve({}, ScaffoldOptions(), PartialConfig(), state)
        assert "server_type" in resolution.pending

    @pytest.mark.unit
    def test_pending_follows_prompt_order(self):
        detected = PartialConfig(pwa=True, quote_style=QuoteStyle.SINGLE)
        resolution = resolve({"name": "x"}, ScaffoldOptions(), detected)
        assert resolution.pending == [
            f for f in PROMPT_ORDER if f not in ("name", "pwa", "quote_style")
        ]


class TestResolvedConfig:
    @pytest.mark.unit
    def test_defaults(self):
        config = ResolvedConfig(name="demo")
        assert config.server_type is ServerType.HAPI
        assert config.quote_style is QuoteStyle.DOUBLE
        assert config.keywords == []
        assert not config.is_single_quote

    @pytest.mark.unit
    def test_keywords_deduplicated(self):
        config = ResolvedConfig(name="demo", keywords=["a", "", "b", "a"])
        assert config.keywords == ["a", "b"]

    @pytest.mark.unit
    def test_frozen(self):
        config = ResolvedConfig(name="demo")
        with pytest.raises(Exception):
            config.name = "other"

    @pytest.mark.unit
    def test_from_partial(self):
        partial = PartialConfig(name="demo", quote_style=QuoteStyle.SINGLE)
        config = ResolvedConfig.from_partial(partial)
        assert config.is_single_quote
        assert config.description == ""

    @pytest.mark.unit
    def test_overlay_ignores_none(self):
        partial = PartialConfig(name="demo").overlay({"name": None, "pwa": False})
        assert partial.name == "demo"
        assert partial.pwa is False


class TestRelocateRoot:
    @pytest.mark.unit
    def test_project_dir_name(self):
        assert project_dir_name("My Cool App") == "my-cool-app"

    @pytest.mark.unit
    def test_relocates_into_project_directory(self, tmp_path: Path):
        assert relocate_root(tmp_path, "My Cool App") == tmp_path / "my-cool-app"

    @pytest.mark.unit
    def test_idempotent(self, tmp_path: Path):
        once = relocate_root(tmp_path, "My Cool App")
        assert relocate_root(once, "My Cool App") == once

    @pytest.mark.unit
    def test_empty_name_keeps_root(self, tmp_path: Path):
        assert relocate_root(tmp_path, "") == tmp_path
