"""Unit tests for feature detection (electrode_scaffold.resolver.detector)."""

from __future__ import annotations

from pathlib import Path

import pytest

from electrode_scaffold.resolver.detector import (
    FALLBACK_SERVER,
    SERVER_ENTRY_FILES,
    detect_features,
    detect_server_type,
)
from electrode_scaffold.resolver.models import QuoteStyle, ServerType


def touch(root: Path, relative: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("")
    return path


class TestDetectServerType:
    @pytest.mark.unit
    @pytest.mark.parametrize("server_type,entry", SERVER_ENTRY_FILES)
    def test_each_entry_file(self, tmp_path: Path, server_type, entry):
        touch(tmp_path, entry)
        assert detect_server_type(tmp_path) is server_type

    @pytest.mark.unit
    def test_priority_order(self, tmp_path: Path):
        touch(tmp_path, "src/server/koa-server.js")
        touch(tmp_path, "src/server/express-server.js")
        assert detect_server_type(tmp_path) is ServerType.EXPRESS

    @pytest.mark.unit
    def test_fresh_directory_is_undetermined(self, tmp_path: Path):
        assert detect_server_type(tmp_path) is None

    @pytest.mark.unit
    def test_established_project_falls_back(self, tmp_path: Path):
        assert FALLBACK_SERVER is ServerType.HAPI
        assert detect_server_type(tmp_path, established=True) is ServerType.HAPI


class TestDetectFeatures:
    @pytest.mark.unit
    def test_fresh_directory_detects_nothing(self, tmp_path: Path):
        assert detect_features(tmp_path).resolved() == {}

    @pytest.mark.unit
    def test_present_markers(self, tmp_path: Path):
        touch(tmp_path, "src/client/sw-registration.js")
        touch(tmp_path, "server/plugins/autossr.js")
        touch(tmp_path, ".eslintrc")
        detected = detect_features(tmp_path)
        assert detected.pwa is True
        assert detected.auto_ssr is True
        assert detected.quote_style is QuoteStyle.SINGLE
        assert detected.server_type is None
        assert detected.create_directory is None

    @pytest.mark.unit
    def test_absent_markers_count_only_for_established_projects(self, tmp_path: Path):
        detected = detect_features(tmp_path, established=True)
        assert detected.pwa is False
        assert detected.auto_ssr is False
        assert detected.quote_style is QuoteStyle.DOUBLE
        assert detected.server_type is ServerType.HAPI
        assert detected.create_directory is False

    @pytest.mark.unit
    def test_express_marker(self, tmp_path: Path):
        touch(tmp_path, "src/server/express-server.js")
        assert detect_features(tmp_path).server_type is ServerType.EXPRESS

    @pytest.mark.unit
    def test_eslintrc_json_is_not_single_quote(self, tmp_path: Path):
        touch(tmp_path, ".eslintrc.json")
        assert detect_features(tmp_path).quote_style is None
