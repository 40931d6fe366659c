"""Unit tests for manifest merging (electrode_scaffold.planner.merge and
ManifestPatch)."""

from __future__ import annotations

import pytest

from electrode_scaffold.planner.merge import (
    combine_keywords,
    deep_merge,
    defaults_deep,
    sort_dependency_groups,
)
from electrode_scaffold.planner.models import ManifestPatch


class TestDefaultsDeep:
    @pytest.mark.unit
    def test_fills_missing_only(self):
        result = defaults_deep({"name": "mine"}, {"name": "default", "version": "0.0.1"})
        assert result == {"name": "mine", "version": "0.0.1"}

    @pytest.mark.unit
    def test_nested(self):
        target = {"author": {"name": "Jane"}}
        defaults = {"author": {"name": "Other", "email": "x@y.z"}}
        assert defaults_deep(target, defaults) == {
            "author": {"name": "Jane", "email": "x@y.z"}
        }

    @pytest.mark.unit
    def test_existing_string_author_kept(self):
        result = defaults_deep({"author": "Jane"}, {"author": {"name": "Other"}})
        assert result == {"author": "Jane"}

    @pytest.mark.unit
    def test_does_not_mutate_inputs(self):
        target = {"a": {"b": 1}}
        defaults = {"a": {"c": 2}}
        defaults_deep(target, defaults)
        assert target == {"a": {"b": 1}}


class TestDeepMerge:
    @pytest.mark.unit
    def test_override_wins(self):
        assert deep_merge({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}

    @pytest.mark.unit
    def test_mappings_merge(self):
        base = {"dependencies": {"react": "^17"}}
        override = {"dependencies": {"lodash": "^4"}}
        assert deep_merge(base, override) == {
            "dependencies": {"react": "^17", "lodash": "^4"}
        }

    @pytest.mark.unit
    def test_lists_replaced(self):
        assert deep_merge({"files": ["lib"]}, {"files": ["server"]}) == {"files": ["server"]}


class TestSortAndKeywords:
    @pytest.mark.unit
    def test_dependency_groups_sorted(self):
        manifest = {
            "dependencies": {"zeta": "1", "alpha": "1", "mu": "1"},
            "devDependencies": {"b": "1", "a": "1"},
            "scripts": {"z": "1", "a": "1"},
        }
        sort_dependency_groups(manifest)
        assert list(manifest["dependencies"]) == ["alpha", "mu", "zeta"]
        assert list(manifest["devDependencies"]) == ["a", "b"]
        assert list(manifest["scripts"]) == ["z", "a"]

    @pytest.mark.unit
    def test_combine_keywords(self):
        result = combine_keywords(["ui", "cache", "cache"], ["web", "ui", ""])
        assert set(result) == {"web", "ui", "cache"}
        assert len(result) == 3


class TestManifestPatch:
    @pytest.mark.unit
    def test_existing_description_preserved(self):
        patch = ManifestPatch(defaults={"description": "generated", "version": "0.0.1"})
        manifest = patch.apply({"description": "Existing storefront"})
        assert manifest["description"] == "Existing storefront"
        assert manifest["version"] == "0.0.1"

    @pytest.mark.unit
    def test_empty_scalar_takes_default(self):
        patch = ManifestPatch(defaults={"description": "generated"})
        assert patch.apply({"description": ""})["description"] == "generated"

    @pytest.mark.unit
    def test_structural_fields_added_if_absent(self):
        patch = ManifestPatch(
            defaults={"files": ["server"], "main": "server/index.js", "keywords": []}
        )
        manifest = patch.apply({"main": "lib/index.js"})
        assert manifest["main"] == "lib/index.js"
        assert manifest["files"] == ["server"]
        assert manifest["keywords"] == []

    @pytest.mark.unit
    def test_keywords_union(self):
        patch = ManifestPatch(keywords=["ui", "cache"])
        manifest = patch.apply({"keywords": ["web", "ui"]})
        assert set(manifest["keywords"]) == {"web", "ui", "cache"}
        assert len(manifest["keywords"]) == 3

    @pytest.mark.unit
    def test_existing_keywords_deduplicated_without_prompt(self):
        manifest = ManifestPatch().apply({"keywords": ["web", "web", "", "ui"]})
        assert manifest["keywords"] == ["web", "ui"]

    @pytest.mark.unit
    def test_non_list_keywords_left_alone(self):
        assert ManifestPatch().apply({"keywords": "web"})["keywords"] == "web"

    @pytest.mark.unit
    def test_template_is_lowest_precedence(self):
        patch = ManifestPatch(
            template={"dependencies": {"react": "^17.0.2"}, "scripts": {"test": "gulp check"}},
        )
        manifest = patch.apply(
            {"dependencies": {"react": "^18.0.0", "zeta": "1", "alpha": "1", "mu": "1"}}
        )
        assert manifest["dependencies"]["react"] == "^18.0.0"
        assert manifest["scripts"] == {"test": "gulp check"}
        assert list(manifest["dependencies"]) == ["alpha", "mu", "react", "zeta"]
