"""
Tests for manifest merging.

Objects merge deeply, arrays union, other values are overridden by the
fragment with a non-fatal conflict warning.
"""

import copy
import json
import warnings

import pytest
from codexgen.errors import ManifestMergeConflict
from codexgen.manifest import ensure_module_type, merge, merge_all, merge_manifest_file


def base_manifest():
    return {
        "name": "codex-react-app",
        "version": "0.0.0",
        "scripts": {"dev": "vite", "build": "vite build"},
        "dependencies": {"react": "^18.3.1", "react-dom": "^18.3.1"},
        "keywords": ["react", "vite"],
    }


def no_conflicts(fn, *args):
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        result = fn(*args)
    assert not [w for w in caught if issubclass(w.category, ManifestMergeConflict)]
    return result


class TestMerge:
    def test_adds_new_keys(self):
        merged = no_conflicts(merge, base_manifest(), {"devDependencies": {"tailwindcss": "^4.0.0"}})
        assert merged["devDependencies"] == {"tailwindcss": "^4.0.0"}
        assert merged["dependencies"] == base_manifest()["dependencies"]

    def test_deep_merge(self):
        merged = no_conflicts(merge, base_manifest(), {"scripts": {"lint": "eslint ."}})
        assert merged["scripts"] == {"dev": "vite", "build": "vite build", "lint": "eslint ."}

    def test_array_union_order(self):
        merged = no_conflicts(merge, base_manifest(), {"keywords": ["tailwind", "react", "css"]})
        assert merged["keywords"] == ["react", "vite", "tailwind", "css"]

    def test_array_duplicates_removed(self):
        merged = merge({"files": ["a", "a", "b"]}, {"files": ["b", "c", "c"]})
        assert merged["files"] == ["a", "b", "c"]

    def test_array_keeps_distinct_json_types(self):
        merged = merge({"values": [1, "1"]}, {"values": [True, 1.0, 1]})
        assert merged["values"] == [1, "1", True, 1.0]
        assert [type(v) for v in merged["values"]] == [int, str, bool, float]

    def test_structured_elements_dedup_by_value(self):
        merged = merge({"overrides": [{"a": 1, "b": 2}]}, {"overrides": [{"b": 2, "a": 1}, {"a": 2}]})
        assert merged["overrides"] == [{"a": 1, "b": 2}, {"a": 2}]

    def test_bool_replacing_int_is_a_conflict(self):
        with pytest.warns(ManifestMergeConflict):
            merged = merge({"private": 1}, {"private": True})
        assert merged["private"] is True

    def test_scalar_conflict_fragment_wins(self):
        with pytest.warns(ManifestMergeConflict) as record:
            merged = merge(base_manifest(), {"scripts": {"build": "tsc -b && vite build"}})
        assert merged["scripts"]["build"] == "tsc -b && vite build"
        conflict = record[0].message
        assert conflict.path == "scripts.build"
        assert conflict.base_value == "vite build"
        assert conflict.fragment_value == "tsc -b && vite build"

    def test_equal_scalar_is_not_a_conflict(self):
        merged = no_conflicts(merge, base_manifest(), {"dependencies": {"react": "^18.3.1"}})
        assert merged["dependencies"]["react"] == "^18.3.1"

    def test_no_semver_reasoning(self):
        """A downgrade still wins."""
        with pytest.warns(ManifestMergeConflict):
            merged = merge(base_manifest(), {"dependencies": {"react": "^17.0.0"}})
        assert merged["dependencies"]["react"] == "^17.0.0"

    def test_type_mismatch_is_a_conflict(self):
        with pytest.warns(ManifestMergeConflict):
            merged = merge({"browser": {"fs": False}}, {"browser": "./browser.js"})
        assert merged["browser"] == "./browser.js"

    def test_inputs_unchanged(self):
        base = base_manifest()
        fragment = {"scripts": {"lint": "eslint ."}, "keywords": ["x"]}
        base_before = copy.deepcopy(base)
        fragment_before = copy.deepcopy(fragment)
        merged = merge(base, fragment)
        merged["scripts"]["dev"] = "changed"
        merged["keywords"].append("y")
        assert base == base_before
        assert fragment == fragment_before


class TestCommutativity:
    """Fragments touching disjoint keys give the same dependency set in either order."""

    def dependency_set(self, manifest):
        deps = set()
        for section in ("dependencies", "devDependencies"):
            deps.update(manifest.get(section, {}))
        return deps

    def test_disjoint_sections(self):
        f1 = {"dependencies": {"@mui/material": "^6.0.0"}, "keywords": ["mui"]}
        f2 = {"devDependencies": {"vitest": "^2.0.0"}, "keywords": ["vitest"]}
        one = merge_all(base_manifest(), [f1, f2])
        two = merge_all(base_manifest(), [f2, f1])
        assert self.dependency_set(one) == self.dependency_set(two)
        assert set(one["keywords"]) == set(two["keywords"])

    def test_disjoint_keys_in_same_section(self):
        f1 = {"dependencies": {"clsx": "^2.1.1"}}
        f2 = {"dependencies": {"antd": "^5.20.0"}}
        one = merge_all(base_manifest(), [f1, f2])
        two = merge_all(base_manifest(), [f2, f1])
        assert self.dependency_set(one) == self.dependency_set(two)
        assert one["dependencies"] == two["dependencies"]


class TestFiles:
    def test_merge_manifest_file(self, tmp_path):
        (tmp_path / "package.json").write_text(json.dumps(base_manifest()), encoding="utf-8")
        fragment = tmp_path / "mui.pkg.json"
        fragment.write_text(json.dumps({"dependencies": {"@mui/material": "^6.0.0"}}), encoding="utf-8")

        merge_manifest_file(tmp_path, fragment)

        written = json.loads((tmp_path / "package.json").read_text(encoding="utf-8"))
        assert written["dependencies"]["@mui/material"] == "^6.0.0"
        assert written["dependencies"]["react"] == "^18.3.1"

    def test_missing_main_manifest(self, tmp_path):
        fragment = tmp_path / "mui.pkg.json"
        fragment.write_text("{}", encoding="utf-8")
        with pytest.raises(FileNotFoundError):
            merge_manifest_file(tmp_path, fragment)

    def test_ensure_module_type(self, tmp_path):
        path = tmp_path / "package.json"
        path.write_text(json.dumps({"name": "a"}), encoding="utf-8")
        ensure_module_type(path)
        assert json.loads(path.read_text(encoding="utf-8"))["type"] == "module"

    def test_ensure_module_type_keeps_existing(self, tmp_path):
        path = tmp_path / "package.json"
        path.write_text(json.dumps({"name": "a", "type": "commonjs"}), encoding="utf-8")
        ensure_module_type(path)
        assert json.loads(path.read_text(encoding="utf-8"))["type"] == "commonjs"
