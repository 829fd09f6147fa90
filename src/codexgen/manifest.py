"""
Manifest merging: folds package.json fragments into a base manifest.

Rules:
    - Objects merge recursively.
    - Arrays become the de-duplicated union: base elements in their
      original order, then fragment elements not already present.
      Duplicates are detected by JSON value, so 1, 1.0 and true
      stay distinct.
    - Any other value at the same path is replaced by the fragment's.
      A replaced value that differed is a ManifestMergeConflict,
      reported through `warnings` and never fatal.

No semantic-version reasoning happens here; the later value wins.
"""

from __future__ import annotations

import copy
import json
import logging
import warnings
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

from codexgen.errors import ManifestMergeConflict

logger = logging.getLogger(__name__)

Manifest = Dict[str, Any]

MANIFEST_FILENAME = "package.json"


def _identity(item: Any) -> str:
    # JSON text keeps 1, 1.0 and true apart, unlike ==.
    return json.dumps(item, sort_keys=True)


def _union(base: List[Any], fragment: List[Any]) -> List[Any]:
    result: List[Any] = []
    seen = set()
    for item in list(base) + list(fragment):
        key = _identity(item)
        if key not in seen:
            seen.add(key)
            result.append(copy.deepcopy(item))
    return result


def _merge_value(base: Any, fragment: Any, path: str) -> Any:
    if isinstance(base, dict) and isinstance(fragment, dict):
        return _merge_objects(base, fragment, path)
    if isinstance(base, list) and isinstance(fragment, list):
        return _union(base, fragment)
    if _identity(base) != _identity(fragment):
        warnings.warn(ManifestMergeConflict(path, base, fragment), stacklevel=4)
    return copy.deepcopy(fragment)


def _merge_objects(base: Dict[str, Any], fragment: Dict[str, Any], path: str) -> Dict[str, Any]:
    result = copy.deepcopy(base)
    for key, value in fragment.items():
        child = f"{path}.{key}" if path else key
        if key in result:
            result[key] = _merge_value(result[key], value, child)
        else:
            result[key] = copy.deepcopy(value)
    return result


def merge(base: Manifest, fragment: Manifest) -> Manifest:
    """
    Merge a fragment into a base manifest.

    Neither input is modified.

    Returns:
        A new manifest
    """
    return _merge_objects(base, fragment, "")


def merge_all(base: Manifest, fragments: Iterable[Manifest]) -> Manifest:
    """Apply fragments left to right."""
    result = copy.deepcopy(base)
    for fragment in fragments:
        result = merge(result, fragment)
    return result


def read_manifest(path: Union[str, Path]) -> Manifest:
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)


def write_manifest(path: Union[str, Path], manifest: Manifest) -> None:
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(manifest, fh, indent=2)
        fh.write("\n")


def merge_manifest_file(target_dir: Union[str, Path], fragment_path: Union[str, Path]) -> Manifest:
    """
    Merge a fragment file into `<target_dir>/package.json` on disk.

    Raises:
        FileNotFoundError: the target has no package.json
    """
    main_path = Path(target_dir) / MANIFEST_FILENAME
    if not main_path.exists():
        raise FileNotFoundError(f"Main {MANIFEST_FILENAME} not found in {target_dir}")

    merged = merge(read_manifest(main_path), read_manifest(fragment_path))
    write_manifest(main_path, merged)
    logger.info("Merged %s into %s", Path(fragment_path).name, MANIFEST_FILENAME)
    return merged


def ensure_module_type(manifest_path: Union[str, Path]) -> None:
    """Set "type": "module" unless the manifest already declares a type."""
    path = Path(manifest_path)
    if not path.exists():
        return
    manifest = read_manifest(path)
    if not manifest.get("type"):
        manifest["type"] = "module"
        write_manifest(path, manifest)
