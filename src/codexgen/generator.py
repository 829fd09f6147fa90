"""
Template lookup and project generation.

Layout under the template root:

    <framework>/base/               copied first
    <framework>/ui/<ui>/            overlaid on top, unless ui == "none"
    <framework>/ui/<ui>/<ui>.pkg.json
                                    manifest fragment, merged into
                                    package.json and then removed
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Mapping
from pathlib import Path
from typing import List, Optional, Union

from codexgen.errors import UnknownChoice
from codexgen.manifest import MANIFEST_FILENAME, ensure_module_type, merge_manifest_file

logger = logging.getLogger(__name__)

BUNDLED_TEMPLATES = Path(__file__).resolve().parent / "templates"
NO_UI = "none"

_IGNORED = shutil.ignore_patterns("node_modules", ".next", ".git")


def fragment_name(ui: str) -> str:
    return f"{ui}.pkg.json"


def _check_segment(field: str, value) -> None:
    # Saved answers are joined into template paths; only a bare name may pass.
    if not value or not isinstance(value, str) or value in (".", "..") or Path(value).name != value:
        raise UnknownChoice(field, value)


class TemplateCatalog:
    def __init__(self, root: Union[str, Path, None] = None):
        self.root = Path(root) if root is not None else BUNDLED_TEMPLATES

    def frameworks(self) -> List[str]:
        if not self.root.is_dir():
            return []
        return sorted(p.name for p in self.root.iterdir() if (p / "base").is_dir())

    def ui_libraries(self, framework: str) -> List[str]:
        ui_root = self.root / framework / "ui"
        if not ui_root.is_dir():
            return []
        return sorted(p.name for p in ui_root.iterdir() if p.is_dir())

    def base_dir(self, framework: str) -> Path:
        _check_segment("framework", framework)
        path = self.root / framework / "base"
        if not path.is_dir():
            raise UnknownChoice("framework", framework, "not yet supported")
        return path

    def ui_dir(self, framework: str, ui: str) -> Optional[Path]:
        """
        Template directory for a UI library; None for "none".

        The directory must hold its `<ui>.pkg.json` manifest fragment.
        """
        if not ui or ui == NO_UI:
            return None
        _check_segment("framework", framework)
        _check_segment("ui", ui)
        path = self.root / framework / "ui" / ui
        if not path.is_dir():
            raise UnknownChoice("ui", ui, f"no {framework} template")
        if not (path / fragment_name(ui)).is_file():
            raise UnknownChoice("ui", ui, "no manifest fragment")
        return path


def generate_project(answers: Mapping, target_dir: Union[str, Path], catalog: Optional[TemplateCatalog] = None) -> Path:
    """
    Materialize the template for `answers["framework"]` / `answers["ui"]`.

    Both templates are located before anything is copied, so an unknown
    selection leaves the target untouched.

    Raises:
        UnknownChoice: no template for the selected framework or UI
    """
    catalog = catalog or TemplateCatalog()
    target = Path(target_dir)
    framework = answers.get("framework")
    ui = answers.get("ui") or NO_UI

    base = catalog.base_dir(framework)
    overlay = catalog.ui_dir(framework, ui)

    target.mkdir(parents=True, exist_ok=True)
    shutil.copytree(base, target, dirs_exist_ok=True, ignore=_IGNORED)
    logger.debug("Copied %s into %s", base, target)

    if overlay is not None:
        logger.info("Applying %s UI configuration...", ui)
        shutil.copytree(overlay, target, dirs_exist_ok=True, ignore=_IGNORED)
        fragment = target / fragment_name(ui)
        merge_manifest_file(target, fragment)
        fragment.unlink()

    ensure_module_type(target / MANIFEST_FILENAME)
    return target
