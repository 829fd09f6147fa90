"""
ConfigStore: the single persisted configuration snapshot.

The record is a flat JSON object with no schema version. It is valid
only if it carries every id in REQUIRED_FIELDS; anything else (missing
file, unparseable content, missing keys) is a cache miss.

Writes go to a temporary file in the same directory and are moved into
place with os.replace, so a reader sees either the old record or the new
one, never a partial file. Concurrent writers are not coordinated.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from codexgen.answers import AnswerSet
from codexgen.errors import MissingRequiredField
from codexgen.serialization import answers_from_dict, answers_to_json

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("projectName", "framework", "ui", "registry")
CONFIG_DIR_ENV = "CODEX_CONFIG_DIR"
CONFIG_FILENAME = "config.json"


def default_config_path() -> Path:
    """`$CODEX_CONFIG_DIR/config.json`, else `~/.codex/config.json`."""
    configured = os.environ.get(CONFIG_DIR_ENV)
    base = Path(configured).expanduser() if configured else Path.home() / ".codex"
    return base / CONFIG_FILENAME


def require_fields(record: dict) -> None:
    missing = [key for key in REQUIRED_FIELDS if not record.get(key)]
    if missing:
        raise MissingRequiredField(missing)


class ConfigStore:
    def __init__(self, path: Union[str, Path, None] = None):
        self.path = Path(path) if path is not None else default_config_path()

    def load(self) -> Optional[AnswerSet]:
        """
        Read the persisted record.

        Returns:
            The full AnswerSet, or None when there is no usable record
        """
        if not self.path.exists():
            return None
        try:
            record = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Failed to load saved config %s: %s", self.path, e)
            return None
        if not isinstance(record, dict):
            logger.warning("Saved config %s is not a JSON object, ignoring it", self.path)
            return None
        try:
            require_fields(record)
        except MissingRequiredField as e:
            logger.warning("%s, ignoring it", e)
            return None
        return answers_from_dict(record)

    def save(self, answers: AnswerSet) -> None:
        """Overwrite the record with the full AnswerSet."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = answers_to_json(answers)
        fd, tmp_name = tempfile.mkstemp(prefix=".config-", suffix=".tmp", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.write("\n")
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.info("Saved your Codex setup to %s", self.path)

    def clear(self) -> bool:
        """Delete the record. Returns whether there was one."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            logger.info("No saved config found at %s", self.path)
            return False
        logger.info("Cleared saved Codex config %s", self.path)
        return True
