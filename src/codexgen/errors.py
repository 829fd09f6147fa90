"""
Error kinds raised by the resolution engine and the manifest merger.

Fatal conditions derive from CodexError. Merge conflicts are warnings, not
errors, and user cancellation is a control signal reported as "aborted".
"""

from typing import Any, Iterable, List, Optional


class CodexError(Exception):
    """Base class for all engine errors."""
    pass


class InvalidInput(CodexError):
    """A provided value failed its question's validator."""

    def __init__(self, question_id: str, value: Any, reason: str):
        self.question_id = question_id
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value {value!r} for '{question_id}': {reason}")


class MissingRequiredField(CodexError):
    """
    A persisted configuration lacks required keys.

    Only ever raised inside ConfigStore.load, which treats it as a cache miss.
    """

    def __init__(self, missing: Iterable[str]):
        self.missing = sorted(missing)
        super().__init__(f"Saved config is missing required fields: {', '.join(self.missing)}")


class UnknownChoice(CodexError):
    """A selection has no corresponding template or merge fragment."""

    def __init__(self, field: str, value: Any, detail: Optional[str] = None):
        self.field = field
        self.value = value
        message = f"No template available for {field}={value!r}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class GraphDefinitionError(CodexError):
    """The question graph violates its structural rules."""

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__("Invalid question graph: " + "; ".join(self.problems))


class ManifestMergeConflict(UserWarning):
    """A fragment overrode a differing non-array value in the base manifest."""

    def __init__(self, path: str, base_value: Any, fragment_value: Any):
        self.path = path
        self.base_value = base_value
        self.fragment_value = fragment_value
        super().__init__(
            f"Manifest conflict at '{path}': {base_value!r} replaced by {fragment_value!r}"
        )


class ResolutionAborted(Exception):
    """
    The user cancelled the interview.

    Not a CodexError: callers report it as
    "aborted", never as a failure reason.
    """

    def __init__(self, phase: Optional[str] = None, question_id: Optional[str] = None):
        self.phase = phase
        self.question_id = question_id
        where = f" at '{question_id}'" if question_id else ""
        super().__init__(f"Resolution aborted{where}")
