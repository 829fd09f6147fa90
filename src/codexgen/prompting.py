"""
Prompt capability supplied to the interview by the surrounding shell.

The interview never renders anything itself. It builds a PromptRequest
and hands it to a Prompter, then validates whatever comes back.

Two prompters ship with the engine:
    - ConsolePrompter: interactive terminal prompts (rich)
    - ScriptedPrompter: answers from a mapping, records every request
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple

from rich.console import Console
from rich.prompt import Confirm, Prompt

from codexgen.model import Choice, QuestionKind


@dataclass(frozen=True)
class PromptRequest:
    """Everything a prompter needs to render one question."""

    question_id: str
    kind: QuestionKind
    message: str
    choices: Tuple[Choice, ...] = ()
    default: Any = None
    attempt: int = 1

    @property
    def choice_values(self) -> List[Any]:
        return [c.value for c in self.choices]


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounds re-prompting after a rejected answer.

    max_attempts=None re-prompts until a valid answer arrives.
    """

    max_attempts: Optional[int] = 3

    def allows(self, attempt: int) -> bool:
        return self.max_attempts is None or attempt <= self.max_attempts


class Prompter(Protocol):
    def ask(self, request: PromptRequest) -> Any:
        ...

    def reject(self, request: PromptRequest, reason: str) -> None:
        ...


@dataclass
class ScriptedPrompter:
    """
    Non-interactive prompter driven by a mapping of question id to response.

    A list value is consumed one element per attempt, which lets callers
    script a rejected answer followed by a valid one.

    With accept_defaults=True an unscripted question is answered the way
    pressing Enter would: the offered default, else the first choice,
    else empty text.
    """

    responses: Mapping = field(default_factory=dict)
    accept_defaults: bool = False
    requests: List[PromptRequest] = field(default_factory=list)
    rejections: List[Tuple[str, str]] = field(default_factory=list)
    _cursor: Dict[str, int] = field(default_factory=dict, repr=False)

    @property
    def asked_ids(self) -> List[str]:
        return [r.question_id for r in self.requests]

    def request_for(self, question_id: str) -> Optional[PromptRequest]:
        """Most recent request presented for a question."""
        for request in reversed(self.requests):
            if request.question_id == question_id:
                return request
        return None

    def ask(self, request: PromptRequest) -> Any:
        self.requests.append(request)
        if request.question_id in self.responses:
            scripted = self.responses[request.question_id]
            if isinstance(scripted, list):
                index = self._cursor.get(request.question_id, 0)
                if index >= len(scripted):
                    raise LookupError(f"Scripted answers for '{request.question_id}' exhausted")
                self._cursor[request.question_id] = index + 1
                return scripted[index]
            return scripted
        if self.accept_defaults:
            return self._enter(request)
        raise LookupError(f"No scripted answer for '{request.question_id}'")

    def reject(self, request: PromptRequest, reason: str) -> None:
        self.rejections.append((request.question_id, reason))

    @staticmethod
    def _enter(request: PromptRequest) -> Any:
        if request.default is not None:
            return request.default
        if request.kind is QuestionKind.SINGLE_CHOICE and request.choices:
            return request.choices[0].value
        if request.kind is QuestionKind.FREE_TEXT:
            return ""
        raise LookupError(f"No default to accept for '{request.question_id}'")


class ConsolePrompter:
    """Interactive prompts on the terminal."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def ask(self, request: PromptRequest) -> Any:
        if request.kind is QuestionKind.CONFIRM:
            if request.default is None:
                return Confirm.ask(request.message, console=self.console)
            return Confirm.ask(request.message, console=self.console, default=bool(request.default))

        if request.kind is QuestionKind.SINGLE_CHOICE:
            for index, choice in enumerate(request.choices, start=1):
                marker = "*" if choice.value == request.default else " "
                self.console.print(f" {marker} {index}. {choice.display} [dim]({choice.value})[/dim]")
            kwargs: Dict[str, Any] = {}
            if request.default is not None:
                kwargs["default"] = str(request.default)
            raw = Prompt.ask(request.message, console=self.console, **kwargs)
            return self._choice_value(request, raw)

        default = "" if request.default is None else str(request.default)
        return Prompt.ask(
            request.message,
            console=self.console,
            default=default,
            show_default=bool(default),
        )

    def reject(self, request: PromptRequest, reason: str) -> None:
        self.console.print(f"[red]✗ {reason}[/red]")

    @staticmethod
    def _choice_value(request: PromptRequest, raw: str) -> Any:
        """Accept either the choice number or its value."""
        text = raw.strip()
        if text.isdigit():
            index = int(text) - 1
            if 0 <= index < len(request.choices):
                return request.choices[index].value
        return text
