"""
Core Question Graph Model Objects

Defines the fundamental data structures of the configuration interview.

These are pure data classes representing:
    - Choices (selectable values of a single-choice question)
    - Choice rules (answer-dependent choice lists)
    - Validation rules (value -> valid | reason)
    - Questions (nodes of the interview)
    - Phases (fixed evaluation order)
    - QuestionGraph (root container)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about how prompts are rendered
        - Are immutable once built
        - Are fully serializable
        - Represent structure, not behavior
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .expressions import Expression


class QuestionKind(Enum):
    """The three prompt shapes the interview knows about."""
    CONFIRM = "confirm"
    SINGLE_CHOICE = "single-choice"
    FREE_TEXT = "free-text"


class Phase(Enum):
    """
    Ordered interview phases.

    Declaration order IS evaluation order. A question may only reference
    questions from its own phase (declared earlier) or from earlier phases.
    """

    REPOSITORY_SETUP = "repository-setup"
    METADATA = "metadata"
    LANGUAGE_STRUCTURE = "language-structure"
    ENVIRONMENT = "environment"
    FRAMEWORK = "framework"
    QUALITY = "quality"
    INFRASTRUCTURE = "infrastructure"
    REPOSITORY_HOSTING = "repository-hosting"
    AUTOMATION = "automation"

    @property
    def rank(self) -> int:
        return list(Phase).index(self)


@dataclass(frozen=True)
class Choice:
    """A selectable value with its display label."""

    value: Any
    label: Optional[str] = None

    @property
    def display(self) -> str:
        return self.label if self.label is not None else str(self.value)


@dataclass(frozen=True)
class ChoiceRule:
    """
    Supplies the choice list of a question when its guard holds.

    Rules are tried in order; the first rule whose guard is true
    (or None) wins. A rule without a guard is the fallback.

    Example:
        routing offers app/pages when framework == "next",
        vue-router when framework == "vue", otherwise react-router.
    """

    choices: Tuple[Choice, ...]
    guard: Optional[Expression] = None


@dataclass(frozen=True)
class ValidationRule:
    """
    One acceptance constraint on a question's value.

    The expression is evaluated against the answers gathered so far,
    extended with the candidate value under the question's own id.
    If it is false, `message` is the rejection reason.
    """

    expression: Expression
    message: str


@dataclass(frozen=True)
class Question:
    """
    Represents a single node of the configuration interview.

    Properties:
        id:
            Unique key; also the key of the answer in the AnswerSet
            Examples: "framework", "initGit", "routing"

        kind:
            QuestionKind (confirm | single-choice | free-text)

        message:
            Prompt text shown to the user

        phase:
            Phase the question belongs to

        choices:
            Static choice list (single-choice only)

        choice_rules:
            Answer-dependent choice lists (single-choice only);
            recomputed from the live AnswerSet at prompt time

        default:
            Static default offered when neither an override nor a
            previous answer supplies one

        visible_when:
            Boolean Expression deciding whether the question is asked.
            If None: always asked.

        validation:
            Ordered ValidationRules; first failure wins

        transform:
            Name of a post-validation transform (see interpreter.TRANSFORMS)

    ARCHITECTURAL RULE:
        - visible_when is about reaching the question
        - validation is about accepting the response
        - These are separate concerns
    """

    id: str
    kind: QuestionKind
    message: str
    phase: Phase
    choices: Tuple[Choice, ...] = ()
    choice_rules: Tuple[ChoiceRule, ...] = ()
    default: Any = None
    visible_when: Optional[Expression] = None
    validation: Tuple[ValidationRule, ...] = ()
    transform: Optional[str] = None


@dataclass
class QuestionGraph:
    """
    Root container for the whole interview.

    INVARIANTS (checked by codexgen.analyzer):
        - Question ids are unique
        - Every reference points at a question evaluated earlier
        - Evaluation order is Phase order, then declaration order
    """

    name: str
    questions: List[Question] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)

    def get_question(self, question_id: str) -> Optional[Question]:
        """
        Retrieve a question by id.

        Returns:
            Question object or None if not found
        """
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def ordered(self) -> List[Question]:
        """Questions in evaluation order (stable within a phase)."""
        return sorted(self.questions, key=lambda q: q.phase.rank)

    def in_phase(self, phase: Phase) -> List[Question]:
        return [q for q in self.questions if q.phase is phase]

