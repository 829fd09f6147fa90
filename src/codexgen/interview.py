"""
Interview: resolves a QuestionGraph into an AnswerSet.

For each question, in phase order:
    1. An override for its id is validated and accepted without prompting
       (an invalid override is fatal: there is nobody to re-ask).
    2. Otherwise the visibility guard is evaluated against the answers
       gathered so far; a hidden question adds no entry.
    3. Otherwise the choice list is computed from the live answers, the
       prompter is asked, and the response is validated, re-asking within
       the retry policy. A default is never substituted silently.

The AnswerSet is threaded through as a value. Later answers cannot
change whether an earlier question was shown.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from codexgen.analyzer import analyze_graph
from codexgen.answers import AnswerSet
from codexgen.errors import GraphDefinitionError, InvalidInput, ResolutionAborted
from codexgen.interpreter import apply_transform, choices_for, is_visible, validate_answer
from codexgen.model import Question, QuestionGraph, QuestionKind
from codexgen.prompting import Prompter, PromptRequest, RetryPolicy

logger = logging.getLogger(__name__)


class Interview:
    def __init__(
        self,
        graph: QuestionGraph,
        prompter: Prompter,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        report = analyze_graph(graph)
        if not report.is_valid:
            raise GraphDefinitionError(report.errors)
        for warning in report.warnings:
            logger.debug("%s: %s", graph.name, warning)

        self.graph = graph
        self.prompter = prompter
        self.retry_policy = retry_policy or RetryPolicy()

    def resolve(self, overrides: Optional[Mapping] = None, previous: Optional[Mapping] = None) -> AnswerSet:
        """
        Walk the whole graph and return the finalized AnswerSet.

        Args:
            overrides: partial answers (usually from command-line flags)
            previous: answers of an earlier run, offered as prompt defaults

        Raises:
            InvalidInput: an override is unknown or fails validation, or
                the retry policy ran out
            ResolutionAborted: the user cancelled a prompt
        """
        overrides = dict(overrides or {})
        for question_id, value in overrides.items():
            if self.graph.get_question(question_id) is None:
                raise InvalidInput(question_id, value, "unknown question id")

        answers = AnswerSet()
        for question in self.graph.ordered():
            answers = self.step(question, answers, overrides, previous)
        logger.debug("Resolved %d answers for %s", len(answers), self.graph.name)
        return answers

    def step(
        self,
        question: Question,
        answers: AnswerSet,
        overrides: Mapping,
        previous: Optional[Mapping] = None,
    ) -> AnswerSet:
        """Resolve a single question on top of `answers`; returns the next AnswerSet."""
        if question.id in overrides:
            value = overrides[question.id]
            reason = validate_answer(question, value, answers)
            if reason is not None:
                raise InvalidInput(question.id, value, reason)
            logger.debug("Accepted override %s=%r", question.id, value)
            return answers.with_answer(question.id, apply_transform(question, value))

        if not is_visible(question, answers):
            logger.debug("Skipping hidden question %s", question.id)
            return answers

        default = question.default
        if previous is not None and question.id in previous:
            default = previous[question.id]
        value = self.ask(question, answers, default)
        return answers.with_answer(question.id, value)

    def ask(self, question: Question, answers: AnswerSet, default: Any = None) -> Any:
        """
        Prompt for one question until a valid answer arrives.

        Returns the accepted value with the question's transform applied.
        """
        choices = choices_for(question, answers)
        if question.kind is QuestionKind.SINGLE_CHOICE:
            if not choices:
                raise GraphDefinitionError([f"'{question.id}' offers no choices for the current answers"])
            if default not in [c.value for c in choices]:
                default = None

        attempt = 1
        while True:
            request = PromptRequest(
                question_id=question.id,
                kind=question.kind,
                message=question.message,
                choices=tuple(choices),
                default=default,
                attempt=attempt,
            )
            try:
                value = self.prompter.ask(request)
            except (KeyboardInterrupt, EOFError):
                raise ResolutionAborted(question.phase.value, question.id) from None

            reason = validate_answer(question, value, answers, choices)
            if reason is None:
                return apply_transform(question, value)

            self.prompter.reject(request, reason)
            attempt += 1
            if not self.retry_policy.allows(attempt):
                raise InvalidInput(question.id, value, reason)
