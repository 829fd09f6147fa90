"""
ConfigResolver: full interview, or reuse of the last saved configuration.

Exactly one of two paths runs per invocation:
    - full resolution through the Interview
    - name-only merge: {**saved, "projectName": new_name}

KNOWN DIVERGENCE:
    The name-only merge carries every saved answer over verbatim. Guards
    are not re-evaluated and values are not re-validated, so a reused
    answer may disagree with what today's graph would ask. The carried
    answers are audited and stale ones are logged; they are never changed.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Optional

from codexgen.analyzer import find_stale_answers
from codexgen.answers import AnswerSet
from codexgen.catalog import name_rules
from codexgen.interview import Interview
from codexgen.model import Phase, Question, QuestionKind
from codexgen.store import ConfigStore

logger = logging.getLogger(__name__)

REUSE_QUESTION = Question(
    id="reuse",
    kind=QuestionKind.CONFIRM,
    message="Would you like to reuse your last configuration?",
    phase=Phase.REPOSITORY_SETUP,
    default=True,
)


def new_name_question() -> Question:
    return Question(
        id="newName",
        kind=QuestionKind.FREE_TEXT,
        message="🧱 Enter a new project name:",
        phase=Phase.METADATA,
        validation=name_rules("newName"),
    )


class ConfigResolver:
    def __init__(
        self,
        store: ConfigStore,
        interview: Interview,
        seed_defaults_from_previous: bool = False,
    ):
        self.store = store
        self.interview = interview
        self.seed_defaults_from_previous = seed_defaults_from_previous

    def previous_config(
        self,
        candidate_name: Optional[str] = None,
        overrides: Optional[Mapping] = None,
    ) -> AnswerSet:
        """
        Produce the configuration for this run.

        Args:
            candidate_name: project name given on the command line, if any
            overrides: partial answers from command-line flags

        Returns:
            The finalized AnswerSet
        """
        saved = self.store.load()
        if saved is None:
            return self._full(candidate_name, overrides, None)

        logger.info("Found your last Codex setup.")
        reuse = self.interview.ask(REUSE_QUESTION, AnswerSet(), REUSE_QUESTION.default)
        if not reuse:
            previous = saved if self.seed_defaults_from_previous else None
            return self._full(candidate_name, overrides, previous)

        default_name = candidate_name or f"{saved['projectName']}-2"
        new_name = self.interview.ask(new_name_question(), AnswerSet(), default_name)
        merged = saved.replace(projectName=new_name)

        for item in find_stale_answers(self.interview.graph, merged):
            logger.warning("Reused answer %s may be stale: %s", item.question_id, item.reason)
        logger.info('Reusing your previous setup with new project name "%s"', new_name)
        return merged

    def _full(
        self,
        candidate_name: Optional[str],
        overrides: Optional[Mapping],
        previous: Optional[AnswerSet],
    ) -> AnswerSet:
        effective = dict(overrides or {})
        if candidate_name and "projectName" not in effective:
            effective["projectName"] = candidate_name
        return self.interview.resolve(effective, previous=previous)
