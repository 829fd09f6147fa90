"""
Question Graph Analyzer: structural diagnostics and answer audits.

This module provides lightweight, read-only analysis:
    - Duplicate question ids
    - Forward, self and undefined references in guards and choice rules
    - Expression complexity metrics
    - Choice and validation coverage
    - Audit of carried-over answers against today's graph

IMPORTANT: Nothing here modifies the graph or the answers.
It only produces reports.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Dict, List, Set

from codexgen.answers import AnswerSet
from codexgen.expressions import (
    Expression,
    BinaryExpression,
    AnswerReference,
    Literal,
    UnaryExpression,
)
from codexgen.interpreter import is_visible, validate_answer
from codexgen.model import QuestionGraph, QuestionKind


@dataclass
class ExpressionMetrics:
    """Metrics about a single expression tree."""
    depth: int = 0
    node_count: int = 0
    references: Set[str] = field(default_factory=set)


def _analyze_expression(expr: Expression | None) -> ExpressionMetrics:
    """Recursively analyze an expression tree."""
    if expr is None:
        return ExpressionMetrics()

    metrics = ExpressionMetrics(node_count=1)

    if isinstance(expr, BinaryExpression):
        left = _analyze_expression(expr.left)
        right = _analyze_expression(expr.right)
        metrics.depth = 1 + max(left.depth, right.depth)
        metrics.node_count += left.node_count + right.node_count
        metrics.references.update(left.references)
        metrics.references.update(right.references)

    elif isinstance(expr, UnaryExpression):
        operand = _analyze_expression(expr.operand)
        metrics.depth = 1 + operand.depth
        metrics.node_count += operand.node_count
        metrics.references.update(operand.references)

    elif isinstance(expr, AnswerReference):
        metrics.references.add(expr.question_id)

    elif isinstance(expr, Literal):
        pass

    return metrics


@dataclass
class GraphReport:
    """Analysis report for a question graph."""

    graph_name: str
    total_questions: int = 0
    questions_per_phase: Dict[str, int] = field(default_factory=dict)

    duplicate_ids: Set[str] = field(default_factory=set)
    # question id -> ids it references that are evaluated at or after it
    forward_references: Dict[str, List[str]] = field(default_factory=dict)
    # question id -> ids it references that do not exist
    undefined_references: Dict[str, List[str]] = field(default_factory=dict)
    questions_without_choices: Set[str] = field(default_factory=set)

    guarded_questions: int = 0
    dynamic_choice_questions: int = 0
    max_expression_depth: int = 0

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        if msg not in self.warnings:
            self.warnings.append(msg)

    @property
    def errors(self) -> List[str]:
        """Problems that make the graph unusable for resolution."""
        problems = []
        for qid in sorted(self.duplicate_ids):
            problems.append(f"Duplicate question id: {qid}")
        for qid, refs in self.forward_references.items():
            problems.append(f"'{qid}' references questions not yet asked: {', '.join(refs)}")
        for qid, refs in self.undefined_references.items():
            problems.append(f"'{qid}' references unknown questions: {', '.join(refs)}")
        for qid in sorted(self.questions_without_choices):
            problems.append(f"'{qid}' is a single-choice question without choices")
        return problems

    @property
    def is_valid(self) -> bool:
        return not self.errors


def analyze_graph(graph: QuestionGraph) -> GraphReport:
    """
    Perform structural analysis of a QuestionGraph.

    Checks for:
    - Unique ids
    - Guards and choice rules referencing only questions evaluated earlier
    - Single-choice questions that can never offer a choice
    - Free-text questions without validation (warning only)
    """
    report = GraphReport(graph_name=graph.name)
    ordered = graph.ordered()
    report.total_questions = len(ordered)

    position: Dict[str, int] = {}
    for index, question in enumerate(ordered):
        if question.id in position:
            report.duplicate_ids.add(question.id)
        else:
            position[question.id] = index
        phase = question.phase.value
        report.questions_per_phase[phase] = report.questions_per_phase.get(phase, 0) + 1

    for index, question in enumerate(ordered):
        expressions = [question.visible_when] + [rule.guard for rule in question.choice_rules]
        references: Set[str] = set()
        for expr in expressions:
            metrics = _analyze_expression(expr)
            references.update(metrics.references)
            report.max_expression_depth = max(report.max_expression_depth, metrics.depth)

        # Validation may look at its own value, never at later answers
        for rule in question.validation:
            metrics = _analyze_expression(rule.expression)
            references.update(metrics.references - {question.id})

        undefined = sorted(ref for ref in references if ref not in position)
        forward = sorted(ref for ref in references if ref in position and position[ref] >= index)
        if undefined:
            report.undefined_references[question.id] = undefined
        if forward:
            report.forward_references[question.id] = forward

        if question.visible_when is not None:
            report.guarded_questions += 1
        if question.choice_rules:
            report.dynamic_choice_questions += 1
        if question.kind is QuestionKind.SINGLE_CHOICE:
            if not question.choices and not any(rule.choices for rule in question.choice_rules):
                report.questions_without_choices.add(question.id)
        if question.kind is QuestionKind.FREE_TEXT and not question.validation:
            report.add_warning(f"Free-text question without validation: {question.id}")

    if report.max_expression_depth > 5:
        report.add_warning(f"High expression complexity: max depth {report.max_expression_depth}")

    return report


@dataclass(frozen=True)
class StaleAnswer:
    """A carried-over answer that today's graph would not produce."""
    question_id: str
    reason: str


def find_stale_answers(graph: QuestionGraph, answers: Mapping) -> List[StaleAnswer]:
    """
    Audit a complete AnswerSet against the current graph.

    Replays the graph in order over the given answers and reports every
    answer whose question would be hidden, whose value would be rejected,
    or which no longer exists, plus visible questions left unanswered.
    """
    stale: List[StaleAnswer] = []
    prefix = AnswerSet()
    known = set()

    for question in graph.ordered():
        known.add(question.id)
        visible = is_visible(question, prefix)
        if question.id not in answers:
            if visible:
                stale.append(StaleAnswer(question.id, "not answered"))
            continue

        value = answers[question.id]
        if not visible:
            stale.append(StaleAnswer(question.id, "question would not be asked"))
        elif question.transform is None:
            reason = validate_answer(question, value, prefix)
            if reason is not None:
                stale.append(StaleAnswer(question.id, reason))
        prefix = prefix.with_answer(question.id, value)

    for question_id in answers:
        if question_id not in known:
            stale.append(StaleAnswer(question_id, "unknown question"))

    return stale
