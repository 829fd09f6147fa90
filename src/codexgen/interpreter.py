"""
Interpreter layer: evaluates question logic against an AnswerSet snapshot.

Every function here is pure. The same question and the same AnswerSet
always give the same visibility, choice list and validation result.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional

from codexgen.expressions import (
    Expression,
    BinaryExpression,
    BinaryOperator,
    AnswerReference,
    Literal,
    UnaryExpression,
    UnaryOperator,
)
from codexgen.model import Choice, Question, QuestionKind


def _scope(value: Any) -> Optional[str]:
    text = str(value or "").strip().lstrip("@")
    return f"@{text}" if text else None


TRANSFORMS: Dict[str, Callable[[Any], Any]] = {
    "scope": _scope,
}


def evaluate(expr: Expression | None, answers: Mapping) -> Any:
    """
    Evaluate an expression tree against a snapshot of answers.

    A reference to a question that has no answer yet evaluates to None.
    Logical operators short-circuit on truthiness.
    """
    if expr is None:
        return True
    if isinstance(expr, Literal):
        return expr.value
    if isinstance(expr, AnswerReference):
        return answers.get(expr.question_id)
    if isinstance(expr, UnaryExpression):
        if expr.operator is UnaryOperator.NOT:
            return not evaluate(expr.operand, answers)
        if expr.operator is UnaryOperator.PRESENT:
            if isinstance(expr.operand, AnswerReference):
                return expr.operand.question_id in answers
            return evaluate(expr.operand, answers) is not None
        raise TypeError(f"Unsupported unary operator: {expr.operator}")
    if isinstance(expr, BinaryExpression):
        return _evaluate_binary(expr, answers)
    raise TypeError(f"Unsupported Expression type: {type(expr)}")


def _evaluate_binary(expr: BinaryExpression, answers: Mapping) -> Any:
    op = expr.operator
    if op is BinaryOperator.AND:
        return bool(evaluate(expr.left, answers)) and bool(evaluate(expr.right, answers))
    if op is BinaryOperator.OR:
        return bool(evaluate(expr.left, answers)) or bool(evaluate(expr.right, answers))

    left = evaluate(expr.left, answers)
    right = evaluate(expr.right, answers)
    if op is BinaryOperator.EQUALS:
        return left == right
    if op is BinaryOperator.NOT_EQUALS:
        return left != right
    if op is BinaryOperator.IN:
        if not isinstance(right, (list, tuple, set, frozenset)):
            return False
        return left in right
    if op is BinaryOperator.MATCHES:
        if not isinstance(left, str) or not isinstance(right, str):
            return False
        return re.fullmatch(right, left) is not None
    raise TypeError(f"Unsupported binary operator: {op}")


def is_visible(question: Question, answers: Mapping) -> bool:
    return bool(evaluate(question.visible_when, answers))


def choices_for(question: Question, answers: Mapping) -> List[Choice]:
    """
    Compute the choice list offered for a question right now.

    Static choices are returned as-is. Otherwise the first choice rule
    whose guard holds supplies the list; no matching rule means no choices.
    """
    if not question.choice_rules:
        return list(question.choices)
    for rule in question.choice_rules:
        if evaluate(rule.guard, answers):
            return list(rule.choices)
    return []


def validate_answer(
    question: Question,
    value: Any,
    answers: Mapping,
    choices: Optional[List[Choice]] = None,
) -> Optional[str]:
    """
    Check a candidate value for a question.

    Returns:
        None when the value is acceptable, otherwise the rejection reason
    """
    if question.kind is QuestionKind.CONFIRM:
        if not isinstance(value, bool):
            return "Answer yes or no"
    elif question.kind is QuestionKind.FREE_TEXT:
        if not isinstance(value, str):
            return "Expected text"
    elif question.kind is QuestionKind.SINGLE_CHOICE:
        if choices is None:
            choices = choices_for(question, answers)
        allowed = [c.value for c in choices]
        if value not in allowed:
            return f"Choose one of: {', '.join(str(v) for v in allowed)}"

    if question.validation:
        candidate = dict(answers)
        candidate[question.id] = value
        for rule in question.validation:
            if not evaluate(rule.expression, candidate):
                return rule.message
    return None


def apply_transform(question: Question, value: Any) -> Any:
    if question.transform is None:
        return value
    try:
        transform = TRANSFORMS[question.transform]
    except KeyError:
        raise KeyError(f"Unknown transform '{question.transform}' on question '{question.id}'") from None
    return transform(value)
