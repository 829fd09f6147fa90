"""
Serialization helpers for AnswerSets and question graphs.

Provides lossless JSON/YAML round-trip via intermediate dict representation.
This module intentionally keeps serialization structure stable and explicit.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List

import yaml

from codexgen.answers import AnswerSet
from codexgen.model import (
    Choice,
    ChoiceRule,
    Phase,
    Question,
    QuestionGraph,
    QuestionKind,
    ValidationRule,
)
from codexgen.expressions import (
    Expression,
    BinaryExpression,
    AnswerReference,
    Literal,
    UnaryExpression,
    BinaryOperator,
    UnaryOperator,
)


def answers_to_dict(answers: AnswerSet) -> Dict[str, Any]:
    return answers.to_dict()


def answers_from_dict(d: Dict[str, Any]) -> AnswerSet:
    return AnswerSet(d)


def answers_to_json(answers: AnswerSet) -> str:
    return json.dumps(answers_to_dict(answers), indent=2)


def answers_from_json(s: str) -> AnswerSet:
    return answers_from_dict(json.loads(s))


def answers_to_yaml(answers: AnswerSet) -> str:
    return yaml.safe_dump(answers_to_dict(answers), sort_keys=False)


def _plain(value: Any) -> Any:
    if isinstance(value, tuple):
        return [_plain(v) for v in value]
    return value


def _frozen(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(_frozen(v) for v in value)
    return value


def expr_to_dict(expr: Expression | None) -> Any:
    if expr is None:
        return None
    if isinstance(expr, BinaryExpression):
        return {
            "type": "binary",
            "operator": expr.operator.value,
            "left": expr_to_dict(expr.left),
            "right": expr_to_dict(expr.right),
        }
    if isinstance(expr, AnswerReference):
        return {"type": "answer", "id": expr.question_id}
    if isinstance(expr, Literal):
        return {"type": "lit", "value": _plain(expr.value)}
    if isinstance(expr, UnaryExpression):
        return {
            "type": "unary",
            "operator": expr.operator.value,
            "operand": expr_to_dict(expr.operand),
        }
    raise TypeError(f"Unsupported Expression type: {type(expr)}")


def expr_from_dict(d: Any) -> Expression | None:
    if d is None:
        return None
    t = d.get("type")
    if t == "binary":
        op = BinaryOperator(d["operator"])
        left = expr_from_dict(d["left"])
        right = expr_from_dict(d["right"])
        return BinaryExpression(operator=op, left=left, right=right)
    if t == "answer":
        return AnswerReference(d["id"])
    if t == "lit":
        return Literal(_frozen(d["value"]))
    if t == "unary":
        op = UnaryOperator(d["operator"])
        operand = expr_from_dict(d["operand"])
        return UnaryExpression(operator=op, operand=operand)
    raise TypeError(f"Unsupported expression dict type: {t}")


def choice_to_dict(c: Choice) -> Dict[str, Any]:
    return {"value": c.value, "label": c.label}


def choice_from_dict(d: Dict[str, Any]) -> Choice:
    return Choice(value=d["value"], label=d.get("label"))


def choice_rule_to_dict(r: ChoiceRule) -> Dict[str, Any]:
    return {"guard": expr_to_dict(r.guard), "choices": [choice_to_dict(c) for c in r.choices]}


def choice_rule_from_dict(d: Dict[str, Any]) -> ChoiceRule:
    return ChoiceRule(
        guard=expr_from_dict(d.get("guard")),
        choices=tuple(choice_from_dict(c) for c in d.get("choices", [])),
    )


def validation_rule_to_dict(r: ValidationRule) -> Dict[str, Any]:
    return {"expression": expr_to_dict(r.expression), "message": r.message}


def validation_rule_from_dict(d: Dict[str, Any]) -> ValidationRule:
    return ValidationRule(expression=expr_from_dict(d["expression"]), message=d.get("message", ""))


def question_to_dict(q: Question) -> Dict[str, Any]:
    return {
        "id": q.id,
        "kind": q.kind.value,
        "message": q.message,
        "phase": q.phase.value,
        "choices": [choice_to_dict(c) for c in q.choices],
        "choice_rules": [choice_rule_to_dict(r) for r in q.choice_rules],
        "default": q.default,
        "visible_when": expr_to_dict(q.visible_when),
        "validation": [validation_rule_to_dict(r) for r in q.validation],
        "transform": q.transform,
    }


def question_from_dict(d: Dict[str, Any]) -> Question:
    return Question(
        id=d["id"],
        kind=QuestionKind(d["kind"]),
        message=d.get("message", ""),
        phase=Phase(d["phase"]),
        choices=tuple(choice_from_dict(c) for c in d.get("choices", [])),
        choice_rules=tuple(choice_rule_from_dict(r) for r in d.get("choice_rules", [])),
        default=d.get("default"),
        visible_when=expr_from_dict(d.get("visible_when")),
        validation=tuple(validation_rule_from_dict(r) for r in d.get("validation", [])),
        transform=d.get("transform"),
    )


def graph_to_dict(g: QuestionGraph) -> Dict[str, Any]:
    return {
        "name": g.name,
        "questions": [question_to_dict(q) for q in g.questions],
        "metadata": g.metadata,
    }


def graph_from_dict(d: Dict[str, Any]) -> QuestionGraph:
    g = QuestionGraph(name=d.get("name", ""))
    questions: List[Question] = [question_from_dict(q) for q in d.get("questions", [])]
    g.questions = questions
    g.metadata = d.get("metadata", {})
    return g


def graph_to_json(g: QuestionGraph) -> str:
    return json.dumps(graph_to_dict(g), sort_keys=True)


def graph_from_json(s: str) -> QuestionGraph:
    return graph_from_dict(json.loads(s))


def graph_to_yaml(g: QuestionGraph) -> str:
    return yaml.safe_dump(graph_to_dict(g), sort_keys=False, allow_unicode=True)


def graph_from_yaml(s: str) -> QuestionGraph:
    return graph_from_dict(yaml.safe_load(s))
