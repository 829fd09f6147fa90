"""
Expression System for question logic

Every condition in the question graph (visibility guards, dynamic choice
rules, validation rules) is an Abstract Syntax Tree, never a closure.

This ensures:
    - Predicates are pure functions of an explicit AnswerSet snapshot
    - Question graphs serialize losslessly
    - References between questions can be analyzed statically

ARCHITECTURAL RULE:
    No closures over mutable state in the question graph.
    All logic must be AST-based.
"""

from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Expression(ABC):
    """
    Base class for all AST expressions.

    Structure only. Evaluation lives in codexgen.interpreter,
    reference analysis in codexgen.analyzer.
    """
    pass


class BinaryOperator(Enum):
    """
    Binary operators supported in question logic.

    Keep this minimal. Every operator must be meaningful when comparing
    answers of confirm, single-choice or free-text questions.
    """

    # Logical operators
    AND = "AND"
    OR = "OR"

    # Comparison operators
    EQUALS = "=="
    NOT_EQUALS = "!="

    # Membership: left value is contained in the right-hand literal list
    IN = "IN"

    # Full regular-expression match of a string against a literal pattern
    MATCHES = "=~"


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    Represents a binary logical or comparison expression.

    Example:
        (createRemote == true AND setupCI == true)

    Becomes:
        BinaryExpression(
            operator=BinaryOperator.AND,
            left=BinaryExpression(
                operator=BinaryOperator.EQUALS,
                left=AnswerReference("createRemote"),
                right=Literal(True)
            ),
            right=BinaryExpression(
                operator=BinaryOperator.EQUALS,
                left=AnswerReference("setupCI"),
                right=Literal(True)
            )
        )
    """

    operator: BinaryOperator
    left: "Expression"
    right: "Expression"


@dataclass(frozen=True)
class AnswerReference(Expression):
    """
    References the accepted answer of another question by id.

    Examples:
        - framework
        - initGit
        - database

    IMPORTANT:
        This object does NOT check that the id exists or precedes the
        referencing question. That is the analyzer's job.
    """

    question_id: str


@dataclass(frozen=True)
class Literal(Expression):
    """
    Represents a literal constant value.

    Examples:
        - True
        - "react"
        - ("prisma-postgres", "sqlite")   (right-hand side of IN)
        - "^[A-Za-z0-9\\-_]+$"            (right-hand side of =~)
    """

    value: Any


class UnaryOperator(Enum):
    """Unary operators."""
    NOT = "NOT"
    # True when the referenced question has an answer in the snapshot
    PRESENT = "PRESENT"


@dataclass(frozen=True)
class UnaryExpression(Expression):
    """
    Represents a unary operation.

    Example:
        PRESENT database

    Becomes:
        UnaryExpression(
            operator=UnaryOperator.PRESENT,
            operand=AnswerReference("database")
        )
    """

    operator: UnaryOperator
    operand: Expression
