"""
Count expressions — textual filters such as ``5``, ``>5``, ``>=5``,
``<5``, ``<=5`` and ``2-10`` translated to query-executor calls.
"""

import re
from dataclasses import dataclass
from typing import Literal

from type_dependencies.graph.query_executor import DependencyGraphQueryExecutor
from type_dependencies.shared.exceptions import InvalidCountExpressionError

CountOperator = Literal["eq", "gt", "ge", "lt", "le", "range"]
CountSubject = Literal["dependents", "dependencies"]

EXPECTED_FORMAT = "number, >number, >=number, <number, <=number, or min-max"

# Longest prefix first so ">=" is not read as ">".
_PREFIX_OPERATORS: list[tuple[str, CountOperator]] = [
    (">=", "ge"),
    ("<=", "le"),
    (">", "gt"),
    ("<", "lt"),
]


@dataclass(frozen=True)
class CountExpression:
    """A parsed count filter."""

    operator: CountOperator
    value: int
    upper: int | None = None  # only for "range"

    def apply(
        self,
        executor: DependencyGraphQueryExecutor,
        subject: CountSubject = "dependents",
    ) -> set[str]:
        """Run the matching ``get_types_with_<subject>_count*`` query."""
        prefix = "dependent" if subject == "dependents" else "dependency"
        if self.operator == "range":
            return getattr(executor, f"get_types_with_{prefix}_count_range")(self.value, self.upper)
        suffix = {
            "eq": "",
            "gt": "_greater_than",
            "ge": "_greater_than_or_equal",
            "lt": "_less_than",
            "le": "_less_than_or_equal",
        }[self.operator]
        return getattr(executor, f"get_types_with_{prefix}_count{suffix}")(self.value)


_NUMBER = re.compile(r"[0-9]+")


def _parse_int(text: str, expression: str) -> int:
    text = text.strip()
    if not _NUMBER.fullmatch(text):
        raise InvalidCountExpressionError(
            f"Invalid count expression '{expression}'. Expected format: {EXPECTED_FORMAT}."
        )
    return int(text)


def parse_count_expression(expression: str) -> CountExpression:
    """
    Parse a textual count expression.

    Any ``-`` makes the expression a range, so negative numbers are not
    accepted on their own.

    Raises:
        InvalidCountExpressionError: If the expression matches no form.
    """
    if expression is None or not expression.strip():
        raise InvalidCountExpressionError("Count expression cannot be empty.")

    text = expression.strip()

    if "-" in text:
        low, high = text.split("-", 1)
        return CountExpression("range", _parse_int(low, expression), _parse_int(high, expression))

    for prefix, operator in _PREFIX_OPERATORS:
        if text.startswith(prefix):
            return CountExpression(operator, _parse_int(text[len(prefix):], expression))

    return CountExpression("eq", _parse_int(text, expression))
