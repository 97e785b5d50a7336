"""
Expression Evaluator for node content.

Evaluates small textual expressions against a context value:

    "input * input"                      -> arithmetic
    "age >= 18 ? \"adult\" : \"minor\""  -> ternary
    "customer.age >= 18"                 -> comparison
    "customer.address.city"              -> dotted field access
    "\"gold\"", "42", "true"             -> literals
    "status"                             -> property lookup

The dispatch is flat. The first matching form wins and the
operands of arithmetic, ternary and comparison expressions are evaluated as
single operands, never re-dispatched. There is no operator precedence and no
parenthesis support: ``"3*2+1"`` splits on ``*`` into ``3`` and ``2+1``, the
right operand is not numeric, and the expression text comes back unchanged.
"""

from __future__ import annotations

import logging

from decision_engine.errors import ExpressionError
from decision_engine.values import (
    EQUALITY_EPSILON,
    Value,
    condition_truth,
    get_path,
    is_quoted,
    lookup_property,
    parse_bool,
    parse_integer,
    parse_number,
    to_number,
    values_equal,
)


logger = logging.getLogger(__name__)

# Scanned in this order; the first operator present anywhere in the text wins
ARITHMETIC_OPERATORS = ("*", "/", "+", "-")
COMPARISON_OPERATORS = (">=", "<=", ">", "<", "==")


class ExpressionEvaluator:
    """
    Evaluator for node expressions.

    ``evaluate`` raises ``ExpressionError`` on an internal fault.
    ``evaluate_condition`` never raises: faults map to ``False``.
    """

    def evaluate(self, expression: str, context: Value) -> Value:
        """
        Evaluate an expression against a context.

        Args:
            expression: The expression text.
            context: The current context value.

        Returns:
            The evaluated value.
        """
        if not isinstance(expression, str):
            raise ExpressionError(
                str(expression), f"expected string expression, got {type(expression).__name__}"
            )

        try:
            return self._dispatch(expression.strip(), context)
        except ExpressionError:
            raise
        except Exception as e:
            raise ExpressionError(expression, str(e)) from e

    def evaluate_condition(self, expression: str, context: Value) -> bool:
        """Evaluate an expression as a condition. Blank conditions are true."""
        if expression is None or (isinstance(expression, str) and not expression.strip()):
            return True

        try:
            result = self.evaluate(expression, context)
        except Exception as e:
            logger.debug("Condition %r evaluated as false: %s", expression, e)
            return False

        return condition_truth(result)

    def _dispatch(self, expression: str, context: Value) -> Value:
        if any(op in expression for op in ARITHMETIC_OPERATORS):
            return self._eval_arithmetic(expression, context)

        if "?" in expression and ":" in expression:
            return self._eval_ternary(expression, context)

        for op in COMPARISON_OPERATORS:
            if op in expression:
                return self._eval_comparison(expression, op, context)

        if "." in expression:
            return get_path(context, expression)

        if is_quoted(expression):
            return expression[1:-1]

        for parse in (parse_integer, parse_number, parse_bool):
            literal = parse(expression)
            if literal is not None:
                return literal

        found, value = lookup_property(context, expression)
        if found:
            return value

        # No interpretation found
        return expression

    def _eval_operand(self, text: str, context: Value) -> Value:
        """Evaluate one side of an operator without re-dispatching."""
        operand = text.strip()

        number = parse_number(operand)
        if number is not None:
            return number

        flag = parse_bool(operand)
        if flag is not None:
            return flag

        if is_quoted(operand):
            return operand[1:-1]

        if "." in operand:
            return get_path(context, operand)

        found, value = lookup_property(context, operand)
        if found:
            return value

        return operand

    def _eval_arithmetic(self, expression: str, context: Value) -> Value:
        """Evaluate ``left <op> right``, splitting at the first candidate operator."""
        op = next(candidate for candidate in ARITHMETIC_OPERATORS if candidate in expression)
        left_text, right_text = expression.split(op, 1)

        left = to_number(self._eval_operand(left_text, context))
        right = to_number(self._eval_operand(right_text, context))
        if left is None or right is None:
            return expression

        if op == "*":
            return left * right
        if op == "/":
            return left / right if right != 0 else 0.0
        if op == "+":
            return left + right
        return left - right

    def _eval_ternary(self, expression: str, context: Value) -> Value:
        """Evaluate ``condition ? when_true : when_false``."""
        question = expression.index("?")
        colon = expression.rindex(":")

        condition = expression[:question]
        when_true = expression[question + 1:colon]
        when_false = expression[colon + 1:]

        if self.evaluate_condition(condition, context):
            return self._eval_operand(when_true, context)
        return self._eval_operand(when_false, context)

    def _eval_comparison(self, expression: str, op: str, context: Value) -> bool:
        """Evaluate ``left <op> right``."""
        left_text, right_text = expression.split(op, 1)
        left = self._eval_operand(left_text, context)
        right = self._eval_operand(right_text, context)

        left_number = to_number(left)
        right_number = to_number(right)
        if left_number is not None and right_number is not None:
            if op == ">=":
                return left_number >= right_number
            if op == "<=":
                return left_number <= right_number
            if op == ">":
                return left_number > right_number
            if op == "<":
                return left_number < right_number
            return abs(left_number - right_number) < EQUALITY_EPSILON

        if isinstance(left, bool) and isinstance(right, bool):
            return op == "==" and left == right

        if op == "==":
            return values_equal(left, right)
        return False
