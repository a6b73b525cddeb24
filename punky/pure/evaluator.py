"""Tree-walking evaluator for the punky language.

evaluate(node, env) walks an AST against an Environment and returns a runtime Object. Control flow never uses Python
exceptions: return statements and runtime errors are ReturnValue and Error objects, and every block, program or
expression stops at the first one a part of it produces and hands it upward. The only exception that escapes is
GenericException for node kinds this module does not know, which is an internal bug rather than a punky error.

Closures: a function literal evaluates to a Function holding the environment it was evaluated in (by reference, not a
copy). Calling it evaluates the body in a fresh scope enclosed by that captured environment, not by the caller's.
"""

from punky.lang.error import GenericException
from punky.pure import ast
from punky.pure.environment import Environment
from punky.pure.objects import (EMPTY, FALSE, NULL, TRUE, Error, Function, Int, ObjectType, ReturnValue,
                                native_bool, wrap_int)


def evaluate(node, env):
    """Evaluates node in env. Programs unwrap a top-level return; blocks leave it wrapped for their callers."""
    # statements
    if isinstance(node, ast.Program):
        return eval_program(node, env)

    elif isinstance(node, ast.ExpressionStatement):
        return evaluate(node.expression, env)

    elif isinstance(node, ast.BlockStatement):
        return eval_block_statement(node, env)

    elif isinstance(node, ast.LetStatement):
        value = evaluate(node.value, env)
        if is_signal(value):
            return value
        env.set(node.name.value, value)
        return EMPTY

    elif isinstance(node, ast.ReturnStatement):
        if node.value is None:
            return ReturnValue(NULL)
        value = evaluate(node.value, env)
        if is_signal(value):
            return value
        return ReturnValue(value)

    # expressions
    elif isinstance(node, ast.IntLiteral):
        return Int(node.value)

    elif isinstance(node, ast.Boolean):
        return native_bool(node.value)

    elif isinstance(node, ast.PrefixExpression):
        right = evaluate(node.right, env)
        if is_signal(right):
            return right
        return eval_prefix_expression(node.operator, right)

    elif isinstance(node, ast.InfixExpression):
        left = evaluate(node.left, env)
        if is_signal(left):
            return left
        right = evaluate(node.right, env)
        if is_signal(right):
            return right
        return eval_infix_expression(node.operator, left, right)

    elif isinstance(node, ast.IfExpression):
        return eval_if_expression(node, env)

    elif isinstance(node, ast.Identifier):
        return eval_identifier(node, env)

    elif isinstance(node, ast.FunctionLiteral):
        return Function(node, env)

    elif isinstance(node, ast.CallExpression):
        function = evaluate(node.function, env)
        if is_signal(function):
            return function

        args = eval_expressions(node.arguments, env)
        if len(args) == 1 and is_signal(args[0]):
            return args[0]
        return apply_function(function, args)

    raise GenericException(f"cannot evaluate node '{node!r}'", internal=True)


def eval_program(program, env):
    result = EMPTY
    for stmt in program.statements:
        result = evaluate(stmt, env)

        if isinstance(result, ReturnValue):
            return result.value
        elif is_error(result):
            return result

    return result


def eval_block_statement(block, env):
    """Like eval_program, but a ReturnValue stays wrapped so that enclosing blocks stop too."""
    result = NULL
    for stmt in block.statements:
        result = evaluate(stmt, env)

        if is_signal(result):
            return result

    return result


# ==================== OPERATORS ====================

def eval_prefix_expression(operator, right):
    if operator == "!":
        return eval_bang_operator(right)
    elif operator == "-":
        return eval_minus_operator(right)
    return Error(f"unknown operator: {operator}{right.type.value}")


def eval_bang_operator(right):
    """'!' is a truthiness test, so it is defined for every operand type."""
    if right.type is ObjectType.NULL:
        return TRUE
    elif right.type is ObjectType.BOOLEAN:
        return native_bool(not right.value)
    return FALSE


def eval_minus_operator(right):
    if right.type is not ObjectType.INT:
        return Error(f"unknown operator: -{right.type.value}")
    return Int(wrap_int(-right.value))


def eval_infix_expression(operator, left, right):
    if left.type is ObjectType.INT and right.type is ObjectType.INT:
        return eval_int_infix_expression(operator, left, right)
    elif left.type is not right.type:
        return Error(f"type mismatch: {left.type.value} {operator} {right.type.value}")
    elif left.type is ObjectType.BOOLEAN:
        return eval_boolean_infix_expression(operator, left, right)
    return Error(f"unknown operator: {left.type.value} {operator} {right.type.value}")


def truncated_division(dividend, divisor):
    """Integer division rounding toward zero (not toward negative infinity like Python's //)."""
    quotient = abs(dividend) // abs(divisor)
    return quotient if (dividend < 0) == (divisor < 0) else -quotient


def eval_int_infix_expression(operator, left, right):
    a, b = left.value, right.value

    if operator == "+":
        return Int(wrap_int(a + b))
    elif operator == "-":
        return Int(wrap_int(a - b))
    elif operator == "*":
        return Int(wrap_int(a * b))
    elif operator == "/":
        if b == 0:
            return Error("division by zero")
        return Int(wrap_int(truncated_division(a, b)))
    elif operator == "<":
        return native_bool(a < b)
    elif operator == ">":
        return native_bool(a > b)
    elif operator == "==":
        return native_bool(a == b)
    elif operator == "!=":
        return native_bool(a != b)

    return Error(f"unknown operator: {left.type.value} {operator} {right.type.value}")


def eval_boolean_infix_expression(operator, left, right):
    if operator == "==":
        return native_bool(left.value == right.value)
    elif operator == "!=":
        return native_bool(left.value != right.value)
    return Error(f"unknown operator: {left.type.value} {operator} {right.type.value}")


# ==================== CONTROL FLOW ====================

def is_truthy(obj):
    """null and false are falsy, everything else (0 included) is truthy."""
    if obj.type is ObjectType.NULL:
        return False
    elif obj.type is ObjectType.BOOLEAN:
        return obj.value
    return True


def is_error(obj):
    return obj is not None and obj.type is ObjectType.ERROR


def is_signal(obj):
    """Return values and errors are never operands: whoever receives one stops and hands it upward."""
    return obj is not None and obj.type in (ObjectType.RETURN, ObjectType.ERROR)


def as_value(obj):
    """Statements without a value (let) produce EMPTY. Where a block's result is used as a value, that means null."""
    return NULL if obj is EMPTY else obj


def eval_if_expression(node, env):
    condition = evaluate(node.condition, env)
    if is_signal(condition):
        return condition

    if is_truthy(condition):
        return as_value(evaluate(node.consequence, env))
    elif node.alternative is not None:
        return as_value(evaluate(node.alternative, env))
    return NULL


def eval_identifier(node, env):
    value = env.get(node.value)
    if value is None:
        return Error(f"identifier not found: {node.value}")
    return value


# ==================== FUNCTIONS ====================

def eval_expressions(exprs, env):
    """Evaluates exprs left to right. On the first error or return value, returns a list holding only that."""
    results = []
    for expr in exprs:
        evaluated = evaluate(expr, env)
        if is_signal(evaluated):
            return [evaluated]
        results.append(evaluated)
    return results


def apply_function(function, args):
    if not isinstance(function, Function):
        return Error(f"not a function: {function.type.value}")

    if len(args) != len(function.parameters):
        return Error(f"wrong number of arguments: want={len(function.parameters)}, got={len(args)}")

    result = evaluate(function.body, extend_function_env(function, args))
    return as_value(unwrap_return_value(result))


def extend_function_env(function, args):
    """Call frame: parameters bound positionally, enclosed by the environment the function was defined in."""
    env = Environment.enclosed(function.env)
    for param, arg in zip(function.parameters, args):
        env.set(param.value, arg)
    return env


def unwrap_return_value(obj):
    if isinstance(obj, ReturnValue):
        return obj.value
    return obj
