import logging
import math
import tempfile
from pathlib import Path
from typing import List, Tuple, Union

import numpy as np

from ..errors import EncodingError
from ..schemas import Constraint, LinearExpr, LPProblem, StrExpression, Variable
from .utils import validate_name

logger = logging.getLogger(__name__)

_CMP_TOKENS = {"<=": "<=", ">=": ">=", "==": "="}


def format_number(value: float) -> str:
    """
    Render a float the way every supported reader accepts it:
    no locale, no exponent, at most 15 significant digits, trailing zeros trimmed.
    """

    if not math.isfinite(value):
        raise EncodingError(f"Cannot write non-finite number {value!r} in .lp format.")
    if value == 0:
        return "0"
    return np.format_float_positional(
        float(value), precision=15, unique=True, fractional=False, trim="-"
    )


def render_expression(expr: Union[LinearExpr, StrExpression]) -> str:
    if isinstance(expr, StrExpression):
        return expr.text
    return _render_terms(expr)


def _render_terms(expr: LinearExpr) -> str:
    pieces: List[str] = []
    for term in expr.terms:
        validate_name(term.var)
        coef = term.coef
        if not math.isfinite(coef):
            raise EncodingError(f"Coefficient of '{term.var}' is not finite ({coef!r}).")
        negative = coef < 0
        magnitude = abs(coef)
        body = term.var if magnitude == 1 else f"{format_number(magnitude)} {term.var}"
        if not pieces:
            pieces.append(f"-{body}" if negative else body)
        else:
            pieces.append(f"- {body}" if negative else f"+ {body}")
    return " ".join(pieces)


def _render_objective(expr: Union[LinearExpr, StrExpression]) -> str:
    text = render_expression(expr)
    if isinstance(expr, LinearExpr) and expr.constant != 0:
        constant = format_number(abs(expr.constant))
        sign = "-" if expr.constant < 0 else "+"
        if text:
            text = f"{text} {sign} {constant}"
        else:
            text = f"-{constant}" if sign == "-" else constant
    return text


def _render_constraint(idx: int, constraint: Constraint) -> str:
    lhs = constraint.lhs
    rhs = constraint.rhs
    if isinstance(lhs, LinearExpr):
        if not lhs.terms:
            raise EncodingError(f"Constraint c{idx} has no variable terms.")
        # constants are not allowed on the left-hand side
        rhs = rhs - lhs.constant
    text = render_expression(lhs)
    return f"  c{idx}: {text} {_CMP_TOKENS[constraint.cmp]} {format_number(rhs)}"


def _render_bounds(var: Variable) -> str | None:
    low, up = var.lower_bound, var.upper_bound
    if math.isnan(low) or math.isnan(up):
        raise EncodingError(f"Variable {var.name} has a NaN bound.")
    if low == math.inf:
        raise EncodingError(f"Variable {var.name} has lower bound +inf.")
    if up == -math.inf:
        raise EncodingError(f"Variable {var.name} has upper bound -inf.")

    if low == -math.inf and up == math.inf:
        return f"  {var.name} free"
    if low == -math.inf:
        return f"  -inf <= {var.name} <= {format_number(up)}"
    if up == math.inf:
        if low == 0:
            return None
        return f"  {format_number(low)} <= {var.name}"
    if low == up:
        return f"  {var.name} = {format_number(low)}"
    return f"  {format_number(low)} <= {var.name} <= {format_number(up)}"


def _check_variables(problem: LPProblem) -> None:
    seen = set()
    for var in problem.variables:
        validate_name(var.name)
        if var.name in seen:
            raise EncodingError(f"Variable name '{var.name}' is declared twice.")
        seen.add(var.name)


def write_lp(problem: LPProblem) -> str:
    """
    Serialise a problem to the CPLEX-style .lp text understood by
    cbc, glpk, gurobi and cplex.

    Sections are emitted in the order objective, Subject To, Bounds,
    Generals, End. Raises EncodingError when a variable name or bound cannot
    be expressed in the grammar.
    """

    _check_variables(problem)

    title = " ".join(problem.name.split())
    lines: List[str] = [f"\\ {title}", ""]

    lines.append("Maximize" if problem.sense == "max" else "Minimize")
    objective = _render_objective(problem.objective)
    lines.append(f"  obj: {objective}" if objective else "  obj:")
    lines.append("")

    lines.append("Subject To")
    for idx, constraint in enumerate(problem.constraints, start=1):
        lines.append(_render_constraint(idx, constraint))

    bounds: List[str] = []
    integers: List[str] = []
    for var in problem.variables:
        bound_line = _render_bounds(var)
        if bound_line is not None:
            bounds.append(bound_line)
        if var.is_integer:
            integers.append(var.name)

    if bounds:
        lines.append("")
        lines.append("Bounds")
        lines.extend(bounds)

    if integers:
        lines.append("")
        lines.append("Generals")
        lines.extend(f"  {name}" for name in integers)

    lines.append("")
    lines.append("End")
    return "\n".join(lines) + "\n"


def write_lp_file(problem: LPProblem, path: Union[str, Path]) -> Path:
    text = write_lp(problem)
    target = Path(path)
    target.write_text(text, encoding="utf-8")
    logger.debug("Wrote %d bytes of .lp text to %s", len(text), target)
    return target


def to_tmp_file(problem: LPProblem) -> Path:
    """Write the problem to a fresh temporary ``.lp`` file; the caller removes it."""

    text = write_lp(problem)
    prefix = "".join(ch for ch in problem.name if ch.isalnum() or ch in "_-") or "problem"
    with tempfile.NamedTemporaryFile(
        "w", prefix=f"{prefix}_", suffix=".lp", delete=False, encoding="utf-8"
    ) as handle:
        handle.write(text)
    logger.debug("Wrote problem '%s' to %s", problem.name, handle.name)
    return Path(handle.name)


def section_headers(text: str) -> List[Tuple[int, str]]:
    """Return ``(line number, header)`` for every section keyword in an .lp document."""

    keywords = {"maximize", "minimize", "subject to", "bounds", "generals", "end"}
    found: List[Tuple[int, str]] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if stripped.lower() in keywords:
            found.append((lineno, stripped))
    return found
