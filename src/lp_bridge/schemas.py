from __future__ import annotations

import math
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Discriminator, Field, Tag, field_validator

Sense = Literal["min", "max"]
Cmp = Literal["<=", ">=", "=="]
Status = Literal["optimal", "suboptimal", "infeasible", "unbounded", "not_solved"]
Dialect = Literal["cbc", "glpk", "gurobi", "cplex"]


class Variable(BaseModel):
    name: str
    is_integer: bool = False
    lower_bound: float = 0.0
    upper_bound: float = math.inf

    @field_validator("lower_bound", mode="before")
    @classmethod
    def missing_lower(cls, value):
        return -math.inf if value is None else value

    @field_validator("upper_bound", mode="before")
    @classmethod
    def missing_upper(cls, value):
        return math.inf if value is None else value

    @classmethod
    def binary(cls, name: str) -> "Variable":
        return cls(name=name, is_integer=True, lower_bound=0.0, upper_bound=1.0)


class LinearTerm(BaseModel):
    var: str
    coef: float


class LinearExpr(BaseModel):
    kind: Literal["linear"] = "linear"
    terms: List[LinearTerm] = Field(default_factory=list)
    constant: float = 0.0


class StrExpression(BaseModel):
    """Solver-ready .lp text, written as-is."""

    kind: Literal["str"] = "str"
    text: str


def _expression_kind(value) -> Optional[str]:
    if isinstance(value, dict):
        return value.get("kind", "str" if "text" in value else "linear")
    return getattr(value, "kind", None)


Expression = Annotated[
    Union[Annotated[LinearExpr, Tag("linear")], Annotated[StrExpression, Tag("str")]],
    Discriminator(_expression_kind),
]


class Constraint(BaseModel):
    lhs: Expression
    cmp: Cmp
    rhs: float

    @field_validator("lhs", mode="before")
    @classmethod
    def wrap_text(cls, value):
        if isinstance(value, str):
            return StrExpression(text=value)
        return value

    @field_validator("cmp", mode="before")
    @classmethod
    def normalise_cmp(cls, value):
        return "==" if value == "=" else value


class LPProblem(BaseModel):
    name: str = "lp_bridge_problem"
    sense: Sense
    objective: Expression
    variables: List[Variable] = Field(default_factory=list)
    constraints: List[Constraint] = Field(default_factory=list)

    @field_validator("objective", mode="before")
    @classmethod
    def wrap_text(cls, value):
        if isinstance(value, str):
            return StrExpression(text=value)
        return value


class SolverOptions(BaseModel):
    command_name: Optional[str] = None
    max_seconds: Optional[int] = Field(default=None, gt=0)
    threads: Optional[int] = Field(default=None, gt=0)
    mip_gap: Optional[float] = Field(default=None, ge=0.0, allow_inf_nan=False)
    solution_file: Optional[str] = None
    timeout: Optional[float] = Field(default=None, gt=0)


class Solution(BaseModel):
    status: Status
    results: Dict[str, float] = Field(default_factory=dict)

    @property
    def is_optimal(self) -> bool:
        return self.status == "optimal"
