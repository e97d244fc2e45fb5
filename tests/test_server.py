from pathlib import Path

from lp_bridge.errors import ProcessError
from lp_bridge.schemas import LPProblem, SolverOptions, Variable
from lp_bridge.server import SOLVERS, parse_solver_report, solve_problem, write_lp_file
from lp_bridge.solvers import CbcSolver, ProcessRunner, RunOutput


class WritingRunner(ProcessRunner):
    def execute(self, command, args, timeout=None):
        report = "Optimal - objective value 2\n      0 x 2 0\n"
        Path(args[args.index("solution") + 1]).write_text(report, encoding="utf-8")
        return RunOutput(returncode=0)


class MissingRunner(ProcessRunner):
    def execute(self, command, args, timeout=None):
        raise ProcessError(f"Command `{command}` not found.")


def make_problem() -> LPProblem:
    return LPProblem(
        name="tool_problem",
        sense="min",
        objective="x",
        variables=[Variable(name="x", lower_bound=2, upper_bound=8)],
    )


def test_write_lp_file_tool():
    result = write_lp_file(make_problem())

    assert result["lp"].startswith("\\ tool_problem\n")
    assert "  2 <= x <= 8\n" in result["lp"]


def test_write_lp_file_tool_reports_encoding_errors():
    problem = LPProblem(sense="min", objective="x", variables=[Variable(name="x y")])
    result = write_lp_file(problem)

    assert result["lp"] is None
    assert "Failed to encode problem" in result["error"]


def test_parse_solver_report_tool():
    result = parse_solver_report("gurobi", "# Objective value = 3\nx 3\n")

    assert result == {"solution": {"status": "optimal", "results": {"x": 3.0}}}


def test_parse_solver_report_tool_reports_parse_errors():
    result = parse_solver_report("cplex", "<not xml")

    assert result["solution"] is None
    assert "Failed to parse report" in result["error"]


def test_solve_problem_tool(monkeypatch):
    monkeypatch.setitem(SOLVERS, "cbc", lambda options: CbcSolver(options, runner=WritingRunner()))

    result = solve_problem(make_problem(), solver="cbc")

    assert result == {"solver": "cbc", "solution": {"status": "optimal", "results": {"x": 2.0}}}


def test_solve_problem_tool_missing_program():
    options = SolverOptions(command_name="surely-not-an-installed-solver-binary")
    result = solve_problem(make_problem(), solver="glpk", options=options)

    assert result["solution"] is None
    assert result["error_type"] == "ProcessError"


def test_solve_problem_tool_auto_ignores_single_solver_options(monkeypatch, tmp_path):
    seen = []

    def factory(cls, runner):
        def build(options):
            seen.append(options)
            return cls(options, runner=runner)

        return build

    for name in ("gurobi", "cplex", "glpk"):
        monkeypatch.setitem(SOLVERS, name, factory(SOLVERS[name], MissingRunner()))
    monkeypatch.setitem(SOLVERS, "cbc", factory(CbcSolver, WritingRunner()))
    shared = tmp_path / "shared.sol"
    options = SolverOptions(command_name="cbc", solution_file=str(shared), threads=2)

    result = solve_problem(make_problem(), solver="auto", options=options)

    assert result["solution"] == {"status": "optimal", "results": {"x": 2.0}}
    assert len(seen) == 4
    assert all(o.command_name is None and o.solution_file is None for o in seen)
    assert all(o.threads == 2 for o in seen)
    assert not shared.exists()


def test_solve_problem_tool_auto_without_solvers(monkeypatch):
    for name in ("gurobi", "cplex", "cbc", "glpk"):
        cls = SOLVERS[name]
        monkeypatch.setitem(SOLVERS, name, lambda options, cls=cls: cls(options, runner=MissingRunner()))

    result = solve_problem(make_problem(), solver="auto")

    assert result["error_type"] == "ProcessError"
    assert "No solver available" in result["error"]
