from pathlib import Path

from lp_bridge import CbcSolver, Constraint, LPProblem, Variable, parse_solution, write_lp
from lp_bridge.solvers import ProcessRunner, RunOutput

CBC_REPORT = """Optimal - objective value -5.00000000
      0 x                     -1                       0
      1 y                      4                       0
"""


class CbcReportRunner(ProcessRunner):
    def __init__(self, report: str):
        self.report = report
        self.lp_text = None

    def execute(self, command, args, timeout=None):
        self.lp_text = Path(args[0]).read_text(encoding="utf-8")
        Path(args[args.index("solution") + 1]).write_text(self.report, encoding="utf-8")
        return RunOutput(returncode=0, stdout="Coin0506I Presolve 1 (0) rows\n")


def make_int_problem() -> LPProblem:
    return LPProblem(
        name="int_problem",
        sense="max",
        objective="x - y",
        variables=[
            Variable(name="x", is_integer=True, lower_bound=-10, upper_bound=-1),
            Variable(name="y", is_integer=True, lower_bound=4, upper_bound=7),
        ],
        constraints=[Constraint(lhs="x - y", cmp="<=", rhs=-4.5)],
    )


def test_int_problem_document():
    text = write_lp(make_int_problem())

    assert text == (
        "\\ int_problem\n"
        "\n"
        "Maximize\n"
        "  obj: x - y\n"
        "\n"
        "Subject To\n"
        "  c1: x - y <= -4.5\n"
        "\n"
        "Bounds\n"
        "  -10 <= x <= -1\n"
        "  4 <= y <= 7\n"
        "\n"
        "Generals\n"
        "  x\n"
        "  y\n"
        "\n"
        "End\n"
    )


def test_int_problem_report():
    problem = make_int_problem()
    write_lp(problem)

    solution = parse_solution("cbc", CBC_REPORT, problem)

    assert solution.status == "optimal"
    assert solution.is_optimal
    assert solution.results == {"x": -1.0, "y": 4.0}


def test_int_problem_through_cbc_adapter():
    runner = CbcReportRunner(CBC_REPORT)
    solution = CbcSolver(runner=runner).run(make_int_problem())

    assert runner.lp_text == write_lp(make_int_problem())
    assert solution.status == "optimal"
    assert solution.results == {"x": -1.0, "y": 4.0}
