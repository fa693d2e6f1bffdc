"""
Example: Equality-constrained quadratic programming with eqqp

Builds small programs from decision variables, quadratic costs and linear
equality constraints, solves them with EqualityConstrainedQPSolver, and
checks the answers against the KKT conditions.
"""

import numpy as np

from eqqp import (
    EqualityConstrainedQPSolver,
    ProgramModel,
    equality_constrained_qp,
    is_kkt_optimal,
    kkt_residuals,
)


def example_portfolio():
    """Example: Minimum-variance portfolio with a budget constraint."""
    print("=" * 60)
    print("Example 1: Minimum-Variance Portfolio")
    print("=" * 60)

    # Minimize 0.5 * w^T S w  subject to  sum(w) = 1
    cov = np.array([[0.10, 0.02, 0.01], [0.02, 0.08, 0.03], [0.01, 0.03, 0.12]])
    prog = ProgramModel()
    w = prog.new_continuous_variables(3, "w")
    prog.add_quadratic_cost(cov, np.zeros(3), w)
    prog.add_linear_equality_constraint(np.ones((1, 3)), [1.0], w)

    solver = EqualityConstrainedQPSolver()
    status = solver.solve(prog)
    weights = prog.get_solution(w)
    print(f"Status: {status.name}")
    print(f"Weights: {weights}")
    print(f"Variance (objective): {prog.get_optimal_cost():.6f}")
    print(f"Solved by: {prog.get_solver_result().solver_id}")

    residuals = kkt_residuals(cov, np.zeros(3), np.ones((1, 3)), [1.0], weights)
    print(f"Budget residual: {residuals['primal_eq']:.2e}")
    print()


def example_shared_variables():
    """Example: Costs and constraints on overlapping variable subsets."""
    print("=" * 60)
    print("Example 2: Overlapping Bindings")
    print("=" * 60)

    prog = ProgramModel()
    x = prog.new_continuous_variables(3)
    # Pull (x0, x1) toward (1, 2) and (x1, x2) toward (2, 3)
    prog.add_quadratic_cost(np.eye(2), [-1.0, -2.0], [x[0], x[1]])
    prog.add_quadratic_cost(np.eye(2), [-2.0, -3.0], [x[1], x[2]])
    prog.add_linear_equality_constraint([[1.0, -1.0]], [0.0], [x[0], x[2]])

    outcome = EqualityConstrainedQPSolver().solve_outcome(prog)
    print(f"Path: {outcome.path.value}")
    print(f"x = {outcome.x}")
    print(f"Multipliers: {outcome.multipliers}")
    print(f"Dual residual: {outcome.dual_residual:.2e}")
    print()


def example_indefinite():
    """Example: Indefinite Hessian made convex by the constraints."""
    print("=" * 60)
    print("Example 3: Indefinite Hessian (Full KKT Path)")
    print("=" * 60)

    # x0^2 - x1^2 is unbounded alone, but on x1 = 0.5 the minimizer is unique.
    G = np.diag([2.0, -2.0])
    c = np.array([-1.0, 0.0])
    A = np.array([[0.0, 1.0]])
    b = np.array([0.5])

    outcome = equality_constrained_qp(G, c, A, b)
    print(f"Path: {outcome.path.value}")
    print(f"x = {outcome.x}")
    print(f"Objective: {outcome.fun:.4f}")
    print(f"KKT feasible: {is_kkt_optimal(G, c, A, b, outcome.x)}")
    print()


if __name__ == "__main__":
    print("\n" + "=" * 60)
    print("eqqp - Equality-Constrained QP Examples")
    print("=" * 60 + "\n")

    example_portfolio()
    example_shared_variables()
    example_indefinite()

    print("=" * 60)
    print("All examples completed successfully!")
    print("=" * 60)
