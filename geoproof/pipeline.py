"""End-to-end entry points: problem text or shapes in, proof result out."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .compile import Problem, ShapeSpec, Statement, build_problem, compile_diagram
from .config import ProofConfig, resolve_config
from .diagram import Diagram
from .parser import parse_program
from .preprocess import Preprocessor, StatementError
from .solver import ProofResult, ProofSolver
from .validate import ValidationError, validate

logger = logging.getLogger(__name__)


def prepare_diagram(
    shapes: Iterable[ShapeSpec],
    givens: Iterable[Statement],
    goal: Statement,
    *,
    config: Optional[ProofConfig] = None,
    preprocess: bool = True,
) -> Diagram:
    """Compile shapes and ingest statements, optionally running hidden-figure discovery."""

    config = resolve_config(config)
    diagram = compile_diagram(shapes, tolerance=config.epsilon)
    preprocessor = Preprocessor(diagram, config)
    if preprocess:
        return preprocessor.run(givens, goal)
    preprocessor.ingest_givens(givens)
    preprocessor.ingest_goal(goal)
    preprocessor.specialize_relations()
    return diagram


def prove(
    shapes: Iterable[ShapeSpec],
    givens: Iterable[Statement],
    goal: Statement,
    *,
    config: Optional[ProofConfig] = None,
    preprocess: bool = True,
) -> ProofResult:
    diagram = prepare_diagram(shapes, givens, goal, config=config, preprocess=preprocess)
    solver = ProofSolver(diagram, config)
    solver.solve()
    return solver.result


def solve_problem(
    problem: Problem,
    *,
    config: Optional[ProofConfig] = None,
    preprocess: bool = True,
) -> ProofResult:
    if problem.goal is None:
        raise ValidationError("problem has no goal")
    try:
        return prove(problem.shapes, problem.givens, problem.goal, config=config, preprocess=preprocess)
    except StatementError as exc:
        span = exc.statement.span
        if span is None:
            raise
        raise ValidationError(f"[line {span.line}, col {span.col}] {exc}") from exc


def solve_source(
    text: str,
    *,
    config: Optional[ProofConfig] = None,
    preprocess: bool = True,
) -> ProofResult:
    program = parse_program(text)
    validate(program)
    problem = build_problem(program)
    logger.info("Solving problem %r", problem.title or "<untitled>")
    return solve_problem(problem, config=config, preprocess=preprocess)
