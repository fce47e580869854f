from .parser import parse_program
from .validate import validate, ValidationError
from .printer import print_program, format_stmt, format_relation, format_traceback
from .ast import Program, Stmt, Span
from .config import ProofConfig, get_proof_config, set_proof_config
from .figures import Figure, Vertex, Segment, Angle, Triangle
from .relations import (
    RelationType,
    ProofReason,
    FigureRelation,
    IllegalRelationError,
    PerpendicularFigureRelation,
    SegmentBisectorFigureRelation,
    AngleBisectorFigureRelation,
    CongruentTrianglesFigureRelation,
)
from .diagram import Diagram
from .compile import ShapeSpec, Statement, Problem, DuplicateFigureError, compile_diagram, build_problem
from .preprocess import (
    Preprocessor,
    DiagramConsistencyError,
    StatementError,
    UnresolvedFigureError,
    IllegalStatementError,
)
from .solver import ProofSolver, ProofResult, SolverState, SolverPreconditionError, solve_diagram
from .requests import SolveRequest, SolveRequestManager
from .pipeline import prepare_diagram, prove, solve_problem, solve_source

__all__ = [
    'parse_program',
    'validate',
    'ValidationError',
    'print_program',
    'format_stmt',
    'format_relation',
    'format_traceback',
    'Program',
    'Stmt',
    'Span',
    'ProofConfig',
    'get_proof_config',
    'set_proof_config',
    'Figure',
    'Vertex',
    'Segment',
    'Angle',
    'Triangle',
    'RelationType',
    'ProofReason',
    'FigureRelation',
    'IllegalRelationError',
    'PerpendicularFigureRelation',
    'SegmentBisectorFigureRelation',
    'AngleBisectorFigureRelation',
    'CongruentTrianglesFigureRelation',
    'Diagram',
    'ShapeSpec',
    'Statement',
    'Problem',
    'DuplicateFigureError',
    'compile_diagram',
    'build_problem',
    'Preprocessor',
    'DiagramConsistencyError',
    'StatementError',
    'UnresolvedFigureError',
    'IllegalStatementError',
    'ProofSolver',
    'ProofResult',
    'SolverState',
    'SolverPreconditionError',
    'solve_diagram',
    'SolveRequest',
    'SolveRequestManager',
    'prepare_diagram',
    'prove',
    'solve_problem',
    'solve_source',
]
