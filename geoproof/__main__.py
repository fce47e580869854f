import argparse
import logging
import sys
from typing import Optional, Sequence

from geoproof import (
    build_problem,
    format_traceback,
    get_proof_config,
    parse_program,
    print_program,
    solve_problem,
    validate,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Prove a geometry problem")
    parser.add_argument("path", help="Path to the problem (.gp) file")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument(
        "--epsilon",
        type=float,
        help="Distance tolerance for point and intersection tests",
    )
    parser.add_argument(
        "--no-preprocess",
        action="store_true",
        help="Skip hidden-figure discovery and axiom seeding",
    )
    parser.add_argument(
        "--show-program",
        action="store_true",
        help="Print the parsed problem in canonical form",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    with open(args.path, encoding="utf-8") as fin:
        text = fin.read()

    logger.info("Parsing problem from %s", args.path)
    program = parse_program(text)
    validate(program)
    logger.info("Validation succeeded")

    if args.show_program:
        print(print_program(program), end="")

    config = get_proof_config()
    if args.epsilon is not None:
        config.epsilon = args.epsilon

    problem = build_problem(program)
    result = solve_problem(problem, config=config, preprocess=not args.no_preprocess)

    if problem.title:
        print(problem.title)
    print("Proved:", "yes" if result.proved else "no")
    if result.proved:
        print(format_traceback(result.steps()))
    return 0 if result.proved else 1


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
