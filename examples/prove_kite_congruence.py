"""Example pipeline: build shapes programmatically and prove triangle congruence."""

from geoproof import ShapeSpec, Statement, format_traceback, prove

SHAPES = [
    ShapeSpec("ABD", "triangle", ((0.0, 4.0), (-3.0, 0.0), (0.0, -2.0))),
    ShapeSpec("ACD", "triangle", ((0.0, 4.0), (3.0, 0.0), (0.0, -2.0))),
]

GIVENS = [
    Statement("congruent", "AB", "AC"),
    Statement("congruent", "BD", "CD"),
]

GOAL = Statement("congruent", "<BAD", "<CAD")


def main() -> None:
    result = prove(SHAPES, GIVENS, GOAL)
    print("Proved:", result.proved)
    print(format_traceback(result.steps()))


if __name__ == "__main__":
    main()
