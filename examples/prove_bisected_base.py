"""Example pipeline: parse a problem, preprocess the diagram and print the proof."""

from geoproof import format_traceback, solve_source

TEXT = """
problem "Bisected base"
points A(0, 4), C(0, 0), F(-3, 0), B(3, 0)
triangle A-C-F
triangle A-C-B
segment F-B
given bisects A-C F-B
prove congruent F-C C-B
"""


def main() -> None:
    result = solve_source(TEXT)
    print("Proved:", result.proved)
    print(format_traceback(result.steps()))


if __name__ == "__main__":
    main()
