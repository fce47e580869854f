from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional

import pytest

from geoproof import ProofReason, solve_source

DATA_DIR = Path(__file__).resolve().parent / "problems"


@dataclass
class ProblemCase:
    case_id: str
    source: str
    expect_proved: bool = True
    final_reason: Optional[str] = None
    min_steps: int = 1


def _load_case_overrides(path: Path) -> Dict[str, object]:
    overrides_path = path.with_suffix(".json")
    if overrides_path.exists():
        with overrides_path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
            if not isinstance(data, dict):
                raise ValueError(f"Overrides for {path.name} must be a JSON object")
            return data
    return {}


def _iter_cases() -> Iterable[ProblemCase]:
    for problem_path in sorted(DATA_DIR.glob("*.gp")):
        overrides = _load_case_overrides(problem_path)
        yield ProblemCase(
            case_id=problem_path.stem,
            source=problem_path.read_text(encoding="utf-8"),
            expect_proved=bool(overrides.get("expect_proved", True)),
            final_reason=overrides.get("final_reason"),
            min_steps=int(overrides.get("min_steps", 1)),
        )


@pytest.mark.parametrize("case", list(_iter_cases()), ids=lambda case: case.case_id)
def test_problem_is_solved_as_expected(case: ProblemCase) -> None:
    result = solve_source(case.source)

    if not case.expect_proved:
        assert not result.proved, f"{case.case_id} unexpectedly proved"
        assert result.traceback == []
        return

    assert result.proved, f"{case.case_id} was not proved"
    assert len(result.traceback) >= case.min_steps
    assert result.traceback[-1] == result.goal
    if case.final_reason is not None:
        assert result.traceback[-1].reason is ProofReason[case.final_reason]
    for step in result.traceback[1:]:
        assert step.parent is not None
