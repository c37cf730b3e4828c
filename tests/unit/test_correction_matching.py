"""Correction scoring tests."""

import pytest

from baton.corrections import (
    ACCEPTANCE_THRESHOLD,
    Correction,
    CorrectionContext,
    MatchResult,
    WarningContext,
    extract_tags,
    score_correction,
)


def _correction(**context) -> Correction:
    return Correction(wrong_behavior="placeholder", context=CorrectionContext(**context))


def test_keyword_matches_add_per_keyword():
    correction = _correction(trigger_keywords=["lodash", "clone"])
    result = score_correction(
        correction,
        WarningContext(task_description="Deep clone with Lodash please"),
    )
    assert result.score == pytest.approx(0.6)
    assert result.matches
    assert 'Keyword match: "lodash"' in result.reason


def test_file_pattern_matches_either_direction():
    correction = _correction(file_patterns=["src/api/", "Button.tsx"])
    result = score_correction(
        correction,
        WarningContext(
            task_description="touch files",
            files=["src/api/users.ts", "components/Button.tsx"],
        ),
    )
    # each file contains one of the patterns
    assert result.score == pytest.approx(0.4)


def test_tech_stack_and_phase():
    correction = _correction(tech_stack=["React"], phases=["implement"])
    result = score_correction(
        correction,
        WarningContext(task_description="x", tech_stack=["react", "vue"], phase="implement"),
    )
    assert result.score == pytest.approx(0.30)
    assert result.matches


def test_tags_must_be_whole_words():
    correction = Correction(wrong_behavior="x", tags=["react", "test"])
    whole = score_correction(correction, WarningContext(task_description="a react test"))
    partial = score_correction(correction, WarningContext(task_description="reactive testing"))
    assert whole.score == pytest.approx(0.2)
    assert partial.score == 0.0


def test_content_overlap_bonus_needs_more_than_two_words():
    correction = Correction(wrong_behavior="stored secrets inside plain config files")
    three = score_correction(
        correction, WarningContext(task_description="move secrets from plain config")
    )
    two = score_correction(correction, WarningContext(task_description="plain config"))
    assert three.score == pytest.approx(0.25)
    assert two.score == 0.0


def test_threshold_boundary_inclusive():
    # exactly 0.25 from the content similarity bonus alone
    correction = Correction(wrong_behavior="stored secrets inside plain config files")
    result = score_correction(
        correction, WarningContext(task_description="move secrets from plain config")
    )
    assert result.score == ACCEPTANCE_THRESHOLD
    assert result.matches

    assert MatchResult(score=0.25).matches
    assert not MatchResult(score=0.249999).matches


def test_float_accumulation_reaches_threshold():
    # 0.15 (phase) + 0.1 (one tag) must count as 0.25
    correction = Correction(wrong_behavior="x", tags=["api"], context={"phases": ["plan"]})
    result = score_correction(
        correction, WarningContext(task_description="design the api", phase="plan")
    )
    assert result.matches


def test_confidence_is_clamped():
    correction = _correction(trigger_keywords=["a", "b", "c", "d"])
    result = score_correction(correction, WarningContext(task_description="a b c d"))
    assert result.score == pytest.approx(1.2)
    assert result.confidence == 1.0


def test_extract_tags_uses_vocabulary_and_tech_stack():
    tags = extract_tags(
        "used lodash for deep clone", "use structuredClone in react", ["TypeScript", "react"]
    )
    assert tags == ["lodash", "react", "typescript"]


def test_legacy_major_severity_reads_as_critical():
    assert Correction(severity="major").severity == "critical"
