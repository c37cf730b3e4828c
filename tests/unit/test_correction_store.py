"""Correction store tests."""

import json

import pytest

from baton.corrections import CorrectionStore
from baton.errors import NotFoundError


@pytest.mark.asyncio
async def test_record_and_warn_scenario(tmp_path):
    store = CorrectionStore(tmp_path)
    correction_id = await store.record_correction(
        wrong_behavior="used lodash for deep clone",
        correct_behavior="use structuredClone",
        context={"triggerKeywords": ["lodash", "clone"]},
    )

    warnings = await store.get_warnings(
        task_description="I need to deep clone this object, should I use lodash?"
    )

    assert len(warnings) == 1
    warning = warnings[0]
    assert warning.correction.id == correction_id
    assert warning.confidence >= 0.25
    assert "lodash" in warning.match_reason


@pytest.mark.asyncio
async def test_record_fills_defaults_and_index(tmp_path):
    store = CorrectionStore(tmp_path)
    long_text = "x" * 150
    correction_id = await store.record_correction(
        wrong_behavior=long_text, correct_behavior="short", severity="critical"
    )

    document = json.loads((tmp_path / "memory" / "corrections" / f"{correction_id}.json").read_text())
    assert document["wrongBehavior"] == long_text
    assert document["warnCount"] == 0
    assert document["context"] == {
        "filePatterns": [],
        "techStack": [],
        "triggerKeywords": [],
        "phases": [],
    }

    index = json.loads((tmp_path / "memory" / "corrections-index.json").read_text())
    assert index["totalCorrections"] == 1
    assert index["corrections"][0]["wrongBehavior"] == "x" * 100
    assert index["corrections"][0]["severity"] == "critical"

    entries = await store.list_corrections()
    assert [e.id for e in entries] == [correction_id]


@pytest.mark.asyncio
async def test_warn_count_persisted_on_each_match(tmp_path):
    store = CorrectionStore(tmp_path)
    correction_id = await store.record_correction(
        wrong_behavior="a", correct_behavior="b", context={"triggerKeywords": ["redis"]}
    )

    await store.get_warnings("cache it in redis")
    await store.get_warnings("redis again")
    await store.get_warnings("nothing relevant")

    reloaded = CorrectionStore(tmp_path)
    correction = await reloaded.get_correction(correction_id)
    assert correction.warn_count == 2


@pytest.mark.asyncio
async def test_cache_invalidated_on_record(tmp_path):
    store = CorrectionStore(tmp_path)
    assert await store.get_warnings("use redis") == []

    await store.record_correction(
        wrong_behavior="a", correct_behavior="b", context={"triggerKeywords": ["redis"]}
    )

    assert len(await store.get_warnings("use redis")) == 1


@pytest.mark.asyncio
async def test_warnings_sorted_and_capped(tmp_path):
    store = CorrectionStore(tmp_path)
    for i in range(7):
        keywords = ["deploy"] + (["friday"] if i == 3 else [])
        await store.record_correction(
            wrong_behavior=f"mistake {i}",
            correct_behavior="fix",
            context={"triggerKeywords": keywords},
        )

    warnings = await store.get_warnings("deploy on friday")

    assert len(warnings) == 5
    assert warnings[0].correction.wrong_behavior == "mistake 3"
    confidences = [w.confidence for w in warnings]
    assert confidences == sorted(confidences, reverse=True)


@pytest.mark.asyncio
async def test_get_missing_correction(tmp_path):
    with pytest.raises(NotFoundError):
        await CorrectionStore(tmp_path).get_correction("nope")


def test_format_warnings_as_context_is_pure():
    assert CorrectionStore.format_warnings_as_context([]) == ""


@pytest.mark.asyncio
async def test_format_warnings_lists_each_warning(tmp_path):
    store = CorrectionStore(tmp_path)
    await store.record_correction(
        wrong_behavior="used print for logging",
        correct_behavior="use the logging module",
        context={"triggerKeywords": ["logging"]},
    )
    warnings = await store.get_warnings("add logging")

    text = store.format_warnings_as_context(warnings)

    assert "### 1. Correction (moderate)" in text
    assert "used print for logging" in text
    assert "use the logging module" in text
    assert 'Keyword match: "logging"' in text


@pytest.mark.asyncio
async def test_equal_confidence_lists_critical_first(tmp_path):
    store = CorrectionStore(tmp_path)
    for severity in ("minor", "critical", "moderate"):
        await store.record_correction(
            wrong_behavior=f"{severity} mistake",
            correct_behavior="fix",
            context={"triggerKeywords": ["deploy"]},
            severity=severity,
        )

    warnings = await store.get_warnings("deploy now")

    assert [w.correction.severity for w in warnings] == ["critical", "moderate", "minor"]
