from __future__ import annotations

import json
from pathlib import Path

import pytest

from sqlvpy import orchestrator
from sqlvpy.domain.filtering import filter_records
from sqlvpy.domain.generator import RecordGenerator
from sqlvpy.orchestrator import CrossCheckError, RunConfig, available_variants, run_benchmark

RECORD_COUNT = 200
CANDIDATES = [1, 3, 5, 7]
FILTERING_VARIANTS = {
    "raw_sql",
    "raw_sql_ordered",
    "query_builder",
    "query_builder_ordered",
    "in_process",
    "in_process_ordered",
}
MEASUREMENT_RUN_COUNT = 3


def _config(**overrides) -> RunConfig:
    values = dict(
        record_counts=[RECORD_COUNT],
        candidates=CANDIDATES,
        persist=False,
        seed=42,
    )
    values.update(overrides)
    return RunConfig(**values)


def test_available_variants_is_sorted_and_complete():
    names = available_variants()
    assert names == sorted(names)
    assert set(names) == FILTERING_VARIANTS | {"select_all", "select_all_ordered"}


def test_run_benchmark_populates_and_cross_checks(memory_gateway):
    results = run_benchmark(_config(), gateway=memory_gateway)

    populate, *variant_results = results
    assert populate["variant"] == orchestrator.POPULATE
    assert populate["rows"] == RECORD_COUNT
    assert memory_gateway.truncate_calls == 1
    assert memory_gateway.count() == RECORD_COUNT

    by_name = {r["variant"]: r for r in variant_results}
    assert set(by_name) == set(available_variants())
    assert by_name["select_all"]["rows"] == RECORD_COUNT
    assert by_name["select_all_ordered"]["rows"] == RECORD_COUNT

    expected = len(filter_records(memory_gateway.rows, CANDIDATES))
    assert expected > 0
    assert {by_name[name]["rows"] for name in FILTERING_VARIANTS} == {expected}
    for result in variant_results:
        assert result["record_count"] == RECORD_COUNT
        assert result["run"] == 1
        assert result["duration_seconds"] >= 0.0
        assert "records" not in result


def test_run_benchmark_uses_query_builder_sql(memory_gateway):
    run_benchmark(_config(variant_names=["query_builder_ordered"]), gateway=memory_gateway)

    assert len(memory_gateway.builder_queries) == 1
    assert "ORDER BY testdata.counter" in memory_gateway.builder_queries[0]


def test_population_is_reproducible_with_seed(memory_gateway):
    run_benchmark(_config(variant_names=["select_all"]), gateway=memory_gateway)
    first_ids = [r.id for r in memory_gateway.rows]

    run_benchmark(_config(variant_names=["select_all"]), gateway=memory_gateway)

    assert [r.id for r in memory_gateway.rows] == first_ids


def test_each_record_count_repopulates_the_table(memory_gateway):
    results = run_benchmark(
        _config(record_counts=[10, 30], variant_names=["raw_sql", "in_process"]),
        gateway=memory_gateway,
    )

    populations = [r for r in results if r["variant"] == orchestrator.POPULATE]
    assert [p["rows"] for p in populations] == [10, 30]
    assert memory_gateway.truncate_calls == 2
    assert memory_gateway.count() == 30


def test_multiple_runs_are_aggregated(memory_gateway):
    results = run_benchmark(
        _config(variant_names=["raw_sql"], runs=MEASUREMENT_RUN_COUNT, warmup=True),
        gateway=memory_gateway,
    )

    aggregated = results[-1]
    assert aggregated["variant"] == "raw_sql"
    assert aggregated["runs"] == MEASUREMENT_RUN_COUNT
    assert len(aggregated["individual_runs"]) == MEASUREMENT_RUN_COUNT
    assert set(aggregated["duration_seconds"]) == {"median", "mean", "stddev", "min", "max"}
    assert aggregated["rows"] == aggregated["individual_runs"][0]["rows"]


def test_mismatching_variants_fail_the_run(memory_gateway, monkeypatch):
    monkeypatch.setattr(memory_gateway, "select_where", lambda candidates, ordered=True: [])

    with pytest.raises(CrossCheckError) as excinfo:
        run_benchmark(_config(variant_names=["raw_sql", "in_process"]), gateway=memory_gateway)

    assert excinfo.value.record_count == RECORD_COUNT
    assert excinfo.value.row_counts["raw_sql"] == 0
    assert excinfo.value.row_counts["in_process"] > 0


def test_variant_errors_propagate(memory_gateway, monkeypatch):
    def broken(candidates, ordered=True):
        raise RuntimeError("query failed")

    monkeypatch.setattr(memory_gateway, "select_where_builder", broken)

    with pytest.raises(RuntimeError, match="query failed"):
        run_benchmark(_config(variant_names=["query_builder"]), gateway=memory_gateway)


def test_unknown_variant_is_rejected_before_populating(memory_gateway):
    with pytest.raises(ValueError, match="Unknown variant 'bogus'"):
        run_benchmark(_config(variant_names=["bogus"]), gateway=memory_gateway)
    assert memory_gateway.truncate_calls == 0


def test_candidate_outside_column_range_is_rejected_before_populating(memory_gateway):
    with pytest.raises(ValueError, match="outside the column range"):
        run_benchmark(_config(candidates=[1, 40000]), gateway=memory_gateway)
    assert memory_gateway.truncate_calls == 0
    assert memory_gateway.builder_queries == []


def test_negative_record_count_is_rejected_before_populating(memory_gateway):
    with pytest.raises(ValueError, match="non-negative"):
        run_benchmark(_config(record_counts=[50, -5]), gateway=memory_gateway)
    assert memory_gateway.truncate_calls == 0


def test_skip_populate_benchmarks_existing_rows(memory_gateway):
    memory_gateway.populate(50, RecordGenerator(seed=9))

    results = run_benchmark(
        _config(skip_populate=True, variant_names=["raw_sql", "in_process"]),
        gateway=memory_gateway,
    )

    assert memory_gateway.truncate_calls == 0
    assert all(r["variant"] != orchestrator.POPULATE for r in results)
    assert all(r["record_count"] == 50 for r in results)


def test_empty_candidate_set_matches_nothing_everywhere(memory_gateway):
    results = run_benchmark(_config(candidates=[]), gateway=memory_gateway)

    for result in results:
        if result["variant"] in FILTERING_VARIANTS:
            assert result["rows"] == 0


def test_results_are_persisted(memory_gateway, tmp_path: Path):
    run_benchmark(
        _config(variant_names=["raw_sql"], persist=True, results_dir=tmp_path),
        gateway=memory_gateway,
    )

    latest = json.loads((tmp_path / "latest.json").read_text(encoding="utf-8"))
    assert latest["candidates"] == CANDIDATES
    assert latest["record_counts"] == [RECORD_COUNT]
    assert latest["variants"] == ["raw_sql"]
    assert [r["variant"] for r in latest["results"]] == [orchestrator.POPULATE, "raw_sql"]
    assert len(list(tmp_path.glob("run-*.json"))) == 1
