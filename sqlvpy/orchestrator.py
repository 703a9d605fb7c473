"""
Benchmark harness: populate, run query variants, cross-check, time.

Usage (example from CLI):
    from sqlvpy.orchestrator import RunConfig, run_benchmark

    results = run_benchmark(RunConfig(record_counts=[1_000], runs=3))
    print(results)

Outputs are saved to `results/` by default:
- `results/latest.json` (last run)
- `results/run-<timestamp>.json` (timestamped archive)
"""

from __future__ import annotations

import json
import statistics
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import partial
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from sqlvpy.config import get_settings
from sqlvpy.domain.generator import RecordGenerator
from sqlvpy.domain.models import SMALLINT_MAX, SMALLINT_MIN
from sqlvpy.infrastructure.gateway import RowStoreGateway
from sqlvpy.strategies.abstract import QueryVariant, VariantResult
from sqlvpy.strategies.full_scan import FullScanVariant
from sqlvpy.strategies.in_process import InProcessVariant
from sqlvpy.strategies.query_builder import QueryBuilderVariant
from sqlvpy.strategies.raw_sql import RawSqlVariant
from sqlvpy.utils.logging import get_logger
from sqlvpy.utils.profiler import ProfileStats, profile_block

log = get_logger(__name__)

POPULATE = "populate"


class CrossCheckError(RuntimeError):
    """Filtering variants disagreed on the number of matching rows."""

    def __init__(self, record_count: int, row_counts: Dict[str, int]) -> None:
        self.record_count = record_count
        self.row_counts = row_counts
        detail = ", ".join(f"{name}={rows}" for name, rows in sorted(row_counts.items()))
        super().__init__(
            f"Row counts differ across filtering variants at {record_count} records: {detail}"
        )


@dataclass
class RunConfig:
    """
    Parameters of a benchmark run. ``None`` fields fall back to settings.

    Attributes
    ----------
    variant_names : iterable[str] | None
        Variants to execute. None or ["all"] executes all available.
    record_counts : sequence[int] | None
        Table sizes to benchmark; the table is truncated and repopulated for each.
    candidates : sequence[int] | None
        Candidate set applied to both `rstate` and `rtype`.
    runs : int
        Measured iterations per variant and record count.
    warmup : bool
        Run each variant once, unmeasured, before the measured iterations.
    skip_populate : bool
        Benchmark the table as it is instead of repopulating it.
    persist : bool
        Whether to write the payload to `results_dir`.
    seed : int | None
        RNG seed for population; defaults to `RNG_SEED`.
    """

    variant_names: Optional[Iterable[str]] = None
    record_counts: Optional[Sequence[int]] = None
    candidates: Optional[Sequence[int]] = None
    runs: int = 1
    warmup: bool = False
    skip_populate: bool = False
    persist: bool = True
    results_dir: Path | str = "results"
    seed: Optional[int] = None


def _round_float(value: float, decimals: int = 2) -> float:
    return round(value, decimals)


def _summary(values: List[float], decimals: int = 4) -> dict:
    return {
        "median": _round_float(statistics.median(values), decimals),
        "mean": _round_float(statistics.mean(values), decimals),
        "stddev": _round_float(statistics.stdev(values), decimals) if len(values) > 1 else 0.0,
        "min": _round_float(min(values), decimals),
        "max": _round_float(max(values), decimals),
    }


def _aggregate_runs(run_results: List[dict]) -> dict:
    """
    Aggregate multiple runs of one variant into a statistical summary.
    """
    aggregated = {
        "duration_seconds": _summary([r["duration_seconds"] for r in run_results]),
        "rows_per_sec": _summary([r["rows_per_sec"] for r in run_results], decimals=2),
        "rows": run_results[0]["rows"],
    }
    peak_rss_values = [r["peak_rss_bytes"] for r in run_results if r.get("peak_rss_bytes")]
    if peak_rss_values:
        aggregated["peak_rss_bytes"] = {
            "median": int(statistics.median(peak_rss_values)),
            "min": min(peak_rss_values),
            "max": max(peak_rss_values),
        }
    return aggregated


_VARIANTS: Dict[str, Tuple[type, bool]] = {
    "select_all": (FullScanVariant, False),
    "select_all_ordered": (FullScanVariant, True),
    "raw_sql": (RawSqlVariant, False),
    "raw_sql_ordered": (RawSqlVariant, True),
    "query_builder": (QueryBuilderVariant, False),
    "query_builder_ordered": (QueryBuilderVariant, True),
    "in_process": (InProcessVariant, False),
    "in_process_ordered": (InProcessVariant, True),
}


def _variant_factories(gateway: RowStoreGateway) -> Dict[str, Callable[[], QueryVariant]]:
    """Registry of available variants bound to `gateway`."""
    return {
        name: partial(cls, gateway, ordered=ordered) for name, (cls, ordered) in _VARIANTS.items()
    }


def available_variants() -> List[str]:
    """List available variant names."""
    return sorted(_VARIANTS)


def _resolve_variant(factories: Dict[str, Callable[[], QueryVariant]], name: str) -> QueryVariant:
    if name not in factories:
        raise ValueError(f"Unknown variant '{name}'. Available: {', '.join(sorted(factories))}")
    return factories[name]()


def _check_inputs(candidates: frozenset, record_counts: Sequence[int]) -> None:
    out_of_range = sorted(c for c in candidates if not SMALLINT_MIN <= c <= SMALLINT_MAX)
    if out_of_range:
        raise ValueError(
            f"Candidates {out_of_range} fall outside the column range "
            f"[{SMALLINT_MIN}, {SMALLINT_MAX}]"
        )
    negative = [n for n in record_counts if n < 0]
    if negative:
        raise ValueError(f"Record counts must be non-negative, got {negative}")


def _persist_results(payload: dict, results_dir: Path) -> None:
    results_dir.mkdir(parents=True, exist_ok=True)
    latest_path = results_dir / "latest.json"
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    archive_path = results_dir / f"run-{timestamp}.json"

    for path in (latest_path, archive_path):
        with path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, sort_keys=True)

    log.info("Results persisted", extra={"latest": str(latest_path), "archive": str(archive_path)})


def _merge_result(result: VariantResult, stats: ProfileStats) -> dict:
    """Combine a variant result with profiler stats; the fetched records are dropped."""
    rows = result.get("rows", 0)
    duration = stats.duration_seconds
    return {
        "rows": rows,
        "duration_seconds": _round_float(duration, 4),
        "rows_per_sec": _round_float(rows / duration) if duration > 0 else 0.0,
        "peak_rss_bytes": stats.peak_rss_bytes,
        "notes": result.get("notes"),
    }


def _profiled_execute(variant: QueryVariant, candidates: frozenset) -> dict:
    log.debug(f"[VARIANT START] {variant.name}", extra={"variant": variant.name})
    with profile_block(variant.name) as stats:
        try:
            result = variant.execute(candidates)
        except Exception:
            log.exception(f"[VARIANT FAILED] {variant.name}", extra={"variant": variant.name})
            raise
    return _merge_result(result, stats)


def _populate(gateway: RowStoreGateway, generator: RecordGenerator, record_count: int) -> dict:
    gateway.truncate()
    with profile_block(POPULATE) as stats:
        inserted = gateway.populate(record_count, generator)
    log.info(
        f"[POPULATE] {inserted} records in {stats.duration_seconds:.2f}s",
        extra={"record_count": record_count, "inserted": inserted},
    )
    return {
        "variant": POPULATE,
        "record_count": record_count,
        "rows": inserted,
        "duration_seconds": _round_float(stats.duration_seconds, 4),
        "rows_per_sec": _round_float(inserted / stats.duration_seconds)
        if stats.duration_seconds > 0
        else 0.0,
        "peak_rss_bytes": stats.peak_rss_bytes,
    }


def _cross_check(record_count: int, row_counts: Dict[str, List[int]]) -> None:
    """Every run of every filtering variant must have matched the same number of rows."""
    distinct = {rows for counts in row_counts.values() for rows in counts}
    if len(distinct) > 1:
        raise CrossCheckError(
            record_count, {name: counts[-1] for name, counts in row_counts.items()}
        )


def run_benchmark(
    config: Optional[RunConfig] = None,
    gateway: Optional[RowStoreGateway] = None,
) -> List[dict]:
    """
    Run the benchmark and optionally persist the results.

    Parameters
    ----------
    config : RunConfig | None
        Run parameters; defaults to `RunConfig()`.
    gateway : RowStoreGateway | None
        Store to benchmark against; defaults to one over the shared pool.

    Returns
    -------
    List[dict]
        One entry per population and per (record count, variant). With
        runs > 1, variant entries hold aggregated statistics plus the
        individual runs.

    Raises
    ------
    CrossCheckError
        If filtering variants disagree on the matching row count.
    """
    config = config or RunConfig()
    settings = get_settings()
    gateway = gateway or RowStoreGateway.from_settings(settings)
    factories = _variant_factories(gateway)

    candidates = frozenset(
        config.candidates if config.candidates is not None else settings.benchmark_candidates
    )
    seed = config.seed if config.seed is not None else settings.rng_seed
    generator = RecordGenerator(seed)

    names = list(config.variant_names) if config.variant_names is not None else ["all"]
    if names == ["all"]:
        names = available_variants()
    for name in names:
        _resolve_variant(factories, name)  # fail fast on unknown names

    if config.skip_populate:
        record_counts: List[int] = [gateway.count()]
    elif config.record_counts is not None:
        record_counts = list(config.record_counts)
    else:
        record_counts = list(settings.benchmark_record_counts)
    _check_inputs(candidates, record_counts)

    results: List[dict] = []
    for record_count in record_counts:
        log.info(f"{'=' * 60}")
        log.info(f"[RECORDS] {record_count}", extra={"record_count": record_count})
        log.info(f"{'=' * 60}")

        if not config.skip_populate:
            results.append(_populate(gateway, generator, record_count))

        filter_rows: Dict[str, List[int]] = {}
        for name in names:
            if config.warmup:
                _resolve_variant(factories, name).execute(candidates)
                log.debug(f"[WARMUP] Completed warmup for {name}", extra={"variant": name})

            run_results: List[dict] = []
            for run_num in range(1, config.runs + 1):
                variant = _resolve_variant(factories, name)
                result = _profiled_execute(variant, candidates)
                result.update(variant=name, record_count=record_count, run=run_num)
                run_results.append(result)
                if variant.filters:
                    filter_rows.setdefault(name, []).append(result["rows"])
                log.info(
                    f"[RUN {run_num}/{config.runs}] {name}: {result['rows']} rows "
                    f"in {result['duration_seconds']:.4f}s",
                    extra={
                        "variant": name,
                        "record_count": record_count,
                        "run": run_num,
                        "rows": result["rows"],
                        "duration": result["duration_seconds"],
                    },
                )

            if config.runs > 1:
                aggregated = _aggregate_runs(run_results)
                aggregated.update(
                    variant=name,
                    record_count=record_count,
                    runs=config.runs,
                    individual_runs=run_results,
                )
                results.append(aggregated)
            else:
                results.extend(run_results)

        _cross_check(record_count, filter_rows)
        if filter_rows:
            log.info(
                f"[CROSS-CHECK] {len(filter_rows)} filtering variants agree",
                extra={"record_count": record_count, "rows": next(iter(filter_rows.values()))[0]},
            )

    payload = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "table": gateway.table,
        "candidates": sorted(candidates),
        "record_counts": record_counts,
        "variants": names,
        "results": results,
    }
    if config.persist:
        _persist_results(payload, Path(config.results_dir))

    return results


__all__ = [
    "CrossCheckError",
    "RunConfig",
    "available_variants",
    "run_benchmark",
]
