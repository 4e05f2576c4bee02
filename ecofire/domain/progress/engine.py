"""
Outcome progress propagation.

Actual progress is measured directly from an outcome's own values. Expected
progress is inferred from completed jobs: each completed job adds its impact
to the outputs it is mapped to, each output's accumulated impact is normalized
over its range, and the normalized output progress is weighted into every
outcome the output is mapped to.

All functions are pure and synchronous; loading the inputs is done elsewhere.
"""

import logging
import math
from typing import Iterable, Sequence

from .entities import JobOutputLink, JobStatus, Outcome, OutcomeOutputLink, Output

logger = logging.getLogger(__name__)


def clamp_percent(value: float) -> float:
    """Bound a percentage to [0, 100]; NaN and infinities read as 0"""
    if not math.isfinite(value):
        return 0.0
    return min(max(value, 0.0), 100.0)


def _safe_ratio(numerator: float, denominator: float) -> float:
    # A zero range means no measurable progress, never an error
    if denominator == 0:
        return 0.0
    ratio = numerator / denominator
    # Differences of extreme values overflow to inf, and inf / inf is NaN
    if not math.isfinite(ratio):
        return 0.0
    return ratio


def compute_actual_progress(outcomes: Iterable[Outcome]) -> dict[str, float]:
    """
    (current - beginning) / (target - beginning) * 100 for every outcome,
    clamped to [0, 100]. An outcome whose target equals its beginning is 0.
    """
    result = {}
    for outcome in outcomes:
        ratio = _safe_ratio(
            outcome.current_value - outcome.beginning_value,
            outcome.target_value - outcome.beginning_value,
        )
        result[outcome.id] = clamp_percent(ratio * 100)
        logger.debug(
            f"Actual progress for {outcome.name}: ({outcome.current_value} - {outcome.beginning_value}) / "
            f"({outcome.target_value} - {outcome.beginning_value}) * 100 = {result[outcome.id]:.2f}%"
        )
    return result


def compute_output_progress(
    outputs: Sequence[Output],
    jobs: Iterable[JobStatus],
    job_output_links: Iterable[JobOutputLink],
) -> dict[str, float]:
    """
    Fraction of each output's range covered by completed jobs.

    Only mappings whose job is done count; in-progress jobs earn no partial
    credit. The result is a fraction, not a percentage, and is not clamped.
    """
    accumulated = {output.id: 0.0 for output in outputs}
    completed_job_ids = {job.id for job in jobs if job.is_done}

    for link in job_output_links:
        if link.job_id not in completed_job_ids or link.output_id not in accumulated:
            continue
        accumulated[link.output_id] += link.pi_impact_value

    progress = {}
    for output in outputs:
        progress[output.id] = _safe_ratio(
            accumulated[output.id], output.target_value - output.beginning_value
        )
        logger.debug(f"Output progress for {output.name}: {progress[output.id] * 100:.2f}%")
    return progress


def compute_expected_progress(
    outcomes: Sequence[Outcome],
    outputs: Sequence[Output],
    outcome_output_links: Iterable[OutcomeOutputLink],
    jobs: Iterable[JobStatus],
    job_output_links: Iterable[JobOutputLink],
) -> dict[str, float]:
    """
    Propagate completed-job impact through outputs up to outcomes.

    Each output -> outcome mapping contributes
    qbo_impact * output_progress / (outcome.target - outcome.beginning),
    or 0 when the outcome's range is empty. Contributions are summed without
    clamping; only the final percentage is clamped to [0, 100]. Mappings that
    reference an unknown outcome or output are ignored.
    """
    output_progress = compute_output_progress(outputs, jobs, job_output_links)
    outcomes_by_id = {outcome.id: outcome for outcome in outcomes}
    accumulated = {outcome.id: 0.0 for outcome in outcomes}

    for link in outcome_output_links:
        outcome = outcomes_by_id.get(link.outcome_id)
        if outcome is None or link.output_id not in output_progress:
            continue
        contribution = _safe_ratio(
            link.qbo_impact * output_progress[link.output_id],
            outcome.target_value - outcome.beginning_value,
        )
        accumulated[outcome.id] += contribution
        logger.debug(
            f"Output {link.output_id} contributes {contribution * 100:.2f}% to {outcome.name} "
            f"with impact factor {link.qbo_impact}"
        )

    return {outcome_id: clamp_percent(raw * 100) for outcome_id, raw in accumulated.items()}


def transform_for_chart(
    outcomes: Sequence[Outcome],
    outputs: Sequence[Output],
    outcome_output_links: Iterable[OutcomeOutputLink],
    jobs: Iterable[JobStatus],
    job_output_links: Iterable[JobOutputLink],
) -> list[dict]:
    """
    One {name, achievedOutcome, expectedOutcome} row per outcome, in the
    order the outcomes were given. No outcome is dropped.
    """
    actual = compute_actual_progress(outcomes)
    expected = compute_expected_progress(
        outcomes, outputs, outcome_output_links, jobs, job_output_links
    )
    rows = [
        {
            "name": outcome.name,
            "achievedOutcome": actual.get(outcome.id, 0.0),
            "expectedOutcome": expected.get(outcome.id, 0.0),
        }
        for outcome in outcomes
    ]
    logger.info(f"Computed progress chart data for {len(rows)} outcomes")
    return rows
