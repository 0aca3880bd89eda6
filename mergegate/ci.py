"""CI check-run aggregation.

Every check-run lands in exactly one bucket, judged by its current
``status``/``conclusion`` snapshot:

- ``errors``: conclusion ``failure`` or ``cancelled``
- ``still_running``: status ``in_progress`` or ``queued``
- ``required``: conclusion ``success``
- ``optional``: anything else (skipped, neutral, stale, ...)

The overall result is ``failure`` if any errored, else ``pending`` if any are
still running, else ``success`` if any passed, else ``no_checks``.
"""

from collections.abc import Iterable

from mergegate.types.checks import CheckRun, CIStatus

FAILED_CONCLUSIONS = frozenset({"failure", "cancelled"})
RUNNING_STATUSES = frozenset({"in_progress", "queued"})


def check_names(runs: Iterable[CheckRun]) -> str:
    return ", ".join(run.name for run in runs)


def aggregate_check_runs(check_runs: Iterable[CheckRun]) -> CIStatus:
    """Reduce a flat list of check-runs to a CIStatus."""
    status = CIStatus(overall="success")

    for run in check_runs:
        if run.conclusion in FAILED_CONCLUSIONS:
            status.errors.append(run)
            status.can_merge = False
        elif run.status in RUNNING_STATUSES:
            status.still_running.append(run)
            status.can_merge = False
        elif run.conclusion == "success":
            status.required.append(run)
        else:
            status.optional.append(run)

    if status.errors:
        status.overall = "failure"
        status.message = f"CI checks failed: {check_names(status.errors)}"
    elif status.still_running:
        status.overall = "pending"
        status.message = f"CI checks still running: {check_names(status.still_running)}"
    elif status.required:
        status.overall = "success"
        status.message = "All CI checks passed"
    else:
        status.overall = "no_checks"
        status.message = "No CI checks found"

    return status
