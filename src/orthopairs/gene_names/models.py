"""Data models for UniProt gene-name enrichment jobs."""

from dataclasses import dataclass, field
from enum import Enum


class JobState(str, Enum):
    """Lifecycle of one ID mapping job.

    SUBMITTING -> POLLING -> FETCHING -> DONE, with RETRY_WAIT entered on a
    transient failure and FAILED once the retry budget is spent.
    """

    SUBMITTING = "submitting"
    POLLING = "polling"
    FETCHING = "fetching"
    RETRY_WAIT = "retry_wait"
    DONE = "done"
    FAILED = "failed"


class JobStatus(str, Enum):
    """Remote job status as reported by the status endpoint."""

    PENDING = "pending"
    FINISHED = "finished"


@dataclass
class EnrichmentJob:
    """One batch submitted to the ID mapping service.

    Attributes:
        batch: Accessions submitted together
        job_id: Identifier assigned by the service (None until submitted)
        state: Current JobState
        resume_state: Phase to resume after RETRY_WAIT
        attempt_count: Number of transient failures so far
        poll_count: Number of status requests made
        results: Accession -> gene name pairs once DONE
    """

    batch: frozenset[str]
    job_id: str | None = None
    state: JobState = JobState.SUBMITTING
    resume_state: JobState | None = None
    attempt_count: int = 0
    poll_count: int = 0
    results: dict[str, str] = field(default_factory=dict)


@dataclass
class EnrichmentReport:
    """Summary of gene-name retrieval for one species.

    Attributes:
        total_accessions: Distinct accessions submitted
        mapped: Accessions that came back with a gene name
        batch_count: Number of jobs run
        unmapped_ids: Accessions without a gene name
        success_rate: Fraction of accessions with a gene name (0-1)
    """

    total_accessions: int
    mapped: int
    batch_count: int
    unmapped_ids: list[str] = field(default_factory=list)
    success_rate: float = 0.0

    def __post_init__(self):
        if self.total_accessions > 0:
            self.success_rate = self.mapped / self.total_accessions
