"""Drive one ID mapping job through submit, poll and fetch with bounded retries."""

import time
from typing import Callable, Iterable

import structlog
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from orthopairs.config.schema import APIConfig
from orthopairs.exceptions import (
    EnrichmentFailedError,
    FatalServiceError,
    TransientServiceError,
)
from orthopairs.gene_names.models import EnrichmentJob, JobState, JobStatus
from orthopairs.gene_names.service import UniProtIdMappingService

logger = structlog.get_logger()


def parse_gene_name_lines(lines: Iterable[str]) -> dict[str, str]:
    """Parse the accession/gene-name TSV returned by the results endpoint.

    The first line is the column header. Lines without exactly two non-empty
    columns (accessions with no primary gene name, blank lines) are skipped.
    """
    names: dict[str, str] = {}
    lines = iter(lines)
    next(lines, None)

    for line in lines:
        columns = line.rstrip("\r\n").split("\t")
        if len(columns) != 2:
            continue
        accession, gene_name = columns[0].strip(), columns[1].strip()
        if accession and gene_name:
            names[accession] = gene_name
    return names


class EnrichmentJobClient:
    """Runs gene-name mapping jobs one batch at a time.

    Polling has no limit: a job that stays RUNNING is polled until it
    finishes. Transient failures in any phase count against a retry budget
    shared by the whole batch; after max_attempts failures the batch fails.
    """

    def __init__(
        self,
        service: UniProtIdMappingService,
        max_attempts: int = 5,
        poll_interval: float = 1.0,
        retry_delay: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            service: Transport implementing submit/status/results
            max_attempts: Attempts per batch before it is declared FAILED
            poll_interval: Seconds between status polls
            retry_delay: Wait after the first failure; grows by the same
                amount after each further failure
            sleep: Sleep function (injected by tests)
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self.service = service
        self.max_attempts = max_attempts
        self.poll_interval = poll_interval
        self.retry_delay = retry_delay
        self._sleep = sleep

    def _advance(self, job: EnrichmentJob) -> None:
        if job.state is JobState.RETRY_WAIT:
            job.state = job.resume_state

        try:
            if job.state is JobState.SUBMITTING:
                job.job_id = self.service.submit(sorted(job.batch))
                logger.debug("gene_name_job_submitted", job_id=job.job_id, batch_size=len(job.batch))
                job.state = JobState.POLLING

            if job.state is JobState.POLLING:
                while True:
                    job.poll_count += 1
                    if self.service.status(job.job_id) is JobStatus.FINISHED:
                        break
                    self._sleep(self.poll_interval)
                job.state = JobState.FETCHING

            if job.state is JobState.FETCHING:
                job.results = parse_gene_name_lines(self.service.results(job.job_id))
                job.state = JobState.DONE
        except TransientServiceError:
            job.resume_state = job.state
            job.state = JobState.RETRY_WAIT
            job.attempt_count += 1
            raise

    def _log_retry(self, job: EnrichmentJob, retry_state: RetryCallState) -> None:
        logger.warning(
            "gene_name_job_retry",
            job_id=job.job_id,
            phase=job.resume_state.value,
            attempt=job.attempt_count,
            max_attempts=self.max_attempts,
            wait_seconds=retry_state.next_action.sleep if retry_state.next_action else None,
            error=str(retry_state.outcome.exception()),
        )

    def run(self, batch: Iterable[str]) -> EnrichmentJob:
        """Run one batch to completion.

        Returns:
            EnrichmentJob in DONE state with its results

        Raises:
            EnrichmentFailedError: If the retry budget is exhausted or the
                service rejects the job
        """
        job = EnrichmentJob(batch=frozenset(batch))
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_incrementing(start=self.retry_delay, increment=self.retry_delay),
            retry=retry_if_exception_type(TransientServiceError),
            before_sleep=lambda retry_state: self._log_retry(job, retry_state),
            sleep=self._sleep,
            reraise=True,
        )

        try:
            for attempt in retrying:
                with attempt:
                    self._advance(job)
        except TransientServiceError as e:
            job.state = JobState.FAILED
            logger.error(
                "gene_name_job_failed",
                job_id=job.job_id,
                attempts=job.attempt_count,
                batch_size=len(job.batch),
                error=str(e),
            )
            raise EnrichmentFailedError(
                f"Gene name batch of {len(job.batch)} accessions failed after "
                f"{job.attempt_count} attempts: {e}",
                job=job,
            ) from e
        except FatalServiceError as e:
            job.state = JobState.FAILED
            logger.error("gene_name_job_rejected", job_id=job.job_id, error=str(e))
            raise EnrichmentFailedError(
                f"Gene name batch of {len(job.batch)} accessions rejected: {e}",
                job=job,
            ) from e

        return job

    @classmethod
    def from_config(cls, service: UniProtIdMappingService, config: APIConfig) -> "EnrichmentJobClient":
        return cls(
            service=service,
            max_attempts=config.max_attempts,
            poll_interval=config.poll_interval_seconds,
            retry_delay=config.retry_delay_seconds,
        )
