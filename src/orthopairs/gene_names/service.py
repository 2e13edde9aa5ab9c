"""HTTP transport for the UniProt ID mapping job API.

Three calls make up the protocol:

- POST {base}/run                                   -> {"jobId": ...}
- GET  {base}/status/{jobId}                        -> {"jobStatus": ...}
- GET  {base}/uniprotkb/results/stream/{jobId}      -> TSV of accession/gene name

Failures are classified here, where the cause is known: timeouts, connection
errors, 429 and 5xx responses are transient; everything else is fatal.
"""

from typing import Any, Iterable, Iterator

import httpx
import structlog

from orthopairs.config.schema import UNIPROT_ID_MAPPING_URL, APIConfig
from orthopairs.exceptions import FatalServiceError, TransientServiceError
from orthopairs.gene_names.models import JobStatus

logger = structlog.get_logger()

MAP_FROM = "UniProtKB_AC-ID"
MAP_TO = "UniProtKB"
RESULT_FIELDS = "gene_primary"

PENDING_JOB_STATUSES = {"NEW", "RUNNING", "PENDING"}
FINISHED_JOB_STATUSES = {"FINISHED", "FINISHED_WITH_WARNINGS"}


def _raise_for_status(response: httpx.Response, action: str) -> None:
    status = response.status_code
    if status < 400:
        return

    message = f"{action} failed with HTTP {status}: {response.text[:200]}"
    if status == 429 or status >= 500:
        if status == 429:
            logger.warning("uniprot_rate_limited", action=action)
        raise TransientServiceError(message)
    raise FatalServiceError(message)


class UniProtIdMappingService:
    """Synchronous client for the UniProt ID mapping REST service."""

    def __init__(
        self,
        base_url: str = UNIPROT_ID_MAPPING_URL,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Args:
            base_url: Service root, e.g. https://rest.uniprot.org/idmapping
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            follow_redirects=False,
        )

    def _request(self, method: str, url: str, action: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self.client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise TransientServiceError(f"{action} timed out: {e}") from e
        except httpx.TransportError as e:
            raise TransientServiceError(f"{action} connection failed: {e}") from e

        _raise_for_status(response, action)
        return response

    @staticmethod
    def _json(response: httpx.Response, action: str) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as e:
            # A truncated body usually means the connection dropped mid-response
            raise TransientServiceError(f"{action} returned invalid JSON") from e
        if not isinstance(payload, dict):
            raise FatalServiceError(f"{action} returned unexpected payload: {payload!r}")
        return payload

    def submit(self, accessions: Iterable[str]) -> str:
        """Submit a mapping job and return its job ID."""
        ids = ",".join(accessions)
        response = self._request(
            "POST",
            "/run",
            "submit",
            data={"ids": ids, "from": MAP_FROM, "to": MAP_TO},
        )
        payload = self._json(response, "submit")

        job_id = payload.get("jobId")
        if not job_id:
            raise FatalServiceError(f"submit response has no jobId: {payload!r}")
        return job_id

    def status(self, job_id: str) -> JobStatus:
        """Query job status.

        The service answers with a redirect, or with the result payload
        itself, once the job has finished.

        Raises:
            FatalServiceError: If the job ended in ERROR or an unknown status
        """
        response = self._request("GET", f"/status/{job_id}", "status")
        if response.is_redirect:
            return JobStatus.FINISHED

        payload = self._json(response, "status")
        job_status = payload.get("jobStatus")

        if job_status is None:
            if "results" in payload or "failedIds" in payload:
                return JobStatus.FINISHED
            raise FatalServiceError(f"status response for job {job_id} has no jobStatus: {payload!r}")

        if job_status in PENDING_JOB_STATUSES:
            return JobStatus.PENDING
        if job_status in FINISHED_JOB_STATUSES:
            return JobStatus.FINISHED
        raise FatalServiceError(f"job {job_id} ended with status {job_status}")

    def results(self, job_id: str) -> Iterator[str]:
        """Stream the result table line by line (header line included)."""
        url = f"/uniprotkb/results/stream/{job_id}"
        params = {"fields": RESULT_FIELDS, "format": "tsv"}
        try:
            with self.client.stream("GET", url, params=params) as response:
                if response.is_error:
                    response.read()
                    _raise_for_status(response, "results")
                yield from response.iter_lines()
        except httpx.TimeoutException as e:
            raise TransientServiceError(f"results timed out: {e}") from e
        except httpx.TransportError as e:
            raise TransientServiceError(f"results connection failed: {e}") from e

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "UniProtIdMappingService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @classmethod
    def from_config(cls, config: APIConfig) -> "UniProtIdMappingService":
        return cls(base_url=config.base_url, timeout=config.timeout_seconds)
