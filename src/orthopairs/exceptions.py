"""Exception hierarchy for the orthopairs pipeline.

Fatal errors abort the release run. Transient service errors are retried by
the enrichment job client and only surface as EnrichmentFailedError once the
per-batch retry budget is spent.
"""

from pathlib import Path


class OrthopairsError(Exception):
    """Base class for all orthopairs errors."""


class ConfigurationError(OrthopairsError):
    """Missing or inconsistent configuration (release number, species, inputs)."""


class OrthologFileFormatError(OrthopairsError):
    """A PANTHER ortholog dump line does not have the expected layout.

    The dumps are assumed well-formed, so any deviation is treated as
    corruption of the whole file rather than a per-line problem.
    """

    def __init__(self, message: str, path: Path | str | None = None, line_number: int | None = None):
        self.path = path
        self.line_number = line_number
        location = ""
        if path is not None:
            location = f"{path}:{line_number}: " if line_number is not None else f"{path}: "
        super().__init__(f"{location}{message}")


class ServiceError(OrthopairsError):
    """Failure talking to the remote ID mapping service."""


class TransientServiceError(ServiceError):
    """Timeout, connection failure, rate limiting or 5xx response; safe to retry."""


class FatalServiceError(ServiceError):
    """Request rejected or job failed on the service side; retrying cannot help."""


class EnrichmentFailedError(OrthopairsError):
    """A gene-name batch could not be resolved.

    Attributes:
        job: The EnrichmentJob in FAILED state
    """

    def __init__(self, message: str, job=None):
        self.job = job
        super().__init__(message)
