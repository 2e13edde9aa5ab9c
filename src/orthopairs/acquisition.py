"""Locate, download and unpack the PANTHER ortholog dumps."""

import shutil
import tarfile
from pathlib import Path
from typing import Iterable

import httpx
import structlog
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from orthopairs.exceptions import ConfigurationError

logger = structlog.get_logger()

ARCHIVE_SUFFIX = ".tar.gz"


def extracted_path(archive: Path | str) -> Path:
    """Plain dump path for an archive (``QfO_Genome_Orthologs.tar.gz`` -> ``QfO_Genome_Orthologs``)."""
    archive = Path(archive)
    if archive.name.endswith(ARCHIVE_SUFFIX):
        return archive.with_name(archive.name[: -len(ARCHIVE_SUFFIX)])
    return archive


@retry(
    stop=stop_after_attempt(5),
    wait=wait_exponential(multiplier=1, min=4, max=60),
    retry=retry_if_exception_type(
        (httpx.HTTPStatusError, httpx.ConnectError, httpx.TimeoutException)
    ),
)
def download_archive(url: str, output_path: Path) -> Path:
    """Stream a dump archive to disk.

    Raises:
        httpx.HTTPStatusError: On HTTP errors (after retries)
        httpx.ConnectError: On connection errors (after retries)
        httpx.TimeoutException: On timeout (after retries)
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = output_path.with_name(output_path.name + ".tmp")

    logger.info("panther_download_start", url=url)
    with httpx.stream("GET", url, timeout=120.0, follow_redirects=True) as response:
        response.raise_for_status()
        with open(temp_path, "wb") as f:
            for chunk in response.iter_bytes(chunk_size=8192):
                f.write(chunk)

    temp_path.rename(output_path)
    logger.info(
        "panther_download_complete",
        path=str(output_path),
        size_mb=round(output_path.stat().st_size / 1024 / 1024, 2),
    )
    return output_path


def extract_archive(archive: Path | str, force: bool = False) -> Path:
    """Unpack a single-file dump archive next to itself.

    Only the first regular file of the archive is used, written under the
    archive's name minus ``.tar.gz``; member paths are never trusted.

    Raises:
        ConfigurationError: If the archive holds no regular file
    """
    archive = Path(archive)
    target = extracted_path(archive)
    if target.exists() and not force:
        logger.info("panther_dump_exists", path=str(target))
        return target

    logger.info("panther_extract_start", archive=str(archive))
    with tarfile.open(archive, "r:gz") as tar:
        member = next((m for m in tar.getmembers() if m.isfile()), None)
        if member is None:
            raise ConfigurationError(f"Archive {archive} contains no regular file")

        # The plain dump only appears once fully written; its presence marks a complete extract
        temp_path = target.with_name(target.name + ".tmp")
        try:
            source = tar.extractfile(member)
            with source, open(temp_path, "wb") as f:
                shutil.copyfileobj(source, f)
            temp_path.replace(target)
        finally:
            temp_path.unlink(missing_ok=True)

    logger.info("panther_extract_complete", path=str(target), member=member.name)
    return target


def resolve_ortholog_files(
    files: Iterable[str],
    data_dir: Path | str,
    base_url: str | None = None,
) -> list[Path]:
    """Return plain dump paths, downloading and extracting where needed.

    Args:
        files: Dump names relative to data_dir (archives or plain files)
        data_dir: Directory holding the dumps
        base_url: Remote directory to fetch missing archives from

    Raises:
        ConfigurationError: If a dump is missing and cannot be downloaded
    """
    data_dir = Path(data_dir)
    paths = []

    for name in files:
        archive = data_dir / name
        plain = extracted_path(archive)

        if plain.exists():
            paths.append(plain)
            continue

        if not archive.exists():
            if base_url is None:
                raise ConfigurationError(f"Ortholog file not found: {archive}")
            download_archive(f"{base_url.rstrip('/')}/{name}", archive)

        paths.append(extract_archive(archive))

    return paths
