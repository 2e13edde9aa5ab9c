"""Compare the mapping files of two releases.

Every .tsv file of the current release that also exists in the previous
release is compared by line count and byte size. A drop of max_drop (5 %
by default) or more is reported as an error; anything else is informational.
"""

import gzip
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from orthopairs.exceptions import ConfigurationError

logger = structlog.get_logger()

DEFAULT_MAX_DROP = 0.05


@dataclass
class VerificationResult:
    """Result of a release comparison.

    Attributes:
        passed: True if no file shrank beyond the threshold
        info_messages: One line per comparison within tolerance
        error_messages: One line per comparison beyond tolerance
        compared_files: Names of files present in both releases
    """
    passed: bool = True
    info_messages: list[str] = field(default_factory=list)
    error_messages: list[str] = field(default_factory=list)
    compared_files: list[str] = field(default_factory=list)


def significant_drop(current: int, previous: int, max_drop: float = DEFAULT_MAX_DROP) -> bool:
    """True if current is at least max_drop (as a fraction) below previous."""
    if previous <= 0:
        return False
    return (previous - current) / previous >= max_drop


def count_lines(path: Path) -> int:
    with open(path, "rb") as f:
        return sum(1 for _ in f)


def _previous_release_files(previous_dir: Path, scratch_dir: Path) -> dict[str, Path]:
    """Map file name to a readable .tsv path for the previous release.

    Plain .tsv files are used as they are. Archived .tsv.gz files are
    decompressed into scratch_dir; the previous release directory is only read.
    """
    files = {p.name: p for p in previous_dir.glob("*.tsv")}
    for gz_path in previous_dir.glob("*.tsv.gz"):
        name = gz_path.name[: -len(".gz")]
        if name in files:
            continue
        target = scratch_dir / name
        with gzip.open(gz_path, "rb") as src, open(target, "wb") as dst:
            shutil.copyfileobj(src, dst)
        logger.debug("previous_release_file_decompressed", archive=str(gz_path))
        files[name] = target
    return files


def _compare(
    result: VerificationResult,
    current: Path,
    previous: Path,
    current_value: int,
    previous_value: int,
    unit: str,
    max_drop: float,
) -> None:
    if significant_drop(current_value, previous_value, max_drop):
        comparison = "fewer lines" if unit == "lines" else "smaller size"
        result.error_messages.append(
            f"{current} has significantly {comparison} than {previous} "
            f"({current_value} {unit} vs. {previous_value} {unit}) - "
            f"Difference: {previous_value - current_value} {unit}"
        )
        result.passed = False
    else:
        result.info_messages.append(
            f"{current} ({current_value} {unit}) vs. {previous} ({previous_value} {unit}) - "
            f"Difference: {current_value - previous_value} {unit}"
        )


def compare_release_directories(
    current_dir: Path | str,
    previous_dir: Path | str,
    max_drop: float = DEFAULT_MAX_DROP,
) -> VerificationResult:
    """Compare line counts and sizes of matching mapping files.

    Files present in only one release are ignored.

    Raises:
        ConfigurationError: If either directory does not exist
    """
    current_dir = Path(current_dir)
    previous_dir = Path(previous_dir)
    for directory in (current_dir, previous_dir):
        if not directory.is_dir():
            raise ConfigurationError(f"Release directory not found: {directory}")

    result = VerificationResult()
    with tempfile.TemporaryDirectory(prefix="orthopairs-verify-") as scratch:
        previous_files = _previous_release_files(previous_dir, Path(scratch))

        for current in sorted(current_dir.glob("*.tsv")):
            previous = previous_files.get(current.name)
            if previous is None:
                continue

            # Messages name the previous release file, not its scratch copy
            label = previous_dir / current.name
            result.compared_files.append(current.name)
            _compare(result, current, label, count_lines(current), count_lines(previous), "lines", max_drop)
            _compare(result, current, label, current.stat().st_size, previous.stat().st_size, "bytes", max_drop)

    logger.info(
        "release_verification_complete",
        compared=len(result.compared_files),
        errors=len(result.error_messages),
        passed=result.passed,
    )
    return result
