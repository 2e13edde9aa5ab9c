"""Release-to-release verification of mapping files."""

from orthopairs.verification.verifier import (
    VerificationResult,
    compare_release_directories,
    significant_drop,
)

__all__ = [
    "VerificationResult",
    "compare_release_directories",
    "significant_drop",
]
