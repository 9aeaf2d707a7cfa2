"""
Package Verifier

Checks a packaged distribution archive: locates it, extracts it into a
scratch directory, checks required files, reads the manifest and re-runs
the packaged tests, cleaning up on every exit path.
"""

__version__ = "1.0.0"

from .config import Config
from .errors import (
    ArchiveNotFoundError,
    ConfigError,
    EmbeddedTestError,
    ExtractionError,
    ManifestError,
    MissingFileError,
    ScratchError,
    VerificationError,
)
from .verifier import FileCheck, PackageVerifier, VerificationResult

__all__ = [
    "Config",
    "ArchiveNotFoundError",
    "ConfigError",
    "EmbeddedTestError",
    "ExtractionError",
    "ManifestError",
    "MissingFileError",
    "ScratchError",
    "VerificationError",
    "FileCheck",
    "PackageVerifier",
    "VerificationResult",
]
