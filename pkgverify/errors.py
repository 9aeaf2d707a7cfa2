"""Error types raised while verifying a package archive."""

from __future__ import annotations

from typing import Optional


class ConfigError(RuntimeError):
    """Configuration-related error."""


class VerificationError(Exception):
    """Base class for every condition that fails a verification run."""

    kind = "verification"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ArchiveNotFoundError(VerificationError):
    kind = "archive_not_found"


class ExtractionError(VerificationError):
    kind = "extraction"


class MissingFileError(VerificationError):
    kind = "missing_file"

    def __init__(self, path: str):
        super().__init__(f"{path} - NOT FOUND")
        self.path = path


class ManifestError(VerificationError):
    kind = "manifest"


class EmbeddedTestError(VerificationError):
    """The packaged test command exited non-zero or could not be run."""

    kind = "embedded_tests"

    def __init__(self, message: str, returncode: Optional[int] = None):
        super().__init__(message)
        self.returncode = returncode


class ScratchError(VerificationError):
    """The scratch directory could not be prepared or removed."""

    kind = "scratch"
