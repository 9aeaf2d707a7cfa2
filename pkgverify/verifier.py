"""
Package Verifier.

Checks a packaged distribution archive end to end:
1. Locate the archive in the target directory
2. Report its size
3. Extract it into a fresh scratch directory
4. Check the required files, stopping at the first missing one
5. Parse the manifest and report its key fields
6. Run the packaged test command from inside the unpacked package
7. Remove the scratch directory, whatever happened above
"""

import json
import logging
import shutil
import subprocess
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from .config import Config
from .errors import (
    ArchiveNotFoundError,
    EmbeddedTestError,
    ExtractionError,
    ManifestError,
    MissingFileError,
    ScratchError,
    VerificationError,
)
from .utils import format_kilobytes

logger = logging.getLogger(__name__)


@dataclass
class FileCheck:
    """Presence check for one required file."""

    path: str
    present: bool


@dataclass
class VerificationResult:
    """Outcome of one verification run."""

    archive: Optional[Path] = None
    size_bytes: Optional[int] = None
    checked_files: List[FileCheck] = field(default_factory=list)
    manifest: Dict[str, Any] = field(default_factory=dict)
    error: Optional[VerificationError] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary for JSON output."""
        return {
            "archive": str(self.archive) if self.archive else None,
            "size_bytes": self.size_bytes,
            "checked_files": [
                {"path": check.path, "present": check.present}
                for check in self.checked_files
            ],
            "manifest": self.manifest,
            "success": self.success,
            "exit_code": self.exit_code,
            "error": (
                {"kind": self.error.kind, "message": self.error.message}
                if self.error
                else None
            ),
        }

    def __repr__(self) -> str:
        status = "PASS" if self.success else f"FAIL ({self.error.kind})"
        return f"VerificationResult({self.archive}, {status})"


class PackageVerifier:
    """Verifies the archive found in a directory."""

    def __init__(self, directory: Optional[Path] = None, config: Optional[Config] = None):
        """
        Initialize verifier.

        Args:
            directory: Directory holding the archive (default: current directory)
            config: Configuration instance
        """
        self.config = config or Config()
        self.config.validate()
        self.directory = Path(directory or Path.cwd()).resolve()
        self.scratch_dir = self.directory / self.config.scratch_dir_name

    def find_archive(self) -> Path:
        """
        Locate the archive to verify.

        Returns:
            Path to the first regular file, in name order, ending with the
            configured suffix

        Raises:
            ArchiveNotFoundError: If no such file exists
        """
        suffix = self.config.archive_suffix
        try:
            entries = sorted(self.directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise ArchiveNotFoundError(f"Cannot list {self.directory}: {e}") from e

        for entry in entries:
            if entry.name.endswith(suffix) and entry.is_file():
                return entry
        raise ArchiveNotFoundError(f"No {suffix} file found in {self.directory}")

    @contextmanager
    def scratch_directory(self) -> Iterator[Path]:
        """
        Provide a fresh scratch directory and remove it on exit.

        Any stale copy left by an aborted run is deleted first, whether it is
        a directory, a file or a symlink.

        Raises:
            ScratchError: If the directory cannot be removed or created
        """
        if self._remove_scratch():
            logger.debug(f"Removed stale scratch path: {self.scratch_dir}")
        try:
            self.scratch_dir.mkdir()
        except OSError as e:
            raise ScratchError(f"Cannot create {self.scratch_dir}: {e}") from e
        try:
            yield self.scratch_dir
        finally:
            if self._remove_scratch():
                logger.debug(f"Cleaned up {self.scratch_dir}")

    def _remove_scratch(self) -> bool:
        """Remove whatever sits at the scratch path. Returns True if something was removed."""
        path = self.scratch_dir
        try:
            if path.is_symlink() or path.is_file():
                path.unlink()
            elif path.exists():
                shutil.rmtree(path)
            else:
                return False
        except OSError as e:
            raise ScratchError(f"Cannot remove {path}: {e}") from e
        return True

    def extract(self, archive: Path, dest: Path) -> None:
        """
        Unpack the archive into dest with the external extraction command.

        Raises:
            ExtractionError: If the command fails or cannot be launched
        """
        cmd = [
            part.format(archive=str(archive), dest=str(dest))
            for part in self.config.extract_command
        ]
        logger.debug(f"Executing: {' '.join(cmd)}")

        try:
            subprocess.run(cmd, check=True, capture_output=True, text=True)
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
            raise ExtractionError(f"Failed to extract {archive.name}: {detail}") from e
        except OSError as e:
            raise ExtractionError(f"Failed to run {cmd[0]}: {e}") from e

    def check_required_files(self, package_dir: Path, result: VerificationResult) -> None:
        """
        Check the required files in order.

        Every check is recorded on the result. Scanning stops at the first
        missing file.

        Raises:
            MissingFileError: For the first required file that is absent
        """
        logger.info("📁 Checking essential files:")
        for relative in self.config.required_files:
            present = (package_dir / relative).exists()
            result.checked_files.append(FileCheck(relative, present))
            if not present:
                logger.error(f"   ✗ {relative} - NOT FOUND")
                raise MissingFileError(relative)
            logger.info(f"   ✓ {relative}")

    def read_manifest(self, package_dir: Path) -> Dict[str, Any]:
        """
        Parse the manifest and report its key fields.

        Returns:
            Parsed manifest

        Raises:
            ManifestError: If the manifest is unreadable or not a JSON object
        """
        manifest_path = package_dir / self.config.manifest_name
        try:
            manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestError(f"Cannot read {manifest_path.name}: {e}") from e
        except json.JSONDecodeError as e:
            raise ManifestError(f"Malformed {manifest_path.name}: {e}") from e

        if not isinstance(manifest, dict):
            raise ManifestError(f"{manifest_path.name} must contain a JSON object")

        logger.info(f"📋 {manifest_path.name} info:")
        for name in self.config.manifest_fields:
            logger.info(f"   {name.capitalize()}: {manifest.get(name)}")
        return manifest

    def run_embedded_tests(self, package_dir: Path) -> None:
        """
        Run the packaged test command inside package_dir.

        Output is not captured; it goes straight to the caller's streams.

        Raises:
            EmbeddedTestError: On non-zero exit, timeout, or launch failure
        """
        cmd = self.config.test_command
        timeout = self.config.test_timeout
        logger.info("🧪 Running package tests...")
        logger.debug(f"Executing in {package_dir}: {' '.join(cmd)}")

        try:
            completed = subprocess.run(cmd, cwd=str(package_dir), timeout=timeout)
        except subprocess.TimeoutExpired as e:
            raise EmbeddedTestError(f"Package tests timed out after {timeout}s") from e
        except OSError as e:
            raise EmbeddedTestError(f"Failed to run package tests: {e}") from e

        if completed.returncode != 0:
            raise EmbeddedTestError(
                f"Package tests failed with exit status {completed.returncode}",
                returncode=completed.returncode,
            )

    def verify(self) -> VerificationResult:
        """
        Run the complete verification.

        Every failure is captured on the returned result; the scratch
        directory never outlives this call.

        Returns:
            VerificationResult describing the run
        """
        result = VerificationResult()
        logger.info("🔍 Starting package verification...")

        try:
            archive = self.find_archive()
            result.archive = archive
            logger.info(f"✓ Package found: {archive.name}")

            result.size_bytes = archive.stat().st_size
            logger.info(f"📏 Size: {format_kilobytes(result.size_bytes)}")

            with self.scratch_directory() as scratch:
                self.extract(archive, scratch)
                package_dir = scratch / self.config.package_dir
                self.check_required_files(package_dir, result)
                result.manifest = self.read_manifest(package_dir)
                self.run_embedded_tests(package_dir)

        except VerificationError as e:
            result.error = e
            logger.error(f"✗ Verification failed: {e.message}")
            return result

        logger.info("🎉 Package verified successfully!")
        return result
