import io
import json
import os
import subprocess
import sys
import tarfile
from pathlib import Path
from typing import Callable, Dict, Optional

import pytest
import yaml

from pkgverify.config import Config

ROOT = Path(__file__).resolve().parents[1]

DEMO_MANIFEST = {"name": "demo", "version": "1.0.0", "main": "src/app.js"}

OPERATIONS_SOURCE = (ROOT / "arith" / "operations.py").read_text(encoding="utf-8")

DEMO_FILES = {
    "package.json": json.dumps(DEMO_MANIFEST),
    "arith/__init__.py": "from .operations import add, divide, multiply, subtract\n",
    "arith/operations.py": OPERATIONS_SOURCE,
}


def exit_command(code: int) -> list:
    return [sys.executable, "-c", f"import sys; sys.exit({code})"]


def build_archive(
    path: Path, files: Dict[str, str], root: str = "package"
) -> Path:
    """Write a gzip tarball holding files under root/."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(path, "w:gz") as tar:
        for relative, content in files.items():
            data = content.encode("utf-8")
            info = tarfile.TarInfo(f"{root}/{relative}")
            info.size = len(data)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(data))
    return path


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    target = tmp_path / "work"
    target.mkdir()
    return target


@pytest.fixture
def make_archive(workdir: Path) -> Callable[..., Path]:
    def _make(
        files: Optional[Dict[str, str]] = None,
        name: str = "demo-1.0.0.tgz",
        root: str = "package",
    ) -> Path:
        return build_archive(workdir / name, DEMO_FILES if files is None else files, root)

    return _make


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[dict], Path]:
    def _write(data: dict) -> Path:
        path = tmp_path / "pkgverify.yaml"
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def config(write_config) -> Config:
    path = write_config({"execution": {"test_command": exit_command(0)}})
    return Config(str(path))


@pytest.fixture
def run_cli(workdir: Path):
    def _run(*args: str):
        env = os.environ.copy()
        pythonpath = env.get("PYTHONPATH", "")
        entries = [str(ROOT)]
        if pythonpath:
            entries.append(pythonpath)
        env["PYTHONPATH"] = os.pathsep.join(entries)
        env["PYTHONIOENCODING"] = "utf-8"

        cmd = [sys.executable, "-m", "pkgverify", "--dir", str(workdir), *args]
        return subprocess.run(
            cmd, capture_output=True, text=True, encoding="utf-8", env=env, cwd=str(workdir)
        )

    return _run
