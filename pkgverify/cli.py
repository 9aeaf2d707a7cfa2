"""CLI runner for the package verifier."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import LOG_LEVELS, Config
from .errors import ConfigError
from .utils import setup_logging
from .verifier import PackageVerifier

logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pkgverify",
        description="Verify a packaged archive: contents, manifest and bundled tests.",
    )
    parser.add_argument("--config", help="Path to a YAML configuration file")
    parser.add_argument("--dir", default=".", help="Directory holding the archive (default: current directory)")
    parser.add_argument("--log-level", choices=LOG_LEVELS, help="Override the configured log level")
    parser.add_argument("--suffix", help="Archive file-name suffix (default from config: .tgz)")
    parser.add_argument("--test-command", help="Command that runs the packaged tests")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON after the run")
    return parser.parse_args(argv)


def _load_config(args: argparse.Namespace) -> Config:
    config = Config(args.config)
    if args.suffix:
        config.set("archive.suffix", args.suffix)
    if args.test_command:
        config.set("execution.test_command", args.test_command)
    config.validate()
    return config


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)

    try:
        config = _load_config(args)
    except ConfigError as e:
        setup_logging(args.log_level or "INFO")
        logger.error(f"✗ {e}")
        sys.exit(2)

    setup_logging(
        level=args.log_level or config.log_level,
        log_file=config.log_file,
        format_string=config.log_format,
    )

    result = PackageVerifier(Path(args.dir), config).verify()

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))

    sys.exit(result.exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
