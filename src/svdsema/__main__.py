from __future__ import annotations

import argparse
import sys
from pathlib import Path

from svdsema.app import run_app
from svdsema.sema.errors import ResolutionError
from svdsema.svd.svd_loader import SvdLoadError
from svdsema.utils.logger import get_logger

log = get_logger("svdsema")


def main() -> None:
    p = argparse.ArgumentParser(
        prog="svdsema",
        description="Resolve names, addresses, derivations and access modes of a CMSIS-SVD device",
    )
    p.add_argument("svd", type=Path, help="CMSIS-SVD XML file path")
    p.add_argument(
        "--peripheral",
        "-p",
        action="append",
        default=[],
        help="Only resolve this peripheral (repeatable, case-insensitive)",
    )
    p.add_argument("--keep-going", action="store_true", help="Skip registers that fail to resolve instead of stopping")

    # Logging
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    p.add_argument("--quiet", action="store_true", help="Reduce console output")

    args = p.parse_args()

    try:
        rc = run_app(
            svd_path=args.svd,
            peripherals=args.peripheral,
            keep_going=args.keep_going,
            log_level=args.log_level,
            quiet=args.quiet,
        )
    except (ResolutionError, SvdLoadError) as e:
        log.error("%s", e)
        rc = 1
    sys.exit(rc)


if __name__ == "__main__":
    main()
