from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

from svdsema.sema.resolve import format_peripheral, resolve_peripheral
from svdsema.svd.svd_loader import load_svd
from svdsema.utils.logger import get_logger, setup_logging

log = get_logger(__name__)


def run_app(
    svd_path: Path,
    peripherals: Sequence[str],
    keep_going: bool,
    log_level: str,
    quiet: bool,
    out: Optional[TextIO] = None,
) -> int:
    setup_logging(level=log_level, quiet=quiet)
    out = out if out is not None else sys.stdout

    log.info("svdsema starting")
    log.info("SVD: %s", svd_path)

    device = load_svd(svd_path)

    wanted = {p.upper() for p in peripherals}
    selected = [p for p in device.peripherals if not wanted or p.name.upper() in wanted]
    missing = wanted - {p.name.upper() for p in selected}
    for name in sorted(missing):
        log.warning("peripheral not found in %s: %s", device.name, name)

    failed = 0
    for p in selected:
        resolved = resolve_peripheral(p, keep_going=keep_going)
        failed += len(resolved.failed)
        print(format_peripheral(resolved), file=out)

    if failed:
        log.warning("%d register(s) could not be resolved", failed)
        return 1
    return 0
