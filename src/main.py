import csv
import logging
import sys
from decimal import Decimal
from typing import Iterable, List, Optional, TextIO

from models import FOUR_PLACES, LEDGER_CONTEXT, AccountSnapshot
from payments_engine import PaymentsEngine
from settings import EngineSettings

logger = logging.getLogger(__name__)

OUTPUT_HEADER = ["client", "available", "held", "total", "locked"]


def format_decimal(value: Decimal) -> str:
    """Format decimal with exactly 4 decimal places."""
    return f"{value.quantize(FOUR_PLACES, context=LEDGER_CONTEXT):f}"


def write_snapshots(snapshots: Iterable[AccountSnapshot], out: TextIO) -> None:
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    for snapshot in snapshots:
        writer.writerow([
            snapshot.client_id,
            format_decimal(snapshot.available),
            format_decimal(snapshot.held),
            format_decimal(snapshot.total),
            str(snapshot.locked).lower(),
        ])


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: payments-engine <input.csv>", file=sys.stderr)
        return 1

    settings = EngineSettings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    engine = PaymentsEngine(settings=settings)
    try:
        snapshots = engine.process_file(args[0])
    except OSError as e:
        logger.error(f"Cannot read {args[0]}: {e}")
        return 1

    write_snapshots(snapshots, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
