import csv
import logging
import sys
from typing import Iterable, List, Mapping, Optional

from ledger import AccountLedger
from models import AccountSnapshot, ProcessingStats
from records import RecordRejected, parse_record
from settings import EngineSettings

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Drives a transaction log through the ledger.
    Rows are parsed and applied one at a time, in order; a bad row is logged
    and skipped without stopping the batch.
    """

    def __init__(self, settings: Optional[EngineSettings] = None, ledger: Optional[AccountLedger] = None):
        self._settings = settings if settings is not None else EngineSettings()
        self._ledger = ledger if ledger is not None else AccountLedger(
            allow_withdrawal_disputes=self._settings.ALLOW_WITHDRAWAL_DISPUTES,
            allow_disputes_on_locked=self._settings.ALLOW_DISPUTES_ON_LOCKED,
        )
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> List[AccountSnapshot]:
        """Process CSV file and return final account snapshots."""
        logger.info(f"Processing {filepath}")
        with open(filepath, "r", newline="") as f:
            reader = csv.DictReader(f, skipinitialspace=True)
            return self.process_rows(reader)

    def process_rows(self, rows: Iterable[Mapping[str, Optional[str]]]) -> List[AccountSnapshot]:
        """Apply already-tokenized rows and return final account snapshots."""
        for row in rows:
            try:
                transaction = parse_record(row)
            except RecordRejected as e:
                self._stats.record_rejected()
                logger.warning(f"Rejected row {row}: {e.reason}")
                continue

            self._stats.record_parsed()
            self._stats.record_result(self._ledger.apply(transaction))

        if self._settings.REPORT_STATS:
            print(
                f"Processed: {self._stats.parsed}, "
                f"Rejected: {self._stats.rejected}, "
                f"Ignored: {self._stats.ignored}",
                file=sys.stderr
            )

        return self._ledger.snapshot()
