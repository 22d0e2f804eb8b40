import logging
from dataclasses import dataclass, field
from pathlib import Path

from mediavault.services.storage import delete_file_if_exists
from mediavault.store.files import FileIndex

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SweepReport:
    removed_files: list[str] = field(default_factory=list)
    dropped_records: list[str] = field(default_factory=list)


def sweep_orphans(index: FileIndex, upload_dir: Path) -> SweepReport:
    """Reconcile the upload directory with the index.

    Deletes bytes no record points at (aborted uploads, deletes that crashed
    after the record went away) and drops records whose bytes are gone.
    Only safe while no uploads are in flight.
    """
    report = SweepReport()
    records = index.all()
    known = {record.filename for record in records}

    if upload_dir.is_dir():
        for path in sorted(upload_dir.iterdir()):
            if path.is_file() and path.name not in known:
                delete_file_if_exists(path)
                report.removed_files.append(path.name)

    report.dropped_records = [record.id for record in records if not (upload_dir / record.filename).is_file()]
    if report.dropped_records:
        index.discard(report.dropped_records)

    logger.info(
        "orphan_sweep",
        extra={"removed_files": len(report.removed_files), "dropped_records": len(report.dropped_records)},
    )
    return report
