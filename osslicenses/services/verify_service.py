from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

import structlog

from osslicenses.core.storage import parse_metadata
from osslicenses.core.validation import MetadataFormatError

logger = structlog.get_logger('verify_service')


@dataclass
class VerifyResult:
    blob_size: int = 0
    entries: int = 0
    problems: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.problems


class VerifyService:
    """Checks that a metadata index slices cleanly into its license blob."""

    def verify(self, licenses_path: Path, metadata_path: Path) -> VerifyResult:
        result = VerifyResult()
        for path in (licenses_path, metadata_path):
            if not path.is_file():
                result.problems.append(f"Missing output file: {path}")
        if result.problems:
            return result

        result.blob_size = licenses_path.stat().st_size
        try:
            entries = parse_metadata(metadata_path.read_text(encoding='utf-8'))
        except MetadataFormatError as e:
            result.problems.append(str(e))
            return result
        result.entries = len(entries)

        seen: set[str] = set()
        previous_end = 0
        for entry in entries:
            offset, length = entry.byte_range
            if entry.key in seen:
                result.problems.append(f"Duplicate key: {entry.key}")
            seen.add(entry.key)

            if entry.byte_range.end > result.blob_size:
                result.problems.append(
                    f"{entry.key}: range {offset}:{length} exceeds blob size {result.blob_size}",
                )
            # Lines are written in append order, so ranges must not move backwards
            if offset < previous_end:
                result.problems.append(
                    f"{entry.key}: range {offset}:{length} overlaps the previous license",
                )
            previous_end = max(previous_end, entry.byte_range.end)

        logger.debug(
            'Verified license metadata',
            entries=result.entries, problems=len(result.problems),
        )
        return result
