import os
import re
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

import structlog

from osslicenses.core.validation import MetadataFormatError
from osslicenses.core.validation import OutputPathError
from osslicenses.models.license import ByteRange
from osslicenses.models.license import IndexEntry

logger = structlog.get_logger('storage')

DEFAULT_SEPARATOR = os.linesep.encode('utf-8')
METADATA_LINE = re.compile(r'^(\d+):(\d+) (.+)$')


class LicenseBlob:
    """Append-only license text stream that tracks its write cursor."""

    def __init__(self, stream: BinaryIO, separator: bytes = DEFAULT_SEPARATOR):
        self.stream = stream
        self.separator = separator
        self.start = 0

    def append(self, content: bytes) -> ByteRange:
        """Writes content at the cursor and returns the range it occupies."""
        self.stream.write(content)
        written = ByteRange(self.start, len(content))
        self.start += len(content)
        return written

    def append_separator(self) -> None:
        self.append(self.separator)


class LicenseIndex:
    """Maps license keys to their byte range; each key is written at most once."""

    def __init__(self, blob: LicenseBlob):
        self.blob = blob
        self.ranges: dict[str, ByteRange] = {}

    def __contains__(self, key: str) -> bool:
        return key in self.ranges

    def __len__(self) -> int:
        return len(self.ranges)

    def __iter__(self) -> Iterator[tuple[str, ByteRange]]:
        return iter(self.ranges.items())

    def try_insert(self, key: str, content: bytes) -> bool:
        """Appends content for key unless key was already recorded. Returns True if written."""
        if key in self.ranges:
            logger.debug('License already recorded', key=key)
            return False

        self.ranges[key] = self.blob.append(content)
        self.blob.append_separator()
        return True


def prepare_output(licenses_path: Path, metadata_path: Path) -> None:
    """Creates the output directories and truncates both output files."""
    try:
        for path in (licenses_path, metadata_path):
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b'')
    except OSError as e:
        raise OutputPathError(f"Cannot prepare output file: {e}") from e


def write_metadata(index: LicenseIndex, stream: BinaryIO, separator: bytes = DEFAULT_SEPARATOR) -> int:
    """Writes '<offset>:<length> <key>' lines in insertion order. Returns the line count."""
    count = 0
    for key, (offset, length) in index:
        stream.write(f"{offset}:{length} {key}".encode())
        stream.write(separator)
        count += 1
    return count


def parse_metadata(text: str) -> list[IndexEntry]:
    """Parses the metadata file content back into index entries."""
    entries = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        match = METADATA_LINE.match(line)
        if not match:
            raise MetadataFormatError(
                f"Line {lineno}: expected '<offset>:<length> <key>', got {line!r}",
            )
        offset, length, key = match.groups()
        entries.append(IndexEntry(key, ByteRange(int(offset), int(length))))
    return entries


def read_licenses(licenses_path: str | Path, metadata_path: str | Path) -> dict[str, bytes]:
    """Slices the license blob back into per-key license content."""
    blob = Path(licenses_path).read_bytes()
    entries = parse_metadata(Path(metadata_path).read_text(encoding='utf-8'))
    return {
        entry.key: blob[entry.byte_range.offset:entry.byte_range.end]
        for entry in entries
    }
