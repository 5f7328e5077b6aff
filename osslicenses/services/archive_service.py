import zipfile
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

import structlog
from pydantic import ValidationError

from osslicenses.core.config import LicensesConfig
from osslicenses.core.validation import BundledIndexError
from osslicenses.core.validation import LicenseReadError
from osslicenses.models.license import BundledLicenseIndex
from osslicenses.models.license import LicenseEntry

logger = structlog.get_logger('archive_service')

FAIL_READING_LICENSES_ERROR = 'Failed to read license text.'


def skip_bytes(stream: BinaryIO, count: int, chunk_size: int = 1024) -> int:
    """
    Discards up to count bytes from stream, reading until the full amount
    is consumed or the stream ends. Returns the number of bytes skipped.
    """
    skipped = 0
    while skipped < count:
        chunk = stream.read(min(chunk_size, count - skipped))
        if not chunk:
            break
        skipped += len(chunk)
    return skipped


def read_range(stream: BinaryIO, offset: int, length: int, chunk_size: int = 1024) -> bytes:
    """
    Reads length bytes starting at offset. A non-positive length reads to
    the end of the stream.
    """
    try:
        skip_bytes(stream, offset, chunk_size)
        remaining = length if length > 0 else None
        parts = []
        while remaining is None or remaining > 0:
            size = chunk_size if remaining is None else min(remaining, chunk_size)
            chunk = stream.read(size)
            if not chunk:
                break
            parts.append(chunk)
            if remaining is not None:
                remaining -= len(chunk)
        return b''.join(parts)
    except Exception as e:
        raise LicenseReadError(FAIL_READING_LICENSES_ERROR) from e


class ArchiveService:
    """Extracts license text bundled inside umbrella-family artifacts."""

    def __init__(self, config: LicensesConfig):
        self.config = config

    def _load_index(self, archive: zipfile.ZipFile, artifact: Path) -> BundledLicenseIndex:
        raw = archive.read(self.config.bundled_index_entry)
        try:
            return BundledLicenseIndex.model_validate_json(raw)
        except ValidationError as e:
            raise BundledIndexError(
                f"Invalid bundled license index in {artifact}: {e}",
            ) from e

    def iter_licenses(self, artifact: Path, seen: set[str]) -> Iterator[LicenseEntry]:
        """
        Yields bundled license entries whose keys are not in seen.
        Each yielded key is added to seen before it is handed out.
        """
        try:
            archive = zipfile.ZipFile(artifact)
        except (OSError, zipfile.BadZipFile) as e:
            raise LicenseReadError(FAIL_READING_LICENSES_ERROR) from e

        with archive:
            names = set(archive.namelist())
            if self.config.bundled_index_entry not in names or self.config.bundled_text_entry not in names:
                logger.debug('No bundled licenses', artifact=str(artifact))
                return

            try:
                index = self._load_index(archive, artifact)
            except (OSError, zipfile.BadZipFile) as e:
                raise LicenseReadError(FAIL_READING_LICENSES_ERROR) from e

            if not len(index):
                logger.debug('Empty bundled license index', artifact=str(artifact))
                return

            for key, location in index.items():
                if key in seen:
                    continue
                try:
                    stream = archive.open(self.config.bundled_text_entry)
                except (OSError, zipfile.BadZipFile) as e:
                    raise LicenseReadError(FAIL_READING_LICENSES_ERROR) from e
                with stream:
                    content = read_range(
                        stream, location.start, location.length,
                        self.config.read_chunk_size,
                    )
                seen.add(key)
                yield LicenseEntry(key, content)
