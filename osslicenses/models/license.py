from dataclasses import dataclass
from typing import NamedTuple

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import RootModel
from pydantic import model_validator


class ByteRange(NamedTuple):
    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclass(frozen=True)
class LicenseEntry:
    """A license key and the raw bytes stored for it."""
    key: str
    content: bytes


class PomLicense(BaseModel):
    """One <license> element of a POM's <licenses> section."""
    name: str = ''
    url: str = ''

    model_config = ConfigDict(frozen=True)


class BundledLicenseRange(BaseModel):
    """Location of one license inside the bundled license text entry."""
    start: int
    length: int

    model_config = ConfigDict(extra='ignore')


class BundledLicenseIndex(RootModel[dict[str, BundledLicenseRange] | None]):
    """The bundled third_party_licenses.json document."""

    @model_validator(mode='before')
    @classmethod
    def empty_as_none(cls, data):
        # Any empty document (null, {}, []) means no bundled licenses
        if isinstance(data, (dict, list)) and not data:
            return None
        return data

    def items(self) -> list[tuple[str, BundledLicenseRange]]:
        return list((self.root or {}).items())

    def __len__(self) -> int:
        return len(self.root or {})


@dataclass(frozen=True)
class IndexEntry:
    """One parsed line of the license metadata file."""
    key: str
    byte_range: ByteRange
