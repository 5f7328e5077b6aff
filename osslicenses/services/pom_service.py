import xml.etree.ElementTree as ET
from abc import ABC
from abc import abstractmethod
from pathlib import Path

import structlog

from osslicenses.core.validation import MetadataDocumentError
from osslicenses.models.dependency import Dependency
from osslicenses.models.license import LicenseEntry
from osslicenses.models.license import PomLicense

logger = structlog.get_logger('pom_service')


class PomResolver(ABC):
    @abstractmethod
    def resolve(self, group: str, name: str, version: str) -> list[Path]:
        """Returns candidate POM files for the given coordinates, best first."""
        ...


class LocalRepositoryPomResolver(PomResolver):
    """
    Looks up POM files in local repositories.

    Two layouts are understood:
    - Maven: <root>/com/example/lib/1.0/lib-1.0.pom
    - Gradle module cache: <root>/com.example/lib/1.0/<sha1>/lib-1.0.pom
    """

    def __init__(self, roots: list[Path]):
        self.roots = [Path(r) for r in roots]

    def resolve(self, group: str, name: str, version: str) -> list[Path]:
        file_name = f"{name}-{version}.pom"
        candidates = []
        for root in self.roots:
            maven_path = root.joinpath(
                *group.split('.'), name, version, file_name,
            )
            if maven_path.exists():
                candidates.append(maven_path)

            gradle_dir = root / group / name / version
            if gradle_dir.is_dir():
                candidates.extend(sorted(gradle_dir.glob(f'*/{file_name}')))
        return candidates


def _namespace(root: ET.Element) -> str:
    if root.tag.startswith('{'):
        return root.tag[:root.tag.index('}') + 1]
    return ''


def parse_pom_licenses(pom_path: Path) -> list[PomLicense]:
    """Reads the <licenses> section of a POM file."""
    try:
        root = ET.parse(pom_path).getroot()
    except ET.ParseError as e:
        raise MetadataDocumentError(f"Cannot parse POM {pom_path}: {e}") from e

    ns = _namespace(root)
    licenses_elem = root.find(f'{ns}licenses')
    if licenses_elem is None:
        return []

    return [
        PomLicense(
            name=(elem.findtext(f'{ns}name') or '').strip(),
            url=(elem.findtext(f'{ns}url') or '').strip(),
        )
        for elem in licenses_elem.findall(f'{ns}license')
    ]


def license_entries(licenses: list[PomLicense], group: str, name: str) -> list[LicenseEntry]:
    """
    Builds license entries from a POM's declared licenses.

    A single license is keyed 'group:name'. Several licenses are keyed
    'group:name <license name>' so each gets its own range. The content is
    the declared URL, not the document it points to.
    """
    key = f"{group}:{name}"
    if len(licenses) == 1:
        return [LicenseEntry(key, licenses[0].url.encode('utf-8'))]
    return [
        LicenseEntry(f"{key} {lic.name}", lic.url.encode('utf-8'))
        for lic in licenses
    ]


class PomService:
    """Finds and reads license declarations from dependency POM files."""

    def __init__(self, resolver: PomResolver):
        self.resolver = resolver

    def find_pom(self, dependency: Dependency) -> Path | None:
        logger.debug(
            'Resolving POM file',
            dependency=dependency.coordinates,
        )
        candidates = self.resolver.resolve(
            dependency.group, dependency.name, dependency.version,
        )
        if not candidates:
            logger.warning(
                'Dependency has no POM file',
                dependency=dependency.coordinates,
            )
            return None

        pom_path = candidates[0]
        if not pom_path.is_file():
            logger.error(
                'Unexpected POM artifact type',
                dependency=dependency.coordinates, path=str(pom_path),
            )
            return None
        return pom_path

    def extract(self, dependency: Dependency) -> list[LicenseEntry]:
        """Returns the license entries declared by the dependency's POM, if any."""
        pom_path = self.find_pom(dependency)
        if pom_path is None:
            return []

        licenses = parse_pom_licenses(pom_path)
        if not licenses:
            logger.debug(
                'POM declares no licenses',
                dependency=dependency.coordinates,
            )
            return []
        return license_entries(licenses, dependency.group, dependency.name)
