from collections.abc import Callable
from dataclasses import dataclass
from dataclasses import field

import structlog

from osslicenses.core.config import LicensesConfig
from osslicenses.core.config import PathConfig
from osslicenses.core.stats import AggregationStats
from osslicenses.core.storage import LicenseBlob
from osslicenses.core.storage import LicenseIndex
from osslicenses.core.storage import prepare_output
from osslicenses.core.storage import write_metadata
from osslicenses.core.validation import VersionFormatError
from osslicenses.models.dependency import Dependency
from osslicenses.models.dependency import DependencyKind
from osslicenses.services.archive_service import ArchiveService
from osslicenses.services.pom_service import PomService

logger = structlog.get_logger('aggregation_service')


def is_granular_version(version: str, base_version: int) -> bool:
    """True when the first dotted component of version is >= base_version."""
    leading = version.split('.')[0].strip()
    if not (leading.isascii() and leading.isdigit()):
        raise VersionFormatError(
            f"Version {version!r} does not start with a numeric component",
        )
    return int(leading) >= base_version


def classify_dependency(dependency: Dependency, config: LicensesConfig) -> DependencyKind:
    umbrella_groups = {g.lower() for g in config.umbrella_groups}
    if dependency.group.lower() not in umbrella_groups:
        return DependencyKind.ORDINARY
    if dependency.name.endswith(config.license_artifact_suffix):
        return DependencyKind.UMBRELLA_LICENSE_CARRIER
    return DependencyKind.UMBRELLA_PRIMARY


@dataclass
class AggregationState:
    """Everything a single run accumulates."""
    index: LicenseIndex
    umbrella_licenses: set[str] = field(default_factory=set)
    stats: AggregationStats = field(default_factory=AggregationStats)

    @property
    def blob(self) -> LicenseBlob:
        return self.index.blob


class AggregationService:
    """Collects license text for a dependency list into a blob and an index."""

    def __init__(self, pom_service: PomService, archive_service: ArchiveService, config: LicensesConfig):
        self.pom_service = pom_service
        self.archive_service = archive_service
        self.config = config

    def add_pom_licenses(self, dependency: Dependency, state: AggregationState) -> int:
        """Returns the number of entries the POM declared, written or not."""
        entries = self.pom_service.extract(dependency)
        for entry in entries:
            inserted = state.index.try_insert(entry.key, entry.content)
            state.stats.record_insert(inserted)
        return len(entries)

    def add_bundled_licenses(self, dependency: Dependency, state: AggregationState) -> int:
        found = 0
        # Tracking uses the bundled key; the index key names the artifact that supplied it
        for entry in self.archive_service.iter_licenses(dependency.artifact_path, state.umbrella_licenses):
            key = f"{dependency.license_key} {entry.key}"
            inserted = state.index.try_insert(key, entry.content)
            state.stats.record_insert(inserted, bundled=True)
            found += 1
        return found

    def process_dependency(self, dependency: Dependency, state: AggregationState) -> None:
        kind = classify_dependency(dependency, self.config)
        logger.debug(
            'Processing dependency',
            dependency=dependency.coordinates, kind=str(kind),
        )

        found = 0
        if kind is DependencyKind.ORDINARY:
            found += self.add_pom_licenses(dependency, state)
        elif kind is DependencyKind.UMBRELLA_LICENSE_CARRIER:
            # Holds the bundled licenses for pre-granular versions
            found += self.add_bundled_licenses(dependency, state)
        else:
            # The library's own license does not depend on its version
            found += self.add_pom_licenses(dependency, state)
            try:
                granular = is_granular_version(
                    dependency.version, self.config.granular_base_version,
                )
            except VersionFormatError as e:
                logger.error(
                    'Cannot classify dependency version',
                    dependency=dependency.coordinates, error=str(e),
                )
                state.stats.inc_failed()
                return

            # Pre-granular versions get their bundled licenses from a sibling -license artifact
            if granular:
                found += self.add_bundled_licenses(dependency, state)

        state.stats.processed += 1
        if not found:
            state.stats.inc_skipped()

    def aggregate(
        self,
        dependencies: list[Dependency],
        state: AggregationState,
        progress_callback: Callable[[Dependency], None] | None = None,
    ) -> AggregationState:
        """Processes dependencies in order, accumulating into state."""
        state.stats.total += len(dependencies)
        for dependency in dependencies:
            self.process_dependency(dependency, state)
            if progress_callback:
                progress_callback(dependency)
        return state

    def run(
        self,
        dependencies: list[Dependency],
        paths: PathConfig,
        progress_callback: Callable[[Dependency], None] | None = None,
    ) -> AggregationState:
        """Writes the license blob and metadata files for dependencies."""
        prepare_output(paths.licenses_path, paths.metadata_path)
        separator = self.config.line_separator

        with open(paths.licenses_path, 'wb') as blob_file:
            state = AggregationState(
                index=LicenseIndex(LicenseBlob(blob_file, separator)),
            )
            self.aggregate(dependencies, state, progress_callback)

        with open(paths.metadata_path, 'wb') as metadata_file:
            lines = write_metadata(state.index, metadata_file, separator)

        logger.info(
            'License aggregation complete',
            dependencies=state.stats.total, licenses=lines,
            output=str(paths.output_dir),
        )
        return state
