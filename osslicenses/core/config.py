"""Configuration management for osslicenses."""
import os
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path


def _default_repositories() -> list[Path]:
    raw = os.getenv('OSSLICENSES_REPOSITORIES')
    if raw:
        return [Path(p).expanduser() for p in raw.split(os.pathsep) if p]
    home = Path.home()
    return [
        home / '.m2' / 'repository',
        home / '.gradle' / 'caches' / 'modules-2' / 'files-2.1',
    ]


@dataclass
class PathConfig:
    """Output file locations."""
    output_dir: Path = field(
        default_factory=lambda: Path(
            os.getenv('OSSLICENSES_OUTPUT_DIR', 'build/oss-licenses'),
        ),
    )
    licenses_file_name: str = 'third_party_licenses'
    metadata_file_name: str = 'third_party_license_metadata'

    @property
    def licenses_path(self) -> Path:
        return self.output_dir / self.licenses_file_name

    @property
    def metadata_path(self) -> Path:
        return self.output_dir / self.metadata_file_name


@dataclass
class LicensesConfig:
    """Classification and extraction settings."""
    granular_base_version: int = field(
        default_factory=lambda: int(
            os.getenv('OSSLICENSES_GRANULAR_BASE_VERSION', '14'),
        ),
    )
    umbrella_groups: tuple[str, ...] = (
        'com.google.android.gms',
        'com.google.firebase',
    )
    license_artifact_suffix: str = '-license'
    line_separator: bytes = field(
        default_factory=lambda: os.linesep.encode('utf-8'),
    )

    # Entries embedded in umbrella-family artifacts
    bundled_index_entry: str = 'third_party_licenses.json'
    bundled_text_entry: str = 'third_party_licenses.txt'
    read_chunk_size: int = 1024


@dataclass
class RepositoryConfig:
    """Local repositories searched for POM files."""
    roots: list[Path] = field(default_factory=_default_repositories)


@dataclass
class OssLicensesConfig:
    paths: PathConfig = field(default_factory=PathConfig)
    licenses: LicensesConfig = field(default_factory=LicensesConfig)
    repositories: RepositoryConfig = field(default_factory=RepositoryConfig)

    @classmethod
    def load(cls) -> 'OssLicensesConfig':
        return cls()


_config: OssLicensesConfig | None = None


def get_config() -> OssLicensesConfig:
    global _config
    if _config is None:
        _config = OssLicensesConfig.load()
    return _config
