"""Dependency Injection Container."""
from pathlib import Path
from typing import Optional

from osslicenses.core.config import get_config
from osslicenses.core.config import OssLicensesConfig
from osslicenses.services.aggregation_service import AggregationService
from osslicenses.services.archive_service import ArchiveService
from osslicenses.services.pom_service import LocalRepositoryPomResolver
from osslicenses.services.pom_service import PomResolver
from osslicenses.services.pom_service import PomService
from osslicenses.services.verify_service import VerifyService


class Container:
    """Simple DI Container to manage service lifecycles."""

    _instance: Optional['Container'] = None

    def __init__(self) -> None:
        self.config: OssLicensesConfig = get_config()
        self._archive_service: ArchiveService | None = None

    @classmethod
    def get_instance(cls) -> 'Container':
        if cls._instance is None:
            cls._instance = Container()
        return cls._instance

    def get_pom_resolver(self, roots: list[Path] | None = None) -> PomResolver:
        return LocalRepositoryPomResolver(roots or self.config.repositories.roots)

    def get_archive_service(self) -> ArchiveService:
        if not self._archive_service:
            self._archive_service = ArchiveService(self.config.licenses)
        return self._archive_service

    def create_aggregation_service(self, roots: list[Path] | None = None) -> AggregationService:
        """Factory for the aggregation driver; the resolver roots may differ per run."""
        pom_service = PomService(self.get_pom_resolver(roots))
        return AggregationService(
            pom_service, self.get_archive_service(), self.config.licenses,
        )

    def get_verify_service(self) -> VerifyService:
        return VerifyService()


def get_container() -> Container:
    return Container.get_instance()
