import json
import os
from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from osslicenses.core.config import LicensesConfig
from osslicenses.core.config import PathConfig
from osslicenses.core.config import RepositoryConfig
from osslicenses.core.validation import validate_dependencies_file
from osslicenses.core.validation import ValidationError
from osslicenses.models.dependency import Dependency
from osslicenses.models.dependency import load_dependencies


class TestConfig:
    """Tests for configuration defaults and environment overrides."""

    def test_path_defaults(self):
        paths = PathConfig(output_dir=Path('out'))
        assert paths.licenses_path == Path('out') / 'third_party_licenses'
        assert paths.metadata_path == Path('out') / 'third_party_license_metadata'

    def test_licenses_defaults(self, monkeypatch):
        monkeypatch.delenv('OSSLICENSES_GRANULAR_BASE_VERSION', raising=False)
        config = LicensesConfig()
        assert config.granular_base_version == 14
        assert config.line_separator == os.linesep.encode()
        assert 'com.google.firebase' in config.umbrella_groups

    def test_granular_base_from_env(self, monkeypatch):
        monkeypatch.setenv('OSSLICENSES_GRANULAR_BASE_VERSION', '20')
        assert LicensesConfig().granular_base_version == 20

    def test_repositories_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv(
            'OSSLICENSES_REPOSITORIES',
            os.pathsep.join([str(tmp_path / 'a'), str(tmp_path / 'b')]),
        )
        assert RepositoryConfig().roots == [tmp_path / 'a', tmp_path / 'b']


class TestDependencies:
    """Tests for loading the dependency list."""

    def test_load_with_file_location(self, tmp_path):
        path = tmp_path / 'deps.json'
        path.write_text(json.dumps([
            {'group': 'g', 'name': 'n', 'version': '1', 'fileLocation': '/a/n.jar', 'extra': 1},
        ]))
        deps = load_dependencies(path)
        assert deps == [Dependency(group='g', name='n', version='1', artifact_path='/a/n.jar')]
        assert deps[0].license_key == 'g:n'
        assert deps[0].coordinates == 'g:n:1'

    def test_artifact_path_alias(self):
        dep = Dependency.model_validate({
            'group': 'g', 'name': 'n', 'version': '1', 'artifactPath': '/x.aar',
        })
        assert dep.artifact_path == Path('/x.aar')

    def test_missing_field_is_descriptive(self, tmp_path):
        path = tmp_path / 'deps.json'
        path.write_text(json.dumps([{'group': 'g', 'name': 'n', 'fileLocation': '/a'}]))
        with pytest.raises(PydanticValidationError, match='version'):
            load_dependencies(path)

    def test_records_are_immutable(self):
        dep = Dependency(group='g', name='n', version='1', artifact_path='/a')
        with pytest.raises(PydanticValidationError):
            dep.version = '2'


class TestValidateDependenciesFile:
    """Tests for dependency file validation."""

    def test_valid(self, tmp_path):
        path = tmp_path / 'deps.json'
        path.write_text('[]')
        assert validate_dependencies_file(path) is True

    def test_missing(self, tmp_path):
        with pytest.raises(ValidationError, match='does not exist'):
            validate_dependencies_file(tmp_path / 'nope.json')

    def test_empty(self, tmp_path):
        path = tmp_path / 'deps.json'
        path.touch()
        with pytest.raises(ValidationError, match='empty'):
            validate_dependencies_file(path)

    def test_not_an_array(self, tmp_path):
        path = tmp_path / 'deps.json'
        path.write_text('{"group": "g"}')
        with pytest.raises(ValidationError, match='JSON array'):
            validate_dependencies_file(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / 'deps.json'
        path.write_text('[{')
        with pytest.raises(ValidationError, match='Invalid JSON'):
            validate_dependencies_file(path)
