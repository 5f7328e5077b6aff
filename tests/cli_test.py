import json
import re
import zipfile
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from osslicenses.__main__ import app
from osslicenses.core.container import Container

runner = CliRunner()


@pytest.fixture(autouse=True)
def fresh_container():
    Container._instance = None
    with patch('osslicenses.__main__.setup_logging'):
        yield
    Container._instance = None


@pytest.fixture
def workspace(tmp_path):
    repo = tmp_path / 'repo'
    pom = repo / 'com' / 'example' / 'libfoo' / '1.0' / 'libfoo-1.0.pom'
    pom.parent.mkdir(parents=True)
    pom.write_text(
        '<project><licenses><license><name>MIT</name>'
        '<url>https://x/MIT</url></license></licenses></project>',
    )

    artifact = tmp_path / 'play-services-base-15.0.aar'
    with zipfile.ZipFile(artifact, 'w') as zf:
        zf.writestr('third_party_licenses.json', json.dumps({'A': {'start': 0, 'length': 5}}))
        zf.writestr('third_party_licenses.txt', 'HELLOworld')

    deps = tmp_path / 'dependencies.json'
    deps.write_text(json.dumps([
        {'group': 'com.example', 'name': 'libfoo', 'version': '1.0', 'fileLocation': str(tmp_path / 'libfoo-1.0.jar')},
        {'group': 'com.google.android.gms', 'name': 'play-services-base', 'version': '15.0', 'fileLocation': str(artifact)},
    ]))
    return tmp_path


def test_generate_and_verify(workspace):
    out = workspace / 'out'
    result = runner.invoke(app, [
        'generate', '-d', str(workspace / 'dependencies.json'),
        '-o', str(out), '-r', str(workspace / 'repo'),
    ])
    assert result.exit_code == 0, result.output
    assert 'License Summary' in result.output
    assert re.search(r'Licenses written\W+2\b', result.output)

    metadata = (out / 'third_party_license_metadata').read_text()
    assert 'com.example:libfoo' in metadata
    assert 'com.google.android.gms:play-services-base A' in metadata

    result = runner.invoke(app, ['verify', '-o', str(out)])
    assert result.exit_code == 0, result.output
    assert '2 licenses' in result.output


def test_generate_missing_dependency_file(tmp_path):
    result = runner.invoke(app, [
        'generate', '-d', str(tmp_path / 'absent.json'), '-o', str(tmp_path / 'out'),
    ])
    assert result.exit_code == 1
    assert 'File does not exist' in result.output


def test_generate_rejects_bad_record(tmp_path):
    deps = tmp_path / 'dependencies.json'
    deps.write_text(json.dumps([{'group': 'g', 'name': 'n'}]))
    result = runner.invoke(app, [
        'generate', '-d', str(deps), '-o', str(tmp_path / 'out'),
    ])
    assert result.exit_code == 1
    assert 'Validation Error' in result.output


def test_verify_reports_out_of_range(tmp_path):
    (tmp_path / 'third_party_licenses').write_bytes(b'abc\n')
    (tmp_path / 'third_party_license_metadata').write_text('0:3 a\n2:10 b\n')
    result = runner.invoke(app, ['verify', '-o', str(tmp_path)])
    assert result.exit_code == 1
    assert 'exceeds blob size' in result.output


def test_no_args_shows_help():
    result = runner.invoke(app, [])
    assert 'generate' in result.output


def test_version():
    result = runner.invoke(app, ['--version'])
    assert result.exit_code == 0
    assert result.output.startswith('osslicenses ')
