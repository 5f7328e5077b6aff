import io

import pytest
import structlog
from rich.console import Console

from osslicenses.core.logging import drop_style_processor
from osslicenses.core.logging import RichConsoleRenderer
from osslicenses.core.logging import setup_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


def test_renderer_prints_key_values():
    buffer = io.StringIO()
    renderer = RichConsoleRenderer(Console(file=buffer, width=200, color_system=None))
    event = {
        'event': 'Dependency has no POM file',
        'level': 'warning',
        'logger': 'pom_service',
        'dependency': 'g:n:1',
    }
    with pytest.raises(structlog.DropEvent):
        renderer(None, 'warning', event)

    output = buffer.getvalue()
    assert 'pom_service' in output
    assert 'warning' in output
    assert "dependency='g:n:1'" in output


def test_drop_style_processor():
    assert drop_style_processor(None, 'info', {'event': 'x', '_style': 'dim'}) == {'event': 'x'}


def test_setup_logging_production_uses_json(monkeypatch):
    monkeypatch.setenv('ENV', 'production')
    setup_logging('DEBUG')
    processors = structlog.get_config()['processors']
    assert isinstance(processors[-1], structlog.processors.JSONRenderer)


def test_setup_logging_development_uses_rich(monkeypatch):
    monkeypatch.delenv('ENV', raising=False)
    setup_logging('INFO')
    processors = structlog.get_config()['processors']
    assert isinstance(processors[-1], RichConsoleRenderer)
