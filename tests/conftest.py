"""Pytest configuration and fixtures."""
import pytest
from pathlib import Path

from templatekit import TemplateEngine, EngineConfiguration

TEMPLATES = {
    "pages/home.html": "<h1>{{ title }}</h1>",
    "pages/greet.html": "{{ T('Hello') }} {{ name }}",
    "pages/ctx.html": "user={{ ctx_val('user') }}",
    "pages/body.html": "{{ body }}",
    "pages/profile.html": "{{ data.user.name }}",
    "pages/list.html": "<ul>{% include 'partials/item' %}</ul>",
    "pages/shout.html": "{{ shout(title) }}",
    "pages/counter.html": "{{ counter() }}",
    "partials/item.html": "<li>{{ title }}</li>",
    "layouts/base.html": "<html>{{ embed() }}</html>",
    "layouts/app.html": "<main>{{ embed() }}</main>",
    "layouts/titled.html": "<title>{{ title }}</title>{{ embed() }}",
    "layouts/failing.html": "{{ data.missing.attr }}{{ embed() }}",
    "notes.txt": "not a template",
}


def write_templates(root: Path, templates: dict) -> Path:
    """Write ``templates`` (relative path -> source) under ``root``."""
    for relative, source in templates.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
    return root


@pytest.fixture
def make_templates():
    """Return a helper that writes a template tree."""
    return write_templates


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep TEMPLATEKIT_* variables from leaking into tests."""
    for name in ("TEMPLATEKIT_TEMPLATE_DIR", "TEMPLATEKIT_HARD_CACHE", "TEMPLATEKIT_DEFAULT_LOCALE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def template_dir(tmp_path):
    """Create a template tree with pages, partials and layouts."""
    return write_templates(tmp_path / "templates", TEMPLATES)


@pytest.fixture
def engine(template_dir):
    """Engine with default (soft) render caching."""
    return TemplateEngine(template_dir)


@pytest.fixture
def hard_cache_engine(template_dir):
    """Engine that keys rendered output by names only."""
    return TemplateEngine(EngineConfiguration(template_dir=template_dir, hard_cache=True))
