import io
from pathlib import Path

import pytest

from templatekit.config import EngineConfiguration
from templatekit.error.exceptions import NoTemplateDirectoryError, TemplateParsingError
from templatekit.templates.compiled import BINDING_VARIABLE, JinjaTemplate, build_variables
from templatekit.templates.functions import default_functions
from templatekit.templates.loader import matches_extension, template_name, walk_templates
from templatekit.templates.registry import TemplateRegistry


def test_template_name_strips_extension():
    root = Path("/srv/templates")
    assert template_name(root, root / "pages" / "home.html") == "pages/home"
    assert template_name(root, root / "plain") == "plain"
    assert template_name(root, root / "mail" / "welcome.txt.j2") == "mail/welcome.txt"


def test_matches_extension():
    assert matches_extension(Path("a.html"), [".html"])
    assert not matches_extension(Path("a.tpl"), [".html"])
    assert matches_extension(Path("plain"), [""])


def test_walk_templates(template_dir):
    names = [template.name for template in walk_templates(template_dir, [".html"])]
    assert names == sorted(names)
    assert "layouts/base" in names
    assert "notes" not in names


def test_walk_templates_multiple_extensions(tmp_path, make_templates):
    make_templates(tmp_path, {"a.html": "a", "b.tpl": "b", "c": "c", "d.txt": "d"})
    names = [template.name for template in walk_templates(tmp_path, [".html", ".tpl", ""])]
    assert names == ["a", "b", "c"]


def test_registry_lookup(template_dir):
    registry = TemplateRegistry.from_directory(
        EngineConfiguration(template_dir=template_dir),
        default_functions(),
    )
    template = registry.lookup("pages/home")
    assert isinstance(template, JinjaTemplate)
    assert template.name == "pages/home"
    assert registry.lookup("pages/missing") is None
    assert "pages/home" in registry
    assert len(registry) == len(registry.names())


def test_registry_is_read_only():
    registry = TemplateRegistry({})
    with pytest.raises(TypeError):
        registry._templates["x"] = object()


def test_registry_missing_directory(tmp_path):
    with pytest.raises(NoTemplateDirectoryError):
        TemplateRegistry.from_directory(EngineConfiguration(template_dir=tmp_path / "missing"))


def test_registry_parse_failure(tmp_path, make_templates):
    make_templates(tmp_path, {"ok.html": "fine", "broken.html": "{{ unclosed"})
    with pytest.raises(TemplateParsingError) as exc_info:
        TemplateRegistry.from_directory(EngineConfiguration(template_dir=tmp_path))
    assert exc_info.value.template == "broken"
    assert "registry.from_directory" in str(exc_info.value)


def test_jinja_template_execute(template_dir):
    registry = TemplateRegistry.from_directory(EngineConfiguration(template_dir=template_dir))
    buffer = io.StringIO()
    registry.lookup("layouts/base").execute(buffer, {"title": "x"}, {"embed": lambda: "inner"})
    assert buffer.getvalue() == "<html>inner</html>"


def test_build_variables():
    functions = {"embed": lambda: "x"}
    variables = build_variables({"title": "A", "embed": "shadowed", 1: "skipped"}, functions)
    assert variables["title"] == "A"
    assert variables["embed"] is functions["embed"]
    assert 1 not in variables
    assert variables[BINDING_VARIABLE] == {"title": "A", "embed": "shadowed", 1: "skipped"}

    variables = build_variables(["a", "b"], {})
    assert variables == {BINDING_VARIABLE: ["a", "b"]}
