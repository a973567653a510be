"""
Compiled template capability and its Jinja2 backend.

The engine only relies on :class:`CompiledTemplate`; any backend that can
write a template's output into a text buffer can be plugged in.
"""
from contextvars import ContextVar
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, TextIO, runtime_checkable

from jinja2 import DictLoader, Environment, StrictUndefined, Template, Undefined

from ..config.configuration import EngineConfiguration
from .functions import RESERVED_FUNCTIONS

BINDING_VARIABLE = "data"

# Functions of the render currently executing in this thread or task
_render_functions: ContextVar[Optional[Mapping[str, Callable[..., Any]]]] = ContextVar(
    "templatekit_render_functions", default=None
)


@runtime_checkable
class CompiledTemplate(Protocol):
    """Executable template bound to a logical name.

    ``execute`` must be safe to call concurrently as long as each call passes
    its own ``functions`` mapping.
    """

    name: str

    def execute(self, buffer: TextIO, data: Any, functions: Mapping[str, Callable[..., Any]]) -> None:
        ...


class JinjaTemplate:
    """CompiledTemplate backed by a :class:`jinja2.Template`."""

    def __init__(self, name: str, template: Template):
        self.name = name
        self._template = template

    def execute(self, buffer: TextIO, data: Any, functions: Mapping[str, Callable[..., Any]]) -> None:
        token = _render_functions.set(functions)
        try:
            for chunk in self._template.generate(build_variables(data, functions)):
                buffer.write(chunk)
        finally:
            _render_functions.reset(token)

    def __repr__(self) -> str:
        return f"<JinjaTemplate {self.name!r}>"


class RenderFunction:
    """
    Environment global for a function the engine rebinds on every render.

    Templates pulled in with ``{% import %}`` do not see the render variables,
    only the environment globals, so the current binding is looked up when
    the function is called.
    """

    def __init__(self, name: str, fallback: Callable[..., Any]):
        self.name = name
        self.fallback = fallback

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        functions = _render_functions.get()
        fn = functions.get(self.name, self.fallback) if functions is not None else self.fallback
        return fn(*args, **kwargs)

    def __repr__(self) -> str:
        return f"<RenderFunction {self.name!r}>"


def build_variables(data: Any, functions: Mapping[str, Callable[..., Any]]) -> Dict[str, Any]:
    """
    Template variables for one execution.

    Mapping bindings are spread as top-level variables, the binding itself is
    always available as ``data``, and per-call functions are applied last.
    """
    variables: Dict[str, Any] = {}
    if isinstance(data, Mapping):
        variables.update((key, value) for key, value in data.items() if isinstance(key, str))
    variables[BINDING_VARIABLE] = data
    variables.update(functions)
    return variables


def create_environment(
    sources: Mapping[str, str],
    config: EngineConfiguration,
    functions: Optional[Mapping[str, Callable[..., Any]]] = None,
) -> Environment:
    """
    Create the Jinja2 environment holding every registered template source.

    Templates reference each other (include/extends/import) by logical name.
    Functions become globals. Per-render functions are registered as
    :class:`RenderFunction` dispatchers. Other functions also become filters
    unless they shadow a built-in filter.
    """
    env = Environment(
        loader=DictLoader(dict(sources)),
        extensions=['jinja2.ext.do', 'jinja2.ext.loopcontrols'],
        autoescape=config.autoescape,
        undefined=StrictUndefined if config.strict_undefined else Undefined,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )

    for name, fn in (functions or {}).items():
        if name in RESERVED_FUNCTIONS:
            env.globals[name] = RenderFunction(name, fn)
            continue
        env.globals[name] = fn
        if name not in env.filters:
            env.filters[name] = fn

    return env
