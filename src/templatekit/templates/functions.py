"""
Base function set exposed to every template.

Per-render functions (``T``, ``ctx_val``, ``embed``) are registered here as
placeholders and rebound by the engine on each render.
"""
import json
import uuid
from datetime import datetime
from typing import Any, Callable, Dict

import yaml
from markupsafe import Markup

from ..context import ctx_value, get_translator

TRANSLATE_FUNCTION = "T"
CONTEXT_FUNCTION = "ctx_val"
EMBED_FUNCTION = "embed"

# Names the engine rebinds per render
RESERVED_FUNCTIONS = frozenset({TRANSLATE_FUNCTION, CONTEXT_FUNCTION, EMBED_FUNCTION})


def _embed_placeholder() -> Markup:
    """Outside a layout there is nothing to embed."""
    return Markup("")


def embed_function(content: str) -> Callable[[], Markup]:
    """Bind ``embed()`` to the output of the previous render step."""
    markup = Markup(content)

    def embed() -> Markup:
        return markup
    return embed


def default_functions() -> Dict[str, Callable[..., Any]]:
    """Return a fresh copy of the base function set."""
    return {
        # String functions
        'upper': lambda s: s.upper() if s else '',
        'lower': lambda s: s.lower() if s else '',
        'title': lambda s: s.title() if s else '',
        'trim': lambda s: s.strip() if s else '',
        'replace': lambda s, old, new: s.replace(old, new) if s else '',
        'split': lambda s, sep=None: s.split(sep) if s else [],
        'join': lambda seq, sep='': sep.join(str(item) for item in seq) if seq else '',
        'default': lambda v, d='': v if v else d,

        # Serialization
        'to_json': lambda obj: json.dumps(obj, default=str),
        'to_yaml': lambda obj: yaml.safe_dump(obj, default_flow_style=False),

        # Misc
        'now': datetime.now,
        'uuid': lambda: str(uuid.uuid4()),
        'dict': dict,

        # Per-render placeholders
        TRANSLATE_FUNCTION: get_translator(None, ''),
        CONTEXT_FUNCTION: ctx_value(None),
        EMBED_FUNCTION: _embed_placeholder,
    }
