"""
Render cache for fully rendered template output.

Two addressing modes:

* soft (default): key folds in a structural hash of the binding value, so
  renders with different data never share an entry.
* hard: key is locale + template name + layout names only. Binding changes
  are ignored, which suits output that does not depend on per-call data.

Entries are never evicted; the cache lives as long as its engine.
"""
import dataclasses
import enum
import hashlib
import json
import logging
import threading
from collections.abc import Mapping, Set
from typing import Any, Dict, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

NONE_SENTINEL = b"\x00none"
MAX_DEPTH = 64

SCALAR_TYPES = (bool, int, float, str)


def _canonical(value: Any, depth: int, path: Tuple[int, ...]) -> Any:
    """Convert ``value`` into a JSON-serializable structure that is equal for equal values."""
    if value is None or type(value) in SCALAR_TYPES:
        return value

    type_name = f"{type(value).__module__}.{type(value).__qualname__}"

    if depth > MAX_DEPTH:
        return {"__repr__": type_name, "v": repr(value)}

    if isinstance(value, (bytes, bytearray, memoryview)):
        return {"__bytes__": type_name, "v": bytes(value).hex()}

    if isinstance(value, enum.Enum):
        return {"__scalar__": type_name, "v": repr(value.value)}

    # str and number subclasses such as Markup render differently from the base type
    if isinstance(value, SCALAR_TYPES):
        return {"__scalar__": type_name, "v": repr(value)}

    if id(value) in path:
        return {"__cycle__": type_name}
    path = path + (id(value),)

    if isinstance(value, Mapping):
        items = [
            [_key_tag(key), _canonical(item, depth + 1, path)]
            for key, item in value.items()
        ]
        items.sort(key=lambda pair: pair[0])
        return {"__map__": items}

    if isinstance(value, (list, tuple)):
        return {"__seq__": type_name, "items": [_canonical(item, depth + 1, path) for item in value]}

    if isinstance(value, Set):
        items = [_canonical(item, depth + 1, path) for item in value]
        items.sort(key=lambda item: json.dumps(item, sort_keys=True, default=repr))
        return {"__set__": items}

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        fields = {
            field.name: _canonical(getattr(value, field.name), depth + 1, path)
            for field in dataclasses.fields(value)
        }
        return {"__record__": type_name, "fields": fields}

    attributes = getattr(value, "__dict__", None)
    if isinstance(attributes, dict) and attributes and not isinstance(value, type):
        fields = {
            str(name): _canonical(item, depth + 1, path)
            for name, item in attributes.items()
        }
        return {"__record__": type_name, "fields": fields}

    # Decimal, datetime, UUID, Path and anything else opaque
    return {"__scalar__": type_name, "v": str(value)}


def _key_tag(key: Any) -> List[str]:
    if type(key) is str:
        return ["str", key]
    return [f"{type(key).__module__}.{type(key).__qualname__}", repr(key)]


def binding_fingerprint(binding: Any) -> bytes:
    """
    Deterministic byte encoding of a binding value.

    Never raises: values that cannot be encoded structurally fall back to
    their textual representation.
    """
    if binding is None:
        return NONE_SENTINEL

    if type(binding) is str:
        return b"str:" + binding.encode("utf-8", "surrogatepass")
    if type(binding) in (bytes, bytearray):
        return type(binding).__name__.encode() + b":" + bytes(binding)
    if type(binding) in (bool, int, float):
        return f"{type(binding).__name__}:{binding!r}".encode()

    try:
        encoded = json.dumps(
            _canonical(binding, 0, ()),
            sort_keys=True,
            separators=(",", ":"),
            default=repr,
        )
        return b"json:" + encoded.encode("utf-8", "surrogatepass")
    except Exception as e:
        # Key construction must not fail a render.
        logger.debug(f"Falling back to textual cache key for {type(binding).__name__}: {e}")
        return _textual_fingerprint(binding)


def _textual_fingerprint(binding: Any) -> bytes:
    try:
        text = repr(binding)
    except Exception:
        text = f"<{type(binding).__qualname__} at {id(binding):#x}>"
    return f"text:{type(binding).__qualname__}:{text}".encode("utf-8", "backslashreplace")


def build_cache_key(
    hard_cache: bool,
    locale: str,
    name: str,
    binding: Any = None,
    layouts: Sequence[str] = (),
) -> str:
    """
    Compute the render cache key.

    Args:
        hard_cache: Ignore the binding and key by names only
        locale: Render locale
        name: Base template name
        binding: Binding value (soft mode only)
        layouts: Layout names in wrap order

    Returns:
        Cache key
    """
    if hard_cache:
        return f"{locale}:{name}::{':'.join(layouts)}"

    hasher = hashlib.sha256()
    hasher.update(json.dumps([locale, name, list(layouts)]).encode("utf-8"))
    hasher.update(b"\x00")
    hasher.update(binding_fingerprint(binding))
    return hasher.hexdigest()


class _Shard:
    __slots__ = ("entries", "lock", "hits", "misses")

    def __init__(self):
        self.entries: Dict[str, str] = {}
        self.lock = threading.Lock()
        self.hits = 0
        self.misses = 0


class RenderCache:
    """
    Concurrent key -> rendered output store.

    Keys are spread over independently locked shards so unrelated keys do
    not contend on a single lock.
    """

    def __init__(self, shards: int = 16):
        if shards < 1:
            raise ValueError("shards must be at least 1")
        self._shards: List[_Shard] = [_Shard() for _ in range(shards)]

    def _shard(self, key: str) -> _Shard:
        return self._shards[hash(key) % len(self._shards)]

    def get(self, key: str) -> Optional[str]:
        """Cached output for ``key``, or None."""
        shard = self._shard(key)
        with shard.lock:
            value = shard.entries.get(key)
            if value is None:
                shard.misses += 1
            else:
                shard.hits += 1
        return value

    def put(self, key: str, value: str) -> None:
        """Store rendered output under ``key``."""
        shard = self._shard(key)
        with shard.lock:
            shard.entries[key] = value

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        shard = self._shard(key)
        with shard.lock:
            return key in shard.entries

    def __len__(self) -> int:
        total = 0
        for shard in self._shards:
            with shard.lock:
                total += len(shard.entries)
        return total

    def info(self) -> Dict[str, int]:
        """Entry and hit/miss counts across all shards."""
        entries = hits = misses = 0
        for shard in self._shards:
            with shard.lock:
                entries += len(shard.entries)
                hits += shard.hits
                misses += shard.misses
        return {"entries": entries, "hits": hits, "misses": misses, "shards": len(self._shards)}
