"""
Directory walk over template files.
"""
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TemplateSource:
    """A template file found under the template root."""

    name: str
    path: Path
    source: str


def template_name(root: Path, path: Path) -> str:
    """Logical name: path relative to root, forward slashes, extension stripped."""
    relative = path.relative_to(root).as_posix()
    suffix = path.suffix
    if suffix:
        relative = relative[: -len(suffix)]
    return relative


def matches_extension(path: Path, extensions: Iterable[str]) -> bool:
    """Check a file against the recognized extensions; ``""`` matches extension-less files."""
    return path.suffix in set(extensions)


def walk_templates(root: Union[str, Path], extensions: Iterable[str]) -> Iterator[TemplateSource]:
    """
    Yield every template file under ``root`` in a stable order.

    Args:
        root: Template root directory
        extensions: Recognized file extensions

    Yields:
        TemplateSource for each matching file
    """
    root = Path(root)
    extensions = list(extensions)

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if not matches_extension(path, extensions):
                continue

            with open(path, 'r', encoding='utf-8') as f:
                source = f.read()

            name = template_name(root, path)
            logger.debug(f"Found template {name} at {path}")
            yield TemplateSource(name=name, path=path, source=source)
