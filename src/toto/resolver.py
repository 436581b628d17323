"""Template resolution: find a hand-written page or fall back to a scaffold.

Resolution order (first match wins):
    1. ``{object}/{key}/{action}.html`` (instance pages with a concrete key).
    2. ``{object}/{action}.html``.
    3. ``{action}.html``.
    4. ``toto/single.html`` or ``toto/plural.html`` (the bundled scaffold).

``FileSystemTemplateResolver`` checks for files under the application's
template directory.  Any object with a matching ``resolve`` method can be
passed to ``Toto`` instead, which keeps the route expansion testable
without a filesystem.

Thread Safety:
    Resolution is a read-only existence check with no shared mutable
    state.  Safe to call concurrently.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from toto._errors import TemplateMissing

if TYPE_CHECKING:
    from toto._types import Arity

logger = logging.getLogger("toto.resolver")

TEMPLATE_SUFFIX = ".html"
SCAFFOLD_TEMPLATES: dict[str, str] = {
    "collection": "toto/plural.html",
    "instance": "toto/single.html",
}


@dataclass(frozen=True, slots=True)
class TemplateRef:
    """A resolved template name.

    Attributes:
        name: Template name relative to the loader root.
        scaffold: True when this is the generic fallback page.

    """

    name: str
    scaffold: bool = False


class TemplateResolver(Protocol):
    """Capability that maps a route to the template it should render."""

    def resolve(
        self,
        object_name: str,
        action: str,
        arity: Arity,
        key: str | None = None,
    ) -> TemplateRef: ...


def scaffold_for(arity: Arity) -> TemplateRef:
    """The bundled fallback page for *arity*."""
    return TemplateRef(SCAFFOLD_TEMPLATES[arity], scaffold=True)


def candidates(
    object_name: str,
    action: str,
    arity: Arity,
    key: str | None = None,
) -> list[str]:
    """Conventional template names for a route, most specific first."""
    names: list[str] = []
    if arity == "instance" and key and _safe_key(key):
        names.append(f"{object_name}/{key}/{action}{TEMPLATE_SUFFIX}")
    names.append(f"{object_name}/{action}{TEMPLATE_SUFFIX}")
    names.append(f"{action}{TEMPLATE_SUFFIX}")
    return names


class FileSystemTemplateResolver:
    """Resolve templates by probing a template directory.

    Args:
        root: The application's template directory.  It need not exist;
            a missing directory resolves everything to scaffolds.

    """

    __slots__ = ("_root",)

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    def find(
        self,
        object_name: str,
        action: str,
        arity: Arity,
        key: str | None = None,
    ) -> TemplateRef:
        """Return the first existing conventional template.

        Raises:
            TemplateMissing: If no candidate exists.

        """
        tried = candidates(object_name, action, arity, key)
        for name in tried:
            path = (self._root / name).resolve()
            if path.is_relative_to(self._root) and path.is_file():
                return TemplateRef(name)
        msg = f"No template for {object_name}/{action} (tried {', '.join(tried)})"
        raise TemplateMissing(msg)

    def resolve(
        self,
        object_name: str,
        action: str,
        arity: Arity,
        key: str | None = None,
    ) -> TemplateRef:
        """Like ``find`` but falls back to the scaffold page."""
        try:
            return self.find(object_name, action, arity, key)
        except TemplateMissing as exc:
            logger.debug("%s; using scaffold", exc)
            return scaffold_for(arity)


def _safe_key(key: str) -> bool:
    """Keys used in template paths must stay inside their object directory."""
    parts = key.split("/")
    return all(p and p not in (".", "..") for p in parts) and "\\" not in key
