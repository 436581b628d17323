"""Per-request navigation context.

Every generated page builds one ``RequestContext`` from its route and the
request's ``key`` path parameter.  Layout templates read it to render the
object tab bar and the action tab row.

Thread Safety:
    A RequestContext belongs to exactly one request and is never stored.
    The menu and model factory it references are immutable.

"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING, Any

from toto._types import TAB_FOR_ARITY

if TYPE_CHECKING:
    from toto._types import Arity, ModelFactory, TabRow
    from toto.menu import Menu


@dataclass(frozen=True)
class RequestContext:
    """Navigation state for one in-flight request.

    Attributes:
        object: Active menu object.
        action: Active action.
        arity: ``"collection"`` or ``"instance"``.
        key: Instance key for instance pages, else *None*.
        menu: The application menu (for tab rows).
        model_factory: Builds ``instance`` from ``key``.
        prefix: Route prefix, for building links.
        controller_hint: Conventional controller location, if a namespace
            is configured.

    """

    object: str
    action: str
    arity: Arity
    key: str | None
    menu: Menu
    model_factory: ModelFactory
    prefix: str = ""
    controller_hint: str | None = None

    @property
    def tab(self) -> TabRow:
        """Which tab row is active: ``"many"`` or ``"one"``."""
        return TAB_FOR_ARITY[self.arity]

    @property
    def objects(self) -> tuple[str, ...]:
        """Every object, in nav order."""
        return self.menu.names

    @property
    def actions(self) -> tuple[str, ...]:
        """Actions of the active object's active tab row."""
        return self.menu.actions(self.object, self.tab)

    @cached_property
    def instance(self) -> Any:
        """The instance value object, built on first access."""
        if self.key is None:
            return None
        return self.model_factory(self.key)

    def template_context(self) -> dict[str, Any]:
        """Variables handed to the layout and page templates."""
        context: dict[str, Any] = {
            "object": self.object,
            "action": self.action,
            "tab": self.tab,
            "objects": self.objects,
            "actions": self.actions,
            "prefix": self.prefix,
            "controller_hint": self.controller_hint,
            "groups": [
                {"title": item, "objects": [e.name for e in entries]}
                for item, entries in self.menu.groups()
            ],
        }
        if self.key is not None:
            context["key"] = self.key
            context["instance"] = self.instance
        return context
