"""Controller lookup: explicit registry plus the naming convention.

The router only ever reads a ``ControllerRegistry``.  Host apps fill it
explicitly::

    controllers = ControllerRegistry()

    @controllers.controller("beer", "browse")
    async def browse(request):
        return Template("beer/browse.html", beers=await load_beers())

or reflectively from a namespace module, where ``beer`` maps to class
``Beer`` and ``brew_pub`` to ``BrewPub``::

    # myapp/controllers.py
    class Beer:
        def browse(self, request): ...
        def picture(self, request, instance): ...

    discover_controllers(menu, "myapp.controllers", controllers)

Collection handlers are called as ``handler(request)``; instance handlers
as ``handler(request, instance)``.  Either may be sync or async.
"""

from __future__ import annotations

import importlib
import logging
import re
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

from toto._errors import ConfigurationError

if TYPE_CHECKING:
    from toto._types import HandlerFunc
    from toto.menu import Menu

logger = logging.getLogger("toto.routes")

_SPLIT_RE = re.compile(r"[^0-9A-Za-z]+")


def camelize(name: str) -> str:
    """Title-case transform used for controller class names.

    ``beer`` -> ``Beer``, ``brew_pub`` -> ``BrewPub``, ``mailing-list`` -> ``MailingList``

    """
    return "".join(part.capitalize() for part in _SPLIT_RE.split(name) if part)


class ControllerRegistry:
    """Mapping of ``(object, action)`` to handler callables.

    Populated at startup, read-only once routes are registered.
    """

    __slots__ = ("_handlers",)

    def __init__(self) -> None:
        self._handlers: dict[tuple[str, str], HandlerFunc] = {}

    def add(
        self,
        object_name: str,
        action: str,
        handler: HandlerFunc,
        *,
        replace: bool = False,
    ) -> None:
        """Register *handler* for ``object_name/action``.

        Raises:
            ConfigurationError: If a handler is already registered and
                *replace* is false.

        """
        key = (object_name, action)
        if key in self._handlers and not replace:
            msg = f"Controller for {object_name}/{action} is already registered"
            raise ConfigurationError(msg)
        self._handlers[key] = handler

    def controller(
        self, object_name: str, action: str,
    ) -> Callable[[HandlerFunc], HandlerFunc]:
        """Decorator form of ``add``."""

        def decorator(func: HandlerFunc) -> HandlerFunc:
            self.add(object_name, action, func)
            return func

        return decorator

    def get(self, object_name: str, action: str) -> HandlerFunc | None:
        return self._handlers.get((object_name, action))

    def __contains__(self, key: object) -> bool:
        return key in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._handlers)


def resolve_controller(
    namespace: str | object,
    object_name: str,
    action: str,
) -> HandlerFunc | None:
    """Find ``{namespace}.{Camelized object}.{action}``.

    *namespace* is a dotted module path or an already imported module.
    Returns a handler that instantiates the controller class per call and
    invokes the method, or *None* when the class or a callable method is
    missing.

    Raises:
        ConfigurationError: If *namespace* is a module path that cannot be
            imported.

    """
    module = _import_namespace(namespace) if isinstance(namespace, str) else namespace
    cls = getattr(module, camelize(object_name), None)
    if not isinstance(cls, type):
        return None
    method = getattr(cls, action, None)
    if method is None or not callable(method):
        return None

    def controller_handler(*args: object) -> object:
        return getattr(cls(), action)(*args)

    controller_handler.__name__ = action
    controller_handler.__qualname__ = f"{cls.__qualname__}.{action}"
    return controller_handler


def discover_controllers(
    menu: Menu,
    namespace: str | object,
    registry: ControllerRegistry | None = None,
) -> ControllerRegistry:
    """Fill *registry* with every convention-named controller method in *namespace*.

    Explicit registrations already in *registry* win over discovered ones.
    """
    registry = registry if registry is not None else ControllerRegistry()
    module = _import_namespace(namespace) if isinstance(namespace, str) else namespace

    for entry in menu:
        for action in (*entry.many, *entry.one):
            if (entry.name, action) in registry:
                continue
            handler = resolve_controller(module, entry.name, action)
            if handler is not None:
                logger.debug("Using controller %s for %s/%s",
                             handler.__qualname__, entry.name, action)
                registry.add(entry.name, action, handler)

    return registry


def _import_namespace(namespace: str) -> object:
    try:
        return importlib.import_module(namespace)
    except ImportError as exc:
        msg = f"Controller namespace {namespace!r} cannot be imported: {exc}"
        raise ConfigurationError(msg) from exc
