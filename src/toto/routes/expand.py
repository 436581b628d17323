"""Menu expansion: turn a Menu into a flat route table.

Pure data transform, no filesystem and no app::

    menu = parse_menu(["beer", {"many": ["search", "browse"], "one": ["picture"]}])
    expand(menu)
    # /beer/search             collection  beer/search
    # /beer/browse             collection  beer/browse
    # /beer                    -> /beer/search
    # /beer/picture/{key:path} instance    beer/picture
    # /beer/default/{key:path} -> /beer/picture/{key}
    # /                        -> /beer

Ordering is load-bearing: the first ``many`` action is the object's
default and the first object is the landing page.
"""

import logging
from dataclasses import dataclass

from toto._types import Arity
from toto.menu import DEFAULT_ALIAS, Menu, MenuEntry
from toto.routes.controllers import camelize

logger = logging.getLogger("toto.routes")

# Path parameter carrying the instance key (catch-all: may contain "/")
KEY_PARAM = "key"
_KEY_SEGMENT = "{" + KEY_PARAM + ":path}"

ROOT_ROUTE_NAME = "toto:root"


@dataclass(frozen=True, slots=True)
class RouteDescriptor:
    """One generated route.

    Attributes:
        path: chirp path pattern (``/beer/picture/{key:path}``).
        name: Route name, ``object/action`` by convention.
        object_name: Menu object, or *None* for the root redirect.
        action_name: Action, or *None* for redirects.
        arity: ``"collection"`` or ``"instance"`` for pages, *None* for
            redirects.
        redirect_to: Target path for redirects; may contain ``{key}``.
        controller_hint: Conventional controller location, shown on
            scaffold pages (``myapp.controllers.Beer.browse``).

    """

    path: str
    name: str
    object_name: str | None = None
    action_name: str | None = None
    arity: Arity | None = None
    redirect_to: str | None = None
    controller_hint: str | None = None

    @property
    def is_redirect(self) -> bool:
        return self.redirect_to is not None


def join_path(prefix: str, *segments: str) -> str:
    """Join *segments* under *prefix*: ``join_path("/app", "beer")`` -> ``/app/beer``."""
    base = "/" + prefix.strip("/") if prefix.strip("/") else ""
    if not segments:
        return base + "/"
    return base + "/" + "/".join(segments)


def expand(
    menu: Menu,
    prefix: str = "",
    namespace: str | None = None,
) -> tuple[RouteDescriptor, ...]:
    """Expand *menu* into route descriptors.

    Per object, in menu order: one collection route per ``many`` action,
    a redirect from ``/{object}`` to the first of them, one instance route
    per ``one`` action, and a ``/{object}/default/{key}`` alias to the
    first ``one`` action.  Objects without ``one`` actions get no alias
    (logged as a warning).  A single root redirect to the first object
    comes last.

    The result depends only on the arguments; expanding the same menu twice
    yields equal tuples.

    """
    descriptors: list[RouteDescriptor] = []
    for entry in menu:
        descriptors.extend(_expand_entry(entry, prefix, namespace))

    descriptors.append(RouteDescriptor(
        path=join_path(prefix),
        name=ROOT_ROUTE_NAME,
        redirect_to=join_path(prefix, menu.first.name),
    ))
    return tuple(descriptors)


def _expand_entry(
    entry: MenuEntry,
    prefix: str,
    namespace: str | None,
) -> list[RouteDescriptor]:
    obj = entry.name
    routes: list[RouteDescriptor] = []

    for action in entry.many:
        routes.append(RouteDescriptor(
            path=join_path(prefix, obj, action),
            name=f"{obj}/{action}",
            object_name=obj,
            action_name=action,
            arity="collection",
            controller_hint=_hint(namespace, obj, action),
        ))

    routes.append(RouteDescriptor(
        path=join_path(prefix, obj),
        name=obj,
        object_name=obj,
        redirect_to=join_path(prefix, obj, entry.default_action),
    ))

    for action in entry.one:
        routes.append(RouteDescriptor(
            path=join_path(prefix, obj, action, _KEY_SEGMENT),
            name=f"{obj}/{action}",
            object_name=obj,
            action_name=action,
            arity="instance",
            controller_hint=_hint(namespace, obj, action),
        ))

    first_one = entry.default_instance_action
    if first_one is None:
        logger.warning(
            "Menu object %r has no 'one' actions; skipping %s route",
            obj, join_path(prefix, obj, DEFAULT_ALIAS, _KEY_SEGMENT),
        )
    else:
        routes.append(RouteDescriptor(
            path=join_path(prefix, obj, DEFAULT_ALIAS, _KEY_SEGMENT),
            name=f"{obj}/{DEFAULT_ALIAS}",
            object_name=obj,
            redirect_to=join_path(prefix, obj, first_one, "{" + KEY_PARAM + "}"),
        ))

    return routes


def _hint(namespace: str | None, obj: str, action: str) -> str | None:
    if not namespace:
        return None
    return f"{namespace}.{camelize(obj)}.{action}"
