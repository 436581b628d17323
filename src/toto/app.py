"""Toto application: wires an expanded menu into a Chirp app.

``Toto`` computes the route table once (expand, then bind templates and
controllers) and registers it on a not-yet-frozen Chirp ``App``.  The
public helpers ``create_app`` and ``serve`` are the primary entry points::

    import toto

    app = toto.create_app([
        "beer", {"many": ["search", "browse"], "one": ["picture"]},
        "pub",  {"many": ["map"], "one": ["info"]},
    ])
    app.run()

Routes registered on the app before ``Toto.register()`` take precedence
over generated ones with the same path.
"""

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any
from urllib.parse import quote

from chirp import App, AppConfig, Redirect, Request, Template

from toto._errors import ConfigurationError
from toto._types import Arity, HandlerFunc
from toto.config import TotoConfig
from toto.config_loader import find_config_file, load_config
from toto.context import RequestContext
from toto.menu import Menu, parse_menu
from toto.resolver import FileSystemTemplateResolver, TemplateRef, TemplateResolver
from toto.routes.controllers import ControllerRegistry, discover_controllers
from toto.routes.expand import KEY_PARAM, RouteDescriptor, expand, join_path
from toto.theme import (
    ASSET_URL_SEGMENT,
    bundled_asset_dir,
    bundled_template_dir,
    get_template_dirs,
)

logger = logging.getLogger("toto.routes")

# Template global marking an app that already carries toto's globals/assets
_REGISTERED_MARKER = "toto_config"


@dataclass(frozen=True, slots=True)
class BoundRoute:
    """A route descriptor with its template and handler resolved.

    Attributes:
        descriptor: The generated route.
        template: Template resolved at registration time (*None* for
            redirects).
        handler: Controller bound to the route, or *None* to render
            ``template`` directly.

    """

    descriptor: RouteDescriptor
    template: TemplateRef | None = None
    handler: HandlerFunc | None = None


class Toto:
    """Menu-driven route generator for a Chirp app.

    Args:
        menu: A ``Menu`` or any shape accepted by ``parse_menu``.
        config: Toto configuration (defaults to ``TotoConfig()``).
        controllers: Explicit controller registry.  When
            ``config.namespace`` is set, convention-named controllers are
            discovered into it (explicit entries win).
        resolver: Template resolver (defaults to probing
            ``config.templates_path``).

    Raises:
        ConfigurationError: On an invalid menu or unimportable namespace.
            Nothing is registered in that case.

    """

    __slots__ = ("_config", "_controllers", "_descriptors", "_menu", "_resolver", "_routes")

    def __init__(
        self,
        menu: Menu | object,
        config: TotoConfig | None = None,
        *,
        controllers: ControllerRegistry | None = None,
        resolver: TemplateResolver | None = None,
    ) -> None:
        self._menu = parse_menu(menu)
        self._config = config or TotoConfig()
        self._controllers = controllers if controllers is not None else ControllerRegistry()
        if self._config.namespace:
            discover_controllers(self._menu, self._config.namespace, self._controllers)
        self._resolver = resolver or FileSystemTemplateResolver(self._config.templates_path)
        self._descriptors = expand(self._menu, self._config.prefix, self._config.namespace)
        self._routes = tuple(self._bind(d) for d in self._descriptors)

    @property
    def menu(self) -> Menu:
        return self._menu

    @property
    def config(self) -> TotoConfig:
        return self._config

    @property
    def descriptors(self) -> tuple[RouteDescriptor, ...]:
        """Route descriptors in registration order."""
        return self._descriptors

    @property
    def routes(self) -> tuple[BoundRoute, ...]:
        """Bound routes in registration order."""
        return self._routes

    def _bind(self, descriptor: RouteDescriptor) -> BoundRoute:
        if descriptor.is_redirect:
            return BoundRoute(descriptor)
        obj, action, arity = descriptor.object_name, descriptor.action_name, descriptor.arity
        assert obj is not None and action is not None and arity is not None
        return BoundRoute(
            descriptor,
            template=self._resolver.resolve(obj, action, arity),
            handler=self._controllers.get(obj, action),
        )

    # -- Navigation for hand-written routes --

    def context(
        self, object_name: str, action: str, key: str | None = None,
    ) -> dict[str, Any]:
        """Navigation variables for a page standing in for ``object_name/action``.

        Gives routes the app defines itself the same ``object``, ``tab``,
        ``actions`` and ``instance`` variables generated pages receive, so
        they can extend ``toto/layout.html``.

        Raises:
            ConfigurationError: If the menu has no such object and action.

        """
        arity = self._arity_of(object_name, action, key)
        return self._request_context(object_name, action, arity, key).template_context()

    def page(self, object_name: str, action: str) -> Callable[[HandlerFunc], HandlerFunc]:
        """Decorate a hand-written handler to render as ``object_name/action``.

        The handler is called as ``handler(request)``.  A ``Template`` result
        gets the navigation context merged in underneath its own values; the
        ``key`` path parameter, when the route has one, selects the instance::

            @app.route("/some/crazy/url")
            @plugin.page("beer", "search")
            async def crazy(request):
                return Template("crazy.html")

        Raises:
            ConfigurationError: If the menu has no such object and action.

        """
        self._arity_of(object_name, action, None)

        def decorator(handler: HandlerFunc) -> HandlerFunc:
            async def page_wrapper(request: Request) -> object:
                result = await _call(handler, request)
                if isinstance(result, Template):
                    key = request.path_params.get(KEY_PARAM)
                    nav = self.context(object_name, action, key)
                    return Template(result.name, **{**nav, **result.context})
                return result

            page_wrapper.__name__ = getattr(handler, "__name__", "page_wrapper")
            page_wrapper.__qualname__ = getattr(handler, "__qualname__", page_wrapper.__name__)
            return page_wrapper

        return decorator

    def _arity_of(self, object_name: str, action: str, key: str | None) -> Arity:
        if object_name not in self._menu:
            msg = f"Unknown menu object {object_name!r}"
            raise ConfigurationError(msg)
        entry = self._menu[object_name]
        if key is not None and action in entry.one:
            return "instance"
        if action in entry.many:
            return "collection"
        if action in entry.one:
            return "instance"
        msg = f"Menu object {object_name!r} has no action {action!r}"
        raise ConfigurationError(msg)

    def _request_context(
        self,
        object_name: str,
        action: str,
        arity: Arity,
        key: str | None,
        controller_hint: str | None = None,
    ) -> RequestContext:
        return RequestContext(
            object=object_name,
            action=action,
            arity=arity,
            key=key,
            menu=self._menu,
            model_factory=self._config.model_factory,
            prefix=self._config.prefix,
            controller_hint=controller_hint,
        )

    # -- Registration --

    def register(self, app: App) -> tuple[BoundRoute, ...]:
        """Register generated routes, template globals and assets on *app*.

        Paths the app already routes are left alone.  Registering the same
        menu twice adds nothing the second time.

        Returns the routes actually registered.

        Raises:
            ConfigurationError: If *app* has already been frozen.

        """
        if app._frozen:
            msg = "Cannot register toto routes on an app that is already serving requests"
            raise ConfigurationError(msg)

        existing = {pending.path for pending in app._pending_routes}
        registered: list[BoundRoute] = []

        for route in self._routes:
            desc = route.descriptor
            if desc.path in existing:
                logger.debug("Route %s already defined; not adding %s", desc.path, desc.name)
                continue
            logger.debug("Adding route for %s (%s)", desc.name, desc.path)
            app.route(desc.path, name=desc.name, referenced=True)(self._make_handler(route))
            existing.add(desc.path)
            registered.append(route)

        if _REGISTERED_MARKER not in app._template_globals:
            self._wire_template_dirs(app)
            self._wire_template_globals(app)
            self._mount_assets(app)

        return tuple(registered)

    def _wire_template_dirs(self, app: App) -> None:
        """Append the bundled theme to the app's template search path."""
        cfg = app.config
        bundled = bundled_template_dir()
        known = {Path(cfg.template_dir).resolve(), *(Path(d).resolve() for d in cfg.component_dirs)}
        if bundled.resolve() not in known:
            app.config = replace(cfg, component_dirs=(*cfg.component_dirs, bundled))

    def _wire_template_globals(self, app: App) -> None:
        """Expose menu accessors to every template, toto pages or not."""
        menu = self._menu
        prefix = self._config.prefix

        def toto_objects() -> tuple[str, ...]:
            return menu.names

        def toto_actions(object_name: str, mode: str = "many") -> tuple[str, ...]:
            return menu.actions(object_name, "one" if mode == "one" else "many")

        def toto_url(
            object_name: str, action: str | None = None, key: str | None = None,
        ) -> str:
            segments = [object_name]
            if action is not None:
                segments.append(action)
            if key is not None:
                segments.append(quote(str(key), safe="/"))
            return join_path(prefix, *segments)

        app.template_global("toto_objects")(toto_objects)
        app.template_global("toto_actions")(toto_actions)
        app.template_global("toto_url")(toto_url)
        app._template_globals[_REGISTERED_MARKER] = self._config

    def _mount_assets(self, app: App) -> None:
        """Serve the bundled stylesheet under ``{prefix}/toto``."""
        from chirp.middleware import StaticFiles

        app.add_middleware(StaticFiles(
            directory=bundled_asset_dir(),
            prefix=join_path(self._config.prefix, ASSET_URL_SEGMENT),
        ))

    # -- Handlers --

    def _make_handler(self, route: BoundRoute) -> HandlerFunc:
        if route.descriptor.is_redirect:
            return _make_redirect_handler(route.descriptor)
        return self._make_page_handler(route)

    def _make_page_handler(self, route: BoundRoute) -> HandlerFunc:
        """Create the Chirp handler for a collection or instance page.

        Builds a fresh ``RequestContext`` per request.  A bound controller
        is called first; a ``None`` result renders the resolved template
        and a ``Template`` result gets the navigation context merged in
        underneath its own values.

        """
        desc = route.descriptor
        obj, action, arity = desc.object_name, desc.action_name, desc.arity
        assert obj is not None and action is not None and arity is not None
        resolver = self._resolver
        controller = route.handler
        static_template = route.template
        per_request = arity == "instance" and self._config.instance_templates

        async def page_handler(request: Request) -> object:
            key = request.path_params.get(KEY_PARAM) if arity == "instance" else None
            ctx = self._request_context(obj, action, arity, key, desc.controller_hint)
            template = (
                resolver.resolve(obj, action, arity, key) if per_request else static_template
            )
            assert template is not None
            nav = {
                **ctx.template_context(),
                "toto_template": template.name,
                "scaffold": template.scaffold,
            }

            if controller is None:
                return Template(template.name, **nav)

            args = (request, ctx.instance) if arity == "instance" else (request,)
            result = await _call(controller, *args)
            if result is None:
                return Template(template.name, **nav)
            if isinstance(result, Template):
                return Template(result.name, **{**nav, **result.context})
            return result

        page_handler.__name__ = f"toto_{arity}_{obj}_{action}"
        page_handler.__qualname__ = f"Toto.{page_handler.__name__}"
        return page_handler


async def _call(handler: HandlerFunc, *args: object) -> object:
    """Call a sync or async handler."""
    result = handler(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


def _make_redirect_handler(desc: RouteDescriptor) -> HandlerFunc:
    target = desc.redirect_to
    assert target is not None
    placeholder = "{" + KEY_PARAM + "}"

    async def redirect_handler(request: Request) -> Redirect:
        url = target
        if placeholder in url:
            url = url.replace(placeholder, quote(request.path_params[KEY_PARAM], safe="/"))
        return Redirect(url)

    redirect_handler.__name__ = f"toto_redirect_{desc.name.replace('/', '_').replace(':', '_')}"
    redirect_handler.__qualname__ = f"Toto.{redirect_handler.__name__}"
    return redirect_handler


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def create_app(
    menu: Menu | object,
    config: TotoConfig | None = None,
    *,
    controllers: ControllerRegistry | None = None,
    resolver: TemplateResolver | None = None,
) -> App:
    """Create a Chirp App with the toto routes registered.

    The app's template directory is ``config.templates_path`` with the
    bundled theme as a fallback.

    """
    config = config or TotoConfig()
    plugin = Toto(menu, config, controllers=controllers, resolver=resolver)
    app = _create_chirp_app(config)
    plugin.register(app)
    return app


def _create_chirp_app(config: TotoConfig) -> App:
    """Create a Chirp App using the user's templates, then the bundled theme."""
    template_dir, *fallbacks = get_template_dirs(config.templates_path)
    return App(config=AppConfig(
        template_dir=template_dir,
        component_dirs=tuple(fallbacks),
        debug=config.debug,
        host=config.host,
        port=config.port,
    ))


def load_app(root: str | Path = ".", **overrides: object) -> tuple[Toto, App]:
    """Build the plugin and app from ``toto.yaml`` / ``toto.toml`` in *root*.

    Raises:
        ConfigurationError: If no config file declares a menu.

    """
    root = Path(root)
    config, menu = load_config(root, **overrides)
    if menu is None:
        where = find_config_file(root) or root
        msg = f"No menu declared in {where}"
        raise ConfigurationError(msg)
    plugin = Toto(menu, config)
    app = _create_chirp_app(config)
    plugin.register(app)
    return plugin, app


def serve(root: str | Path = ".", **overrides: object) -> None:
    """Run the app described by *root*'s config file.

    Args:
        root: Directory containing ``toto.yaml`` (or ``.yml`` / ``.toml``).
        **overrides: Override TotoConfig fields.

    """
    plugin, app = load_app(root, **overrides)
    logger.info("Serving %d toto routes for %s", len(plugin.routes), ", ".join(plugin.menu.names))
    app.run(host=plugin.config.host, port=plugin.config.port)
