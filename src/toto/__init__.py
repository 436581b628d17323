"""Toto: a tab and object based site structure for Chirp apps.

Declare a menu of objects; toto generates the routes, a tabbed layout and
scaffold pages so every object/action pair has a working page before any
of them is written.

Quick start::

    import toto

    app = toto.create_app([
        "beer",    {"many": ["list", "create", "search"], "one": ["view", "edit"]},
        "brewery", {"many": ["phonelist"], "one": ["view", "directions"]},
    ])
    app.run()

Pages for ``collection`` actions live at ``/{object}/{action}``; pages for
``instance`` actions at ``/{object}/{action}/{key}``.  A page is replaced
by writing ``templates/{object}/{action}.html`` or registering a
controller for it.

Entry points::

    toto.create_app(menu, config)   # Chirp App with toto routes
    toto.Toto(menu, config)         # register onto an existing App
    toto.serve("my-app/")           # run from toto.yaml

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "ControllerRegistry",
    "Menu",
    "MenuEntry",
    "Model",
    "RequestContext",
    "RouteDescriptor",
    "RouteNotFound",
    "TemplateMissing",
    "Toto",
    "TotoConfig",
    "TotoError",
    "__version__",
    "create_app",
    "expand",
    "parse_menu",
    "serve",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import toto`` fast while providing a clean top-level API.
    """
    if name in ("Toto", "create_app", "serve"):
        from toto import app as _app

        return getattr(_app, name)

    if name == "TotoConfig":
        from toto.config import TotoConfig

        return TotoConfig

    if name in ("Menu", "MenuEntry", "parse_menu"):
        from toto import menu as _menu

        return getattr(_menu, name)

    if name in ("expand", "RouteDescriptor", "ControllerRegistry"):
        from toto import routes as _routes

        return getattr(_routes, name)

    if name == "RequestContext":
        from toto.context import RequestContext

        return RequestContext

    if name == "Model":
        from toto.model import Model

        return Model

    if name in ("ConfigurationError", "RouteNotFound", "TemplateMissing", "TotoError"):
        from toto import _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
