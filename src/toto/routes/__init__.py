"""Menu expansion and controller lookup.

Turns a ``Menu`` into a flat table of route descriptors and resolves
conventional controller handlers.

Public API::

    from toto.routes import expand, discover_controllers

    descriptors = expand(menu, prefix="/app", namespace="myapp.controllers")
    controllers = discover_controllers(menu, "myapp.controllers")
"""

from toto.routes.controllers import (
    ControllerRegistry,
    camelize,
    discover_controllers,
    resolve_controller,
)
from toto.routes.expand import KEY_PARAM, RouteDescriptor, expand, join_path

__all__ = [
    "KEY_PARAM",
    "ControllerRegistry",
    "RouteDescriptor",
    "camelize",
    "discover_controllers",
    "expand",
    "join_path",
    "resolve_controller",
]
