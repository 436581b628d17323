"""Shared type definitions for toto."""

from collections.abc import Callable
from typing import Any, Literal

# Whether a page acts on zero/many instances or on one
type Arity = Literal["collection", "instance"]

# Tab row shown for an arity (the menu's "many" / "one" lists)
type TabRow = Literal["many", "one"]

# Handler bound to an (object, action) pair
type HandlerFunc = Callable[..., Any]

# Constructor for the instance value object: factory(key) -> instance
type ModelFactory = Callable[[str], Any]

TAB_FOR_ARITY: dict[str, TabRow] = {
    "collection": "many",
    "instance": "one",
}
