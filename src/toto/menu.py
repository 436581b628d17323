"""Menu model: the declarative description toto builds everything from.

A menu is an ordered sequence of objects.  Each object has two action
lists: ``many`` actions operate on zero or many instances (list, search,
create) and ``one`` actions operate on a single instance addressed by a
key (view, edit).  Declaration order is significant: the first object is
the landing page, the first ``many`` action is an object's default page,
and list order is tab order.

Three input shapes are accepted by ``parse_menu``::

    # Flat pairs
    ["beer", {"many": ["search", "browse"], "one": ["picture"]},
     "pub",  {"many": ["map"], "one": ["info"]}]

    # Mapping (insertion order is menu order)
    {"beer": {"many": [...], "one": [...]}, "pub": {...}}

    # Sequence of single-key mappings or (name, spec) tuples, as YAML produces
    [{"beer": {"many": [...]}}, ("pub", {"many": [...]})]

The sidebar variant groups objects under navigation items; see
``Menu.from_sidebar``.

Thread Safety:
    Menu and MenuEntry are frozen after construction.  Safe to share
    across request-handling threads.

"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field

from toto._errors import ConfigurationError
from toto._types import TabRow

_SEGMENT_RE = re.compile(r"^[^/\s{}]+$")
_ENTRY_KEYS: frozenset[str] = frozenset({"many", "one"})

# Path segment of the /{object}/default/{key} alias, reserved from action names
DEFAULT_ALIAS = "default"


@dataclass(frozen=True, slots=True)
class MenuEntry:
    """One navigable object.

    Attributes:
        name: Object name, used as URL segment and controller lookup key.
        many: Actions valid with no selected instance, in tab order.
        one: Actions valid with a selected instance, in tab order.
        nav_item: Sidebar group this object belongs to, or *None* for
            the plain menu variant.

    """

    name: str
    many: tuple[str, ...]
    one: tuple[str, ...] = ()
    nav_item: str | None = None

    def __post_init__(self) -> None:
        _check_segment(self.name, "object name")
        if not self.many:
            msg = (
                f"Menu object {self.name!r} has no 'many' actions; "
                f"at least one is required to build its entry route."
            )
            raise ConfigurationError(msg)
        for row, actions in (("many", self.many), ("one", self.one)):
            seen: set[str] = set()
            for action in actions:
                _check_segment(action, f"action in {self.name}.{row}")
                if action == DEFAULT_ALIAS:
                    msg = (
                        f"Action {action!r} in {self.name}.{row} is reserved for "
                        f"the /{self.name}/{DEFAULT_ALIAS}/{{key}} alias"
                    )
                    raise ConfigurationError(msg)
                if action in seen:
                    msg = f"Duplicate action {action!r} in {self.name}.{row}"
                    raise ConfigurationError(msg)
                seen.add(action)

    @property
    def default_action(self) -> str:
        """The collection action ``/{name}`` redirects to."""
        return self.many[0]

    @property
    def default_instance_action(self) -> str | None:
        """The instance action ``/{name}/default/{key}`` redirects to."""
        return self.one[0] if self.one else None

    def actions(self, mode: TabRow) -> tuple[str, ...]:
        """Return the tab row for *mode* (``"many"`` or ``"one"``)."""
        return self.one if mode == "one" else self.many


@dataclass(frozen=True, slots=True)
class Menu:
    """Ordered collection of menu entries.  Insertion order is nav order.

    Attributes:
        entries: Menu entries; the first is the landing object.
        nav: Sidebar group names in display order (empty for plain menus).

    """

    entries: tuple[MenuEntry, ...]
    nav: tuple[str, ...] = ()
    _index: dict[str, MenuEntry] = field(
        init=False, default_factory=dict, compare=False, repr=False,
    )

    def __post_init__(self) -> None:
        if not self.entries:
            msg = "Menu is empty; declare at least one object."
            raise ConfigurationError(msg)
        for entry in self.entries:
            if entry.name in self._index:
                msg = f"Duplicate menu object {entry.name!r}"
                raise ConfigurationError(msg)
            self._index[entry.name] = entry

    def __iter__(self) -> Iterator[MenuEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __getitem__(self, name: str) -> MenuEntry:
        return self._index[name]

    @property
    def names(self) -> tuple[str, ...]:
        """Object names in nav order."""
        return tuple(e.name for e in self.entries)

    @property
    def first(self) -> MenuEntry:
        """The landing object."""
        return self.entries[0]

    def actions(self, name: str, mode: TabRow) -> tuple[str, ...]:
        """Tab row for object *name*; empty for unknown objects."""
        entry = self._index.get(name)
        if entry is None:
            return ()
        return entry.actions(mode)

    def groups(self) -> list[tuple[str, tuple[MenuEntry, ...]]]:
        """Entries grouped by sidebar nav item, in nav order."""
        return [
            (item, tuple(e for e in self.entries if e.nav_item == item))
            for item in self.nav
        ]

    @classmethod
    def from_sidebar(
        cls,
        nav: Sequence[str],
        sidebar: Mapping[str, Sequence[str]],
        tabs: Mapping[str, Sequence[str]],
    ) -> Menu:
        """Build a menu from the nav/sidebar/tabs variant.

        ``sidebar[item]`` lists ``"object/action"`` strings (collection
        actions, in order) and bare ``"object"`` strings that refer to a
        row in *tabs* (the object's instance actions).  A tab row may be
        referenced at most once across the whole sidebar.

        Raises:
            ConfigurationError: On unknown nav items or tab rows, reused tab
                rows, or objects left without collection actions.

        """
        many: dict[str, list[str]] = {}
        one: dict[str, tuple[str, ...]] = {}
        owner: dict[str, str] = {}
        tab_used_by: dict[str, str] = {}

        for item in nav:
            if item not in sidebar:
                msg = f"Nav item {item!r} has no sidebar entry"
                raise ConfigurationError(msg)
            for ref in _as_names(sidebar[item], f"sidebar[{item!r}]"):
                if "/" in ref:
                    obj, _, action = ref.partition("/")
                    owner.setdefault(obj, item)
                    many.setdefault(obj, []).append(action)
                    continue
                if ref not in tabs:
                    msg = f"Sidebar {item!r} refers to unknown tab row {ref!r}"
                    raise ConfigurationError(msg)
                if ref in tab_used_by:
                    msg = (
                        f"Tab row {ref!r} is used by both sidebar "
                        f"{tab_used_by[ref]!r} and {item!r}"
                    )
                    raise ConfigurationError(msg)
                tab_used_by[ref] = item
                owner.setdefault(ref, item)
                many.setdefault(ref, [])
                one[ref] = _as_names(tabs[ref], f"tabs[{ref!r}]")

        entries = tuple(
            MenuEntry(
                name=obj,
                many=tuple(actions),
                one=one.get(obj, ()),
                nav_item=owner[obj],
            )
            for obj, actions in many.items()
        )
        return cls(entries=entries, nav=tuple(nav))


def parse_menu(raw: object) -> Menu:
    """Normalize any accepted menu shape into a ``Menu``.

    Raises:
        ConfigurationError: If *raw* is not a recognised shape or any entry
            is invalid.

    """
    if isinstance(raw, Menu):
        return raw
    if isinstance(raw, Mapping):
        if {"nav", "sidebar", "tabs"} <= set(raw):
            return Menu.from_sidebar(raw["nav"], raw["sidebar"], raw["tabs"])
        pairs = list(raw.items())
    elif isinstance(raw, Sequence) and not isinstance(raw, str):
        pairs = _pairs_from_sequence(raw)
    else:
        msg = f"Menu must be a mapping or a sequence, got {type(raw).__name__}"
        raise ConfigurationError(msg)

    return Menu(entries=tuple(_entry(name, spec) for name, spec in pairs))


def _pairs_from_sequence(raw: Sequence[object]) -> list[tuple[object, object]]:
    """Accept flat ``[name, spec, ...]`` lists and lists of pairs/single-key maps."""
    items = list(raw)
    if items and isinstance(items[0], str):
        if len(items) % 2:
            msg = "Flat menu list must alternate object names and action specs"
            raise ConfigurationError(msg)
        return list(zip(items[::2], items[1::2], strict=True))

    pairs: list[tuple[object, object]] = []
    for item in items:
        if isinstance(item, Mapping) and len(item) == 1:
            pairs.append(next(iter(item.items())))
        elif isinstance(item, tuple) and len(item) == 2:
            pairs.append(item)
        else:
            msg = f"Unrecognised menu item: {item!r}"
            raise ConfigurationError(msg)
    return pairs


def _entry(name: object, spec: object) -> MenuEntry:
    if not isinstance(name, str):
        msg = f"Menu object name must be a str, got {type(name).__name__}"
        raise ConfigurationError(msg)
    if spec is None:
        spec = {}
    if not isinstance(spec, Mapping):
        msg = f"Menu object {name!r}: expected a mapping with 'many'/'one', got {spec!r}"
        raise ConfigurationError(msg)
    unknown = set(spec) - _ENTRY_KEYS
    if unknown:
        msg = f"Menu object {name!r}: unknown keys {sorted(unknown)}"
        raise ConfigurationError(msg)
    return MenuEntry(
        name=name,
        many=_as_names(spec.get("many") or (), f"{name}.many"),
        one=_as_names(spec.get("one") or (), f"{name}.one"),
    )


def _as_names(value: object, where: str) -> tuple[str, ...]:
    """Coerce a list of names; a plain string is split on whitespace."""
    if isinstance(value, str):
        return tuple(value.split())
    if not isinstance(value, Sequence):
        msg = f"{where}: expected a list of names, got {type(value).__name__}"
        raise ConfigurationError(msg)
    names = tuple(value)
    for n in names:
        if not isinstance(n, str):
            msg = f"{where}: names must be strings, got {n!r}"
            raise ConfigurationError(msg)
    return names


def _check_segment(value: str, what: str) -> None:
    if not isinstance(value, str) or not _SEGMENT_RE.match(value):
        msg = f"Invalid {what}: {value!r} (must be a non-empty URL path segment)"
        raise ConfigurationError(msg)
