"""Tests for toto.menu: menu parsing and validation."""

import dataclasses

import pytest

from toto._errors import ConfigurationError
from toto.menu import Menu, MenuEntry, parse_menu


# ---------------------------------------------------------------------------
# MenuEntry
# ---------------------------------------------------------------------------


class TestMenuEntry:
    """Entry-level invariants."""

    def test_frozen(self) -> None:
        entry = MenuEntry(name="beer", many=("search",))
        with pytest.raises(AttributeError):
            entry.name = "pub"  # type: ignore[misc]

    def test_default_action_is_first_many(self) -> None:
        entry = MenuEntry(name="beer", many=("browse", "search"), one=("view",))
        assert entry.default_action == "browse"
        assert entry.default_instance_action == "view"

    def test_no_one_actions(self) -> None:
        entry = MenuEntry(name="house", many=("list",))
        assert entry.default_instance_action is None
        assert entry.actions("one") == ()

    def test_empty_many_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="'beer' has no 'many' actions"):
            MenuEntry(name="beer", many=(), one=("view",))

    def test_duplicate_action_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="Duplicate action 'search'"):
            MenuEntry(name="beer", many=("search", "search"))

    @pytest.mark.parametrize("row", ["many", "one"])
    def test_default_action_reserved(self, row: str) -> None:
        """``default`` is the alias segment under every object."""
        spec: dict[str, tuple[str, ...]] = {"many": ("list",), "one": ("view",)}
        spec[row] = (*spec[row], "default")
        with pytest.raises(ConfigurationError, match="'default' in beer.* is reserved"):
            MenuEntry(name="beer", **spec)

    @pytest.mark.parametrize("bad", ["", "a/b", "with space", "{key}"])
    def test_invalid_names_raise(self, bad: str) -> None:
        with pytest.raises(ConfigurationError, match="Invalid"):
            MenuEntry(name=bad, many=("list",))


# ---------------------------------------------------------------------------
# Menu
# ---------------------------------------------------------------------------


class TestMenu:
    """Menu-level invariants and accessors."""

    def test_empty_menu_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="Menu is empty"):
            Menu(entries=())

    def test_duplicate_object_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="Duplicate menu object 'beer'"):
            Menu(entries=(
                MenuEntry(name="beer", many=("a",)),
                MenuEntry(name="beer", many=("b",)),
            ))

    def test_order_and_lookup(self, beer_menu: list[object]) -> None:
        menu = parse_menu(beer_menu)
        assert menu.names == ("beer", "pub")
        assert menu.first.name == "beer"
        assert "pub" in menu
        assert menu["pub"].many == ("map",)
        assert len(menu) == 2

    def test_replace_keeps_index(self, beer_menu: list[object]) -> None:
        menu = parse_menu(beer_menu)
        regrouped = dataclasses.replace(menu, nav=())
        assert regrouped == menu
        assert regrouped["pub"].many == ("map",)

    def test_actions_by_mode(self, beer_menu: list[object]) -> None:
        menu = parse_menu(beer_menu)
        assert menu.actions("beer", "many") == ("search", "browse")
        assert menu.actions("beer", "one") == ("picture",)
        assert menu.actions("nothing", "many") == ()


# ---------------------------------------------------------------------------
# parse_menu: accepted shapes
# ---------------------------------------------------------------------------


class TestParseMenu:
    """All three input shapes normalize to the same menu."""

    def test_flat_pairs(self, beer_menu: list[object]) -> None:
        menu = parse_menu(beer_menu)
        assert menu["beer"] == MenuEntry("beer", ("search", "browse"), ("picture",))

    def test_mapping(self, beer_menu: list[object]) -> None:
        mapping = {
            "beer": {"many": ["search", "browse"], "one": ["picture"]},
            "pub": {"many": ["map"], "one": ["info"]},
        }
        assert parse_menu(mapping) == parse_menu(beer_menu)

    def test_list_of_single_key_mappings(self, beer_menu: list[object]) -> None:
        yaml_like = [
            {"beer": {"many": ["search", "browse"], "one": ["picture"]}},
            {"pub": {"many": ["map"], "one": ["info"]}},
        ]
        assert parse_menu(yaml_like) == parse_menu(beer_menu)

    def test_list_of_tuples(self) -> None:
        menu = parse_menu([("house", {"many": ["list"]})])
        assert menu.names == ("house",)

    def test_whitespace_separated_actions(self) -> None:
        menu = parse_menu(["beer", {"many": "list create search", "one": "view edit"}])
        assert menu["beer"].many == ("list", "create", "search")
        assert menu["beer"].one == ("view", "edit")

    def test_menu_passes_through(self, beer_menu: list[object]) -> None:
        menu = parse_menu(beer_menu)
        assert parse_menu(menu) is menu

    def test_odd_flat_list_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="alternate"):
            parse_menu(["beer", {"many": ["list"]}, "pub"])

    def test_unknown_entry_key_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="unknown keys"):
            parse_menu(["beer", {"many": ["list"], "few": ["x"]}])

    def test_missing_many_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="no 'many' actions"):
            parse_menu(["beer", {"one": ["view"]}])

    def test_scalar_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="mapping or a sequence"):
            parse_menu("beer")

    def test_default_instance_action_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="reserved"):
            parse_menu(["beer", {"many": ["list"], "one": ["default", "view"]}])

    def test_empty_list_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="Menu is empty"):
            parse_menu([])


# ---------------------------------------------------------------------------
# Sidebar variant
# ---------------------------------------------------------------------------


class TestFromSidebar:
    """nav / sidebar / tabs variant."""

    def test_builds_grouped_menu(self) -> None:
        menu = Menu.from_sidebar(
            nav=["brewpub", "beverage"],
            sidebar={
                "brewpub": ["brewery/phonelist", "pub/search", "pub/map", "brewery", "pub"],
                "beverage": ["beer/list", "beer/create", "beer"],
            },
            tabs={
                "brewery": ["view", "edit"],
                "pub": ["view", "info"],
                "beer": ["view", "notes"],
            },
        )
        assert menu.names == ("brewery", "pub", "beer")
        assert menu["pub"].many == ("search", "map")
        assert menu["pub"].one == ("view", "info")
        assert menu["beer"].nav_item == "beverage"
        groups = menu.groups()
        assert [item for item, _ in groups] == ["brewpub", "beverage"]
        assert [e.name for e in groups[0][1]] == ["brewery", "pub"]

    def test_tab_row_used_twice_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="Tab row 'beer' is used by both"):
            Menu.from_sidebar(
                nav=["a", "b"],
                sidebar={"a": ["beer/list", "beer"], "b": ["beer"]},
                tabs={"beer": ["view"]},
            )

    def test_unknown_tab_row_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="unknown tab row 'pub'"):
            Menu.from_sidebar(nav=["a"], sidebar={"a": ["pub"]}, tabs={})

    def test_missing_sidebar_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="no sidebar entry"):
            Menu.from_sidebar(nav=["a"], sidebar={}, tabs={})

    def test_tab_only_object_raises(self) -> None:
        """An object referenced only as a tab row has no entry page."""
        with pytest.raises(ConfigurationError, match="'pub' has no 'many' actions"):
            Menu.from_sidebar(nav=["a"], sidebar={"a": ["pub"]}, tabs={"pub": ["view"]})

    def test_parse_menu_detects_sidebar_shape(self) -> None:
        menu = parse_menu({
            "nav": ["a"],
            "sidebar": {"a": ["beer/list", "beer"]},
            "tabs": {"beer": ["view"]},
        })
        assert menu.nav == ("a",)
        assert menu["beer"].one == ("view",)
