"""Unit tests for the explorer navigation tree."""

from __future__ import annotations

from lazydbm.domains.explorer.domain.navigation import (
    DatabaseNode,
    DatabasePath,
    NavigationTree,
    NodeKind,
    SchemaNode,
    SchemaPath,
    TableInDbPath,
    TableInSchemaPath,
    TableNode,
)
from lazydbm.domains.explorer.domain.tree_nodes import Database, Schema, Table


def scenario_tree() -> NavigationTree:
    """``a`` collapsed, ``b`` expanded with table ``t1``."""
    return NavigationTree(
        [
            Database("a", [Table("x")], expanded=False),
            Database("b", [Table("t1")], expanded=True),
        ]
    )


def schema_tree() -> NavigationTree:
    return NavigationTree(
        [
            Database(
                "shop",
                [
                    Schema("public", [Table("orders"), Table("users")], expanded=True),
                    Schema("audit", [Table("log")]),
                    Table("settings"),
                ],
                expanded=True,
            ),
            Database("empty"),
        ]
    )


def visible_names(tree: NavigationTree) -> list[str]:
    return [row.name for row in tree.visible_rows()]


class TestLoad:
    def test_selects_first_node(self) -> None:
        tree = scenario_tree()
        assert tree.selected == DatabasePath(0)
        assert tree.selected_node() == DatabaseNode("a")

    def test_empty_tree_has_no_selection(self) -> None:
        tree = NavigationTree()
        assert tree.selected is None
        assert tree.selected_node() is None
        assert tree.visible_rows() == []

    def test_load_replaces_structure_and_clears_filter(self) -> None:
        tree = scenario_tree()
        tree.set_filter("t1")
        tree.load([Database("fresh", [Table("t")])])
        assert tree.filter_query == ""
        assert visible_names(tree) == ["fresh"]
        assert tree.selected == DatabasePath(0)

    def test_collapsed_database_hides_children(self) -> None:
        tree = scenario_tree()
        assert visible_names(tree) == ["a", "b", "t1"]


class TestMovement:
    def test_scenario_walk_stops_at_last(self) -> None:
        tree = scenario_tree()
        tree.move_next()
        assert tree.selected_node() == DatabaseNode("b")
        tree.move_next()
        assert tree.selected_node() == TableNode("b", None, "t1")
        tree.move_next()
        assert tree.selected_node() == TableNode("b", None, "t1")

    def test_move_prev_at_first_is_noop(self) -> None:
        tree = scenario_tree()
        for _ in range(5):
            tree.move_prev()
        assert tree.selected == DatabasePath(0)

    def test_boundary_moves_are_idempotent(self) -> None:
        once = schema_tree()
        once.move_last()
        once.move_next()
        many = schema_tree()
        many.move_last()
        for _ in range(7):
            many.move_next()
        assert once.selected == many.selected

    def test_move_last_descends_into_expanded_nodes(self) -> None:
        tree = NavigationTree([Database("shop", [Schema("public", [Table("a"), Table("z")], expanded=True)], expanded=True)])
        tree.move_last()
        assert tree.selected == TableInSchemaPath(0, 0, 1)
        assert tree.selected_node() == TableNode("shop", "public", "z")

    def test_move_first(self) -> None:
        tree = schema_tree()
        tree.move_last()
        tree.move_first()
        assert tree.selected == DatabasePath(0)

    def test_movement_on_empty_tree_is_noop(self) -> None:
        tree = NavigationTree()
        tree.move_next()
        tree.move_prev()
        tree.move_first()
        tree.move_last()
        assert tree.selected is None

    def test_pre_order_through_schemas(self) -> None:
        tree = schema_tree()
        seen = [tree.selected]
        for _ in range(6):
            tree.move_next()
            seen.append(tree.selected)
        assert seen == [
            DatabasePath(0),
            SchemaPath(0, 0),
            TableInSchemaPath(0, 0, 0),
            TableInSchemaPath(0, 0, 1),
            SchemaPath(0, 1),
            TableInDbPath(0, 2),
            DatabasePath(1),
        ]


class TestExpandCollapse:
    def test_expand_and_collapse_database(self) -> None:
        tree = scenario_tree()
        tree.expand()
        assert visible_names(tree) == ["a", "x", "b", "t1"]
        tree.collapse()
        assert visible_names(tree) == ["a", "b", "t1"]

    def test_expand_on_table_is_noop(self) -> None:
        tree = scenario_tree()
        tree.move_last()
        before = tree.visible_rows()
        tree.expand()
        tree.collapse()
        tree.toggle()
        assert tree.visible_rows() == before
        assert tree.selected_node() == TableNode("b", None, "t1")

    def test_container_without_children_does_not_expand(self) -> None:
        tree = schema_tree()
        tree.move_last()
        assert tree.selected_node() == DatabaseNode("empty")
        tree.toggle()
        row = tree.visible_rows()[-1]
        assert row.name == "empty"
        assert row.expanded is False
        assert row.has_children is False

    def test_collapsing_ancestor_moves_selection_to_it(self) -> None:
        tree = schema_tree()
        tree.move_next()
        tree.move_next()
        assert tree.selected == TableInSchemaPath(0, 0, 0)
        tree.collapse(DatabasePath(0))
        assert tree.selected == DatabasePath(0)
        assert visible_names(tree) == ["shop", "empty"]

    def test_collapsing_schema_moves_selection_to_schema(self) -> None:
        tree = schema_tree()
        tree.move_next()
        tree.move_next()
        tree.move_next()
        tree.collapse(SchemaPath(0, 0))
        assert tree.selected == SchemaPath(0, 0)

    def test_collapsing_unrelated_container_keeps_selection(self) -> None:
        tree = schema_tree()
        tree.move_next()
        tree.move_next()
        tree.expand(SchemaPath(0, 1))
        tree.collapse(SchemaPath(0, 1))
        assert tree.selected == TableInSchemaPath(0, 0, 0)

    def test_expand_collapse_round_trip_under_filter(self) -> None:
        tree = schema_tree()
        tree.set_filter("o")
        before = tree.visible_rows()
        tree.expand(SchemaPath(0, 1))
        tree.collapse(SchemaPath(0, 1))
        assert tree.visible_rows() == before

    def test_row_metadata(self) -> None:
        tree = schema_tree()
        rows = tree.visible_rows()
        assert rows[0].kind is NodeKind.DATABASE
        assert rows[0].expanded is True
        assert rows[1].kind is NodeKind.SCHEMA
        assert rows[1].depth == 1
        assert rows[2].kind is NodeKind.TABLE
        assert rows[2].depth == 2


class TestFilter:
    def test_scenario_filter_hides_non_matching_database(self) -> None:
        tree = scenario_tree()
        tree.set_filter("t1")
        assert visible_names(tree) == ["b", "t1"]
        assert tree.selected_node() == DatabaseNode("b")

    def test_filter_is_case_insensitive(self) -> None:
        tree = schema_tree()
        tree.set_filter("USERS")
        assert visible_names(tree) == ["shop", "public", "users"]

    def test_filter_monotonic_when_extended(self) -> None:
        tree = schema_tree()
        tree.expand(SchemaPath(0, 1))
        previous = {row.path for row in tree.visible_rows()}
        for char in "log":
            tree.push_filter(char)
            current = {row.path for row in tree.visible_rows()}
            assert current <= previous
            previous = current

    def test_filter_excluding_everything_clears_selection(self) -> None:
        tree = schema_tree()
        tree.set_filter("zzz")
        assert tree.selected is None
        assert tree.visible_rows() == []
        tree.move_next()
        assert tree.selected is None

    def test_popping_filter_restores_selection(self) -> None:
        tree = schema_tree()
        tree.set_filter("zz")
        tree.pop_filter()
        assert tree.filter_query == "z"
        tree.pop_filter()
        assert tree.selected == DatabasePath(0)

    def test_hidden_table_selection_moves_to_visible_ancestor(self) -> None:
        tree = schema_tree()
        tree.move_next()
        tree.move_next()
        assert tree.selected_node() == TableNode("shop", "public", "orders")
        tree.set_filter("public")
        assert tree.selected_node() == SchemaNode("shop", "public")

    def test_visible_selection_is_kept(self) -> None:
        tree = schema_tree()
        tree.move_next()
        tree.move_next()
        tree.move_next()
        tree.set_filter("user")
        assert tree.selected_node() == TableNode("shop", "public", "users")

    def test_movement_skips_hidden_nodes(self) -> None:
        tree = schema_tree()
        tree.set_filter("settings")
        assert visible_names(tree) == ["shop", "settings"]
        tree.move_next()
        assert tree.selected_node() == TableNode("shop", None, "settings")

    def test_selected_index_follows_visible_rows(self) -> None:
        tree = schema_tree()
        tree.set_filter("users")
        tree.move_last()
        assert tree.selected_index == 2
