"""Tests for chart-of-accounts flattening."""

from hotel_ledger_reports.domain.accounts import AccountNode
from hotel_ledger_reports.services.account_tree import flatten

TREE = [
    {
        "id": 1,
        "name": "Assets",
        "name_ar": "الأصول",
        "name_en": "Assets",
        "code": "1",
        "children": [
            {
                "id": 11,
                "name": "Cash",
                "name_ar": "النقدية",
                "name_en": "Cash",
                "code": "11",
                "children": [
                    {"id": 111, "name": "Front desk till", "name_en": "Front desk till"},
                ],
            },
            {
                "id": 12,
                "name": "Banks",
                "name_ar": "البنوك",
                "name_en": "Banks",
                "code": "12",
            },
        ],
    },
    {"id": 2, "name": "Liabilities", "name_en": "Liabilities", "children": []},
]


class TestFlatten:
    def test_pre_order_with_depth_prefix(self) -> None:
        options = flatten(TREE, "en")

        assert [o.id for o in options] == ["1", "11", "111", "12", "2"]
        assert [o.label for o in options] == [
            "[1] Assets",
            "- [11] Cash",
            "- - Front desk till",
            "- [12] Banks",
            "Liabilities",
        ]

    def test_arabic_names_with_fallback(self) -> None:
        labels = [o.label for o in flatten(TREE, "ar")]

        assert labels[0] == "[1] الأصول"
        # No name_ar: falls back to name_en
        assert labels[2] == "- - Front desk till"
        assert labels[4] == "Liabilities"

    def test_english_falls_back_to_arabic_then_name(self) -> None:
        tree = [
            {"id": "a", "name_ar": "البنوك", "name": "banks"},
            {"id": "b", "name": "generic"},
        ]

        labels = [o.label for o in flatten(tree, "en")]

        assert labels == ["البنوك", "generic"]

    def test_each_node_visited_once_and_parents_precede_descendants(self) -> None:
        options = flatten(TREE, "en")
        ids = [o.id for o in options]

        assert len(ids) == len(set(ids)) == 5
        assert ids.index("1") < ids.index("11") < ids.index("111")
        assert ids.index("1") < ids.index("12")

    def test_accepts_account_nodes(self) -> None:
        tree = [
            AccountNode(
                id="1",
                name="Revenue",
                code="4",
                children=(AccountNode(id="41", name="Rooms"),),
            )
        ]

        options = flatten(tree, "en")

        assert [(o.label, o.depth) for o in options] == [
            ("[4] Revenue", 0),
            ("- Rooms", 1),
        ]

    def test_non_list_input_is_empty(self) -> None:
        assert flatten(None, "en") == []
        assert flatten({"id": 1}, "en") == []
        assert flatten("tree", "ar") == []

    def test_does_not_mutate_input(self) -> None:
        tree = [{"id": 1, "name": "Assets", "children": [{"id": 2, "name": "Cash"}]}]
        before = repr(tree)

        flatten(tree, "en")
        flatten(tree, "en")

        assert repr(tree) == before
