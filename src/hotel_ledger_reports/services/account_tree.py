"""Flattening of the chart of accounts into selector options."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from hotel_ledger_reports.domain.accounts import AccountNode, FlatAccountOption


def _as_nodes(tree: Any) -> list[AccountNode]:
    if not isinstance(tree, (list, tuple)):
        return []
    nodes: list[AccountNode] = []
    for item in tree:
        if isinstance(item, AccountNode):
            nodes.append(item)
        elif isinstance(item, Mapping):
            nodes.append(AccountNode.from_dict(item))
    return nodes


def option_label(node: AccountNode, language: str, depth: int) -> str:
    """`<indent><[code] ><name>` where indent is one "- " per depth level."""
    indent = "- " * depth
    code = f"[{node.code}] " if node.code else ""
    return f"{indent}{code}{node.display_name(language)}"


def flatten(tree: Any, language: str) -> list[FlatAccountOption]:
    """Pre-order walk of the account tree.

    Each parent is emitted immediately before its subtree. Anything that is
    not a list of nodes (or node dicts) flattens to an empty list.
    """
    options: list[FlatAccountOption] = []

    def walk(nodes: list[AccountNode], depth: int) -> None:
        for node in nodes:
            options.append(
                FlatAccountOption(
                    id=node.id,
                    label=option_label(node, language, depth),
                    depth=depth,
                )
            )
            if node.children:
                walk(list(node.children), depth + 1)

    walk(_as_nodes(tree), 0)
    return options
