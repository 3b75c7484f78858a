from __future__ import annotations

from collections.abc import Iterable

from dscp_types import PATH_SEPARATOR, ResolvedToken, TokenTreeNode

ROOT_NAME = "root"
_GLOBAL_BRANCH = "global"

_Entry = tuple[list[str], ResolvedToken]


def _sibling_sort_key(node: TokenTreeNode) -> tuple[bool, str, str]:
    # folders before leaves, then by name
    return (node.is_leaf, node.name.casefold(), node.name)


def _build_children(entries: list[_Entry], prefix: tuple[str, ...]) -> list[TokenTreeNode]:
    descendants: dict[str, list[_Entry]] = {}
    leaf_tokens: dict[str, ResolvedToken] = {}
    for segments, token in entries:
        head, rest = segments[0], segments[1:]
        descendants.setdefault(head, [])
        if rest:
            descendants[head].append((rest, token))
        else:
            leaf_tokens[head] = token

    nodes: list[TokenTreeNode] = []
    for name, child_entries in descendants.items():
        node_segments = (*prefix, name)
        token = leaf_tokens.get(name)
        nodes.append(
            TokenTreeNode(
                name=name,
                path=PATH_SEPARATOR.join(node_segments),
                children=_build_children(child_entries, node_segments),
                token=token,
                is_leaf=token is not None,
            )
        )
    return sorted(nodes, key=_sibling_sort_key)


def build_tree(tokens: Iterable[ResolvedToken]) -> TokenTreeNode:
    """Arrange flat tokens into a path-segment tree for navigation.

    A path that is both a token and a prefix of other paths yields one node
    that keeps its token and also carries children. When several tokens share
    a path, the last one wins.
    """
    entries: list[_Entry] = [(token.path.split(PATH_SEPARATOR), token) for token in tokens]
    return TokenTreeNode(name=ROOT_NAME, path="", children=_build_children(entries, ()))


def flatten_tree(tree: TokenTreeNode) -> list[ResolvedToken]:
    tokens: list[ResolvedToken] = []

    def _traverse(node: TokenTreeNode) -> None:
        if node.token is not None:
            tokens.append(node.token)
        for child in node.children:
            _traverse(child)

    _traverse(tree)
    return tokens


def filter_tree_by_brand(tree: TokenTreeNode, brand: str) -> TokenTreeNode:
    keep = {_GLOBAL_BRANCH, brand.casefold()}
    return tree.model_copy(
        update={"children": [child for child in tree.children if child.name.casefold() in keep]}
    )


def get_categories(tokens: Iterable[ResolvedToken]) -> list[str]:
    return sorted({token.category for token in tokens})
