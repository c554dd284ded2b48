"""
Comment tree assembly.

Turns flat comment rows into nested reply trees without recursion,
so deep reply chains cost heap rather than stack.
"""

from typing import Any, Callable, Iterable, Sequence

from forum_api.models.forum import Comment
from forum_api.modules.forum.serializers import comment_to_dict

Node = dict[str, Any]


def build_comment_tree(
    roots: Sequence[Comment],
    descendants: Iterable[Comment],
    render: Callable[[Comment], Node] = comment_to_dict,
) -> list[Node]:
    """
    Nest descendants under their roots.

    Args:
        roots: Top-level comments, already in display order
        descendants: Replies at any depth below the roots, in any order
        render: Converts a comment to its node dict

    Returns:
        One node per root, each with a ``replies`` list. Replies are
        ordered oldest-first under every parent. Rows whose parent is not
        part of the tree are dropped.
    """
    nodes: dict[int, Node] = {}
    tree: list[Node] = []

    for comment in roots:
        node = render(comment)
        node["replies"] = []
        nodes[comment.id] = node
        tree.append(node)

    replies = sorted(descendants, key=lambda c: (c.created_at, c.id))
    for comment in replies:
        node = render(comment)
        node["replies"] = []
        nodes[comment.id] = node

    # Attach after every node exists so input order never matters
    for comment in replies:
        parent = nodes.get(comment.parent_id)
        if parent is not None:
            parent["replies"].append(nodes[comment.id])

    return tree

