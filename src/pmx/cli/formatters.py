from __future__ import annotations

from typing import List

from pmx.models.profile import ProfileDirectory, ProfileNode
from pmx.services.profile_service import flatten

EMPTY_MESSAGE = "No profiles found."
BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE = "│   "
SPACE = "    "


def _label(node: ProfileNode) -> str:
    if isinstance(node, ProfileDirectory):
        return f"{node.name}/"
    return node.name


def render_tree(tree: ProfileDirectory, interactive: bool) -> str:
    """Render a profile tree.

    Interactive output is a box-drawing tree for humans; otherwise one full
    profile name per line, sorted, for scripts.
    """
    if not tree.children:
        return EMPTY_MESSAGE

    if not interactive:
        return "\n".join(flatten(tree))

    lines: List[str] = []
    stack = [(child, "", index == len(tree.children) - 1) for index, child in enumerate(tree.children)]
    stack.reverse()
    while stack:
        node, prefix, is_last = stack.pop()
        lines.append(f"{prefix}{LAST_BRANCH if is_last else BRANCH}{_label(node)}")
        if isinstance(node, ProfileDirectory):
            child_prefix = prefix + (SPACE if is_last else PIPE)
            count = len(node.children)
            for index in range(count - 1, -1, -1):
                stack.append((node.children[index], child_prefix, index == count - 1))
    return "\n".join(lines)
