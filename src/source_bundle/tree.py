"""Build the display tree from a flat list of project-relative paths."""

import math
from typing import Dict, Iterable, Iterator, List, Mapping

from .constants import BASE64_SIZE_RATIO
from .core import FileNode, NodeKind


def build_tree(paths: Iterable[str]) -> List[FileNode]:
    """Convert POSIX relative paths into a sorted list of root nodes.

    Directory nodes are keyed by their full relative path so that shared
    prefixes collapse into a single node. Every level is sorted with
    directories first, then files, each group by name. The result does not
    depend on the order of ``paths``.

    Args:
        paths: Project-relative paths using "/" as separator

    Returns:
        Root-level nodes
    """
    root: List[FileNode] = []
    dir_map: Dict[str, FileNode] = {}

    for file_path in sorted(set(paths)):
        *parts, file_name = file_path.split("/")

        current_path = ""
        current_list = root
        for part in parts:
            current_path = f"{current_path}/{part}" if current_path else part

            dir_node = dir_map.get(current_path)
            if dir_node is None:
                dir_node = FileNode(
                    name=part,
                    path=current_path,
                    kind=NodeKind.DIRECTORY,
                    children=[],
                )
                dir_map[current_path] = dir_node
                current_list.append(dir_node)
            current_list = dir_node.children

        current_list.append(FileNode(name=file_name, path=file_path, kind=NodeKind.FILE))

    _sort_nodes(root)
    return root


def _sort_nodes(nodes: List[FileNode]) -> None:
    nodes.sort(key=lambda n: (not n.is_dir, n.name))
    for node in nodes:
        if node.children:
            _sort_nodes(node.children)


def iter_files(nodes: Iterable[FileNode]) -> Iterator[FileNode]:
    """Yield file leaves depth-first in display order."""
    for node in nodes:
        if node.is_dir:
            yield from iter_files(node.children or [])
        else:
            yield node


def estimate_image_size(data_uri: str) -> int:
    """Approximate decoded size of a base64 data URI."""
    return math.floor(len(data_uri) * BASE64_SIZE_RATIO)


def annotate_sizes(
    tree: List[FileNode],
    files: Mapping[str, str],
    images: Mapping[str, str],
) -> None:
    """Set ``size`` on file nodes from their content.

    Text files use the character length. Images use the estimated decoded
    size. Files whose content could not be read keep no size.
    """
    for node in iter_files(tree):
        if node.path in files:
            node.size = len(files[node.path])
        elif node.path in images:
            node.size = estimate_image_size(images[node.path])
