import os
import sys
from pathlib import Path

from _vulcanize.nodes import NodeBase


if sys.version_info < (3, 11):  # DROPWITH Python 3.10
    from contextlib import contextmanager

    @contextmanager
    def chdir(path: Path):
        state = Path.cwd()
        os.chdir(path)
        yield
        os.chdir(state)

else:
    from contextlib import chdir  # noqa: F401


def assert_consistent_links(node: NodeBase):
    # walks the whole subtree along the references, not with the iterators
    previous = None
    child = node.first_child
    while child is not None:
        assert child.parent is node
        assert child.previous_sibling is previous
        assert_consistent_links(child)
        previous, child = child, child.next_sibling
    assert node.last_child is previous


def assert_consistent_fragment(fragment):
    nodes = list(fragment)
    if not nodes:
        assert fragment.first_node is None
        assert fragment.last_node is None
        return

    assert fragment.first_node is nodes[0]
    assert fragment.last_node is nodes[-1]
    assert len({id(n) for n in nodes}) == len(nodes)
    assert len({id(n.parent) for n in nodes}) == 1
    for a, b in zip(nodes, nodes[1:]):
        assert a.next_sibling is b
        assert b.previous_sibling is a
    for node in nodes:
        assert_consistent_links(node)


def tag_names(nodes) -> list[str]:
    return [n.local_name for n in nodes]


def write_files(directory: Path, files: dict[str, str]):
    for name, content in files.items():
        path = directory / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
