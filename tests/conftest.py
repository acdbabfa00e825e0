import pytest

from _vulcanize.nodes import TagNode

from tests.utils import write_files


@pytest.fixture
def files(tmp_path):
    """Writes a mapping of relative file names to contents into a temporary folder."""

    def writer(contents: dict[str, str]):
        write_files(tmp_path, contents)
        return tmp_path

    return writer


@pytest.fixture
def head():
    return TagNode("head")


@pytest.fixture
def sample_tree():
    """
    <root>
      <a id="a"><b class="x y"/>text<c/></a>
      <d lang="en-GB"><e/></d>
    </root>
    """
    return TagNode(
        "root",
        children=(
            TagNode(
                "a",
                {"id": "a"},
                (TagNode("b", {"class": "x y"}), "text", TagNode("c")),
            ),
            TagNode("d", {"lang": "en-GB"}, (TagNode("e"),)),
        ),
    )
