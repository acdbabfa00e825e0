import pytest

from _vulcanize.exceptions import FailedImport, InvalidOperation
from _vulcanize.filters import is_import_link
from _vulcanize.importer import Importer
from _vulcanize.nodes import TagNode

from tests.utils import assert_consistent_links


def flatten(directory, name="index.html", **kwargs):
    importer = Importer(output_dir=directory, **kwargs)
    fragment = importer.flatten(directory / name)
    return importer, fragment


def test_simple_import(files):
    directory = files(
        {
            "index.html": '<html><head><link rel="import" href="a.html"></head>'
            "<body><x-a></x-a></body></html>",
            "a.html": '<polymer-element name="x-a"><template>a</template>'
            "</polymer-element>",
        }
    )

    importer, fragment = flatten(directory)

    document = fragment.first_node
    head = document.first_child.first_child
    assert str(head) == (
        '<head><polymer-element name="x-a" assetpath=""><template>a</template>'
        "</polymer-element></head>"
    )
    assert importer.read == {
        (directory / "index.html").resolve(),
        (directory / "a.html").resolve(),
    }
    assert_consistent_links(document)


def test_nested_imports_in_subdirectories(files):
    directory = files(
        {
            "index.html": '<html><head><link rel="import" href="elements/a.html">'
            "</head><body></body></html>",
            "elements/a.html": '<link rel="import" href="../lib/b.html">'
            '<link rel="stylesheet" href="a.css">'
            '<polymer-element name="x-a"><template><img src="a.png">'
            "</template></polymer-element>",
            "elements/a.css": ".a { background: url(img/a.png) }",
            "lib/b.html": '<script src="b.js"></script>',
        }
    )

    _, fragment = flatten(directory)

    head = fragment.first_node.first_child.first_child
    script, style, element = head.iterate_children()
    assert script.attributes == {"src": "lib/b.js"}
    assert style.local_name == "style"
    assert style.text_content == ".a { background: url(elements/img/a.png) }"
    assert element.attributes["assetpath"] == "elements/"
    assert fragment.css_select("img")[0].attributes["src"] == "elements/a.png"


def test_imports_are_included_once(files):
    directory = files(
        {
            "index.html": '<html><head><link rel="import" href="a.html">'
            '<link rel="import" href="b.html"></head><body></body></html>',
            "a.html": '<link rel="import" href="c.html"><div id="a"></div>',
            "b.html": '<link rel="import" href="c.html"><div id="b"></div>',
            "c.html": '<div id="c"></div>',
        }
    )

    _, fragment = flatten(directory)

    assert [n.attributes["id"] for n in fragment.css_select("div")] == [
        "c",
        "a",
        "b",
    ]
    assert not fragment.search(is_import_link)


def test_cyclic_imports(files):
    directory = files(
        {
            "index.html": '<html><head><link rel="import" href="a.html"></head>'
            "<body></body></html>",
            "a.html": '<link rel="import" href="b.html"><div id="a"></div>',
            "b.html": '<link rel="import" href="a.html">'
            '<link rel="import" href="index.html"><div id="b"></div>',
        }
    )

    importer, fragment = flatten(directory)

    assert [n.attributes["id"] for n in fragment.css_select("div")] == ["b", "a"]
    assert not fragment.search(is_import_link)
    assert len(importer.read) == 3


def test_excluded_and_remote_imports_are_kept(files):
    directory = files(
        {
            "index.html": "<html><head>"
            '<link rel="import" href="lib/polymer.html">'
            '<link rel="import" href="https://example.org/x.html">'
            '<link rel="import" href="a.html">'
            "</head><body></body></html>",
            "a.html": '<div id="a"></div>',
        }
    )

    _, fragment = flatten(directory, excluded_imports=(r"polymer\.html$",))

    assert [n.attributes["href"] for n in fragment.search(is_import_link)] == [
        "lib/polymer.html",
        "https://example.org/x.html",
    ]
    assert fragment.css_select("div#a")


def test_excluded_stylesheets_are_kept(files):
    directory = files(
        {
            "index.html": '<html><head><link rel="stylesheet" href="theme.css">'
            "</head><body></body></html>",
        }
    )
    _, fragment = flatten(directory, excluded_stylesheets=(r"theme\.css$",))
    assert fragment.css_select("link[rel=stylesheet][href='theme.css']")


def test_failed_import_reports_trail(files):
    directory = files(
        {
            "index.html": '<html><head><link rel="import" href="a.html"></head>'
            "<body></body></html>",
            "a.html": '<link rel="import" href="sub/missing.html">',
        }
    )

    with pytest.raises(FailedImport) as excinfo:
        flatten(directory)

    exception = excinfo.value
    assert exception.path == (directory / "sub" / "missing.html").resolve()
    assert exception.trail == [
        (directory / "index.html").resolve(),
        (directory / "a.html").resolve(),
    ]
    assert exception.__cause__ is not None
    index, a = exception.trail
    assert str(exception).startswith(
        f"Failed while importing {exception.path} (via {index} → {a}): "
    )


def test_flatten_fragment(files):
    directory = files(
        {"a.html": '<link rel="import" href="b.html"><p>a</p>', "b.html": "<p>b</p>"}
    )
    importer = Importer(output_dir=directory)
    fragment = importer.flatten(directory / "a.html", context=TagNode("body"))
    assert str(fragment) == "<p>b</p><p>a</p>"


def test_importer_is_used_once(files):
    directory = files({"index.html": "<p>a</p>"})
    importer, _ = flatten(directory)
    with pytest.raises(InvalidOperation):
        importer.flatten(directory / "index.html")
