import json
import logging

import pytest

from _vulcanize.cli import main, make_argument_parser, make_options

from tests.utils import chdir


@pytest.fixture
def project(files):
    return files(
        {
            "index.html": "<!DOCTYPE html><html><head>"
            '<link rel="import" href="elements/x-a.html">'
            '<link rel="import" href="https://example.org/lib.html">'
            "</head><body><x-a></x-a></body></html>",
            "elements/x-a.html": '<link rel="import" '
            'href="https://example.org/lib.html">'
            '<polymer-element name="x-a" noscript=""><template>'
            "<!-- a comment -->\n<p>a</p>\n</template></polymer-element>"
            '<polymer-element name="x-b"><template></template>'
            '<script src="x-b.js"></script></polymer-element>',
            "elements/x-b.js": "Polymer({});",
            "config.json": json.dumps({"excludes": {"scripts": ["^vendor"]}}),
        }
    )


def test_main(project):
    with chdir(project):
        assert main(["index.html", "-o", "out.html"]) == 0

    result = (project / "out.html").read_text(encoding="utf-8")
    assert result.startswith("<!DOCTYPE html><html><head>")
    assert result.count("https://example.org/lib.html") == 1
    assert '<polymer-element name="x-a" assetpath="elements/">' in result
    assert "<script>Polymer('x-a');</script>" in result
    assert '<script src="elements/x-b.js"></script>' in result
    assert "<!-- a comment -->" in result


def test_main_with_all_passes(project):
    output = project / "dist" / "app.html"
    output.parent.mkdir()

    assert (
        main(
            [
                str(project / "index.html"),
                "--output",
                str(output),
                "--config",
                str(project / "config.json"),
                "--inline",
                "--csp",
                "--strip",
            ]
        )
        == 0
    )

    result = output.read_text(encoding="utf-8")
    assert 'assetpath="../elements/"' in result
    assert "<!--" not in result
    assert "<template><p>a</p></template>" in result
    assert '<script src="app.js"></script></body>' in result
    assert (project / "dist" / "app.js").read_text(encoding="utf-8") == (
        "Polymer('x-a');;\nPolymer('x-b',{});"
    )


def test_main_reports_errors(files, caplog):
    directory = files(
        {"index.html": '<html><head><link rel="import" href="missing.html">'}
    )

    arguments = [str(directory / "index.html"), "-o", str(directory / "o.html")]
    with caplog.at_level(logging.ERROR):
        assert main(arguments) == 1

    assert "missing.html" in caplog.text
    assert not (directory / "o.html").exists()


def test_main_reports_configuration_errors(files, caplog):
    directory = files({"index.html": "<p>a</p>", "config.json": "[]"})
    with chdir(directory), caplog.at_level(logging.ERROR):
        assert main(["index.html", "--config", "config.json"]) == 1
    assert "config.json" in caplog.text


def test_make_options(files):
    directory = files(
        {"config.json": json.dumps({"excludes": {"imports": ["a"], "scripts": ["b"]}})}
    )
    arguments = make_argument_parser().parse_args(
        [
            "index.html",
            "--config",
            str(directory / "config.json"),
            "--exclude-imports",
            "c",
            "--exclude-imports",
            "d",
            "--csp-file",
            "scripts.js",
            "-v",
        ]
    )

    options = make_options(arguments)

    assert [p.pattern for p in options.excludes.imports] == ["a", "c", "d"]
    assert [p.pattern for p in options.excludes.scripts] == ["b"]
    assert options.excludes.styles == ()
    assert options.scripts_file.name == "scripts.js"
    assert options.verbose
    assert not options.inline
