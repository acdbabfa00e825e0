# Copyright (C) 2018-'25  Frank Sachsenheim
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from _vulcanize.config import (
    DEFAULT_OUTPUT,
    Excludes,
    VulcanizeOptions,
    compile_patterns,
    read_config_file,
)
from _vulcanize.exceptions import VulcanizeBaseException
from _vulcanize.importer import Importer
from _vulcanize.passes import (
    DeduplicateImports,
    InlineScripts,
    InlineScriptsOptions,
    RemoveCommentsAndWhitespace,
    RemoveNoScript,
    SeparateScripts,
    SeparateScriptsOptions,
    UseNamedPolymerInvocations,
)
from _vulcanize.serializer import render_document
from _vulcanize.transform import TransformationSequence

if TYPE_CHECKING:
    from collections.abc import Sequence

    from _vulcanize.fragment import Fragment
    from _vulcanize.transform import TransformationBase


logger = logging.getLogger(__name__)


def vulcanize(options: VulcanizeOptions) -> Fragment:
    """
    Flattens the input document and applies the transformations that the options ask
    for.

    :raises FailedImport: When a document can't be loaded.
    :raises OSError: When a script can't be read or written.
    """
    output_dir = options.output_dir
    importer = Importer(
        excluded_imports=options.excludes.imports,
        excluded_stylesheets=options.excludes.styles,
        output_dir=output_dir,
    )
    fragment = importer.flatten(options.input)
    logger.info("Flattened %d documents.", len(importer.read))

    transformations: list[TransformationBase] = []
    if options.inline:
        transformations.append(
            InlineScripts(InlineScriptsOptions(output_dir, options.excludes.scripts))
        )
    transformations.extend((UseNamedPolymerInvocations(), RemoveNoScript()))
    if options.csp:
        transformations.append(
            SeparateScripts(SeparateScriptsOptions(options.scripts_file))
        )
    transformations.append(DeduplicateImports())
    if options.strip:
        transformations.append(RemoveCommentsAndWhitespace())

    return TransformationSequence(*transformations)(fragment)


def make_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vulcanize",
        description="Flattens an HTML document's imports into a single document.",
    )
    parser.add_argument("input", type=Path, help="The document to flatten.")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT,
        help=f"The output file, default: {DEFAULT_OUTPUT}",
    )
    parser.add_argument(
        "--config", type=Path, help="A JSON file with exclusion patterns."
    )
    for category in ("imports", "scripts", "styles"):
        parser.add_argument(
            f"--exclude-{category}",
            action="append",
            default=[],
            metavar="PATTERN",
            help=f"A regular expression for {category} that are to be left as is.",
        )
    parser.add_argument(
        "--inline", action="store_true", help="Inline external scripts."
    )
    parser.add_argument(
        "--csp",
        action="store_true",
        help="Move inline scripts into a separate file.",
    )
    parser.add_argument(
        "--csp-file",
        type=Path,
        help="The file for separated scripts, default: the output's name with .js",
    )
    parser.add_argument(
        "--strip",
        action="store_true",
        help="Remove comments and insignificant whitespace.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log details.")
    return parser


def make_options(arguments: argparse.Namespace) -> VulcanizeOptions:
    """
    Builds the options from parsed command line arguments.

    :raises ConfigurationError: When the configuration file or a pattern is invalid.
    """
    excludes = Excludes(
        imports=compile_patterns(arguments.exclude_imports),
        scripts=compile_patterns(arguments.exclude_scripts),
        styles=compile_patterns(arguments.exclude_styles),
    )
    if arguments.config is not None:
        excludes = read_config_file(arguments.config).merge(excludes)

    return VulcanizeOptions(
        input=arguments.input,
        output=arguments.output,
        excludes=excludes,
        inline=arguments.inline,
        csp=arguments.csp,
        csp_file=arguments.csp_file,
        strip=arguments.strip,
        verbose=arguments.verbose,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    arguments = make_argument_parser().parse_args(argv)
    logging.basicConfig(
        format="%(message)s",
        level=logging.INFO if arguments.verbose else logging.WARNING,
    )

    try:
        options = make_options(arguments)
        result = render_document(vulcanize(options))
        options.output.write_text(result, encoding="utf-8")
    except (OSError, VulcanizeBaseException) as e:
        logger.error("Error: %s", e)
        return 1

    logger.info("Wrote %s", options.output)
    return 0


__all__ = (
    main.__name__,
    make_argument_parser.__name__,
    make_options.__name__,
    vulcanize.__name__,
)
