#!/usr/bin/env python

from setuptools import setup


VERSION = "0.1a1"

setup(
    name="vulcanize",
    version=VERSION,
    description="Flattens HTML imports into a single document.",
    license="AGPL-3.0-or-later",
    packages=["_vulcanize", "_vulcanize.plugins", "vulcanize"],
    python_requires=">=3.10",
    install_requires=["cssselect", "lxml"],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["vulcanize = vulcanize:main"]},
)
