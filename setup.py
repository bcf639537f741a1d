#!/usr/bin/env python3
"""
Setup script for lazyconf package.
"""

from setuptools import setup, find_packages

setup(
    name="lazyconf",
    version="0.3.0",
    description="Declarative first-run configuration with interactive elicitation",
    author="lazyconf Team",
    package_dir={"": "src"},
    packages=find_packages(where="src", include=["lazyconf", "lazyconf.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyYAML>=6.0",
        "questionary>=2.0",
        "rich>=13.0",
        "typer>=0.9",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "lazyconf=lazyconf.cli.main:run",
        ],
    },
)
