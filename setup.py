"""
Setuptools build script for aicmd.

This file allows installation of the ``aicmd`` package via
``pip install .``.  It declares the required dependencies and
registers a console script entry point named ``aicmd``.  When
installed, users can invoke the CLI with ``aicmd`` from their shell.

Both ``httpx`` and ``requests`` are declared; at run time the
``http_client`` setting picks one, or the first installed one is used.
"""

from setuptools import setup, find_packages

setup(
    name="aicmd",
    version="0.1.0",
    description="Translate natural language into a shell command using OpenRouter, OpenAI, Anthropic or a local model",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "click>=8.0",
        "PyYAML>=5.4",
        "httpx>=0.24",
        "requests>=2.28",
        "fastapi>=0.80",
        "uvicorn>=0.20",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "aicmd=aicmd.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
