"""Setup configuration for pykook."""

from setuptools import setup, find_packages

setup(
    name="pykook",
    version="0.0.1",
    description="Plugin API for Kook bots with a comment-preserving YAML configuration layer",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "PyYAML>=6.0",
        "prompt_toolkit>=3.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
)
