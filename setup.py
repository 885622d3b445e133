"""Setup script for cutlist_intake package."""

from setuptools import setup, find_packages

setup(
    name="cutlist_intake",
    version="1.0.0",
    description="Cutlist shorthand parsing, confidence scoring and accuracy learning",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov",
        ],
    },
    entry_points={
        "console_scripts": [
            "cutlist-intake=cutlist_intake.cli:main",
        ],
    },
)
