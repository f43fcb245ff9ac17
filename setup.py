"""
Setup script for PDF Builder CLI.

This script configures the package for installation via pip.
Supports both development and production installations.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README for long description
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding='utf-8')

# Read requirements
requirements = (this_directory / "requirements.txt").read_text(encoding='utf-8').splitlines()

setup(
    name="pdf-builder-cli",
    version="1.0.0",
    description="Concurrent CLI tool for building one PDF per document from OPT/LFP image load files",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="PDF Builder CLI Contributors",
    author_email="",
    packages=find_packages(include=["pdf_builder", "pdf_builder.*"]),
    install_requires=[line for line in requirements if line and not line.startswith("#")],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pdf-builder=pdf_builder.cli:cli",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "Intended Audience :: Developers",
        "Topic :: Office/Business",
        "Topic :: Utilities",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Operating System :: OS Independent",
        "Environment :: Console",
    ],
    keywords="pdf image tiff scan load-file opt lfp batch convert",
    license="MIT",
    include_package_data=True,
    zip_safe=False,
)
