"""
co1-extract - CO1 barcode retrieval from NCBI GenBank

Collects cytochrome c oxidase subunit 1 sequences per taxonomic group,
cutting the CO1 coding region out of complete genome records.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text()

setup(
    name="co1-extract",
    version="1.0.0",
    author="Austin P. Morrissey",
    author_email="austin.morrissey@proton.me",
    description="CO1 sequence retrieval and extraction from NCBI GenBank",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    install_requires=[
        "biopython>=1.79",
        "pandas>=1.3.0",
        "openpyxl>=3.0.0",
        "click>=8.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-cov>=2.0",
            "black>=21.0",
            "mypy>=0.900",
        ],
    },
    entry_points={
        "console_scripts": [
            "co1-extract=co1_extract.cli:main",
        ],
    },
)
