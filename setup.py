"""
Setup script for PDF Handouts.

This script configures the package for installation via pip.
Supports both development and production installations.
"""

from setuptools import setup, find_packages

setup(
    name="pdf-handouts",
    version="0.1.0",
    description="Merge PDFs and stamp them with titles and multi-column footers",
    long_description=(
        "Command-line tool and library that merges PDF files and overlays a "
        "first-page title and left/center/right footers with page numbers, "
        "dates and inline styling, using an embedded font subset."
    ),
    long_description_content_type="text/plain",
    author="PDF Handouts Contributors",
    author_email="",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pypdf>=3.0.0",
        "reportlab>=4.0.0",
        "click>=8.0.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pdf-handouts=pdf_handouts.cli:cli",
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
    keywords="pdf handouts merge header footer overlay stamp page-numbers cli",
    license="MIT",
    include_package_data=True,
    zip_safe=False,
)
