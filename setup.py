# setup.py
"""Setup script for the media upload reconciliation tool."""

import os

from setuptools import setup, find_packages

setup(
    name="media-sync",
    version="1.0.0",
    description="Reconcile a local media library against a remote photo catalog and upload the difference",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Media Sync Team",
    packages=find_packages(include=["media_sync", "media_sync.*"]),
    python_requires=">=3.8",
    install_requires=[
        "Pillow>=9.0.0",
        "tqdm>=4.50.0",
        "requests>=2.25.0",
    ],
    extras_require={
        "test": [
            "pytest>=6.0.0",
            "pytest-cov>=2.10.0",
            "pytest-mock>=3.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "media-sync=media_sync.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Multimedia :: Graphics",
        "Topic :: System :: Archiving",
    ],
)

# requirements.txt
# Core dependencies
# Pillow>=9.0.0
# tqdm>=4.50.0
# requests>=2.25.0
#
# Development dependencies (optional)
# pytest>=6.0.0
# pytest-cov>=2.10.0
# pytest-mock>=3.0.0
