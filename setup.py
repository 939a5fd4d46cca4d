# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause

import re
import sys
from pathlib import Path

from setuptools import find_packages, setup

if not sys.version_info[:2] >= (3, 10):
    sys.exit(
        f"rpmtrust is only meant for Python 3.10 and up. "
        f"current version: {sys.version_info.major}.{sys.version_info.minor}"
    )

here = Path(__file__).parent
version = re.search(
    r'^__version__ = "([^"]+)"', (here / "rpmtrust" / "__init__.py").read_text(), re.M
).group(1)

long_description = """
rpmtrust verifies the RPM packages referenced by a Bazel workspace. It builds a
keyring from the gpgkey locations of the repositories in a repository file,
downloads every ``rpm`` rule of the workspace from its mirrors, checks the
OpenPGP signatures embedded in each package against that keyring and compares
the sha256 sum of the downloaded file with the one recorded in the workspace.
"""
install_requires = [
    "frozendict >=2.4.2",
    "python-gnupg >=0.5.0",
    "requests >=2.28.0,<3",
    "ruamel.yaml >=0.17,<0.19",
]

setup(
    name="rpmtrust",
    version=version,
    author="Anaconda, Inc.",
    author_email="conda@continuum.io",
    url="https://github.com/conda/rpmtrust",
    license="BSD-3-Clause",
    description=(
        "Authenticity and integrity verification for RPM packages "
        "referenced by a build workspace."
    ),
    long_description=long_description,
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Operating System :: POSIX",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    packages=find_packages(exclude=("tests", "tests.*", "build", ".tox")),
    entry_points={
        "console_scripts": [
            "rpmtrust=rpmtrust.cli.main:main",
        ],
    },
    install_requires=install_requires,
    extras_require={
        "test": [
            "pytest >=7",
            "pytest-mock",
            "responses",
        ],
    },
    python_requires=">=3.10",
    zip_safe=False,
)
