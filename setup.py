#!/usr/bin/env python3
## vi: tabstop=4 shiftwidth=4 softtabstop=4 expandtab
## ---------------------------------------------------------------------
##
## Copyright (C) 2024 by the onvci authors
##
## This file is part of onvci.
##
## onvci is free software: you can redistribute it and/or modify
## it under the terms of the GNU General Public License as published
## by the Free Software Foundation, either version 3 of the License, or
## (at your option) any later version.
##
## onvci is distributed in the hope that it will be useful,
## but WITHOUT ANY WARRANTY; without even the implied warranty of
## MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
## GNU General Public License for more details.
##
## You should have received a copy of the GNU General Public License
## along with onvci. If not, see <http://www.gnu.org/licenses/>.
##
## ---------------------------------------------------------------------

"""Setup for onvci"""
import os
import sys
import shlex

from setuptools import Command, find_packages, setup


#
# Custom commands
#
class PyTest(Command):
    description = "Run the onvci testsuite with pytest"
    user_options = [
        ("mode=", "m", "Mode for the testsuite (fast or full)"),
        ("pytest-args=", "a", "Arguments to pass to pytest"),
    ]

    def initialize_options(self):
        self.pytest_args = ""
        self.mode = "fast"

    def finalize_options(self):
        if self.mode not in ["fast", "full"]:
            raise Exception("Only test modes 'fast' and 'full' are supported")

    def run(self):
        # import here, cause outside the eggs aren't loaded
        import pytest

        if not os.path.isfile("onvci/testdata/gamess_expansion.txt"):
            raise RuntimeError("Can only test from git repository, "
                               "not from installation tarball.")

        args = ["onvci"]
        args += ["--mode", self.mode]
        args += shlex.split(self.pytest_args)
        errno = pytest.main(args)
        sys.exit(errno)


def read_readme():
    with open("README.md") as fp:
        return fp.read()


if not os.path.isfile("onvci/__init__.py"):
    raise RuntimeError("Running setup.py is only supported "
                       "from top level of repository as './setup.py <command>'")

setup(
    name="onvci",
    description="onvci:  Configuration interaction in ONV bases",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    keywords=[
        "CI", "configuration", "interaction", "FCI", "DOCI", "ONV",
        "density", "matrices", "electronic", "structure", "computational",
        "chemistry", "quantum",
    ],
    #
    author="the onvci authors",
    license="GPL v3",
    #
    version="0.1.0",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Chemistry",
        "Programming Language :: Python :: 3",
        "Operating System :: MacOS :: MacOS X",
        "Operating System :: POSIX :: Linux",
    ],
    #
    packages=find_packages(exclude=["*.tests", "tests"]),
    package_data={"onvci.testdata": ["*.txt"]},
    zip_safe=False,
    #
    platforms=["Linux", "Mac OS-X"],
    python_requires=">=3.8",
    install_requires=[
        "opt_einsum >= 3.0",
        "numpy >= 1.14",
        "scipy >= 1.2",
        "h5py >= 2.9",
    ],
    extras_require={
        "test": ["pytest", "pytest-cov"],
    },
    #
    cmdclass={"pytest": PyTest},
)
