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
import pytest


#
# Pytest Hooks
#

def pytest_addoption(parser):
    parser.addoption(
        "--mode", default="fast", choices=["fast", "full"],
        help="Mode for testing (fast or full)"
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "slow: larger ONV bases, only run with '--mode full'"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("mode", default="fast") == "fast":
        skip_slow = pytest.mark.skip(reason="need '--mode full' option to run.")
        for item in items:
            if "slow" in item.keywords:
                item.add_marker(skip_slow)
