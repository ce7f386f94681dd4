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
import os
import tempfile
import unittest
import numpy as np

from onvci import LinearExpansion, SpinResolvedONV, SpinResolvedSelectedONVBasis
from onvci.gamessus import read_gamess_us
from onvci.exceptions import InvalidConfiguration

from numpy.testing import assert_allclose
from pytest import raises

testdata_dir = os.path.join(os.path.dirname(__file__), "testdata")


class TestGamessUs(unittest.TestCase):
    def test_read(self):
        fname = os.path.join(testdata_dir, "gamess_expansion.txt")
        onv_basis, coefficients = read_gamess_us(fname)

        assert isinstance(onv_basis, SpinResolvedSelectedONVBasis)
        assert onv_basis.n_orbitals == 46
        assert onv_basis.n_alpha == 1
        assert onv_basis.n_beta == 1
        assert onv_basis.dimension == 2
        assert_allclose(coefficients, [1.0, 0.0])

        # The first character of a GAMESS-US bitstring refers to orbital 0
        first, second = onv_basis.onvs
        assert first == SpinResolvedONV.from_occupations(46, [0], [0])
        assert second == SpinResolvedONV.from_occupations(46, [0], [1])

    def test_linear_expansion(self):
        fname = os.path.join(testdata_dir, "gamess_expansion.txt")
        expansion = LinearExpansion.from_gamess_us(fname)
        assert expansion.dimension == 2
        assert_allclose(expansion.coefficients, [1.0, 0.0])

    def test_malformed(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            fname = os.path.join(tmpdir, "output.log")
            with open(fname, "w") as fp:
                fp.write("No CI expansion in here\n")
            with raises(InvalidConfiguration):
                read_gamess_us(fname)

            with open(fname, "w") as fp:
                fp.write(" ALPHA | BETA | COEFFICIENT\n")
                fp.write(" ------|------|------------\n")
                fp.write(" 0110 | 0011 \n")
            with raises(InvalidConfiguration):
                read_gamess_us(fname)

            with open(fname, "w") as fp:
                fp.write(" ALPHA | BETA | COEFFICIENT\n")
                fp.write(" ------|------|------------\n")
                fp.write(" 0110 | 0011 | 0.5\n")
                fp.write(" 01100 | 00110 | 0.5\n")
            with raises(InvalidConfiguration):
                read_gamess_us(fname)

    def test_bit_order(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            fname = os.path.join(tmpdir, "output.log")
            with open(fname, "w") as fp:
                fp.write(" ALPHA | BETA | COEFFICIENT\n")
                fp.write(" ------|------|------------\n")
                fp.write(" 1100 | 1010 | 0.8\n")
                fp.write(" 1010 | 1100 | -0.6\n")
            onv_basis, coefficients = read_gamess_us(fname)

        assert onv_basis.onvs[0].alpha.occupation_indices == (0, 1)
        assert onv_basis.onvs[0].beta.occupation_indices == (0, 2)
        assert onv_basis.onvs[1].as_string() == "0101|0011"
        assert_allclose(coefficients, np.array([0.8, -0.6]))
