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
import unittest
import itertools

from scipy.special import comb

from onvci import Addresser
from onvci.misc import expand_test_templates
from onvci.exceptions import DimensionMismatch, InvalidConfiguration

from pytest import raises

cases = [(1, 0), (1, 1), (4, 2), (5, 3), (6, 1), (7, 4)]


@expand_test_templates(cases)
class TestAddresser(unittest.TestCase):
    def template_bijective(self, n_orbitals, n_electrons):
        addresser = Addresser(n_orbitals, n_electrons)
        assert addresser.dimension == comb(n_orbitals, n_electrons, exact=True)

        addresses = set()
        for occupation in itertools.combinations(range(n_orbitals),
                                                 n_electrons):
            address = addresser.address(list(occupation))
            assert 0 <= address < addresser.dimension
            assert addresser.occupation(address) == list(occupation)
            addresses.add(address)
        assert len(addresses) == addresser.dimension

    def template_colexicographic(self, n_orbitals, n_electrons):
        addresser = Addresser(n_orbitals, n_electrons)
        keys = [tuple(reversed(addresser.occupation(address)))
                for address in range(addresser.dimension)]
        assert keys == sorted(keys)

    def test_bijective_large(self):
        addresser = Addresser(20, 10)
        assert addresser.dimension == 184756

        # combinations() yields lexicographic order, which is not the address
        # order, so mark the addresses that were hit
        hit = bytearray(addresser.dimension)
        for occupation in itertools.combinations(range(20), 10):
            hit[addresser.address(list(occupation))] = 1
        assert all(hit)
        assert addresser.address(list(range(10))) == 0
        assert addresser.address(list(range(10, 20))) == 184755
        assert addresser.occupation(184755) == list(range(10, 20))

    def test_vertex_weights(self):
        addresser = Addresser(5, 3)
        assert addresser.dimension == 10
        assert addresser.vertex_weight(4, 2) == 6
        assert addresser.vertex_weight(2, 3) == 0
        assert addresser.vertex_weight(3, 0) == 1
        assert addresser.weights.shape == (6, 4)

    def test_address(self):
        addresser = Addresser(5, 3)
        assert addresser.address([0, 1, 2]) == 0
        assert addresser.address([0, 1, 3]) == 1
        assert addresser.address([2, 3, 4]) == 9
        assert addresser.occupation(9) == [2, 3, 4]

    def test_single_configuration(self):
        addresser = Addresser(4, 4)
        assert addresser.dimension == 1
        assert addresser.address([0, 1, 2, 3]) == 0

    def test_errors(self):
        with raises(InvalidConfiguration):
            Addresser(3, 4)
        with raises(InvalidConfiguration):
            Addresser(-1, 0)

        addresser = Addresser(5, 3)
        with raises(DimensionMismatch):
            addresser.address([0, 1])
        with raises(DimensionMismatch):
            addresser.occupation(10)
        with raises(DimensionMismatch):
            addresser.occupation(-1)
