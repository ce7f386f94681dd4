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
import numpy as np

from onvci import (SQHamiltonian, SQOneElectronOperator, SeniorityZeroONVBasis,
                   SpinResolvedONV, SpinResolvedONVBasis,
                   SpinResolvedFrozenONVBasis, SpinResolvedSelectedONVBasis)
from onvci.misc import expand_test_templates
from onvci.exceptions import DimensionMismatch, InvalidConfiguration
from onvci.SpinResolvedSelectedONVBasis import (double_excitation,
                                                single_excitation)
from onvci.testdata.reference import submatrix

from numpy.testing import assert_allclose
from pytest import raises

cases = [(3, 1, 1), (4, 2, 1), (4, 2, 2), (5, 3, 1)]


@expand_test_templates(cases)
class TestSpinResolvedSelectedONVBasis(unittest.TestCase):
    def template_full_selection(self, n_orbitals, n_alpha, n_beta):
        fci_basis = SpinResolvedONVBasis(n_orbitals, n_alpha, n_beta)
        basis = SpinResolvedSelectedONVBasis.from_onv_basis(fci_basis)
        assert basis.dimension == fci_basis.dimension

        hamiltonian = SQHamiltonian.random(n_orbitals, random_state=31)
        reference = fci_basis.evaluate_operator_dense(hamiltonian)
        assert_allclose(basis.evaluate_operator_dense(hamiltonian), reference,
                        atol=1e-12)
        assert_allclose(basis.evaluate_operator_diagonal(hamiltonian),
                        np.diag(reference), atol=1e-12)
        assert_allclose(basis.evaluate_operator_sparse(hamiltonian).toarray(),
                        reference, atol=1e-12)

    def template_partial_selection(self, n_orbitals, n_alpha, n_beta):
        fci_basis = SpinResolvedONVBasis(n_orbitals, n_alpha, n_beta)
        rng = np.random.default_rng(13)
        n_select = max(1, fci_basis.dimension // 2)
        addresses = rng.permutation(fci_basis.dimension)[:n_select]

        basis = SpinResolvedSelectedONVBasis(n_orbitals, n_alpha, n_beta)
        for address in addresses:
            basis.add_onv(fci_basis.construct_onv_from_address(address))
        for index, address in enumerate(addresses):
            assert basis.address_of(basis.onv_with_index(index)) == index
            assert fci_basis.address_of(basis.onvs[index]) == address

        hamiltonian = SQHamiltonian.random(n_orbitals, random_state=37)
        reference = submatrix(fci_basis.evaluate_operator_dense(hamiltonian),
                              basis, fci_basis)
        assert_allclose(basis.evaluate_operator_dense(hamiltonian), reference,
                        atol=1e-12)
        x = rng.uniform(-1, 1, size=basis.dimension)
        assert_allclose(
            basis.evaluate_operator_matrix_vector_product(hamiltonian, x),
            reference @ x, atol=1e-12
        )

    def template_sparse_without_dense(self, n_orbitals, n_alpha, n_beta):
        fci_basis = SpinResolvedONVBasis(n_orbitals, n_alpha, n_beta)
        hamiltonian = SQHamiltonian.random(n_orbitals, random_state=67)
        reference = fci_basis.evaluate_operator_dense(hamiltonian)

        basis = SpinResolvedSelectedONVBasis.from_onv_basis(fci_basis)

        def no_dense(*args, **kwargs):
            raise MemoryError("Dense evaluation must not be used.")
        basis.evaluate_operator_dense = no_dense

        H = basis.evaluate_operator_sparse(hamiltonian)
        assert H.format == "csr"
        assert H.shape == (basis.dimension, basis.dimension)
        assert_allclose(H.toarray(), reference, atol=1e-12)

        x = np.random.default_rng(3).uniform(-1, 1, size=basis.dimension)
        assert_allclose(
            basis.evaluate_operator_matrix_vector_product(hamiltonian, x),
            reference @ x, atol=1e-12
        )

    def template_one_electron_operator(self, n_orbitals, n_alpha, n_beta):
        fci_basis = SpinResolvedONVBasis(n_orbitals, n_alpha, n_beta)
        basis = SpinResolvedSelectedONVBasis.from_onv_basis(fci_basis)
        f = np.random.default_rng(8).uniform(-1, 1, size=2 * (n_orbitals, ))
        operator = SQOneElectronOperator(f + f.T)
        assert_allclose(basis.evaluate_operator_dense(operator),
                        fci_basis.evaluate_operator_dense(operator), atol=1e-12)

    def test_from_other_bases(self):
        doci = SeniorityZeroONVBasis(4, 2)
        basis = SpinResolvedSelectedONVBasis.from_onv_basis(doci)
        assert basis.dimension == doci.dimension
        assert all(onv.seniority == 0 for onv in basis.onvs)

        frozen = SpinResolvedFrozenONVBasis(5, 2, 2, 1)
        basis = SpinResolvedSelectedONVBasis.from_onv_basis(frozen)
        assert basis.onvs == frozen.onvs

    def test_add_onv_from_string(self):
        basis = SpinResolvedSelectedONVBasis(4, 2, 1)
        basis.add_onv_from_string("0011", "0001")
        basis.add_onv_from_string("0101", "0010")
        assert basis.dimension == 2
        assert basis.address_of(SpinResolvedONV.from_string("0101", "0010")) == 1
        assert basis.to_dict() == {
            "type": "SpinResolvedSelectedONVBasis", "n_orbitals": 4,
            "n_alpha": 2, "n_beta": 1, "alpha": ["0011", "0101"],
            "beta": ["0001", "0010"],
        }

    def test_invalid_onvs(self):
        basis = SpinResolvedSelectedONVBasis(4, 2, 1)
        basis.add_onv_from_string("0011", "0001")
        with raises(InvalidConfiguration):
            basis.add_onv_from_string("0011", "0001")
        with raises(InvalidConfiguration):
            basis.add_onv_from_string("0111", "0001")
        with raises(InvalidConfiguration):
            basis.add_onv_from_string("00011", "00001")
        with raises(InvalidConfiguration):
            basis.address_of(SpinResolvedONV.from_string("1001", "0001"))
        with raises(InvalidConfiguration):
            SpinResolvedSelectedONVBasis(2, 3, 1)
        with raises(DimensionMismatch):
            basis.evaluate_operator_dense(SQHamiltonian.random(3))


class TestExcitations(unittest.TestCase):
    def test_single_excitation(self):
        onv_I = SpinResolvedONV.from_string("0110", "0001").alpha
        onv_J = SpinResolvedONV.from_string("0011", "0001").alpha
        # <0110| a+_2 a_0 |0011>: a_0 gives +1, a+_2 passes orbital 1
        assert single_excitation(onv_I, onv_J) == (2, 0, -1)

    def test_double_excitation(self):
        onv_I = SpinResolvedONV.from_string("1100", "0001").alpha
        onv_J = SpinResolvedONV.from_string("0011", "0001").alpha
        p, q, r, s, sign = double_excitation(onv_I, onv_J)
        assert (p, q, r, s) == (2, 0, 3, 1)
        # a+_2 a+_3 a_1 a_0 |0011> = +|1100>
        assert sign == 1
