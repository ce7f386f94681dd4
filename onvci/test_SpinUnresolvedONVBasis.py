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

from onvci import (SQHamiltonian, SQOneElectronOperator, SQTwoElectronOperator,
                   SpinUnresolvedONV, SpinUnresolvedONVBasis)
from onvci.misc import expand_test_templates
from onvci.exceptions import DimensionMismatch, InvalidConfiguration
from onvci.testdata.reference import apply_operator_string, dense_hamiltonian

from numpy.testing import assert_allclose
from pytest import raises

cases = [(4, 2), (5, 3), (6, 2), (3, 0), (4, 4)]


def random_nonsymmetric(n_orbitals, random_state):
    rng = np.random.default_rng(random_state)
    h = rng.uniform(-1, 1, size=(n_orbitals, n_orbitals))
    g = rng.uniform(-1, 1, size=4 * (n_orbitals, ))
    return h, g


@expand_test_templates(cases)
class TestSpinUnresolvedONVBasis(unittest.TestCase):
    def template_iteration(self, n_orbitals, n_electrons):
        basis = SpinUnresolvedONVBasis(n_orbitals, n_electrons)
        onvs = [onv for onv, _ in basis]
        assert len(onvs) == basis.dimension
        for address, onv in enumerate(onvs):
            assert onv.n_electrons == n_electrons
            assert basis.address_of(onv) == address
            assert basis.construct_onv_from_address(address) == onv
        representations = [onv.representation for onv in onvs]
        assert representations == sorted(representations)

    def template_single_excitations(self, n_orbitals, n_electrons):
        basis = SpinUnresolvedONVBasis(n_orbitals, n_electrons)
        count = 0
        for I, J, p, q, sign in basis.single_excitations():
            assert q > p
            target, ref_sign = apply_operator_string(basis.onvs[I], [p], [q])
            assert target is not None
            assert basis.address_of(target) == J
            assert sign == ref_sign
            count += 1

        n_upward = sum(1 for onv in basis.onvs
                       for p in onv.occupation_indices
                       for q in range(p + 1, n_orbitals)
                       if not onv.is_occupied(q))
        assert count == n_upward

    def template_hamiltonian(self, n_orbitals, n_electrons):
        basis = SpinUnresolvedONVBasis(n_orbitals, n_electrons)
        h, g = random_nonsymmetric(n_orbitals, 42)
        reference = dense_hamiltonian(basis, h, g)

        hamiltonian = SQHamiltonian(h, g)
        assert_allclose(basis.evaluate_operator_dense(hamiltonian), reference,
                        atol=1e-12)
        assert_allclose(basis.evaluate_operator_diagonal(hamiltonian),
                        np.diag(reference), atol=1e-12)

        x = np.random.default_rng(1).uniform(-1, 1, size=basis.dimension)
        assert_allclose(
            basis.evaluate_operator_matrix_vector_product(hamiltonian, x),
            reference @ x, atol=1e-12
        )

    def template_one_electron_operator(self, n_orbitals, n_electrons):
        basis = SpinUnresolvedONVBasis(n_orbitals, n_electrons)
        h, _ = random_nonsymmetric(n_orbitals, 7)
        reference = dense_hamiltonian(basis, h, np.zeros(4 * (n_orbitals, )))

        operator = SQOneElectronOperator(h)
        assert_allclose(basis.evaluate_operator_dense(operator), reference,
                        atol=1e-12)
        offdiagonal = reference - np.diag(np.diag(reference))
        assert_allclose(basis.evaluate_operator_dense(operator,
                                                      diagonal_values=False),
                        offdiagonal, atol=1e-12)

    def template_two_electron_operator(self, n_orbitals, n_electrons):
        basis = SpinUnresolvedONVBasis(n_orbitals, n_electrons)
        _, g = random_nonsymmetric(n_orbitals, 3)
        reference = dense_hamiltonian(basis, np.zeros((n_orbitals, n_orbitals)),
                                      g)
        operator = SQTwoElectronOperator(g)
        assert_allclose(basis.evaluate_operator_dense(operator), reference,
                        atol=1e-12)
        assert_allclose(basis.evaluate_operator_diagonal(operator),
                        np.diag(reference), atol=1e-12)

    def test_dimensions(self):
        assert SpinUnresolvedONVBasis(4, 2).dimension == 6
        assert SpinUnresolvedONVBasis(10, 5).dimension == 252
        assert SpinUnresolvedONVBasis(3, 0).dimension == 1
        with raises(InvalidConfiguration):
            SpinUnresolvedONVBasis(2, 3)

    def test_next_permutation(self):
        basis = SpinUnresolvedONVBasis(4, 2)
        onv = basis.construct_onv_from_address(0)
        assert onv.as_string() == "0011"
        basis.transform_onv_to_next_permutation(onv)
        assert onv.as_string() == "0101"
        basis.transform_onv_to_next_permutation(onv)
        assert onv.as_string() == "0110"
        basis.transform_onv_to_next_permutation(onv)
        assert onv.as_string() == "1001"

        last = SpinUnresolvedONV.from_string("1100")
        with raises(InvalidConfiguration):
            basis.transform_onv_to_next_permutation(last)

    def test_coupling_matrices(self):
        basis = SpinUnresolvedONVBasis(5, 2)
        E = basis.coupling_matrices
        for p in range(5):
            for q in range(5):
                h = np.zeros((5, 5))
                h[p, q] = 1.0
                reference = dense_hamiltonian(basis, h, np.zeros(4 * (5, )))
                assert_allclose(E[p][q].toarray(), reference)

    def test_number_operator(self):
        basis = SpinUnresolvedONVBasis(6, 3)
        number = SQOneElectronOperator(np.eye(6))
        assert_allclose(basis.evaluate_operator_dense(number),
                        3 * np.eye(basis.dimension))

    def test_wrong_operator_dimension(self):
        basis = SpinUnresolvedONVBasis(4, 2)
        with raises(DimensionMismatch):
            basis.evaluate_operator_dense(SQOneElectronOperator(np.eye(3)))
        with raises(DimensionMismatch):
            basis.evaluate_operator_matrix_vector_product(
                SQOneElectronOperator(np.eye(4)), np.ones(5)
            )
