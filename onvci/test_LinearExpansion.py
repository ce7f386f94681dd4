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

from onvci import (LinearExpansion, SQHamiltonian, SeniorityZeroONVBasis,
                   SpinResolvedFrozenONVBasis, SpinResolvedONV,
                   SpinResolvedONVBasis, SpinResolvedSelectedONVBasis,
                   SpinUnresolvedFrozenONVBasis, SpinUnresolvedONV,
                   SpinUnresolvedONVBasis)
from onvci.misc import assert_allclose_signfix, expand_test_templates
from onvci.exceptions import DimensionMismatch, InvalidConfiguration
from onvci.LinearExpansion import lu_no_pivot
from onvci.testdata.reference import random_rotation

from numpy.testing import assert_allclose
from pytest import approx, raises

transform_cases = [(3, 1, 1), (3, 2, 2), (4, 2, 2), (4, 3, 1), (5, 3, 2)]


def ground_state(onv_basis, hamiltonian):
    H = onv_basis.evaluate_operator_dense(hamiltonian)
    _, eigenvectors = np.linalg.eigh(H)
    return LinearExpansion(onv_basis, eigenvectors[:, 0])


@expand_test_templates(transform_cases)
class TestBasisTransform(unittest.TestCase):
    def template_against_rotated_hamiltonian(self, n_orbitals, n_alpha, n_beta):
        basis = SpinResolvedONVBasis(n_orbitals, n_alpha, n_beta)
        hamiltonian = SQHamiltonian.random(n_orbitals, random_state=71)
        U = random_rotation(n_orbitals, random_state=73, scale=0.3)

        expansion = ground_state(basis, hamiltonian)
        expansion.basis_transform(U)
        reference = ground_state(basis, hamiltonian.transformed(U))

        assert np.linalg.norm(expansion.coefficients) == approx(1.0)
        # Eigenvectors from eigh carry errors of about eps / (spectral gap)
        assert_allclose_signfix(expansion.coefficients, reference.coefficients,
                                atol=1e-10)

    def template_inverse(self, n_orbitals, n_alpha, n_beta):
        basis = SpinResolvedONVBasis(n_orbitals, n_alpha, n_beta)
        expansion = LinearExpansion.random(basis, random_state=79)
        original = expansion.coefficients.copy()

        U = random_rotation(n_orbitals, random_state=83, scale=0.3)
        expansion.basis_transform(U)
        expansion.basis_transform(U.T)
        assert_allclose(expansion.coefficients, original, atol=1e-12)


class TestLinearExpansion(unittest.TestCase):
    def test_normalisation(self):
        basis = SpinUnresolvedONVBasis(3, 1)
        expansion = LinearExpansion(basis, [1, 2, -3])
        assert np.linalg.norm(expansion.coefficients) == approx(1.0, abs=1e-12)
        assert_allclose(expansion.coefficients,
                        np.array([1, 2, -3]) / np.sqrt(14))
        assert expansion.dimension == 3
        assert expansion.coefficient(2) == approx(-3 / np.sqrt(14))

    def test_invalid(self):
        basis = SpinUnresolvedONVBasis(3, 1)
        with raises(DimensionMismatch):
            LinearExpansion(basis, [1, 0])
        with raises(InvalidConfiguration):
            LinearExpansion(basis, [0, 0, 0])

        expansion = LinearExpansion.constant(basis)
        with raises(DimensionMismatch):
            expansion.coefficients = [1, 2]
        expansion.coefficients = [2, 0, 0]
        assert_allclose(expansion.coefficients, [2, 0, 0])

    def test_named_constructors(self):
        basis = SpinResolvedONVBasis(4, 2, 2)
        hf = LinearExpansion.hartree_fock(basis)
        assert hf.coefficient(0) == 1.0
        assert np.count_nonzero(hf.coefficients) == 1

        constant = LinearExpansion.constant(basis)
        assert_allclose(constant.coefficients,
                        np.full(basis.dimension, 1 / 6))

        random = LinearExpansion.random(basis, random_state=1)
        assert np.linalg.norm(random.coefficients) == approx(1.0)
        assert random.is_approx(LinearExpansion.random(basis, random_state=1))
        assert not random.is_approx(LinearExpansion.random(basis,
                                                           random_state=2))

    def test_is_approx_sign(self):
        basis = SpinUnresolvedONVBasis(4, 2)
        expansion = LinearExpansion.random(basis, random_state=3)
        negated = LinearExpansion(basis, -expansion.coefficients)
        assert expansion.is_approx(negated)
        assert not expansion.is_approx(
            LinearExpansion.random(SpinUnresolvedONVBasis(5, 2))
        )

    def test_shannon_entropy(self):
        basis = SpinUnresolvedONVBasis(4, 1)
        assert LinearExpansion.hartree_fock(basis).shannon_entropy() \
            == approx(0.0, abs=1e-14)
        assert LinearExpansion.constant(basis).shannon_entropy() == approx(2.0)

        # Negative coefficients contribute like positive ones
        expansion = LinearExpansion(basis, [1, -1, 0, 0])
        assert expansion.shannon_entropy() == approx(1.0)

    def test_for_each(self):
        basis = SpinUnresolvedONVBasis(3, 2)
        expansion = LinearExpansion(basis, [3, 0, 4])
        visited = []
        expansion.for_each(lambda c, onv: visited.append((c, onv.as_string())))
        assert visited == [(0.6, "011"), (0.0, "101"), (0.8, "110")]

    def test_lu_no_pivot(self):
        A = np.array([[4.0, 3.0, 2.0],
                      [2.0, 1.0, 3.0],
                      [3.0, 2.0, 1.0]])
        L, U = lu_no_pivot(A)
        assert_allclose(L @ U, A)
        assert_allclose(np.diag(L), 1)
        assert_allclose(np.triu(L, 1), 0)
        assert_allclose(np.tril(U, -1), 0)

        with raises(np.linalg.LinAlgError):
            lu_no_pivot(np.array([[0.0, 1.0], [1.0, 0.0]]))

    def test_basis_transform_identity(self):
        basis = SpinResolvedONVBasis(4, 2, 1)
        expansion = LinearExpansion.random(basis, random_state=5)
        original = expansion.coefficients.copy()
        expansion.basis_transform(np.eye(4))
        assert_allclose(expansion.coefficients, original, atol=1e-14)

    def test_basis_transform_errors(self):
        expansion = LinearExpansion.random(SpinResolvedONVBasis(3, 1, 1))
        with raises(DimensionMismatch):
            expansion.basis_transform(np.eye(4))

        # Swapping orbitals 0 and 1 has no LU decomposition without pivoting
        original = expansion.coefficients.copy()
        swap = np.array([[0.0, 1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 1.0]])
        with raises(InvalidConfiguration):
            expansion.basis_transform(swap)
        assert_allclose(expansion.coefficients, original)

        for basis in [SpinUnresolvedONVBasis(3, 1), SeniorityZeroONVBasis(3, 1),
                      SpinResolvedSelectedONVBasis.from_onv_basis(
                          SpinResolvedONVBasis(3, 1, 1))]:
            with raises(NotImplementedError):
                LinearExpansion.constant(basis).basis_transform(np.eye(3))


class TestONVProjection(unittest.TestCase):
    def test_single_electron(self):
        U = random_rotation(4, random_state=11)
        for j in range(4):
            onv = SpinUnresolvedONV(4, [j])
            expansion = LinearExpansion.from_onv_projection(
                onv, np.eye(4), U, np.eye(4)
            )
            assert isinstance(expansion.onv_basis, SpinUnresolvedONVBasis)
            assert_allclose(expansion.coefficients, U[:, j], atol=1e-12)

    def test_same_orbitals(self):
        onv = SpinUnresolvedONV(5, [0, 2, 3])
        expansion = LinearExpansion.from_onv_projection(
            onv, np.eye(5), np.eye(5), np.eye(5)
        )
        reference = np.zeros(expansion.dimension)
        reference[expansion.onv_basis.address_of(onv)] = 1.0
        assert_allclose(expansion.coefficients, reference, atol=1e-12)

    def test_spin_resolved_product(self):
        U = random_rotation(3, random_state=13)
        onv = SpinResolvedONV.from_occupations(3, [0], [1])
        expansion = LinearExpansion.from_onv_projection(
            onv, np.eye(3), (U, U), np.eye(3), S_of=(np.eye(3), np.eye(3))
        )
        assert isinstance(expansion.onv_basis, SpinResolvedONVBasis)
        assert_allclose(expansion.coefficients, np.outer(U[:, 0], U[:, 1]).ravel(),
                        atol=1e-12)

    def test_against_basis_transform(self):
        # The Hartree-Fock ONV in the orbitals C U, expressed in the
        # orbitals C, is the same state transformed by U.T.
        U = random_rotation(4, random_state=17, scale=0.3)
        basis = SpinResolvedONVBasis(4, 2, 1)
        onv = basis.onvs[0]
        projection = LinearExpansion.from_onv_projection(
            onv, np.eye(4), (U, U), np.eye(4)
        )
        transformed = LinearExpansion.hartree_fock(basis)
        transformed.basis_transform(U.T)
        assert_allclose_signfix(projection.coefficients,
                                transformed.coefficients, atol=1e-10)

    def test_nonorthogonal_ao_basis(self):
        rng = np.random.default_rng(19)
        A = rng.uniform(-1, 1, size=(3, 3))
        S = A @ A.T + 3 * np.eye(3)
        # Orthonormal orbitals with respect to S
        C = np.linalg.cholesky(np.linalg.inv(S))
        onv = SpinUnresolvedONV(3, [1, 2])
        expansion = LinearExpansion.from_onv_projection(onv, C, C, S)
        reference = np.zeros(3)
        reference[expansion.onv_basis.address_of(onv)] = 1.0
        assert_allclose(expansion.coefficients, reference, atol=1e-12)

    def test_errors(self):
        onv = SpinUnresolvedONV(3, [0])
        with raises(InvalidConfiguration):
            LinearExpansion.from_onv_projection(onv, np.eye(3), np.eye(3),
                                                np.eye(3), 2 * np.eye(3))
        with raises(DimensionMismatch):
            LinearExpansion.from_onv_projection(onv, np.eye(3), np.eye(4),
                                                np.eye(3))


basis_factories = {
    "unresolved": lambda: SpinUnresolvedONVBasis(5, 2),
    "fci": lambda: SpinResolvedONVBasis(4, 2, 1),
    "doci": lambda: SeniorityZeroONVBasis(4, 2),
    "unresolved_frozen": lambda: SpinUnresolvedFrozenONVBasis(5, 3, 1),
    "fci_frozen": lambda: SpinResolvedFrozenONVBasis(4, 2, 2, 1),
    "selected": lambda: SpinResolvedSelectedONVBasis(
        3, 1, 1, onvs=[SpinResolvedONV.from_string("001", "001"),
                       SpinResolvedONV.from_string("010", "100")]
    ),
}


@expand_test_templates(list(basis_factories.keys()))
class TestLinearExpansionHdf5(unittest.TestCase):
    def template_roundtrip(self, kind):
        basis = basis_factories[kind]()
        expansion = LinearExpansion.random(basis, random_state=23)
        with tempfile.TemporaryDirectory() as tmpdir:
            fname = os.path.join(tmpdir, "expansion.hdf5")
            expansion.to_hdf5(fname)
            loaded = LinearExpansion.from_hdf5(fname)

        assert type(loaded.onv_basis) is type(basis)
        assert loaded.onv_basis.to_dict() == basis.to_dict()
        assert_allclose(loaded.coefficients, expansion.coefficients)
