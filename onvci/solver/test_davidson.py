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
import warnings
import numpy as np
import scipy.linalg as la

import pytest

from onvci import CIMatrix, SpinResolvedONVBasis, SeniorityZeroONVBasis
from onvci.misc import assert_allclose_signfix
from onvci.workflow import obtain_guesses_by_inspection
from onvci.solver.common import select_eigenpairs
from onvci.solver.davidson import davidson, eigsh, jacobi_davidson
from onvci.solver.preconditioner import JacobiPreconditioner
from onvci.testdata.reference import molecular_like_hamiltonian

from numpy.testing import assert_allclose
from pytest import approx, raises


def setup_matrix(onv_basis, random_state=97):
    hamiltonian = molecular_like_hamiltonian(onv_basis.n_orbitals,
                                             random_state=random_state)
    return CIMatrix(onv_basis, hamiltonian)


class TestSolverDavidson(unittest.TestCase):
    def test_fci_lowest_states(self):
        matrix = setup_matrix(SpinResolvedONVBasis(5, 2, 2))
        eigenvalues, eigenvectors = np.linalg.eigh(matrix.to_ndarray())

        guesses = obtain_guesses_by_inspection(matrix, 6)
        res = jacobi_davidson(matrix, guesses, n_ep=3, conv_tol=1e-9,
                              max_iter=200, max_subspace=40)
        assert res.converged
        assert res.eigenvalues == approx(eigenvalues[:3], abs=1e-8)
        assert np.all(res.residual_norms < 1e-9)
        assert "converged" in res.describe()
        for i in range(3):
            assert_allclose_signfix(res.eigenvectors[i], eigenvectors[:, i],
                                    atol=1e-7)

    def test_doci_largest_state(self):
        matrix = setup_matrix(SeniorityZeroONVBasis(6, 3))
        eigenvalues = np.linalg.eigvalsh(matrix.to_ndarray())

        order = np.argsort(matrix.diagonal())[::-1]
        guesses = [np.eye(len(matrix))[i] for i in order[:4]]
        res = jacobi_davidson(matrix, guesses, n_ep=1, which="LA",
                              conv_tol=1e-9, max_iter=200)
        assert res.converged
        assert res.eigenvalues[0] == approx(eigenvalues[-1], abs=1e-8)

    def test_no_preconditioner(self):
        matrix = setup_matrix(SpinResolvedONVBasis(4, 2, 1))
        eigenvalues = np.linalg.eigvalsh(matrix.to_ndarray())
        guesses = obtain_guesses_by_inspection(matrix, 4)
        res = davidson(matrix, guesses, n_ep=2, conv_tol=1e-9, max_iter=200)
        assert res.converged
        assert res.eigenvalues == approx(eigenvalues[:2], abs=1e-8)
        assert res.n_applies >= 4

    @pytest.mark.slow
    def test_restart(self):
        matrix = setup_matrix(SpinResolvedONVBasis(6, 3, 3))
        eigenvalues = np.linalg.eigvalsh(matrix.to_ndarray())
        guesses = obtain_guesses_by_inspection(matrix, 4)

        identifiers = []

        def callback(state, identifier):
            identifiers.append(identifier)

        res = jacobi_davidson(matrix, guesses, n_ep=2, max_subspace=8,
                              conv_tol=1e-8, max_iter=300, callback=callback)
        assert res.converged
        assert identifiers[0] == "start"
        assert identifiers[-1] == "is_converged"
        assert res.eigenvalues == approx(eigenvalues[:2], abs=1e-7)

    def test_max_iter(self):
        matrix = setup_matrix(SpinResolvedONVBasis(5, 2, 2))
        guesses = obtain_guesses_by_inspection(matrix, 2)
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            res = jacobi_davidson(matrix, guesses, n_ep=2, max_iter=1)
        assert not res.converged
        assert res.n_iter == 1
        assert any(issubclass(w.category, la.LinAlgWarning) for w in caught)

    def test_invalid_arguments(self):
        matrix = setup_matrix(SpinResolvedONVBasis(3, 1, 1))
        guesses = obtain_guesses_by_inspection(matrix, 2)
        with raises(TypeError):
            eigsh(matrix.to_ndarray(), guesses)
        with raises(TypeError):
            eigsh(matrix, [np.ones(4)])
        with raises(TypeError):
            eigsh(matrix, [list(g) for g in guesses])
        with raises(ValueError):
            eigsh(matrix, guesses, n_ep=3)
        with raises(ValueError):
            eigsh(matrix, guesses, n_ep=2, n_block=1)
        with raises(ValueError):
            eigsh(matrix, guesses, n_ep=1, max_subspace=1)
        with raises(ValueError):
            eigsh(matrix, guesses, which="LM")


class TestPreconditioner(unittest.TestCase):
    def test_jacobi(self):
        matrix = setup_matrix(SpinResolvedONVBasis(3, 1, 1))
        preconditioner = JacobiPreconditioner(matrix)
        diagonal = matrix.diagonal()
        residual = np.ones(len(matrix))

        preconditioner.update_shifts(-100.0)
        assert_allclose(preconditioner @ residual, residual / (diagonal + 100.0))

        preconditioner.update_shifts(np.array([-100.0, -200.0]))
        applied = preconditioner @ [residual, residual]
        assert len(applied) == 2
        assert_allclose(applied[1], residual / (diagonal + 200.0))


class TestSelectEigenpairs(unittest.TestCase):
    def test_select(self):
        eigenvalues = np.array([-2.0, -1.0, 0.5, 3.0])
        assert list(select_eigenpairs(eigenvalues, 2, "SA")) == [0, 1]
        assert list(select_eigenpairs(eigenvalues, 1, "LA")) == [3]
        with raises(ValueError):
            select_eigenpairs(eigenvalues, 1, "SM")
