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
import numpy as np

from opt_einsum import contract

from .misc import check_orbital_index
from .DensityMatrices import OneDM, TwoDM
from .DMCalculatorBase import (DMCalculatorBase, embed_frozen_1dm,
                               embed_frozen_same_spin_2dm)


class SpinUnresolvedDMCalculator(DMCalculatorBase):
    """
    Density matrices of expansions in a
    :py:class:`onvci.SpinUnresolvedONVBasis`.
    """
    def calculate_1dm(self, x):
        x = self._check_coefficients(x)
        basis = self.onv_basis
        D = np.diag(basis.occupation_matrix.T @ x**2)
        for I, J, p, q, sign in basis.single_excitations():
            value = sign * x[I] * x[J]
            D[q, p] += value
            D[p, q] += value
        return OneDM(D)

    def calculate_2dm(self, x):
        x = self._check_coefficients(x)
        D = self.calculate_1dm(x).matrix
        return TwoDM(same_spin_2dm(self.onv_basis.coupling_matrices, x, D))

    def calculate_element(self, bra_indices, ket_indices, x):
        """
        Calculate the N-DM element
        ``<x| a+_{b_0} a+_{b_1} .. a_{k_0} a_{k_1} .. |x>`` for the bra
        indices ``b`` and ket indices ``k``.

        The coefficient vector is used as given, i.e. it is not normalised.
        Contributions which violate the Pauli principle vanish.

        Parameters
        ----------
        bra_indices : list
            Orbital indices of the creators
        ket_indices : list
            Orbital indices of the annihilators
        x : array-like
            Coefficient vector
        """
        x = self._check_coefficients(x)
        basis = self.onv_basis
        for index in list(bra_indices) + list(ket_indices):
            check_orbital_index(index, basis.n_orbitals)

        # Annihilating the bra indices of a bra ONV reduces it to a pattern,
        # which uniquely identifies the bra ONV.
        reduced_bras = {}
        for bra, I in basis:
            success, sign = bra.annihilate_all(bra_indices)
            if success:
                reduced_bras[bra.representation] = (I, sign)

        value = 0.0
        for ket, J in basis:
            success, ket_sign = ket.annihilate_all(list(reversed(ket_indices)))
            if not success or ket.representation not in reduced_bras:
                continue
            I, bra_sign = reduced_bras[ket.representation]
            value += bra_sign * ket_sign * x[I] * x[J]
        return value


def same_spin_2dm(coupling_matrices, x, D):
    """
    Same-spin 2-DM ``d_pqrs = <E_pq E_rs> - delta_qr D_ps`` from the
    excitation-operator matrices acting on the coefficients `x`, which
    may also be a matrix of alpha (rows) times beta (columns) coefficients.
    """
    M = len(coupling_matrices)
    V = np.array([[coupling_matrices[p][q] @ x for q in range(M)]
                  for p in range(M)])
    V = V.reshape(M, M, -1)
    # <E_pq E_rs> = (E_qp x) . (E_rs x)
    d = contract("qpi,rsi->pqrs", V, V)
    for q in range(M):
        d[:, q, q, :] -= D
    return d


class SpinUnresolvedFrozenDMCalculator(DMCalculatorBase):
    """
    Density matrices of expansions in a
    :py:class:`onvci.SpinUnresolvedFrozenONVBasis`, calculated in the
    active space and embedded into the full orbital space.
    """
    def __init__(self, onv_basis):
        super().__init__(onv_basis)
        self.active_calculator = SpinUnresolvedDMCalculator(
            onv_basis.active_onv_basis
        )

    def calculate_1dm(self, x):
        x = self._check_coefficients(x)
        D = self.active_calculator.calculate_1dm(x)
        return embed_frozen_1dm(D, self.onv_basis.n_frozen)

    def calculate_2dm(self, x):
        x = self._check_coefficients(x)
        D = self.active_calculator.calculate_1dm(x)
        d = self.active_calculator.calculate_2dm(x)
        return embed_frozen_same_spin_2dm(D, d, self.onv_basis.n_frozen)
