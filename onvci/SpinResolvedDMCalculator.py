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

from .DensityMatrices import SpinResolvedOneDM, SpinResolvedTwoDM
from .DMCalculatorBase import (DMCalculatorBase, embed_frozen_1dm,
                               embed_frozen_mixed_spin_2dm,
                               embed_frozen_same_spin_2dm)
from .SpinUnresolvedDMCalculator import same_spin_2dm


class SpinResolvedDMCalculator(DMCalculatorBase):
    """
    Density matrices of expansions in a full
    :py:class:`onvci.SpinResolvedONVBasis`.
    """
    def _coefficient_matrix(self, x):
        x = self._check_coefficients(x)
        return x.reshape(self.onv_basis.alpha.dimension,
                         self.onv_basis.beta.dimension)

    def calculate_spin_resolved_1dm(self, x):
        C = self._coefficient_matrix(x)
        alpha, beta = self.onv_basis.alpha, self.onv_basis.beta

        D_alpha = np.diag(alpha.occupation_matrix.T @ np.sum(C**2, axis=1))
        for I, J, p, q, sign in alpha.single_excitations():
            value = sign * (C[I] @ C[J])
            D_alpha[q, p] += value
            D_alpha[p, q] += value

        D_beta = np.diag(beta.occupation_matrix.T @ np.sum(C**2, axis=0))
        for I, J, p, q, sign in beta.single_excitations():
            value = sign * (C[:, I] @ C[:, J])
            D_beta[q, p] += value
            D_beta[p, q] += value
        return SpinResolvedOneDM(D_alpha, D_beta)

    def calculate_spin_resolved_2dm(self, x):
        C = self._coefficient_matrix(x)
        D = self.calculate_spin_resolved_1dm(x)
        E_alpha = self.onv_basis.alpha.coupling_matrices
        E_beta = self.onv_basis.beta.coupling_matrices
        K = self.onv_basis.n_orbitals

        d_aaaa = same_spin_2dm(E_alpha, C, D.alpha.matrix)
        d_bbbb = same_spin_2dm(E_beta, C.T, D.beta.matrix)

        # The beta excitation operators act on the columns of C
        V_alpha = np.array([[(E_alpha[p][q] @ C).ravel() for q in range(K)]
                            for p in range(K)]).reshape(K, K, -1)
        V_beta = np.array([[(E_beta[p][q] @ C.T).T.ravel() for q in range(K)]
                           for p in range(K)]).reshape(K, K, -1)
        d_aabb = contract("qpi,rsi->pqrs", V_alpha, V_beta)
        d_bbaa = d_aabb.transpose(2, 3, 0, 1)
        return SpinResolvedTwoDM(d_aaaa, d_aabb, d_bbaa, d_bbbb)


class SpinResolvedFrozenDMCalculator(DMCalculatorBase):
    """
    Density matrices of expansions in a
    :py:class:`onvci.SpinResolvedFrozenONVBasis`, calculated in the
    active space and embedded into the full orbital space.
    """
    def __init__(self, onv_basis):
        super().__init__(onv_basis)
        self.active_calculator = SpinResolvedDMCalculator(
            onv_basis.active_onv_basis
        )

    def calculate_spin_resolved_1dm(self, x):
        x = self._check_coefficients(x)
        D = self.active_calculator.calculate_spin_resolved_1dm(x)
        X = self.onv_basis.n_frozen
        return SpinResolvedOneDM(embed_frozen_1dm(D.alpha, X),
                                 embed_frozen_1dm(D.beta, X))

    def calculate_spin_resolved_2dm(self, x):
        x = self._check_coefficients(x)
        D = self.active_calculator.calculate_spin_resolved_1dm(x)
        d = self.active_calculator.calculate_spin_resolved_2dm(x)
        X = self.onv_basis.n_frozen
        return SpinResolvedTwoDM(
            embed_frozen_same_spin_2dm(D.alpha, d.aaaa, X),
            embed_frozen_mixed_spin_2dm(D.alpha, D.beta, d.aabb, X),
            embed_frozen_mixed_spin_2dm(D.beta, D.alpha, d.bbaa, X),
            embed_frozen_same_spin_2dm(D.beta, d.bbbb, X),
        )
