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

from .DensityMatrices import SpinResolvedOneDM, SpinResolvedTwoDM
from .DMCalculatorBase import DMCalculatorBase


class SeniorityZeroDMCalculator(DMCalculatorBase):
    """
    Density matrices of expansions in a
    :py:class:`onvci.SeniorityZeroONVBasis`. Since every orbital is either
    empty or doubly occupied, the 1-DMs are diagonal and the 2-DMs only
    contain Coulomb-, exchange- and pair-transfer-type elements.
    """
    def calculate_spin_resolved_1dm(self, x):
        x = self._check_coefficients(x)
        D = np.diag(self.onv_basis.occupation_matrix.T @ x**2)
        return SpinResolvedOneDM(D, D.copy())

    def _pair_transfer(self, x):
        """P[p, q] = sum x_I x_J, where I results from J moving the pair q to p"""
        K = self.onv_basis.n_orbitals
        P = np.zeros((K, K))
        for onv, J in self.onv_basis:
            for q in onv.occupation_indices:
                for p in range(K):
                    if onv.is_occupied(p):
                        continue
                    target = onv.copy()
                    target.annihilate(q)
                    target.create(p)
                    P[p, q] += x[self.onv_basis.address_of(target)] * x[J]
        return P

    def calculate_spin_resolved_2dm(self, x):
        x = self._check_coefficients(x)
        n = self.onv_basis.occupation_matrix
        K = self.onv_basis.n_orbitals

        # Joint occupation of orbitals p and r
        nn = n.T @ (x[:, None]**2 * n)
        P = self._pair_transfer(x)

        d_aaaa = np.zeros(4 * (K, ))
        d_aabb = np.zeros(4 * (K, ))
        for p in range(K):
            for r in range(K):
                d_aabb[p, p, r, r] = nn[p, r]
                if p != r:
                    d_aaaa[p, p, r, r] = nn[p, r]
                    d_aaaa[p, r, r, p] = -nn[p, r]
                    d_aabb[p, r, p, r] = P[p, r]
        return SpinResolvedTwoDM(d_aaaa, d_aabb, d_aabb.transpose(2, 3, 0, 1),
                                 d_aaaa.copy())
