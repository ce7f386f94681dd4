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

from .exceptions import DimensionMismatch
from .DensityMatrices import OneDM, TwoDM


class DMCalculatorBase:
    def __init__(self, onv_basis):
        """Initialise a density-matrix calculator for an ONV basis.

        Parameters
        ----------
        onv_basis
            The ONV basis the coefficient vectors are expressed in.
        """
        self.onv_basis = onv_basis

    def _check_coefficients(self, x):
        x = np.asarray(x, dtype=float)
        if x.shape != (self.onv_basis.dimension, ):
            raise DimensionMismatch(
                f"Coefficient vector of shape {x.shape} does not fit to the "
                f"dimension {self.onv_basis.dimension} of the ONV basis."
            )
        return x

    def calculate_element(self, bra_indices, ket_indices, x):
        raise NotImplementedError("Calculation of single N-DM elements is not "
                                  "implemented for "
                                  + type(self.onv_basis).__name__ + ".")

    def calculate_1dm(self, x):
        """The (spin-summed) 1-DM of the expansion with coefficients x"""
        return self.calculate_spin_resolved_1dm(x).spin_summed()

    def calculate_2dm(self, x):
        """The (spin-summed) 2-DM of the expansion with coefficients x"""
        return self.calculate_spin_resolved_2dm(x).spin_summed()

    def __repr__(self):
        return f"{type(self).__name__}({self.onv_basis!r})"


def embed_frozen_1dm(D, n_frozen):
    """
    1-DM of a single spin over all orbitals from the active-space 1-DM,
    with the `n_frozen` lowest orbitals always occupied.
    """
    X = n_frozen
    D = np.asarray(D)
    ret = np.zeros((D.shape[0] + X, D.shape[0] + X))
    ret[:X, :X] = np.eye(X)
    ret[X:, X:] = D
    return OneDM(ret)


def embed_frozen_same_spin_2dm(D, d, n_frozen):
    """
    Same-spin 2-DM over all orbitals from the active-space same-spin 1-DM
    `D` and 2-DM `d`, with the `n_frozen` lowest orbitals always occupied.
    """
    X = n_frozen
    D, d = np.asarray(D), np.asarray(d)
    K = D.shape[0] + X
    ret = np.zeros(4 * (K, ))
    ret[X:, X:, X:, X:] = d
    for i in range(X):
        for j in range(X):
            if i != j:
                ret[i, i, j, j] = 1
                ret[i, j, j, i] = -1
        ret[i, i, X:, X:] = D
        ret[X:, X:, i, i] = D
        ret[i, X:, X:, i] = -D.T
        ret[X:, i, i, X:] = -D
    return TwoDM(ret)


def embed_frozen_mixed_spin_2dm(D_sigma, D_tau, d, n_frozen):
    """
    Mixed-spin 2-DM ``<E^sigma_pq E^tau_rs>`` over all orbitals from the
    active-space 1-DMs of both spins and the active mixed-spin 2-DM `d`.
    """
    X = n_frozen
    D_sigma, D_tau, d = np.asarray(D_sigma), np.asarray(D_tau), np.asarray(d)
    K = D_sigma.shape[0] + X
    ret = np.zeros(4 * (K, ))
    ret[X:, X:, X:, X:] = d
    for i in range(X):
        for j in range(X):
            ret[i, i, j, j] = 1
        ret[i, i, X:, X:] = D_tau
        ret[X:, X:, i, i] = D_sigma
    return TwoDM(ret)
