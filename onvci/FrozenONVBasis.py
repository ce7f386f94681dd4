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
import scipy.sparse as sp

from .misc import cached_property
from .SQOperator import (SQHamiltonian, SQOneElectronOperator,
                         check_operator_dimension)
from .exceptions import DimensionMismatch, InvalidConfiguration
from .SpinResolvedONV import SpinResolvedONV
from .SpinUnresolvedONV import SpinUnresolvedONV
from .SpinResolvedONVBasis import SpinResolvedONVBasis
from .SpinUnresolvedONVBasis import SpinUnresolvedONVBasis


def freeze_operator(operator, n_frozen, restricted):
    """
    Fold the contributions of the `n_frozen` lowest, always occupied
    orbitals into an operator acting on the remaining active orbitals.

    Parameters
    ----------
    operator : SQOneElectronOperator or SQHamiltonian
        Operator over all orbitals
    n_frozen : int
        Number of frozen orbitals
    restricted : bool
        Whether the integrals are restricted spatial-orbital integrals
        (each frozen orbital holds two electrons) or spin-orbital integrals

    Returns
    -------
    tuple
        The operator over the active orbitals and the scalar
        contribution of the frozen orbitals.
    """
    X = n_frozen
    occupancy = 2 if restricted else 1
    if isinstance(operator, SQOneElectronOperator):
        f = operator.parameters
        return (SQOneElectronOperator(f[X:, X:]),
                occupancy * float(np.trace(f[:X, :X])))
    elif not isinstance(operator, SQHamiltonian):
        raise TypeError("Unsupported operator type: " + str(type(operator)))

    h, g = operator.h, operator.g
    coulomb = np.einsum("pqii->pq", g[X:, X:, :X, :X])
    exchange = np.einsum("piiq->pq", g[X:, :X, :X, X:])
    core_h = h[X:, X:] + occupancy * coulomb - exchange

    frozen_coulomb = np.einsum("iijj->", g[:X, :X, :X, :X])
    frozen_exchange = np.einsum("ijji->", g[:X, :X, :X, :X])
    if restricted:
        energy = 2 * np.trace(h[:X, :X]) + 2 * frozen_coulomb - frozen_exchange
    else:
        energy = np.trace(h[:X, :X]) + 0.5 * (frozen_coulomb - frozen_exchange)
    return SQHamiltonian(core_h, g[X:, X:, X:, X:]), float(energy)


def unfreeze_onv(onv, n_frozen):
    """
    Return the ONV over all orbitals, which corresponds to an active-space
    ONV with the `n_frozen` lowest orbitals occupied in addition.
    """
    occupation = list(range(n_frozen))
    occupation += [p + n_frozen for p in onv.occupation_indices]
    return SpinUnresolvedONV(onv.n_orbitals + n_frozen, occupation,
                             address=onv.address)


class FrozenONVBasisMixin:
    """
    Shared operator evaluation of the frozen-core ONV bases, which
    delegate to the active ONV basis they own.
    """
    restricted = None

    @property
    def dimension(self):
        return self.active_onv_basis.dimension

    def __len__(self):
        return self.dimension

    def _freeze(self, operator):
        check_operator_dimension(operator, self.n_orbitals)
        return freeze_operator(operator, self.n_frozen, self.restricted)

    def evaluate_operator_sparse(self, operator, diagonal_values=True):
        """
        Evaluate an operator by freezing it to the active space and
        adding the frozen-orbital contribution to the diagonal.
        """
        frozen, energy = self._freeze(operator)
        ret = self.active_onv_basis.evaluate_operator_sparse(frozen,
                                                             diagonal_values)
        if diagonal_values:
            ret = ret + energy * sp.identity(self.dimension, format="csr")
        return sp.csr_matrix(ret)

    def evaluate_operator_dense(self, operator, diagonal_values=True):
        return self.evaluate_operator_sparse(operator,
                                             diagonal_values).toarray()

    def evaluate_operator_diagonal(self, operator):
        frozen, energy = self._freeze(operator)
        return self.active_onv_basis.evaluate_operator_diagonal(frozen) + energy

    def evaluate_operator_matrix_vector_product(self, operator, x):
        x = np.asarray(x)
        if x.shape != (self.dimension, ):
            raise DimensionMismatch(f"Vector of shape {x.shape} does not fit "
                                    f"to the basis dimension {self.dimension}.")
        return self.evaluate_operator_sparse(operator) @ x


class SpinUnresolvedFrozenONVBasis(FrozenONVBasisMixin):
    restricted = False

    def __init__(self, n_orbitals, n_electrons, n_frozen):
        """
        Spin-unresolved ONV basis in which the `n_frozen` lowest orbitals
        are always occupied. Addressing and operator evaluation are
        delegated to the owned active basis of the remaining
        ``n_orbitals - n_frozen`` orbitals and ``n_electrons - n_frozen``
        electrons.
        """
        if n_frozen < 0 or n_frozen > n_electrons:
            raise InvalidConfiguration(f"Cannot freeze {n_frozen} orbitals "
                                       f"with {n_electrons} electrons.")
        self.active_onv_basis = SpinUnresolvedONVBasis(n_orbitals - n_frozen,
                                                       n_electrons - n_frozen)
        self.n_orbitals = n_orbitals
        self.n_electrons = n_electrons
        self.n_frozen = n_frozen

    def __iter__(self):
        """Iterate over ``(onv, address)`` with ONVs over all orbitals"""
        for onv, address in self.active_onv_basis:
            yield unfreeze_onv(onv, self.n_frozen), address

    def for_each(self, callback):
        for onv, address in self:
            callback(onv, address)

    @cached_property
    def onvs(self):
        return [onv for onv, _ in self]

    def to_dict(self):
        return {"type": "SpinUnresolvedFrozenONVBasis",
                "n_orbitals": self.n_orbitals,
                "n_electrons": self.n_electrons, "n_frozen": self.n_frozen}

    def __repr__(self):
        return f"SpinUnresolvedFrozenONVBasis(n_orbitals={self.n_orbitals}, " \
               f"n_electrons={self.n_electrons}, n_frozen={self.n_frozen})"


class SpinResolvedFrozenONVBasis(FrozenONVBasisMixin):
    restricted = True

    def __init__(self, n_orbitals, n_alpha, n_beta, n_frozen):
        """
        Frozen-core FCI basis: the `n_frozen` lowest spatial orbitals are
        doubly occupied in every ONV, the remaining electrons span the full
        spin-resolved ONV basis of the active orbitals, which this basis
        owns.
        """
        if n_frozen < 0 or n_frozen > min(n_alpha, n_beta):
            raise InvalidConfiguration(
                f"Cannot freeze {n_frozen} orbitals with {n_alpha} alpha and "
                f"{n_beta} beta electrons."
            )
        self.active_onv_basis = SpinResolvedONVBasis(n_orbitals - n_frozen,
                                                     n_alpha - n_frozen,
                                                     n_beta - n_frozen)
        self.n_orbitals = n_orbitals
        self.n_alpha = n_alpha
        self.n_beta = n_beta
        self.n_frozen = n_frozen

    @property
    def n_electrons(self):
        return self.n_alpha + self.n_beta

    def __iter__(self):
        """Iterate over ``(onv, address)`` with ONVs over all orbitals"""
        for onv, address in self.active_onv_basis:
            yield SpinResolvedONV(unfreeze_onv(onv.alpha, self.n_frozen),
                                  unfreeze_onv(onv.beta, self.n_frozen)), address

    def for_each(self, callback):
        for onv, address in self:
            callback(onv, address)

    @cached_property
    def onvs(self):
        return [onv for onv, _ in self]

    def to_dict(self):
        return {"type": "SpinResolvedFrozenONVBasis",
                "n_orbitals": self.n_orbitals, "n_alpha": self.n_alpha,
                "n_beta": self.n_beta, "n_frozen": self.n_frozen}

    def __repr__(self):
        return f"SpinResolvedFrozenONVBasis(n_orbitals={self.n_orbitals}, " \
               f"n_alpha={self.n_alpha}, n_beta={self.n_beta}, " \
               f"n_frozen={self.n_frozen})"
