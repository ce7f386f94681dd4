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
from .SQOperator import SQHamiltonian, check_operator_dimension
from .exceptions import DimensionMismatch
from .SpinResolvedONV import SpinResolvedONV
from .SpinUnresolvedONVBasis import SpinUnresolvedONVBasis


class SeniorityZeroONVBasis:
    def __init__(self, n_orbitals, n_electron_pairs):
        """
        The seniority-zero (doubly-occupied, DOCI) ONV basis: all ONVs in
        which every occupied spatial orbital holds an alpha and a beta
        electron. An ONV of this basis is represented by the
        :py:class:`onvci.SpinUnresolvedONV` of its occupied orbitals.

        Parameters
        ----------
        n_orbitals : int
            Number of spatial orbitals K
        n_electron_pairs : int
            Number of electron pairs
        """
        self.pair_basis = SpinUnresolvedONVBasis(n_orbitals, n_electron_pairs)
        self.n_orbitals = n_orbitals
        self.n_electron_pairs = n_electron_pairs

    @property
    def n_electrons(self):
        return 2 * self.n_electron_pairs

    @property
    def dimension(self):
        return self.pair_basis.dimension

    def __len__(self):
        return self.dimension

    def address_of(self, onv):
        return self.pair_basis.address_of(onv)

    def construct_onv_from_address(self, address):
        return self.pair_basis.construct_onv_from_address(address)

    def __iter__(self):
        return iter(self.pair_basis)

    def for_each(self, callback):
        """Call ``callback(onv, address)`` for the doubly-occupied patterns"""
        self.pair_basis.for_each(callback)

    @cached_property
    def onvs(self):
        """The list of all ONVs as :py:class:`onvci.SpinResolvedONV`"""
        return [SpinResolvedONV(onv, onv.copy()) for onv, _ in self]

    @property
    def occupation_matrix(self):
        return self.pair_basis.occupation_matrix

    def _check_hamiltonian(self, operator):
        check_operator_dimension(operator, self.n_orbitals)
        if not isinstance(operator, SQHamiltonian):
            raise TypeError("Only an SQHamiltonian can be evaluated in a "
                            "seniority-zero ONV basis.")

    def evaluate_operator_diagonal(self, operator):
        """
        Diagonal of the DOCI Hamiltonian, i.e.
        ``sum_p (2 h_pp + g_pppp) + sum_{p<q} 2 (2 g_ppqq - g_pqqp)``
        over the occupied orbitals of each pattern.
        """
        self._check_hamiltonian(operator)
        h, g = operator.h, operator.g
        n = self.occupation_matrix
        one = 2 * np.diag(h) + np.einsum("pppp->p", g)
        pair = 2 * np.einsum("ppqq->pq", g) - np.einsum("pqqp->pq", g)
        np.fill_diagonal(pair, 0)
        # The sum over ordered pairs p != q counts each p < q pair twice
        return n @ one + np.einsum("ip,pq,iq->i", n, pair, n)

    def evaluate_operator_sparse(self, operator, diagonal_values=True):
        """
        Evaluate the Hamiltonian in the DOCI basis. Patterns differing by
        moving a single electron pair from orbital p to orbital q are
        coupled by ``g_pqpq``.
        """
        self._check_hamiltonian(operator)
        g = operator.g
        rows, cols, values = [], [], []
        if diagonal_values:
            rows.extend(range(self.dimension))
            cols.extend(range(self.dimension))
            values.extend(self.evaluate_operator_diagonal(operator))

        for onv, I in self:
            for p in onv.occupation_indices:
                for q in range(p):
                    if onv.is_occupied(q):
                        continue
                    target = onv.copy()
                    target.annihilate(p)
                    target.create(q)
                    J = self.address_of(target)
                    rows.extend((I, J))
                    cols.extend((J, I))
                    values.extend((g[p, q, p, q], g[p, q, p, q]))
        return sp.csr_matrix((values, (rows, cols)),
                             shape=(self.dimension, self.dimension))

    def evaluate_operator_dense(self, operator, diagonal_values=True):
        return self.evaluate_operator_sparse(operator,
                                             diagonal_values).toarray()

    def evaluate_operator_matrix_vector_product(self, operator, x):
        x = np.asarray(x)
        if x.shape != (self.dimension, ):
            raise DimensionMismatch(f"Vector of shape {x.shape} does not fit "
                                    f"to the basis dimension {self.dimension}.")
        return self.evaluate_operator_sparse(operator) @ x

    def to_dict(self):
        return {"type": "SeniorityZeroONVBasis",
                "n_orbitals": self.n_orbitals,
                "n_electron_pairs": self.n_electron_pairs}

    def __repr__(self):
        return f"SeniorityZeroONVBasis(n_orbitals={self.n_orbitals}, " \
               f"n_electron_pairs={self.n_electron_pairs})"
