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
from .exceptions import DimensionMismatch
from .SpinResolvedONV import SpinResolvedONV
from .SpinUnresolvedONVBasis import SpinUnresolvedONVBasis


class SpinResolvedONVBasis:
    def __init__(self, n_orbitals, n_alpha, n_beta):
        """
        The full (FCI) ONV basis of `n_alpha` alpha and `n_beta` beta
        electrons in `n_orbitals` spatial orbitals.

        The basis is the tensor product of an alpha and a beta
        :py:class:`onvci.SpinUnresolvedONVBasis`. The compound address of
        the product of the alpha ONV ``I_alpha`` and the beta ONV ``I_beta``
        is ``I_alpha * dim_beta + I_beta``.

        Parameters
        ----------
        n_orbitals : int
            Number of spatial orbitals K
        n_alpha : int
            Number of alpha electrons
        n_beta : int
            Number of beta electrons
        """
        self.alpha = SpinUnresolvedONVBasis(n_orbitals, n_alpha)
        self.beta = SpinUnresolvedONVBasis(n_orbitals, n_beta)
        self.n_orbitals = n_orbitals
        self.n_alpha = n_alpha
        self.n_beta = n_beta

    @property
    def n_electrons(self):
        return self.n_alpha + self.n_beta

    @property
    def dimension(self):
        return self.alpha.dimension * self.beta.dimension

    def __len__(self):
        return self.dimension

    def compound_address(self, I_alpha, I_beta):
        """Address of the product of alpha ONV I_alpha and beta ONV I_beta"""
        if not 0 <= I_alpha < self.alpha.dimension \
                or not 0 <= I_beta < self.beta.dimension:
            raise DimensionMismatch(f"Addresses ({I_alpha}, {I_beta}) out of "
                                    "range for alpha and beta dimensions "
                                    f"({self.alpha.dimension}, "
                                    f"{self.beta.dimension}).")
        return I_alpha * self.beta.dimension + I_beta

    def address_of(self, onv):
        return self.compound_address(self.alpha.address_of(onv.alpha),
                                     self.beta.address_of(onv.beta))

    def construct_onv_from_address(self, address):
        I_alpha, I_beta = divmod(address, self.beta.dimension)
        return SpinResolvedONV(self.alpha.construct_onv_from_address(I_alpha),
                               self.beta.construct_onv_from_address(I_beta))

    def __iter__(self):
        """Iterate over ``(onv, address)`` in compound-address order"""
        for onv_alpha, I_alpha in self.alpha:
            for onv_beta, I_beta in self.beta:
                yield (SpinResolvedONV(onv_alpha.copy(), onv_beta),
                       self.compound_address(I_alpha, I_beta))

    def for_each(self, callback):
        """
        Call ``callback(onv_alpha, I_alpha, onv_beta, I_beta)`` for all
        alpha-beta pairs, with the beta addresses running fastest.
        """
        for onv_alpha, I_alpha in self.alpha:
            for onv_beta, I_beta in self.beta:
                callback(onv_alpha, I_alpha, onv_beta, I_beta)

    @cached_property
    def onvs(self):
        return [onv for onv, _ in self]

    def hartree_fock_expansion(self):
        """The expansion of the Hartree-Fock determinant (address 0)"""
        from .LinearExpansion import LinearExpansion
        return LinearExpansion.hartree_fock(self)

    def random_expansion(self, random_state=None):
        """A normalised expansion with random coefficients"""
        from .LinearExpansion import LinearExpansion
        return LinearExpansion.random(self, random_state=random_state)

    #
    # Operator evaluation with restricted integrals
    #
    def evaluate_operator_sparse(self, operator, diagonal_values=True):
        """
        Evaluate a restricted one-electron operator or Hamiltonian as a
        sparse matrix in the compound address space, i.e. as
        ``H_alpha (x) 1 + 1 (x) H_beta + sum g_pqrs E^alpha_pq (x) E^beta_rs``.

        Parameters
        ----------
        operator : SQOneElectronOperator or SQHamiltonian
            Operator with restricted (spatial-orbital) integrals
        diagonal_values : bool, optional
            Include the diagonal elements (default True)
        """
        check_operator_dimension(operator, self.n_orbitals)
        if not isinstance(operator, (SQOneElectronOperator, SQHamiltonian)):
            raise TypeError("Unsupported operator type: " + str(type(operator)))
        one_alpha = sp.identity(self.alpha.dimension, format="csr")
        one_beta = sp.identity(self.beta.dimension, format="csr")

        ret = sp.kron(self.alpha.evaluate_operator_sparse(operator), one_beta) \
            + sp.kron(one_alpha, self.beta.evaluate_operator_sparse(operator))

        if isinstance(operator, SQHamiltonian):
            g = operator.g
            Ea = self.alpha.coupling_matrices
            Eb = self.beta.coupling_matrices
            K = self.n_orbitals
            for p in range(K):
                for q in range(K):
                    if Ea[p][q].nnz == 0:
                        continue
                    gEb = sp.csr_matrix((self.beta.dimension, self.beta.dimension))
                    for r in range(K):
                        for s in range(K):
                            if g[p, q, r, s] != 0:
                                gEb = gEb + g[p, q, r, s] * Eb[r][s]
                    ret = ret + sp.kron(Ea[p][q], gEb)

        if not diagonal_values:
            ret = ret - sp.diags(ret.diagonal())
        return sp.csr_matrix(ret)

    def evaluate_operator_dense(self, operator, diagonal_values=True):
        return self.evaluate_operator_sparse(operator,
                                             diagonal_values).toarray()

    def evaluate_operator_diagonal(self, operator):
        """Return the diagonal of the matrix representation of an operator"""
        check_operator_dimension(operator, self.n_orbitals)
        diag_alpha = self.alpha.evaluate_operator_diagonal(operator)
        diag_beta = self.beta.evaluate_operator_diagonal(operator)
        ret = diag_alpha[:, None] + diag_beta[None, :]
        if isinstance(operator, SQHamiltonian):
            coulomb = np.einsum("ppqq->pq", operator.g)
            ret += self.alpha.occupation_matrix @ coulomb \
                @ self.beta.occupation_matrix.T
        return ret.reshape(-1)

    def evaluate_operator_matrix_vector_product(self, operator, x):
        x = np.asarray(x)
        if x.shape != (self.dimension, ):
            raise DimensionMismatch(f"Vector of shape {x.shape} does not fit "
                                    f"to the basis dimension {self.dimension}.")
        return self.evaluate_operator_sparse(operator) @ x

    def to_dict(self):
        return {"type": "SpinResolvedONVBasis",
                "n_orbitals": self.n_orbitals,
                "n_alpha": self.n_alpha, "n_beta": self.n_beta}

    def __repr__(self):
        return f"SpinResolvedONVBasis(n_orbitals={self.n_orbitals}, " \
               f"n_alpha={self.n_alpha}, n_beta={self.n_beta})"
