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
from .Addresser import Addresser
from .SQOperator import (SQHamiltonian, SQOneElectronOperator,
                         SQTwoElectronOperator, check_operator_dimension)
from .exceptions import DimensionMismatch, InvalidConfiguration
from .SpinUnresolvedONV import SpinUnresolvedONV


class SpinUnresolvedONVBasis:
    def __init__(self, n_orbitals, n_electrons):
        """
        The full set of ONVs with `n_electrons` electrons in `n_orbitals`
        spin orbitals, addressed with the combinatorial number system of
        :py:class:`onvci.Addresser`.

        Parameters
        ----------
        n_orbitals : int
            Number of (spin) orbitals M
        n_electrons : int
            Number of electrons N
        """
        self.addresser = Addresser(n_orbitals, n_electrons)
        self.n_orbitals = n_orbitals
        self.n_electrons = n_electrons

    @property
    def dimension(self):
        """Number of ONVs in this basis, i.e. C(M, N)"""
        return self.addresser.dimension

    def __len__(self):
        return self.dimension

    def vertex_weight(self, p, e):
        return self.addresser.vertex_weight(p, e)

    def address_of(self, onv):
        """Return the address of an ONV inside this basis"""
        if onv.n_orbitals != self.n_orbitals:
            raise DimensionMismatch("ONV has {} orbitals, but the basis {}."
                                    "".format(onv.n_orbitals, self.n_orbitals))
        return self.addresser.address(onv.occupation_indices)

    def construct_onv_from_address(self, address):
        """Return the ONV with the given address"""
        return SpinUnresolvedONV(self.n_orbitals,
                                 self.addresser.occupation(address),
                                 address=address)

    def transform_onv_to_next_permutation(self, onv):
        """
        Turn `onv` in place into the ONV with the next address, i.e. the
        next larger integer representation with the same number of set bits.
        Must not be called on the ONV with the largest address.
        """
        v = onv.representation
        if v == 0:
            raise InvalidConfiguration("An ONV without electrons has no "
                                       "next permutation.")
        t = (v | (v - 1)) + 1
        w = t | ((((t & -t) // (v & -v)) >> 1) - 1)
        if w >> self.n_orbitals:
            raise InvalidConfiguration(f"ONV {onv.as_string()} is the last "
                                       "permutation of the basis.")
        for p in onv.find_differential_occupations(
                SpinUnresolvedONV.from_representation(self.n_orbitals, w)):
            onv.annihilate(p)
        for p in range(self.n_orbitals):
            if w >> p & 1 and not onv.is_occupied(p):
                onv.create(p)
        if onv.address is not None:
            onv.address += 1
        return onv

    def __iter__(self):
        """
        Iterate over ``(onv, address)`` pairs in increasing address order.
        The yielded ONVs are copies and may be modified by the caller.
        """
        onv = self.construct_onv_from_address(0)
        yield onv.copy(), 0
        for address in range(1, self.dimension):
            self.transform_onv_to_next_permutation(onv)
            yield onv.copy(), address

    def for_each(self, callback):
        """Call ``callback(onv, address)`` for all ONVs in address order"""
        for onv, address in self:
            callback(onv, address)

    @cached_property
    def onvs(self):
        """List of all ONVs, indexed by their address"""
        return [onv for onv, _ in self]

    @cached_property
    def occupation_matrix(self):
        """Matrix n[I, p], which is 1 if orbital p is occupied in ONV I"""
        ret = np.zeros((self.dimension, self.n_orbitals))
        for address, onv in enumerate(self.onvs):
            ret[address, list(onv.occupation_indices)] = 1
        return ret

    #
    # Address shifting for single excitations
    #
    def shift_until_next_unoccupied_orbital(self, onv, address, q, e, sign,
                                            shift=1):
        """
        Walk upwards from orbital `q` (electron index `e`) past all occupied
        orbitals. Each passed electron is moved down by `shift` electron
        indices, which updates the address by the corresponding difference
        of vertex weights and flips the sign once.

        Returns
        -------
        tuple
            ``(address, q, e, sign)`` with `q` the next unoccupied orbital and
            `e` the electron index which would occupy it.
        """
        occupation = onv.occupation_indices
        while e < self.n_electrons and q == occupation[e]:
            address += self.vertex_weight(q, e + 1 - shift) \
                - self.vertex_weight(q, e + 1)
            sign = -sign
            q += 1
            e += 1
        return address, q, e, sign

    def shift_until_previous_unoccupied_orbital(self, onv, address, q, e, sign,
                                                shift=1):
        """
        Walk downwards from orbital `q` (electron index `e`) past all occupied
        orbitals, moving each passed electron up by `shift` electron indices.

        Returns
        -------
        tuple
            ``(address, q, e, sign)`` with `q` the previous unoccupied orbital.
        """
        occupation = onv.occupation_indices
        while e >= 0 and q == occupation[e]:
            address += self.vertex_weight(q, e + 1 + shift) \
                - self.vertex_weight(q, e + 1)
            sign = -sign
            q -= 1
            e -= 1
        return address, q, e, sign

    def single_excitations(self):
        """
        Iterate over all upward single excitations of the basis. Yields
        tuples ``(I, J, p, q, sign)`` with ``q > p``, such that
        ``<J| a+_q a_p |I> = sign``.
        """
        for onv, I in self:
            for e1, p in enumerate(onv.occupation_indices):
                address = I - self.vertex_weight(p, e1 + 1)
                address, q, e2, sign = self.shift_until_next_unoccupied_orbital(
                    onv, address, p + 1, e1 + 1, 1
                )
                while q < self.n_orbitals:
                    J = address + self.vertex_weight(q, e2)
                    yield I, J, p, q, sign

                    q += 1
                    address, q, e2, sign = \
                        self.shift_until_next_unoccupied_orbital(onv, address,
                                                                 q, e2, sign)

    @cached_property
    def coupling_matrices(self):
        """
        The sparse matrix representations ``E[p][q]`` of the one-electron
        excitation operators ``a+_p a_q`` in this basis.
        """
        dim, M = self.dimension, self.n_orbitals
        triplets = {}

        def add(p, q, row, col, value):
            rows, cols, values = triplets.setdefault((p, q), ([], [], []))
            rows.append(row)
            cols.append(col)
            values.append(value)

        for onv, I in self:
            for p in onv.occupation_indices:
                add(p, p, I, I, 1.0)
        for I, J, p, q, sign in self.single_excitations():
            add(q, p, J, I, sign)
            add(p, q, I, J, sign)

        ret = [[None] * M for _ in range(M)]
        for p in range(M):
            for q in range(M):
                rows, cols, values = triplets.get((p, q), ([], [], []))
                ret[p][q] = sp.csr_matrix((values, (rows, cols)),
                                          shape=(dim, dim))
        return ret

    #
    # Operator evaluation
    #
    def _one_electron_triplets(self, f, diagonal_values=True):
        rows, cols, values = [], [], []
        if diagonal_values:
            diagonal = self.occupation_matrix @ np.diag(f)
            rows.extend(range(self.dimension))
            cols.extend(range(self.dimension))
            values.extend(diagonal)
        for I, J, p, q, sign in self.single_excitations():
            rows.extend((J, I))
            cols.extend((I, J))
            values.extend((sign * f[q, p], sign * f[p, q]))
        return rows, cols, values

    def _two_electron_sparse(self, g):
        E = self.coupling_matrices
        M = self.n_orbitals
        ret = sp.csr_matrix((self.dimension, self.dimension))
        for p in range(M):
            for q in range(M):
                gE = sp.csr_matrix((self.dimension, self.dimension))
                for r in range(M):
                    for s in range(M):
                        if g[p, q, r, s] != 0:
                            gE = gE + g[p, q, r, s] * E[r][s]
                ret = ret + E[p][q] @ gE

        # Normal ordering: a+_p a+_r a_s a_q = E_pq E_rs - delta_qr E_ps
        k = np.einsum("pqqs->ps", g)
        for p in range(M):
            for s in range(M):
                if k[p, s] != 0:
                    ret = ret - k[p, s] * E[p][s]
        return 0.5 * ret

    def evaluate_operator_sparse(self, operator, diagonal_values=True):
        """
        Evaluate an operator in this basis as a sparse matrix.

        Parameters
        ----------
        operator : SQOneElectronOperator, SQTwoElectronOperator or SQHamiltonian
            The operator, with integrals over the spin orbitals of the basis
        diagonal_values : bool, optional
            Include the diagonal elements (default True)
        """
        check_operator_dimension(operator, self.n_orbitals)
        shape = (self.dimension, self.dimension)
        if isinstance(operator, SQOneElectronOperator):
            rows, cols, values = self._one_electron_triplets(operator.parameters,
                                                             diagonal_values)
            return sp.csr_matrix((values, (rows, cols)), shape=shape)
        elif isinstance(operator, SQTwoElectronOperator):
            ret = self._two_electron_sparse(operator.parameters)
        elif isinstance(operator, SQHamiltonian):
            ret = self.evaluate_operator_sparse(operator.core) \
                + self._two_electron_sparse(operator.g)
        else:
            raise TypeError("Unsupported operator type: " + str(type(operator)))

        if not diagonal_values:
            ret = ret - sp.diags(ret.diagonal())
        return sp.csr_matrix(ret)

    def evaluate_operator_dense(self, operator, diagonal_values=True):
        """
        Evaluate an operator in this basis as a dense matrix.
        See :py:meth:`evaluate_operator_sparse` for the parameters.
        """
        return self.evaluate_operator_sparse(operator,
                                             diagonal_values).toarray()

    def evaluate_operator_diagonal(self, operator):
        """Return the diagonal of the matrix representation of an operator"""
        check_operator_dimension(operator, self.n_orbitals)
        n = self.occupation_matrix
        if isinstance(operator, SQOneElectronOperator):
            return n @ np.diag(operator.parameters)
        elif isinstance(operator, SQTwoElectronOperator):
            g = operator.parameters
            coulomb = np.einsum("ppqq->pq", g)
            exchange = np.einsum("pqqp->pq", g)
            return 0.5 * np.einsum("ip,pq,iq->i", n, coulomb - exchange, n)
        elif isinstance(operator, SQHamiltonian):
            return self.evaluate_operator_diagonal(operator.core) \
                + self.evaluate_operator_diagonal(operator.two_electron)
        else:
            raise TypeError("Unsupported operator type: " + str(type(operator)))

    def evaluate_operator_matrix_vector_product(self, operator, x):
        """Apply the matrix representation of an operator to a vector"""
        x = np.asarray(x)
        if x.shape != (self.dimension, ):
            raise DimensionMismatch(f"Vector of shape {x.shape} does not fit "
                                    f"to the basis dimension {self.dimension}.")
        return self.evaluate_operator_sparse(operator) @ x

    def to_dict(self):
        return {"type": "SpinUnresolvedONVBasis",
                "n_orbitals": self.n_orbitals,
                "n_electrons": self.n_electrons}

    def __repr__(self):
        return f"SpinUnresolvedONVBasis(n_orbitals={self.n_orbitals}, " \
               f"n_electrons={self.n_electrons})"
