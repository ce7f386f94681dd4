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

from .SQOperator import (SQHamiltonian, SQOneElectronOperator,
                         check_operator_dimension)
from .exceptions import DimensionMismatch, InvalidConfiguration
from .SpinResolvedONV import SpinResolvedONV


def excitation_sign(onv, annihilated, created):
    """
    Sign of the operator string ``a+_{created[-1]} .. a+_{created[0]}
    a_{annihilated[-1]} .. a_{annihilated[0]}`` acting on `onv`, i.e. the
    annihilators are applied first and in the given order. The ONV is
    left unchanged.
    """
    work = onv.copy()
    success, sign = work.annihilate_all(annihilated)
    if success:
        success, sign = work.create_all(created, sign)
    if not success:
        raise InvalidConfiguration("Excitation not possible on ONV "
                                   + onv.as_string())
    return sign


def single_excitation(onv_I, onv_J):
    """
    For two ONVs differing by a single excitation return ``(p, q, sign)``
    with ``<I| a+_p a_q |J> = sign``.
    """
    p, = onv_I.find_differential_occupations(onv_J)
    q, = onv_J.find_differential_occupations(onv_I)
    return p, q, excitation_sign(onv_J, [q], [p])


def double_excitation(onv_I, onv_J):
    """
    For two ONVs differing by a double excitation return
    ``(p, q, r, s, sign)`` with ``<I| a+_p a+_r a_s a_q |J> = sign``,
    where ``p < r`` are occupied in I and ``q < s`` are occupied in J.
    """
    p, r = onv_I.find_differential_occupations(onv_J)
    q, s = onv_J.find_differential_occupations(onv_I)
    return p, q, r, s, excitation_sign(onv_J, [q, s], [r, p])


def hamiltonian_element(h, g, onv_I, onv_J):
    """
    Slater-Condon rules for the matrix element ``<I|H|J>`` of a restricted
    Hamiltonian between two spin-resolved ONVs.
    """
    alpha_I, beta_I = onv_I.alpha, onv_I.beta
    alpha_J, beta_J = onv_J.alpha, onv_J.beta
    n_alpha = alpha_I.count_number_of_excitations(alpha_J)
    n_beta = beta_I.count_number_of_excitations(beta_J)

    if n_alpha + n_beta > 2:
        return 0.0
    elif n_alpha == 0 and n_beta == 0:
        occ_a = list(alpha_I.occupation_indices)
        occ_b = list(beta_I.occupation_indices)
        value = np.sum(np.diag(h)[occ_a]) + np.sum(np.diag(h)[occ_b])
        for occ in (occ_a, occ_b):
            for p in occ:
                for q in occ:
                    value += 0.5 * (g[p, p, q, q] - g[p, q, q, p])
        for p in occ_a:
            for q in occ_b:
                value += g[p, p, q, q]
        return value
    elif n_alpha + n_beta == 1:
        if n_alpha == 1:
            excited_I, excited_J, spectator = alpha_I, alpha_J, beta_J
        else:
            excited_I, excited_J, spectator = beta_I, beta_J, alpha_J
        p, q, sign = single_excitation(excited_I, excited_J)
        value = h[p, q]
        for r in excited_I.find_matching_occupations(excited_J):
            value += g[p, q, r, r] - g[p, r, r, q]
        for r in spectator.occupation_indices:
            value += g[p, q, r, r]
        return sign * value
    elif n_alpha == 1 and n_beta == 1:
        p, q, sign_alpha = single_excitation(alpha_I, alpha_J)
        r, s, sign_beta = single_excitation(beta_I, beta_J)
        return sign_alpha * sign_beta * g[p, q, r, s]
    else:
        if n_alpha == 2:
            p, q, r, s, sign = double_excitation(alpha_I, alpha_J)
        else:
            p, q, r, s, sign = double_excitation(beta_I, beta_J)
        return sign * (g[p, q, r, s] - g[p, s, r, q])


class SpinResolvedSelectedONVBasis:
    def __init__(self, n_orbitals, n_alpha, n_beta, onvs=None):
        """
        An explicitly enumerated (selected) list of spin-resolved ONVs with
        `n_alpha` alpha and `n_beta` beta electrons in `n_orbitals` spatial
        orbitals. The address of an ONV is its position in the list.

        Parameters
        ----------
        n_orbitals : int
            Number of spatial orbitals K
        n_alpha : int
            Number of alpha electrons
        n_beta : int
            Number of beta electrons
        onvs : list, optional
            Initial list of :py:class:`onvci.SpinResolvedONV`
        """
        if n_alpha > n_orbitals or n_beta > n_orbitals:
            raise InvalidConfiguration(
                f"Cannot place {n_alpha} alpha and {n_beta} beta electrons "
                f"into {n_orbitals} orbitals."
            )
        self.n_orbitals = n_orbitals
        self.n_alpha = n_alpha
        self.n_beta = n_beta
        self.onvs = []
        self._addresses = {}
        for onv in onvs or []:
            self.add_onv(onv)

    @classmethod
    def from_onv_basis(cls, onv_basis):
        """
        Selected basis containing all ONVs of a full spin-resolved,
        seniority-zero or frozen-core spin-resolved ONV basis, in the
        address order of that basis.
        """
        if hasattr(onv_basis, "n_electron_pairs"):
            n_alpha = n_beta = onv_basis.n_electron_pairs
        elif hasattr(onv_basis, "n_alpha"):
            n_alpha, n_beta = onv_basis.n_alpha, onv_basis.n_beta
        else:
            raise TypeError("Cannot construct a selected ONV basis from "
                            + str(type(onv_basis)))
        return cls(onv_basis.n_orbitals, n_alpha, n_beta, onvs=onv_basis.onvs)

    @property
    def n_electrons(self):
        return self.n_alpha + self.n_beta

    @property
    def dimension(self):
        return len(self.onvs)

    def __len__(self):
        return self.dimension

    def add_onv(self, onv):
        """Append a :py:class:`onvci.SpinResolvedONV` to the basis"""
        if onv.n_orbitals != self.n_orbitals:
            raise InvalidConfiguration(
                f"ONV {onv.as_string()} has {onv.n_orbitals} orbitals, "
                f"but the basis {self.n_orbitals}."
            )
        if onv.alpha.n_electrons != self.n_alpha \
                or onv.beta.n_electrons != self.n_beta:
            raise InvalidConfiguration(
                f"ONV {onv.as_string()} does not have {self.n_alpha} alpha "
                f"and {self.n_beta} beta electrons."
            )
        if onv in self._addresses:
            raise InvalidConfiguration(f"ONV {onv.as_string()} is already "
                                       "part of the basis.")
        self._addresses[onv] = len(self.onvs)
        self.onvs.append(onv)

    def add_onv_from_string(self, alpha_string, beta_string):
        """
        Append the ONV given by an alpha and a beta bitstring, in which
        the last character refers to orbital 0.
        """
        self.add_onv(SpinResolvedONV.from_string(alpha_string, beta_string))

    def onv_with_index(self, index):
        return self.onvs[index]

    def address_of(self, onv):
        try:
            return self._addresses[onv]
        except KeyError:
            raise InvalidConfiguration(f"ONV {onv.as_string()} is not part "
                                       "of the basis.")

    def __iter__(self):
        return ((onv, address) for address, onv in enumerate(self.onvs))

    def for_each(self, callback):
        """Call ``callback(onv, address)`` for all ONVs in list order"""
        for onv, address in self:
            callback(onv, address)

    def _integrals(self, operator):
        check_operator_dimension(operator, self.n_orbitals)
        if isinstance(operator, SQHamiltonian):
            return operator.h, operator.g
        elif isinstance(operator, SQOneElectronOperator):
            return operator.parameters, np.zeros(4 * (self.n_orbitals, ))
        raise TypeError("Unsupported operator type: " + str(type(operator)))

    def evaluate_operator_dense(self, operator, diagonal_values=True):
        """
        Evaluate a restricted Hamiltonian or one-electron operator in the
        selected basis using the Slater-Condon rules.
        """
        return self.evaluate_operator_sparse(operator,
                                             diagonal_values).toarray()

    def evaluate_operator_sparse(self, operator, diagonal_values=True):
        """
        Sparse (CSR) representation of a restricted Hamiltonian or
        one-electron operator. Only pairs of ONVs at most two excitations
        apart are passed to the Slater-Condon rules.
        """
        h, g = self._integrals(operator)
        rows, cols, values = [], [], []
        for I, onv_I in enumerate(self.onvs):
            if diagonal_values:
                rows.append(I)
                cols.append(I)
                values.append(hamiltonian_element(h, g, onv_I, onv_I))
            for J in range(I + 1, self.dimension):
                onv_J = self.onvs[J]
                n_excitations = (
                    onv_I.alpha.count_number_of_excitations(onv_J.alpha)
                    + onv_I.beta.count_number_of_excitations(onv_J.beta)
                )
                if n_excitations > 2:
                    continue
                value = hamiltonian_element(h, g, onv_I, onv_J)
                if value != 0:
                    rows.extend((I, J))
                    cols.extend((J, I))
                    values.extend((value, value))
        return sp.csr_matrix((values, (rows, cols)),
                             shape=(self.dimension, self.dimension))

    def evaluate_operator_diagonal(self, operator):
        h, g = self._integrals(operator)
        return np.array([hamiltonian_element(h, g, onv, onv)
                         for onv in self.onvs])

    def evaluate_operator_matrix_vector_product(self, operator, x):
        x = np.asarray(x)
        if x.shape != (self.dimension, ):
            raise DimensionMismatch(f"Vector of shape {x.shape} does not fit "
                                    f"to the basis dimension {self.dimension}.")
        return self.evaluate_operator_sparse(operator) @ x

    def to_dict(self):
        return {
            "type": "SpinResolvedSelectedONVBasis",
            "n_orbitals": self.n_orbitals,
            "n_alpha": self.n_alpha, "n_beta": self.n_beta,
            "alpha": [onv.alpha.as_string() for onv in self.onvs],
            "beta": [onv.beta.as_string() for onv in self.onvs],
        }

    def __repr__(self):
        return f"SpinResolvedSelectedONVBasis(n_orbitals={self.n_orbitals}, " \
               f"n_alpha={self.n_alpha}, n_beta={self.n_beta}, " \
               f"dimension={self.dimension})"
