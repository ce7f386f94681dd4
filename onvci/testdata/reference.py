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
"""
Brute-force reference implementations, which apply second-quantized
operator strings ONV by ONV. Only suitable for small ONV bases.
"""
import numpy as np
import scipy.linalg as la

from onvci import SQHamiltonian, SpinUnresolvedONV


def apply_operator_string(onv, annihilators, creators):
    """
    Apply the annihilators (in order) and afterwards the creators (in order)
    to a copy of `onv`. Returns the resulting ONV and the sign or
    ``(None, 0)`` if the string annihilates the ONV.
    """
    work = onv.copy()
    success, sign = work.annihilate_all(annihilators)
    if not success:
        return None, 0
    success, sign = work.create_all(creators, sign)
    if not success:
        return None, 0
    return work, sign


def dense_hamiltonian(onv_basis, h, g):
    """
    Matrix of ``sum h_pq a+_p a_q + 1/2 sum g_pqrs a+_p a+_r a_s a_q`` in a
    spin-unresolved ONV basis from applying all operator strings.
    """
    M = onv_basis.n_orbitals
    ret = np.zeros((onv_basis.dimension, onv_basis.dimension))
    for onv, I in onv_basis:
        for p in range(M):
            for q in range(M):
                target, sign = apply_operator_string(onv, [q], [p])
                if target is not None:
                    ret[onv_basis.address_of(target), I] += sign * h[p, q]
                for r in range(M):
                    for s in range(M):
                        if g[p, q, r, s] == 0:
                            continue
                        target, sign = apply_operator_string(onv, [q, s], [r, p])
                        if target is not None:
                            J = onv_basis.address_of(target)
                            ret[J, I] += 0.5 * sign * g[p, q, r, s]
    return ret


def spin_orbital_hamiltonian(hamiltonian):
    """
    Hamiltonian over 2K spin orbitals (first all alpha, then all beta)
    from a restricted Hamiltonian over K spatial orbitals.
    """
    K = hamiltonian.dimension
    h = np.zeros((2 * K, 2 * K))
    h[:K, :K] = h[K:, K:] = hamiltonian.h
    g = np.zeros(4 * (2 * K, ))
    for a in (slice(0, K), slice(K, 2 * K)):
        for b in (slice(0, K), slice(K, 2 * K)):
            g[a, a, b, b] = hamiltonian.g
    return SQHamiltonian(h, g)


def spin_orbital_onv(onv):
    """SpinUnresolvedONV over 2K spin orbitals of a SpinResolvedONV"""
    K = onv.n_orbitals
    occupation = list(onv.alpha.occupation_indices)
    occupation += [K + p for p in onv.beta.occupation_indices]
    return SpinUnresolvedONV(2 * K, occupation)


def embed_coefficients(coefficients, onv_basis_from, onv_basis_to):
    """
    Coefficients in `onv_basis_to` of an expansion given in the ONVs of
    `onv_basis_from`, which need to be a subset of the former.
    """
    ret = np.zeros(onv_basis_to.dimension)
    for address, onv in enumerate(onv_basis_from.onvs):
        ret[onv_basis_to.address_of(onv)] = coefficients[address]
    return ret


def submatrix(matrix, onv_basis_from, onv_basis_to):
    """Block of a matrix in `onv_basis_to` spanned by the ONVs of the other"""
    addresses = [onv_basis_to.address_of(onv) for onv in onv_basis_from.onvs]
    return matrix[np.ix_(addresses, addresses)]


def random_rotation(n_orbitals, random_state=None, scale=0.5):
    """Random orthogonal matrix close to the identity"""
    rng = np.random.default_rng(random_state)
    A = scale * rng.uniform(-1, 1, size=(n_orbitals, n_orbitals))
    return la.expm(A - A.T)


def molecular_like_hamiltonian(n_orbitals, random_state=None):
    """Random Hamiltonian with a diagonal dominant by orbital energy"""
    hamiltonian = SQHamiltonian.random(n_orbitals, random_state)
    h = hamiltonian.h + np.diag(3.0 * np.arange(n_orbitals))
    return SQHamiltonian(h, hamiltonian.g)
