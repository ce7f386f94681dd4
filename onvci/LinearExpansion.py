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
import scipy.linalg as la

from . import hdf5io
from .misc import normalise_sign
from .gamessus import read_gamess_us
from .exceptions import DimensionMismatch, InvalidConfiguration
from .DMCalculator import DMCalculator
from .FrozenONVBasis import (SpinResolvedFrozenONVBasis,
                             SpinUnresolvedFrozenONVBasis)
from .SpinResolvedONV import SpinResolvedONV
from .SpinResolvedONVBasis import SpinResolvedONVBasis
from .SeniorityZeroONVBasis import SeniorityZeroONVBasis
from .SpinUnresolvedONVBasis import SpinUnresolvedONVBasis
from .SpinResolvedSelectedONVBasis import SpinResolvedSelectedONVBasis

__all__ = ["LinearExpansion", "lu_no_pivot", "onv_basis_from_dict"]


class LinearExpansion:
    def __init__(self, onv_basis, coefficients):
        """
        A wave function expanded in an ONV basis, i.e. the pair of an ONV
        basis and a coefficient vector with one entry per ONV address.

        The coefficients are normalised on construction unless their norm
        deviates from one by less than ``1e-12``.

        Parameters
        ----------
        onv_basis
            The ONV basis the expansion is defined in
        coefficients : array-like
            Expansion coefficients, ordered by ONV address
        """
        coefficients = np.array(coefficients, dtype=float)
        if coefficients.shape != (onv_basis.dimension, ):
            raise DimensionMismatch(
                f"Coefficient vector of shape {coefficients.shape} does not "
                f"fit to an ONV basis of dimension {onv_basis.dimension}."
            )
        norm = np.linalg.norm(coefficients)
        if norm == 0:
            raise InvalidConfiguration("Cannot normalise a coefficient vector "
                                       "of zero norm.")
        if abs(norm - 1) > 1e-12:
            coefficients /= norm

        self.onv_basis = onv_basis
        self._coefficients = coefficients

    #
    # Named constructors
    #
    @classmethod
    def constant(cls, onv_basis):
        """Expansion with all coefficients equal (and normalised)"""
        return cls(onv_basis, np.ones(onv_basis.dimension))

    @classmethod
    def hartree_fock(cls, onv_basis):
        """
        Expansion of the Hartree-Fock determinant, which is the ONV with
        address 0 in the full and seniority-zero ONV bases.
        """
        coefficients = np.zeros(onv_basis.dimension)
        coefficients[0] = 1
        return cls(onv_basis, coefficients)

    @classmethod
    def random(cls, onv_basis, random_state=None):
        """
        Expansion with coefficients drawn uniformly from [-1, 1] before
        normalisation.

        Parameters
        ----------
        onv_basis
            The ONV basis
        random_state : int or numpy.random.Generator, optional
            Seed or generator for reproducible coefficients
        """
        rng = np.random.default_rng(random_state)
        return cls(onv_basis, rng.uniform(-1, 1, size=onv_basis.dimension))

    @classmethod
    def from_gamess_us(cls, filename):
        """
        Read an expansion in a :py:class:`onvci.SpinResolvedSelectedONVBasis`
        from a GAMESS-US output file, see
        :py:func:`onvci.gamessus.read_gamess_us`.
        """
        onv_basis, coefficients = read_gamess_us(filename)
        return cls(onv_basis, coefficients)

    @classmethod
    def from_onv_projection(cls, onv, C_on, C_of, S_on, S_of=None):
        """
        Expand a single ONV, which is defined with respect to the orbitals
        `C_of`, in the full ONV basis over the orbitals `C_on`. Each
        coefficient is the overlap ``<onv_on|onv>`` of the ONVs, i.e. the
        determinant of the orbital overlaps between the occupied orbitals.

        Parameters
        ----------
        onv : SpinUnresolvedONV or SpinResolvedONV
            The ONV to project. For a spin-resolved ONV an expansion in a
            :py:class:`onvci.SpinResolvedONVBasis` is returned.
        C_on : numpy.ndarray
            Coefficient matrix (AOs times orbitals) of the orbitals
            the expansion is defined in
        C_of : numpy.ndarray or tuple
            Coefficient matrix of the orbitals of `onv`. For a
            spin-resolved ONV a pair of alpha and beta coefficient matrices.
        S_on : numpy.ndarray
            Overlap matrix of the atomic orbitals underlying `C_on`
        S_of : numpy.ndarray or tuple, optional
            Overlap matrix (or alpha and beta pair) of the atomic orbitals
            underlying `C_of`. If given, it has to agree with `S_on`.
        """
        S_on = np.asarray(S_on)
        if isinstance(onv, SpinResolvedONV):
            C_alpha, C_beta = C_of
            if S_of is not None:
                S_alpha, S_beta = S_of
                _check_same_scalar_basis(S_on, S_alpha)
                _check_same_scalar_basis(S_on, S_beta)
            onv_basis = SpinResolvedONVBasis(onv.n_orbitals,
                                             onv.alpha.n_electrons,
                                             onv.beta.n_electrons)
            overlap_alpha = _orbital_overlap(C_on, C_alpha, S_on)
            overlap_beta = _orbital_overlap(C_on, C_beta, S_on)

            coefficients = np.zeros((onv_basis.alpha.dimension,
                                     onv_basis.beta.dimension))
            projections_beta = np.array([
                _onv_overlap(overlap_beta, onv_on, onv.beta)
                for onv_on, _ in onv_basis.beta
            ])
            for onv_on, I_alpha in onv_basis.alpha:
                coefficients[I_alpha, :] = projections_beta * _onv_overlap(
                    overlap_alpha, onv_on, onv.alpha
                )
            return cls(onv_basis, coefficients.reshape(-1))
        else:
            if S_of is not None:
                _check_same_scalar_basis(S_on, S_of)
            onv_basis = SpinUnresolvedONVBasis(onv.n_orbitals, onv.n_electrons)
            overlap = _orbital_overlap(C_on, C_of, S_on)
            coefficients = np.array([_onv_overlap(overlap, onv_on, onv)
                                     for onv_on, _ in onv_basis])
            return cls(onv_basis, coefficients)

    @classmethod
    def from_hdf5(cls, fname):
        """Load an expansion stored with :py:meth:`to_hdf5`"""
        data = hdf5io.load(fname)
        return cls(onv_basis_from_dict(data["onv_basis"]),
                   data["coefficients"])

    #
    # Access
    #
    @property
    def coefficients(self):
        return self._coefficients

    @coefficients.setter
    def coefficients(self, coefficients):
        """Replace the coefficients, which are used as given"""
        coefficients = np.array(coefficients, dtype=float)
        if coefficients.shape != self._coefficients.shape:
            raise DimensionMismatch(
                f"Coefficient vector of shape {coefficients.shape} does not "
                f"fit to an ONV basis of dimension {self.dimension}."
            )
        self._coefficients = coefficients

    @property
    def dimension(self):
        return self.onv_basis.dimension

    def coefficient(self, address):
        return self._coefficients[address]

    def for_each(self, callback):
        """Call ``callback(coefficient, onv)`` for all ONVs of the basis"""
        for onv, address in self.onv_basis:
            callback(self._coefficients[address], onv)

    def is_approx(self, other, tolerance=1e-12):
        """
        Check whether two expansions in ONV bases of equal dimension agree
        up to an overall sign of their coefficients.
        """
        if self.dimension != other.dimension:
            return False
        mine, theirs = normalise_sign(self.coefficients, other.coefficients,
                                      atol=tolerance)
        return np.allclose(mine, theirs, rtol=0, atol=tolerance)

    def shannon_entropy(self):
        """
        The Shannon entropy ``-sum_I c_I^2 log2(c_I^2)`` of the
        expansion, in bits.
        """
        c = self._coefficients
        c = np.where(np.abs(c) < 1e-18, 1.0, c)
        c2 = c**2
        return -1 / np.log(2) * np.sum(c2 * np.log(c2))

    #
    # Orbital basis transformation
    #
    def basis_transform(self, T):
        """
        Update the coefficients in place such that they describe the same
        wave function after the spatial orbitals are transformed by `T`,
        i.e. ``phi'_q = sum_p phi_p T_pq``.

        The orbital transformation is carried out one orbital at a time
        (Helgaker, Jorgensen and Olsen, chapter 11.9), based on the LU
        decomposition without pivoting of `T`. Only available for
        expansions in a :py:class:`onvci.SpinResolvedONVBasis`.
        """
        if type(self.onv_basis) is not SpinResolvedONVBasis:
            raise NotImplementedError("Orbital basis transformations are only "
                                      "implemented for the SpinResolvedONVBasis, "
                                      "not for "
                                      + type(self.onv_basis).__name__ + ".")
        T = np.asarray(T, dtype=float)
        K = self.onv_basis.n_orbitals
        if T.shape != (K, K):
            raise DimensionMismatch(f"Transformation matrix of shape {T.shape} "
                                    f"does not fit to {K} spatial orbitals.")

        try:
            L, U = lu_no_pivot(T)
        except np.linalg.LinAlgError as e:
            raise InvalidConfiguration("Transformation matrix cannot be "
                                       "applied one orbital at a time: "
                                       + str(e)) from e
        t = np.eye(K) - L + la.inv(U)

        basis_alpha = self.onv_basis.alpha
        basis_beta = self.onv_basis.beta
        C = self._coefficients.reshape(basis_alpha.dimension,
                                       basis_beta.dimension).copy()

        for m in range(K):
            # Alpha electrons: act on the rows of C
            correction = _orbital_correction(basis_alpha, C, t, m)
            C += correction
            # Beta electrons: act on the columns of C
            correction = _orbital_correction(basis_beta, C.T, t, m)
            C += correction.T

        self._coefficients = C.reshape(-1)

    #
    # Density matrices
    #
    def calculate_ndm_element(self, bra_indices, ket_indices):
        """
        The N-DM element ``<a+_{b_0} a+_{b_1} .. a_{k_0} a_{k_1} ..>``
        of this expansion, see :py:meth:`onvci.DMCalculator.calculate_element`
        """
        return DMCalculator(self).calculate_element(bra_indices, ket_indices)

    def calculate_1dm(self):
        return DMCalculator(self).calculate_1dm()

    def calculate_2dm(self):
        return DMCalculator(self).calculate_2dm()

    def calculate_spin_resolved_1dm(self):
        return DMCalculator(self).calculate_spin_resolved_1dm()

    def calculate_spin_resolved_2dm(self):
        return DMCalculator(self).calculate_spin_resolved_2dm()

    #
    # Storage
    #
    def to_hdf5(self, fname):
        """Store the ONV basis and the coefficients in an HDF5 file"""
        hdf5io.save(fname, {"onv_basis": self.onv_basis.to_dict(),
                            "coefficients": self._coefficients})

    def __repr__(self):
        return f"LinearExpansion({self.onv_basis!r})"


def _orbital_correction(onv_basis, C, t, m):
    """
    Correction to the coefficients `C` (ONVs of `onv_basis` along the
    rows) from the transformation of orbital `m` with the matrix `t`.
    """
    correction = np.zeros_like(C)
    vertex_weight = onv_basis.vertex_weight
    for onv, I in onv_basis:
        if onv.is_occupied(m):
            correction[I, :] += (t[m, m] - 1) * C[I, :]
            continue

        for e1, p in enumerate(onv.occupation_indices):
            # Address of the ONV with the electron e1 moved from p to m
            address = I - vertex_weight(p, e1 + 1)
            if p < m:
                address, q, e2, sign = \
                    onv_basis.shift_until_next_unoccupied_orbital(
                        onv, address, p + 1, e1 + 1, 1
                    )
                while q != m:
                    address, q, e2, sign = \
                        onv_basis.shift_until_next_unoccupied_orbital(
                            onv, address, q + 1, e2, sign
                        )
                address += vertex_weight(q, e2)
            else:
                address, q, e2, sign = \
                    onv_basis.shift_until_previous_unoccupied_orbital(
                        onv, address, p - 1, e1 - 1, 1
                    )
                while q != m:
                    address, q, e2, sign = \
                        onv_basis.shift_until_previous_unoccupied_orbital(
                            onv, address, q - 1, e2, sign
                        )
                address += vertex_weight(q, e2 + 2)
            correction[I, :] += sign * t[p, m] * C[address, :]
    return correction


def lu_no_pivot(A):
    """
    LU decomposition ``A = L U`` without pivoting (Doolittle), with `L`
    unit lower triangular and `U` upper triangular.
    """
    A = np.asarray(A, dtype=float)
    n = A.shape[0]
    L = np.eye(n)
    U = np.zeros_like(A)
    for i in range(n):
        U[i, i:] = A[i, i:] - L[i, :i] @ U[:i, i:]
        if U[i, i] == 0:
            raise np.linalg.LinAlgError("Zero pivot encountered in LU "
                                        "decomposition without pivoting.")
        L[i + 1:, i] = (A[i + 1:, i] - L[i + 1:, :i] @ U[:i, i]) / U[i, i]
    return L, U


def _check_same_scalar_basis(S_on, S_of):
    if np.shape(S_on) != np.shape(S_of) \
            or not np.allclose(S_on, S_of, rtol=0, atol=1e-8):
        raise InvalidConfiguration("The given orbitals are not expressed in "
                                   "the same scalar (atomic) orbital basis.")


def _orbital_overlap(C_on, C_of, S):
    """Overlap matrix between the orbitals C_on (rows) and C_of (columns)"""
    C_on = np.asarray(C_on)
    C_of = np.asarray(C_of)
    if C_on.shape != C_of.shape or C_on.shape[0] != S.shape[0]:
        raise DimensionMismatch("Orbital coefficient matrices and atomic "
                                "orbital overlap matrix do not fit together.")
    return C_on.T @ S @ C_of


def _onv_overlap(orbital_overlap, onv_on, onv_of):
    occ_on = list(onv_on.occupation_indices)
    occ_of = list(onv_of.occupation_indices)
    if not occ_on:
        return 1.0
    return np.linalg.det(orbital_overlap[np.ix_(occ_on, occ_of)])


def onv_basis_from_dict(data):
    """Reconstruct an ONV basis from the output of its ``to_dict``"""
    typ = data["type"]
    if typ == "SpinUnresolvedONVBasis":
        return SpinUnresolvedONVBasis(data["n_orbitals"], data["n_electrons"])
    elif typ == "SpinResolvedONVBasis":
        return SpinResolvedONVBasis(data["n_orbitals"], data["n_alpha"],
                                    data["n_beta"])
    elif typ == "SeniorityZeroONVBasis":
        return SeniorityZeroONVBasis(data["n_orbitals"],
                                     data["n_electron_pairs"])
    elif typ == "SpinUnresolvedFrozenONVBasis":
        return SpinUnresolvedFrozenONVBasis(data["n_orbitals"],
                                            data["n_electrons"],
                                            data["n_frozen"])
    elif typ == "SpinResolvedFrozenONVBasis":
        return SpinResolvedFrozenONVBasis(data["n_orbitals"], data["n_alpha"],
                                          data["n_beta"], data["n_frozen"])
    elif typ == "SpinResolvedSelectedONVBasis":
        onv_basis = SpinResolvedSelectedONVBasis(
            data["n_orbitals"], data["n_alpha"], data["n_beta"]
        )
        for alpha_string, beta_string in zip(data.get("alpha", []),
                                             data.get("beta", [])):
            onv_basis.add_onv_from_string(alpha_string, beta_string)
        return onv_basis
    else:
        raise ValueError(f"Unknown ONV basis type '{typ}'.")
