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

from .exceptions import DimensionMismatch


class SQOneElectronOperator:
    def __init__(self, parameters):
        """
        Second-quantized one-electron operator ``sum_pq f_pq a+_p a_q``.

        Parameters
        ----------
        parameters : array-like
            Square matrix of integrals ``f_pq``
        """
        parameters = np.asarray(parameters, dtype=float)
        if parameters.ndim != 2 or parameters.shape[0] != parameters.shape[1]:
            raise DimensionMismatch("One-electron parameters need to be a square "
                                    "matrix, got shape "
                                    + str(parameters.shape) + ".")
        self.parameters = parameters

    @property
    def dimension(self):
        """The number of orbitals the operator is expressed in"""
        return self.parameters.shape[0]

    def transformed(self, T):
        """
        Return the operator expressed in the orbitals
        ``phi'_q = sum_p phi_p T_pq``.
        """
        T = np.asarray(T)
        if T.shape != self.parameters.shape:
            raise DimensionMismatch("Transformation matrix shape "
                                    + str(T.shape) + " does not fit to the "
                                    "operator of dimension "
                                    + str(self.dimension) + ".")
        return SQOneElectronOperator(contract("pq,pa,qb->ab",
                                              self.parameters, T, T))

    def calculate_expectation_value(self, D):
        """Contract with a 1-DM to the expectation value ``sum_pq f_pq D_pq``"""
        D = np.asarray(D)
        if D.shape != self.parameters.shape:
            raise DimensionMismatch("Shape of the density matrix does not fit "
                                    "to the operator.")
        return float(np.einsum("pq,pq->", self.parameters, D))

    def __repr__(self):
        return f"SQOneElectronOperator(dimension={self.dimension})"


class SQTwoElectronOperator:
    def __init__(self, parameters):
        """
        Second-quantized two-electron operator
        ``1/2 sum_pqrs g_pqrs a+_p a+_r a_s a_q``.

        Parameters
        ----------
        parameters : array-like
            Four-index tensor of integrals in chemist's notation, i.e.
            ``g[p, q, r, s] = (pq|rs)``.
        """
        parameters = np.asarray(parameters, dtype=float)
        if parameters.ndim != 4 or len(set(parameters.shape)) != 1:
            raise DimensionMismatch("Two-electron parameters need to be a "
                                    "four-index tensor with equal extents, "
                                    "got shape " + str(parameters.shape) + ".")
        self.parameters = parameters

    @property
    def dimension(self):
        return self.parameters.shape[0]

    def transformed(self, T):
        """
        Return the operator expressed in the orbitals
        ``phi'_q = sum_p phi_p T_pq``.
        """
        T = np.asarray(T)
        if T.shape != (self.dimension, self.dimension):
            raise DimensionMismatch("Transformation matrix shape "
                                    + str(T.shape) + " does not fit to the "
                                    "operator of dimension "
                                    + str(self.dimension) + ".")
        return SQTwoElectronOperator(contract("pqrs,pa,qb,rc,sd->abcd",
                                              self.parameters, T, T, T, T))

    def calculate_expectation_value(self, d):
        """
        Contract with a 2-DM (``d_pqrs = <a+_p a+_r a_s a_q>``) to the
        expectation value ``1/2 sum_pqrs g_pqrs d_pqrs``.
        """
        d = np.asarray(d)
        if d.shape != self.parameters.shape:
            raise DimensionMismatch("Shape of the density matrix does not fit "
                                    "to the operator.")
        return 0.5 * float(np.einsum("pqrs,pqrs->", self.parameters, d))

    def __repr__(self):
        return f"SQTwoElectronOperator(dimension={self.dimension})"


class SQHamiltonian:
    def __init__(self, core, two_electron):
        """
        Electronic Hamiltonian in second quantization, i.e. the sum of a
        one-electron (core) operator and a two-electron operator.

        The integrals are interpreted as spin-orbital integrals by
        :py:class:`onvci.SpinUnresolvedONVBasis` and as restricted
        spatial-orbital integrals by all spin-resolved ONV bases.

        Parameters
        ----------
        core : SQOneElectronOperator or array-like
            The one-electron integrals ``h_pq``
        two_electron : SQTwoElectronOperator or array-like
            The two-electron integrals ``g_pqrs`` in chemist's notation
        """
        if not isinstance(core, SQOneElectronOperator):
            core = SQOneElectronOperator(core)
        if not isinstance(two_electron, SQTwoElectronOperator):
            two_electron = SQTwoElectronOperator(two_electron)
        if core.dimension != two_electron.dimension:
            raise DimensionMismatch(
                f"Dimension of the core operator ({core.dimension}) and of the "
                f"two-electron operator ({two_electron.dimension}) differ."
            )
        self.core = core
        self.two_electron = two_electron

    @property
    def dimension(self):
        return self.core.dimension

    @property
    def h(self):
        """The one-electron integrals as a numpy array"""
        return self.core.parameters

    @property
    def g(self):
        """The two-electron integrals (chemist's notation) as a numpy array"""
        return self.two_electron.parameters

    @classmethod
    def random(cls, n_orbitals, random_state=None):
        """
        Hamiltonian with random integrals between -1 and 1, which have the
        symmetries of real-valued molecular integrals.

        Parameters
        ----------
        n_orbitals : int
            Number of orbitals
        random_state : int or numpy.random.Generator, optional
            Seed or generator for the random numbers
        """
        rng = np.random.default_rng(random_state)
        h = rng.uniform(-1, 1, size=(n_orbitals, n_orbitals))
        h = (h + h.T) / 2

        g = rng.uniform(-1, 1, size=4 * (n_orbitals, ))
        g = (g + g.transpose(1, 0, 2, 3)) / 2
        g = (g + g.transpose(0, 1, 3, 2)) / 2
        g = (g + g.transpose(2, 3, 0, 1)) / 2
        return cls(h, g)

    @classmethod
    def hubbard(cls, adjacency, t, U):
        """
        Hubbard model Hamiltonian on a lattice given by its adjacency matrix.

        The hopping matrix ``-t A + U 1`` provides the nearest-neighbour
        hopping terms as core integrals and the on-site repulsion `U` as
        the two-electron integrals ``g_pppp``.

        Parameters
        ----------
        adjacency : array-like
            Symmetric adjacency matrix of the lattice sites
        t : float
            Hopping parameter
        U : float
            On-site repulsion parameter
        """
        adjacency = np.asarray(adjacency, dtype=float)
        if adjacency.ndim != 2 or adjacency.shape[0] != adjacency.shape[1]:
            raise DimensionMismatch("Adjacency matrix needs to be square.")
        if not np.allclose(adjacency, adjacency.T):
            raise ValueError("Adjacency matrix needs to be symmetric.")
        hopping = -t * adjacency + U * np.eye(adjacency.shape[0])

        n_orbitals = hopping.shape[0]
        h = hopping - np.diag(np.diag(hopping))
        g = np.zeros(4 * (n_orbitals, ))
        for p in range(n_orbitals):
            g[p, p, p, p] = hopping[p, p]
        return cls(h, g)

    def transformed(self, T):
        """
        Return the Hamiltonian expressed in the orbitals
        ``phi'_q = sum_p phi_p T_pq``.
        """
        return SQHamiltonian(self.core.transformed(T),
                             self.two_electron.transformed(T))

    def calculate_expectation_value(self, D, d):
        """
        Energy expectation value from a (spin-summed) 1-DM and 2-DM.

        Parameters
        ----------
        D : OneDM or array-like
            One-electron density matrix
        d : TwoDM or array-like
            Two-electron density matrix ``d_pqrs = <a+_p a+_r a_s a_q>``
        """
        return self.core.calculate_expectation_value(np.asarray(D)) \
            + self.two_electron.calculate_expectation_value(np.asarray(d))

    def __repr__(self):
        return f"SQHamiltonian(dimension={self.dimension})"


def check_operator_dimension(operator, n_orbitals):
    """
    Raise :py:class:`onvci.exceptions.DimensionMismatch` if the operator is
    not expressed in `n_orbitals` orbitals.
    """
    if operator.dimension != n_orbitals:
        raise DimensionMismatch(
            f"Operator of dimension {operator.dimension} cannot be evaluated "
            f"in an ONV basis with {n_orbitals} orbitals."
        )
