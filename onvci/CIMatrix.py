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

from .misc import cached_property
from .timings import Timer, timed_member_call
from .SQOperator import SQHamiltonian
from .exceptions import DimensionMismatch


class CIMatrix:
    def __init__(self, onv_basis, hamiltonian):
        """
        The matrix representation of a Hamiltonian in an ONV basis, i.e.
        the configuration-interaction (CI) matrix.

        The sparse representation is built on first use and used for all
        matrix-vector products.

        Parameters
        ----------
        onv_basis
            Any ONV basis supporting operator evaluation
        hamiltonian : SQHamiltonian
            The second-quantized Hamiltonian
        """
        if not isinstance(hamiltonian, SQHamiltonian):
            raise TypeError("hamiltonian needs to be an SQHamiltonian, not "
                            + str(type(hamiltonian)))
        self.onv_basis = onv_basis
        self.hamiltonian = hamiltonian
        self.timer = Timer()
        self.shape = (onv_basis.dimension, onv_basis.dimension)

    def __len__(self):
        return self.shape[0]

    def __repr__(self):
        return f"CIMatrix({self.onv_basis!r})"

    @cached_property
    def sparse(self):
        """The CI matrix as a scipy.sparse csr matrix"""
        with self.timer.record("build"):
            return self.onv_basis.evaluate_operator_sparse(self.hamiltonian)

    def diagonal(self):
        """Return the diagonal of the CI matrix as a numpy array"""
        if not hasattr(self, "_diagonal"):
            with self.timer.record("diagonal"):
                self._diagonal = self.onv_basis.evaluate_operator_diagonal(
                    self.hamiltonian
                )
        return self._diagonal

    @timed_member_call()
    def matvec(self, v):
        """Compute the matrix-vector product of the CI matrix with a vector"""
        v = np.asarray(v)
        if v.shape != (self.shape[1], ):
            raise DimensionMismatch(f"Vector of shape {v.shape} does not fit "
                                    f"to a CI matrix of shape {self.shape}.")
        return self.sparse @ v

    def rmatvec(self, v):
        # CI matrix is symmetric
        return self.matvec(v)

    def __matmul__(self, other):
        if isinstance(other, list):
            return [self.matvec(ov) for ov in other]
        if isinstance(other, np.ndarray) and other.ndim == 1:
            return self.matvec(other)
        return NotImplemented

    def to_ndarray(self):
        """Return the CI matrix as a dense numpy array"""
        return self.sparse.toarray()
