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


class OneDM:
    def __init__(self, matrix):
        """
        One-electron density matrix ``D_pq = <a+_p a_q>``.

        Parameters
        ----------
        matrix : array-like
            Square matrix of the density-matrix elements
        """
        matrix = np.asarray(matrix, dtype=float)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise DimensionMismatch("A 1-DM needs to be a square matrix, got "
                                    "shape " + str(matrix.shape) + ".")
        self.matrix = matrix

    @property
    def dimension(self):
        return self.matrix.shape[0]

    def trace(self):
        """The trace, i.e. the number of electrons"""
        return float(np.trace(self.matrix))

    def to_ndarray(self):
        return self.matrix.copy()

    def __array__(self, dtype=None, copy=None):
        return np.asarray(self.matrix, dtype=dtype)

    def __getitem__(self, index):
        return self.matrix[index]

    def __add__(self, other):
        return OneDM(self.matrix + np.asarray(other))

    def is_approx(self, other, tolerance=1e-12):
        other = np.asarray(other)
        return other.shape == self.matrix.shape and \
            np.allclose(self.matrix, other, rtol=0, atol=tolerance)

    def __repr__(self):
        return f"OneDM(dimension={self.dimension})"


class TwoDM:
    def __init__(self, tensor):
        """
        Two-electron density matrix ``d_pqrs = <a+_p a+_r a_s a_q>``.

        Parameters
        ----------
        tensor : array-like
            Four-index tensor of the density-matrix elements
        """
        tensor = np.asarray(tensor, dtype=float)
        if tensor.ndim != 4 or len(set(tensor.shape)) != 1:
            raise DimensionMismatch("A 2-DM needs to be a four-index tensor with "
                                    "equal extents, got shape "
                                    + str(tensor.shape) + ".")
        self.tensor = tensor

    @property
    def dimension(self):
        return self.tensor.shape[0]

    def trace(self):
        """The trace ``sum_pq d_ppqq``, i.e. N (N - 1)"""
        return float(np.einsum("ppqq->", self.tensor))

    def reduce(self):
        """
        The partial trace ``sum_r d_pqrr``, which equals ``(N - 1) D_pq``
        with D the 1-DM.
        """
        return np.einsum("pqrr->pq", self.tensor)

    def to_ndarray(self):
        return self.tensor.copy()

    def __array__(self, dtype=None, copy=None):
        return np.asarray(self.tensor, dtype=dtype)

    def __getitem__(self, index):
        return self.tensor[index]

    def __add__(self, other):
        return TwoDM(self.tensor + np.asarray(other))

    def is_approx(self, other, tolerance=1e-12):
        other = np.asarray(other)
        return other.shape == self.tensor.shape and \
            np.allclose(self.tensor, other, rtol=0, atol=tolerance)

    def __repr__(self):
        return f"TwoDM(dimension={self.dimension})"


class SpinResolvedOneDM:
    def __init__(self, alpha, beta):
        """
        Spin-resolved 1-DM, i.e. the pair of the alpha and the beta 1-DM.
        """
        self.alpha = alpha if isinstance(alpha, OneDM) else OneDM(alpha)
        self.beta = beta if isinstance(beta, OneDM) else OneDM(beta)
        if self.alpha.dimension != self.beta.dimension:
            raise DimensionMismatch("Alpha and beta 1-DM differ in dimension.")

    def spin_summed(self):
        return OneDM(self.alpha.matrix + self.beta.matrix)

    def spin_density(self):
        """The spin density matrix, i.e. alpha minus beta"""
        return OneDM(self.alpha.matrix - self.beta.matrix)

    def trace(self):
        return self.alpha.trace() + self.beta.trace()


class SpinResolvedTwoDM:
    def __init__(self, aaaa, aabb, bbaa, bbbb):
        """
        Spin-resolved 2-DM with the four spin blocks
        ``d^{sigma tau}_pqrs = <a+_{p sigma} a+_{r tau} a_{s tau} a_{q sigma}>``.
        """
        self.aaaa = aaaa if isinstance(aaaa, TwoDM) else TwoDM(aaaa)
        self.aabb = aabb if isinstance(aabb, TwoDM) else TwoDM(aabb)
        self.bbaa = bbaa if isinstance(bbaa, TwoDM) else TwoDM(bbaa)
        self.bbbb = bbbb if isinstance(bbbb, TwoDM) else TwoDM(bbbb)
        if len({b.dimension for b in self.blocks}) != 1:
            raise DimensionMismatch("Spin blocks of the 2-DM differ in "
                                    "dimension.")

    @property
    def blocks(self):
        return (self.aaaa, self.aabb, self.bbaa, self.bbbb)

    def spin_summed(self):
        return TwoDM(sum(block.tensor for block in self.blocks))

    def trace(self):
        return sum(block.trace() for block in self.blocks)
