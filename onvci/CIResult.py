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
from .timings import Timer
from .LinearExpansion import LinearExpansion


class CIResult:
    def __init__(self, matrix, eigenvalues, eigenvectors, converged=True,
                 n_iter=0, n_applies=0, eigensolver="dense", timer=None):
        """
        The eigenpairs of a CI matrix, i.e. energies and wave functions
        as :py:class:`onvci.LinearExpansion` objects.

        Parameters
        ----------
        matrix : CIMatrix
            The diagonalised CI matrix
        eigenvalues : array-like
            Energies in ascending order
        eigenvectors : list
            Coefficient vectors belonging to the eigenvalues
        converged : bool, optional
            Whether the eigensolver converged
        n_iter : int, optional
            Number of eigensolver iterations
        n_applies : int, optional
            Number of matrix-vector products of the eigensolver
        eigensolver : str, optional
            Name of the employed eigensolver
        timer : Timer, optional
            Timings of the eigensolver
        """
        self.matrix = matrix
        self.eigenvalues = np.asarray(eigenvalues)
        self._eigenvectors = [np.asarray(v) for v in eigenvectors]
        self.converged = converged
        self.n_iter = n_iter
        self.n_applies = n_applies
        self.eigensolver = eigensolver
        self.timer = timer if timer is not None else Timer()

    @property
    def onv_basis(self):
        return self.matrix.onv_basis

    @property
    def hamiltonian(self):
        return self.matrix.hamiltonian

    @property
    def size(self):
        return len(self.eigenvalues)

    @property
    def energy(self):
        """The lowest computed energy"""
        return float(self.eigenvalues[0])

    @cached_property
    def expansions(self):
        """The computed states as normalised linear expansions"""
        return [LinearExpansion(self.onv_basis, v) for v in self._eigenvectors]

    @property
    def ground_state(self):
        return self.expansions[0]

    def describe(self):
        """Return a string providing a human-readable description"""
        conv = "converged" if self.converged else "NOT CONVERGED"
        text = "+" + 53 * "-" + "+\n"
        text += "| {0:<34s} {1:>16s} |\n".format(
            "CI (" + self.eigensolver + ")", conv)
        text += "| {0:<51s} |\n".format(str(self.onv_basis)[:51])
        text += "+" + 53 * "-" + "+\n"
        text += "|  #          energy    dominant ONV   coefficient    |\n"
        body = "| {0:2d}  {1:14.10f}    {2:>12s}   {3:11.7f}    |\n"
        for i, expansion in enumerate(self.expansions):
            dominant = int(np.argmax(np.abs(expansion.coefficients)))
            text += body.format(i, self.eigenvalues[i], str(dominant),
                                expansion.coefficients[dominant])
        text += "+" + 53 * "-" + "+"
        return text

    def __repr__(self):
        return f"CIResult(size={self.size}, converged={self.converged})"

    def _repr_pretty_(self, pp, cycle):
        if cycle:
            pp.text("CIResult(...)")
        else:
            pp.text(self.describe())
