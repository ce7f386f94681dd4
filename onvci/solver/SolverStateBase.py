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

from onvci.timings import Timer


class EigenSolverStateBase:
    def __init__(self, matrix):
        """Initialise an EigenSolverStateBase.

        Parameters
        ----------
        matrix
            Matrix to be diagonalised.
        """
        self.matrix = matrix
        self.eigenvalues = None           # Current eigenvalues
        self.eigenvectors = None          # Current eigenvectors
        self.residual_norms = None        # Current residual norms
        self.converged = False            # Flag whether iteration is converged
        self.n_iter = 0                   # Number of iterations
        self.n_applies = 0                # Number of applies
        self.timer = Timer()              # Construct a new timer

    def describe(self):
        text = ""

        problem = str(self.matrix)
        algorithm = getattr(self, "algorithm", "")
        conv = "converged" if self.converged else "NOT CONVERGED"

        text += "+" + 60 * "-" + "+\n"
        text += "| {0:<41s}  {1:>15s} |\n".format(algorithm, conv)
        text += ("| {0:30s} n_iter={1:<3d}  n_applies={2:<5d} |\n"
                 "".format(problem[:30], self.n_iter, self.n_applies))
        text += "+" + 60 * "-" + "+\n"
        text += "|  #        eigenvalue     res. norm    dominant address   |\n"

        body = "| {0:2d} {1:17.10g}  {2:12.4g}    {3:>8d} ({4:8.4f})  |\n"
        for i, vec in enumerate(self.eigenvectors):
            dominant = int(np.argmax(np.abs(vec)))
            residual_norm = np.nan
            if self.residual_norms is not None:
                residual_norm = self.residual_norms[i]
            text += body.format(i, self.eigenvalues[i], residual_norm,
                                dominant, vec[dominant])
        text += "+" + 60 * "-" + "+"
        return text

    def _repr_pretty_(self, pp, cycle):
        if cycle:
            pp.text("SolverState(...)")
        else:
            pp.text(self.describe())
