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

from .DensityMatrices import SpinResolvedOneDM, SpinResolvedTwoDM
from .DMCalculatorBase import DMCalculatorBase
from .SpinResolvedSelectedONVBasis import double_excitation, single_excitation


class SpinResolvedSelectedDMCalculator(DMCalculatorBase):
    """
    Density matrices of expansions in a
    :py:class:`onvci.SpinResolvedSelectedONVBasis`, evaluated pairwise over
    the explicit list of ONVs.
    """
    def _pairs(self, x):
        """
        Yield ``(onv_I, onv_J, x_I x_J)`` for all ordered pairs of ONVs
        differing by at most two excitations.
        """
        onvs = self.onv_basis.onvs
        for I, onv_I in enumerate(onvs):
            yield onv_I, onv_I, x[I] * x[I]
            for J in range(I + 1, len(onvs)):
                onv_J = onvs[J]
                n_excitations = \
                    onv_I.alpha.count_number_of_excitations(onv_J.alpha) \
                    + onv_I.beta.count_number_of_excitations(onv_J.beta)
                if n_excitations <= 2:
                    yield onv_I, onv_J, x[I] * x[J]
                    yield onv_J, onv_I, x[I] * x[J]

    def calculate_spin_resolved_1dm(self, x):
        x = self._check_coefficients(x)
        K = self.onv_basis.n_orbitals
        D_alpha = np.zeros((K, K))
        D_beta = np.zeros((K, K))
        for onv_I, onv_J, c in self._pairs(x):
            n_alpha = onv_I.alpha.count_number_of_excitations(onv_J.alpha)
            n_beta = onv_I.beta.count_number_of_excitations(onv_J.beta)
            if n_alpha == 0 and n_beta == 0:
                for p in onv_I.alpha.occupation_indices:
                    D_alpha[p, p] += c
                for p in onv_I.beta.occupation_indices:
                    D_beta[p, p] += c
            elif n_alpha == 1 and n_beta == 0:
                p, q, sign = single_excitation(onv_I.alpha, onv_J.alpha)
                D_alpha[p, q] += sign * c
            elif n_alpha == 0 and n_beta == 1:
                p, q, sign = single_excitation(onv_I.beta, onv_J.beta)
                D_beta[p, q] += sign * c
        return SpinResolvedOneDM(D_alpha, D_beta)

    def calculate_spin_resolved_2dm(self, x):
        x = self._check_coefficients(x)
        K = self.onv_basis.n_orbitals
        d = {key: np.zeros(4 * (K, )) for key in ("aa", "ab", "ba", "bb")}

        for onv_I, onv_J, c in self._pairs(x):
            spins = {"a": (onv_I.alpha, onv_J.alpha),
                     "b": (onv_I.beta, onv_J.beta)}
            n_excitations = {s: I.count_number_of_excitations(J)
                             for s, (I, J) in spins.items()}

            if sum(n_excitations.values()) == 0:
                for s, (onv, _) in spins.items():
                    occ = onv.occupation_indices
                    for p in occ:
                        for r in occ:
                            if p != r:
                                d[s + s][p, p, r, r] += c
                                d[s + s][p, r, r, p] -= c
                for p in onv_I.alpha.occupation_indices:
                    for r in onv_I.beta.occupation_indices:
                        d["ab"][p, p, r, r] += c
                        d["ba"][r, r, p, p] += c

            elif sum(n_excitations.values()) == 1:
                s = "a" if n_excitations["a"] == 1 else "b"
                t = "b" if s == "a" else "a"
                excited_I, excited_J = spins[s]
                p, q, sign = single_excitation(excited_I, excited_J)
                v = sign * c
                for r in excited_I.find_matching_occupations(excited_J):
                    d[s + s][p, q, r, r] += v
                    d[s + s][r, r, p, q] += v
                    d[s + s][p, r, r, q] -= v
                    d[s + s][r, q, p, r] -= v
                for r in spins[t][0].occupation_indices:
                    d[s + t][p, q, r, r] += v
                    d[t + s][r, r, p, q] += v

            elif n_excitations["a"] == 1 and n_excitations["b"] == 1:
                p, q, sign_alpha = single_excitation(onv_I.alpha, onv_J.alpha)
                r, s, sign_beta = single_excitation(onv_I.beta, onv_J.beta)
                v = sign_alpha * sign_beta * c
                d["ab"][p, q, r, s] += v
                d["ba"][r, s, p, q] += v

            else:
                s = "a" if n_excitations["a"] == 2 else "b"
                p, q, r, t, sign = double_excitation(*spins[s])
                v = sign * c
                d[s + s][p, q, r, t] += v
                d[s + s][r, t, p, q] += v
                d[s + s][p, t, r, q] -= v
                d[s + s][r, q, p, t] -= v

        return SpinResolvedTwoDM(d["aa"], d["ab"], d["ba"], d["bb"])
