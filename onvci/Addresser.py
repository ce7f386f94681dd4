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

from .exceptions import DimensionMismatch, InvalidConfiguration


class Addresser:
    def __init__(self, n_orbitals, n_electrons):
        """
        Addressing scheme mapping sets of `n_electrons` occupied orbitals
        out of `n_orbitals` orbitals bijectively onto the integers
        ``0 .. C(n_orbitals, n_electrons) - 1``.

        The scheme is the combinatorial number system: the vertex weight
        ``W(p, e)`` equals the binomial coefficient ``C(p, e)`` and the
        address of the ascending occupation ``p_0 < p_1 < ... < p_{N-1}``
        is ``sum_i W(p_i, i + 1)``. Enumerating the addresses in increasing
        order enumerates the occupations in colexicographic order.

        Parameters
        ----------
        n_orbitals : int
            Number of orbitals (K)
        n_electrons : int
            Number of electrons (N)
        """
        if n_orbitals < 0 or n_electrons < 0:
            raise InvalidConfiguration("Number of orbitals and electrons need "
                                       "to be non-negative.")
        if n_electrons > n_orbitals:
            raise InvalidConfiguration(
                f"Cannot place {n_electrons} electrons into {n_orbitals} "
                "orbitals."
            )
        self.n_orbitals = n_orbitals
        self.n_electrons = n_electrons

        # Pascal triangle W[p, e] = C(p, e) for 0 <= p <= K, 0 <= e <= N
        weights = np.zeros((n_orbitals + 1, n_electrons + 1), dtype=np.int64)
        weights[:, 0] = 1
        for p in range(1, n_orbitals + 1):
            weights[p, 1:] = weights[p - 1, 1:] + weights[p - 1, :-1]
        weights.setflags(write=False)
        self.weights = weights

    @property
    def dimension(self):
        """The number of addressable occupations, i.e. C(K, N)"""
        return int(self.weights[self.n_orbitals, self.n_electrons])

    def vertex_weight(self, p, e):
        """
        Return the vertex weight W(p, e), the number of ways to place
        `e` electrons into the orbitals ``0 .. p - 1``.
        """
        return int(self.weights[p, e])

    def address(self, occupation):
        """Return the address of an ascending sequence of occupied orbitals"""
        if len(occupation) != self.n_electrons:
            raise DimensionMismatch(
                f"Expected {self.n_electrons} occupied orbitals, "
                f"got {len(occupation)}."
            )
        return sum(int(self.weights[p, e + 1]) for e, p in enumerate(occupation))

    def occupation(self, address):
        """
        Return the ascending list of occupied orbitals, which is
        assigned the given address.
        """
        if address < 0 or address >= self.dimension:
            raise DimensionMismatch(
                f"Address {address} is out of range for an addressing "
                f"space of dimension {self.dimension}."
            )
        occupation = [0] * self.n_electrons
        remainder = address
        p = self.n_orbitals - 1
        for e in range(self.n_electrons, 0, -1):
            # Largest orbital p with W(p, e) <= remainder, which always
            # exists since W(e - 1, e) = 0.
            while self.weights[p, e] > remainder:
                p -= 1
            occupation[e - 1] = p
            remainder -= int(self.weights[p, e])
            p -= 1
        return occupation

    def __repr__(self):
        return f"Addresser(n_orbitals={self.n_orbitals}, " \
               f"n_electrons={self.n_electrons})"
