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
from enum import Enum

from .exceptions import DimensionMismatch
from .SpinUnresolvedONV import SpinUnresolvedONV


class Spin(Enum):
    alpha = 0
    beta = 1


class SpinResolvedONV:
    def __init__(self, alpha, beta):
        """
        Spin-resolved occupation-number vector, i.e. the product of an alpha
        and a beta :py:class:`SpinUnresolvedONV` over the same orbitals.
        """
        if alpha.n_orbitals != beta.n_orbitals:
            raise DimensionMismatch("Alpha and beta ONV need to be defined on "
                                    "the same number of orbitals.")
        self.alpha = alpha
        self.beta = beta

    @classmethod
    def from_string(cls, alpha_string, beta_string):
        """Construct from two bitstrings (orbital 0 as last character)"""
        return cls(SpinUnresolvedONV.from_string(alpha_string),
                   SpinUnresolvedONV.from_string(beta_string))

    @classmethod
    def from_occupations(cls, n_orbitals, alpha_occupation, beta_occupation):
        return cls(SpinUnresolvedONV(n_orbitals, alpha_occupation),
                   SpinUnresolvedONV(n_orbitals, beta_occupation))

    def onv(self, spin):
        """Return the ONV of a particular :py:class:`Spin`"""
        if spin == Spin.alpha:
            return self.alpha
        elif spin == Spin.beta:
            return self.beta
        raise TypeError("spin needs to be Spin.alpha or Spin.beta")

    @property
    def n_orbitals(self):
        return self.alpha.n_orbitals

    @property
    def n_electrons(self):
        return self.alpha.n_electrons + self.beta.n_electrons

    @property
    def seniority(self):
        """Number of singly occupied orbitals"""
        return bin(self.alpha.representation ^ self.beta.representation).count("1")

    def as_string(self):
        return self.alpha.as_string() + "|" + self.beta.as_string()

    def __eq__(self, other):
        if not isinstance(other, SpinResolvedONV):
            return NotImplemented
        return self.alpha == other.alpha and self.beta == other.beta

    def __hash__(self):
        return hash((self.alpha.representation, self.beta.representation))

    def __repr__(self):
        return f"SpinResolvedONV({self.alpha.as_string()!r}, " \
               f"{self.beta.as_string()!r})"
