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
from bisect import insort

from .misc import check_orbital_index
from .exceptions import DimensionMismatch, InvalidConfiguration


def _popcount(value):
    return bin(value).count("1")


class SpinUnresolvedONV:
    def __init__(self, n_orbitals, occupation, address=None):
        """
        Occupation-number vector: an occupation pattern of electrons
        distributed over `n_orbitals` orbitals of a single spin.

        Parameters
        ----------
        n_orbitals : int
            Number of orbitals (M)
        occupation : iterable
            The indices of the occupied orbitals
        address : int or NoneType, optional
            Address of this configuration inside the ONV basis it was
            taken from. It is not kept in sync by :py:meth:`annihilate` and
            :py:meth:`create`, this is left to the caller.
        """
        occupation = sorted(occupation)
        if len(set(occupation)) != len(occupation):
            raise InvalidConfiguration("Orbitals in an occupation need to be "
                                       "unique, got " + str(occupation))
        for p in occupation:
            check_orbital_index(p, n_orbitals)

        self.n_orbitals = n_orbitals
        self.address = address
        self._occupation = occupation
        self._representation = sum(1 << p for p in occupation)

    @classmethod
    def from_representation(cls, n_orbitals, representation, address=None):
        """
        Construct from the unsigned integer representation, where bit `p`
        is set if and only if orbital `p` is occupied.
        """
        if representation < 0 or representation >> n_orbitals:
            raise DimensionMismatch(f"Representation {representation} does not "
                                    f"fit into {n_orbitals} orbitals.")
        occupation = [p for p in range(n_orbitals) if representation >> p & 1]
        return cls(n_orbitals, occupation, address=address)

    @classmethod
    def from_string(cls, string):
        """
        Construct from a bitstring, in which the last character refers to
        orbital 0, e.g. ``"0101"`` describes orbitals 0 and 2 occupied.
        """
        string = string.strip()
        if not string or any(c not in "01" for c in string):
            raise InvalidConfiguration(f"'{string}' is not a valid bitstring.")
        return cls.from_representation(len(string), int(string, 2))

    @property
    def n_electrons(self):
        return len(self._occupation)

    @property
    def representation(self):
        """Unsigned integer with bit p set if orbital p is occupied"""
        return self._representation

    @property
    def occupation_indices(self):
        """The ascending tuple of occupied orbital indices"""
        return tuple(self._occupation)

    def occupation_index_of(self, e):
        """Return the orbital index the electron `e` occupies"""
        return self._occupation[e]

    def is_occupied(self, p):
        check_orbital_index(p, self.n_orbitals)
        return bool(self._representation >> p & 1)

    def operator_phase_factor(self, p):
        """
        Return the phase factor (-1)^n, where n is the number of occupied
        orbitals with an index lower than `p`. This is the phase picked up
        by creating or annihilating an electron in orbital `p`.
        """
        return -1 if _popcount(self._representation & ((1 << p) - 1)) % 2 else 1

    def annihilate(self, p):
        """
        Annihilate an electron in orbital `p`. Returns False and leaves
        the ONV unchanged if `p` is not occupied.
        """
        if not self.is_occupied(p):
            return False
        self._representation &= ~(1 << p)
        self._occupation.remove(p)
        return True

    def create(self, p):
        """
        Create an electron in orbital `p`. Returns False and leaves
        the ONV unchanged if `p` is already occupied.
        """
        if self.is_occupied(p):
            return False
        self._representation |= 1 << p
        insort(self._occupation, p)
        return True

    def annihilate_all(self, indices, sign=1):
        """
        Apply the annihilators for `indices` one after another in the given
        order, i.e. ``a_{indices[-1]} ... a_{indices[0]} |onv>``.

        Returns a tuple ``(success, sign)``, where `sign` is the input sign
        multiplied by the phase factors of all annihilations. If one of the
        orbitals turns out to be unoccupied (Pauli violation) all previous
        annihilations are undone and ``(False, sign)`` with the unmodified
        input sign is returned.
        """
        done = []
        new_sign = sign
        for p in indices:
            check_orbital_index(p, self.n_orbitals)
            phase = self.operator_phase_factor(p)
            if not self.annihilate(p):
                for q in reversed(done):
                    self.create(q)
                return False, sign
            new_sign *= phase
            done.append(p)
        return True, new_sign

    def create_all(self, indices, sign=1):
        """
        Apply the creators for `indices` one after another in the given
        order. Returns ``(success, sign)`` with the same semantics as
        :py:meth:`annihilate_all`.
        """
        done = []
        new_sign = sign
        for p in indices:
            check_orbital_index(p, self.n_orbitals)
            phase = self.operator_phase_factor(p)
            if not self.create(p):
                for q in reversed(done):
                    self.annihilate(q)
                return False, sign
            new_sign *= phase
            done.append(p)
        return True, new_sign

    def find_matching_occupations(self, other):
        """Orbitals occupied both in this and the other ONV"""
        common = self._representation & other.representation
        return [p for p in self._occupation if common >> p & 1]

    def find_differential_occupations(self, other):
        """Orbitals occupied in this ONV, but not in the other"""
        diff = self._representation & ~other.representation
        return [p for p in self._occupation if diff >> p & 1]

    def count_number_of_excitations(self, other):
        """
        The number of electrons which need to be moved to turn the other
        ONV into this one.
        """
        if self.n_electrons != other.n_electrons:
            raise DimensionMismatch("Can only compare ONVs with equal number "
                                    "of electrons.")
        return _popcount(self._representation ^ other.representation) // 2

    def copy(self):
        ret = SpinUnresolvedONV.__new__(SpinUnresolvedONV)
        ret.n_orbitals = self.n_orbitals
        ret.address = self.address
        ret._occupation = list(self._occupation)
        ret._representation = self._representation
        return ret

    def as_string(self):
        """
        The bitstring of this ONV, the highest orbital first and orbital 0
        as the last character.
        """
        return format(self._representation, "0{}b".format(self.n_orbitals)) \
            if self.n_orbitals > 0 else ""

    def __eq__(self, other):
        if not isinstance(other, SpinUnresolvedONV):
            return NotImplemented
        return self._representation == other.representation

    def __hash__(self):
        return hash(self._representation)

    def __str__(self):
        return self.as_string()

    def __repr__(self):
        return f"SpinUnresolvedONV({self.as_string()!r})"
