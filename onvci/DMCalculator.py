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
from .exceptions import NoCoefficientsError
from .FrozenONVBasis import (SpinResolvedFrozenONVBasis,
                             SpinUnresolvedFrozenONVBasis)
from .SpinResolvedONVBasis import SpinResolvedONVBasis
from .SeniorityZeroONVBasis import SeniorityZeroONVBasis
from .SpinUnresolvedONVBasis import SpinUnresolvedONVBasis
from .SpinResolvedDMCalculator import (SpinResolvedDMCalculator,
                                       SpinResolvedFrozenDMCalculator)
from .SeniorityZeroDMCalculator import SeniorityZeroDMCalculator
from .SpinUnresolvedDMCalculator import (SpinUnresolvedDMCalculator,
                                         SpinUnresolvedFrozenDMCalculator)
from .SpinResolvedSelectedONVBasis import SpinResolvedSelectedONVBasis
from .SpinResolvedSelectedDMCalculator import SpinResolvedSelectedDMCalculator

__all__ = ["DMCalculator", "dm_calculator_for"]


CALCULATORS = {
    SpinUnresolvedONVBasis: SpinUnresolvedDMCalculator,
    SpinUnresolvedFrozenONVBasis: SpinUnresolvedFrozenDMCalculator,
    SpinResolvedONVBasis: SpinResolvedDMCalculator,
    SpinResolvedFrozenONVBasis: SpinResolvedFrozenDMCalculator,
    SeniorityZeroONVBasis: SeniorityZeroDMCalculator,
    SpinResolvedSelectedONVBasis: SpinResolvedSelectedDMCalculator,
}


def dm_calculator_for(onv_basis):
    """Construct the density-matrix calculator matching an ONV basis"""
    try:
        return CALCULATORS[type(onv_basis)](onv_basis)
    except KeyError:
        raise TypeError("No density-matrix calculator known for ONV basis of "
                        "type " + type(onv_basis).__name__ + ".")


class DMCalculator:
    def __init__(self, onv_basis, coefficients=None):
        """
        Calculate density matrices for a fixed ONV basis, choosing the
        calculator according to the type of the basis.

        Parameters
        ----------
        onv_basis
            An ONV basis or a :py:class:`onvci.LinearExpansion`, in which
            case its basis and, unless `coefficients` are given, its
            coefficients are used.
        coefficients : array-like, optional
            Coefficient vector to compute density matrices for. Can be set
            later using :py:meth:`set_coefficients`.
        """
        if hasattr(onv_basis, "onv_basis"):
            if coefficients is None:
                coefficients = onv_basis.coefficients
            onv_basis = onv_basis.onv_basis
        self.calculator = dm_calculator_for(onv_basis)
        self._coefficients = None
        if coefficients is not None:
            self.set_coefficients(coefficients)

    @property
    def onv_basis(self):
        return self.calculator.onv_basis

    def set_coefficients(self, coefficients):
        """Set the coefficient vector density matrices are computed for"""
        self._coefficients = self.calculator._check_coefficients(coefficients)

    @property
    def coefficients(self):
        if self._coefficients is None:
            raise NoCoefficientsError("No coefficient vector has been set. "
                                      "Use set_coefficients first.")
        return self._coefficients

    def calculate_1dm(self):
        """The spin-summed 1-DM"""
        return self.calculator.calculate_1dm(self.coefficients)

    def calculate_2dm(self):
        """The spin-summed 2-DM"""
        return self.calculator.calculate_2dm(self.coefficients)

    def calculate_spin_resolved_1dm(self):
        coefficients = self.coefficients
        if not hasattr(self.calculator, "calculate_spin_resolved_1dm"):
            raise NotImplementedError("Spin-resolved density matrices are not "
                                      "available for "
                                      + type(self.onv_basis).__name__ + ".")
        return self.calculator.calculate_spin_resolved_1dm(coefficients)

    def calculate_spin_resolved_2dm(self):
        coefficients = self.coefficients
        if not hasattr(self.calculator, "calculate_spin_resolved_2dm"):
            raise NotImplementedError("Spin-resolved density matrices are not "
                                      "available for "
                                      + type(self.onv_basis).__name__ + ".")
        return self.calculator.calculate_spin_resolved_2dm(coefficients)

    def calculate_element(self, bra_indices, ket_indices):
        """
        The N-DM element ``<a+_{b_0} a+_{b_1} .. a_{k_0} a_{k_1} ..>`` for the
        bra indices ``b`` and ket indices ``k``.
        """
        return self.calculator.calculate_element(bra_indices, ket_indices,
                                                 self.coefficients)

    def __call__(self, *indices):
        """
        Density-matrix element for an interleaved list of indices, e.g.
        ``dm_calculator(p, q, r, s)`` returns
        ``d_pqrs = <a+_p a+_r a_s a_q>``. Indices at even positions are the
        creator indices and indices at odd positions in reverse order the
        annihilator indices. Without indices 1.0 is returned.
        """
        if len(indices) % 2 != 0:
            raise ValueError("An even number of indices is required to "
                             f"specify a density-matrix element, got {indices}.")
        if len(indices) == 0:
            return 1.0
        bra_indices = list(indices[0::2])
        ket_indices = list(reversed(indices[1::2]))
        return self.calculate_element(bra_indices, ket_indices)

    def __repr__(self):
        return f"DMCalculator({self.onv_basis!r})"
