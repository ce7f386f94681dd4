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


class InputError(ValueError):
    """
    Exception thrown during the validation stage of the arguments passed to
    the ONV bases, expansions and density-matrix calculators to signal that
    an input is not valid.
    """
    pass


class InvalidConfiguration(InputError):
    """
    Exception thrown if a requested configuration cannot exist, e.g. more
    electrons than orbitals, more frozen orbitals than electrons or a
    malformed expansion file.
    """
    pass


class DimensionMismatch(InputError):
    """
    Exception thrown if the dimensions of two collaborating objects do not
    agree, e.g. a coefficient vector which does not match the dimension of
    its ONV basis or an orbital index outside of the orbital range.
    """
    pass


class NoCoefficientsError(RuntimeError):
    """
    Exception thrown if density matrices are requested from a
    :py:class:`onvci.DMCalculator` before coefficients have been set.
    """
    pass
