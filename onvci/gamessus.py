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

from .exceptions import InvalidConfiguration
from .SpinResolvedONV import SpinResolvedONV
from .SpinResolvedSelectedONVBasis import SpinResolvedSelectedONVBasis


def _is_header(line):
    return all(word in line for word in ("ALPHA", "BETA", "COEFFICIENT"))


def read_gamess_us(filename):
    """
    Read the configurations and coefficients of a CI expansion from a
    GAMESS-US output file.

    The expansion table follows a header line containing the words
    ``ALPHA``, ``BETA`` and ``COEFFICIENT`` and a line of dashes. Each
    entry reads ``alpha | beta | coefficient``, where the first character
    of the bitstrings refers to orbital 0.

    Parameters
    ----------
    filename : str
        Path to the GAMESS-US output file

    Returns
    -------
    tuple
        The :py:class:`onvci.SpinResolvedSelectedONVBasis` of the
        configurations and the numpy array of their coefficients.
    """
    with open(filename, "r") as fp:
        lines = fp.readlines()

    for i, line in enumerate(lines):
        if _is_header(line):
            # Skip the header and the line of dashes below it
            entries = lines[i + 2:]
            break
    else:
        raise InvalidConfiguration(f"No expansion table found in {filename}.")

    onv_basis = None
    coefficients = []
    for line in entries:
        if not line.strip():
            continue
        fields = [field.strip() for field in line.split("|")]
        if len(fields) != 3:
            raise InvalidConfiguration(f"Malformed expansion line: '{line}'")
        alpha_string, beta_string, coefficient = fields
        onv = SpinResolvedONV.from_string(alpha_string[::-1], beta_string[::-1])

        if onv_basis is None:
            onv_basis = SpinResolvedSelectedONVBasis(onv.n_orbitals,
                                                     onv.alpha.n_electrons,
                                                     onv.beta.n_electrons)
        elif len(alpha_string) != onv_basis.n_orbitals \
                or len(beta_string) != onv_basis.n_orbitals:
            raise InvalidConfiguration(
                f"Configuration '{alpha_string} | {beta_string}' does not have "
                f"the expected number of {onv_basis.n_orbitals} orbitals."
            )
        onv_basis.add_onv(onv)
        coefficients.append(float(coefficient))

    if onv_basis is None:
        raise InvalidConfiguration(f"Expansion table in {filename} is empty.")
    return onv_basis, np.array(coefficients)
