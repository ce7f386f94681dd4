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


def select_eigenpairs(eigenvalues, n_ep, which):
    """
    Return the indices of the `n_ep` eigenpairs selected by the `which`
    criterion. It is assumed that the `eigenvalues` are sorted algebraically
    from the smallest to the largest.
    """
    mask = np.zeros(len(eigenvalues), dtype=bool)
    if which == "LA":    # Largest algebraic
        mask[-n_ep:] = True
    elif which == "SA":  # Smallest algebraic
        mask[:n_ep] = True
    else:
        raise ValueError("Only the values 'LA' and 'SA' are understood "
                         "for 'which'.")
    return mask.nonzero()[0]
