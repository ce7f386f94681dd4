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
import sys

from .Addresser import Addresser
from .SpinResolvedONV import Spin, SpinResolvedONV
from .SpinUnresolvedONV import SpinUnresolvedONV
from .SQOperator import (SQHamiltonian, SQOneElectronOperator,
                         SQTwoElectronOperator)
from .SpinUnresolvedONVBasis import SpinUnresolvedONVBasis
from .SpinResolvedONVBasis import SpinResolvedONVBasis
from .SeniorityZeroONVBasis import SeniorityZeroONVBasis
from .FrozenONVBasis import (SpinResolvedFrozenONVBasis,
                             SpinUnresolvedFrozenONVBasis)
from .SpinResolvedSelectedONVBasis import SpinResolvedSelectedONVBasis
from .DensityMatrices import (OneDM, SpinResolvedOneDM, SpinResolvedTwoDM,
                              TwoDM)
from .DMCalculator import DMCalculator
from .LinearExpansion import LinearExpansion
from .CIMatrix import CIMatrix
from .CIResult import CIResult

# This has to be the last set of import
from .workflow import run_ci
from .exceptions import (DimensionMismatch, InputError, InvalidConfiguration,
                         NoCoefficientsError)

__all__ = ["run_ci", "InputError", "InvalidConfiguration",
           "DimensionMismatch", "NoCoefficientsError", "Addresser", "Spin",
           "SpinUnresolvedONV", "SpinResolvedONV", "SQOneElectronOperator",
           "SQTwoElectronOperator", "SQHamiltonian", "SpinUnresolvedONVBasis",
           "SpinResolvedONVBasis", "SeniorityZeroONVBasis",
           "SpinUnresolvedFrozenONVBasis", "SpinResolvedFrozenONVBasis",
           "SpinResolvedSelectedONVBasis", "OneDM", "TwoDM",
           "SpinResolvedOneDM", "SpinResolvedTwoDM", "DMCalculator",
           "LinearExpansion", "CIMatrix", "CIResult", "fci", "doci",
           "banner"]

__version__ = "0.1.0"
__license__ = "GPL v3"
__authors__ = ["the onvci authors"]
__contributors__ = []


def with_runci_doc(func):
    func.__doc__ = run_ci.__doc__
    return func


@with_runci_doc
def fci(n_orbitals, n_alpha, n_beta, hamiltonian, **kwargs):
    return run_ci(SpinResolvedONVBasis(n_orbitals, n_alpha, n_beta),
                  hamiltonian, **kwargs)


@with_runci_doc
def doci(n_orbitals, n_electron_pairs, hamiltonian, **kwargs):
    return run_ci(SeniorityZeroONVBasis(n_orbitals, n_electron_pairs),
                  hamiltonian, **kwargs)


def banner(colour=sys.stdout.isatty()):
    """Return a nice banner describing onvci and its version

    Parameters
    ----------
    colour : bool
        Should colour be used in the print out
    """
    if colour:
        yellow = '\033[93m'
        green = '\033[92m'
        white = '\033[0m'
    else:
        yellow = ''
        green = ''
        white = ''

    empty = "|" + 70 * " " + "|\n"
    string = "+" + 70 * "-" + "+\n"
    string += "|{0:^70s}|\n".format(
        "onvci:  Configuration interaction in ONV bases"
    ).replace("onvci", yellow + "onvci" + white, 1)
    string += "+" + 70 * "-" + "+\n"
    string += empty
    string += "|     version     " + green + f"{__version__:<52}" + white + " |\n"
    string += f"|     authors     {', '.join(__authors__):<52} |\n"
    string += f"|     license     {__license__:<52} |\n"
    string += empty
    string += "+" + 70 * "-" + "+"
    return string
