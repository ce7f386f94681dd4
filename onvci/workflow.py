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
import warnings
import numpy as np
import scipy.linalg as la

from . import solver
from .CIMatrix import CIMatrix
from .CIResult import CIResult
from .timings import Timer
from .exceptions import InputError
from .solver.davidson import jacobi_davidson

__all__ = ["run_ci"]


def run_ci(onv_basis, hamiltonian, n_states=1, eigensolver="davidson",
           conv_tol=1e-10, guesses=None, n_guesses=None, output=sys.stdout,
           **solverargs):
    """Run a configuration-interaction (CI) calculation.

    Main entry point to diagonalise a second-quantized Hamiltonian in an
    ONV basis. The type of the ONV basis determines the kind of CI, e.g.
    FCI for a :py:class:`onvci.SpinResolvedONVBasis`, DOCI for a
    :py:class:`onvci.SeniorityZeroONVBasis` or selected CI for a
    :py:class:`onvci.SpinResolvedSelectedONVBasis`.

    Parameters
    ----------
    onv_basis
        The ONV basis to diagonalise the Hamiltonian in
    hamiltonian : SQHamiltonian
        The Hamiltonian in the orthonormal orbitals of the ONV basis
    n_states : int, optional
        Number of lowest eigenstates to compute (default 1)
    eigensolver : str, optional
        The eigensolver algorithm to use, "davidson" or "dense"
    conv_tol : float, optional
        Convergence tolerance on the residual norms of the Davidson solver
    guesses : list, optional
        Guess vectors for the Davidson solver. Takes preference over
        `n_guesses`.
    n_guesses : int, optional
        Number of unit-vector guesses to derive from the lowest diagonal
        elements of the CI matrix. By default twice the number of states,
        but at least 4 (limited by the dimension).
    output : stream, optional
        Python stream to which output will be written. If `None` all output
        is disabled.

    Other parameters
    ----------------
    max_subspace : int, optional
        Maximal subspace size
    max_iter : int, optional
        Maximal number of iterations

    Returns
    -------
    CIResult
        The computed energies and linear expansions

    Examples
    --------
    FCI ground state of the half-filled four-site Hubbard ring

    >>> adjacency = np.roll(np.eye(4), 1, axis=1)
    ... adjacency = adjacency + adjacency.T
    ... hamiltonian = onvci.SQHamiltonian.hubbard(adjacency, t=1.0, U=4.0)
    ... result = onvci.run_ci(onvci.SpinResolvedONVBasis(4, 2, 2), hamiltonian,
    ...                       eigensolver="dense")
    """
    matrix = CIMatrix(onv_basis, hamiltonian)
    if n_states < 1 or n_states > len(matrix):
        raise InputError(f"n_states (== {n_states}) needs to be between 1 and "
                         f"the dimension of the ONV basis (== {len(matrix)}).")

    if eigensolver == "dense":
        return diagonalise_dense(matrix, n_states, output=output)
    elif eigensolver == "davidson":
        return diagonalise_cimatrix(matrix, n_states, conv_tol=conv_tol,
                                    guesses=guesses, n_guesses=n_guesses,
                                    output=output, **solverargs)
    else:
        raise InputError(f"Solver {eigensolver} unknown, try 'davidson' "
                         "or 'dense'.")


#
# Individual steps
#
def diagonalise_dense(matrix, n_states, output=sys.stdout):
    """
    Diagonalise the dense CI matrix with LAPACK. Internal function called
    from run_ci.
    """
    timer = Timer()
    if output is not None:
        print(f"Starting dense diagonalisation of {matrix} ...", file=output)
    with timer.record("diagonalisation"):
        eigenvalues, eigenvectors = la.eigh(matrix.to_ndarray())
    return CIResult(matrix, eigenvalues[:n_states],
                    list(eigenvectors[:, :n_states].T), eigensolver="dense",
                    timer=timer)


def diagonalise_cimatrix(matrix, n_states, conv_tol=1e-10, guesses=None,
                         n_guesses=None, output=sys.stdout, **solverargs):
    """
    This function seeks appropriate guesses and afterwards proceeds to
    diagonalise the CI matrix using the Jacobi-Davidson eigensolver.
    Internal function called from run_ci.
    """
    callback = setup_solver_printing("Jacobi-Davidson", matrix,
                                     solver.davidson.default_print,
                                     output=output)

    if guesses is None:
        if n_guesses is None:
            n_guesses = estimate_n_guesses(matrix, n_states)
        guesses = obtain_guesses_by_inspection(matrix, n_guesses)
    else:
        if len(guesses) < n_states:
            raise InputError("Less guesses provided via guesses (== {}) "
                             "than states to be computed (== {})"
                             "".format(len(guesses), n_states))
        if n_guesses is not None:
            warnings.warn("Ignoring n_guesses parameter, since guesses are "
                          "explicitly provided.")

    solverargs.setdefault("which", "SA")
    state = jacobi_davidson(matrix, guesses, n_ep=n_states, conv_tol=conv_tol,
                            callback=callback, **solverargs)
    return CIResult(matrix, state.eigenvalues, state.eigenvectors,
                    converged=state.converged, n_iter=state.n_iter,
                    n_applies=state.n_applies, eigensolver="davidson",
                    timer=state.timer)


def estimate_n_guesses(matrix, n_states, n_guesses_per_state=2):
    """
    Implementation of a basic heuristic to find a good number of guess
    vectors. Internal function called from run_ci.
    """
    # Try to use at least 4 or twice the number of states
    # to be computed as guesses, but never more than the dimension
    n_guesses = n_guesses_per_state * max(2, n_states)
    return max(n_states, min(n_guesses, len(matrix)))


def obtain_guesses_by_inspection(matrix, n_guesses):
    """
    Obtain unit-vector guesses on the ONVs with the lowest diagonal
    elements of the CI matrix. Internal function called from run_ci.
    """
    if n_guesses > len(matrix):
        raise InputError("Less guesses found than requested: {} found, "
                         "{} requested".format(len(matrix), n_guesses))
    order = np.argsort(matrix.diagonal(), kind="stable")
    guesses = []
    for address in order[:n_guesses]:
        guess = np.zeros(len(matrix))
        guess[address] = 1.0
        guesses.append(guess)
    return guesses


def setup_solver_printing(solmethod_name, matrix, default_print, output=None):
    """
    Setup default printing for solvers. Internal function called from run_ci.
    """
    if output is not None:
        print(f"Starting {matrix} {solmethod_name} ...", file=output)

        def inner_callback(state, identifier):
            default_print(state, identifier, output)
        return inner_callback
