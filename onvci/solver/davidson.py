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

from onvci.CIMatrix import CIMatrix

from .common import select_eigenpairs
from .preconditioner import JacobiPreconditioner
from .SolverStateBase import EigenSolverStateBase


class DavidsonState(EigenSolverStateBase):
    def __init__(self, matrix, guesses):
        super().__init__(matrix)
        self.residuals = None                   # Current residuals
        self.subspace_vectors = [np.array(g, dtype=float) for g in guesses]
        self.algorithm = "davidson"
        self.reortho_triggers = []              # List of reorthogonalisations


def default_print(state, identifier, file=sys.stdout):
    """
    A default print function for the davidson callback
    """
    from onvci.timings import strtime, strtime_short

    if identifier == "start" and state.n_iter == 0:
        print("Niter n_ss  max_residual  time  Ritz values", file=file)
    elif identifier == "next_iter":
        time_iter = state.timer.current("iteration")
        fmt = "{n_iter:3d}  {ss_size:4d}  {residual:12.5g}  {tstr:5s}"
        print(fmt.format(n_iter=state.n_iter, tstr=strtime_short(time_iter),
                         ss_size=len(state.subspace_vectors),
                         residual=np.max(state.residual_norms)),
              "", state.eigenvalues[:10], file=file)
    elif identifier == "is_converged":
        soltime = state.timer.total("iteration")
        print("=== Converged ===", file=file)
        print("    Number of matrix applies:   ", state.n_applies, file=file)
        print("    Total solver time:          ", strtime(soltime), file=file)
    elif identifier == "restart":
        print("=== Restart ===", file=file)


def _ritz_vectors(rvecs, epair_mask, SS):
    return [np.asarray(SS).T @ rvecs[:, i] for i in epair_mask]


def davidson_iterations(matrix, state, max_subspace, max_iter, n_ep, n_block,
                        is_converged, which, callback=None, preconditioner=None,
                        debug_checks=False, residual_min_norm=None):
    """Drive the davidson iterations

    Parameters
    ----------
    matrix
        Matrix to diagonalise
    state
        DavidsonState containing the eigenvector guess
    max_subspace : int
        Maximal subspace size
    max_iter : int
        Maximal number of iterations
    n_ep : int
        Number of eigenpairs to be computed
    n_block : int
        Davidson block size: the number of vectors that are added to the subspace
        in each iteration
    is_converged
        Function to test for convergence
    which : str
        Which eigenvectors to converge to ("SA" or "LA")
    callback : callable, optional
        Callback to run after each iteration
    preconditioner
        Preconditioner instance
    debug_checks : bool, optional
        Enable some potentially costly debug checks
        (Loss of orthogonality etc.)
    residual_min_norm : float or NoneType, optional
        Minimal norm a residual needs to have in order to be accepted as
        a new subspace vector
        (defaults to 2 * len(matrix) * machine_epsilon)
    """
    if callback is None:
        def callback(state, identifier):
            pass

    # The problem size
    n_problem = matrix.shape[1]

    # The current subspace size == Number of guesses
    n_ss_vec = len(state.subspace_vectors)

    # Sanity checks for block size
    assert n_block >= n_ep and n_block <= n_ss_vec

    # The current subspace
    SS = state.subspace_vectors

    # The matrix A projected into the subspace as a continuous array.
    # Only the view Ass[:n_ss_vec, :n_ss_vec] contains valid data.
    Ass_cont = np.empty((max_subspace, max_subspace))

    eps = np.finfo(float).eps
    if residual_min_norm is None:
        residual_min_norm = 2 * n_problem * eps

    callback(state, "start")
    state.timer.restart("iteration")

    with state.timer.record("projection"):
        # Initial application of A to the subspace
        Ax = matrix @ SS
        state.n_applies += n_ss_vec

    # Get the worksize view for the first iteration
    Ass = Ass_cont[:n_ss_vec, :n_ss_vec]

    # Initial projection of Ax onto the subspace exploiting the hermiticity
    with state.timer.record("projection"):
        for i in range(n_ss_vec):
            for j in range(i, n_ss_vec):
                Ass[i, j] = SS[i] @ Ax[j]
                if i != j:
                    Ass[j, i] = Ass[i, j]

    while state.n_iter < max_iter:
        state.n_iter += 1

        assert len(SS) >= n_block
        assert len(SS) <= max_subspace

        # Compute the which(== largest, smallest) eigenpairs of Ass
        # and the associated ritz vectors as well as residuals
        with state.timer.record("rayleigh_ritz"):
            rvals, rvecs = la.eigh(Ass)
            block_mask = select_eigenpairs(rvals, n_block, which)
            rvals = rvals[block_mask]
            rvecs = rvecs[:, block_mask]

        with state.timer.record("residuals"):
            # Form residuals, A * SS * v - λ * SS * v = Ax * v - λ * SS * v
            Ax_arr = np.asarray(Ax).T
            SS_arr = np.asarray(SS).T
            residuals = [Ax_arr @ v - rvals[i] * (SS_arr @ v)
                         for i, v in enumerate(np.transpose(rvecs))]
            assert len(residuals) == n_block

            # Update the state's eigenpairs and residuals
            epair_mask = select_eigenpairs(rvals, n_ep, which)
            state.eigenvalues = rvals[epair_mask]
            state.residuals = [residuals[i] for i in epair_mask]
            state.residual_norms = np.array([np.sqrt(r @ r)
                                             for r in state.residuals])

        callback(state, "next_iter")
        state.timer.restart("iteration")
        if is_converged(state):
            state.eigenvectors = _ritz_vectors(rvecs, epair_mask, SS)
            callback(state, "is_converged")
            state.converged = True
            state.timer.stop("iteration")
            return state

        if state.n_iter == max_iter:
            warnings.warn(la.LinAlgWarning(
                f"Maximum number of iterations (== {max_iter}) "
                "reached in davidson procedure."))
            state.eigenvectors = _ritz_vectors(rvecs, epair_mask, SS)
            state.timer.stop("iteration")
            state.converged = False
            return state

        if n_ss_vec + n_block > max_subspace:
            callback(state, "restart")
            with state.timer.record("projection"):
                # The addition of the preconditioned vectors goes beyond max.
                # subspace size => Collapse first, ie keep current Ritz vectors
                # as new subspace
                SS = [SS_arr @ v for v in np.transpose(rvecs)]
                state.subspace_vectors = SS
                Ax = [Ax_arr @ v for v in np.transpose(rvecs)]
                n_ss_vec = len(SS)

                # Update projection of the matrix onto the subspace
                Ass = Ass_cont[:n_ss_vec, :n_ss_vec]
                for i in range(n_ss_vec):
                    for j in range(i, n_ss_vec):
                        Ass[i, j] = SS[i] @ Ax[j]
                        if i != j:
                            Ass[j, i] = Ass[i, j]
            # continue to add residuals to space

        with state.timer.record("preconditioner"):
            if preconditioner:
                if hasattr(preconditioner, "update_shifts"):
                    # Epsilon factor to make sure that 1 / (shift - diagonal)
                    # does not become ill-conditioned as soon as the shift
                    # approaches the actual diagonal values
                    rvals_eps = 1e-6
                    preconditioner.update_shifts(rvals - rvals_eps)
                preconds = preconditioner @ residuals
            else:
                preconds = residuals

        # Project the components of the preconditioned vectors away
        # which are already contained in the subspace.
        # Then add those, which have a significant norm to the subspace.
        with state.timer.record("orthogonalisation"):
            n_ss_added = 0
            for i in range(n_block):
                pvec = preconds[i]
                # Project out the components of the current subspace using
                # conventional Gram-Schmidt (CGS) procedure.
                # That is form (1 - SS * SS^T) * pvec
                SS_arr = np.asarray(SS).T
                pvec = pvec - SS_arr @ (SS_arr.T @ pvec)
                pnorm = np.sqrt(pvec @ pvec)
                if pnorm < residual_min_norm:
                    continue
                # Perform reorthogonalisation if loss of orthogonality is
                # detected
                with state.timer.record("reorthogonalisation"):
                    ss_overlap = SS_arr.T @ pvec
                    max_ortho_loss = np.max(np.abs(ss_overlap)) / pnorm
                    if max_ortho_loss > n_problem * eps:
                        pvec = pvec - SS_arr @ ss_overlap
                        pnorm = np.sqrt(pvec @ pvec)
                        state.reortho_triggers.append(max_ortho_loss)
                if pnorm >= residual_min_norm:
                    # Extend the subspace
                    SS.append(pvec / pnorm)
                    n_ss_added += 1
                    n_ss_vec = len(SS)

            if debug_checks:
                orth = np.array([[SS[i] @ SS[j] for i in range(n_ss_vec)]
                                 for j in range(n_ss_vec)])
                orth -= np.eye(n_ss_vec)
                state.subspace_orthogonality = np.max(np.abs(orth))
                if state.subspace_orthogonality > n_problem * eps:
                    warnings.warn(la.LinAlgWarning(
                        "Subspace in Davidson has lost orthogonality. "
                        "Max. deviation from orthogonality is {:.4E}. "
                        "Expect inaccurate results.".format(
                            state.subspace_orthogonality)
                    ))

        if n_ss_added == 0:
            state.timer.stop("iteration")
            state.converged = False
            state.eigenvectors = _ritz_vectors(rvecs, epair_mask, SS)
            warnings.warn(la.LinAlgWarning(
                "Davidson procedure could not generate any further vectors for "
                "the subspace. Iteration cannot be continued like this and will "
                "be aborted without convergence. Try a different guess."))
            return state

        # Matrix applies for the new vectors
        with state.timer.record("projection"):
            Ax.extend(matrix @ SS[-n_ss_added:])
            state.n_applies += n_ss_added

        # Update the worksize view for the next iteration
        Ass = Ass_cont[:n_ss_vec, :n_ss_vec]

        # Project Ax onto the subspace, keeping in mind
        # that the values Ass[:-n_ss_added, :-n_ss_added] are already valid,
        # since they have been computed in the previous iterations already.
        with state.timer.record("projection"):
            for i in range(n_ss_vec - n_ss_added, n_ss_vec):
                for j in range(i + 1):
                    Ass[i, j] = SS[i] @ Ax[j]
                    if i != j:
                        Ass[j, i] = Ass[i, j]
    return state


def eigsh(matrix, guesses, n_ep=None, n_block=None, max_subspace=None,
          conv_tol=1e-9, which="SA", max_iter=70,
          callback=None, preconditioner=None, debug_checks=False,
          residual_min_norm=None):
    """Davidson eigensolver for CI problems

    Parameters
    ----------
    matrix
        CI matrix instance
    guesses : list
        Guess vectors (fixes also the Davidson block size)
    n_ep : int or NoneType, optional
        Number of eigenpairs to be computed
    n_block : int or NoneType, optional
        The solver block size: the number of vectors that are added to the subspace
        in each iteration
    max_subspace : int or NoneType, optional
        Maximal subspace size
    conv_tol : float, optional
        Convergence tolerance on the l2 norm of residuals to consider
        them converged
    which : str, optional
        Which eigenvectors to converge to (SA or LA)
    max_iter : int, optional
        Maximal number of iterations
    callback : callable, optional
        Callback to run after each iteration
    preconditioner
        Preconditioner (type or instance)
    debug_checks : bool, optional
        Enable some potentially costly debug checks
        (Loss of orthogonality etc.)
    residual_min_norm : float or NoneType, optional
        Minimal norm a residual needs to have in order to be accepted as
        a new subspace vector
        (defaults to 2 * len(matrix) * machine_epsilon)
    """
    if not isinstance(matrix, CIMatrix):
        raise TypeError("matrix is not of type CIMatrix")
    for guess in guesses:
        if not isinstance(guess, np.ndarray) or guess.shape != (len(matrix), ):
            raise TypeError("One of the guesses is not a numpy vector of the "
                            "dimension of the matrix.")

    if preconditioner is not None and isinstance(preconditioner, type):
        preconditioner = preconditioner(matrix)

    if n_ep is None:
        n_ep = len(guesses)
    elif n_ep > len(guesses):
        raise ValueError(f"n_ep (= {n_ep}) cannot exceed the number of guess "
                         f"vectors (= {len(guesses)}).")

    if n_block is None:
        n_block = n_ep
    elif n_block < n_ep:
        raise ValueError(f"n_block (= {n_block}) cannot be smaller than the number "
                         f"of states requested (= {n_ep}).")
    elif n_block > len(guesses):
        raise ValueError(f"n_block (= {n_block}) cannot exceed the number of guess "
                         f"vectors (= {len(guesses)}).")

    if not max_subspace:
        max_subspace = max(6 * n_ep, 20, 5 * len(guesses))
    elif max_subspace < 2 * n_block:
        raise ValueError(f"max_subspace (= {max_subspace}) needs to be at least "
                         f"twice as large as n_block (n_block = {n_block}).")
    elif max_subspace < len(guesses):
        raise ValueError(f"max_subspace (= {max_subspace}) cannot be smaller than "
                         f"the number of guess vectors (= {len(guesses)}).")

    def convergence_test(state):
        state.residuals_converged = state.residual_norms < conv_tol
        state.converged = np.all(state.residuals_converged)
        return state.converged

    if conv_tol < matrix.shape[1] * np.finfo(float).eps:
        warnings.warn(la.LinAlgWarning(
            "Convergence tolerance (== {:5.2g}) lower than "
            "estimated maximal numerical accuracy (== {:5.2g}). "
            "Convergence might be hard to achieve."
            "".format(conv_tol, matrix.shape[1] * np.finfo(float).eps)
        ))

    state = DavidsonState(matrix, guesses)
    davidson_iterations(matrix, state, max_subspace, max_iter,
                        n_ep=n_ep, n_block=n_block, is_converged=convergence_test,
                        callback=callback, which=which,
                        preconditioner=preconditioner,
                        debug_checks=debug_checks,
                        residual_min_norm=residual_min_norm)
    return state


def jacobi_davidson(*args, **kwargs):
    return eigsh(*args, preconditioner=JacobiPreconditioner, **kwargs)


def davidson(*args, **kwargs):
    return eigsh(*args, preconditioner=None, **kwargs)
