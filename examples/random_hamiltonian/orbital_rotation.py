#!/usr/bin/env python3
## vi: tabstop=4 shiftwidth=4 softtabstop=4 expandtab
import numpy as np
import scipy.linalg as la

import onvci

from onvci.misc import assert_allclose_signfix

# Random Hamiltonian in five orbitals and a random orbital rotation
n_orbitals = 5
hamiltonian = onvci.SQHamiltonian.random(n_orbitals, random_state=42)
A = np.random.default_rng(43).uniform(-0.3, 0.3, size=(n_orbitals, n_orbitals))
U = la.expm(A - A.T)

basis = onvci.SpinResolvedONVBasis(n_orbitals, 2, 2)
result = onvci.run_ci(basis, hamiltonian, eigensolver="dense")

# Express the ground state in the rotated orbitals ...
state = result.ground_state
state.basis_transform(U)

# ... which agrees with the ground state of the rotated Hamiltonian
rotated = onvci.run_ci(basis, hamiltonian.transformed(U), eigensolver="dense")
assert_allclose_signfix(state.coefficients,
                        rotated.ground_state.coefficients, atol=1e-10)
print("Energy:", result.energy, rotated.energy)

state.to_hdf5("rotated_ground_state.hdf5")
loaded = onvci.LinearExpansion.from_hdf5("rotated_ground_state.hdf5")
print("Stored expansion matches:", loaded.is_approx(state))
