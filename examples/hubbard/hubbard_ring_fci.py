#!/usr/bin/env python3
## vi: tabstop=4 shiftwidth=4 softtabstop=4 expandtab
import numpy as np

import onvci

from onvci.timings import print_timings

# Half-filled Hubbard ring with six sites
n_sites = 6
adjacency = np.roll(np.eye(n_sites), 1, axis=1)
adjacency = adjacency + adjacency.T
hamiltonian = onvci.SQHamiltonian.hubbard(adjacency, t=1.0, U=4.0)

print(onvci.banner())
result = onvci.fci(n_sites, 3, 3, hamiltonian, n_states=3, conv_tol=1e-8)
print(result.describe())
print_timings(result.timer)

# Site occupations and double occupancies of the ground state
state = result.ground_state
D = state.calculate_spin_resolved_1dm()
d = state.calculate_spin_resolved_2dm()
print("Site occupations:   ", np.diag(D.spin_summed().matrix))
print("Double occupancies: ", [d.aabb[p, p, p, p] for p in range(n_sites)])
print("Shannon entropy:    ", state.shannon_entropy())
