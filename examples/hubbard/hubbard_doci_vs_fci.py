#!/usr/bin/env python3
## vi: tabstop=4 shiftwidth=4 softtabstop=4 expandtab
import numpy as np

import onvci

adjacency = np.roll(np.eye(4), 1, axis=1)
adjacency = adjacency + adjacency.T

print(" U      E(FCI)        E(DOCI)")
for U in [0.0, 1.0, 2.0, 4.0, 8.0]:
    hamiltonian = onvci.SQHamiltonian.hubbard(adjacency, t=1.0, U=U)
    fci = onvci.fci(4, 2, 2, hamiltonian, eigensolver="dense", output=None)
    doci = onvci.doci(4, 2, hamiltonian, eigensolver="dense", output=None)
    print(f"{U:4.1f}  {fci.energy:12.8f}  {doci.energy:12.8f}")
