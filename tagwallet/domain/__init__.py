"""Pure business rules with no I/O: explorer links and check-in timing."""
