"""Domain layer: the pure content intelligence and scheduling algorithms.

Nothing in this package performs I/O or holds mutable state; every function
works on caller-supplied snapshots and returns new values.
"""
