"""
L4 Execution — the only layer that changes the system.
"""
