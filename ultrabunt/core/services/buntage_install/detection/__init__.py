"""
L3 Detection — read-only queries of what is installed.
"""
