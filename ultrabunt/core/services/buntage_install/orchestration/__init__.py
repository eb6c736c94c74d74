"""
L5 Orchestration — multi-buntage and system-wide operations.
"""
