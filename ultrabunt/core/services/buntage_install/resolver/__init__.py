"""
L2 Resolver — buntage → command steps.
"""
