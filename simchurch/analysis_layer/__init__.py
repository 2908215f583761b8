"""
Analysis Layer - pandas reports over simulation output.
"""
