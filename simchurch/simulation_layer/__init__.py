"""
Simulation Layer - game state, weekly tick and the components it drives.
"""
