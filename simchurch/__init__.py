"""
Sim Church - weekly church-management simulation core.

Layers:
- simulation_layer: state, congregation, staff, policies, events, weekly tick
- data_layer: name data and save-slot persistence
- analysis_layer: pandas reports over simulation output
- app_layer: FastAPI surface
"""

__version__ = "0.1.0"
