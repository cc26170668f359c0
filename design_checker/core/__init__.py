"""design_checker.core — Foundation layer.

Contains the colour primitives, the raster container and samplers, shared
types, scoring, configuration and the report builder. This module has NO
dependencies on design_checker.techniques or design_checker.registry.
Only stdlib, numpy, and PIL are allowed here.
"""
