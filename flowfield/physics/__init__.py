"""
Physics components for FlowField.

This module contains the field patterns, field generation, spatial lookup and
particle advection.
"""

__all__ = ['patterns', 'grid_computation', 'lookup', 'interpolation', 'particle_system']
