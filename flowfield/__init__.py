"""
FlowField: animated 2D vector fields with a tracer particle.

The physics subpackage builds fields and advects particles, the core
subpackage schedules frames, and the visualization/ui subpackages provide a
matplotlib front end.
"""

__version__ = "0.1.0"

__all__ = ['config', 'errors', 'physics', 'core', 'visualization', 'ui']
