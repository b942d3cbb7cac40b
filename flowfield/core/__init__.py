"""
Core scheduling components for FlowField.

This module contains the frame hosts, the resize debouncer and the
simulation scheduler.
"""

__all__ = ['frame_host', 'scheduler']
