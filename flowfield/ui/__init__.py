"""
UI components for FlowField.

This module contains the interactive controls of the matplotlib viewer.
"""

__all__ = ['ui_controls']
