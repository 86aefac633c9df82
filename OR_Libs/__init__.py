"""
OR_Libs - Open Retouch Library Modules

This package contains core functionality for the Open Retouch project,
organized into specialized sub-packages:

- ImageEditingLib: Orientation, filter stack, text overlays and red-eye retouching
- SessionLib: Edit session state, preview/export rendering and control commands
"""

__version__ = "0.1.0"
