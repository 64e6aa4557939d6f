"""
sizekit — Size Value & Fluid Computation Engine

Numeric model for CSS sizes (value + unit), unit conversion, pooled Size
instances, bounded caches, fluid clamp() expressions and aggregate CSS
custom-property sheets.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - DOM access or style elements
    - Persistence backends
    - Network I/O
    - UI framework bindings

Those are collaborators, reached through small Protocol seams.
The engine only produces values and strings.
"""

__version__ = "0.1.0"
