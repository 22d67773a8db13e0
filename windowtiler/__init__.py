"""
WindowTiler - arrange open windows into non-overlapping regions of one
or more displays, and put them back.

Sub-packages:
    - tiling   : geometry, regions, displays and the layout engine
    - core     : window catalog, tiling controller, undo and focus mode
    - config   : persisted settings
    - storage  : named groups and saved layouts
    - platform : OS backends (window enumeration and mutation)
"""

__version__ = "0.1.0"
