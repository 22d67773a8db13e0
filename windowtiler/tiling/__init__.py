"""
windowtiler.tiling - Motor de layout (calculo de posiciones de ventanas).

Este paquete contiene:
    - rect    : Estructura Rect para geometria de areas
    - grid    : Grillas de tiling y regiones nombradas de pantalla
    - monitor : Display y eleccion de display por interseccion
    - engine  : LayoutEngine - regiones, reparto multi-display y conversion
"""

from windowtiler.tiling.rect import Rect
from windowtiler.tiling.grid import (
    GridShape,
    TileRegion,
    choose_grid,
    choose_grid_for_area,
    region_area,
    tile_rects,
)
from windowtiler.tiling.monitor import Display, display_for_rect, primary_display
from windowtiler.tiling.engine import LayoutEngine

__all__ = [
    "Rect",
    "GridShape",
    "TileRegion",
    "choose_grid",
    "choose_grid_for_area",
    "region_area",
    "tile_rects",
    "Display",
    "display_for_rect",
    "primary_display",
    "LayoutEngine",
]
