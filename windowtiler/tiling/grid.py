"""
windowtiler.tiling.grid - Calculo de grillas de tiling.

Matematica pura: dado un numero de ventanas y un area, produce N
sub-rectangulos que no se solapan, separados por un padding uniforme.

    - TileRegion           : Region nombrada de la pantalla (mitades, tercios...)
    - choose_grid          : Grilla cuadrada minima que contiene N celdas
    - choose_grid_for_area : Grilla que favorece celdas con proporcion 3:2
    - region_area          : Resuelve una TileRegion contra un area usable
    - tile_rects           : Rellena la grilla fila por fila
"""

from __future__ import annotations

import enum
import logging
import math
from typing import NamedTuple

from windowtiler.tiling.rect import Rect

log = logging.getLogger(__name__)


# Proporcion ancho/alto preferida para cada celda
TARGET_ASPECT = 1.5

# Por debajo de este alto las celdas se penalizan
MIN_COMFORTABLE_HEIGHT = 200.0

# Divisor de la penalizacion por celdas bajas
HEIGHT_PENALTY_SCALE = 50.0

# Fraccion del ancho ocupada por la region CENTER
CENTER_FRACTION = 0.6


# ============================================================================
# TileRegion enum
# ============================================================================
class TileRegion(enum.Enum):
    """Region destino de una operacion de tiling."""
    FULL = "full"
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"
    TOP = "top"
    BOTTOM = "bottom"
    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_RIGHT = "bottom_right"
    LEFT_THIRD = "left_third"
    RIGHT_THIRD = "right_third"
    LEFT_TWO_THIRDS = "left_two_thirds"
    RIGHT_TWO_THIRDS = "right_two_thirds"
    ALL_DISPLAYS = "all_displays"


class GridShape(NamedTuple):
    """Dimensiones de una grilla."""
    rows: int
    cols: int


# ============================================================================
# Eleccion de grilla
# ============================================================================
def choose_grid(count: int) -> GridShape:
    """
    Grilla mas cuadrada posible para *count* celdas.

    cols = ceil(sqrt(count)), rows = ceil(count / cols).
    Con 0 ventanas retorna (0, 0).
    """
    if count <= 0:
        return GridShape(0, 0)
    if count == 1:
        return GridShape(1, 1)

    cols = math.ceil(math.sqrt(count))
    rows = math.ceil(count / cols)
    return GridShape(rows, cols)


def grid_score(cell_w: float, cell_h: float) -> float:
    """
    Puntaje de una celda: distancia a la proporcion 3:2 mas una
    penalizacion lineal cuando la celda mide menos de 200 de alto.
    Menor es mejor.
    """
    if cell_h <= 0:
        return math.inf
    penalty = max(0.0, (MIN_COMFORTABLE_HEIGHT - cell_h) / HEIGHT_PENALTY_SCALE)
    return abs(cell_w / cell_h - TARGET_ASPECT) + penalty


def choose_grid_for_area(count: int, width: float, height: float) -> GridShape:
    """
    Grilla adaptada al area disponible.

    Prueba cada numero de filas de 1 a *count*, calcula la proporcion
    de celda resultante y se queda con el menor puntaje. En caso de
    empate gana la configuracion con menos filas.

    Args:
        count:  Numero de ventanas.
        width:  Ancho del area destino.
        height: Alto del area destino.
    """
    if count <= 0:
        return GridShape(0, 0)
    if count == 1:
        return GridShape(1, 1)

    best = GridShape(count, 1)
    best_score = math.inf

    for rows in range(1, count + 1):
        cols = math.ceil(count / rows)
        score = grid_score(width / cols, height / rows)
        if score < best_score:
            best = GridShape(rows, cols)
            best_score = score

    log.debug(
        "Grilla para %d ventanas en %gx%g: %dx%d (score=%.3f)",
        count, width, height, best.rows, best.cols, best_score,
    )
    return best


# ============================================================================
# Regiones
# ============================================================================
def region_area(region: TileRegion, usable: Rect, bottom_left: bool = False) -> Rect:
    """
    Resuelve *region* dentro del area usable de un display.

    Args:
        region:      Region nombrada. ALL_DISPLAYS no se resuelve aqui.
        usable:      Area usable del display.
        bottom_left: True si el eje y crece hacia arriba (origen abajo);
                     determina cual mitad es la "superior".

    Raises:
        ValueError: Si region es ALL_DISPLAYS.
    """
    if region is TileRegion.ALL_DISPLAYS:
        raise ValueError("ALL_DISPLAYS se reparte entre displays, no es un area")

    left, right = usable.split_horizontal(0.5)
    low_y, high_y = usable.split_vertical(0.5)
    top, bottom = (high_y, low_y) if bottom_left else (low_y, high_y)

    if region is TileRegion.FULL:
        return usable
    if region is TileRegion.LEFT:
        return left
    if region is TileRegion.RIGHT:
        return right
    if region is TileRegion.TOP:
        return top
    if region is TileRegion.BOTTOM:
        return bottom
    if region is TileRegion.CENTER:
        center_w = usable.w * CENTER_FRACTION
        return Rect(usable.x + (usable.w - center_w) / 2, usable.y, center_w, usable.h)

    if region in (
        TileRegion.TOP_LEFT,
        TileRegion.TOP_RIGHT,
        TileRegion.BOTTOM_LEFT,
        TileRegion.BOTTOM_RIGHT,
    ):
        band = top if region in (TileRegion.TOP_LEFT, TileRegion.TOP_RIGHT) else bottom
        band_left, band_right = band.split_horizontal(0.5)
        if region in (TileRegion.TOP_LEFT, TileRegion.BOTTOM_LEFT):
            return band_left
        return band_right

    one_third, rest = usable.split_horizontal(1 / 3)
    two_thirds, last_third = usable.split_horizontal(2 / 3)
    if region is TileRegion.LEFT_THIRD:
        return one_third
    if region is TileRegion.RIGHT_THIRD:
        return last_third
    if region is TileRegion.LEFT_TWO_THIRDS:
        return two_thirds
    return rest  # RIGHT_TWO_THIRDS


# ============================================================================
# Rectangulos de tiling
# ============================================================================
def fill_grid(
    count: int,
    area: Rect,
    shape: GridShape,
    padding: float,
    bottom_left: bool = False,
) -> list[Rect]:
    """
    Rellena *shape* dentro de *area* en orden de filas: izquierda a
    derecha, de arriba hacia abajo. El padding separa celdas vecinas y
    las celdas de los bordes del area.
    """
    if count <= 0 or shape.rows <= 0 or shape.cols <= 0:
        return []

    padding = max(0.0, padding)
    cell_w = max(0.0, (area.w - padding * (shape.cols + 1)) / shape.cols)
    cell_h = max(0.0, (area.h - padding * (shape.rows + 1)) / shape.rows)

    rects: list[Rect] = []
    for i in range(count):
        row = i // shape.cols
        col = i % shape.cols
        x = area.x + padding + col * (cell_w + padding)
        if bottom_left:
            # La primera fila queda en el borde de mayor y
            y = area.y + area.h - padding - cell_h - row * (cell_h + padding)
        else:
            y = area.y + padding + row * (cell_h + padding)
        rects.append(Rect(x, y, cell_w, cell_h))

    return rects


def tile_rects(
    count: int,
    region: TileRegion,
    usable: Rect,
    padding: float,
    bottom_left: bool = False,
) -> list[Rect]:
    """
    Calcula *count* rectangulos para *region* dentro de *usable*.

    Args:
        count:       Numero de ventanas.
        region:      Region destino (no ALL_DISPLAYS).
        usable:      Area usable del display.
        padding:     Separacion entre celdas y con los bordes.
        bottom_left: Convencion vertical de *usable*.

    Returns:
        Lista con exactamente *count* elementos, o vacia si count <= 0.
    """
    if count <= 0:
        return []

    target = region_area(region, usable, bottom_left)
    shape = choose_grid_for_area(count, target.w, target.h)
    return fill_grid(count, target, shape, padding, bottom_left)
