"""
windowtiler.tiling.monitor - Displays disponibles.

Un Display lo suministra el entorno (backend de plataforma); el core
solo lo lee. El area usable (sin taskbar, dock ni barra de menu) nunca
se calcula aqui: viene dada por el entorno.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from windowtiler.tiling.rect import Rect

log = logging.getLogger(__name__)


# ============================================================================
# Display
# ============================================================================
@dataclass(frozen=True, slots=True)
class Display:
    """
    Representa un display conectado al sistema.

    Atributos:
        frame:        Area total del display en coordenadas globales.
        usable_frame: Area de trabajo (descontando barras del sistema).
        name:         Nombre del dispositivo, solo para logs.
        is_primary:   True si es el display principal.
    """

    frame: Rect
    usable_frame: Rect
    name: str = ""
    is_primary: bool = False

    def __str__(self) -> str:
        label = self.name or "display"
        marker = " (primario)" if self.is_primary else ""
        return f"{label}{marker} frame={self.frame} usable={self.usable_frame}"


# ============================================================================
# Helpers
# ============================================================================
def primary_display(displays: Sequence[Display]) -> Display | None:
    """
    Retorna el display primario.

    Si ninguno esta marcado como primario se usa el primero de la
    enumeracion. Con una lista vacia retorna None.
    """
    if not displays:
        return None
    for display in displays:
        if display.is_primary:
            return display
    return displays[0]


def display_for_rect(displays: Sequence[Display], rect: Rect) -> Display | None:
    """
    Display cuyo frame tiene la mayor interseccion con *rect*.

    Los empates se resuelven por orden de enumeracion. Si ningun display
    se solapa con *rect* retorna el primario.
    """
    best: Display | None = None
    best_area = 0.0

    for display in displays:
        area = display.frame.intersection_area(rect)
        if area > best_area:
            best = display
            best_area = area

    if best is None:
        log.debug("%s no toca ningun display, usando el primario", rect)
        return primary_display(displays)
    return best
