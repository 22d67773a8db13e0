"""
windowtiler.tiling.engine - Motor de layout.

El LayoutEngine envuelve la grilla pura (grid.py) con semantica de
pantalla: sabe que displays hay, cual es su area usable, cual display
contiene a una ventana y como convertir entre la convencion vertical
de los displays y la del mutador de ventanas.

Responsabilidades:
    - Resolver una TileRegion contra el area usable de un display.
    - Elegir el display de una ventana por mayor interseccion.
    - Repartir N ventanas entre todos los displays.
    - Convertir rectangulos a coordenadas del mutador.

El motor no mueve ventanas: solo calcula. El gap se lee en cada
calculo (nunca se cachea) para reflejar cambios de configuracion.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from windowtiler.tiling.grid import TileRegion, tile_rects
from windowtiler.tiling.monitor import Display, display_for_rect, primary_display
from windowtiler.tiling.rect import Rect

if TYPE_CHECKING:
    from windowtiler.core.environment import WindowEnvironment

log = logging.getLogger(__name__)


# Gap usado si no se inyecta una fuente de configuracion
DEFAULT_GAP = 4.0


# ============================================================================
# LayoutEngine
# ============================================================================
class LayoutEngine:
    """
    Calcula posiciones destino para lotes de ventanas.

    Uso tipico:
        engine = LayoutEngine(environment, gap_source=settings.current_gap)
        display = engine.pick_display(window.bounds)
        rects = engine.tile_region(3, TileRegion.LEFT, display)
        placed = [engine.placement_rect(r, display) for r in rects]
    """

    def __init__(
        self,
        environment: WindowEnvironment,
        gap_source: Callable[[], float] | None = None,
        primary_height_reference: bool | Callable[[], bool] = True,
    ) -> None:
        """
        Inicializa el motor.

        Args:
            environment:              Fuente de displays y de la convencion vertical.
            gap_source:               Callable que retorna el padding actual.
            primary_height_reference: Bool o callable (leido en cada calculo,
                                      como el gap). Si True, toda conversion
                                      vertical usa el alto del display primario
                                      (comportamiento heredado, correcto solo si
                                      todos los displays miden lo mismo). Si
                                      False, usa el alto del display de
                                      referencia.
        """
        self._env = environment
        self._gap_source = gap_source
        self._primary_height_reference = primary_height_reference

    # ------------------------------------------------------------------
    # Propiedades
    # ------------------------------------------------------------------
    @property
    def gap(self) -> float:
        """Padding actual, leido de la configuracion en cada llamada."""
        if self._gap_source is None:
            return DEFAULT_GAP
        return max(0.0, float(self._gap_source()))

    @property
    def bottom_left(self) -> bool:
        """True si los frames de display tienen el origen abajo."""
        return bool(getattr(self._env, "displays_bottom_left", False))

    @property
    def primary_height_reference(self) -> bool:
        """Modo de conversion vertical vigente."""
        source = self._primary_height_reference
        return bool(source() if callable(source) else source)

    def displays(self) -> list[Display]:
        """Displays disponibles, en orden de enumeracion."""
        return list(self._env.list_displays())

    def primary(self) -> Display | None:
        return primary_display(self.displays())

    # ------------------------------------------------------------------
    # Areas
    # ------------------------------------------------------------------
    @staticmethod
    def usable_area(display: Display) -> Rect:
        """Area usable del display, tal como la reporta el entorno."""
        return display.usable_frame

    def pick_display(self, window_bounds: Rect) -> Display | None:
        """
        Display con mayor interseccion con los bounds de una ventana.

        Los bounds llegan en la convencion del enumerador (origen arriba)
        y se normalizan a la de los displays antes de comparar. Si no
        hay interseccion se usa el display primario.
        """
        displays = self.displays()
        if not displays:
            log.warning("pick_display() sin displays disponibles")
            return None
        normalized = self._to_display_coordinates(window_bounds, displays)
        return display_for_rect(displays, normalized)

    def tile_region(self, count: int, region: TileRegion, display: Display) -> list[Rect]:
        """
        Rectangulos para *count* ventanas en *region* de *display*.

        Los rectangulos quedan en la convencion de los displays; usar
        placement_rect() antes de entregarlos al mutador.
        """
        rects = tile_rects(
            count, region, self.usable_area(display), self.gap, self.bottom_left,
        )
        log.debug(
            "tile_region(%d, %s) en %s -> %d rects",
            count, region.value, display.name or "display", len(rects),
        )
        return rects

    def distribute_across_displays(self, count: int) -> list[tuple[Rect, Display]]:
        """
        Reparte *count* ventanas entre todos los displays.

        Cada display recibe count // n ventanas; los primeros count % n
        displays (en orden de enumeracion) reciben una extra. Cada parte
        se organiza con la region FULL del display correspondiente.

        Returns:
            Lista ordenada de (rect, display), un elemento por ventana.
        """
        displays = self.displays()
        if count <= 0 or not displays:
            return []

        base, remainder = divmod(count, len(displays))
        placements: list[tuple[Rect, Display]] = []

        for index, display in enumerate(displays):
            share = base + (1 if index < remainder else 0)
            if share == 0:
                continue
            for rect in self.tile_region(share, TileRegion.FULL, display):
                placements.append((rect, display))

        log.info(
            "Reparto de %d ventanas en %d displays (%d base, %d extra)",
            count, len(displays), base, remainder,
        )
        return placements

    def focus_rect(self, window_bounds: Rect) -> tuple[Rect, Display] | None:
        """Area usable completa del display que contiene la ventana."""
        display = self.pick_display(window_bounds)
        if display is None:
            return None
        return self.usable_area(display), display

    # ------------------------------------------------------------------
    # Conversion de coordenadas
    # ------------------------------------------------------------------
    def reference_height(self, reference_display: Display | None = None) -> float:
        """
        Alto usado para invertir el eje vertical.

        Con primary_height_reference activo siempre es el alto del frame
        del display primario, sin importar en que display este la ventana.
        """
        if not self.primary_height_reference and reference_display is not None:
            return reference_display.frame.h

        primary = self.primary()
        if primary is None:
            return reference_display.frame.h if reference_display is not None else 0.0
        return primary.frame.h

    def to_mutator_coordinates(self, rect: Rect, reference_display: Display | None = None) -> Rect:
        """
        Invierte la convencion vertical: y' = alto_referencia - y - h.

        Aplicarlo dos veces con la misma referencia devuelve *rect*.
        """
        return rect.flip_y(self.reference_height(reference_display))

    def placement_rect(self, rect: Rect, display: Display) -> Rect:
        """Rect listo para el mutador (convertido solo si hace falta)."""
        if not self.bottom_left:
            return rect
        return self.to_mutator_coordinates(rect, display)

    def _to_display_coordinates(self, bounds: Rect, displays: list[Display]) -> Rect:
        if not self.bottom_left:
            return bounds
        primary = primary_display(displays)
        height = primary.frame.h if primary is not None else 0.0
        return bounds.flip_y(height)

    # ------------------------------------------------------------------
    # Representacion
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return (
            f"LayoutEngine("
            f"gap={self.gap:g}, "
            f"bottom_left={self.bottom_left}, "
            f"primary_height_reference={self.primary_height_reference})"
        )
