"""
windowtiler.tiling.rect - Estructura geometrica Rect.

Define un rectangulo inmutable que representa un area de pantalla.
Se usa para describir el area de cada display, los bounds de cada
ventana y las coordenadas destino que calcula el motor de layout.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Rect:
    """
    Rectangulo inmutable definido por posicion (x, y) y dimensiones (w, h).

    Las coordenadas son numeros reales: los displays pueden reportar
    puntos fraccionarios y el reparto de celdas no se redondea.

    Atributos:
        x: Coordenada horizontal del origen.
        y: Coordenada vertical del origen.
        w: Ancho.
        h: Alto.
    """

    x: float
    y: float
    w: float
    h: float

    # ------------------------------------------------------------------
    # Propiedades derivadas
    # ------------------------------------------------------------------
    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @property
    def area(self) -> float:
        return self.w * self.h

    # ------------------------------------------------------------------
    # Operaciones geometricas
    # ------------------------------------------------------------------
    def split_horizontal(self, ratio: float = 0.5) -> tuple[Rect, Rect]:
        """
        Divide el rectangulo verticalmente (columna izquierda / derecha).

        Args:
            ratio: Fraccion del ancho para la parte izquierda (0.0 - 1.0).

        Returns:
            Tupla (izquierda, derecha).
        """
        left_w = self.w * ratio
        left = Rect(self.x, self.y, left_w, self.h)
        right = Rect(self.x + left_w, self.y, self.w - left_w, self.h)
        return left, right

    def split_vertical(self, ratio: float = 0.5) -> tuple[Rect, Rect]:
        """
        Divide el rectangulo horizontalmente (banda baja-y / banda alta-y).

        Args:
            ratio: Fraccion del alto para la primera banda (la de menor y).

        Returns:
            Tupla (menor y, mayor y).
        """
        first_h = self.h * ratio
        first = Rect(self.x, self.y, self.w, first_h)
        second = Rect(self.x, self.y + first_h, self.w, self.h - first_h)
        return first, second

    def intersection(self, other: Rect) -> Rect | None:
        """
        Interseccion con *other*.

        Returns:
            El Rect comun, o None si no se solapan (tocarse en un borde
            no cuenta como solape).
        """
        left = max(self.left, other.left)
        top = max(self.top, other.top)
        right = min(self.right, other.right)
        bottom = min(self.bottom, other.bottom)
        if right <= left or bottom <= top:
            return None
        return Rect(left, top, right - left, bottom - top)

    def intersection_area(self, other: Rect) -> float:
        """Area de la interseccion con *other* (0 si no se solapan)."""
        common = self.intersection(other)
        return common.area if common is not None else 0.0

    def overlaps(self, other: Rect) -> bool:
        return self.intersection(other) is not None

    def contains(self, other: Rect, tolerance: float = 1e-6) -> bool:
        """True si *other* esta completamente dentro de este rectangulo."""
        return (
            other.left >= self.left - tolerance
            and other.top >= self.top - tolerance
            and other.right <= self.right + tolerance
            and other.bottom <= self.bottom + tolerance
        )

    def flip_y(self, reference_height: float) -> Rect:
        """
        Cambia de convencion vertical (origen arriba <-> origen abajo).

        y' = reference_height - y - h. Aplicarlo dos veces con la misma
        altura de referencia devuelve el rectangulo original.
        """
        return Rect(self.x, reference_height - self.y - self.h, self.w, self.h)

    def origin_distance(self, other: Rect) -> tuple[float, float]:
        """Distancia absoluta (dx, dy) entre los origenes."""
        return (abs(self.x - other.x), abs(self.y - other.y))

    # ------------------------------------------------------------------
    # Conversion a diccionario (formato de persistencia)
    # ------------------------------------------------------------------
    def to_frame(self) -> dict[str, float]:
        """Retorna {'x', 'y', 'width', 'height'} para serializar en JSON."""
        return {"x": self.x, "y": self.y, "width": self.w, "height": self.h}

    @classmethod
    def from_frame(cls, frame: dict[str, float]) -> Rect:
        """Crea un Rect desde un dict de frame; las claves faltantes valen 0."""
        return cls(
            float(frame.get("x", 0)),
            float(frame.get("y", 0)),
            float(frame.get("width", 0)),
            float(frame.get("height", 0)),
        )

    @classmethod
    def from_ltrb(cls, left: float, top: float, right: float, bottom: float) -> Rect:
        """Crea un Rect desde coordenadas (left, top, right, bottom)."""
        return cls(left, top, right - left, bottom - top)

    def to_ltrb(self) -> tuple[float, float, float, float]:
        return (self.left, self.top, self.right, self.bottom)

    # ------------------------------------------------------------------
    # Representacion
    # ------------------------------------------------------------------
    def __str__(self) -> str:
        return f"Rect({self.w:g}x{self.h:g}+{self.x:g}+{self.y:g})"
