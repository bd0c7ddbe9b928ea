"""
linkos.geometry.rect - Estructuras geometricas Point, Size y Rect.

Valores inmutables que describen posiciones, dimensiones y areas de
pantalla en pixeles. Las ventanas guardan su geometria con estos tipos
y los reemplazan completos en cada cambio (drag, resize, maximize).
"""

from __future__ import annotations

from dataclasses import dataclass


def clamp(value: float, low: float, high: float) -> float:
    """
    Limita *value* al intervalo [low, high].

    Si el intervalo es invertido (high < low) gana el limite inferior,
    igual que ``max(low, min(value, high))``.
    """
    return max(low, min(value, high))


# ============================================================================
# Point / Size
# ============================================================================
@dataclass(frozen=True, slots=True)
class Point:
    """Coordenada (x, y). El origen es la esquina superior-izquierda."""

    x: float
    y: float

    def offset(self, dx: float, dy: float) -> Point:
        return Point(self.x + dx, self.y + dy)

    def delta_to(self, other: Point) -> tuple[float, float]:
        """Retorna (dx, dy) desde este punto hasta *other*."""
        return (other.x - self.x, other.y - self.y)

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)

    def __str__(self) -> str:
        return f"({self.x:g}, {self.y:g})"


@dataclass(frozen=True, slots=True)
class Size:
    """Dimensiones (width, height) en pixeles."""

    width: float
    height: float

    def clamp(self, min_size: Size, max_size: Size) -> Size:
        """
        Limita ambas dimensiones a [min_size, max_size].

        El minimo tiene prioridad cuando max_size es menor que min_size.
        """
        return Size(
            clamp(self.width, min_size.width, max_size.width),
            clamp(self.height, min_size.height, max_size.height),
        )

    def as_tuple(self) -> tuple[float, float]:
        return (self.width, self.height)

    def __str__(self) -> str:
        return f"{self.width:g}x{self.height:g}"


# ============================================================================
# Rect
# ============================================================================
@dataclass(frozen=True, slots=True)
class Rect:
    """
    Rectangulo inmutable definido por posicion (x, y) y dimensiones (w, h).

    Atributos:
        x: Coordenada horizontal de la esquina superior-izquierda.
        y: Coordenada vertical de la esquina superior-izquierda.
        w: Ancho en pixeles.
        h: Alto en pixeles.
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
    def center_x(self) -> float:
        return self.x + self.w / 2

    @property
    def center_y(self) -> float:
        return self.y + self.h / 2

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)

    @property
    def size(self) -> Size:
        return Size(self.w, self.h)

    @property
    def area(self) -> float:
        return self.w * self.h

    # ------------------------------------------------------------------
    # Operaciones geometricas
    # ------------------------------------------------------------------
    def contains(self, point: Point) -> bool:
        """True si *point* cae dentro del rectangulo (bordes incluidos)."""
        return self.left <= point.x <= self.right and self.top <= point.y <= self.bottom

    def pad(self, gap: float) -> Rect:
        """
        Reduce el rectangulo aplicando un margen interior uniforme.

        Si el gap es mayor que las dimensiones, el resultado tiene
        tamano 0.
        """
        new_w = max(0, self.w - 2 * gap)
        new_h = max(0, self.h - 2 * gap)
        return Rect(self.x + gap, self.y + gap, new_w, new_h)

    def clamp_point(self, origin: Point, size: Size) -> Point:
        """
        Ajusta *origin* para que un area de tamano *size* quede dentro
        de este rectangulo.

        El eje se limita a [left, right - size]. Si el area es mas grande
        que el rectangulo, la esquina queda pegada a left/top.
        """
        x = clamp(origin.x, self.left, self.right - size.width)
        y = clamp(origin.y, self.top, self.bottom - size.height)
        return Point(x, y)

    @classmethod
    def from_point_size(cls, origin: Point, size: Size) -> Rect:
        return cls(origin.x, origin.y, size.width, size.height)

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
