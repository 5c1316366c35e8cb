"""Opciones de configuración para la conversión y el dibujo de moléculas.

Las clases de opciones son inmutables: se construyen una vez y se comparten
en modo lectura entre llamadas.
"""

from dataclasses import dataclass, replace
from enum import Enum


class NotationKind(str, Enum):
    SMILES = "smiles"
    MOLFILE = "molfile"
    SEQUENCE = "sequence"


class OutputFormat(str, Enum):
    PNG = "png"
    SVG = "svg"


@dataclass(frozen=True)
class ConversionOptions:
    """Opciones de control del conversor de notaciones."""

    # Separador entre el SMILES químico y su bloque de extensión (CXSMILES).
    extension_separator: str = "|"
    # Generar coordenadas 2D al leer SMILES o secuencias.
    generate_coordinates: bool = True
    # Silenciar los mensajes de RDKit al validar cadenas dudosas.
    quiet_validation: bool = True


@dataclass(frozen=True)
class RenderConfig:
    """Parámetros de dibujo: tamaño en píxeles y color de fondo RGB."""

    width: int = 300
    height: int = 200
    background: int = 0xFFFFFF

    def with_size(self, width: int, height: int) -> "RenderConfig":
        return replace(self, width=width, height=height)

    def with_background(self, rgb: int) -> "RenderConfig":
        return replace(self, background=rgb)

    def background_rgba(self) -> tuple[float, float, float, float]:
        """Color de fondo como tupla RGBA normalizada (0..1)."""
        red = (self.background >> 16) & 0xFF
        green = (self.background >> 8) & 0xFF
        blue = self.background & 0xFF
        return (red / 255.0, green / 255.0, blue / 255.0, 1.0)


DEFAULT_OPTIONS = ConversionOptions()

DEFAULT_RENDER_CONFIG = RenderConfig()
