"""Excepciones del conjunto de herramientas químicas.

Todas derivan de `ChemToolkitError` para que la capa HELM pueda capturar
cualquier fallo del núcleo con un único `except`.
"""


class ChemToolkitError(Exception):
    """Error base del núcleo químico."""


class ParseError(ChemToolkitError):
    """Texto de notación mal formado; no es recuperable."""


class InvalidNotationError(ParseError):
    """El texto no produce una molécula válida (o produce cero átomos)."""


class SequenceError(ParseError):
    """La secuencia de aminoácidos no puede construirse como polímero."""


class UnsupportedStructureError(ChemToolkitError):
    """Estructura válida pero fuera de alcance (p. ej., molécula desconectada)."""


class InvalidAttachmentStateError(ChemToolkitError):
    """Un punto de unión (grupo R) viola su invariante de monovalencia."""


class InvalidAtomError(ChemToolkitError):
    """Se pidió enlazar átomos ausentes o que no pueden enlazarse."""


class DanglingReferenceError(ChemToolkitError):
    """Un descriptor estéreo aún referencia al átomo que se quiere eliminar."""


class LayoutError(ChemToolkitError):
    """Falló la generación de coordenadas 2D en la biblioteca externa."""


class SerializeError(ChemToolkitError):
    """Falló la escritura de la molécula en la notación de destino."""
