"""Normalización de SMILES extendidos con marcadores de grupos R.

Un SMILES extendido lleva, tras un separador configurable, un bloque de
extensión (CXSMILES) que no forma parte del grafo químico. Los puntos de unión
aparecen como átomos marcadores (`[*]`, `[*:1]`, `[C:2]`) que se reescriben
como `[R1]`, `[R2]`, ... a partir de una lista de etiquetas.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

DEFAULT_SEPARATOR = "|"

# Marcadores reconocidos: [*], [*:n] y [símbolo:n] con n >= 1.
PLACEHOLDER_PATTERN = re.compile(r"\[\*\]|\[\*:[1-9]\d*\]|\[\w+:[1-9]\d*\]")

# Etiquetas de átomo del bloque CXSMILES: $_R1;;;_R2$
_ATOM_LABELS_PATTERN = re.compile(r"\$([^$]*)\$")
_RGROUP_LABEL_PATTERN = re.compile(r"_R(\d+)")
_PLACEHOLDER_NUMBER_PATTERN = re.compile(r":([1-9]\d*)\]$")


def strip_extension(text: str, separator: str = DEFAULT_SEPARATOR) -> str:
    """Elimina el bloque de extensión a partir del primer separador.

    Args:
        text: SMILES, posiblemente extendido.
        separator: Separador del bloque de extensión.

    Returns:
        Solo la parte química, sin espacios en los extremos.
    """
    return text.split(separator, 1)[0].strip()


def normalize(
    text: str,
    labels: Optional[Iterable[str]] = None,
    separator: str = DEFAULT_SEPARATOR,
) -> str:
    """Quita la extensión y sustituye los marcadores por `[etiqueta]`.

    Los marcadores se recorren de izquierda a derecha y consumen `labels` en
    orden. Si hay menos etiquetas que marcadores, los sobrantes se dejan tal
    cual; sin marcadores, el SMILES se devuelve sin cambios.

    Args:
        text: SMILES extendido.
        labels: Etiquetas de grupos R en orden (p. ej., `["R1", "R2"]`).
        separator: Separador del bloque de extensión.

    Returns:
        SMILES con los grupos R etiquetados.
    """
    smiles = strip_extension(text, separator)
    if not labels:
        return smiles
    pending = iter(list(labels))

    def _substitute(match: re.Match) -> str:
        label = next(pending, None)
        if label is None:
            return match.group(0)
        return f"[{label}]"

    return PLACEHOLDER_PATTERN.sub(_substitute, smiles)


def placeholder_count(text: str, separator: str = DEFAULT_SEPARATOR) -> int:
    """Cuenta los marcadores de grupo R en la parte química."""
    return len(PLACEHOLDER_PATTERN.findall(strip_extension(text, separator)))


def rgroups_from_extended_smiles(text: str, separator: str = DEFAULT_SEPARATOR) -> List[str]:
    """Deduce las etiquetas de grupos R que el propio texto declara.

    Con bloque de extensión se usan las etiquetas `_Rn` del apartado `$...$`
    (en orden de átomo). Sin extensión se usan los números de los marcadores
    `[*:n]`/`[X:n]` hasta el primer marcador sin número.

    Returns:
        Lista de etiquetas (`"R1"`, `"R2"`, ...); vacía si no hay ninguna.
    """
    parts = text.split(separator, 1)
    if len(parts) > 1:
        block = _ATOM_LABELS_PATTERN.search(parts[1])
        if block is not None:
            labels = []
            for entry in block.group(1).split(";"):
                match = _RGROUP_LABEL_PATTERN.fullmatch(entry.strip())
                if match:
                    labels.append(f"R{match.group(1)}")
            return labels

    labels = []
    for token in PLACEHOLDER_PATTERN.findall(parts[0]):
        number = _PLACEHOLDER_NUMBER_PATTERN.search(token)
        if number is None:
            break
        labels.append(f"R{number.group(1)}")
    return labels
