"""Cálculo de masas moleculares a partir de fórmulas."""

from __future__ import annotations

from typing import Dict

from rdkit import Chem

_PERIODIC_TABLE = Chem.GetPeriodicTable()


def _lookup(element: str, getter) -> float:
    try:
        return getter(element)
    except (RuntimeError, ValueError, KeyError) as exc:
        raise ValueError(f"Atomic weight not available for {element}") from exc


def molecular_weight(formula_dict: Dict[str, int]) -> float:
    """Calcula el peso molecular a partir de una fórmula.

    Args:
        formula_dict: Diccionario de elemento -> conteo.

    Returns:
        Masa molecular con pesos atómicos promedio, en unidades atómicas (u).

    Raises:
        ValueError: Si el peso atómico de un elemento no está disponible.

    Side Effects:
        No tiene efectos laterales.
    """
    total = 0.0
    for element, count in formula_dict.items():
        total += _lookup(element, _PERIODIC_TABLE.GetAtomicWeight) * count
    return total


def exact_mass(formula_dict: Dict[str, int]) -> float:
    """Masa monoisotópica: cada elemento con su isótopo más abundante.

    Raises:
        ValueError: Si la masa de un elemento no está disponible.
    """
    total = 0.0
    for element, count in formula_dict.items():
        total += _lookup(element, _PERIODIC_TABLE.GetMostCommonIsotopeMass) * count
    return total
