"""Cálculo y formateo de fórmulas moleculares.

Este módulo cuenta los elementos de un `Molecule` (incluidos los hidrógenos
implícitos que percibe RDKit) y formatea la fórmula siguiendo el orden de Hill.
"""

from __future__ import annotations

from typing import Dict

from chemio.rdkit_io import molecule_to_rdkit
from molgraph.model import Molecule


def molecular_formula(molecule: Molecule) -> Dict[str, int]:
    """Calcula la fórmula molecular como diccionario de elemento -> conteo.

    Args:
        molecule: Grafo molecular; los puntos de unión no se cuentan.

    Returns:
        Diccionario con símbolos atómicos y sus cantidades totales.

    Raises:
        SerializeError: Si el grafo no es químicamente coherente.

    Side Effects:
        No tiene efectos laterales; solo calcula y devuelve datos.
    """
    mol = molecule_to_rdkit(molecule)
    counts: Dict[str, int] = {}

    for atom in mol.GetAtoms():
        if atom.GetAtomicNum() == 0:
            continue
        element = atom.GetSymbol()
        counts[element] = counts.get(element, 0) + 1
        hydrogens = atom.GetTotalNumHs()
        if hydrogens:
            counts["H"] = counts.get("H", 0) + int(hydrogens)

    return {element: count for element, count in counts.items() if count > 0}


def format_formula(formula_dict: Dict[str, int]) -> str:
    """Formatea una fórmula usando el orden de Hill.

    Con carbono: C, H y el resto en orden alfabético. Sin carbono, todos los
    elementos (H incluido) van en orden alfabético.

    Args:
        formula_dict: Diccionario con símbolos de elementos y cantidades.

    Returns:
        Cadena con la fórmula formateada (p. ej., "C6H6O").

    Side Effects:
        No tiene efectos laterales.
    """
    if not formula_dict:
        return ""
    order = []
    if "C" in formula_dict:
        order.append("C")
        if "H" in formula_dict:
            order.append("H")
    for element in sorted(e for e in formula_dict.keys() if e not in order):
        order.append(element)

    parts = []
    for element in order:
        count = formula_dict.get(element, 0)
        if count <= 0:
            continue
        parts.append(element if count == 1 else f"{element}{count}")
    return "".join(parts)
