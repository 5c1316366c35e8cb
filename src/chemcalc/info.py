"""Resumen de propiedades de una molécula: fórmula, peso y masa exacta."""

from __future__ import annotations

from dataclasses import dataclass

from molgraph.model import Molecule

from .formula import format_formula, molecular_formula
from .mass import exact_mass, molecular_weight


@dataclass(frozen=True)
class MoleculeInfo:
    formula: str
    weight: float
    exact_mass: float


def get_molecule_info(molecule: Molecule) -> MoleculeInfo:
    """Calcula fórmula de Hill, peso molecular y masa monoisotópica."""
    counts = molecular_formula(molecule)
    return MoleculeInfo(
        formula=format_formula(counts),
        weight=molecular_weight(counts),
        exact_mass=exact_mass(counts),
    )
