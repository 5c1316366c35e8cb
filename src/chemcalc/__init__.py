"""API pública de cálculos químicos auxiliares."""

from .formula import molecular_formula, format_formula
from .info import MoleculeInfo, get_molecule_info
from .mass import exact_mass, molecular_weight

__all__ = [
    "MoleculeInfo",
    "exact_mass",
    "format_formula",
    "get_molecule_info",
    "molecular_formula",
    "molecular_weight",
]
