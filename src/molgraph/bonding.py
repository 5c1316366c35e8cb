"""Creación de enlaces entre átomos de fragmentos que se están uniendo."""

from __future__ import annotations

from typing import Optional

from molgraph.errors import InvalidAtomError
from molgraph.model import Bond, BondOrder, BondStereo, Molecule


def bind_atoms(molecule: Molecule, atom1_id: Optional[int], atom2_id: Optional[int]) -> Bond:
    """Crea un enlace simple entre dos átomos reales de la misma molécula.

    Si los átomos vienen de fragmentos distintos, el segundo fragmento debe
    absorberse antes (`Molecule.absorb`). No se copia ninguna bandera
    estéreo: de eso se encarga `molgraph.stereo`.

    Args:
        molecule: Molécula que contiene ambos átomos.
        atom1_id: Átomo inicial del enlace.
        atom2_id: Átomo final del enlace.

    Returns:
        El enlace creado.

    Raises:
        InvalidAtomError: Si algún átomo falta, no pertenece a `molecule` o
            es un punto de unión sin resolver.
    """
    for atom_id in (atom1_id, atom2_id):
        if atom_id is None or atom_id not in molecule.atoms:
            raise InvalidAtomError("invalid atoms")
        if molecule.atoms[atom_id].is_attachment_point:
            raise InvalidAtomError(f"Atom {atom_id} is an unresolved attachment point")
    return molecule.add_bond(atom1_id, atom2_id, BondOrder.SINGLE, stereo=BondStereo.NONE)
