"""Transferencia de estereoquímica al sustituir un grupo R.

Cuando el átomo de unión `P` de un fragmento (enlazado a su vecino `N`) se
reemplaza por un átomo real `Q` de otro fragmento, la quiralidad definida
alrededor de `N` debe seguir describiendo la misma disposición espacial:

1. Cada centro tetraédrico que tenga a `P` como ligando se reescribe con `Q`
   en la misma posición y con la misma paridad.
2. La bandera estéreo del enlace `(N, P)` (cuña) pasa al enlace `(N, Q)`.

La paridad se copia, no se recalcula a partir de coordenadas: se asume
continuidad geométrica entre `P` y `Q`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from molgraph.bonding import bind_atoms
from molgraph.errors import InvalidAttachmentStateError
from molgraph.model import Bond, BondStereo, Molecule, StereoKind, TetrahedralCenter


@dataclass
class StereoTransfer:
    """Resultado de analizar una sustitución; vacío si no hay estereoquímica."""
    rgroup_id: Optional[int] = None
    replacement_id: Optional[int] = None
    anchor_id: Optional[int] = None
    replacements: List[Tuple[TetrahedralCenter, TetrahedralCenter]] = field(default_factory=list)
    bond_stereo: BondStereo = BondStereo.NONE
    # Enlaces dobles que usan a P como referencia CIS/TRANS.
    reference_bonds: List[int] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.replacements and not self.reference_bonds


def attachment_bond(molecule: Molecule, rgroup_id: int) -> Bond:
    """Devuelve el único enlace de un átomo de unión.

    Raises:
        InvalidAttachmentStateError: Si el átomo no tiene exactamente un enlace.
    """
    bonds = molecule.bonds_of(rgroup_id)
    if len(bonds) != 1:
        raise InvalidAttachmentStateError(
            f"Attachment atom {rgroup_id} must have exactly one bond, found {len(bonds)}"
        )
    return bonds[0]


def get_stereo_information(
    molecule: Molecule,
    rgroup_id: int,
    replacement_id: int,
    anchor_id: int,
) -> StereoTransfer:
    """Calcula cómo reescribir la estereoquímica al sustituir `rgroup_id`.

    No modifica la molécula; el resultado se aplica con
    `apply_stereo_transfer` o `set_stereo_information`.

    Args:
        molecule: Molécula que contiene el grupo R y su vecino.
        rgroup_id: Átomo de unión `P` que va a desaparecer.
        replacement_id: Átomo `Q` que ocupa el lugar de `P` en los ligandos.
        anchor_id: Vecino `N` de `P`, extremo del nuevo enlace `(N, Q)`.

    Returns:
        Un `StereoTransfer`; `is_empty` es verdadero si nada referencia a `P`.

    Raises:
        InvalidAttachmentStateError: Si `P` no es monovalente.
    """
    rgroup_bond = attachment_bond(molecule, rgroup_id)
    transfer = StereoTransfer(rgroup_id, replacement_id, anchor_id)

    for descriptor in list(molecule.find_stereo_descriptors_referencing(rgroup_id)):
        if descriptor.kind is not StereoKind.TETRAHEDRAL:
            continue
        if rgroup_id not in descriptor.ligands:
            continue
        position = descriptor.position_of(rgroup_id)
        if descriptor.center == anchor_id and rgroup_bond.contains(anchor_id):
            transfer.bond_stereo = rgroup_bond.stereo
        transfer.replacements.append((descriptor, descriptor.with_ligand(position, replacement_id)))

    for bond in molecule.bonds.values():
        if bond.stereo_atoms is not None and rgroup_id in bond.stereo_atoms:
            transfer.reference_bonds.append(bond.id)
    return transfer


def apply_stereo_transfer(molecule: Molecule, transfer: StereoTransfer, bond: Bond) -> None:
    """Aplica una transferencia sobre el enlace ya creado `(N, Q)`.

    Side Effects:
        Sustituye descriptores, mueve referencias CIS/TRANS de `P` a `Q` y,
        si se capturó una cuña, la copia en `bond` orientándolo desde `N`.
    """
    for old, new in transfer.replacements:
        molecule.replace_stereo(old, new)

    for bond_id in transfer.reference_bonds:
        ref_bond = molecule.get_bond(bond_id)
        ref_bond.stereo_atoms = tuple(
            transfer.replacement_id if atom_id == transfer.rgroup_id else atom_id
            for atom_id in ref_bond.stereo_atoms
        )

    if transfer.bond_stereo is not BondStereo.NONE and bond.stereo is BondStereo.NONE:
        if bond.a1_id != transfer.anchor_id:
            bond.a1_id, bond.a2_id = bond.a2_id, bond.a1_id
        bond.stereo = transfer.bond_stereo


def set_stereo_information(
    molecule: Molecule,
    rgroup_id: int,
    replacement_id: int,
    anchor_id: int,
) -> bool:
    """Enlaza `N` con `Q` y transfiere la estereoquímica que tenía `P`.

    Returns:
        `True` si había estereoquímica que transferir; `False` si solo se
        creó un enlace simple sin banderas.
    """
    transfer = get_stereo_information(molecule, rgroup_id, replacement_id, anchor_id)
    bond = bind_atoms(molecule, anchor_id, replacement_id)
    if transfer.is_empty:
        return False
    apply_stereo_transfer(molecule, transfer, bond)
    return True
