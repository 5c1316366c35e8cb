"""Unión de dos fragmentos moleculares por sus puntos de unión (grupos R)."""

from __future__ import annotations

import logging

from molgraph.errors import InvalidAtomError, InvalidAttachmentStateError
from molgraph.model import Molecule
from molgraph.stereo import (
    apply_stereo_transfer,
    attachment_bond,
    get_stereo_information,
    set_stereo_information,
)

logger = logging.getLogger(__name__)


def join_fragments(
    first: Molecule,
    first_label: str,
    second: Molecule,
    second_label: str,
) -> Molecule:
    """Une `second` a `first` sustituyendo los grupos R indicados.

    El vecino `N` del grupo R de `first` queda enlazado al vecino `M` del
    grupo R de `second`. Los centros quirales de ambos lados conservan la
    posición y paridad de sus ligandos, y la cuña del enlace `(N, R)` pasa al
    enlace `(N, M)`. Ambos grupos R desaparecen.

    Args:
        first: Fragmento receptor; se modifica en sitio.
        first_label: Etiqueta del grupo R de `first` (p. ej., `"R2"`).
        second: Fragmento donante; no se modifica.
        second_label: Etiqueta del grupo R de `second` (p. ej., `"R1"`).

    Returns:
        `first`, ya unido.

    Raises:
        InvalidAttachmentStateError: Si falta una etiqueta, si un grupo R no
            es monovalente o si ambos fragmentos comparten otra etiqueta.
        InvalidAtomError: Si el vecino de un grupo R es otro punto de unión.
            En ambos casos `first` queda intacto.
    """
    rgroup = first.attachment(first_label)
    anchor = attachment_bond(first, rgroup.id).other(rgroup.id)
    second_rgroup = second.attachment(second_label)
    second_anchor = attachment_bond(second, second_rgroup.id).other(second_rgroup.id)
    if first.atoms[anchor].is_attachment_point or second.atoms[second_anchor].is_attachment_point:
        raise InvalidAtomError("An attachment point cannot be bonded to another attachment point")

    # La etiqueta consumida de `first` queda libre para una etiqueta de `second`.
    for label in second.attachments:
        if label not in (first_label, second_label) and label in first.attachments:
            raise InvalidAttachmentStateError(
                f"Attachment label {label} present in both fragments"
            )
    del first.attachments[first_label]

    id_map = first.absorb(second, exclude_labels=(second_label,))
    donor_rgroup = id_map[second_rgroup.id]
    donor_anchor = id_map[second_anchor]

    # Ambas transferencias se calculan antes de mutar el grafo.
    donor_transfer = get_stereo_information(first, donor_rgroup, anchor, donor_anchor)
    set_stereo_information(first, rgroup.id, donor_anchor, anchor)
    if not donor_transfer.is_empty:
        bond = first.find_bond_between(anchor, donor_anchor)
        apply_stereo_transfer(first, donor_transfer, bond)

    first.remove_atom(rgroup.id)
    first.remove_atom(donor_rgroup)
    first.has_coordinates = False
    logger.debug(
        "joined %s:%s with %s (atoms=%d, stereo=%d)",
        first_label, anchor, second_label, len(first.atoms), len(first.stereo),
    )
    return first
