"""API pública del modelo molecular de chemtoolkit.

Reexpone el grafo, sus descriptores estéreo y las operaciones de empalme.
"""

from molgraph.bonding import bind_atoms
from molgraph.errors import (
    ChemToolkitError,
    DanglingReferenceError,
    InvalidAtomError,
    InvalidAttachmentStateError,
    InvalidNotationError,
    LayoutError,
    ParseError,
    SequenceError,
    SerializeError,
    UnsupportedStructureError,
)
from molgraph.model import (
    IMPLICIT_H,
    Atom,
    Bond,
    BondOrder,
    BondStereo,
    Molecule,
    Parity,
    StereoKind,
    TetrahedralCenter,
)
from molgraph.splice import join_fragments
from molgraph.stereo import (
    StereoTransfer,
    apply_stereo_transfer,
    get_stereo_information,
    set_stereo_information,
)

__all__ = [
    "Atom",
    "Bond",
    "BondOrder",
    "BondStereo",
    "ChemToolkitError",
    "DanglingReferenceError",
    "IMPLICIT_H",
    "InvalidAtomError",
    "InvalidAttachmentStateError",
    "InvalidNotationError",
    "LayoutError",
    "Molecule",
    "ParseError",
    "Parity",
    "SequenceError",
    "SerializeError",
    "StereoKind",
    "StereoTransfer",
    "TetrahedralCenter",
    "UnsupportedStructureError",
    "apply_stereo_transfer",
    "bind_atoms",
    "get_stereo_information",
    "join_fragments",
    "set_stereo_information",
]
