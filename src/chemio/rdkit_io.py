"""Adaptador entre el modelo `molgraph` y RDKit.

RDKit es el colaborador externo para todo lo que no pertenece al núcleo:
gramática SMILES/molfile, percepción de aromaticidad y tipos atómicos,
hidrógenos implícitos, coordenadas 2D, construcción de péptidos y dibujo.
Este módulo es la única puerta hacia RDKit; los errores de la biblioteca se
envuelven en la taxonomía de `molgraph.errors` conservando la causa.
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from chemio.options import DEFAULT_RENDER_CONFIG, NotationKind, OutputFormat, RenderConfig
from molgraph.errors import (
    InvalidNotationError,
    LayoutError,
    ParseError,
    SequenceError,
    SerializeError,
)
from molgraph.model import (
    IMPLICIT_H,
    RGROUP_SYMBOL,
    Bond,
    BondOrder,
    BondStereo,
    Molecule,
    Parity,
    TetrahedralCenter,
)

try:
    from rdkit import Chem, RDLogger
    from rdkit.Chem import AllChem
    from rdkit.Chem.Draw import rdMolDraw2D
    from rdkit.Geometry import Point3D
except ImportError:  # pragma: no cover - optional dependency at runtime
    Chem = None
    RDLogger = None
    AllChem = None
    rdMolDraw2D = None
    Point3D = None

logger = logging.getLogger(__name__)

# Las etiquetas [R1] no son SMILES válidos para RDKit: se traducen a [*:1].
_RGROUP_TOKEN = re.compile(r"\[R(\d*)\]")
_RGROUP_LABEL = re.compile(r"R(\d+)")

# Hueco del hidrógeno implícito en la lista de ligandos: RDKit lo considera
# delante de los vecinos explícitos (orden de enlaces del átomo).
_IMPLICIT_H_SLOT = 0

# Tolerancia para decidir el lado de un vecino respecto a un doble enlace.
_SIDE_EPSILON = 1e-4


def _require_rdkit():
    if Chem is None or AllChem is None or rdMolDraw2D is None:
        raise RuntimeError("RDKit no disponible")


@contextmanager
def quiet_rdkit() -> Iterator[None]:
    """Silencia temporalmente los mensajes de error y aviso de RDKit."""
    _require_rdkit()
    RDLogger.DisableLog("rdApp.error")
    RDLogger.DisableLog("rdApp.warning")
    try:
        yield
    finally:
        RDLogger.EnableLog("rdApp.error")
        RDLogger.EnableLog("rdApp.warning")


# ----------------------------------------------------------------------
# Capacidades externas
# ----------------------------------------------------------------------
def rgroups_to_dummies(smiles: str) -> str:
    """Traduce `[R1]` a `[*:1]` (y `[R]` a `[*]`) para el parser de RDKit."""
    return _RGROUP_TOKEN.sub(lambda m: f"[*:{m.group(1)}]" if m.group(1) else "[*]", smiles)


def parse_notation(text: str, kind: NotationKind):
    """Analiza un texto con la gramática de RDKit.

    Args:
        text: SMILES (ya normalizado), molfile o secuencia.
        kind: Notación del texto.

    Returns:
        Un `Chem.Mol` saneado (aromaticidad y tipos atómicos percibidos).

    Raises:
        InvalidNotationError: Si RDKit no puede construir la molécula.
        SequenceError: Si la secuencia no es válida.
    """
    _require_rdkit()
    kind = NotationKind(kind)
    if kind is NotationKind.SEQUENCE:
        return build_sequence_polymer(text)
    try:
        if kind is NotationKind.SMILES:
            mol = Chem.MolFromSmiles(rgroups_to_dummies(text))
        else:
            mol = Chem.MolFromMolBlock(text)
    except (TypeError, ValueError, RuntimeError) as exc:
        raise InvalidNotationError(f"invalid {kind.value}") from exc
    if mol is None:
        raise InvalidNotationError(f"invalid {kind.value}")
    return mol


def serialize_notation(mol, kind: NotationKind) -> str:
    """Escribe una molécula RDKit en la notación pedida.

    SMILES se escribe canónico e isomérico; MOLFILE en formato V2000.

    Raises:
        SerializeError: Si RDKit no puede escribir la molécula.
    """
    _require_rdkit()
    kind = NotationKind(kind)
    try:
        if kind is NotationKind.SMILES:
            return Chem.MolToSmiles(mol, isomericSmiles=True, canonical=True)
        if kind is NotationKind.MOLFILE:
            return Chem.MolToMolBlock(mol)
        return Chem.MolToSequence(mol)
    except (TypeError, ValueError, RuntimeError) as exc:
        raise SerializeError(f"unable to write molecule as {kind.value}") from exc


def serialize_extended_smiles(mol) -> str:
    """Escribe un CXSMILES cuyos comodines llevan la etiqueta `_R<n>`.

    Los puntos de unión conservan su mapa atómico (`[*:n]`) y la etiqueta se
    añade al bloque `$...$` de la extensión. No se escriben coordenadas.

    Raises:
        SerializeError: Si RDKit no puede escribir la molécula.
    """
    _require_rdkit()
    mol = Chem.Mol(mol)
    mol.RemoveAllConformers()
    for atom in mol.GetAtoms():
        if atom.GetAtomicNum() == 0 and atom.GetAtomMapNum():
            atom.SetProp("atomLabel", f"_R{atom.GetAtomMapNum()}")
    try:
        return Chem.MolToCXSmiles(mol)
    except (TypeError, ValueError, RuntimeError) as exc:
        raise SerializeError("unable to write molecule as extended smiles") from exc


def perceive_atom_types_and_aromaticity(mol):
    """Sanea la molécula en sitio: valencias, aromaticidad e hidrógenos.

    Raises:
        ParseError: Si la estructura no es químicamente coherente.
    """
    _require_rdkit()
    try:
        Chem.SanitizeMol(mol)
    except (ValueError, RuntimeError) as exc:
        raise ParseError("unable to perceive atom types and aromaticity") from exc
    return mol


def generate_2d_coordinates(mol):
    """Genera (o reemplaza) la conformación 2D de la molécula.

    Raises:
        LayoutError: Si RDKit no puede disponer la molécula.
    """
    _require_rdkit()
    try:
        AllChem.Compute2DCoords(mol)
    except (ValueError, RuntimeError) as exc:
        raise LayoutError("unable to generate coordinates") from exc
    return mol


def build_sequence_polymer(sequence: str):
    """Construye un péptido a partir de su secuencia de una letra.

    Raises:
        SequenceError: Si la secuencia está vacía o contiene residuos
            desconocidos.
    """
    _require_rdkit()
    cleaned = "".join(sequence.split()) if sequence else ""
    if not cleaned:
        raise SequenceError("empty sequence")
    try:
        polymer = Chem.MolFromSequence(cleaned)
    except (TypeError, ValueError, RuntimeError) as exc:
        raise SequenceError(f"invalid sequence {cleaned!r}") from exc
    if polymer is None or polymer.GetNumAtoms() == 0:
        raise SequenceError(f"invalid sequence {cleaned!r}")
    return polymer


def draw(mol, output_format: OutputFormat = OutputFormat.PNG,
         config: RenderConfig = DEFAULT_RENDER_CONFIG) -> bytes:
    """Dibuja la molécula y devuelve la imagen codificada.

    Raises:
        SerializeError: Si RDKit no puede dibujar la molécula.
    """
    _require_rdkit()
    output_format = OutputFormat(output_format)
    if output_format is OutputFormat.PNG:
        drawer = rdMolDraw2D.MolDraw2DCairo(config.width, config.height)
    else:
        drawer = rdMolDraw2D.MolDraw2DSVG(config.width, config.height)
    drawer.drawOptions().setBackgroundColour(config.background_rgba())
    try:
        rdMolDraw2D.PrepareAndDrawMolecule(drawer, mol)
    except (ValueError, RuntimeError) as exc:
        raise SerializeError("unable to draw molecule") from exc
    drawer.FinishDrawing()
    data = drawer.GetDrawingText()
    if isinstance(data, str):
        return data.encode("utf-8")
    return data


# ----------------------------------------------------------------------
# RDKit -> Molecule
# ----------------------------------------------------------------------
def _rgroup_label(atom) -> Optional[str]:
    number = atom.GetAtomMapNum()
    if not number and atom.HasProp("_MolFileRLabel"):
        number = atom.GetUnsignedProp("_MolFileRLabel")
    if not number:
        number = atom.GetIsotope()
    return f"R{number}" if number else None


def _order_from_rdkit(bond) -> BondOrder:
    bond_type = bond.GetBondType()
    if bond.GetIsAromatic() or bond_type == Chem.BondType.AROMATIC:
        return BondOrder.AROMATIC
    if bond_type == Chem.BondType.DOUBLE:
        return BondOrder.DOUBLE
    if bond_type == Chem.BondType.TRIPLE:
        return BondOrder.TRIPLE
    return BondOrder.SINGLE


def _side(conf, a: int, b: int, p: int) -> float:
    pa = conf.GetAtomPosition(a)
    pb = conf.GetAtomPosition(b)
    pp = conf.GetAtomPosition(p)
    return (pb.x - pa.x) * (pp.y - pa.y) - (pb.y - pa.y) * (pp.x - pa.x)


def _first_other_neighbor(atom, exclude: int) -> Optional[int]:
    for neighbor in atom.GetNeighbors():
        if neighbor.GetIdx() != exclude:
            return neighbor.GetIdx()
    return None


def _double_bond_stereo(bond, conf) -> Tuple[BondStereo, Optional[Tuple[int, int]]]:
    stereo = bond.GetStereo()
    if stereo == Chem.BondStereo.STEREONONE:
        return BondStereo.NONE, None
    if stereo == Chem.BondStereo.STEREOANY:
        return BondStereo.EITHER, None

    begin = bond.GetBeginAtom()
    end = bond.GetEndAtom()
    refs = list(bond.GetStereoAtoms())
    if len(refs) != 2:
        refs = [
            _first_other_neighbor(begin, end.GetIdx()),
            _first_other_neighbor(end, begin.GetIdx()),
        ]
        if None in refs:
            return BondStereo.NONE, None

    if stereo == Chem.BondStereo.STEREOCIS:
        return BondStereo.CIS, (refs[0], refs[1])
    if stereo == Chem.BondStereo.STEREOTRANS:
        return BondStereo.TRANS, (refs[0], refs[1])
    # E/Z son etiquetas CIP: se traducen a cis/trans con la geometría 2D.
    if conf is None:
        return BondStereo.NONE, None
    side1 = _side(conf, begin.GetIdx(), end.GetIdx(), refs[0])
    side2 = _side(conf, begin.GetIdx(), end.GetIdx(), refs[1])
    if abs(side1) < _SIDE_EPSILON or abs(side2) < _SIDE_EPSILON:
        return BondStereo.EITHER, None
    flag = BondStereo.CIS if (side1 > 0) == (side2 > 0) else BondStereo.TRANS
    return flag, (refs[0], refs[1])


def _single_bond_stereo(bond) -> BondStereo:
    direction = bond.GetBondDir()
    if direction == Chem.BondDir.BEGINWEDGE:
        return BondStereo.UP
    if direction == Chem.BondDir.BEGINDASH:
        return BondStereo.DOWN
    if direction == Chem.BondDir.UNKNOWN:
        return BondStereo.EITHER
    return BondStereo.NONE


def rdkit_to_molecule(mol) -> Molecule:
    """Convierte un `Chem.Mol` en un `Molecule` del núcleo.

    Los átomos comodín (número atómico 0) pasan a ser puntos de unión con
    etiqueta `R<n>` tomada del mapa atómico, de `_MolFileRLabel` o del
    isótopo. Si hay conformación, se copian las coordenadas y se calculan
    las cuñas de los centros quirales.
    """
    _require_rdkit()
    if mol is None:
        raise InvalidNotationError("Mol inválido")
    mol = Chem.Mol(mol)
    conf = mol.GetConformer() if mol.GetNumConformers() else None
    if conf is not None:
        Chem.WedgeMolBonds(mol, conf)

    molecule = Molecule()
    idx_map: Dict[int, int] = {}

    for atom in mol.GetAtoms():
        idx = atom.GetIdx()
        x = y = 0.0
        if conf is not None:
            pos = conf.GetAtomPosition(idx)
            x, y = pos.x, pos.y
        if atom.GetAtomicNum() == 0:
            new_atom = molecule.add_atom(
                RGROUP_SYMBOL, x, y, is_attachment_point=True, label=_rgroup_label(atom)
            )
        else:
            new_atom = molecule.add_atom(
                atom.GetSymbol(),
                x,
                y,
                charge=atom.GetFormalCharge(),
                isotope=atom.GetIsotope() or None,
                explicit_h=atom.GetNumExplicitHs(),
                no_implicit=atom.GetNoImplicit(),
                is_aromatic=atom.GetIsAromatic(),
            )
        idx_map[idx] = new_atom.id

    for bond in mol.GetBonds():
        order = _order_from_rdkit(bond)
        stereo_atoms = None
        if bond.GetBondType() == Chem.BondType.DOUBLE:
            stereo, refs = _double_bond_stereo(bond, conf)
            if refs is not None:
                stereo_atoms = (idx_map[refs[0]], idx_map[refs[1]])
        else:
            stereo = _single_bond_stereo(bond)
        molecule.add_bond(
            idx_map[bond.GetBeginAtomIdx()],
            idx_map[bond.GetEndAtomIdx()],
            order,
            stereo=stereo,
            stereo_atoms=stereo_atoms,
        )

    for atom in mol.GetAtoms():
        tag = atom.GetChiralTag()
        if tag not in (Chem.ChiralType.CHI_TETRAHEDRAL_CW, Chem.ChiralType.CHI_TETRAHEDRAL_CCW):
            continue
        ligands: List[Optional[int]] = [
            idx_map[b.GetOtherAtomIdx(atom.GetIdx())] for b in atom.GetBonds()
        ]
        if len(ligands) == 3:
            ligands.insert(_IMPLICIT_H_SLOT, IMPLICIT_H)
        if len(ligands) != 4:
            logger.debug("skipping chiral tag on atom %d with %d ligands", atom.GetIdx(), len(ligands))
            continue
        parity = Parity.CLOCKWISE if tag == Chem.ChiralType.CHI_TETRAHEDRAL_CW else Parity.ANTICLOCKWISE
        molecule.add_stereo(TetrahedralCenter(idx_map[atom.GetIdx()], tuple(ligands), parity))

    molecule.has_coordinates = conf is not None
    return molecule


# ----------------------------------------------------------------------
# Molecule -> RDKit
# ----------------------------------------------------------------------
_ORDER_TO_RDKIT = {
    BondOrder.SINGLE: "SINGLE",
    BondOrder.DOUBLE: "DOUBLE",
    BondOrder.TRIPLE: "TRIPLE",
    BondOrder.AROMATIC: "AROMATIC",
}


def _permutation_is_odd(items: Sequence, reference: Sequence) -> bool:
    positions = [reference.index(item) for item in items]
    inversions = 0
    for i in range(len(positions)):
        for j in range(i + 1, len(positions)):
            if positions[i] > positions[j]:
                inversions += 1
    return inversions % 2 == 1


def _apply_bond_stereo(rd_bond, bond: Bond, id_map: Dict[int, int]) -> None:
    if bond.order is BondOrder.DOUBLE:
        if bond.stereo is BondStereo.EITHER:
            rd_bond.SetStereo(Chem.BondStereo.STEREOANY)
        elif bond.stereo in (BondStereo.CIS, BondStereo.TRANS) and bond.stereo_atoms:
            rd_bond.SetStereoAtoms(id_map[bond.stereo_atoms[0]], id_map[bond.stereo_atoms[1]])
            if bond.stereo is BondStereo.CIS:
                rd_bond.SetStereo(Chem.BondStereo.STEREOCIS)
            else:
                rd_bond.SetStereo(Chem.BondStereo.STEREOTRANS)
        return
    if bond.stereo is BondStereo.UP:
        rd_bond.SetBondDir(Chem.BondDir.BEGINWEDGE)
    elif bond.stereo is BondStereo.DOWN:
        rd_bond.SetBondDir(Chem.BondDir.BEGINDASH)
    elif bond.stereo is BondStereo.EITHER:
        rd_bond.SetBondDir(Chem.BondDir.UNKNOWN)


def _apply_tetrahedral(rw, descriptor: TetrahedralCenter, id_map: Dict[int, int]) -> None:
    center_idx = id_map[descriptor.center]
    rd_center = rw.GetAtomWithIdx(center_idx)
    reference: List[Optional[int]] = [
        b.GetOtherAtomIdx(center_idx) for b in rd_center.GetBonds()
    ]
    if len(reference) == 3:
        reference.insert(_IMPLICIT_H_SLOT, IMPLICIT_H)
    ligands = [IMPLICIT_H if lig is IMPLICIT_H else id_map[lig] for lig in descriptor.ligands]
    if len(reference) != 4 or set(ligands) != set(reference):
        raise SerializeError(
            f"stereo center {descriptor.center} does not match its bonded neighbors"
        )
    parity = descriptor.parity
    if _permutation_is_odd(ligands, reference):
        parity = parity.inverted()
    if parity is Parity.CLOCKWISE:
        rd_center.SetChiralTag(Chem.ChiralType.CHI_TETRAHEDRAL_CW)
    else:
        rd_center.SetChiralTag(Chem.ChiralType.CHI_TETRAHEDRAL_CCW)


def molecule_to_rdkit_with_map(molecule: Molecule):
    """Construye un `Chem.Mol` saneado y el mapa ID de átomo -> índice RDKit.

    Raises:
        SerializeError: Si el grafo no es químicamente coherente.
    """
    _require_rdkit()
    rw = Chem.RWMol()
    id_map: Dict[int, int] = {}

    for atom in molecule.atoms.values():
        if atom.is_attachment_point:
            rd_atom = Chem.Atom(0)
            match = _RGROUP_LABEL.fullmatch(atom.label or "")
            if match:
                number = int(match.group(1))
                rd_atom.SetAtomMapNum(number)
                rd_atom.SetUnsignedProp("_MolFileRLabel", number)
        else:
            try:
                rd_atom = Chem.Atom(atom.element)
            except RuntimeError as exc:
                raise SerializeError(f"unknown element {atom.element}") from exc
            rd_atom.SetFormalCharge(atom.charge)
            if atom.isotope is not None:
                rd_atom.SetIsotope(atom.isotope)
            rd_atom.SetNumExplicitHs(atom.explicit_h)
            rd_atom.SetNoImplicit(atom.no_implicit)
            rd_atom.SetIsAromatic(atom.is_aromatic)
        id_map[atom.id] = rw.AddAtom(rd_atom)

    rd_bonds = []
    for bond in molecule.bonds.values():
        bond_type = getattr(Chem.BondType, _ORDER_TO_RDKIT[bond.order])
        count = rw.AddBond(id_map[bond.a1_id], id_map[bond.a2_id], bond_type)
        rd_bond = rw.GetBondWithIdx(count - 1)
        if bond.order is BondOrder.AROMATIC:
            rd_bond.SetIsAromatic(True)
        rd_bonds.append((rd_bond, bond))

    # Las referencias estéreo exigen que todos los enlaces existan ya.
    for rd_bond, bond in rd_bonds:
        _apply_bond_stereo(rd_bond, bond, id_map)
    for descriptor in molecule.stereo:
        _apply_tetrahedral(rw, descriptor, id_map)

    mol = rw.GetMol()
    try:
        perceive_atom_types_and_aromaticity(mol)
    except ParseError as exc:
        raise SerializeError("molecule graph is not chemically consistent") from exc
    # Sin percepción los escritores descartan las banderas CIS/TRANS.
    Chem.AssignStereochemistry(mol, cleanIt=False, force=True)

    if molecule.has_coordinates:
        conf = Chem.Conformer(mol.GetNumAtoms())
        for atom_id, idx in id_map.items():
            atom = molecule.atoms[atom_id]
            conf.SetAtomPosition(idx, Point3D(atom.x, atom.y, 0.0))
        mol.AddConformer(conf, assignId=True)
    return mol, id_map


def molecule_to_rdkit(molecule: Molecule):
    mol, _ = molecule_to_rdkit_with_map(molecule)
    return mol
