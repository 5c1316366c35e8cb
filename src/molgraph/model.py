"""Modelo de grafo molecular del núcleo de chemtoolkit.

Este módulo concentra las estructuras que representan el grafo molecular
(átomos, enlaces y descriptores estéreo) y las operaciones de edición que
usan el resto de paquetes: la conversión de formatos (`chemio`) lo llena y lo
lee, y el empalme de fragmentos (`molgraph.splice`) lo muta en sitio.

Los átomos y enlaces se guardan en diccionarios indexados por IDs enteros que
nunca se reutilizan dentro de una misma molécula, de modo que un ID sigue
siendo válido mientras el objeto exista.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple, Union

from molgraph.errors import (
    DanglingReferenceError,
    InvalidAtomError,
    InvalidAttachmentStateError,
)

# Símbolo usado para los átomos de unión (grupos R).
RGROUP_SYMBOL = "R"

# Marcador de hidrógeno implícito dentro de la lista de ligandos.
IMPLICIT_H = None


class BondOrder(str, Enum):
    """Órdenes de enlace soportados."""
    SINGLE = "single"
    DOUBLE = "double"
    TRIPLE = "triple"
    AROMATIC = "aromatic"


class BondStereo(str, Enum):
    """Categorías de estereoquímica de un enlace."""
    NONE = "none"
    UP = "up"
    DOWN = "down"
    CIS = "cis"
    TRANS = "trans"
    EITHER = "either"


class StereoKind(str, Enum):
    """Variantes de descriptor estéreo."""
    TETRAHEDRAL = "tetrahedral"


class Parity(str, Enum):
    """Sentido de giro de los ligandos 2..4 vistos desde el primero."""
    CLOCKWISE = "clockwise"
    ANTICLOCKWISE = "anticlockwise"

    def inverted(self) -> "Parity":
        if self is Parity.CLOCKWISE:
            return Parity.ANTICLOCKWISE
        return Parity.CLOCKWISE


@dataclass
class Atom:
    """Representa un átomo en el grafo molecular."""
    id: int
    element: str
    x: float = 0.0
    y: float = 0.0
    charge: int = 0
    isotope: Optional[int] = None
    explicit_h: int = 0
    no_implicit: bool = False
    is_aromatic: bool = False
    is_attachment_point: bool = False
    label: Optional[str] = None


@dataclass
class Bond:
    """Representa un enlace químico; las cuñas parten de `a1_id`."""
    id: int
    a1_id: int
    a2_id: int
    order: BondOrder = BondOrder.SINGLE
    stereo: BondStereo = BondStereo.NONE
    # Vecinos de referencia para CIS/TRANS: (vecino de a1, vecino de a2).
    stereo_atoms: Optional[Tuple[int, int]] = None

    def other(self, atom_id: int) -> int:
        """Devuelve el extremo opuesto a `atom_id`."""
        if atom_id == self.a1_id:
            return self.a2_id
        if atom_id == self.a2_id:
            return self.a1_id
        raise InvalidAtomError(f"Atom {atom_id} is not an endpoint of bond {self.id}")

    def contains(self, atom_id: int) -> bool:
        return atom_id in (self.a1_id, self.a2_id)


@dataclass(frozen=True)
class TetrahedralCenter:
    """Centro tetraédrico: átomo central, ligandos ordenados y paridad.

    `ligands` contiene 4 IDs, o 3 IDs más `IMPLICIT_H`. El orden codifica la
    quiralidad junto con `parity`; sustituir un ligando conserva su posición.
    """
    center: int
    ligands: Tuple[Optional[int], ...]
    parity: Parity
    kind: StereoKind = field(default=StereoKind.TETRAHEDRAL, init=False)

    def __post_init__(self) -> None:
        ligands = tuple(self.ligands)
        object.__setattr__(self, "ligands", ligands)
        if len(ligands) != 4:
            raise ValueError("A tetrahedral center needs exactly 4 ligand slots")
        if ligands.count(IMPLICIT_H) > 1:
            raise ValueError("Only one implicit hydrogen slot is allowed")
        explicit = [lig for lig in ligands if lig is not IMPLICIT_H]
        if len(set(explicit)) != len(explicit):
            raise ValueError("Ligands must be distinct atoms")
        if self.center in explicit:
            raise ValueError("The center cannot be its own ligand")

    def references(self, atom_id: int) -> bool:
        return atom_id == self.center or atom_id in self.ligands

    def position_of(self, atom_id: int) -> int:
        return self.ligands.index(atom_id)

    def with_ligand(self, position: int, atom_id: int) -> "TetrahedralCenter":
        """Devuelve un descriptor nuevo con el ligando `position` sustituido."""
        ligands = list(self.ligands)
        ligands[position] = atom_id
        return TetrahedralCenter(self.center, tuple(ligands), self.parity)

    def atom_ids(self) -> List[int]:
        return [self.center] + [lig for lig in self.ligands if lig is not IMPLICIT_H]


# Unión etiquetada de descriptores; hoy solo existe la variante tetraédrica.
StereoDescriptor = Union[TetrahedralCenter]


class Molecule:
    """Grafo molecular mutable con IDs estables para átomos y enlaces."""

    def __init__(self) -> None:
        """Inicializa el grafo vacío y contadores internos de IDs."""
        self.atoms: Dict[int, Atom] = {}
        self.bonds: Dict[int, Bond] = {}
        self.stereo: List[StereoDescriptor] = []
        self.attachments: Dict[str, int] = {}
        self.has_coordinates = False
        self._next_atom_id = 1
        self._next_bond_id = 1

    # ------------------------------------------------------------------
    # Átomos
    # ------------------------------------------------------------------
    def add_atom(
        self,
        element: str,
        x: float = 0.0,
        y: float = 0.0,
        atom_id: Optional[int] = None,
        charge: int = 0,
        isotope: Optional[int] = None,
        explicit_h: int = 0,
        no_implicit: bool = False,
        is_aromatic: bool = False,
        is_attachment_point: bool = False,
        label: Optional[str] = None,
    ) -> Atom:
        """Crea y registra un átomo en el grafo.

        Args:
            element: Símbolo del elemento (`"R"` para puntos de unión).
            x: Coordenada X de la disposición 2D.
            y: Coordenada Y de la disposición 2D.
            atom_id: ID explícito (p. ej., al copiar otra molécula).
            charge: Carga formal.
            isotope: Número másico, si se especifica.
            explicit_h: Hidrógenos explícitos del átomo.
            no_implicit: Impide que se añadan hidrógenos implícitos.
            is_aromatic: Marca de aromaticidad.
            is_attachment_point: Si el átomo es un grupo R.
            label: Etiqueta del grupo R (p. ej., `"R1"`).

        Returns:
            El átomo creado.

        Raises:
            InvalidAttachmentStateError: Si la etiqueta ya está registrada.

        Side Effects:
            Modifica `self.atoms`, `self.attachments` y el contador de IDs.
        """
        if is_attachment_point and label is not None and label in self.attachments:
            raise InvalidAttachmentStateError(f"Duplicate attachment label {label}")
        if atom_id is None:
            atom_id = self._next_atom_id
            self._next_atom_id += 1
        else:
            if atom_id in self.atoms:
                raise InvalidAtomError(f"Atom id {atom_id} already in use")
            self._next_atom_id = max(self._next_atom_id, atom_id + 1)
        atom = Atom(
            id=atom_id,
            element=element,
            x=x,
            y=y,
            charge=charge,
            isotope=isotope,
            explicit_h=explicit_h,
            no_implicit=no_implicit,
            is_aromatic=is_aromatic,
            is_attachment_point=is_attachment_point,
            label=label,
        )
        self.atoms[atom_id] = atom
        if is_attachment_point and label is not None:
            self.attachments[label] = atom_id
        return atom

    def add_rgroup(self, label: Optional[str] = None, x: float = 0.0, y: float = 0.0) -> Atom:
        """Atajo para añadir un punto de unión."""
        return self.add_atom(RGROUP_SYMBOL, x, y, is_attachment_point=True, label=label)

    def remove_atom(self, atom_id: int) -> Tuple[Atom, List[Bond]]:
        """Elimina un átomo, sus enlaces y los descriptores centrados en él.

        La eliminación es la segunda fase de una sustitución: cualquier
        descriptor que use el átomo como ligando, o enlace superviviente que
        lo use como referencia CIS/TRANS, debe reescribirse antes.

        Args:
            atom_id: Identificador del átomo a eliminar.

        Returns:
            Una tupla con el átomo eliminado y la lista de enlaces removidos.

        Raises:
            InvalidAtomError: Si el átomo no pertenece a la molécula.
            DanglingReferenceError: Si aún existen referencias sin reescribir.

        Side Effects:
            Modifica `self.atoms`, `self.bonds`, `self.stereo` y
            `self.attachments`. No modifica nada si se lanza una excepción.
        """
        self._require_atom(atom_id)
        for descriptor in self.find_stereo_descriptors_referencing(atom_id):
            if descriptor.center != atom_id:
                raise DanglingReferenceError(
                    f"Atom {atom_id} is still a ligand of the stereo center "
                    f"{descriptor.center}; rewrite it before removal"
                )
        for bond in self.bonds.values():
            if bond.contains(atom_id) or bond.stereo_atoms is None:
                continue
            if atom_id in bond.stereo_atoms:
                raise DanglingReferenceError(
                    f"Atom {atom_id} is still a stereo reference of bond {bond.id}"
                )

        self.stereo = [d for d in self.stereo if d.center != atom_id]
        atom = self.atoms.pop(atom_id)
        removed_bonds: List[Bond] = []
        for bond_id, bond in list(self.bonds.items()):
            if bond.contains(atom_id):
                removed_bonds.append(self.remove_bond(bond_id))
        if atom.label is not None and self.attachments.get(atom.label) == atom_id:
            del self.attachments[atom.label]
        return atom, removed_bonds

    def get_atom(self, atom_id: int) -> Atom:
        """Obtiene un átomo por ID."""
        return self._require_atom(atom_id)

    def attachment(self, label: str) -> Atom:
        """Obtiene el punto de unión registrado con `label`.

        Raises:
            InvalidAttachmentStateError: Si la etiqueta no existe.
        """
        atom_id = self.attachments.get(label)
        if atom_id is None:
            raise InvalidAttachmentStateError(f"No attachment point labelled {label}")
        return self.atoms[atom_id]

    # ------------------------------------------------------------------
    # Enlaces
    # ------------------------------------------------------------------
    def add_bond(
        self,
        a1_id: int,
        a2_id: int,
        order: BondOrder = BondOrder.SINGLE,
        bond_id: Optional[int] = None,
        stereo: BondStereo = BondStereo.NONE,
        stereo_atoms: Optional[Tuple[int, int]] = None,
    ) -> Bond:
        """Crea y registra un enlace entre dos átomos de esta molécula.

        Args:
            a1_id: ID del átomo inicial (origen de la cuña, si la hay).
            a2_id: ID del átomo final.
            order: Orden de enlace.
            bond_id: ID explícito si se copia desde otra molécula.
            stereo: Estereoquímica del enlace.
            stereo_atoms: Vecinos de referencia para CIS/TRANS.

        Returns:
            El enlace creado.

        Raises:
            InvalidAtomError: Si algún extremo no pertenece a la molécula, si
                ambos extremos coinciden o si ya existe un enlace entre ellos.

        Side Effects:
            Incrementa el contador de IDs y modifica `self.bonds`.
        """
        self._require_atom(a1_id)
        self._require_atom(a2_id)
        if a1_id == a2_id:
            raise InvalidAtomError(f"Cannot bond atom {a1_id} to itself")
        if self.find_bond_between(a1_id, a2_id) is not None:
            raise InvalidAtomError(f"Atoms {a1_id} and {a2_id} are already bonded")
        if bond_id is None:
            bond_id = self._next_bond_id
            self._next_bond_id += 1
        else:
            self._next_bond_id = max(self._next_bond_id, bond_id + 1)
        bond = Bond(
            id=bond_id,
            a1_id=a1_id,
            a2_id=a2_id,
            order=order,
            stereo=stereo,
            stereo_atoms=stereo_atoms,
        )
        self.bonds[bond_id] = bond
        return bond

    def remove_bond(self, bond_id: int) -> Bond:
        """Elimina un enlace del grafo."""
        return self.bonds.pop(bond_id)

    def get_bond(self, bond_id: int) -> Bond:
        """Obtiene un enlace por ID."""
        return self.bonds[bond_id]

    def find_bond_between(self, a1_id: int, a2_id: int) -> Optional[Bond]:
        """Busca un enlace existente entre dos átomos.

        Returns:
            El enlace si existe, o `None` en caso contrario.
        """
        for bond in self.bonds.values():
            if {bond.a1_id, bond.a2_id} == {a1_id, a2_id}:
                return bond
        return None

    def bonds_of(self, atom_id: int) -> List[Bond]:
        """Enlaces incidentes a un átomo, en orden de creación."""
        return [bond for bond in self.bonds.values() if bond.contains(atom_id)]

    def neighbors(self, atom_id: int) -> List[int]:
        return [bond.other(atom_id) for bond in self.bonds_of(atom_id)]

    def degree(self, atom_id: int) -> int:
        return len(self.bonds_of(atom_id))

    # ------------------------------------------------------------------
    # Estereoquímica
    # ------------------------------------------------------------------
    def add_stereo(self, descriptor: StereoDescriptor) -> StereoDescriptor:
        """Registra un descriptor estéreo cuyos átomos existan en la molécula."""
        for atom_id in descriptor.atom_ids():
            self._require_atom(atom_id)
        self.stereo.append(descriptor)
        return descriptor

    def replace_stereo(self, old: StereoDescriptor, new: StereoDescriptor) -> None:
        """Sustituye `old` por `new` conservando su posición en la lista."""
        for index, descriptor in enumerate(self.stereo):
            if descriptor is old:
                for atom_id in new.atom_ids():
                    self._require_atom(atom_id)
                self.stereo[index] = new
                return
        raise ValueError("Stereo descriptor does not belong to this molecule")

    def find_stereo_descriptors_referencing(self, atom_id: int) -> Iterator[StereoDescriptor]:
        """Recorre de forma perezosa los descriptores que mencionan `atom_id`.

        El iterador no sobrevive a mutaciones de `self.stereo`: materialícelo
        (`list(...)`) antes de modificar la molécula.
        """
        for descriptor in self.stereo:
            if descriptor.references(atom_id):
                yield descriptor

    # ------------------------------------------------------------------
    # Conectividad y composición
    # ------------------------------------------------------------------
    def connected_components(self) -> List[Set[int]]:
        """Agrupa los átomos en componentes conexas (orden de inserción)."""
        adjacency: Dict[int, List[int]] = {atom_id: [] for atom_id in self.atoms}
        for bond in self.bonds.values():
            adjacency[bond.a1_id].append(bond.a2_id)
            adjacency[bond.a2_id].append(bond.a1_id)

        seen: Set[int] = set()
        components: List[Set[int]] = []
        for start in self.atoms:
            if start in seen:
                continue
            component = {start}
            stack = [start]
            while stack:
                current = stack.pop()
                for neighbor in adjacency[current]:
                    if neighbor not in component:
                        component.add(neighbor)
                        stack.append(neighbor)
            seen |= component
            components.append(component)
        return components

    def is_connected(self) -> bool:
        """Indica si la molécula forma una sola componente conexa."""
        return len(self.connected_components()) <= 1

    def absorb(self, other: "Molecule", exclude_labels: Iterable[str] = ()) -> Dict[int, int]:
        """Copia átomos, enlaces y descriptores de `other` dentro de esta molécula.

        Es el paso previo a enlazar dos fragmentos: tras absorber, ambos
        extremos del nuevo enlace pertenecen al mismo grafo.

        Args:
            other: Molécula de origen; no se modifica.
            exclude_labels: Etiquetas de unión de `other` que no deben
                registrarse aquí (se van a consumir en el empalme).

        Returns:
            Diccionario ID original -> ID nuevo.

        Raises:
            InvalidAttachmentStateError: Si una etiqueta copiada ya existe.

        Side Effects:
            Añade átomos, enlaces y descriptores; invalida las coordenadas.
        """
        excluded = set(exclude_labels)
        for label in other.attachments:
            if label not in excluded and label in self.attachments:
                raise InvalidAttachmentStateError(
                    f"Attachment label {label} present in both fragments"
                )

        id_map: Dict[int, int] = {}
        for atom in other.atoms.values():
            label = atom.label
            register = atom.is_attachment_point and label not in excluded
            new_atom = self.add_atom(
                atom.element,
                atom.x,
                atom.y,
                charge=atom.charge,
                isotope=atom.isotope,
                explicit_h=atom.explicit_h,
                no_implicit=atom.no_implicit,
                is_aromatic=atom.is_aromatic,
                is_attachment_point=atom.is_attachment_point,
                label=label if register else None,
            )
            # La etiqueta se conserva aunque no quede registrada.
            new_atom.label = label
            id_map[atom.id] = new_atom.id

        for bond in other.bonds.values():
            stereo_atoms = None
            if bond.stereo_atoms is not None:
                stereo_atoms = (id_map[bond.stereo_atoms[0]], id_map[bond.stereo_atoms[1]])
            self.add_bond(
                id_map[bond.a1_id],
                id_map[bond.a2_id],
                bond.order,
                stereo=bond.stereo,
                stereo_atoms=stereo_atoms,
            )

        for descriptor in other.stereo:
            ligands = tuple(
                IMPLICIT_H if lig is IMPLICIT_H else id_map[lig] for lig in descriptor.ligands
            )
            self.stereo.append(
                TetrahedralCenter(id_map[descriptor.center], ligands, descriptor.parity)
            )

        self.has_coordinates = False
        return id_map

    def _require_atom(self, atom_id: Optional[int]) -> Atom:
        atom = self.atoms.get(atom_id) if atom_id is not None else None
        if atom is None:
            raise InvalidAtomError(f"Atom {atom_id} does not belong to this molecule")
        return atom
