"""Conversión entre notaciones químicas: SMILES, molfile y secuencias.

Todas las rutas pasan por el modelo `molgraph.Molecule`, de modo que un
fragmento leído puede unirse a otro antes de volver a escribirse.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Sequence

from chemio.extended_smiles import normalize, rgroups_from_extended_smiles, strip_extension
from chemio.options import DEFAULT_OPTIONS, ConversionOptions, NotationKind
from chemio.rdkit_io import (
    build_sequence_polymer,
    generate_2d_coordinates,
    molecule_to_rdkit,
    parse_notation,
    quiet_rdkit,
    rdkit_to_molecule,
    serialize_extended_smiles,
    serialize_notation,
)
from molgraph.errors import InvalidNotationError, ParseError, SerializeError, UnsupportedStructureError
from molgraph.model import Molecule

logger = logging.getLogger(__name__)


def validate_smiles(smiles: str, options: ConversionOptions = DEFAULT_OPTIONS) -> bool:
    """Indica si el texto es un SMILES (extendido) con al menos un átomo."""
    if not isinstance(smiles, str):
        return False
    text = strip_extension(smiles, options.extension_separator)
    if not text:
        return False
    try:
        if options.quiet_validation:
            with quiet_rdkit():
                mol = parse_notation(text, NotationKind.SMILES)
        else:
            mol = parse_notation(text, NotationKind.SMILES)
    except ParseError:
        return False
    return mol.GetNumAtoms() > 0


def _smiles_to_rdkit(
    smiles: str,
    labels: Optional[Sequence[str]],
    options: ConversionOptions,
):
    separator = options.extension_separator
    if labels is None:
        labels = rgroups_from_extended_smiles(smiles, separator)
    normalized = normalize(smiles, labels, separator)
    logger.debug("normalized smiles: %s", normalized)
    if "." in normalized:
        raise UnsupportedStructureError(
            "Molecule not connected. Use HELM notation to join the fragments."
        )
    mol = parse_notation(normalized, NotationKind.SMILES)
    if mol.GetNumAtoms() == 0:
        raise InvalidNotationError("invalid smiles!")
    if options.generate_coordinates:
        generate_2d_coordinates(mol)
    return mol


def smiles_to_molecule(
    smiles: str,
    labels: Optional[Sequence[str]] = None,
    options: ConversionOptions = DEFAULT_OPTIONS,
) -> Molecule:
    """Lee un SMILES extendido y devuelve el grafo con sus grupos R etiquetados.

    Args:
        smiles: SMILES, con o sin bloque de extensión.
        labels: Etiquetas de los marcadores en orden; por defecto las que
            declara el propio texto.
        options: Opciones de conversión.

    Returns:
        El `Molecule` resultante, con coordenadas 2D si así se pide.

    Raises:
        UnsupportedStructureError: Si el SMILES tiene varios componentes.
        InvalidNotationError: Si RDKit no puede leer el SMILES.
        LayoutError: Si falla la generación de coordenadas.
    """
    return rdkit_to_molecule(_smiles_to_rdkit(smiles, labels, options))


def molfile_to_molecule(molfile: str) -> Molecule:
    """Lee un molfile; los átomos `R#` pasan a ser puntos de unión."""
    return rdkit_to_molecule(parse_notation(molfile, NotationKind.MOLFILE))


def sequence_to_molecule(sequence: str, options: ConversionOptions = DEFAULT_OPTIONS) -> Molecule:
    """Construye el péptido de una secuencia de aminoácidos de una letra.

    Raises:
        SequenceError: Si la secuencia no es válida.
    """
    polymer = build_sequence_polymer(sequence)
    if options.generate_coordinates:
        generate_2d_coordinates(polymer)
    return rdkit_to_molecule(polymer)


def get_molecule(
    data: str,
    attachments: Optional[Sequence[str]] = None,
    options: ConversionOptions = DEFAULT_OPTIONS,
) -> Molecule:
    """Interpreta `data` como SMILES si es válido y como molfile si no."""
    if validate_smiles(data, options):
        return smiles_to_molecule(data, attachments, options)
    return molfile_to_molecule(data)


def convert_molecule(molecule: Molecule, kind: NotationKind) -> str:
    """Escribe un `Molecule` como SMILES o molfile.

    Un molfile necesita coordenadas: si las del grafo no son válidas (p. ej.,
    tras una unión) se generan de nuevo, lo que exige una molécula conexa.

    Raises:
        UnsupportedStructureError: Si hay que generar coordenadas para una
            molécula no conexa.
        SerializeError: Si la notación pedida no es de salida o RDKit falla.
    """
    kind = NotationKind(kind)
    if kind is NotationKind.SEQUENCE:
        raise SerializeError("sequence is not an output notation")
    mol = molecule_to_rdkit(molecule)
    if kind is NotationKind.MOLFILE and not molecule.has_coordinates:
        if not molecule.is_connected():
            raise UnsupportedStructureError("Molecule not connected")
        logger.debug("generating coordinates for %d atoms", len(molecule.atoms))
        generate_2d_coordinates(mol)
    return serialize_notation(mol, kind)


def convert(data: str, kind: NotationKind, options: ConversionOptions = DEFAULT_OPTIONS) -> str:
    """Convierte `data` según su notación de origen.

    SMILES produce un molfile, MOLFILE produce SMILES y SEQUENCE produce un
    molfile (secuencia, grafo, SMILES y molfile).
    """
    kind = NotationKind(kind)
    if kind is NotationKind.SMILES:
        return convert_molecule(smiles_to_molecule(data, options=options), NotationKind.MOLFILE)
    if kind is NotationKind.MOLFILE:
        return convert_molecule(molfile_to_molecule(data), NotationKind.SMILES)
    peptide = sequence_to_molecule(data, replace(options, generate_coordinates=False))
    smiles = convert_molecule(peptide, NotationKind.SMILES)
    return convert(smiles, NotationKind.SMILES, options)


def molfile_to_extended_smiles(molfile: str) -> str:
    """Convierte un molfile en SMILES extendido con las etiquetas de sus grupos R.

    El resultado (p. ej., `[*:1]CC[*:2] |$_R1;;;_R2$|`) vuelve a leerse con
    `smiles_to_molecule` sin indicar etiquetas.

    Raises:
        InvalidNotationError: Si el molfile no es válido.
        SerializeError: Si RDKit no puede escribir la molécula.
    """
    molecule = molfile_to_molecule(molfile)
    return serialize_extended_smiles(molecule_to_rdkit(molecule))


def canonicalize(smiles: str, options: ConversionOptions = DEFAULT_OPTIONS) -> str:
    """Devuelve el SMILES canónico (isomérico) de un SMILES extendido.

    Raises:
        InvalidNotationError: Si el SMILES no se puede leer o no tiene átomos.
        UnsupportedStructureError: Si el SMILES tiene varios componentes.
    """
    mol = _smiles_to_rdkit(smiles, None, replace(options, generate_coordinates=False))
    return serialize_notation(mol, NotationKind.SMILES)
