"""Dibujo de moléculas en PNG o SVG."""

from __future__ import annotations

from chemio.converter import convert
from chemio.options import DEFAULT_RENDER_CONFIG, NotationKind, OutputFormat, RenderConfig
from chemio.rdkit_io import draw, generate_2d_coordinates, molecule_to_rdkit, parse_notation
from molgraph.errors import UnsupportedStructureError
from molgraph.model import Molecule


def render_molecule(
    molecule: Molecule,
    output_format: OutputFormat = OutputFormat.PNG,
    config: RenderConfig = DEFAULT_RENDER_CONFIG,
) -> bytes:
    """Dibuja un `Molecule`; genera coordenadas si las del grafo no valen.

    Raises:
        UnsupportedStructureError: Si hay que disponer una molécula no conexa.
        SerializeError: Si RDKit no puede dibujarla.
    """
    mol = molecule_to_rdkit(molecule)
    if not molecule.has_coordinates:
        if not molecule.is_connected():
            raise UnsupportedStructureError("Molecule not connected")
        generate_2d_coordinates(mol)
    return draw(mol, output_format, config)


def render_molfile(
    molfile: str,
    output_format: OutputFormat = OutputFormat.PNG,
    config: RenderConfig = DEFAULT_RENDER_CONFIG,
) -> bytes:
    return draw(parse_notation(molfile, NotationKind.MOLFILE), output_format, config)


def render_sequence(
    sequence: str,
    output_format: OutputFormat = OutputFormat.PNG,
    config: RenderConfig = DEFAULT_RENDER_CONFIG,
) -> bytes:
    """Dibuja el péptido de una secuencia pasando por su molfile."""
    molfile = convert(sequence, NotationKind.SEQUENCE)
    return render_molfile(molfile, output_format, config)
