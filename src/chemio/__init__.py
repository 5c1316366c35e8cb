"""API pública de conversión y dibujo de notaciones químicas."""

from chemio.converter import (
    canonicalize,
    convert,
    convert_molecule,
    get_molecule,
    molfile_to_extended_smiles,
    molfile_to_molecule,
    sequence_to_molecule,
    smiles_to_molecule,
    validate_smiles,
)
from chemio.extended_smiles import normalize, rgroups_from_extended_smiles, strip_extension
from chemio.options import (
    DEFAULT_OPTIONS,
    DEFAULT_RENDER_CONFIG,
    ConversionOptions,
    NotationKind,
    OutputFormat,
    RenderConfig,
)
from chemio.render import render_molecule, render_molfile, render_sequence

__all__ = [
    "DEFAULT_OPTIONS",
    "DEFAULT_RENDER_CONFIG",
    "ConversionOptions",
    "NotationKind",
    "OutputFormat",
    "RenderConfig",
    "canonicalize",
    "convert",
    "convert_molecule",
    "get_molecule",
    "molfile_to_extended_smiles",
    "molfile_to_molecule",
    "normalize",
    "render_molecule",
    "render_molfile",
    "render_sequence",
    "rgroups_from_extended_smiles",
    "sequence_to_molecule",
    "smiles_to_molecule",
    "strip_extension",
    "validate_smiles",
]
