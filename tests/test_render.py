"""Pruebas unitarias para el dibujo de moléculas."""

import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

pytest.importorskip("rdkit")

from chemio import (  # noqa: E402
    DEFAULT_RENDER_CONFIG,
    NotationKind,
    OutputFormat,
    RenderConfig,
    convert,
    render_molecule,
    render_molfile,
    render_sequence,
    smiles_to_molecule,
)
from molgraph import join_fragments  # noqa: E402


def test_render_config_copies():
    config = DEFAULT_RENDER_CONFIG.with_size(400, 300).with_background(0x000000)
    assert (config.width, config.height, config.background) == (400, 300, 0)
    assert DEFAULT_RENDER_CONFIG == RenderConfig()
    assert config.background_rgba() == (0.0, 0.0, 0.0, 1.0)
    assert RenderConfig().background_rgba() == (1.0, 1.0, 1.0, 1.0)


def test_render_molecule_png():
    data = render_molecule(smiles_to_molecule("c1ccccc1O"))
    assert isinstance(data, bytes)
    assert data.startswith(b"\x89PNG")


def test_render_molfile_svg():
    molfile = convert("CCO", NotationKind.SMILES)
    data = render_molfile(molfile, OutputFormat.SVG, DEFAULT_RENDER_CONFIG.with_size(250, 250))
    assert b"<svg" in data


def test_render_joined_molecule_without_coordinates():
    joined = join_fragments(smiles_to_molecule("[*:1]CC"), "R1", smiles_to_molecule("[*:1]N"), "R1")
    assert not joined.has_coordinates
    assert render_molecule(joined, OutputFormat.SVG).lstrip().startswith(b"<?xml")


def test_render_sequence():
    assert render_sequence("GAG").startswith(b"\x89PNG")
