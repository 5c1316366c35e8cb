"""Pruebas unitarias para la normalización de SMILES extendidos."""

import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from chemio.extended_smiles import (
    normalize,
    placeholder_count,
    rgroups_from_extended_smiles,
    strip_extension,
)


def test_strip_extension_drops_block_and_whitespace():
    assert strip_extension("  [*]CC[*] |$_R1;;;_R2$|") == "[*]CC[*]"
    assert strip_extension("CCO") == "CCO"


def test_strip_extension_custom_separator():
    assert strip_extension("CC[*:1]#ext", separator="#") == "CC[*:1]"


@pytest.mark.parametrize(
    "text, labels, expected",
    [
        ("[*]CC[*] |$_R1;;;_R2$|", ["R1", "R2"], "[R1]CC[R2]"),
        ("[*:1]C(=O)[*:2]", ["R1", "R2"], "[R1]C(=O)[R2]"),
        ("[H:1]NC[C:2]", ["R1", "R2"], "[R1]NC[R2]"),
        ("[*]CC[*]", ["R1"], "[R1]CC[*]"),
        ("CCO", ["R1"], "CCO"),
        ("[*]CC", [], "[*]CC"),
        ("[*]CC", None, "[*]CC"),
    ],
)
def test_normalize(text, labels, expected):
    assert normalize(text, labels) == expected


def test_normalize_does_not_mutate_labels():
    labels = ["R1", "R2"]
    normalize("[*]C[*]", labels)
    assert labels == ["R1", "R2"]


def test_placeholder_count():
    assert placeholder_count("[*]CC[*:2] |$_R1;;;_R2$|") == 2
    assert placeholder_count("CCO") == 0


def test_rgroups_from_cxsmiles_labels():
    assert rgroups_from_extended_smiles("[*]CC[*] |$_R1;;;_R2$|") == ["R1", "R2"]


def test_rgroups_from_numbered_placeholders():
    assert rgroups_from_extended_smiles("[*:1]CC[*:3]") == ["R1", "R3"]
    assert rgroups_from_extended_smiles("[*:1]CC[*]C[*:3]") == ["R1"]
    assert rgroups_from_extended_smiles("CCO") == []
