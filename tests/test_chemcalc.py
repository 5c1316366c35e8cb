"""Pruebas unitarias para fórmula, peso molecular y masa exacta."""

import os
import sys
import unittest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

try:
    from rdkit import Chem  # noqa: F401
    RDKit_AVAILABLE = True
except Exception:
    RDKit_AVAILABLE = False

if RDKit_AVAILABLE:
    from chemcalc import (
        exact_mass,
        format_formula,
        get_molecule_info,
        molecular_formula,
        molecular_weight,
    )
    from chemio import smiles_to_molecule


@unittest.skipIf(not RDKit_AVAILABLE, "RDKit no disponible")
class FormulaTest(unittest.TestCase):
    def test_hill_order(self):
        self.assertEqual(format_formula({"O": 1, "H": 6, "C": 2}), "C2H6O")
        self.assertEqual(format_formula({"O": 1, "H": 2}), "H2O")
        self.assertEqual(format_formula({"Na": 1, "Cl": 1}), "ClNa")
        self.assertEqual(format_formula({}), "")

    def test_implicit_hydrogens_are_counted(self):
        self.assertEqual(molecular_formula(smiles_to_molecule("CCO")), {"C": 2, "O": 1, "H": 6})

    def test_attachment_points_are_excluded(self):
        molecule = smiles_to_molecule("[*:1]CC")
        self.assertEqual(format_formula(molecular_formula(molecule)), "C2H5")


@unittest.skipIf(not RDKit_AVAILABLE, "RDKit no disponible")
class MassTest(unittest.TestCase):
    def test_weight_and_exact_mass(self):
        formula = {"C": 2, "H": 6, "O": 1}
        self.assertAlmostEqual(molecular_weight(formula), 46.069, places=2)
        self.assertAlmostEqual(exact_mass(formula), 46.0419, places=3)

    def test_unknown_element(self):
        with self.assertRaises(ValueError):
            molecular_weight({"Xx": 1})

    def test_molecule_info(self):
        info = get_molecule_info(smiles_to_molecule("OCC"))
        self.assertEqual(info.formula, "C2H6O")
        self.assertAlmostEqual(info.weight, 46.069, places=2)
        self.assertAlmostEqual(info.exact_mass, 46.0419, places=3)


if __name__ == "__main__":
    unittest.main()
