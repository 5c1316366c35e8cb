import os
import sys
import unittest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from molgraph.model import BondOrder, BondStereo, Molecule, StereoKind

try:
    from rdkit import Chem  # noqa: F401
    RDKit_AVAILABLE = True
except Exception:
    RDKit_AVAILABLE = False

if RDKit_AVAILABLE:
    from chemio.options import NotationKind
    from chemio.rdkit_io import (
        molecule_to_rdkit,
        parse_notation,
        rdkit_to_molecule,
        serialize_notation,
    )


class RdkitRoundtripTest(unittest.TestCase):
    @unittest.skipIf(not RDKit_AVAILABLE, "RDKit no disponible")
    def test_molecule_roundtrip_smiles(self):
        molecule = Molecule()
        a1 = molecule.add_atom("C", 0.0, 0.0)
        a2 = molecule.add_atom("C", 1.5, 0.0)
        molecule.add_bond(a1.id, a2.id, order=BondOrder.SINGLE)

        molfile = serialize_notation(molecule_to_rdkit(molecule), NotationKind.MOLFILE)
        molecule2 = rdkit_to_molecule(parse_notation(molfile, NotationKind.MOLFILE))
        smiles = serialize_notation(molecule_to_rdkit(molecule2), NotationKind.SMILES)

        self.assertEqual(smiles, "CC")

    @unittest.skipIf(not RDKit_AVAILABLE, "RDKit no disponible")
    def test_dummy_atoms_become_attachment_points(self):
        mol = parse_notation("[R1]CC[R2]", NotationKind.SMILES)
        molecule = rdkit_to_molecule(mol)

        self.assertEqual(set(molecule.attachments), {"R1", "R2"})
        for label in ("R1", "R2"):
            rgroup = molecule.attachment(label)
            self.assertTrue(rgroup.is_attachment_point)
            self.assertEqual(molecule.degree(rgroup.id), 1)

    @unittest.skipIf(not RDKit_AVAILABLE, "RDKit no disponible")
    def test_aromatic_bonds_are_kept(self):
        molecule = rdkit_to_molecule(parse_notation("c1ccccc1", NotationKind.SMILES))
        orders = {bond.order for bond in molecule.bonds.values()}
        self.assertEqual(orders, {BondOrder.AROMATIC})
        self.assertEqual(
            serialize_notation(molecule_to_rdkit(molecule), NotationKind.SMILES), "c1ccccc1"
        )

    @unittest.skipIf(not RDKit_AVAILABLE, "RDKit no disponible")
    def test_tetrahedral_center_roundtrip(self):
        smiles = "C[C@H](N)C(=O)O"
        mol = parse_notation(smiles, NotationKind.SMILES)
        molecule = rdkit_to_molecule(mol)

        self.assertEqual(len(molecule.stereo), 1)
        self.assertIs(molecule.stereo[0].kind, StereoKind.TETRAHEDRAL)
        self.assertEqual(
            serialize_notation(molecule_to_rdkit(molecule), NotationKind.SMILES),
            serialize_notation(mol, NotationKind.SMILES),
        )

    @unittest.skipIf(not RDKit_AVAILABLE, "RDKit no disponible")
    def test_wedges_from_coordinates(self):
        from chemio.rdkit_io import generate_2d_coordinates

        mol = generate_2d_coordinates(parse_notation("C[C@H](N)C(=O)O", NotationKind.SMILES))
        molecule = rdkit_to_molecule(mol)

        self.assertTrue(molecule.has_coordinates)
        wedges = [b for b in molecule.bonds.values() if b.stereo in (BondStereo.UP, BondStereo.DOWN)]
        self.assertEqual(len(wedges), 1)
        self.assertEqual(wedges[0].a1_id, molecule.stereo[0].center)


if __name__ == "__main__":
    unittest.main()
