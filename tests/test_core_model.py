"""Pruebas unitarias para test_core_model."""

import os
import sys
import unittest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from molgraph.errors import (
    DanglingReferenceError,
    InvalidAtomError,
    InvalidAttachmentStateError,
)
from molgraph.model import (
    IMPLICIT_H,
    BondOrder,
    BondStereo,
    Molecule,
    Parity,
    TetrahedralCenter,
)


class MoleculeTest(unittest.TestCase):
    """Casos de prueba para MoleculeTest."""
    def test_add_atom_and_bond(self):
        """Verifica add atom and bond.

        Returns:
            None.

        """
        molecule = Molecule()
        a1 = molecule.add_atom("C", 0.0, 0.0)
        a2 = molecule.add_atom("O", 1.0, 0.0)
        bond = molecule.add_bond(a1.id, a2.id, order=BondOrder.DOUBLE)

        self.assertEqual(len(molecule.atoms), 2)
        self.assertEqual(len(molecule.bonds), 1)
        self.assertEqual(bond.order, BondOrder.DOUBLE)
        self.assertEqual(bond.stereo, BondStereo.NONE)
        self.assertEqual(molecule.neighbors(a1.id), [a2.id])

    def test_ids_are_never_reused(self):
        molecule = Molecule()
        a1 = molecule.add_atom("C")
        a2 = molecule.add_atom("C")
        molecule.remove_atom(a2.id)
        a3 = molecule.add_atom("N")

        self.assertNotEqual(a3.id, a2.id)
        self.assertIs(molecule.get_atom(a1.id), a1)

    def test_add_bond_rejects_missing_and_self_loops(self):
        molecule = Molecule()
        a1 = molecule.add_atom("C")
        with self.assertRaises(InvalidAtomError):
            molecule.add_bond(a1.id, 999)
        with self.assertRaises(InvalidAtomError):
            molecule.add_bond(a1.id, a1.id)

    def test_rgroup_registers_attachment(self):
        molecule = Molecule()
        rgroup = molecule.add_rgroup("R1")

        self.assertTrue(rgroup.is_attachment_point)
        self.assertIs(molecule.attachment("R1"), rgroup)
        with self.assertRaises(InvalidAttachmentStateError):
            molecule.add_rgroup("R1")
        with self.assertRaises(InvalidAttachmentStateError):
            molecule.attachment("R9")

    def test_remove_atom_drops_bonds_and_attachment(self):
        molecule = Molecule()
        carbon = molecule.add_atom("C")
        rgroup = molecule.add_rgroup("R1")
        molecule.add_bond(carbon.id, rgroup.id)

        atom, bonds = molecule.remove_atom(rgroup.id)

        self.assertIs(atom, rgroup)
        self.assertEqual(len(bonds), 1)
        self.assertEqual(molecule.bonds, {})
        self.assertNotIn("R1", molecule.attachments)

    def test_remove_atom_still_used_as_ligand_is_refused(self):
        """Verifica que no se elimina un átomo que sigue siendo ligando.

        Returns:
            None.

        """
        molecule = Molecule()
        center = molecule.add_atom("C")
        ligands = [molecule.add_atom(symbol) for symbol in ("F", "Cl", "Br")]
        for ligand in ligands:
            molecule.add_bond(center.id, ligand.id)
        molecule.add_stereo(
            TetrahedralCenter(center.id, tuple(a.id for a in ligands) + (IMPLICIT_H,), Parity.CLOCKWISE)
        )

        with self.assertRaises(DanglingReferenceError):
            molecule.remove_atom(ligands[0].id)
        self.assertIn(ligands[0].id, molecule.atoms)
        self.assertEqual(len(molecule.bonds), 3)

        # El centro sí puede eliminarse: su descriptor desaparece con él.
        molecule.remove_atom(center.id)
        self.assertEqual(molecule.stereo, [])

    def test_find_stereo_descriptors_referencing(self):
        molecule = Molecule()
        center = molecule.add_atom("C")
        ligands = [molecule.add_atom("C") for _ in range(4)]
        for ligand in ligands:
            molecule.add_bond(center.id, ligand.id)
        descriptor = molecule.add_stereo(
            TetrahedralCenter(center.id, tuple(a.id for a in ligands), Parity.ANTICLOCKWISE)
        )

        self.assertEqual(list(molecule.find_stereo_descriptors_referencing(ligands[2].id)), [descriptor])
        self.assertEqual(list(molecule.find_stereo_descriptors_referencing(999)), [])

    def test_tetrahedral_center_validation(self):
        with self.assertRaises(ValueError):
            TetrahedralCenter(1, (2, 3, 4), Parity.CLOCKWISE)
        with self.assertRaises(ValueError):
            TetrahedralCenter(1, (2, IMPLICIT_H, 3, IMPLICIT_H), Parity.CLOCKWISE)
        with self.assertRaises(ValueError):
            TetrahedralCenter(1, (2, 2, 3, 4), Parity.CLOCKWISE)

    def test_with_ligand_keeps_position_and_parity(self):
        descriptor = TetrahedralCenter(1, (2, 3, 4, 5), Parity.CLOCKWISE)
        rewritten = descriptor.with_ligand(descriptor.position_of(4), 9)

        self.assertEqual(rewritten.ligands, (2, 3, 9, 5))
        self.assertEqual(rewritten.parity, Parity.CLOCKWISE)
        self.assertEqual(descriptor.ligands, (2, 3, 4, 5))

    def test_connectivity(self):
        molecule = Molecule()
        self.assertTrue(molecule.is_connected())

        a1 = molecule.add_atom("C")
        a2 = molecule.add_atom("C")
        molecule.add_atom("O")
        molecule.add_bond(a1.id, a2.id)

        self.assertFalse(molecule.is_connected())
        self.assertEqual(len(molecule.connected_components()), 2)

    def test_absorb_remaps_ids(self):
        first = Molecule()
        first.add_atom("C")
        second = Molecule()
        n1 = second.add_atom("N")
        rgroup = second.add_rgroup("R1")
        second.add_bond(n1.id, rgroup.id)

        id_map = first.absorb(second)

        self.assertEqual(len(first.atoms), 3)
        self.assertEqual(first.attachment("R1").id, id_map[rgroup.id])
        self.assertIsNotNone(first.find_bond_between(id_map[n1.id], id_map[rgroup.id]))
        self.assertEqual(len(second.atoms), 2)

    def test_absorb_rejects_label_clash(self):
        first = Molecule()
        first.add_rgroup("R1")
        second = Molecule()
        second.add_rgroup("R1")

        with self.assertRaises(InvalidAttachmentStateError):
            first.absorb(second)


if __name__ == "__main__":
    unittest.main()
