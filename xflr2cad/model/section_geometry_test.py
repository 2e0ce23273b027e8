#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""

    Section geometry pytest classes

"""

import pytest

import numpy as np
from numpy.testing                  import assert_allclose

from xflr2cad.model.section_geometry import transform, dihedrals_of, panel_dihedrals, span_increments, span_offsets
from xflr2cad.model.aerofoil        import AerofoilProfile
from xflr2cad.model.plane           import WingComponent, WingSection, build
from xflr2cad.model.errors          import AerofoilMissingError
from xflr2cad.model.units           import Unit_Preferences
from xflr2cad.model.xml_tree        import parse
from xflr2cad.model.plane_examples  import FLAT_DAT, LEDNICER_DAT, plane_xml, wing_xml, section_xml


FLAT = AerofoilProfile._onLines (FLAT_DAT.splitlines())
LED3 = AerofoilProfile._onLines (LEDNICER_DAT.splitlines())
LINE = AerofoilProfile ("Line", [(1.0, 0.0), (0.25, 0.0), (0.0, 0.0)])

PROFILES = [FLAT, LED3, LINE]


def section (y, chord=1.0, x_offset=0.0, dihedral=0.0, twist=0.0, foil="Flat", right_foil=None) -> WingSection:
    return WingSection (y, chord, x_offset, dihedral, twist, foil, right_foil if right_foil else foil)


def component (sections, type="MAINWING", position=(0.0, 0.0, 0.0)) -> WingComponent:
    return WingComponent ("Wing", type, sections, position=position)


class Test_Helpers:

    def test_zero_tip_dihedral (self):

        wing = component ([section (0.0, dihedral=0.0), section (0.5, dihedral=5.0), section (1.0, dihedral=0.0)])
        assert dihedrals_of (wing).tolist() == [0.0, 5.0, 5.0]

        # a single section is left alone
        wing = component ([section (0.0, dihedral=0.0)])
        assert dihedrals_of (wing).tolist() == [0.0]

    def test_fin_dihedral (self):

        fin = component ([section (0.0), section (0.2, dihedral=10.0)], type="FIN")
        assert dihedrals_of (fin).tolist() == [90.0, 100.0]

    def test_panel_dihedrals (self):

        assert panel_dihedrals ([1.0, 2.0, 3.0]).tolist() == [1.0, 1.0, 2.0]
        assert panel_dihedrals ([]).size == 0

    def test_span_round_trip (self):

        y = [0.0, 0.3, 0.7, 1.2, 1.25]
        wing = component ([section (yi) for yi in y])

        incs = span_increments (wing)
        assert incs[0] == 0.0
        assert_allclose (np.cumsum (incs), y)

        # without dihedral the offsets are the absolute positions
        offsets = span_offsets (incs, np.zeros (len(y)))
        assert_allclose (offsets[:,0], y)
        assert_allclose (offsets[:,1], 0.0)

    def test_first_section_offset (self):

        offsets = span_offsets (np.array ([0.2, 1.0]), np.array ([30.0, 30.0]))
        assert_allclose (offsets[0], [0.2 * np.cos (np.radians (30)), 0.2 * np.sin (np.radians (30))])
        assert_allclose (offsets[1], [1.2 * np.cos (np.radians (30)), 1.2 * np.sin (np.radians (30))])


class Test_Transform:

    def test_scale_and_sweep (self):

        wing = component ([section (0.0, chord=2.0, x_offset=0.5, foil="Line")])
        coords = transform (wing, PROFILES)

        assert len (coords) == 1
        assert_allclose (coords[0], [[2.5, 0.0, 0.0], [1.0, 0.0, 0.0], [0.5, 0.0, 0.0]])

    def test_twist_about_quarter_chord (self):

        wing = component ([section (0.0, chord=4.0, twist=90.0, foil="Line")])
        coords = transform (wing, PROFILES)[0]

        # quarter chord stays, leading edge goes up, trailing edge down
        assert_allclose (coords[1], [1.0, 0.0, 0.0], atol=1e-12)
        assert_allclose (coords[2], [1.0, 0.0, 1.0], atol=1e-12)
        assert_allclose (coords[0], [1.0, 0.0, -3.0], atol=1e-12)

    def test_axes (self):

        # aerofoil thickness is vertical, span is second axis
        wing = component ([section (0.0, chord=1.0), section (1.0, chord=1.0)])
        coords = transform (wing, PROFILES)

        assert_allclose (coords[0][1], [0.5, 0.0, 0.05])
        assert_allclose (coords[1][1], [0.5, 1.0, 0.05])

    def test_zero_dihedral_section_not_rotated (self):

        # the middle section keeps its profile, it is only placed along the inner panel
        wing = component ([section (0.0, dihedral=5.0), section (0.5, dihedral=0.0), section (1.0, dihedral=0.0)])
        coords = transform (wing, PROFILES, shift=False)

        c5, s5 = np.cos (np.radians (5.0)), np.sin (np.radians (5.0))
        assert_allclose (coords[1][1], [0.5, 0.5 * c5, 0.05 + 0.5 * s5])
        assert_allclose (coords[1][0], [1.0, 0.5 * c5, 0.5 * s5], atol=1e-12)

    def test_zero_tip_takes_inner_dihedral (self):

        # tip dihedral 0 becomes 5 - the tip is rotated with its inner panel
        wing = component ([section (0.0), section (0.5, dihedral=5.0), section (1.0, dihedral=0.0)])
        coords = transform (wing, PROFILES, shift=False)

        c5, s5 = np.cos (np.radians (5.0)), np.sin (np.radians (5.0))
        assert_allclose (coords[2][1], [0.5, 0.5 + 0.5 * c5 - 0.05 * s5, 0.5 * s5 + 0.05 * c5])

        # the middle section is rotated with the flat inner panel
        assert_allclose (coords[1][1], [0.5, 0.5, 0.05])

    def test_fin_is_vertical (self):

        fin = component ([section (0.0, chord=0.1), section (0.15, chord=0.1)], type="FIN")
        coords = transform (fin, PROFILES)

        # leading edge of tip section
        assert_allclose (coords[1][2], [0.0, 0.0, 0.15], atol=1e-12)

    def test_mixed_section (self):

        wing = component ([section (0.0, foil="Flat", right_foil="LED3")])
        coords = transform (wing, PROFILES)

        assert coords[0].shape == (FLAT.nPoints + LED3.nPoints, 3)

    def test_shift (self):

        position = (0.8, 0.1, 0.05)
        wing = component ([section (0.0), section (0.5, dihedral=3.0)], position=position)

        shifted   = transform (wing, PROFILES, shift=True)
        unshifted = transform (wing, PROFILES, shift=False)

        for a, b in zip (shifted, unshifted):
            assert_allclose (a - b, np.tile (position, (len(a), 1)))

    def test_missing_aerofoil (self):

        wing = component ([section (0.0), section (1.0, foil="XYZ123")])

        with pytest.raises (AerofoilMissingError) as e:
            transform (wing, PROFILES)
        assert e.value.foil == "XYZ123"
        assert "XYZ123" in str(e.value)

    def test_source_unchanged (self):

        wing = component ([section (0.0, chord=2.0, twist=5.0), section (1.0, dihedral=10.0)])
        flat_before = FLAT.coords.copy()

        transform (wing, PROFILES)

        assert np.array_equal (FLAT.coords, flat_before)
        assert wing.sections[0].chord == 2.0
        assert wing.sections[1].dihedral == 10.0


class Test_End_To_End:

    def _wing (self, dihedral_0 : float, dihedral_1 : float):

        xml = plane_xml ([wing_xml ("Main Wing", "MAINWING",
                                    [section_xml (0.0, 0.2, dihedral=dihedral_0),
                                     section_xml (1.0, 0.1, dihedral=dihedral_1)])])
        return build (parse (xml), Unit_Preferences ("m")).main_wing

    def test_two_sections (self):

        wing = self._wing (0.0, 5.0)
        coords = transform (wing, PROFILES)

        assert len (coords) == 2

        # the panel between the sections takes the dihedral of the inner section
        panel_dih = np.radians (dihedrals_of (wing)[0])
        assert_allclose (coords[1][0], [0.1, 1.0 * np.cos (panel_dih), 1.0 * np.sin (panel_dih)], atol=1e-12)

    def test_two_sections_with_dihedral (self):

        wing = self._wing (5.0, 5.0)
        coords = transform (wing, PROFILES)

        assert len (coords) == 2
        assert_allclose (coords[0][0], [0.2, 0.0, 0.0], atol=1e-12)
        assert_allclose (coords[1][0], [0.1, np.cos (np.radians (5)), np.sin (np.radians (5))], atol=1e-12)
