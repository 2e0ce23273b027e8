#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""

    Plane model pytest classes

"""

import pytest

import numpy as np

from xflr2cad.model.plane           import Plane, Plane_Summary, build, tidy_foil_name, parse_coordinates
from xflr2cad.model.errors          import ModelError, SchemaVersionWarning
from xflr2cad.model.units           import Unit_Preferences
from xflr2cad.model.xml_tree        import parse
from xflr2cad.model.plane_examples  import plane_xml, wing_xml, section_xml, example_plane_xml, write_example_plane


def example_plane (unit_prefs : Unit_Preferences | None = None) -> Plane:
    return build (parse (example_plane_xml()), unit_prefs)


class Test_Helpers:

    def test_tidy_foil_name (self):

        assert tidy_foil_name ("MH32") == "MH32"
        assert tidy_foil_name ("MH32.dat") == "MH32"
        assert tidy_foil_name ("C:\\foils\\MH32.dat") == "MH32"
        assert tidy_foil_name ("foils/sub/SD7003") == "SD7003"
        assert tidy_foil_name ('  <AG>"35"?  ') == "AG35"

    def test_parse_coordinates (self):

        assert parse_coordinates ("  0.1,   0, 0.25") == [0.1, 0.0, 0.25]
        assert parse_coordinates ("") == []
        with pytest.raises (ValueError):
            parse_coordinates ("a, b")


class Test_Build:

    def test_example (self):

        plane = example_plane (Unit_Preferences ("m", "kg"))

        assert plane.name == "Example Plane"
        assert plane.version == "1.0"
        assert plane._as_dict()["has_body"] is False
        assert plane.slots == ["main_wing", "elevator", "fin"]
        assert plane.second_wing is None

        wing = plane.main_wing
        assert wing.name == "Main Wing"
        assert wing.label == "Main Wing"
        assert wing.symmetric
        assert wing.colour == (100, 150, 200, 255)
        assert len (wing.sections) == 2
        assert [s.y_position for s in wing.sections] == [0.0, 1.0]
        assert wing.sections[1].dihedral == 5.0
        assert wing.sections[1].x_offset == pytest.approx (0.05)
        assert wing.sections[0].x_panels == 13
        assert wing.sections[0].x_panel_dist == "cosine"
        assert wing.sections[0].left_foil == "Flat"

        assert plane.fin.is_fin
        assert plane.fin.position.tolist() == [0.8, 0.0, 0.0]

        assert plane.point_masses[0].tag == "Battery"
        assert plane.total_mass == pytest.approx (0.4)
        assert plane.span == pytest.approx (2.0)

    def test_tilt_added_to_twist (self):

        plane = example_plane ()
        assert [s.twist for s in plane.elevator.sections] == [-1.0, -1.0]

    def test_units (self):

        # document in mm, target in mm -> values unchanged
        xml = plane_xml ([wing_xml ("Wing", "MAINWING", [section_xml (0.0, 200.0), section_xml (1000.0, 100.0)],
                                    position="10, 0, 5")],
                         length_unit_to_meter=0.001, mass_unit_to_kg=0.001, point_mass=50.0)
        plane = build (parse (xml), Unit_Preferences ("mm", "g"))

        assert plane.main_wing.sections[1].y_position == pytest.approx (1000.0)
        assert plane.main_wing.sections[0].chord      == pytest.approx (200.0)
        assert plane.main_wing.position.tolist()      == pytest.approx ([10.0, 0.0, 5.0])
        assert plane.point_masses[0].mass             == pytest.approx (50.0)

        # same document in m and kg
        plane = build (parse (xml), Unit_Preferences ("m", "kg"))

        assert plane.main_wing.sections[1].y_position == pytest.approx (1.0)
        assert plane.main_wing.position.tolist()      == pytest.approx ([0.01, 0.0, 0.005])
        assert plane.point_masses[0].mass             == pytest.approx (0.05)
        assert plane.point_masses[0].coords           == pytest.approx ((0.0001, 0.0, 0.00002))

        # angles are not scaled
        assert plane.main_wing.sections[1].dihedral == 0.0

    def test_wing_only (self):

        xml = """<explane version="1.0">
                    <Units><length_unit_to_meter>1</length_unit_to_meter><mass_unit_to_kg>1</mass_unit_to_kg></Units>
                """ + wing_xml ("Single", "MAINWING", [section_xml (0.0, 0.2)]) + "</explane>"

        plane = build (parse (xml), Unit_Preferences ("m"))
        assert plane.name == "Single"
        assert plane.slots == ["main_wing"]
        assert len (plane.main_wing.sections) == 1

    def test_mixed_section (self):

        xml = plane_xml ([wing_xml ("Wing", "MAINWING", [section_xml (0.0, 0.2, foil="Flat", right_foil="LED3")])])
        section = build (parse (xml)).main_wing.sections[0]

        assert section.is_mixed
        assert section.foil_label == "Flat-LED3"

    def test_unknown_type_skipped (self):

        xml = plane_xml ([wing_xml ("Wing", "MAINWING", [section_xml (0.0, 0.2)]),
                          wing_xml ("Canard", "CANARD", [section_xml (0.0, 0.1)])])
        assert build (parse (xml)).slots == ["main_wing"]

    def test_no_components (self):

        plane = build (parse (plane_xml ([])))
        assert plane.components == []
        assert plane.span == 0.0

    def test_version_warning (self):

        with pytest.warns (SchemaVersionWarning):
            plane = build (parse (plane_xml ([wing_xml ("Wing", "MAINWING", [section_xml (0.0, 0.2)])],
                                             version="2.0")))
        assert plane.version == "2.0"
        assert plane.main_wing is not None

    def test_dict (self):

        d = example_plane ()._as_dict()

        assert d["name"] == "Example Plane"
        assert d["units"] == {"length_unit" : "mm", "mass_unit" : "kg"}
        assert len (d["main_wing"]["sections"]) == 2
        assert "second_wing" not in d


class Test_Build_Errors:

    def test_wrong_root (self):

        with pytest.raises (ModelError) as e:
            build (parse ("<plane/>"))
        assert e.value.field_path == "plane"

    def test_missing_units (self):

        with pytest.raises (ModelError) as e:
            build (parse ('<explane version="1.0"><Plane/></explane>'))
        assert e.value.field_path == "explane/Units"

    def test_missing_chord (self):

        xml = plane_xml ([wing_xml ("Wing", "MAINWING", [section_xml (0.0, 0.2), section_xml (1.0, 0.1)])])
        xml = xml.replace ("<Chord>      0.100</Chord>", "")

        with pytest.raises (ModelError) as e:
            build (parse (xml))
        assert e.value.field_path == "explane/Plane/wing[1]/Sections/Section[2]/Chord"
        assert "Section[2]/Chord" in str(e.value)

    def test_not_a_number (self):

        xml = plane_xml ([wing_xml ("Wing", "MAINWING", [section_xml (0.0, 0.2)])])
        xml = xml.replace ("<Dihedral>      0.000</Dihedral>", "<Dihedral>flat</Dihedral>")

        with pytest.raises (ModelError) as e:
            build (parse (xml))
        assert e.value.field_path.endswith ("Section[1]/Dihedral")

    def test_no_sections (self):

        xml = plane_xml ([wing_xml ("Wing", "MAINWING", [])])
        with pytest.raises (ModelError) as e:
            build (parse (xml))
        assert e.value.field_path == "explane/Plane/wing[1]/Sections"

    def test_invalid_position (self):

        xml = plane_xml ([wing_xml ("Wing", "MAINWING", [section_xml (0.0, 0.2)], position="1, 2")])
        with pytest.raises (ModelError):
            build (parse (xml))


class Test_Summary:

    def test_summary (self, tmp_path):

        pathFileName = write_example_plane (str(tmp_path))
        summary = Plane_Summary.on_file (pathFileName)

        assert summary.name == "Example Plane"
        assert summary.components == ["Main Wing", "Elevator", "Fin"]
        assert summary.mass_str == "400.000 g"
        assert summary.span_str == "2.000 m"
        assert summary.file_size > 0
        assert summary.size_str.endswith ("bytes")

    def test_empty_values (self):

        summary = Plane_Summary.on_root (parse (plane_xml ([], point_mass=None)))

        assert summary.components == []
        assert summary.mass_str == ''
        assert summary.span_str == ''
        assert summary.size_str == ''
