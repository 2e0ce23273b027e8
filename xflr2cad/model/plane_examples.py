#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""

    Example planes and aerofoils for tests and trials

    plane_xml                           - explane document with some wings
        |-- wing_xml                    - a wing like component
                |-- section_xml         - a section of a component

    FLAT_DAT, LEDNICER_DAT              - aerofoil files in Selig and Lednicer format
"""

import os


# Selig - closed loop starting at trailing edge

FLAT_DAT = """Flat
  1.00000   0.00000
  0.50000   0.05000
  0.00000   0.00000
  0.50000  -0.05000
  1.00000   0.00000
"""

# Lednicer - upper and lower side from leading to trailing edge

LEDNICER_DAT = """LED3

  3.   3.

  0.00000   0.00000
  0.50000   0.06000
  1.00000   0.00000

  0.00000   0.00000
  0.50000  -0.02000
  1.00000   0.00000
"""


def write_file (folder : str, fileName : str, content : str) -> str:
    """ writes a text file - returns its path """

    os.makedirs (folder, exist_ok=True)
    pathFileName = os.path.join (folder, fileName)
    with open (pathFileName, 'w', encoding='utf-8') as f:
        f.write (content)
    return pathFileName


def write_example_aerofoils (folder : str) -> list[str]:
    """ Flat and LED3 aerofoils in folder"""
    return [write_file (folder, "Flat.dat", FLAT_DAT),
            write_file (folder, "LED3.dat", LEDNICER_DAT)]



def section_xml (y : float, chord : float, x_offset : float = 0.0,
                 dihedral : float = 0.0, twist : float = 0.0,
                 foil : str = "Flat", right_foil : str | None = None) -> str:
    """ a Section element """

    right_foil = right_foil if right_foil else foil
    return f"""
            <Section>
                <y_position>{y:11.3f}</y_position>
                <Chord>{chord:11.3f}</Chord>
                <xOffset>{x_offset:11.3f}</xOffset>
                <Dihedral>{dihedral:11.3f}</Dihedral>
                <Twist>{twist:11.3f}</Twist>
                <x_number_of_panels>13</x_number_of_panels>
                <x_panel_distribution>COSINE</x_panel_distribution>
                <y_number_of_panels>5</y_number_of_panels>
                <y_panel_distribution>UNIFORM</y_panel_distribution>
                <Left_Side_FoilName>{foil}</Left_Side_FoilName>
                <Right_Side_FoilName>{right_foil}</Right_Side_FoilName>
            </Section>"""


def wing_xml (name : str, type : str, sections : list[str],
              position : str = "0, 0, 0", tilt_angle : float = 0.0,
              volume_mass : float = 0.0, is_fin : bool = False) -> str:
    """ a wing element with sections"""

    return f"""
        <wing>
            <Name>{name}</Name>
            <Type>{type}</Type>
            <Color>
                <red>100</red>
                <green>150</green>
                <blue>200</blue>
                <alpha>255</alpha>
            </Color>
            <Description>{name} of example</Description>
            <Position>{position}</Position>
            <Tilt_angle>{tilt_angle:.3f}</Tilt_angle>
            <Symetric>true</Symetric>
            <isFin>{str(is_fin).lower()}</isFin>
            <isDoubleFin>false</isDoubleFin>
            <isSymFin>false</isSymFin>
            <Inertia>
                <Volume_Mass>{volume_mass:.3f}</Volume_Mass>
            </Inertia>
            <Sections>{''.join (sections)}
            </Sections>
        </wing>"""


def plane_xml (wings : list[str], name : str = "Example Plane",
               version : str = "1.0",
               length_unit_to_meter : float = 1.0, mass_unit_to_kg : float = 1.0,
               point_mass : float | None = 0.1) -> str:
    """ an explane document with wings"""

    inertia = ''
    if point_mass is not None:
        inertia = f"""
        <Inertia>
            <Point_Mass>
                <Tag>Battery</Tag>
                <Mass>{point_mass:.3f}</Mass>
                <coordinates>  0.1,   0, 0.02</coordinates>
            </Point_Mass>
        </Inertia>"""

    return f"""<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE explane>
<explane version="{version}">
    <Units>
        <length_unit_to_meter>{length_unit_to_meter}</length_unit_to_meter>
        <mass_unit_to_kg>{mass_unit_to_kg}</mass_unit_to_kg>
    </Units>
    <Plane>
        <Name>{name}</Name>
        <Description>Example of xflr2cad</Description>{inertia}
        <has_body>false</has_body>{''.join (wings)}
    </Plane>
</explane>
"""


def example_plane_xml () -> str:
    """ plane with a two section main wing, an elevator and a fin"""

    main_wing = wing_xml ("Main Wing", "MAINWING",
                          [section_xml (0.0, 0.2, dihedral=0.0),
                           section_xml (1.0, 0.1, x_offset=0.05, dihedral=5.0)],
                          volume_mass=0.3)
    elevator  = wing_xml ("Elevator", "ELEVATOR",
                          [section_xml (0.0, 0.1, foil="LED3"),
                           section_xml (0.2, 0.08, foil="LED3")],
                          position="0.8, 0, 0.05", tilt_angle=-1.0)
    fin       = wing_xml ("Fin", "FIN",
                          [section_xml (0.0, 0.1),
                           section_xml (0.15, 0.07)],
                          position="0.8, 0, 0", is_fin=True)
    return plane_xml ([main_wing, elevator, fin])


def write_example_plane (folder : str, fileName : str = "Example.xml", content : str | None = None) -> str:
    """ writes an explane document - default is the example plane. Returns its path"""

    content = content if content is not None else example_plane_xml()
    return write_file (folder, fileName, content)
