#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""

    Plane model built from a parsed xflr5 plane document (explane xml)

    Plane                               - main class of the model
        |-- PointMass                   - inertia point masses of the plane
        |-- WingComponent               - main wing, second wing, elevator, fin
                |-- WingSection         - the sections of a component in outboard order

    Plane_Builder                       - walks the TreeNode tree and builds the Plane
    Plane_Summary                       - quick overview of a document without building

    Length and mass values are converted into the chosen units of Unit_Preferences.
"""

import os
import re
import warnings
from typing                 import NamedTuple

import numpy as np

from ..base.common_utils    import toDict
from .errors                import ModelError, SchemaVersionWarning
from .units                 import Unit_Preferences
from .xml_tree              import TreeNode, parse

import logging
logger = logging.getLogger(__name__)
logger.setLevel(logging.WARNING)


# ---- Model --------------------------------------

ROOT_TAG            = "explane"
SCHEMA_VERSION      = "1.0"
DEFAULT_PLANE_NAME  = "Plane Name"                  # name xflr5 gives a new plane

# component type in xml   ->  slot of Plane, label
COMPONENT_TYPES = {
    "MAINWING"   : ("main_wing",   "Main Wing"),
    "SECONDWING" : ("second_wing", "Second Wing"),
    "ELEVATOR"   : ("elevator",    "Elevator"),
    "FIN"        : ("fin",         "Fin"),
}

SLOTS = [slot for slot, _ in COMPONENT_TYPES.values()]



#-------------------------------------------------------------------------------
# helper functions
#-------------------------------------------------------------------------------

def tidy_foil_name (badName : str) -> str:
    """
    Aerofoil name of a section as used in the aerofoil library

    Characters not allowed in file names are removed, a '.dat' extension
    and a leading directory path are cut
    """
    name = re.sub (r'[<>:"|?*]', '', badName.strip())
    if name.endswith ('.dat'):
        name = name[:-4]
    if '\\' in name:
        name = name.rsplit ('\\', 1)[1]
    elif '/' in name:
        name = name.rsplit ('/', 1)[1]
    return name


def parse_coordinates (aStr : str) -> list[float]:
    """ coordinates like '  0.1,   0, 0.25' -> [0.1, 0.0, 0.25]  - raises ValueError """

    compact = ''.join (aStr.split())
    if not compact:
        return []
    return [float(v) for v in compact.split(',')]


def true_false (aStr : str | None) -> bool:
    return aStr is not None and aStr.strip().lower() == 'true'



#-------------------------------------------------------------------------------
# Model classes
#-------------------------------------------------------------------------------

class PointMass (NamedTuple):
    """ point mass of the plane used for inertia"""

    tag     : str
    mass    : float
    coords  : tuple [float, ...]


class Colour (NamedTuple):
    """ RGBA colour of a component - 0..255 """

    red     : int = 255
    green   : int = 255
    blue    : int = 255
    alpha   : int = 255


class WingSection (NamedTuple):
    """
    Section of a wing component

    Lengths are in the chosen length unit, angles in degrees.
    'twist' includes the tilt angle of the component.
    """

    y_position      : float                         # absolute spanwise position
    chord           : float
    x_offset        : float                         # leading edge offset - sweep
    dihedral        : float
    twist           : float
    left_foil       : str
    right_foil      : str
    x_panels        : int | None = None             # paneling is passed through
    x_panel_dist    : str | None = None
    y_panels        : int | None = None
    y_panel_dist    : str | None = None

    @property
    def is_mixed (self) -> bool:
        """ True if left and right side have different aerofoils"""
        return self.left_foil != self.right_foil

    @property
    def foil_label (self) -> str:
        """ aerofoil name of section - 'left-right' for mixed sections"""
        if self.is_mixed:
            return f"{self.left_foil}-{self.right_foil}"
        return self.left_foil

    def _as_dict (self) -> dict:
        d = {}
        toDict (d, "y_position",    self.y_position)
        toDict (d, "chord",         self.chord)
        toDict (d, "x_offset",      self.x_offset)
        toDict (d, "dihedral",      self.dihedral)
        toDict (d, "twist",         self.twist)
        toDict (d, "x_panels",      self.x_panels)
        toDict (d, "x_panel_dist",  self.x_panel_dist)
        toDict (d, "y_panels",      self.y_panels)
        toDict (d, "y_panel_dist",  self.y_panel_dist)
        toDict (d, "left_foil",     self.left_foil)
        toDict (d, "right_foil",    self.right_foil)
        return d



class WingComponent:
    """
    Wing like component of a plane - main wing, second wing, elevator or fin
    """

    def __init__(self, name : str, type : str, sections : list[WingSection],
                 description : str = '',
                 symmetric : bool = True, is_fin : bool = False,
                 is_double_fin : bool = False, is_sym_fin : bool = False,
                 colour : Colour = Colour(),
                 position = (0.0, 0.0, 0.0),
                 tilt_angle : float = 0.0,
                 mass : float = 0.0):

        self._name          = name
        self._type          = type
        self._description   = description
        self._symmetric     = symmetric
        self._is_fin        = is_fin
        self._is_double_fin = is_double_fin
        self._is_sym_fin    = is_sym_fin
        self._colour        = colour
        self._position      = np.array (position, dtype=float)
        self._position.setflags (write=False)
        self._tilt_angle    = tilt_angle
        self._mass          = mass
        self._sections      = tuple (sections)


    def __repr__(self) -> str:
        # overwritten to get a nice print string
        info = f"'{self.name}' {self.type} sections={len(self._sections)}"
        return f"<{type(self).__name__} {info}>"


    @property
    def name (self) -> str: return self._name

    @property
    def type (self) -> str:
        """ component type like 'MAINWING' or 'FIN' """
        return self._type

    @property
    def label (self) -> str:
        """ readable type like 'Main Wing' """
        return COMPONENT_TYPES.get (self._type, (None, self._type))[1]

    @property
    def description (self) -> str: return self._description

    @property
    def symmetric (self) -> bool: return self._symmetric

    @property
    def is_fin (self) -> bool: return self._is_fin

    @property
    def is_double_fin (self) -> bool: return self._is_double_fin

    @property
    def is_sym_fin (self) -> bool: return self._is_sym_fin

    @property
    def colour (self) -> Colour: return self._colour

    @property
    def position (self) -> np.ndarray:
        """ x,y,z position of the component in the plane - read only"""
        return self._position

    @property
    def tilt_angle (self) -> float: return self._tilt_angle

    @property
    def mass (self) -> float:
        """ volume mass of the component"""
        return self._mass

    @property
    def sections (self) -> tuple[WingSection, ...]:
        """ sections in outboard order"""
        return self._sections


    def _as_dict (self) -> dict:
        """ returns a data dict with the parameters of self"""

        d = {}
        toDict (d, "name",          self._name)
        toDict (d, "type",          self._type)
        toDict (d, "description",   self._description)
        toDict (d, "symmetric",     self._symmetric)
        toDict (d, "is_fin",        self._is_fin)
        toDict (d, "is_double_fin", self._is_double_fin)
        toDict (d, "is_sym_fin",    self._is_sym_fin)
        toDict (d, "colour",        list(self._colour))
        toDict (d, "position",      [round (float(v), 6) for v in self._position])
        toDict (d, "tilt_angle",    self._tilt_angle)
        toDict (d, "mass",          self._mass)
        d ["sections"] = [section._as_dict() for section in self._sections]
        return d



class Plane:
    """

    Main object - holds the model of a plane

    """

    def __init__(self, name : str = '', description : str = '',
                 version : str | None = SCHEMA_VERSION,
                 has_body : bool = False,
                 point_masses : list[PointMass] | None = None,
                 components : dict [str, WingComponent] | None = None,
                 unit_prefs : Unit_Preferences | None = None):

        self._name          = name
        self._description   = description
        self._version       = version
        self._has_body      = has_body
        self._point_masses  = tuple (point_masses) if point_masses else ()
        self._unit_prefs    = unit_prefs if unit_prefs else Unit_Preferences()

        self._components : dict [str, WingComponent] = {}
        for slot, component in (components or {}).items():
            if slot not in SLOTS:
                raise ValueError (f"Unknown component slot '{slot}'")
            self._components [slot] = component


    def __repr__(self) -> str:
        # overwritten to get a nice print string
        info = f"'{self.name}' {', '.join(self._components)}"
        return f"<{type(self).__name__} {info}>"


    @property
    def name (self) -> str: return self._name

    @property
    def description (self) -> str: return self._description

    @property
    def version (self) -> str | None:
        """ schema version of the source document"""
        return self._version

    @property
    def point_masses (self) -> tuple[PointMass, ...]: return self._point_masses

    @property
    def unit_prefs (self) -> Unit_Preferences:
        """ units of all length and mass values of self"""
        return self._unit_prefs

    @property
    def main_wing (self) -> WingComponent | None: return self._components.get ("main_wing")

    @property
    def second_wing (self) -> WingComponent | None: return self._components.get ("second_wing")

    @property
    def elevator (self) -> WingComponent | None: return self._components.get ("elevator")

    @property
    def fin (self) -> WingComponent | None: return self._components.get ("fin")

    def component (self, slot : str) -> WingComponent | None:
        """ component of slot like 'main_wing' """
        return self._components.get (slot)

    @property
    def components (self) -> list[WingComponent]:
        """ the existing components in fixed order main wing, second wing, elevator, fin"""
        return [self._components[slot] for slot in SLOTS if slot in self._components]

    @property
    def slots (self) -> list[str]:
        """ slot names of the existing components in fixed order"""
        return [slot for slot in SLOTS if slot in self._components]


    @property
    def total_mass (self) -> float:
        """ sum of point masses and volume masses of the components"""
        return sum (p.mass for p in self._point_masses) + sum (c.mass for c in self.components)

    @property
    def span (self) -> float:
        """ span of the widest component - twice the outermost section position """
        positions = [s.y_position for c in self.components for s in c.sections]
        return 2 * max (positions) if positions else 0.0


    def _as_dict (self) -> dict:
        """ returns a data dict with the parameters of self"""

        d = {}
        toDict (d, "name",          self._name)
        toDict (d, "description",   self._description)
        toDict (d, "version",       self._version)
        toDict (d, "has_body",      self._has_body)
        d ["units"] = self._unit_prefs._as_dict()
        d ["point_masses"] = [{"tag" : p.tag, "mass" : round (p.mass, 6), "coords" : list(p.coords)}
                              for p in self._point_masses]
        for slot in self.slots:
            d [slot] = self._components[slot]._as_dict()
        return d



#-------------------------------------------------------------------------------
# Builder
#-------------------------------------------------------------------------------

_MANDATORY = object()


class Plane_Builder:
    """
    Builds a Plane out of the TreeNode tree of an explane document
    """

    def __init__(self, root : TreeNode, unit_prefs : Unit_Preferences | None = None):

        self._root        = root
        self._unit_prefs  = unit_prefs if unit_prefs else Unit_Preferences()

        self._length_factor = 1.0
        self._mass_factor   = 1.0


    @property
    def length_factor (self) -> float:
        """ multiplier of document lengths into the chosen unit"""
        return self._length_factor

    @property
    def mass_factor (self) -> float:
        """ multiplier of document masses into the chosen unit"""
        return self._mass_factor


    # ---- leaf access

    def _text (self, node : TreeNode, tag : str, path : str, default=_MANDATORY) -> str:
        """ stripped text of child tag - ModelError if missing and mandatory"""

        child = node.all (tag)
        if not child:
            if default is _MANDATORY:
                raise ModelError ("Missing field", f"{path}/{tag}")
            return default
        return child[0].text.strip()


    def _float (self, node : TreeNode, tag : str, path : str, default=_MANDATORY) -> float:
        """ float of child tag - ModelError if missing or not numeric"""

        text = self._text (node, tag, path, default=None)
        if text is None or text == '':
            if default is _MANDATORY:
                raise ModelError ("Missing value", f"{path}/{tag}")
            return default
        try:
            return float (text)
        except ValueError:
            raise ModelError (f"'{text}' is not a number", f"{path}/{tag}") from None


    def _int (self, node : TreeNode, tag : str, path : str, default=_MANDATORY) -> int | None:

        value = self._float (node, tag, path, default=default)
        return int (value) if value is not None else None


    def _coords (self, node : TreeNode, tag : str, path : str, default=_MANDATORY) -> list[float]:
        """ comma separated coordinates of child tag"""

        text = self._text (node, tag, path, default=None)
        if not text:
            if default is _MANDATORY:
                raise ModelError ("Missing coordinates", f"{path}/{tag}")
            return list (default)
        try:
            return parse_coordinates (text)
        except ValueError:
            raise ModelError (f"'{text}' are not valid coordinates", f"{path}/{tag}") from None


    # ---- build

    def build (self) -> Plane:
        """ builds the Plane - raises ModelError on missing or invalid fields"""

        root = self._root
        path = root.tag

        if root.tag != ROOT_TAG:
            raise ModelError (f"Document root is '{root.tag}' and not '{ROOT_TAG}'", path)

        # version - a different version is only a warning

        version = root.attribute ("version")
        if version != SCHEMA_VERSION:
            warnings.warn (f"Document version '{version}' is not {SCHEMA_VERSION} - "
                           "the conversion may be incorrect", SchemaVersionWarning, stacklevel=2)

        # units

        units = root.all ("Units")
        if not units:
            raise ModelError ("Missing units", f"{path}/Units")
        doc_length = self._float (units[0], "length_unit_to_meter", f"{path}/Units")
        doc_mass   = self._float (units[0], "mass_unit_to_kg",      f"{path}/Units")

        self._length_factor = doc_length * self._unit_prefs.length_factor
        self._mass_factor   = doc_mass   * self._unit_prefs.mass_factor
        logger.debug (f"Unit factors length: {self._length_factor}  mass: {self._mass_factor}")

        # plane or a single exported wing

        planes = root.all ("Plane")
        if planes:
            plane_node = planes[0]
            plane_path = f"{path}/Plane"
            name         = self._text (plane_node, "Name", plane_path, default='')
            description  = self._text (plane_node, "Description", plane_path, default='')
            has_body     = true_false (self._text (plane_node, "has_body", plane_path, default=None))
            point_masses = self._point_masses (plane_node, plane_path)
        else:
            plane_node = root
            plane_path = path
            name, description, has_body, point_masses = '', '', False, []

        components = self._components (plane_node, plane_path)

        if not planes and components:
            name = next (iter (components.values())).name

        plane = Plane (name = name, description = description, version = version,
                       has_body = has_body, point_masses = point_masses,
                       components = components, unit_prefs = self._unit_prefs)

        logger.debug (f"{plane} built")
        return plane


    def _point_masses (self, plane_node : TreeNode, plane_path : str) -> list[PointMass]:
        """ the optional point masses of the plane """

        inertia = plane_node.all ("Inertia")
        if not inertia:
            return []

        point_masses = []
        mass_nodes = inertia[0].all ("Point_Mass")
        for i, node in enumerate (mass_nodes):
            mass_path = f"{plane_path}/Inertia/Point_Mass[{i+1}]"
            tag    = self._text   (node, "Tag", mass_path, default='')
            mass   = self._float  (node, "Mass", mass_path) * self._mass_factor
            coords = self._coords (node, "coordinates", mass_path, default=(0.0, 0.0, 0.0))
            coords = tuple (c * self._length_factor for c in coords)
            point_masses.append (PointMass (tag, mass, coords))
        return point_masses


    def _components (self, plane_node : TreeNode, plane_path : str) -> dict[str, WingComponent]:
        """ wing like components sorted into their slots """

        components = {}

        for i, wing_node in enumerate (plane_node.all ("wing")):
            wing_path = f"{plane_path}/wing[{i+1}]"
            wing_type = self._text (wing_node, "Type", wing_path)

            if wing_type not in COMPONENT_TYPES:
                logger.debug (f"Unknown wing type '{wing_type}' in {wing_path} - skipped")
                continue

            slot = COMPONENT_TYPES [wing_type][0]
            if slot in components:
                logger.warning (f"{wing_path}: second component of type '{wing_type}' replaces the first one")
            components [slot] = self._component (wing_node, wing_path, wing_type)

        return components


    def _component (self, node : TreeNode, path : str, wing_type : str) -> WingComponent:
        """ a single wing like component"""

        colour = Colour()
        colour_nodes = node.all ("Color")
        if colour_nodes:
            c_path = f"{path}/Color"
            colour = Colour (*(self._int (colour_nodes[0], tag, c_path, default=255)
                               for tag in ("red", "green", "blue", "alpha")))

        position = self._coords (node, "Position", path, default=(0.0, 0.0, 0.0))
        if len(position) != 3:
            raise ModelError (f"Position needs 3 coordinates - got {len(position)}", f"{path}/Position")
        position = [p * self._length_factor for p in position]

        tilt_angle = self._float (node, "Tilt_angle", path, default=0.0)

        mass = 0.0
        inertia = node.all ("Inertia")
        if inertia:
            mass = self._float (inertia[0], "Volume_Mass", f"{path}/Inertia", default=0.0) * self._mass_factor

        sections = self._sections (node, path, tilt_angle)

        return WingComponent (name          = self._text (node, "Name", path, default=''),
                              type          = wing_type,
                              sections      = sections,
                              description   = self._text (node, "Description", path, default=''),
                              symmetric     = true_false (self._text (node, "Symetric", path, default=None)),
                              is_fin        = true_false (self._text (node, "isFin", path, default=None)),
                              is_double_fin = true_false (self._text (node, "isDoubleFin", path, default=None)),
                              is_sym_fin    = true_false (self._text (node, "isSymFin", path, default=None)),
                              colour        = colour,
                              position      = position,
                              tilt_angle    = tilt_angle,
                              mass          = mass)


    def _sections (self, node : TreeNode, path : str, tilt_angle : float) -> list[WingSection]:
        """ the sections of a component in outboard order"""

        sections_node = node.find ("Sections")
        section_nodes = sections_node.all ("Section") if sections_node is not None else []
        if not section_nodes:
            raise ModelError ("Component has no sections", f"{path}/Sections")

        lf = self._length_factor
        sections = []
        for j, sec in enumerate (section_nodes):
            s_path = f"{path}/Sections/Section[{j+1}]"

            x_dist = self._text (sec, "x_panel_distribution", s_path, default=None)
            y_dist = self._text (sec, "y_panel_distribution", s_path, default=None)

            left  = tidy_foil_name (self._text (sec, "Left_Side_FoilName",  s_path))
            right = tidy_foil_name (self._text (sec, "Right_Side_FoilName", s_path))
            if not left:
                raise ModelError ("Missing aerofoil name", f"{s_path}/Left_Side_FoilName")
            if not right:
                raise ModelError ("Missing aerofoil name", f"{s_path}/Right_Side_FoilName")

            sections.append (WingSection (
                y_position   = self._float (sec, "y_position", s_path) * lf,
                chord        = self._float (sec, "Chord",      s_path) * lf,
                x_offset     = self._float (sec, "xOffset",    s_path) * lf,
                dihedral     = self._float (sec, "Dihedral",   s_path),
                twist        = self._float (sec, "Twist",      s_path) + tilt_angle,
                left_foil    = left,
                right_foil   = right,
                x_panels     = self._int (sec, "x_number_of_panels", s_path, default=None),
                x_panel_dist = x_dist.lower() if x_dist else None,
                y_panels     = self._int (sec, "y_number_of_panels", s_path, default=None),
                y_panel_dist = y_dist.lower() if y_dist else None))

        return sections



def build (root : TreeNode, unit_prefs : Unit_Preferences | None = None) -> Plane:
    """
    Builds the Plane model of the parsed explane document root

    Args:
        root: root TreeNode of the document
        unit_prefs: the target length and mass units
    Returns:
        the Plane with all values converted into the target units
    """
    return Plane_Builder (root, unit_prefs).build()



#-------------------------------------------------------------------------------
# Summary
#-------------------------------------------------------------------------------

class Plane_Summary:
    """
    Quick overview of an explane document - name, components, mass and span

    Mass and span are based on the document units (SI) and formatted
    in 'g'/'kg' and 'mm'/'m'
    """

    def __init__(self, name : str = '', description : str = '',
                 components : list[str] | None = None,
                 mass : float = 0.0, span : float = 0.0, file_size : int | None = None):

        self.name        = name
        self.description = description
        self.components  = list(components) if components else []
        self.mass        = mass                         # in kg
        self.span        = span                         # in m
        self.file_size   = file_size                    # in bytes


    def __repr__(self) -> str:
        return f"<{type(self).__name__} '{self.name}' {', '.join (self.components)}>"


    @classmethod
    def on_root (cls, root : TreeNode, file_size : int | None = None) -> 'Plane_Summary':
        """ summary of a parsed document - missing or invalid values are skipped """

        def _num (text) -> float:
            try:
                return float (text)
            except (TypeError, ValueError):
                return 0.0

        length_factor = _num (root.text_of ("Units/length_unit_to_meter"))
        mass_factor   = _num (root.text_of ("Units/mass_unit_to_kg"))

        plane_node = root.find ("Plane")
        if plane_node is not None:
            name = plane_node.text_of ("Name", '')
            desc = plane_node.text_of ("Description", '')
        else:
            plane_node = root                           # single exported wing
            name, desc = '', ''

        components = []
        mass       = 0.0
        semi_span  = 0.0

        inertia = plane_node.find ("Inertia")
        for p in inertia.all ("Point_Mass") if inertia is not None else []:
            mass += _num (p.text_of ("Mass"))

        for wing in plane_node.all ("wing"):
            wing_type = wing.text_of ("Type", '')
            if wing_type in COMPONENT_TYPES:
                components.append (COMPONENT_TYPES [wing_type][1])
            mass += _num (wing.text_of ("Inertia/Volume_Mass"))
            sections = wing.find ("Sections")
            for section in sections.all ("Section") if sections is not None else []:
                semi_span = max (semi_span, _num (section.text_of ("y_position")))

        return cls (name = name, description = desc, components = components,
                    mass = mass * mass_factor,
                    span = 2 * semi_span * length_factor,
                    file_size = file_size)


    @classmethod
    def on_file (cls, pathFileName : str) -> 'Plane_Summary':
        """ summary of an explane xml file"""
        return cls.on_root (parse (pathFileName), file_size = os.path.getsize (pathFileName))


    @property
    def mass_str (self) -> str:
        """ mass like '410.000 g' or '1.250 kg' - empty if there is no mass"""
        if self.mass <= 0.0:
            return ''
        elif self.mass < 1.0:
            return f"{self.mass * 1000:.3f} g"
        else:
            return f"{self.mass:.3f} kg"

    @property
    def span_str (self) -> str:
        """ span like '850.000 mm' or '2.500 m' - empty if there is no span"""
        if self.span <= 0.0:
            return ''
        elif self.span < 1.0:
            return f"{self.span * 1000:.3f} mm"
        else:
            return f"{self.span:.3f} m"

    @property
    def size_str (self) -> str:
        return f"{self.file_size} bytes" if self.file_size is not None else ''
