#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""

    3D coordinates of the sections of a wing component

    Each section profile is placed into the target frame of the CAD import

        x   chordwise
        y   spanwise
        z   vertical

    The steps are order dependent:

        scale by chord  ->  dihedral rotation  ->  twist about quarter chord
        ->  sweep  ->  spanwise placement  ->  axis permutation  ->  shift

    Dihedral of a section describes the panel outboard of it. So every section
    but the innermost is rotated and placed with the dihedral of the section
    inboard of it. The rotation is skipped if the section's own dihedral is 0.
"""

import numpy as np

from ..base.math_util       import rotx, rotate_xy, increments
from .aerofoil              import AerofoilProfile
from .errors                import AerofoilMissingError
from .plane                 import WingComponent, WingSection

import logging
from typing                 import TypeAlias
logger = logging.getLogger(__name__)
logger.setLevel(logging.WARNING)


# ---- Typing -------------------------------------

PointArray: TypeAlias = np.ndarray                   # n x 3


FIN_TYPE            = "FIN"
FIN_DIHEDRAL        = 90.0                      # fin dihedral is relative to the vertical plane

AXES_PERMUTATION    = [0, 2, 1]                 # -> chordwise, spanwise, vertical



#-------------------------------------------------------------------------------
# helper functions
#-------------------------------------------------------------------------------

def dihedrals_of (component : WingComponent) -> np.ndarray:
    """
    dihedral of each section - fin gets +90 degrees.
    A zero dihedral of the outermost section is replaced by the one of its inboard neighbour
    """

    dihedrals = np.array ([s.dihedral for s in component.sections], dtype=float)

    if component.type == FIN_TYPE:
        dihedrals = dihedrals + FIN_DIHEDRAL

    if len(dihedrals) > 1 and dihedrals[-1] == 0.0:
        dihedrals[-1] = dihedrals[-2]

    return dihedrals


def panel_dihedrals (dihedrals : np.ndarray) -> np.ndarray:
    """ dihedral of the panel inboard of each section - innermost section takes its own"""

    dihedrals = np.asarray (dihedrals, dtype=float)
    if dihedrals.size == 0:
        return dihedrals.copy()
    return np.concatenate (([dihedrals[0]], dihedrals[:-1]))


def span_increments (component : WingComponent) -> np.ndarray:
    """ spanwise length since the previous section - first section is its absolute position"""
    return increments ([s.y_position for s in component.sections])


def span_offsets (span_incs : np.ndarray, panel_dihs : np.ndarray) -> np.ndarray:
    """
    accumulated spanwise position of each section

    Returns:
        n x 2 array with width (spanwise) and height (vertical) of each section
    """

    rad = np.radians (panel_dihs)
    width  = np.cumsum (span_incs * np.cos (rad))
    height = np.cumsum (span_incs * np.sin (rad))
    return np.column_stack ((width, height))


def section_coords_2d (section : WingSection, profiles : dict[str, AerofoilProfile]) -> np.ndarray:
    """
    2D coordinates of the aerofoil of section - mixed sections get left
    followed by right profile

    Raises:
        AerofoilMissingError: aerofoil is not in profiles
    """

    foils = [section.left_foil] if not section.is_mixed else [section.left_foil, section.right_foil]

    coords = []
    for foil in foils:
        profile = profiles.get (foil)
        if profile is None:
            raise AerofoilMissingError (foil)
        coords.append (profile.coords)

    return np.vstack (coords)



#-------------------------------------------------------------------------------
# Transform
#-------------------------------------------------------------------------------

def transform (component : WingComponent,
               profiles : list[AerofoilProfile],
               shift : bool = True) -> list[PointArray]:
    """
    3D coordinates of all sections of component

    Args:
        component: the wing like component
        profiles: resolved aerofoil profiles
        shift: add the position of component to all coordinates
    Returns:
        one n x 3 array per section in outboard order
    Raises:
        AerofoilMissingError: a section aerofoil is not in profiles
    """

    profiles_by_name = {p.name : p for p in profiles}
    sections = component.sections

    dihedrals  = dihedrals_of (component)
    panel_dihs = panel_dihedrals (dihedrals)
    span_incs  = span_increments (component)
    offsets    = span_offsets (span_incs, panel_dihs)

    section_coords = []

    for i, section in enumerate (sections):

        coords_2d = section_coords_2d (section, profiles_by_name)

        # profile in x-y plane, z will be span
        coords = np.column_stack ((coords_2d, np.zeros (len(coords_2d))))

        # scale and dihedral rotation
        coords = coords * section.chord
        if dihedrals[i] != 0.0:
            coords = coords @ rotx (panel_dihs[i])

        # twist about quarter chord
        if section.twist != 0.0:
            coords[:,0], coords[:,1] = rotate_xy (coords[:,0], coords[:,1], section.twist,
                                                  x_pivot = section.chord / 4)

        # sweep
        coords[:,0] = coords[:,0] + section.x_offset

        # spanwise position
        coords[:,2] = coords[:,2] + offsets[i,0]
        coords[:,1] = coords[:,1] + offsets[i,1]

        coords = coords [:, AXES_PERMUTATION]

        if shift:
            coords = coords + component.position

        section_coords.append (coords)
        logger.debug (f"Processed {component.name} section {i+1} successfully")

    return section_coords
