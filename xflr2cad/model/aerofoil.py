#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""

    Aerofoil profiles and the library of aerofoil files

    AerofoilProfile                     - 2D coordinates of a .dat file
    Aerofoil_Library                    - all profiles of a folder (recursive)
        |-- conflicts                   - files having the same aerofoil name

    Two .dat conventions are detected by the first coordinate line:

        Selig       x of the first point is 1.0 (trailing edge) - closed loop
        Lednicer    first line holds the number of upper and lower points
                    followed by the upper and the lower block, both from
                    leading to trailing edge
"""

import os
from enum                   import StrEnum
from pathlib                import Path

import numpy as np

from ..base.common_utils    import Parameters, fromDict, toDict
from .errors                import MalformedProfileError, NameConflictError, AerofoilMissingError

import logging
from typing                 import TypeAlias
logger = logging.getLogger(__name__)
logger.setLevel(logging.WARNING)


# ---- Typing -------------------------------------

Conflict: TypeAlias = "tuple[AerofoilProfile, AerofoilProfile]"


#-------------------------------------------------------------------------------
# enums
#-------------------------------------------------------------------------------

class Profile_Format (StrEnum):
    """ storage convention of an aerofoil .dat file """
    SELIG       = "Selig"
    LEDNICER    = "Lednicer"


PROFILE_EXTENSION = ".dat"



#-------------------------------------------------------------------------------
# Profile
#-------------------------------------------------------------------------------

class AerofoilProfile:
    """
    2D aerofoil profile read from a .dat file

    The coordinates are a single closed loop - Lednicer files are
    rearranged to upper side followed by the reversed lower side.
    """

    def __init__(self, name : str, coords,
                 format : Profile_Format = Profile_Format.SELIG,
                 num_points : tuple[int, int] | None = None,
                 fileName : str = '', folder : str = ''):
        """
        Args:
            name: aerofoil name - first line of file
            coords: n x 2 coordinates
            format: detected file format
            num_points: number of points upper and lower side
            fileName: file name like 'MH32.dat'
            folder: directory of the file
        """

        coords = np.array (coords, dtype=float).reshape (-1, 2)
        coords.setflags (write=False)

        self._name       = name
        self._coords     = coords
        self._format     = Profile_Format (format)
        self._num_points = tuple (num_points) if num_points else (len(coords), len(coords))
        self._fileName   = fileName
        self._folder     = folder


    @classmethod
    def onFile (cls, pathFileName : str) -> 'AerofoilProfile':
        """
        Alternate constructor - reads and detects the format of pathFileName

        Raises:
            MalformedProfileError: file couldn't be read or has an unknown format
        """
        try:
            with open (pathFileName, 'r', encoding='utf-8', errors='replace') as f:
                file_lines = f.readlines()
        except OSError as e:
            raise MalformedProfileError (pathFileName, str(e)) from e

        return cls._onLines (file_lines, pathFileName)


    @classmethod
    def _onLines (cls, file_lines : list[str], pathFileName : str = '') -> 'AerofoilProfile':
        """ profile of the lines of a .dat file """

        fileName = os.path.basename (pathFileName)
        folder   = os.path.dirname  (pathFileName)

        if not file_lines or not file_lines[0].strip():
            raise MalformedProfileError (fileName, "missing aerofoil name in first line")
        name = file_lines[0].strip()

        points = []
        for i, line in enumerate (file_lines[1:]):
            splitline = line.strip().split()                # will remove all extra spaces
            if not splitline:
                continue
            if len(splitline) == 1:                         # couldn't split line - try tab as separator
                splitline = line.strip().split("\t",1)
            if len(splitline) < 2:
                raise MalformedProfileError (fileName, f"line {i+2} is not a coordinate pair")
            try:
                points.append ((float(splitline[0]), float(splitline[1])))
            except ValueError:
                raise MalformedProfileError (fileName, f"line {i+2} is not a coordinate pair") from None

        if not points:
            raise MalformedProfileError (fileName, "no coordinates")

        first, second = points[0]

        if first == round(first) and first > 1:

            # Lednicer - number of points of upper and lower side

            if second != round(second) or second < 1:
                raise MalformedProfileError (fileName, f"invalid number of lower side points {second}")
            n_upper, n_lower = int(first), int(second)
            coords = points[1:]
            if len(coords) < n_upper + n_lower:
                raise MalformedProfileError (fileName, f"{n_upper + n_lower} points declared, "
                                                       f"{len(coords)} found")
            if len(coords) > n_upper + n_lower:
                logger.warning (f"Aerofoil file '{fileName}' has {len(coords) - n_upper - n_lower} "
                                 "extra points - ignored")
            upper = coords [:n_upper]
            lower = coords [n_upper:n_upper + n_lower]
            profile = cls (name, upper + lower[::-1], format=Profile_Format.LEDNICER,
                           num_points=(n_upper, n_lower), fileName=fileName, folder=folder)

        elif round(first, 2) == 1.0:

            # Selig - closed loop starting at trailing edge

            profile = cls (name, points, format=Profile_Format.SELIG,
                           num_points=(len(points), len(points)), fileName=fileName, folder=folder)
        else:
            raise MalformedProfileError (fileName, f"unknown header value {first}")

        logger.debug (f"Loaded file {fileName} successfully as {profile}")
        return profile


    @classmethod
    def onDict (cls, dataDict : dict) -> 'AerofoilProfile':
        """ Alternate constructor for cached profile """
        return cls (fromDict (dataDict, "name", ''),
                    fromDict (dataDict, "coords", []),
                    format     = fromDict (dataDict, "format", Profile_Format.SELIG.value),
                    num_points = fromDict (dataDict, "num_points", None),
                    fileName   = fromDict (dataDict, "file", ''),
                    folder     = fromDict (dataDict, "folder", ''))

    def _as_dict (self) -> dict:
        """ returns a data dict with the parameters of self"""
        d = {}
        toDict (d, "name",       self._name)
        toDict (d, "file",       self._fileName)
        toDict (d, "folder",     self._folder)
        toDict (d, "format",     self._format.value)
        toDict (d, "num_points", list(self._num_points))
        d ["coords"] = self._coords.tolist()                # full precision
        return d


    def __repr__(self) -> str:
        # overwritten to get a nice print string
        info = f"'{self.name}' {self.format.value} {len(self._coords)} points"
        return f"<{type(self).__name__} {info}>"


    @property
    def name (self) -> str: return self._name

    @property
    def coords (self) -> np.ndarray:
        """ n x 2 coordinates - read only"""
        return self._coords

    @property
    def format (self) -> Profile_Format: return self._format

    @property
    def num_points (self) -> tuple[int, int]:
        """ number of points upper and lower side - Selig has both the total """
        return self._num_points

    @property
    def nPoints (self) -> int: return len (self._coords)

    @property
    def fileName (self) -> str:
        """ filename of aerofoil like 'MH32.dat' """
        return self._fileName

    @property
    def folder (self) -> str: return self._folder

    @property
    def pathFileName (self) -> str:
        return os.path.join (self._folder, self._fileName)



#-------------------------------------------------------------------------------
# Library
#-------------------------------------------------------------------------------

def profile_files (folder : str) -> list[str]:
    """ all aerofoil files in folder and its subfolders - sorted """

    if not os.path.isdir (folder):
        logger.warning (f"Aerofoil folder '{folder}' doesn't exist")
        return []
    files = [str(p) for p in Path(folder).rglob ('*')
                    if p.is_file() and p.suffix.lower() == PROFILE_EXTENSION]
    return sorted (files)


class Aerofoil_Library:
    """
    Library of the aerofoil profiles in a folder

    Files having the same aerofoil name are conflicts. They are reported and
    must be resolved by a choice from outside before the resolved profile set
    is available.
    """

    def __init__(self, folder : str | None = None):

        self._folder    = folder
        self._loaded : list[AerofoilProfile] = []           # all profiles in file order
        self._choices : dict[str, AerofoilProfile] = {}     # resolution of conflicts by name


    def __repr__(self) -> str:
        info = f"'{self._folder}' {len(self._loaded)} profiles"
        if self.detect_conflicts():
            info += f" {len(self.detect_conflicts())} conflicts"
        return f"<{type(self).__name__} {info}>"


    @property
    def folder (self) -> str | None: return self._folder

    @property
    def isLoaded (self) -> bool:
        return bool (self._loaded)


    def load (self) -> 'Aerofoil_Library':
        """
        (Re)loads all profiles of folder from disk.
        The content of self is replaced only if all files could be read.

        Raises:
            MalformedProfileError: a file has an unknown format
        """

        if not self._folder:
            raise ValueError ("Aerofoil library has no folder")

        loaded = [AerofoilProfile.onFile (f) for f in profile_files (self._folder)]

        # replace content as a whole - previous choices are void
        self._loaded  = loaded
        self._choices = {}

        logger.info (f"{len(loaded)} aerofoils loaded from '{self._folder}'")
        for a, b in self.detect_conflicts():
            logger.warning (f"Aerofoil name '{a.name}' of '{b.pathFileName}' is already used by '{a.pathFileName}'")
        return self

    def reload (self) -> 'Aerofoil_Library':
        """ reloads all profiles from disk - same as load """
        return self.load()


    @property
    def all_profiles (self) -> list[AerofoilProfile]:
        """ all loaded profiles including conflicting ones in file order"""
        return list (self._loaded)

    @property
    def profiles (self) -> list[AerofoilProfile]:
        """ profiles having a unique name - conflicting profiles are not included"""
        conflicting = self._conflicting_names ()
        return [p for p in self._loaded if p.name not in conflicting]

    @property
    def conflicts (self) -> list[Conflict]:
        """ all conflicts - pairs of first profile and another profile with the same name"""
        first_of : dict[str, AerofoilProfile] = {}
        conflicts = []
        for profile in self._loaded:
            if profile.name in first_of:
                conflicts.append ((first_of [profile.name], profile))
            else:
                first_of [profile.name] = profile
        return conflicts

    def _conflicting_names (self) -> set[str]:
        return {a.name for a, _ in self.conflicts}


    def detect_conflicts (self) -> list[Conflict]:
        """ conflicts which are not resolved yet """
        return [c for c in self.conflicts if c[0].name not in self._choices]


    def candidates (self, name : str) -> list[AerofoilProfile]:
        """ all profiles having name"""
        return [p for p in self._loaded if p.name == name]


    def apply_resolution (self, choices : dict):
        """
        Resolves conflicts with the chosen profile for each conflicting name

        Args:
            choices: aerofoil name -> chosen AerofoilProfile or its path file name
        """

        conflicting = self._conflicting_names ()

        for name, choice in choices.items():
            if name not in conflicting:
                raise ValueError (f"Aerofoil '{name}' has no conflict to resolve")

            candidates = self.candidates (name)
            if isinstance (choice, AerofoilProfile):
                chosen = next ((p for p in candidates if p is choice), None)
            else:
                choice_path = os.path.normpath (str(choice))
                chosen = next ((p for p in candidates
                                if os.path.normpath (p.pathFileName) == choice_path
                                or p.fileName == choice), None)
            if chosen is None:
                raise ValueError (f"'{choice}' is not a file of aerofoil '{name}'")

            self._choices [name] = chosen
            logger.info (f"Aerofoil '{name}' resolved to '{chosen.pathFileName}'")


    def resolved_profiles (self) -> list[AerofoilProfile]:
        """
        one profile per name - conflicts resolved by the choices

        Raises:
            NameConflictError: there are unresolved conflicts
        """
        open_conflicts = self.detect_conflicts ()
        if open_conflicts:
            raise NameConflictError (open_conflicts)

        resolved = []
        names = set()
        for profile in self._loaded:
            if profile.name in names:
                continue
            names.add (profile.name)
            resolved.append (self._choices.get (profile.name, profile))
        return resolved


    def profile (self, name : str) -> AerofoilProfile:
        """ resolved profile with name - raises AerofoilMissingError"""

        for profile in self.resolved_profiles():
            if profile.name == name:
                return profile
        raise AerofoilMissingError (name)

    @property
    def names (self) -> list[str]:
        """ sorted unique names of all profiles"""
        return sorted ({p.name for p in self._loaded})


    # ---- cache

    def _as_dict (self) -> dict:
        """ returns a data dict with the content of self"""
        d = {}
        toDict (d, "folder",   self._folder)
        d ["profiles"] = [p._as_dict() for p in self._loaded]
        d ["choices"]  = {name : p.pathFileName for name, p in self._choices.items()}
        return d

    def save_cache (self, pathFileName : str) -> bool:
        """ writes self into a json cache file"""
        return Parameters (pathFileName).write_dataDict (self._as_dict(), dataName='Aerofoil cache')


    @classmethod
    def onCache (cls, pathFileName : str) -> 'Aerofoil_Library':
        """ Alternate constructor - library of a json cache file. Empty if there is no cache"""

        dataDict = Parameters (pathFileName).get_dataDict()

        library = cls (fromDict (dataDict, "folder", None))
        library._loaded = [AerofoilProfile.onDict (d) for d in fromDict (dataDict, "profiles", [])]

        choices = fromDict (dataDict, "choices", {})
        if choices:
            library.apply_resolution (choices)

        logger.debug (f"{library} read from cache '{pathFileName}'")
        return library



def load_library (folder : str) -> tuple[list[AerofoilProfile], list[Conflict]]:
    """
    Loads all aerofoil files of folder

    Returns:
        profiles: profiles with a unique name
        conflicts: pairs of profiles having the same name
    """
    library = Aerofoil_Library (folder).load()
    return library.profiles, library.conflicts
