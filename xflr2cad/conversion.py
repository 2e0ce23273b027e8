#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""

Conversion of an xflr5 plane xml file into section coordinate files

    Conversion                          - a single conversion run
        |-- Conversion_Settings         - units, shift sections, folders ...
        |-- Aerofoil_Library            - cached aerofoils of the aerofoil folder
        |-- Conversion_Result           - plane, coordinates and errors of each component

The run is  parse -> build plane -> transform each component -> export
"""

import os

import numpy as np

from .base.common_utils         import Settings, PathHandler, fromDict, toDict
from .model.aerofoil            import Aerofoil_Library
from .model.errors              import AerofoilMissingError, ModelError, ParseError
from .model.exporter            import Exporter_Abstract, Exporter_Sections, Exporter_Model
from .model.plane               import Plane, build
from .model.section_geometry    import transform
from .model.units               import Unit_Preferences
from .model.xml_tree            import parse

import logging
logger = logging.getLogger(__name__)
logger.setLevel(logging.DEBUG)



class Conversion_Settings:
    """ settings of a conversion - read from and written to a settings dict """

    AEROFOIL_DIR    = "DAT Files"
    XML_DIR         = "XML Files"
    OUTPUT_DIR      = "XFLR to NX"
    CACHE_FILE      = "aerofoil_cache.json"

    def __init__(self, dataDict : dict | None = None):

        dataDict = dataDict if dataDict else {}

        self.unit_prefs     = Unit_Preferences.onDict (dataDict)
        self.shift_sections = fromDict (dataDict, "shift_sections", True)
        self.auto_reload    = fromDict (dataDict, "auto_reload", True)
        self.export_file    = fromDict (dataDict, "export_file", True)
        self.export_model   = fromDict (dataDict, "export_model", True)
        self.aerofoil_dir   = fromDict (dataDict, "aerofoil_dir", self.AEROFOIL_DIR)
        self.xml_dir        = fromDict (dataDict, "xml_dir", self.XML_DIR)
        self.output_dir     = fromDict (dataDict, "output_dir", self.OUTPUT_DIR)
        self.cache_file     = fromDict (dataDict, "cache_file", self.CACHE_FILE)


    @classmethod
    def onSettings (cls, settings : Settings) -> 'Conversion_Settings':
        """ Alternate constructor with the content of a settings file"""
        return cls (settings.get_dataDict())


    def _as_dict (self) -> dict:
        """ returns a data dict with the parameters of self"""

        d = self.unit_prefs._as_dict()
        toDict (d, "shift_sections", self.shift_sections)
        toDict (d, "auto_reload",    self.auto_reload)
        toDict (d, "export_file",    self.export_file)
        toDict (d, "export_model",   self.export_model)
        toDict (d, "aerofoil_dir",   self.aerofoil_dir)
        toDict (d, "xml_dir",        self.xml_dir)
        toDict (d, "output_dir",     self.output_dir)
        toDict (d, "cache_file",     self.cache_file)
        return d


    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.unit_prefs} shift={self.shift_sections}>"



class Conversion_Result:
    """ result of a conversion run"""

    def __init__(self, plane : Plane):

        self.plane = plane
        self.coords : dict [str, list[np.ndarray]] = {}         # slot -> section coordinates
        self.errors : dict [str, Exception] = {}                # slot -> error of transform
        self.files  : list [str] = []                           # written files
        self.run_dir : str | None = None

    def __repr__(self) -> str:
        info = f"'{self.plane.name}' ok: {', '.join(self.coords)}"
        if self.errors:
            info += f" failed: {', '.join(self.errors)}"
        return f"<{type(self).__name__} {info}>"

    @property
    def ok (self) -> bool:
        """ True if all components were transformed"""
        return not self.errors



class Conversion:
    """
    Converts xflr5 plane xml files with the aerofoils of the aerofoil library
    """

    def __init__(self, settings : Conversion_Settings | None = None,
                 workingDir : str | None = None,
                 library : Aerofoil_Library | None = None):
        """
        Args:
            settings: -optional- conversion settings - default settings if None
            workingDir: -optional- base directory of the relative folders
            library: -optional- aerofoil library to use instead of the cached one
        """

        self._settings    = settings if settings else Conversion_Settings()
        self._pathHandler = PathHandler (workingDir=workingDir)
        self._library     = library


    @property
    def settings (self) -> Conversion_Settings: return self._settings

    @property
    def workingDir (self) -> str: return self._pathHandler.workingDir

    @property
    def aerofoil_dir_abs (self) -> str:
        return self._pathHandler.fullFilePath (self._settings.aerofoil_dir)

    @property
    def cache_file_abs (self) -> str:
        return self._pathHandler.fullFilePath (self._settings.cache_file)


    # ---- aerofoils

    def reload_library (self, choices : dict | None = None) -> Aerofoil_Library:
        """
        reads all aerofoil files from disk and writes the cache - replaces the current library

        Args:
            choices: -optional- aerofoil name -> chosen file to resolve name conflicts
        """

        library = Aerofoil_Library (self.aerofoil_dir_abs).load()
        if choices:
            library.apply_resolution (choices)
        library.save_cache (self.cache_file_abs)
        self._library = library
        return library


    @property
    def library (self) -> Aerofoil_Library:
        """ the aerofoil library - either reloaded (auto reload) or from the cache"""

        if self._library is None:
            if self._settings.auto_reload or not os.path.isfile (self.cache_file_abs):
                self.reload_library ()
            else:
                self._library = Aerofoil_Library.onCache (self.cache_file_abs)
        return self._library


    # ---- setup

    def setup (self, settings : Settings | None = None) -> Aerofoil_Library:
        """
        creates the aerofoil, xml and output folder, writes the settings
        if there is no settings file yet and builds the aerofoil cache
        """

        for folder in (self._settings.aerofoil_dir, self._settings.xml_dir, self._settings.output_dir):
            self._pathHandler.ensure_dir (folder)

        if settings is not None and not settings.exists:
            settings.write_dataDict (self._settings._as_dict())

        library = self.reload_library ()
        logger.info (f"Setup in '{self.workingDir}' finished - {len(library.all_profiles)} aerofoils")
        return library


    # ---- conversion

    def run (self, xml_pathFileName : str) -> Conversion_Result:
        """
        converts xml file

        Raises:
            ParseError: no valid xml file
            ModelError: missing or invalid data in xml file
            NameConflictError: unresolved aerofoil name conflicts
        """

        xml_pathFileName = self._pathHandler.fullFilePath (xml_pathFileName)

        if os.path.splitext (xml_pathFileName)[1].lower() != '.xml':
            raise ParseError (f"'{xml_pathFileName}' is not an .xml file")
        if not os.path.isfile (xml_pathFileName):
            raise ParseError (f"xml file '{xml_pathFileName}' doesn't exist")

        root = parse (xml_pathFileName)
        logger.debug ("XML imported successfully")

        plane = build (root, self._settings.unit_prefs)
        logger.debug ("Plane data format converted successfully")

        if not plane.components:
            raise ModelError ("No wing components found", root.tag)
        logger.debug (f"Sections data identified successfully for {len(plane.components)} component(s)")

        profiles = self.library.resolved_profiles ()

        result = Conversion_Result (plane)

        for slot in plane.slots:
            component = plane.component (slot)
            try:
                coords = transform (component, profiles, shift=self._settings.shift_sections)
            except AerofoilMissingError as e:
                logger.error (f"{component.label} '{component.name}': {e}")
                result.errors [slot] = e
                continue

            result.coords [slot] = coords

            if self._settings.export_file:
                exporter = Exporter_Sections (self._run_dir (result, xml_pathFileName))
                result.files.extend (exporter.export_component (component, coords))

        # nothing converted - no output directory
        if self._settings.export_model and result.coords:
            exporter = Exporter_Model (self._run_dir (result, xml_pathFileName))
            result.files.append (exporter.export_plane (plane, xml_pathFileName))

        logger.info (f"{result}")
        return result


    def _run_dir (self, result : Conversion_Result, xml_pathFileName : str) -> str:
        """ the output directory of the run - created with the first export"""

        if result.run_dir is None:
            result.run_dir = Exporter_Abstract.new_run_dir (self._settings.output_dir, xml_pathFileName,
                                                            workingDir=self.workingDir)
        return result.run_dir
