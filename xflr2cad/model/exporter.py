#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""

Handle export of section coordinates and plane model to files

    <output dir>/<xml name>/<date time>/<component> <i> (<aerofoil>).dat
                                       /<plane name>.json

"""

import os
import re
from datetime               import datetime

import numpy as np

from ..base.common_utils    import PathHandler, Parameters, tidy_identifier
from .plane                 import Plane, WingComponent, DEFAULT_PLANE_NAME

import logging
logger = logging.getLogger(__name__)
logger.setLevel(logging.DEBUG)


DATE_TIME_FORMAT = "%Y-%m-%d %H-%M-%S"


def tidy_file_name (aName : str) -> str:
    """ removes characters not allowed in a file name"""
    return re.sub (r'[<>:"/\\|?*]', '', aName).strip()



class Exporter_Abstract:
    """
    Abstract base class for export classes
    """

    def __init__(self, export_dir : str, workingDir : str | None = None):
        """
        Args:
            export_dir: directory of the export - relative to workingDir or absolute
            workingDir: -optional- base of a relative export_dir
        """
        self._pathHandler = PathHandler (workingDir=workingDir)
        self._export_dir  = export_dir

    @property
    def export_dir (self) -> str:
        """the directory for export - path is relative to working dir or absolute """
        return self._export_dir

    @property
    def export_dir_abs (self) -> str:
        """the directory for export including working dir """
        return self._pathHandler.fullFilePath (self._export_dir)

    def _ensure_export_dir (self) -> str:
        """ ensure that export directory exists """
        return self._pathHandler.ensure_dir (self._export_dir)


    @classmethod
    def new_run_dir (cls, output_dir : str, xml_pathFileName : str,
                     workingDir : str | None = None, now : datetime | None = None) -> str:
        """
        creates a new directory <output_dir>/<xml name>/<date time> for a conversion run.
        A counter is appended if the directory already exists

        Returns:
            the absolute path of the new directory
        """
        xml_name  = os.path.splitext (os.path.basename (xml_pathFileName))[0]
        now       = now if now else datetime.now()
        base      = PathHandler (workingDir=workingDir).fullFilePath (
                        os.path.join (output_dir, xml_name, now.strftime (DATE_TIME_FORMAT)))

        run_dir, n = base, 1
        while os.path.exists (run_dir):
            n += 1
            run_dir = f"{base} ({n})"
        os.makedirs (run_dir)

        logger.debug (f"Output directory '{run_dir}' made successfully")
        return run_dir



class Exporter_Sections (Exporter_Abstract):
    """
    Export of the section coordinates of a component as tab delimited text files
    """

    NUMBER_FORMAT = "%.6f"
    NEWLINE       = "\r\n"


    def section_fileName (self, component : WingComponent, iSec : int) -> str:
        """ file name of section iSec (0 based) like 'Main Wing 1 (MH32).dat' """

        section = component.sections [iSec]
        name = tidy_file_name (component.name) or component.label
        return f"{name} {iSec+1} ({tidy_file_name (section.foil_label)}).dat"


    def export_component (self, component : WingComponent, section_coords : list[np.ndarray]) -> list[str]:
        """
        writes the coordinates of each section into its own file

        Returns:
            the written path file names
        """

        if len(section_coords) != len(component.sections):
            raise ValueError (f"{component} has {len(component.sections)} sections "
                              f"but {len(section_coords)} coordinate arrays")

        targetDir = self._ensure_export_dir ()
        written = []

        for iSec, coords in enumerate (section_coords):
            pathFileName = os.path.join (targetDir, self.section_fileName (component, iSec))
            with open (pathFileName, 'w', encoding='utf-8', newline='') as f:      # keep CRLF as is
                np.savetxt (f, coords, delimiter='\t', newline=self.NEWLINE, fmt=self.NUMBER_FORMAT)
            written.append (pathFileName)
            logger.debug (f"Successfully wrote file {pathFileName}")

        logger.info (f"{component.name}: {len(written)} section files written to '{targetDir}'")
        return written



class Exporter_Model (Exporter_Abstract):
    """
    Export of the plane model as json dictionary
    """

    def model_fileName (self, plane : Plane, xml_pathFileName : str = '') -> str:
        """ file name of the model - plane name as identifier, the xml name for a default plane name """

        name = plane.name
        if (not name or name == DEFAULT_PLANE_NAME) and xml_pathFileName:
            name = os.path.splitext (os.path.basename (xml_pathFileName))[0]
        return tidy_identifier (name) + ".json"


    def export_plane (self, plane : Plane, xml_pathFileName : str = '') -> str:
        """ writes the plane model - returns the path file name """

        targetDir = self._ensure_export_dir ()
        pathFileName = os.path.join (targetDir, self.model_fileName (plane, xml_pathFileName))

        if not Parameters (pathFileName).write_dataDict (plane._as_dict(), dataName='Plane model'):
            raise OSError (f"Plane model couldn't be written to '{pathFileName}'")
        return pathFileName
