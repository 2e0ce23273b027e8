#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
    The xflr2cad command line App

    Converts the wing like components of an xflr5 plane xml file into
    section coordinate files for the import into a CAD program

    start                                       - entry of the app
        |-- setup                               - folders, settings, aerofoil cache
        |-- reload                              - rebuild aerofoil cache, resolve name conflicts
        |-- convert                             - convert a plane xml file
        |-- scan                                - overview of a plane xml file
"""

import sys
import argparse
import logging

from .base.common_utils     import init_logging, Settings, PathHandler
from .conversion            import Conversion, Conversion_Settings
from .model.errors          import Xflr2Cad_Error
from .model.plane           import Plane_Summary
from .model.units           import Length_Unit, Mass_Unit

logger = logging.getLogger(__name__)


APP_NAME    = "xflr2cad"
APP_VERSION = "1.0.0"



#-------------------------------------------------------------------------------
# commands
#-------------------------------------------------------------------------------

def _parse_choices (choose_args : list[str] | None) -> dict[str, str]:
    """ 'NAME=FILE' arguments into a dict - raises ValueError """

    choices = {}
    for arg in choose_args or []:
        name, sep, file = arg.partition ('=')
        if not sep or not name.strip() or not file.strip():
            raise ValueError (f"'{arg}' is not like NAME=FILE")
        choices [name.strip()] = file.strip()
    return choices


def _report_conflicts (library) -> int:
    """ logs the open name conflicts - returns the number of them"""

    open_conflicts = library.detect_conflicts()
    for name in sorted ({a.name for a, _ in open_conflicts}):
        files = ', '.join (p.pathFileName for p in library.candidates (name))
        logger.warning (f"Aerofoil name '{name}' is used by: {files}")
    if open_conflicts:
        logger.warning ("Choose a file for each name with --choose NAME=FILE")
    return len (open_conflicts)


def cmd_setup (conversion : Conversion, settings : Settings, args) -> int:

    library = conversion.setup (settings)
    return 1 if _report_conflicts (library) else 0


def cmd_reload (conversion : Conversion, settings : Settings, args) -> int:

    try:
        choices = _parse_choices (args.choose)
        library = conversion.reload_library (choices)
    except ValueError as e:
        logger.error (f"{e}")
        return 1

    logger.info (f"{len(library.all_profiles)} aerofoils cached in '{conversion.cache_file_abs}'")
    return 1 if _report_conflicts (library) else 0


def cmd_convert (conversion : Conversion, settings : Settings, args) -> int:

    result = conversion.run (args.xml)

    plane = result.plane
    units = conversion.settings.unit_prefs
    logger.info (f"Plane '{plane.name}': span {plane.span:.3f} {units.length}, mass {plane.total_mass:.3f} {units.mass}")

    for slot, coords in result.coords.items():
        component = plane.component (slot)
        logger.info (f"{component.label} '{component.name}': {len(coords)} sections")
    if result.run_dir:
        run_dir = PathHandler (conversion.workingDir).relFilePath (result.run_dir)
        logger.info (f"{len(result.files)} files written to '{run_dir}'")

    return 0 if result.ok else 1


def cmd_scan (conversion : Conversion, settings : Settings, args) -> int:

    summary = Plane_Summary.on_file (PathHandler (conversion.workingDir).fullFilePath (args.xml))

    print (f"Name:        {summary.name}")
    print (f"Description: {summary.description}")
    print (f"Components:  {', '.join (summary.components)}")
    print (f"Mass:        {summary.mass_str}")
    print (f"Span:        {summary.span_str}")
    print (f"Size:        {summary.size_str}")
    return 0



#-------------------------------------------------------------------------------
# arguments
#-------------------------------------------------------------------------------

def _parser () -> argparse.ArgumentParser:

    parser = argparse.ArgumentParser(prog=APP_NAME,
                                     description='Convert xflr5 plane xml into section coordinates for CAD')
    parser.add_argument("-v", "--verbose", action="store_true", help="debug output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    parser.add_argument("--settings", help="settings file - default in working directory")
    parser.add_argument("--workdir", help="working directory - default is current directory")

    commands = parser.add_subparsers(dest="command", required=True)

    p = commands.add_parser("setup", help="create folders, default settings and aerofoil cache")
    p.set_defaults(func=cmd_setup)

    p = commands.add_parser("reload", help="rebuild the aerofoil cache")
    p.add_argument("--choose", action="append", metavar="NAME=FILE",
                   help="file to use for a conflicting aerofoil name - repeatable")
    p.set_defaults(func=cmd_reload)

    p = commands.add_parser("convert", help="convert a plane xml file")
    p.add_argument("xml", help="xflr5 plane .xml file")
    p.add_argument("-s", "--no-shift", action="store_true", help="don't shift sections by component position")
    p.add_argument("--length", choices=[u.value for u in Length_Unit], help="length unit of coordinates")
    p.add_argument("--mass", choices=[u.value for u in Mass_Unit], help="mass unit")
    p.add_argument("--no-export", action="store_true", help="don't write any files")
    p.set_defaults(func=cmd_convert)

    p = commands.add_parser("scan", help="show an overview of a plane xml file")
    p.add_argument("xml", help="xflr5 plane .xml file")
    p.set_defaults(func=cmd_scan)

    return parser


def _conversion_settings (settings : Settings, args) -> Conversion_Settings:
    """ settings of file overwritten by command line arguments """

    dataDict = settings.get_dataDict()

    if getattr (args, "length", None):
        dataDict ["length_unit"] = args.length
    if getattr (args, "mass", None):
        dataDict ["mass_unit"] = args.mass
    if getattr (args, "no_shift", False):
        dataDict ["shift_sections"] = False
    if getattr (args, "no_export", False):
        dataDict ["export_file"]  = False
        dataDict ["export_model"] = False

    return Conversion_Settings (dataDict)



#--------------------------------

def start (argv : list[str] | None = None) -> int:
    """ start the app - returns the exit code """

    args = _parser().parse_args(argv)

    # init logging - can be overwritten within a module

    init_logging (level= logging.DEBUG if args.verbose else logging.INFO)

    workingDir = PathHandler (workingDir=args.workdir).workingDir
    settings   = Settings (settingsFilePath=args.settings, workingDir=workingDir)

    try:
        conversion = Conversion (_conversion_settings (settings, args), workingDir=workingDir)
        return args.func (conversion, settings, args)
    except Xflr2Cad_Error as e:
        logger.error (f"{e}")
        return 1
    except ValueError as e:                             # invalid unit in settings file
        logger.error (f"{e}")
        return 1



if __name__ == "__main__":

    sys.exit (start())
