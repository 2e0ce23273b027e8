#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Common utility functions of xflr2cad - no dependencies to other modules

    init_logging, CustomFormatter       - coloured console logging
    fromDict, toDict                    - access of parameter dictionaries
    Parameters, Settings                - json parameter and settings files
    PathHandler                         - paths relative to a working directory
"""

import os
import json
from termcolor          import colored

import logging
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


NO_DEFAULT = 'no default'



#------------------------------------------------------------------------------
# logging
#------------------------------------------------------------------------------

def init_logging (level= logging.WARNING):
    """ initialize console logging with level - python warnings are logged too"""

    ch = logging.StreamHandler()
    ch.setFormatter(CustomFormatter())

    logging.basicConfig(handlers=[ch],
                        level=level,                # DEBUG, INFO or WARNING
                        force=True)

    # SchemaVersionWarning and friends are python warnings
    logging.captureWarnings(True)


class CustomFormatter(logging.Formatter):
    """ coloured formatting of the console log"""

    FORMATS = {
        logging.DEBUG:    colored(" - %(message)s", 'yellow', attrs=["dark"]) + colored(" (%(filename)s:%(lineno)d)", 'white', attrs=["dark"]),
        logging.INFO:     "%(message)s",
        logging.WARNING:  colored("WARNING - ", 'yellow') + "%(message)s",
        logging.ERROR:    colored("ERROR - ", 'red') + "%(message)s",
        logging.CRITICAL: colored("ERROR - ", 'red', attrs=["bold"]) + "%(message)s"
    }

    def format(self, record):
        return logging.Formatter(self.FORMATS.get(record.levelno)).format(record)



#------------------------------------------------------------------------------
# Dictonary handling
#------------------------------------------------------------------------------

def fromDict(aDict : dict, key, default=NO_DEFAULT):
    """
    returns the value of key in aDict. The value is converted to the type of
    a bool, int or float default. A missing mandatory key is logged as error.

    Args:
        aDict: the dictonary to look in
        key: the key to look for
        default: the value if key is missing or can't be converted
    """

    try:
        value = aDict[key]
        if isinstance (default, bool):                  # bool first - it's an int too
            value = bool(value)
        elif isinstance (default, float):
            value = float(value)
        elif isinstance (default, int):
            value = int(value)
    except (KeyError, TypeError, ValueError):
        if isinstance (default, str) and default == NO_DEFAULT:
            logger.error (f"Mandatory parameter '{key}' not specified")
            return None
        if default:
            logger.debug (f"Parameter '{key}' not specified, using default '{default}'")
        return default
    return value


def toDict(aDict : dict, key, value):
    """
    writes value to a parameter dictionary - floats are rounded.
    A None value removes key so the default will be used on reading
    """
    if value is None:
        aDict.pop(key, None)
    else:
        aDict [key] = round (value, 6) if isinstance (value, float) else value



#------------------------------------------------------------------------------
# Settings and Parameter file
#------------------------------------------------------------------------------

class Parameters ():
    """ a json file holding a dictionary of parameters"""

    def __init__ (self, paramFilePath : str):

        self._paramFilePath = paramFilePath

    @property
    def filePath (self) -> str: return self._paramFilePath

    @property
    def exists (self) -> bool:
        return bool(self._paramFilePath) and os.path.isfile (self._paramFilePath)


    def get_dataDict (self) -> dict:
        """ the dictionary of the file - empty if file doesn't exist or is invalid"""

        if not self.exists:
            logger.debug (f"Parameter file {self._paramFilePath} not found")
            return {}

        with open(self._paramFilePath, 'r', encoding='utf-8') as paramFile:
            try:
                return json.load(paramFile)
            except ValueError as e:
                logger.error (f"Invalid json expression '{e}' in parameter file '{self._paramFilePath}'")
                return {}


    def write_dataDict (self, aDict : dict, dataName='Parameters') -> bool:
        """ writes aDict to the file - returns True if succeeded"""

        try:
            with open(self._paramFilePath, 'w', encoding='utf-8') as paramFile:
                json.dump(aDict, paramFile, indent=2, separators=(',', ':'))
        except OSError:
            logger.error (f"Failed to write file {self._paramFilePath}")
            return False
        except (ValueError, TypeError) as e:
            logger.error (f"{e}. Failed to save {dataName} to '{self._paramFilePath}'")
            return False

        logger.info (f"{dataName} saved to {self._paramFilePath}")
        return True



class Settings (Parameters):
    """ the settings file of xflr2cad - default is in the working directory"""

    SETTINGS_FILE = "xflr2cad_settings.json"

    def __init__ (self, settingsFilePath : str|None = None, workingDir : str|None = None):
        """
        Args:
            settingsFilePath: -optional- explicit settings file
            workingDir: -optional- directory of the default settings file
        """

        if settingsFilePath is None:
            settingsFilePath = os.path.join (workingDir if workingDir else os.getcwd(), self.SETTINGS_FILE)

        super().__init__(settingsFilePath)


    def write_dataDict (self, aDict : dict, dataName='Settings') -> bool:
        return super().write_dataDict (aDict, dataName=dataName)



#------------------------------------------------------------------------------
# File, Path handling
#------------------------------------------------------------------------------

class PathHandler():
    """ paths of files relative to a working directory """

    def __init__ (self, workingDir : str|None = None):
        """ working directory is the current directory if workingDir is None"""

        self._workingDir = os.path.normpath (workingDir) if workingDir else None


    @property
    def workingDir (self) -> str:
        return self._workingDir if self._workingDir else os.getcwd()


    def relFilePath (self, aFilePath : str|None) -> str|None:
        """ aFilePath relative to the working directory - unchanged if this would be longer"""

        if aFilePath is None:
            return None
        try:
            relPath = os.path.normpath(os.path.relpath(aFilePath, start = self.workingDir))
        except ValueError:                          # aFilePath is on a different drive
            return aFilePath
        return aFilePath if len(relPath) > len(aFilePath) else relPath


    def fullFilePath (self, aRelPath : str|None) -> str:
        """ full path of aRelPath - an absolute path is taken as it is"""

        if aRelPath is None:
            return self.workingDir
        if os.path.isabs (aRelPath):
            return os.path.normpath(aRelPath)
        return os.path.normpath(os.path.join (self.workingDir, aRelPath))


    def ensure_dir (self, aRelPath : str) -> str:
        """ creates directory aRelPath if it doesn't exist - returns its full path"""

        fullPath = self.fullFilePath (aRelPath)
        if not os.path.isdir (fullPath):
            os.makedirs (fullPath)
            logger.debug (f"Directory '{fullPath}' created")
        return fullPath



def tidy_identifier (aName : str) -> str:
    """
    aName as a valid identifier - only ascii letters, digits and '_'.
    Blanks become '_', a leading digit gets an 'a' prefix
    """
    name = ''.join (c for c in aName if (c.isascii() and c.isalnum()) or c in '_ ')
    name = name.replace (' ', '_')
    if not name:
        return 'a'
    if name[0].isdigit():
        name = 'a' + name
    return name
