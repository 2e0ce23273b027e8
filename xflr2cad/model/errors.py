#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""

    Exceptions and warnings of the xflr2cad model

"""


class Xflr2Cad_Error (Exception):
    """ base of all errors raised by xflr2cad"""


class ParseError (Xflr2Cad_Error):
    """ xml input is malformed or couldn't be read"""


class ModelError (Xflr2Cad_Error):
    """ a required field of the plane document is missing or invalid"""

    def __init__(self, message : str, field_path : str = ''):
        self.field_path = field_path
        if field_path:
            message = f"{message} at '{field_path}'"
        super().__init__(message)


class MalformedProfileError (Xflr2Cad_Error):
    """ aerofoil file has an unknown header or unreadable coordinates"""

    def __init__(self, file : str, reason : str = ''):
        self.file = file
        message = f"Aerofoil file '{file}' is not in Selig or Lednicer format"
        if reason:
            message += f" - {reason}"
        super().__init__(message)


class AerofoilMissingError (Xflr2Cad_Error):
    """ a section refers to an aerofoil which is not in the library"""

    def __init__(self, foil : str):
        self.foil = foil
        super().__init__(f"There is no data for {foil}.")


class NameConflictError (Xflr2Cad_Error):
    """ two or more aerofoil files have the same name and are not resolved yet"""

    def __init__(self, conflicts : list):
        self.conflicts = list(conflicts)
        names = sorted ({a.name for a, _ in self.conflicts})
        super().__init__(f"Unresolved aerofoil name conflicts: {', '.join(names)}")


class SchemaVersionWarning (UserWarning):
    """ document version differs from the supported one - the model is still built"""
