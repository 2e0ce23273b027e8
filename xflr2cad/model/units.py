#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""

    Length and mass units which can be chosen for the conversion

    The factor of a unit is the number of units per SI unit (meter, kilogram).
    A document value is converted with

        value * <doc unit to SI> * <factor of chosen unit>

"""

from enum                   import StrEnum

from ..base.common_utils    import fromDict, toDict

import logging
logger = logging.getLogger(__name__)
logger.setLevel(logging.WARNING)


#-------------------------------------------------------------------------------
# enums
#-------------------------------------------------------------------------------

class Length_Unit (StrEnum):
    """ length units for the converted coordinates """
    MM      = "mm"
    CM      = "cm"
    DM      = "dm"
    M       = "m"
    INCH    = "in"
    FOOT    = "ft"

    @property
    def factor (self) -> float:
        """ units per meter """
        return LENGTH_FACTORS [self]


class Mass_Unit (StrEnum):
    """ mass units for the converted masses """
    G       = "g"
    KG      = "kg"
    OUNCE   = "oz"
    POUND   = "lb"

    @property
    def factor (self) -> float:
        """ units per kilogram """
        return MASS_FACTORS [self]


LENGTH_FACTORS = {
    Length_Unit.MM   : 1000.0,
    Length_Unit.CM   : 100.0,
    Length_Unit.DM   : 10.0,
    Length_Unit.M    : 1.0,
    Length_Unit.INCH : 1.0 / 0.0254,
    Length_Unit.FOOT : 1.0 / 0.3048,
}

MASS_FACTORS = {
    Mass_Unit.G      : 1000.0,
    Mass_Unit.KG     : 1.0,
    Mass_Unit.OUNCE  : 1.0 / 0.028349523125,
    Mass_Unit.POUND  : 1.0 / 0.45359237,
}



#-------------------------------------------------------------------------------
# preferences
#-------------------------------------------------------------------------------

class Unit_Preferences:
    """ the chosen length and mass unit of a conversion """

    def __init__(self, length : Length_Unit | str = Length_Unit.MM,
                       mass   : Mass_Unit   | str = Mass_Unit.KG):

        try:
            self._length = Length_Unit (length)
        except ValueError:
            raise ValueError (f"Unknown length unit '{length}' - "
                              f"available: {', '.join (u.value for u in Length_Unit)}") from None
        try:
            self._mass = Mass_Unit (mass)
        except ValueError:
            raise ValueError (f"Unknown mass unit '{mass}' - "
                              f"available: {', '.join (u.value for u in Mass_Unit)}") from None


    @classmethod
    def onDict (cls, dataDict : dict | None) -> 'Unit_Preferences':
        """ alternate constructor with 'length_unit' and 'mass_unit' of dataDict"""
        dataDict = dataDict if dataDict else {}
        return cls (length = fromDict (dataDict, "length_unit", Length_Unit.MM.value),
                    mass   = fromDict (dataDict, "mass_unit",   Mass_Unit.KG.value))

    def _as_dict (self) -> dict:
        """ returns a data dict with the parameters of self"""
        d = {}
        toDict (d, "length_unit", self._length.value)
        toDict (d, "mass_unit",   self._mass.value)
        return d


    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._length.value} {self._mass.value}>"

    def __eq__(self, other) -> bool:
        if not isinstance (other, Unit_Preferences):
            return NotImplemented
        return self._length == other._length and self._mass == other._mass


    @property
    def length (self) -> Length_Unit: return self._length

    @property
    def mass (self) -> Mass_Unit: return self._mass

    @property
    def length_factor (self) -> float:
        """ target length units per meter"""
        return self._length.factor

    @property
    def mass_factor (self) -> float:
        """ target mass units per kilogram"""
        return self._mass.factor
