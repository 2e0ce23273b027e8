#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
    Math utility functions

"""

import numpy as np

import logging
logger = logging.getLogger(__name__)
logger.setLevel(logging.WARNING)


#------------ rotation -----------------------------------


def rotx (angle : float) -> np.ndarray:
    """
    x-rotation matrix for angle in degrees.

    The matrix is meant for row vectors - points @ rotx(a)
    """

    c = np.cos (np.radians (angle))
    s = np.sin (np.radians (angle))

    return np.array ([[1.0, 0.0, 0.0],
                      [0.0,   c,  -s],
                      [0.0,   s,   c]])


def rotate_xy (x : np.ndarray, y : np.ndarray, angle : float, x_pivot : float = 0.0) -> tuple[np.ndarray, np.ndarray]:
    """
    rotates points x,y in the x-y plane by angle in degrees around (x_pivot, 0).
    A positive angle turns the leading edge up (nose up).

    Returns:
        x, y: new coordinates as numpy arrays
    """

    c = np.cos (np.radians (angle))
    s = np.sin (np.radians (angle))

    x_shifted = np.asarray (x, dtype=float) - x_pivot
    y         = np.asarray (y, dtype=float)

    x_new =  c * x_shifted + s * y
    y_new = -s * x_shifted + c * y

    return x_new + x_pivot, y_new


def increments (values) -> np.ndarray:
    """ difference chain of absolute values - first value is taken as is"""

    values = np.asarray (values, dtype=float)
    if values.size == 0:
        return values.copy()
    return np.diff (values, prepend=0.0)
