#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""

    Math utility pytest classes

"""

import numpy as np
from numpy.testing                  import assert_allclose

from xflr2cad.base.math_util        import rotx, rotate_xy, increments


class Test_Math_Util:

    def test_rotx (self):

        assert_allclose (rotx (0.0), np.identity (3))

        # row vector convention - y axis goes to -z for 90 degrees
        assert_allclose (np.array ([0.0, 1.0, 0.0]) @ rotx (90.0), [0.0, 0.0, -1.0], atol=1e-12)
        assert_allclose (np.array ([0.0, 0.0, 1.0]) @ rotx (90.0), [0.0, 1.0,  0.0], atol=1e-12)

    def test_rotate_xy (self):

        x, y = rotate_xy ([0.0, 2.0], [0.0, 0.0], 90.0, x_pivot=1.0)

        assert_allclose (x, [1.0,  1.0], atol=1e-12)
        assert_allclose (y, [1.0, -1.0], atol=1e-12)

    def test_increments (self):

        values = [0.5, 1.0, 1.75]
        incs = increments (values)

        assert_allclose (incs, [0.5, 0.5, 0.75])
        assert_allclose (np.cumsum (incs), values)
        assert increments ([]).size == 0
