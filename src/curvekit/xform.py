## planar affine matrix transformations for curvekit

## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2020 yapCAD contributors
## All rights reserved

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

from math import atan2, cos, radians, sin, sqrt

import curvekit.geom as geom

## a matrix is represented as a list of three three-element rows, in
## homogeneous planar coordinates.  The last row is always [0,0,1]
## for the affine maps built here, but Matrix does not enforce that.
## Points are column vectors, so Mx applies M to x, and A.mul(B)
## applies B first, then A.

## Matrix is a lightweight value: the factories below build new
## instances, and mul() never modifies its operands.


class Matrix:
    """3x3 transformation matrix class for transforming homogeneous 2D coordinates"""

    def __init__(self, a=None):
        self.m = [[1.0, 0.0, 0.0],
                  [0.0, 1.0, 0.0],
                  [0.0, 0.0, 1.0]]

        if isinstance(a, Matrix):
            for i in range(3):
                self.m[i] = list(a.m[i])
        elif isinstance(a, (tuple, list)):
            if len(a) == 3 and all(isinstance(r, (tuple, list)) and len(r) == 3
                                   for r in a):
                for i in range(3):
                    for j in range(3):
                        self.set(i, j, a[i][j])
            elif len(a) == 9:
                for i in range(3):
                    for j in range(3):
                        self.set(i, j, a[i * 3 + j])
            else:
                raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))
        elif a is not None:
            raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))

    def __repr__(self):
        return "Matrix({},{},{})".format(self.m[0], self.m[1], self.m[2])

    def __eq__(self, other):
        return isinstance(other, Matrix) and self.m == other.m

    #return value indexed by i,j
    def get(self, i, j):
        if i < 0 or i > 2 or j < 0 or j > 2:
            raise ValueError('bad index passed to get: {},{}'.format(i, j))
        return self.m[i][j]

    #set value indexed by i,j
    def set(self, i, j, x):
        if i < 0 or i > 2 or j < 0 or j > 2:
            raise ValueError('bad index passed to set: {},{}'.format(i, j))
        if not geom.isgoodnum(x):
            raise ValueError('bad value passed to set: {}'.format(x))
        self.m[i][j] = float(x)

    def getrow(self, i):
        if i < 0 or i > 2:
            raise ValueError('bad row passed to getrow: {}'.format(i))
        return list(self.m[i])

    def getcol(self, j):
        if j < 0 or j > 2:
            raise ValueError('bad column passed to getcol: {}'.format(j))
        return [self.m[0][j], self.m[1][j], self.m[2][j]]

    # matrix multiply.  If x is a matrix, compute MX.  If x is a 2D
    # point, compute Mx in homogeneous coordinates.  If x is a scalar,
    # compute xM.
    def mul(self, x):
        if isinstance(x, Matrix):
            result = Matrix()
            for i in range(3):
                row = self.m[i]
                for j in range(3):
                    result.m[i][j] = sum(row[k] * x.m[k][j] for k in range(3))
            return result
        elif geom.isgoodnum(x):
            result = Matrix()
            for i in range(3):
                result.m[i] = [v * x for v in self.m[i]]
            return result
        elif isinstance(x, (tuple, list)) and len(x) == 2:
            return self.transform(x)

        raise ValueError('bad thing passed to mul(): {}'.format(x))

    def transform(self, p):
        """apply the matrix to a point"""
        m = self.m
        return (m[0][0] * p[0] + m[0][1] * p[1] + m[0][2],
                m[1][0] * p[0] + m[1][1] * p[1] + m[1][2])

    def transform_vector(self, v):
        """apply the linear part only, ignoring translation"""
        m = self.m
        return (m[0][0] * v[0] + m[0][1] * v[1],
                m[1][0] * v[0] + m[1][1] * v[1])

    def transform_angle(self, angle):
        """direction angle (radians) of the image of a unit vector at ``angle``"""
        v = self.transform_vector((cos(angle), sin(angle)))
        return atan2(v[1], v[0])

    def linear(self):
        """the 2x2 linear part as ``(a, b, c, d)``, row major"""
        return (self.m[0][0], self.m[0][1], self.m[1][0], self.m[1][1])

    def determinant(self):
        a, b, c, d = self.linear()
        return a * d - b * c

    def keeps_orientation(self):
        return self.determinant() > 0

    def scale_factor(self):
        """length scale of a similarity, the geometric mean scale otherwise"""
        return sqrt(abs(self.determinant()))

    def is_similarity(self, precision=geom.epsilon):
        """True if the map is a rotation, reflection and uniform scale"""
        a, b, c, d = self.linear()
        col1 = a * a + c * c
        col2 = b * b + d * d
        ortho = a * b + c * d
        size = max(col1, col2, 1.0)
        return abs(col1 - col2) <= precision * size and abs(ortho) <= precision * size

    def inverse(self):
        a, b, c, d = self.linear()
        det = a * d - b * c
        if abs(det) < geom.epsilon * geom.epsilon:
            raise ValueError('cannot invert a singular transformation')
        tx = self.m[0][2]
        ty = self.m[1][2]
        ia = d / det
        ib = -b / det
        ic = -c / det
        id_ = a / det
        return Matrix([[ia, ib, -(ia * tx + ib * ty)],
                       [ic, id_, -(ic * tx + id_ * ty)],
                       [0.0, 0.0, 1.0]])


## Transformation factories.  Angles are in degrees.  Where a center
## is given, the transformation is applied about that point.

def _about(center, M):
    if center is None:
        return M
    return Translation(center).mul(M).mul(Translation(center, inverse=True))


def Translation(delta, inverse=False):
    dx = delta[0]
    dy = delta[1]
    if inverse:
        dx, dy = -dx, -dy
    return Matrix([[1, 0, dx],
                   [0, 1, dy],
                   [0, 0, 1]])


def Rotation(angle, center=None, inverse=False):
    if inverse:
        angle *= -1.0
    rad = radians(angle % 360.0)
    cang = cos(rad)
    sang = sin(rad)
    R = Matrix([[cang, -sang, 0],
                [sang, cang, 0],
                [0, 0, 1]])
    return _about(center, R)


def Scale(x, y=None, center=None, inverse=False):
    sx = x
    sy = x if y is None else y
    if not (geom.isgoodnum(sx) and geom.isgoodnum(sy)):
        raise ValueError('bad scaling values passed to Scale')
    if sx == 0 or sy == 0:
        raise ValueError('zero scaling factor not allowed')
    if inverse:
        sx = 1.0 / sx
        sy = 1.0 / sy
    S = Matrix([[sx, 0, 0],
                [0, sy, 0],
                [0, 0, 1]])
    return _about(center, S)


def Mirror(direction=(1.0, 0.0), center=None):
    """reflection about the axis with ``direction`` through ``center``"""
    m = geom.mag(direction)
    if m < geom.epsilon:
        raise ValueError('zero-length mirror axis not allowed')
    ux = direction[0] / m
    uy = direction[1] / m
    M = Matrix([[ux * ux - uy * uy, 2 * ux * uy, 0],
                [2 * ux * uy, uy * uy - ux * ux, 0],
                [0, 0, 1]])
    return _about(center, M)


def PointReflection(center=(0.0, 0.0)):
    """reflection through a point, a half turn about it"""
    return _about(center, Matrix([[-1, 0, 0],
                                  [0, -1, 0],
                                  [0, 0, 1]]))
