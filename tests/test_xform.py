import math

import pytest
from curvekit.xform import *
from curvekit.geom import same_vector

## unit tests for curvekit xform.py


class TestXform:
    """unit tests for curvekit matrix operations"""

    def test_matrix(self):
        """Matrix construction, products and row/column access."""
        foo = Matrix([1, 2, 3, 4, 5, 6, 7, 8, 9])
        bar = Matrix([[1, 0, 1], [0, 1, 1], [0, 0, 1]])
        I = Matrix()
        assert I.mul(bar).m == bar.m
        assert I.mul(foo).m == foo.m
        assert I.mul(I).m == I.m
        assert foo.mul(bar).m == [[1, 2, 6], [4, 5, 15], [7, 8, 24]]
        assert foo.mul(2.0).m == [[2, 4, 6], [8, 10, 12], [14, 16, 18]]
        assert bar.mul((1.0, 2.0)) == (2.0, 3.0)
        assert Matrix(foo) == foo
        assert foo.getrow(1) == [4, 5, 6]
        assert foo.getcol(2) == [3, 6, 9]

    def test_bad_values(self):
        """Malformed matrices and operands raise ValueError."""
        with pytest.raises(ValueError):
            Matrix([1, 2, 3])
        with pytest.raises(ValueError):
            Matrix().set(3, 0, 1.0)
        with pytest.raises(ValueError):
            Matrix().set(0, 0, float('nan'))
        with pytest.raises(ValueError):
            Matrix().mul('foo')

    def test_translation(self):
        """Translations move points but not vectors."""
        T = Translation((1.0, -2.0))
        assert T.transform((0.0, 0.0)) == (1.0, -2.0)
        assert T.transform_vector((1.0, 1.0)) == (1.0, 1.0)
        Ti = Translation((1.0, -2.0), inverse=True)
        assert T.mul(Ti) == Matrix()

    def test_rotation(self):
        """Rotation about the origin and about a center."""
        R = Rotation(90)
        p = R.transform((1.0, 0.0))
        assert same_vector(p, (0.0, 1.0))
        Rc = Rotation(180, center=(1.0, 1.0))
        assert same_vector(Rc.transform((2.0, 1.0)), (0.0, 1.0))
        assert abs(R.transform_angle(0.0) - math.pi / 2) < 1e-12
        assert R.is_similarity()
        assert R.keeps_orientation()
        assert abs(R.scale_factor() - 1.0) < 1e-12

    def test_scale(self):
        """Uniform and non-uniform scaling."""
        S = Scale(2.0)
        assert S.transform((1.0, 3.0)) == (2.0, 6.0)
        assert S.is_similarity()
        assert abs(S.scale_factor() - 2.0) < 1e-12
        S2 = Scale(2.0, 3.0, center=(1.0, 1.0))
        assert same_vector(S2.transform((2.0, 2.0)), (3.0, 4.0))
        assert not S2.is_similarity()
        with pytest.raises(ValueError):
            Scale(0.0)

    def test_mirror(self):
        """Reflections across lines and through a point."""
        M = Mirror((1.0, 0.0))
        assert same_vector(M.transform((1.0, 2.0)), (1.0, -2.0))
        assert not M.keeps_orientation()
        assert M.is_similarity()
        D = Mirror((1.0, 1.0), center=(0.0, 1.0))
        assert same_vector(D.transform((1.0, 0.0)), (-1.0, 2.0))
        P = PointReflection((1.0, 1.0))
        assert same_vector(P.transform((2.0, 3.0)), (0.0, -1.0))
        assert P.keeps_orientation()
        with pytest.raises(ValueError):
            Mirror((0.0, 0.0))

    def test_inverse(self):
        """A composed transform undone by its inverse."""
        A = Translation((3.0, 1.0)).mul(Rotation(30)).mul(Scale(2.0, 0.5))
        p = (0.7, -1.3)
        q = A.inverse().transform(A.transform(p))
        assert same_vector(p, q)
        assert abs(A.determinant() - 1.0) < 1e-12
        with pytest.raises(ValueError):
            Matrix([[1, 1, 0], [1, 1, 0], [0, 0, 1]]).inverse()
