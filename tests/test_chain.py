"""Tests for chaining, combining and building forward / inverse matrices."""

import logging

import jax
import jax.numpy as jnp
import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from jax_affine import (
    Chain,
    Inverted,
    NonInvertibleTransformError,
    build,
    build_inverse,
    chain,
    combine,
    inverse,
    is_invertible,
    rotate_x,
    rotate_y,
    rotate_z,
    scale,
    translate,
)
from jax_affine.transforms import affine


class Shear:
    """Forward-only transform defined outside the package."""

    def __init__(self, k):
        self.k = k

    def apply(self, m):
        return m @ jnp.eye(4).at[0, 1].set(self.k)


class InvertibleShear(Shear):
    """Invertible transform that does not know its inverse primitive."""

    def apply_inverse(self, m):
        return m @ jnp.eye(4).at[0, 1].set(-self.k)


def test_chain_example():
    """Test forward build of a two element chain against the literal product."""
    c = build(rotate_x(0.5).chain(translate(55.0, -5.0, -6.0)))

    x = build(rotate_x(0.5))
    y = build(translate(55.0, -5.0, -6.0))

    np.testing.assert_array_equal(c, x @ y)


def test_combine_two_matches_chain():
    c = combine(rotate_x(0.5), translate(55.0, -5.0, -6.0))
    np.testing.assert_array_equal(build(c), build(rotate_x(0.5)) @ build(translate(55.0, -5.0, -6.0)))


def test_inverse_example():
    """Test the inverse of a five element chain against its hand-inverted form."""
    c = combine(
        rotate_x(0.5),
        rotate_y(0.2),
        rotate_z(0.1),
        translate(55.0, -5.0, -6.0),
        scale(2.0, 4.0, -2.0),
    )

    c2 = combine(
        scale(1.0 / 2.0, 1.0 / 4.0, -1.0 / 2.0),
        translate(-55.0, 5.0, 6.0),
        rotate_z(-0.1),
        rotate_y(-0.2),
        rotate_x(-0.5),
    )

    np.testing.assert_array_equal(build_inverse(c), build(c2))
    np.testing.assert_allclose(jnp.linalg.inv(build(c)), build_inverse(c), rtol=0, atol=1e-6)


def test_chain_method_matches_function():
    a, b = rotate_y(0.3), scale(1.0, 2.0, 3.0)
    assert a.chain(b) == chain(a, b)
    assert isinstance(chain(a, b), Chain)


def test_combine_left_folds():
    a, b, c = rotate_x(0.1), rotate_y(0.2), rotate_z(0.3)
    assert combine(a, b, c) == Chain(Chain(a, b), c)


def test_combine_single_returns_element():
    t = translate(1.0, 2.0, 3.0)
    assert combine(t) is t
    np.testing.assert_array_equal(build(combine(t)), build(t))
    np.testing.assert_array_equal(build_inverse(combine(t)), build_inverse(t))


def test_combine_empty_raises():
    with pytest.raises(ValueError):
        combine()


def test_chain_rejects_non_transform():
    with pytest.raises(TypeError):
        chain(rotate_x(0.1), "not a transform")
    with pytest.raises(TypeError):
        rotate_x(0.1).chain(42)


def test_nested_chains():
    """A chain can be an operand of another chain in either position."""
    a, b, c, d = rotate_x(0.1), translate(1.0, 2.0, 3.0), scale(2.0, 3.0, 4.0), rotate_z(-0.7)
    left = chain(chain(a, b), chain(c, d))
    right = chain(a, chain(b, chain(c, d)))
    expected = build(a) @ build(b) @ build(c) @ build(d)

    np.testing.assert_allclose(build(left), expected, rtol=1e-12, atol=1e-12)
    np.testing.assert_allclose(build(right), expected, rtol=1e-12, atol=1e-12)
    np.testing.assert_allclose(build_inverse(left), jnp.linalg.inv(expected), rtol=1e-9, atol=1e-9)


def test_transforms_are_reusable():
    t = combine(rotate_x(0.5), translate(1.0, 2.0, 3.0))
    first = build(t)
    combine(t, scale(2.0, 2.0, 2.0))
    build_inverse(t)
    np.testing.assert_array_equal(build(t), first)


def test_chain_inverse_reverses_and_inverts():
    a, b = rotate_x(0.5), translate(55.0, -5.0, -6.0)
    assert chain(a, b).inverse() == Chain(translate(-55.0, 5.0, 6.0), rotate_x(-0.5))


def test_point_order():
    """The first transform in a chain acts on points first."""
    M = build(combine(translate(1.0, 0.0, 0.0), rotate_z(jnp.pi / 2)))
    transformed = affine.apply(M, jnp.array([1.0, 0.0, 0.0]))
    np.testing.assert_allclose(transformed, jnp.array([1.0, 1.0, 0.0]), rtol=1e-6, atol=1e-6)


# Error policy
def test_zero_scale_inverse_raises():
    c = combine(rotate_x(0.5), scale(2.0, 0.0, 1.0), translate(1.0, 2.0, 3.0))
    build(c)
    with pytest.raises(NonInvertibleTransformError):
        build_inverse(c)


def test_zero_scale_inverse_under_jit_is_not_finite():
    """Traced parameters cannot be checked; IEEE division leaks inf/NaN."""
    m = jax.jit(build_inverse)(scale(0.0, 1.0, 1.0))
    assert not np.all(np.isfinite(np.asarray(m)))


# Capabilities of user-defined transforms
def test_forward_only_transform():
    c = combine(rotate_x(0.2), Shear(0.5))
    expected = build(rotate_x(0.2)) @ jnp.eye(4).at[0, 1].set(0.5)

    np.testing.assert_allclose(build(c), expected, rtol=1e-12, atol=1e-12)
    assert not is_invertible(c)
    assert not is_invertible(Shear(0.5))
    with pytest.raises(TypeError, match="Shear"):
        build_inverse(c)
    with pytest.raises(TypeError):
        inverse(c)


def test_invertible_user_transform():
    t = InvertibleShear(0.5)
    c = combine(t, rotate_z(0.3))
    assert is_invertible(c)

    inv = inverse(t)
    assert isinstance(inv, Inverted)
    np.testing.assert_array_equal(build(inv), build_inverse(t))
    assert inverse(inv) is t

    np.testing.assert_allclose(build(c) @ build_inverse(c), jnp.eye(4), rtol=1e-9, atol=1e-9)
    np.testing.assert_allclose(build(inverse(c)), build_inverse(c), rtol=1e-12, atol=1e-12)


# JAX transformations
def test_build_jit_compatibility():
    c = combine(rotate_x(0.5), rotate_y(0.2), translate(55.0, -5.0, -6.0), scale(2.0, 4.0, -2.0))
    np.testing.assert_allclose(jax.jit(build)(c), build(c), rtol=1e-12, atol=1e-12)
    np.testing.assert_allclose(jax.jit(build_inverse)(c), build_inverse(c), rtol=1e-12, atol=1e-12)


def test_build_grad_through_angle():
    def entry(angle):
        return build(combine(rotate_x(angle), translate(1.0, 2.0, 3.0)))[1, 1]

    np.testing.assert_allclose(jax.grad(entry)(0.5), -np.sin(0.5), rtol=1e-9, atol=1e-9)


def test_build_vmap_over_angles():
    angles = jnp.linspace(0.0, 1.0, 5)
    matrices = jax.vmap(lambda a: build(rotate_z(a)))(angles)
    assert matrices.shape == (5, 4, 4)
    np.testing.assert_allclose(matrices[2], build(rotate_z(0.5)), rtol=1e-12, atol=1e-12)


def test_build_logs_debug(caplog):
    with caplog.at_level(logging.DEBUG, logger="jax_affine.chain"):
        build(rotate_x(0.1))
    assert "RotationX" in caplog.text


# Property-based tests
angles = st.floats(min_value=-np.pi, max_value=np.pi)
offsets = st.floats(min_value=-100.0, max_value=100.0)
factors = st.one_of(st.floats(min_value=0.1, max_value=10.0), st.floats(min_value=-10.0, max_value=-0.1))

primitives = st.one_of(
    st.builds(rotate_x, angles),
    st.builds(rotate_y, angles),
    st.builds(rotate_z, angles),
    st.builds(scale, factors, factors, factors),
    st.builds(translate, offsets, offsets, offsets),
)


@given(primitives, primitives)
@settings(deadline=None, max_examples=25)
def test_chain_is_matrix_product(a, b):
    np.testing.assert_allclose(build(chain(a, b)), build(a) @ build(b), rtol=1e-12, atol=1e-12)


@given(primitives, primitives)
@settings(deadline=None, max_examples=25)
def test_inverse_reverses_order(a, b):
    expected = build(chain(inverse(b), inverse(a)))
    np.testing.assert_allclose(build_inverse(chain(a, b)), expected, rtol=1e-12, atol=1e-12)


# Bounded parameters keep the product well conditioned for a 1e-6 tolerance
tame_factors = st.one_of(st.floats(min_value=0.5, max_value=2.0), st.floats(min_value=-2.0, max_value=-0.5))
tame_offsets = st.floats(min_value=-10.0, max_value=10.0)
tame_primitives = st.one_of(
    st.builds(rotate_x, angles),
    st.builds(rotate_y, angles),
    st.builds(rotate_z, angles),
    st.builds(scale, tame_factors, tame_factors, tame_factors),
    st.builds(translate, tame_offsets, tame_offsets, tame_offsets),
)


@given(st.lists(tame_primitives, min_size=1, max_size=5))
@settings(deadline=None, max_examples=25)
def test_round_trip_is_identity(ts):
    c = combine(*ts)
    np.testing.assert_allclose(build(c) @ build_inverse(c), jnp.eye(4), rtol=0, atol=1e-6)
