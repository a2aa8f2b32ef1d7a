"""Tests for noise field evaluation."""

import math

import numpy as np
import pytest


def _reference_raw(lattice, cell_size, x, y):
    """Straightforward scalar Perlin evaluation used as an oracle."""
    cell_x = int(math.floor(x / cell_size))
    cell_y = int(math.floor(y / cell_size))
    fx = (x - cell_x * cell_size) / cell_size
    fy = (y - cell_y * cell_size) / cell_size

    def contribution(cx, cy, dx, dy):
        g = lattice.gradient_at(cx, cy)
        return g.x * dx + g.y * dy

    d_tl = contribution(cell_x, cell_y, fx, fy)
    d_tr = contribution(cell_x + 1, cell_y, fx - 1, fy)
    d_bl = contribution(cell_x, cell_y + 1, fx, fy - 1)
    d_br = contribution(cell_x + 1, cell_y + 1, fx - 1, fy - 1)

    def smooth(t):
        return 6 * t ** 5 - 15 * t ** 4 + 10 * t ** 3

    u, v = smooth(fx), smooth(fy)
    top = d_tl + (d_tr - d_tl) * u
    bottom = d_bl + (d_br - d_bl) * u
    return top + (bottom - top) * v


def test_fade_endpoints():
    from perlingrid import fade
    assert fade(0.0) == 0.0
    assert fade(1.0) == 1.0
    assert fade(0.5) == pytest.approx(0.5)


def test_lerp():
    from perlingrid import lerp
    assert lerp(2.0, 6.0, 0.0) == 2.0
    assert lerp(2.0, 6.0, 1.0) == 6.0
    assert lerp(2.0, 6.0, 0.25) == 3.0


def test_scenario_shape_and_corner_value():
    from perlingrid import generate
    field = generate(cols=3, rows=3, cell_size=100, seed=42)
    values = field.evaluate_all()
    assert values.shape == (300, 300)
    # Every lattice corner has raw value 0, i.e. 0.5 once normalized
    assert values[0, 0] == 0.5
    assert values[100, 200] == 0.5


def test_scenario_reproducible():
    from perlingrid import generate
    a = generate(cols=3, rows=3, cell_size=100, seed=42).evaluate_all()
    b = generate(cols=3, rows=3, cell_size=100, seed=42).evaluate_all()
    c = generate(cols=3, rows=3, cell_size=100, seed=43).evaluate_all()
    np.testing.assert_array_equal(a, b)
    assert not np.array_equal(a, c)


def test_top_edge_closed_form():
    """On a cell's top edge only the two top corners contribute."""
    from perlingrid import GradientLattice, NoiseField, fade
    lattice = GradientLattice(3, 3, seed=42)
    field = NoiseField(lattice, 100)

    g_tl = lattice.gradient_at(0, 0)
    g_tr = lattice.gradient_at(1, 0)
    t = 0.25
    d_tl = g_tl.x * t
    d_tr = g_tr.x * (t - 1)
    expected = d_tl + (d_tr - d_tl) * fade(t)
    assert field.sample(25, 0, normalize_output=False) == pytest.approx(expected, abs=1e-12)


@pytest.mark.parametrize("seed", [1, 7, 42])
def test_matches_reference(seed):
    from perlingrid import GradientLattice, NoiseField
    lattice = GradientLattice(4, 3, seed=seed)
    field = NoiseField(lattice, 16)
    raw = field.evaluate_all(normalize_output=False)

    rng = np.random.RandomState(seed)
    for _ in range(50):
        px = rng.randint(0, field.sample_width)
        py = rng.randint(0, field.sample_height)
        expected = _reference_raw(lattice, 16.0, px, py)
        assert raw[py, px] == pytest.approx(expected, abs=1e-12)


@pytest.mark.parametrize("cell_size", [100, 16, 2.5, 7.3])
def test_sample_agrees_with_grid(cell_size):
    from perlingrid import generate
    field = generate(cols=3, rows=2, cell_size=cell_size, seed=11)
    values = field.evaluate_all()
    h, w = values.shape
    for py in {0, 1, h // 2, h - 1}:
        for px in {0, 1, w // 2, w - 1}:
            assert abs(field.sample(px, py) - values[py, px]) < 1e-9


def test_truncated_pixel_grid():
    from perlingrid import generate
    field = generate(cols=3, rows=2, cell_size=2.5, seed=1)
    assert field.shape == (5, 7)
    assert field.evaluate_all().shape == (5, 7)
    # Continuous domain extends past the last whole pixel
    field.sample(7.4, 4.9)


@pytest.mark.parametrize("seed", [1, 7, 42, 99, 200])
def test_range(seed):
    from perlingrid import generate
    field = generate(cols=5, rows=4, cell_size=20, seed=seed)
    values = field.evaluate_all()
    assert values.min() >= 0.0
    assert values.max() <= 1.0
    raw = field.evaluate_all(normalize_output=False)
    assert np.abs(raw).max() <= math.sqrt(2) / 2 + 1e-9


@pytest.mark.parametrize("x, y", [(10.3, 20.7), (149.999, 250.5), (0.5, 299.0)])
def test_continuity(x, y):
    from perlingrid import generate
    field = generate(cols=3, rows=3, cell_size=100, seed=42)
    a = field.sample(x, y)
    b = field.sample(x + 1e-6, y)
    c = field.sample(x, y + 1e-6)
    assert abs(a - b) < 1e-3
    assert abs(a - c) < 1e-3


def test_continuous_across_cell_edges():
    from perlingrid import generate
    field = generate(cols=3, rows=3, cell_size=100, seed=42)
    left = field.sample(100 - 1e-7, 150)
    right = field.sample(100, 150)
    assert abs(left - right) < 1e-6


@pytest.mark.parametrize("workers", [2, 3, 8, 500])
def test_parallel_matches_serial(workers):
    from perlingrid import generate
    field = generate(cols=4, rows=3, cell_size=25, seed=9)
    serial = field.evaluate_all()
    parallel = field.evaluate_all(workers=workers)
    np.testing.assert_array_equal(serial, parallel)


def test_field_does_not_touch_lattice():
    from perlingrid import GradientLattice, NoiseField
    lattice = GradientLattice(3, 3, seed=42)
    before = lattice.vectors.copy()
    NoiseField(lattice, 10).evaluate_all(workers=2)
    NoiseField(lattice, 33).evaluate_all()
    np.testing.assert_array_equal(lattice.vectors, before)


@pytest.mark.parametrize("x, y", [(-1, 0), (0, -0.001), (300, 0), (0, 300),
                                  (float("nan"), 0), (0, float("inf"))])
def test_sample_out_of_domain(x, y):
    from perlingrid import generate, OutOfDomain
    field = generate(cols=3, rows=3, cell_size=100, seed=42)
    with pytest.raises(OutOfDomain):
        field.sample(x, y)
    with pytest.raises(OutOfDomain):
        field.probe(x, y)


@pytest.mark.parametrize("cell_size", [0, -5, float("inf"), float("nan"),
                                       "big", 0.1])
def test_invalid_cell_size(cell_size):
    from perlingrid import GradientLattice, NoiseField, InvalidDimensions
    lattice = GradientLattice(3, 3, seed=1)
    with pytest.raises(InvalidDimensions):
        NoiseField(lattice, cell_size)


def test_probe():
    from perlingrid import generate
    field = generate(cols=3, rows=3, cell_size=100, seed=42)
    probe = field.probe(150, 250)
    assert probe.cell == (1, 2)
    assert probe.offsets[0] == (50, 50)
    assert probe.offsets[1] == (-50, 50)
    assert probe.offsets[2] == (50, -50)
    assert probe.offsets[3] == (-50, -50)
    assert probe.gradients[3] == field.lattice.gradient_at(2, 3)
    assert probe.value == field.sample(150, 250)

    lines = probe.lines()
    assert lines[0] == "(150,250)"
    assert lines[1] == "(1,2)"
    assert lines[-1] == str(probe.value)
    assert len(lines) == 11


def test_locate_caps_cell_at_last_column():
    from perlingrid.noise import _locate
    cell, frac = _locate(300.0, 100.0, 3)
    assert int(cell) == 2
    assert float(frac) == 1.0

    cells, _ = _locate(np.array([0.0, 299.5, 300.0]), 100.0, 3)
    assert list(cells) == [0, 2, 2]


def test_sample_just_below_far_edge():
    """Points a hair inside the far edge can round into a cell past the
    lattice; they must still evaluate within the last cell."""
    from perlingrid import generate

    rounded_up = 0
    for cols in (1, 2, 3, 4, 5, 7):
        for tenths in range(11, 200):
            cell_size = tenths / 10
            field = generate(cols=cols, rows=cols, cell_size=cell_size, seed=3)
            x = np.nextafter(field.width, 0.0)
            y = np.nextafter(field.height, 0.0)
            if np.floor(x / cell_size) >= cols:
                rounded_up += 1
            value = field.sample(x, y)
            assert 0.0 <= value <= 1.0
            assert field.probe(x, y).cell == (cols - 1, cols - 1)

    # The sweep must actually hit the rounding case
    assert rounded_up > 0
