"""
Tests for the flat-shaded Mesher.

Winding convention: the face normal is (v1 - v0) x (v3 - v0), so flat
terrain faces +y and triangles wind counter-clockwise seen from above.
"""

import numpy as np
import pytest

from heightfield import ConfigurationError, HeightGrid, HeightSettings, Mesh, Mesher, NoiseSampler


def random_grid(width, depth, seed=0):
    rng = np.random.default_rng(seed)
    return HeightGrid.from_array(rng.random((width, depth)))


@pytest.mark.parametrize("width, depth", [(2, 2), (3, 3), (3, 5), (6, 4), (10, 2)])
def test_mesh_topology_counts(width, depth):
    mesh = Mesher().mesh(random_grid(width, depth))
    cells = (width - 1) * (depth - 1)

    assert mesh.vertex_count == cells * 4
    assert mesh.normal_count == mesh.vertex_count
    assert mesh.index_count == cells * 6
    assert mesh.index_count == mesh.vertex_count // 4 * 6
    assert mesh.triangle_count == cells * 2
    assert mesh.indices.max() < mesh.vertex_count


def test_buffer_types():
    mesh = Mesher().mesh(random_grid(3, 3))

    assert mesh.positions.dtype == np.float32
    assert mesh.normals.dtype == np.float32
    assert mesh.indices.dtype == np.uint32
    assert mesh.positions.shape == (16, 3)


def test_flat_zero_grid_scenario():
    mesh = Mesher().mesh(HeightGrid(3, 3))

    assert mesh.quad_count == 4
    assert mesh.vertex_count == 16
    assert np.all(mesh.positions[:, 1] == 0.0)
    assert np.allclose(mesh.normals, [0.0, 1.0, 0.0])


def test_quad_corners_of_single_cell():
    grid = HeightGrid(2, 2)
    grid.set(0, 0, 0.1)
    grid.set(0, 1, 0.2)
    grid.set(1, 1, 0.3)
    grid.set(1, 0, 0.4)

    mesh = Mesher().mesh(grid)

    assert np.allclose(mesh.positions, [
        [0, 0.1, 0],
        [0, 0.2, 1],
        [1, 0.3, 1],
        [1, 0.4, 0],
    ])
    assert mesh.indices.tolist() == [0, 1, 2, 0, 2, 3]


def test_cells_follow_storage_order():
    grid = random_grid(3, 4)
    mesh = Mesher().mesh(grid)

    cell = 0
    for x in range(grid.width - 1):
        for z in range(grid.depth - 1):
            base = 4 * cell
            assert np.allclose(mesh.positions[base], [x, grid.get(x, z), z])
            assert np.allclose(mesh.positions[base + 2], [x + 1, grid.get(x + 1, z + 1), z + 1])
            assert mesh.indices[6 * cell:6 * cell + 6].tolist() == [
                base, base + 1, base + 2, base, base + 2, base + 3
            ]
            cell += 1


def test_vertices_are_not_shared():
    mesh = Mesher().mesh(random_grid(4, 4))

    assert len(np.unique(mesh.indices)) == mesh.vertex_count
    # corner (1, 1) appears once for each of the four cells touching it
    matches = np.all(np.isclose(mesh.positions[:, [0, 2]], [1.0, 1.0]), axis=1)
    assert matches.sum() == 4


def test_flat_shading_within_each_quad():
    mesh = Mesher().mesh(random_grid(5, 6, seed=3))
    quads = mesh.normals.reshape(-1, 4, 3)

    for quad in quads:
        assert np.all(quad == quad[0])


def test_normals_are_unit_length():
    mesh = Mesher(height_scale=25.0).mesh(random_grid(5, 5, seed=9))

    assert np.allclose(np.linalg.norm(mesh.normals, axis=1), 1.0, atol=1e-6)


def test_slope_normal_leans_away_from_uphill():
    # height rises by 1 per step in x
    grid = HeightGrid.from_array(np.array([[0.0, 0.0], [1.0, 1.0]]))

    mesh = Mesher().mesh(grid)

    expected = np.array([-1.0, 1.0, 0.0]) / np.sqrt(2.0)
    assert np.allclose(mesh.normals[0], expected)


def test_triangles_wind_with_the_face_normal():
    mesh = Mesher().mesh(random_grid(4, 5, seed=1))

    for i, (a, b, c) in enumerate(mesh.triangles()):
        p0, p1, p2 = mesh.positions[a], mesh.positions[b], mesh.positions[c]
        geometric = np.cross(p1 - p0, p2 - p0)
        assert np.dot(geometric, mesh.normals[a]) > 0


def test_height_and_size_scale():
    grid = HeightGrid(2, 2)
    grid.set(1, 1, 0.5)

    mesh = Mesher(height_scale=10.0, size_scale=2.0).mesh(grid)

    assert np.allclose(mesh.positions[2], [2.0, 5.0, 2.0])
    assert np.allclose(mesh.positions[3], [2.0, 0.0, 0.0])


def test_from_settings_uses_layer_scales():
    mesher = Mesher.from_settings(HeightSettings(height_scale=30.0, size_scale=4.0))

    assert mesher.height_scale == 30.0
    assert mesher.size_scale == 4.0


@pytest.mark.parametrize("height_scale, size_scale", [(0.0, 1.0), (1.0, -2.0), (float("nan"), 1.0)])
def test_invalid_scales_rejected(height_scale, size_scale):
    with pytest.raises(ConfigurationError):
        Mesher(height_scale=height_scale, size_scale=size_scale)


@pytest.mark.parametrize("width, depth", [(0, 0), (1, 1), (1, 5), (5, 1)])
def test_grids_without_cells_give_empty_mesh(width, depth):
    mesh = Mesher().mesh(HeightGrid(width, depth))

    assert mesh.vertex_count == 0
    assert mesh.normal_count == 0
    assert mesh.index_count == 0


def test_mesh_does_not_modify_grid():
    grid = random_grid(4, 4)
    before = grid.buffer.copy()

    Mesher(height_scale=50.0).mesh(grid)

    assert np.array_equal(grid.buffer, before)


def test_mesh_generated_terrain():
    grid = NoiseSampler().generate(HeightSettings(size=9, seed=5, octaves=3))

    mesh = Mesher.from_settings(grid.settings).mesh(grid)

    assert mesh.vertex_count == 8 * 8 * 4
    assert np.all(mesh.normals[:, 1] > 0)


def test_empty_mesh_buffers():
    buffers = Mesh.empty().buffers()

    assert set(buffers) == {"positions", "normals", "indices"}
    assert buffers["positions"].shape == (0, 3)
