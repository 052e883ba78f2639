import pytest
import numpy as np

from uwv_dynamics.data_types.types import euler_to_rotation_matrix
from uwv_dynamics.physics.hydrodynamics import gravity_buoyancy, restoring_forces
from uwv_dynamics.utils.config_loader import default_parameters


@pytest.fixture
def parameters():
    return default_parameters()


@pytest.mark.parametrize("euler", [
    [0.0, 0.0, 0.0],
    [np.deg2rad(10), 0.0, 0.0],
    [0.0, np.deg2rad(-35), np.deg2rad(120)],
    [np.deg2rad(170), np.deg2rad(60), np.deg2rad(-45)],
])
def test_neutral_buoyancy_no_offset(euler):
    """W = B with coincident CG/CB gives no restoring force at any attitude."""
    W = 1765.8
    center = np.array([0.1, -0.05, 0.3])

    restoring = gravity_buoyancy(euler, W, W, center, center)

    np.testing.assert_array_almost_equal(restoring, np.zeros(6), decimal=10)


def test_positive_buoyancy_level(parameters):
    """At level trim the net force is (W - B) along body z, with no moment."""
    restoring = restoring_forces(np.eye(3), parameters)

    expected_F_z = parameters.weight - parameters.buoyancy  # B > W, negative
    assert restoring[2] < 0
    assert restoring[2] == pytest.approx(expected_F_z)
    np.testing.assert_array_almost_equal(restoring[[0, 1, 3, 4, 5]], np.zeros(5), decimal=10)


def test_roll_restoring_moment(parameters):
    """CG below CB should create a moment opposing roll."""
    restoring = restoring_forces([np.deg2rad(10), 0.0, 0.0], parameters)

    # g sits on the left-hand side of the equation of motion, the moment
    # acting on the vehicle is -g
    assert -restoring[3] < 0, "Roll moment should restore toward level"
    expected_L = 0.02 * parameters.weight * np.sin(np.deg2rad(10))
    assert restoring[3] == pytest.approx(expected_L)


def test_pitch_restoring_moment(parameters):
    """CG below CB should create a moment opposing pitch."""
    restoring = restoring_forces([0.0, np.deg2rad(15), 0.0], parameters)

    assert -restoring[4] < 0, "Pitch moment should restore toward level"


def test_force_rotated_into_body_frame():
    """The net vertical force is expressed in body axes through Rᵀ."""
    W, B = 1000.0, 900.0
    R = euler_to_rotation_matrix(0.3, -0.2, 1.1)

    restoring = gravity_buoyancy(R, W, B, np.zeros(3), np.zeros(3))

    np.testing.assert_allclose(restoring[:3], R.T @ np.array([0.0, 0.0, W - B]), atol=1e-12)
    assert np.linalg.norm(restoring[:3]) == pytest.approx(W - B)


def test_orientation_forms_agree(parameters):
    """Matrix, quaternion and Euler orientations give the same term."""
    roll = np.deg2rad(25)
    quaternion = [np.cos(roll / 2), np.sin(roll / 2), 0.0, 0.0]

    from_euler = restoring_forces([roll, 0.0, 0.0], parameters)
    from_quaternion = restoring_forces(quaternion, parameters)
    from_matrix = restoring_forces(euler_to_rotation_matrix(roll, 0.0, 0.0), parameters)

    np.testing.assert_allclose(from_quaternion, from_euler, atol=1e-10)
    np.testing.assert_allclose(from_matrix, from_euler, atol=1e-12)
