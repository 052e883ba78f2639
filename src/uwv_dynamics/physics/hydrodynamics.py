"""
UWV Hydrodynamic Terms
======================

Pure functions evaluating the velocity and orientation dependent terms of
the rigid-body equation of motion of an underwater vehicle:

    M·ν̇ + D(ν)·ν + C(ν)·ν + g(R) = τ

Symbols and Notation:
- ν: Body-frame velocity [u, v, w, p, q, r] (linear [m/s], angular [rad/s])
- M: 6x6 inertia matrix (rigid body + added mass)
- D: Damping matrices (linear and/or quadratic)
- C(ν)·ν: Coriolis/centripetal force/moment
- g(R): Gravity/buoyancy restoring force/moment, R body-to-world rotation
- W, B: Weight and buoyancy force magnitudes [N]
- r_g, r_b: Centers of gravity and buoyancy in body frame [m]

Reference:
Fossen, T.I. "Guidance and Control of Ocean Vehicles" (1994)
McFarland, C.J., Whitcomb, L.L. "Comparative experimental evaluation of a new
adaptive identifier for underwater vehicles" (2013)
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ..data_types.types import (
    DOF,
    ArrayLike,
    ModelFidelity,
    VehicleParameters,
    as_rotation_matrix,
)
from ..errors import InputError

E3 = np.array([0.0, 0.0, 1.0])


@dataclass(frozen=True, eq=False)
class HydrodynamicTerms:
    """Breakdown of the velocity/orientation dependent terms at one instant."""
    damping: np.ndarray       # D(ν)·ν
    coriolis: np.ndarray      # C(ν)·ν, zero for SIMPLE fidelity
    restoring: np.ndarray     # g(R)

    @property
    def total(self) -> np.ndarray:
        """Sum of all terms, i.e. τ - M·ν̇."""
        return self.damping + self.coriolis + self.restoring


def gravity_buoyancy(orientation: ArrayLike,
                     weight: float,
                     buoyancy: float,
                     center_of_gravity: ArrayLike,
                     center_of_buoyancy: ArrayLike) -> np.ndarray:
    """
    Compute gravitational and buoyancy restoring forces g(R).

    g = [ Rᵀ·e3·(W - B) ;
          (r_g·W - r_b·B) × Rᵀ·e3 ]

    No frame convention translation is done here: weight, buoyancy and the
    centers must already follow the convention the caller's orientation uses
    for the world z axis.

    Args:
        orientation: Body-to-world orientation (matrix, quaternion or Euler)
        weight: Weight W [N]
        buoyancy: Buoyancy B [N]
        center_of_gravity: r_g in body frame [m]
        center_of_buoyancy: r_b in body frame [m]

    Returns:
        Restoring force/moment vector [F_x, F_y, F_z, L, M, N]
    """
    R = as_rotation_matrix(orientation)
    e3_body = R.T @ E3

    r_g = np.asarray(center_of_gravity, dtype=float)
    r_b = np.asarray(center_of_buoyancy, dtype=float)

    force = e3_body * (weight - buoyancy)
    moment = np.cross(r_g * weight - r_b * buoyancy, e3_body)

    return np.concatenate([force, moment])


def restoring_forces(orientation: ArrayLike, parameters: VehicleParameters) -> np.ndarray:
    """Gravity/buoyancy term using the weight, buoyancy and centers of ``parameters``."""
    return gravity_buoyancy(orientation,
                            parameters.weight,
                            parameters.buoyancy,
                            parameters.center_of_gravity,
                            parameters.center_of_buoyancy)


def linear_damping(linear_damping_matrix: np.ndarray, velocity: np.ndarray) -> np.ndarray:
    return linear_damping_matrix @ velocity


def quadratic_damping(quadratic_damping_matrix: np.ndarray, velocity: np.ndarray) -> np.ndarray:
    """D_quad·diag(|ν|)·ν"""
    return quadratic_damping_matrix @ (np.abs(velocity) * velocity)


def simple_damping(damping_matrices: Sequence[np.ndarray], velocity: np.ndarray) -> np.ndarray:
    """
    Linear plus quadratic damping (Fossen 1994):

        D(ν)·ν = D_lin·ν + D_quad·diag(|ν|)·ν

    Args:
        damping_matrices: [D_lin, D_quad]
        velocity: Body velocity ν

    Raises:
        InputError: If there are not exactly two damping matrices
    """
    if len(damping_matrices) != 2:
        raise InputError(f"simple damping needs 2 damping matrices (linear, quadratic), "
                         f"got {len(damping_matrices)}")
    return (linear_damping(damping_matrices[0], velocity)
            + quadratic_damping(damping_matrices[1], velocity))


def general_quadratic_damping(quadratic_damping_matrices: Sequence[np.ndarray],
                              velocity: np.ndarray) -> np.ndarray:
    """
    General quadratic damping (McFarland 2013):

        D(ν)·ν = (Σ_i D_i·|ν_i|)·ν,   i = 1..6

    Raises:
        InputError: If there are not exactly six damping matrices
    """
    if len(quadratic_damping_matrices) != DOF:
        raise InputError(f"general quadratic damping needs {DOF} damping matrices (one per DOF), "
                         f"got {len(quadratic_damping_matrices)}")

    speed = np.abs(velocity)
    damping_matrix = np.zeros((DOF, DOF))
    for i, matrix in enumerate(quadratic_damping_matrices):
        damping_matrix += matrix * speed[i]

    return damping_matrix @ velocity


def coriolis(inertia_matrix: np.ndarray, velocity: np.ndarray) -> np.ndarray:
    """
    Compute Coriolis and centripetal forces C(ν)·ν = H(M·ν)·ν.

    With p = M·ν split into linear and angular parts:

        C(ν)·ν = -[ p_lin × ν_ang ;
                    p_lin × ν_lin + p_ang × ν_ang ]

    Args:
        inertia_matrix: 6x6 inertia matrix M
        velocity: Body velocity ν

    Returns:
        Coriolis force/moment vector [F_x, F_y, F_z, L, M, N]
    """
    momentum = inertia_matrix @ velocity
    p_lin, p_ang = momentum[:3], momentum[3:]
    v_lin, v_ang = velocity[:3], velocity[3:]

    effect = np.concatenate([
        np.cross(p_lin, v_ang),
        np.cross(p_lin, v_lin) + np.cross(p_ang, v_ang),
    ])
    return -effect


def damping_terms(parameters: VehicleParameters, velocity: np.ndarray) -> np.ndarray:
    """Damping part of D(ν)·ν for the fidelity of ``parameters``."""
    fidelity = parameters.model_fidelity
    if fidelity is ModelFidelity.SIMPLE or fidelity is ModelFidelity.INTERMEDIATE:
        return simple_damping(parameters.damping_matrices, velocity)
    elif fidelity is ModelFidelity.COMPLEX:
        return general_quadratic_damping(parameters.damping_matrices, velocity)
    raise InputError(f"Unsupported model fidelity: {fidelity}")


def coriolis_terms(parameters: VehicleParameters, velocity: np.ndarray) -> np.ndarray:
    """Coriolis part for the fidelity of ``parameters`` (zero for SIMPLE)."""
    if parameters.model_fidelity is ModelFidelity.SIMPLE:
        return np.zeros(DOF)
    return coriolis(parameters.inertia_matrix, velocity)


def damping_and_coriolis(parameters: VehicleParameters, velocity: np.ndarray) -> np.ndarray:
    """
    Combined damping and Coriolis effect, selected by model fidelity:

    - SIMPLE: simple damping
    - INTERMEDIATE: Coriolis + simple damping
    - COMPLEX: Coriolis + general quadratic damping
    """
    fidelity = parameters.model_fidelity
    if fidelity is ModelFidelity.SIMPLE:
        return simple_damping(parameters.damping_matrices, velocity)
    elif fidelity is ModelFidelity.INTERMEDIATE:
        return (coriolis(parameters.inertia_matrix, velocity)
                + simple_damping(parameters.damping_matrices, velocity))
    elif fidelity is ModelFidelity.COMPLEX:
        return (coriolis(parameters.inertia_matrix, velocity)
                + general_quadratic_damping(parameters.damping_matrices, velocity))
    raise InputError(f"Unsupported model fidelity: {fidelity}")
