"""
UWV Rigid-Body Dynamic Model - 6-DOF
====================================

This module implements the instantaneous 6-DOF (surge, sway, heave, roll,
pitch, yaw) dynamics of an underwater vehicle. Given the vehicle velocity and
orientation, the model evaluates

    M·ν̇ + D(ν)·ν + C(ν)·ν + g(R) = τ

in either direction:
- forward dynamics: τ -> ν̇ (compute_acceleration), used by simulators
- inverse dynamics: ν̇ -> τ (compute_effort), used by model-based control

The model holds one validated VehicleParameters and the inverse of its inertia
matrix. Evaluations never modify that state; set_parameters replaces both
together or not at all.

Symbols and Notation:
- τ: Control effort [X, Y, Z, K, M, N] in body frame [N, N*m]
- ν: Body velocity [u, v, w, p, q, r] [m/s, rad/s]
- ν̇: Body acceleration [m/s², rad/s²]
- R: Body-to-world orientation
"""

from typing import Optional, Tuple

import numpy as np

from ..data_types.types import ArrayLike, ModelFidelity, VehicleParameters, as_vector6
from ..errors import InputError, ParameterError
from ..utils.config_loader import default_parameters
from ..utils.logging_config import get_logger
from .hydrodynamics import (
    HydrodynamicTerms,
    coriolis_terms,
    damping_and_coriolis,
    damping_terms,
    restoring_forces,
)

logger = get_logger()

# Above this condition number the inertia matrix is reported as ill-conditioned
ILL_CONDITIONED_LIMIT = 1e12


def check_parameters(parameters: VehicleParameters) -> None:
    """
    Check a parameter set for inconsistencies.

    Raises:
        ParameterError: If the number of damping matrices does not match the
                        model fidelity, or weight/buoyancy is not positive
    """
    fidelity = parameters.model_fidelity
    n_matrices = len(parameters.damping_matrices)

    if n_matrices != fidelity.required_damping_matrices:
        if fidelity is ModelFidelity.COMPLEX:
            raise ParameterError(
                f"in COMPLEX model, damping_matrices should have six elements, one quadratic "
                f"damping matrix / DOF (got {n_matrices})"
            )
        raise ParameterError(
            f"in {fidelity.name} model, damping_matrices should have two elements, the linear "
            f"damping matrix and quadratic damping matrix (got {n_matrices})"
        )

    if not parameters.weight > 0:
        raise ParameterError(f"weight must be a positive value (got {parameters.weight})")
    if not parameters.buoyancy > 0:
        raise ParameterError(f"buoyancy must be a positive value (got {parameters.buoyancy})")


def compute_inverse_inertia(inertia_matrix: np.ndarray) -> np.ndarray:
    """
    Invert the inertia matrix by solving M·X = I in the least-squares sense.

    numpy's lstsq uses an SVD, which stays well behaved for near-singular
    inertia matrices where a direct inverse would blow up.
    """
    inverse, _, rank, singular_values = np.linalg.lstsq(inertia_matrix, np.eye(inertia_matrix.shape[0]),
                                                        rcond=None)

    if rank < inertia_matrix.shape[0]:
        logger.warning(f"Inertia matrix is rank deficient (rank {rank}), using least-squares inverse")
    elif singular_values[-1] > 0 and singular_values[0] / singular_values[-1] > ILL_CONDITIONED_LIMIT:
        logger.warning(f"Inertia matrix is ill-conditioned "
                       f"(condition number {singular_values[0] / singular_values[-1]:.3e})")

    inverse.setflags(write=False)
    return inverse


def _check_finite(vector: np.ndarray, name: str) -> None:
    if np.isnan(vector).any():
        raise InputError(f"RigidBodyDynamicsModel: {name} is unset (contains NaN)")


class RigidBodyDynamicsModel:
    """
    6-DOF rigid-body hydrodynamic model of an underwater vehicle.

    The fidelity of the evaluated model is part of the parameter set:
    - SIMPLE: linear + quadratic damping and restoring forces
    - INTERMEDIATE: SIMPLE plus Coriolis/centripetal forces
    - COMPLEX: general quadratic damping, Coriolis and restoring forces

    Not thread-safe for reconfiguration: callers evaluating from several
    threads must serialise set_parameters themselves.
    """

    def __init__(self, parameters: Optional[VehicleParameters] = None):
        """
        Initialize the model.

        Args:
            parameters: Vehicle parameters, the built-in default vehicle when None

        Raises:
            ParameterError: If the parameters are inconsistent
        """
        # (parameters, inverse inertia), always replaced as a pair
        self._state: Optional[Tuple[VehicleParameters, np.ndarray]] = None

        self.set_parameters(default_parameters() if parameters is None else parameters)

    def set_parameters(self, parameters: VehicleParameters) -> None:
        """
        Replace the active parameter set.

        The parameters are validated and the inverse inertia matrix is computed
        before anything is assigned, so a rejected update leaves the previous
        configuration in effect.

        Raises:
            ParameterError: If the parameters are inconsistent
        """
        if not isinstance(parameters, VehicleParameters):
            raise ParameterError(f"expected VehicleParameters, got {type(parameters).__name__}")

        try:
            check_parameters(parameters)
        except ParameterError as exc:
            logger.error(f"Rejected vehicle parameters: {exc}")
            raise

        inverse_inertia = compute_inverse_inertia(parameters.inertia_matrix)
        self._state = (parameters, inverse_inertia)

        logger.log_parameter_summary(parameters)

    def get_parameters(self) -> VehicleParameters:
        """Current parameter set (immutable snapshot)."""
        return self._state[0]

    @property
    def inverse_inertia_matrix(self) -> np.ndarray:
        """Cached inverse of the inertia matrix (copy)."""
        return self._state[1].copy()

    def compute_acceleration(self,
                             control_input: ArrayLike,
                             velocity: ArrayLike,
                             orientation: ArrayLike) -> np.ndarray:
        """
        Forward dynamics: acceleration produced by a control effort.

        ν̇ = M⁻¹·(τ - g(R) - (D(ν) + C(ν))·ν)

        Args:
            control_input: Effort τ [X, Y, Z, K, M, N]
            velocity: Body velocity ν [u, v, w, p, q, r]
            orientation: Body-to-world orientation (matrix, quaternion [w, x, y, z]
                         or Euler angles [roll, pitch, yaw])

        Returns:
            Body acceleration ν̇

        Raises:
            InputError: If control_input or velocity contains NaN, or an input
                        cannot be interpreted
        """
        control_input = as_vector6(control_input, "control input")
        velocity = as_vector6(velocity, "velocity")
        _check_finite(control_input, "control input")
        _check_finite(velocity, "velocity")

        parameters, inverse_inertia = self._state
        acceleration = control_input - restoring_forces(orientation, parameters)
        acceleration -= damping_and_coriolis(parameters, velocity)
        return inverse_inertia @ acceleration

    def compute_effort(self,
                       acceleration: ArrayLike,
                       velocity: ArrayLike,
                       orientation: ArrayLike) -> np.ndarray:
        """
        Inverse dynamics: effort needed for a desired acceleration.

        τ = M·ν̇ + g(R) + (D(ν) + C(ν))·ν

        Raises:
            InputError: If acceleration or velocity contains NaN, or an input
                        cannot be interpreted
        """
        acceleration = as_vector6(acceleration, "acceleration")
        velocity = as_vector6(velocity, "velocity")
        _check_finite(acceleration, "acceleration")
        _check_finite(velocity, "velocity")

        parameters, _ = self._state
        effort = parameters.inertia_matrix @ acceleration + restoring_forces(orientation, parameters)
        effort += damping_and_coriolis(parameters, velocity)
        return effort

    def compute_terms(self, velocity: ArrayLike, orientation: ArrayLike) -> HydrodynamicTerms:
        """Per-term breakdown of damping, Coriolis and restoring forces."""
        velocity = as_vector6(velocity, "velocity")
        _check_finite(velocity, "velocity")

        parameters, _ = self._state
        return HydrodynamicTerms(
            damping=damping_terms(parameters, velocity),
            coriolis=coriolis_terms(parameters, velocity),
            restoring=restoring_forces(orientation, parameters),
        )
