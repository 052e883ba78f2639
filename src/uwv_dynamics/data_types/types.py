"""
UWV Dynamics Data Types
=======================

This module defines the data structures shared by the dynamics model and its
configuration layer, plus the orientation conversions used to turn a caller's
orientation into a body-to-world rotation matrix.

Key Design Principles:
- All physical units in SI (meters, kg, seconds, newtons)
- Angles in radians
- Vehicle parameters are immutable once constructed: every array is copied
  and marked read-only, so a snapshot handed out by the model cannot be used
  to modify the model
- Velocity/effort/acceleration vectors are ordered [surge, sway, heave,
  roll, pitch, yaw]
"""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple, Union

import numpy as np

from ..errors import InputError, ParameterError

DOF = 6

ArrayLike = Union[Sequence[float], np.ndarray]


class ModelFidelity(Enum):
    """
    Selects which damping and Coriolis terms the model evaluates.

    - SIMPLE: linear + quadratic damping, no Coriolis
    - INTERMEDIATE: linear + quadratic damping, plus Coriolis/centripetal
    - COMPLEX: general quadratic damping (one matrix per DOF), plus Coriolis
    """
    SIMPLE = "simple"
    INTERMEDIATE = "intermediate"
    COMPLEX = "complex"

    @property
    def required_damping_matrices(self) -> int:
        """Number of damping matrices this fidelity expects."""
        if self is ModelFidelity.COMPLEX:
            return DOF
        return 2

    @classmethod
    def from_name(cls, name: Union[str, "ModelFidelity"]) -> "ModelFidelity":
        """Parse a fidelity from its (case-insensitive) name."""
        if isinstance(name, cls):
            return name
        try:
            return cls[str(name).strip().upper()]
        except KeyError:
            valid = ", ".join(member.name for member in cls)
            raise ParameterError(f"Unknown model fidelity '{name}' (expected one of: {valid})") from None


def _frozen_array(value: ArrayLike, shape: Tuple[int, ...], name: str) -> np.ndarray:
    """Copy ``value`` into a read-only float array of the given shape."""
    try:
        array = np.array(value, dtype=float)
    except (TypeError, ValueError) as exc:
        raise ParameterError(f"{name} must be numeric: {exc}") from exc

    if array.shape != shape:
        raise ParameterError(f"{name} must have shape {shape}, got {array.shape}")

    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class VehicleParameters:
    """
    Complete parameter set of the rigid-body hydrodynamic model.

    Construction only checks shapes. Consistency between the fidelity and the
    number of damping matrices, and the sign of weight/buoyancy, are checked
    by the model when the parameters are applied.

    Attributes:
        inertia_matrix: 6x6 rigid-body plus added-mass inertia matrix
        model_fidelity: Which damping/Coriolis combination to evaluate
        damping_matrices: 6x6 damping matrices. SIMPLE and INTERMEDIATE use
                          [linear, quadratic]; COMPLEX uses one quadratic
                          matrix per DOF
        weight: Weight force magnitude [N]
        buoyancy: Buoyancy force magnitude [N]
        center_of_gravity: CG position in body frame [m]
        center_of_buoyancy: CB position in body frame [m]
    """
    inertia_matrix: np.ndarray
    model_fidelity: ModelFidelity
    damping_matrices: Tuple[np.ndarray, ...]
    weight: float                       # [N]
    buoyancy: float                     # [N]
    center_of_gravity: np.ndarray       # [m] body frame
    center_of_buoyancy: np.ndarray      # [m] body frame

    def __post_init__(self):
        # Frozen dataclass: normalise fields through object.__setattr__
        object.__setattr__(self, 'inertia_matrix',
                           _frozen_array(self.inertia_matrix, (DOF, DOF), "inertia_matrix"))
        object.__setattr__(self, 'model_fidelity', ModelFidelity.from_name(self.model_fidelity))

        if isinstance(self.damping_matrices, np.ndarray) and self.damping_matrices.ndim == 2:
            raise ParameterError("damping_matrices must be a sequence of 6x6 matrices, got a single matrix")
        object.__setattr__(self, 'damping_matrices', tuple(
            _frozen_array(matrix, (DOF, DOF), f"damping_matrices[{i}]")
            for i, matrix in enumerate(self.damping_matrices)
        ))

        try:
            object.__setattr__(self, 'weight', float(self.weight))
            object.__setattr__(self, 'buoyancy', float(self.buoyancy))
        except (TypeError, ValueError) as exc:
            raise ParameterError(f"weight and buoyancy must be scalars: {exc}") from exc

        object.__setattr__(self, 'center_of_gravity',
                           _frozen_array(self.center_of_gravity, (3,), "center_of_gravity"))
        object.__setattr__(self, 'center_of_buoyancy',
                           _frozen_array(self.center_of_buoyancy, (3,), "center_of_buoyancy"))


def as_vector6(value: ArrayLike, name: str) -> np.ndarray:
    """Coerce a kinematic input into a float 6-vector."""
    try:
        vector = np.asarray(value, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InputError(f"{name} must be numeric: {exc}") from exc

    if vector.ndim != 1:
        raise InputError(f"{name} must be a flat vector, got shape {vector.shape}")
    if vector.shape != (DOF,):
        raise InputError(f"{name} must have {DOF} elements, got {vector.size}")
    return vector


def skew(vector: ArrayLike) -> np.ndarray:
    """
    Skew-symmetric (so(3)) matrix of a 3-vector, such that
    skew(a) @ b == np.cross(a, b).
    """
    x, y, z = vector
    return np.array([
        [0.0, -z, y],
        [z, 0.0, -x],
        [-y, x, 0.0]
    ])


def euler_to_rotation_matrix(roll: float, pitch: float, yaw: float) -> np.ndarray:
    """
    Convert Euler angles to rotation matrix (body to world).

    Args:
        roll, pitch, yaw: Euler angles in radians

    Returns:
        3x3 rotation matrix from body to world frame
    """
    cr, sr = np.cos(roll), np.sin(roll)
    cp, sp = np.cos(pitch), np.sin(pitch)
    cy, sy = np.cos(yaw), np.sin(yaw)

    # Rotation matrix: R = Rz(yaw) * Ry(pitch) * Rx(roll)
    R = np.array([
        [cy*cp, cy*sp*sr - sy*cr, cy*sp*cr + sy*sr],
        [sy*cp, sy*sp*sr + cy*cr, sy*sp*cr - cy*sr],
        [-sp, cp*sr, cp*cr]
    ])

    return R


def quaternion_to_rotation_matrix(q: ArrayLike) -> np.ndarray:
    """
    Convert a quaternion [w, x, y, z] to a rotation matrix (body to world).

    The quaternion is normalised first; a zero quaternion is rejected.
    """
    q = np.asarray(q, dtype=float)
    norm = np.linalg.norm(q)
    if norm < 1e-12:
        raise InputError("orientation quaternion has zero norm")
    q0, q1, q2, q3 = q / norm

    return np.array([
        [1 - 2*(q2**2 + q3**2), 2*(q1*q2 - q0*q3), 2*(q1*q3 + q0*q2)],
        [2*(q1*q2 + q0*q3), 1 - 2*(q1**2 + q3**2), 2*(q2*q3 - q0*q1)],
        [2*(q1*q3 - q0*q2), 2*(q2*q3 + q0*q1), 1 - 2*(q1**2 + q2**2)],
    ])


def as_rotation_matrix(orientation: ArrayLike) -> np.ndarray:
    """
    Interpret an orientation as a body-to-world rotation matrix.

    Accepted forms:
    - 3x3 rotation matrix (used as-is)
    - 4 elements: unit quaternion [w, x, y, z]
    - 3 elements: Euler angles [roll, pitch, yaw] in radians (ZYX)

    Raises:
        InputError: If the orientation contains NaN or has another shape
    """
    try:
        array = np.asarray(orientation, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InputError(f"orientation must be numeric: {exc}") from exc

    if np.isnan(array).any():
        raise InputError("orientation is unset (contains NaN)")

    if array.shape == (3, 3):
        return array
    if array.shape == (4,):
        return quaternion_to_rotation_matrix(array)
    if array.shape == (3,):
        return euler_to_rotation_matrix(*array)

    raise InputError(
        f"orientation must be a 3x3 rotation matrix, a quaternion [w, x, y, z] "
        f"or Euler angles [roll, pitch, yaw], got shape {array.shape}"
    )
