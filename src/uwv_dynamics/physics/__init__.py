"""
UWV Physics Module
==================

Hydrodynamic terms of the 6-DOF equation of motion and the rigid-body
dynamic model that combines them.
"""

from .dynamic_model import RigidBodyDynamicsModel, check_parameters, compute_inverse_inertia
from .hydrodynamics import (
    HydrodynamicTerms,
    coriolis,
    damping_and_coriolis,
    general_quadratic_damping,
    gravity_buoyancy,
    linear_damping,
    quadratic_damping,
    restoring_forces,
    simple_damping,
)

__all__ = [
    'RigidBodyDynamicsModel',
    'check_parameters',
    'compute_inverse_inertia',
    'HydrodynamicTerms',
    'coriolis',
    'damping_and_coriolis',
    'general_quadratic_damping',
    'gravity_buoyancy',
    'linear_damping',
    'quadratic_damping',
    'restoring_forces',
    'simple_damping',
]
