"""
UWV Dynamics
============

Instantaneous 6-DOF rigid-body dynamics of underwater vehicles: forward
dynamics (effort -> acceleration) and inverse dynamics (acceleration ->
effort) from a parameterized hydrodynamic model with inertia, damping,
Coriolis/centripetal and gravity/buoyancy terms.
"""

from .data_types.types import ModelFidelity, VehicleParameters
from .errors import DynamicsError, InputError, ParameterError
from .physics.dynamic_model import RigidBodyDynamicsModel, check_parameters
from .physics.hydrodynamics import HydrodynamicTerms
from .utils.config_loader import default_parameters, load_parameters, parameters_from_config

__version__ = "0.1.0"

__all__ = [
    'RigidBodyDynamicsModel',
    'VehicleParameters',
    'ModelFidelity',
    'HydrodynamicTerms',
    'check_parameters',
    'default_parameters',
    'load_parameters',
    'parameters_from_config',
    'DynamicsError',
    'ParameterError',
    'InputError',
]
