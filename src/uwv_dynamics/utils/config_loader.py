"""
UWV Configuration Loader
========================

Builds VehicleParameters from a YAML configuration file (or an equivalent
nested dictionary) and provides the built-in default vehicle.

The configuration follows the vehicle / hydrodynamics / environment layout:
the inertia matrix is assembled from the rigid-body mass properties plus
diagonal added mass unless an explicit 6x6 `inertia_matrix` is given, and
weight/buoyancy are derived from mass, gravity and the selected buoyancy
method.
"""

import copy
from pathlib import Path
from typing import Any, Dict, List, Union

import numpy as np
import yaml

from ..data_types.types import DOF, ModelFidelity, VehicleParameters, skew
from ..errors import ParameterError
from .logging_config import get_logger

logger = get_logger()


# REMUS-class AUV, 2% positively buoyant, CG 2 cm below CB
DEFAULT_CONFIG: Dict[str, Any] = {
    'vehicle': {
        'model_fidelity': 'SIMPLE',
        'mass': 180.0,                  # [kg]
        'I_xx': 2.3,                    # [kg*m²]
        'I_yy': 175.6,
        'I_zz': 175.6,
        'cg_offset_x': 0.0,             # [m]
        'cg_offset_y': 0.0,
        'cg_offset_z': -0.02,
        'cb_offset_x': 0.0,
        'cb_offset_y': 0.0,
        'cb_offset_z': 0.0,
        'buoyancy_method': 'buoyancy_fraction',
        'buoyancy_fraction': 1.02,      # B/W ratio
    },
    'hydrodynamics': {
        'added_mass_surge': 9.0,        # [kg]
        'added_mass_sway': 90.0,
        'added_mass_heave': 90.0,
        'added_inertia_roll': 0.23,     # [kg*m²]
        'added_inertia_pitch': 52.7,
        'added_inertia_yaw': 52.7,
        'linear_damping': [0.0, 0.0, 0.0, 2.0, 35.0, 35.0],
        'quadratic_damping': [35.0, 120.0, 120.0, 0.5, 10.0, 10.0],
    },
    'environment': {
        'fluid_density': 1025.0,        # [kg/m³]
        'gravity': 9.81,                # [m/s²]
    },
}

ADDED_MASS_KEYS = (
    'added_mass_surge', 'added_mass_sway', 'added_mass_heave',
    'added_inertia_roll', 'added_inertia_pitch', 'added_inertia_yaw',
)


def _require(section: Dict[str, Any], key: str, section_name: str) -> Any:
    try:
        return section[key]
    except KeyError:
        raise ParameterError(f"Missing configuration key '{section_name}.{key}'") from None


_MISSING = object()


def _number(section: Dict[str, Any], key: str, section_name: str, default: Any = _MISSING) -> float:
    """Read a scalar configuration value as a float."""
    value = _require(section, key, section_name) if default is _MISSING else section.get(key, default)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ParameterError(f"Configuration key '{section_name}.{key}' must be a number, got {value!r}") from None


def _section(config: Dict[str, Any], key: str, required: bool = False) -> Dict[str, Any]:
    section = _require(config, key, 'config') if required else config.get(key)
    if section is None and not required:
        return {}
    if not isinstance(section, dict):
        raise ParameterError(f"Configuration section '{key}' must be a mapping, got {type(section).__name__}")
    return section


def _damping_matrix(value: Any, name: str) -> np.ndarray:
    """Accept either 6 diagonal entries or a full 6x6 matrix."""
    try:
        array = np.asarray(value, dtype=float)
    except (TypeError, ValueError) as exc:
        raise ParameterError(f"{name} must be numeric: {exc}") from exc

    if array.shape == (DOF,):
        return np.diag(array)
    if array.shape == (DOF, DOF):
        return array
    raise ParameterError(f"{name} must have 6 diagonal entries or be a 6x6 matrix, got shape {array.shape}")


def build_inertia_matrix(vehicle_cfg: Dict[str, Any], hydro_cfg: Dict[str, Any]) -> np.ndarray:
    """
    Assemble M = M_RB + M_A.

    M_RB = [[ m·I,      -m·S(r_g) ],
            [ m·S(r_g),  diag(I_xx, I_yy, I_zz) ]]
    M_A  = diag(added masses, added inertias)
    """
    if 'inertia_matrix' in vehicle_cfg:
        return np.asarray(vehicle_cfg['inertia_matrix'], dtype=float)

    mass = _number(vehicle_cfg, 'mass', 'vehicle')
    inertia = np.diag([
        _number(vehicle_cfg, 'I_xx', 'vehicle'),
        _number(vehicle_cfg, 'I_yy', 'vehicle'),
        _number(vehicle_cfg, 'I_zz', 'vehicle'),
    ])
    r_g = _center(vehicle_cfg, 'cg')

    rigid_body = np.block([
        [mass * np.eye(3), -mass * skew(r_g)],
        [mass * skew(r_g), inertia]
    ])
    added_mass = np.diag([_number(hydro_cfg, key, 'hydrodynamics', 0.0) for key in ADDED_MASS_KEYS])

    return rigid_body + added_mass


def _center(vehicle_cfg: Dict[str, Any], prefix: str) -> np.ndarray:
    return np.array([_number(vehicle_cfg, f'{prefix}_offset_{axis}', 'vehicle', 0.0) for axis in 'xyz'])


def _weight_and_buoyancy(vehicle_cfg: Dict[str, Any], env_cfg: Dict[str, Any]):
    gravity = _number(env_cfg, 'gravity', 'environment', 9.81) # [m/s²]
    fluid_density = _number(env_cfg, 'fluid_density', 'environment', 1025.0)  # [kg/m³]

    if 'weight' in vehicle_cfg:
        weight = _number(vehicle_cfg, 'weight', 'vehicle')
        mass = weight / gravity
    else:
        mass = _number(vehicle_cfg, 'mass', 'vehicle')
        weight = mass * gravity

    buoyancy_method = vehicle_cfg.get('buoyancy_method', 'buoyancy_fraction')
    if buoyancy_method == 'displaced_volume':
        V_displaced = _number(vehicle_cfg, 'displaced_volume', 'vehicle')  # [m³]
        buoyancy = fluid_density * V_displaced * gravity
    elif buoyancy_method == 'buoyancy_fraction':
        buoyancy_fraction = _number(vehicle_cfg, 'buoyancy_fraction', 'vehicle', 1.0) # B/W ratio
        V_displaced = mass / fluid_density * buoyancy_fraction
        buoyancy = fluid_density * V_displaced * gravity
    elif buoyancy_method == 'force':
        buoyancy = _number(vehicle_cfg, 'buoyancy', 'vehicle')
    else:
        raise ParameterError(f"Unknown buoyancy_method: {buoyancy_method}")

    return weight, buoyancy


def _damping_matrices(fidelity: ModelFidelity, hydro_cfg: Dict[str, Any]) -> List[np.ndarray]:
    if fidelity is ModelFidelity.COMPLEX:
        matrices = _require(hydro_cfg, 'quadratic_damping_matrices', 'hydrodynamics')
        return [_damping_matrix(value, f"quadratic_damping_matrices[{i}]")
                for i, value in enumerate(matrices)]

    return [
        _damping_matrix(hydro_cfg.get('linear_damping', [0.0] * DOF), 'linear_damping'),
        _damping_matrix(hydro_cfg.get('quadratic_damping', [0.0] * DOF), 'quadratic_damping'),
    ]


def parameters_from_config(config: Dict[str, Any]) -> VehicleParameters:
    """
    Build vehicle parameters from a configuration dictionary.

    Args:
        config: Dictionary with 'vehicle', 'hydrodynamics' and (optional)
                'environment' sections

    Returns:
        VehicleParameters (not yet validated against the model fidelity)

    Raises:
        ParameterError: If a section or key is missing or malformed
    """
    vehicle_cfg = _section(config, 'vehicle', required=True)
    hydro_cfg = _section(config, 'hydrodynamics')
    env_cfg = _section(config, 'environment')

    fidelity = ModelFidelity.from_name(vehicle_cfg.get('model_fidelity', 'SIMPLE'))
    weight, buoyancy = _weight_and_buoyancy(vehicle_cfg, env_cfg)

    parameters = VehicleParameters(
        inertia_matrix=build_inertia_matrix(vehicle_cfg, hydro_cfg),
        model_fidelity=fidelity,
        damping_matrices=tuple(_damping_matrices(fidelity, hydro_cfg)),
        weight=weight,
        buoyancy=buoyancy,
        center_of_gravity=_center(vehicle_cfg, 'cg'),
        center_of_buoyancy=_center(vehicle_cfg, 'cb'),
    )

    if abs(parameters.center_of_gravity[1]) > 1e-6 or abs(parameters.center_of_buoyancy[1]) > 1e-6:
        logger.warning("Non-zero lateral CG/CB offsets: may cause roll bias")

    return parameters


def load_config(config_file: Union[str, Path]) -> Dict[str, Any]:
    """Load configuration from YAML file."""
    config_path = Path(config_file)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)

    if not isinstance(config, dict):
        raise ParameterError(f"Configuration file {config_path} does not contain a mapping")

    logger.info(f"Configuration loaded from: {config_path}")
    return config


def load_parameters(config_file: Union[str, Path]) -> VehicleParameters:
    """Load a YAML configuration file and build vehicle parameters from it."""
    return parameters_from_config(load_config(config_file))


def default_config() -> Dict[str, Any]:
    """Independent copy of the built-in default configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


def default_parameters() -> VehicleParameters:
    """Built-in default vehicle parameters (valid for the SIMPLE model)."""
    return parameters_from_config(DEFAULT_CONFIG)
