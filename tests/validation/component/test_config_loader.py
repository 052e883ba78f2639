import logging
from pathlib import Path

import pytest
import numpy as np
import yaml

from uwv_dynamics import ModelFidelity, ParameterError, RigidBodyDynamicsModel
from uwv_dynamics.utils.config_loader import (
    default_config,
    default_parameters,
    load_config,
    load_parameters,
    parameters_from_config,
)

PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
DEFAULT_CONFIG_FILE = PROJECT_ROOT / "config" / "vehicle.yaml"


def write_config(tmp_path, config):
    path = tmp_path / "vehicle.yaml"
    with open(path, 'w') as f:
        yaml.safe_dump(config, f, default_flow_style=False)
    return path


@pytest.fixture
def config():
    return default_config()


def test_shipped_config_matches_default():
    """config/vehicle.yaml describes the built-in default vehicle."""
    from_file = load_parameters(DEFAULT_CONFIG_FILE)
    default = default_parameters()

    np.testing.assert_allclose(from_file.inertia_matrix, default.inertia_matrix)
    assert from_file.model_fidelity is default.model_fidelity
    assert from_file.weight == pytest.approx(default.weight)
    assert from_file.buoyancy == pytest.approx(default.buoyancy)
    for a, b in zip(from_file.damping_matrices, default.damping_matrices):
        np.testing.assert_allclose(a, b)


def test_default_inertia_matrix():
    """M = M_RB + M_A with the CG offset coupling surge/pitch and sway/roll."""
    M = default_parameters().inertia_matrix

    np.testing.assert_allclose(np.diag(M), [189.0, 270.0, 270.0, 2.53, 228.3, 228.3])
    np.testing.assert_allclose(M, M.T)
    assert M[0, 4] == pytest.approx(180.0 * -0.02)
    assert M[1, 3] == pytest.approx(-180.0 * -0.02)
    # Heave is not coupled by a purely vertical CG offset
    np.testing.assert_array_equal(M[2, [0, 1, 3, 4, 5]], np.zeros(5))


def test_default_weight_and_buoyancy():
    parameters = default_parameters()

    assert parameters.weight == pytest.approx(180.0 * 9.81)
    assert parameters.buoyancy == pytest.approx(1.02 * 180.0 * 9.81)
    np.testing.assert_array_equal(parameters.center_of_gravity, [0.0, 0.0, -0.02])


def test_diagonal_damping_entries(config):
    parameters = parameters_from_config(config)

    np.testing.assert_array_equal(parameters.damping_matrices[0], np.diag([0.0, 0.0, 0.0, 2.0, 35.0, 35.0]))
    np.testing.assert_array_equal(parameters.damping_matrices[1],
                                  np.diag([35.0, 120.0, 120.0, 0.5, 10.0, 10.0]))


def test_full_damping_matrix(config):
    full = np.arange(36, dtype=float).reshape(6, 6)
    config['hydrodynamics']['linear_damping'] = full.tolist()

    np.testing.assert_array_equal(parameters_from_config(config).damping_matrices[0], full)


def test_displaced_volume(tmp_path, config):
    config['vehicle']['buoyancy_method'] = 'displaced_volume'
    config['vehicle']['displaced_volume'] = 0.179

    parameters = load_parameters(write_config(tmp_path, config))

    assert parameters.buoyancy == pytest.approx(1025.0 * 0.179 * 9.81)


def test_buoyancy_force_and_weight(config):
    config['vehicle']['buoyancy_method'] = 'force'
    config['vehicle']['buoyancy'] = 1800.0
    config['vehicle']['weight'] = 1750.0

    parameters = parameters_from_config(config)

    assert parameters.weight == 1750.0
    assert parameters.buoyancy == 1800.0


def test_explicit_inertia_matrix(config):
    inertia = np.diag([1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
    config['vehicle']['inertia_matrix'] = inertia.tolist()

    np.testing.assert_array_equal(parameters_from_config(config).inertia_matrix, inertia)


def test_complex_configuration(tmp_path, config):
    config['vehicle']['model_fidelity'] = 'COMPLEX'
    config['hydrodynamics']['quadratic_damping_matrices'] = [
        [10.0 * (i + 1)] * 6 for i in range(6)
    ]

    parameters = load_parameters(write_config(tmp_path, config))
    model = RigidBodyDynamicsModel(parameters)

    assert model.get_parameters().model_fidelity is ModelFidelity.COMPLEX
    assert len(parameters.damping_matrices) == 6
    np.testing.assert_array_equal(parameters.damping_matrices[2], np.eye(6) * 30.0)


def test_complex_requires_per_dof_matrices(config):
    config['vehicle']['model_fidelity'] = 'COMPLEX'

    with pytest.raises(ParameterError, match="hydrodynamics.quadratic_damping_matrices"):
        parameters_from_config(config)


def test_unknown_buoyancy_method(config):
    config['vehicle']['buoyancy_method'] = 'archimedes'

    with pytest.raises(ParameterError, match="Unknown buoyancy_method"):
        parameters_from_config(config)


def test_unknown_fidelity(config):
    config['vehicle']['model_fidelity'] = 'FULL'

    with pytest.raises(ParameterError, match="Unknown model fidelity"):
        parameters_from_config(config)


def test_missing_mass(config):
    del config['vehicle']['mass']

    with pytest.raises(ParameterError, match="vehicle.mass"):
        parameters_from_config(config)


@pytest.mark.parametrize("section, key, value", [
    ('vehicle', 'mass', "heavy"),
    ('vehicle', 'I_xx', None),
    ('vehicle', 'cg_offset_z', [0.0]),
    ('hydrodynamics', 'added_mass_heave', "lots"),
    ('environment', 'gravity', "x"),
    ('environment', 'fluid_density', None),
])
def test_non_numeric_value(config, section, key, value):
    config[section][key] = value

    with pytest.raises(ParameterError, match=f"'{section}.{key}' must be a number"):
        parameters_from_config(config)


@pytest.mark.parametrize("section", ['vehicle', 'hydrodynamics', 'environment'])
def test_non_mapping_section(config, section):
    config[section] = [1.0, 2.0]

    with pytest.raises(ParameterError, match=f"section '{section}' must be a mapping"):
        parameters_from_config(config)


def test_null_vehicle_section(tmp_path, config):
    """An empty 'vehicle:' entry in YAML loads as None."""
    config['vehicle'] = None
    path = write_config(tmp_path, config)

    with pytest.raises(ParameterError, match="section 'vehicle' must be a mapping"):
        load_parameters(path)


def test_null_optional_sections_use_defaults(config):
    config['environment'] = None
    config['vehicle']['buoyancy_fraction'] = 1.0

    parameters = parameters_from_config(config)

    assert parameters.weight == pytest.approx(180.0 * 9.81)
    assert parameters.buoyancy == pytest.approx(parameters.weight)


def test_bad_damping_shape(config):
    config['hydrodynamics']['quadratic_damping'] = [1.0, 2.0, 3.0]

    with pytest.raises(ParameterError, match="quadratic_damping must have 6 diagonal entries"):
        parameters_from_config(config)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")


def test_non_mapping_file(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n")

    with pytest.raises(ParameterError, match="does not contain a mapping"):
        load_config(path)


def test_lateral_offset_warning(config, caplog):
    config['vehicle']['cg_offset_y'] = 0.01

    with caplog.at_level(logging.WARNING, logger="UWV_DYNAMICS"):
        parameters_from_config(config)

    assert "Non-zero lateral CG/CB offsets" in caplog.text


def test_default_config_is_a_copy():
    config = default_config()
    config['vehicle']['mass'] = 1.0

    assert default_config()['vehicle']['mass'] == 180.0
