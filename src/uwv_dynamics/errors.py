"""
UWV Dynamics Errors
===================

Exception hierarchy raised by the dynamics model.

- ParameterError: the vehicle parameter set (or the configuration it was
  built from) is malformed. Raised by construction, validation and
  set_parameters; the model keeps its previous parameters.
- InputError: a per-call input cannot be evaluated (NaN, wrong shape,
  unusable orientation, damping matrix count mismatch).
"""


class DynamicsError(Exception):
    """Base class for all errors raised by uwv_dynamics."""


class ParameterError(DynamicsError, ValueError):
    """Inconsistent or malformed vehicle parameters."""


class InputError(DynamicsError, RuntimeError):
    """Invalid kinematic input to an evaluation call."""
