"""Implements the schema of the bridge configuration, using pydantic"""

import logging
from typing import List, Optional, Union

import pydantic

from ._signal import resolve_signum
from .exceptions import ConfigValidationError, InvalidSeverityError
from .levels import DEFAULT_LEVEL, get_level

log = logging.getLogger(__name__)

# -----------------------------------------------------------------------------


class BaseSchema(pydantic.BaseModel):
    """A base schema for configuration entries.

    Extra keys are not allowed and all default values as well as assignments
    are validated.
    """

    model_config = pydantic.ConfigDict(
        extra="forbid",
        validate_default=True,
        validate_assignment=True,
    )

    def __getitem__(self, name: str):
        """Retrieves an item from the underlying schema data."""
        return getattr(self, name)

    def get(self, *args):
        """Get a named attribute from this object.

        Behaves exactly like ``getattr(self, *args)``.
        """
        return getattr(self, *args)


class RegistrationDefaults(BaseSchema):
    """Arguments to
    :py:meth:`~sigbridge.bridge.SignalBridge.register_signal_handler` that
    apply to all registrations unless specified otherwise"""

    level: Union[int, str] = DEFAULT_LEVEL
    call_previous: bool = True
    restart_syscalls: bool = True
    async_dispatch: Optional[bool] = True

    @pydantic.field_validator("level")
    @classmethod
    def _check_level(cls, v):
        try:
            return get_level(v)
        except InvalidSeverityError as err:
            raise ValueError(str(err)) from err


class RegistrationSchema(RegistrationDefaults):
    """A single signal registration"""

    signal: Union[int, str]

    @pydantic.field_validator("signal")
    @classmethod
    def _resolve_signal(cls, v):
        return resolve_signum(v)


class BridgeConfig(BaseSchema):
    """The configuration of a :py:class:`~sigbridge.bridge.SignalBridge`.

    Entries of ``registrations`` may omit any key but ``signal``; these are
    then filled from ``defaults``. An entry may also be only a signal name or
    number.
    """

    defaults: RegistrationDefaults = pydantic.Field(
        default_factory=RegistrationDefaults
    )
    registrations: List[RegistrationSchema] = pydantic.Field(
        default_factory=list
    )

    @pydantic.model_validator(mode="before")
    @classmethod
    def _apply_defaults(cls, data):
        if not isinstance(data, dict):
            return data

        defaults = data.get("defaults") or dict()
        if isinstance(defaults, RegistrationDefaults):
            defaults = defaults.model_dump()

        regs = []
        for reg in data.get("registrations") or []:
            if isinstance(reg, (int, str)):
                reg = dict(signal=reg)
            if isinstance(reg, dict):
                reg = dict(defaults, **reg)
            regs.append(reg)

        return dict(data, registrations=regs)


# -----------------------------------------------------------------------------


def parse_bridge_cfg(d: dict) -> BridgeConfig:
    """Uses the schema to build a bridge configuration from the given dict.

    Raises:
        ConfigValidationError: If validation failed
    """
    try:
        return BridgeConfig(**(d if d else dict()))

    except pydantic.ValidationError as err:
        raise ConfigValidationError(
            f"Failed parsing bridge configuration!\n{err}"
        ) from err
