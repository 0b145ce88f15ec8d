"""
Generator settings

GeneratorConfig is the immutable {epoch, machine id} bundle a generator is
built from. It is validated once here. The check that the epoch is not in the
future needs a clock, so it happens when the generator is constructed.
"""

import os
from collections.abc import Mapping
from datetime import datetime, timezone

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from tickflake import machine
from tickflake.kernel.errors import InvalidConfiguration
from tickflake.kernel.time import as_utc
from tickflake.layout import MAX_MACHINE_ID

DEFAULT_EPOCH = datetime(2014, 9, 1, tzinfo=timezone.utc)

ENV_EPOCH = "TICKFLAKE_EPOCH"
ENV_MACHINE_ID = "TICKFLAKE_MACHINE_ID"

_datetime_adapter = TypeAdapter(datetime)


def parse_epoch(value: datetime | str) -> datetime:
    """
    Parse an ISO-8601 string (or pass through a datetime) as a UTC epoch.

    Raises:
        InvalidConfiguration: If the value is not a valid datetime
    """
    try:
        parsed = _datetime_adapter.validate_python(value)
    except ValidationError as exc:
        raise InvalidConfiguration(f"Invalid epoch {value!r}: {exc}") from exc
    return as_utc(parsed)


class GeneratorConfig(BaseModel):
    """
    Immutable per-instance settings

    The machine id must be unique among generators running at the same time.
    Nothing here can check that; it is an operational guarantee.
    """

    model_config = ConfigDict(frozen=True)

    epoch: datetime = Field(
        default=DEFAULT_EPOCH,
        description="Instant from which elapsed ticks are counted",
    )

    machine_id: int = Field(
        ge=0,
        le=MAX_MACHINE_ID,
        description="Identifier of the generating instance",
    )

    @field_validator("epoch")
    @classmethod
    def _normalize_epoch(cls, value: datetime) -> datetime:
        return as_utc(value)

    @classmethod
    def of(
        cls,
        epoch: datetime | str | None = None,
        machine_id: int | str | None = None,
    ) -> "GeneratorConfig":
        """
        Build settings, filling in defaults for anything omitted.

        Args:
            epoch: Start of the tick count (default: 2014-09-01T00:00:00Z)
            machine_id: Instance id in [0, 65535] (default: lower 16 bits of
                        the host's private IPv4 address)

        Raises:
            InvalidConfiguration: If a value is malformed or out of range, or no
                                  default machine id can be derived
        """
        fields: dict[str, object] = {
            "machine_id": machine.default_machine_id() if machine_id is None else machine_id,
        }
        if epoch is not None:
            fields["epoch"] = epoch
        try:
            return cls(**fields)
        except ValidationError as exc:
            raise InvalidConfiguration(f"Invalid generator settings: {exc}") from exc

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "GeneratorConfig":
        """
        Build settings from TICKFLAKE_EPOCH (ISO-8601) and TICKFLAKE_MACHINE_ID.

        Unset or empty variables fall back to the defaults of of().
        """
        env = os.environ if environ is None else environ
        return cls.of(
            epoch=env.get(ENV_EPOCH) or None,
            machine_id=env.get(ENV_MACHINE_ID) or None,
        )
