"""Value types for probing and scanning ports."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from .exceptions import ValidationError

MIN_PORT = 0
MAX_PORT = 65535

DEFAULT_START_PORT = 4000
DEFAULT_END_PORT = 4500
DEFAULT_RETRIES = 5
DEFAULT_DELAY_MS = 1000
DEFAULT_MAX_CONCURRENCY = 256


def is_valid_port(port) -> bool:
    """Check that port is an int (not a bool) within [0, 65535]."""
    return (
        isinstance(port, int)
        and not isinstance(port, bool)
        and MIN_PORT <= port <= MAX_PORT
    )


class ProbeStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    FAILED = "failed"


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of probing a single port."""

    port: int
    status: ProbeStatus
    cause: Optional[BaseException] = None

    @classmethod
    def available(cls, port: int) -> "ProbeOutcome":
        return cls(port, ProbeStatus.AVAILABLE)

    @classmethod
    def occupied(cls, port: int) -> "ProbeOutcome":
        return cls(port, ProbeStatus.OCCUPIED)

    @classmethod
    def failed(cls, port: int, cause: BaseException) -> "ProbeOutcome":
        return cls(port, ProbeStatus.FAILED, cause)

    @property
    def is_available(self) -> bool:
        return self.status is ProbeStatus.AVAILABLE


@dataclass(frozen=True)
class ScanAttempt:
    """One full pass over a range. Outcomes are kept in ascending port order."""

    number: int
    outcomes: tuple[ProbeOutcome, ...]

    def first_available(self) -> Optional[int]:
        """Lowest available port of this attempt, or None."""
        for outcome in self.outcomes:
            if outcome.is_available:
                return outcome.port
        return None

    def failures(self) -> list[ProbeOutcome]:
        return [o for o in self.outcomes if o.status is ProbeStatus.FAILED]


class ScanRequest(BaseModel):
    """Validated parameters of a range search."""

    model_config = ConfigDict(frozen=True)

    start_port: StrictInt = Field(DEFAULT_START_PORT, ge=MIN_PORT, le=MAX_PORT)
    end_port: StrictInt = Field(DEFAULT_END_PORT, ge=MIN_PORT, le=MAX_PORT)
    retries: StrictInt = Field(DEFAULT_RETRIES, ge=1)
    delay_ms: float = Field(DEFAULT_DELAY_MS, ge=0, allow_inf_nan=False)

    @field_validator("end_port")
    @classmethod
    def check_range_order(cls, v, info):
        start_port = info.data.get("start_port")
        if start_port is not None and v < start_port:
            raise PydanticCustomError(
                "port_range_order",
                "end_port must be greater than or equal to start_port ({start_port})",
                {"start_port": start_port},
            )
        return v

    # Reject bools and numeric strings, which float coercion would accept
    @field_validator("delay_ms", mode="before")
    @classmethod
    def check_delay_is_number(cls, v):
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise PydanticCustomError("number_type", "Input should be a number")
        return v

    @classmethod
    def build(cls, **kwargs) -> "ScanRequest":
        """
        Create a request, raising ValidationError naming the first bad field.
        """
        try:
            return cls(**kwargs)
        except PydanticValidationError as e:
            error = e.errors()[0]
            field = str(error["loc"][0]) if error["loc"] else "request"
            raise ValidationError(field, error["msg"]) from None

    @property
    def delay_seconds(self) -> float:
        return self.delay_ms / 1000

    def ports(self) -> Iterator[int]:
        """Ports of the range in ascending order."""
        return iter(range(self.start_port, self.end_port + 1))
