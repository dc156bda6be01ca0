"""MetricValue — a computed number or an explicit "insufficient data" marker."""

from typing import Annotated, Literal, TypeGuard

from pydantic import BaseModel, Field


class Defined(BaseModel, frozen=True):
    """A metric backed by enough data to be computed."""

    status: Literal["defined"] = "defined"
    value: float


class Undefined(BaseModel, frozen=True):
    """A metric that could not be computed, with the reason why.

    Never equal to, and never coerced into, a numeric value.
    """

    status: Literal["undefined"] = "undefined"
    reason: str = Field(min_length=1)


type MetricValue = Annotated[Defined | Undefined, Field(discriminator="status")]


def is_defined(value: Defined | Undefined) -> TypeGuard[Defined]:
    return isinstance(value, Defined)


def mean_of(values: list[float], reason: str) -> Defined | Undefined:
    """Return the arithmetic mean of values, or Undefined(reason) when empty."""
    if not values:
        return Undefined(reason=reason)
    return Defined(value=sum(values) / len(values))
