"""Object metadata shared by all Istio resources."""

from __future__ import annotations

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

# http://kubernetes.io/docs/concepts/overview/working-with-objects/names/
_NAME_PATTERN = r"^[a-z0-9]([-a-z0-9.]*[a-z0-9])?$"
_PREFIX_PATTERN = r"^[a-z0-9][-a-z0-9.]*$"


class ObjectMeta(BaseModel):
    """Resource name, either exact or a prefix the cluster completes.

    Exactly one of ``name`` and ``generate_name`` is set.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    name: str | None = Field(default=None, min_length=1, max_length=253, pattern=_NAME_PATTERN)
    generate_name: str | None = Field(
        default=None,
        alias="generateName",
        min_length=1,
        max_length=253,
        pattern=_PREFIX_PATTERN,
    )

    @model_validator(mode="after")
    def _exactly_one_name(self) -> Self:
        if (self.name is None) == (self.generate_name is None):
            raise ValueError("exactly one of 'name' or 'generateName' must be set")
        return self

    @classmethod
    def from_server(cls, raw: dict[str, Any]) -> Self:
        """Build metadata from a stored object's ``metadata`` block.

        Stored objects carry both the generated name and the prefix it came
        from; the concrete name wins.
        """
        if raw.get("name"):
            return cls(name=raw["name"])
        return cls(generate_name=raw.get("generateName"))

    @property
    def display_name(self) -> str:
        return self.name if self.name is not None else f"{self.generate_name}*"
