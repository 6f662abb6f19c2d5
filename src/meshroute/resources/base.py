"""Istio resource envelope."""

from typing import Any, Self, get_args

from pydantic import BaseModel, ConfigDict

from meshroute.errors import UnknownResourceKindError
from meshroute.resources.metadata import ObjectMeta
from meshroute.resources.route_rule import RouteRuleSpec

# Spec variants, tagged by their ``kind``. New kinds are added to both the
# union and the table; the envelope itself does not change.
IstioSpec = RouteRuleSpec

SPEC_KINDS: dict[str, type[IstioSpec]] = {
    RouteRuleSpec.kind: RouteRuleSpec,
}


def _known_fields(model: type[BaseModel], data: Any) -> Any:
    """Keep only the keys ``model`` declares, recursing into nested models.

    Stored objects may carry spec fields this tool never writes (``match``,
    ``httpReqTimeout``, ...). Reading them back must not fail on those.
    """
    if not isinstance(data, dict):
        return data
    kept: dict[str, Any] = {}
    for name, field in model.model_fields.items():
        for key in (field.alias or name, name):
            if key in data:
                kept[key] = _known_nested(field.annotation, data[key])
                break
    return kept


def _known_nested(annotation: Any, value: Any) -> Any:
    for arg in (annotation, *get_args(annotation)):
        if isinstance(arg, type) and issubclass(arg, BaseModel):
            if isinstance(value, list | tuple):
                return [_known_fields(arg, item) for item in value]
            return _known_fields(arg, value)
    return value


class IstioResource(BaseModel):
    """An Istio custom resource: metadata plus one spec variant.

    Resources are pure, immutable data. Handlers know how to submit them.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    metadata: ObjectMeta
    spec: IstioSpec

    @property
    def kind(self) -> str:
        return self.spec.kind

    @property
    def group(self) -> str:
        return self.spec.group

    @property
    def version(self) -> str:
        return self.spec.version

    @property
    def plural(self) -> str:
        return self.spec.plural

    @property
    def api_version(self) -> str:
        return f"{self.spec.group}/{self.spec.version}"

    @property
    def address(self) -> str:
        """Human-readable address (e.g. 'RouteRule/front-route')."""
        return f"{self.kind}/{self.metadata.display_name}"

    def to_manifest(self) -> dict[str, Any]:
        """Build the document sent to the custom-resource API."""
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": self.metadata.model_dump(mode="json", by_alias=True, exclude_none=True),
            "spec": self.spec.model_dump(mode="json", by_alias=True, exclude_none=True),
        }

    @classmethod
    def from_manifest(cls, doc: dict[str, Any]) -> Self:
        """Parse a manifest (e.g. a stored object) by dispatching on its ``kind``.

        Spec fields without a counterpart in the model are ignored here;
        building a spec directly still rejects them.
        """
        kind = doc.get("kind", "")
        spec_type = SPEC_KINDS.get(kind)
        if spec_type is None:
            raise UnknownResourceKindError(kind)
        return cls(
            metadata=ObjectMeta.from_server(doc.get("metadata") or {}),
            spec=spec_type.model_validate(_known_fields(spec_type, doc.get("spec") or {})),
        )
