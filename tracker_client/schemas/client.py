from __future__ import annotations

from typing import Annotated, Any, Mapping

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StrictStr


def _none_as_empty(value: Any) -> Any:
    return {} if value is None else value


AttributeMap = Annotated[dict[StrictStr, StrictStr], BeforeValidator(_none_as_empty)]


class ClientRecord(BaseModel):
    """One client, identified by ``client_key``.

    ``attributes`` is open-ended: the server adds business fields (address,
    contacts, support allowance ...) without a schema change, so they stay a
    plain ordered ``str -> str`` mapping.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    client_key: StrictStr
    name: StrictStr
    # Some deployments send null for a client with no extra attributes.
    attributes: AttributeMap = Field(default_factory=dict)

    @classmethod
    def from_attributes_map(cls, client_key: str, attributes: Mapping[str, str]) -> ClientRecord:
        """Build a record from a bare attribute map keyed by client_key."""

        return cls(
            client_key=client_key,
            name=attributes.get("name", client_key),
            attributes=dict(attributes),
        )

    def identity(self) -> tuple[str, str, tuple[tuple[str, str], ...]]:
        return self.client_key, self.name, tuple(sorted(self.attributes.items()))


class ClientsResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    records: list[ClientRecord] = Field(default_factory=list)
    # Informational only, returned in server order.
    attribute_keys: list[str] = Field(default_factory=list)

    def get(self, client_key: str) -> ClientRecord | None:
        for record in self.records:
            if record.client_key == client_key:
                return record
        return None
