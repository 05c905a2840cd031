from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


class CatalogModel(BaseModel):
    """Immutable catalog record serialized with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ProductOption(CatalogModel):
    id: str = Field(min_length=1)
    name: str
    description: str = ""
    price: float  # negative prices are allowed for discount options
    is_required: bool = False
    category: Optional[str] = None
    dependencies: tuple[str, ...] = ()
    conflicts: tuple[str, ...] = ()


class Product(CatalogModel):
    id: str = Field(min_length=1)
    name: str
    description: str = ""
    base_price: float = Field(ge=0)
    category: str
    options: tuple[ProductOption, ...] = ()
    metadata: Optional[Mapping[str, Any]] = None

    @field_validator("metadata")
    @classmethod
    def metadata_read_only(
        cls, v: Optional[Mapping[str, Any]]
    ) -> Optional[Mapping[str, Any]]:
        return None if v is None else MappingProxyType(dict(v))

    @field_serializer("metadata")
    def dump_metadata(self, v: Optional[Mapping[str, Any]]) -> Optional[dict[str, Any]]:
        return None if v is None else dict(v)

    @model_validator(mode="after")
    def option_ids_unique(self) -> Product:
        seen: set[str] = set()
        for option in self.options:
            if option.id in seen:
                raise ValueError(
                    f"Duplicate option id '{option.id}' on product '{self.id}'"
                )
            seen.add(option.id)
        return self

    @property
    def option_ids(self) -> set[str]:
        return {option.id for option in self.options}

    def get_option(self, option_id: str) -> Optional[ProductOption]:
        for option in self.options:
            if option.id == option_id:
                return option
        return None
