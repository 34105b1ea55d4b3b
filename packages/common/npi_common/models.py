"""Shared Pydantic models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Literal, Optional


INDIVIDUAL_ENUMERATION_TYPE = "NPI-1"

EntityType = Literal["Individual", "Organization"]


class _RawModel(BaseModel):
    """Registry payloads carry many more keys than we read; ignore the rest."""

    model_config = ConfigDict(extra="ignore")


class RawBasic(_RawModel):
    name_prefix: Optional[str] = None
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    organization_name: Optional[str] = None
    sex: Optional[str] = None
    last_updated: Optional[str] = None


class RawTaxonomy(_RawModel):
    desc: Optional[str] = None
    primary: Optional[bool] = None
    license: Optional[str] = None
    state: Optional[str] = None


class RawAddress(_RawModel):
    address_purpose: Optional[str] = None
    address_1: Optional[str] = None
    address_2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    telephone_number: Optional[str] = None
    fax_number: Optional[str] = None


class RawProviderRecord(_RawModel):
    """One entry of the registry's ``results`` array."""

    enumeration_type: Optional[str] = None
    basic: RawBasic = Field(default_factory=RawBasic)
    taxonomies: List[RawTaxonomy] = Field(default_factory=list)
    addresses: List[RawAddress] = Field(default_factory=list)

    @field_validator("basic", mode="before")
    @classmethod
    def _basic_or_empty(cls, value):
        return {} if value is None else value

    @field_validator("taxonomies", "addresses", mode="before")
    @classmethod
    def _list_or_empty(cls, value):
        return [] if value is None else value

    @property
    def is_individual(self) -> bool:
        return self.enumeration_type == INDIVIDUAL_ENUMERATION_TYPE


class DisplayRecord(BaseModel):
    """
    Flat, display-ready provider record.

    A record is either a success record (every display field populated,
    ``"N/A"`` where the registry had nothing) or an error record carrying
    only ``npi`` and ``error``. Use :meth:`failure` to build the latter.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    npi: str = Field(..., description="10-digit National Provider Identifier")
    name: Optional[str] = None
    entity_type: Optional[EntityType] = None
    sex: Optional[str] = None
    specialty: Optional[str] = None
    license: Optional[str] = None
    license_state: Optional[str] = None
    phone: Optional[str] = None
    fax: Optional[str] = None
    address: Optional[str] = None
    last_updated: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def failure(cls, npi: str, error: str) -> "DisplayRecord":
        return cls(npi=npi, error=error)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_json_dict(self) -> dict:
        """Serialize using the public camelCase field names, dropping unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class LookupResponse(BaseModel):
    results: List[DisplayRecord]


class ErrorResponse(BaseModel):
    error: str
