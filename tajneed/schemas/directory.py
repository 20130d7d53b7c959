"""Pydantic schemas for the directory hierarchy, mapping and sync."""

from datetime import date, datetime
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from tajneed.db.enums import OrganizationLevel


# =============================================================================
# External feed records (Tajneed)
# =============================================================================

class ExternalJamaat(BaseModel):
    """Jamaat record as returned by the external directory."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    jamaat_id: int
    name: str = Field(
        min_length=1, max_length=255, validation_alias=AliasChoices("jamaatName", "name")
    )
    code: str | None = Field(
        default=None, max_length=50, validation_alias=AliasChoices("jamaatCode", "code")
    )
    circuit_id: int | None = None
    circuit_code: str | None = None
    circuit_name: str | None = Field(default=None, max_length=255)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Jamaat name is blank")
        return value


class ExternalMember(BaseModel):
    """Member record as returned by the external directory."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    # Lengths follow the member columns; blood group and genotype are
    # normalised to enum values before they are stored
    chanda_no: str = Field(min_length=1, max_length=50)
    wasiyat_no: str | None = Field(default=None, max_length=50)
    title: str | None = Field(default=None, max_length=50)
    surname: str = Field(min_length=1, max_length=255)
    first_name: str | None = Field(default=None, max_length=255)
    middle_name: str | None = Field(default=None, max_length=255)
    date_of_birth: date | None = None
    email: str | None = Field(default=None, max_length=255)
    phone_no: str | None = Field(default=None, max_length=50)
    marital_status: str | None = Field(default=None, max_length=50)
    address: str | None = None
    next_of_kin_phone_no: str | None = Field(default=None, max_length=50)
    next_of_kin_name: str | None = Field(default=None, max_length=255)
    photo_url: str | None = Field(default=None, max_length=500)
    signature: str | None = None
    blood_group: str | None = None
    genotype: str | None = None
    jamaat_id: int | None = None

    @field_validator("chanda_no")
    @classmethod
    def _strip_chanda_no(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("ChandaNo is blank")
        return value

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def _date_from_timestamp(cls, value: object) -> object:
        # The feed serializes dates as midnight timestamps
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        if value == "":
            return None
        return value


# =============================================================================
# Hierarchy
# =============================================================================

class HierarchyContext(BaseModel):
    """Resolved ancestor chain for a member or account."""
    model_config = ConfigDict(frozen=True)

    muqam_id: UUID | None = None
    dila_id: UUID | None = None
    zone_id: UUID | None = None
    organization_level: OrganizationLevel | None = None


class DirectoryStatistics(BaseModel):
    """Counts across the directory for the admin overview."""
    total_zones: int
    total_dilas: int
    total_muqams: int
    total_jamaats: int
    total_members: int
    unassigned_dilas: int
    unassigned_muqams: int


# =============================================================================
# Jamaat mapping
# =============================================================================

class JamaatRead(BaseModel):
    """Jamaat with its mapping state."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    jamaat_id: int
    name: str
    code: str | None
    circuit_name: str | None
    muqam_id: UUID | None
    muqam_name: str | None = None
    is_mapped: bool
    created_at: datetime


class MappingStats(BaseModel):
    """Jamaat mapping coverage."""
    total: int
    mapped: int
    unmapped: int
    mapping_percentage: float


# =============================================================================
# Sync
# =============================================================================

class SyncResult(BaseModel):
    """Summary of one reconciliation run."""
    total_fetched: int = 0
    new_count: int = 0
    updated_count: int = 0
    failed_count: int = 0
    errors: list[str] = Field(default_factory=list)
