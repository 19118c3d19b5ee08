"""Wire models shared by simulation, trace and access-list requests."""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from ..core.errors import ValidationError
from ..core.validation import to_hex


class WireModel(BaseModel):
    """Base for immutable camelCase JSON payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    def to_wire(self) -> Dict[str, Any]:
        """Serialize with camelCase keys, omitting unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class AccessListItem(WireModel):
    """Account and storage slots pre-declared by an EIP-2930 access list."""
    address: str
    storage_keys: List[str] = Field(default_factory=list)


class TransactionCall(WireModel):
    """A single call to simulate or trace."""
    to: Optional[str] = None
    from_: Optional[str] = Field(default=None, alias="from")
    data: Optional[str] = None
    value: Optional[str] = None
    gas: Optional[str] = None
    access_list: Optional[List[AccessListItem]] = None

    @field_validator("value", "gas", mode="before")
    @classmethod
    def normalize_quantity(cls, v: Any) -> Any:
        """Accept Python ints for numeric fields."""
        if v is None:
            return v
        return to_hex(v)


class StateOverride(WireModel):
    """Account state replacement applied before execution."""
    address: Optional[str] = None
    balance: Optional[str] = None
    nonce: Optional[int] = None
    code: Optional[str] = None
    storage: Optional[Dict[str, str]] = None
    state: Optional[Dict[str, str]] = None
    state_diff: Optional[Dict[str, str]] = None
    move_precompile_to_address: Optional[str] = None

    @field_validator("balance", mode="before")
    @classmethod
    def normalize_balance(cls, v: Any) -> Any:
        if v is None:
            return v
        return to_hex(v)

    def merged_with(self, other: "StateOverride") -> "StateOverride":
        """Field-wise merge; ``other`` wins and nested slot maps are combined."""
        update: Dict[str, Any] = {}
        for name in type(self).model_fields:
            incoming = getattr(other, name)
            if incoming is None:
                continue
            current = getattr(self, name)
            if isinstance(incoming, dict) and isinstance(current, dict):
                combined = dict(current)
                combined.update(incoming)
                update[name] = combined
            else:
                update[name] = incoming
        return self.model_copy(update=update)


class BlockOverrides(WireModel):
    """Block environment replacement applied before execution."""
    number: Optional[str] = None
    difficulty: Optional[str] = None
    time: Optional[int] = None
    gas_limit: Optional[int] = None
    coinbase: Optional[str] = None
    random: Optional[str] = None
    base_fee: Optional[str] = None

    @field_validator("number", "difficulty", "base_fee", mode="before")
    @classmethod
    def normalize_quantity(cls, v: Any) -> Any:
        if v is None:
            return v
        return to_hex(v)

    def merged_with(self, other: "BlockOverrides") -> "BlockOverrides":
        """Field-wise merge where set fields of ``other`` win."""
        return self.model_copy(update=other.model_dump(exclude_none=True))


class ApiErrorInfo(BaseModel):
    """Error block of the response envelope."""
    model_config = ConfigDict(extra="ignore")

    code: str = "UNKNOWN_ERROR"
    message: str = "Unknown error"
    suggestion: Optional[str] = None
    details: Optional[Any] = None


class ResponseMetadata(WireModel):
    request_id: Optional[str] = None
    timestamp: Optional[str] = None
    execution_time: Optional[Union[int, float]] = None


class ApiResponse(BaseModel):
    """Response envelope wrapping every service reply."""
    model_config = ConfigDict(extra="ignore")

    success: bool
    data: Optional[Any] = None
    error: Optional[ApiErrorInfo] = None
    metadata: Optional[ResponseMetadata] = None


StateOverrideInput = Union[StateOverride, Dict[str, Any]]
BlockOverridesInput = Union[BlockOverrides, Dict[str, Any]]
TransactionCallInput = Union[TransactionCall, Dict[str, Any]]


def coerce_model(model_cls, value: Any, field: str):
    """Accept a model instance or a plain mapping for ``model_cls``."""
    if isinstance(value, model_cls):
        return value
    if not isinstance(value, dict):
        raise ValidationError(
            f"Invalid {field}: expected {model_cls.__name__} or dict, got {type(value).__name__}"
        )
    try:
        return model_cls.model_validate(value)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid {field}: {e.errors()[0]['msg']}", details=e.errors()) from e
