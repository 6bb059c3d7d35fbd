"""
Base schemas with standardized field types for consistent API responses.
"""
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic_core import core_schema

from ..core.timezone_utils import ensure_utc


class StandardizedModel(BaseModel):
    """Response base: reads ORM objects and emits enum values."""

    model_config = ConfigDict(from_attributes=True, use_enum_values=True, populate_by_name=True)


class StrictRequestModel(BaseModel):
    """Request base: forbid unexpected fields, validate on assignment."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True, use_enum_values=False)


class Money(Decimal):
    """Money field that always serializes as float"""

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        def validate_money(value: Any) -> Decimal:
            if isinstance(value, bool):
                raise ValueError("Cannot convert bool to Money")
            if isinstance(value, (int, float)):
                return Decimal(str(value))
            if isinstance(value, str):
                return Decimal(value)
            if isinstance(value, Decimal):
                return value
            raise ValueError(f"Cannot convert {type(value)} to Money")

        return core_schema.no_info_after_validator_function(
            validate_money,
            core_schema.union_schema(
                [
                    core_schema.is_instance_schema(Decimal),
                    core_schema.int_schema(),
                    core_schema.float_schema(),
                    core_schema.str_schema(),
                ]
            ),
            serialization=core_schema.plain_serializer_function_ser_schema(
                float,
                info_arg=False,
                return_schema=core_schema.float_schema(),
            ),
        )


# Datetimes read back from SQLite are naive; the API always speaks UTC
UtcDateTime = Annotated[datetime, AfterValidator(ensure_utc)]
