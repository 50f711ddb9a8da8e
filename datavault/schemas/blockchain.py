from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

from datavault.schemas.data_item import DataItemOut, out_field


class DataIdRequest(BaseModel):
    data_id: str = Field(
        min_length=1, validation_alias=AliasChoices("dataId", "data_id")
    )


class VerifyResponse(BaseModel):
    msg: str
    data_item: DataItemOut = out_field("dataItem")


class StampStatus(BaseModel):
    verified: bool
    hash: Optional[str] = None
    tx_id: Optional[str] = out_field("txId", default=None)


class IntegrityReport(BaseModel):
    """Outcome of re-hashing an item's data against its stored stamp."""

    is_valid: bool = out_field("isValid")
    stored_hash: str = out_field("storedHash")
    current_hash: str = out_field("currentHash")
