"""Pydantic models describing the Sui JSON-RPC payloads we consume."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class SuiBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RpcErrorPayload(SuiBaseModel):
    code: int
    message: str


class RpcEnvelope(SuiBaseModel):
    jsonrpc: str = "2.0"
    id: int | str | None = None
    result: object | None = None
    error: RpcErrorPayload | None = None


class MoveObjectContent(SuiBaseModel):
    data_type: str = Field(alias="dataType")
    type: str | None = None
    fields: dict[str, object] = Field(default_factory=dict)


class ObjectData(SuiBaseModel):
    object_id: str = Field(alias="objectId")
    version: str | None = None
    digest: str | None = None
    type: str | None = None
    content: MoveObjectContent | None = None


class ObjectResponseError(SuiBaseModel):
    """``notExists``, ``deleted``, ``dynamicFieldNotFound`` and friends."""

    code: str
    object_id: str | None = None


class ObjectResponse(SuiBaseModel):
    data: ObjectData | None = None
    error: ObjectResponseError | None = None


class ExecutionStatus(SuiBaseModel):
    status: Literal["success", "failure"]
    error: str | None = None


class TransactionEffects(SuiBaseModel):
    status: ExecutionStatus


class SuiEvent(SuiBaseModel):
    type: str
    parsed_json: dict[str, object] | None = Field(default=None, alias="parsedJson")


class TransactionBlockResponse(SuiBaseModel):
    digest: str
    effects: TransactionEffects | None = None
    events: list[SuiEvent] = Field(default_factory=list)
