"""Pydantic models describing graph store (ArangoDB document API) responses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class GraphStoreBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class DocumentWriteResult(GraphStoreBaseModel):
    id: str = Field(alias="_id")
    key: str = Field(alias="_key")
    rev: str = Field(alias="_rev")


class ErrorResponse(GraphStoreBaseModel):
    error: bool = True
    code: int | None = None
    error_num: int | None = Field(default=None, alias="errorNum")
    error_message: str = Field(default="", alias="errorMessage")


# Bulk writes answer with one entry per record; failed entries carry ``error: true``.
BULK_WRITE_ADAPTER: TypeAdapter[list[dict[str, object]]] = TypeAdapter(list[dict[str, object]])
