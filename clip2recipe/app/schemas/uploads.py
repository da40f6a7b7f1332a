from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import AnyUrl, BaseModel, Field, TypeAdapter


class FileUploadRequest(BaseModel):
    source_type: Literal["file"]
    filename: str
    size_bytes: int = Field(..., gt=0, description="File size in bytes")


class UrlUploadRequest(BaseModel):
    source_type: Literal["url"]
    filename: str
    size_bytes: int = Field(..., ge=0, description="0 is accepted for URL sources")
    source_url: AnyUrl


CreateUploadRequest = Annotated[
    Union[FileUploadRequest, UrlUploadRequest],
    Field(discriminator="source_type"),
]
create_upload_adapter: TypeAdapter[Union[FileUploadRequest, UrlUploadRequest]] = TypeAdapter(CreateUploadRequest)


class CreateUploadResponse(BaseModel):
    upload_id: str
    s3_fields: dict[str, Any]
