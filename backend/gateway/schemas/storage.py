"""Object Storage Schemas: S3 listings keep S3's PascalCase field names on the wire."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class BucketSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(alias="Name")
    creation_date: datetime | None = Field(None, alias="CreationDate")


class ObjectSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    key: str = Field(alias="Key")
    last_modified: datetime | None = Field(None, alias="LastModified")
    etag: str | None = Field(None, alias="ETag")
    size: int | None = Field(None, alias="Size")
    storage_class: str | None = Field(None, alias="StorageClass")


class UploadResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    file_url: str = Field(alias="fileUrl")
    bucket: str
    key: str
