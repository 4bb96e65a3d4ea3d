"""Bucket Routes: S3 bucket listing, multipart upload and object removal.

Invariants:
    - Path parameters keep their public names (bucketName, fileName)
    - A request without a `file` part answers 400 before touching S3
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Path, UploadFile
from starlette.datastructures import UploadFile as StarletteUploadFile

from gateway.adapters.object_storage import ObjectStorageAdapter
from gateway.api.deps import get_object_storage_adapter
from gateway.api.responses import INVALID_BODY, UPSTREAM_FAILURE
from gateway.core.errors import MissingFileError
from gateway.schemas.common import ErrorResponse, MessageResponse
from gateway.schemas.storage import BucketSummary, ObjectSummary, UploadResult

router = APIRouter(prefix="/buckets", tags=["Buckets"])

BucketName = Annotated[
    str, Path(alias="bucketName", description="Nome do bucket"),
]


@router.get(
    "",
    response_model=list[BucketSummary],
    summary="Lista todos os buckets",
    responses=UPSTREAM_FAILURE,
)
async def list_buckets(
    objects: ObjectStorageAdapter = Depends(get_object_storage_adapter),
):
    return [BucketSummary.model_validate(b) for b in await objects.list_buckets()]


@router.get(
    "/{bucketName}",
    response_model=list[ObjectSummary],
    summary="Lista os objetos de um bucket",
    responses=UPSTREAM_FAILURE,
)
async def list_objects(
    bucket_name: BucketName,
    objects: ObjectStorageAdapter = Depends(get_object_storage_adapter),
):
    return [
        ObjectSummary.model_validate(o)
        for o in await objects.list_objects(bucket_name)
    ]


@router.post(
    "/{bucketName}/upload",
    response_model=UploadResult,
    summary="Faz o upload de um arquivo para um bucket",
    responses={
        **INVALID_BODY,
        413: {"model": ErrorResponse, "description": "Arquivo muito grande"},
        **UPSTREAM_FAILURE,
    },
)
async def upload_file(
    bucket_name: BucketName,
    file: UploadFile | str | None = File(None, description="Arquivo a enviar"),
    objects: ObjectStorageAdapter = Depends(get_object_storage_adapter),
):
    # A plain text field named "file" is not a file part either
    if not isinstance(file, StarletteUploadFile):
        raise MissingFileError()
    try:
        stored = await objects.upload(
            bucket_name,
            file.filename or "upload",
            file.file,
            content_type=file.content_type,
            size=file.size,
        )
    finally:
        await file.close()
    return UploadResult(
        message="Upload efetuado com sucesso",
        file_url=stored["fileUrl"],
        bucket=stored["bucket"],
        key=stored["key"],
    )


@router.delete(
    "/{bucketName}/file/{fileName}",
    response_model=MessageResponse,
    summary="Deleta um arquivo específico de um bucket",
    responses=UPSTREAM_FAILURE,
)
async def delete_file(
    bucket_name: BucketName,
    file_name: Annotated[
        str, Path(alias="fileName", description="Nome do arquivo a ser deletado"),
    ],
    objects: ObjectStorageAdapter = Depends(get_object_storage_adapter),
):
    await objects.delete(bucket_name, file_name)
    return MessageResponse(message="Arquivo removido com sucesso.")
