from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

Timestamp = Annotated[
    datetime,
    PlainSerializer(lambda value: value.strftime("%Y-%m-%d %H:%M:%S"), return_type=str),
]


def local_now() -> datetime:
    return datetime.now()


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FileRecord(CamelModel):
    file_name: str
    file_key: str
    file_size: int
    last_modified: datetime
    download_url: str | None = None


class SearchResponse(CamelModel):
    success: bool
    message: str
    files: list[FileRecord]
    timestamp: Timestamp = Field(default_factory=local_now)

    @classmethod
    def from_files(cls, files: list[FileRecord], user_name: str, search_term: str | None) -> "SearchResponse":
        if files:
            message = f"{len(files)} files found for user {user_name}"
        elif search_term and search_term.strip():
            message = f"No files found for file name: {search_term}"
        else:
            message = f"No files found for user {user_name}"
        return cls(success=bool(files), message=message, files=files)


class ApiSuccessResponse(CamelModel):
    success: bool = True
    message: str
    timestamp: Timestamp = Field(default_factory=local_now)


class ApiErrorResponse(CamelModel):
    status: int
    message: str
    path: str
    timestamp: Timestamp = Field(default_factory=local_now)
