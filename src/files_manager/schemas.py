####################################
# --- Request/response schemas --- #
####################################

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class CreateUserRequest(BaseModel):
    """Body of `POST /users`; presence is checked by the createUser task."""
    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    id: str
    email: str


class TokenResponse(BaseModel):
    token: str


class CreateFileRequest(BaseModel):
    """Body of `POST /files`. `data` is the base64 encoded content."""
    name: Optional[str] = None
    type: Optional[str] = None
    parent_id: Union[int, str, None] = Field(default=0, alias="parentId")
    is_public: bool = Field(default=False, alias="isPublic")
    data: Optional[str] = None

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "name": "notes.txt",
                "type": "file",
                "parentId": 0,
                "isPublic": False,
                "data": "SGVsbG8gV2Vic3RhY2shCg==",
            }
        },
    )


class FileResponse(BaseModel):
    """A file record as returned to its owner."""
    id: str
    user_id: str = Field(alias="userId")
    name: str
    type: str
    is_public: bool = Field(alias="isPublic")
    parent_id: Union[int, str] = Field(alias="parentId")

    model_config = ConfigDict(populate_by_name=True)

