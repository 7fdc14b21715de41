####################################
# --- Task payloads, one per kind --- #
####################################

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

CREATE_USER = "createUser"
SIGN_IN_USER = "signInUser"
SIGN_OUT_USER = "signOutUser"
UPLOAD_FILE = "uploadFile"
GENERATE_THUMBNAILS = "generateThumbnails"


class _Payload(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class CreateUserPayload(_Payload):
    """Payload for `createUser` on the user lane."""
    kind: Literal["createUser"] = CREATE_USER
    email: Optional[str] = None
    password: Optional[str] = None


class SignInPayload(_Payload):
    """Payload for `signInUser` on the user lane."""
    kind: Literal["signInUser"] = SIGN_IN_USER
    email: Optional[str] = None
    password: Optional[str] = None


class SignOutPayload(_Payload):
    """Payload for `signOutUser` on the user lane."""
    kind: Literal["signOutUser"] = SIGN_OUT_USER
    token: Optional[str] = None


class UploadFilePayload(_Payload):
    """Payload for `uploadFile` on the file lane; `data` is base64."""
    kind: Literal["uploadFile"] = UPLOAD_FILE
    owner_user_id: str = Field(min_length=1)
    name: Optional[str] = None
    type: Optional[str] = None
    parent_id: Union[int, str, None] = 0
    is_public: bool = False
    data: Optional[str] = None


class GenerateThumbnailsPayload(_Payload):
    """Payload for `generateThumbnails` on the file lane."""
    kind: Literal["generateThumbnails"] = GENERATE_THUMBNAILS
    owner_user_id: str = Field(min_length=1)
    file_id: str = Field(min_length=1)

