from pydantic import AliasChoices, BaseModel, ConfigDict, Field

DIGITS_PATTERN = r"^[0-9]+$"


class _Request(BaseModel):
    model_config = ConfigDict(extra="forbid")


class ProfileRequest(_Request):
    full_name: str = Field(min_length=1, max_length=80, validation_alias=AliasChoices("fullName", "full_name"))
    email: str | None = None
    profile_picture: str | None = Field(
        default=None, validation_alias=AliasChoices("profilePicture", "profile_picture")
    )


class CreateRoomRequest(_Request):
    name: str = Field(min_length=1, max_length=80, validation_alias=AliasChoices("name", "roomName"))
    password: str | None = None
    is_public: bool = Field(default=True, validation_alias=AliasChoices("isPublic", "is_public"))
    digit_count: int | None = Field(default=None, validation_alias=AliasChoices("digitCount", "digit_count"))


class JoinRoomRequest(_Request):
    password: str | None = None


class SetReadyRequest(_Request):
    ready: bool


class SetSecretRequest(_Request):
    secret: str = Field(pattern=DIGITS_PATTERN, validation_alias=AliasChoices("secret", "secretNumber"))


class GuessRequest(_Request):
    guess: str = Field(pattern=DIGITS_PATTERN)
