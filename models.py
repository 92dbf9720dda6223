from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    """Base for records stored and served as camelCase JSON."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class Video(Record):
    id: str = Field(min_length=1)
    title: str
    channel_title: str = ""
    thumbnail: str = ""
    duration: str = ""
    published_at: Optional[str] = None
    view_count: Optional[int] = None


class Song(Record):
    id: str = Field(min_length=1)
    title: str
    artist: str
    file: str
    duration: float = 0
    uploaded_at: str


class SessionUser(Record):
    id: str
    name: str
    email: str


class User(SessionUser):
    password: str

    def session_record(self) -> SessionUser:
        return SessionUser(id=self.id, name=self.name, email=self.email)
