from pydantic import Field

from app.schemas.query import WireModel


class LoginIn(WireModel):
    npk: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=1)
