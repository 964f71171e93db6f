from pydantic import BaseModel

class TokenPayload(BaseModel):
    sub: str | None = None
    exp: int | None = None

class Actor(BaseModel):
    """Authenticated caller resolved from the external identity provider's token."""
    id: str
