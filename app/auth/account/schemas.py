from pydantic import BaseModel


class VerifyTokenRequest(BaseModel):
    token: str


class VerifyTokenResponse(BaseModel):
    profile_id: str
    email: str
    fullname: str
