from pydantic import BaseModel

class LoginRequest(BaseModel):
    email: str
    password: str

class SignUpRequest(BaseModel):
    email: str  # plain str to allow .local and other dev domains
    password: str
    firstName: str = ""
    lastName: str = ""

class RefreshRequest(BaseModel):
    refresh_token: str

class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"

class SessionUser(BaseModel):
    id: str
    email: str
    firstName: str = ""
    lastName: str = ""
    role: str = "user"
