from pydantic import BaseModel, EmailStr, Field
from typing import Optional

# ======================
# TOKEN SCHEMAS
# ======================

class Token(BaseModel):
    access_token: str
    token_type: str
    role: str

class TokenData(BaseModel):
    user_id: Optional[int] = None
    role: Optional[str] = None


# ======================
# USER AUTHENTICATION SCHEMAS
# ======================

class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    # Bcrypt limit is 72 bytes; max_length=72 prevents the "password too long" crash
    password: str = Field(..., min_length=6, max_length=72)
    # Self-registration may pick Citizen or Interested; Admin is granted out of band.
    role: Optional[str] = "Citizen"

class LoginRequest(BaseModel):
    email: EmailStr
    password: str
