import re
from typing import Annotated

from pydantic import BaseModel, EmailStr, Field, StringConstraints, field_validator

from garage.db.models.users import Role

_SPECIALS = "@$!%*?&"
MAX_PASSWORD_BYTES = 72
_PASSWORD_RULES = (
    re.compile(r"[a-z]"),
    re.compile(r"[A-Z]"),
    re.compile(r"\d"),
    re.compile(f"[{re.escape(_SPECIALS)}]"),
)

PersonName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=50)]

# ---------- Inputs ----------

class SignUpIn(BaseModel):
    firstname: PersonName = Field(examples=["Jean"])
    lastname: PersonName = Field(examples=["Dupont"])
    email: EmailStr = Field(examples=["jean.dupont@example.com"])
    password: str = Field(min_length=8, max_length=MAX_PASSWORD_BYTES, examples=["Azerty@01"])

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("password")
    @classmethod
    def _password_complexity(cls, v: str) -> str:
        if not all(rule.search(v) for rule in _PASSWORD_RULES):
            raise ValueError(
                "Le mot de passe doit contenir au moins 8 caractères, une majuscule, "
                "une minuscule, un chiffre et un caractère spécial"
            )
        # la limite de bcrypt porte sur les octets, pas sur les caractères
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Le mot de passe ne doit pas dépasser {MAX_PASSWORD_BYTES} octets")
        return v


class SignInIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: str) -> str:
        return v.strip().lower()


# ---------- Outputs ----------

class MessageOut(BaseModel):
    message: str

class SignInOut(BaseModel):
    auth: bool = True
    role: Role

class CsrfOut(BaseModel):
    status: int = 200
    message: str = "CSRF récupéré"
    token: str
