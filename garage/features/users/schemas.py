"""
➡️ But : Formats de sortie pour les utilisateurs.

Empêche d'exposer par erreur des infos sensibles (le hash du mot de passe n'apparaît jamais).
"""

from datetime import datetime

from pydantic import BaseModel

from garage.db.models.users import Role

class UserOut(BaseModel):
    id: int
    firstname: str
    lastname: str
    email: str
    role: Role
    created_at: datetime

    model_config = {"from_attributes": True}

class CountOut(BaseModel):
    count: int
