"""
➡️ But : Formats d'entrée/sortie des véhicules (couche validation).

VehicleIn sert à la création (POST) comme au remplacement complet (PUT).
Chaque validateur lève un message en français ; le handler de validation les
regroupe en une entrée par champ.
"""

import re
from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

PLATE_PATTERN = re.compile(r"^[A-Z]{2}-[0-9]{3}-[A-Z]{2}$")
MIN_YEAR = 1900
# plus grand entier stocké par SQLite / BIGINT
MAX_INT = 2 ** 63 - 1


def max_year() -> int:
    return date.today().year + 1


def _as_int(v: Any) -> Optional[int]:
    """
    Entier ou chaîne d'entier tenant sur 64 bits signés ; None sinon
    (les booléens sont refusés).
    """
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        value = v
    elif isinstance(v, float) and v.is_integer():
        value = int(v)
    elif isinstance(v, str) and re.fullmatch(r"\s*[+-]?\d{1,19}\s*", v):
        value = int(v)
    else:
        return None
    if not -MAX_INT <= value <= MAX_INT:
        return None
    return value


def _as_text(v: Any) -> Optional[str]:
    """Texte nettoyé ; un entier (ex : modèle `208` envoyé en nombre) est converti."""
    if isinstance(v, int) and not isinstance(v, bool):
        return str(v)
    if isinstance(v, str):
        return v.strip()
    return None


# ---------- Inputs ----------

class VehicleIn(BaseModel):
    marque: str = Field(examples=["Peugeot"])
    modele: str = Field(examples=["208"])
    annee: int = Field(examples=[2023])
    name: str = Field(description="Plaque d'immatriculation (AA-123-BB)", examples=["AB-123-CD"])
    type: Optional[str] = Field(default=None, examples=["Citadine"])
    client_id: Optional[int] = Field(default=None, examples=[None])

    @field_validator("marque", mode="before")
    @classmethod
    def _check_marque(cls, v: Any) -> str:
        text = _as_text(v)
        if text is None or not 1 <= len(text) <= 50:
            raise ValueError("Marque requise (1-50 caractères)")
        return text

    @field_validator("modele", mode="before")
    @classmethod
    def _check_modele(cls, v: Any) -> str:
        text = _as_text(v)
        if text is None or not 1 <= len(text) <= 50:
            raise ValueError("Modèle requis (1-50 caractères)")
        return text

    @field_validator("annee", mode="before")
    @classmethod
    def _check_annee(cls, v: Any) -> int:
        year = _as_int(v)
        if year is None or not MIN_YEAR <= year <= max_year():
            raise ValueError("Année invalide")
        return year

    @field_validator("name", mode="before")
    @classmethod
    def _check_plate(cls, v: Any) -> str:
        if not isinstance(v, str) or not PLATE_PATTERN.match(v.strip()):
            raise ValueError("Plaque d'immatriculation invalide (format: AA-123-BB)")
        return v.strip()

    @field_validator("type", mode="before")
    @classmethod
    def _check_type(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        if not isinstance(v, str) or len(v) > 50:
            raise ValueError("Type trop long (max 50 caractères)")
        return v or None

    @field_validator("client_id", mode="before")
    @classmethod
    def _check_client_id(cls, v: Any) -> Optional[int]:
        # "", 0 et null : aucun client associé
        if v is None or v == "" or (v == 0 and not isinstance(v, bool)):
            return None
        client_id = _as_int(v)
        if client_id is None:
            raise ValueError("ID client invalide")
        return client_id


# ---------- Outputs ----------

class VehicleOut(BaseModel):
    id: int
    marque: str
    modele: str
    annee: int
    name: str
    type: Optional[str] = None
    client_id: Optional[int] = None
    created_at: datetime
    firstname: Optional[str] = None
    lastname: Optional[str] = None

class VehicleCreatedOut(BaseModel):
    id: int
    message: str = "Véhicule ajouté avec succès"

class VehicleDeletedOut(BaseModel):
    message: str = "Véhicule supprimé avec succès"
    gdprCompliance: str = "Données supprimées conformément au droit à l'effacement (RGPD Art. 17)"


class AssociatedClientOut(BaseModel):
    name: str
    email: str

class RightsInfoOut(BaseModel):
    access: str = "Vous pouvez demander l'accès à vos données"
    rectification: str = "Vous pouvez demander la correction des données inexactes"
    erasure: str = "Vous pouvez demander la suppression de vos données"
    portability: str = "Vous pouvez demander le transfert de vos données"

class GdprDisclosureOut(BaseModel):
    vehicleId: int
    licensePlate: str
    brand: str
    model: str
    year: int
    type: Optional[str] = None
    registrationDate: datetime
    associatedClient: Optional[AssociatedClientOut] = None
    dataProcessingPurpose: str = "Gestion des véhicules du garage"
    legalBasis: str = "Exécution d'un contrat ou intérêt légitime"
    retentionPeriod: str = "7 ans après la dernière intervention"
    rightsInfo: RightsInfoOut = Field(default_factory=RightsInfoOut)
