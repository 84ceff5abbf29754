"""
➡️ But : Peupler la base à partir d'un fichier YAML (dev / démo).

Chaque étape est idempotente : si la table contient déjà des lignes, rien
n'est inséré.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml
from sqlmodel import Session, select

from garage.db.models.users import Role, User
from garage.db.models.vehicles import Vehicle
from garage.security.password import hash_password

logger = logging.getLogger(__name__)

DEFAULT_SEED_PATH = Path(__file__).with_name("seed_data.yaml")


# -----------------------------
# YAML loader
# -----------------------------
def load_seed_yaml(seed_path: str | Path) -> Dict[str, Any]:
    path = Path(seed_path)
    if not path.exists():
        raise FileNotFoundError(f"Seed YAML introuvable: {path}")

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Le YAML de seed doit contenir un objet racine (mapping).")
    return data


# -----------------------------
# Seed Users
# -----------------------------
def seed_users(session: Session, data: Dict[str, Any], *, bcrypt_rounds: int = 12) -> int:
    if session.exec(select(User)).first():
        logger.info("Les utilisateurs existent déjà, aucune insertion effectuée.")
        return 0

    users: List[Dict[str, Any]] = data.get("users", [])
    if not users:
        logger.warning("Aucun utilisateur dans le YAML (clé 'users').")
        return 0

    session.add_all([
        User(
            firstname=u["firstname"],
            lastname=u["lastname"],
            email=u["email"].strip().lower(),
            password=hash_password(u["password"], bcrypt_rounds),
            role=Role(u.get("role", "client")),
        )
        for u in users
    ])
    session.commit()
    logger.info("%s utilisateurs insérés.", len(users))
    return len(users)


# -----------------------------
# Seed Vehicles
# -----------------------------
def seed_vehicles(session: Session, data: Dict[str, Any]) -> int:
    if session.exec(select(Vehicle)).first():
        logger.info("Les véhicules existent déjà, aucune insertion effectuée.")
        return 0

    vehicles: List[Dict[str, Any]] = data.get("vehicles", [])
    if not vehicles:
        logger.warning("Aucun véhicule dans le YAML (clé 'vehicles').")
        return 0

    owners = {u.email: u.id for u in session.exec(select(User)).all()}
    rows = []
    for v in vehicles:
        client_email = v.get("client_email")
        client_id = owners.get(client_email.strip().lower()) if client_email else None
        if client_email and client_id is None:
            logger.warning("Client %s introuvable pour le véhicule %s (ignoré).", client_email, v["name"])
        rows.append(
            Vehicle(
                marque=v["marque"],
                modele=str(v["modele"]),
                annee=int(v["annee"]),
                name=v["name"],
                type=v.get("type"),
                client_id=client_id,
            )
        )
    session.add_all(rows)
    session.commit()
    logger.info("%s véhicules insérés.", len(rows))
    return len(rows)


def seed_all(session: Session, seed_path: str | Path = DEFAULT_SEED_PATH, *, bcrypt_rounds: int = 12) -> None:
    data = load_seed_yaml(seed_path)
    seed_users(session, data, bcrypt_rounds=bcrypt_rounds)
    seed_vehicles(session, data)
