# app/services/patients.py

from typing import Optional

from pymongo.errors import PyMongoError

from app.core.logger import logger
from app.models.patient import Patient
from app.utils.errors import PersistenceError


async def find_patient_by_phone(collection, phone: str) -> Optional[Patient]:
    """Read-only lookup of the patient whose phone matches a chat session id."""
    try:
        doc = await collection.find_one({"telefone": phone})
    except PyMongoError as e:
        logger.error(f"Patient lookup failed for {phone}: {e}")
        raise PersistenceError("Failed to load patient") from e

    if not doc:
        return None
    raw_id = doc.pop("_id", None)
    if raw_id is None:
        raw_id = doc.get("id")
    doc["id"] = str(raw_id) if raw_id is not None else None
    return Patient.model_validate(doc)
