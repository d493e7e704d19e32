# app/models/patient.py

from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional


class Patient(BaseModel):
    model_config = ConfigDict(validate_by_name=True)

    id: Optional[str] = None
    name: Optional[str] = Field(default=None, alias="nomewpp")
    phone: Optional[str] = Field(default=None, alias="telefone")
    created_at: Optional[datetime] = None
