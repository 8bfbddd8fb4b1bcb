"""Datenmodell für einen Coach (Pydantic v2)."""

from pydantic import BaseModel, field_validator


class Coach(BaseModel):
    """Ein Coach. Für das Raster nur lesend (Filter, Namensauflösung)."""

    id: str
    name: str
    active: bool = True

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Coach-Name darf nicht leer sein.")
        return v

    @property
    def abbreviation(self) -> str:
        """Kürzel aus dem Vornamen, z.B. "Ciaran Byrne" → "CIARAN"."""
        return self.name.split()[0].upper()
