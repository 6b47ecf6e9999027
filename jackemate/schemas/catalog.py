from pydantic import BaseModel, ConfigDict


class CatalogItem(BaseModel):
    """Row of a reference table (category, priority, status)"""
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)
