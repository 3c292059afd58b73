# dosecalc/application/commands.py
from typing import Any
from pydantic import BaseModel


class ComputeDosageCommand(BaseModel):
    # non-numeric weights reach the engine and come back as InvalidInput
    weight: Any = None
    product_id: str
    route: str | None = None
    lang: str | None = None
