# dosecalc/presentation/schemas.py
from __future__ import annotations
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional, Literal

# ── DOSAGE ───────────────────────────────────────────────────────
class DosageRequest(BaseModel):
    weight: Any = Field(None, description="Patient weight in kg")
    product_id: str = Field(..., description="dartepp | argesun | artesun")
    route: Optional[str] = Field(None, description="iv | im (Artesun only)")
    lang: Optional[str] = Field(None, description="en | zh | fr (display only)")

class DosageResponse(BaseModel):
    kind: Literal["tablet", "vial", "out_of_range", "unknown_product", "invalid_input"]
    lang: str
    result: Dict[str, Any]
    title: str
    subtitle: str = ""
    summary: List[str] = []
    message: Optional[str] = None
    strength_details: Optional[List[Dict[str, Any]]] = None

# ── PRODUCTS ─────────────────────────────────────────────────────
class ProductInfo(BaseModel):
    id: str
    name: str
    description: str
    calculator_title: str
    calculator_description: str
    scheme: Literal["tablet", "vial"]
    min_weight: float
    max_weight: float
    routes: List[str] = []
    types: Optional[List[Dict[str, Any]]] = None
    strengths_mg: Optional[List[int]] = None
    formula: Optional[Dict[str, float]] = None
    route_labels: Optional[Dict[str, Dict[str, str]]] = None

class ProductListResponse(BaseModel):
    items: List[ProductInfo]
    lang: str

# ── LANGUAGE PREFERENCE ──────────────────────────────────────────
class LanguageRequest(BaseModel):
    lang: str = Field(..., description="Preferred display language")
    session_id: Optional[str] = Field(None, description="Session id (if not using header)")

class LanguageResponse(BaseModel):
    lang: str
    label: str
    stored: bool = False
    available: List[str] = []
