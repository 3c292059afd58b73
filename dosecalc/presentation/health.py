# dosecalc/presentation/health.py
from fastapi import APIRouter, Depends
from dosecalc.container import get_cache, get_engine, get_translator

router = APIRouter()

@router.get("/healthz")
async def healthz():
    return {"ok": True}

@router.get("/readyz")
async def readyz(cache = Depends(get_cache), engine = Depends(get_engine), tr = Depends(get_translator)):
    checks = {}; ok = True
    # Catalog
    checks["catalog_products"] = len(engine.catalog)
    ok = ok and len(engine.catalog) > 0
    # Translations
    checks["languages"] = tr.languages
    # Redis (language preferences only; the calculator works without it)
    try:
        pong = await cache.ping()
        checks["redis"] = bool(pong)
    except Exception as e:
        checks["redis"] = False; checks["redis_error"] = str(e)
    return {"ok": ok, **checks}
