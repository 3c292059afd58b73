# dosecalc/container.py
from functools import lru_cache

from dosecalc.infra.cache.redis_cache import RedisCache
from dosecalc.services.translator import Translator
from dosecalc.services.language_preference import LanguagePreferenceService

from dosecalc.application.engine import DosageEngine
from dosecalc.application.use_cases import ComputeDosageUseCase


@lru_cache
def _cache() -> RedisCache: return RedisCache.from_env()

@lru_cache
def _translator() -> Translator: return Translator()

@lru_cache
def _engine() -> DosageEngine: return DosageEngine()


def get_engine() -> DosageEngine:
    return _engine()

def get_translator() -> Translator:
    return _translator()

def get_compute_use_case() -> ComputeDosageUseCase:
    return ComputeDosageUseCase(engine=_engine(), translator=_translator())

def get_language_preferences() -> LanguagePreferenceService:
    return LanguagePreferenceService(_cache(), _translator())

def get_cache() -> RedisCache:
    return _cache()
