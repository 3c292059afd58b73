# dosecalc/services/language_preference.py
from datetime import datetime, timezone
from typing import Optional

from dosecalc.domain.ports import CachePort
from dosecalc.services.translator import Translator


class UnsupportedLanguage(ValueError):
    pass


class LanguagePreferenceService:
    """
    Per-session language preference (the only state the service keeps).
    Keys: session:{sid}:lang -> {"lang": "zh", "updated_at": "..."}
    """
    def __init__(self, store: CachePort, translator: Translator):
        self.rs = store
        self.tr = translator

    @staticmethod
    def _key(session_id: str) -> str:
        return f"session:{session_id}:lang"

    async def get(self, session_id: str) -> Optional[str]:
        doc = await self.rs.get_json(self._key(session_id))
        lang = doc.get("lang") if isinstance(doc, dict) else doc
        # a value saved before a language was dropped from the YAML is ignored
        return lang if self.tr.supports(lang) else None

    async def set(self, session_id: str, lang: str) -> str:
        if not self.tr.supports(lang):
            raise UnsupportedLanguage(lang)
        await self.rs.set_json(self._key(session_id), {
            "lang": lang,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        })
        return lang

    async def clear(self, session_id: str) -> None:
        await self.rs.delete(self._key(session_id))
