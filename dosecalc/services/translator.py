# dosecalc/services/translator.py
import os
import logging
from pathlib import Path
from typing import Dict, List, Optional

import yaml

log = logging.getLogger("dosecalc.i18n")

DEFAULT_I18N_PATH = Path(__file__).resolve().parents[2] / "config" / "i18n" / "translations.yaml"
FALLBACK_LANGUAGE = "en"


class Translator:
    """
    Key → text lookup backed by config/i18n/translations.yaml.

    Lookup order: requested language, English, then the key itself, so a
    missing string never breaks a response.
    """

    def __init__(self, path: str | Path | None = None, default_language: str | None = None):
        p = Path(path or os.getenv("I18N_PATH") or DEFAULT_I18N_PATH)
        cfg = {}
        try:
            cfg = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            log.warning("load %s failed: %s; only message keys will be returned", p, e)

        self.translations: Dict[str, Dict[str, str]] = cfg.get("translations") or {}
        self.language_labels: Dict[str, str] = cfg.get("languages") or {FALLBACK_LANGUAGE: "EN"}
        lang = default_language or os.getenv("DEFAULT_LANGUAGE", FALLBACK_LANGUAGE)
        self.default_language = lang if self.supports(lang) else FALLBACK_LANGUAGE

    @property
    def languages(self) -> List[str]:
        return list(self.language_labels)

    def supports(self, lang: Optional[str]) -> bool:
        return bool(lang) and lang in self.language_labels

    def t(self, key: str, lang: Optional[str] = None, **fmt) -> str:
        lang = lang if self.supports(lang) else self.default_language
        text = (
            self.translations.get(lang, {}).get(key)
            or self.translations.get(FALLBACK_LANGUAGE, {}).get(key)
            or key
        )
        if fmt:
            try:
                text = text.format(**fmt)
            except (KeyError, IndexError, ValueError):
                log.warning("bad placeholders in key=%s lang=%s", key, lang)
        return text

    def negotiate(self, accept_language: Optional[str]) -> Optional[str]:
        """
        Pick the first supported primary subtag from an Accept-Language
        header ("zh-CN,zh;q=0.9,en;q=0.8" → "zh"). Quality values are
        honoured; unsupported tags are skipped.
        """
        if not accept_language:
            return None
        ranked = []
        for i, part in enumerate(accept_language.split(",")):
            bits = part.strip().split(";")
            tag = bits[0].strip().lower()
            if not tag or tag == "*":
                continue
            q = 1.0
            for b in bits[1:]:
                b = b.strip()
                if b.startswith("q="):
                    try:
                        q = float(b[2:])
                    except ValueError:
                        q = 0.0
            ranked.append((-q, i, tag.split("-")[0]))
        for _, _, primary in sorted(ranked):
            if self.supports(primary):
                return primary
        return None

    def resolve_language(self, *candidates: Optional[str], accept_language: Optional[str] = None) -> str:
        """First supported explicit candidate, else the header, else default."""
        for c in candidates:
            if self.supports(c):
                return c
        return self.negotiate(accept_language) or self.default_language

    def label(self, lang: str) -> str:
        return self.language_labels.get(lang, lang.upper())
