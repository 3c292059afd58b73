import logging

from dosecalc.services.translator import Translator

tr = Translator()


def test_languages_from_yaml():
    assert tr.languages == ["en", "zh", "fr"]
    assert tr.label("zh") == "中文"
    assert tr.supports("fr") and not tr.supports("de") and not tr.supports(None)


def test_lookup_falls_back_to_english_then_key():
    assert tr.t("weightOutOfRange", "zh") == "体重超出范围"
    assert tr.t("weightOutOfRange", "de") == "Weight out of range"
    # fr has no unit strings
    assert tr.t("ml", "fr") == "ml"
    assert tr.t("noSuchKey", "zh") == "noSuchKey"


def test_format_placeholders():
    assert tr.t("artesunDosageResultTitle", "en", weight="20.0") == "Artesun® dosage based on weight 20.0kg"
    # missing placeholder value keeps the raw template
    assert "{weight}" in tr.t("artesunDosageResultTitle", "en", other=1)


def test_negotiate_accept_language():
    assert tr.negotiate("zh-CN,zh;q=0.9,en;q=0.8") == "zh"
    assert tr.negotiate("de-DE,fr;q=0.5,en;q=0.4") == "fr"
    assert tr.negotiate("en;q=0.2,fr;q=0.9") == "fr"
    assert tr.negotiate("de,*") is None
    assert tr.negotiate("") is None


def test_resolve_language_order():
    assert tr.resolve_language("fr", "zh", accept_language="en") == "fr"
    assert tr.resolve_language(None, "xx", accept_language="zh-TW") == "zh"
    assert tr.resolve_language(None) == "en"


def test_default_language(monkeypatch):
    monkeypatch.setenv("DEFAULT_LANGUAGE", "zh")
    assert Translator().default_language == "zh"
    monkeypatch.setenv("DEFAULT_LANGUAGE", "xx")
    assert Translator().default_language == "en"


def test_missing_file_degrades_to_keys(tmp_path, caplog):
    with caplog.at_level(logging.WARNING, logger="dosecalc.i18n"):
        t = Translator(path=tmp_path / "missing.yaml")
    assert t.t("weightOutOfRange", "en") == "weightOutOfRange"
    assert t.languages == ["en"]
    assert any("missing.yaml" in r.getMessage() for r in caplog.records)


def test_custom_yaml(tmp_path):
    p = tmp_path / "t.yaml"
    p.write_text("languages: {en: EN, es: ES}\ntranslations:\n  en: {hello: Hello}\n  es: {hello: Hola}\n",
                 encoding="utf-8")
    t = Translator(path=p)
    assert t.t("hello", "es") == "Hola"
    assert t.negotiate("es-MX") == "es"
