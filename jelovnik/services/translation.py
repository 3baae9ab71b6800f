"""
Auto-translation of menu text via Microsoft Translator (v3 REST API).
Croatian product_name / description_hr are translated to en, de and tr concurrently.
A failed call never raises: the source text is kept and the failure is logged.
"""
from __future__ import annotations

import asyncio
import logging

import httpx

from jelovnik.config import get_settings
from jelovnik.i18n import DESCRIPTION_FIELDS, NAME_FIELDS, SOURCE_LANGUAGE, TARGET_LANGUAGES
from jelovnik.schemas.menu import MenuField, MenuItemSchema, get_field

logger = logging.getLogger(__name__)

API_VERSION = "3.0"


def _headers() -> dict[str, str]:
    settings = get_settings()
    return {
        "Ocp-Apim-Subscription-Key": settings.translator_key or "",
        "Ocp-Apim-Subscription-Region": settings.translator_region,
        "Content-Type": "application/json",
    }


async def translate_text(text: str, target_language: str, source_language: str = SOURCE_LANGUAGE) -> str:
    """
    POST {endpoint}/translate with [{"text": text}].
    Returns the translated text, or the original text if the service fails.
    """
    if not text or not text.strip():
        return ""
    settings = get_settings()
    url = f"{settings.translator_endpoint}/translate"
    params = {"api-version": API_VERSION, "from": source_language, "to": target_language}
    try:
        async with httpx.AsyncClient(timeout=settings.translator_timeout) as client:
            resp = await client.post(url, params=params, json=[{"text": text}], headers=_headers())
            resp.raise_for_status()
            body = resp.json()
            translated = body[0]["translations"][0]["text"]
    except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as e:
        logger.warning("translation_failed", extra={"error": str(e), "translation_response": {"to": target_language}})
        return text
    logger.info(
        "translation_response",
        extra={"translation_response": {"status_code": resp.status_code, "to": target_language}},
    )
    return translated


# (source field, target field, target language)
def _translation_tasks() -> list[tuple[MenuField, MenuField, str]]:
    tasks = []
    for lang in TARGET_LANGUAGES:
        tasks.append((NAME_FIELDS[SOURCE_LANGUAGE], NAME_FIELDS[lang], lang))
        tasks.append((DESCRIPTION_FIELDS[SOURCE_LANGUAGE], DESCRIPTION_FIELDS[lang], lang))
    return tasks


async def translate_menu_item(item: MenuItemSchema) -> MenuItemSchema:
    """Fill per-language name/description from the Croatian source; nothing is persisted.

    Targets whose Croatian source is blank are left as they are.
    """
    tasks = [
        (source, target, lang)
        for source, target, lang in _translation_tasks()
        if (get_field(item, source) or "").strip()
    ]
    results = await asyncio.gather(*(translate_text(get_field(item, source), lang) for source, _, lang in tasks))
    return item.model_copy(update={target.value: text for (_, target, _), text in zip(tasks, results)})


async def is_translation_available() -> bool:
    settings = get_settings()
    if not settings.translator_key:
        return False
    try:
        async with httpx.AsyncClient(timeout=settings.translator_timeout) as client:
            resp = await client.get(
                f"{settings.translator_endpoint}/languages",
                params={"api-version": API_VERSION},
                headers=_headers(),
            )
            resp.raise_for_status()
            return True
    except httpx.HTTPError as e:
        logger.warning("translator_unavailable", extra={"error": str(e)})
        return False
