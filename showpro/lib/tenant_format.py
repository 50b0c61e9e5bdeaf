"""
Formatação de datas de evento conforme locale do tenant e timezone do evento.

Os instantes são gravados em UTC; para exibição são convertidos para o timezone
de exibição do evento e formatados no padrão da região do tenant.
"""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# Mapeamento BCP 47 (locale) -> strftime para data curta.
# Fallback: ISO %Y-%m-%d.
_DATE_FORMAT_BY_LOCALE: dict[str, str] = {
    "en-US": "%m/%d/%Y",
    "en-GB": "%d/%m/%Y",
    "en": "%d/%m/%Y",
    "pt-BR": "%d/%m/%Y",
    "pt": "%d/%m/%Y",
    "es": "%d/%m/%Y",
    "fr": "%d/%m/%Y",
    "de": "%d.%m.%Y",
    "it": "%d/%m/%Y",
}


def _format_for_locale(d: date, locale: str) -> str:
    """Retorna a data no formato do locale; fallback para ISO."""
    if not locale or not locale.strip():
        return d.strftime("%Y-%m-%d")
    locale = locale.strip()
    fmt = _DATE_FORMAT_BY_LOCALE.get(locale)
    if not fmt:
        # Tentar só a parte da língua (ex: en de en-AU)
        fmt = _DATE_FORMAT_BY_LOCALE.get(locale.split("-")[0].lower())
    if not fmt:
        return d.strftime("%Y-%m-%d")
    return d.strftime(fmt)


def to_event_timezone(dt: datetime, tz_name: str) -> datetime:
    """Converte um instante para o timezone do evento (UTC se o nome for inválido)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        tz = timezone.utc
    return dt.astimezone(tz)


def format_event_datetime(dt: datetime, locale: str, tz_name: str) -> str:
    """
    Formata data/hora de um evento para exibição.

    :param dt: instante (UTC) a formatar.
    :param locale: locale BCP 47 do tenant (ex: "en-US").
    :param tz_name: timezone IANA do evento (ex: "America/New_York").
    :return: ex: "09/15/2025 05:00 EDT" para en-US em America/New_York.
    """
    local = to_event_timezone(dt, tz_name)
    date_str = _format_for_locale(local.date(), locale or "")
    # 24h para todos os locales
    return f"{date_str} {local.strftime('%H:%M')} {local.tzname() or ''}".strip()
