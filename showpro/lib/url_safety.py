"""
Gate de segurança para URLs fornecidas pelo operador (stream e banner).

Decide se uma URL pode virar um iframe sandboxed, um link simples ou nada.
Todas as funções são puras e totais: entrada malformada (inclusive não-string)
sempre produz o resultado seguro, nunca uma exceção.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from urllib.parse import SplitResult, urlsplit

# Origens de vídeo confiáveis para iframe sandboxed (comparação exata de hostname).
ALLOWED_STREAM_HOSTS = frozenset(
    {
        "youtube.com",
        "www.youtube.com",
        "youtu.be",
        "vimeo.com",
        "player.vimeo.com",
    }
)

# Providers cujo embed passa pela allow-list. "other" nunca vira iframe.
EMBED_PROVIDERS = frozenset({"youtube", "vimeo"})

# Scripts e mesma origem liberados; sem allow-top-navigation.
IFRAME_SANDBOX = "allow-scripts allow-same-origin"

# SVG fica de fora: pode carregar conteúdo executável.
_DATA_IMAGE_RE = re.compile(r"data:image/(jpeg|png|gif|webp);base64,(.+)", re.DOTALL)
_BASE64_RE = re.compile(r"(?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=)?")
_WHITESPACE_RE = re.compile(r"\s")


class StreamEmbedClass(str, enum.Enum):
    EMBEDDABLE = "embeddable"
    EXTERNAL_LINK_ONLY = "external_link_only"
    REJECTED = "rejected"


def _parse_https(url: object) -> SplitResult | None:
    """Retorna a URL parseada se for https bem-formada com host; senão None."""
    if not isinstance(url, str) or not url or _WHITESPACE_RE.search(url):
        return None
    try:
        parsed = urlsplit(url)
        # .port levanta ValueError para porta inválida
        parsed.port
    except ValueError:
        return None
    if parsed.scheme != "https" or not parsed.hostname:
        return None
    if parsed.username is not None or parsed.password is not None:
        return None
    return parsed


def is_https_url(url: object) -> bool:
    return _parse_https(url) is not None


def is_http_url(url: object) -> bool:
    """URL http(s) bem-formada; usado para links de recursos e replay."""
    if not isinstance(url, str) or not url or _WHITESPACE_RE.search(url):
        return False
    try:
        parsed = urlsplit(url)
        parsed.port
    except ValueError:
        return False
    return parsed.scheme in {"http", "https"} and bool(parsed.hostname)


def _provider_value(provider: object) -> str | None:
    value = getattr(provider, "value", provider)
    return value if isinstance(value, str) else None


def classify_stream_embed(url: object, provider: object) -> StreamEmbedClass:
    """
    Classifica a URL de stream para renderização.

    - provider "other": nunca iframe; link externo se for https bem-formada, senão rejeitada.
    - youtube/vimeo: iframe apenas para https com host na allow-list.
    - provider desconhecido: rejeitada.
    """
    provider_value = _provider_value(provider)
    parsed = _parse_https(url)

    if provider_value == "other":
        return StreamEmbedClass.EXTERNAL_LINK_ONLY if parsed else StreamEmbedClass.REJECTED

    if provider_value not in EMBED_PROVIDERS or parsed is None:
        return StreamEmbedClass.REJECTED

    if parsed.hostname not in ALLOWED_STREAM_HOSTS:
        return StreamEmbedClass.REJECTED
    return StreamEmbedClass.EMBEDDABLE


def parse_inline_image(url: object) -> tuple[str, str] | None:
    """Retorna (subtipo, payload base64) de uma data URL de imagem aceita; senão None."""
    if not isinstance(url, str):
        return None
    match = _DATA_IMAGE_RE.fullmatch(url)
    if not match:
        return None
    media_subtype, payload = match.group(1), match.group(2)
    if not _BASE64_RE.fullmatch(payload):
        return None
    return media_subtype, payload


def is_valid_banner_url(url: object) -> bool:
    """
    Banner válido: URL https bem-formada ou data URL base64 de jpeg/png/gif/webp.

    A checagem do payload é só sintática (regex), sem decodificar. O limite de tamanho
    do upload inline é aplicado por quem chama.
    """
    if parse_inline_image(url) is not None:
        return True
    return is_https_url(url)


@dataclass(frozen=True)
class StreamEmbedDecision:
    """O que a página pública deve construir para um stream."""

    kind: str  # "iframe" | "link" | "rejected"
    url: str | None = None
    sandbox: str | None = None
    message: str | None = None


def describe_stream_embed(url: object, provider: object) -> StreamEmbedDecision:
    classification = classify_stream_embed(url, provider)
    if classification is StreamEmbedClass.EMBEDDABLE:
        return StreamEmbedDecision(kind="iframe", url=str(url), sandbox=IFRAME_SANDBOX)
    if classification is StreamEmbedClass.EXTERNAL_LINK_ONLY:
        return StreamEmbedDecision(kind="link", url=str(url))
    return StreamEmbedDecision(
        kind="rejected",
        message="This stream URL is not from a trusted video host and cannot be embedded.",
    )
