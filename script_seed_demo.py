#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Script para criar as tabelas e carregar os tenants/eventos de demonstração.

Idempotente: tenants e eventos já existentes (mesmo slug) são mantidos.

Uso:
    python script_seed_demo.py
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

# Adiciona o diretório raiz ao path
project_root = Path(__file__).resolve().parent
sys.path.insert(0, str(project_root))

from sqlmodel import Session

from showpro.db.session import create_tables, get_session_context
from showpro.errors import EventSlugConflictError
from showpro.model.tenant import Tenant
from showpro.schema.event import EventCreate
from showpro.services.event_service import create_event
from showpro.services.tenant_service import create_tenant, get_tenant_by_slug


def _utc(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00")).astimezone(timezone.utc)


DEMO_TENANTS = [
    {
        "name": "ShowPro Productions",
        "slug": "showpro",
        "domain": "showpro.live",
        "primary_color": "#4F46E5",
        "logo_url": "https://placehold.co/200x60?text=ShowPro",
        "font_family": "Inter",
    },
    {
        "name": "Bright Lights AV",
        "slug": "brightlights",
        "primary_color": "#DC2626",
        "logo_url": "https://placehold.co/200x60?text=BrightLights",
        "font_family": "Roboto",
    },
]

DEMO_EVENTS = {
    "showpro": [
        {
            "title": "ShowPro Annual Conference 2025",
            "slug": "annual-conference-2025",
            "status": "published",
            "start_at": _utc("2025-09-15T09:00:00Z"),
            "end_at": _utc("2025-09-15T17:00:00Z"),
            "timezone": "America/New_York",
            "venue": "Javits Center, New York, NY",
            "description": "Join us for a full day of keynotes, panels, and live demos showcasing "
            "the future of live event production.",
            "banner_url": "https://placehold.co/1200x400?text=ShowPro+Annual+Conference+2025",
            "stream": {
                "provider": "youtube",
                "embed_url": "https://www.youtube.com/embed/dQw4w9WgXcQ",
                "is_live": False,
            },
            "resources": [
                {"name": "Event Program", "url": "https://example.com/program.pdf", "type": "pdf"},
                {"name": "Speaker Slide Deck", "url": "https://example.com/slides.pptx", "type": "presentation"},
            ],
            "speakers": [
                {
                    "name": "Alex Rivera",
                    "title": "CEO",
                    "company": "ShowPro Productions",
                    "headshot_url": "https://placehold.co/150x150?text=AR",
                    "bio": "Pioneer in hybrid event technology with 15 years of experience in AV production.",
                },
                {
                    "name": "Jordan Lee",
                    "title": "Director of Engineering",
                    "company": "StreamCore",
                    "headshot_url": "https://placehold.co/150x150?text=JL",
                    "bio": "Specialist in low-latency streaming infrastructure for live events.",
                },
            ],
            "sessions": [
                {
                    "title": "Opening Keynote: The Future of Live Events",
                    "start_at": _utc("2025-09-15T09:00:00Z"),
                    "end_at": _utc("2025-09-15T10:00:00Z"),
                    "description": "Alex Rivera shares the vision for the next decade of live event production.",
                    "speaker_name": "Alex Rivera",
                },
                {
                    "title": "Low-Latency Streaming Deep Dive",
                    "start_at": _utc("2025-09-15T10:30:00Z"),
                    "end_at": _utc("2025-09-15T12:00:00Z"),
                    "description": "Technical session on building reliable streaming infrastructure.",
                    "speaker_name": "Jordan Lee",
                },
            ],
        },
        {
            "title": "Behind the Scenes: Hybrid Production Workshop",
            "slug": "hybrid-production-workshop",
            "status": "draft",
            "start_at": _utc("2025-11-02T13:00:00Z"),
            "end_at": _utc("2025-11-02T16:00:00Z"),
            "timezone": "America/Chicago",
            "venue": "ShowPro Studio, Austin, TX",
            "description": "A hands-on workshop covering multi-camera switching, virtual backgrounds, "
            "and audience engagement tools.",
            "resources": [
                {"name": "Workshop Prerequisites", "url": "https://example.com/prerequisites.pdf", "type": "pdf"},
            ],
            "speakers": [
                {
                    "name": "Morgan Chen",
                    "title": "Lead Technical Director",
                    "company": "ShowPro Productions",
                    "bio": "Award-winning TD known for flawless live-switched broadcasts.",
                },
            ],
            "sessions": [
                {
                    "title": "Multi-Camera Switching Basics",
                    "start_at": _utc("2025-11-02T13:00:00Z"),
                    "end_at": _utc("2025-11-02T14:00:00Z"),
                    "description": "Learn the fundamentals of live multi-camera production.",
                    "speaker_name": "Morgan Chen",
                },
            ],
        },
    ],
    "brightlights": [
        {
            "title": "Bright Lights Music Festival - Live Stream",
            "slug": "music-festival-livestream",
            "status": "published",
            "start_at": _utc("2025-08-20T18:00:00Z"),
            "end_at": _utc("2025-08-20T23:00:00Z"),
            "timezone": "America/Los_Angeles",
            "venue": "Griffith Park Amphitheatre, Los Angeles, CA",
            "description": "Watch the Bright Lights Music Festival live from LA, featuring performances "
            "from top indie artists.",
            "banner_url": "https://placehold.co/1200x400?text=Bright+Lights+Music+Festival",
            "stream": {
                "provider": "vimeo",
                "embed_url": "https://player.vimeo.com/video/123456789",
                "is_live": True,
            },
            "resources": [
                {"name": "Artist Lineup", "url": "https://example.com/lineup.pdf", "type": "pdf"},
                {"name": "Festival Map", "url": "https://example.com/map.png", "type": "image"},
            ],
            "speakers": [
                {
                    "name": "Priya Kapoor",
                    "title": "Festival Director",
                    "company": "Bright Lights AV",
                    "headshot_url": "https://placehold.co/150x150?text=PK",
                    "bio": "Curator of immersive festival experiences blending live music and visual art.",
                },
            ],
        },
    ],
}


def get_or_create_tenant(session: Session, data: dict) -> Tenant:
    tenant = get_tenant_by_slug(session, data["slug"])
    if tenant:
        print(f"[OK] Tenant encontrado: {tenant.name} (slug: {tenant.slug})")
        return tenant
    tenant = create_tenant(session, **data)
    print(f"[OK] Tenant criado: {tenant.name} (slug: {tenant.slug})")
    return tenant


def main() -> int:
    create_tables()
    with get_session_context() as session:
        for tenant_data in DEMO_TENANTS:
            tenant = get_or_create_tenant(session, tenant_data)
            for event_data in DEMO_EVENTS.get(tenant.slug, []):
                try:
                    event = create_event(session, tenant.id, EventCreate(**event_data), actor="seed")
                    print(f"  [OK] Evento criado: {event.slug}")
                except EventSlugConflictError:
                    print(f"  [--] Evento já existe: {event_data['slug']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
