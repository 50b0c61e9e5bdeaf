from urllib.parse import parse_qs, urlsplit

import pytest

from showpro.model.tenant import Tenant
from showpro.services.access_gate import (
    AuthState,
    GateOutcome,
    RouteKind,
    TenantState,
    auth_state_for,
    build_return_path,
    decide_access,
    safe_return_path,
    tenant_state_for,
)
from showpro.services.tenant_resolver import NotFound, Resolved


def test_tenant_state_for():
    assert tenant_state_for(None) is TenantState.LOADING
    assert tenant_state_for(NotFound("ghost")) is TenantState.TENANT_NOT_FOUND
    assert tenant_state_for(Resolved(Tenant(id=1, name="Acme", slug="acme"))) is TenantState.AUTHORIZED


def test_auth_state_for():
    assert auth_state_for("admin") is AuthState.AUTHENTICATED
    assert auth_state_for(None) is AuthState.ANONYMOUS
    assert auth_state_for("") is AuthState.ANONYMOUS


@pytest.mark.parametrize("route_kind", list(RouteKind))
@pytest.mark.parametrize("auth_state", list(AuthState))
def test_loading_waits(route_kind, auth_state):
    assert decide_access(TenantState.LOADING, auth_state, route_kind).outcome is GateOutcome.WAIT


@pytest.mark.parametrize("route_kind", list(RouteKind))
@pytest.mark.parametrize("auth_state", list(AuthState))
def test_missing_tenant_blocks_every_route(route_kind, auth_state):
    decision = decide_access(TenantState.TENANT_NOT_FOUND, auth_state, route_kind)
    assert decision.outcome is GateOutcome.TENANT_NOT_FOUND
    assert decision.redirect_to is None


def test_public_route_allows_anonymous():
    decision = decide_access(TenantState.AUTHORIZED, AuthState.ANONYMOUS, RouteKind.PUBLIC)
    assert decision.outcome is GateOutcome.ALLOW


def test_management_route_allows_authenticated():
    decision = decide_access(TenantState.AUTHORIZED, AuthState.AUTHENTICATED, RouteKind.MANAGEMENT)
    assert decision.outcome is GateOutcome.ALLOW


def test_management_route_redirects_anonymous_preserving_location():
    decision = decide_access(
        TenantState.AUTHORIZED,
        AuthState.ANONYMOUS,
        RouteKind.MANAGEMENT,
        path="/t/acme/events",
        query="status=draft",
        fragment="top",
    )
    assert decision.outcome is GateOutcome.LOGIN_REDIRECT

    redirect = urlsplit(decision.redirect_to)
    assert redirect.path == "/login"
    assert parse_qs(redirect.query)["return_to"] == ["/t/acme/events?status=draft#top"]


def test_build_return_path():
    assert build_return_path("/events") == "/events"
    assert build_return_path("", "a=1") == "/?a=1"
    assert build_return_path("/events", "a=1", "x") == "/events?a=1#x"


@pytest.mark.parametrize(
    "candidate, expected",
    [
        ("/t/acme/events?status=draft#top", "/t/acme/events?status=draft#top"),
        ("/", "/"),
        ("https://evil.example.com/", "/"),
        ("//evil.example.com/path", "/"),
        ("/\\evil.example.com", "/"),
        ("events", "/"),
        ("/events\r\nSet-Cookie: x=1", "/"),
        ("", "/"),
        (None, "/"),
    ],
)
def test_safe_return_path(candidate, expected):
    assert safe_return_path(candidate) == expected
