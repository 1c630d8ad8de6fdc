# storefront/domain/navigation.py
from enum import Enum

from storefront.data.kv_store import KeyValueStore

TOKEN_KEY = "token"
ROLE_KEY = "role"

_AUTH_PREFIXES = ("/login", "/register", "/forgot-password")


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"
    OWNER = "owner"


class RouteKind(str, Enum):
    AUTH = "auth"
    PRODUCT_DETAIL = "product_detail"
    OTHER = "other"


class ViewVariant(str, Enum):
    NONE = "none"
    GUEST_NAV = "guest_nav"
    PRODUCT_DETAIL_NAV = "product_detail_nav"
    MAIN_NAV = "main_nav"


def route_kind_for_path(path: str) -> RouteKind:
    if path.startswith(_AUTH_PREFIXES):
        return RouteKind.AUTH
    if "/detailproduct/" in path:
        return RouteKind.PRODUCT_DETAIL
    return RouteKind.OTHER


def select_view(role: Role | None, route_kind: RouteKind) -> ViewVariant:
    if route_kind == RouteKind.AUTH:
        return ViewVariant.NONE
    if role is None:
        return ViewVariant.GUEST_NAV
    if route_kind == RouteKind.PRODUCT_DETAIL:
        return ViewVariant.PRODUCT_DETAIL_NAV
    #admin, owner i user dziela ten sam navbar
    return ViewVariant.MAIN_NAV


def role_from_store(kv: KeyValueStore) -> Role | None:
    token = kv.get(TOKEN_KEY)
    raw_role = kv.get(ROLE_KEY)
    if not token or not raw_role:
        return None
    try:
        return Role(raw_role)
    except ValueError:
        return None
