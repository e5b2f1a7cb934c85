from __future__ import annotations

from dataclasses import dataclass

from inventory_desk.access.roles import Role

HOME = "/"
SIGN_IN = "/auth"


@dataclass(frozen=True)
class Route:
    path: str
    key: str
    label: str
    protected: bool = True
    required_role: Role | None = None


ROUTES: list[Route] = [
    Route("/", "home", "Home"),
    Route("/products", "products", "Products"),
    Route("/invoices", "invoices", "Invoices"),
    Route("/returns", "returns", "Returns"),
    Route("/food-condition", "food_condition", "Food Condition"),
    Route("/rejected", "rejected", "Rejected Items", required_role=Role.ADMIN),
    Route("/auth", "auth", "Sign in", protected=False),
]

_BY_PATH = {route.path: route for route in ROUTES}


def normalize_path(path: str) -> str:
    clean = (path or "").strip()
    if not clean:
        return HOME
    if not clean.startswith("/"):
        clean = f"/{clean}"
    if len(clean) > 1:
        clean = clean.rstrip("/")
    return clean.lower()


def find_route(path: str) -> Route | None:
    return _BY_PATH.get(normalize_path(path))


def sidebar_routes() -> list[Route]:
    return [route for route in ROUTES if route.protected]
