from __future__ import annotations

API_ENDPOINTS: tuple[tuple[str, str, str], ...] = (
    ("POST", "/auth/login", "User login"),
    ("POST", "/auth/logout", "User logout"),
    ("POST", "/auth/refresh-token", "Refresh access token"),
    ("POST", "/auth/verify-otp", "Verify one-time password"),
    ("GET", "/users", "Get all users"),
    ("GET", "/users/:id", "Get user by ID"),
    ("POST", "/users/register", "Register new user"),
    ("PATCH", "/users/:id", "Update user"),
    ("GET", "/categories", "Get all categories"),
    ("POST", "/categories", "Create new category"),
    ("GET", "/shops", "Get all shops"),
    ("POST", "/shops", "Create new shop"),
    ("GET", "/products", "Get all products"),
    ("POST", "/products", "Create new product"),
    ("GET", "/cart/:id", "Get cart by ID"),
    ("PUT", "/cart/clear/:id", "Remove every item from a cart"),
    ("PATCH", "/cart/items/:id", "Update cart item quantity"),
    ("DELETE", "/cart/items/:id", "Remove cart item"),
)


def render_api_reference(base_url: str) -> str:
    lines = [
        "Connecting to the API",
        f"Base URL: {base_url}",
        "Every request sends 'Content-Type: application/json'.",
        "Authenticated routes expect 'Authorization: Bearer <accessToken>'.",
        "An expired access token is refreshed once through /auth/refresh-token.",
        "",
        "Routes",
    ]
    method_width = max(len(method) for method, _, _ in API_ENDPOINTS)
    path_width = max(len(path) for _, path, _ in API_ENDPOINTS)
    for method, path, description in API_ENDPOINTS:
        lines.append(f"{method.ljust(method_width)}  {path.ljust(path_width)}  {description}")
    return "\n".join(lines)
