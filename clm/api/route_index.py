from fastapi import FastAPI

HTTP_METHODS = ("get", "post", "put", "patch", "delete")


def _summary(operation: dict) -> str:
    description = (operation.get("description") or "").strip()
    if description:
        return description.splitlines()[0]
    return operation.get("summary", "")


def describe_routes(app: FastAPI) -> dict[str, str]:
    """Map "METHOD /path" to a one-line summary for every documented route.

    Built from the OpenAPI document so it does not depend on how the
    router stores included routes.
    """
    endpoints = {}
    for path, operations in app.openapi().get("paths", {}).items():
        for method in HTTP_METHODS:
            if method in operations:
                endpoints[f"{method.upper()} {path}"] = _summary(operations[method])
    return endpoints
