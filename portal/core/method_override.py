from urllib.parse import parse_qs

OVERRIDABLE = {"PUT", "PATCH", "DELETE"}


class MethodOverrideMiddleware:
    """
    HTML forms can only POST; `POST /x?_method=DELETE` is dispatched as `DELETE /x`.
    """

    def __init__(self, app, param: str = "_method"):
        self.app = app
        self.param = param

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http" and scope["method"] == "POST":
            query = parse_qs(scope.get("query_string", b"").decode("latin-1"))
            override = (query.get(self.param) or [""])[0].upper()
            if override in OVERRIDABLE:
                scope = dict(scope, method=override)
        await self.app(scope, receive, send)
