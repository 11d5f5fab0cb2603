from typing import Any  # noqa:F401
from typing import Dict  # noqa:F401


def default_metadata(request):
    # type: (Any) -> Dict[str, Any]
    """
    Extract request metadata applied to the root span of a traced request.

    ``request`` is a Werkzeug/Flask request. The resource is the HTTP method
    followed by the matched URL rule (``GET /users/<int:user_id>``), or by the
    path when no rule matched.
    """
    method = request.method.upper()
    rule = getattr(request, "url_rule", None)
    route = rule.rule if rule is not None else request.path

    user_agent = getattr(request, "user_agent", None)
    if user_agent is not None:
        user_agent = getattr(user_agent, "string", user_agent) or None

    query_string = request.query_string
    if isinstance(query_string, bytes):
        query_string = query_string.decode("latin-1")

    return {
        "http": {
            "method": method,
            "query_string": query_string,
            "url": request.path,
            "user_agent": user_agent,
        },
        "resource": "%s %s" % (method, route),
        "type": "web",
    }
