"""GET /api/users"""

USERS = [{"id": "1", "name": "Ada"}, {"id": "2", "name": "Grace"}]


def default(ctx):
    return {"data": USERS}
