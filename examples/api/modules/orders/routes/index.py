"""/api/orders -- a default export answers every verb."""


def default(ctx):
    return {"module": "orders", "method": ctx.method}
