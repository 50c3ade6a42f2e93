"""GET /health"""

import time

STARTED = time.time()


def default(ctx):
    return {"status": "ok", "uptime": round(time.time() - STARTED, 3)}
