"""GET /items"""

import store


def default(ctx):
    return {"data": [item.to_dict() for item in store.all_items()]}
