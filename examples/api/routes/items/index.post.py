"""POST /items"""

import store

from wren.middleware import validate_body
from wren.validation import max_length, required, string

on_request = validate_body({"title": [required, string, max_length(200)]})


def default(ctx):
    item = store.create(ctx.body["title"])
    ctx.response.status(201)
    return {"data": item.to_dict()}
