"""API -- file-system routed JSON API.

Routes live in ``routes/`` (global) and ``modules/<name>/routes``
(mounted under ``/api/<name>``). ``routes/gateway/[module].py`` is a
module proxy answering ``/gateway/<module>/...`` for every module.

Run:
    cd examples/api && python app.py
"""

from pathlib import Path

from wren import AppConfig, create_app

HERE = Path(__file__).parent

app = create_app(
    AppConfig.from_env(
        routes_dir=HERE / "routes",
        modules_dir=HERE / "modules",
    )
)

if __name__ == "__main__":
    app.run()
