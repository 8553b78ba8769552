"""Write the EdgeLab OpenAPI document, annotated with the tier table."""

from __future__ import annotations

import json
import os
from pathlib import Path

from fastapi.encoders import jsonable_encoder

from edgelab.api.server import app
from edgelab.tiers.gate import DEFAULT_TIERS


def build_schema(public_base: str | None = None) -> dict:
    schema = app.openapi()
    if public_base:
        schema["servers"] = [{"url": public_base.rstrip("/")}]
    schema["info"]["x-edgelab-tiers"] = {
        name: {
            "max_single_bets": tier.max_single_bets,
            "max_accumulators": tier.max_accumulators,
            "smart_accumulators": tier.max_smart_accumulators if tier.smart_accumulators_visible else 0,
        }
        for name, tier in DEFAULT_TIERS.items()
    }
    return jsonable_encoder(schema)


def main() -> None:
    output = Path(os.getenv("EDGELAB_OPENAPI_PATH", "api_spec/openapi.json"))
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(build_schema(os.getenv("EDGELAB_PUBLIC_BASE_URL")), indent=2))
    print(f"OpenAPI schema written to {output}")


if __name__ == "__main__":  # pragma: no cover
    main()
