"""Schema validation for serialized audit results."""

import json
from pathlib import Path

import jsonschema

SCHEMAS_DIR = Path(__file__).resolve().parent / "schemas"


def _load_schema(name: str) -> dict:
    path = SCHEMAS_DIR / f"{name}.schema.json"
    return json.loads(path.read_text(encoding="utf-8"))


def validate_audit_result(data: dict) -> None:
    """
    Validate a serialized audit result against schema, then check the stats add up.
    Raises jsonschema.ValidationError if invalid.
    """
    schema = _load_schema("audit_result")
    jsonschema.validate(data, schema)

    stats = data["stats"]
    if stats["errors"] + stats["warnings"] + stats["info"] != len(data["issues"]):
        raise jsonschema.ValidationError(
            f"stats {stats} do not add up to {len(data['issues'])} issues"
        )
