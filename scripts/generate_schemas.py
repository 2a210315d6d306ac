"""Generate JSON schemas from Pydantic models and save to schemas/ directory.

Run with the package installed (``pip install -e .``).
"""

import json
from pathlib import Path

from crdiff.kernel.report import Report
from crdiff.kernel.schema import JSONSchemaProps


def _write_schema(schema: dict, path: Path) -> None:
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(schema, f, indent=2, ensure_ascii=False, sort_keys=True)
    print(f"Generated: {path}")


def generate_schemas():
    """Generate JSON schemas for the report and the CRD schema models."""
    schemas_dir = Path(__file__).parent.parent / "schemas"
    schemas_dir.mkdir(exist_ok=True)

    # Report as emitted by `crdiff diff -o json`
    _write_schema(Report.model_json_schema(by_alias=True), schemas_dir / "report.schema.json")

    # Validation schema node accepted inside CRD versions
    _write_schema(JSONSchemaProps.model_json_schema(by_alias=True), schemas_dir / "crd_validation.schema.json")

    print("\nSchema generation complete!")


if __name__ == "__main__":
    generate_schemas()
