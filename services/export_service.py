import csv
import io
import json
import os

from config import get_settings
from generics import new_run_id


def flatten_record(record, prefix: str = "") -> dict:
    if not isinstance(record, dict):
        return {prefix or "value": record}
    flat: dict = {}
    for key, value in record.items():
        column = f"{prefix} {key}".strip() if prefix else str(key)
        if isinstance(value, dict):
            flat.update(flatten_record(value, column))
        elif isinstance(value, list):
            flat[column] = json.dumps(value, ensure_ascii=False)
        else:
            flat[column] = value
    return flat


def _collect_fieldnames(rows: list[dict]) -> list[str]:
    fieldnames: list[str] = []
    seen: set[str] = set()
    for row in rows:
        for key in row:
            if key not in seen:
                seen.add(key)
                fieldnames.append(key)
    return fieldnames


def records_to_csv(records: list) -> str:
    rows = [flatten_record(record) for record in records]
    fieldnames = _collect_fieldnames(rows)
    csv_io = io.StringIO()
    writer = csv.DictWriter(csv_io, fieldnames=fieldnames, lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow({key: ("" if row.get(key) is None else row.get(key)) for key in fieldnames})
    return csv_io.getvalue()


def records_to_json(records: list) -> str:
    return json.dumps(records, ensure_ascii=False, indent=2)


def _export_artifact_dir() -> str:
    base_dir = get_settings().export_artifact_dir
    os.makedirs(base_dir, exist_ok=True)
    return base_dir


def write_export_files(records: list, base_name: str | None = None) -> tuple[str, str]:
    if not records:
        raise ValueError("No records to export.")
    safe_base = (base_name or f"structured-{new_run_id()[:12]}").replace(" ", "-")
    artifact_dir = _export_artifact_dir()
    json_path = os.path.join(artifact_dir, f"{safe_base}.json")
    csv_path = os.path.join(artifact_dir, f"{safe_base}.csv")
    with open(json_path, "w", encoding="utf-8") as file:
        file.write(records_to_json(records))
    with open(csv_path, "w", encoding="utf-8", newline="") as file:
        file.write(records_to_csv(records))
    return json_path, csv_path
