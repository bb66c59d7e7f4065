#!/usr/bin/env python3
"""Check stored font families for duplicate slugs and unreadable settings.

The REST API checks slug uniqueness with a query before inserting, so two
concurrent creates can still store the same slug twice. This script scans
the SQLite content store and reports such duplicates, along with font
families whose settings content is not a JSON object or lacks a required
value, and font faces whose parent family no longer exists.
"""

import argparse
import json
import sqlite3
from collections import defaultdict
from pathlib import Path
from typing import Any


FONT_FAMILY_POST_TYPE = "wp_font_family"
FONT_FACE_POST_TYPE = "wp_font_face"


def validate_family(row: dict[str, Any]) -> list[str]:
    errors: list[str] = []
    if not row["post_title"]:
        errors.append("name (post_title) is empty")
    if not row["post_name"]:
        errors.append("slug (post_name) is empty")

    try:
        settings = json.loads(row["post_content"]) if row["post_content"] else {}
    except json.JSONDecodeError as exc:
        errors.append(f"settings content is not valid JSON ({exc.msg})")
        return errors

    if not isinstance(settings, dict):
        errors.append("settings content must be a JSON object")
        return errors
    if not isinstance(settings.get("fontFamily"), str) or not settings["fontFamily"]:
        errors.append("fontFamily must be a non-empty string")
    if "preview" in settings and not isinstance(settings["preview"], str):
        errors.append("preview must be a string")
    return errors


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--storage-path", default="./data/font_library")
    args = parser.parse_args()

    db_path = Path(args.storage_path) / "posts.db"
    if not db_path.exists():
        print(f"No content store found at {db_path}")
        return 1

    with sqlite3.connect(db_path) as conn:
        conn.row_factory = sqlite3.Row
        families = [
            dict(row) for row in conn.execute(
                "SELECT id, post_title, post_name, post_content FROM posts "
                "WHERE post_type = ? ORDER BY id",
                (FONT_FAMILY_POST_TYPE,),
            ).fetchall()
        ]
        faces = [
            dict(row) for row in conn.execute(
                "SELECT id, post_parent FROM posts WHERE post_type = ? ORDER BY id",
                (FONT_FACE_POST_TYPE,),
            ).fetchall()
        ]

    issues: list[str] = []
    ids_by_slug: dict[str, list[int]] = defaultdict(list)

    for family in families:
        ids_by_slug[family["post_name"]].append(family["id"])
        errors = validate_family(family)
        if errors:
            issues.append(f"Font family {family['id']}: " + "; ".join(errors))

    for slug, ids in sorted(ids_by_slug.items()):
        if slug and len(ids) > 1:
            issues.append(f"Duplicate slug '{slug}' used by font families {', '.join(map(str, ids))}")

    family_ids = {family["id"] for family in families}
    for face in faces:
        if face["post_parent"] not in family_ids:
            issues.append(f"Font face {face['id']} references missing font family {face['post_parent']}")

    if issues:
        print("Font family check failed:")
        for issue in issues:
            print(f"- {issue}")
        return 1

    print(f"Font family check passed for {len(families)} font families and {len(faces)} font faces")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
