"""
JSON export and import of a single profile.

The export is the complete profile (all entries, no filtering) with its
camelCase wire names, pretty-printed with two-space indentation.

Import accepts any profile-shaped JSON object that has an "entries" array.
Its fields overwrite the active profile's fields; the active profile keeps
its own id. Fields missing from the file keep their current values.
"""

import json
from typing import Any, Union

from pydantic import ValidationError

from finanzmanager.models.ledger import Profile


class ImportFormatError(Exception):
    """The import file is not a usable profile export."""
    pass


def profile_to_json(profile: Profile) -> str:
    """Pretty-printed JSON of the full profile."""
    return json.dumps(profile.to_json_dict(), indent=2, ensure_ascii=False)


def parse_import_payload(content: Union[str, bytes]) -> dict[str, Any]:
    """
    Decode an import file.

    Raises:
        ImportFormatError: If the content is not JSON, not an object,
            or has no "entries" array
    """
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ImportFormatError(f"File is not UTF-8 text: {e}")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ImportFormatError(f"File is not valid JSON: {e}")

    if not isinstance(data, dict):
        raise ImportFormatError("Expected a JSON object")
    if not isinstance(data.get("entries"), list):
        raise ImportFormatError('Missing "entries" array')
    return data


def merge_import(profile: Profile, data: dict[str, Any]) -> Profile:
    """
    Apply imported data onto a profile, keeping the profile's id.

    Raises:
        ImportFormatError: If the merged data is not a valid profile
    """
    merged = profile.to_json_dict()
    merged.update(data)
    merged["id"] = profile.id
    try:
        return Profile.model_validate(merged)
    except ValidationError as e:
        raise ImportFormatError(f"Imported data is not a valid profile: {e}")
