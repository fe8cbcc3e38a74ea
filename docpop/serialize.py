##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
JSON encoding and decoding of documents.

Stores persist documents as JSON text and the CLI prints resolved documents
as JSON. Besides the types `json` handles natively this covers:

- `Reference` values, written as `{"$ref": ..., "$id": ...}`
- the `ABSENT` marker, written as `null`
- sets, written as `{"__set__": [...]}`
- datetimes, written as ISO 8601 strings
"""

import json
from datetime import datetime
from typing import Any, Dict

from docpop.documents.reference import ABSENT, Reference


class DocumentEncoder(json.JSONEncoder):
    """
    Encode docpop document values into a json string.
    """

    def default(self, o: Any) -> Any:  # pylint: disable=method-hidden
        if o is ABSENT:
            return None
        if isinstance(o, Reference):
            return o.to_dict()
        if isinstance(o, (set, frozenset)):
            return {"__set__": list(o)}
        if isinstance(o, datetime):
            return o.isoformat()
        return super().default(o)


def _decode_object(obj: Dict) -> Any:
    if Reference.is_reference_dict(obj):
        return Reference.from_dict(obj)
    if set(obj) == {"__set__"}:
        return set(obj["__set__"])
    return obj


def dumps_document(document: Any, **kwargs) -> str:
    """
    Serialize a document (or a list of documents) to a JSON string.

    Args:
        document: The value to serialize.
        **kwargs: Extra keyword arguments passed to `json.dumps` (e.g. `indent`).

    Returns:
        The JSON string.
    """
    return json.dumps(document, cls=DocumentEncoder, **kwargs)


def loads_document(text: str) -> Any:
    """
    Deserialize a JSON string produced by `dumps_document`.

    Args:
        text: The JSON string.

    Returns:
        The decoded value with references and sets restored.
    """
    return json.loads(text, object_hook=_decode_object)
