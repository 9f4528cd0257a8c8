"""OpenAPI document access -- load documents, follow ``$ref`` pointers, walk operations.

Sub-modules:

* :mod:`~fetchgen.parser.loader` -- I/O layer (URL, file, stdin) plus format
  detection and OpenAPI version validation.
* :mod:`~fetchgen.parser.components` -- JSON Pointer lookup of component
  references, never expanding a target it was not asked for.
* :mod:`~fetchgen.parser.operations` -- Operations, request bodies,
  responses and path parameters.
"""

from fetchgen.parser.loader import load_document, validate_openapi_version

__all__ = ["load_document", "validate_openapi_version"]
