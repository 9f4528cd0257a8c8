"""Model declarations generated from ``components.schemas``.

* :mod:`~fetchgen.model.model_info` -- schema key to declaration name/path.
* :mod:`~fetchgen.model.type_resolver` -- schema node to type expression.
* :mod:`~fetchgen.model.type_generator` -- one schema to one declaration.
* :mod:`~fetchgen.model.model_generator` -- the pass over all schemas.
"""

from fetchgen.model.model_generator import ModelGenerator
from fetchgen.model.model_info import resolve_model_info
from fetchgen.model.type_resolver import TypeResolver

__all__ = ["ModelGenerator", "TypeResolver", "resolve_model_info"]
