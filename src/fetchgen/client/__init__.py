"""Client generators.

* :mod:`~fetchgen.client.query_client` -- per-aggregate query client factory.
* :mod:`~fetchgen.client.command_client` -- per-aggregate command clients.
* :mod:`~fetchgen.client.api_client` -- per-tag clients for plain API operations.
"""

from fetchgen.client.api_client import ApiClientGenerator
from fetchgen.client.command_client import CommandClientGenerator
from fetchgen.client.query_client import QueryClientGenerator

__all__ = ["ApiClientGenerator", "CommandClientGenerator", "QueryClientGenerator"]
