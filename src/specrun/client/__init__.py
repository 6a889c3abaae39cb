"""HTTP execution for built requests.

- :class:`Executor` -- context-managed :class:`httpx.Client` wrapper that
  maps transport failures to :class:`~specrun.exceptions.ConnectionError_`.
- :func:`execute` -- send, render the response, and return an exit code.
- :func:`format_api_response` -- response rendering via :mod:`specrun.output`.
"""

from specrun.client.executor import Executor, execute
from specrun.client.response import extract_response_data, format_api_response

__all__ = ["Executor", "execute", "extract_response_data", "format_api_response"]
