# forbidden403/provenance.py

"""Turn ambient process state into the explicit list of files that served a request."""

import inspect
import logging
import os
import sys
from typing import Any, List

logger = logging.getLogger(__name__)


def entry_script() -> str:
    """Return the path of the outermost entry point (the running __main__ module)."""
    main = sys.modules.get("__main__")
    path = getattr(main, "__file__", None)
    if not path and sys.argv and sys.argv[0]:
        path = sys.argv[0]
    return os.path.abspath(path) if path else "unknown"


def handler_source(handler: Any) -> str:
    target = inspect.unwrap(handler) if callable(handler) else handler
    # functools.partial and bound methods
    target = getattr(target, "func", target)
    target = getattr(target, "__func__", target)
    try:
        return inspect.getsourcefile(target) or ""
    except TypeError:
        return ""


def loaded_files_for(handler: Any = None) -> List[str]:
    """Ordered files involved in serving a request, earliest loaded first."""
    files = [entry_script()]
    if handler is not None:
        source = handler_source(handler)
        if source and os.path.abspath(source) != files[0]:
            files.append(os.path.abspath(source))
    return files
