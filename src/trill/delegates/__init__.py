"""Built-in delegates.

Searched last by every ``DelegateLoader``, so ``"Crud"`` and ``"Map"``
resolve without configuration. Applications shadow them by registering
their own prefix.
"""

from pathlib import Path

TEMPLATES_DIR = Path(__file__).parent / "templates"
