from __future__ import annotations

# Public API of the composition root
from .container import (  # noqa: F401
    build_vault_service,
    get_highlight_service,
    get_vault_service,
    reset_container_for_tests,
)
