"""
Buntage installation service — package re-exports.

Each symbol lives in its single-responsibility module inside the
appropriate onion layer (data → resolver → detection → execution →
orchestration)::

    from ultrabunt.core.services.buntage_install import install_buntage
"""

# ── L0: Data ──
from ultrabunt.core.services.buntage_install.data.catalog import (  # noqa: F401
    UnknownBuntageError,
    build_catalog,
    buntages_in_category,
    get_buntage,
    get_catalog,
    get_category,
    list_categories,
)

# ── L2: Resolver ──
from ultrabunt.core.services.buntage_install.resolver.method_selection import (  # noqa: F401
    build_install_steps,
    build_remove_steps,
    build_update_steps,
)

# ── L3: Detection ──
from ultrabunt.core.services.buntage_install.detection.installed_cache import (  # noqa: F401
    InstalledCache,
    get_cache,
    get_status,
    is_installed,
)
from ultrabunt.core.services.buntage_install.detection.package_info import (  # noqa: F401
    get_package_details,
)

# ── L4: Execution ──
from ultrabunt.core.services.buntage_install.execution.buntage_ops import (  # noqa: F401
    install_buntage,
    reinstall_buntage,
    remove_buntage,
    update_buntage,
)

# ── L5: Orchestration ──
from ultrabunt.core.services.buntage_install.orchestration.bulk import (  # noqa: F401
    bulk_install_category,
    bulk_remove_category,
    cleanup,
    export_package_list,
    install_selected,
    remove_selected,
    update_all,
)
