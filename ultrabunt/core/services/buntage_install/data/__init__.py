"""
L0 Data — ``__init__.py`` re-exports the catalog tables and lookups.
"""

from ultrabunt.core.services.buntage_install.data.buntage_table import (  # noqa: F401
    BUNTAGE_TABLE,
)
from ultrabunt.core.services.buntage_install.data.catalog import (  # noqa: F401
    UnknownBuntageError,
    build_catalog,
    buntages_in_category,
    check_catalog,
    get_buntage,
    get_catalog,
    get_category,
    list_categories,
    reset_catalog,
)
from ultrabunt.core.services.buntage_install.data.categories import (  # noqa: F401
    CATEGORIES,
)
from ultrabunt.core.services.buntage_install.data.custom_recipes import (  # noqa: F401
    CUSTOM_RECIPES,
)
