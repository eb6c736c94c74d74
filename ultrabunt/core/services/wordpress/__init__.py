"""
WordPress service — LEMP/LAMP bootstrap, SSL, hardening, site management.

    from ultrabunt.core.services.wordpress import quick_setup
"""

from ultrabunt.core.services.wordpress.bootstrap import (  # noqa: F401
    WEB_SERVERS,
    check_prerequisites,
    custom_setup,
    install_prerequisites,
    quick_setup,
)
from ultrabunt.core.services.wordpress.hardening import (  # noqa: F401
    HARDENING_OPTIONS,
    apply_hardening,
    setup_ssl,
)
from ultrabunt.core.services.wordpress.sites import (  # noqa: F401
    check_site,
    delete_site,
    disable_site,
    enable_site,
    list_sites,
    site_detail,
    wordpress_status,
)
