"""
L4 Execution — File downloads.

Direct URLs and GitHub "latest release" assets, fetched with urllib.
"""

from __future__ import annotations

import json
import logging
import re
import urllib.request
from pathlib import Path
from typing import Any

from ultrabunt import __version__

logger = logging.getLogger(__name__)

_USER_AGENT = f"ultrabunt/{__version__}"


def resolve_github_release_url(
    repo: str,
    *,
    asset_pattern: str = "",
    timeout: int = 15,
) -> dict[str, Any]:
    """Find the download URL of the latest release asset of *repo*.

    Args:
        repo: GitHub repo in ``owner/repo`` format.
        asset_pattern: Regex searched in asset file names.
        timeout: HTTP request timeout in seconds.

    Returns:
        ``{"ok": True, "url": "...", "version": "...", "asset_name": "..."}``
        or error dict.
    """
    api_url = f"https://api.github.com/repos/{repo}/releases/latest"
    try:
        req = urllib.request.Request(
            api_url,
            headers={
                "Accept": "application/vnd.github.v3+json",
                "User-Agent": _USER_AGENT,
            },
        )
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            data = json.loads(resp.read())
    except (OSError, ValueError) as exc:
        return {"ok": False, "error": f"Failed to fetch release: {exc}"}

    release_tag = data.get("tag_name", "")
    assets = data.get("assets", [])
    if not assets:
        return {"ok": False, "error": f"No assets found for {repo} {release_tag}"}

    pattern = re.compile(asset_pattern) if asset_pattern else None
    for asset in assets:
        name = asset.get("name", "")
        if pattern is None or pattern.search(name):
            return {
                "ok": True,
                "url": asset["browser_download_url"],
                "version": release_tag.lstrip("v"),
                "asset_name": name,
            }

    return {
        "ok": False,
        "error": f"No asset matching '{asset_pattern}' in {repo} {release_tag}",
        "available_assets": [a.get("name", "") for a in assets[:10]],
    }


def download_file(url: str, dest: Path, *, timeout: int = 120) -> dict[str, Any]:
    """Download *url* to *dest*."""
    logger.info("Downloading %s → %s", url, dest)
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        req = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT})
        with urllib.request.urlopen(req, timeout=timeout) as resp, dest.open("wb") as f:
            size = 0
            for chunk in iter(lambda: resp.read(65536), b""):
                f.write(chunk)
                size += len(chunk)
    except OSError as exc:
        return {"ok": False, "error": f"Download failed: {exc}"}
    logger.debug("Downloaded %d bytes", size)
    return {"ok": True, "path": str(dest), "size_bytes": size}


def fetch_download(spec: dict) -> dict[str, Any]:
    """Fetch a recipe step's ``download`` entry.

    ``spec`` holds ``dest`` and either ``url`` or ``github`` + ``asset``.
    """
    from ultrabunt.core.context import is_dry_run

    dest = Path(spec["dest"])
    url = spec.get("url", "")

    if spec.get("github"):
        if is_dry_run():
            logger.info("[dry-run] download latest %s release → %s", spec["github"], dest)
            return {"ok": True, "path": str(dest)}
        resolved = resolve_github_release_url(spec["github"], asset_pattern=spec.get("asset", ""))
        if not resolved["ok"]:
            return resolved
        url = resolved["url"]

    if is_dry_run():
        logger.info("[dry-run] download %s → %s", url, dest)
        return {"ok": True, "path": str(dest)}
    return download_file(url, dest)
