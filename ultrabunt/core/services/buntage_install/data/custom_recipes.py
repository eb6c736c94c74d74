"""
L0 Data — Recipes for custom, script and deb buntages.

Anything the plain package managers can't install by name lives here:
third-party APT repositories, vendor setup scripts, ``.deb`` downloads,
GitHub release binaries and npm globals.

Each recipe has:
    check     how to tell it is installed — one of
              {"apt": pkg} | {"binary": name} | {"path": path}
    install   ordered steps
    remove    ordered steps
    purge     extra steps run after ``remove`` when data is purged

Each step:
    label       shown in progress output
    cmd         argv list (``bash -c`` for pipelines)
    needs_sudo  run through sudo
    allow_fail  failure is logged, not fatal (cleanup steps)
    download    optional {"url" | "github" + "asset", "dest"} fetched
                before ``cmd`` runs

Commands may use ``{node_lts}`` and ``{php}``; they are filled from
settings when the steps are resolved.
"""

from __future__ import annotations

_CODENAME = '$(. /etc/os-release && echo "${UBUNTU_CODENAME:-$VERSION_CODENAME}")'

_APT_UPDATE = {
    "label": "Update package lists",
    "cmd": ["apt-get", "update", "-qq"],
    "needs_sudo": True,
}


def _apt_install(*packages: str) -> dict:
    return {
        "label": f"Install {' '.join(packages)}",
        "cmd": ["apt-get", "install", "-y", "--no-install-recommends", *packages],
        "needs_sudo": True,
    }


def _apt_purge(*packages: str) -> dict:
    return {
        "label": f"Remove {' '.join(packages)}",
        "cmd": ["apt-get", "remove", "--purge", "-y", *packages],
        "needs_sudo": True,
    }


def _rm(label: str, *paths: str) -> dict:
    return {
        "label": label,
        "cmd": ["rm", "-rf", *paths],
        "needs_sudo": True,
        "allow_fail": True,
    }


CUSTOM_RECIPES: dict[str, dict] = {

    # ── Third-party APT repositories ────────────────────────────

    "docker": {
        "check": {"apt": "docker-ce"},
        "install": [
            {
                "label": "Remove conflicting docker packages",
                "cmd": ["apt-get", "remove", "-y", "docker", "docker-engine",
                        "docker.io", "containerd", "runc"],
                "needs_sudo": True,
                "allow_fail": True,
            },
            {
                "label": "Create keyring directory",
                "cmd": ["install", "-m", "0755", "-d", "/etc/apt/keyrings"],
                "needs_sudo": True,
            },
            {
                "label": "Add Docker signing key",
                "cmd": ["bash", "-c",
                        "curl -fsSL https://download.docker.com/linux/ubuntu/gpg"
                        " | gpg --dearmor --yes -o /etc/apt/keyrings/docker.gpg"
                        " && chmod a+r /etc/apt/keyrings/docker.gpg"],
                "needs_sudo": True,
            },
            {
                "label": "Add Docker repository",
                "cmd": ["bash", "-c",
                        'echo "deb [arch=$(dpkg --print-architecture)'
                        " signed-by=/etc/apt/keyrings/docker.gpg]"
                        f' https://download.docker.com/linux/ubuntu {_CODENAME} stable"'
                        " > /etc/apt/sources.list.d/docker.list"],
                "needs_sudo": True,
            },
            _APT_UPDATE,
            _apt_install("docker-ce", "docker-ce-cli", "containerd.io",
                         "docker-buildx-plugin", "docker-compose-plugin"),
            {
                "label": "Add user to docker group",
                "cmd": ["bash", "-c", 'usermod -aG docker "${SUDO_USER:-$USER}"'],
                "needs_sudo": True,
                "allow_fail": True,
            },
        ],
        "remove": [
            _apt_purge("docker-ce", "docker-ce-cli", "containerd.io",
                       "docker-buildx-plugin", "docker-compose-plugin"),
            _rm("Remove Docker repository",
                "/etc/apt/sources.list.d/docker.list", "/etc/apt/keyrings/docker.gpg"),
        ],
        "purge": [
            _rm("Remove Docker data", "/var/lib/docker", "/var/lib/containerd"),
        ],
    },

    "vscode": {
        "check": {"apt": "code"},
        "install": [
            {
                "label": "Add Microsoft signing key",
                "cmd": ["bash", "-c",
                        "wget -qO- https://packages.microsoft.com/keys/microsoft.asc"
                        " | gpg --dearmor --yes -o /usr/share/keyrings/packages.microsoft.gpg"],
                "needs_sudo": True,
            },
            {
                "label": "Add VS Code repository",
                "cmd": ["bash", "-c",
                        'echo "deb [arch=amd64,arm64,armhf'
                        " signed-by=/usr/share/keyrings/packages.microsoft.gpg]"
                        ' https://packages.microsoft.com/repos/code stable main"'
                        " > /etc/apt/sources.list.d/vscode.list"],
                "needs_sudo": True,
            },
            _APT_UPDATE,
            _apt_install("code"),
        ],
        "remove": [
            _apt_purge("code"),
            _rm("Remove VS Code repository",
                "/etc/apt/sources.list.d/vscode.list",
                "/usr/share/keyrings/packages.microsoft.gpg"),
        ],
    },

    "brave": {
        "check": {"apt": "brave-browser"},
        "install": [
            {
                "label": "Add Brave signing key",
                "cmd": ["curl", "-fsSLo",
                        "/usr/share/keyrings/brave-browser-archive-keyring.gpg",
                        "https://brave-browser-apt-release.s3.brave.com/"
                        "brave-browser-archive-keyring.gpg"],
                "needs_sudo": True,
            },
            {
                "label": "Add Brave repository",
                "cmd": ["bash", "-c",
                        'echo "deb [signed-by=/usr/share/keyrings/brave-browser-archive-keyring.gpg]'
                        ' https://brave-browser-apt-release.s3.brave.com/ stable main"'
                        " > /etc/apt/sources.list.d/brave-browser-release.list"],
                "needs_sudo": True,
            },
            _APT_UPDATE,
            _apt_install("brave-browser"),
        ],
        "remove": [
            _apt_purge("brave-browser"),
            _rm("Remove Brave repository",
                "/etc/apt/sources.list.d/brave-browser-release.list",
                "/usr/share/keyrings/brave-browser-archive-keyring.gpg"),
        ],
    },

    "sublime-text": {
        "check": {"apt": "sublime-text"},
        "install": [
            {
                "label": "Add Sublime HQ signing key",
                "cmd": ["bash", "-c",
                        "wget -qO- https://download.sublimetext.com/sublimehq-pub.gpg"
                        " | gpg --dearmor --yes -o /usr/share/keyrings/sublimehq-archive.gpg"],
                "needs_sudo": True,
            },
            {
                "label": "Add Sublime Text repository",
                "cmd": ["bash", "-c",
                        'echo "deb [signed-by=/usr/share/keyrings/sublimehq-archive.gpg]'
                        ' https://download.sublimetext.com/ apt/stable/"'
                        " > /etc/apt/sources.list.d/sublime-text.list"],
                "needs_sudo": True,
            },
            _APT_UPDATE,
            _apt_install("sublime-text"),
        ],
        "remove": [
            _apt_purge("sublime-text"),
            _rm("Remove Sublime Text repository",
                "/etc/apt/sources.list.d/sublime-text.list",
                "/usr/share/keyrings/sublimehq-archive.gpg"),
        ],
    },

    "vivaldi": {
        "check": {"apt": "vivaldi-stable"},
        "install": [
            {
                "label": "Add Vivaldi signing key",
                "cmd": ["bash", "-c",
                        "wget -qO- https://repo.vivaldi.com/archive/linux_signing_key.pub"
                        " | gpg --dearmor --yes -o /usr/share/keyrings/vivaldi-browser.gpg"],
                "needs_sudo": True,
            },
            {
                "label": "Add Vivaldi repository",
                "cmd": ["bash", "-c",
                        'echo "deb [signed-by=/usr/share/keyrings/vivaldi-browser.gpg'
                        ' arch=$(dpkg --print-architecture)]'
                        ' https://repo.vivaldi.com/archive/deb/ stable main"'
                        " > /etc/apt/sources.list.d/vivaldi-archive.list"],
                "needs_sudo": True,
            },
            _APT_UPDATE,
            _apt_install("vivaldi-stable"),
        ],
        "remove": [
            _apt_purge("vivaldi-stable"),
            _rm("Remove Vivaldi repository",
                "/etc/apt/sources.list.d/vivaldi-archive.list",
                "/usr/share/keyrings/vivaldi-browser.gpg"),
        ],
    },

    # ── Vendor setup scripts ────────────────────────────────────

    "nodejs": {
        "check": {"binary": "node"},
        "install": [
            {
                "label": "Add NodeSource {node_lts}.x repository",
                "cmd": ["bash", "-c",
                        "curl -fsSL https://deb.nodesource.com/setup_{node_lts}.x | bash -"],
                "needs_sudo": True,
            },
            _APT_UPDATE,
            _apt_install("nodejs"),
        ],
        "remove": [
            _apt_purge("nodejs"),
            _rm("Remove NodeSource repository",
                "/etc/apt/sources.list.d/nodesource.list",
                "/etc/apt/sources.list.d/nodesource.sources"),
        ],
    },

    "ollama": {
        "check": {"binary": "ollama"},
        "install": [
            {
                "label": "Run Ollama installer",
                "cmd": ["bash", "-c", "curl -fsSL https://ollama.ai/install.sh | sh"],
                "needs_sudo": False,
            },
        ],
        "remove": [
            {
                "label": "Stop ollama service",
                "cmd": ["systemctl", "stop", "ollama"],
                "needs_sudo": True,
                "allow_fail": True,
            },
            {
                "label": "Disable ollama service",
                "cmd": ["systemctl", "disable", "ollama"],
                "needs_sudo": True,
                "allow_fail": True,
            },
            _rm("Remove Ollama files",
                "/usr/local/bin/ollama", "/usr/share/ollama",
                "/etc/systemd/system/ollama.service"),
            {
                "label": "Reload systemd",
                "cmd": ["systemctl", "daemon-reload"],
                "needs_sudo": True,
                "allow_fail": True,
            },
        ],
    },

    "rustup": {
        "check": {"binary": "rustup"},
        "install": [
            {
                "label": "Run rustup installer",
                "cmd": ["bash", "-c",
                        "curl --proto '=https' --tlsv1.2 -sSf https://sh.rustup.rs | sh -s -- -y"],
                "needs_sudo": False,
            },
        ],
        "remove": [
            {
                "label": "Uninstall Rust toolchains",
                "cmd": ["bash", "-c", '"$HOME/.cargo/bin/rustup" self uninstall -y'],
                "needs_sudo": False,
            },
        ],
    },

    "tailscale": {
        "check": {"binary": "tailscale"},
        "install": [
            {
                "label": "Run Tailscale installer",
                "cmd": ["bash", "-c", "curl -fsSL https://tailscale.com/install.sh | sh"],
                "needs_sudo": False,
            },
        ],
        "remove": [
            _apt_purge("tailscale"),
            _rm("Remove Tailscale repository",
                "/etc/apt/sources.list.d/tailscale.list"),
        ],
        "purge": [
            _rm("Remove Tailscale state", "/var/lib/tailscale"),
        ],
    },

    # ── .deb downloads ──────────────────────────────────────────

    "warp-terminal": {
        "check": {"apt": "warp-terminal"},
        "install": [
            {
                "label": "Install Warp package",
                "download": {
                    "url": "https://app.warp.dev/download?package=deb",
                    "dest": "/tmp/warp-terminal.deb",
                },
                "cmd": ["bash", "-c",
                        "dpkg -i /tmp/warp-terminal.deb || apt-get install -f -y"],
                "needs_sudo": True,
            },
            _rm("Remove downloaded package", "/tmp/warp-terminal.deb"),
        ],
        "remove": [
            _apt_purge("warp-terminal"),
        ],
    },

    "google-chrome": {
        "check": {"apt": "google-chrome-stable"},
        "install": [
            {
                "label": "Install Chrome package",
                "download": {
                    "url": "https://dl.google.com/linux/direct/google-chrome-stable_current_amd64.deb",
                    "dest": "/tmp/google-chrome.deb",
                },
                "cmd": ["bash", "-c",
                        "dpkg -i /tmp/google-chrome.deb || apt-get install -f -y"],
                "needs_sudo": True,
            },
            _rm("Remove downloaded package", "/tmp/google-chrome.deb"),
        ],
        "remove": [
            _apt_purge("google-chrome-stable"),
            _rm("Remove Chrome repository",
                "/etc/apt/sources.list.d/google-chrome.list"),
        ],
    },

    # ── Release binaries ────────────────────────────────────────

    "gollama": {
        "check": {"binary": "gollama"},
        "install": [
            {
                "label": "Install gollama binary",
                "download": {
                    "github": "sammcj/gollama",
                    "asset": r"linux.*amd64",
                    "dest": "/tmp/gollama",
                },
                "cmd": ["install", "-m", "0755", "/tmp/gollama", "/usr/local/bin/gollama"],
                "needs_sudo": True,
            },
            _rm("Remove downloaded binary", "/tmp/gollama"),
        ],
        "remove": [
            _rm("Remove gollama binary", "/usr/local/bin/gollama"),
        ],
    },

    "wp-cli": {
        "check": {"binary": "wp"},
        "install": [
            {
                "label": "Install wp-cli",
                "download": {
                    "url": "https://raw.githubusercontent.com/wp-cli/builds/gh-pages/phar/wp-cli.phar",
                    "dest": "/tmp/wp-cli.phar",
                },
                "cmd": ["install", "-m", "0755", "/tmp/wp-cli.phar", "/usr/local/bin/wp"],
                "needs_sudo": True,
            },
            _rm("Remove downloaded phar", "/tmp/wp-cli.phar"),
        ],
        "remove": [
            _rm("Remove wp-cli", "/usr/local/bin/wp"),
        ],
    },

    # ── npm globals ─────────────────────────────────────────────

    "n8n": {
        "check": {"binary": "n8n"},
        "install": [
            {
                "label": "Install n8n",
                "cmd": ["npm", "install", "-g", "n8n"],
                "needs_sudo": True,
            },
        ],
        "remove": [
            {
                "label": "Uninstall n8n",
                "cmd": ["npm", "uninstall", "-g", "n8n"],
                "needs_sudo": True,
            },
        ],
        "purge": [
            {
                "label": "Remove n8n data",
                "cmd": ["bash", "-c", 'rm -rf "$HOME/.n8n"'],
                "needs_sudo": False,
                "allow_fail": True,
            },
        ],
    },
}
