"""
L0 Data — Buntage table.

Every buntage the menu knows about, keyed by catalog name.  Pure data,
no logic.  ``{php}`` in a package name is replaced by the configured
PHP version when the catalog is built.

Fields:
    package       name the package manager knows
    desc          one-line description shown in menus
    method        apt | snap | flatpak | script | custom | deb | pip
    category      key into CATEGORIES
    deps          catalog names that must be installed first
    classic       snap needs --classic confinement
    binary        binary checked when the method has no package cache
"""

from __future__ import annotations

BUNTAGE_TABLE: dict[str, dict] = {

    # ── Core utilities ──────────────────────────────────────────

    "git": {"package": "git", "desc": "Version control system", "method": "apt", "category": "core"},
    "curl": {"package": "curl", "desc": "Command line tool for transferring data", "method": "apt", "category": "core"},
    "wget": {"package": "wget", "desc": "Network downloader", "method": "apt", "category": "core"},
    "build-essential": {"package": "build-essential", "desc": "Compilation tools (gcc, make, etc)", "method": "apt", "category": "core"},
    "tree": {"package": "tree", "desc": "Directory listing in tree format", "method": "apt", "category": "core"},
    "ncdu": {"package": "ncdu", "desc": "NCurses Disk Usage analyzer", "method": "apt", "category": "core"},
    "jq": {"package": "jq", "desc": "JSON processor", "method": "apt", "category": "core"},
    "tmux": {"package": "tmux", "desc": "Terminal multiplexer", "method": "apt", "category": "core"},
    "fzf": {"package": "fzf", "desc": "Fuzzy finder", "method": "apt", "category": "core"},
    "ripgrep": {"package": "ripgrep", "desc": "Fast grep alternative (rg)", "method": "apt", "category": "core"},
    "bat": {"package": "bat", "desc": "Cat clone with syntax highlighting", "method": "apt", "category": "core"},
    "eza": {"package": "eza", "desc": "Modern ls replacement", "method": "apt", "category": "core"},
    "tldr": {"package": "tldr", "desc": "Simplified man pages", "method": "apt", "category": "core"},
    "fd-find": {"package": "fd-find", "desc": "Fast and user-friendly find alternative", "method": "apt", "category": "core"},
    "unzip": {"package": "unzip", "desc": "ZIP archive extractor", "method": "apt", "category": "core"},
    "p7zip-full": {"package": "p7zip-full", "desc": "7z archive support", "method": "apt", "category": "core"},
    "rsync": {"package": "rsync", "desc": "Fast incremental file transfer", "method": "apt", "category": "core"},
    "yt-dlp": {"package": "yt-dlp", "desc": "Modern YouTube/media downloader (youtube-dl fork)", "method": "pip", "category": "core", "binary": "yt-dlp", "deps": ["python3-pip"]},

    # ── Development tools ───────────────────────────────────────

    "neovim": {"package": "neovim", "desc": "Modern Vim-based editor", "method": "apt", "category": "dev"},
    "python3-pip": {"package": "python3-pip", "desc": "Python buntage installer", "method": "apt", "category": "dev"},
    "python3-venv": {"package": "python3-venv", "desc": "Python virtual environments", "method": "apt", "category": "dev"},
    "pipx": {"package": "pipx", "desc": "Install Python applications in isolated environments", "method": "apt", "category": "dev"},
    "nodejs": {"package": "nodejs", "desc": "Node.js JavaScript runtime (NodeSource LTS)", "method": "custom", "category": "dev"},
    "npm": {"package": "npm", "desc": "Node buntage manager", "method": "apt", "category": "dev"},
    "n8n": {"package": "n8n", "desc": "Workflow automation tool (self-hosted Zapier alternative)", "method": "custom", "category": "dev", "deps": ["nodejs"]},
    "postman": {"package": "postman", "desc": "API development platform", "method": "snap", "category": "dev"},
    "insomnia": {"package": "insomnia", "desc": "REST and GraphQL client", "method": "snap", "category": "dev"},
    "meld": {"package": "meld", "desc": "Visual diff and merge tool", "method": "apt", "category": "dev"},
    "shellcheck": {"package": "shellcheck", "desc": "Shell script static analysis", "method": "apt", "category": "dev"},
    "cmake": {"package": "cmake", "desc": "Cross-platform build system", "method": "apt", "category": "dev"},
    "gh": {"package": "gh", "desc": "GitHub command line client", "method": "apt", "category": "dev"},
    "git-lfs": {"package": "git-lfs", "desc": "Git large file storage", "method": "apt", "category": "dev"},
    "dbeaver": {"package": "dbeaver-ce", "desc": "Universal database client", "method": "snap", "category": "dev"},

    # ── Programming languages ───────────────────────────────────

    "default-jdk": {"package": "default-jdk", "desc": "Java Development Kit", "method": "apt", "category": "languages"},
    "golang": {"package": "golang-go", "desc": "Go programming language", "method": "apt", "category": "languages"},
    "rustup": {"package": "rustup", "desc": "Rust toolchain installer", "method": "script", "category": "languages", "binary": "rustup", "deps": ["curl"]},
    "ruby": {"package": "ruby-full", "desc": "Ruby programming language", "method": "apt", "category": "languages"},
    "php-cli": {"package": "php{php}-cli", "desc": "PHP command line interpreter", "method": "apt", "category": "languages"},
    "lua": {"package": "lua5.4", "desc": "Lua scripting language", "method": "apt", "category": "languages"},
    "dotnet": {"package": "dotnet-sdk-8.0", "desc": ".NET SDK", "method": "apt", "category": "languages"},
    "kotlin": {"package": "kotlin", "desc": "Kotlin compiler", "method": "snap", "category": "languages", "classic": True},
    "flutter": {"package": "flutter", "desc": "Flutter SDK", "method": "snap", "category": "languages", "classic": True},

    # ── AI & LLM tools ──────────────────────────────────────────

    "ollama": {"package": "ollama", "desc": "Local AI model runner (Llama, Mistral, etc.)", "method": "script", "category": "ai", "binary": "ollama", "deps": ["curl"]},
    "gollama": {"package": "gollama", "desc": "Advanced LLM model management and interaction tool", "method": "custom", "category": "ai", "binary": "gollama"},
    "jupyter": {"package": "jupyter-notebook", "desc": "Jupyter notebook server", "method": "apt", "category": "ai"},
    "alpaca": {"package": "com.jeffser.Alpaca", "desc": "Ollama desktop client", "method": "flatpak", "category": "ai"},

    # ── Containers ──────────────────────────────────────────────

    "docker": {"package": "docker-ce", "desc": "Docker container platform", "method": "custom", "category": "containers"},
    "docker-compose": {"package": "docker-compose-plugin", "desc": "Docker Compose plugin", "method": "apt", "category": "containers", "deps": ["docker"]},
    "podman": {"package": "podman", "desc": "Daemonless container engine", "method": "apt", "category": "containers"},
    "kubectl": {"package": "kubectl", "desc": "Kubernetes command line tool", "method": "snap", "category": "containers", "classic": True},
    "helm": {"package": "helm", "desc": "Kubernetes package manager", "method": "snap", "category": "containers", "classic": True},
    "minikube": {"package": "minikube", "desc": "Local Kubernetes cluster", "method": "snap", "category": "containers"},
    "lazydocker": {"package": "lazydocker", "desc": "Terminal UI for docker", "method": "snap", "category": "containers"},

    # ── Web stack ───────────────────────────────────────────────

    "nginx": {"package": "nginx", "desc": "High-performance web server", "method": "apt", "category": "web"},
    "apache2": {"package": "apache2", "desc": "Apache HTTP Server", "method": "apt", "category": "web"},
    "php-fpm": {"package": "php{php}-fpm", "desc": "PHP FastCGI Process Manager", "method": "apt", "category": "web"},
    "libapache2-mod-php": {"package": "libapache2-mod-php{php}", "desc": "PHP module for Apache", "method": "apt", "category": "web"},
    "php-mysql": {"package": "php{php}-mysql", "desc": "PHP MySQL extension", "method": "apt", "category": "web"},
    "php-curl": {"package": "php{php}-curl", "desc": "PHP cURL extension", "method": "apt", "category": "web"},
    "php-gd": {"package": "php{php}-gd", "desc": "PHP GD graphics extension", "method": "apt", "category": "web"},
    "php-xml": {"package": "php{php}-xml", "desc": "PHP XML extension", "method": "apt", "category": "web"},
    "php-mbstring": {"package": "php{php}-mbstring", "desc": "PHP multibyte string extension", "method": "apt", "category": "web"},
    "php-zip": {"package": "php{php}-zip", "desc": "PHP ZIP extension", "method": "apt", "category": "web"},
    "certbot": {"package": "certbot", "desc": "Let's Encrypt SSL certificate tool", "method": "apt", "category": "web"},
    "python3-certbot-nginx": {"package": "python3-certbot-nginx", "desc": "Certbot Nginx plugin", "method": "apt", "category": "web", "deps": ["certbot"]},
    "python3-certbot-apache": {"package": "python3-certbot-apache", "desc": "Certbot Apache plugin", "method": "apt", "category": "web", "deps": ["certbot"]},
    "composer": {"package": "composer", "desc": "PHP dependency manager", "method": "apt", "category": "web"},
    "wp-cli": {"package": "wp", "desc": "WordPress command line interface", "method": "custom", "category": "web", "binary": "wp"},

    # ── Databases ───────────────────────────────────────────────

    "mariadb": {"package": "mariadb-server", "desc": "MariaDB database server", "method": "apt", "category": "databases"},
    "postgresql": {"package": "postgresql", "desc": "PostgreSQL database server", "method": "apt", "category": "databases"},
    "redis": {"package": "redis-server", "desc": "Redis in-memory data store", "method": "apt", "category": "databases"},
    "sqlite3": {"package": "sqlite3", "desc": "SQLite command line shell", "method": "apt", "category": "databases"},
    "sqlitebrowser": {"package": "sqlitebrowser", "desc": "DB Browser for SQLite", "method": "apt", "category": "databases"},
    "pgadmin": {"package": "org.pgadmin.pgadmin4", "desc": "PostgreSQL administration tool", "method": "flatpak", "category": "databases"},

    # ── Shells ──────────────────────────────────────────────────

    "zsh": {"package": "zsh", "desc": "Z shell", "method": "apt", "category": "shell"},
    "fish": {"package": "fish", "desc": "Friendly interactive shell", "method": "apt", "category": "shell"},
    "fonts-powerline": {"package": "fonts-powerline", "desc": "Powerline fonts", "method": "apt", "category": "shell"},
    "starship": {"package": "starship", "desc": "Cross-shell prompt", "method": "snap", "category": "shell"},
    "zoxide": {"package": "zoxide", "desc": "Smarter cd command", "method": "apt", "category": "shell"},
    "neofetch": {"package": "neofetch", "desc": "System information banner", "method": "apt", "category": "shell"},

    # ── Editors & IDEs ──────────────────────────────────────────

    "vscode": {"package": "code", "desc": "Visual Studio Code", "method": "custom", "category": "editors"},
    "sublime-text": {"package": "sublime-text", "desc": "Sublime Text editor", "method": "custom", "category": "editors"},
    "vim": {"package": "vim", "desc": "Vi IMproved text editor", "method": "apt", "category": "editors"},
    "emacs": {"package": "emacs", "desc": "GNU Emacs editor", "method": "apt", "category": "editors"},
    "geany": {"package": "geany", "desc": "Lightweight IDE", "method": "apt", "category": "editors"},
    "pycharm-community": {"package": "pycharm-community", "desc": "PyCharm Community Edition", "method": "snap", "category": "editors", "classic": True},
    "intellij-idea-community": {"package": "intellij-idea-community", "desc": "IntelliJ IDEA Community Edition", "method": "snap", "category": "editors", "classic": True},
    "zed": {"package": "dev.zed.Zed", "desc": "High-performance multiplayer code editor", "method": "flatpak", "category": "editors"},

    # ── Terminals ───────────────────────────────────────────────

    "warp-terminal": {"package": "warp-terminal", "desc": "Modern terminal with AI features", "method": "deb", "category": "terminals"},
    "alacritty": {"package": "alacritty", "desc": "GPU-accelerated terminal emulator", "method": "apt", "category": "terminals"},
    "kitty": {"package": "kitty", "desc": "Fast feature-rich terminal", "method": "apt", "category": "terminals"},
    "terminator": {"package": "terminator", "desc": "Terminal with split panes", "method": "apt", "category": "terminals"},
    "tilix": {"package": "tilix", "desc": "Tiling terminal emulator", "method": "apt", "category": "terminals"},
    "guake": {"package": "guake", "desc": "Drop-down terminal", "method": "apt", "category": "terminals"},

    # ── Browsers ────────────────────────────────────────────────

    "brave": {"package": "brave-browser", "desc": "Brave web browser", "method": "custom", "category": "browsers"},
    "firefox": {"package": "firefox", "desc": "Mozilla Firefox browser", "method": "apt", "category": "browsers"},
    "chromium": {"package": "chromium", "desc": "Chromium web browser", "method": "apt", "category": "browsers"},
    "google-chrome": {"package": "google-chrome-stable", "desc": "Google Chrome browser", "method": "deb", "category": "browsers"},
    "vivaldi": {"package": "vivaldi-stable", "desc": "Vivaldi web browser", "method": "custom", "category": "browsers"},
    "librewolf": {"package": "io.gitlab.librewolf-community", "desc": "Privacy-focused Firefox fork", "method": "flatpak", "category": "browsers"},
    "tor-browser": {"package": "torbrowser-launcher", "desc": "Tor Browser launcher", "method": "apt", "category": "browsers"},

    # ── Monitoring ──────────────────────────────────────────────

    "htop": {"package": "htop", "desc": "Interactive process viewer", "method": "apt", "category": "monitoring"},
    "btop": {"package": "btop", "desc": "Resource monitor with better graphs", "method": "apt", "category": "monitoring"},
    "glances": {"package": "glances", "desc": "Cross-platform system monitor", "method": "apt", "category": "monitoring"},
    "nethogs": {"package": "nethogs", "desc": "Network bandwidth monitor per process", "method": "apt", "category": "monitoring"},
    "iotop": {"package": "iotop", "desc": "I/O monitor", "method": "apt", "category": "monitoring"},
    "sysstat": {"package": "sysstat", "desc": "Performance monitoring tools (sar, iostat)", "method": "apt", "category": "monitoring"},
    "lm-sensors": {"package": "lm-sensors", "desc": "Hardware temperature sensors", "method": "apt", "category": "monitoring"},
    "mission-center": {"package": "io.missioncenter.MissionCenter", "desc": "Graphical system monitor", "method": "flatpak", "category": "monitoring"},

    # ── Security ────────────────────────────────────────────────

    "ufw": {"package": "ufw", "desc": "Uncomplicated Firewall", "method": "apt", "category": "security"},
    "gufw": {"package": "gufw", "desc": "Graphical firewall configuration", "method": "apt", "category": "security"},
    "fail2ban": {"package": "fail2ban", "desc": "Intrusion prevention system", "method": "apt", "category": "security"},
    "clamav": {"package": "clamav", "desc": "Antivirus engine", "method": "apt", "category": "security"},
    "rkhunter": {"package": "rkhunter", "desc": "Rootkit scanner", "method": "apt", "category": "security"},
    "keepassxc": {"package": "keepassxc", "desc": "Password manager", "method": "apt", "category": "security"},
    "bitwarden": {"package": "bitwarden", "desc": "Bitwarden password manager", "method": "snap", "category": "security"},
    "nmap": {"package": "nmap", "desc": "Network exploration and security scanner", "method": "apt", "category": "security"},

    # ── System tools ────────────────────────────────────────────

    "flatpak": {"package": "flatpak", "desc": "Flatpak buntage manager", "method": "apt", "category": "system"},
    "gnome-tweaks": {"package": "gnome-tweaks", "desc": "Advanced GNOME settings", "method": "apt", "category": "system"},
    "synaptic": {"package": "synaptic", "desc": "Graphical package manager", "method": "apt", "category": "system"},
    "gparted": {"package": "gparted", "desc": "Partition editor", "method": "apt", "category": "system"},
    "timeshift": {"package": "timeshift", "desc": "System restore snapshots", "method": "apt", "category": "system"},
    "bleachbit": {"package": "bleachbit", "desc": "Disk space cleaner", "method": "apt", "category": "system"},
    "stacer": {"package": "stacer", "desc": "System optimizer and monitor", "method": "apt", "category": "system"},
    "flatseal": {"package": "com.github.tchx84.Flatseal", "desc": "Flatpak permissions manager", "method": "flatpak", "category": "system"},
    "gnome-extension-manager": {"package": "com.mattjakeman.ExtensionManager", "desc": "GNOME Shell extension manager", "method": "flatpak", "category": "system"},

    # ── Networking ──────────────────────────────────────────────

    "openssh-server": {"package": "openssh-server", "desc": "SSH server", "method": "apt", "category": "networking"},
    "net-tools": {"package": "net-tools", "desc": "Classic networking tools (ifconfig, netstat)", "method": "apt", "category": "networking"},
    "wireguard": {"package": "wireguard", "desc": "Fast modern VPN", "method": "apt", "category": "networking"},
    "tailscale": {"package": "tailscale", "desc": "Zero-config mesh VPN", "method": "script", "category": "networking", "binary": "tailscale", "deps": ["curl"]},
    "wireshark": {"package": "wireshark", "desc": "Network protocol analyzer", "method": "apt", "category": "networking"},
    "filezilla": {"package": "filezilla", "desc": "FTP/SFTP client", "method": "apt", "category": "networking"},
    "remmina": {"package": "remmina", "desc": "Remote desktop client", "method": "apt", "category": "networking"},
    "iperf3": {"package": "iperf3", "desc": "Network bandwidth measurement", "method": "apt", "category": "networking"},

    # ── Office ──────────────────────────────────────────────────

    "libreoffice": {"package": "libreoffice", "desc": "LibreOffice office suite", "method": "apt", "category": "office"},
    "thunderbird": {"package": "thunderbird", "desc": "Thunderbird email client", "method": "apt", "category": "office"},
    "obsidian": {"package": "md.obsidian.Obsidian", "desc": "Markdown knowledge base", "method": "flatpak", "category": "office"},
    "joplin": {"package": "net.cozic.joplin_desktop", "desc": "Note taking and to-do application", "method": "flatpak", "category": "office"},
    "okular": {"package": "okular", "desc": "Document viewer", "method": "apt", "category": "office"},
    "xournalpp": {"package": "xournalpp", "desc": "Handwriting note taking and PDF annotation", "method": "apt", "category": "office"},
    "onlyoffice": {"package": "org.onlyoffice.desktopeditors", "desc": "OnlyOffice desktop editors", "method": "flatpak", "category": "office"},

    # ── Communication ───────────────────────────────────────────

    "discord": {"package": "discord", "desc": "Discord voice and text chat", "method": "snap", "category": "communication"},
    "telegram-desktop": {"package": "telegram-desktop", "desc": "Telegram messaging app", "method": "apt", "category": "communication"},
    "zoom": {"package": "zoom-client", "desc": "Zoom video conferencing", "method": "snap", "category": "communication"},
    "slack": {"package": "slack", "desc": "Slack team chat", "method": "snap", "category": "communication"},
    "signal": {"package": "org.signal.Signal", "desc": "Signal private messenger", "method": "flatpak", "category": "communication"},
    "element": {"package": "im.riot.Riot", "desc": "Matrix chat client", "method": "flatpak", "category": "communication"},
    "localsend": {"package": "org.localsend.localsend_app", "desc": "LocalSend file sharing", "method": "flatpak", "category": "communication"},

    # ── Multimedia ──────────────────────────────────────────────

    "vlc": {"package": "vlc", "desc": "VLC media player", "method": "apt", "category": "multimedia"},
    "mpv": {"package": "mpv", "desc": "Minimalist media player", "method": "apt", "category": "multimedia"},
    "ffmpeg": {"package": "ffmpeg", "desc": "Complete multimedia processing toolkit", "method": "apt", "category": "multimedia"},
    "obs-studio": {"package": "obs-studio", "desc": "OBS Studio streaming/recording", "method": "apt", "category": "multimedia"},
    "audacity": {"package": "audacity", "desc": "Audacity audio editor", "method": "apt", "category": "multimedia"},
    "spotify": {"package": "spotify", "desc": "Music streaming service", "method": "snap", "category": "multimedia"},
    "kdenlive": {"package": "kdenlive", "desc": "Video editor", "method": "apt", "category": "multimedia"},
    "handbrake": {"package": "handbrake", "desc": "Video transcoder", "method": "apt", "category": "multimedia"},
    "shotcut": {"package": "shotcut", "desc": "Cross-platform video editor", "method": "snap", "category": "multimedia", "classic": True},
    "ubuntu-restricted-extras": {"package": "ubuntu-restricted-extras", "desc": "Codecs and fonts for common media formats", "method": "apt", "category": "multimedia"},

    # ── Graphics ────────────────────────────────────────────────

    "gimp": {"package": "gimp", "desc": "GIMP image editor", "method": "apt", "category": "graphics"},
    "inkscape": {"package": "inkscape", "desc": "Inkscape vector graphics editor", "method": "apt", "category": "graphics"},
    "blender": {"package": "blender", "desc": "Blender 3D creation suite", "method": "snap", "category": "graphics", "classic": True},
    "krita": {"package": "krita", "desc": "Digital painting", "method": "apt", "category": "graphics"},
    "darktable": {"package": "darktable", "desc": "Photography workflow and RAW developer", "method": "apt", "category": "graphics"},
    "flameshot": {"package": "flameshot", "desc": "Screenshot tool with annotation", "method": "apt", "category": "graphics"},
    "pinta": {"package": "com.github.PintaProject.Pinta", "desc": "Simple image editor", "method": "flatpak", "category": "graphics"},

    # ── Cloud & sync ────────────────────────────────────────────

    "rclone": {"package": "rclone", "desc": "Cloud storage sync tool", "method": "apt", "category": "cloud"},
    "syncthing": {"package": "syncthing", "desc": "Continuous peer-to-peer file sync", "method": "apt", "category": "cloud"},
    "nextcloud-desktop": {"package": "nextcloud-desktop", "desc": "Nextcloud sync client", "method": "apt", "category": "cloud"},
    "dropbox": {"package": "com.dropbox.Client", "desc": "Dropbox client", "method": "flatpak", "category": "cloud"},
    "aws-cli": {"package": "aws-cli", "desc": "Amazon Web Services CLI", "method": "snap", "category": "cloud", "classic": True},
    "google-cloud-cli": {"package": "google-cloud-cli", "desc": "Google Cloud CLI", "method": "snap", "category": "cloud", "classic": True},

    # ── Gaming ──────────────────────────────────────────────────

    "steam": {"package": "steam", "desc": "Steam gaming platform", "method": "apt", "category": "gaming"},
    "lutris": {"package": "lutris", "desc": "Open gaming platform", "method": "apt", "category": "gaming"},
    "heroic-launcher": {"package": "com.heroicgameslauncher.hgl", "desc": "Open-source Epic Games/GOG launcher", "method": "flatpak", "category": "gaming"},
    "bottles": {"package": "com.usebottles.bottles", "desc": "Run Windows software with Wine", "method": "flatpak", "category": "gaming"},
    "retroarch": {"package": "retroarch", "desc": "Emulator frontend", "method": "apt", "category": "gaming"},
    "gamemode": {"package": "gamemode", "desc": "Game performance optimizations", "method": "apt", "category": "gaming"},
    "mangohud": {"package": "mangohud", "desc": "Vulkan/OpenGL performance overlay", "method": "apt", "category": "gaming"},

    # ── Virtualization ──────────────────────────────────────────

    "virtualbox": {"package": "virtualbox", "desc": "VirtualBox hypervisor", "method": "apt", "category": "virtualization"},
    "virt-manager": {"package": "virt-manager", "desc": "KVM/QEMU virtual machine manager", "method": "apt", "category": "virtualization"},
    "qemu-kvm": {"package": "qemu-kvm", "desc": "QEMU with KVM acceleration", "method": "apt", "category": "virtualization"},
    "gnome-boxes": {"package": "gnome-boxes", "desc": "Simple virtual machines", "method": "apt", "category": "virtualization"},
    "vagrant": {"package": "vagrant", "desc": "Development environment provisioning", "method": "apt", "category": "virtualization"},
    "multipass": {"package": "multipass", "desc": "Ubuntu VMs on demand", "method": "snap", "category": "virtualization"},

    # ── Fonts ───────────────────────────────────────────────────

    "fonts-firacode": {"package": "fonts-firacode", "desc": "Fira Code monospaced font with ligatures", "method": "apt", "category": "fonts"},
    "fonts-jetbrains-mono": {"package": "fonts-jetbrains-mono", "desc": "JetBrains Mono font", "method": "apt", "category": "fonts"},
    "fonts-noto": {"package": "fonts-noto", "desc": "Noto font family", "method": "apt", "category": "fonts"},
    "fonts-noto-color-emoji": {"package": "fonts-noto-color-emoji", "desc": "Color emoji font", "method": "apt", "category": "fonts"},
    "ttf-mscorefonts": {"package": "ttf-mscorefonts-installer", "desc": "Microsoft core fonts", "method": "apt", "category": "fonts"},
    "fonts-hack": {"package": "fonts-hack", "desc": "Hack monospaced font", "method": "apt", "category": "fonts"},

    # ── Education ───────────────────────────────────────────────

    "anki": {"package": "net.ankiweb.Anki", "desc": "Spaced-repetition flashcards", "method": "flatpak", "category": "education"},
    "gcompris": {"package": "gcompris-qt", "desc": "Educational games for children", "method": "apt", "category": "education"},
    "stellarium": {"package": "stellarium", "desc": "Planetarium", "method": "apt", "category": "education"},
    "kalzium": {"package": "kalzium", "desc": "Periodic table of elements", "method": "apt", "category": "education"},
    "scratch": {"package": "scratch", "desc": "Visual programming for beginners", "method": "snap", "category": "education"},

    # ── Science & math ──────────────────────────────────────────

    "octave": {"package": "octave", "desc": "GNU Octave numerical computation", "method": "apt", "category": "science"},
    "r-base": {"package": "r-base", "desc": "R statistical computing", "method": "apt", "category": "science"},
    "geogebra": {"package": "org.geogebra.GeoGebra", "desc": "Dynamic mathematics", "method": "flatpak", "category": "science"},
    "qgis": {"package": "qgis", "desc": "Geographic information system", "method": "apt", "category": "science"},
    "gnuplot": {"package": "gnuplot", "desc": "Command-line plotting", "method": "apt", "category": "science"},
    "texlive": {"package": "texlive", "desc": "TeX Live typesetting system", "method": "apt", "category": "science"},
}
