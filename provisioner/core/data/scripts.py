"""
Script templates for headless and interactive installs.

Templates use ``{name}`` placeholders substituted by ``render()``.
Plain ``str.format`` is not used because bash and PowerShell bodies
are full of literal braces.

Placeholders:
    {major}        Node.js major version to install
    {package}      npm package (name@tag) for the CLI tool
    {tool}         CLI tool executable
    {config_key}   configuration key, already quoted for the shell
    {config_value} configuration value, already quoted for the shell
    {config_lines} zero or more rendered ``config set`` lines
    {config_dir}   configuration root
    {download_url} manual Node.js download page
    {title}        banner shown in interactive windows
"""

from __future__ import annotations

import re
import shlex

NODE_DOWNLOAD_URL = "https://nodejs.org/en/download"


def render(template: str, **values: object) -> str:
    """Substitute ``{name}`` placeholders in *template*."""
    out = template
    for key, value in values.items():
        out = out.replace("{" + key + "}", str(value))
    return out


_SAFE_ARG = re.compile(r"[\w%+=:./-]+", re.ASCII)


def quote_arg(value: object, host_os: str) -> str:
    """Quote *value* as a single argument for bash or PowerShell.

    Plain words pass through unchanged.
    """
    text = str(value)
    if _SAFE_ARG.fullmatch(text):
        return text
    if host_os == "windows":
        return "'" + text.replace("'", "''") + "'"
    return shlex.quote(text)


def config_set_lines(
    tool: str,
    entries: dict[str, str],
    host_os: str,
    template: str | None = None,
) -> list[str]:
    """One rendered ``config set`` command per entry, arguments quoted."""
    template = template or CONFIG_SET
    return [
        render(
            template,
            tool=tool,
            config_key=quote_arg(key, host_os),
            config_value=quote_arg(value, host_os),
        ).rstrip("\n")
        for key, value in entries.items()
    ]


# ── Headless: Node.js on Windows (PowerShell) ─────────────────────

WINGET_NODE = """\
winget install --id OpenJS.NodeJS.LTS --accept-source-agreements --accept-package-agreements
exit $LASTEXITCODE
"""

FNM_NODE = """\
$ErrorActionPreference = 'Stop'
irm https://fnm.vercel.app/install.ps1 | iex
$env:FNM_DIR = "$env:USERPROFILE\\.fnm"
$env:Path = "$env:FNM_DIR;$env:Path"
fnm install {major}
fnm default {major}
fnm use {major}
"""

# ── Headless: Node.js on macOS (bash) ─────────────────────────────

HOMEBREW_BOOTSTRAP = """\
NONINTERACTIVE=1 /bin/bash -c "$(curl -fsSL https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh)"
"""

_BREW_SHELLENV = """\
if ! command -v brew &> /dev/null; then
    if [[ -x /opt/homebrew/bin/brew ]]; then
        eval "$(/opt/homebrew/bin/brew shellenv)"
    elif [[ -x /usr/local/bin/brew ]]; then
        eval "$(/usr/local/bin/brew shellenv)"
    fi
fi
"""

HOMEBREW_NODE = _BREW_SHELLENV + """\
brew install node@{major}
brew link --overwrite node@{major}
"""

# ── Headless: Node.js on Linux (bash) ─────────────────────────────

APT_NODE = """\
set -e
curl -fsSL https://deb.nodesource.com/setup_{major}.x | sudo -E bash -
sudo apt-get install -y nodejs
"""

DNF_NODE = """\
set -e
curl -fsSL https://rpm.nodesource.com/setup_{major}.x | sudo bash -
sudo dnf install -y nodejs
"""

YUM_NODE = """\
set -e
curl -fsSL https://rpm.nodesource.com/setup_{major}.x | sudo bash -
sudo yum install -y nodejs
"""

PACMAN_NODE = """\
sudo pacman -S --noconfirm nodejs npm
"""

# ── Headless: CLI tool (any shell) ────────────────────────────────

NPM_GLOBAL = """\
npm install -g {package}
"""

CONFIG_SET = """\
{tool} config set {config_key} {config_value}
"""

CONFIG_SET_TOLERANT = """\
{tool} config set {config_key} {config_value} 2>/dev/null || true
"""

# ── Interactive: bash (macOS .command / Linux .sh) ────────────────

_BASH_HEADER = """\
#!/bin/bash
clear
echo "========================================"
echo "    {title}"
echo "========================================"
echo ""
"""

_BASH_FOOTER = """\
echo ""
read -p "Press Enter to close this window..."
"""

_LINUX_DETECT_NODE = """\
if command -v apt-get &> /dev/null; then
    echo "Detected apt, using the NodeSource repository..."
    curl -fsSL https://deb.nodesource.com/setup_{major}.x | sudo -E bash -
    sudo apt-get install -y nodejs
elif command -v dnf &> /dev/null; then
    echo "Detected dnf, using the NodeSource repository..."
    curl -fsSL https://rpm.nodesource.com/setup_{major}.x | sudo bash -
    sudo dnf install -y nodejs
elif command -v yum &> /dev/null; then
    echo "Detected yum, using the NodeSource repository..."
    curl -fsSL https://rpm.nodesource.com/setup_{major}.x | sudo bash -
    sudo yum install -y nodejs
elif command -v pacman &> /dev/null; then
    echo "Detected pacman..."
    sudo pacman -S nodejs npm --noconfirm
else
    echo "No supported package manager found."
    echo "Install Node.js {major}+ manually: {download_url}"
fi
"""

INTERACTIVE_NODE_MACOS = (
    _BASH_HEADER
    + """\
if ! command -v brew &> /dev/null; then
    echo "Installing Homebrew..."
    /bin/bash -c "$(curl -fsSL https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh)"
fi
"""
    + _BREW_SHELLENV
    + """\
echo "Installing Node.js {major}..."
brew install node@{major}
brew link --overwrite node@{major}

echo ""
echo "Done! Restart OpenClaw Manager to pick up the new PATH."
node --version
"""
    + _BASH_FOOTER
)

INTERACTIVE_NODE_LINUX = (
    _BASH_HEADER
    + _LINUX_DETECT_NODE
    + """\

echo ""
echo "Done! Restart OpenClaw Manager to pick up the new PATH."
node --version
"""
    + _BASH_FOOTER
)

INTERACTIVE_TOOL_UNIX = (
    _BASH_HEADER
    + """\
echo "Installing OpenClaw..."
npm install -g {package}

echo ""
echo "Initialising configuration..."
{config_lines}

mkdir -p "{config_dir}/agents/main/sessions"
mkdir -p "{config_dir}/agents/main/agent"
mkdir -p "{config_dir}/credentials"

echo ""
echo "Done!"
{tool} --version
"""
    + _BASH_FOOTER
)

# ── Interactive: PowerShell (.ps1) ────────────────────────────────

_PS_HEADER = """\
Write-Host "========================================" -ForegroundColor Cyan
Write-Host "    {title}" -ForegroundColor White
Write-Host "========================================" -ForegroundColor Cyan
Write-Host ""
"""

_PS_FOOTER = """\
Write-Host ""
Read-Host "Press Enter to close this window"
"""

INTERACTIVE_NODE_WINDOWS = (
    _PS_HEADER
    + """\
$hasWinget = Get-Command winget -ErrorAction SilentlyContinue
if ($hasWinget) {
    Write-Host "Installing Node.js with winget..." -ForegroundColor Yellow
    winget install --id OpenJS.NodeJS.LTS --accept-source-agreements --accept-package-agreements
} else {
    Write-Host "Download and install Node.js {major}+ from:" -ForegroundColor Yellow
    Write-Host "{download_url}" -ForegroundColor Green
    Start-Process "{download_url}"
}

Write-Host ""
Write-Host "Restart OpenClaw Manager once the install has finished." -ForegroundColor Green
"""
    + _PS_FOOTER
)

INTERACTIVE_TOOL_WINDOWS = (
    _PS_HEADER
    + """\
Write-Host "Installing OpenClaw..." -ForegroundColor Yellow
npm install -g {package}

Write-Host ""
Write-Host "Initialising configuration..."
{config_lines}

New-Item -ItemType Directory -Force -Path "{config_dir}\\agents\\main\\sessions" | Out-Null
New-Item -ItemType Directory -Force -Path "{config_dir}\\agents\\main\\agent" | Out-Null
New-Item -ItemType Directory -Force -Path "{config_dir}\\credentials" | Out-Null

Write-Host ""
Write-Host "Done!" -ForegroundColor Green
{tool} --version
"""
    + _PS_FOOTER
)
