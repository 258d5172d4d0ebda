"""Constants for source-bundle."""

# Files in the project root
CONFIG_FILE = ".source-bundle.yaml"
IGNORE_FILE = ".sourcebundleignore"
SNAPSHOT_FILE = ".source-snapshot.json"

# Default output locations per format
DEFAULT_TS_OUTPUT = "src/generated/source-code.ts"
DEFAULT_JSON_OUTPUT = "source-bundle.json"
OUTPUT_FORMATS = ("ts", "json")

# Version label used when no manifest provides one
DEFAULT_VERSION = "0.0.0"

# Content hashes are truncated to this many hex characters
HASH_LENGTH = 16

# Decoded size estimate for base64 payloads
BASE64_SIZE_RATIO = 0.75

# Text files included by extension
TEXT_EXTENSIONS = [
    ".ts", ".tsx", ".js", ".jsx",
    ".py", ".pyi",
    ".rs",
    ".json", ".json5",
    ".toml", ".yaml", ".yml",
    ".css", ".scss",
    ".html",
    ".md", ".mdx",
    ".sh", ".bash",
    ".sql",
]

# Stored as base64 data URIs, never fingerprinted
IMAGE_EXTENSIONS = [".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg", ".ico"]

# Files without a usable extension that are still included
INCLUDE_FILES = [
    ".gitignore",
    ".gitattributes",
    ".editorconfig",
    ".prettierrc",
    ".prettierignore",
    "LICENSE",
    "Makefile",
]

# Never bundled, even when tracked
PRIVATE_FILES = ["CLAUDE.md", "CONTRIBUTING.md"]
