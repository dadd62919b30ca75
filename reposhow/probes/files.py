import re
from typing import Dict

KEY_FILE_PATTERNS = [
    # Entry points
    re.compile(r"^(index|main|app|server)\.(js|ts|jsx|tsx|py|go|rs|java)$", re.IGNORECASE),
    # foo.config.js, nginx.conf.yaml, ...
    re.compile(r"\.(config|conf)\.(js|ts|json|yaml|yml|toml)$", re.IGNORECASE),
    # Build tools
    re.compile(r"^(dockerfile|makefile|rakefile)$", re.IGNORECASE),
    # Project docs
    re.compile(r"^(changelog|contributing|license|authors|contributors)\.(md|txt|rst)$", re.IGNORECASE),
    # Manifests
    re.compile(r"^(package\.json|requirements\.txt|go\.mod|cargo\.toml|gemfile|composer\.json)$", re.IGNORECASE),
]

CATEGORY_BY_EXTENSION: Dict[str, str] = {
    "js": "JavaScript",
    "ts": "TypeScript",
    "jsx": "React",
    "tsx": "React TypeScript",
    "py": "Python",
    "go": "Go",
    "rs": "Rust",
    "java": "Java",
    "json": "Configuration",
    "yaml": "Configuration",
    "yml": "Configuration",
    "toml": "Configuration",
    "md": "Documentation",
    "rst": "Documentation",
    "txt": "Documentation",
}


def is_key_file(filename: str) -> bool:
    """
    True when a root-level file is representative enough to be shown verbatim.
    """
    return any(pattern.search(filename) for pattern in KEY_FILE_PATTERNS)


def file_category(filename: str) -> str:
    if "." not in filename:
        return "Other"
    ext = filename.rsplit(".", 1)[-1].lower()
    return CATEGORY_BY_EXTENSION.get(ext, "Other")
