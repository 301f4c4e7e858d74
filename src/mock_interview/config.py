"""
Mock Interview Configuration

Centralized configuration for the interview session engine.
Values can be overridden through environment variables (a local .env file
is loaded on import).
"""

import os

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# ============================================================================
# Engine Configuration
# ============================================================================

ENGINE_CONFIG = {
    # Allowed number of questions per session (inclusive)
    "min_question_count": 3,
    "max_question_count": 20,

    # Question count used when the caller does not ask for one
    "default_question_count": 5,

    # Length of the generated hex session identifier
    "session_id_length": 16,
}

# ============================================================================
# LLM Configuration
# ============================================================================

LLM_CONFIG = {
    # Model used by the question and evaluation crews (LiteLLM naming)
    "model": os.getenv("INTERVIEW_LLM_MODEL", "gemini/gemini-2.5-flash-lite"),

    # Verbose crew output
    "verbose": _env_bool("INTERVIEW_LLM_VERBOSE", False),

    # Seconds to wait on an external generation/evaluation call (None = no limit)
    "generation_timeout": None,
    "evaluation_timeout": None,
}

# ============================================================================
# Persistence Configuration
# ============================================================================

PERSISTENCE_CONFIG = {
    # Write session snapshots, answers and reports to disk
    "enabled": _env_bool("INTERVIEW_PERSISTENCE_ENABLED", True),

    # Root directory for the per-session JSON files
    "directory": os.getenv("INTERVIEW_PERSISTENCE_DIR", "./interview_sessions"),

    # Worker threads used for fire-and-forget writes (1 keeps writes ordered)
    "max_workers": 1,
}

# ============================================================================
# API Configuration
# ============================================================================

API_CONFIG = {
    "title": "Mock Interview API",
    "version": "1.0.0",
    "host": os.getenv("INTERVIEW_API_HOST", "0.0.0.0"),
    "port": int(os.getenv("INTERVIEW_API_PORT", "8000")),
}

# ============================================================================
# Logging Configuration
# ============================================================================

LOGGING_CONFIG = {
    # Log level: "DEBUG", "INFO", "WARNING", "ERROR"
    "log_level": os.getenv("INTERVIEW_LOG_LEVEL", "INFO"),

    # Log file path (None = no file logging)
    "log_file": os.getenv("INTERVIEW_LOG_FILE"),

    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}

_SECTIONS = {
    "engine": ENGINE_CONFIG,
    "llm": LLM_CONFIG,
    "persistence": PERSISTENCE_CONFIG,
    "api": API_CONFIG,
    "logging": LOGGING_CONFIG,
}


# ============================================================================
# Helper Functions
# ============================================================================

def get_config(section: str) -> dict:
    """
    Get configuration for a specific section.

    Args:
        section: Configuration section name

    Returns:
        Configuration dictionary (empty if the section is unknown)
    """
    return _SECTIONS.get(section, {})


def update_config(section: str, key: str, value):
    """
    Update a configuration value.

    Args:
        section: Configuration section name
        key: Configuration key
        value: New value
    """
    if section not in _SECTIONS:
        raise ValueError(f"Unknown configuration section: {section}")
    _SECTIONS[section][key] = value


def print_all_configs():
    """Print all configuration sections."""
    print("=" * 80)
    print("MOCK INTERVIEW CONFIGURATION")
    print("=" * 80)

    for section_name, config in _SECTIONS.items():
        print(f"\n{section_name}:")
        print("-" * 80)
        for key, value in config.items():
            print(f"  {key}: {value}")

    print("\n" + "=" * 80)


if __name__ == "__main__":
    print_all_configs()
