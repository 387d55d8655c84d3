"""Default configuration values for photoprep."""

# Default configuration dictionary
DEFAULT_CONFIG = {
    # Output matrix: every size is produced in every format
    "output": {
        "sizes": [
            {"label": "500px", "px": 500},
            {"label": "1000px", "px": 1000},
            {"label": "2000px", "px": 2000},
        ],
        "formats": [
            {
                "format": "jpeg",
                "options": {
                    "quality": 80,
                    "progressive": True,
                    "optimize": True,
                },
            },
            {
                "format": "webp",
                "options": {
                    "quality": 80,
                    "method": 6,  # Pillow's name for encoder effort
                },
            },
        ],
        # Reserved marker for generated files: {stem}-{label}-resize.{ext}
        "suffix": "-resize",
    },

    # Processing Configuration
    "processing": {
        "workers": 4,
        "case_sensitive_extensions": False,
    },

    # Manifest Configuration
    "manifest": {
        "display_width": 2000,
        "display_height": 1500,
        "genre": "Travel Photography",
    },

    # Logging Configuration
    "logging": {
        "level": "INFO",
        "file": None,
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    },
}

# Source extensions, lower case. JPEG family and HEIC family.
SOURCE_EXTENSIONS = (".jpg", ".jpeg", ".heic")

# Encoders available through Pillow, keyed by output extension
SUPPORTED_FORMATS = {
    "jpeg": "JPEG",
    "webp": "WEBP",
}
