"""Configuration management for the Library Service.

This module centralizes all configuration settings including the database
URL, the location of the model files on disk and logging.

Architecture:
    Configuration is separated from dependencies to follow separation of concerns.
    All environment variables and configuration logic is centralized here.
"""

import os

# Database configuration
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/stl-library.db")

# Directory holding the library files, used to report file sizes
STL_ROOT_DIR = os.getenv("STL_ROOT_DIR", "public/models")

# Logging configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Service settings
SERVICE_NAME = os.getenv("SERVICE_NAME", "library-service")
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8002"))
