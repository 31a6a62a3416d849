# taskhub/config/settings.py
# Application configuration for database, authentication, CORS and logging

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == 'true'


class AppConfig:
    """Application configuration read from the environment"""

    ENVIRONMENT = os.getenv('ENVIRONMENT', 'development').lower()

    # Database settings
    DATABASE = {
        'url': os.getenv('DATABASE_URL', 'sqlite:///./taskhub.db'),
        'sslmode': os.getenv('DATABASE_SSLMODE'),  # e.g. "require" on Render
        'echo': _env_flag('DATABASE_ECHO', 'false'),
        'create_tables': _env_flag('CREATE_TABLES', 'true'),
    }

    # Token and session cookie settings
    AUTH = {
        'secret_key': os.getenv('SECRET_KEY', 'change-me-in-production'),
        'algorithm': os.getenv('ALGORITHM', 'HS256'),
        'token_expire_minutes': int(os.getenv('ACCESS_TOKEN_EXPIRE_MINUTES', 7 * 24 * 60)),  # 7 days
        'cookie_name': os.getenv('AUTH_COOKIE_NAME', 'token'),
        'cookie_secure': ENVIRONMENT == 'production',
        'cookie_samesite': os.getenv('AUTH_COOKIE_SAMESITE', 'strict'),
    }

    # Allowed frontend origins
    CORS = {
        'origins': [
            origin.strip()
            for origin in os.getenv('CLIENT_URL', 'http://localhost:5173').split(',')
            if origin.strip()
        ],
    }

    LOGGING = {
        'level': os.getenv('LOG_LEVEL', 'INFO').upper(),
        'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
    }

    @classmethod
    def is_production(cls) -> bool:
        """Check if the app runs with production settings"""
        return cls.ENVIRONMENT == 'production'

    @classmethod
    def is_sqlite(cls) -> bool:
        return cls.DATABASE['url'].startswith('sqlite')

    @classmethod
    def get_cors_origins(cls) -> List[str]:
        return list(cls.CORS['origins'])
