import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class TroiConfig:
    """Connection settings for a Troi instance"""

    base_url: str
    client_name: str
    username: str
    password: str

    # Origin of the same-origin server-side proxy, e.g. http://localhost:3000
    proxy_url: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'TroiConfig':
        """Builds the configuration from environment variables (and a .env file)"""
        load_dotenv()
        return cls(
            base_url=os.getenv('TROI_BASE_URL', ''),
            client_name=os.getenv('TROI_CLIENT_NAME', ''),
            username=os.getenv('TROI_USERNAME', ''),
            password=os.getenv('TROI_PASSWORD', ''),
            proxy_url=os.getenv('TROI_PROXY_URL') or None,
        )

    def missing_fields(self) -> list:
        required_fields = [
            'base_url',
            'client_name',
            'username',
            'password'
        ]
        return [field for field in required_fields if not getattr(self, field)]

    def validate_required_fields(self) -> bool:
        """True when every field needed to talk to troi is set"""
        return not self.missing_fields()
