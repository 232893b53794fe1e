import base64
import hashlib
from typing import Dict


class TroiAuth:
    def __init__(self, base_url: str, username: str, password: str):
        self.base_url = base_url.rstrip('/')
        self.username = username
        self.password = password
        self.password_md5 = hashlib.md5(password.encode('utf-8')).hexdigest()

    def get_headers(self) -> Dict[str, str]:
        token = base64.b64encode(f"{self.username}:{self.password_md5}".encode('utf-8')).decode('ascii')
        return {
            'Authorization': f"Basic {token}"
        }

    def get_proxy_headers(self) -> Dict[str, str]:
        # the proxy re-authenticates against troi itself, so it gets the plaintext credentials
        return {
            'X-Troi-Username': self.username,
            'X-Troi-Password': self.password
        }

    def get_url(self, endpoint: str) -> str:
        if not endpoint.startswith('/'):
            endpoint = '/' + endpoint
        return f"{self.base_url}{endpoint}"
