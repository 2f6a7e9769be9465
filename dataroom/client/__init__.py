"""HTTP clients and session state for the data room API"""
from dataroom.client.errors import APIClientError
from dataroom.client.api_client import APIClient
from dataroom.client.admin_api_client import AdminAPIClient
from dataroom.client.session import AuthSession, AdminSession, AuthState, AuthEvent, Redirect

__all__ = [
    "APIClientError",
    "APIClient",
    "AdminAPIClient",
    "AuthSession",
    "AdminSession",
    "AuthState",
    "AuthEvent",
    "Redirect",
]
