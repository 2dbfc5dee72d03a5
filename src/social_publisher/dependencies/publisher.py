# src/social_publisher/dependencies/publisher.py
from social_publisher.infrastructure.ayrshare_client import AyrshareClient


def get_publisher() -> AyrshareClient:
    return AyrshareClient()
