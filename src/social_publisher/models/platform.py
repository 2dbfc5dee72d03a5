# src/social_publisher/models/platform.py
from enum import Enum
from typing import Dict, List


class Platform(str, Enum):
    facebook = "facebook"
    instagram = "instagram"
    linkedin = "linkedin"
    tiktok = "tiktok"
    x = "x"


PLATFORM_LABELS: Dict[Platform, str] = {
    Platform.facebook: "Facebook",
    Platform.instagram: "Instagram",
    Platform.linkedin: "LinkedIn",
    Platform.tiktok: "TikTok",
    Platform.x: "X (Twitter)",
}


def platform_catalog() -> List[dict]:
    return [{"id": p.value, "name": PLATFORM_LABELS[p]} for p in Platform]
