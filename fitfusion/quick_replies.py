# fitfusion/quick_replies.py
"""
Static quick-reply catalog offered to the frontend. A selected reply is sent
back as its `payload`, which the insight service turns into a full request.
"""
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class QuickReply:
    id: str
    text: str
    payload: str
    category: str
    description: str

    def to_public(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "text": self.text,
            "category": self.category,
            "description": self.description,
        }


QUICK_REPLIES = (
    QuickReply(
        id="GET_WORKOUT_PLAN",
        text="Get My Workout Plan",
        payload="GET_WORKOUT_PLAN",
        category="workout",
        description="Generate a personalized workout plan based on your goals",
    ),
    QuickReply(
        id="GET_COMPLETE_DIET",
        text="Get My Diet Plan",
        payload="GET_COMPLETE_DIET",
        category="nutrition",
        description="Create a complete nutrition plan tailored to your needs",
    ),
    QuickReply(
        id="VIEW_RECOVERY_TIPS",
        text="Recovery & Wellness Tips",
        payload="VIEW_RECOVERY_TIPS",
        category="recovery",
        description="Get personalized recovery and wellness recommendations",
    ),
    QuickReply(
        id="GET_FITNESS_TIPS",
        text="Fitness Tips & Advice",
        payload="GET_FITNESS_TIPS",
        category="tips",
        description="Receive expert fitness tips and training advice",
    ),
    QuickReply(
        id="GET_FULL_OVERVIEW",
        text="My Complete Overview",
        payload="GET_FULL_OVERVIEW",
        category="analytics",
        description="Get a comprehensive analysis of your fitness journey",
    ),
)


def get_all_quick_replies() -> List[Dict[str, str]]:
    return [r.to_public() for r in QUICK_REPLIES]


def get_quick_replies_by_category(category: str) -> List[Dict[str, str]]:
    return [r.to_public() for r in QUICK_REPLIES if r.category == category]


def get_allowed_payloads() -> List[str]:
    return [r.payload for r in QUICK_REPLIES]


def get_quick_reply_by_payload(payload: str) -> Optional[Dict[str, str]]:
    for r in QUICK_REPLIES:
        if r.payload == payload:
            return asdict(r)
    return None
