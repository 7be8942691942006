from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class Identity:
    uid: str
    display_name: str = ""
    email: str = ""
    photo_url: str = ""

    def profile(self) -> Dict[str, str]:
        return {
            "uid": self.uid,
            "displayName": self.display_name,
            "email": self.email,
            "photoURL": self.photo_url,
        }


def identity_from_user(user: Optional[Mapping[str, Any]]) -> Optional[Identity]:
    """Map ``st.user`` (OIDC claims) to an Identity, or None when signed out."""
    if user is None or not user.get("is_logged_in", False):
        return None
    uid = user.get("sub") or user.get("email")
    if not uid:
        return None
    return Identity(
        uid=str(uid),
        display_name=str(user.get("name") or user.get("email") or ""),
        email=str(user.get("email") or ""),
        photo_url=str(user.get("picture") or ""),
    )
