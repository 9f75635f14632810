"""
tsfclub.models
==============

Dataclasses and enums for the seven record types tracked by the club
network: colleges, users, chapters, memberships, meetings, point ledger
entries and certificates.  These objects are intentionally lightweight;
they carry **no** external‑library dependencies so that importing
`tsfclub` stays fast and the engine can be unit‑tested in isolation.

Every record has a ``from_dict`` constructor that accepts the JSON shape
used by the fixture files and the HTTP layer (ISO timestamps, enum values
as lower‑case strings).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


def utcnow() -> datetime:
    """Timezone‑aware "now" used for every timestamp the engine writes."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Accept ``None``, a datetime, or an ISO‑8601 string (``Z`` suffix allowed)."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


class _Choice(Enum):
    """Enum whose wire value is a lower‑case string."""

    def __str__(self) -> str:        # nicer REPL display
        return self.value


class UserRole(_Choice):
    MEMBER = "member"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class ChapterStatus(_Choice):
    """Life‑cycle states for a chapter."""
    PENDING = "pending"
    ACTIVE = "active"
    DEACTIVATED = "deactivated"


class MembershipStatus(_Choice):
    """Life‑cycle states for a membership request."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class MembershipRole(_Choice):
    MEMBER = "member"
    ADMIN = "admin"


class MeetingStatus(_Choice):
    UPCOMING = "upcoming"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PointType(_Choice):
    MEETING_ATTENDANCE = "meeting_attendance"
    SPEAKER_ROLE = "speaker_role"
    ANCHOR_ROLE = "anchor_role"
    TOPIC_PROVIDER = "topic_provider"
    JUDGE_ROLE = "judge_role"
    ADMIN_BONUS = "admin_bonus"
    FEEDBACK_BONUS = "feedback_bonus"
    CERTIFICATE_MILESTONE = "certificate_milestone"


class CertificateType(_Choice):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"


@dataclass
class College:
    """
    Reference record for a college that can host a chapter.

    Parameters
    ----------
    id : str
        Identifier (numeric string).
    name : str
        Full name, e.g. "NIT Calicut".
    short_name : str
        Abbreviation shown in search results.
    city, district : str
        Location; both take part in college search.
    established : int
        Founding year.
    """
    id: str
    name: str
    short_name: str
    city: str
    district: str
    website: str = ""
    type: str = "Unknown"
    established: int = 0
    affiliation: str = "Unknown"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "College":
        return cls(**data)


@dataclass
class User:
    """A registered person.  Only the bcrypt hash of the password is kept."""
    id: str
    name: str
    email: str
    password_hash: Optional[str] = None
    role: UserRole = UserRole.MEMBER
    college_id: Optional[str] = None
    bio: str = ""
    phone: str = ""
    semester: str = ""
    department: str = ""
    is_active: bool = True
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        data = dict(data)
        data["role"] = UserRole(data.get("role", "member"))
        for key in ("created_at", "updated_at"):
            if key in data:
                data[key] = parse_timestamp(data[key])
        return cls(**data)

    def public_profile(self) -> Dict[str, Any]:
        """Everything except the password hash."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "college_id": self.college_id,
            "bio": self.bio,
            "phone": self.phone,
            "semester": self.semester,
            "department": self.department,
            "is_active": self.is_active,
        }


@dataclass
class Chapter:
    """
    A club instance at one college.

    ``version`` is bumped on every status change and is what optimistic
    callers pass back as ``expected_version``.
    """
    id: str
    name: str
    college_id: str
    description: str = ""
    status: ChapterStatus = ChapterStatus.PENDING
    admin_id: Optional[str] = None
    founded_date: Optional[datetime] = None
    meeting_frequency: str = ""
    meeting_day: str = ""
    meeting_time: str = ""
    social_links: Dict[str, str] = field(default_factory=dict)
    total_members: int = 0
    rejection_reason: Optional[str] = None
    version: int = 1
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Chapter":
        data = dict(data)
        data["status"] = ChapterStatus(data.get("status", "pending"))
        for key in ("founded_date", "created_at", "updated_at"):
            if key in data:
                data[key] = parse_timestamp(data[key])
        return cls(**data)


@dataclass
class Membership:
    """Join record between a user and a chapter, with a cached points total."""
    id: str
    user_id: str
    chapter_id: str
    status: MembershipStatus = MembershipStatus.PENDING
    role: MembershipRole = MembershipRole.MEMBER
    joined_at: Optional[datetime] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    is_active: bool = False
    points: int = 0
    attendance_rate: float = 0.0
    last_meeting_attended: Optional[str] = None
    rejection_reason: Optional[str] = None
    version: int = 1
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Membership":
        data = dict(data)
        data["status"] = MembershipStatus(data.get("status", "pending"))
        data["role"] = MembershipRole(data.get("role", "member"))
        for key in ("joined_at", "approved_at", "created_at", "updated_at"):
            if key in data:
                data[key] = parse_timestamp(data[key])
        return cls(**data)


@dataclass
class MeetingRoles:
    """Role slots for one meeting; anchor and topic provider are single‑valued."""
    anchor: Optional[str] = None
    topic_provider: Optional[str] = None
    judges: List[str] = field(default_factory=list)
    speakers: List[str] = field(default_factory=list)
    listeners: List[str] = field(default_factory=list)

    def role_of(self, user_id: str) -> Optional[str]:
        """Display name of the user's role, or None when unassigned."""
        if self.anchor == user_id:
            return "Anchor"
        if self.topic_provider == user_id:
            return "Topic Provider"
        if user_id in self.judges:
            return "Judge"
        if user_id in self.speakers:
            return "Speaker"
        if user_id in self.listeners:
            return "Listener"
        return None

    def participants(self) -> List[str]:
        """Every assigned user id once, anchor first."""
        seen: List[str] = []
        for uid in [self.anchor, self.topic_provider, *self.judges, *self.speakers, *self.listeners]:
            if uid and uid not in seen:
                seen.append(uid)
        return seen


@dataclass
class Feedback:
    user_id: str
    rating: int
    comment: str = ""
    submitted_at: datetime = field(default_factory=utcnow)


@dataclass
class Meeting:
    id: str
    chapter_id: str
    title: str
    date_time: datetime
    agenda: str = ""
    description: str = ""
    duration: int = 60
    meet_url: str = ""
    status: MeetingStatus = MeetingStatus.UPCOMING
    max_participants: int = 0
    roles: MeetingRoles = field(default_factory=MeetingRoles)
    feedback: List[Feedback] = field(default_factory=list)
    version: int = 1
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def current_participants(self) -> int:
        return len(self.roles.participants())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Meeting":
        data = dict(data)
        data["status"] = MeetingStatus(data.get("status", "upcoming"))
        data["date_time"] = parse_timestamp(data["date_time"])
        data["roles"] = MeetingRoles(**data.get("roles", {}))
        data["feedback"] = [
            Feedback(
                user_id=f["user_id"],
                rating=f["rating"],
                comment=f.get("comment", ""),
                submitted_at=parse_timestamp(f.get("submitted_at")) or utcnow(),
            )
            for f in data.get("feedback", [])
        ]
        for key in ("created_at", "updated_at"):
            if key in data:
                data[key] = parse_timestamp(data[key])
        return cls(**data)


@dataclass
class Point:
    """
    One immutable entry of the points ledger.

    ``override`` marks an amount that deviates from the standard table; the
    ``description`` then carries the justification.
    """
    id: str
    user_id: str
    chapter_id: str
    points: int
    type: PointType
    awarded_by: str
    description: str = ""
    meeting_id: Optional[str] = None
    override: bool = False
    awarded_at: datetime = field(default_factory=utcnow)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Point":
        data = dict(data)
        data["type"] = PointType(data["type"])
        if "awarded_at" in data:
            data["awarded_at"] = parse_timestamp(data["awarded_at"])
        return cls(**data)


@dataclass
class Certificate:
    id: str
    user_id: str
    chapter_id: str
    type: CertificateType
    points_threshold: int
    points_earned: int
    certificate_number: str
    title: str = ""
    description: str = ""
    issued_by: Optional[str] = None
    is_active: bool = True
    issued_date: datetime = field(default_factory=utcnow)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Certificate":
        data = dict(data)
        data["type"] = CertificateType(data["type"])
        if "issued_date" in data:
            data["issued_date"] = parse_timestamp(data["issued_date"])
        return cls(**data)


def plain(value: Any) -> Any:
    """Convert enums, timestamps and nested records into JSON‑ready values."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        return plain(asdict(value))
    if isinstance(value, dict):
        return {k: plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [plain(v) for v in value]
    return value


def to_dict(record: Any) -> Dict[str, Any]:
    """Plain‑JSON view of any record (enum values, ISO timestamps)."""
    return plain(asdict(record))
