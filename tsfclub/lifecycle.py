"""
tsfclub.lifecycle
=================

State‑transition guard and the engine that drives chapters, memberships,
meetings, points and certificates through their life‑cycles.

Small finite‑state‑machines describe which statuses are legal successors
of each status.  :pyfunc:`advance_status` mutates a record **in‑place**
after validating the transition; :class:`LifecycleEngine` wraps every
operation in a store transaction so related records (ledger row and
membership cache, approval and chapter member count) change together or
not at all.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Set

from . import accrual, queries
from .errors import DuplicateEntity, InvalidStateTransition, StaleEntity, ValidationError
from .models import (
    Certificate,
    Chapter,
    ChapterStatus,
    College,
    Feedback,
    Meeting,
    MeetingRoles,
    MeetingStatus,
    Membership,
    MembershipRole,
    MembershipStatus,
    Point,
    PointType,
    utcnow,
)
from .settings import Settings, settings as default_settings
from .store import EntityStore

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------
# Allowed transitions: source status → set[valid target statuses]
# ---------------------------------------------------------------------
CHAPTER_RULES = {
    ChapterStatus.PENDING: {ChapterStatus.ACTIVE, ChapterStatus.DEACTIVATED},
}

MEMBERSHIP_RULES = {
    MembershipStatus.PENDING: {MembershipStatus.APPROVED, MembershipStatus.REJECTED},
}

MEETING_RULES = {
    MeetingStatus.UPCOMING: {MeetingStatus.COMPLETED, MeetingStatus.CANCELLED},
}

RULES: Dict[type, Dict] = {
    Chapter: CHAPTER_RULES,
    Membership: MEMBERSHIP_RULES,
    Meeting: MEETING_RULES,
}


def advance_status(entity, new_status, now: Optional[datetime] = None) -> None:
    """
    Change :pyattr:`entity.status` if the transition is legal,
    otherwise raise :class:`InvalidStateTransition`.

    A successful transition bumps ``entity.version`` and ``updated_at``.

    Examples
    --------
    >>> ch = Chapter("1", "TSF Chapter - NITC", "1")
    >>> advance_status(ch, ChapterStatus.ACTIVE)
    >>> advance_status(ch, ChapterStatus.DEACTIVATED)
    Traceback (most recent call last):
        ...
    InvalidStateTransition: illegal transition ACTIVE → DEACTIVATED
    """
    current = entity.status
    if new_status not in RULES[type(entity)].get(current, set()):
        raise InvalidStateTransition(f"illegal transition {current.name} → {new_status.name}")
    entity.status = new_status
    entity.version += 1
    entity.updated_at = now or utcnow()


class LifecycleEngine:
    """
    Operations that change the state of an :class:`EntityStore`.

    Parameters
    ----------
    store : EntityStore
        The records to operate on.
    config : Settings, optional
        Defaults to the process settings.
    clock : callable, optional
        Returns "now"; tests pass a fixed clock.
    """

    def __init__(
        self,
        store: EntityStore,
        config: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.store = store
        self.config = config or default_settings
        self._clock = clock or utcnow

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _now(self) -> datetime:
        return self._clock()

    @staticmethod
    def _check_version(kind: str, entity, expected_version: Optional[int]) -> None:
        if expected_version is not None and expected_version != entity.version:
            raise StaleEntity(kind, entity.id, expected_version, entity.version)

    def _transition(self, kind: str, entity, new_status, expected_version: Optional[int]) -> None:
        self._check_version(kind, entity, expected_version)
        try:
            advance_status(entity, new_status, self._now())
        except InvalidStateTransition:
            logger.warning(f"Refused {kind} {entity.id}: {entity.status.name} → {new_status.name}")
            raise

    def _refresh_member_count(self, chapter: Chapter) -> None:
        chapter.total_members = sum(
            1
            for m in queries.memberships_by_chapter(self.store, chapter.id)
            if m.status is MembershipStatus.APPROVED and m.is_active
        )

    def _refresh_points_cache(self, user_id: str, chapter_id: str) -> None:
        membership = queries.find_membership(self.store, user_id, chapter_id)
        if membership is not None:
            membership.points = queries.total_points_for_user(self.store, user_id, chapter_id)
            membership.updated_at = self._now()

    # ------------------------------------------------------------------
    # Colleges & chapters
    # ------------------------------------------------------------------
    def register_college(self, name: str, city: str, district: str, website: str = "") -> College:
        """Add a college submitted through the start‑a‑chapter flow."""
        if not name.strip() or not city.strip() or not district.strip():
            raise ValidationError("name, city and district are required")
        with self.store.transaction():
            college = College(
                id=self.store.next_id("college"),
                name=name.strip(),
                short_name="".join(word[0] for word in name.split()).upper(),
                city=city.strip(),
                district=district.strip(),
                website=website,
                established=self._now().year,
            )
            self.store.add(college)
        logger.info(f"Registered college {college.id} ({college.name})")
        return college

    def request_chapter(
        self,
        college_id: str,
        name: str,
        admin_id: Optional[str] = None,
        description: str = "",
        meeting_frequency: str = "",
        meeting_day: str = "",
        meeting_time: str = "",
        social_links: Optional[Dict[str, str]] = None,
    ) -> Chapter:
        """Create a *pending* chapter awaiting super‑admin review."""
        if not name.strip():
            raise ValidationError("chapter name is required")
        with self.store.transaction():
            self.store.get("college", college_id)
            if admin_id is not None:
                self.store.get("user", admin_id)
            now = self._now()
            chapter = Chapter(
                id=self.store.next_id("chapter"),
                name=name.strip(),
                college_id=college_id,
                description=description,
                admin_id=admin_id,
                meeting_frequency=meeting_frequency,
                meeting_day=meeting_day,
                meeting_time=meeting_time,
                social_links=dict(social_links or {}),
                created_at=now,
                updated_at=now,
            )
            self.store.add(chapter)
        logger.info(f"Chapter {chapter.id} requested for college {college_id}")
        return chapter

    def approve_chapter(self, chapter_id: str, expected_version: Optional[int] = None) -> Chapter:
        """pending → active; stamps ``founded_date``."""
        with self.store.transaction():
            chapter = self.store.get("chapter", chapter_id)
            self._transition("chapter", chapter, ChapterStatus.ACTIVE, expected_version)
            chapter.founded_date = chapter.updated_at
        logger.info(f"Chapter {chapter_id} approved")
        return chapter

    def reject_chapter(
        self,
        chapter_id: str,
        reason: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> Chapter:
        """pending → deactivated, keeping the optional reason."""
        with self.store.transaction():
            chapter = self.store.get("chapter", chapter_id)
            self._transition("chapter", chapter, ChapterStatus.DEACTIVATED, expected_version)
            chapter.rejection_reason = reason
        logger.info(f"Chapter {chapter_id} rejected ({reason or 'no reason given'})")
        return chapter

    # ------------------------------------------------------------------
    # Memberships
    # ------------------------------------------------------------------
    def request_membership(self, user_id: str, chapter_id: str) -> Membership:
        """
        Create a pending membership.

        Only active chapters accept requests, and a user may hold at most one
        membership per chapter (a rejected one included).
        """
        with self.store.transaction():
            self.store.get("user", user_id)
            chapter = self.store.get("chapter", chapter_id)
            if chapter.status is not ChapterStatus.ACTIVE:
                raise InvalidStateTransition(
                    f"chapter {chapter_id} is {chapter.status.value} and not accepting members"
                )
            if queries.find_membership(self.store, user_id, chapter_id) is not None:
                raise DuplicateEntity(
                    f"user {user_id} already has a membership in chapter {chapter_id}"
                )
            now = self._now()
            membership = Membership(
                id=self.store.next_id("membership"),
                user_id=user_id,
                chapter_id=chapter_id,
                created_at=now,
                updated_at=now,
            )
            self.store.add(membership)
        logger.info(f"Membership {membership.id} requested: user {user_id} → chapter {chapter_id}")
        return membership

    def approve_membership(
        self,
        membership_id: str,
        approved_by: str,
        expected_version: Optional[int] = None,
    ) -> Membership:
        """pending → approved; activates the member and refreshes the chapter head‑count."""
        if not approved_by:
            raise ValidationError("approved_by is required")
        with self.store.transaction():
            membership = self.store.get("membership", membership_id)
            self._transition("membership", membership, MembershipStatus.APPROVED, expected_version)
            membership.approved_by = approved_by
            membership.approved_at = membership.updated_at
            membership.joined_at = membership.updated_at
            membership.is_active = True
            self._refresh_member_count(self.store.get("chapter", membership.chapter_id))
        logger.info(f"Membership {membership_id} approved by {approved_by}")
        return membership

    def reject_membership(
        self,
        membership_id: str,
        approved_by: str,
        reason: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> Membership:
        """pending → rejected, recording who decided and why."""
        if not approved_by:
            raise ValidationError("approved_by is required")
        with self.store.transaction():
            membership = self.store.get("membership", membership_id)
            self._transition("membership", membership, MembershipStatus.REJECTED, expected_version)
            membership.approved_by = approved_by
            membership.approved_at = membership.updated_at
            membership.rejection_reason = reason
        logger.info(f"Membership {membership_id} rejected by {approved_by}")
        return membership

    def promote_member(self, membership_id: str, expected_version: Optional[int] = None) -> Membership:
        """Give an approved member the chapter‑admin role."""
        with self.store.transaction():
            membership = self.store.get("membership", membership_id)
            self._check_version("membership", membership, expected_version)
            if membership.status is not MembershipStatus.APPROVED:
                raise InvalidStateTransition(
                    f"membership {membership_id} is {membership.status.value}, only approved members can be promoted"
                )
            if membership.role is MembershipRole.ADMIN:
                raise InvalidStateTransition(f"membership {membership_id} is already an admin")
            membership.role = MembershipRole.ADMIN
            membership.version += 1
            membership.updated_at = self._now()
        logger.info(f"Membership {membership_id} promoted to admin")
        return membership

    # ------------------------------------------------------------------
    # Points & certificates
    # ------------------------------------------------------------------
    def award_points(
        self,
        user_id: str,
        chapter_id: str,
        point_type: PointType,
        awarded_by: str,
        amount: Optional[int] = None,
        meeting_id: Optional[str] = None,
        description: str = "",
        override: bool = False,
    ) -> Point:
        """
        Append a ledger entry and update the member's cached total.

        The amount comes from :data:`accrual.POINT_VALUES` unless the type is
        open‑amount or the award is an explicit, described override.
        """
        if not awarded_by:
            raise ValidationError("awarded_by is required")
        points = accrual.resolve_amount(point_type, amount, override, description)
        standard = accrual.POINT_VALUES.get(point_type)
        with self.store.transaction():
            self.store.get("user", user_id)
            self.store.get("chapter", chapter_id)
            if meeting_id is not None:
                meeting = self.store.get("meeting", meeting_id)
                if meeting.chapter_id != chapter_id:
                    raise ValidationError(f"meeting {meeting_id} belongs to another chapter")
            point = Point(
                id=self.store.next_id("point"),
                user_id=user_id,
                chapter_id=chapter_id,
                points=points,
                type=point_type,
                awarded_by=awarded_by,
                description=description,
                meeting_id=meeting_id,
                override=standard is not None and points != standard,
                awarded_at=self._now(),
            )
            self.store.add(point)
            self._refresh_points_cache(user_id, chapter_id)
        logger.info(f"Awarded {points} pts ({point_type.value}) to user {user_id} in chapter {chapter_id}")
        return point

    def _certificate_number(self, cert_id: str) -> str:
        return f"{self.config.certificate_prefix}-{self._now().year}-{int(cert_id):05d}"

    def evaluate_and_issue(
        self,
        user_id: str,
        chapter_id: str,
        issued_by: Optional[str] = None,
    ) -> List[Certificate]:
        """
        Issue a certificate for every tier the user's total has crossed.

        Tiers that already have an active certificate are skipped, so calling
        this twice without new points issues nothing the second time.
        Returns the newly issued certificates.
        """
        global_scope = self.config.points_scope == "global"
        issued: List[Certificate] = []
        with self.store.transaction():
            self.store.get("user", user_id)
            self.store.get("chapter", chapter_id)
            total = queries.total_points_for_user(
                self.store, user_id, None if global_scope else chapter_id
            )
            held = {
                c.type
                for c in queries.certificates_by_user(self.store, user_id, active_only=True)
                if global_scope or c.chapter_id == chapter_id
            }
            for tier in accrual.tiers_reached(total):
                if tier.type in held:
                    continue
                cert_id = self.store.next_id("certificate")
                cert = Certificate(
                    id=cert_id,
                    user_id=user_id,
                    chapter_id=chapter_id,
                    type=tier.type,
                    points_threshold=tier.threshold,
                    points_earned=total,
                    certificate_number=self._certificate_number(cert_id),
                    title=tier.title,
                    description=f"Awarded for achieving {tier.threshold}+ points",
                    issued_by=issued_by,
                    issued_date=self._now(),
                )
                self.store.add(cert)
                issued.append(cert)
        if issued:
            logger.info(
                f"Issued {', '.join(c.type.value for c in issued)} to user {user_id} ({total} pts)"
            )
        return issued

    # ------------------------------------------------------------------
    # Meetings
    # ------------------------------------------------------------------
    def schedule_meeting(
        self,
        chapter_id: str,
        title: str,
        date_time: datetime,
        roles: Optional[MeetingRoles] = None,
        agenda: str = "",
        description: str = "",
        duration: int = 60,
        meet_url: str = "",
        max_participants: int = 0,
    ) -> Meeting:
        """Create an upcoming meeting for an active chapter."""
        if not title.strip():
            raise ValidationError("meeting title is required")
        with self.store.transaction():
            chapter = self.store.get("chapter", chapter_id)
            if chapter.status is not ChapterStatus.ACTIVE:
                raise InvalidStateTransition(f"chapter {chapter_id} is {chapter.status.value}")
            roles = roles or MeetingRoles()
            for uid in roles.participants():
                self.store.get("user", uid)
            if max_participants and len(roles.participants()) > max_participants:
                raise ValidationError("more participants assigned than the meeting allows")
            now = self._now()
            meeting = Meeting(
                id=self.store.next_id("meeting"),
                chapter_id=chapter_id,
                title=title.strip(),
                date_time=date_time,
                agenda=agenda,
                description=description,
                duration=duration,
                meet_url=meet_url,
                max_participants=max_participants,
                roles=roles,
                created_at=now,
                updated_at=now,
            )
            self.store.add(meeting)
        logger.info(f"Meeting {meeting.id} scheduled for chapter {chapter_id}")
        return meeting

    def complete_meeting(
        self,
        meeting_id: str,
        awarded_by: str,
        attendees: Optional[Iterable[str]] = None,
        expected_version: Optional[int] = None,
    ) -> List[Point]:
        """
        upcoming → completed, then award attendance and role points.

        *attendees* defaults to everyone holding a role.  Each attendee gets
        attendance points; anchor, topic provider, judges and speakers who
        attended also get their role points.  Returns the new ledger rows.
        """
        awarded: List[Point] = []
        with self.store.transaction():
            meeting = self.store.get("meeting", meeting_id)
            present: List[str] = list(dict.fromkeys(
                attendees if attendees is not None else meeting.roles.participants()
            ))
            for uid in present:
                self.store.get("user", uid)
            self._transition("meeting", meeting, MeetingStatus.COMPLETED, expected_version)

            for uid in present:
                awarded.append(self.award_points(
                    uid, meeting.chapter_id, PointType.MEETING_ATTENDANCE, awarded_by,
                    meeting_id=meeting.id, description=f"Attended {meeting.title}",
                ))
                role_type = accrual.ROLE_POINT_TYPES.get(meeting.roles.role_of(uid) or "")
                if role_type is not None:
                    awarded.append(self.award_points(
                        uid, meeting.chapter_id, role_type, awarded_by,
                        meeting_id=meeting.id, description=f"{meeting.roles.role_of(uid)} at {meeting.title}",
                    ))
            self._refresh_attendance(meeting, present)
        logger.info(f"Meeting {meeting_id} completed with {len(present)} attendees")
        return awarded

    def _refresh_attendance(self, meeting: Meeting, present: List[str]) -> None:
        completed = {m.id for m in queries.completed_meetings(self.store, meeting.chapter_id)}
        for membership in queries.memberships_by_chapter(self.store, meeting.chapter_id):
            if membership.status is not MembershipStatus.APPROVED:
                continue
            attended: Set[str] = {
                p.meeting_id
                for p in queries.points_by_user(self.store, membership.user_id, meeting.chapter_id)
                if p.type is PointType.MEETING_ATTENDANCE and p.meeting_id in completed
            }
            membership.attendance_rate = round(len(attended) / len(completed), 2) if completed else 0.0
            if membership.user_id in present:
                membership.last_meeting_attended = meeting.id

    def cancel_meeting(self, meeting_id: str, expected_version: Optional[int] = None) -> Meeting:
        with self.store.transaction():
            meeting = self.store.get("meeting", meeting_id)
            self._transition("meeting", meeting, MeetingStatus.CANCELLED, expected_version)
        logger.info(f"Meeting {meeting_id} cancelled")
        return meeting

    def submit_feedback(self, meeting_id: str, user_id: str, rating: int, comment: str = "") -> Feedback:
        """One rating (1–5) per user, only once the meeting is completed."""
        if not 1 <= rating <= 5:
            raise ValidationError("rating must be between 1 and 5")
        with self.store.transaction():
            meeting = self.store.get("meeting", meeting_id)
            self.store.get("user", user_id)
            if meeting.status is not MeetingStatus.COMPLETED:
                raise InvalidStateTransition(f"meeting {meeting_id} is {meeting.status.value}")
            if any(f.user_id == user_id for f in meeting.feedback):
                raise DuplicateEntity(f"user {user_id} already left feedback on meeting {meeting_id}")
            feedback = Feedback(user_id=user_id, rating=rating, comment=comment, submitted_at=self._now())
            meeting.feedback.append(feedback)
        return feedback

    # ------------------------------------------------------------------
    # Cache repair
    # ------------------------------------------------------------------
    def reconcile(self) -> int:
        """
        Recompute every membership points cache and chapter member count.

        Returns the number of records that had drifted.
        """
        fixed = 0
        with self.store.transaction():
            for membership in self.store.all("membership"):
                total = queries.total_points_for_user(self.store, membership.user_id, membership.chapter_id)
                if membership.points != total:
                    membership.points = total
                    fixed += 1
            for chapter in self.store.all("chapter"):
                before = chapter.total_members
                self._refresh_member_count(chapter)
                if chapter.total_members != before:
                    fixed += 1
        if fixed:
            logger.warning(f"Reconciled {fixed} drifted cache values")
        return fixed
