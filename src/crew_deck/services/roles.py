"""Role registry: station creation, custom roles and role assignment."""
from __future__ import annotations

import logging
import re
from typing import Iterable, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from crew_deck.core.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from crew_deck.db.session import atomic
from crew_deck.models import Capability, Membership, Role, Station
from crew_deck.models.role import (
    CAPTAIN_PRIORITY,
    CO_CAPTAIN_PRIORITY,
    ROLE_CAPTAIN,
    ROLE_CO_CAPTAIN,
    ROLE_CREW,
    SYSTEM_ROLE_CAPABILITIES,
    SYSTEM_ROLE_DEFINITIONS,
    SYSTEM_ROLE_PRIORITIES,
)
from crew_deck.services.audit import log_action
from crew_deck.services.lookup import load_role, load_station
from crew_deck.services.permissions import get_membership, require_permission

__all__ = [
    "slugify",
    "create_station",
    "list_roles",
    "get_role_by_slug",
    "member_priority",
    "ensure_can_grant",
    "create_custom_role",
    "update_custom_role",
    "delete_custom_role",
    "assign_role",
    "demote_to_crew",
]

logger = logging.getLogger(__name__)

SLUG_MAX_LENGTH = 50
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(value: str, fallback: str = "station") -> str:
    """Return a URL-safe slug of at most 50 characters."""
    slug = _NON_ALNUM.sub("-", value.lower()).strip("-")[:SLUG_MAX_LENGTH].strip("-")
    return slug or fallback


def _unique_station_slug(db: Session, base: str) -> str:
    candidate = base
    counter = 1
    while db.query(Station.id).filter(Station.slug == candidate).first() is not None:
        candidate = f"{base}-{counter}"
        counter += 1
    return candidate


def create_station(db: Session, name: str, description: str, owner: str) -> Station:
    """Create a station with its four system roles and the captain membership."""
    name = (name or "").strip()
    if not name:
        raise ValidationError("Station name is required")

    try:
        with atomic(db):
            station = Station(
                slug=_unique_station_slug(db, slugify(name)),
                name=name,
                description=(description or "").strip(),
                owner_principal=owner,
                member_count=0,
                post_count=0,
            )
            db.add(station)
            db.flush()

            for slug, role_name, color, priority, is_default in SYSTEM_ROLE_DEFINITIONS:
                role = Role(
                    station_id=station.id,
                    name=role_name,
                    slug=slug,
                    color_hint=color,
                    priority=priority,
                    is_default=is_default,
                    is_system=True,
                )
                role.capability_set = SYSTEM_ROLE_CAPABILITIES[slug]
                db.add(role)

            db.add(
                Membership(
                    station_id=station.id,
                    principal=owner,
                    system_role=ROLE_CAPTAIN,
                )
            )
            station.add_member()
            db.flush()
    except IntegrityError as exc:
        raise ConflictError("Station slug is already taken", code="slug_taken") from exc

    logger.info("Station %s created by %s (slug=%s)", station.id, owner, station.slug)
    return station


def list_roles(db: Session, station_id: int) -> Sequence[Role]:
    """Return every role of a station, highest priority first."""
    load_station(db, station_id)
    return (
        db.query(Role)
        .filter(Role.station_id == station_id)
        .order_by(Role.priority.desc(), Role.id)
        .all()
    )


def get_role_by_slug(db: Session, station_id: int, slug: str) -> Role | None:
    return db.query(Role).filter(Role.station_id == station_id, Role.slug == slug).first()


def member_priority(db: Session, membership: Membership) -> int:
    """Return the priority of the role that governs ``membership``."""
    if membership.custom_role_id is not None:
        custom_role = db.get(Role, membership.custom_role_id)
        if custom_role is not None:
            return custom_role.priority
    return SYSTEM_ROLE_PRIORITIES.get(membership.system_role, 0)


def ensure_can_grant(db: Session, station: Station, actor: str, role: Role) -> None:
    """Refuse grants that would lift someone to or above the actor's own rank."""
    if role.slug == ROLE_CAPTAIN and role.is_system:
        raise PermissionDeniedError("The captain role cannot be assigned", code="captain_role")
    if station.is_owner(actor):
        return

    actor_membership = get_membership(db, station.id, actor)
    if actor_membership is None:
        raise PermissionDeniedError("You are not a member of this station", code="not_member")

    # Co-captain ceiling: co-captains never hand out co-captain or anything above.
    if (
        actor_membership.custom_role_id is None
        and actor_membership.system_role == ROLE_CO_CAPTAIN
        and role.priority >= CO_CAPTAIN_PRIORITY
    ):
        raise PermissionDeniedError(
            "Co-captains cannot assign co-captain or higher roles",
            code="role_ceiling",
        )

    if role.priority >= member_priority(db, actor_membership):
        raise PermissionDeniedError(
            "You cannot assign a role at or above your own priority",
            code="role_ceiling",
        )


def _parse_capabilities(values: Iterable[str]) -> frozenset[Capability]:
    try:
        capabilities = frozenset(Capability(value) for value in values)
    except ValueError as exc:
        raise ValidationError(f"Unknown capability: {exc}") from exc
    if Capability.ROLES in capabilities:
        raise PermissionDeniedError(
            "Custom roles cannot manage roles", code="roles_capability_reserved"
        )
    return capabilities


def _check_priority(priority: int) -> None:
    if priority >= CAPTAIN_PRIORITY:
        raise InvalidStateError(
            f"Custom role priority must be below {CAPTAIN_PRIORITY}",
            code="priority_too_high",
        )


def create_custom_role(
    db: Session,
    station_id: int,
    actor: str,
    name: str,
    slug: str | None,
    capabilities: Iterable[str],
    priority: int,
    color: str | None = None,
) -> Role:
    """Create a custom role on a station."""
    load_station(db, station_id)
    require_permission(
        db, station_id, actor, Capability.ROLES, "You do not have permission to manage roles"
    )
    name = (name or "").strip()
    if not name:
        raise ValidationError("Role name is required")
    _check_priority(priority)
    capability_set = _parse_capabilities(capabilities)
    role_slug = slugify(slug or name, fallback="role")

    if get_role_by_slug(db, station_id, role_slug) is not None:
        raise ConflictError(f"Role slug '{role_slug}' already exists", code="role_slug_taken")

    try:
        with atomic(db):
            role = Role(
                station_id=station_id,
                name=name,
                slug=role_slug,
                color_hint=color,
                priority=priority,
                is_default=False,
                is_system=False,
            )
            role.capability_set = capability_set
            db.add(role)
            db.flush()
            log_action(
                db,
                station_id,
                "role_create",
                actor,
                details={"role_id": role.id, "slug": role_slug, "priority": priority},
            )
    except IntegrityError as exc:
        raise ConflictError(
            f"Role slug '{role_slug}' already exists", code="role_slug_taken"
        ) from exc
    return role


def update_custom_role(
    db: Session,
    role_id: int,
    actor: str,
    *,
    name: str | None = None,
    color: str | None = None,
    capabilities: Iterable[str] | None = None,
    priority: int | None = None,
) -> Role:
    """Apply a partial update to a custom role."""
    role = load_role(db, role_id)
    require_permission(
        db, role.station_id, actor, Capability.ROLES, "You do not have permission to manage roles"
    )
    if role.is_system:
        raise PermissionDeniedError("System roles cannot be modified", code="system_role")

    changes: dict[str, object] = {}
    if name is not None:
        if not name.strip():
            raise ValidationError("Role name is required")
        changes["name"] = name.strip()
    if priority is not None:
        _check_priority(priority)
        changes["priority"] = priority
    if capabilities is not None:
        capability_set = _parse_capabilities(capabilities)
        changes["capabilities"] = sorted(item.value for item in capability_set)
    if color is not None:
        changes["color_hint"] = color

    with atomic(db):
        for key, value in changes.items():
            setattr(role, key, value)
        log_action(
            db,
            role.station_id,
            "role_update",
            actor,
            details={"role_id": role.id, "fields": sorted(changes)},
        )
    return role


def delete_custom_role(db: Session, role_id: int, actor: str) -> int:
    """Delete a custom role, moving every holder back to crew.

    Returns the number of memberships that were reassigned.
    """
    role = load_role(db, role_id)
    require_permission(
        db, role.station_id, actor, Capability.ROLES, "You do not have permission to manage roles"
    )
    if role.is_system:
        raise PermissionDeniedError("System roles cannot be deleted", code="system_role")

    with atomic(db):
        holders = db.query(Membership).filter(Membership.custom_role_id == role.id).all()
        for membership in holders:
            membership.custom_role_id = None
            membership.system_role = ROLE_CREW
        station_id = role.station_id
        log_action(
            db,
            station_id,
            "role_delete",
            actor,
            details={"role_id": role.id, "slug": role.slug, "reassigned": len(holders)},
        )
        db.delete(role)

    logger.info(
        "Role %s deleted from station %s; %d members reassigned",
        role_id,
        station_id,
        len(holders),
    )
    return len(holders)


def assign_role(
    db: Session,
    station_id: int,
    assigner: str,
    target: str,
    role_slug: str,
) -> Membership:
    """Give ``target`` the role identified by ``role_slug``."""
    station = load_station(db, station_id)
    require_permission(
        db, station_id, assigner, Capability.PROMOTE, "You do not have permission to assign roles"
    )
    if station.is_owner(target):
        raise PermissionDeniedError("The captain's role cannot be changed", code="owner_protected")

    membership = get_membership(db, station_id, target)
    if membership is None:
        raise NotFoundError("User is not a member of this station", code="not_member")

    role = get_role_by_slug(db, station_id, role_slug)
    if role is None:
        raise NotFoundError(f"Role '{role_slug}' not found", code="role_not_found")

    ensure_can_grant(db, station, assigner, role)
    if not station.is_owner(assigner):
        assigner_membership = get_membership(db, station_id, assigner)
        if assigner_membership is not None and member_priority(db, membership) >= member_priority(
            db, assigner_membership
        ):
            raise PermissionDeniedError(
                "You cannot change the role of a member at or above your priority",
                code="role_ceiling",
            )

    with atomic(db):
        if role.is_system:
            membership.system_role = role.slug
            membership.custom_role_id = None
        else:
            membership.system_role = ROLE_CREW
            membership.custom_role_id = role.id
        log_action(
            db,
            station_id,
            "role_assign",
            assigner,
            target,
            details={"role": role.slug, "priority": role.priority},
        )
    return membership


def demote_to_crew(db: Session, station_id: int, actor: str, target: str) -> Membership:
    """Reset a member to the plain crew role. Only the captain may do this."""
    station = load_station(db, station_id)
    if not station.is_owner(actor):
        raise PermissionDeniedError("Only the captain can demote members", code="owner_only")
    if station.is_owner(target):
        raise PermissionDeniedError("The captain cannot be demoted", code="owner_protected")

    membership = get_membership(db, station_id, target)
    if membership is None:
        raise NotFoundError("User is not a member of this station", code="not_member")

    with atomic(db):
        membership.system_role = ROLE_CREW
        membership.custom_role_id = None
        log_action(db, station_id, "member_demote", actor, target)
    return membership
