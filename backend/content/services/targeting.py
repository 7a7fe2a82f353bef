"""Which notices and resources a student sees.

Visibility is evaluated on every read against the student's current profile,
so a change of course or semester takes effect on the next request. Notices
and resources go through the same rule; only ``Resource.is_public`` and the
notice-only draft and publish-date fields differ.
"""
from typing import Iterable, List

from django.db.models import Q
from django.utils import timezone


def _as_ints(values) -> set:
    out = set()
    for value in values or ():
        try:
            out.add(int(value))
        except (TypeError, ValueError):
            continue
    return out


def _as_strs(values) -> set:
    return {str(value) for value in values or () if value is not None}


def matches_target(profile, item) -> bool:
    """Any-of match between a student profile and an item's target group."""
    if item.all_students:
        return True
    if profile.course in _as_strs(item.target_courses):
        return True
    if profile.semester in _as_ints(item.target_semesters):
        return True
    if profile.department in _as_strs(item.target_departments):
        return True
    return profile.pk in _as_ints(item.target_student_ids)


def is_live(item, now=None) -> bool:
    now = now or timezone.now()
    if not item.is_active:
        return False
    if getattr(item, 'is_draft', False):
        return False
    publish_date = getattr(item, 'publish_date', None)
    if publish_date is not None and publish_date > now:
        return False
    return not item.is_expired(now)


def is_visible_to(profile, item, now=None) -> bool:
    if not is_live(item, now):
        return False
    if getattr(item, 'is_public', False):
        return True
    return matches_target(profile, item)


def live_filter(model, now=None) -> Q:
    """Database-side part of ``is_live`` used to narrow candidates."""
    now = now or timezone.now()
    condition = Q(is_active=True) & (Q(expiry_date__isnull=True) | Q(expiry_date__gte=now))
    field_names = {f.name for f in model._meta.get_fields()}
    if 'is_draft' in field_names:
        condition &= Q(is_draft=False)
    if 'publish_date' in field_names:
        condition &= Q(publish_date__lte=now)
    return condition


def visible_to(profile, queryset, now=None) -> List:
    """Evaluate ``queryset`` and keep the items the student may see."""
    now = now or timezone.now()
    candidates = queryset.filter(live_filter(queryset.model, now))
    return [item for item in candidates if is_visible_to(profile, item, now)]


def audience(item, profiles: Iterable) -> List:
    """Profiles among ``profiles`` that ``item`` targets, ignoring liveness."""
    return [profile for profile in profiles if matches_target(profile, item)]
